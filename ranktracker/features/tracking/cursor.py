"""Per-account match cursor: which listed matches are new, and in what order."""

from typing import List, Optional, Sequence


def select_new_matches(
    remote_ids_newest_first: Sequence[str], cursor_match_id: Optional[str]
) -> List[str]:
    """Return the match ids newer than the cursor, oldest first.

    The remote page is scanned from its newest end until the cursor is found
    (exclusive). With no cursor (cold start), or a cursor that fell off the
    page, the whole page is new; older matches beyond the page are never
    discovered.

    :param remote_ids_newest_first: Match ids as listed by the match source.
    :param cursor_match_id: Last processed match id, None on cold start.
    :returns: New match ids in chronological order.
    """
    new_ids: List[str] = []
    for match_id in remote_ids_newest_first:
        if cursor_match_id is not None and match_id == cursor_match_id:
            break
        new_ids.append(match_id)
    new_ids.reverse()
    return new_ids


def next_cursor(
    remote_ids_newest_first: Sequence[str], cursor_match_id: Optional[str]
) -> Optional[str]:
    """Cursor value to persist once the whole batch has been committed."""
    if not remote_ids_newest_first:
        return cursor_match_id
    return remote_ids_newest_first[0]
