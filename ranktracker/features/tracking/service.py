"""Rank tracking service - drives one polling cycle over all tracked accounts.

For every account, independently:

1. list the newest match ids and read the current rank
2. select the matches newer than the cursor, oldest first
3. resolve each new match (skipping malformed or missing ones)
4. attribute the points delta, append history records, build events
5. persist cursor, snapshot and history in one write
6. publish the events, in chronological order

Failures are isolated per account; only an authorization failure stops the
cycle. A cycle never runs twice against the same account at once: accounts
already in flight are skipped.
"""

import asyncio
from dataclasses import asdict, dataclass
from typing import TYPE_CHECKING, Iterable, List, Optional, Set

import structlog
from structlog import contextvars as structlog_contextvars

from ranktracker.core.config import Settings, get_global_settings
from ranktracker.core.decorators import handle_tracking_errors
from ranktracker.core.exceptions import (
    DataNotFoundError,
    MalformedDataError,
    UnauthorizedError,
)

from .cursor import next_cursor, select_new_matches
from .history import append_record
from .models import MatchResultEvent, ProcessedMatch, RankRecord, TrackedAccount
from .notifications import build_event
from .ranks import compute_delta, is_low_confidence
from .repository import AccountRepositoryInterface
from .transformers import match_to_processed

if TYPE_CHECKING:
    from ranktracker.protocols import MatchSource, NotificationSink, RankSource

logger = structlog.get_logger(__name__)


@dataclass
class CycleSummary:
    """Counters for one polling cycle."""

    accounts_total: int = 0
    accounts_processed: int = 0
    accounts_busy: int = 0
    accounts_failed: int = 0
    matches_processed: int = 0
    matches_skipped: int = 0
    events_emitted: int = 0


class InFlightGuard:
    """Set of account refs currently being processed.

    Acquisition never waits: a busy account is reported as such and the
    caller skips it.
    """

    def __init__(self) -> None:
        self._busy: Set[str] = set()

    def try_acquire(self, account_ref: str) -> bool:
        if account_ref in self._busy:
            return False
        self._busy.add(account_ref)
        return True

    def release(self, account_ref: str) -> None:
        self._busy.discard(account_ref)

    def is_busy(self, account_ref: str) -> bool:
        return account_ref in self._busy


class RankTrackingService:
    """Polling orchestrator for rank progression tracking."""

    def __init__(
        self,
        repository: AccountRepositoryInterface,
        match_source: "MatchSource",
        rank_source: "RankSource",
        sink: "NotificationSink",
        settings: Optional[Settings] = None,
        guard: Optional[InFlightGuard] = None,
    ):
        """Initialize the service.

        :param repository: Account store.
        :param match_source: Lists matches and fetches match details.
        :param rank_source: Reads current ranks.
        :param sink: Receives events after each account is committed.
        :param settings: Tracking configuration, global settings if None.
        :param guard: In-flight guard, shared between overlapping cycles.
        """
        settings = settings or get_global_settings()
        self.repository = repository
        self.match_source = match_source
        self.rank_source = rank_source
        self.sink = sink
        self.guard = guard or InFlightGuard()

        self.history_capacity = settings.history_capacity
        self.page_size = settings.match_page_size
        self.queue = settings.queue_filter
        self.valid_regions = set(settings.valid_regions_list)
        self.max_concurrent_accounts = settings.max_concurrent_accounts

        self.last_summary: Optional[CycleSummary] = None

    async def run_cycle(
        self, accounts: Optional[Iterable[TrackedAccount]] = None
    ) -> List[MatchResultEvent]:
        """Run one polling cycle.

        :param accounts: Accounts to process, loaded from the store if None.
        :returns: Events of all committed accounts; per-account order is
            chronological, cross-account order is unspecified.
        :raises UnauthorizedError: If the API credential is rejected.
        """
        if accounts is None:
            accounts = await self.repository.list_tracked_accounts()
        accounts = list(accounts)

        summary = CycleSummary(accounts_total=len(accounts))
        results: List[List[MatchResultEvent]] = [[] for _ in accounts]
        fatal: List[UnauthorizedError] = []
        semaphore = asyncio.Semaphore(self.max_concurrent_accounts)

        logger.info(
            "Starting tracking cycle",
            accounts=len(accounts),
            max_concurrent_accounts=self.max_concurrent_accounts,
        )

        async def worker(index: int, account: TrackedAccount) -> None:
            async with semaphore:
                if fatal:
                    return
                if not self.guard.try_acquire(account.account_ref):
                    summary.accounts_busy += 1
                    logger.info(
                        "Account already in flight, skipping",
                        account_ref=account.account_ref,
                    )
                    return
                try:
                    with structlog_contextvars.bound_contextvars(
                        account_ref=account.account_ref
                    ):
                        events = await self._sync_account(account, summary)
                except UnauthorizedError as error:
                    fatal.append(error)
                    return
                finally:
                    self.guard.release(account.account_ref)

                if events is None:
                    summary.accounts_failed += 1
                else:
                    summary.accounts_processed += 1
                    results[index] = events

        await asyncio.gather(
            *(worker(index, account) for index, account in enumerate(accounts))
        )
        self.last_summary = summary

        if fatal:
            logger.error(
                "Tracking cycle aborted on authorization failure",
                error=str(fatal[0]),
                **asdict(summary),
            )
            raise fatal[0]

        logger.info("Tracking cycle completed", **asdict(summary))
        return [event for events in results for event in events]

    @handle_tracking_errors(
        operation="sync account",
        skip=(Exception,),
        log_context=lambda self, account, summary: {
            "account_ref": account.account_ref,
            "riot_id": str(account.game_identity),
        },
    )
    async def _sync_account(
        self, account: TrackedAccount, summary: CycleSummary
    ) -> List[MatchResultEvent]:
        """Process one account and commit its new state.

        :returns: Published events, oldest match first.
        """
        if account.region not in self.valid_regions:
            raise DataNotFoundError(
                f"Region {account.region.value} is not enabled",
                operation="sync account",
            )

        remote_ids = await self.match_source.list_recent_match_ids(
            account.account_ref, account.region, self.queue, self.page_size
        )
        new_ids = select_new_matches(remote_ids, account.cursor_match_id)
        cursor = next_cursor(remote_ids, account.cursor_match_id)
        current = await self.rank_source.get_current_rank(
            account.account_ref, account.region, self.queue
        )

        if not new_ids:
            if account.last_snapshot is None:
                await self.repository.save_account(
                    account.model_copy(update={"last_snapshot": current})
                )
                logger.info("Stored baseline rank", rank=current.display_rank)
            else:
                logger.debug("No new matches")
            return []

        logger.info(
            "Found new matches",
            match_count=len(new_ids),
            cold_start=account.cursor_match_id is None,
        )

        processed: List[ProcessedMatch] = []
        for match_id in new_ids:
            match = await self._process_match(account, match_id)
            if match is None:
                summary.matches_skipped += 1
            else:
                processed.append(match)

        history = account.history
        events: List[MatchResultEvent] = []
        for position, match in enumerate(processed):
            # The rank is read after the newest match; older ones in the
            # same batch get an unknown delta.
            is_newest = position == len(processed) - 1
            delta = compute_delta(account.last_snapshot, current) if is_newest else None
            low_confidence = is_newest and is_low_confidence(
                account.last_snapshot, current
            )
            history = append_record(
                history,
                RankRecord.from_snapshot(
                    current, match_id=match.match_id, points_delta=delta
                ),
                self.history_capacity,
            )
            events.append(
                build_event(
                    account,
                    match,
                    delta,
                    snapshot=current,
                    low_confidence=low_confidence,
                )
            )

        # Without a processed match the rank change stays unattributed, so
        # the old snapshot is kept for the next delta.
        last_snapshot = (
            current if processed or account.last_snapshot is None else account.last_snapshot
        )
        await self.repository.save_account(
            account.model_copy(
                update={
                    "cursor_match_id": cursor,
                    "last_snapshot": last_snapshot,
                    "history": history,
                }
            )
        )

        for event in events:
            await self._publish(event)

        summary.matches_processed += len(processed)
        summary.events_emitted += len(events)
        logger.info(
            "Account updated",
            matches_processed=len(processed),
            cursor_match_id=cursor,
            rank=current.display_rank,
            points=current.points,
        )
        return events

    @handle_tracking_errors(
        operation="process match",
        skip=(MalformedDataError, DataNotFoundError),
        log_context=lambda self, account, match_id: {"match_id": match_id},
    )
    async def _process_match(
        self, account: TrackedAccount, match_id: str
    ) -> Optional[ProcessedMatch]:
        """Fetch one match and extract the tracked player's result.

        :returns: Resolved match, or None for a match outside the queue filter.
        """
        detail = await self.match_source.get_match_detail(match_id, account.region)
        if detail.info.queue_id != self.queue.value:
            logger.info(
                "Skipping match outside queue filter",
                match_id=match_id,
                queue_id=detail.info.queue_id,
            )
            return None
        return match_to_processed(detail, account.account_ref)

    @handle_tracking_errors(
        operation="publish event",
        skip=(Exception,),
        log_context=lambda self, event: {"match_id": event.match_id},
    )
    async def _publish(self, event: MatchResultEvent) -> None:
        await self.sink.publish(event)
