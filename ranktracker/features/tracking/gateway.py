"""
Riot API Gateway - Anti-Corruption Layer for the tracking feature.

Serves as match source and rank source for the polling cycle. Riot DTOs
stay inside this module except for the opaque match detail, and every Riot
client error is translated into one of the tracking error kinds:

- 401/403 -> UnauthorizedError
- 404 -> DataNotFoundError
- 429, 5xx, transport failures, timeouts -> TransientError
- undecodable or unexpected payloads -> MalformedDataError
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import TYPE_CHECKING, Any, Iterator, List, Tuple

import structlog

from ranktracker.core.enums import QueueType, Region
from ranktracker.core.exceptions import (
    DataNotFoundError,
    MalformedDataError,
    TrackerError,
    TransientError,
    UnauthorizedError,
)
from ranktracker.core.riot_api.errors import (
    AuthenticationError,
    ForbiddenError,
    InvalidResponseError,
    NotFoundError,
    RateLimitError,
    RequestTimeoutError,
    RiotAPIError,
    ServiceUnavailableError,
)
from ranktracker.core.riot_api.models import MatchDTO

from .models import GameIdentity, RankSnapshot
from .transformers import league_entries_to_snapshot

if TYPE_CHECKING:
    from ranktracker.core.riot_api.client import RiotAPIClient

logger = structlog.get_logger(__name__)


class RiotTrackingGateway:
    """
    Anti-Corruption Layer for Riot API integration.

    Hides external API structure and error semantics from the tracker.
    """

    def __init__(self, riot_api_client: "RiotAPIClient"):
        """
        Initialize gateway with Riot API client.

        :param riot_api_client: Low-level Riot API client
        """
        self._client = riot_api_client

    async def find_account(
        self, game_name: str, tag_line: str
    ) -> Tuple[str, GameIdentity]:
        """Resolve a Riot ID to the account ref and its canonical identity."""
        with self._translate_errors(
            "find account", game_name=game_name, tag_line=tag_line
        ):
            account = await self._client.get_account_by_riot_id(game_name, tag_line)
        return account.puuid, GameIdentity(
            game_name=account.game_name, tag_line=account.tag_line
        )

    async def list_recent_match_ids(
        self, account_ref: str, region: Region, queue: QueueType, count: int
    ) -> List[str]:
        """Newest-first match ids for a player in one queue."""
        with self._translate_errors(
            "list recent matches", account_ref=account_ref, region=region.value
        ):
            return await self._client.get_match_ids_by_puuid(
                account_ref, count=count, queue=queue, region=region
            )

    async def get_match_detail(self, match_id: str, region: Region) -> MatchDTO:
        """Match detail, passed through to the stats transformer."""
        with self._translate_errors(
            "fetch match detail", match_id=match_id, region=region.value
        ):
            return await self._client.get_match(match_id, region=region)

    async def get_current_rank(
        self, account_ref: str, region: Region, queue: QueueType
    ) -> RankSnapshot:
        """Current snapshot for a ranked queue, Unranked when not placed."""
        if not queue.league_queue:
            raise MalformedDataError(
                f"Queue {queue.name} has no league ranking",
                operation="fetch current rank",
            )
        with self._translate_errors(
            "fetch current rank", account_ref=account_ref, region=region.value
        ):
            entries = await self._client.get_league_entries_by_puuid(
                account_ref, region=region
            )
        snapshot = league_entries_to_snapshot(entries, queue.league_queue)
        logger.debug(
            "Fetched current rank",
            account_ref=account_ref,
            rank=snapshot.display_rank,
            points=snapshot.points,
        )
        return snapshot

    @staticmethod
    @contextmanager
    def _translate_errors(operation: str, **context: Any) -> Iterator[None]:
        """Re-raise Riot client errors as tracking error kinds."""
        try:
            yield
        except TrackerError:
            raise
        except (AuthenticationError, ForbiddenError) as e:
            raise UnauthorizedError(str(e), operation, context) from e
        except NotFoundError as e:
            raise DataNotFoundError(str(e), operation, context) from e
        except (
            RateLimitError,
            ServiceUnavailableError,
            RequestTimeoutError,
        ) as e:
            raise TransientError(str(e), operation, context) from e
        except InvalidResponseError as e:
            raise MalformedDataError(str(e), operation, context) from e
        except RiotAPIError as e:
            # 400 and unexpected statuses: nothing to retry within this cycle
            raise TransientError(str(e), operation, context) from e
