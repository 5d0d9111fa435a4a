"""Protocol definitions for the tracker's external collaborators."""

from typing import List, Protocol

from ranktracker.core.enums import QueueType, Region
from ranktracker.core.riot_api.models import MatchDTO
from ranktracker.features.tracking.models import MatchResultEvent, RankSnapshot


class MatchSource(Protocol):
    """Lists recent matches and fetches their details."""

    async def list_recent_match_ids(
        self, account_ref: str, region: Region, queue: QueueType, count: int
    ) -> List[str]:
        """Match ids, newest first, at most ``count``."""
        ...

    async def get_match_detail(self, match_id: str, region: Region) -> MatchDTO:
        """Full match detail."""
        ...


class RankSource(Protocol):
    """Reads a player's current rank."""

    async def get_current_rank(
        self, account_ref: str, region: Region, queue: QueueType
    ) -> RankSnapshot:
        """Current snapshot, the Unranked snapshot when not placed."""
        ...


class NotificationSink(Protocol):
    """Delivers events; resolving destinations is the sink's business."""

    async def publish(self, event: MatchResultEvent) -> None:
        ...
