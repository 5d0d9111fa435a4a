"""Riot API endpoint definitions and routing information."""

from typing import Any, Dict, Optional, Tuple
from urllib.parse import quote

from ..enums import QueueType, Region, RoutingRegion


class RiotAPIEndpoints:
    """Riot API endpoint definitions and routing."""

    def __init__(self, default_region: Region = Region.EUW):
        """
        Initialize endpoint configuration.

        Args:
            default_region: Server code used when a call does not name one
        """
        self.default_region = default_region

    def get_regional_url(self, region: Optional[Region] = None) -> str:
        """Get base URL for regional endpoints (match-v5)."""
        region = region or self.default_region
        return f"https://{region.routing.value}.api.riotgames.com"

    def get_platform_url(self, region: Optional[Region] = None) -> str:
        """Get base URL for platform endpoints (league-v4)."""
        region = region or self.default_region
        return f"https://{region.platform}.api.riotgames.com"

    # Account endpoints (Regional, any cluster serves every account)
    def account_by_riot_id(self, game_name: str, tag_line: str) -> str:
        """Get account by Riot ID endpoint."""
        base_url = f"https://{RoutingRegion.AMERICAS.value}.api.riotgames.com"
        return (
            f"{base_url}/riot/account/v1/accounts/by-riot-id/"
            f"{quote(game_name, safe='')}/{quote(tag_line, safe='')}"
        )

    # Match endpoints (Regional)
    def match_ids_by_puuid(
        self,
        puuid: str,
        count: int = 20,
        queue: Optional[QueueType] = None,
        region: Optional[Region] = None,
    ) -> Tuple[str, Dict[str, Any]]:
        """Get match id list endpoint and its query parameters."""
        url = f"{self.get_regional_url(region)}/lol/match/v5/matches/by-puuid/{puuid}/ids"
        params: Dict[str, Any] = {"start": 0, "count": count}
        if queue is not None:
            params["queue"] = queue.value
        return url, params

    def match_by_id(self, match_id: str, region: Optional[Region] = None) -> str:
        """Get match details endpoint."""
        return f"{self.get_regional_url(region)}/lol/match/v5/matches/{match_id}"

    # League endpoints (Platform)
    def league_entries_by_puuid(
        self, puuid: str, region: Optional[Region] = None
    ) -> str:
        """Get league entries by PUUID endpoint."""
        return f"{self.get_platform_url(region)}/lol/league/v4/entries/by-puuid/{puuid}"
