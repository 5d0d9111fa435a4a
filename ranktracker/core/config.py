"""Configuration settings for the rank tracker."""

from __future__ import annotations

from typing import List

from dotenv import load_dotenv
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .enums import QueueType, Region

# Load environment variables from .env file
load_dotenv()


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Database Configuration
    postgres_db: str = Field(default="rank_tracker_db")
    postgres_user: str = Field(default="rank_tracker_user")
    postgres_password: str = Field(default="dev_password")
    postgres_host: str = Field(default="postgres")
    postgres_port: int = Field(default=5432)
    database_url_override: str = Field(
        default="",
        description="Full SQLAlchemy URL, takes precedence over the postgres_* fields",
    )

    @property
    def database_url(self) -> str:
        """Construct async database URL from components."""
        if self.database_url_override:
            return self.database_url_override
        return f"postgresql+asyncpg://{self.postgres_user}:{self.postgres_password}@{self.postgres_host}:{self.postgres_port}/{self.postgres_db}"

    # Application Configuration
    debug: bool = Field(default=False)
    log_level: str = Field(default="INFO")
    json_logs: bool = Field(default=True)

    # Riot API Configuration
    riot_api_key: str = Field(default="", description="X-Riot-Token value")
    riot_request_timeout: float = Field(
        default=10.0, gt=0, description="Per-request timeout in seconds"
    )

    # Tracking Configuration
    history_capacity: int = Field(
        default=100, ge=1, description="Rank records kept per account"
    )
    match_page_size: int = Field(
        default=20, ge=1, le=100, description="Match ids requested per account"
    )
    queue_filter: QueueType = Field(
        default=QueueType.RANKED_SOLO_5X5, description="Only matches of this queue"
    )
    valid_regions: str = Field(
        default=",".join(region.value for region in Region),
        description="Comma separated server codes accepted for tracking",
    )
    poll_interval_seconds: int = Field(default=300, ge=1)
    max_concurrent_accounts: int = Field(default=4, ge=1)

    @field_validator("queue_filter", mode="before")
    @classmethod
    def parse_queue_filter(cls, v):
        """Accept queue ids given as strings (environment values)."""
        if isinstance(v, str) and v.strip().isdigit():
            return int(v)
        return v

    @field_validator("valid_regions")
    @classmethod
    def validate_regions(cls, v: str) -> str:
        """Reject server codes the Riot routing table does not know."""
        known = {region.value for region in Region}
        codes = [code.strip().lower() for code in v.split(",") if code.strip()]
        if not codes:
            raise ValueError("At least one region must be enabled")
        unknown = sorted(set(codes) - known)
        if unknown:
            raise ValueError(
                f"Unknown region codes: {', '.join(unknown)}. "
                f"Valid codes are: {', '.join(sorted(known))}"
            )
        return ",".join(codes)

    @property
    def valid_regions_list(self) -> List[Region]:
        """Get enabled regions as enum members."""
        return [Region(code) for code in self.valid_regions.split(",")]

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        env_prefix="",
        extra="forbid",
    )


def get_settings() -> Settings:
    """Get application settings instance."""
    return Settings()


settings: Settings | None = None


def get_global_settings() -> Settings:
    """Get or create the global settings instance."""
    global settings
    if settings is None:
        settings = get_settings()
    return settings
