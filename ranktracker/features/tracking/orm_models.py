"""SQLAlchemy 2.0 ORM model for tracked accounts."""

from datetime import datetime
from typing import Any, Optional

from sqlalchemy import JSON, DateTime as SQLDateTime, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from ranktracker.core.database import Base


class TrackedAccountORM(Base):
    """Tracked account row: registration data plus tracking state.

    Registration columns are written by whoever registers the account; the
    tracker only updates the cursor, snapshot and history columns.
    """

    __tablename__ = "tracked_accounts"
    __table_args__ = (
        Index("idx_tracked_accounts_owner", "owner_id"),
        Index("idx_tracked_accounts_riot_id", "game_name", "tag_line"),
    )

    account_ref: Mapped[str] = mapped_column(
        String(78),
        primary_key=True,
        comment="Player's universally unique identifier from Riot API",
    )
    owner_id: Mapped[str] = mapped_column(
        String(64), nullable=False, comment="Who registered the account"
    )
    region: Mapped[str] = mapped_column(
        String(8), nullable=False, comment="Server code (e.g., euw, na)"
    )
    game_name: Mapped[str] = mapped_column(
        String(128), nullable=False, comment="Riot ID game name"
    )
    tag_line: Mapped[str] = mapped_column(
        String(32), nullable=False, comment="Riot ID tag line"
    )

    # Tracking state
    cursor_match_id: Mapped[Optional[str]] = mapped_column(
        String(64), nullable=True, comment="Most recently processed match"
    )
    last_tier: Mapped[Optional[int]] = mapped_column(
        Integer, nullable=True, comment="Tier ordinal, NULL when never observed"
    )
    last_division: Mapped[Optional[int]] = mapped_column(
        Integer, nullable=True, comment="Division ordinal (IV=0 .. I=3)"
    )
    last_points: Mapped[Optional[int]] = mapped_column(
        Integer, nullable=True, comment="League points"
    )
    history: Mapped[list[dict[str, Any]]] = mapped_column(
        JSON, nullable=False, default=list, comment="Rank records, oldest first"
    )

    created_at: Mapped[datetime] = mapped_column(
        SQLDateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
    updated_at: Mapped[datetime] = mapped_column(
        SQLDateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )

    def __repr__(self) -> str:
        return f"<TrackedAccountORM(account_ref='{self.account_ref}', riot_id='{self.game_name}#{self.tag_line}', cursor='{self.cursor_match_id}')>"
