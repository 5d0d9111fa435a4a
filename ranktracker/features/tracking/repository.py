"""Repository pattern implementation for tracked accounts.

Provides the account store used by the polling cycle. The SQLAlchemy
implementation is the production store; the in-memory one backs tests and
dry runs.
"""

from abc import ABC, abstractmethod
from typing import Dict, Iterable, List, Optional

import structlog
from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError

from ranktracker.core.database import DatabaseManager
from ranktracker.core.enums import Region
from ranktracker.core.exceptions import DataNotFoundError, PersistenceError

from .models import GameIdentity, TrackedAccount
from .orm_models import TrackedAccountORM
from .transformers import (
    account_domain_to_orm,
    account_orm_to_domain,
    apply_tracking_state,
)

logger = structlog.get_logger(__name__)


class AccountRepositoryInterface(ABC):
    """Interface for the tracked account store.

    Defines contract for data access operations.
    """

    @abstractmethod
    async def list_tracked_accounts(self) -> List[TrackedAccount]:
        """Get all tracked accounts.

        :returns: Accounts with their last committed tracking state
        """

    @abstractmethod
    async def get_account(self, account_ref: str) -> Optional[TrackedAccount]:
        """Get one account by its reference.

        :param account_ref: Riot PUUID
        :returns: Account if tracked, None otherwise
        """

    @abstractmethod
    async def add_account(self, account: TrackedAccount) -> TrackedAccount:
        """Register a new account.

        :param account: Account to add
        :returns: The stored account
        :raises PersistenceError: If the account exists or the write fails
        """

    @abstractmethod
    async def save_account(self, account: TrackedAccount) -> None:
        """Atomically persist cursor, snapshot and history of an account.

        :param account: Account carrying the new tracking state
        :raises DataNotFoundError: If the account was removed meanwhile
        :raises PersistenceError: If the write fails
        """

    @abstractmethod
    async def find_registered_account(
        self, owner_id: str, game_identity: GameIdentity, region: Region
    ) -> Optional[TrackedAccount]:
        """Find an account by who registered it, its Riot ID and its server.

        :returns: Account if one matches all three, None otherwise
        """

    @abstractmethod
    async def remove_account(self, account_ref: str) -> bool:
        """Stop tracking an account; a running cycle then skips its save.

        :param account_ref: Riot PUUID
        :returns: True if the account was tracked
        :raises PersistenceError: If the delete fails
        """


class SQLAlchemyAccountRepository(AccountRepositoryInterface):
    """SQLAlchemy implementation of the account store."""

    def __init__(self, db: DatabaseManager):
        """Initialize repository.

        :param db: Database manager providing sessions
        """
        self.db = db

    async def list_tracked_accounts(self) -> List[TrackedAccount]:
        try:
            async with self.db.get_session() as session:
                stmt = select(TrackedAccountORM).order_by(TrackedAccountORM.created_at)
                result = await session.execute(stmt)
                rows = result.scalars().all()
        except SQLAlchemyError as e:
            raise PersistenceError(str(e), operation="list tracked accounts") from e
        return [account_orm_to_domain(row) for row in rows]

    async def get_account(self, account_ref: str) -> Optional[TrackedAccount]:
        try:
            async with self.db.get_session() as session:
                row = await session.get(TrackedAccountORM, account_ref)
        except SQLAlchemyError as e:
            raise PersistenceError(
                str(e), operation="get account", context={"account_ref": account_ref}
            ) from e
        return account_orm_to_domain(row) if row is not None else None

    async def add_account(self, account: TrackedAccount) -> TrackedAccount:
        try:
            async with self.db.get_session() as session:
                session.add(account_domain_to_orm(account))
                await session.commit()
        except SQLAlchemyError as e:
            raise PersistenceError(
                str(e),
                operation="add account",
                context={"account_ref": account.account_ref},
            ) from e
        logger.info(
            "Tracked account added",
            account_ref=account.account_ref,
            riot_id=str(account.game_identity),
        )
        return account

    async def save_account(self, account: TrackedAccount) -> None:
        try:
            async with self.db.get_session() as session:
                row = await session.get(TrackedAccountORM, account.account_ref)
                if row is None:
                    raise DataNotFoundError(
                        "Account is no longer tracked",
                        operation="save account",
                        context={"account_ref": account.account_ref},
                    )
                apply_tracking_state(row, account)
                await session.commit()
        except SQLAlchemyError as e:
            raise PersistenceError(
                str(e),
                operation="save account",
                context={"account_ref": account.account_ref},
            ) from e
        logger.debug(
            "Tracked account saved",
            account_ref=account.account_ref,
            cursor_match_id=account.cursor_match_id,
            history_length=len(account.history),
        )

    async def find_registered_account(
        self, owner_id: str, game_identity: GameIdentity, region: Region
    ) -> Optional[TrackedAccount]:
        try:
            async with self.db.get_session() as session:
                stmt = select(TrackedAccountORM).where(
                    TrackedAccountORM.owner_id == owner_id,
                    TrackedAccountORM.game_name == game_identity.game_name,
                    TrackedAccountORM.tag_line == game_identity.tag_line,
                    TrackedAccountORM.region == region.value,
                )
                row = (await session.execute(stmt)).scalars().first()
        except SQLAlchemyError as e:
            raise PersistenceError(
                str(e),
                operation="find registered account",
                context={"riot_id": str(game_identity), "region": region.value},
            ) from e
        return account_orm_to_domain(row) if row is not None else None

    async def remove_account(self, account_ref: str) -> bool:
        try:
            async with self.db.get_session() as session:
                result = await session.execute(
                    delete(TrackedAccountORM).where(
                        TrackedAccountORM.account_ref == account_ref
                    )
                )
                await session.commit()
        except SQLAlchemyError as e:
            raise PersistenceError(
                str(e), operation="remove account", context={"account_ref": account_ref}
            ) from e
        removed = result.rowcount > 0
        if removed:
            logger.info("Tracked account removed", account_ref=account_ref)
        return removed


class InMemoryAccountRepository(AccountRepositoryInterface):
    """Dictionary-backed account store.

    Accounts are copied on the way in and out, so callers never share
    mutable state with the store.
    """

    def __init__(self, accounts: Iterable[TrackedAccount] = ()):
        self._accounts: Dict[str, TrackedAccount] = {
            account.account_ref: account.model_copy(deep=True) for account in accounts
        }

    async def list_tracked_accounts(self) -> List[TrackedAccount]:
        return [account.model_copy(deep=True) for account in self._accounts.values()]

    async def get_account(self, account_ref: str) -> Optional[TrackedAccount]:
        account = self._accounts.get(account_ref)
        return account.model_copy(deep=True) if account is not None else None

    async def add_account(self, account: TrackedAccount) -> TrackedAccount:
        if account.account_ref in self._accounts:
            raise PersistenceError(
                "Account is already tracked",
                operation="add account",
                context={"account_ref": account.account_ref},
            )
        self._accounts[account.account_ref] = account.model_copy(deep=True)
        return account

    async def save_account(self, account: TrackedAccount) -> None:
        if account.account_ref not in self._accounts:
            raise DataNotFoundError(
                "Account is no longer tracked",
                operation="save account",
                context={"account_ref": account.account_ref},
            )
        self._accounts[account.account_ref] = account.model_copy(deep=True)

    async def find_registered_account(
        self, owner_id: str, game_identity: GameIdentity, region: Region
    ) -> Optional[TrackedAccount]:
        for account in self._accounts.values():
            if (
                account.owner_id == owner_id
                and account.game_identity == game_identity
                and account.region == region
            ):
                return account.model_copy(deep=True)
        return None

    async def remove_account(self, account_ref: str) -> bool:
        return self._accounts.pop(account_ref, None) is not None
