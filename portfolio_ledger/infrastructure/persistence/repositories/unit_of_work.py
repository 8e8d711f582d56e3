"""SQLAlchemy UnitOfWork — one AsyncSession transaction per operation."""

from __future__ import annotations

from types import TracebackType

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from portfolio_ledger.domain.repositories.unit_of_work import UnitOfWork
from portfolio_ledger.infrastructure.database import AsyncSessionLocal


class SqlUnitOfWork(UnitOfWork):
    """Opens a session on enter; commit() commits it, exit rolls back and closes.

    Repositories are bound on enter, so the unit of work must be used as an
    async context manager.
    """

    def __init__(
        self, session_factory: async_sessionmaker[AsyncSession] = AsyncSessionLocal
    ) -> None:
        self._session_factory = session_factory
        self._session: AsyncSession | None = None

    async def __aenter__(self) -> SqlUnitOfWork:
        # Imported here: the repositories package imports this module.
        from . import get_repositories

        self._session = self._session_factory()
        repos = get_repositories(self._session)
        self.portfolios = repos.portfolios
        self.holdings = repos.holdings
        self.performance = repos.performance
        self.supported_assets = repos.supported_assets
        self.protocol = repos.protocol
        self.events = repos.events
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        try:
            await self.rollback()
        finally:
            if self._session is not None:
                await self._session.close()
                self._session = None

    async def commit(self) -> None:
        if self._session is not None:
            await self._session.commit()

    async def rollback(self) -> None:
        if self._session is not None:
            await self._session.rollback()
