"""Unit of work interface.

A UnitOfWork is the single transactional boundary around one service
operation.  Repositories obtained from it see the operation's own staged
writes; nothing becomes visible to other units of work until commit().
Leaving the `async with` block without committing, or by an exception,
discards every staged write.

    async with uow_factory() as uow:
        portfolio = await uow.portfolios.get_by_id(pid)
        ...
        await uow.commit()
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from types import TracebackType

from .assets import SupportedAssetRepository
from .events import EventRepository
from .holdings import HoldingRepository
from .performance import PerformanceRepository
from .portfolios import PortfolioRepository
from .protocol import ProtocolStateRepository


class UnitOfWork(ABC):
    portfolios: PortfolioRepository
    holdings: HoldingRepository
    performance: PerformanceRepository
    supported_assets: SupportedAssetRepository
    protocol: ProtocolStateRepository
    events: EventRepository

    async def __aenter__(self) -> UnitOfWork:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.rollback()

    @abstractmethod
    async def commit(self) -> None:
        """Publish all staged writes atomically."""

    @abstractmethod
    async def rollback(self) -> None:
        """Discard staged writes; a no-op after a successful commit."""
