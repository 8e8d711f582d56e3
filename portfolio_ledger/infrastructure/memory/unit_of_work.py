"""In-memory UnitOfWork."""

from __future__ import annotations

from portfolio_ledger.domain.repositories.unit_of_work import UnitOfWork

from .store import (
    InMemoryEventRepository,
    InMemoryHoldingRepository,
    InMemoryPerformanceRepository,
    InMemoryPortfolioRepository,
    InMemoryProtocolStateRepository,
    InMemoryStore,
    InMemorySupportedAssetRepository,
    _Staging,
)


class InMemoryUnitOfWork(UnitOfWork):
    """Stages writes against an InMemoryStore; commit() applies them at once.

    A unit of work is single-use: after commit() or rollback() it starts a
    fresh, empty overlay.
    """

    def __init__(self, store: InMemoryStore) -> None:
        self._store = store
        self._bind(_Staging())

    def _bind(self, staging: _Staging) -> None:
        self._staging = staging
        self.portfolios = InMemoryPortfolioRepository(self._store, staging)
        self.holdings = InMemoryHoldingRepository(self._store, staging)
        self.performance = InMemoryPerformanceRepository(self._store, staging)
        self.supported_assets = InMemorySupportedAssetRepository(self._store, staging)
        self.protocol = InMemoryProtocolStateRepository(self._store, staging)
        self.events = InMemoryEventRepository(self._store, staging)

    async def commit(self) -> None:
        self._staging.apply_to(self._store)
        self._bind(_Staging())

    async def rollback(self) -> None:
        self._bind(_Staging())


def in_memory_uow_factory(store: InMemoryStore):
    """Return a zero-argument factory producing units of work over store."""

    def factory() -> InMemoryUnitOfWork:
        return InMemoryUnitOfWork(store)

    return factory
