"""In-memory backing store and staged repositories.

InMemoryStore holds the committed tables.  Each InMemoryUnitOfWork owns a
_Staging overlay: reads go through the overlay to the store, writes land only
in the overlay, and commit() folds the overlay into the store in one step.

Holdings are staged per portfolio as a full copy of that portfolio's ordered
asset → holding mapping (copy-on-first-write), so asset-list order survives
deletes and re-adds exactly as it would in the committed table.  The TVL
counter is staged as a delta so concurrent mutations of different portfolios
never overwrite each other.

Entities are deep-copied on the way in and out; callers never share an
instance with the store.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from portfolio_ledger.domain.models.events import LedgerEvent
from portfolio_ledger.domain.models.performance import PerformanceMetrics
from portfolio_ledger.domain.models.portfolio import AssetHolding, Portfolio
from portfolio_ledger.domain.repositories.assets import SupportedAssetRepository
from portfolio_ledger.domain.repositories.events import EventRepository
from portfolio_ledger.domain.repositories.holdings import HoldingRepository
from portfolio_ledger.domain.repositories.performance import PerformanceRepository
from portfolio_ledger.domain.repositories.portfolios import PortfolioRepository
from portfolio_ledger.domain.repositories.protocol import ProtocolStateRepository


@dataclass
class InMemoryStore:
    """Committed state of the ledger."""

    portfolios: dict[int, Portfolio] = field(default_factory=dict)
    holdings: dict[int, dict[str, AssetHolding]] = field(default_factory=dict)
    performance: dict[int, PerformanceMetrics] = field(default_factory=dict)
    supported_assets: set[str] = field(default_factory=set)
    total_value_locked: int = 0
    events: list[LedgerEvent] = field(default_factory=list)
    next_portfolio_id: int = 1


@dataclass
class _Staging:
    """Uncommitted writes of one unit of work."""

    portfolios: dict[int, Portfolio] = field(default_factory=dict)
    holdings: dict[int, dict[str, AssetHolding]] = field(default_factory=dict)
    performance: dict[int, PerformanceMetrics] = field(default_factory=dict)
    assets_added: set[str] = field(default_factory=set)
    assets_removed: set[str] = field(default_factory=set)
    tvl_delta: int = 0
    events: list[LedgerEvent] = field(default_factory=list)
    next_portfolio_id: int | None = None

    def apply_to(self, store: InMemoryStore) -> None:
        store.portfolios.update(self.portfolios)
        for portfolio_id, mapping in self.holdings.items():
            store.holdings[portfolio_id] = mapping
        store.performance.update(self.performance)
        store.supported_assets -= self.assets_removed
        store.supported_assets |= self.assets_added
        store.total_value_locked = max(0, store.total_value_locked + self.tvl_delta)
        store.events.extend(self.events)
        if self.next_portfolio_id is not None:
            store.next_portfolio_id = max(store.next_portfolio_id, self.next_portfolio_id)


class InMemoryPortfolioRepository(PortfolioRepository):
    def __init__(self, store: InMemoryStore, staging: _Staging) -> None:
        self._store = store
        self._staging = staging

    def _current(self, portfolio_id: int) -> Portfolio | None:
        if portfolio_id in self._staging.portfolios:
            return self._staging.portfolios[portfolio_id]
        return self._store.portfolios.get(portfolio_id)

    def _all(self) -> list[Portfolio]:
        merged = {**self._store.portfolios, **self._staging.portfolios}
        return [merged[pid] for pid in sorted(merged)]

    async def get_by_id(self, portfolio_id: int) -> Portfolio | None:
        row = self._current(portfolio_id)
        return row.model_copy(deep=True) if row else None

    async def list(self, limit: int = 50, offset: int = 0) -> list[Portfolio]:
        return [p.model_copy(deep=True) for p in self._all()[offset : offset + limit]]

    async def list_by_owner(self, owner: str) -> list[Portfolio]:
        return [p.model_copy(deep=True) for p in self._all() if p.owner == owner]

    async def create(self, entity: Portfolio) -> Portfolio:
        next_id = self._staging.next_portfolio_id or self._store.next_portfolio_id
        created = entity.model_copy(update={"portfolio_id": next_id}, deep=True)
        self._staging.portfolios[next_id] = created
        self._staging.next_portfolio_id = next_id + 1
        return created.model_copy(deep=True)

    async def update(self, entity: Portfolio) -> Portfolio:
        if self._current(entity.portfolio_id) is None:
            raise KeyError(f"Portfolio {entity.portfolio_id} does not exist")
        self._staging.portfolios[entity.portfolio_id] = entity.model_copy(deep=True)
        return entity


class InMemoryHoldingRepository(HoldingRepository):
    def __init__(self, store: InMemoryStore, staging: _Staging) -> None:
        self._store = store
        self._staging = staging

    def _read(self, portfolio_id: int) -> dict[str, AssetHolding]:
        if portfolio_id in self._staging.holdings:
            return self._staging.holdings[portfolio_id]
        return self._store.holdings.get(portfolio_id, {})

    def _write(self, portfolio_id: int) -> dict[str, AssetHolding]:
        if portfolio_id not in self._staging.holdings:
            self._staging.holdings[portfolio_id] = dict(
                self._store.holdings.get(portfolio_id, {})
            )
        return self._staging.holdings[portfolio_id]

    async def get(self, portfolio_id: int, asset: str) -> AssetHolding | None:
        row = self._read(portfolio_id).get(asset)
        return row.model_copy(deep=True) if row else None

    async def list_for_portfolio(self, portfolio_id: int) -> list[AssetHolding]:
        return [h.model_copy(deep=True) for h in self._read(portfolio_id).values()]

    async def save(self, holding: AssetHolding) -> AssetHolding:
        # dict assignment keeps the insertion position of an existing key
        self._write(holding.portfolio_id)[holding.asset] = holding.model_copy(deep=True)
        return holding

    async def delete(self, portfolio_id: int, asset: str) -> None:
        self._write(portfolio_id).pop(asset, None)


class InMemoryPerformanceRepository(PerformanceRepository):
    def __init__(self, store: InMemoryStore, staging: _Staging) -> None:
        self._store = store
        self._staging = staging

    async def get(self, portfolio_id: int) -> PerformanceMetrics | None:
        if portfolio_id in self._staging.performance:
            return self._staging.performance[portfolio_id]
        return self._store.performance.get(portfolio_id)

    async def save(self, metrics: PerformanceMetrics) -> PerformanceMetrics:
        self._staging.performance[metrics.portfolio_id] = metrics
        return metrics


class InMemorySupportedAssetRepository(SupportedAssetRepository):
    def __init__(self, store: InMemoryStore, staging: _Staging) -> None:
        self._store = store
        self._staging = staging

    def _current(self) -> set[str]:
        return (self._store.supported_assets - self._staging.assets_removed) | (
            self._staging.assets_added
        )

    async def is_supported(self, asset: str) -> bool:
        return asset in self._current()

    async def add(self, asset: str) -> None:
        self._staging.assets_removed.discard(asset)
        self._staging.assets_added.add(asset)

    async def remove(self, asset: str) -> None:
        self._staging.assets_added.discard(asset)
        self._staging.assets_removed.add(asset)

    async def list(self) -> list[str]:
        return sorted(self._current())


class InMemoryProtocolStateRepository(ProtocolStateRepository):
    def __init__(self, store: InMemoryStore, staging: _Staging) -> None:
        self._store = store
        self._staging = staging

    async def get_total_value_locked(self) -> int:
        return max(0, self._store.total_value_locked + self._staging.tvl_delta)

    async def adjust_total_value_locked(self, delta: int) -> int:
        self._staging.tvl_delta += delta
        return await self.get_total_value_locked()


class InMemoryEventRepository(EventRepository):
    def __init__(self, store: InMemoryStore, staging: _Staging) -> None:
        self._store = store
        self._staging = staging

    async def append(self, event: LedgerEvent) -> LedgerEvent:
        self._staging.events.append(event)
        return event

    async def list_for_portfolio(
        self, portfolio_id: int, limit: int = 100, offset: int = 0
    ) -> list[LedgerEvent]:
        events = [
            e
            for e in [*self._store.events, *self._staging.events]
            if e.portfolio_id == portfolio_id
        ]
        return events[offset : offset + limit]
