"""Portfolio service — the public entry point of the ledger.

Every mutating operation runs as one unit:

    circuit breaker check
      → per-portfolio mutation guard
        → unit of work (staged writes)
          → validation, bookkeeping, valuation, events
          → custody transfer (last, so a ledger failure never moves assets)
        → commit

Any exception before commit discards every staged write, so an aborted
operation leaves the stores exactly as they were.

Authorization:
    add / remove / set allocation / deactivate   owner only
    rebalance / preview                          owner or Role.REBALANCER
    supported-asset allow-list                   Role.ADMIN
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator, Callable, Hashable
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from pydantic import ValidationError

from portfolio_ledger.domain.exceptions import (
    AllocationExceededError,
    AssetNotInPortfolioError,
    CooldownActiveError,
    InsufficientHoldingError,
    InvalidInputError,
    PerformanceUpdateTooSoonError,
    PortfolioInactiveError,
    PortfolioNotFoundError,
    ProtocolPausedError,
    RebalanceNotNeededError,
    TooManyAssetsError,
    UnauthorizedError,
    UnsupportedAssetError,
)
from portfolio_ledger.domain.gateways import (
    REGISTRY_KEY,
    AssetCustody,
    CapabilityCheck,
    CircuitBreaker,
    MutationGuard,
    PriceClient,
)
from portfolio_ledger.domain.models.enums import EventType, Role
from portfolio_ledger.domain.models.events import LedgerEvent
from portfolio_ledger.domain.models.performance import PerformanceMetrics
from portfolio_ledger.domain.models.policy import RebalancePolicy
from portfolio_ledger.domain.models.portfolio import (
    AssetHolding,
    Portfolio,
    allocation_bps,
    value_of,
)
from portfolio_ledger.domain.models.rebalance import RebalancePlan
from portfolio_ledger.domain.repositories.unit_of_work import UnitOfWork

from .executor import RebalanceExecutor
from .performance import PerformanceCalculator
from .planner import RebalancePlanner
from .valuation import ValuationEngine

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class PortfolioService:
    def __init__(
        self,
        uow_factory: Callable[[], UnitOfWork],
        prices: PriceClient,
        custody: AssetCustody,
        capabilities: CapabilityCheck,
        circuit_breaker: CircuitBreaker,
        guard: MutationGuard,
        policy: RebalancePolicy | None = None,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._uow_factory = uow_factory
        self._prices = prices
        self._custody = custody
        self._capabilities = capabilities
        self._circuit_breaker = circuit_breaker
        self._guard = guard
        self._policy = policy or RebalancePolicy()
        self._clock = clock

        self._valuation = ValuationEngine(prices)
        self._planner = RebalancePlanner(prices, self._policy)
        self._executor = RebalanceExecutor(self._valuation)
        self._performance = PerformanceCalculator(prices)

    # ------------------------------------------------------------------ #
    # Portfolio lifecycle                                                  #
    # ------------------------------------------------------------------ #

    async def create_portfolio(
        self,
        owner: str,
        name: str,
        risk_level: int,
        rebalance_threshold_bps: int,
    ) -> Portfolio:
        """Create an empty, active portfolio and return it with its new id."""
        if not name:
            raise InvalidInputError("Portfolio name must not be empty")
        if not 1 <= risk_level <= 10:
            raise InvalidInputError(f"Risk level must be in [1, 10], got {risk_level}")
        if not 0 <= rebalance_threshold_bps <= self._policy.max_threshold_bps:
            raise InvalidInputError(
                f"Rebalance threshold must be in [0, {self._policy.max_threshold_bps}] bps, "
                f"got {rebalance_threshold_bps}"
            )

        async with self._mutation(REGISTRY_KEY) as uow:
            now = self._clock()
            try:
                draft = Portfolio.create(
                    owner=owner,
                    name=name,
                    risk_level=risk_level,
                    rebalance_threshold_bps=rebalance_threshold_bps,
                    created_at=now,
                )
            except ValidationError as exc:
                raise InvalidInputError(str(exc)) from exc
            portfolio = await uow.portfolios.create(draft)
            await uow.events.append(
                LedgerEvent(
                    event_type=EventType.PORTFOLIO_CREATED,
                    portfolio_id=portfolio.portfolio_id,
                    timestamp=now,
                    payload={"owner": owner, "name": name},
                )
            )

        logger.info("Created portfolio %d for %s", portfolio.portfolio_id, owner)
        return portfolio

    async def deactivate_portfolio(self, caller: str, portfolio_id: int) -> Portfolio:
        """Soft-delete: the portfolio rejects every later mutation."""
        async with self._mutation(portfolio_id) as uow:
            portfolio = await self._load_active(uow, portfolio_id)
            self._require_owner(portfolio, caller)
            portfolio = await uow.portfolios.update(
                portfolio.model_copy(update={"is_active": False})
            )
            await uow.events.append(
                LedgerEvent(
                    event_type=EventType.PORTFOLIO_DEACTIVATED,
                    portfolio_id=portfolio_id,
                    timestamp=self._clock(),
                )
            )

        logger.info("Deactivated portfolio %d", portfolio_id)
        return portfolio

    # ------------------------------------------------------------------ #
    # Holdings                                                             #
    # ------------------------------------------------------------------ #

    async def add_asset(
        self,
        caller: str,
        portfolio_id: int,
        asset: str,
        amount: int,
        target_allocation_bps: int,
    ) -> AssetHolding:
        """Deposit amount of asset and set its target weight.

        Depositing an asset already held adds to the amount and replaces the
        target; the asset-count limit applies only to a new asset.
        """
        if amount <= 0:
            raise InvalidInputError(f"Amount must be positive, got {amount}")
        self._check_allocation_bounds(target_allocation_bps)

        async with self._mutation(portfolio_id) as uow:
            portfolio = await self._load_active(uow, portfolio_id)
            self._require_owner(portfolio, caller)
            if not await uow.supported_assets.is_supported(asset):
                raise UnsupportedAssetError(f"Asset {asset!r} is not supported")

            holdings = await uow.holdings.list_for_portfolio(portfolio_id)
            existing = next((h for h in holdings if h.asset == asset), None)
            if existing is None and len(holdings) >= self._policy.max_assets:
                raise TooManyAssetsError(
                    f"Portfolio {portfolio_id} already holds {len(holdings)} assets"
                )
            self._check_total_allocation(holdings, asset, target_allocation_bps)

            if existing is None:
                holding = AssetHolding(
                    portfolio_id=portfolio_id,
                    asset=asset,
                    amount=amount,
                    target_allocation_bps=target_allocation_bps,
                )
            else:
                holding = existing.model_copy(
                    update={
                        "amount": existing.amount + amount,
                        "target_allocation_bps": target_allocation_bps,
                    }
                )
            await uow.holdings.save(holding)

            quote = await self._prices.get_price_unsafe(asset)
            await uow.protocol.adjust_total_value_locked(value_of(amount, quote.price))
            portfolio = await self._valuation.refresh_portfolio_value(uow, portfolio)
            deposited = holding.model_copy(
                update={
                    "last_price": quote.price,
                    "current_allocation_bps": allocation_bps(
                        value_of(holding.amount, quote.price), portfolio.total_value
                    ),
                }
            )

            now = self._clock()
            await uow.events.append(LedgerEvent.asset_added(portfolio_id, asset, amount, now))
            if existing is not None and existing.target_allocation_bps != target_allocation_bps:
                await uow.events.append(
                    LedgerEvent.allocation_updated(
                        portfolio_id, asset, existing.target_allocation_bps,
                        target_allocation_bps, now,
                    )
                )

            await self._custody.custody_in(asset, caller, amount)

        logger.info("Added %d of %s to portfolio %d", amount, asset, portfolio_id)
        return deposited

    async def remove_asset(
        self,
        caller: str,
        portfolio_id: int,
        asset: str,
        amount: int = 0,
    ) -> int:
        """Withdraw amount of asset to the owner (0 = everything); returns the amount."""
        if amount < 0:
            raise InvalidInputError(f"Amount must not be negative, got {amount}")

        async with self._mutation(portfolio_id) as uow:
            portfolio = await self._load_active(uow, portfolio_id)
            self._require_owner(portfolio, caller)

            holding = await uow.holdings.get(portfolio_id, asset)
            if holding is None:
                raise AssetNotInPortfolioError(portfolio_id, asset)
            withdrawn = holding.amount if amount == 0 else amount
            if withdrawn > holding.amount:
                raise InsufficientHoldingError(
                    f"Requested {withdrawn} of {asset!r} but portfolio {portfolio_id} "
                    f"holds {holding.amount}"
                )

            remaining = holding.amount - withdrawn
            if remaining == 0:
                await uow.holdings.delete(portfolio_id, asset)
            else:
                await uow.holdings.save(holding.model_copy(update={"amount": remaining}))

            quote = await self._prices.get_price_unsafe(asset)
            await uow.protocol.adjust_total_value_locked(-value_of(withdrawn, quote.price))
            await self._valuation.refresh_portfolio_value(uow, portfolio)
            await uow.events.append(
                LedgerEvent.asset_removed(portfolio_id, asset, withdrawn, self._clock())
            )

            await self._custody.custody_out(asset, portfolio.owner, withdrawn)

        logger.info("Removed %d of %s from portfolio %d", withdrawn, asset, portfolio_id)
        return withdrawn

    async def set_target_allocation(
        self,
        caller: str,
        portfolio_id: int,
        asset: str,
        target_allocation_bps: int,
    ) -> AssetHolding:
        """Change the target weight of an asset already held."""
        self._check_allocation_bounds(target_allocation_bps)

        async with self._mutation(portfolio_id) as uow:
            portfolio = await self._load_active(uow, portfolio_id)
            self._require_owner(portfolio, caller)

            holdings = await uow.holdings.list_for_portfolio(portfolio_id)
            holding = next((h for h in holdings if h.asset == asset), None)
            if holding is None:
                raise AssetNotInPortfolioError(portfolio_id, asset)
            self._check_total_allocation(holdings, asset, target_allocation_bps)

            updated = await uow.holdings.save(
                holding.model_copy(update={"target_allocation_bps": target_allocation_bps})
            )
            await uow.events.append(
                LedgerEvent.allocation_updated(
                    portfolio_id,
                    asset,
                    holding.target_allocation_bps,
                    target_allocation_bps,
                    self._clock(),
                )
            )

        logger.info(
            "Set target of %s in portfolio %d to %d bps",
            asset,
            portfolio_id,
            target_allocation_bps,
        )
        return updated

    # ------------------------------------------------------------------ #
    # Rebalancing                                                          #
    # ------------------------------------------------------------------ #

    async def rebalance(self, caller: str, portfolio_id: int) -> RebalancePlan:
        """Revalue, plan, apply and revalue again as one unit.

        Returns the plan restricted to the actions actually applied.
        """
        async with self._mutation(portfolio_id) as uow:
            plan = await self._rebalance_in(uow, caller, portfolio_id, apply=True)

        logger.info(
            "Rebalanced portfolio %d: %d action(s), %d asset(s) skipped",
            portfolio_id,
            len(plan.actions),
            len(plan.skipped_assets),
        )
        return plan

    async def preview_rebalance(self, caller: str, portfolio_id: int) -> RebalancePlan:
        """Run every rebalance gate and the planner without committing anything."""
        async with self._guard.hold(portfolio_id):
            async with self._uow_factory() as uow:
                return await self._rebalance_in(uow, caller, portfolio_id, apply=False)

    async def _rebalance_in(
        self, uow: UnitOfWork, caller: str, portfolio_id: int, apply: bool
    ) -> RebalancePlan:
        portfolio = await self._load_active(uow, portfolio_id)
        if not (
            self._capabilities.is_owner(portfolio, caller)
            or self._capabilities.has_role(Role.REBALANCER, caller)
        ):
            raise UnauthorizedError(
                f"{caller} may not rebalance portfolio {portfolio_id}"
            )

        now = self._clock()
        last = portfolio.last_rebalance_time
        if last is not None and now - last < self._policy.cooldown:
            raise CooldownActiveError(
                f"Portfolio {portfolio_id} was rebalanced at {last.isoformat()}; "
                f"next rebalance allowed at {(last + self._policy.cooldown).isoformat()}"
            )

        portfolio = await self._valuation.refresh_portfolio_value(uow, portfolio)
        holdings = await uow.holdings.list_for_portfolio(portfolio_id)
        if not self._planner.needs_rebalance(portfolio, holdings):
            raise RebalanceNotNeededError(
                f"Portfolio {portfolio_id} is within its "
                f"{portfolio.rebalance_threshold_bps} bps threshold"
            )

        planning = await self._planner.plan(portfolio, holdings, now)
        if not apply:
            return planning.plan

        before = {h.asset: h.current_allocation_bps for h in holdings}
        portfolio, applied = await self._executor.execute(
            uow, portfolio, planning.holdings, planning.plan, now
        )

        after = {
            h.asset: h.current_allocation_bps
            for h in await uow.holdings.list_for_portfolio(portfolio_id)
        }
        for asset, old in before.items():
            new = after.get(asset, 0)
            if new != old:
                await uow.events.append(
                    LedgerEvent.allocation_updated(portfolio_id, asset, old, new, now)
                )
        await uow.events.append(
            LedgerEvent.portfolio_rebalanced(portfolio_id, portfolio.total_value, now)
        )
        return planning.plan.model_copy(update={"actions": applied})

    # ------------------------------------------------------------------ #
    # Performance                                                          #
    # ------------------------------------------------------------------ #

    async def update_performance(self, portfolio_id: int) -> PerformanceMetrics:
        """Recompute and store metrics; at most once per performance interval."""
        async with self._mutation(portfolio_id) as uow:
            portfolio = await self._load_active(uow, portfolio_id)
            now = self._clock()

            previous = await uow.performance.get(portfolio_id)
            if (
                previous is not None
                and now - previous.last_updated < self._policy.performance_interval
            ):
                raise PerformanceUpdateTooSoonError(
                    f"Performance of portfolio {portfolio_id} was updated at "
                    f"{previous.last_updated.isoformat()}"
                )

            holdings = await uow.holdings.list_for_portfolio(portfolio_id)
            metrics = await self._performance.calculate(portfolio, holdings, now)
            await uow.performance.save(metrics)
            await uow.events.append(
                LedgerEvent.performance_updated(
                    portfolio_id, metrics.total_return_bps, metrics.sharpe_ratio, now
                )
            )

        logger.info(
            "Updated performance of portfolio %d: return=%d bps sharpe=%d",
            portfolio_id,
            metrics.total_return_bps,
            metrics.sharpe_ratio,
        )
        return metrics

    # ------------------------------------------------------------------ #
    # Supported-asset allow-list                                           #
    # ------------------------------------------------------------------ #

    async def add_supported_asset(self, caller: str, asset: str) -> None:
        if not asset:
            raise InvalidInputError("Asset id must not be empty")
        self._require_role(Role.ADMIN, caller)
        async with self._mutation(REGISTRY_KEY) as uow:
            await uow.supported_assets.add(asset)
            await uow.events.append(
                LedgerEvent(
                    event_type=EventType.SUPPORTED_ASSET_ADDED,
                    timestamp=self._clock(),
                    payload={"asset": asset},
                )
            )
        logger.info("Asset %s added to the allow-list", asset)

    async def remove_supported_asset(self, caller: str, asset: str) -> None:
        """Stop accepting new deposits of asset; existing holdings are untouched."""
        self._require_role(Role.ADMIN, caller)
        async with self._mutation(REGISTRY_KEY) as uow:
            await uow.supported_assets.remove(asset)
            await uow.events.append(
                LedgerEvent(
                    event_type=EventType.SUPPORTED_ASSET_REMOVED,
                    timestamp=self._clock(),
                    payload={"asset": asset},
                )
            )
        logger.info("Asset %s removed from the allow-list", asset)

    # ------------------------------------------------------------------ #
    # Queries                                                              #
    # ------------------------------------------------------------------ #

    async def get_portfolio(self, portfolio_id: int) -> Portfolio:
        async with self._uow_factory() as uow:
            return await self._load(uow, portfolio_id)

    async def get_user_portfolios(self, owner: str) -> list[Portfolio]:
        async with self._uow_factory() as uow:
            return await uow.portfolios.list_by_owner(owner)

    async def get_holdings(self, portfolio_id: int) -> list[AssetHolding]:
        async with self._uow_factory() as uow:
            await self._load(uow, portfolio_id)
            return await uow.holdings.list_for_portfolio(portfolio_id)

    async def get_portfolio_assets(self, portfolio_id: int) -> list[str]:
        async with self._uow_factory() as uow:
            await self._load(uow, portfolio_id)
            return await uow.holdings.list_assets(portfolio_id)

    async def get_performance(self, portfolio_id: int) -> PerformanceMetrics | None:
        async with self._uow_factory() as uow:
            await self._load(uow, portfolio_id)
            return await uow.performance.get(portfolio_id)

    async def get_total_value_locked(self) -> int:
        async with self._uow_factory() as uow:
            return await uow.protocol.get_total_value_locked()

    async def get_supported_assets(self) -> list[str]:
        async with self._uow_factory() as uow:
            return await uow.supported_assets.list()

    async def get_events(
        self, portfolio_id: int, limit: int = 100, offset: int = 0
    ) -> list[LedgerEvent]:
        async with self._uow_factory() as uow:
            return await uow.events.list_for_portfolio(portfolio_id, limit, offset)

    # ------------------------------------------------------------------ #
    # Internal helpers                                                     #
    # ------------------------------------------------------------------ #

    @asynccontextmanager
    async def _mutation(self, key: Hashable) -> AsyncIterator[UnitOfWork]:
        """Paused check, lock, unit of work; commit only if the body completes."""
        if self._circuit_breaker.is_paused():
            raise ProtocolPausedError("Protocol is paused")
        async with self._guard.hold(key):
            async with self._uow_factory() as uow:
                yield uow
                await uow.commit()

    @staticmethod
    async def _load(uow: UnitOfWork, portfolio_id: int) -> Portfolio:
        portfolio = await uow.portfolios.get_by_id(portfolio_id)
        if portfolio is None:
            raise PortfolioNotFoundError(portfolio_id)
        return portfolio

    async def _load_active(self, uow: UnitOfWork, portfolio_id: int) -> Portfolio:
        portfolio = await self._load(uow, portfolio_id)
        if not portfolio.is_active:
            raise PortfolioInactiveError(portfolio_id)
        return portfolio

    def _require_owner(self, portfolio: Portfolio, caller: str) -> None:
        if not self._capabilities.is_owner(portfolio, caller):
            raise UnauthorizedError(
                f"{caller} is not the owner of portfolio {portfolio.portfolio_id}"
            )

    def _require_role(self, role: Role, caller: str) -> None:
        if not self._capabilities.has_role(role, caller):
            raise UnauthorizedError(f"{caller} lacks the {role.value} role")

    def _check_allocation_bounds(self, target_allocation_bps: int) -> None:
        low, high = self._policy.min_allocation_bps, self._policy.max_allocation_bps
        if not low <= target_allocation_bps <= high:
            raise InvalidInputError(
                f"Target allocation must be in [{low}, {high}] bps, "
                f"got {target_allocation_bps}"
            )

    def _check_total_allocation(
        self, holdings: list[AssetHolding], asset: str, target_allocation_bps: int
    ) -> None:
        """Sum of targets with asset's target replaced must stay within the cap."""
        others = sum(h.target_allocation_bps for h in holdings if h.asset != asset)
        total = others + target_allocation_bps
        if total > self._policy.max_total_allocation_bps:
            raise AllocationExceededError(
                f"Total target allocation would be {total} bps "
                f"(max {self._policy.max_total_allocation_bps})"
            )
