"""Rebalance executor.

Applies a RebalancePlan to the holding store.  No market order is placed;
only ledger amounts move; real settlement belongs to an external venue.

After the actions are applied the allocation snapshot is rebuilt from the
post-trade amounts at each holding's last_price, and the portfolio is
revalued so total_value and current allocations reflect the new state.
"""

from __future__ import annotations

import logging
from datetime import datetime

from portfolio_ledger.domain.models.enums import ActionType
from portfolio_ledger.domain.models.policy import BPS_DENOMINATOR
from portfolio_ledger.domain.models.portfolio import (
    AssetAllocation,
    AssetHolding,
    Portfolio,
    value_of,
)
from portfolio_ledger.domain.models.rebalance import RebalanceAction, RebalancePlan
from portfolio_ledger.domain.repositories.unit_of_work import UnitOfWork

from .valuation import ValuationEngine

logger = logging.getLogger(__name__)


class RebalanceExecutor:
    def __init__(self, valuation: ValuationEngine) -> None:
        self._valuation = valuation

    async def execute(
        self,
        uow: UnitOfWork,
        portfolio: Portfolio,
        holdings: list[AssetHolding],
        plan: RebalancePlan,
        now: datetime,
    ) -> tuple[Portfolio, list[RebalanceAction]]:
        """Stage the plan's effects; returns the revalued portfolio and applied actions.

        holdings are the planner's copies (with updated P&L) and are persisted
        whether or not they are traded.
        """
        by_asset = {h.asset: h for h in holdings}
        applied: list[RebalanceAction] = []

        for action in plan.actions:
            holding = by_asset.get(action.asset)
            if holding is None:
                logger.warning(
                    "Dropping %s of %s: not held by portfolio %d",
                    action.action.value,
                    action.asset,
                    portfolio.portfolio_id,
                )
                continue
            if action.action == ActionType.SELL:
                if action.amount > holding.amount:
                    logger.warning(
                        "Dropping sell of %s: %d exceeds held %d",
                        action.asset,
                        action.amount,
                        holding.amount,
                    )
                    continue
                new_amount = holding.amount - action.amount
            else:
                new_amount = holding.amount + action.amount
            by_asset[action.asset] = holding.model_copy(update={"amount": new_amount})
            applied.append(action)

        for holding in by_asset.values():
            if holding.amount == 0:
                await uow.holdings.delete(holding.portfolio_id, holding.asset)
            else:
                await uow.holdings.save(holding)

        remaining = [h for h in by_asset.values() if h.amount > 0]
        rebuilt = portfolio.model_copy(
            update={
                "allocations": self._build_allocations(remaining, now),
                "last_rebalance_time": now,
            }
        )
        rebuilt = await uow.portfolios.update(rebuilt)
        return await self._valuation.refresh_portfolio_value(uow, rebuilt), applied

    @staticmethod
    def _build_allocations(
        holdings: list[AssetHolding], now: datetime
    ) -> list[AssetAllocation]:
        """Snapshot rows for every held asset, valued at last_price."""
        values = [value_of(h.amount, h.last_price) for h in holdings]
        total_value = sum(values)
        return [
            AssetAllocation(
                asset=h.asset,
                target_allocation_bps=h.target_allocation_bps,
                current_value=value,
                target_value=total_value * h.target_allocation_bps // BPS_DENOMINATOR,
                last_rebalance_time=now,
            )
            for h, value in zip(holdings, values)
        ]
