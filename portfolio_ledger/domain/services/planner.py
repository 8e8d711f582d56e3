"""Rebalance planner.

Given a freshly valued portfolio and its holdings, decides what to buy and
sell so that actual weights move back toward target weights.

Pipeline:
    needs_rebalance            (trigger gate on current vs target allocation)
    plan
        → _price_for_planning  (strict price + staleness / confidence gate)
        → _apply_pnl           (unrealized P&L from price delta, saturating)
        → _plan_asset          (deviation gate + sized action with slippage)
        → _scale_buys          (buys limited to the value of sells)

Per-asset sizing:
    targetValue  = totalValue · targetAllocationBps / 10000
    currentValue = amount · price / 1e18
    deviationBps = |currentValue − targetValue| · 10000 / totalValue

    sell: amount = (currentValue − targetValue) · 1e18 / price,
          reduced by slippage_bps; kept only if 0 < amount ≤ held amount
    buy:  amount = (targetValue − currentValue) · 1e18 / price,
          increased by slippage_bps; kept if amount > 0

An asset whose price is stale or below the confidence floor is skipped for
the cycle; it is a degradation of the plan, never a failure.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime

from portfolio_ledger.domain.exceptions import StalePriceDataError
from portfolio_ledger.domain.gateways.prices import PriceClient
from portfolio_ledger.domain.models.enums import ActionType
from portfolio_ledger.domain.models.market_data import PriceQuote
from portfolio_ledger.domain.models.policy import BPS_DENOMINATOR, PRECISION, RebalancePolicy
from portfolio_ledger.domain.models.portfolio import AssetHolding, Portfolio, value_of
from portfolio_ledger.domain.models.rebalance import RebalanceAction, RebalancePlan

logger = logging.getLogger(__name__)


@dataclass
class PlanningResult:
    """Plan plus the holdings with their P&L counters updated during planning.

    The executor persists `holdings`; the planner itself writes nothing.
    """

    plan: RebalancePlan
    holdings: list[AssetHolding] = field(default_factory=list)


class RebalancePlanner:
    def __init__(self, prices: PriceClient, policy: RebalancePolicy) -> None:
        self._prices = prices
        self._policy = policy

    # ------------------------------------------------------------------ #
    # Public API                                                           #
    # ------------------------------------------------------------------ #

    def needs_rebalance(self, portfolio: Portfolio, holdings: list[AssetHolding]) -> bool:
        """True when any holding's current weight strays past the threshold."""
        threshold = portfolio.rebalance_threshold_bps
        return any(
            abs(h.current_allocation_bps - h.target_allocation_bps) > threshold
            for h in holdings
        )

    async def plan(
        self,
        portfolio: Portfolio,
        holdings: list[AssetHolding],
        now: datetime,
    ) -> PlanningResult:
        """Compute buy/sell actions for every held asset that passes the gates."""
        actions: list[RebalanceAction] = []
        skipped: list[str] = []
        updated: list[AssetHolding] = []

        for holding in holdings:
            quote = await self._price_for_planning(holding.asset, now)
            if quote is None:
                skipped.append(holding.asset)
                updated.append(holding)
                continue

            holding = self._apply_pnl(holding, quote.price)
            updated.append(holding)

            action = self._plan_asset(portfolio, holding, quote.price)
            if action is not None:
                actions.append(action)

        total_sell = sum(a.value for a in actions if a.action == ActionType.SELL)
        total_buy = sum(a.value for a in actions if a.action == ActionType.BUY)
        actions, scale_num, scale_den = self._scale_buys(actions, total_sell, total_buy)

        plan = RebalancePlan(
            portfolio_id=portfolio.portfolio_id,
            total_value=portfolio.total_value,
            actions=actions,
            skipped_assets=skipped,
            total_sell_value=total_sell,
            total_buy_value=total_buy,
            buy_scale_num=scale_num,
            buy_scale_den=scale_den,
        )
        logger.debug(
            "Planned %d action(s) for portfolio %d (sell=%d buy=%d skipped=%s)",
            len(actions),
            portfolio.portfolio_id,
            total_sell,
            total_buy,
            skipped,
        )
        return PlanningResult(plan=plan, holdings=updated)

    # ------------------------------------------------------------------ #
    # Pipeline stages                                                      #
    # ------------------------------------------------------------------ #

    async def _price_for_planning(self, asset: str, now: datetime) -> PriceQuote | None:
        """Strict price, or None when it fails the staleness / confidence gate."""
        try:
            quote = await self._prices.get_price(asset)
        except StalePriceDataError as exc:
            logger.warning("Skipping %s: %s", asset, exc)
            return None

        if now - quote.timestamp > self._policy.max_price_age:
            logger.warning(
                "Skipping %s: price is %.0fs old", asset, quote.age_at(now)
            )
            return None
        if quote.confidence < self._policy.min_confidence_bps:
            logger.warning(
                "Skipping %s: confidence %d bps below %d",
                asset,
                quote.confidence,
                self._policy.min_confidence_bps,
            )
            return None
        return quote

    @staticmethod
    def _apply_pnl(holding: AssetHolding, price: int) -> AssetHolding:
        """Accumulate unrealized P&L from the move since last_price.

        Gains add; losses subtract but saturate at zero and excess loss is
        dropped rather than tracked.
        """
        last_price = holding.last_price
        if last_price == 0 or price == last_price:
            return holding

        pnl = holding.unrealized_pnl
        if price > last_price:
            pnl += value_of(holding.amount, price - last_price)
        else:
            loss = value_of(holding.amount, last_price - price)
            pnl = pnl - loss if pnl > loss else 0
        return holding.model_copy(update={"unrealized_pnl": pnl})

    def _plan_asset(
        self, portfolio: Portfolio, holding: AssetHolding, price: int
    ) -> RebalanceAction | None:
        total_value = portfolio.total_value
        if total_value == 0 or price == 0:
            return None

        target_value = total_value * holding.target_allocation_bps // BPS_DENOMINATOR
        current_value = value_of(holding.amount, price)
        deviation_bps = abs(current_value - target_value) * BPS_DENOMINATOR // total_value
        if deviation_bps <= portfolio.rebalance_threshold_bps:
            return None

        slippage = self._policy.slippage_bps
        if current_value > target_value:
            amount = (current_value - target_value) * PRECISION // price
            amount -= min(amount, amount * slippage // BPS_DENOMINATOR)
            if amount == 0 or amount > holding.amount:
                return None
            action_type = ActionType.SELL
        else:
            amount = (target_value - current_value) * PRECISION // price
            amount += amount * slippage // BPS_DENOMINATOR
            if amount == 0:
                return None
            action_type = ActionType.BUY

        return RebalanceAction(
            asset=holding.asset,
            action=action_type,
            amount=amount,
            value=value_of(amount, price),
            price=price,
        )

    @staticmethod
    def _scale_buys(
        actions: list[RebalanceAction], total_sell: int, total_buy: int
    ) -> tuple[list[RebalanceAction], int, int]:
        """Scale every buy by total_sell / total_buy when sells cannot fund them.

        Sells are never scaled.  With no sell proceeds every buy is dropped.
        """
        if total_sell >= total_buy:
            return actions, 1, 1

        scaled: list[RebalanceAction] = []
        for action in actions:
            if action.action == ActionType.SELL:
                scaled.append(action)
                continue
            amount = action.amount * total_sell // total_buy
            if amount == 0:
                continue
            scaled.append(
                action.model_copy(
                    update={
                        "amount": amount,
                        "value": action.value * total_sell // total_buy,
                    }
                )
            )
        return scaled, total_sell, total_buy
