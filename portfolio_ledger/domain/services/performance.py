"""Performance and risk calculator.

Derives return / risk figures from current holding state.  These are coarse
on-ledger heuristics, reproduced as defined rather than corrected:

    initialValue     = Σ max(currentValue_i − unrealizedPnL_i, 0)
    totalReturnBps   = currentValue · 10000 / initialValue − 10000
    periodReturnBps  = totalReturnBps · period / age      (age ≥ period only)
    concentration    = Σ ⌊currentAllocationBps_i² / 10000⌋
    volatility       = concentration
    sharpeRatio      = totalReturnBps · 1000 / volatility  (0 if volatility is 0)
    maxDrawdownBps   = totalLosses · 10000 / currentValue
    riskScore        = clamp(riskLevel · 100 + concentration
                             − min(assetCount · 10, 100), 0, 1000)

initialValue is an approximation of cost basis: realized rebalance trades do
not touch unrealizedPnL, so returns drift after repeated rebalances.
"""

from __future__ import annotations

from datetime import datetime, timedelta

import numpy as np

from portfolio_ledger.domain.gateways.prices import PriceClient
from portfolio_ledger.domain.models.performance import PerformanceMetrics
from portfolio_ledger.domain.models.policy import BPS_DENOMINATOR
from portfolio_ledger.domain.models.portfolio import AssetHolding, Portfolio, value_of

_SHARPE_SCALE = 1_000
_MAX_RISK_SCORE = 1_000
_DIVERSIFICATION_STEP = 10
_MAX_DIVERSIFICATION_BONUS = 100

_PERIODS: dict[str, timedelta] = {
    "daily_return_bps": timedelta(days=1),
    "weekly_return_bps": timedelta(weeks=1),
    "monthly_return_bps": timedelta(days=30),
    "yearly_return_bps": timedelta(days=365),
}


def _tdiv(numerator: int, denominator: int) -> int:
    """Integer division truncating toward zero (signed fixed-point semantics)."""
    quotient = abs(numerator) // abs(denominator)
    return quotient if (numerator >= 0) == (denominator > 0) else -quotient


class PerformanceCalculator:
    def __init__(self, prices: PriceClient) -> None:
        self._prices = prices

    async def calculate(
        self,
        portfolio: Portfolio,
        holdings: list[AssetHolding],
        now: datetime,
    ) -> PerformanceMetrics:
        current_values: list[int] = []
        initial_value = 0
        for holding in holdings:
            quote = await self._prices.get_price_unsafe(holding.asset)
            value = value_of(holding.amount, quote.price)
            current_values.append(value)
            initial_value += max(value - holding.unrealized_pnl, 0)
        current_value = sum(current_values)

        total_return = self.total_return_bps(current_value, initial_value)
        concentration = self.concentration(holdings)
        sharpe = _tdiv(total_return * _SHARPE_SCALE, concentration) if concentration else 0

        return PerformanceMetrics(
            portfolio_id=portfolio.portfolio_id,
            total_return_bps=total_return,
            **self.period_returns(total_return, now - portfolio.created_at),
            volatility=concentration,
            sharpe_ratio=sharpe,
            max_drawdown_bps=self.max_drawdown_bps(holdings, current_value),
            risk_score=self.risk_score(portfolio.risk_level, concentration, len(holdings)),
            last_updated=now,
        )

    # ------------------------------------------------------------------ #
    # Individual metrics                                                   #
    # ------------------------------------------------------------------ #

    @staticmethod
    def total_return_bps(current_value: int, initial_value: int) -> int:
        if initial_value == 0:
            return 0
        return current_value * BPS_DENOMINATOR // initial_value - BPS_DENOMINATOR

    @staticmethod
    def period_returns(total_return: int, age: timedelta) -> dict[str, int | None]:
        """Linear extrapolation of total_return over each period length."""
        age_seconds = int(age.total_seconds())
        returns: dict[str, int | None] = {}
        for name, period in _PERIODS.items():
            period_seconds = int(period.total_seconds())
            if age_seconds >= period_seconds:
                returns[name] = _tdiv(total_return * period_seconds, age_seconds)
            else:
                returns[name] = None
        return returns

    @staticmethod
    def concentration(holdings: list[AssetHolding]) -> int:
        """Σ ⌊allocation² / 10000⌋ over current allocations (a Herfindahl proxy)."""
        if not holdings:
            return 0
        allocations = np.array([h.current_allocation_bps for h in holdings], dtype=np.int64)
        return int(np.sum(allocations**2 // BPS_DENOMINATOR))

    @staticmethod
    def max_drawdown_bps(holdings: list[AssetHolding], current_value: int) -> int:
        # unrealized_pnl saturates at zero, so no holding ever contributes a loss
        # here and the result is 0; kept for parity with the stored metric.
        total_losses = sum(-h.unrealized_pnl for h in holdings if h.unrealized_pnl < 0)
        if current_value == 0:
            return 0
        return total_losses * BPS_DENOMINATOR // current_value

    @staticmethod
    def risk_score(risk_level: int, concentration: int, asset_count: int) -> int:
        bonus = min(asset_count * _DIVERSIFICATION_STEP, _MAX_DIVERSIFICATION_BONUS)
        score = risk_level * 100 + concentration - bonus
        return max(0, min(score, _MAX_RISK_SCORE))
