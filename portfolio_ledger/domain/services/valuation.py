"""Portfolio valuation engine.

Recomputes a portfolio's total value and every holding's current allocation
from live prices.  Prices come from the price client's unsafe mode, so stale
or low-confidence quotes are accepted: the result is a best-effort snapshot
used for reporting and as the planner's input, never a trading decision.

    assetValue            = amount · price / 1e18
    totalValue            = Σ assetValue
    currentAllocationBps  = ⌊assetValue · 10000 / totalValue⌋   (0 if total is 0)
"""

from __future__ import annotations

from dataclasses import dataclass

from portfolio_ledger.domain.gateways.prices import PriceClient
from portfolio_ledger.domain.models.portfolio import (
    AssetHolding,
    Portfolio,
    allocation_bps,
    value_of,
)
from portfolio_ledger.domain.repositories.unit_of_work import UnitOfWork


@dataclass(frozen=True)
class Valuation:
    """Output of a valuation pass — holdings carry refreshed price and weight."""

    total_value: int
    holdings: list[AssetHolding]


class ValuationEngine:
    def __init__(self, prices: PriceClient) -> None:
        self._prices = prices

    async def value(self, holdings: list[AssetHolding]) -> Valuation:
        """Price every holding and derive allocations; does not write anything."""
        priced: list[tuple[AssetHolding, int, int]] = []
        for holding in holdings:
            quote = await self._prices.get_price_unsafe(holding.asset)
            priced.append((holding, quote.price, value_of(holding.amount, quote.price)))

        total_value = sum(value for _, _, value in priced)
        refreshed = [
            holding.model_copy(
                update={
                    "last_price": price,
                    "current_allocation_bps": allocation_bps(value, total_value),
                }
            )
            for holding, price, value in priced
        ]
        return Valuation(total_value=total_value, holdings=refreshed)

    async def refresh_portfolio_value(self, uow: UnitOfWork, portfolio: Portfolio) -> Portfolio:
        """Revalue the portfolio and stage the refreshed holdings and total."""
        holdings = await uow.holdings.list_for_portfolio(portfolio.portfolio_id)
        valuation = await self.value(holdings)
        for holding in valuation.holdings:
            await uow.holdings.save(holding)

        refreshed = portfolio.model_copy(update={"total_value": valuation.total_value})
        return await uow.portfolios.update(refreshed)
