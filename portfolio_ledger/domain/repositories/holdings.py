"""Holding repository interface.

HoldingRepository does not extend the generic Repository[T] base: holdings
are keyed by the composite (portfolio_id, asset) pair and each portfolio's
assets keep the order in which they were first deposited.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from portfolio_ledger.domain.models.portfolio import AssetHolding


class HoldingRepository(ABC):
    """Read/write interface for AssetHolding records."""

    @abstractmethod
    async def get(self, portfolio_id: int, asset: str) -> AssetHolding | None:
        """Return the holding, or None when the portfolio does not hold the asset."""

    @abstractmethod
    async def list_for_portfolio(self, portfolio_id: int) -> list[AssetHolding]:
        """Return all holdings of a portfolio in asset-list order."""

    @abstractmethod
    async def save(self, holding: AssetHolding) -> AssetHolding:
        """Insert or replace a holding.

        A new asset is appended to the end of the portfolio's asset list;
        replacing an existing holding keeps its position.
        """

    @abstractmethod
    async def delete(self, portfolio_id: int, asset: str) -> None:
        """Clear the holding and drop the asset from the asset list."""

    async def list_assets(self, portfolio_id: int) -> list[str]:
        """Ordered list of asset ids currently held by the portfolio."""
        return [h.asset for h in await self.list_for_portfolio(portfolio_id)]

    async def count(self, portfolio_id: int) -> int:
        return len(await self.list_for_portfolio(portfolio_id))
