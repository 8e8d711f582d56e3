"""Portfolio repository interface."""

from __future__ import annotations

from abc import abstractmethod

from portfolio_ledger.domain.models.portfolio import Portfolio

from .base import Repository


class PortfolioRepository(Repository[Portfolio]):
    """Read/write interface for Portfolio aggregates.

    create() assigns the next monotonic portfolio_id; ids are never reused.
    Portfolios are soft-deleted via is_active, so delete() is unsupported.
    """

    async def get(self, id: int) -> Portfolio | None:
        return await self.get_by_id(id)

    @abstractmethod
    async def get_by_id(self, portfolio_id: int) -> Portfolio | None:
        """Return the portfolio with its allocation snapshot, or None."""

    @abstractmethod
    async def list_by_owner(self, owner: str) -> list[Portfolio]:
        """Return every portfolio created by owner, in creation order."""

    async def delete(self, id: int) -> None:
        raise NotImplementedError("Portfolios are never physically deleted")
