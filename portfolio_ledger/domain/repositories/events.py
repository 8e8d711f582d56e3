"""Event log repository interface."""

from __future__ import annotations

from abc import ABC, abstractmethod

from portfolio_ledger.domain.models.events import LedgerEvent


class EventRepository(ABC):
    """Append-only audit log of ledger events.

    Events appended inside a unit of work become visible only on commit.
    """

    @abstractmethod
    async def append(self, event: LedgerEvent) -> LedgerEvent: ...

    @abstractmethod
    async def list_for_portfolio(
        self, portfolio_id: int, limit: int = 100, offset: int = 0
    ) -> list[LedgerEvent]:
        """Return a page of a portfolio's events, oldest first."""
