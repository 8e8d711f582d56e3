"""Protocol-wide counters repository interface."""

from __future__ import annotations

from abc import ABC, abstractmethod


class ProtocolStateRepository(ABC):
    """Running total-value-locked counter across all portfolios.

    The counter is changed only by deltas so that concurrent mutations of
    different portfolios never overwrite each other's contribution.
    """

    @abstractmethod
    async def get_total_value_locked(self) -> int: ...

    @abstractmethod
    async def adjust_total_value_locked(self, delta: int) -> int:
        """Add delta (may be negative) and return the new total.

        The total saturates at zero instead of going negative.
        """
