"""Performance metrics repository interface."""

from __future__ import annotations

from abc import ABC, abstractmethod

from portfolio_ledger.domain.models.performance import PerformanceMetrics


class PerformanceRepository(ABC):
    """One current PerformanceMetrics record per portfolio (overwritten on save)."""

    @abstractmethod
    async def get(self, portfolio_id: int) -> PerformanceMetrics | None:
        """Return the latest metrics, or None if never computed."""

    @abstractmethod
    async def save(self, metrics: PerformanceMetrics) -> PerformanceMetrics:
        """Insert or replace the metrics for metrics.portfolio_id."""
