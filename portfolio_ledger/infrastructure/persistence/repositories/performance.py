"""SQLAlchemy implementation of PerformanceRepository."""

from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncSession

from portfolio_ledger.domain.models.performance import PerformanceMetrics as DomainMetrics
from portfolio_ledger.domain.repositories.performance import PerformanceRepository
from portfolio_ledger.infrastructure.persistence.models.ledger import (
    PerformanceMetrics as OrmMetrics,
)

_FIELDS = (
    "total_return_bps",
    "daily_return_bps",
    "weekly_return_bps",
    "monthly_return_bps",
    "yearly_return_bps",
    "volatility",
    "sharpe_ratio",
    "max_drawdown_bps",
    "risk_score",
    "last_updated",
)


def _metrics_to_domain(row: OrmMetrics) -> DomainMetrics:
    return DomainMetrics(
        portfolio_id=row.portfolio_id,
        **{name: getattr(row, name) for name in _FIELDS},
    )


class SqlPerformanceRepository(PerformanceRepository):
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, portfolio_id: int) -> DomainMetrics | None:
        row = await self._session.get(OrmMetrics, portfolio_id)
        return _metrics_to_domain(row) if row else None

    async def save(self, metrics: DomainMetrics) -> DomainMetrics:
        row = OrmMetrics(
            portfolio_id=metrics.portfolio_id,
            **{name: getattr(metrics, name) for name in _FIELDS},
        )
        await self._session.merge(row)
        return metrics
