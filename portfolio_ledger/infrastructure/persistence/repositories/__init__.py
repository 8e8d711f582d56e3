"""Concrete SQLAlchemy repository implementations.

Exports all SqlRepository classes, the get_repositories() factory and the
SqlUnitOfWork that binds them to one session per operation.
"""

from __future__ import annotations

from dataclasses import dataclass

from sqlalchemy.ext.asyncio import AsyncSession

from .holdings import SqlHoldingRepository
from .ledger import SqlEventRepository, SqlProtocolStateRepository, SqlSupportedAssetRepository
from .performance import SqlPerformanceRepository
from .portfolios import SqlPortfolioRepository


@dataclass
class Repositories:
    """All repository instances bound to a single AsyncSession."""

    portfolios: SqlPortfolioRepository
    holdings: SqlHoldingRepository
    performance: SqlPerformanceRepository
    supported_assets: SqlSupportedAssetRepository
    protocol: SqlProtocolStateRepository
    events: SqlEventRepository


def get_repositories(session: AsyncSession) -> Repositories:
    """Construct all repositories bound to the given session.

        async with AsyncSessionLocal() as session:
            repos = get_repositories(session)
            portfolio = await repos.portfolios.get_by_id(portfolio_id)
    """
    return Repositories(
        portfolios=SqlPortfolioRepository(session),
        holdings=SqlHoldingRepository(session),
        performance=SqlPerformanceRepository(session),
        supported_assets=SqlSupportedAssetRepository(session),
        protocol=SqlProtocolStateRepository(session),
        events=SqlEventRepository(session),
    )


from .unit_of_work import SqlUnitOfWork  # noqa: E402

__all__ = [
    "SqlPortfolioRepository",
    "SqlHoldingRepository",
    "SqlPerformanceRepository",
    "SqlSupportedAssetRepository",
    "SqlProtocolStateRepository",
    "SqlEventRepository",
    "SqlUnitOfWork",
    "Repositories",
    "get_repositories",
]
