"""Persistence package.

Importing this package registers every ORM mapper with Base.metadata
(required for Alembic autogenerate and SQLAlchemy mapper configuration)
and exports all repository implementations and the DI factory.
"""

from portfolio_ledger.infrastructure.persistence.models import *  # noqa: F401, F403
from portfolio_ledger.infrastructure.persistence.models import __all__ as _orm_all
from portfolio_ledger.infrastructure.persistence.repositories import (
    Repositories,
    SqlEventRepository,
    SqlHoldingRepository,
    SqlPerformanceRepository,
    SqlPortfolioRepository,
    SqlProtocolStateRepository,
    SqlSupportedAssetRepository,
    SqlUnitOfWork,
    get_repositories,
)

__all__ = _orm_all + [
    "Repositories",
    "SqlPortfolioRepository",
    "SqlHoldingRepository",
    "SqlPerformanceRepository",
    "SqlSupportedAssetRepository",
    "SqlProtocolStateRepository",
    "SqlEventRepository",
    "SqlUnitOfWork",
    "get_repositories",
]
