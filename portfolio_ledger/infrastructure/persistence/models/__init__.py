"""ORM model registry — imports all layer modules so every mapper class is
registered with Base.metadata before Alembic or SQLAlchemy runs.

Import order follows the dependency graph (referenced tables first).
"""

from portfolio_ledger.infrastructure.persistence.models.portfolio import (
    AssetHolding,
    Portfolio,
    PortfolioAllocation,
)
from portfolio_ledger.infrastructure.persistence.models.ledger import (
    LedgerEvent,
    PerformanceMetrics,
    ProtocolState,
    SupportedAsset,
)

__all__ = [
    # Portfolio
    "Portfolio",
    "PortfolioAllocation",
    "AssetHolding",
    # Ledger
    "PerformanceMetrics",
    "SupportedAsset",
    "ProtocolState",
    "LedgerEvent",
]
