"""Domain enumerations for the portfolio ledger.

All string-valued enums use str mixin so they serialize cleanly to JSON
and remain comparable to plain strings (Pydantic default behaviour).
"""

from enum import Enum


class ActionType(str, Enum):
    BUY = "buy"
    SELL = "sell"


class Role(str, Enum):
    """Capabilities granted independently of portfolio ownership."""

    ADMIN = "admin"            # maintains the supported-asset allow-list
    REBALANCER = "rebalancer"  # may rebalance any portfolio


class EventType(str, Enum):
    PORTFOLIO_CREATED = "PortfolioCreated"
    PORTFOLIO_DEACTIVATED = "PortfolioDeactivated"
    ASSET_ADDED = "AssetAdded"
    ASSET_REMOVED = "AssetRemoved"
    PORTFOLIO_REBALANCED = "PortfolioRebalanced"
    ALLOCATION_UPDATED = "AllocationUpdated"
    PERFORMANCE_UPDATED = "PerformanceUpdated"
    SUPPORTED_ASSET_ADDED = "SupportedAssetAdded"
    SUPPORTED_ASSET_REMOVED = "SupportedAssetRemoved"
