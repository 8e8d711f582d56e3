"""Domain model package.

All domain objects are pure Python / Pydantic models with no ORM or
infrastructure dependencies.  Import from this package to avoid coupling
application code to individual module paths.
"""

from .enums import ActionType, EventType, Role
from .events import LedgerEvent
from .market_data import PriceQuote
from .performance import PerformanceMetrics
from .policy import BPS_DENOMINATOR, PRECISION, RebalancePolicy
from .portfolio import AssetAllocation, AssetHolding, Portfolio, allocation_bps, value_of
from .rebalance import RebalanceAction, RebalancePlan

__all__ = [
    # enums
    "ActionType",
    "EventType",
    "Role",
    # constants / policy
    "BPS_DENOMINATOR",
    "PRECISION",
    "RebalancePolicy",
    # portfolio
    "AssetAllocation",
    "AssetHolding",
    "Portfolio",
    "allocation_bps",
    "value_of",
    # market data
    "PriceQuote",
    # rebalance
    "RebalanceAction",
    "RebalancePlan",
    # performance
    "PerformanceMetrics",
    # events
    "LedgerEvent",
]
