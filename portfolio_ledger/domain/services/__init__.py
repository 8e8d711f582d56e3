"""Domain services package."""

from .executor import RebalanceExecutor
from .performance import PerformanceCalculator
from .planner import PlanningResult, RebalancePlanner
from .portfolio import PortfolioService
from .valuation import Valuation, ValuationEngine

__all__ = [
    "PerformanceCalculator",
    "PlanningResult",
    "PortfolioService",
    "RebalanceExecutor",
    "RebalancePlanner",
    "Valuation",
    "ValuationEngine",
]
