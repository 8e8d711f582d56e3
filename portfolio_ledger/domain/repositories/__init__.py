"""Domain repository interfaces.

All abstractions are defined here with abc.ABC and @abstractmethod.
Concrete implementations live in portfolio_ledger/infrastructure/ and are
handed to the services through a UnitOfWork factory.

Import from this package rather than individual modules to avoid coupling
services to specific repository module paths.
"""

from .assets import SupportedAssetRepository
from .base import Repository
from .events import EventRepository
from .holdings import HoldingRepository
from .performance import PerformanceRepository
from .portfolios import PortfolioRepository
from .protocol import ProtocolStateRepository
from .unit_of_work import UnitOfWork

__all__ = [
    "Repository",
    "PortfolioRepository",
    "HoldingRepository",
    "PerformanceRepository",
    "SupportedAssetRepository",
    "ProtocolStateRepository",
    "EventRepository",
    "UnitOfWork",
]
