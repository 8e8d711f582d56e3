"""In-process collaborator implementations for local runs and tests."""

from .access import RoleRegistry
from .circuit_breaker import ToggleCircuitBreaker
from .custody import InMemoryCustody
from .locks import AsyncioMutationGuard
from .prices import StaticPriceClient

__all__ = [
    "AsyncioMutationGuard",
    "InMemoryCustody",
    "RoleRegistry",
    "StaticPriceClient",
    "ToggleCircuitBreaker",
]
