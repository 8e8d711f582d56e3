"""Interfaces to the collaborators the engine depends on but does not own.

Price feed, custody, capability checks, circuit breaker and the per-portfolio
mutation guard are injected into the service rather than inherited.
"""

from .access import CapabilityCheck
from .circuit_breaker import CircuitBreaker
from .custody import AssetCustody
from .locks import REGISTRY_KEY, MutationGuard
from .prices import PriceClient

__all__ = [
    "AssetCustody",
    "CapabilityCheck",
    "CircuitBreaker",
    "MutationGuard",
    "PriceClient",
    "REGISTRY_KEY",
]
