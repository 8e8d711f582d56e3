"""Circuit breaker interface."""

from __future__ import annotations

from abc import ABC, abstractmethod


class CircuitBreaker(ABC):
    """Protocol-wide emergency halt flag, consulted before every mutation."""

    @abstractmethod
    def is_paused(self) -> bool: ...
