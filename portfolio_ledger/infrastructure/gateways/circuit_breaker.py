"""In-process circuit breaker."""

from __future__ import annotations

import logging

from portfolio_ledger.domain.gateways.circuit_breaker import CircuitBreaker

logger = logging.getLogger(__name__)


class ToggleCircuitBreaker(CircuitBreaker):
    def __init__(self, paused: bool = False) -> None:
        self._paused = paused

    def pause(self) -> None:
        self._paused = True
        logger.warning("Circuit breaker engaged: mutations are halted")

    def unpause(self) -> None:
        self._paused = False
        logger.info("Circuit breaker released")

    def is_paused(self) -> bool:
        return self._paused
