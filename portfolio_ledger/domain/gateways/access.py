"""Capability check interface."""

from __future__ import annotations

from abc import ABC, abstractmethod

from portfolio_ledger.domain.models.enums import Role
from portfolio_ledger.domain.models.portfolio import Portfolio


class CapabilityCheck(ABC):
    """Answers ownership and role questions for a caller identity."""

    def is_owner(self, portfolio: Portfolio, caller: str) -> bool:
        return portfolio.owner == caller

    @abstractmethod
    def has_role(self, role: Role, caller: str) -> bool: ...
