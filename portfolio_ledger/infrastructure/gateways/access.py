"""In-process role registry."""

from __future__ import annotations

from collections import defaultdict

from portfolio_ledger.domain.gateways.access import CapabilityCheck
from portfolio_ledger.domain.models.enums import Role


class RoleRegistry(CapabilityCheck):
    def __init__(self, grants: dict[Role, set[str]] | None = None) -> None:
        self._members: dict[Role, set[str]] = defaultdict(set)
        for role, members in (grants or {}).items():
            self._members[role] |= members

    def grant(self, role: Role, account: str) -> None:
        self._members[role].add(account)

    def revoke(self, role: Role, account: str) -> None:
        self._members[role].discard(account)

    def has_role(self, role: Role, caller: str) -> bool:
        return caller in self._members[role]
