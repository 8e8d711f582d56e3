"""Tests for RoleRegistry and ToggleCircuitBreaker."""

from portfolio_ledger.domain.models.enums import Role
from portfolio_ledger.infrastructure.gateways.access import RoleRegistry
from portfolio_ledger.infrastructure.gateways.circuit_breaker import ToggleCircuitBreaker


def test_initial_grants_are_honoured():
    assert RoleRegistry({Role.ADMIN: {"root"}}).has_role(Role.ADMIN, "root") is True


def test_roles_are_independent():
    assert RoleRegistry({Role.ADMIN: {"root"}}).has_role(Role.REBALANCER, "root") is False


def test_grant_and_revoke():
    registry = RoleRegistry()
    registry.grant(Role.REBALANCER, "keeper")
    assert registry.has_role(Role.REBALANCER, "keeper") is True
    registry.revoke(Role.REBALANCER, "keeper")
    assert registry.has_role(Role.REBALANCER, "keeper") is False


def test_circuit_breaker_starts_unpaused():
    assert ToggleCircuitBreaker().is_paused() is False


def test_circuit_breaker_toggles():
    breaker = ToggleCircuitBreaker()
    breaker.pause()
    assert breaker.is_paused() is True
    breaker.unpause()
    assert breaker.is_paused() is False
