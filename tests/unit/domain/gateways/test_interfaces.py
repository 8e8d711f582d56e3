"""Tests for the collaborator interfaces in portfolio_ledger/domain/gateways/."""

import pytest

from portfolio_ledger.domain.gateways import (
    REGISTRY_KEY,
    AssetCustody,
    CapabilityCheck,
    CircuitBreaker,
    MutationGuard,
    PriceClient,
)
from portfolio_ledger.domain.models.portfolio import Portfolio


@pytest.mark.parametrize(
    "gateway", [AssetCustody, CapabilityCheck, CircuitBreaker, MutationGuard, PriceClient]
)
def test_gateway_is_abstract(gateway):
    with pytest.raises(TypeError):
        gateway()  # type: ignore[abstract]


def _capabilities() -> CapabilityCheck:
    class _NoRoles(CapabilityCheck):
        def has_role(self, role, caller): return False

    return _NoRoles()


def _portfolio() -> Portfolio:
    return Portfolio(owner="alice", name="Core", risk_level=5, rebalance_threshold_bps=500)


def test_is_owner_matches_owner():
    assert _capabilities().is_owner(_portfolio(), "alice") is True


def test_is_owner_rejects_other_caller():
    assert _capabilities().is_owner(_portfolio(), "bob") is False


def test_registry_key_is_not_a_portfolio_id():
    assert not isinstance(REGISTRY_KEY, int)
