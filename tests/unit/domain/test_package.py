"""Tests for portfolio_ledger/domain/models/__init__.py — package exports."""

from portfolio_ledger.domain.models import __all__ as domain_all
from portfolio_ledger.domain.models import (
    ActionType,
    AssetHolding,
    LedgerEvent,
    PerformanceMetrics,
    Portfolio,
    PriceQuote,
    RebalancePlan,
    RebalancePolicy,
)


def test_domain_models_exports_expected_names():
    assert set(domain_all) == {
        "ActionType",
        "EventType",
        "Role",
        "BPS_DENOMINATOR",
        "PRECISION",
        "RebalancePolicy",
        "AssetAllocation",
        "AssetHolding",
        "Portfolio",
        "allocation_bps",
        "value_of",
        "PriceQuote",
        "RebalanceAction",
        "RebalancePlan",
        "PerformanceMetrics",
        "LedgerEvent",
    }


def test_domain_models_exports_16_names():
    assert len(domain_all) == 16


def test_action_type_importable_from_package():
    assert ActionType.BUY == "buy"


def test_models_importable_from_package():
    for model in (
        AssetHolding,
        LedgerEvent,
        PerformanceMetrics,
        Portfolio,
        PriceQuote,
        RebalancePlan,
        RebalancePolicy,
    ):
        assert model.__name__ in domain_all
