"""Tests for portfolio_ledger/domain/models/enums.py."""

from portfolio_ledger.domain.models.enums import ActionType, EventType, Role


def test_action_type_values():
    assert {a.value for a in ActionType} == {"buy", "sell"}


def test_action_type_compares_to_string():
    assert ActionType.SELL == "sell"


def test_role_values():
    assert {r.value for r in Role} == {"admin", "rebalancer"}


def test_event_type_names_match_log_labels():
    assert EventType.ASSET_ADDED == "AssetAdded"
    assert EventType.PORTFOLIO_REBALANCED == "PortfolioRebalanced"
    assert EventType.ALLOCATION_UPDATED == "AllocationUpdated"
    assert EventType.PERFORMANCE_UPDATED == "PerformanceUpdated"
