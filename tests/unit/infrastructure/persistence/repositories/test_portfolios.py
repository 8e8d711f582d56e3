"""Tests for SqlPortfolioRepository — mapping and unsupported operations."""

from datetime import datetime, timezone
from decimal import Decimal
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest

from portfolio_ledger.domain.models.portfolio import Portfolio
from portfolio_ledger.infrastructure.persistence.repositories.portfolios import (
    SqlPortfolioRepository,
    _portfolio_to_domain,
)

NOW = datetime(2025, 6, 1, tzinfo=timezone.utc)


def _orm_allocation(**overrides):
    defaults = {
        "asset": "WETH",
        "target_allocation_bps": 5_000,
        "current_value": Decimal("70000000000000000000"),
        "target_value": Decimal("50000000000000000000"),
        "last_rebalance_time": NOW,
    }
    defaults.update(overrides)
    return SimpleNamespace(**defaults)


def _orm_portfolio(**overrides):
    defaults = {
        "portfolio_id": 4,
        "owner": "alice",
        "name": "Core",
        "allocations": [_orm_allocation()],
        "total_value": Decimal("100000000000000000000"),
        "last_rebalance_time": None,
        "created_at": NOW,
        "is_active": True,
        "risk_level": 5,
        "rebalance_threshold_bps": 500,
    }
    defaults.update(overrides)
    return SimpleNamespace(**defaults)


# --- mapping ---

def test_portfolio_to_domain_converts_numeric_to_int():
    result = _portfolio_to_domain(_orm_portfolio())
    assert result.total_value == 100 * 10**18
    assert isinstance(result.total_value, int)


def test_portfolio_to_domain_maps_allocations():
    result = _portfolio_to_domain(_orm_portfolio())
    assert result.allocations[0].current_value == 70 * 10**18


def test_portfolio_to_domain_keeps_missing_rebalance_time():
    assert _portfolio_to_domain(_orm_portfolio()).last_rebalance_time is None


def test_portfolio_to_domain_maps_inactive_flag():
    assert _portfolio_to_domain(_orm_portfolio(is_active=False)).is_active is False


# --- writes ---

async def test_create_returns_generated_id():
    session = AsyncMock()
    session.add = MagicMock(side_effect=lambda row: setattr(row, "portfolio_id", 11))
    repo = SqlPortfolioRepository(session)
    created = await repo.create(
        Portfolio(owner="alice", name="Core", risk_level=5, rebalance_threshold_bps=500)
    )
    assert created.portfolio_id == 11
    session.flush.assert_awaited_once()


async def test_update_missing_portfolio_raises():
    session = AsyncMock()
    result = MagicMock()
    result.scalar_one_or_none.return_value = None
    session.execute.return_value = result
    repo = SqlPortfolioRepository(session)
    with pytest.raises(KeyError):
        await repo.update(
            Portfolio(
                portfolio_id=3, owner="alice", name="Core", risk_level=5,
                rebalance_threshold_bps=500,
            )
        )


async def test_delete_raises():
    repo = SqlPortfolioRepository(AsyncMock())
    with pytest.raises(NotImplementedError):
        await repo.delete(1)
