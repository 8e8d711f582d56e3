"""Tests for portfolio_ledger/domain/services/valuation.py."""

from datetime import datetime, timedelta, timezone

from portfolio_ledger.domain.models.portfolio import AssetHolding, Portfolio
from portfolio_ledger.domain.services.valuation import ValuationEngine
from portfolio_ledger.infrastructure.gateways.prices import StaticPriceClient
from portfolio_ledger.infrastructure.memory import InMemoryStore, InMemoryUnitOfWork

E18 = 10**18
NOW = datetime(2025, 6, 1, 12, tzinfo=timezone.utc)


def _holding(asset: str, amount: int) -> AssetHolding:
    return AssetHolding(portfolio_id=1, asset=asset, amount=amount, target_allocation_bps=5_000)


def _engine(**quotes: int) -> ValuationEngine:
    prices = StaticPriceClient(clock=lambda: NOW)
    for asset, price in quotes.items():
        prices.set_price(asset, price)
    return ValuationEngine(prices)


async def test_value_sums_holding_values():
    valuation = await _engine(A=2 * E18, B=E18).value([_holding("A", 3 * E18), _holding("B", 4 * E18)])
    assert valuation.total_value == 10 * E18


async def test_value_sets_allocations_and_prices():
    valuation = await _engine(A=2 * E18, B=E18).value([_holding("A", 3 * E18), _holding("B", 4 * E18)])
    assert [(h.current_allocation_bps, h.last_price) for h in valuation.holdings] == [
        (6_000, 2 * E18),
        (4_000, E18),
    ]


async def test_value_of_empty_portfolio_is_zero():
    valuation = await _engine().value([])
    assert valuation.total_value == 0
    assert valuation.holdings == []


async def test_value_with_zero_prices_has_zero_allocations():
    valuation = await _engine(A=0).value([_holding("A", E18)])
    assert valuation.holdings[0].current_allocation_bps == 0


async def test_value_accepts_stale_prices():
    prices = StaticPriceClient(clock=lambda: NOW)
    prices.set_price("A", E18, timestamp=NOW - timedelta(days=3))
    valuation = await ValuationEngine(prices).value([_holding("A", E18)])
    assert valuation.total_value == E18


async def test_refresh_portfolio_value_stages_total_and_holdings():
    portfolio = Portfolio(
        portfolio_id=1, owner="alice", name="Core", risk_level=5, rebalance_threshold_bps=500
    )
    store = InMemoryStore(
        portfolios={1: portfolio},
        holdings={1: {"A": _holding("A", 3 * E18), "B": _holding("B", 4 * E18)}},
    )
    uow = InMemoryUnitOfWork(store)
    refreshed = await _engine(A=2 * E18, B=E18).refresh_portfolio_value(uow, portfolio)
    assert refreshed.total_value == 10 * E18
    assert (await uow.holdings.get(1, "A")).current_allocation_bps == 6_000
    assert store.portfolios[1].total_value == 0
