"""Tests for portfolio_ledger/domain/services/planner.py."""

from datetime import datetime, timedelta, timezone

from portfolio_ledger.domain.models.enums import ActionType
from portfolio_ledger.domain.models.policy import RebalancePolicy
from portfolio_ledger.domain.models.portfolio import AssetHolding, Portfolio
from portfolio_ledger.domain.services.planner import RebalancePlanner
from portfolio_ledger.infrastructure.gateways.prices import StaticPriceClient

E18 = 10**18
NOW = datetime(2025, 6, 1, 12, tzinfo=timezone.utc)


def _prices(max_age: timedelta = timedelta(hours=1), **quotes: int) -> StaticPriceClient:
    client = StaticPriceClient(max_age=max_age, clock=lambda: NOW)
    for asset, price in quotes.items():
        client.set_price(asset, price)
    return client


def _portfolio(total_value: int = 100 * E18, threshold: int = 500) -> Portfolio:
    return Portfolio(
        portfolio_id=1,
        owner="alice",
        name="Core",
        total_value=total_value,
        risk_level=5,
        rebalance_threshold_bps=threshold,
        created_at=NOW,
    )


def _holding(asset: str, amount: int, target: int, current: int = 0, **overrides) -> AssetHolding:
    defaults = {
        "portfolio_id": 1,
        "asset": asset,
        "amount": amount,
        "target_allocation_bps": target,
        "current_allocation_bps": current,
        "last_price": E18,
    }
    defaults.update(overrides)
    return AssetHolding(**defaults)


def _drifted() -> list[AssetHolding]:
    # 85 / 15 against a 70 / 30 target at a price of 1
    return [_holding("A", 85 * E18, 7_000, 8_500), _holding("B", 15 * E18, 3_000, 1_500)]


def _planner(prices: StaticPriceClient, **policy) -> RebalancePlanner:
    return RebalancePlanner(prices, RebalancePolicy(**policy))


# --- needs_rebalance ---

def test_needs_rebalance_when_deviation_exceeds_threshold():
    planner = _planner(_prices())
    assert planner.needs_rebalance(_portfolio(), _drifted()) is True


def test_needs_rebalance_false_at_exact_threshold():
    holdings = [_holding("A", 55 * E18, 5_000, 5_500), _holding("B", 45 * E18, 5_000, 4_500)]
    assert _planner(_prices()).needs_rebalance(_portfolio(), holdings) is False


def test_needs_rebalance_false_without_holdings():
    assert _planner(_prices()).needs_rebalance(_portfolio(), []) is False


# --- plan: sizing, slippage, scaling ---

async def test_plan_sells_overweight_asset_less_slippage():
    result = await _planner(_prices(A=E18, B=E18)).plan(_portfolio(), _drifted(), NOW)
    (sell,) = result.plan.sells
    assert sell.asset == "A"
    assert sell.amount == 147 * 10**17  # 15 less 2 %


async def test_plan_scales_buys_to_sell_proceeds():
    result = await _planner(_prices(A=E18, B=E18)).plan(_portfolio(), _drifted(), NOW)
    (buy,) = result.plan.buys
    assert buy.asset == "B"
    assert buy.amount == 147 * 10**17  # 15.3 scaled by 14.7 / 15.3
    assert buy.value == 147 * 10**17


async def test_plan_records_scaling_factor():
    plan = (await _planner(_prices(A=E18, B=E18)).plan(_portfolio(), _drifted(), NOW)).plan
    assert plan.total_sell_value == 147 * 10**17
    assert plan.total_buy_value == 153 * 10**17
    assert (plan.buy_scale_num, plan.buy_scale_den) == (147 * 10**17, 153 * 10**17)


async def test_plan_buys_never_exceed_sells():
    plan = (await _planner(_prices(A=E18, B=E18)).plan(_portfolio(), _drifted(), NOW)).plan
    assert sum(a.value for a in plan.buys) <= sum(a.value for a in plan.sells)


async def test_plan_without_slippage_is_exact():
    plan = (
        await _planner(_prices(A=E18, B=E18), slippage_bps=0).plan(_portfolio(), _drifted(), NOW)
    ).plan
    assert [(a.action, a.amount) for a in plan.actions] == [
        (ActionType.SELL, 15 * E18),
        (ActionType.BUY, 15 * E18),
    ]
    assert (plan.buy_scale_num, plan.buy_scale_den) == (1, 1)


async def test_plan_skips_assets_within_threshold():
    holdings = _drifted() + [_holding("C", 0, 0, 0)]
    plan = (await _planner(_prices(A=E18, B=E18, C=E18)).plan(_portfolio(), holdings, NOW)).plan
    assert "C" not in {a.asset for a in plan.actions}


async def test_plan_with_zero_total_value_has_no_actions():
    plan = (
        await _planner(_prices(A=E18, B=E18)).plan(_portfolio(total_value=0), _drifted(), NOW)
    ).plan
    assert plan.is_empty


async def test_plan_drops_buys_without_sells():
    # only the underweight asset has a fresh price
    prices = _prices(A=E18, B=E18)
    prices.set_price("A", E18, timestamp=NOW - timedelta(hours=2))
    plan = (await _planner(prices).plan(_portfolio(), _drifted(), NOW)).plan
    assert plan.is_empty
    assert plan.buy_scale_num == 0


# --- plan: price gates ---

async def test_plan_skips_asset_rejected_by_feed_staleness():
    prices = _prices(A=E18, B=E18)
    prices.set_price("B", E18, timestamp=NOW - timedelta(hours=2))
    plan = (await _planner(prices).plan(_portfolio(), _drifted(), NOW)).plan
    assert plan.skipped_assets == ["B"]
    assert [a.asset for a in plan.actions] == ["A"]


async def test_plan_skips_asset_older_than_policy_max_age():
    prices = _prices(max_age=timedelta(days=1), A=E18, B=E18)
    prices.set_price("B", E18, timestamp=NOW - timedelta(hours=2))
    plan = (await _planner(prices).plan(_portfolio(), _drifted(), NOW)).plan
    assert plan.skipped_assets == ["B"]


async def test_plan_skips_low_confidence_price():
    prices = _prices(A=E18, B=E18)
    prices.set_price("A", E18, confidence=8_999)
    plan = (await _planner(prices).plan(_portfolio(), _drifted(), NOW)).plan
    assert plan.skipped_assets == ["A"]
    assert plan.is_empty


async def test_plan_accepts_confidence_at_floor():
    prices = _prices(A=E18, B=E18)
    prices.set_price("A", E18, confidence=9_000)
    plan = (await _planner(prices).plan(_portfolio(), _drifted(), NOW)).plan
    assert plan.skipped_assets == []


# --- plan: unrealized P&L ---

async def test_plan_accumulates_gain_since_last_price():
    holdings = [_holding("A", 10 * E18, 5_000, 5_000, last_price=E18, unrealized_pnl=E18)]
    result = await _planner(_prices(A=2 * E18)).plan(_portfolio(), holdings, NOW)
    assert result.holdings[0].unrealized_pnl == 11 * E18


async def test_plan_loss_saturates_pnl_at_zero():
    holdings = [_holding("A", 10 * E18, 5_000, 5_000, last_price=2 * E18, unrealized_pnl=3 * E18)]
    result = await _planner(_prices(A=E18)).plan(_portfolio(), holdings, NOW)
    assert result.holdings[0].unrealized_pnl == 0


async def test_plan_loss_smaller_than_pnl_is_subtracted():
    holdings = [_holding("A", E18, 5_000, 5_000, last_price=2 * E18, unrealized_pnl=3 * E18)]
    result = await _planner(_prices(A=E18)).plan(_portfolio(), holdings, NOW)
    assert result.holdings[0].unrealized_pnl == 2 * E18


async def test_plan_ignores_pnl_without_previous_price():
    holdings = [_holding("A", 10 * E18, 5_000, 5_000, last_price=0)]
    result = await _planner(_prices(A=2 * E18)).plan(_portfolio(), holdings, NOW)
    assert result.holdings[0].unrealized_pnl == 0


async def test_plan_keeps_skipped_holdings_unchanged():
    prices = _prices(A=E18, B=E18)
    prices.set_price("B", 3 * E18, confidence=0)
    holdings = _drifted()
    result = await _planner(prices).plan(_portfolio(), holdings, NOW)
    assert result.holdings[1] == holdings[1]
