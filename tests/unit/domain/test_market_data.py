"""Tests for portfolio_ledger/domain/models/market_data.py."""

from datetime import datetime, timedelta, timezone

import pytest
from pydantic import ValidationError

from portfolio_ledger.domain.models.market_data import PriceQuote

NOW = datetime(2025, 6, 1, 12, 0, tzinfo=timezone.utc)


def _quote(**overrides) -> PriceQuote:
    defaults = {"asset": "WETH", "price": 2_000 * 10**18, "timestamp": NOW, "confidence": 9_500}
    defaults.update(overrides)
    return PriceQuote(**defaults)


def test_age_at_counts_seconds():
    assert _quote().age_at(NOW + timedelta(minutes=5)) == 300.0


def test_age_at_is_zero_at_observation_time():
    assert _quote().age_at(NOW) == 0.0


def test_confidence_above_10000_raises():
    with pytest.raises(ValidationError):
        _quote(confidence=10_001)


def test_negative_price_raises():
    with pytest.raises(ValidationError):
        _quote(price=-1)


def test_quote_is_frozen():
    quote = _quote()
    with pytest.raises(ValidationError):
        quote.price = 1  # type: ignore[misc]
