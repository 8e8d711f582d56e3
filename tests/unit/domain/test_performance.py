"""Tests for portfolio_ledger/domain/models/performance.py."""

from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from portfolio_ledger.domain.models.performance import PerformanceMetrics

NOW = datetime(2025, 6, 1, tzinfo=timezone.utc)


def _metrics(**overrides) -> PerformanceMetrics:
    defaults = {
        "portfolio_id": 1,
        "total_return_bps": -250,
        "volatility": 5_000,
        "sharpe_ratio": -50,
        "max_drawdown_bps": 0,
        "risk_score": 600,
        "last_updated": NOW,
    }
    defaults.update(overrides)
    return PerformanceMetrics(**defaults)


def test_period_returns_default_to_none():
    metrics = _metrics()
    assert metrics.daily_return_bps is None
    assert metrics.yearly_return_bps is None


def test_negative_returns_are_allowed():
    assert _metrics().total_return_bps == -250


def test_risk_score_above_1000_raises():
    with pytest.raises(ValidationError):
        _metrics(risk_score=1_001)


def test_negative_volatility_raises():
    with pytest.raises(ValidationError):
        _metrics(volatility=-1)
