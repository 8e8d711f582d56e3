"""Performance and risk metrics domain model."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class PerformanceMetrics(BaseModel):
    """Derived return / risk figures for one portfolio.

    All return figures are signed basis points.  Time-scaled returns are a
    linear extrapolation of total_return_bps over the portfolio's age and are
    None until the portfolio is at least one period old.
    volatility is a concentration proxy (Σ allocation² / 10000), not a
    statistical variance.  risk_score is clamped to [0, 1000].
    """

    model_config = ConfigDict(frozen=True)

    portfolio_id: int
    total_return_bps: int
    daily_return_bps: int | None = None
    weekly_return_bps: int | None = None
    monthly_return_bps: int | None = None
    yearly_return_bps: int | None = None
    volatility: int = Field(ge=0)
    sharpe_ratio: int
    max_drawdown_bps: int = Field(ge=0)
    risk_score: int = Field(ge=0, le=1_000)
    last_updated: datetime
