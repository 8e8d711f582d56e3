"""Ledger-wide ORM models: performance_metrics, supported_assets,
protocol_state, ledger_events."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Optional

from sqlalchemy import JSON, BigInteger, DateTime, ForeignKey, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column

from portfolio_ledger.infrastructure.database import Base

from .portfolio import Uint256


class PerformanceMetrics(Base):
    """Latest performance figures per portfolio (one row, overwritten)."""

    __tablename__ = "performance_metrics"

    portfolio_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("portfolios.portfolio_id", ondelete="CASCADE"),
        primary_key=True,
    )
    total_return_bps: Mapped[int] = mapped_column(BigInteger, nullable=False)
    daily_return_bps: Mapped[Optional[int]] = mapped_column(BigInteger, nullable=True)
    weekly_return_bps: Mapped[Optional[int]] = mapped_column(BigInteger, nullable=True)
    monthly_return_bps: Mapped[Optional[int]] = mapped_column(BigInteger, nullable=True)
    yearly_return_bps: Mapped[Optional[int]] = mapped_column(BigInteger, nullable=True)
    volatility: Mapped[int] = mapped_column(BigInteger, nullable=False)
    sharpe_ratio: Mapped[int] = mapped_column(BigInteger, nullable=False)
    max_drawdown_bps: Mapped[int] = mapped_column(BigInteger, nullable=False)
    risk_score: Mapped[int] = mapped_column(Integer, nullable=False)
    last_updated: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)


class SupportedAsset(Base):
    """Allow-list of assets that may be deposited."""

    __tablename__ = "supported_assets"

    asset: Mapped[str] = mapped_column(Text, primary_key=True)


class ProtocolState(Base):
    """Singleton row (id = 1) holding protocol-wide counters."""

    __tablename__ = "protocol_state"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    total_value_locked: Mapped[int] = mapped_column(Uint256, nullable=False, default=0)


class LedgerEvent(Base):
    """Append-only audit log; portfolio_id is null for protocol-level events."""

    __tablename__ = "ledger_events"

    event_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    event_type: Mapped[str] = mapped_column(Text, nullable=False)
    portfolio_id: Mapped[Optional[int]] = mapped_column(
        Integer, ForeignKey("portfolios.portfolio_id"), nullable=True, index=True
    )
    timestamp: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    payload: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)
