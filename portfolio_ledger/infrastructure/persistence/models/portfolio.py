"""Portfolio layer ORM models: portfolios, portfolio_allocations, asset_holdings."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    DateTime,
    ForeignKey,
    Integer,
    Numeric,
    SmallInteger,
    Text,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from portfolio_ledger.infrastructure.database import Base

# uint256-sized fixed point values (18 decimals, stored unscaled)
Uint256 = Numeric(78, 0)


class Portfolio(Base):
    """A user's portfolio record.

    total_value caches Σ holding values; the holdings are authoritative.
    Rows are never deleted; is_active = false is the soft delete.
    """

    __tablename__ = "portfolios"
    __table_args__ = (
        CheckConstraint("risk_level BETWEEN 1 AND 10", name="ck_portfolios_risk_level"),
        CheckConstraint(
            "rebalance_threshold_bps BETWEEN 0 AND 5000",
            name="ck_portfolios_rebalance_threshold",
        ),
    )

    portfolio_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    owner: Mapped[str] = mapped_column(Text, nullable=False, index=True)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    total_value: Mapped[int] = mapped_column(Uint256, nullable=False, default=0)
    last_rebalance_time: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    risk_level: Mapped[int] = mapped_column(SmallInteger, nullable=False)
    rebalance_threshold_bps: Mapped[int] = mapped_column(Integer, nullable=False)

    allocations: Mapped[list["PortfolioAllocation"]] = relationship(
        back_populates="portfolio",
        cascade="all, delete-orphan",
        order_by="PortfolioAllocation.position",
    )
    holdings: Mapped[list["AssetHolding"]] = relationship(
        back_populates="portfolio",
        cascade="all, delete-orphan",
        order_by="AssetHolding.position",
    )


class PortfolioAllocation(Base):
    """One row of the allocation snapshot, replaced wholesale on every rebalance.

    Composite PK: (portfolio_id, asset).
    """

    __tablename__ = "portfolio_allocations"

    portfolio_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("portfolios.portfolio_id", ondelete="CASCADE"),
        primary_key=True,
    )
    asset: Mapped[str] = mapped_column(Text, primary_key=True)
    position: Mapped[int] = mapped_column(Integer, nullable=False)
    target_allocation_bps: Mapped[int] = mapped_column(Integer, nullable=False)
    current_value: Mapped[int] = mapped_column(Uint256, nullable=False)
    target_value: Mapped[int] = mapped_column(Uint256, nullable=False)
    last_rebalance_time: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False
    )

    portfolio: Mapped["Portfolio"] = relationship(back_populates="allocations")


class AssetHolding(Base):
    """Amount of one asset held by one portfolio.

    position preserves the order in which assets were first deposited.
    A row exists only while amount > 0; enforced at the application layer.
    Composite PK: (portfolio_id, asset).
    """

    __tablename__ = "asset_holdings"
    __table_args__ = (
        CheckConstraint("amount >= 0", name="ck_asset_holdings_amount"),
        CheckConstraint("unrealized_pnl >= 0", name="ck_asset_holdings_pnl"),
    )

    portfolio_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("portfolios.portfolio_id", ondelete="CASCADE"),
        primary_key=True,
    )
    asset: Mapped[str] = mapped_column(Text, primary_key=True)
    position: Mapped[int] = mapped_column(Integer, nullable=False)
    amount: Mapped[int] = mapped_column(Uint256, nullable=False)
    target_allocation_bps: Mapped[int] = mapped_column(Integer, nullable=False)
    current_allocation_bps: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    last_price: Mapped[int] = mapped_column(Uint256, nullable=False, default=0)
    unrealized_pnl: Mapped[int] = mapped_column(Uint256, nullable=False, default=0)

    portfolio: Mapped["Portfolio"] = relationship(back_populates="holdings")
