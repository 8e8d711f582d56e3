"""Ledger schema — portfolios, holdings, allocations, metrics, allow-list,
protocol counters and the event log.

Revision ID: 0001
Revises:
Create Date: 2026-10-18
"""

from __future__ import annotations

from typing import Sequence, Union

import sqlalchemy as sa

from alembic import op

revision: str = "0001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

# 18-decimal fixed point amounts, stored unscaled
UINT256 = sa.Numeric(78, 0)


def upgrade() -> None:
    # ------------------------------------------------------------------ #
    # 1. PORTFOLIO LAYER                                                   #
    # ------------------------------------------------------------------ #

    op.create_table(
        "portfolios",
        sa.Column("portfolio_id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("owner", sa.Text, nullable=False),
        sa.Column("name", sa.Text, nullable=False),
        sa.Column("total_value", UINT256, nullable=False, server_default="0"),
        sa.Column("last_rebalance_time", sa.DateTime(timezone=True), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.Column("is_active", sa.Boolean, nullable=False, server_default=sa.true()),
        sa.Column("risk_level", sa.SmallInteger, nullable=False),
        sa.Column("rebalance_threshold_bps", sa.Integer, nullable=False),
        sa.CheckConstraint("risk_level BETWEEN 1 AND 10", name="ck_portfolios_risk_level"),
        sa.CheckConstraint(
            "rebalance_threshold_bps BETWEEN 0 AND 5000",
            name="ck_portfolios_rebalance_threshold",
        ),
    )
    op.create_index("ix_portfolios_owner", "portfolios", ["owner"])

    op.create_table(
        "portfolio_allocations",
        sa.Column(
            "portfolio_id",
            sa.Integer,
            sa.ForeignKey("portfolios.portfolio_id", ondelete="CASCADE"),
            primary_key=True,
        ),
        sa.Column("asset", sa.Text, primary_key=True),
        sa.Column("position", sa.Integer, nullable=False),
        sa.Column("target_allocation_bps", sa.Integer, nullable=False),
        sa.Column("current_value", UINT256, nullable=False),
        sa.Column("target_value", UINT256, nullable=False),
        sa.Column("last_rebalance_time", sa.DateTime(timezone=True), nullable=False),
    )

    op.create_table(
        "asset_holdings",
        sa.Column(
            "portfolio_id",
            sa.Integer,
            sa.ForeignKey("portfolios.portfolio_id", ondelete="CASCADE"),
            primary_key=True,
        ),
        sa.Column("asset", sa.Text, primary_key=True),
        sa.Column("position", sa.Integer, nullable=False),
        sa.Column("amount", UINT256, nullable=False),
        sa.Column("target_allocation_bps", sa.Integer, nullable=False),
        sa.Column("current_allocation_bps", sa.Integer, nullable=False, server_default="0"),
        sa.Column("last_price", UINT256, nullable=False, server_default="0"),
        sa.Column("unrealized_pnl", UINT256, nullable=False, server_default="0"),
        sa.CheckConstraint("amount >= 0", name="ck_asset_holdings_amount"),
        sa.CheckConstraint("unrealized_pnl >= 0", name="ck_asset_holdings_pnl"),
    )

    op.create_table(
        "performance_metrics",
        sa.Column(
            "portfolio_id",
            sa.Integer,
            sa.ForeignKey("portfolios.portfolio_id", ondelete="CASCADE"),
            primary_key=True,
        ),
        sa.Column("total_return_bps", sa.BigInteger, nullable=False),
        sa.Column("daily_return_bps", sa.BigInteger, nullable=True),
        sa.Column("weekly_return_bps", sa.BigInteger, nullable=True),
        sa.Column("monthly_return_bps", sa.BigInteger, nullable=True),
        sa.Column("yearly_return_bps", sa.BigInteger, nullable=True),
        sa.Column("volatility", sa.BigInteger, nullable=False),
        sa.Column("sharpe_ratio", sa.BigInteger, nullable=False),
        sa.Column("max_drawdown_bps", sa.BigInteger, nullable=False),
        sa.Column("risk_score", sa.Integer, nullable=False),
        sa.Column("last_updated", sa.DateTime(timezone=True), nullable=False),
    )

    # ------------------------------------------------------------------ #
    # 2. PROTOCOL LAYER                                                    #
    # ------------------------------------------------------------------ #

    op.create_table(
        "supported_assets",
        sa.Column("asset", sa.Text, primary_key=True),
    )

    op.create_table(
        "protocol_state",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("total_value_locked", UINT256, nullable=False, server_default="0"),
    )

    op.create_table(
        "ledger_events",
        sa.Column("event_id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("event_type", sa.Text, nullable=False),
        sa.Column(
            "portfolio_id",
            sa.Integer,
            sa.ForeignKey("portfolios.portfolio_id"),
            nullable=True,
        ),
        sa.Column("timestamp", sa.DateTime(timezone=True), nullable=False),
        sa.Column("payload", sa.JSON, nullable=False),
    )
    op.create_index("ix_ledger_events_portfolio_id", "ledger_events", ["portfolio_id"])


def downgrade() -> None:
    op.drop_index("ix_ledger_events_portfolio_id", table_name="ledger_events")
    op.drop_index("ix_portfolios_owner", table_name="portfolios")

    op.drop_table("ledger_events")
    op.drop_table("protocol_state")
    op.drop_table("supported_assets")
    op.drop_table("performance_metrics")
    op.drop_table("asset_holdings")
    op.drop_table("portfolio_allocations")
    op.drop_table("portfolios")
