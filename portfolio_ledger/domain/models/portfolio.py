"""Portfolio and holding domain models.

A Portfolio is the aggregate root; its AssetHoldings are stored separately,
keyed by (portfolio_id, asset).  A holding exists only while its amount is
positive; a zero amount means the record is cleared and the asset dropped
from the portfolio's asset list.

Values are USD-equivalent, 18-decimal fixed point integers (see PRECISION).
"""

from __future__ import annotations

from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field

from .policy import BPS_DENOMINATOR, PRECISION


def value_of(amount: int, price: int) -> int:
    """Fixed-point value of `amount` units at `price`."""
    return amount * price // PRECISION


def allocation_bps(value: int, total_value: int) -> int:
    """Share of total_value in basis points; 0 when the total is zero."""
    if total_value == 0:
        return 0
    return value * BPS_DENOMINATOR // total_value


class AssetAllocation(BaseModel):
    """One row of a portfolio's allocation snapshot.

    Rebuilt wholesale on every successful rebalance; a reporting cache only.
    """

    model_config = ConfigDict(frozen=True)

    asset: str
    target_allocation_bps: int = Field(ge=0, le=BPS_DENOMINATOR)
    current_value: int = Field(ge=0)
    target_value: int = Field(ge=0)
    last_rebalance_time: datetime


class Portfolio(BaseModel):
    """A user's multi-asset portfolio record.

    portfolio_id is 0 until the repository assigns the next id on create;
    ids are monotonic and never reused.
    total_value is a cache of the sum of holding values, refreshed by the
    valuation engine.
    last_rebalance_time is None until the first successful rebalance.
    """

    model_config = ConfigDict(validate_assignment=True)

    portfolio_id: int = Field(default=0, ge=0)
    owner: str = Field(min_length=1)
    name: str = Field(min_length=1)
    allocations: list[AssetAllocation] = Field(default_factory=list)
    total_value: int = Field(default=0, ge=0)
    last_rebalance_time: datetime | None = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    is_active: bool = True
    risk_level: int = Field(ge=1, le=10)
    rebalance_threshold_bps: int = Field(ge=0, le=5_000)

    @classmethod
    def create(
        cls,
        owner: str,
        name: str,
        risk_level: int,
        rebalance_threshold_bps: int,
        created_at: datetime,
    ) -> Portfolio:
        """Named constructor for a fresh, empty, unsaved portfolio."""
        return cls(
            owner=owner,
            name=name,
            risk_level=risk_level,
            rebalance_threshold_bps=rebalance_threshold_bps,
            created_at=created_at,
        )


class AssetHolding(BaseModel):
    """Position of one asset inside one portfolio.

    target_allocation_bps is the desired weight, bounded to [100, 5000] by the
    service on every write.  current_allocation_bps and last_price are derived
    by the valuation engine and never set directly by callers.
    unrealized_pnl is a non-negative counter; losses saturate at zero.
    """

    model_config = ConfigDict(validate_assignment=True)

    portfolio_id: int = Field(ge=0)
    asset: str = Field(min_length=1)
    amount: int = Field(ge=0)
    target_allocation_bps: int = Field(ge=0, le=BPS_DENOMINATOR)
    current_allocation_bps: int = Field(default=0, ge=0, le=BPS_DENOMINATOR)
    last_price: int = Field(default=0, ge=0)
    unrealized_pnl: int = Field(default=0, ge=0)

    def value_at(self, price: int) -> int:
        return value_of(self.amount, price)
