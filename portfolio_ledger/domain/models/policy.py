"""Engine-wide constants.

RebalancePolicy bundles every fixed limit the engine enforces.  The defaults
are the production values; tests and deployments may construct a policy with
different values but the shipped behaviour is exactly the defaults.
"""

from __future__ import annotations

from datetime import timedelta

from pydantic import BaseModel, ConfigDict, Field

PRECISION = 10**18        # fixed-point scale for prices, amounts and values
BPS_DENOMINATOR = 10_000  # 10000 bps = 100 %


class RebalancePolicy(BaseModel):
    """Limits and gates applied by the valuation and rebalancing engine.

    min_confidence_bps / slippage_bps are in basis points.
    max_price_age is the planner's own staleness gate, independent of the
    price feed's protocol-wide maximum age.
    """

    model_config = ConfigDict(frozen=True)

    cooldown: timedelta = timedelta(days=1)
    max_price_age: timedelta = timedelta(hours=1)
    min_confidence_bps: int = Field(default=9_000, ge=0, le=BPS_DENOMINATOR)
    slippage_bps: int = Field(default=200, ge=0, le=BPS_DENOMINATOR)
    performance_interval: timedelta = timedelta(hours=1)
    max_assets: int = Field(default=20, gt=0)
    min_allocation_bps: int = Field(default=100, ge=0)
    max_allocation_bps: int = Field(default=5_000, le=BPS_DENOMINATOR)
    max_total_allocation_bps: int = Field(default=BPS_DENOMINATOR, le=BPS_DENOMINATOR)
    max_threshold_bps: int = Field(default=5_000, le=BPS_DENOMINATOR)
