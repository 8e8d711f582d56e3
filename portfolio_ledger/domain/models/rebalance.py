"""Rebalance plan value objects.

A RebalancePlan is the planner's output and the executor's input.  Amounts are
asset units and values are USD-equivalent, both 18-decimal fixed point.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from .enums import ActionType


class RebalanceAction(BaseModel):
    """A single buy or sell of one asset.

    amount already includes the slippage buffer (reduced for sells,
    increased for buys); value is amount × price at planning time.
    """

    model_config = ConfigDict(frozen=True)

    asset: str
    action: ActionType
    amount: int = Field(ge=0)
    value: int = Field(ge=0)
    price: int = Field(gt=0)

    @property
    def is_sell(self) -> bool:
        return self.action == ActionType.SELL


class RebalancePlan(BaseModel):
    """The set of actions computed for one rebalance of one portfolio.

    skipped_assets lists assets whose price failed the staleness or
    confidence gate; they receive no action this cycle.
    buy_scale_num / buy_scale_den record the feasibility scaling applied to
    buys (1/1 when sells fund all buys, 0/1 when there are no sells).
    """

    model_config = ConfigDict(frozen=True)

    portfolio_id: int
    total_value: int = Field(ge=0)
    actions: list[RebalanceAction] = Field(default_factory=list)
    skipped_assets: list[str] = Field(default_factory=list)
    total_sell_value: int = Field(default=0, ge=0)
    total_buy_value: int = Field(default=0, ge=0)
    buy_scale_num: int = Field(default=1, ge=0)
    buy_scale_den: int = Field(default=1, gt=0)

    @property
    def sells(self) -> list[RebalanceAction]:
        return [a for a in self.actions if a.action == ActionType.SELL]

    @property
    def buys(self) -> list[RebalanceAction]:
        return [a for a in self.actions if a.action == ActionType.BUY]

    @property
    def is_empty(self) -> bool:
        return not self.actions
