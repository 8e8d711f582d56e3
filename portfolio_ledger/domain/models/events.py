"""Observability events emitted for audit and replay.

Each LedgerEvent is an immutable record appended to the event log inside the
same unit of work as the state change it describes, so an aborted operation
leaves no events behind.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from .enums import EventType


class LedgerEvent(BaseModel):
    """A typed event with a free-form payload.

    portfolio_id is None for protocol-level events (allow-list changes).
    """

    model_config = ConfigDict(frozen=True)

    event_type: EventType
    portfolio_id: int | None = None
    timestamp: datetime
    payload: dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def asset_added(
        cls, portfolio_id: int, asset: str, amount: int, timestamp: datetime
    ) -> LedgerEvent:
        return cls(
            event_type=EventType.ASSET_ADDED,
            portfolio_id=portfolio_id,
            timestamp=timestamp,
            payload={"asset": asset, "amount": amount},
        )

    @classmethod
    def asset_removed(
        cls, portfolio_id: int, asset: str, amount: int, timestamp: datetime
    ) -> LedgerEvent:
        return cls(
            event_type=EventType.ASSET_REMOVED,
            portfolio_id=portfolio_id,
            timestamp=timestamp,
            payload={"asset": asset, "amount": amount},
        )

    @classmethod
    def portfolio_rebalanced(
        cls, portfolio_id: int, total_value: int, timestamp: datetime
    ) -> LedgerEvent:
        return cls(
            event_type=EventType.PORTFOLIO_REBALANCED,
            portfolio_id=portfolio_id,
            timestamp=timestamp,
            payload={"total_value": total_value},
        )

    @classmethod
    def allocation_updated(
        cls, portfolio_id: int, asset: str, old: int, new: int, timestamp: datetime
    ) -> LedgerEvent:
        return cls(
            event_type=EventType.ALLOCATION_UPDATED,
            portfolio_id=portfolio_id,
            timestamp=timestamp,
            payload={"asset": asset, "old": old, "new": new},
        )

    @classmethod
    def performance_updated(
        cls, portfolio_id: int, total_return: int, sharpe_ratio: int, timestamp: datetime
    ) -> LedgerEvent:
        return cls(
            event_type=EventType.PERFORMANCE_UPDATED,
            portfolio_id=portfolio_id,
            timestamp=timestamp,
            payload={"total_return": total_return, "sharpe_ratio": sharpe_ratio},
        )
