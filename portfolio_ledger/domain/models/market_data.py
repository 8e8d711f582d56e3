"""Price feed value objects."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from .policy import BPS_DENOMINATOR


class PriceQuote(BaseModel):
    """A single price observation for one asset.

    price is USD-equivalent per whole unit, 18-decimal fixed point.
    confidence is the feed's reliability score in basis points (10000 = certain).
    """

    model_config = ConfigDict(frozen=True)

    asset: str
    price: int = Field(ge=0)
    timestamp: datetime
    confidence: int = Field(ge=0, le=BPS_DENOMINATOR)

    def age_at(self, now: datetime) -> float:
        """Seconds elapsed between the observation and now."""
        return (now - self.timestamp).total_seconds()
