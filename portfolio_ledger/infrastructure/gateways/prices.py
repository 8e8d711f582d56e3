"""In-process price feed."""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime, timedelta, timezone

from portfolio_ledger.domain.exceptions import ExternalServiceError, StalePriceDataError
from portfolio_ledger.domain.gateways.prices import PriceClient
from portfolio_ledger.domain.models.market_data import PriceQuote
from portfolio_ledger.domain.models.policy import BPS_DENOMINATOR


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class StaticPriceClient(PriceClient):
    """Serves quotes pushed with set_price().

    max_age is the feed's protocol-wide staleness limit for strict lookups.
    """

    def __init__(
        self,
        max_age: timedelta = timedelta(hours=1),
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._quotes: dict[str, PriceQuote] = {}
        self._max_age = max_age
        self._clock = clock

    def set_price(
        self,
        asset: str,
        price: int,
        timestamp: datetime | None = None,
        confidence: int = BPS_DENOMINATOR,
    ) -> PriceQuote:
        quote = PriceQuote(
            asset=asset,
            price=price,
            timestamp=timestamp or self._clock(),
            confidence=confidence,
        )
        self._quotes[asset] = quote
        return quote

    async def get_price(self, asset: str) -> PriceQuote:
        quote = await self.get_price_unsafe(asset)
        age = quote.age_at(self._clock())
        if age > self._max_age.total_seconds():
            raise StalePriceDataError(asset, age)
        return quote

    async def get_price_unsafe(self, asset: str) -> PriceQuote:
        try:
            return self._quotes[asset]
        except KeyError:
            raise ExternalServiceError(f"No price feed for asset {asset!r}") from None
