"""Price feed interface."""

from __future__ import annotations

from abc import ABC, abstractmethod

from portfolio_ledger.domain.models.market_data import PriceQuote


class PriceClient(ABC):
    """Oracle lookups returning (price, timestamp, confidence).

    get_price is the strict mode: it raises StalePriceDataError when the quote
    is older than the feed's protocol-wide maximum age.
    get_price_unsafe never fails on staleness and is used for best-effort
    valuation snapshots.
    """

    @abstractmethod
    async def get_price(self, asset: str) -> PriceQuote: ...

    @abstractmethod
    async def get_price_unsafe(self, asset: str) -> PriceQuote: ...
