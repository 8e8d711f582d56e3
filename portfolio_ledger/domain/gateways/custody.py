"""Asset custody interface."""

from __future__ import annotations

from abc import ABC, abstractmethod


class AssetCustody(ABC):
    """Moves assets between external accounts and ledger custody.

    Both methods raise TransferFailedError when the underlying balance or
    allowance is insufficient.
    """

    @abstractmethod
    async def custody_in(self, asset: str, from_: str, amount: int) -> None:
        """Pull amount of asset from account from_ into custody."""

    @abstractmethod
    async def custody_out(self, asset: str, to: str, amount: int) -> None:
        """Release amount of asset from custody to account to."""
