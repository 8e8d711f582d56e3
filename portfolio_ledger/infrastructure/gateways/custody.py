"""In-process custody ledger."""

from __future__ import annotations

from collections import defaultdict

from portfolio_ledger.domain.exceptions import TransferFailedError
from portfolio_ledger.domain.gateways.custody import AssetCustody


class InMemoryCustody(AssetCustody):
    """Account balances and custody allowances kept in dictionaries.

    custody_in requires both balance and an allowance granted with approve();
    the allowance is consumed by the transfer.
    """

    def __init__(self) -> None:
        self._balances: dict[tuple[str, str], int] = defaultdict(int)
        self._allowances: dict[tuple[str, str], int] = defaultdict(int)
        self._held: dict[str, int] = defaultdict(int)

    def mint(self, asset: str, account: str, amount: int) -> None:
        self._balances[(asset, account)] += amount

    def approve(self, asset: str, account: str, amount: int) -> None:
        self._allowances[(asset, account)] = amount

    def balance_of(self, asset: str, account: str) -> int:
        return self._balances[(asset, account)]

    def held(self, asset: str) -> int:
        """Amount of asset currently in custody."""
        return self._held[asset]

    async def custody_in(self, asset: str, from_: str, amount: int) -> None:
        key = (asset, from_)
        if self._balances[key] < amount:
            raise TransferFailedError(
                f"{from_} has {self._balances[key]} of {asset!r}, needs {amount}"
            )
        if self._allowances[key] < amount:
            raise TransferFailedError(
                f"{from_} allowance for {asset!r} is {self._allowances[key]}, needs {amount}"
            )
        self._balances[key] -= amount
        self._allowances[key] -= amount
        self._held[asset] += amount

    async def custody_out(self, asset: str, to: str, amount: int) -> None:
        if self._held[asset] < amount:
            raise TransferFailedError(
                f"Custody holds {self._held[asset]} of {asset!r}, cannot release {amount}"
            )
        self._held[asset] -= amount
        self._balances[(asset, to)] += amount
