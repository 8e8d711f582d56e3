"""Tests for InMemoryCustody."""

import pytest

from portfolio_ledger.domain.exceptions import TransferFailedError
from portfolio_ledger.infrastructure.gateways.custody import InMemoryCustody


def _custody(balance: int = 10, allowance: int = 10) -> InMemoryCustody:
    custody = InMemoryCustody()
    custody.mint("WETH", "alice", balance)
    custody.approve("WETH", "alice", allowance)
    return custody


async def test_custody_in_moves_balance():
    custody = _custody()
    await custody.custody_in("WETH", "alice", 4)
    assert custody.balance_of("WETH", "alice") == 6
    assert custody.held("WETH") == 4


async def test_custody_in_without_balance_fails():
    with pytest.raises(TransferFailedError):
        await _custody(balance=3).custody_in("WETH", "alice", 4)


async def test_custody_in_without_allowance_fails():
    with pytest.raises(TransferFailedError):
        await _custody(allowance=3).custody_in("WETH", "alice", 4)


async def test_custody_in_consumes_allowance():
    custody = _custody(allowance=5)
    await custody.custody_in("WETH", "alice", 4)
    with pytest.raises(TransferFailedError):
        await custody.custody_in("WETH", "alice", 4)


async def test_custody_out_releases_to_account():
    custody = _custody()
    await custody.custody_in("WETH", "alice", 4)
    await custody.custody_out("WETH", "bob", 4)
    assert custody.balance_of("WETH", "bob") == 4
    assert custody.held("WETH") == 0


async def test_custody_out_beyond_held_fails():
    with pytest.raises(TransferFailedError):
        await _custody().custody_out("WETH", "alice", 1)
