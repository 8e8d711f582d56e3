"""Tests for portfolio_ledger/domain/exceptions.py."""

import pytest

from portfolio_ledger.domain.exceptions import (
    AllocationExceededError,
    AssetNotInPortfolioError,
    CooldownActiveError,
    ExternalServiceError,
    InvalidInputError,
    LedgerStateError,
    PortfolioLedgerError,
    PortfolioNotFoundError,
    StalePriceDataError,
    TooManyAssetsError,
    TransferFailedError,
    UnauthorizedError,
    UnsupportedAssetError,
)


@pytest.mark.parametrize(
    "exc_type", [AllocationExceededError, TooManyAssetsError, UnsupportedAssetError]
)
def test_validation_errors_are_invalid_input(exc_type):
    assert issubclass(exc_type, InvalidInputError)


@pytest.mark.parametrize("exc_type", [CooldownActiveError, UnauthorizedError])
def test_state_errors_are_ledger_state(exc_type):
    assert issubclass(exc_type, LedgerStateError)


@pytest.mark.parametrize("exc_type", [TransferFailedError, StalePriceDataError])
def test_collaborator_errors_are_external(exc_type):
    assert issubclass(exc_type, ExternalServiceError)


def test_all_families_share_a_base():
    for family in (InvalidInputError, LedgerStateError, ExternalServiceError):
        assert issubclass(family, PortfolioLedgerError)


def test_portfolio_not_found_keeps_id():
    exc = PortfolioNotFoundError(7)
    assert exc.portfolio_id == 7
    assert "7" in str(exc)


def test_asset_not_in_portfolio_keeps_context():
    exc = AssetNotInPortfolioError(3, "WETH")
    assert (exc.portfolio_id, exc.asset) == (3, "WETH")


def test_stale_price_message_includes_age():
    exc = StalePriceDataError("WETH", 7_200.4)
    assert exc.age_seconds == 7_200.4
    assert "7200s" in str(exc)
