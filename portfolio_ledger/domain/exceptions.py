"""Domain exception hierarchy.

Three families, matching how a failed operation is reported to the caller:

  InvalidInputError     — the caller's input is malformed; nothing was written.
  LedgerStateError      — a precondition on stored state does not hold.
  ExternalServiceError  — a collaborator (custody, price feed) refused.

Every service operation either raises one of these (and leaves the stores
untouched) or commits in full.
"""

from __future__ import annotations


class PortfolioLedgerError(Exception):
    """Base exception for all ledger errors."""


# --------------------------------------------------------------------------- #
# Validation                                                                   #
# --------------------------------------------------------------------------- #


class InvalidInputError(PortfolioLedgerError):
    """Caller input failed validation."""


class AllocationExceededError(InvalidInputError):
    """Target allocations of a portfolio would sum to more than 10000 bps."""


class TooManyAssetsError(InvalidInputError):
    """The portfolio already holds the maximum number of distinct assets."""


class UnsupportedAssetError(InvalidInputError):
    """The asset is not on the supported-asset allow-list."""


# --------------------------------------------------------------------------- #
# State                                                                        #
# --------------------------------------------------------------------------- #


class LedgerStateError(PortfolioLedgerError):
    """A stored-state precondition was violated."""


class PortfolioNotFoundError(LedgerStateError):
    def __init__(self, portfolio_id: int) -> None:
        super().__init__(f"Portfolio {portfolio_id} not found")
        self.portfolio_id = portfolio_id


class PortfolioInactiveError(LedgerStateError):
    def __init__(self, portfolio_id: int) -> None:
        super().__init__(f"Portfolio {portfolio_id} is inactive")
        self.portfolio_id = portfolio_id


class CooldownActiveError(LedgerStateError):
    """Rebalance attempted before the cooldown since the last one elapsed."""


class RebalanceNotNeededError(LedgerStateError):
    """No holding deviates from its target by more than the threshold."""


class AssetNotInPortfolioError(LedgerStateError):
    def __init__(self, portfolio_id: int, asset: str) -> None:
        super().__init__(f"Asset {asset!r} is not held by portfolio {portfolio_id}")
        self.portfolio_id = portfolio_id
        self.asset = asset


class InsufficientHoldingError(LedgerStateError):
    """Requested amount exceeds the amount held."""


class PerformanceUpdateTooSoonError(LedgerStateError):
    """Performance metrics were refreshed less than the update interval ago."""


class UnauthorizedError(LedgerStateError):
    """Caller lacks ownership or the required role."""


class ProtocolPausedError(LedgerStateError):
    """The circuit breaker is engaged; all mutations are rejected."""


# --------------------------------------------------------------------------- #
# External collaborators                                                       #
# --------------------------------------------------------------------------- #


class ExternalServiceError(PortfolioLedgerError):
    """A collaborator service refused or failed the request."""


class TransferFailedError(ExternalServiceError):
    """Custody transfer failed (insufficient balance or allowance)."""


class StalePriceDataError(ExternalServiceError):
    """Price is older than the price feed's maximum age."""

    def __init__(self, asset: str, age_seconds: float) -> None:
        super().__init__(f"Price for {asset!r} is stale ({age_seconds:.0f}s old)")
        self.asset = asset
        self.age_seconds = age_seconds
