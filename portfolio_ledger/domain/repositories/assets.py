"""Supported-asset allow-list repository interface."""

from __future__ import annotations

from abc import ABC, abstractmethod


class SupportedAssetRepository(ABC):
    """The set of asset ids that may be deposited into any portfolio."""

    @abstractmethod
    async def is_supported(self, asset: str) -> bool: ...

    @abstractmethod
    async def add(self, asset: str) -> None:
        """Add the asset to the allow-list; a no-op if already present."""

    @abstractmethod
    async def remove(self, asset: str) -> None:
        """Remove the asset from the allow-list; a no-op if absent."""

    @abstractmethod
    async def list(self) -> list[str]:
        """All supported assets, sorted."""
