"""Mutual-exclusion boundary interface.

At most one mutation may be in flight per portfolio.  Operations that are not
scoped to a single existing portfolio (creation, allow-list changes) hold the
REGISTRY_KEY instead.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from contextlib import AbstractAsyncContextManager
from typing import Hashable

REGISTRY_KEY = "__registry__"


class MutationGuard(ABC):
    @abstractmethod
    def hold(self, key: Hashable) -> AbstractAsyncContextManager[None]:
        """Return an async context manager that holds the lock for key."""
