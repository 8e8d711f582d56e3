"""asyncio-based per-key mutual exclusion."""

from __future__ import annotations

import asyncio
import weakref
from collections.abc import AsyncIterator, Hashable
from contextlib import asynccontextmanager

from portfolio_ledger.domain.gateways.locks import MutationGuard


class AsyncioMutationGuard(MutationGuard):
    """One asyncio.Lock per key, created on first use.

    A lock lives only while some task holds or awaits it, so the registry
    does not grow with the number of portfolios ever touched.  Serialises
    mutations within a single event loop; multi-process deployments need a
    database or distributed lock instead.
    """

    def __init__(self) -> None:
        self._locks: weakref.WeakValueDictionary[Hashable, asyncio.Lock] = (
            weakref.WeakValueDictionary()
        )

    @asynccontextmanager
    async def hold(self, key: Hashable) -> AsyncIterator[None]:
        lock = self._locks.get(key)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[key] = lock
        async with lock:
            yield
