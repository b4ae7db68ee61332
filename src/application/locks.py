"""Per-product write serialization.

Two withdrawals that read the same snapshot and write back independently
would spend the same lot twice. Every ledger mutation runs under the lock
of its SKU; the store's version check catches writers in other processes.
"""

import asyncio
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager


class ProductLockRegistry:
    """Keyed asyncio locks, one per SKU, dropped once nobody holds or waits."""

    def __init__(self) -> None:
        self._locks: dict[str, asyncio.Lock] = {}
        self._users: dict[str, int] = {}

    @asynccontextmanager
    async def hold(self, sku: str) -> AsyncIterator[None]:
        lock = self._locks.setdefault(sku, asyncio.Lock())
        self._users[sku] = self._users.get(sku, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._users[sku] -= 1
            if self._users[sku] == 0:
                del self._users[sku]
                del self._locks[sku]

    def is_locked(self, sku: str) -> bool:
        lock = self._locks.get(sku)
        return lock is not None and lock.locked()

    def __len__(self) -> int:
        return len(self._locks)
