"""
aiosqlite connections for the product ledger.

Reads borrow a pooled connection. Writes go through ``transaction()``,
which opens ``BEGIN IMMEDIATE`` so the version check in ``save_product``
and the rewrite of the batch rows hold the database write lock together.
"""

import asyncio
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path

import aiosqlite

from src.config import get_logger, get_settings

logger = get_logger(__name__)

PRAGMAS = (
    "PRAGMA journal_mode=WAL",
    "PRAGMA synchronous=NORMAL",
    "PRAGMA foreign_keys=ON",
)


class ConnectionPool:
    """Fixed number of connections to one database file, opened lazily."""

    def __init__(self, db_path: Path, size: int = 5, busy_timeout_ms: int = 30000):
        self.db_path = db_path
        self.size = size
        self.busy_timeout_ms = busy_timeout_ms
        self._idle: asyncio.Queue[aiosqlite.Connection] = asyncio.Queue()
        self._all: list[aiosqlite.Connection] = []
        self._guard = asyncio.Lock()

    @property
    def is_open(self) -> bool:
        return bool(self._all)

    async def open(self) -> None:
        async with self._guard:
            if self._all:
                return
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
            for _ in range(self.size):
                conn = await aiosqlite.connect(self.db_path)
                for pragma in (*PRAGMAS, f"PRAGMA busy_timeout={self.busy_timeout_ms}"):
                    await conn.execute(pragma)
                conn.row_factory = aiosqlite.Row
                self._all.append(conn)
                self._idle.put_nowait(conn)
        logger.info("sqlite_pool_opened", db_path=str(self.db_path), size=self.size)

    @asynccontextmanager
    async def acquire(self) -> AsyncIterator[aiosqlite.Connection]:
        """Borrow a connection; waits while all of them are in use."""
        if not self._all:
            await self.open()
        conn = await self._idle.get()
        try:
            yield conn
        finally:
            self._idle.put_nowait(conn)

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[aiosqlite.Connection]:
        """Borrow a connection inside a write transaction, committed on clean exit."""
        async with self.acquire() as conn:
            await conn.execute("BEGIN IMMEDIATE")
            try:
                yield conn
            except BaseException:
                await conn.rollback()
                raise
            await conn.commit()

    async def close(self) -> None:
        async with self._guard:
            while self._all:
                await self._all.pop().close()
            self._idle = asyncio.Queue()
        logger.info("sqlite_pool_closed", db_path=str(self.db_path))


_pool: ConnectionPool | None = None


async def get_pool() -> ConnectionPool:
    """Process-wide pool for the configured database."""
    global _pool
    if _pool is None:
        storage = get_settings().storage
        _pool = ConnectionPool(
            storage.db_path,
            size=storage.pool_size,
            busy_timeout_ms=storage.busy_timeout,
        )
        await _pool.open()
    return _pool


async def close_pool() -> None:
    global _pool
    if _pool is not None:
        await _pool.close()
        _pool = None


@asynccontextmanager
async def get_connection() -> AsyncIterator[aiosqlite.Connection]:
    pool = await get_pool()
    async with pool.acquire() as conn:
        yield conn


@asynccontextmanager
async def get_transaction() -> AsyncIterator[aiosqlite.Connection]:
    pool = await get_pool()
    async with pool.transaction() as conn:
        yield conn
