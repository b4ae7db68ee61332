"""Storage infrastructure implementations."""

from src.infrastructure.storage.sqlite import (
    SQLiteProductStore,
    close_pool,
    get_connection,
    get_pool,
    get_product_store,
    get_transaction,
)

__all__ = [
    # SQLite stores
    "SQLiteProductStore",
    "get_product_store",
    # Connection pool
    "get_pool",
    "close_pool",
    "get_connection",
    "get_transaction",
]
