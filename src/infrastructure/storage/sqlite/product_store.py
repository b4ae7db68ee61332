"""SQLite implementation of product snapshot storage."""

from datetime import UTC, date, datetime
from decimal import Decimal

import aiosqlite

from src.config import get_logger
from src.core.entities.inventory import Batch, Product, ValuationMethod
from src.core.exceptions import (
    ConcurrentModificationError,
    DatabaseError,
    DuplicateProductError,
    ProductNotFoundError,
)
from src.core.interfaces.product_store import IProductStore
from src.infrastructure.storage.sqlite.connection import get_connection, get_transaction

logger = get_logger(__name__)


class SQLiteProductStore(IProductStore):
    """SQLite storage for product snapshots with version-checked writes."""

    async def create_product(self, product: Product) -> Product:
        """Create a new product snapshot."""
        now = datetime.now(UTC).isoformat()
        try:
            async with get_transaction() as conn:
                await conn.execute(
                    """
                    INSERT INTO products (
                        sku, name, valuation_method, quantity_on_hand,
                        average_cost, version, created_at, updated_at
                    ) VALUES (?, ?, ?, ?, ?, 1, ?, ?)
                    """,
                    (
                        product.sku,
                        product.name,
                        product.valuation_method.value,
                        str(product.quantity_on_hand),
                        str(product.average_cost),
                        now,
                        now,
                    ),
                )
                await self._write_batches(conn, product)
        except aiosqlite.IntegrityError as e:
            raise DuplicateProductError(product.sku) from e
        except aiosqlite.Error as e:
            raise DatabaseError("create_product", str(e)) from e

        logger.info("product_created", sku=product.sku, method=product.valuation_method.value)
        return product.model_copy(update={"version": 1})

    async def get_product(self, sku: str) -> Product | None:
        """Get product snapshot with its batches by SKU."""
        try:
            async with get_connection() as conn:
                cursor = await conn.execute("SELECT * FROM products WHERE sku = ?", (sku,))
                row = await cursor.fetchone()
                if row is None:
                    return None
                cursor = await conn.execute(
                    "SELECT * FROM product_batches WHERE sku = ? ORDER BY position",
                    (sku,),
                )
                batch_rows = await cursor.fetchall()
        except aiosqlite.Error as e:
            raise DatabaseError("get_product", str(e)) from e
        return self._row_to_product(row, batch_rows)

    async def save_product(self, product: Product, expected_version: int) -> Product:
        """Replace the stored snapshot if its version is still ``expected_version``."""
        new_version = expected_version + 1
        try:
            async with get_transaction() as conn:
                cursor = await conn.execute(
                    """
                    UPDATE products SET
                        name = ?,
                        quantity_on_hand = ?,
                        average_cost = ?,
                        version = ?,
                        updated_at = ?
                    WHERE sku = ? AND version = ?
                    """,
                    (
                        product.name,
                        str(product.quantity_on_hand),
                        str(product.average_cost),
                        new_version,
                        datetime.now(UTC).isoformat(),
                        product.sku,
                        expected_version,
                    ),
                )
                if cursor.rowcount == 0:
                    cursor = await conn.execute(
                        "SELECT version FROM products WHERE sku = ?", (product.sku,)
                    )
                    row = await cursor.fetchone()
                    if row is None:
                        raise ProductNotFoundError(product.sku)
                    raise ConcurrentModificationError(
                        product.sku, expected_version, row["version"]
                    )

                await conn.execute("DELETE FROM product_batches WHERE sku = ?", (product.sku,))
                await self._write_batches(conn, product)
        except aiosqlite.Error as e:
            raise DatabaseError("save_product", str(e)) from e

        logger.info("product_saved", sku=product.sku, version=new_version)
        return product.model_copy(update={"version": new_version})

    async def list_products(self, limit: int = 100, offset: int = 0) -> list[Product]:
        """List product snapshots ordered by SKU."""
        try:
            async with get_connection() as conn:
                cursor = await conn.execute(
                    "SELECT * FROM products ORDER BY sku LIMIT ? OFFSET ?",
                    (limit, offset),
                )
                rows = await cursor.fetchall()
                products = []
                for row in rows:
                    cursor = await conn.execute(
                        "SELECT * FROM product_batches WHERE sku = ? ORDER BY position",
                        (row["sku"],),
                    )
                    products.append(self._row_to_product(row, await cursor.fetchall()))
        except aiosqlite.Error as e:
            raise DatabaseError("list_products", str(e)) from e
        return products

    async def _write_batches(self, conn: aiosqlite.Connection, product: Product) -> None:
        await conn.executemany(
            """
            INSERT INTO product_batches (
                sku, batch_id, position, received_date, original_quantity,
                unit_cost, remaining_quantity, expiry_date
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?)
            """,
            [
                (
                    product.sku,
                    batch.id,
                    position,
                    batch.received_date.isoformat(),
                    str(batch.original_quantity),
                    str(batch.unit_cost),
                    str(batch.remaining_quantity),
                    batch.expiry_date.isoformat() if batch.expiry_date else None,
                )
                for position, batch in enumerate(product.batches)
            ],
        )

    def _row_to_batch(self, row: aiosqlite.Row) -> Batch:
        return Batch(
            id=row["batch_id"],
            received_date=datetime.fromisoformat(row["received_date"]),
            original_quantity=Decimal(row["original_quantity"]),
            unit_cost=Decimal(row["unit_cost"]),
            remaining_quantity=Decimal(row["remaining_quantity"]),
            expiry_date=date.fromisoformat(row["expiry_date"]) if row["expiry_date"] else None,
        )

    def _row_to_product(self, row: aiosqlite.Row, batch_rows: list[aiosqlite.Row]) -> Product:
        return Product(
            sku=row["sku"],
            name=row["name"],
            valuation_method=ValuationMethod(row["valuation_method"]),
            quantity_on_hand=Decimal(row["quantity_on_hand"]),
            average_cost=Decimal(row["average_cost"]),
            batches=tuple(self._row_to_batch(b) for b in batch_rows),
            version=row["version"],
        )
