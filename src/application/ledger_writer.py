"""Load, mutate and save a product snapshot under its lock, retrying on conflicts."""

from collections.abc import Callable
from dataclasses import dataclass
from typing import Generic, TypeVar

from src.application.locks import ProductLockRegistry
from src.config import get_logger, get_settings
from src.core.entities.inventory import Product
from src.core.exceptions import (
    ConcurrentModificationError,
    DuplicateProductError,
    ProductNotFoundError,
)
from src.core.interfaces.product_store import IProductStore

logger = get_logger(__name__)

T = TypeVar("T")


@dataclass
class LedgerWrite(Generic[T]):
    """Snapshot as persisted plus whatever the mutation returned alongside it."""

    product: Product
    outcome: T
    created: bool = False
    attempts: int = 1


class LedgerWriter:
    """Runs pure ledger mutations against a store with optimistic concurrency.

    Only ``ConcurrentModificationError`` is retried. Validation and stock
    errors raised by the mutation propagate on the first attempt.
    """

    def __init__(
        self,
        store: IProductStore,
        locks: ProductLockRegistry,
        max_retries: int | None = None,
    ):
        self._store = store
        self._locks = locks
        self._max_retries = (
            max_retries if max_retries is not None else get_settings().costing.max_write_retries
        )

    async def apply(
        self,
        sku: str,
        mutate: Callable[[Product], tuple[Product, T]],
        create: Callable[[], Product] | None = None,
    ) -> LedgerWrite[T]:
        """Apply ``mutate`` to the current snapshot of ``sku`` and persist it.

        Args:
            sku: Product to mutate.
            mutate: Pure function returning the new snapshot and an outcome.
            create: Builds the initial snapshot when the product does not exist.

        Raises:
            ProductNotFoundError: Missing product and no ``create``.
            ConcurrentModificationError: Still conflicting after all retries.
        """
        async with self._locks.hold(sku):
            attempt = 0
            while True:
                attempt += 1
                product = await self._store.get_product(sku)
                if product is None:
                    if create is None:
                        raise ProductNotFoundError(sku)
                    # Insert the mutated snapshot in one write, never an empty row first
                    initial, outcome = mutate(create())
                    try:
                        saved = await self._store.create_product(initial)
                    except DuplicateProductError:
                        # Created by another process between our read and insert
                        if attempt > self._max_retries:
                            raise
                        continue
                    return LedgerWrite(
                        product=saved, outcome=outcome, created=True, attempts=attempt
                    )

                updated, outcome = mutate(product)
                try:
                    saved = await self._store.save_product(
                        updated, expected_version=product.version
                    )
                except ConcurrentModificationError as e:
                    if attempt > self._max_retries:
                        logger.error(
                            "ledger_write_conflict_exhausted",
                            sku=sku,
                            attempts=attempt,
                        )
                        raise
                    logger.warning(
                        "ledger_write_conflict",
                        sku=sku,
                        attempt=attempt,
                        actual_version=e.details.get("actual_version"),
                    )
                    continue

                return LedgerWrite(product=saved, outcome=outcome, attempts=attempt)
