"""Abstract interface for product snapshot storage."""

from abc import ABC, abstractmethod

from src.core.entities.inventory import Product


class IProductStore(ABC):
    """Interface for persisting product costing snapshots.

    Writes are version-stamped: ``save_product`` succeeds only when the
    stored version still equals ``expected_version`` and returns the
    snapshot with its version bumped.
    """

    @abstractmethod
    async def create_product(self, product: Product) -> Product:
        """Create a new product snapshot (version 1)."""
        pass

    @abstractmethod
    async def get_product(self, sku: str) -> Product | None:
        """Get product snapshot with its batches by SKU."""
        pass

    @abstractmethod
    async def save_product(self, product: Product, expected_version: int) -> Product:
        """Replace the stored snapshot if unchanged since ``expected_version``.

        Raises:
            ConcurrentModificationError: Stored version differs.
            ProductNotFoundError: No product with this SKU.
        """
        pass

    @abstractmethod
    async def list_products(self, limit: int = 100, offset: int = 0) -> list[Product]:
        """List product snapshots ordered by SKU."""
        pass
