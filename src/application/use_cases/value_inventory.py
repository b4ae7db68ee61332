"""Value Inventory Use Case: per-lot valuation of one product or all of them."""

from dataclasses import dataclass, field
from decimal import Decimal

from src.application.dto.mappers import report_to_response
from src.application.dto.requests import InventoryValuationRequest
from src.application.dto.responses import InventoryValuationResponse
from src.config import get_logger
from src.core.entities.inventory import ValuationReport
from src.core.exceptions import ProductNotFoundError
from src.core.interfaces.product_store import IProductStore
from src.core.services.costing_engine import (
    calculate_total_inventory_value,
    valuation_report,
)

logger = get_logger(__name__)


@dataclass
class InventoryValuationResult:
    """Valuation reports and their combined total.

    Without a SKU the reports cover one page of products, and ``total_value``
    sums that page only. ``limit`` and ``offset`` are None for a single SKU.
    """

    reports: list[ValuationReport] = field(default_factory=list)
    total_value: Decimal = Decimal("0")
    limit: int | None = None
    offset: int | None = None


class ValueInventoryUseCase:
    """Read-only inventory valuation. Takes no locks."""

    def __init__(self, product_store: IProductStore | None = None):
        self._product_store = product_store

    async def _get_product_store(self) -> IProductStore:
        if self._product_store is None:
            from src.infrastructure.storage.sqlite import get_product_store

            self._product_store = await get_product_store()
        return self._product_store

    async def execute(self, request: InventoryValuationRequest) -> InventoryValuationResult:
        """Execute inventory valuation."""
        store = await self._get_product_store()

        if request.sku is not None:
            product = await store.get_product(request.sku)
            if product is None:
                raise ProductNotFoundError(request.sku)
            products = [product]
            limit = offset = None
        else:
            products = await store.list_products(limit=request.limit, offset=request.offset)
            limit, offset = request.limit, request.offset

        result = InventoryValuationResult(
            reports=[valuation_report(p) for p in products],
            total_value=calculate_total_inventory_value(products),
            limit=limit,
            offset=offset,
        )
        logger.info(
            "inventory_valued",
            products=len(products),
            total_value=str(result.total_value),
        )
        return result

    def to_response(self, result: InventoryValuationResult) -> InventoryValuationResponse:
        """Convert result to API response."""
        return InventoryValuationResponse(
            products=[report_to_response(r) for r in result.reports],
            total_value=str(result.total_value),
            limit=result.limit,
            offset=result.offset,
        )
