"""Receive Stock Use Case: new cost layer, WAC recalculation where applicable."""

from dataclasses import dataclass

from src.application.dto.mappers import batch_to_response, product_to_response
from src.application.dto.requests import ReceiveStockRequest
from src.application.dto.responses import ReceiveStockResponse
from src.application.ledger_writer import LedgerWriter
from src.application.locks import ProductLockRegistry
from src.application.services import get_lock_registry
from src.config import get_logger, product_log_context
from src.core.entities.inventory import Batch, Product, ValuationMethod
from src.core.exceptions import ValidationError
from src.core.interfaces.product_store import IProductStore
from src.core.services.costing_engine import add_stock, new_batch_id

logger = get_logger(__name__)


@dataclass
class ReceiveStockResult:
    """Result of receiving stock."""

    product: Product
    batch: Batch
    created: bool = False  # True if the product was created by this receipt


class ReceiveStockUseCase:
    """Receive stock into a product's batch ledger."""

    def __init__(
        self,
        product_store: IProductStore | None = None,
        locks: ProductLockRegistry | None = None,
    ):
        self._product_store = product_store
        self._locks = locks or get_lock_registry()

    async def _get_product_store(self) -> IProductStore:
        if self._product_store is None:
            from src.infrastructure.storage.sqlite import get_product_store

            self._product_store = await get_product_store()
        return self._product_store

    async def execute(self, request: ReceiveStockRequest) -> ReceiveStockResult:
        """Execute receive stock use case."""
        with product_log_context(request.sku):
            logger.info(
                "receive_stock_started",
                quantity=str(request.quantity),
                unit_cost=str(request.unit_cost),
            )

            # Fixed before the first attempt so a retry reuses the same lot id
            batch_id = request.batch_id or new_batch_id()

            def receive(product: Product) -> tuple[Product, None]:
                method = request.valuation_method
                if method is not None and method is not product.valuation_method:
                    raise ValidationError(
                        "valuation_method",
                        f"product is valued with {product.valuation_method.value}",
                        method.value,
                    )
                updated = add_stock(
                    product,
                    request.quantity,
                    request.unit_cost,
                    request.received_date,
                    batch_id=batch_id,
                    expiry_date=request.expiry_date,
                )
                return updated, None

            def new_product() -> Product:
                return Product(
                    sku=request.sku,
                    name=request.name,
                    valuation_method=request.valuation_method or ValuationMethod.FIFO,
                )

            writer = LedgerWriter(await self._get_product_store(), self._locks)
            write = await writer.apply(request.sku, receive, create=new_product)
            batch = write.product.batches[-1]

            logger.info(
                "receive_stock_complete",
                batch_id=batch.id,
                new_qty=str(write.product.quantity_on_hand),
                new_avg=str(write.product.average_cost),
                created=write.created,
            )

            return ReceiveStockResult(product=write.product, batch=batch, created=write.created)

    def to_response(self, result: ReceiveStockResult) -> ReceiveStockResponse:
        """Convert result to API response."""
        return ReceiveStockResponse(
            product=product_to_response(result.product),
            batch=batch_to_response(result.batch),
            created=result.created,
        )
