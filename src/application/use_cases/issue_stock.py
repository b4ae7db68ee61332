"""Issue Stock Use Case: withdraw stock and compute cost of goods sold."""

from dataclasses import dataclass, field
from decimal import Decimal

from src.application.dto.mappers import detail_to_response, product_to_response
from src.application.dto.requests import IssueStockRequest
from src.application.dto.responses import IssueStockResponse
from src.application.ledger_writer import LedgerWriter
from src.application.locks import ProductLockRegistry
from src.application.services import get_lock_registry
from src.config import get_logger, product_log_context
from src.core.entities.inventory import ConsumptionDetail, Product, StockRemovalResult
from src.core.exceptions import InsufficientStockError, InvariantViolationError
from src.core.interfaces.product_store import IProductStore
from src.core.services.costing_engine import remove_stock

logger = get_logger(__name__)


@dataclass
class IssueStockResult:
    """Result of issuing stock.

    ``consumption_details`` is what the GL posting needs to build the COGS
    journal entry.
    """

    product: Product
    cost_of_goods_sold: Decimal
    consumption_details: list[ConsumptionDetail] = field(default_factory=list)
    reference: str | None = None


class IssueStockUseCase:
    """Issue stock, drawing cost layers per the product's valuation method."""

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

    async def execute(self, request: IssueStockRequest) -> IssueStockResult:
        """Execute issue stock use case."""
        with product_log_context(request.sku):
            logger.info(
                "issue_stock_started",
                quantity=str(request.quantity),
                reference=request.reference,
            )

            def issue(product: Product) -> tuple[Product, StockRemovalResult]:
                removal = remove_stock(product, request.quantity)
                return removal.updated_product, removal

            writer = LedgerWriter(await self._get_product_store(), self._locks)
            try:
                write = await writer.apply(request.sku, issue)
            except InsufficientStockError as e:
                logger.info(
                    "issue_stock_rejected",
                    requested=str(e.requested),
                    available=str(e.available),
                )
                raise
            except InvariantViolationError as e:
                logger.error("issue_stock_ledger_corrupt", **e.details)
                raise

            removal = write.outcome
            logger.info(
                "issue_stock_complete",
                cogs=str(removal.cost_of_goods_sold),
                lots=len(removal.consumption_details),
                remaining_qty=str(write.product.quantity_on_hand),
            )

            return IssueStockResult(
                product=write.product,
                cost_of_goods_sold=removal.cost_of_goods_sold,
                consumption_details=list(removal.consumption_details),
                reference=request.reference,
            )

    def to_response(self, result: IssueStockResult) -> IssueStockResponse:
        """Convert result to API response."""
        return IssueStockResponse(
            product=product_to_response(result.product),
            cost_of_goods_sold=str(result.cost_of_goods_sold),
            consumption_details=[detail_to_response(d) for d in result.consumption_details],
            reference=result.reference,
        )
