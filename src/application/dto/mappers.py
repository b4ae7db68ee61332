"""Entity to response DTO conversion shared by the use cases."""

from src.application.dto.responses import (
    BatchResponse,
    ConsumptionDetailResponse,
    ProductResponse,
    ProductValuationResponse,
    ValuationLineResponse,
)
from src.core.entities.inventory import (
    Batch,
    ConsumptionDetail,
    Product,
    ValuationReport,
)
from src.core.services.costing_engine import calculate_inventory_value


def batch_to_response(batch: Batch) -> BatchResponse:
    return BatchResponse(
        batch_id=batch.id,
        received_date=batch.received_date,
        original_quantity=str(batch.original_quantity),
        unit_cost=str(batch.unit_cost),
        remaining_quantity=str(batch.remaining_quantity),
        expiry_date=batch.expiry_date,
    )


def product_to_response(product: Product) -> ProductResponse:
    return ProductResponse(
        sku=product.sku,
        name=product.name,
        valuation_method=product.valuation_method.value,
        quantity_on_hand=str(product.quantity_on_hand),
        average_cost=str(product.average_cost),
        inventory_value=str(calculate_inventory_value(product)),
        version=product.version,
        batches=[batch_to_response(b) for b in product.batches],
    )


def detail_to_response(detail: ConsumptionDetail) -> ConsumptionDetailResponse:
    return ConsumptionDetailResponse(
        batch_id=detail.batch_id,
        quantity_taken=str(detail.quantity_taken),
        unit_cost=str(detail.unit_cost),
        total_cost=str(detail.total_cost),
    )


def report_to_response(report: ValuationReport) -> ProductValuationResponse:
    return ProductValuationResponse(
        sku=report.sku,
        valuation_method=report.valuation_method.value,
        quantity_on_hand=str(report.quantity_on_hand),
        total_value=str(report.total_value),
        lines=[
            ValuationLineResponse(
                batch_id=line.batch_id,
                received_date=line.received_date,
                quantity=str(line.quantity),
                unit_cost=str(line.unit_cost),
                value=str(line.value),
            )
            for line in report.lines
        ],
    )
