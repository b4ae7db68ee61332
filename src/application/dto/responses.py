"""Response DTOs for the costing use cases.

Money and quantities are serialized as strings so no precision is lost
on the way to a JSON client.
"""

from datetime import date, datetime

from pydantic import BaseModel, Field

from src.core.exceptions import CostingError


class BatchResponse(BaseModel):
    """Cost layer in response."""

    batch_id: str
    received_date: datetime
    original_quantity: str
    unit_cost: str
    remaining_quantity: str
    expiry_date: date | None = None


class ProductResponse(BaseModel):
    """Product costing snapshot response DTO."""

    sku: str
    name: str | None = None
    valuation_method: str
    quantity_on_hand: str
    average_cost: str
    inventory_value: str
    version: int
    batches: list[BatchResponse] = Field(default_factory=list)


class ConsumptionDetailResponse(BaseModel):
    """One lot slice consumed by a withdrawal."""

    batch_id: str | None = None
    quantity_taken: str
    unit_cost: str
    total_cost: str


class ReceiveStockResponse(BaseModel):
    """Response for stock receive operation."""

    product: ProductResponse
    batch: BatchResponse
    created: bool = False  # True if the product was created by this receipt


class IssueStockResponse(BaseModel):
    """Response for stock issue operation."""

    product: ProductResponse
    cost_of_goods_sold: str
    consumption_details: list[ConsumptionDetailResponse]
    reference: str | None = None


class ValuationLineResponse(BaseModel):
    """Value held in one open lot."""

    batch_id: str | None = None
    received_date: datetime | None = None
    quantity: str
    unit_cost: str
    value: str


class ProductValuationResponse(BaseModel):
    """Valuation breakdown for one product."""

    sku: str
    valuation_method: str
    quantity_on_hand: str
    total_value: str
    lines: list[ValuationLineResponse]


class InventoryValuationResponse(BaseModel):
    """Valuation across products."""

    products: list[ProductValuationResponse]
    total_value: str = Field(
        ..., description="Sum over the products in this response; one page when no SKU is given"
    )
    limit: int | None = Field(default=None, description="Page size, None for a single SKU")
    offset: int | None = Field(default=None, description="Page start, None for a single SKU")


class ErrorResponse(BaseModel):
    """Standardized error response DTO built from a ``CostingError``."""

    error_code: str = Field(..., description="Machine-readable error code")
    message: str = Field(..., description="Human-readable error description")
    details: dict = Field(default_factory=dict)
    timestamp: datetime = Field(default_factory=datetime.now)

    @classmethod
    def from_error(cls, error: CostingError) -> "ErrorResponse":
        return cls(error_code=error.code, message=error.message, details=error.details)
