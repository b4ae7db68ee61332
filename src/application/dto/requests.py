"""Request DTOs for the costing use cases.

Pydantic v2 models validating what callers hand to the use cases.
"""

from datetime import date, datetime
from decimal import Decimal

from pydantic import BaseModel, Field

from src.core.entities.inventory import ValuationMethod


class ReceiveStockRequest(BaseModel):
    """Request to receive stock into a new cost layer."""

    sku: str = Field(..., min_length=1, description="Product SKU")
    quantity: Decimal = Field(..., gt=0, description="Quantity to receive")
    unit_cost: Decimal = Field(..., ge=0, description="Cost per unit")
    received_date: datetime | None = Field(
        default=None,
        description="Receipt timestamp (defaults to now)",
    )
    batch_id: str | None = Field(
        default=None,
        description="Lot identifier, e.g. PUR-<bill number>",
        examples=["PUR-BILL-0042", "ADJ-2024-06-15"],
    )
    expiry_date: date | None = Field(default=None, description="Lot expiry date")
    # Only used when the product does not exist yet
    name: str | None = Field(default=None, description="Product name for new products")
    valuation_method: ValuationMethod | None = Field(
        default=None,
        description="Valuation method; FIFO for new products when omitted, "
        "must match the method of an existing product",
    )


class IssueStockRequest(BaseModel):
    """Request to withdraw stock and compute its cost of goods sold."""

    sku: str = Field(..., min_length=1, description="Product SKU")
    quantity: Decimal = Field(..., gt=0, description="Quantity to issue")
    reference: str | None = Field(
        default=None,
        description="Sales invoice or delivery reference",
    )


class InventoryValuationRequest(BaseModel):
    """Request for inventory value of one product or all of them."""

    sku: str | None = Field(default=None, description="Limit to one product")
    limit: int = Field(default=100, ge=1, le=1000)
    offset: int = Field(default=0, ge=0)
