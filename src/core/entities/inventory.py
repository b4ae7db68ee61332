"""Inventory costing domain entities.

Snapshots are immutable: every costing operation returns new values built
with ``model_copy`` and never touches the caller's objects.
"""

from datetime import UTC, date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator
from pydantic import ValidationError as PydanticValidationError

from src.core.exceptions import ValidationError


def as_domain_error(error: PydanticValidationError, default_field: str) -> ValidationError:
    """Report the first schema error as the domain ``ValidationError``."""
    first = error.errors()[0]
    field = ".".join(str(part) for part in first["loc"]) or default_field
    return ValidationError(field, first["msg"], first.get("input"))


class ValuationMethod(str, Enum):
    """Inventory valuation methods."""

    FIFO = "FIFO"
    LIFO = "LIFO"
    WEIGHTED_AVERAGE = "Weighted Average"

    @property
    def consumes_batches(self) -> bool:
        """FIFO and LIFO draw cost from individual lots; WAC does not."""
        return self is not ValuationMethod.WEIGHTED_AVERAGE


class Batch(BaseModel):
    """A cost layer: one receipt of stock at a fixed unit cost."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str = Field(min_length=1, validation_alias=AliasChoices("id", "batchId"))
    received_date: datetime = Field(
        validation_alias=AliasChoices("received_date", "receivedDate", "date")
    )
    original_quantity: Decimal = Field(
        validation_alias=AliasChoices("original_quantity", "originalQuantity", "quantity")
    )
    unit_cost: Decimal = Field(validation_alias=AliasChoices("unit_cost", "unitCost"))
    remaining_quantity: Decimal = Field(
        validation_alias=AliasChoices("remaining_quantity", "remainingQuantity")
    )
    expiry_date: date | None = Field(
        default=None, validation_alias=AliasChoices("expiry_date", "expiryDate")
    )

    @field_validator("received_date")
    @classmethod
    def assume_utc(cls, v: datetime) -> datetime:
        # Naive and aware datetimes cannot be compared when ordering lots
        if v.tzinfo is None:
            return v.replace(tzinfo=UTC)
        return v

    @property
    def is_exhausted(self) -> bool:
        return self.remaining_quantity <= 0

    @property
    def remaining_value(self) -> Decimal:
        """Value of the stock still held in this lot, unrounded."""
        return self.remaining_quantity * self.unit_cost


class Product(BaseModel):
    """Costing-relevant snapshot of a stocked product."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    sku: str = Field(min_length=1)
    name: str | None = None
    valuation_method: ValuationMethod = Field(
        validation_alias=AliasChoices("valuation_method", "valuationMethod")
    )
    quantity_on_hand: Decimal = Field(
        default=Decimal("0"),
        validation_alias=AliasChoices("quantity_on_hand", "quantityOnHand"),
    )
    # Blended cost under WAC; last receipt cost under FIFO/LIFO
    average_cost: Decimal = Field(
        default=Decimal("0"),
        validation_alias=AliasChoices("average_cost", "averageCost", "costPrice"),
    )
    batches: tuple[Batch, ...] = ()
    version: int = 0

    @classmethod
    def from_snapshot(cls, data: dict[str, Any]) -> "Product":
        """Build a product from a raw snapshot dict.

        Accepts both snake_case and the camelCase keys used by the REST
        backend. Schema errors surface as the domain ``ValidationError``.
        """
        try:
            return cls.model_validate(data)
        except PydanticValidationError as e:
            raise as_domain_error(e, "product") from e

    def find_batch(self, batch_id: str) -> Batch | None:
        for batch in self.batches:
            if batch.id == batch_id:
                return batch
        return None


class ConsumptionDetail(BaseModel):
    """One slice drawn from a lot during a withdrawal.

    Under Weighted Average there is a single slice with no batch id, priced
    at the average cost.
    """

    model_config = ConfigDict(frozen=True)

    batch_id: str | None
    quantity_taken: Decimal
    unit_cost: Decimal
    total_cost: Decimal


class StockRemovalResult(BaseModel):
    """Outcome of a successful withdrawal."""

    model_config = ConfigDict(frozen=True)

    updated_product: Product
    cost_of_goods_sold: Decimal
    consumption_details: tuple[ConsumptionDetail, ...] = ()

    @property
    def quantity_removed(self) -> Decimal:
        return sum((d.quantity_taken for d in self.consumption_details), Decimal("0"))


class ValuationLine(BaseModel):
    """Value held in one open lot, or the single average line under WAC."""

    model_config = ConfigDict(frozen=True)

    batch_id: str | None
    received_date: datetime | None = None
    quantity: Decimal
    unit_cost: Decimal
    value: Decimal


class ValuationReport(BaseModel):
    """Per-lot breakdown of a product's inventory value."""

    model_config = ConfigDict(frozen=True)

    sku: str
    valuation_method: ValuationMethod
    quantity_on_hand: Decimal
    lines: tuple[ValuationLine, ...] = ()
    total_value: Decimal
