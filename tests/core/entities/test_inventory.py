"""Tests for inventory costing entities."""

from datetime import UTC, date, datetime
from decimal import Decimal

import pytest
from pydantic import ValidationError as PydanticValidationError

from src.core.entities.inventory import (
    Batch,
    ConsumptionDetail,
    Product,
    StockRemovalResult,
    ValuationMethod,
)
from src.core.exceptions import ValidationError


class TestValuationMethod:
    """Tests for ValuationMethod enum."""

    def test_values_match_backend_strings(self):
        assert ValuationMethod.FIFO == "FIFO"
        assert ValuationMethod.LIFO == "LIFO"
        assert ValuationMethod.WEIGHTED_AVERAGE == "Weighted Average"

    def test_consumes_batches(self):
        assert ValuationMethod.FIFO.consumes_batches
        assert ValuationMethod.LIFO.consumes_batches
        assert not ValuationMethod.WEIGHTED_AVERAGE.consumes_batches


class TestBatch:
    """Tests for Batch entity."""

    def test_naive_received_date_is_utc(self):
        batch = Batch(
            id="B1",
            received_date=datetime(2024, 6, 1, 12, 0),
            original_quantity=Decimal("10"),
            unit_cost=Decimal("5"),
            remaining_quantity=Decimal("10"),
        )
        assert batch.received_date.tzinfo is UTC

    def test_remaining_value(self):
        batch = Batch(
            id="B1",
            received_date=datetime(2024, 6, 1, tzinfo=UTC),
            original_quantity=Decimal("10"),
            unit_cost=Decimal("2.50"),
            remaining_quantity=Decimal("4"),
        )
        assert batch.remaining_value == Decimal("10.00")
        assert not batch.is_exhausted

    def test_is_frozen(self):
        batch = Batch(
            id="B1",
            received_date=datetime(2024, 6, 1, tzinfo=UTC),
            original_quantity=Decimal("10"),
            unit_cost=Decimal("5"),
            remaining_quantity=Decimal("0"),
        )
        assert batch.is_exhausted
        with pytest.raises(PydanticValidationError):
            batch.remaining_quantity = Decimal("3")  # type: ignore[misc]


class TestProduct:
    """Tests for Product entity."""

    def test_defaults(self):
        product = Product(sku="SKU-001", valuation_method=ValuationMethod.FIFO)
        assert product.quantity_on_hand == Decimal("0")
        assert product.average_cost == Decimal("0")
        assert product.batches == ()
        assert product.version == 0
        assert product.name is None

    def test_from_snapshot_accepts_backend_keys(self):
        product = Product.from_snapshot(
            {
                "sku": "SKU-9",
                "valuationMethod": "Weighted Average",
                "quantityOnHand": 12,
                "costPrice": "4.25",
                "batches": [
                    {
                        "batchId": "PUR-BILL-7",
                        "date": "2024-06-01T00:00:00Z",
                        "quantity": 12,
                        "unitCost": "4.25",
                        "remainingQuantity": 12,
                        "expiryDate": "2025-01-31",
                    }
                ],
            }
        )
        assert product.valuation_method is ValuationMethod.WEIGHTED_AVERAGE
        assert product.quantity_on_hand == Decimal("12")
        assert product.average_cost == Decimal("4.25")
        batch = product.batches[0]
        assert batch.id == "PUR-BILL-7"
        assert batch.original_quantity == Decimal("12")
        assert batch.expiry_date == date(2025, 1, 31)

    def test_from_snapshot_missing_method(self):
        with pytest.raises(ValidationError) as exc_info:
            Product.from_snapshot({"sku": "SKU-1", "quantityOnHand": 3})
        assert exc_info.value.code == "VALIDATION_ERROR"
        assert "valuation_method" in exc_info.value.details["field"] or (
            "valuationMethod" in exc_info.value.details["field"]
        )

    def test_from_snapshot_unknown_method(self):
        with pytest.raises(ValidationError):
            Product.from_snapshot({"sku": "SKU-1", "valuation_method": "Standard Cost"})

    def test_from_snapshot_malformed_batch(self):
        with pytest.raises(ValidationError) as exc_info:
            Product.from_snapshot(
                {
                    "sku": "SKU-1",
                    "valuation_method": "FIFO",
                    "batches": [{"id": "B1", "unit_cost": "1"}],
                }
            )
        assert exc_info.value.details["field"].startswith("batches")

    def test_find_batch(self, fifo_product):
        assert fifo_product.find_batch("B2").unit_cost == Decimal("7")
        assert fifo_product.find_batch("nope") is None


class TestStockRemovalResult:
    """Tests for StockRemovalResult."""

    def test_quantity_removed(self):
        result = StockRemovalResult(
            updated_product=Product(sku="S", valuation_method=ValuationMethod.FIFO),
            cost_of_goods_sold=Decimal("64.00"),
            consumption_details=(
                ConsumptionDetail(
                    batch_id="B1",
                    quantity_taken=Decimal("10"),
                    unit_cost=Decimal("5"),
                    total_cost=Decimal("50"),
                ),
                ConsumptionDetail(
                    batch_id="B2",
                    quantity_taken=Decimal("2"),
                    unit_cost=Decimal("7"),
                    total_cost=Decimal("14"),
                ),
            ),
        )
        assert result.quantity_removed == Decimal("12")
