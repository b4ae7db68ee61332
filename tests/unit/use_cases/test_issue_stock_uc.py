"""Tests for IssueStockUseCase."""

from decimal import Decimal

import pytest

from src.application.dto.requests import IssueStockRequest
from src.application.use_cases.issue_stock import IssueStockUseCase
from src.core.exceptions import (
    InsufficientStockError,
    InvariantViolationError,
    ProductNotFoundError,
)


@pytest.fixture
def use_case(mock_product_store, locks):
    return IssueStockUseCase(product_store=mock_product_store, locks=locks)


class TestIssueStockUseCase:
    async def test_fifo_issue(self, use_case, mock_product_store, fifo_product):
        """FIFO issue draws the oldest lot and persists the new snapshot."""
        mock_product_store.get_product.return_value = fifo_product

        result = await use_case.execute(
            IssueStockRequest(sku="SKU-001", quantity=12, reference="INV-2024-001")
        )

        assert result.cost_of_goods_sold == Decimal("64.00")
        assert result.reference == "INV-2024-001"
        assert [d.batch_id for d in result.consumption_details] == ["B1", "B2"]
        assert result.product.quantity_on_hand == Decimal("8")
        assert result.product.version == 1

        saved = mock_product_store.save_product.call_args.args[0]
        assert [b.remaining_quantity for b in saved.batches] == [Decimal("0"), Decimal("8")]

    async def test_wac_issue(self, use_case, mock_product_store, wac_product):
        mock_product_store.get_product.return_value = wac_product

        result = await use_case.execute(IssueStockRequest(sku="SKU-001", quantity=5))

        assert result.cost_of_goods_sold == Decimal("30.00")
        assert result.product.quantity_on_hand == Decimal("15")
        assert result.consumption_details[0].batch_id is None

    async def test_product_not_found(self, use_case, mock_product_store):
        with pytest.raises(ProductNotFoundError):
            await use_case.execute(IssueStockRequest(sku="MISSING", quantity=1))
        mock_product_store.create_product.assert_not_called()

    async def test_insufficient_stock(self, use_case, mock_product_store, lifo_product):
        """Rejected issue leaves the stored snapshot alone."""
        mock_product_store.get_product.return_value = lifo_product

        with pytest.raises(InsufficientStockError) as exc_info:
            await use_case.execute(IssueStockRequest(sku="SKU-001", quantity=21))

        assert exc_info.value.available == Decimal("20")
        mock_product_store.save_product.assert_not_called()

    async def test_invariant_violation_propagates(
        self, use_case, mock_product_store, fifo_product, monkeypatch
    ):
        mock_product_store.get_product.return_value = fifo_product

        def corrupt(product, quantity_sell):
            raise InvariantViolationError(product.sku, Decimal("8"), Decimal("9"))

        monkeypatch.setattr("src.application.use_cases.issue_stock.remove_stock", corrupt)

        with pytest.raises(InvariantViolationError):
            await use_case.execute(IssueStockRequest(sku="SKU-001", quantity=12))
        mock_product_store.save_product.assert_not_called()

    async def test_to_response(self, use_case, mock_product_store, lifo_product):
        mock_product_store.get_product.return_value = lifo_product

        result = await use_case.execute(IssueStockRequest(sku="SKU-001", quantity=12))
        response = use_case.to_response(result)

        assert response.cost_of_goods_sold == "80.00"
        assert response.product.inventory_value == "40.00"
        assert [d.batch_id for d in response.consumption_details] == ["B2", "B1"]
        assert response.consumption_details[0].total_cost == "70"
