"""Integration test: receive, issue and value stock against a real SQLite database."""

import asyncio
from decimal import Decimal
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

import src.infrastructure.storage.sqlite.connection as conn_module
from src.application.dto.requests import (
    InventoryValuationRequest,
    IssueStockRequest,
    ReceiveStockRequest,
)
from src.application.locks import ProductLockRegistry
from src.application.use_cases.issue_stock import IssueStockUseCase
from src.application.use_cases.receive_stock import ReceiveStockUseCase
from src.application.use_cases.value_inventory import ValueInventoryUseCase
from src.core.entities.inventory import ValuationMethod
from src.core.exceptions import InsufficientStockError, ValidationError
from src.infrastructure.storage.sqlite import SQLiteProductStore, close_pool
from src.infrastructure.storage.sqlite.migrations import initialize_database


@pytest.fixture
async def store(tmp_path: Path):
    db_path = tmp_path / "costing.db"
    await initialize_database(db_path)

    conn_module._pool = None
    mock_settings = MagicMock()
    mock_settings.storage.db_path = db_path
    mock_settings.storage.pool_size = 3
    mock_settings.storage.busy_timeout = 5000

    with patch.object(conn_module, "get_settings", return_value=mock_settings):
        try:
            yield SQLiteProductStore()
        finally:
            await close_pool()


async def _receive_two_lots(store, locks, method, day):
    receive = ReceiveStockUseCase(product_store=store, locks=locks)
    await receive.execute(
        ReceiveStockRequest(
            sku="SKU-001",
            quantity=10,
            unit_cost=5,
            received_date=day(1),
            batch_id="PUR-1",
            valuation_method=method,
        )
    )
    await receive.execute(
        ReceiveStockRequest(
            sku="SKU-001", quantity=10, unit_cost=7, received_date=day(2), batch_id="PUR-2"
        )
    )


class TestCostingFlow:
    """Full flow: receive lots, sell, check COGS and remaining value."""

    @pytest.mark.parametrize(
        ("method", "cogs", "remaining_value"),
        [
            (ValuationMethod.FIFO, Decimal("64.00"), Decimal("56.00")),
            (ValuationMethod.LIFO, Decimal("80.00"), Decimal("40.00")),
            (ValuationMethod.WEIGHTED_AVERAGE, Decimal("72.00"), Decimal("48.00")),
        ],
    )
    async def test_receive_issue_value(self, store, day, method, cogs, remaining_value):
        locks = ProductLockRegistry()
        await _receive_two_lots(store, locks, method, day)

        issued = await IssueStockUseCase(product_store=store, locks=locks).execute(
            IssueStockRequest(sku="SKU-001", quantity=12, reference="INV-1")
        )
        assert issued.cost_of_goods_sold == cogs

        valuation = await ValueInventoryUseCase(product_store=store).execute(
            InventoryValuationRequest(sku="SKU-001")
        )
        assert valuation.total_value == remaining_value
        assert cogs + remaining_value == Decimal("120.00")

        stored = await store.get_product("SKU-001")
        assert stored.quantity_on_hand == Decimal("8")
        assert stored.version == 3

    async def test_rejected_issue_persists_nothing(self, store, day):
        locks = ProductLockRegistry()
        await _receive_two_lots(store, locks, ValuationMethod.FIFO, day)
        before = await store.get_product("SKU-001")

        with pytest.raises(InsufficientStockError):
            await IssueStockUseCase(product_store=store, locks=locks).execute(
                IssueStockRequest(sku="SKU-001", quantity=21)
            )

        after = await store.get_product("SKU-001")
        assert after.model_dump() == before.model_dump()

    async def test_concurrent_issues_share_locks(self, store, day):
        """Parallel issues through one registry never spend a lot twice."""
        locks = ProductLockRegistry()
        await _receive_two_lots(store, locks, ValuationMethod.FIFO, day)
        issue = IssueStockUseCase(product_store=store, locks=locks)

        results = await asyncio.gather(
            *(issue.execute(IssueStockRequest(sku="SKU-001", quantity=2)) for _ in range(10))
        )

        assert sum(r.cost_of_goods_sold for r in results) == Decimal("120.00")
        stored = await store.get_product("SKU-001")
        assert stored.quantity_on_hand == Decimal("0")
        assert all(b.is_exhausted for b in stored.batches)

    async def test_writers_without_shared_lock_retry(self, store, day):
        """Separate registries model separate processes; the version check keeps them honest."""
        await _receive_two_lots(store, ProductLockRegistry(), ValuationMethod.FIFO, day)

        results = await asyncio.gather(
            IssueStockUseCase(product_store=store, locks=ProductLockRegistry()).execute(
                IssueStockRequest(sku="SKU-001", quantity=5)
            ),
            IssueStockUseCase(product_store=store, locks=ProductLockRegistry()).execute(
                IssueStockRequest(sku="SKU-001", quantity=5)
            ),
        )

        assert sum(r.cost_of_goods_sold for r in results) == Decimal("50.00")
        stored = await store.get_product("SKU-001")
        assert stored.quantity_on_hand == Decimal("10")
        assert stored.find_batch("PUR-1").is_exhausted
        assert stored.version == 4

    async def test_value_all_products(self, store, day):
        locks = ProductLockRegistry()
        await _receive_two_lots(store, locks, ValuationMethod.LIFO, day)
        await ReceiveStockUseCase(product_store=store, locks=locks).execute(
            ReceiveStockRequest(
                sku="SKU-002",
                quantity=4,
                unit_cost="2.50",
                received_date=day(3),
                valuation_method=ValuationMethod.WEIGHTED_AVERAGE,
            )
        )

        valuation = await ValueInventoryUseCase(product_store=store).execute(
            InventoryValuationRequest()
        )

        assert [r.sku for r in valuation.reports] == ["SKU-001", "SKU-002"]
        assert valuation.total_value == Decimal("130.00")

    async def test_first_receipt_stored_in_one_write(self, store, day):
        result = await ReceiveStockUseCase(
            product_store=store, locks=ProductLockRegistry()
        ).execute(
            ReceiveStockRequest(
                sku="SKU-NEW", quantity=3, unit_cost=4, received_date=day(1), batch_id="PUR-1"
            )
        )

        stored = await store.get_product("SKU-NEW")
        assert result.created is True
        assert stored.version == 1
        assert stored.quantity_on_hand == Decimal("3")
        assert [b.id for b in stored.batches] == ["PUR-1"]

    async def test_method_mismatch_leaves_product_untouched(self, store, day):
        locks = ProductLockRegistry()
        await _receive_two_lots(store, locks, ValuationMethod.FIFO, day)
        before = await store.get_product("SKU-001")

        with pytest.raises(ValidationError):
            await ReceiveStockUseCase(product_store=store, locks=locks).execute(
                ReceiveStockRequest(
                    sku="SKU-001",
                    quantity=1,
                    unit_cost=1,
                    valuation_method=ValuationMethod.LIFO,
                )
            )

        after = await store.get_product("SKU-001")
        assert after.model_dump() == before.model_dump()
