"""Pytest configuration and fixtures."""

from collections.abc import Callable, Generator
from datetime import UTC, datetime, timedelta
from decimal import Decimal

import pytest

from src.application.services import reset_services
from src.config import reset_settings
from src.core.entities.inventory import Product, ValuationMethod
from src.core.services.costing_engine import add_stock


def _day(n: int) -> datetime:
    return datetime(2024, 6, 1, tzinfo=UTC) + timedelta(days=n - 1)


def _make_product(method: ValuationMethod, sku: str = "SKU-001") -> Product:
    return Product(sku=sku, name="Copper cable 3x2.5mm", valuation_method=method)


def _two_lot_product(method: ValuationMethod) -> Product:
    """10 @ $5 on day 1, then 10 @ $7 on day 2."""
    product = _make_product(method)
    product = add_stock(product, 10, Decimal("5"), _day(1), batch_id="B1")
    return add_stock(product, 10, Decimal("7"), _day(2), batch_id="B2")


@pytest.fixture(autouse=True)
def _isolated_singletons(monkeypatch: pytest.MonkeyPatch) -> Generator[None, None, None]:
    """Fresh settings and lock registry per test, ignoring the developer's env."""
    for var in (
        "COSTING_CURRENCY_PLACES",
        "COSTING_ROUNDING_MODE",
        "COSTING_MAX_WRITE_RETRIES",
        "COSTING_BATCH_ID_PREFIX",
    ):
        monkeypatch.delenv(var, raising=False)
    reset_settings()
    reset_services()
    yield
    reset_settings()
    reset_services()


@pytest.fixture
def day() -> Callable[[int], datetime]:
    """Midnight UTC on the n-th day of June 2024."""
    return _day


@pytest.fixture
def make_product() -> Callable[..., Product]:
    return _make_product


@pytest.fixture
def fifo_product() -> Product:
    return _two_lot_product(ValuationMethod.FIFO)


@pytest.fixture
def lifo_product() -> Product:
    return _two_lot_product(ValuationMethod.LIFO)


@pytest.fixture
def wac_product() -> Product:
    return _two_lot_product(ValuationMethod.WEIGHTED_AVERAGE)
