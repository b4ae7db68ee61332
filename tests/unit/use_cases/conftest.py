"""Fixtures for use case tests: an AsyncMock store that behaves like a versioned one."""

from unittest.mock import AsyncMock

import pytest

from src.application.locks import ProductLockRegistry


def _saved(product, expected_version):
    return product.model_copy(update={"version": expected_version + 1})


def _created(product):
    return product.model_copy(update={"version": 1})


@pytest.fixture
def mock_product_store():
    store = AsyncMock()
    store.get_product.return_value = None
    store.create_product.side_effect = _created
    store.save_product.side_effect = _saved
    store.list_products.return_value = []
    return store


@pytest.fixture
def locks():
    return ProductLockRegistry()
