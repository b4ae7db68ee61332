"""Application use cases."""

from src.application.use_cases.issue_stock import IssueStockResult, IssueStockUseCase
from src.application.use_cases.receive_stock import ReceiveStockResult, ReceiveStockUseCase
from src.application.use_cases.value_inventory import (
    InventoryValuationResult,
    ValueInventoryUseCase,
)

__all__ = [
    "ReceiveStockUseCase",
    "ReceiveStockResult",
    "IssueStockUseCase",
    "IssueStockResult",
    "ValueInventoryUseCase",
    "InventoryValuationResult",
]
