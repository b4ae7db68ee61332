"""
Application layer - Use cases, DTOs, and service factories.

This layer is the caller of the pure costing engine:
1. Loads product snapshots from storage
2. Serializes writes per product and retries version conflicts
3. Persists the new snapshot and logs the outcome
"""

from src.application.dto.requests import (
    InventoryValuationRequest,
    IssueStockRequest,
    ReceiveStockRequest,
)
from src.application.dto.responses import (
    ErrorResponse,
    InventoryValuationResponse,
    IssueStockResponse,
    ProductResponse,
    ReceiveStockResponse,
)
from src.application.ledger_writer import LedgerWrite, LedgerWriter
from src.application.locks import ProductLockRegistry
from src.application.services import get_lock_registry, reset_services
from src.application.use_cases import (
    IssueStockUseCase,
    ReceiveStockUseCase,
    ValueInventoryUseCase,
)

__all__ = [
    # Request DTOs
    "ReceiveStockRequest",
    "IssueStockRequest",
    "InventoryValuationRequest",
    # Response DTOs
    "ProductResponse",
    "ReceiveStockResponse",
    "IssueStockResponse",
    "InventoryValuationResponse",
    "ErrorResponse",
    # Use Cases
    "ReceiveStockUseCase",
    "IssueStockUseCase",
    "ValueInventoryUseCase",
    # Concurrency
    "LedgerWriter",
    "LedgerWrite",
    "ProductLockRegistry",
    # Service factories
    "get_lock_registry",
    "reset_services",
]
