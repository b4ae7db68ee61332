"""
Domain exceptions for the inventory costing engine.

Every error carries a stable code and a details dict so callers can build
user-facing messages without parsing strings.
"""

from decimal import Decimal
from typing import Any


class CostingError(Exception):
    """Base exception for all costing errors."""

    def __init__(
        self,
        message: str,
        code: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}

    def to_dict(self) -> dict:
        """Convert to dictionary for API responses."""
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details,
        }


# Validation Exceptions
class ValidationError(CostingError):
    """Input validation failed before any computation."""

    def __init__(self, field: str, message: str, value: Any = None):
        super().__init__(
            f"Validation error for '{field}': {message}",
            code="VALIDATION_ERROR",
            details={
                "field": field,
                "message": message,
                "value": str(value)[:100] if value is not None else None,
            },
        )


# Stock Exceptions
class StockError(CostingError):
    """Base exception for stock movements."""

    pass


class InsufficientStockError(StockError):
    """Requested withdrawal exceeds the quantity on hand."""

    def __init__(self, sku: str, requested: Decimal, available: Decimal):
        super().__init__(
            f"Insufficient stock for {sku}: available {available}, requested {requested}",
            code="INSUFFICIENT_STOCK",
            details={
                "sku": sku,
                "requested": str(requested),
                "available": str(available),
            },
        )
        self.sku = sku
        self.requested = requested
        self.available = available


class InvariantViolationError(StockError):
    """Batch ledger no longer balances against the quantity on hand.

    Signals a corrupt stored snapshot, never a normal operating condition.
    """

    def __init__(self, sku: str, expected: Decimal, actual: Decimal):
        super().__init__(
            f"Batch ledger out of balance for {sku}: "
            f"quantity on hand {expected}, batches hold {actual}",
            code="INVARIANT_VIOLATION",
            details={
                "sku": sku,
                "quantity_on_hand": str(expected),
                "batch_total": str(actual),
            },
        )


# Storage Exceptions
class StorageError(CostingError):
    """Base exception for storage operations."""

    pass


class ProductNotFoundError(StorageError):
    """Product not found in storage."""

    def __init__(self, sku: str):
        super().__init__(
            f"Product not found: {sku}",
            code="PRODUCT_NOT_FOUND",
            details={"sku": sku},
        )


class DuplicateProductError(StorageError):
    """Product with the same SKU already exists."""

    def __init__(self, sku: str):
        super().__init__(
            f"Product already exists: {sku}",
            code="DUPLICATE_PRODUCT",
            details={"sku": sku},
        )


class ConcurrentModificationError(StorageError):
    """Stored snapshot changed since it was read."""

    def __init__(self, sku: str, expected_version: int, actual_version: int | None):
        super().__init__(
            f"Product {sku} was modified concurrently "
            f"(expected version {expected_version}, found {actual_version})",
            code="CONCURRENT_MODIFICATION",
            details={
                "sku": sku,
                "expected_version": expected_version,
                "actual_version": actual_version,
            },
        )


class DatabaseError(StorageError):
    """Database operation failed."""

    def __init__(self, operation: str, error: str):
        super().__init__(
            f"Database error during {operation}: {error}",
            code="DATABASE_ERROR",
            details={"operation": operation, "error": error},
        )


class ConfigurationError(CostingError):
    """Configuration error."""

    pass
