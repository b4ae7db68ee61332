"""Data Transfer Objects for the costing use cases.

Request DTOs: Validate and parse incoming requests.
Response DTOs: Structure and serialize results.
"""

from src.application.dto.requests import (
    InventoryValuationRequest,
    IssueStockRequest,
    ReceiveStockRequest,
)
from src.application.dto.responses import (
    BatchResponse,
    ConsumptionDetailResponse,
    ErrorResponse,
    InventoryValuationResponse,
    IssueStockResponse,
    ProductResponse,
    ProductValuationResponse,
    ReceiveStockResponse,
    ValuationLineResponse,
)

__all__ = [
    # Requests
    "ReceiveStockRequest",
    "IssueStockRequest",
    "InventoryValuationRequest",
    # Responses
    "BatchResponse",
    "ProductResponse",
    "ConsumptionDetailResponse",
    "ReceiveStockResponse",
    "IssueStockResponse",
    "ValuationLineResponse",
    "ProductValuationResponse",
    "InventoryValuationResponse",
    "ErrorResponse",
]
