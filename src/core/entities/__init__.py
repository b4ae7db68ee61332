"""Core domain entities."""

from src.core.entities.inventory import (
    Batch,
    ConsumptionDetail,
    Product,
    StockRemovalResult,
    ValuationLine,
    ValuationMethod,
    ValuationReport,
)
from src.core.entities.money import MoneyRounding, to_decimal

__all__ = [
    # Inventory entities
    "Batch",
    "Product",
    "ValuationMethod",
    "ConsumptionDetail",
    "StockRemovalResult",
    "ValuationLine",
    "ValuationReport",
    # Money helpers
    "MoneyRounding",
    "to_decimal",
]
