"""
Core business logic services.

Layer-pure services that depend only on:
- src/core/entities/*
- src/core/exceptions.py

NO infrastructure imports, NO logging, NO I/O.
"""

from src.core.services.batch_ledger import (
    check_ledger_balance,
    consumption_order,
    ledger_quantity,
    ledger_value,
    open_batches,
    validate_product,
)
from src.core.services.costing_engine import (
    add_stock,
    calculate_inventory_value,
    calculate_total_inventory_value,
    new_batch_id,
    remove_stock,
    valuation_report,
)

__all__ = [
    # Costing engine
    "add_stock",
    "remove_stock",
    "calculate_inventory_value",
    "calculate_total_inventory_value",
    "valuation_report",
    "new_batch_id",
    # Batch ledger
    "validate_product",
    "check_ledger_balance",
    "consumption_order",
    "ledger_quantity",
    "ledger_value",
    "open_batches",
]
