"""
Inventory costing engine: FIFO, LIFO and Weighted Average.

Every function is pure. It takes a product snapshot and returns a new one,
leaving the argument untouched, performing no I/O and keeping no state.
Serializing concurrent writes to the same product is the caller's job
(see ``src.application.locks``).

Weighted Average note: withdrawals are costed at the blended average and do
not decrement any batch. Under WAC the batch list is an audit trail of
receipts, so its remaining quantities stop matching the quantity on hand
after the first sale.
"""

import uuid
from datetime import UTC, date, datetime
from decimal import Decimal
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from src.core.entities.inventory import (
    Batch,
    ConsumptionDetail,
    Product,
    StockRemovalResult,
    ValuationLine,
    ValuationReport,
    as_domain_error,
)
from src.core.entities.money import ZERO, MoneyRounding, to_decimal
from src.core.exceptions import InsufficientStockError, ValidationError
from src.core.services.batch_ledger import (
    check_ledger_balance,
    consumption_order,
    ledger_value,
    open_batches,
    validate_product,
)


def new_batch_id(prefix: str | None = None) -> str:
    if prefix is None:
        from src.config import get_settings

        prefix = get_settings().costing.batch_id_prefix
    return f"{prefix}-{uuid.uuid4().hex[:12].upper()}"


def _positive_quantity(value: Any, field: str) -> Decimal:
    quantity = to_decimal(value, field)
    if quantity <= 0:
        raise ValidationError(field, "must be greater than zero", value)
    return quantity


def add_stock(
    product: Product,
    quantity: Any,
    unit_cost: Any,
    received_date: datetime | None = None,
    *,
    batch_id: str | None = None,
    expiry_date: date | None = None,
) -> Product:
    """Receive stock into a new lot and return the updated snapshot.

    Args:
        product: Current snapshot.
        quantity: Units received, must be positive.
        unit_cost: Cost per unit, must not be negative.
        received_date: Receipt timestamp (defaults to now, UTC).
        batch_id: Lot identifier, e.g. a purchase bill reference.
        expiry_date: Carried on the lot for traceability only.

    Raises:
        ValidationError: Bad input or malformed snapshot.
    """
    qty = _positive_quantity(quantity, "quantity")
    cost = to_decimal(unit_cost, "unit_cost")
    if cost < 0:
        raise ValidationError("unit_cost", "must not be negative", unit_cost)
    validate_product(product)

    batch_id = batch_id or new_batch_id()
    if product.find_batch(batch_id) is not None:
        raise ValidationError("batch_id", "already exists on this product", batch_id)

    try:
        batch = Batch(
            id=batch_id,
            received_date=received_date or datetime.now(UTC),
            original_quantity=qty,
            unit_cost=cost,
            remaining_quantity=qty,
            expiry_date=expiry_date,
        )
    except PydanticValidationError as e:
        raise as_domain_error(e, "batch") from e

    old_qty = product.quantity_on_hand
    new_qty = old_qty + qty

    if product.valuation_method.consumes_batches:
        average_cost = cost
    elif old_qty == 0:
        average_cost = cost
    else:
        # Kept as the exact quotient, only COGS and values are rounded
        average_cost = (old_qty * product.average_cost + qty * cost) / new_qty

    return product.model_copy(
        update={
            "quantity_on_hand": new_qty,
            "average_cost": average_cost,
            "batches": (*product.batches, batch),
        }
    )


def remove_stock(
    product: Product,
    quantity_sell: Any,
    *,
    rounding: MoneyRounding | None = None,
) -> StockRemovalResult:
    """Withdraw stock, returning the new snapshot, COGS and the lot breakdown.

    All or nothing: on any error the caller's snapshot is the only state and
    it was never modified.

    Raises:
        ValidationError: Non-positive quantity or malformed snapshot.
        InsufficientStockError: More requested than on hand.
        InvariantViolationError: FIFO/LIFO ledger does not balance afterwards.
    """
    qty = _positive_quantity(quantity_sell, "quantity_sell")
    validate_product(product)
    if qty > product.quantity_on_hand:
        raise InsufficientStockError(
            sku=product.sku, requested=qty, available=product.quantity_on_hand
        )
    rounding = rounding or MoneyRounding.from_settings()

    if not product.valuation_method.consumes_batches:
        exact = qty * product.average_cost
        updated = product.model_copy(
            update={"quantity_on_hand": product.quantity_on_hand - qty}
        )
        return StockRemovalResult(
            updated_product=updated,
            cost_of_goods_sold=rounding.apply(exact),
            consumption_details=(
                ConsumptionDetail(
                    batch_id=None,
                    quantity_taken=qty,
                    unit_cost=product.average_cost,
                    total_cost=exact,
                ),
            ),
        )

    batches = list(product.batches)
    details: list[ConsumptionDetail] = []
    need = qty
    exact = ZERO
    for index in consumption_order(batches, product.valuation_method):
        if need == 0:
            break
        batch = batches[index]
        if batch.remaining_quantity <= 0:
            continue
        take = min(need, batch.remaining_quantity)
        slice_cost = take * batch.unit_cost
        exact += slice_cost
        need -= take
        batches[index] = batch.model_copy(
            update={"remaining_quantity": batch.remaining_quantity - take}
        )
        details.append(
            ConsumptionDetail(
                batch_id=batch.id,
                quantity_taken=take,
                unit_cost=batch.unit_cost,
                total_cost=slice_cost,
            )
        )

    updated = product.model_copy(
        update={
            "quantity_on_hand": product.quantity_on_hand - qty,
            "batches": tuple(batches),
        }
    )
    check_ledger_balance(updated)

    return StockRemovalResult(
        updated_product=updated,
        cost_of_goods_sold=rounding.apply(exact),
        consumption_details=tuple(details),
    )


def _exact_value(product: Product) -> Decimal:
    if product.valuation_method.consumes_batches:
        return ledger_value(product.batches)
    return product.quantity_on_hand * product.average_cost


def calculate_inventory_value(
    product: Product, *, rounding: MoneyRounding | None = None
) -> Decimal:
    """Current inventory value of one product."""
    rounding = rounding or MoneyRounding.from_settings()
    return rounding.apply(_exact_value(product))


def calculate_total_inventory_value(
    products: list[Product], *, rounding: MoneyRounding | None = None
) -> Decimal:
    """Inventory value across products, rounded once on the exact sum."""
    rounding = rounding or MoneyRounding.from_settings()
    return rounding.apply(sum((_exact_value(p) for p in products), ZERO))


def valuation_report(
    product: Product, *, rounding: MoneyRounding | None = None
) -> ValuationReport:
    """Break the inventory value down by open lot (or one average line for WAC)."""
    rounding = rounding or MoneyRounding.from_settings()

    if product.valuation_method.consumes_batches:
        lines = tuple(
            ValuationLine(
                batch_id=b.id,
                received_date=b.received_date,
                quantity=b.remaining_quantity,
                unit_cost=b.unit_cost,
                value=rounding.apply(b.remaining_value),
            )
            for b in open_batches(product)
        )
    elif product.quantity_on_hand > 0:
        lines = (
            ValuationLine(
                batch_id=None,
                quantity=product.quantity_on_hand,
                unit_cost=product.average_cost,
                value=rounding.apply(product.quantity_on_hand * product.average_cost),
            ),
        )
    else:
        lines = ()

    return ValuationReport(
        sku=product.sku,
        valuation_method=product.valuation_method,
        quantity_on_hand=product.quantity_on_hand,
        lines=lines,
        total_value=calculate_inventory_value(product, rounding=rounding),
    )
