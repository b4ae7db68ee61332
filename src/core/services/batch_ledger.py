"""
Batch ledger: invariant checks and read-only aggregates over a product's lots.

A malformed ledger is the caller's problem. These checks reject it, they
never repair it.
"""

from collections.abc import Iterable, Sequence
from decimal import Decimal

from src.core.entities.inventory import Batch, Product, ValuationMethod
from src.core.exceptions import InvariantViolationError, ValidationError


def ledger_quantity(batches: Iterable[Batch]) -> Decimal:
    """Total remaining quantity across all lots."""
    return sum((b.remaining_quantity for b in batches), Decimal("0"))


def ledger_value(batches: Iterable[Batch]) -> Decimal:
    """Exact (unrounded) value of the remaining stock across all lots."""
    return sum((b.remaining_value for b in batches), Decimal("0"))


def consumption_order(batches: Sequence[Batch], method: ValuationMethod) -> list[int]:
    """Indices of ``batches`` in the order a withdrawal draws them.

    FIFO takes the oldest receipt first, LIFO the newest. Equal receipt dates
    keep insertion order in both directions (``sorted`` is stable, also with
    ``reverse=True``).
    """
    if not method.consumes_batches:
        raise ValueError(f"{method.value} does not consume batches")
    return sorted(
        range(len(batches)),
        key=lambda i: batches[i].received_date,
        reverse=method is ValuationMethod.LIFO,
    )


def open_batches(product: Product) -> list[Batch]:
    """Lots that still hold stock, in insertion order."""
    return [b for b in product.batches if not b.is_exhausted]


def validate_product(product: Product) -> None:
    """Reject a snapshot whose ledger breaks the data model invariants."""
    if product.quantity_on_hand < 0:
        raise ValidationError(
            "quantity_on_hand", "must not be negative", product.quantity_on_hand
        )
    if product.average_cost < 0:
        raise ValidationError("average_cost", "must not be negative", product.average_cost)

    seen: set[str] = set()
    for batch in product.batches:
        if batch.id in seen:
            raise ValidationError("batches", f"duplicate batch id '{batch.id}'", batch.id)
        seen.add(batch.id)
        if batch.original_quantity <= 0:
            raise ValidationError(
                f"batches.{batch.id}.original_quantity",
                "must be positive",
                batch.original_quantity,
            )
        if batch.unit_cost < 0:
            raise ValidationError(
                f"batches.{batch.id}.unit_cost", "must not be negative", batch.unit_cost
            )
        if batch.remaining_quantity < 0:
            raise ValidationError(
                f"batches.{batch.id}.remaining_quantity",
                "must not be negative",
                batch.remaining_quantity,
            )
        if batch.remaining_quantity > batch.original_quantity:
            raise ValidationError(
                f"batches.{batch.id}.remaining_quantity",
                "exceeds original quantity",
                batch.remaining_quantity,
            )

    if product.valuation_method.consumes_batches:
        total = ledger_quantity(product.batches)
        if total != product.quantity_on_hand:
            raise ValidationError(
                "batches",
                f"remaining quantities sum to {total}, "
                f"quantity on hand is {product.quantity_on_hand}",
            )


def check_ledger_balance(product: Product) -> None:
    """Post-condition for FIFO/LIFO: on-hand equals the sum of remaining lots."""
    if not product.valuation_method.consumes_batches:
        return
    total = ledger_quantity(product.batches)
    if total != product.quantity_on_hand:
        raise InvariantViolationError(product.sku, product.quantity_on_hand, total)
