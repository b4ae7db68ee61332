"""Decimal helpers for quantities, unit costs and money amounts."""

import decimal
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Any

from src.core.exceptions import ValidationError

ZERO = Decimal("0")


def to_decimal(value: Any, field: str) -> Decimal:
    """Coerce a caller-supplied number into a finite Decimal.

    Floats go through ``str()`` so ``0.1`` becomes ``Decimal("0.1")`` rather
    than its binary expansion.
    """
    if isinstance(value, bool) or value is None:
        raise ValidationError(field, "must be a number", value)
    if isinstance(value, Decimal):
        result = value
    else:
        try:
            result = Decimal(str(value).strip())
        except (InvalidOperation, ValueError):
            raise ValidationError(field, "must be a number", value) from None
    if not result.is_finite():
        raise ValidationError(field, "must be finite", value)
    return result


@dataclass(frozen=True)
class MoneyRounding:
    """Rounding applied to money results (minor-unit places + decimal mode)."""

    places: int = 2
    mode: str = decimal.ROUND_HALF_UP

    @property
    def quantum(self) -> Decimal:
        return Decimal(1).scaleb(-self.places)

    def apply(self, amount: Decimal) -> Decimal:
        return amount.quantize(self.quantum, rounding=self.mode)

    @classmethod
    def from_settings(cls) -> "MoneyRounding":
        from src.config import get_settings

        costing = get_settings().costing
        return cls(places=costing.currency_places, mode=costing.rounding_mode)
