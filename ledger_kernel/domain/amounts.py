"""
Cent-exact money helpers.

All monetary values in the ledger are ``Decimal`` with two decimal places.
Rounding is half away from zero (``ROUND_HALF_UP`` in Decimal terms), applied
whenever a total is computed.
"""

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Iterable

ZERO = Decimal("0.00")
CENT = Decimal("0.01")


def round_cents(value: Decimal) -> Decimal:
    """Round to two decimals, ties away from zero."""
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def sum_cents(values: Iterable[Decimal]) -> Decimal:
    """Sum and round the result to cents."""
    return round_cents(sum(values, Decimal("0")))


def to_amount(value: Decimal | int | str | None) -> Decimal:
    """
    Coerce an input amount to Decimal.

    Floats are rejected: binary fractions cannot represent öre exactly.

    Raises:
        TypeError: for float input.
        ValueError: for strings that are not decimal numbers.
    """
    if value is None:
        return ZERO
    if isinstance(value, float):
        raise TypeError("Monetary amounts must be Decimal, int or str, not float")
    if isinstance(value, Decimal):
        result = value
    else:
        try:
            result = Decimal(str(value).strip())
        except InvalidOperation as exc:
            raise ValueError(f"Not a decimal amount: {value!r}") from exc
    if not result.is_finite():
        raise ValueError(f"Not a finite amount: {value!r}")
    return result


def has_sub_cent_precision(value: Decimal) -> bool:
    """True if the amount carries non-zero digits beyond the second decimal."""
    return value != value.quantize(CENT, rounding=ROUND_HALF_UP)
