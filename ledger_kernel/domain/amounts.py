"""
Amounts -- Decimal parsing, tolerance and rounding helpers.

Responsibility:
    Converts backend amount and date values into ``Decimal`` and ``date``
    and centralises the 0.01 balancing tolerance.  Every sum in the kernel
    is an exact ``Decimal`` sum, so rounding drift never accumulates past
    the tolerance.

Architecture position:
    Kernel > Domain -- pure functional core, zero I/O.

Failure modes:
    - InvalidAmountError for NaN, infinity, or non-numeric text.
    - InvalidDateError for values that are not ISO dates.
"""

from __future__ import annotations

from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any

from ledger_kernel.exceptions import InvalidAmountError, InvalidDateError

ZERO = Decimal("0")
BALANCE_TOLERANCE = Decimal("0.01")


def parse_amount(value: Any) -> Decimal:
    """
    Convert a backend amount into a finite Decimal.

    None and blank strings become zero (blank entry-form cells).  Floats go
    through ``str()`` so that 0.1 stays 0.1.
    """
    if value is None:
        return ZERO
    if isinstance(value, bool):
        raise InvalidAmountError(str(value))
    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, (int, float)):
        try:
            result = Decimal(str(value))
        except InvalidOperation as e:
            raise InvalidAmountError(str(value)) from e
    elif isinstance(value, str):
        text = value.strip().replace(",", "")
        if not text:
            return ZERO
        try:
            result = Decimal(text)
        except InvalidOperation as e:
            raise InvalidAmountError(value) from e
    else:
        raise InvalidAmountError(repr(value))

    if not result.is_finite():
        raise InvalidAmountError(str(value))
    return result


def parse_date(value: Any) -> date:
    """
    Convert a backend date into a ``date``.

    Accepts ``date``, ``datetime`` (date part), ``YYYY-MM-DD`` and ISO
    datetime strings such as ``2024-04-15T00:00:00.000Z``.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        text = value.strip()
        # Only a time part may follow the date.
        if len(text) > 10 and text[10] not in "T ":
            raise InvalidDateError(value)
        try:
            return date.fromisoformat(text[:10])
        except ValueError as e:
            raise InvalidDateError(value) from e
    raise InvalidDateError(repr(value))


def within_tolerance(
    left: Decimal,
    right: Decimal,
    tolerance: Decimal = BALANCE_TOLERANCE,
) -> bool:
    """True when ``|left - right|`` is strictly below the tolerance."""
    return abs(left - right) < tolerance


def quantize_amount(value: Decimal, places: int = 2) -> Decimal:
    """Round half-up to the given number of decimal places (display only)."""
    return value.quantize(Decimal(1).scaleb(-places), rounding=ROUND_HALF_UP)


def sum_amounts(values) -> Decimal:
    """Exact Decimal sum of an iterable of amounts."""
    return sum(values, ZERO)
