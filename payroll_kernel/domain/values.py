"""
Values -- Decimal helpers for money, hours and minutes.

Responsibility:
    Provides the conversion and rounding primitives used by every
    payroll computation: coercing caller input to ``Decimal``, rounding
    money to centavos, and converting whole minutes to decimal hours.

Architecture position:
    Kernel > Domain -- pure functional core, zero I/O.
    Imported by the domain models and the engines.

Invariants enforced:
    - Decimal-only arithmetic: floats are converted through ``str`` so
      ``0.1`` becomes ``Decimal("0.1")`` and never its binary expansion.
    - Money is rounded ROUND_HALF_UP to two places, in one place only.
    - Hours are derived from whole minutes, never the other way round.

Failure modes:
    - ValueError on booleans, NaN, infinities and unparseable strings.
"""

from __future__ import annotations

from datetime import timedelta
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any

MONEY_PLACES = Decimal("0.01")
HOURS_PLACES = Decimal("0.0001")
ZERO = Decimal("0")
ZERO_MONEY = Decimal("0.00")
MINUTES_PER_HOUR = 60


def to_decimal(value: Any) -> Decimal:
    """
    Coerce a numeric value to a finite ``Decimal``.

    Preconditions:
        - ``value`` is a ``Decimal``, ``int``, ``float`` or numeric string.
    Postconditions:
        - Returns a finite ``Decimal``.
    Raises:
        ValueError: if ``value`` is a bool, None, non-numeric or not finite.
    """
    if isinstance(value, bool) or value is None:
        raise ValueError(f"Not a numeric amount: {value!r}")
    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, int):
        result = Decimal(value)
    elif isinstance(value, (float, str)):
        try:
            result = Decimal(str(value).strip())
        except InvalidOperation as exc:
            raise ValueError(f"Not a numeric amount: {value!r}") from exc
    else:
        raise ValueError(f"Not a numeric amount: {value!r}")

    if not result.is_finite():
        raise ValueError(f"Amount must be finite: {value!r}")
    return result


def quantize_money(amount: Decimal) -> Decimal:
    """Round a monetary amount to two places (ROUND_HALF_UP)."""
    return amount.quantize(MONEY_PLACES, rounding=ROUND_HALF_UP)


def whole_minutes(delta: timedelta) -> int:
    """Whole minutes in a non-negative duration; leftover seconds are dropped."""
    return delta // timedelta(minutes=1)


def minutes_to_hours(minutes: int) -> Decimal:
    """Convert whole minutes to decimal hours (540 -> 9, 570 -> 9.5)."""
    return (Decimal(minutes) / MINUTES_PER_HOUR).quantize(
        HOURS_PLACES, rounding=ROUND_HALF_UP
    )
