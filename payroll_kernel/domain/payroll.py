"""
Payroll Domain Models (``payroll_kernel.domain.payroll``).

Responsibility
--------------
Frozen dataclass value objects representing the nouns of a payroll
computation: compensation profiles, pay periods, period aggregates and
payroll records.

Architecture position
---------------------
**Kernel > Domain** -- pure data definitions with ZERO I/O.  Consumed
by the engines and returned to callers.

Invariants enforced
-------------------
* All models are ``frozen=True`` and validated in ``__post_init__``.
* All monetary fields use ``Decimal`` -- NEVER ``float``.
* ``PayPeriod``: both bounds present and start <= end.
* ``PayrollRecord``: net_pay == gross_pay - total_deductions exactly.
* Mapping fields are read-only views; they are left out of the hash.

Failure modes
-------------
* ``InvalidCompensationError`` -- bad profile id, salary or allowance.
* ``InvalidPeriodError`` -- missing or inverted period bounds.
* ``PayrollCalculationError`` -- aggregate/record internal inconsistency.
"""

from __future__ import annotations

import calendar
from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from datetime import date, timedelta
from decimal import Decimal
from types import MappingProxyType

from payroll_kernel.domain.values import (
    ZERO,
    ZERO_MONEY,
    quantize_money,
    to_decimal,
)
from payroll_kernel.exceptions import (
    InvalidCompensationError,
    InvalidPeriodError,
    PayrollCalculationError,
)
from payroll_kernel.logging_config import get_logger

logger = get_logger("domain.payroll")

# Monday=0 .. Friday=4
WORKING_WEEKDAYS = frozenset(range(5))


@dataclass(frozen=True)
class CompensationProfile:
    """
    An employee's pay terms as supplied by the employee directory.

    Contract:
        Read-only to the engines.  ``allowances`` is copied into a read-only
        mapping and every value coerced to ``Decimal`` on construction.
    Guarantees:
        - ``employee_id`` > 0.
        - ``basic_salary`` >= 0 and every allowance >= 0.
    """

    employee_id: int
    basic_salary: Decimal
    allowances: Mapping[str, Decimal] = field(default_factory=dict, hash=False)
    first_name: str | None = None
    last_name: str | None = None

    def __post_init__(self) -> None:
        if isinstance(self.employee_id, bool) or not isinstance(self.employee_id, int):
            raise InvalidCompensationError(self.employee_id, "employee identifier must be an integer")
        if self.employee_id <= 0:
            raise InvalidCompensationError(self.employee_id, "employee identifier must be positive")

        try:
            salary = to_decimal(self.basic_salary)
        except ValueError as exc:
            raise InvalidCompensationError(self.employee_id, str(exc)) from exc
        if salary < 0:
            logger.warning(
                "compensation_negative_basic_salary",
                extra={"employee_id": self.employee_id, "basic_salary": salary},
            )
            raise InvalidCompensationError(self.employee_id, "basic salary cannot be negative")

        allowances: dict[str, Decimal] = {}
        for name, raw in dict(self.allowances or {}).items():
            if not isinstance(name, str) or not name.strip():
                raise InvalidCompensationError(self.employee_id, f"allowance name {name!r} is blank")
            try:
                amount = to_decimal(raw)
            except ValueError as exc:
                raise InvalidCompensationError(self.employee_id, f"allowance {name!r}: {exc}") from exc
            if amount < 0:
                raise InvalidCompensationError(self.employee_id, f"allowance {name!r} cannot be negative")
            allowances[name] = amount

        object.__setattr__(self, "basic_salary", salary)
        object.__setattr__(self, "allowances", MappingProxyType(allowances))

    @property
    def total_allowances(self) -> Decimal:
        """Sum of all fixed monthly allowances, rounded to centavos."""
        return quantize_money(sum(self.allowances.values(), ZERO))

    @property
    def full_name(self) -> str:
        """Display name, e.g. "John Doe"; empty when no name is known."""
        parts = [p.strip() for p in (self.first_name, self.last_name) if p and p.strip()]
        return " ".join(parts)


@dataclass(frozen=True)
class PayPeriod:
    """
    An inclusive date range covered by one payroll computation.

    Guarantees:
        - ``start`` and ``end`` are dates and ``start`` <= ``end``.
    """

    start: date
    end: date

    def __post_init__(self) -> None:
        validate_period_bounds(self.start, self.end)

    @classmethod
    def for_month(cls, year: int, month: int) -> PayPeriod:
        """The whole calendar month, e.g. 2024-06-01 to 2024-06-30."""
        last_day = calendar.monthrange(year, month)[1]
        return cls(date(year, month, 1), date(year, month, last_day))

    @property
    def label(self) -> str:
        return f"{self.start.isoformat()} to {self.end.isoformat()}"

    def contains(self, day: date) -> bool:
        """True if ``day`` falls inside the period (both ends inclusive)."""
        return self.start <= day <= self.end

    def days(self) -> Iterator[date]:
        """Every calendar day of the period in order."""
        day = self.start
        while day <= self.end:
            yield day
            day += timedelta(days=1)

    def working_days(self) -> int:
        """Count of Monday-Friday days in the period."""
        return sum(1 for day in self.days() if day.weekday() in WORKING_WEEKDAYS)


def validate_period_bounds(start: object, end: object) -> None:
    """
    Check pay period bounds.

    Raises:
        InvalidPeriodError: if either bound is missing or start > end.
    """
    if start is None or end is None:
        raise InvalidPeriodError(start, end, "both period bounds are required")
    if not isinstance(start, date) or not isinstance(end, date):
        raise InvalidPeriodError(start, end, "period bounds must be dates")
    if start > end:
        logger.warning(
            "pay_period_inverted",
            extra={"period_start": start, "period_end": end},
        )
        raise InvalidPeriodError(start, end)


@dataclass(frozen=True)
class PeriodAggregate:
    """
    Attendance statistics for one employee over one pay period.

    Contract:
        Produced by ``PeriodAggregator``; zeroed (not absent) when the
        employee has no attendance in the period.
    Guarantees:
        - All counts and minute sums are non-negative.
        - ``days_worked`` <= ``days_evaluated``.
    """

    employee_id: int
    period: PayPeriod
    days_worked: int = 0
    total_hours: Decimal = ZERO
    total_late_minutes: int = 0
    total_undertime_minutes: int = 0
    total_worked_minutes: int = 0
    days_evaluated: int = 0
    days_late: int = 0
    days_undertime: int = 0
    incomplete_days: int = 0

    def __post_init__(self) -> None:
        if isinstance(self.employee_id, bool) or not isinstance(self.employee_id, int) or self.employee_id <= 0:
            raise PayrollCalculationError(
                "aggregate employee identifier must be a positive integer",
                employee_id=self.employee_id,
            )
        counts = (
            self.days_worked,
            self.total_late_minutes,
            self.total_undertime_minutes,
            self.total_worked_minutes,
            self.days_evaluated,
            self.days_late,
            self.days_undertime,
            self.incomplete_days,
        )
        if any(c < 0 for c in counts) or self.total_hours < 0:
            raise PayrollCalculationError(
                "aggregate totals cannot be negative", employee_id=self.employee_id,
            )
        if self.days_worked > self.days_evaluated and self.days_evaluated:
            raise PayrollCalculationError(
                "days worked cannot exceed days evaluated", employee_id=self.employee_id,
            )

    @classmethod
    def empty(cls, employee_id: int, period: PayPeriod) -> PeriodAggregate:
        """Zeroed aggregate for an employee with no attendance in ``period``."""
        return cls(employee_id=employee_id, period=period)

    @property
    def average_hours(self) -> Decimal:
        """Mean worked hours per day worked, to two places (0 when none)."""
        if not self.days_worked:
            return ZERO
        return quantize_money(self.total_hours / self.days_worked)


@dataclass(frozen=True)
class PayrollRecord:
    """
    Final payroll output for one employee and one pay period.

    Guarantees:
        - ``total_deductions`` == sum of ``deductions`` values.
        - ``net_pay`` == ``gross_pay`` - ``total_deductions`` exactly.
        - ``net_pay`` may be negative; it is never clamped.
    """

    employee_id: int
    period: PayPeriod
    days_worked: int
    standard_working_days: int
    basic_pay: Decimal
    total_allowances: Decimal
    gross_pay: Decimal
    deductions: Mapping[str, Decimal] = field(hash=False)
    total_deductions: Decimal
    net_pay: Decimal

    def __post_init__(self) -> None:
        object.__setattr__(self, "deductions", MappingProxyType(dict(self.deductions)))
        itemized = sum(self.deductions.values(), ZERO_MONEY)
        if itemized != self.total_deductions:
            raise PayrollCalculationError(
                f"total deductions {self.total_deductions} do not match "
                f"itemized sum {itemized}",
                employee_id=self.employee_id,
            )
        if self.gross_pay - self.total_deductions != self.net_pay:
            raise PayrollCalculationError(
                f"net pay {self.net_pay} is not gross {self.gross_pay} "
                f"minus deductions {self.total_deductions}",
                employee_id=self.employee_id,
            )

    @property
    def period_label(self) -> str:
        return self.period.label
