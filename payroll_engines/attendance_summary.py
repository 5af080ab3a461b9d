"""
Module: payroll_engines.attendance_summary
Responsibility:
    Summary statistics and filters over daily evaluations, as shown on
    an employee's attendance view: total days, average hours, attendance
    rate, and "late only" / "full day only" style filters.

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    Consumes DailyEvaluation tuples from payroll_engines.period_aggregation.

Invariants enforced:
    - Attendance rate is capped at 100 percent.
    - "Present Only" and "Late Only" match the exact status label, so a
      day that is late and short appears under neither; "Undertime Only"
      matches any label mentioning undertime.
    - "Full Day Only" also drops incomplete days (no log-out), which
      can carry a "Present" label but have no worked hours.
    - Text search is case-insensitive and matches the work date, worked
      hours or status label of a row.
    - Empty input gives a zeroed summary, never an error.

Failure modes:
    - ValueError when ``expected_days`` is not positive.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum

from payroll_kernel.domain.attendance import AttendanceStatus, DailyEvaluation
from payroll_kernel.domain.values import ZERO, minutes_to_hours, quantize_money

DEFAULT_EXPECTED_DAYS = 22
_HUNDRED = Decimal("100")
_RATE_PLACES = Decimal("0.1")


class AttendanceFilter(str, Enum):
    """Row filters offered on the attendance table."""

    ALL = "All Records"
    PRESENT_ONLY = "Present Only"
    LATE_ONLY = "Late Only"
    UNDERTIME_ONLY = "Undertime Only"
    FULL_DAY_ONLY = "Full Day Only"

    def matches(self, evaluation: DailyEvaluation) -> bool:
        if self is AttendanceFilter.PRESENT_ONLY:
            return evaluation.status is AttendanceStatus.PRESENT
        if self is AttendanceFilter.LATE_ONLY:
            return evaluation.status is AttendanceStatus.LATE
        if self is AttendanceFilter.UNDERTIME_ONLY:
            return evaluation.has_undertime
        if self is AttendanceFilter.FULL_DAY_ONLY:
            return evaluation.is_full_day
        return True


@dataclass(frozen=True)
class AttendanceSummary:
    """Headline numbers for a set of evaluated days."""

    total_days: int
    days_present: int
    total_hours: Decimal
    average_hours: Decimal
    attendance_rate: Decimal
    expected_days: int


def summarize_attendance(
    evaluations: Iterable[DailyEvaluation],
    expected_days: int = DEFAULT_EXPECTED_DAYS,
) -> AttendanceSummary:
    """
    Summarize evaluated days.

    Average hours are per evaluated day (two places); the attendance
    rate is days present over ``expected_days`` as a percentage with one
    decimal place, capped at 100.
    """
    if expected_days <= 0:
        raise ValueError("expected_days must be positive")

    rows = tuple(evaluations)
    if not rows:
        return AttendanceSummary(
            total_days=0,
            days_present=0,
            total_hours=ZERO,
            average_hours=ZERO,
            attendance_rate=ZERO,
            expected_days=expected_days,
        )

    days_present = sum(1 for e in rows if e.is_present)
    total_hours = minutes_to_hours(sum(e.worked_minutes for e in rows))
    rate = min(Decimal(days_present) / expected_days * _HUNDRED, _HUNDRED)

    return AttendanceSummary(
        total_days=len(rows),
        days_present=days_present,
        total_hours=total_hours,
        average_hours=quantize_money(total_hours / len(rows)),
        attendance_rate=rate.quantize(_RATE_PLACES, rounding=ROUND_HALF_UP),
        expected_days=expected_days,
    )


def matches_search(evaluation: DailyEvaluation, search_text: str) -> bool:
    needle = search_text.strip().lower()
    if not needle:
        return True
    cells = (
        evaluation.work_date.isoformat(),
        str(evaluation.worked_hours),
        evaluation.status_label,
    )
    return any(needle in cell.lower() for cell in cells)


def filter_evaluations(
    evaluations: Iterable[DailyEvaluation],
    attendance_filter: AttendanceFilter = AttendanceFilter.ALL,
    search_text: str = "",
) -> tuple[DailyEvaluation, ...]:
    """Keep the evaluations selected by ``attendance_filter`` and
    ``search_text``, in their original order."""
    return tuple(
        e for e in evaluations
        if attendance_filter.matches(e) and matches_search(e, search_text)
    )
