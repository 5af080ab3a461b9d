"""
Module: payroll_engines.period_aggregation
Responsibility:
    Aggregate one employee's daily evaluations over a pay period into a
    ``PeriodAggregate`` (days worked, total hours, late and undertime
    minutes).

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    Consumes payroll_engines.daily_time; produces input for
    payroll_engines.payroll.

Invariants enforced:
    - Only entries for the requested employee with a date inside the
      inclusive period are counted; everything else is ignored.
    - Duplicate dates: the last-encountered entry wins.  This is a
      deterministic tie-break, not an error.
    - No matching entries yields a zeroed aggregate, never an error.
    - Total hours are derived from total whole minutes, so daily
      rounding never accumulates.

Failure modes:
    - InvalidPeriodError when the period is missing or inverted.
    - InvalidAttendanceError propagated from the daily evaluator for a
      malformed retained entry (or a ``None`` in the sequence).

Audit relevance:
    Every aggregation is traced via ``@traced_engine``.
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import date
from typing import Any

from payroll_engines.daily_time import DailyTimeEvaluator
from payroll_engines.tracer import traced_engine
from payroll_kernel.domain.attendance import DailyEvaluation
from payroll_kernel.domain.payroll import PayPeriod, PeriodAggregate, validate_period_bounds
from payroll_kernel.domain.values import minutes_to_hours
from payroll_kernel.exceptions import InvalidAttendanceError, InvalidPeriodError
from payroll_kernel.logging_config import get_logger

logger = get_logger("engines.period_aggregation")


class PeriodAggregator:
    """
    Sum daily attendance facts over a pay period.

    Pure functions - no I/O.  The evaluator given to the constructor is
    used unless a call supplies its own.
    """

    def __init__(self, evaluator: DailyTimeEvaluator | None = None):
        self.evaluator = evaluator or DailyTimeEvaluator()

    @traced_engine("period_aggregation", "1.0", fingerprint_fields=("employee_id", "period"))
    def aggregate(
        self,
        employee_id: int,
        period: PayPeriod,
        entries: Iterable[Any],
        evaluator: DailyTimeEvaluator | None = None,
    ) -> PeriodAggregate:
        """
        Aggregate an employee's attendance over ``period``.

        Args:
            employee_id: Employee whose entries are counted.
            period: Inclusive pay period.
            entries: Attendance entries, possibly for other employees or
                dates; order matters only for duplicate dates.
            evaluator: Optional evaluator overriding the instance default.

        Returns:
            PeriodAggregate (zeroed when nothing falls in the period).

        Raises:
            InvalidPeriodError: If the period is missing or inverted.
        """
        evaluations = self.evaluate_period(employee_id, period, entries, evaluator)
        return _summarize(employee_id, period, evaluations)

    @traced_engine("period_aggregation", "1.0", fingerprint_fields=("employee_id", "period"))
    def aggregate_evaluations(
        self,
        employee_id: int,
        period: PayPeriod,
        evaluations: Iterable[DailyEvaluation],
    ) -> PeriodAggregate:
        """
        Aggregate daily evaluations that were already produced by
        ``evaluate_period``, without evaluating the entries again.

        Raises:
            InvalidPeriodError: If the period is missing or inverted.
        """
        _check_period(period)
        return _summarize(employee_id, period, tuple(evaluations))

    def evaluate_period(
        self,
        employee_id: int,
        period: PayPeriod,
        entries: Iterable[Any],
        evaluator: DailyTimeEvaluator | None = None,
    ) -> tuple[DailyEvaluation, ...]:
        """
        Evaluate the retained entries of a period, in date order.

        Applies the same filtering and "latest wins" policy as
        ``aggregate``; useful to presentation collaborators that render
        the per-day table.
        """
        _check_period(period)

        evaluator = evaluator or self.evaluator
        selected = select_period_entries(employee_id, period, entries)
        return tuple(evaluator.evaluate(selected[day]) for day in sorted(selected))


def select_period_entries(
    employee_id: int,
    period: PayPeriod,
    entries: Iterable[Any],
) -> dict[date, Any]:
    """
    Keep one entry per date for ``employee_id`` inside ``period``.

    Returns:
        Mapping of work date to the last-encountered entry for that date.

    Raises:
        InvalidAttendanceError: If the sequence contains ``None`` or one of
            the employee's entries has no work date.
    """
    selected: dict[date, Any] = {}
    duplicates = 0
    ignored = 0

    for entry in entries:
        if entry is None:
            raise InvalidAttendanceError("entry is missing", employee_id=employee_id)
        if getattr(entry, "employee_id", None) != employee_id:
            ignored += 1
            continue
        work_date = getattr(entry, "work_date", None)
        if not isinstance(work_date, date):
            raise InvalidAttendanceError("work date is missing", employee_id=employee_id)
        if not (period.start <= work_date <= period.end):
            ignored += 1
            continue
        if work_date in selected:
            duplicates += 1
        selected[work_date] = entry

    if duplicates:
        logger.warning("period_aggregation_duplicate_dates", extra={
            "employee_id": employee_id,
            "duplicate_count": duplicates,
        })
    logger.debug("period_entries_selected", extra={
        "employee_id": employee_id,
        "selected_count": len(selected),
        "ignored_count": ignored,
    })
    return selected


def _check_period(period: Any) -> None:
    if period is None:
        raise InvalidPeriodError(None, None, "period is missing")
    validate_period_bounds(getattr(period, "start", None), getattr(period, "end", None))


def _summarize(
    employee_id: int,
    period: PayPeriod,
    evaluations: tuple[DailyEvaluation, ...],
) -> PeriodAggregate:
    total_worked_minutes = sum(e.worked_minutes for e in evaluations)
    aggregate = PeriodAggregate(
        employee_id=employee_id,
        period=period,
        days_worked=sum(1 for e in evaluations if e.is_present),
        total_hours=minutes_to_hours(total_worked_minutes),
        total_late_minutes=sum(e.late_minutes for e in evaluations),
        total_undertime_minutes=sum(e.undertime_minutes for e in evaluations),
        total_worked_minutes=total_worked_minutes,
        days_evaluated=len(evaluations),
        days_late=sum(1 for e in evaluations if e.is_late),
        days_undertime=sum(1 for e in evaluations if e.has_undertime),
        incomplete_days=sum(1 for e in evaluations if e.is_incomplete),
    )

    logger.info("period_aggregation_completed", extra={
        "employee_id": employee_id,
        "period_start": period.start,
        "period_end": period.end,
        "days_evaluated": aggregate.days_evaluated,
        "days_worked": aggregate.days_worked,
        "total_hours": aggregate.total_hours,
        "total_late_minutes": aggregate.total_late_minutes,
        "total_undertime_minutes": aggregate.total_undertime_minutes,
    })
    return aggregate
