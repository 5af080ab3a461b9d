"""
Module: payroll_engines.daily_time
Responsibility:
    Turn one raw attendance entry (employee, date, log-in, log-out) into
    a ``DailyEvaluation``: worked hours, presence, lateness and
    undertime against a configurable standard shift.

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    May only import payroll_kernel.

Invariants enforced:
    - Purity: no clock access; the work date and shift are parameters.
    - Minute counts are whole, non-negative ints (seconds are truncated).
    - Hours are derived from whole minutes, so 08:00-17:30 is exactly 9.5.
    - Late means log-in strictly after the shift start; undertime means
      log-out strictly before the shift end.

Failure modes:
    - InvalidAttendanceError when the entry is missing, has a
      non-positive employee id, or logs out before logging in.
    - ValueError when a ShiftSchedule ends at or before it starts.

Usage:
    from payroll_engines.daily_time import DailyTimeEvaluator

    evaluator = DailyTimeEvaluator()
    evaluation = evaluator.evaluate(entry)
    evaluation.late_minutes   # 30 for an 08:30 log-in
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time
from typing import Any

from payroll_kernel.domain.attendance import (
    AttendanceStatus,
    DailyEvaluation,
    validate_entry_fields,
)
from payroll_kernel.domain.values import ZERO, minutes_to_hours, whole_minutes
from payroll_kernel.exceptions import InvalidAttendanceError
from payroll_kernel.logging_config import get_logger

logger = get_logger("engines.daily_time")


@dataclass(frozen=True)
class ShiftSchedule:
    """
    Standard shift boundaries used to judge lateness and undertime.

    Contract:
        Frozen dataclass supplied by configuration, per policy or per
        employee.
    Guarantees:
        - ``start`` < ``end`` (no shifts crossing midnight).
    """

    start: time = time(8, 0)
    end: time = time(17, 0)

    def __post_init__(self) -> None:
        if self.end <= self.start:
            raise ValueError(
                f"Shift end {self.end.isoformat()} must be after start {self.start.isoformat()}"
            )

    @property
    def nominal_minutes(self) -> int:
        """Length of the shift in whole minutes (540 for 08:00-17:00)."""
        return whole_minutes(_on(date.min, self.end) - _on(date.min, self.start))


DEFAULT_SHIFT = ShiftSchedule()


def _on(day: date, moment: time) -> datetime:
    return datetime.combine(day, moment)


class DailyTimeEvaluator:
    """
    Evaluate single attendance entries against a standard shift.

    Pure functions - no I/O, no clock.  The shift given to the
    constructor is the default; ``evaluate`` accepts per-call overrides.
    """

    def __init__(self, shift: ShiftSchedule = DEFAULT_SHIFT):
        self.shift = shift

    def evaluate(
        self,
        entry: Any,
        standard_start: time | None = None,
        standard_end: time | None = None,
    ) -> DailyEvaluation:
        """
        Derive the day's facts from one attendance entry.

        Args:
            entry: An ``AttendanceEntry`` (or any object with
                ``employee_id``, ``work_date``, ``log_in``, ``log_out``).
            standard_start: Override for the shift start.
            standard_end: Override for the shift end.

        Returns:
            A new, immutable ``DailyEvaluation``.

        Raises:
            InvalidAttendanceError: If the entry is missing or malformed.
        """
        if entry is None:
            logger.warning("daily_evaluation_missing_entry", extra={})
            raise InvalidAttendanceError("entry is missing")

        employee_id = getattr(entry, "employee_id", None)
        work_date = getattr(entry, "work_date", None)
        log_in = getattr(entry, "log_in", None)
        log_out = getattr(entry, "log_out", None)
        validate_entry_fields(employee_id, work_date, log_in, log_out)

        shift = self._resolve_shift(standard_start, standard_end)

        if log_in is None:
            evaluation = DailyEvaluation(
                employee_id=employee_id,
                work_date=work_date,
                worked_minutes=0,
                worked_hours=ZERO,
                is_present=False,
                is_late=False,
                late_minutes=0,
                has_undertime=False,
                undertime_minutes=0,
                is_incomplete=False,
                status=AttendanceStatus.ABSENT,
            )
            logger.debug("daily_evaluation_absent", extra={
                "employee_id": employee_id,
                "work_date": work_date,
            })
            return evaluation

        is_late = log_in > shift.start
        late_minutes = (
            whole_minutes(_on(work_date, log_in) - _on(work_date, shift.start))
            if is_late else 0
        )

        if log_out is None:
            # Incomplete day: present, no hours, no undertime.
            worked_minutes = 0
            has_undertime = False
            undertime_minutes = 0
        else:
            worked_minutes = whole_minutes(_on(work_date, log_out) - _on(work_date, log_in))
            has_undertime = log_out < shift.end
            undertime_minutes = (
                whole_minutes(_on(work_date, shift.end) - _on(work_date, log_out))
                if has_undertime else 0
            )

        evaluation = DailyEvaluation(
            employee_id=employee_id,
            work_date=work_date,
            worked_minutes=worked_minutes,
            worked_hours=minutes_to_hours(worked_minutes),
            is_present=True,
            is_late=is_late,
            late_minutes=late_minutes,
            has_undertime=has_undertime,
            undertime_minutes=undertime_minutes,
            is_incomplete=log_out is None,
            status=AttendanceStatus.compose(True, is_late, has_undertime),
        )

        logger.debug("daily_evaluation_completed", extra={
            "employee_id": employee_id,
            "work_date": work_date,
            "worked_minutes": worked_minutes,
            "late_minutes": late_minutes,
            "undertime_minutes": undertime_minutes,
            "status": evaluation.status_label,
        })
        return evaluation

    def _resolve_shift(
        self, standard_start: time | None, standard_end: time | None,
    ) -> ShiftSchedule:
        if standard_start is None and standard_end is None:
            return self.shift
        return ShiftSchedule(
            start=standard_start if standard_start is not None else self.shift.start,
            end=standard_end if standard_end is not None else self.shift.end,
        )


def evaluate_day(
    entry: Any,
    shift: ShiftSchedule = DEFAULT_SHIFT,
) -> DailyEvaluation:
    """Convenience wrapper: evaluate one entry against ``shift``."""
    return DailyTimeEvaluator(shift).evaluate(entry)
