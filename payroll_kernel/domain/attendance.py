"""
Attendance Domain Models (``payroll_kernel.domain.attendance``).

Responsibility
--------------
Frozen dataclass value objects for one day of attendance: the raw
``AttendanceEntry`` supplied by an attendance collaborator, and the
derived ``DailyEvaluation`` produced by the daily time engine.

Architecture position
---------------------
**Kernel > Domain** -- pure data definitions with ZERO I/O.

Invariants enforced
-------------------
* All models are ``frozen=True`` (immutable after construction).
* An ``AttendanceEntry`` is valid on construction or never exists:
  employee id > 0, a work date, and log-out not before log-in.
* Minute counts are non-negative ints; hours are non-negative Decimals.

Failure modes
-------------
* ``InvalidAttendanceError`` from ``AttendanceEntry`` construction.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, time
from decimal import Decimal
from enum import Enum

from payroll_kernel.exceptions import InvalidAttendanceError
from payroll_kernel.logging_config import get_logger

logger = get_logger("domain.attendance")


class AttendanceStatus(str, Enum):
    """Summary label for one evaluated day."""

    PRESENT = "Present"
    LATE = "Late"
    UNDERTIME = "Undertime"
    LATE_UNDERTIME = "Late, Undertime"
    ABSENT = "Absent"

    @classmethod
    def compose(
        cls, is_present: bool, is_late: bool, has_undertime: bool
    ) -> AttendanceStatus:
        """Pick the label for a day from its presence and penalty flags."""
        if not is_present:
            return cls.ABSENT
        if is_late and has_undertime:
            return cls.LATE_UNDERTIME
        if is_late:
            return cls.LATE
        if has_undertime:
            return cls.UNDERTIME
        return cls.PRESENT


def validate_entry_fields(
    employee_id: object,
    work_date: object,
    log_in: time | None,
    log_out: time | None,
) -> None:
    """
    Check the attendance invariants shared by construction and evaluation.

    Raises:
        InvalidAttendanceError: on a missing/non-positive employee id, a
            missing work date, or log-out earlier than log-in.
    """
    if isinstance(employee_id, bool) or not isinstance(employee_id, int):
        raise InvalidAttendanceError(
            "employee identifier is missing or not an integer",
            employee_id=employee_id,
            work_date=work_date if isinstance(work_date, date) else None,
        )
    if employee_id <= 0:
        raise InvalidAttendanceError(
            "employee identifier must be positive",
            employee_id=employee_id,
            work_date=work_date if isinstance(work_date, date) else None,
        )
    if not isinstance(work_date, date):
        raise InvalidAttendanceError(
            "work date is missing", employee_id=employee_id,
        )
    if log_in is not None and log_out is not None and log_out < log_in:
        logger.warning(
            "attendance_log_out_before_log_in",
            extra={
                "employee_id": employee_id,
                "work_date": work_date,
                "log_in": log_in,
                "log_out": log_out,
            },
        )
        raise InvalidAttendanceError(
            f"log-out {log_out.isoformat()} precedes log-in {log_in.isoformat()}",
            employee_id=employee_id,
            work_date=work_date,
        )


@dataclass(frozen=True)
class AttendanceEntry:
    """
    One raw attendance row: who, which day, and when they logged in/out.

    Contract:
        Built once through the constructor; invalid combinations raise
        ``InvalidAttendanceError`` so no partially valid entry exists.
    Guarantees:
        - ``employee_id`` > 0 and ``work_date`` is set.
        - ``log_out`` >= ``log_in`` whenever both are present.
    Non-goals:
        - Does not enforce one entry per (employee, date); the period
          aggregator resolves duplicates.
    """

    employee_id: int
    work_date: date
    log_in: time | None = None
    log_out: time | None = None

    def __post_init__(self) -> None:
        validate_entry_fields(
            self.employee_id, self.work_date, self.log_in, self.log_out,
        )


@dataclass(frozen=True)
class DailyEvaluation:
    """
    Derived facts for one attendance entry.

    Contract:
        Produced fresh by ``DailyTimeEvaluator.evaluate``; never persisted.
    Guarantees:
        - ``worked_hours`` equals ``worked_minutes`` expressed in hours.
        - ``late_minutes`` > 0 implies ``is_late``; likewise undertime.
        - ``status`` agrees with the presence and penalty flags.
    """

    employee_id: int
    work_date: date
    worked_minutes: int
    worked_hours: Decimal
    is_present: bool
    is_late: bool
    late_minutes: int
    has_undertime: bool
    undertime_minutes: int
    is_incomplete: bool
    status: AttendanceStatus

    @property
    def status_label(self) -> str:
        """Human-readable status ("Present", "Late", ...)."""
        return self.status.value

    @property
    def is_full_day(self) -> bool:
        """Present for a complete day with neither lateness nor undertime."""
        return (
            self.is_present
            and not self.is_incomplete
            and not self.is_late
            and not self.has_undertime
        )
