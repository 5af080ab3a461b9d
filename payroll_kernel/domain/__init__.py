"""
Module: payroll_kernel.domain
Responsibility:
    Re-exports the immutable value objects shared by the engines, the
    configuration layer and the service layer.

Architecture position:
    Kernel > Domain -- pure data, zero I/O.  MUST NOT import
    payroll_engines, payroll_config or payroll_services.
"""

from payroll_kernel.domain.attendance import (
    AttendanceEntry,
    AttendanceStatus,
    DailyEvaluation,
)
from payroll_kernel.domain.payroll import (
    CompensationProfile,
    PayPeriod,
    PayrollRecord,
    PeriodAggregate,
)

__all__ = [
    "AttendanceEntry",
    "AttendanceStatus",
    "CompensationProfile",
    "DailyEvaluation",
    "PayPeriod",
    "PayrollRecord",
    "PeriodAggregate",
]
