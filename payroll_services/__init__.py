"""
payroll_services -- Orchestration of payroll runs over external collaborators.

Services own all I/O (through the collaborator protocols) and call the
pure engines in ``payroll_engines`` with policy from ``payroll_config``.
"""

from payroll_services.payroll_run import (
    BatchRunResult,
    PayrollRunFailure,
    PayrollRunResult,
    PayrollRunService,
)
from payroll_services.protocols import AttendanceSource, EmployeeDirectory

__all__ = [
    "AttendanceSource",
    "BatchRunResult",
    "EmployeeDirectory",
    "PayrollRunFailure",
    "PayrollRunResult",
    "PayrollRunService",
]
