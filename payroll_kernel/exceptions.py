"""
Typed Exception Hierarchy for the Payroll Kernel.

===============================================================================
WHY TYPED EXCEPTIONS
===============================================================================

Payroll runs touch every employee in an organisation. A caller that has
to parse message strings to tell "bad attendance row" apart from "bad
pay period" will eventually get it wrong. Every error here:

  1. Has a TYPED exception class (catch by type, not message)
  2. Has a CODE attribute (machine-readable, API-safe)
  3. Carries structured DATA (not just a message string)

Example - WRONG way to handle errors:
    try:
        computer.compute_payroll(profile, period, aggregate, rules)
    except Exception as e:
        if "mismatch" in str(e):  # FRAGILE - message might change
            ...

Example - RIGHT way:
    try:
        computer.compute_payroll(profile, period, aggregate, rules)
    except ProfileMismatchError as e:
        log.warning("aggregate belongs to %s", e.aggregate_employee_id)
        api_response(code=e.code)

===============================================================================
EXCEPTION HIERARCHY
===============================================================================

    PayrollEngineError (base)
    |
    +-- InvalidAttendanceError
    +-- InvalidPeriodError
    +-- PayrollCalculationError
    |   +-- InvalidCompensationError
    |   +-- ProfileMismatchError
    |   +-- NoWorkingDaysError
    |   +-- DeductionRuleError
    |
    +-- PolicyConfigurationError
    +-- CollaboratorLookupError

===============================================================================
ERROR CODES - QUICK REFERENCE
===============================================================================

Category        | Code                        | When Raised
----------------|-----------------------------|-----------------------------------------
Attendance      | INVALID_ATTENDANCE          | Missing entry/id, log-out before log-in
Period          | INVALID_PERIOD              | Missing bound, start after end
Payroll         | PAYROLL_CALCULATION_ERROR   | Null profile/period, bad employee id
                | INVALID_COMPENSATION        | Bad id, negative salary or allowance
                | PROFILE_MISMATCH            | Aggregate for a different employee
                | NO_WORKING_DAYS             | Period has no weekdays to prorate over
                | DEDUCTION_RULE_ERROR        | Rule returned negative/non-numeric amount
Configuration   | POLICY_CONFIGURATION_ERROR  | Malformed policy YAML
Collaborators   | COLLABORATOR_LOOKUP_ERROR   | Directory has no profile for employee

===============================================================================
DESIGN DECISIONS
===============================================================================

1. WHY INHERIT FROM Exception (not ValueError, etc.)?
   Domain exceptions should be catchable as a group. Inheriting from
   built-in types mixes domain errors with programming errors.

2. WHY code CLASS ATTRIBUTE (not instance)?
   Codes are static per exception type, so ``InvalidPeriodError.code``
   works without instantiation.

===============================================================================
"""

from __future__ import annotations

from datetime import date
from typing import Any


class PayrollEngineError(Exception):
    """
    Base exception for all payroll engine errors.

    All subclasses must have a ``code`` class attribute for
    machine-readable error identification.
    """

    code: str = "PAYROLL_ENGINE_ERROR"


# Attendance


class InvalidAttendanceError(PayrollEngineError):
    """A single attendance entry is malformed."""

    code: str = "INVALID_ATTENDANCE"

    def __init__(
        self,
        reason: str,
        employee_id: Any = None,
        work_date: date | None = None,
    ):
        self.reason = reason
        self.employee_id = employee_id
        self.work_date = work_date
        where = ""
        if employee_id is not None or work_date is not None:
            where = f" (employee={employee_id}, date={work_date})"
        super().__init__(f"Invalid attendance entry: {reason}{where}")


# Period


class InvalidPeriodError(PayrollEngineError):
    """Pay period bounds are missing or inverted."""

    code: str = "INVALID_PERIOD"

    def __init__(self, start: date | None, end: date | None, reason: str | None = None):
        self.start = start
        self.end = end
        self.reason = reason or "start must not be after end"
        super().__init__(f"Invalid pay period {start} to {end}: {self.reason}")


# Payroll computation


class PayrollCalculationError(PayrollEngineError):
    """The top-level payroll computation request is invalid."""

    code: str = "PAYROLL_CALCULATION_ERROR"

    def __init__(self, reason: str, employee_id: Any = None):
        self.reason = reason
        self.employee_id = employee_id
        super().__init__(f"Payroll calculation failed: {reason}")


class InvalidCompensationError(PayrollCalculationError):
    """A compensation profile failed validated construction."""

    code: str = "INVALID_COMPENSATION"

    def __init__(self, employee_id: Any, reason: str):
        super().__init__(
            f"invalid compensation profile for employee {employee_id}: {reason}",
            employee_id=employee_id,
        )


class ProfileMismatchError(PayrollCalculationError):
    """Aggregate was built for a different employee than the profile."""

    code: str = "PROFILE_MISMATCH"

    def __init__(self, profile_employee_id: int, aggregate_employee_id: int):
        self.profile_employee_id = profile_employee_id
        self.aggregate_employee_id = aggregate_employee_id
        super().__init__(
            f"aggregate employee {aggregate_employee_id} does not match "
            f"profile employee {profile_employee_id}",
            employee_id=profile_employee_id,
        )


class NoWorkingDaysError(PayrollCalculationError):
    """The pay period contains no weekday to prorate the salary over."""

    code: str = "NO_WORKING_DAYS"

    def __init__(self, employee_id: int, start: date, end: date):
        self.start = start
        self.end = end
        super().__init__(
            f"period {start} to {end} contains no standard working days",
            employee_id=employee_id,
        )


class DeductionRuleError(PayrollCalculationError):
    """A deduction rule produced an unusable result."""

    code: str = "DEDUCTION_RULE_ERROR"

    def __init__(self, rule_name: str, reason: str, employee_id: Any = None):
        self.rule_name = rule_name
        super().__init__(
            f"deduction rule {rule_name!r} {reason}",
            employee_id=employee_id,
        )


# Configuration


class PolicyConfigurationError(PayrollEngineError):
    """A payroll policy definition could not be parsed or compiled."""

    code: str = "POLICY_CONFIGURATION_ERROR"

    def __init__(self, policy_name: str, reason: str):
        self.policy_name = policy_name
        self.reason = reason
        super().__init__(f"Invalid payroll policy {policy_name!r}: {reason}")


# Collaborators


class CollaboratorLookupError(PayrollEngineError):
    """An external collaborator could not supply required input."""

    code: str = "COLLABORATOR_LOOKUP_ERROR"

    def __init__(self, collaborator: str, employee_id: Any):
        self.collaborator = collaborator
        self.employee_id = employee_id
        super().__init__(f"{collaborator} returned nothing for employee {employee_id}")
