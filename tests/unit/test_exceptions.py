"""
Unit tests for the payroll exception hierarchy.

Every exception is catchable as PayrollEngineError, carries a class-level
code, and exposes its inputs as attributes.
"""

from datetime import date

import pytest

from payroll_kernel.exceptions import (
    CollaboratorLookupError,
    DeductionRuleError,
    InvalidAttendanceError,
    InvalidCompensationError,
    InvalidPeriodError,
    NoWorkingDaysError,
    PayrollCalculationError,
    PayrollEngineError,
    PolicyConfigurationError,
    ProfileMismatchError,
)

ALL_EXCEPTIONS = [
    InvalidAttendanceError,
    InvalidPeriodError,
    PayrollCalculationError,
    InvalidCompensationError,
    ProfileMismatchError,
    NoWorkingDaysError,
    DeductionRuleError,
    PolicyConfigurationError,
    CollaboratorLookupError,
]


class TestHierarchy:
    """Catch-by-type behaviour."""

    @pytest.mark.parametrize("exc_type", ALL_EXCEPTIONS)
    def test_all_are_payroll_engine_errors(self, exc_type):
        assert issubclass(exc_type, PayrollEngineError)

    @pytest.mark.parametrize(
        "exc_type",
        [InvalidCompensationError, ProfileMismatchError, NoWorkingDaysError, DeductionRuleError],
    )
    def test_calculation_subclasses(self, exc_type):
        assert issubclass(exc_type, PayrollCalculationError)

    def test_period_error_is_not_calculation_error(self):
        assert not issubclass(InvalidPeriodError, PayrollCalculationError)

    def test_codes_are_unique(self):
        codes = [exc.code for exc in ALL_EXCEPTIONS] + [PayrollEngineError.code]
        assert len(codes) == len(set(codes))


class TestStructuredData:
    """Exceptions carry their inputs."""

    def test_invalid_attendance(self):
        exc = InvalidAttendanceError("log-out precedes log-in", employee_id=7, work_date=date(2024, 6, 3))
        assert exc.employee_id == 7
        assert exc.work_date == date(2024, 6, 3)
        assert "employee=7" in str(exc)

    def test_invalid_period_default_reason(self):
        exc = InvalidPeriodError(date(2024, 6, 30), date(2024, 6, 1))
        assert exc.reason == "start must not be after end"
        assert exc.code == "INVALID_PERIOD"

    def test_profile_mismatch(self):
        exc = ProfileMismatchError(1, 2)
        assert exc.profile_employee_id == 1
        assert exc.aggregate_employee_id == 2
        assert exc.employee_id == 1

    def test_no_working_days(self):
        exc = NoWorkingDaysError(5, date(2024, 6, 1), date(2024, 6, 2))
        assert exc.start == date(2024, 6, 1)
        assert exc.code == "NO_WORKING_DAYS"

    def test_deduction_rule_error(self):
        exc = DeductionRuleError("sss", "returned negative amount -1", employee_id=3)
        assert exc.rule_name == "sss"
        assert "'sss'" in str(exc)

    def test_policy_configuration_error(self):
        exc = PolicyConfigurationError("standard", "missing required key 'shift'")
        assert exc.policy_name == "standard"

    def test_collaborator_lookup(self):
        exc = CollaboratorLookupError("employee directory", 99)
        assert exc.collaborator == "employee directory"
        assert exc.employee_id == 99
