"""
Pytest fixtures for the payroll engine test suite.

Provides:
- Structured logging configured once per session, context cleared per test
- ``captured_logs`` for asserting on JSON log records
- Small factories for attendance entries, profiles and periods
"""

import json
import logging
from datetime import date, time
from decimal import Decimal
from io import StringIO

import pytest

from payroll_kernel.domain.attendance import AttendanceEntry
from payroll_kernel.domain.payroll import CompensationProfile, PayPeriod
from payroll_kernel.logging_config import (
    LogContext,
    StructuredFormatter,
    configure_logging,
    reset_logging,
)

# June 2024: Saturday 1st .. Sunday 30th, 20 weekdays.
JUNE_2024 = PayPeriod(date(2024, 6, 1), date(2024, 6, 30))


# =============================================================================
# Logging
# =============================================================================


@pytest.fixture(autouse=True, scope="session")
def _configure_test_logging():
    """Configure structured logging for the test suite."""
    reset_logging()
    configure_logging(level=logging.DEBUG)
    yield
    reset_logging()


@pytest.fixture(autouse=True)
def _clear_log_context():
    """Clear LogContext between tests to prevent cross-test contamination."""
    LogContext.clear()
    yield
    LogContext.clear()


@pytest.fixture
def captured_logs():
    """
    Capture payroll_kernel logs as parsed JSON dicts.

    Usage::

        def test_something(captured_logs):
            PeriodAggregator().aggregate(...)
            logs = captured_logs()
            assert any(r["message"] == "period_aggregation_completed" for r in logs)
    """
    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(StructuredFormatter())
    root = logging.getLogger("payroll_kernel")
    previous_level = root.level
    root.setLevel(logging.DEBUG)
    root.addHandler(handler)

    def _get_records() -> list[dict]:
        lines = stream.getvalue().strip().split("\n")
        return [json.loads(line) for line in lines if line]

    yield _get_records

    root.removeHandler(handler)
    root.setLevel(previous_level)


# =============================================================================
# Factories
# =============================================================================


def make_entry(
    day: date = date(2024, 6, 3),
    log_in: time | None = time(8, 0),
    log_out: time | None = time(17, 0),
    employee_id: int = 1,
) -> AttendanceEntry:
    return AttendanceEntry(employee_id, day, log_in, log_out)


def make_profile(
    employee_id: int = 1,
    basic_salary: str = "30000.00",
    allowances: dict | None = None,
    **kwargs,
) -> CompensationProfile:
    return CompensationProfile(
        employee_id=employee_id,
        basic_salary=Decimal(basic_salary),
        allowances=allowances if allowances is not None else {},
        **kwargs,
    )


@pytest.fixture
def june_2024() -> PayPeriod:
    return JUNE_2024


@pytest.fixture
def entry_factory():
    return make_entry


@pytest.fixture
def profile_factory():
    return make_profile
