"""
payroll_services.protocols -- Collaborator interfaces for payroll runs.

Responsibility:
    Declares the two read-only collaborators a payroll run needs: an
    employee directory that supplies compensation profiles, and an
    attendance source that supplies raw entries for a date range.
    Storage, HTTP clients or in-memory fakes implement these.

Architecture position:
    Services -- structural typing only, no behaviour.
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import date
from typing import Protocol, runtime_checkable

from payroll_kernel.domain.attendance import AttendanceEntry
from payroll_kernel.domain.payroll import CompensationProfile


@runtime_checkable
class EmployeeDirectory(Protocol):
    """Looks up an employee's pay terms; ``None`` when unknown."""

    def get_profile(self, employee_id: int) -> CompensationProfile | None: ...


@runtime_checkable
class AttendanceSource(Protocol):
    """Returns attendance entries for an employee between two dates (inclusive)."""

    def get_entries(
        self, employee_id: int, start: date, end: date,
    ) -> Iterable[AttendanceEntry]: ...
