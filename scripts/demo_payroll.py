#!/usr/bin/env python3
"""
Payroll run demo using the real pipeline.

Loads the standard YAML policy, wires an in-memory employee directory
and attendance source into PayrollRunService, and prints the daily
table, period summary and payroll record for each sample employee.

Usage:
    python3 scripts/demo_payroll.py
    python3 scripts/demo_payroll.py --year 2024 --month 6
    python3 scripts/demo_payroll.py --filter "Late Only" --log-level DEBUG
"""

import argparse
import logging
import sys
from datetime import date, time
from decimal import Decimal
from pathlib import Path

# ---------------------------------------------------------------------------
# Project root on sys.path
# ---------------------------------------------------------------------------
ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(ROOT))


class InMemoryDirectory:
    def __init__(self, profiles):
        self._profiles = {p.employee_id: p for p in profiles}

    def get_profile(self, employee_id):
        return self._profiles.get(employee_id)


class InMemoryAttendance:
    def __init__(self, entries):
        self._entries = list(entries)

    def get_entries(self, employee_id, start, end):
        return [
            e for e in self._entries
            if e.employee_id == employee_id and start <= e.work_date <= end
        ]


def _sample_profiles():
    from payroll_kernel.domain.payroll import CompensationProfile

    return [
        CompensationProfile(
            employee_id=10001,
            basic_salary=Decimal("45000.00"),
            allowances={"rice": Decimal("1500.00"), "phone": Decimal("1000.00"),
                        "clothing": Decimal("500.00")},
            first_name="John",
            last_name="Doe",
        ),
        CompensationProfile(
            employee_id=10002,
            basic_salary=Decimal("90000.00"),
            allowances={"rice": Decimal("1500.00")},
            first_name="Maria",
            last_name="Santos",
        ),
    ]


def _sample_entries(period):
    """A working month with some late arrivals, early exits and absences."""
    from payroll_kernel.domain.attendance import AttendanceEntry

    patterns = [
        (time(8, 0), time(17, 0)),
        (time(8, 30), time(17, 0)),
        (time(8, 0), time(16, 30)),
        (time(7, 55), time(17, 30)),
        (None, None),
        (time(8, 10), time(16, 45)),
    ]
    entries = []
    for employee_id in (10001, 10002):
        weekdays = [d for d in period.days() if d.weekday() < 5]
        for i, day in enumerate(weekdays):
            log_in, log_out = patterns[(i + employee_id) % len(patterns)]
            if log_in is None:
                continue
            entries.append(AttendanceEntry(employee_id, day, log_in, log_out))
    return entries


def _print_employee(result, profile, attendance_filter, search_text=""):
    from payroll_engines.attendance_summary import filter_evaluations, summarize_attendance

    record = result.record
    print()
    print(f"=== {profile.full_name} (#{profile.employee_id}) {record.period_label} ===")
    print(f"  {'Date':<12}{'Hours':>8}{'Late':>6}{'Under':>7}  Status")
    for e in filter_evaluations(result.evaluations, attendance_filter, search_text):
        print(f"  {e.work_date.isoformat():<12}{str(e.worked_hours):>8}"
              f"{e.late_minutes:>6}{e.undertime_minutes:>7}  {e.status_label}")

    summary = summarize_attendance(result.evaluations)
    print(f"  Days: {summary.total_days}  Avg hours: {summary.average_hours}"
          f"  Attendance: {summary.attendance_rate}%")
    print(f"  Days worked {record.days_worked}/{record.standard_working_days}")
    print(f"  Basic pay        {record.basic_pay:>12}")
    print(f"  Allowances       {record.total_allowances:>12}")
    print(f"  Gross pay        {record.gross_pay:>12}")
    for name, amount in record.deductions.items():
        print(f"    - {name:<14}{amount:>12}")
    print(f"  Total deductions {record.total_deductions:>12}")
    print(f"  Net pay          {record.net_pay:>12}")


def main() -> int:
    parser = argparse.ArgumentParser(description="Payroll pipeline demo")
    parser.add_argument("--year", type=int, default=2024)
    parser.add_argument("--month", type=int, default=6)
    parser.add_argument("--policy", default="standard", help="Policy name under payroll_config/sets")
    parser.add_argument("--filter", default="All Records",
                        help='Attendance filter label, e.g. "Late Only"')
    parser.add_argument("--search", default="", help="Case-insensitive text to match in attendance rows")
    parser.add_argument("--log-level", default="WARNING")
    args = parser.parse_args()

    from payroll_config import get_active_policy
    from payroll_engines.attendance_summary import AttendanceFilter
    from payroll_kernel.domain.payroll import PayPeriod
    from payroll_kernel.logging_config import configure_logging
    from payroll_services.payroll_run import PayrollRunService

    configure_logging(level=getattr(logging, args.log_level.upper(), logging.WARNING))

    try:
        attendance_filter = AttendanceFilter(args.filter)
    except ValueError:
        valid = ", ".join(f.value for f in AttendanceFilter)
        print(f"Unknown filter {args.filter!r}; choose one of: {valid}", file=sys.stderr)
        return 2

    period = PayPeriod.for_month(args.year, args.month)
    profiles = _sample_profiles()
    service = PayrollRunService(
        InMemoryDirectory(profiles),
        InMemoryAttendance(_sample_entries(period)),
        get_active_policy(args.policy),
    )

    batch = service.run_batch([p.employee_id for p in profiles], period)
    by_id = {p.employee_id: p for p in profiles}
    for result in batch.results:
        _print_employee(result, by_id[result.employee_id], attendance_filter, args.search)
    for failure in batch.failures:
        print(f"  FAILED #{failure.employee_id}: [{failure.error_code}] {failure.message}")

    print()
    print(f"Run {batch.run_id} generated {date.today().isoformat()}")
    return 0 if batch.all_succeeded else 1


if __name__ == "__main__":
    sys.exit(main())
