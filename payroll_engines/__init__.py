"""
Module: payroll_engines
Responsibility:
    Package entrypoint that re-exports the public symbols of the pure
    payroll calculation engines.  This is the import surface for the
    service layer and for presentation collaborators.

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    May only import payroll_kernel (and sibling engine modules).
    MUST NOT import payroll_services or payroll_config.

Invariants enforced:
    - Purity: engines never read the clock; dates and shift times are
      passed in as explicit parameters.
    - Decimal-only arithmetic for money and hours.
    - Determinism: identical inputs always produce identical outputs.

Failure modes:
    - PayrollEngineError subclasses from payroll_kernel.exceptions on
      invalid input.

Audit relevance:
    Period aggregation and payroll computation are traced via the
    ``@traced_engine`` decorator (see ``payroll_engines.tracer``),
    emitting PAYROLL_ENGINE_TRACE log records.

Usage:
    from payroll_engines import DailyTimeEvaluator, PeriodAggregator, PayrollComputer
    from payroll_engines import RateDeduction, BracketDeduction, TaxBracket
"""

from payroll_kernel.logging_config import get_logger

logger = get_logger("engines")

from payroll_engines.attendance_summary import (
    AttendanceFilter,
    AttendanceSummary,
    filter_evaluations,
    summarize_attendance,
)
from payroll_engines.daily_time import (
    DEFAULT_SHIFT,
    DailyTimeEvaluator,
    ShiftSchedule,
    evaluate_day,
)
from payroll_engines.deductions import (
    BracketDeduction,
    DeductionBase,
    DeductionRule,
    FixedDeduction,
    RateDeduction,
    TaxBracket,
)
from payroll_engines.payroll import PayrollComputer, apply_deduction_rules
from payroll_engines.period_aggregation import PeriodAggregator, select_period_entries
from payroll_engines.tracer import traced_engine

__all__ = [
    "AttendanceFilter",
    "AttendanceSummary",
    "BracketDeduction",
    "DEFAULT_SHIFT",
    "DailyTimeEvaluator",
    "DeductionBase",
    "DeductionRule",
    "FixedDeduction",
    "PayrollComputer",
    "PeriodAggregator",
    "RateDeduction",
    "ShiftSchedule",
    "TaxBracket",
    "apply_deduction_rules",
    "evaluate_day",
    "filter_evaluations",
    "select_period_entries",
    "summarize_attendance",
    "traced_engine",
]
