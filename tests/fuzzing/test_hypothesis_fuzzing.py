"""
Hypothesis-based property tests for the payroll engines.

Invariants checked on generated inputs:
- Daily evaluation: non-negative minutes, hours derived from minutes,
  flags agree with minute counts and status label
- Period aggregation: days worked bounded by retained days, hours equal
  the sum of daily minutes, result independent of unrelated entries
- Payroll: net = gross - total deductions, total = itemized sum,
  full attendance pays the full salary, identical inputs give equal records
- Bracket deductions: non-decreasing in the taxable base
"""

from datetime import date, time, timedelta
from decimal import Decimal

from hypothesis import given, settings
from hypothesis import strategies as st
from hypothesis.strategies import composite

from payroll_engines.daily_time import DailyTimeEvaluator
from payroll_engines.deductions import (
    BracketDeduction,
    FixedDeduction,
    RateDeduction,
    TaxBracket,
)
from payroll_engines.payroll import PayrollComputer
from payroll_engines.period_aggregation import PeriodAggregator
from payroll_kernel.domain.attendance import AttendanceEntry, AttendanceStatus
from payroll_kernel.domain.payroll import CompensationProfile, PayPeriod, PeriodAggregate
from payroll_kernel.domain.values import minutes_to_hours

PERIOD_START = date(2024, 6, 1)
PERIOD = PayPeriod(PERIOD_START, date(2024, 6, 30))

WITHHOLDING = BracketDeduction(
    "withholding_tax",
    (
        TaxBracket(Decimal("0"), Decimal("0")),
        TaxBracket(Decimal("20833"), Decimal("0.15")),
        TaxBracket(Decimal("33333"), Decimal("0.20")),
        TaxBracket(Decimal("66667"), Decimal("0.25")),
        TaxBracket(Decimal("166667"), Decimal("0.30")),
        TaxBracket(Decimal("666667"), Decimal("0.35")),
    ),
)


# Hypothesis strategies

@composite
def attendance_entries(draw, employee_id=1):
    """An entry in June 2024 with ordered (possibly missing) times."""
    day = PERIOD_START + timedelta(days=draw(st.integers(min_value=0, max_value=29)))
    first = draw(st.times())
    second = draw(st.times())
    log_in, log_out = sorted((first, second))
    if draw(st.booleans()):
        log_in = None
    if draw(st.integers(min_value=0, max_value=4)) == 0:
        log_out = None
    return AttendanceEntry(employee_id, day, log_in, log_out)


@composite
def money_amounts(draw, max_value="999999.99"):
    return draw(st.decimals(
        min_value=Decimal("0"),
        max_value=Decimal(max_value),
        places=2,
        allow_nan=False,
        allow_infinity=False,
    ))


@composite
def profiles(draw):
    names = draw(st.lists(st.sampled_from(["rice", "phone", "clothing", "transport"]), unique=True))
    return CompensationProfile(
        employee_id=1,
        basic_salary=draw(money_amounts()),
        allowances={n: draw(money_amounts(max_value="9999.99")) for n in names},
    )


@composite
def deduction_rules(draw):
    rules = []
    for i in range(draw(st.integers(min_value=0, max_value=5))):
        if draw(st.booleans()):
            rules.append(FixedDeduction(f"fixed_{i % 3}", draw(money_amounts(max_value="5000"))))
        else:
            rate = draw(st.decimals(min_value=Decimal("0"), max_value=Decimal("0.5"), places=3))
            rules.append(RateDeduction(f"rate_{i % 3}", rate))
    return rules


class TestDailyEvaluationProperties:
    """Properties of single-day evaluation."""

    @given(entry=attendance_entries())
    @settings(max_examples=200, deadline=None)
    def test_minutes_and_flags_consistent(self, entry):
        result = DailyTimeEvaluator().evaluate(entry)

        assert result.worked_minutes >= 0
        assert result.late_minutes >= 0
        assert result.undertime_minutes >= 0
        assert result.worked_hours == minutes_to_hours(result.worked_minutes)
        if result.late_minutes > 0:
            assert result.is_late
        if result.undertime_minutes > 0:
            assert result.has_undertime
        assert result.is_present == (entry.log_in is not None)
        assert result.status is AttendanceStatus.compose(
            result.is_present, result.is_late, result.has_undertime,
        )

    @given(entry=attendance_entries())
    @settings(max_examples=100, deadline=None)
    def test_idempotent(self, entry):
        evaluator = DailyTimeEvaluator()
        assert evaluator.evaluate(entry) == evaluator.evaluate(entry)


class TestAggregationProperties:
    """Properties of period aggregation."""

    @given(entries=st.lists(attendance_entries(), max_size=40))
    @settings(max_examples=100, deadline=None)
    def test_bounds(self, entries):
        aggregate = PeriodAggregator().aggregate(1, PERIOD, entries)

        distinct_days = {e.work_date for e in entries}
        assert aggregate.days_evaluated == len(distinct_days)
        assert 0 <= aggregate.days_worked <= aggregate.days_evaluated <= 30
        assert aggregate.total_hours == minutes_to_hours(aggregate.total_worked_minutes)

    @given(
        entries=st.lists(attendance_entries(), max_size=20),
        others=st.lists(attendance_entries(employee_id=2), max_size=20),
    )
    @settings(max_examples=100, deadline=None)
    def test_other_employees_irrelevant(self, entries, others):
        aggregator = PeriodAggregator()
        alone = aggregator.aggregate(1, PERIOD, entries)
        mixed = aggregator.aggregate(1, PERIOD, others + entries)
        assert alone == mixed


class TestPayrollProperties:
    """Properties of payroll computation."""

    @given(
        profile=profiles(),
        days_worked=st.integers(min_value=0, max_value=30),
        rules=deduction_rules(),
    )
    @settings(max_examples=200, deadline=None)
    def test_net_is_gross_minus_deductions(self, profile, days_worked, rules):
        aggregate = PeriodAggregate(1, PERIOD, days_worked=days_worked)
        record = PayrollComputer().compute_payroll(profile, PERIOD, aggregate, rules)

        assert record.total_deductions == sum(record.deductions.values(), Decimal("0"))
        assert record.net_pay == record.gross_pay - record.total_deductions
        assert record.gross_pay == record.basic_pay + record.total_allowances
        assert all(amount >= 0 for amount in record.deductions.values())

    @given(profile=profiles())
    @settings(max_examples=100, deadline=None)
    def test_full_attendance_pays_full_salary(self, profile):
        aggregate = PeriodAggregate(1, PERIOD, days_worked=PERIOD.working_days())
        record = PayrollComputer().compute_payroll(profile, PERIOD, aggregate)
        assert record.basic_pay == profile.basic_salary.quantize(Decimal("0.01"))

    @given(profile=profiles(), days_worked=st.integers(min_value=0, max_value=20), rules=deduction_rules())
    @settings(max_examples=100, deadline=None)
    def test_idempotent(self, profile, days_worked, rules):
        aggregate = PeriodAggregate(1, PERIOD, days_worked=days_worked)
        computer = PayrollComputer()
        first = computer.compute_payroll(profile, PERIOD, aggregate, rules)
        second = computer.compute_payroll(profile, PERIOD, aggregate, rules)
        assert first == second
        assert repr(first) == repr(second)


class TestBracketProperties:
    """Marginal tables never decrease as the base grows."""

    @given(a=money_amounts(max_value="1000000.00"), b=money_amounts(max_value="1000000.00"))
    @settings(max_examples=200, deadline=None)
    def test_monotonic(self, a, b):
        profile = CompensationProfile(1, Decimal("0"))
        low, high = sorted((a, b))
        assert WITHHOLDING(low, profile)[1] <= WITHHOLDING(high, profile)[1]
