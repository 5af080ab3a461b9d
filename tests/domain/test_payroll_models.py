"""
Tests for payroll value objects.

Covers:
- CompensationProfile validation, allowance totals and display name
- PayPeriod bounds, labels and weekday counting
- PeriodAggregate validation and averages
- PayrollRecord internal consistency
"""

from datetime import date
from decimal import Decimal

import pytest

from payroll_kernel.domain.payroll import (
    CompensationProfile,
    PayPeriod,
    PayrollRecord,
    PeriodAggregate,
)
from payroll_kernel.exceptions import (
    InvalidCompensationError,
    InvalidPeriodError,
    PayrollCalculationError,
)

JUNE = PayPeriod(date(2024, 6, 1), date(2024, 6, 30))


class TestCompensationProfile:
    """Construction and derived values."""

    def test_allowances_sum(self):
        profile = CompensationProfile(
            1, Decimal("30000"),
            allowances={"rice": Decimal("1500"), "phone": Decimal("1000"), "clothing": Decimal("500")},
        )
        assert profile.total_allowances == Decimal("3000.00")

    def test_no_allowances(self):
        assert CompensationProfile(1, Decimal("30000")).total_allowances == Decimal("0.00")

    def test_full_name(self):
        profile = CompensationProfile(1, Decimal("1"), first_name="John", last_name="Doe")
        assert profile.full_name == "John Doe"

    def test_full_name_partial(self):
        assert CompensationProfile(1, Decimal("1"), first_name="John").full_name == "John"

    def test_salary_coerced_to_decimal(self):
        profile = CompensationProfile(1, "25000.50")
        assert profile.basic_salary == Decimal("25000.50")

    def test_allowances_copied(self):
        source = {"rice": Decimal("1500")}
        profile = CompensationProfile(1, Decimal("1"), allowances=source)
        source["rice"] = Decimal("9999")
        assert profile.allowances["rice"] == Decimal("1500")

    def test_allowances_read_only(self):
        profile = CompensationProfile(1, Decimal("1"), allowances={"rice": Decimal("1500")})
        with pytest.raises(TypeError):
            profile.allowances["rice"] = Decimal("0")

    def test_hashable_with_allowances(self):
        a = CompensationProfile(1, Decimal("30000"), allowances={"rice": Decimal("1500")})
        b = CompensationProfile(1, Decimal("30000"), allowances={"rice": Decimal("1500")})
        assert a == b
        assert hash(a) == hash(b)
        assert len({a, b}) == 1

    def test_negative_id_is_calculation_error(self):
        with pytest.raises(PayrollCalculationError):
            CompensationProfile(-1, Decimal("30000"))

    def test_zero_id(self):
        with pytest.raises(InvalidCompensationError):
            CompensationProfile(0, Decimal("30000"))

    def test_negative_salary(self):
        with pytest.raises(InvalidCompensationError):
            CompensationProfile(1, Decimal("-1"))

    def test_negative_allowance(self):
        with pytest.raises(InvalidCompensationError):
            CompensationProfile(1, Decimal("1"), allowances={"rice": Decimal("-5")})

    def test_non_numeric_allowance(self):
        with pytest.raises(InvalidCompensationError):
            CompensationProfile(1, Decimal("1"), allowances={"rice": "lots"})


class TestPayPeriod:
    """Bounds and calendar helpers."""

    def test_inverted_rejected(self):
        with pytest.raises(InvalidPeriodError):
            PayPeriod(date(2024, 6, 30), date(2024, 6, 1))

    def test_missing_bound_rejected(self):
        with pytest.raises(InvalidPeriodError):
            PayPeriod(None, date(2024, 6, 1))

    def test_single_day(self):
        period = PayPeriod(date(2024, 6, 3), date(2024, 6, 3))
        assert period.working_days() == 1

    def test_june_2024_weekdays(self):
        assert JUNE.working_days() == 20

    def test_weekend_only(self):
        assert PayPeriod(date(2024, 6, 1), date(2024, 6, 2)).working_days() == 0

    def test_for_month(self):
        assert PayPeriod.for_month(2024, 2) == PayPeriod(date(2024, 2, 1), date(2024, 2, 29))

    def test_label(self):
        assert JUNE.label == "2024-06-01 to 2024-06-30"

    def test_contains_is_inclusive(self):
        assert JUNE.contains(date(2024, 6, 1))
        assert JUNE.contains(date(2024, 6, 30))
        assert not JUNE.contains(date(2024, 7, 1))

    def test_days_in_order(self):
        days = list(PayPeriod(date(2024, 6, 28), date(2024, 7, 2)).days())
        assert days[0] == date(2024, 6, 28)
        assert days[-1] == date(2024, 7, 2)
        assert len(days) == 5


class TestPeriodAggregate:
    """Validation and averages."""

    def test_empty(self):
        aggregate = PeriodAggregate.empty(1, JUNE)
        assert aggregate.days_worked == 0
        assert aggregate.total_hours == Decimal("0")
        assert aggregate.average_hours == Decimal("0")

    def test_average_hours(self):
        aggregate = PeriodAggregate(
            1, JUNE, days_worked=2, total_hours=Decimal("17.5"), days_evaluated=2,
        )
        assert aggregate.average_hours == Decimal("8.75")

    @pytest.mark.parametrize("employee_id", [0, -3])
    def test_bad_id(self, employee_id):
        with pytest.raises(PayrollCalculationError):
            PeriodAggregate(employee_id, JUNE)

    def test_negative_total(self):
        with pytest.raises(PayrollCalculationError):
            PeriodAggregate(1, JUNE, total_late_minutes=-1)

    def test_days_worked_exceeding_evaluated(self):
        with pytest.raises(PayrollCalculationError):
            PeriodAggregate(1, JUNE, days_worked=3, days_evaluated=2)

    def test_days_worked_without_evaluations_allowed(self):
        """Hand-built aggregates may omit the evaluation count."""
        assert PeriodAggregate(1, JUNE, days_worked=22).days_worked == 22


class TestPayrollRecord:
    """Internal consistency checks."""

    def _record(self, **overrides) -> PayrollRecord:
        fields = dict(
            employee_id=1,
            period=JUNE,
            days_worked=20,
            standard_working_days=20,
            basic_pay=Decimal("30000.00"),
            total_allowances=Decimal("3000.00"),
            gross_pay=Decimal("33000.00"),
            deductions={"sss": Decimal("1350.00"), "pagibig": Decimal("200.00")},
            total_deductions=Decimal("1550.00"),
            net_pay=Decimal("31450.00"),
        )
        fields.update(overrides)
        return PayrollRecord(**fields)

    def test_consistent_record(self):
        record = self._record()
        assert record.period_label == "2024-06-01 to 2024-06-30"

    def test_total_mismatch(self):
        with pytest.raises(PayrollCalculationError):
            self._record(total_deductions=Decimal("1000.00"), net_pay=Decimal("32000.00"))

    def test_net_mismatch(self):
        with pytest.raises(PayrollCalculationError):
            self._record(net_pay=Decimal("31000.00"))

    def test_negative_net_allowed(self):
        record = self._record(
            gross_pay=Decimal("1000.00"),
            basic_pay=Decimal("1000.00"),
            total_allowances=Decimal("0.00"),
            deductions={"loan": Decimal("1500.00")},
            total_deductions=Decimal("1500.00"),
            net_pay=Decimal("-500.00"),
        )
        assert record.net_pay == Decimal("-500.00")

    def test_deductions_copied(self):
        source = {"sss": Decimal("1550.00")}
        record = self._record(deductions=source)
        source["extra"] = Decimal("1")
        assert list(record.deductions) == ["sss"]

    def test_deductions_read_only(self):
        record = self._record()
        with pytest.raises(TypeError):
            record.deductions["loan"] = Decimal("500")
        assert sum(record.deductions.values()) == record.total_deductions

    def test_hashable(self):
        assert hash(self._record()) == hash(self._record())
