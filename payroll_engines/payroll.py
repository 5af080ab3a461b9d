"""
Module: payroll_engines.payroll
Responsibility:
    Turn a compensation profile and a period aggregate into a
    ``PayrollRecord``: prorated gross pay, itemized deductions from an
    ordered rule list, and net pay.

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    Last stage of daily_time -> period_aggregation -> payroll.

Invariants enforced:
    - Gross = basic salary x days worked / weekdays in period + allowances,
      with the prorated salary and allowance total each rounded to two
      places before they are added.
    - Deduction rules run in the given order; a later rule with the same
      name replaces the earlier amount but keeps its position.
    - Total deductions = sum of the itemized mapping.
    - Net = gross - total deductions, exactly, and never clamped.
    - Deterministic: identical inputs give equal records.

Failure modes:
    - PayrollCalculationError: missing profile/period, non-positive
      employee id, aggregate for another employee (ProfileMismatchError),
      a period without weekdays (NoWorkingDaysError), or a rule result
      that is not a (name, non-negative amount) pair (DeductionRuleError).
    - InvalidPeriodError: period bounds inverted or missing.
    - Exceptions raised inside a rule propagate unchanged.

Audit relevance:
    Each computation is traced via ``@traced_engine`` and logs the gross,
    deduction and net totals.

Usage:
    from payroll_engines.payroll import PayrollComputer

    record = PayrollComputer().compute_payroll(profile, period, aggregate, rules)
    record.net_pay
"""

from __future__ import annotations

from collections.abc import Sequence
from decimal import Decimal
from typing import Any

from payroll_engines.deductions import DeductionRule
from payroll_engines.tracer import traced_engine
from payroll_kernel.domain.payroll import (
    CompensationProfile,
    PayPeriod,
    PayrollRecord,
    PeriodAggregate,
    validate_period_bounds,
)
from payroll_kernel.domain.values import ZERO_MONEY, quantize_money, to_decimal
from payroll_kernel.exceptions import (
    DeductionRuleError,
    NoWorkingDaysError,
    PayrollCalculationError,
    ProfileMismatchError,
)
from payroll_kernel.logging_config import get_logger

logger = get_logger("engines.payroll")


class PayrollComputer:
    """
    Compute payroll records.

    Pure functions - no I/O, no database access.  Deduction policy is
    supplied per call as an ordered rule sequence.
    """

    @traced_engine("payroll", "1.0", fingerprint_fields=("profile", "period", "aggregate"))
    def compute_payroll(
        self,
        profile: CompensationProfile,
        period: PayPeriod,
        aggregate: PeriodAggregate,
        deduction_rules: Sequence[DeductionRule] = (),
    ) -> PayrollRecord:
        """
        Compute one employee's payroll for one period.

        Args:
            profile: Pay terms from the employee directory.
            period: Inclusive pay period.
            aggregate: Attendance aggregate for the same employee.
            deduction_rules: Ordered rules, each ``(gross, profile) -> (name, amount)``.

        Returns:
            PayrollRecord tagged with ``period``.

        Raises:
            PayrollCalculationError: If the request is invalid.
            InvalidPeriodError: If the period bounds are invalid.
        """
        self._validate_request(profile, period, aggregate)

        standard_days = period.working_days()
        if standard_days == 0:
            logger.warning("payroll_period_without_working_days", extra={
                "employee_id": profile.employee_id,
                "period_start": period.start,
                "period_end": period.end,
            })
            raise NoWorkingDaysError(profile.employee_id, period.start, period.end)

        basic_pay = quantize_money(
            profile.basic_salary * aggregate.days_worked / standard_days
        )
        total_allowances = profile.total_allowances
        gross_pay = basic_pay + total_allowances

        deductions = apply_deduction_rules(gross_pay, profile, deduction_rules)
        total_deductions = sum(deductions.values(), ZERO_MONEY)
        net_pay = gross_pay - total_deductions

        record = PayrollRecord(
            employee_id=profile.employee_id,
            period=period,
            days_worked=aggregate.days_worked,
            standard_working_days=standard_days,
            basic_pay=basic_pay,
            total_allowances=total_allowances,
            gross_pay=gross_pay,
            deductions=deductions,
            total_deductions=total_deductions,
            net_pay=net_pay,
        )

        if net_pay < 0:
            logger.warning("payroll_negative_net_pay", extra={
                "employee_id": profile.employee_id,
                "gross_pay": gross_pay,
                "total_deductions": total_deductions,
                "net_pay": net_pay,
            })

        logger.info("payroll_computation_completed", extra={
            "employee_id": profile.employee_id,
            "period": period.label,
            "days_worked": aggregate.days_worked,
            "standard_working_days": standard_days,
            "gross_pay": gross_pay,
            "deduction_count": len(deductions),
            "total_deductions": total_deductions,
            "net_pay": net_pay,
        })
        return record

    def _validate_request(
        self,
        profile: CompensationProfile,
        period: PayPeriod,
        aggregate: PeriodAggregate,
    ) -> None:
        if profile is None:
            raise PayrollCalculationError("compensation profile is missing")

        employee_id = getattr(profile, "employee_id", None)
        if isinstance(employee_id, bool) or not isinstance(employee_id, int) or employee_id <= 0:
            logger.warning("payroll_invalid_employee_id", extra={"employee_id": employee_id})
            raise PayrollCalculationError(
                "employee identifier must be a positive integer", employee_id=employee_id,
            )

        if period is None:
            raise PayrollCalculationError("pay period is missing", employee_id=employee_id)
        validate_period_bounds(getattr(period, "start", None), getattr(period, "end", None))

        if aggregate is None:
            raise PayrollCalculationError("period aggregate is missing", employee_id=employee_id)
        if aggregate.employee_id != employee_id:
            logger.warning("payroll_profile_aggregate_mismatch", extra={
                "profile_employee_id": employee_id,
                "aggregate_employee_id": aggregate.employee_id,
            })
            raise ProfileMismatchError(employee_id, aggregate.employee_id)
        if aggregate.period != period:
            logger.warning("payroll_aggregate_period_differs", extra={
                "employee_id": employee_id,
                "period": getattr(period, "label", None),
                "aggregate_period": getattr(aggregate.period, "label", None),
            })


def apply_deduction_rules(
    gross_pay: Decimal,
    profile: CompensationProfile,
    rules: Sequence[DeductionRule],
) -> dict[str, Decimal]:
    """
    Run ``rules`` in order and collect the itemized deductions.

    Returns:
        Insertion-ordered mapping of deduction name to amount; a repeated
        name keeps its first position and takes the last amount.

    Raises:
        DeductionRuleError: If a rule's result is not a (name, amount) pair
            with a non-empty name and a non-negative amount.
    """
    itemized: dict[str, Decimal] = {}
    for rule in rules or ():
        name, amount = _unpack_rule_result(rule, rule(gross_pay, profile), profile)
        if name in itemized:
            logger.debug("deduction_rule_overrides_earlier", extra={
                "employee_id": profile.employee_id,
                "deduction": name,
                "previous_amount": itemized[name],
                "amount": amount,
            })
        itemized[name] = amount
    return itemized


def _rule_name(rule: Any) -> str:
    return getattr(rule, "name", None) or getattr(rule, "__name__", None) or repr(rule)


def _unpack_rule_result(
    rule: Any, result: Any, profile: CompensationProfile,
) -> tuple[str, Decimal]:
    try:
        name, raw_amount = result
    except (TypeError, ValueError) as exc:
        raise DeductionRuleError(
            _rule_name(rule), f"returned {result!r}, expected (name, amount)",
            employee_id=profile.employee_id,
        ) from exc

    if not isinstance(name, str) or not name.strip():
        raise DeductionRuleError(
            _rule_name(rule), f"returned blank name {name!r}",
            employee_id=profile.employee_id,
        )
    try:
        amount = to_decimal(raw_amount)
    except ValueError as exc:
        raise DeductionRuleError(
            name, f"returned non-numeric amount {raw_amount!r}",
            employee_id=profile.employee_id,
        ) from exc
    if amount < 0:
        logger.error("deduction_rule_negative_amount", extra={
            "employee_id": profile.employee_id,
            "deduction": name,
            "amount": amount,
        })
        raise DeductionRuleError(
            name, f"returned negative amount {amount}",
            employee_id=profile.employee_id,
        )
    return name, quantize_money(amount)
