"""
Configuration Compiler -- PayrollPolicyDef -> CompiledPayrollPolicy.

The compiler validates a policy definition and produces a frozen
runtime artifact whose deduction rules are callable objects from
``payroll_engines.deductions``. The CompiledPayrollPolicy is what the
payroll run service accepts.

Compilation validates:
  - The shift ends after it starts
  - Each rule carries the fields its kind needs
  - Rates, amounts and bounds are non-negative and brackets ascend
"""

from __future__ import annotations

from dataclasses import dataclass

from payroll_config.schema import DeductionRuleDef, PayrollPolicyDef
from payroll_engines.daily_time import ShiftSchedule
from payroll_engines.deductions import (
    BracketDeduction,
    DeductionBase,
    DeductionRule,
    FixedDeduction,
    RateDeduction,
    TaxBracket,
)
from payroll_kernel.exceptions import PolicyConfigurationError


@dataclass(frozen=True)
class CompiledPayrollPolicy:
    """Validated, runtime-ready payroll policy."""

    name: str
    version: int
    checksum: str
    shift: ShiftSchedule
    deduction_rules: tuple[DeductionRule, ...]
    description: str = ""

    @property
    def rule_names(self) -> tuple[str, ...]:
        return tuple(rule.name for rule in self.deduction_rules)


def compile_policy(policy: PayrollPolicyDef) -> CompiledPayrollPolicy:
    """
    Compile a policy definition into its runtime form.

    Raises:
        PolicyConfigurationError: if the shift or any rule is invalid.
    """
    try:
        shift = ShiftSchedule(start=policy.shift.start, end=policy.shift.end)
    except ValueError as exc:
        raise PolicyConfigurationError(policy.name, str(exc)) from exc

    rules = tuple(_compile_rule(policy.name, rule) for rule in policy.deduction_rules)

    return CompiledPayrollPolicy(
        name=policy.name,
        version=policy.version,
        checksum=policy.checksum,
        shift=shift,
        deduction_rules=rules,
        description=policy.description,
    )


def _compile_rule(policy_name: str, rule: DeductionRuleDef) -> DeductionRule:
    try:
        base = DeductionBase(rule.base)
        if rule.kind == "fixed":
            if rule.amount is None:
                raise ValueError(f"fixed rule {rule.name!r} needs an amount")
            return FixedDeduction(rule.name, rule.amount)
        if rule.kind == "rate":
            if rule.rate is None:
                raise ValueError(f"rate rule {rule.name!r} needs a rate")
            return RateDeduction(
                rule.name, rule.rate, base=base, floor=rule.floor, ceiling=rule.ceiling,
            )
        if rule.kind == "bracket":
            return BracketDeduction(
                rule.name,
                tuple(TaxBracket(over=b.over, rate=b.rate) for b in rule.brackets),
                base=base,
            )
    except ValueError as exc:
        raise PolicyConfigurationError(policy_name, str(exc)) from exc
    raise PolicyConfigurationError(policy_name, f"unknown deduction kind {rule.kind!r}")
