"""
Module: payroll_engines.deductions
Responsibility:
    Pluggable deduction rules.  A rule is any callable
    ``(gross_pay, profile) -> (name, amount)``; this module provides the
    generic building blocks that contribution and withholding policies
    are expressed with, so statutory formulas live in configuration
    rather than in the payroll engine.

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    Rules are built by payroll_config.compiler and applied, in order, by
    payroll_engines.payroll.PayrollComputer.

Invariants enforced:
    - Decimal-only arithmetic; every amount is rounded ROUND_HALF_UP to
      two places.
    - Rules never return a negative amount.
    - Rules are frozen dataclasses: identical inputs, identical outputs.

Failure modes:
    - ValueError on construction with a negative amount/rate, an
      inverted floor/ceiling, or unsorted brackets.

Usage:
    from payroll_engines.deductions import RateDeduction, DeductionBase

    pagibig = RateDeduction(
        "pagibig", Decimal("0.02"),
        base=DeductionBase.BASIC_SALARY, ceiling=Decimal("200.00"),
    )
    pagibig(Decimal("45000.00"), profile)   # ("pagibig", Decimal("200.00"))
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Protocol

from payroll_kernel.domain.payroll import CompensationProfile
from payroll_kernel.domain.values import ZERO, quantize_money


class DeductionRule(Protocol):
    """Anything that turns gross pay and a profile into a named deduction."""

    def __call__(
        self, gross_pay: Decimal, profile: CompensationProfile,
    ) -> tuple[str, Decimal]: ...


class DeductionBase(str, Enum):
    """Amount a rate or bracket rule is applied to."""

    GROSS_PAY = "gross_pay"
    BASIC_SALARY = "basic_salary"

    def resolve(self, gross_pay: Decimal, profile: CompensationProfile) -> Decimal:
        if self is DeductionBase.BASIC_SALARY:
            return profile.basic_salary
        return gross_pay


@dataclass(frozen=True)
class FixedDeduction:
    """A flat amount deducted every period (loans, union dues)."""

    name: str
    amount: Decimal

    def __post_init__(self) -> None:
        if self.amount < 0:
            raise ValueError(f"Deduction {self.name!r} amount cannot be negative")

    def __call__(
        self, gross_pay: Decimal, profile: CompensationProfile,
    ) -> tuple[str, Decimal]:
        return self.name, quantize_money(self.amount)


@dataclass(frozen=True)
class RateDeduction:
    """
    A percentage of gross pay or basic salary, optionally bounded.

    ``floor`` and ``ceiling`` bound the resulting deduction, not the base.
    """

    name: str
    rate: Decimal
    base: DeductionBase = DeductionBase.GROSS_PAY
    floor: Decimal | None = None
    ceiling: Decimal | None = None

    def __post_init__(self) -> None:
        if self.rate < 0:
            raise ValueError(f"Deduction {self.name!r} rate cannot be negative")
        if self.floor is not None and self.floor < 0:
            raise ValueError(f"Deduction {self.name!r} floor cannot be negative")
        if (
            self.floor is not None
            and self.ceiling is not None
            and self.ceiling < self.floor
        ):
            raise ValueError(f"Deduction {self.name!r} ceiling is below its floor")

    def __call__(
        self, gross_pay: Decimal, profile: CompensationProfile,
    ) -> tuple[str, Decimal]:
        amount = self.base.resolve(gross_pay, profile) * self.rate
        if self.floor is not None:
            amount = max(amount, self.floor)
        if self.ceiling is not None:
            amount = min(amount, self.ceiling)
        return self.name, quantize_money(max(amount, ZERO))


@dataclass(frozen=True)
class TaxBracket:
    """``rate`` applies to the part of the base above ``over``."""

    over: Decimal
    rate: Decimal


@dataclass(frozen=True)
class BracketDeduction:
    """
    Progressive marginal table, e.g. monthly withholding tax.

    Each bracket's rate applies to the slice of the base between its
    ``over`` threshold and the next bracket's threshold.
    """

    name: str
    brackets: tuple[TaxBracket, ...]
    base: DeductionBase = DeductionBase.GROSS_PAY

    def __post_init__(self) -> None:
        if not self.brackets:
            raise ValueError(f"Deduction {self.name!r} needs at least one bracket")
        thresholds = [b.over for b in self.brackets]
        if thresholds != sorted(thresholds) or len(set(thresholds)) != len(thresholds):
            raise ValueError(f"Deduction {self.name!r} brackets must be strictly ascending")
        if any(b.rate < 0 or b.over < 0 for b in self.brackets):
            raise ValueError(f"Deduction {self.name!r} brackets cannot be negative")

    def __call__(
        self, gross_pay: Decimal, profile: CompensationProfile,
    ) -> tuple[str, Decimal]:
        taxable = self.base.resolve(gross_pay, profile)
        tax = ZERO
        uppers = [b.over for b in self.brackets[1:]] + [None]
        for bracket, upper in zip(self.brackets, uppers):
            if taxable <= bracket.over:
                break
            top = taxable if upper is None else min(taxable, upper)
            tax += (top - bracket.over) * bracket.rate
        return self.name, quantize_money(tax)
