"""
PayrollPolicy schema.

Defines the human-authored, reviewable source artifact for payroll
policy. YAML files are parsed into these types by the loader and
compiled into a CompiledPayrollPolicy by the compiler.

Key distinction:
  PayrollPolicyDef       = source artifact (human-authored, versioned)
  CompiledPayrollPolicy  = runtime artifact (rule objects, frozen)
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import time
from decimal import Decimal

# ---------------------------------------------------------------------------
# Shift
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ShiftDef:
    """Standard shift used for lateness and undertime."""

    start: time
    end: time


# ---------------------------------------------------------------------------
# Deduction rules (declarative data, no executable logic)
# ---------------------------------------------------------------------------

RULE_KINDS = ("fixed", "rate", "bracket")
RULE_BASES = ("gross_pay", "basic_salary")


@dataclass(frozen=True)
class BracketDef:
    """One row of a marginal table: ``rate`` above ``over``."""

    over: Decimal
    rate: Decimal


@dataclass(frozen=True)
class DeductionRuleDef:
    """A deduction as written in YAML; ``kind`` picks the fields used."""

    name: str
    kind: str  # fixed, rate, bracket
    amount: Decimal | None = None
    rate: Decimal | None = None
    base: str = "gross_pay"
    floor: Decimal | None = None
    ceiling: Decimal | None = None
    brackets: tuple[BracketDef, ...] = ()
    description: str = ""


# ---------------------------------------------------------------------------
# Root
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class PayrollPolicyDef:
    """A complete payroll policy: shift plus ordered deduction rules."""

    name: str
    version: int
    shift: ShiftDef
    deduction_rules: tuple[DeductionRuleDef, ...] = ()
    description: str = ""
    checksum: str = ""
