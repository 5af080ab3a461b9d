"""
Configuration Loader (``payroll_config.loader``).

Responsibility
--------------
Loads payroll policy YAML files and parses them into typed
``payroll_config.schema`` dataclass instances.  The single public entry
point for runtime policy is ``payroll_config.get_active_policy()``.

Architecture position
---------------------
**Config layer** -- infrastructure tooling.  Depends on
``payroll_kernel`` for exceptions and Decimal coercion only.

Invariants enforced
-------------------
* No silent defaults for required fields: a missing ``name``,
  ``version``, ``shift`` or rule field raises.
* Every parsed object is a frozen dataclass from ``schema.py``.
* ``compute_checksum`` produces a deterministic SHA-256 hash for
  policy identity and change detection.

Failure modes
-------------
* Missing YAML file  -> ``FileNotFoundError`` propagates.
* Malformed YAML or structure  -> ``PolicyConfigurationError``.

Audit relevance
---------------
The checksum ties every payroll run back to the exact policy text that
governed its deductions.
"""

from __future__ import annotations

import hashlib
import json
from datetime import time
from decimal import Decimal
from pathlib import Path
from typing import Any

import yaml

from payroll_config.schema import (
    RULE_BASES,
    RULE_KINDS,
    BracketDef,
    DeductionRuleDef,
    PayrollPolicyDef,
    ShiftDef,
)
from payroll_kernel.domain.values import to_decimal
from payroll_kernel.exceptions import PolicyConfigurationError


def load_yaml_file(path: Path) -> dict[str, Any]:
    """
    Load a single YAML file and return its contents as a dict.

    Raises:
        FileNotFoundError: if the file does not exist.
        yaml.YAMLError: if the file contains invalid YAML.
    """
    with open(path) as f:
        return yaml.safe_load(f) or {}


def parse_time(value: Any) -> time:
    """
    Parse a wall-clock time from YAML.

    Times must be quoted strings ("08:00"); YAML 1.1 reads a bare 08:00
    as a sexagesimal integer, which is rejected rather than guessed at.

    Raises:
        ValueError: if ``value`` is not a time or an ISO time string.
    """
    if isinstance(value, time):
        return value
    if isinstance(value, str):
        return time.fromisoformat(value.strip())
    raise ValueError(f"Cannot parse time from {value!r}; quote times in YAML")


def parse_decimal(value: Any) -> Decimal | None:
    """Parse an optional amount or rate; ``None`` stays ``None``."""
    if value is None:
        return None
    return to_decimal(value)


def parse_shift(data: dict[str, Any]) -> ShiftDef:
    """Parse a ShiftDef from a dict."""
    return ShiftDef(start=parse_time(data["start"]), end=parse_time(data["end"]))


def parse_deduction_rule(data: dict[str, Any]) -> DeductionRuleDef:
    """
    Parse a ``DeductionRuleDef`` from a dict.

    Raises:
        KeyError: if ``name`` or ``kind`` is missing.
        ValueError: on an unknown kind or base, or a non-numeric amount.
    """
    kind = data["kind"]
    if kind not in RULE_KINDS:
        raise ValueError(f"Unknown deduction kind {kind!r} for rule {data.get('name')!r}")
    base = data.get("base", "gross_pay")
    if base not in RULE_BASES:
        raise ValueError(f"Unknown deduction base {base!r} for rule {data.get('name')!r}")

    brackets = tuple(
        BracketDef(over=to_decimal(b["over"]), rate=to_decimal(b["rate"]))
        for b in data.get("brackets", [])
    )
    return DeductionRuleDef(
        name=data["name"],
        kind=kind,
        amount=parse_decimal(data.get("amount")),
        rate=parse_decimal(data.get("rate")),
        base=base,
        floor=parse_decimal(data.get("floor")),
        ceiling=parse_decimal(data.get("ceiling")),
        brackets=brackets,
        description=data.get("description", ""),
    )


def parse_policy(data: dict[str, Any], source: str = "<memory>") -> PayrollPolicyDef:
    """
    Parse a ``PayrollPolicyDef`` from a dict.

    Args:
        data: Parsed YAML mapping.
        source: Name used in error messages (usually the file name).

    Raises:
        PolicyConfigurationError: if required keys are missing or any
            field cannot be parsed.
    """
    name = data.get("name", source) if isinstance(data, dict) else source
    try:
        if not isinstance(data, dict):
            raise ValueError("policy document must be a mapping")
        rules = tuple(parse_deduction_rule(r) for r in data.get("deduction_rules", []))
        names = [r.name for r in rules]
        if len(set(names)) != len(names):
            raise ValueError(f"duplicate deduction rule names in {names}")
        return PayrollPolicyDef(
            name=data["name"],
            version=int(data["version"]),
            shift=parse_shift(data["shift"]),
            deduction_rules=rules,
            description=data.get("description", ""),
            checksum=compute_checksum(data),
        )
    except KeyError as exc:
        raise PolicyConfigurationError(name, f"missing required key {exc}") from exc
    except (TypeError, ValueError) as exc:
        raise PolicyConfigurationError(name, str(exc)) from exc


def load_policy_file(path: Path) -> PayrollPolicyDef:
    """
    Load and parse one policy YAML file.

    Raises:
        FileNotFoundError: if the file does not exist.
        PolicyConfigurationError: if the YAML or its structure is invalid.
    """
    try:
        data = load_yaml_file(path)
    except yaml.YAMLError as exc:
        raise PolicyConfigurationError(path.stem, f"invalid YAML: {exc}") from exc
    return parse_policy(data, source=path.stem)


def compute_checksum(data: dict[str, Any]) -> str:
    """Compute a deterministic SHA-256 checksum for a policy dict."""
    canonical = json.dumps(data, sort_keys=True, default=str)
    return hashlib.sha256(canonical.encode()).hexdigest()
