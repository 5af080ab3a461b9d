"""
payroll_config -- single public entrypoint for payroll policy.

Responsibility:
    Provides the way to obtain payroll policy at runtime through
    ``get_active_policy()``.  Returns a ``CompiledPayrollPolicy``: the
    standard shift and the ordered deduction rules.

Architecture position:
    Configuration -- YAML-driven policy, compiled into engine objects.
    This package sits above ``payroll_kernel`` and ``payroll_engines``
    and below ``payroll_services``.  Engines MUST NEVER import from
    ``payroll_config``.

Invariants enforced:
    - Deterministic compilation: the same YAML always produces the same
      checksum and the same rule sequence.

Failure modes:
    - ``FileNotFoundError`` -- no policy file with the requested name.
    - ``PolicyConfigurationError`` -- malformed YAML, missing keys or an
      invalid rule.

Audit relevance:
    Every successful ``get_active_policy()`` call emits a
    ``PAYROLL_CONFIG_TRACE`` log entry with the policy name, version,
    checksum and rule names.
"""

from __future__ import annotations

import logging
from pathlib import Path

from payroll_config.compiler import CompiledPayrollPolicy, compile_policy
from payroll_config.loader import load_policy_file

_logger = logging.getLogger("payroll_kernel.config")

# Default policy sets directory
_DEFAULT_CONFIG_DIR = Path(__file__).parent / "sets"

__all__ = ["CompiledPayrollPolicy", "get_active_policy"]


def get_active_policy(
    name: str = "standard",
    config_dir: Path | None = None,
) -> CompiledPayrollPolicy:
    """Load, validate and compile the named payroll policy.

    Args:
        name: Policy file stem, e.g. "standard" for ``sets/standard.yaml``.
        config_dir: Override path to the policy sets directory.
            Defaults to payroll_config/sets/.

    Returns:
        CompiledPayrollPolicy.

    Raises:
        FileNotFoundError: If no ``<name>.yaml`` exists in the directory.
        PolicyConfigurationError: If the policy is invalid.
    """
    sets_dir = Path(config_dir) if config_dir is not None else _DEFAULT_CONFIG_DIR
    path = sets_dir / f"{name}.yaml"
    if not path.is_file():
        raise FileNotFoundError(f"Payroll policy not found: {path}")

    policy = compile_policy(load_policy_file(path))

    _logger.info(
        "PAYROLL_CONFIG_TRACE",
        extra={
            "trace_type": "PAYROLL_CONFIG_TRACE",
            "policy_name": policy.name,
            "policy_version": policy.version,
            "checksum": policy.checksum,
            "shift_start": policy.shift.start,
            "shift_end": policy.shift.end,
            "deduction_rules": list(policy.rule_names),
        },
    )
    return policy
