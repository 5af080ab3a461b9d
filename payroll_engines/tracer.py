"""
payroll_engines.tracer -- PAYROLL_ENGINE_TRACE records for engine calls.

Responsibility:
    ``@traced_engine`` wraps an engine entry point and, after a
    successful call, logs one PAYROLL_ENGINE_TRACE record carrying the
    engine name and version, the call duration and an input fingerprint.
    The fingerprint lets an auditor tell whether two payroll runs saw the
    same profile, period and attendance totals.

Architecture position:
    Engines -- support for the pure calculation layer.  Emits a log
    record and nothing else.

Invariants enforced:
    - Arguments are bound against the engine's signature (defaults
      applied) before fingerprinting, so positional and keyword calls
      with the same inputs produce the same fingerprint.
    - Canonical forms: Decimal/int as ``str``, dates and times in ISO
      format, mappings with sorted keys, dataclass value objects as
      their class name plus fields in declaration order.
    - The fingerprint is the first 16 hex chars of a SHA-256 digest.

Failure modes:
    - A call that does not match the signature raises TypeError, exactly
      as the undecorated call would.
    - Engine exceptions propagate unchanged and no trace is logged.

Usage:
    from payroll_engines.tracer import traced_engine

    @traced_engine("period_aggregation", "1.0", fingerprint_fields=("employee_id", "period"))
    def aggregate(self, employee_id, period, entries):
        ...
"""

from __future__ import annotations

import dataclasses
import functools
import hashlib
import inspect
import logging
import time
from collections.abc import Callable, Mapping
from datetime import date, time as dt_time
from decimal import Decimal
from enum import Enum
from typing import Any

# Configured by payroll_kernel.logging_config through the logger hierarchy.
_logger = logging.getLogger("payroll_kernel.engines.tracer")


def _canonicalize(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, Enum):
        return _canonicalize(value.value)
    if isinstance(value, (bool, int, Decimal)):
        return str(value)
    if isinstance(value, str):
        return value
    if isinstance(value, (date, dt_time)):
        return value.isoformat()
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        inner = ",".join(
            f"{f.name}={_canonicalize(getattr(value, f.name))}"
            for f in dataclasses.fields(value)
        )
        return f"{type(value).__name__}({inner})"
    if isinstance(value, Mapping):
        items = sorted(value.items(), key=lambda kv: str(kv[0]))
        return "{" + ",".join(f"{k}:{_canonicalize(v)}" for k, v in items) + "}"
    if isinstance(value, (list, tuple)):
        return "[" + ",".join(_canonicalize(v) for v in value) + "]"
    return str(value)


def compute_input_fingerprint(
    fingerprint_fields: tuple[str, ...],
    arguments: Mapping[str, Any],
) -> str:
    """Hash the named ``arguments``; absent names hash as "null"."""
    canonical = "|".join(
        f"{name}={_canonicalize(arguments.get(name))}" for name in fingerprint_fields
    )
    return hashlib.sha256(canonical.encode("utf-8")).hexdigest()[:16]


def traced_engine(
    engine_name: str,
    engine_version: str,
    fingerprint_fields: tuple[str, ...] = (),
) -> Callable:
    """Decorator logging PAYROLL_ENGINE_TRACE for each successful call.

    Args:
        engine_name: Engine identifier, e.g. "payroll".
        engine_version: Engine version, e.g. "1.0".
        fingerprint_fields: Parameter names of the wrapped function whose
            values feed the input fingerprint.
    """

    def decorator(func: Callable) -> Callable:
        signature = inspect.signature(func)
        unknown = set(fingerprint_fields) - set(signature.parameters)
        if unknown:
            raise ValueError(
                f"{func.__qualname__} has no parameters {sorted(unknown)} to fingerprint"
            )

        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            fingerprint = ""
            if fingerprint_fields:
                bound = signature.bind(*args, **kwargs)
                bound.apply_defaults()
                fingerprint = compute_input_fingerprint(fingerprint_fields, bound.arguments)

            started = time.monotonic()
            result = func(*args, **kwargs)
            duration_ms = round((time.monotonic() - started) * 1000, 2)

            _logger.info(
                "PAYROLL_ENGINE_TRACE",
                extra={
                    "trace_type": "PAYROLL_ENGINE_TRACE",
                    "engine_name": engine_name,
                    "engine_version": engine_version,
                    "input_fingerprint": fingerprint,
                    "duration_ms": duration_ms,
                    "function": func.__qualname__,
                },
            )
            return result

        return wrapper

    return decorator
