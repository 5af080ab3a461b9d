"""
payroll_services.payroll_run -- Orchestrates payroll runs over collaborators.

Responsibility:
    Fetches a profile and attendance entries through the collaborator
    protocols, then runs the three engine stages (daily evaluation,
    period aggregation, payroll computation) with the active policy's
    shift and deduction rules.  ``run_batch`` does this for many
    employees in parallel.

Architecture position:
    Services -- stateful orchestration over engines + kernel.
    The engines stay pure; all collaborator I/O happens here.

Invariants enforced:
    - Each employee's run binds ``LogContext`` (run_id, employee_id,
      period) so every log line of the run is attributable.
    - ``run_batch`` returns results and failures in input order
      regardless of completion order.

Failure modes:
    - CollaboratorLookupError when the directory has no profile.
    - Engine errors propagate from ``run_for_employee``; ``run_batch``
      records PayrollEngineError per employee and lets anything else
      propagate.

Audit relevance:
    Every run logs ``payroll_run_started`` / ``payroll_run_completed``;
    the engines emit PAYROLL_ENGINE_TRACE records beneath them.
"""

from __future__ import annotations

import time
import uuid
from collections.abc import Sequence
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass

from payroll_config.compiler import CompiledPayrollPolicy
from payroll_engines.daily_time import DailyTimeEvaluator
from payroll_engines.payroll import PayrollComputer
from payroll_engines.period_aggregation import PeriodAggregator
from payroll_kernel.domain.attendance import DailyEvaluation
from payroll_kernel.domain.payroll import PayPeriod, PayrollRecord, PeriodAggregate
from payroll_kernel.exceptions import CollaboratorLookupError, PayrollEngineError
from payroll_kernel.logging_config import LogContext, get_logger
from payroll_services.protocols import AttendanceSource, EmployeeDirectory

logger = get_logger("services.payroll_run")


@dataclass(frozen=True)
class PayrollRunResult:
    """Everything computed for one employee in one run."""

    employee_id: int
    evaluations: tuple[DailyEvaluation, ...]
    aggregate: PeriodAggregate
    record: PayrollRecord


@dataclass(frozen=True)
class PayrollRunFailure:
    """An employee whose run raised a payroll engine error."""

    employee_id: int
    error_code: str
    message: str


@dataclass(frozen=True)
class BatchRunResult:
    """Outcome of ``run_batch``: successes and failures in input order."""

    run_id: str
    results: tuple[PayrollRunResult, ...]
    failures: tuple[PayrollRunFailure, ...]

    @property
    def all_succeeded(self) -> bool:
        return not self.failures


class PayrollRunService:
    """Runs payroll for employees using injected collaborators.

    Contract:
        ``directory`` and ``attendance_source`` satisfy the protocols in
        ``payroll_services.protocols`` and are safe to call from several
        threads when ``run_batch`` uses more than one worker.

    Usage:
        service = PayrollRunService(directory, attendance, get_active_policy())
        result = service.run_for_employee(101, PayPeriod.for_month(2024, 6))
    """

    def __init__(
        self,
        directory: EmployeeDirectory,
        attendance_source: AttendanceSource,
        policy: CompiledPayrollPolicy,
        max_workers: int = 4,
    ) -> None:
        if max_workers < 1:
            raise ValueError("max_workers must be at least 1")
        self._directory = directory
        self._attendance = attendance_source
        self._policy = policy
        self._max_workers = max_workers
        self._aggregator = PeriodAggregator(DailyTimeEvaluator(policy.shift))
        self._computer = PayrollComputer()

    def run_for_employee(
        self,
        employee_id: int,
        period: PayPeriod,
        run_id: str | None = None,
    ) -> PayrollRunResult:
        """Compute one employee's payroll for ``period``.

        Raises:
            CollaboratorLookupError: If the directory has no profile.
            PayrollEngineError: Any engine validation failure.
        """
        run_id = run_id or str(uuid.uuid4())
        with LogContext.bind(run_id=run_id, employee_id=str(employee_id), period=period.label):
            t0 = time.monotonic()
            logger.info("payroll_run_started", extra={"policy": self._policy.name})

            profile = self._directory.get_profile(employee_id)
            if profile is None:
                logger.warning("payroll_run_profile_missing", extra={})
                raise CollaboratorLookupError("employee directory", employee_id)

            entries = tuple(self._attendance.get_entries(employee_id, period.start, period.end))
            evaluations = self._aggregator.evaluate_period(employee_id, period, entries)
            aggregate = self._aggregator.aggregate_evaluations(employee_id, period, evaluations)
            record = self._computer.compute_payroll(
                profile=profile,
                period=period,
                aggregate=aggregate,
                deduction_rules=self._policy.deduction_rules,
            )

            logger.info("payroll_run_completed", extra={
                "entry_count": len(entries),
                "gross_pay": record.gross_pay,
                "net_pay": record.net_pay,
                "duration_ms": round((time.monotonic() - t0) * 1000, 2),
            })
            return PayrollRunResult(
                employee_id=employee_id,
                evaluations=evaluations,
                aggregate=aggregate,
                record=record,
            )

    def run_batch(
        self,
        employee_ids: Sequence[int],
        period: PayPeriod,
    ) -> BatchRunResult:
        """Run payroll for many employees in parallel.

        Per-employee PayrollEngineError failures are collected, not
        raised, so one bad profile does not abort the batch.
        """
        run_id = str(uuid.uuid4())
        with LogContext.bind(run_id=run_id, period=period.label):
            logger.info("payroll_batch_started", extra={"employee_count": len(employee_ids)})

        with ThreadPoolExecutor(max_workers=self._max_workers) as executor:
            futures = [
                executor.submit(self._run_guarded, employee_id, period, run_id)
                for employee_id in employee_ids
            ]
            # future.result() re-raises anything that is not a PayrollEngineError
            outcomes = [f.result() for f in futures]

        results = tuple(o for o in outcomes if isinstance(o, PayrollRunResult))
        failures = tuple(o for o in outcomes if isinstance(o, PayrollRunFailure))

        with LogContext.bind(run_id=run_id, period=period.label):
            logger.info("payroll_batch_completed", extra={
                "employee_count": len(employee_ids),
                "succeeded": len(results),
                "failed": len(failures),
            })
        return BatchRunResult(run_id=run_id, results=results, failures=failures)

    def _run_guarded(
        self, employee_id: int, period: PayPeriod, run_id: str,
    ) -> PayrollRunResult | PayrollRunFailure:
        try:
            return self.run_for_employee(employee_id, period, run_id=run_id)
        except PayrollEngineError as exc:
            with LogContext.bind(run_id=run_id, employee_id=str(employee_id)):
                logger.error("payroll_run_failed", extra={
                    "error_code": exc.code,
                    "error": str(exc),
                })
            return PayrollRunFailure(
                employee_id=employee_id, error_code=exc.code, message=str(exc),
            )
