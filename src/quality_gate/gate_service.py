"""Quality gate service -- evaluation entry point.

Validates the request, runs the evaluator, scores the results, applies the
enforcement policy and records the run.  Recording is non-blocking: a
store failure is logged and never changes the verdict.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from src.quality_gate.enforcement import EnforcementDecision, EnforcementPolicy
from src.quality_gate.gate_engine import GateEvaluator
from src.quality_gate.registry import CheckRegistry
from src.quality_gate.scoring import ScoringEngine
from src.shared.errors import ValidationInputError
from src.shared.models.common import FileRecord
from src.shared.models.quality import (
    CheckDescriptor,
    GateContext,
    GateRun,
    GateSummary,
    GateValidationResult,
    QualityResult,
)

if TYPE_CHECKING:
    from src.persistence.gate_run_store import GateRunStore

logger = logging.getLogger(__name__)


class QualityGateService:
    """Evaluates file sets against a registry and records gate runs.

    Args:
        registry: Frozen check registry, shared read-only.
        run_store: Optional store for GateRun records.
        max_workers: Thread-pool size for check execution.
    """

    def __init__(
        self,
        registry: CheckRegistry,
        run_store: GateRunStore | None = None,
        max_workers: int = 1,
    ) -> None:
        self._registry = registry
        self._run_store = run_store
        self._evaluator = GateEvaluator(registry, max_workers=max_workers)
        self._scoring = ScoringEngine(registry)
        self._policy = EnforcementPolicy()

    @property
    def registry(self) -> CheckRegistry:
        return self._registry

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def evaluate(self, files: list[FileRecord], context: GateContext) -> GateValidationResult:
        """Evaluate *files* and return the gate verdict.

        Raises:
            ValidationInputError: If the context or file set is malformed.
                Raised before any check runs.
        """
        self._validate(files, context)
        log_extra = {"project_id": context.project_id}

        run = self._start_run(context)
        if run is not None:
            log_extra["gate_run_id"] = run.id

        results = self._evaluator.evaluate(files)
        summary = self._scoring.summarize(results, context)
        decision = self._policy.decide(summary)

        self._complete_run(run, decision, results, summary)

        logger.info(
            "Gate evaluated: state=%s score=%d failed=%d warnings=%d blocked_by=%s",
            decision.state,
            summary.score,
            summary.failed,
            summary.warnings,
            summary.blocked_by,
            extra=log_extra,
        )
        return GateValidationResult(
            passed=not decision.has_failures,
            is_blocked=decision.is_blocked,
            results=results,
            summary=summary,
            can_proceed=decision.can_proceed,
            enforcement_action=decision.enforcement_action,
            gate_run_id=run.id if run is not None else None,
        )

    def run_check(self, check_id: str, files: list[FileRecord]) -> list[QualityResult]:
        """Run a single check by id.

        Raises:
            CheckNotFoundError: If *check_id* is not registered.
        """
        self._validate_files(files)
        return self._evaluator.run_check(check_id, files)

    def list_checks(self) -> list[CheckDescriptor]:
        return self._registry.descriptors()

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------

    def _validate(self, files: list[FileRecord], context: GateContext) -> None:
        if not context.project_id or not context.project_id.strip():
            raise ValidationInputError("project_id is required")
        self._validate_files(files)

    @staticmethod
    def _validate_files(files: list[FileRecord]) -> None:
        seen: set[str] = set()
        for index, file in enumerate(files):
            if not file.path or not file.path.strip():
                raise ValidationInputError(f"files[{index}].path is required")
            if file.path in seen:
                raise ValidationInputError(f"Duplicate file path: {file.path}")
            seen.add(file.path)

    # ------------------------------------------------------------------
    # Run recording (non-blocking)
    # ------------------------------------------------------------------

    def _start_run(self, context: GateContext) -> GateRun | None:
        if self._run_store is None:
            return None
        try:
            return self._run_store.create(context.project_id, context.triggered_by)
        except Exception as exc:
            logger.warning("Gate run creation failed (non-blocking): %s", exc)
            return None

    def _complete_run(
        self,
        run: GateRun | None,
        decision: EnforcementDecision,
        results: list[QualityResult],
        summary: GateSummary,
    ) -> None:
        if run is None or self._run_store is None:
            return
        try:
            self._run_store.complete(run.id, decision.run_status, results, summary)
        except Exception as exc:
            logger.warning(
                "Gate run completion failed (non-blocking): %s",
                exc,
                extra={"gate_run_id": run.id},
            )
