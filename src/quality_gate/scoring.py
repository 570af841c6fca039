"""Scoring engine for the quality gate.

Turns a flat list of check results into a :class:`GateSummary`: status
counts, the blocking checks that failed during a merge attempt, and a
severity-weighted numeric score.
"""

from __future__ import annotations

import logging

from src.quality_gate.registry import CheckRegistry
from src.shared.models.quality import GateContext, GateSummary, QualityResult, ResultStatus
from src.shared.severity import weighted_score

logger = logging.getLogger(__name__)


class ScoringEngine:
    """Summarizes results using the severities and blocking flags of a registry."""

    def __init__(self, registry: CheckRegistry) -> None:
        self._registry = registry

    def summarize(self, results: list[QualityResult], context: GateContext) -> GateSummary:
        """Produce the summary for one evaluation.

        Args:
            results: Results returned by the evaluator.
            context: Call context; ``blocked_by`` is only populated for
                merge attempts.

        Returns:
            A fully populated GateSummary.
        """
        failed = [r for r in results if r.status == ResultStatus.FAILED]

        return GateSummary(
            total=len(results),
            passed=sum(1 for r in results if r.status == ResultStatus.PASSED),
            failed=len(failed),
            warnings=sum(1 for r in results if r.status == ResultStatus.WARNING),
            skipped=sum(1 for r in results if r.status == ResultStatus.SKIPPED),
            blocked_by=self._blocked_by(failed) if context.is_merge_attempt else [],
            score=weighted_score(self._failure_severities(failed)),
        )

    def _blocked_by(self, failed: list[QualityResult]) -> list[str]:
        """Ids of blocking checks with at least one failure, first-seen order."""
        blocked: list[str] = []
        for result in failed:
            if result.check_id in blocked or result.check_id not in self._registry:
                continue
            if self._registry.get(result.check_id).blocking:
                blocked.append(result.check_id)
        return blocked

    def _failure_severities(self, failed: list[QualityResult]) -> list[str]:
        severities: list[str] = []
        for result in failed:
            if result.check_id not in self._registry:
                logger.warning("Result references unregistered check '%s'", result.check_id)
                continue
            severities.append(self._registry.get(result.check_id).severity.value)
        return severities
