"""Regression comparator -- compares a new file set against a baseline.

The baseline is either supplied with the request or fetched from the
snapshot store.  Every changed file runs through the heuristic
sub-detectors in order; the AI analyzer, when configured, only looks at
files the heuristics had nothing to say about.  Files are analyzed
concurrently: the regex detectors run on worker threads, AI calls are
capped by a semaphore, and findings are reported in request order.
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

from src.regression.ai_assist import AIRegressionAnalyzer
from src.regression.detectors import DETECTORS, FileFindings
from src.regression.impact import estimate_test_impact
from src.shared.constants import AI_MAX_CONCURRENT_CALLS, AI_MIN_CONTENT_CHARS, SNAPSHOT_QUERY_LIMIT
from src.shared.models.common import FileRecord
from src.shared.models.quality import Severity
from src.shared.models.regression import (
    BreakingChange,
    BreakingChangeType,
    RegressionIssue,
    RegressionRequest,
    RegressionResult,
    RegressionSeverity,
    TestImpact,
)
from src.shared.severity import weighted_score

if TYPE_CHECKING:
    from src.persistence.snapshot_store import SnapshotStore

logger = logging.getLogger(__name__)

_DELETED = "DELETED"


class RegressionComparator:
    """Detects regressions and breaking changes between two file sets.

    Args:
        snapshot_store: Source of the baseline when a request carries no
            previous code.
        ai_analyzer: Optional AI fallback.
        snapshot_limit: Maximum number of snapshots fetched as baseline.
        ai_concurrency: Maximum number of AI calls in flight for one
            comparison.
    """

    def __init__(
        self,
        snapshot_store: SnapshotStore | None = None,
        ai_analyzer: AIRegressionAnalyzer | None = None,
        snapshot_limit: int = SNAPSHOT_QUERY_LIMIT,
        ai_concurrency: int = AI_MAX_CONCURRENT_CALLS,
    ) -> None:
        self._snapshot_store = snapshot_store
        self._ai_analyzer = ai_analyzer
        self._snapshot_limit = snapshot_limit
        self._ai_concurrency = max(1, ai_concurrency)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def detect(self, request: RegressionRequest) -> RegressionResult:
        log_extra = {"project_id": request.project_id}
        logger.info("Starting regression detection", extra=log_extra)

        baseline = request.previous_code or await self._fetch_baseline(request)
        old_by_path: dict[str, FileRecord] = {}
        for old_file in baseline:
            if (old_file.type or "").upper() != _DELETED:
                old_by_path.setdefault(old_file.path, old_file)

        changed: list[tuple[str, str, str]] = []
        for new_file in request.new_code:
            old_file = old_by_path.get(new_file.path)
            if old_file is not None and old_file.content == new_file.content:
                continue
            old_content = old_file.content if old_file is not None else ""
            changed.append((old_content, new_file.content, new_file.path))

        ai_slots = asyncio.Semaphore(self._ai_concurrency)
        per_file = await asyncio.gather(
            *(self._analyze_file(old, new, path, ai_slots) for old, new, path in changed)
        )

        regressions: list[RegressionIssue] = []
        breaking_changes: list[BreakingChange] = []
        for findings in per_file:
            regressions.extend(findings.issues)
            breaking_changes.extend(findings.breaking_changes)

        test_impact = estimate_test_impact(
            request.new_code, baseline, [path for _old, _new, path in changed]
        )
        severity = determine_severity(regressions, breaking_changes)
        result = RegressionResult(
            has_regressions=bool(regressions),
            severity=severity,
            regressions=regressions,
            breaking_changes=breaking_changes,
            test_impact=test_impact,
            score=weighted_score(issue.severity.value for issue in regressions),
            summary=build_summary(regressions, breaking_changes, severity, test_impact),
        )

        logger.info(
            "Regression detection completed: severity=%s regressions=%d breaking=%d changed_files=%d",
            severity.value,
            len(regressions),
            len(breaking_changes),
            len(changed),
            extra=log_extra,
        )
        return result

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    async def _fetch_baseline(self, request: RegressionRequest) -> list[FileRecord]:
        """Load the baseline from the snapshot store; failures yield no baseline."""
        if self._snapshot_store is None:
            return []
        try:
            return await asyncio.to_thread(
                self._snapshot_store.query,
                request.project_id,
                request.base_commit,
                self._snapshot_limit,
            )
        except Exception as exc:
            logger.warning(
                "Failed to load baseline snapshots (non-blocking): %s",
                exc,
                extra={"project_id": request.project_id},
            )
            return []

    async def _analyze_file(
        self, old: str, new: str, path: str, ai_slots: asyncio.Semaphore
    ) -> FileFindings:
        findings = await asyncio.to_thread(run_detectors, old, new, path)

        if findings or self._ai_analyzer is None:
            return findings
        if not old or not new:
            return findings
        if max(len(old), len(new)) <= AI_MIN_CONTENT_CHARS:
            return findings
        async with ai_slots:
            return await self._ai_analyzer.analyze(old, new, path)


def run_detectors(old: str, new: str, path: str) -> FileFindings:
    """Run every heuristic sub-detector on one file; a failing detector contributes nothing."""
    findings = FileFindings()
    for name, detector in DETECTORS:
        try:
            findings.extend(detector(old, new, path))
        except Exception as exc:
            logger.warning(
                "Regression detector '%s' failed on %s: %s",
                name,
                path,
                exc,
                extra={"file_path": path},
            )
    return findings


def determine_severity(
    regressions: list[RegressionIssue], breaking_changes: list[BreakingChange]
) -> RegressionSeverity:
    """Categorical severity of a comparison, independent of the numeric score."""
    severities = {issue.severity for issue in regressions}
    if Severity.CRITICAL in severities or any(
        bc.type == BreakingChangeType.DATABASE for bc in breaking_changes
    ):
        return RegressionSeverity.CRITICAL
    if breaking_changes or Severity.HIGH in severities:
        return RegressionSeverity.HIGH
    if regressions:
        return RegressionSeverity.MEDIUM
    return RegressionSeverity.NONE


def build_summary(
    regressions: list[RegressionIssue],
    breaking_changes: list[BreakingChange],
    severity: RegressionSeverity,
    test_impact: TestImpact,
) -> str:
    if not regressions:
        return "No regressions detected. Code changes appear safe."
    return (
        f"Found {len(regressions)} potential regression(s) and "
        f"{len(breaking_changes)} breaking change(s). "
        f"Severity: {severity.value}. "
        f"Test impact: {test_impact.new_tests_needed} new tests needed, "
        f"{test_impact.affected_tests} tests may need updates."
    )
