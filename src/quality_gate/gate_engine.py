"""Gate evaluator -- runs registered checks over a file set.

Checks run in registration order.  With ``max_workers > 1`` they run on a
thread pool; results are still returned in registration order.  A check
that raises never aborts the batch: it contributes a single ``warning``
result stating that it failed to run.
"""

from __future__ import annotations

import logging
import time
from concurrent.futures import ThreadPoolExecutor

from src.quality_gate.registry import Check, CheckRegistry
from src.shared.errors import CheckExecutionError
from src.shared.models.common import FileRecord
from src.shared.models.quality import QualityResult, ResultStatus

logger = logging.getLogger(__name__)


class GateEvaluator:
    """Runs the enabled checks of a registry against submitted files.

    Usage
    -----
    ::

        evaluator = GateEvaluator(build_default_registry(), max_workers=4)
        results = evaluator.evaluate(files)
    """

    def __init__(self, registry: CheckRegistry, max_workers: int = 1) -> None:
        if max_workers < 1:
            raise ValueError("max_workers must be at least 1")
        self._registry = registry
        self._max_workers = max_workers

    @property
    def registry(self) -> CheckRegistry:
        return self._registry

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def evaluate(self, files: list[FileRecord]) -> list[QualityResult]:
        """Run every enabled check and return the concatenated results."""
        checks = self._registry.enabled_checks()
        start = time.monotonic()

        if self._max_workers > 1 and len(checks) > 1:
            with ThreadPoolExecutor(
                max_workers=self._max_workers, thread_name_prefix="gate-check"
            ) as pool:
                batches = list(pool.map(lambda check: self._run_isolated(check, files), checks))
        else:
            batches = [self._run_isolated(check, files) for check in checks]

        results = [result for batch in batches for result in batch]
        logger.info(
            "Evaluated %d check(s) over %d file(s): %d result(s) in %.3fs",
            len(checks),
            len(files),
            len(results),
            time.monotonic() - start,
        )
        return results

    def run_check(self, check_id: str, files: list[FileRecord]) -> list[QualityResult]:
        """Run one check by id, enabled or not.

        Raises:
            CheckNotFoundError: If *check_id* is not registered.
        """
        return self._run_isolated(self._registry.get(check_id), files)

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _run_isolated(self, check: Check, files: list[FileRecord]) -> list[QualityResult]:
        try:
            return check.evaluate(files)
        except Exception as exc:
            error = CheckExecutionError(check.id, exc)
            logger.warning(
                "Check %s failed to run: %s",
                check.id,
                exc,
                extra={"check_id": check.id},
            )
            return [
                QualityResult(
                    check_id=check.id,
                    name=check.name,
                    status=ResultStatus.WARNING,
                    message=error.detail,
                    details={"error_type": type(exc).__name__},
                )
            ]
