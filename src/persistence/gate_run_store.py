"""Gate run store -- create-once, complete-once records of evaluations."""
from __future__ import annotations

import json
import logging
import uuid

from src.shared.db.connection import ConnectionPool
from src.shared.errors import GateRunNotFoundError, ImmutabilityViolationError
from src.shared.models.quality import GateRun, GateRunStatus, GateSummary, QualityResult
from src.shared.utils import now_iso

logger = logging.getLogger(__name__)

_MAX_PAGE_SIZE = 100


class GateRunStore:
    """Manages the ``gate_runs`` SQLite table.

    A run is created ``running`` and moves to a terminal status exactly
    once; afterwards it is read-only.
    """

    def __init__(self, pool: ConnectionPool) -> None:
        self._pool = pool

    @staticmethod
    def _row_to_run(row) -> GateRun:
        summary_json = row["summary_json"]
        return GateRun(
            id=row["id"],
            project_id=row["project_id"],
            triggered_by=row["triggered_by"],
            status=GateRunStatus(row["status"]),
            results=[QualityResult.model_validate(r) for r in json.loads(row["results_json"])],
            summary=GateSummary.model_validate_json(summary_json) if summary_json else None,
            created_at=row["created_at"],
            completed_at=row["completed_at"],
        )

    def create(self, project_id: str, triggered_by: str = "system") -> GateRun:
        """Insert a new ``running`` gate run."""
        run_id = str(uuid.uuid4())
        with self._pool.transaction() as conn:
            conn.execute(
                """INSERT INTO gate_runs (id, project_id, triggered_by, status, created_at)
                   VALUES (?, ?, ?, ?, ?)""",
                (run_id, project_id, triggered_by, GateRunStatus.RUNNING.value, now_iso()),
            )
        return self.get(run_id)

    def complete(
        self,
        run_id: str,
        status: GateRunStatus,
        results: list[QualityResult],
        summary: GateSummary,
    ) -> GateRun:
        """Move a running gate run to its terminal *status*.

        Raises:
            GateRunNotFoundError: If *run_id* does not exist.
            ImmutabilityViolationError: If the run already completed, or
                *status* is not terminal.
        """
        if status == GateRunStatus.RUNNING:
            raise ImmutabilityViolationError("A gate run can only be completed with a terminal status")

        results_json = json.dumps([r.model_dump(mode="json") for r in results])
        with self._pool.transaction() as conn:
            cursor = conn.execute(
                """UPDATE gate_runs
                   SET status = ?, results_json = ?, summary_json = ?, completed_at = ?
                   WHERE id = ? AND status = ?""",
                (
                    status.value,
                    results_json,
                    summary.model_dump_json(),
                    now_iso(),
                    run_id,
                    GateRunStatus.RUNNING.value,
                ),
            )
            updated = cursor.rowcount

        if updated == 0:
            existing = self.get(run_id)
            raise ImmutabilityViolationError(
                f"Gate run {run_id} already completed with status '{existing.status.value}'"
            )
        return self.get(run_id)

    def get(self, run_id: str) -> GateRun:
        """Return a single gate run.

        Raises:
            GateRunNotFoundError: When no matching row exists.
        """
        conn = self._pool.get()
        row = conn.execute("SELECT * FROM gate_runs WHERE id = ?", (run_id,)).fetchone()
        if row is None:
            raise GateRunNotFoundError(detail=f"Gate run not found: {run_id}")
        return self._row_to_run(row)

    def list_for_project(self, project_id: str, limit: int = 20) -> list[GateRun]:
        """Return the project's gate runs, newest first."""
        conn = self._pool.get()
        limit = max(1, min(limit, _MAX_PAGE_SIZE))
        rows = conn.execute(
            """SELECT * FROM gate_runs WHERE project_id = ?
               ORDER BY created_at DESC, rowid DESC LIMIT ?""",
            (project_id, limit),
        ).fetchall()

        runs: list[GateRun] = []
        for r in rows:
            try:
                runs.append(self._row_to_run(r))
            except (KeyError, ValueError, TypeError) as exc:
                logger.warning("Failed to convert gate run row: %s", exc)
        return runs
