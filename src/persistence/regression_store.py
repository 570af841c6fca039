"""Regression report store -- history of regression comparisons."""
from __future__ import annotations

import logging
import uuid

from src.shared.db.connection import ConnectionPool
from src.shared.models.regression import RegressionReport, RegressionResult
from src.shared.utils import now_iso

logger = logging.getLogger(__name__)

_MAX_PAGE_SIZE = 100


class RegressionReportStore:
    """Insert-only storage for ``regression_reports`` rows."""

    def __init__(self, pool: ConnectionPool) -> None:
        self._pool = pool

    @staticmethod
    def _row_to_report(row) -> RegressionReport:
        return RegressionReport(
            id=row["id"],
            project_id=row["project_id"],
            base_commit=row["base_commit"],
            result=RegressionResult.model_validate_json(row["result_json"]),
            created_at=row["created_at"],
        )

    def record(
        self,
        project_id: str,
        result: RegressionResult,
        base_commit: str | None = None,
    ) -> RegressionReport:
        report = RegressionReport(
            id=str(uuid.uuid4()),
            project_id=project_id,
            base_commit=base_commit,
            result=result,
            created_at=now_iso(),
        )
        with self._pool.transaction() as conn:
            conn.execute(
                """INSERT INTO regression_reports
                   (id, project_id, base_commit, severity, has_regressions,
                    score, result_json, created_at)
                   VALUES (?, ?, ?, ?, ?, ?, ?, ?)""",
                (
                    report.id,
                    project_id,
                    base_commit,
                    result.severity.value,
                    int(result.has_regressions),
                    result.score,
                    result.model_dump_json(),
                    report.created_at.isoformat(),
                ),
            )
        return report

    def list_for_project(self, project_id: str, limit: int = 20) -> list[RegressionReport]:
        """Return stored reports for *project_id*, newest first."""
        conn = self._pool.get()
        limit = max(1, min(limit, _MAX_PAGE_SIZE))
        rows = conn.execute(
            """SELECT * FROM regression_reports WHERE project_id = ?
               ORDER BY created_at DESC, rowid DESC LIMIT ?""",
            (project_id, limit),
        ).fetchall()

        reports: list[RegressionReport] = []
        for r in rows:
            try:
                reports.append(self._row_to_report(r))
            except (KeyError, ValueError, TypeError) as exc:
                logger.warning("Failed to convert regression report row: %s", exc)
        return reports
