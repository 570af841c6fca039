"""Tests for RegressionReportStore."""
from __future__ import annotations

from src.persistence import RegressionReportStore
from src.shared.models.regression import RegressionResult, RegressionSeverity


class TestRegressionReportStore:
    def test_record_and_list(self, persistence_pool):
        store = RegressionReportStore(persistence_pool)
        clean = RegressionResult(has_regressions=False, severity=RegressionSeverity.NONE)
        bad = RegressionResult(has_regressions=True, severity=RegressionSeverity.HIGH, score=75)

        store.record("proj-1", clean)
        report = store.record("proj-1", bad, base_commit="abc")
        store.record("proj-2", clean)

        reports = store.list_for_project("proj-1")

        assert [r.id for r in reports][0] == report.id
        assert len(reports) == 2
        assert reports[0].base_commit == "abc"
        assert reports[0].result == bad

    def test_row_columns(self, persistence_pool):
        store = RegressionReportStore(persistence_pool)
        result = RegressionResult(has_regressions=True, severity=RegressionSeverity.CRITICAL, score=50)
        report = store.record("proj-1", result)

        row = persistence_pool.get().execute(
            "SELECT * FROM regression_reports WHERE id = ?", (report.id,)
        ).fetchone()
        assert row["severity"] == "critical"
        assert row["has_regressions"] == 1
        assert row["score"] == 50
