"""Tests for GateRunStore."""
from __future__ import annotations

import pytest

from src.persistence import GateRunStore
from src.shared.errors import GateRunNotFoundError, ImmutabilityViolationError
from src.shared.models.quality import GateRunStatus, GateSummary, QualityResult, ResultStatus


@pytest.fixture
def store(persistence_pool) -> GateRunStore:
    return GateRunStore(persistence_pool)


def _results() -> list[QualityResult]:
    return [QualityResult(check_id="lint-syntax", status=ResultStatus.PASSED, message="ok")]


class TestGateRunStore:
    def test_create_is_running(self, store):
        run = store.create("proj-1", triggered_by="ci")

        assert run.status == GateRunStatus.RUNNING
        assert run.triggered_by == "ci"
        assert run.results == []
        assert run.summary is None
        assert run.completed_at is None

    def test_complete(self, store):
        run = store.create("proj-1")
        summary = GateSummary(total=1, passed=1)

        completed = store.complete(run.id, GateRunStatus.PASSED, _results(), summary)

        assert completed.status == GateRunStatus.PASSED
        assert completed.summary == summary
        assert completed.results[0].check_id == "lint-syntax"
        assert completed.completed_at is not None

    def test_complete_twice_raises(self, store):
        run = store.create("proj-1")
        store.complete(run.id, GateRunStatus.FAILED, _results(), GateSummary(failed=1))

        with pytest.raises(ImmutabilityViolationError) as exc_info:
            store.complete(run.id, GateRunStatus.PASSED, _results(), GateSummary())
        assert exc_info.value.status_code == 409
        assert store.get(run.id).status == GateRunStatus.FAILED

    def test_complete_with_running_status_raises(self, store):
        run = store.create("proj-1")
        with pytest.raises(ImmutabilityViolationError):
            store.complete(run.id, GateRunStatus.RUNNING, [], GateSummary())

    def test_complete_missing_run(self, store):
        with pytest.raises(GateRunNotFoundError):
            store.complete("nope", GateRunStatus.PASSED, [], GateSummary())

    def test_get_missing(self, store):
        with pytest.raises(GateRunNotFoundError):
            store.get("nope")

    def test_list_for_project_newest_first(self, store):
        first = store.create("proj-1")
        second = store.create("proj-1")
        store.create("proj-2")

        runs = store.list_for_project("proj-1")

        assert [r.id for r in runs] == [second.id, first.id]
        assert len(store.list_for_project("proj-1", limit=1)) == 1
