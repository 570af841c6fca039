"""Tests for GateEvaluator: isolation, ordering and parallel execution."""
from __future__ import annotations

import threading
import time

import pytest

from src.quality_gate.gate_engine import GateEvaluator
from src.quality_gate.registry import Check, CheckFinding, CheckRegistry
from src.shared.errors import CheckNotFoundError
from src.shared.models.common import FileRecord
from src.shared.models.quality import CheckType, ResultStatus, Severity


def _check(check_id: str, run, enabled: bool = True) -> Check:
    return Check(
        id=check_id,
        name=check_id,
        category="Test",
        check_type=CheckType.LINT,
        severity=Severity.MEDIUM,
        run=run,
        enabled=enabled,
    )


def _passing(message: str, delay: float = 0.0):
    def run(files):
        if delay:
            time.sleep(delay)
        return [CheckFinding(status=ResultStatus.PASSED, message=message)]

    return run


def _raising(files):
    raise RuntimeError("boom")


class TestGateEvaluator:
    def test_rejects_non_positive_workers(self, registry):
        with pytest.raises(ValueError):
            GateEvaluator(registry, max_workers=0)

    def test_empty_file_set_does_not_raise(self, registry):
        results = GateEvaluator(registry).evaluate([])

        assert len(results) == 1
        assert results[0].check_id == "test-coverage"
        assert results[0].status == ResultStatus.SKIPPED

    def test_failing_check_becomes_single_warning(self):
        registry = CheckRegistry.from_checks(
            [_check("first", _passing("one")), _check("broken", _raising), _check("last", _passing("two"))]
        )
        results = GateEvaluator(registry).evaluate([FileRecord(path="a.py")])

        assert [r.check_id for r in results] == ["first", "broken", "last"]
        broken = results[1]
        assert broken.status == ResultStatus.WARNING
        assert broken.message == "Check failed to run: boom"
        assert broken.details == {"error_type": "RuntimeError"}

    def test_disabled_checks_are_not_run(self):
        registry = CheckRegistry.from_checks(
            [_check("on", _passing("on")), _check("off", _passing("off"), enabled=False)]
        )
        results = GateEvaluator(registry).evaluate([])
        assert [r.check_id for r in results] == ["on"]

    def test_run_check_runs_disabled_check(self):
        registry = CheckRegistry.from_checks([_check("off", _passing("off"), enabled=False)])
        results = GateEvaluator(registry).run_check("off", [])
        assert [r.message for r in results] == ["off"]

    def test_run_check_unknown_id(self, registry):
        with pytest.raises(CheckNotFoundError):
            GateEvaluator(registry).run_check("missing", [])

    def test_parallel_results_keep_registration_order(self):
        # Earlier checks sleep longer so they finish last.
        checks = [_check(f"c{i}", _passing(f"m{i}", delay=0.05 * (5 - i))) for i in range(5)]
        registry = CheckRegistry.from_checks(checks)

        results = GateEvaluator(registry, max_workers=4).evaluate([])

        assert [r.check_id for r in results] == ["c0", "c1", "c2", "c3", "c4"]

    def test_parallel_runs_on_worker_threads(self):
        seen: set[str] = set()

        def run(files):
            seen.add(threading.current_thread().name)
            return []

        registry = CheckRegistry.from_checks([_check("a", run), _check("b", run)])
        GateEvaluator(registry, max_workers=2).evaluate([])

        assert seen
        assert all(name.startswith("gate-check") for name in seen)

    def test_parallel_isolation(self):
        registry = CheckRegistry.from_checks(
            [_check("broken", _raising), _check("ok", _passing("fine"))]
        )
        results = GateEvaluator(registry, max_workers=2).evaluate([])

        assert [r.status for r in results] == [ResultStatus.WARNING, ResultStatus.PASSED]
