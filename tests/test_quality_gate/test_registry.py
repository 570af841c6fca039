"""Tests for Check and CheckRegistry."""
from __future__ import annotations

import pytest

from src.quality_gate.registry import Check, CheckFinding, CheckRegistry
from src.shared.errors import CheckNotFoundError
from src.shared.models.common import FileRecord
from src.shared.models.quality import CheckType, ResultStatus, Severity


def _noop(files):
    return []


def _make_check(check_id: str, **overrides) -> Check:
    fields = {
        "id": check_id,
        "name": check_id.title(),
        "category": "Test",
        "check_type": CheckType.LINT,
        "severity": Severity.LOW,
        "run": _noop,
    }
    fields.update(overrides)
    return Check(**fields)


class TestCheck:
    def test_evaluate_stamps_findings(self):
        def run(files):
            return [
                CheckFinding(status=ResultStatus.FAILED, message="bad", file="a.py", line=3),
                CheckFinding(status=ResultStatus.SKIPPED, message="n/a"),
            ]

        check = _make_check("demo", run=run)
        results = check.evaluate([FileRecord(path="a.py")])

        assert [r.check_id for r in results] == ["demo", "demo"]
        assert results[0].name == "Demo"
        assert results[0].location.file == "a.py"
        assert results[0].location.line == 3
        assert results[1].location is None

    def test_describe(self):
        descriptor = _make_check("demo", blocking=True, description="d").describe()

        assert descriptor.id == "demo"
        assert descriptor.type == CheckType.LINT
        assert descriptor.blocking is True
        assert descriptor.enabled is True


class TestCheckRegistry:
    def test_default_registry_order_and_flags(self, registry):
        assert [c.id for c in registry] == [
            "lint-syntax",
            "lint-complexity",
            "security-secrets",
            "security-injection",
            "performance-queries",
            "test-coverage",
            "docs-comments",
            "types-basic",
            "deps-imports",
            "api-references",
        ]
        assert registry.frozen
        blocking = {c.id for c in registry if c.blocking}
        assert blocking == {"lint-syntax", "security-secrets"}

    def test_default_severities(self, registry):
        assert registry.get("lint-syntax").severity == Severity.CRITICAL
        assert registry.get("security-injection").severity == Severity.HIGH
        assert registry.get("docs-comments").severity == Severity.LOW

    def test_register_on_frozen_registry_raises(self, registry):
        with pytest.raises(RuntimeError):
            registry.register(_make_check("extra"))

    def test_duplicate_id_raises(self):
        reg = CheckRegistry()
        reg.register(_make_check("a"))
        with pytest.raises(ValueError, match="Duplicate"):
            reg.register(_make_check("a"))

    def test_get_unknown_raises_not_found(self, registry):
        with pytest.raises(CheckNotFoundError) as exc_info:
            registry.get("nope")
        assert exc_info.value.status_code == 404

    def test_contains_and_len(self, registry):
        assert "lint-syntax" in registry
        assert "nope" not in registry
        assert len(registry) == 10

    def test_configure_returns_new_registry(self, registry):
        configured = registry.configure(
            disabled=["docs-comments"],
            blocking={"security-injection": True},
            severity={"lint-complexity": "low"},
        )

        assert configured is not registry
        assert configured.frozen
        assert "docs-comments" not in {c.id for c in configured.enabled_checks()}
        assert configured.get("security-injection").blocking is True
        assert configured.get("lint-complexity").severity == Severity.LOW
        # The source registry is unchanged.
        assert registry.get("docs-comments").enabled is True
        assert registry.get("security-injection").blocking is False

    def test_configure_rejects_unknown_severity(self, registry):
        with pytest.raises(ValueError, match="Unknown severity 'urgent' for check 'lint-complexity'"):
            registry.configure(severity={"lint-complexity": "urgent"})

    def test_configure_ignores_unknown_ids(self, registry):
        configured = registry.configure(disabled=["does-not-exist"])
        assert len(configured.enabled_checks()) == 10

    def test_descriptors_include_disabled_checks(self, registry):
        configured = registry.configure(disabled=["docs-comments"])
        descriptors = {d.id: d for d in configured.descriptors()}

        assert len(descriptors) == 10
        assert descriptors["docs-comments"].enabled is False
