"""Tests for test-impact estimation."""
from __future__ import annotations

import pytest

from src.regression.impact import candidate_test_path, estimate_test_impact
from src.shared.models.common import FileRecord


@pytest.mark.parametrize(
    "source, expected",
    [
        ("src/api/users.ts", "src/__tests__/api/users.test.ts"),
        ("lib/users.js", "lib/users.test.js"),
        ("src/shop/cart.py", "tests/shop/test_cart.py"),
        ("shop/cart.py", "tests/shop/test_cart.py"),
        ("pkg/server.go", "pkg/server_test.go"),
        ("docs/readme.md", None),
    ],
)
def test_candidate_test_path(source, expected):
    assert candidate_test_path(source) == expected


class TestEstimateTestImpact:
    def test_changed_file_with_test_needs_update(self):
        new = [FileRecord(path="shop/cart.py"), FileRecord(path="tests/shop/test_cart.py")]
        impact = estimate_test_impact(new, new, ["shop/cart.py"])

        assert impact.affected_tests == 1
        assert impact.tests_to_update == ["tests/shop/test_cart.py"]
        assert impact.new_tests_needed == 0

    def test_changed_file_without_test(self):
        new = [FileRecord(path="shop/cart.py")]
        impact = estimate_test_impact(new, [], ["shop/cart.py"])

        assert impact.new_tests_needed == 1
        assert impact.untested_files == ["shop/cart.py"]

    def test_changed_tests_are_not_sources(self):
        new = [FileRecord(path="tests/shop/test_cart.py")]
        impact = estimate_test_impact(new, [], ["tests/shop/test_cart.py"])

        assert impact.affected_tests == 0
        assert impact.new_tests_needed == 0

    def test_coverage_change_is_computed(self):
        old = [FileRecord(path="a.go"), FileRecord(path="b.go")]
        new = old + [FileRecord(path="a_test.go")]
        impact = estimate_test_impact(new, old, ["a_test.go"])

        assert impact.coverage_change == 50.0

    def test_coverage_drop(self):
        old = [FileRecord(path="a.go"), FileRecord(path="a_test.go")]
        new = old + [FileRecord(path="b.go")]
        impact = estimate_test_impact(new, old, ["b.go"])

        assert impact.coverage_change == -50.0
        assert impact.untested_files == ["b.go"]
