"""Tests for the N+1 query and test-coverage checks."""
from __future__ import annotations

from src.quality_gate.coverage_checks import check_test_coverage
from src.quality_gate.performance_checks import check_n_plus_one
from src.shared.models.common import FileRecord
from src.shared.models.quality import ResultStatus


class TestNPlusOneCheck:
    def test_python_query_in_loop_warns(self):
        content = "def load(ids):\n    for i in ids:\n        rows = db.query(i)\n    return rows\n"
        findings = check_n_plus_one([FileRecord(path="repo.py", content=content)])

        assert findings[0].status == ResultStatus.WARNING
        assert findings[0].line == 3
        assert findings[0].details == {"lines": [3]}

    def test_javascript_query_in_loop_warns(self):
        content = (
            "for (const id of ids) {\n"
            "  const user = await prisma.user.findUnique({ where: { id } });\n"
            "}\n"
        )
        findings = check_n_plus_one([FileRecord(path="repo.ts", content=content)])

        assert findings[0].status == ResultStatus.WARNING
        assert findings[0].line == 2

    def test_query_outside_loop_passes(self):
        content = "rows = db.query(User)\nfor r in rows:\n    print(r)\n"
        findings = check_n_plus_one([FileRecord(path="repo.py", content=content)])
        assert findings[0].status == ResultStatus.PASSED


class TestCoverageCheck:
    def test_no_source_files_is_skipped(self):
        findings = check_test_coverage([])

        assert len(findings) == 1
        assert findings[0].status == ResultStatus.SKIPPED
        assert findings[0].file is None

    def test_sources_without_tests_fail(self):
        findings = check_test_coverage([FileRecord(path="src/a.py", content="x = 1")])

        assert findings[0].status == ResultStatus.FAILED
        assert findings[0].message == "No test files found"

    def test_half_ratio_passes(self):
        files = [
            FileRecord(path="src/a.py"),
            FileRecord(path="src/b.py"),
            FileRecord(path="tests/test_a.py"),
        ]
        findings = check_test_coverage(files)

        assert findings[0].status == ResultStatus.PASSED
        assert findings[0].details == {"source_files": 2, "test_files": 1, "ratio": 50}

    def test_low_ratio_warns(self):
        files = [
            FileRecord(path="src/a.ts"),
            FileRecord(path="src/b.ts"),
            FileRecord(path="src/c.ts"),
            FileRecord(path="src/a.test.ts"),
        ]
        findings = check_test_coverage(files)

        assert findings[0].status == ResultStatus.WARNING
        assert findings[0].details["ratio"] == 33

    def test_non_code_files_are_not_sources(self):
        files = [FileRecord(path="README.md"), FileRecord(path="package.json")]
        assert check_test_coverage(files)[0].status == ResultStatus.SKIPPED
