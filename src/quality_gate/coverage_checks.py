"""Test-coverage check based on the ratio of test files to source files."""

from __future__ import annotations

from pathlib import PurePosixPath

from src.quality_gate.patterns import SOURCE_EXTENSIONS, is_source_file, is_test_file
from src.quality_gate.registry import CheckFinding
from src.shared.constants import TEST_COVERAGE_RATIO_THRESHOLD
from src.shared.models.common import FileRecord
from src.shared.models.quality import ResultStatus


def _is_code_test(file: FileRecord) -> bool:
    if not is_test_file(file.path, file.type):
        return False
    return PurePosixPath(file.path).suffix.lower() in SOURCE_EXTENSIONS


def check_test_coverage(files: list[FileRecord]) -> list[CheckFinding]:
    """Produce exactly one project-wide finding.

    * no source files: skipped
    * source files but no test files: failed
    * test/source ratio below the threshold: warning
    """
    source_count = sum(1 for f in files if is_source_file(f.path, f.type))
    test_count = sum(1 for f in files if _is_code_test(f))

    if source_count == 0:
        return [
            CheckFinding(
                status=ResultStatus.SKIPPED,
                message="No source files to measure test coverage against",
                details={"source_files": 0, "test_files": test_count},
            )
        ]

    ratio = test_count / source_count
    details = {
        "source_files": source_count,
        "test_files": test_count,
        "ratio": round(ratio * 100),
    }

    if test_count == 0:
        return [
            CheckFinding(
                status=ResultStatus.FAILED,
                message="No test files found",
                details=details,
                suggestions=["Add test files for your source code"],
            )
        ]

    adequate = ratio >= TEST_COVERAGE_RATIO_THRESHOLD
    return [
        CheckFinding(
            status=ResultStatus.PASSED if adequate else ResultStatus.WARNING,
            message=f"Found {test_count} test file(s) for {source_count} source file(s)",
            details=details,
            suggestions=None if adequate else ["Increase test coverage", "Add more unit tests"],
        )
    ]
