"""Test-impact estimation for a changed file set."""

from __future__ import annotations

from pathlib import PurePosixPath

from src.quality_gate.patterns import is_source_file
from src.shared.models.common import FileRecord
from src.shared.models.regression import TestImpact

_JS_SUFFIXES: frozenset[str] = frozenset({".js", ".jsx", ".ts", ".tsx", ".mjs", ".cjs"})


def candidate_test_path(path: str) -> str | None:
    """Return the conventional test-file path for the source file *path*.

    * ``src/x/y.ts``  -> ``src/__tests__/x/y.test.ts`` (sibling ``y.test.ts``
      outside ``src/``)
    * ``src/p/m.py``  -> ``tests/p/test_m.py``
    * ``pkg/m.go``    -> ``pkg/m_test.go``
    """
    source = PurePosixPath(path)
    suffix = source.suffix.lower()
    parts = source.parts

    if suffix in _JS_SUFFIXES:
        test_name = f"{source.stem}.test{source.suffix}"
        if "src" in parts[:-1]:
            idx = parts.index("src")
            return str(PurePosixPath(*parts[: idx + 1], "__tests__", *parts[idx + 1: -1], test_name))
        return str(source.with_name(test_name))

    if suffix == ".py":
        package_parts = parts[1:-1] if parts[0] == "src" else parts[:-1]
        return str(PurePosixPath("tests", *package_parts, f"test_{source.stem}.py"))

    if suffix == ".go":
        return str(source.with_name(f"{source.stem}_test.go"))

    return None


def _tested_ratio(files: list[FileRecord]) -> float:
    """Percentage of source files in *files* whose conventional test is present."""
    paths = {f.path for f in files}
    sources = [f.path for f in files if is_source_file(f.path, f.type)]
    if not sources:
        return 0.0
    tested = sum(1 for p in sources if candidate_test_path(p) in paths)
    return tested / len(sources) * 100


def estimate_test_impact(
    new_files: list[FileRecord],
    old_files: list[FileRecord],
    changed_paths: list[str],
) -> TestImpact:
    """Estimate which tests a change touches and which files lack tests.

    Args:
        new_files: The full new file set.
        old_files: The baseline file set (possibly empty).
        changed_paths: Paths whose content differs from the baseline.

    Returns:
        TestImpact with ``coverage_change`` as the percentage-point change
        of source files that have a conventional test.
    """
    new_paths = {f.path for f in new_files}
    old_paths = {f.path for f in old_files}
    types = {f.path: f.type for f in new_files}

    tests_to_update: list[str] = []
    untested_files: list[str] = []
    for path in changed_paths:
        if not is_source_file(path, types.get(path)):
            continue
        candidate = candidate_test_path(path)
        if candidate is None:
            continue
        if candidate in new_paths:
            if candidate not in tests_to_update:
                tests_to_update.append(candidate)
        elif candidate not in old_paths:
            untested_files.append(path)

    return TestImpact(
        affected_tests=len(tests_to_update),
        new_tests_needed=len(untested_files),
        tests_to_update=tests_to_update,
        untested_files=untested_files,
        coverage_change=round(_tested_ratio(new_files) - _tested_ratio(old_files), 1),
    )
