"""Per-file regression sub-detectors.

Each detector compares the old and new content of one file and returns a
:class:`FileFindings`.  Detectors are pure and share no state, so the
comparator may run them for many files concurrently.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import PurePosixPath
from typing import Callable

from src.quality_gate.patterns import count_full_scans, find_loop_wrapped_queries
from src.regression.extractors import (
    count_destructive_statements,
    count_error_handling,
    count_validation,
    extract_exports,
    extract_prisma_fields,
    extract_signatures,
    extract_sql_columns,
)
from src.shared.constants import ERROR_HANDLING_DROP_RATIO, VALIDATION_DROP_RATIO
from src.shared.models.quality import Severity
from src.shared.models.regression import (
    BreakingChange,
    BreakingChangeType,
    RegressionIssue,
    RegressionType,
)


@dataclass
class FileFindings:
    """Issues and breaking changes found for one file."""

    issues: list[RegressionIssue] = field(default_factory=list)
    breaking_changes: list[BreakingChange] = field(default_factory=list)

    def extend(self, other: FileFindings) -> None:
        self.issues.extend(other.issues)
        self.breaking_changes.extend(other.breaking_changes)

    def __bool__(self) -> bool:
        return bool(self.issues or self.breaking_changes)


Detector = Callable[[str, str, str], FileFindings]


# ---------------------------------------------------------------------------
# API surface
# ---------------------------------------------------------------------------


def detect_api_changes(old: str, new: str, path: str) -> FileFindings:
    """Removed exports are critical; changed parameter counts are high."""
    findings = FileFindings()

    new_exports = set(extract_exports(new, path))
    for name in extract_exports(old, path):
        if name in new_exports:
            continue
        findings.issues.append(
            RegressionIssue(
                type=RegressionType.API,
                severity=Severity.CRITICAL,
                file=path,
                description=f"Removed public export: {name}",
                original_behavior=f"{name} was exported",
                new_behavior=f"{name} is no longer available",
                suggestion="Restore the export or provide a migration path",
            )
        )
        findings.breaking_changes.append(
            BreakingChange(
                type=BreakingChangeType.API,
                file=path,
                change=f"Removed export: {name}",
                impact=f"Clients importing {name} will break",
                migration_path="Remove usages or switch to a replacement export",
            )
        )

    new_signatures = extract_signatures(new, path)
    for name, old_count in extract_signatures(old, path).items():
        new_count = new_signatures.get(name)
        if new_count is None or new_count == old_count:
            continue
        findings.issues.append(
            RegressionIssue(
                type=RegressionType.API,
                severity=Severity.HIGH,
                file=path,
                description=f"Function signature changed: {name}",
                original_behavior=f"Function accepted {old_count} parameter(s)",
                new_behavior=f"Function now accepts {new_count} parameter(s)",
                suggestion="Update call sites or make the new parameters optional",
            )
        )
    return findings


# ---------------------------------------------------------------------------
# Schema
# ---------------------------------------------------------------------------


def _schema_fields(content: str, path: str) -> dict[str, bool] | None:
    suffix = PurePosixPath(path).suffix.lower()
    if suffix == ".prisma":
        return extract_prisma_fields(content)
    if suffix == ".sql":
        return extract_sql_columns(content)
    return None


def detect_schema_changes(old: str, new: str, path: str) -> FileFindings:
    """Removed fields are critical, newly added required fields medium.

    Raw SQL files are also checked for newly introduced destructive
    statements.
    """
    findings = FileFindings()
    old_fields = _schema_fields(old, path)
    new_fields = _schema_fields(new, path)
    if old_fields is None or new_fields is None:
        return findings

    for name in old_fields:
        if name in new_fields:
            continue
        findings.issues.append(
            RegressionIssue(
                type=RegressionType.DATABASE,
                severity=Severity.CRITICAL,
                file=path,
                description=f"Removed database field: {name}",
                original_behavior=f"Field {name} existed in the schema",
                new_behavior=f"Field {name} has been removed",
                suggestion="Create a migration that preserves the data or restore the field",
            )
        )
        findings.breaking_changes.append(
            BreakingChange(
                type=BreakingChangeType.DATABASE,
                file=path,
                change=f"Removed field: {name}",
                impact="Possible data loss for existing records",
                migration_path="Add the field back or migrate its data first",
            )
        )

    for name, optional in new_fields.items():
        if name in old_fields or optional:
            continue
        findings.issues.append(
            RegressionIssue(
                type=RegressionType.DATABASE,
                severity=Severity.MEDIUM,
                file=path,
                description=f"Added required field: {name}",
                original_behavior="Field did not exist",
                new_behavior="Field is required for every record",
                suggestion="Provide a default value or backfill existing records",
            )
        )

    if PurePosixPath(path).suffix.lower() == ".sql":
        old_counts = count_destructive_statements(old)
        for kind, count in count_destructive_statements(new).items():
            if count <= old_counts.get(kind, 0):
                continue
            findings.issues.append(
                RegressionIssue(
                    type=RegressionType.DATABASE,
                    severity=Severity.HIGH,
                    file=path,
                    description=f"Destructive statement introduced: {kind}",
                    original_behavior=f"{old_counts.get(kind, 0)} {kind} statement(s)",
                    new_behavior=f"{count} {kind} statement(s)",
                    suggestion="Verify this is intentional and that backups exist",
                )
            )
    return findings


# ---------------------------------------------------------------------------
# Behavioral
# ---------------------------------------------------------------------------


def detect_behavioral_changes(old: str, new: str, path: str) -> FileFindings:
    findings = FileFindings()

    old_errors = count_error_handling(old)
    new_errors = count_error_handling(new)
    if old_errors > 0 and new_errors <= old_errors * ERROR_HANDLING_DROP_RATIO:
        findings.issues.append(
            RegressionIssue(
                type=RegressionType.FUNCTIONAL,
                severity=Severity.MEDIUM,
                file=path,
                description="Reduced error handling coverage",
                original_behavior=f"Found {old_errors} error handling pattern(s)",
                new_behavior=f"Found {new_errors} error handling pattern(s)",
                suggestion="Ensure error cases are still handled",
            )
        )

    old_checks = count_validation(old)
    new_checks = count_validation(new)
    if old_checks > 0 and new_checks <= old_checks * VALIDATION_DROP_RATIO:
        findings.issues.append(
            RegressionIssue(
                type=RegressionType.FUNCTIONAL,
                severity=Severity.HIGH,
                file=path,
                description="Reduced input validation",
                original_behavior=f"Found {old_checks} validation check(s)",
                new_behavior=f"Found {new_checks} validation check(s)",
                suggestion="Restore input validation",
            )
        )
    return findings


# ---------------------------------------------------------------------------
# Performance
# ---------------------------------------------------------------------------


def detect_performance_changes(old: str, new: str, path: str) -> FileFindings:
    findings = FileFindings()

    old_loops = find_loop_wrapped_queries(old)
    new_loops = find_loop_wrapped_queries(new)
    if len(new_loops) > len(old_loops):
        findings.issues.append(
            RegressionIssue(
                type=RegressionType.PERFORMANCE,
                severity=Severity.MEDIUM,
                file=path,
                line=new_loops[0],
                description="Potential N+1 query pattern introduced",
                original_behavior=f"{len(old_loops)} query call(s) inside loops",
                new_behavior=f"{len(new_loops)} query call(s) inside loops",
                suggestion="Use batch queries or eager loading",
            )
        )

    old_scans = count_full_scans(old)
    new_scans = count_full_scans(new)
    if new_scans > old_scans:
        findings.issues.append(
            RegressionIssue(
                type=RegressionType.PERFORMANCE,
                severity=Severity.LOW,
                file=path,
                description="Potential full table scan introduced",
                original_behavior=f"{old_scans} unfiltered quer(y/ies)",
                new_behavior=f"{new_scans} unfiltered quer(y/ies)",
                suggestion="Filter the query or add a limit and supporting index",
            )
        )
    return findings


DETECTORS: tuple[tuple[str, Detector], ...] = (
    ("api_surface", detect_api_changes),
    ("schema", detect_schema_changes),
    ("behavioral", detect_behavioral_changes),
    ("performance", detect_performance_changes),
)
