"""Rich-based terminal rendering of gate verdicts and regression reports.

All functions share the module-level ``_console`` so that output goes to
whatever ``sys.stdout`` is current when they run.
"""

from __future__ import annotations

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from src.shared.models.quality import GateValidationResult, ResultStatus
from src.shared.models.regression import RegressionResult, RegressionSeverity

# ---------------------------------------------------------------------------
# Module-level Console singleton
# ---------------------------------------------------------------------------

_console = Console()

_STATUS_STYLES: dict[ResultStatus, str] = {
    ResultStatus.PASSED: "green",
    ResultStatus.FAILED: "red",
    ResultStatus.WARNING: "yellow",
    ResultStatus.SKIPPED: "dim",
}

_SEVERITY_STYLES: dict[str, str] = {
    "critical": "bold red",
    "high": "red",
    "medium": "yellow",
    "low": "cyan",
    "none": "green",
}


# ---------------------------------------------------------------------------
# Display functions
# ---------------------------------------------------------------------------


def print_gate_result(result: GateValidationResult, show_passed: bool = False) -> None:
    """Print the results table and a verdict panel for one evaluation.

    Parameters
    ----------
    result:
        The verdict returned by ``QualityGateService.evaluate``.
    show_passed:
        Include ``passed`` rows in the table.  By default only failures,
        warnings and skips are listed.
    """
    table = Table(title="Quality Gate Results", show_header=True, header_style="bold")
    table.add_column("Check", style="cyan")
    table.add_column("Status")
    table.add_column("Location")
    table.add_column("Message")

    for item in result.results:
        if item.status == ResultStatus.PASSED and not show_passed:
            continue
        location = ""
        if item.location is not None:
            location = item.location.file
            if item.location.line is not None:
                location = f"{location}:{item.location.line}"
        style = _STATUS_STYLES[item.status]
        table.add_row(
            item.check_id,
            Text(item.status.value, style=style),
            location,
            item.message,
        )

    if table.row_count:
        _console.print(table)

    summary = result.summary
    if result.is_blocked:
        verdict, style = "BLOCKED", "red"
    elif not result.passed:
        verdict, style = "FAILED", "red"
    elif summary.warnings:
        verdict, style = "PASSED WITH WARNINGS", "yellow"
    else:
        verdict, style = "PASSED", "green"

    content = Text()
    content.append(f"Verdict: {verdict}\n", style=f"bold {style}")
    content.append(f"Score: {summary.score}/100\n")
    content.append(
        f"Passed: {summary.passed}  Failed: {summary.failed}  "
        f"Warnings: {summary.warnings}  Skipped: {summary.skipped}\n"
    )
    if summary.blocked_by:
        content.append(f"Blocked by: {', '.join(summary.blocked_by)}\n", style="red")
    if result.enforcement_action is not None:
        content.append(f"Action: {result.enforcement_action.value}\n")

    _console.print(Panel(content, title="Quality Gate", border_style=style))


def print_regression_result(result: RegressionResult) -> None:
    """Print regressions, breaking changes and test impact of a comparison."""
    if result.regressions:
        table = Table(title="Regressions", show_header=True, header_style="bold")
        table.add_column("Severity")
        table.add_column("Type")
        table.add_column("File")
        table.add_column("Description")
        for issue in result.regressions:
            location = issue.file if issue.line is None else f"{issue.file}:{issue.line}"
            table.add_row(
                Text(issue.severity.value, style=_SEVERITY_STYLES[issue.severity.value]),
                issue.type.value,
                location,
                issue.description,
            )
        _console.print(table)

    if result.breaking_changes:
        table = Table(title="Breaking Changes", show_header=True, header_style="bold")
        table.add_column("Type")
        table.add_column("File")
        table.add_column("Change")
        table.add_column("Impact")
        for change in result.breaking_changes:
            table.add_row(change.type.value, change.file, change.change, change.impact)
        _console.print(table)

    style = _SEVERITY_STYLES[result.severity.value]
    content = Text()
    content.append(f"Severity: {result.severity.value.upper()}\n", style=f"bold {style}")
    content.append(f"Score: {result.score}/100\n")
    impact = result.test_impact
    content.append(
        f"Tests affected: {impact.affected_tests}  New tests needed: {impact.new_tests_needed}  "
        f"Coverage change: {impact.coverage_change:+.1f}\n"
    )
    content.append(result.summary)

    border = "green" if result.severity == RegressionSeverity.NONE else style
    _console.print(Panel(content, title="Regression Report", border_style=border))
