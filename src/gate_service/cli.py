"""Command-line front end: evaluate a directory or compare two of them."""

from __future__ import annotations

import asyncio
import logging
import os
from pathlib import Path

import typer
import uvicorn

from src.gate_service.display import print_gate_result, print_regression_result
from src.quality_gate import QualityGateService, build_default_registry
from src.quality_gate.policy_config import PolicyConfigError, load_gate_policy
from src.regression import RegressionComparator
from src.shared.constants import EXCLUDED_DIRS, QUALITY_GATE_PORT, QUALITY_GATE_SERVICE_NAME
from src.shared.logging import setup_logging
from src.shared.models.common import FileRecord
from src.shared.models.quality import GateContext
from src.shared.models.regression import RegressionRequest, RegressionSeverity

logger = logging.getLogger(__name__)

# Files larger than this are not loaded into the file set.
_MAX_FILE_BYTES = 1_000_000

app = typer.Typer(
    name="quality-gate",
    help="Heuristic quality gate and regression detection for generated code.",
    add_completion=False,
    no_args_is_help=True,
)


@app.callback()
def main(
    log_level: str = typer.Option("warning", "--log-level", help="Logging level."),
) -> None:
    setup_logging(QUALITY_GATE_SERVICE_NAME, log_level)


# ---------------------------------------------------------------------------
# File collection
# ---------------------------------------------------------------------------


def collect_files(root: Path) -> list[FileRecord]:
    """Read every text file below *root* into file records.

    Paths are relative to *root* with forward slashes; excluded directories
    are pruned, and files that are too large or not UTF-8 are left out.
    """
    records: list[FileRecord] = []
    for dirpath, dirnames, filenames in os.walk(root):
        dirnames[:] = sorted(d for d in dirnames if d not in EXCLUDED_DIRS)
        for filename in sorted(filenames):
            full = Path(dirpath) / filename
            if full.stat().st_size > _MAX_FILE_BYTES:
                logger.debug("Skipping large file %s", full)
                continue
            try:
                content = full.read_text(encoding="utf-8")
            except UnicodeDecodeError:
                logger.debug("Skipping non-text file %s", full)
                continue
            records.append(FileRecord(path=full.relative_to(root).as_posix(), content=content))
    return records


def _require_dir(path: Path) -> None:
    if not path.is_dir():
        typer.echo(f"Not a directory: {path}", err=True)
        raise typer.Exit(code=2)


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


@app.command()
def evaluate(
    path: Path = typer.Argument(..., help="Directory to evaluate."),
    project_id: str = typer.Option("local", "--project-id", help="Project identifier."),
    merge: bool = typer.Option(False, "--merge", help="Treat the evaluation as a merge attempt."),
    policy: Path | None = typer.Option(None, "--policy", help="Gate policy YAML file."),
    as_json: bool = typer.Option(False, "--json", help="Print the verdict as JSON."),
) -> None:
    """Run the quality gate over a directory.

    Exits with code 1 when the verdict does not allow proceeding.
    """
    _require_dir(path)
    try:
        gate_policy = load_gate_policy(policy)
    except PolicyConfigError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(code=2)
    registry = gate_policy.apply(build_default_registry())
    service = QualityGateService(registry, max_workers=gate_policy.max_workers or 1)

    files = collect_files(path)
    context = GateContext(project_id=project_id, is_merge_attempt=merge, triggered_by="cli")
    result = service.evaluate(files, context)

    if as_json:
        typer.echo(result.model_dump_json(indent=2))
    else:
        print_gate_result(result)

    if not result.can_proceed:
        raise typer.Exit(code=1)


@app.command()
def regress(
    old_path: Path = typer.Argument(..., help="Directory holding the previous version."),
    new_path: Path = typer.Argument(..., help="Directory holding the new version."),
    project_id: str = typer.Option("local", "--project-id", help="Project identifier."),
    as_json: bool = typer.Option(False, "--json", help="Print the report as JSON."),
) -> None:
    """Compare two versions of a project with the heuristic detectors.

    Exits with code 1 when the comparison is of critical severity.
    """
    _require_dir(old_path)
    _require_dir(new_path)

    new_files = collect_files(new_path)
    if not new_files:
        typer.echo(f"No files found under {new_path}", err=True)
        raise typer.Exit(code=2)

    request = RegressionRequest(
        project_id=project_id,
        new_code=new_files,
        previous_code=collect_files(old_path),
    )
    result = asyncio.run(RegressionComparator().detect(request))

    if as_json:
        typer.echo(result.model_dump_json(indent=2))
    else:
        print_regression_result(result)

    if result.severity == RegressionSeverity.CRITICAL:
        raise typer.Exit(code=1)


@app.command()
def serve(
    host: str = typer.Option("0.0.0.0", "--host", help="Bind address."),
    port: int = typer.Option(QUALITY_GATE_PORT, "--port", help="Bind port."),
) -> None:
    """Run the Quality Gate HTTP service."""
    uvicorn.run("src.gate_service.main:app", host=host, port=port)


if __name__ == "__main__":
    app()
