"""Performance check: queries issued from inside loops (possible N+1)."""

from __future__ import annotations

from src.quality_gate.patterns import find_loop_wrapped_queries
from src.quality_gate.registry import CheckFinding
from src.shared.models.common import FileRecord
from src.shared.models.quality import ResultStatus
from src.shared.utils import language_for_path


def check_n_plus_one(files: list[FileRecord]) -> list[CheckFinding]:
    findings: list[CheckFinding] = []
    for file in files:
        if not file.content or language_for_path(file.path, file.language) is None:
            continue
        lines = find_loop_wrapped_queries(file.content)
        if lines:
            findings.append(
                CheckFinding(
                    status=ResultStatus.WARNING,
                    message=f"Potential N+1 query pattern in {file.path}",
                    file=file.path,
                    line=lines[0],
                    details={"lines": lines},
                    suggestions=[
                        "Consider batch queries or eager loading",
                        "Use ORM features like include or prefetch",
                    ],
                )
            )
        else:
            findings.append(
                CheckFinding(
                    status=ResultStatus.PASSED,
                    message=f"No N+1 patterns detected in {file.path}",
                    file=file.path,
                )
            )
    return findings
