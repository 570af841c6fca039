"""Code-shape checks: syntax tokens, complexity, documentation, type safety.

Each check is a pure function over the submitted file set and returns one
finding per applicable file.  All regex patterns are compiled at module
level.
"""

from __future__ import annotations

import math
import re

from src.quality_gate.patterns import has_documentation, is_test_file
from src.quality_gate.registry import CheckFinding
from src.shared.constants import COMPLEXITY_THRESHOLD, DOCUMENTATION_MIN_LINES
from src.shared.models.common import FileRecord
from src.shared.models.quality import ResultStatus
from src.shared.utils import language_for_path

# ---------------------------------------------------------------------------
# Syntax-token presence per language
# ---------------------------------------------------------------------------

_JS_SYNTAX: tuple[re.Pattern[str], ...] = (
    re.compile(r"\bfunction\s*\*?\s*\w*\s*\([^)]*\)\s*\{"),
    re.compile(r"\b(?:const|let|var)\s+[\w{\[]"),
    re.compile(r"\bclass\s+\w+"),
    re.compile(r"^\s*(?:import|export)\b", re.MULTILINE),
    re.compile(r"\brequire\s*\(\s*['\"]"),
    re.compile(r"=>"),
)

_SYNTAX_PATTERNS: dict[str, tuple[re.Pattern[str], ...]] = {
    "python": (
        re.compile(r"^\s*(?:async\s+)?def\s+\w+\s*\(", re.MULTILINE),
        re.compile(r"^\s*class\s+\w+", re.MULTILINE),
        re.compile(r"^\s*(?:import\s+\w|from\s+[\w.]+\s+import\b)", re.MULTILINE),
        re.compile(r"^[A-Za-z_]\w*\s*(?::[^=\n]+)?=[^=]", re.MULTILINE),
    ),
    "javascript": _JS_SYNTAX,
    "typescript": _JS_SYNTAX
    + (
        re.compile(r"\binterface\s+\w+"),
        re.compile(r"\btype\s+\w+\s*(?:<[^>]*>)?\s*="),
    ),
    "go": (re.compile(r"^\s*package\s+\w+", re.MULTILINE),),
    "java": (re.compile(r"\b(?:class|interface|enum|record)\s+\w+"),),
}


def check_syntax(files: list[FileRecord]) -> list[CheckFinding]:
    """Flag code files that contain none of their language's basic constructs."""
    findings: list[CheckFinding] = []
    for file in files:
        if not file.content:
            continue
        patterns = _SYNTAX_PATTERNS.get(language_for_path(file.path, file.language) or "")
        if not patterns:
            continue
        if any(p.search(file.content) for p in patterns):
            findings.append(
                CheckFinding(
                    status=ResultStatus.PASSED,
                    message=f"File {file.path} has valid syntax",
                    file=file.path,
                )
            )
        else:
            findings.append(
                CheckFinding(
                    status=ResultStatus.FAILED,
                    message=f"Potential syntax issue in {file.path}",
                    file=file.path,
                    suggestions=["Check the file compiles or parses in its toolchain"],
                )
            )
    return findings


# ---------------------------------------------------------------------------
# Complexity approximation
# ---------------------------------------------------------------------------

_CONTROL_FLOW_PATTERN: re.Pattern[str] = re.compile(
    r"\b(?:if|elif|else|for|while|switch|case|catch|except)\b"
)


def complexity_score(content: str) -> int:
    """Approximate complexity as the control-flow keyword count halved, rounded up."""
    return math.ceil(len(_CONTROL_FLOW_PATTERN.findall(content)) / 2)


def check_complexity(files: list[FileRecord]) -> list[CheckFinding]:
    findings: list[CheckFinding] = []
    for file in files:
        if not file.content or is_test_file(file.path, file.type):
            continue
        if language_for_path(file.path, file.language) is None:
            continue
        complexity = complexity_score(file.content)
        too_complex = complexity > COMPLEXITY_THRESHOLD
        findings.append(
            CheckFinding(
                status=ResultStatus.WARNING if too_complex else ResultStatus.PASSED,
                message=f"File {file.path} has complexity score of {complexity}",
                file=file.path,
                details={"complexity": complexity, "threshold": COMPLEXITY_THRESHOLD},
                suggestions=[
                    "Consider breaking this file into smaller functions",
                    "Extract complex branching into helpers",
                ]
                if too_complex
                else None,
            )
        )
    return findings


# ---------------------------------------------------------------------------
# Documentation presence
# ---------------------------------------------------------------------------


def check_documentation(files: list[FileRecord]) -> list[CheckFinding]:
    findings: list[CheckFinding] = []
    for file in files:
        if not file.content or is_test_file(file.path, file.type):
            continue
        if language_for_path(file.path, file.language) is None:
            continue
        lines_of_code = len(file.content.split("\n"))
        if lines_of_code > DOCUMENTATION_MIN_LINES and not has_documentation(file.content):
            findings.append(
                CheckFinding(
                    status=ResultStatus.WARNING,
                    message=f"File {file.path} lacks documentation",
                    file=file.path,
                    details={"lines_of_code": lines_of_code},
                    suggestions=[
                        "Add file-level documentation",
                        "Document public functions and classes",
                    ],
                )
            )
        else:
            findings.append(
                CheckFinding(
                    status=ResultStatus.PASSED,
                    message=f"File {file.path} has adequate documentation",
                    file=file.path,
                )
            )
    return findings


# ---------------------------------------------------------------------------
# Type-safety escape hatches
# ---------------------------------------------------------------------------

_TS_ESCAPE_PATTERN: re.Pattern[str] = re.compile(
    r"(?:(?::|\bas|<)\s*any\b)|(?:@ts-(?:ignore|nocheck)\b)"
)
_TS_ANNOTATION_PATTERN: re.Pattern[str] = re.compile(
    r":\s*(?:string|number|boolean|void|null|undefined|unknown|never|Record|Array|Promise|[A-Z]\w*)\b"
    r"|\binterface\s+\w+|\btype\s+\w+\s*="
)
_PY_ESCAPE_PATTERN: re.Pattern[str] = re.compile(
    r"(?:(?::|->)\s*(?:typing\.)?Any\b)|(?:#\s*type:\s*ignore\b)"
)


def check_type_safety(files: list[FileRecord]) -> list[CheckFinding]:
    findings: list[CheckFinding] = []
    for file in files:
        if not file.content:
            continue
        language = language_for_path(file.path, file.language)
        if language == "typescript":
            pattern = _TS_ESCAPE_PATTERN
        elif language == "python":
            pattern = _PY_ESCAPE_PATTERN
        else:
            continue

        escape_count = len(pattern.findall(file.content))
        if escape_count:
            findings.append(
                CheckFinding(
                    status=ResultStatus.WARNING,
                    message=f"{file.path} uses type escape hatches {escape_count} time(s)",
                    file=file.path,
                    details={"escape_hatches": escape_count},
                    suggestions=[
                        "Replace any/Any with specific types",
                        "Use unknown or a narrowed type instead of disabling the checker",
                    ],
                )
            )
        elif language == "typescript" and not _TS_ANNOTATION_PATTERN.search(file.content):
            findings.append(
                CheckFinding(
                    status=ResultStatus.WARNING,
                    message=f"{file.path} may benefit from more type annotations",
                    file=file.path,
                )
            )
        else:
            findings.append(
                CheckFinding(
                    status=ResultStatus.PASSED,
                    message=f"{file.path} has good type annotations",
                    file=file.path,
                )
            )
    return findings
