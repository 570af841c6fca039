"""Security checks: hardcoded secrets and injection sinks.

All regex patterns are compiled at module level.  Matched secret values
are never copied into results; only counts and line numbers are reported.
"""

from __future__ import annotations

import re

from src.quality_gate.patterns import line_of
from src.quality_gate.registry import CheckFinding
from src.shared.models.common import FileRecord
from src.shared.models.quality import ResultStatus

# ---------------------------------------------------------------------------
# Secret-shaped literals
# ---------------------------------------------------------------------------

# Key, secret and token values must be at least 20 token characters so that
# short placeholders ("changeme", "xxx") are not reported.
_SECRET_PATTERNS: tuple[tuple[str, re.Pattern[str]], ...] = (
    (
        "api_key",
        re.compile(r"api[_-]?key['\"]?\s*[:=]\s*['\"][A-Za-z0-9_\-]{20,}['\"]", re.IGNORECASE),
    ),
    (
        "secret",
        re.compile(r"secret['\"]?\s*[:=]\s*['\"][A-Za-z0-9_\-]{20,}['\"]", re.IGNORECASE),
    ),
    (
        "password",
        re.compile(r"password['\"]?\s*[:=]\s*['\"][^'\"\n]+['\"]", re.IGNORECASE),
    ),
    (
        "token",
        re.compile(r"token['\"]?\s*[:=]\s*['\"][A-Za-z0-9_\-]{20,}['\"]", re.IGNORECASE),
    ),
    (
        "private_key",
        re.compile(
            r"(?:private[_-]?key['\"]?\s*[:=]\s*['\"]-----BEGIN)"
            r"|(?:-----BEGIN (?:RSA |EC |DSA |OPENSSH )?PRIVATE KEY-----)",
            re.IGNORECASE,
        ),
    ),
)

_MAX_REPORTED_PER_PATTERN: int = 3


def check_secrets(files: list[FileRecord]) -> list[CheckFinding]:
    """Report files containing literals shaped like credentials."""
    findings: list[CheckFinding] = []
    for file in files:
        if not file.content:
            continue

        kinds: list[str] = []
        lines: list[int] = []
        for kind, pattern in _SECRET_PATTERNS:
            for match in list(pattern.finditer(file.content))[:_MAX_REPORTED_PER_PATTERN]:
                kinds.append(kind)
                lines.append(line_of(file.content, match.start()))

        if kinds:
            findings.append(
                CheckFinding(
                    status=ResultStatus.FAILED,
                    message=f"Potential secrets detected in {file.path}",
                    file=file.path,
                    line=min(lines),
                    details={"found_secrets": len(kinds), "kinds": sorted(set(kinds)), "lines": sorted(lines)},
                    suggestions=[
                        "Use environment variables for secrets",
                        "Move secrets to a .env file excluded from version control",
                    ],
                )
            )
        else:
            findings.append(
                CheckFinding(
                    status=ResultStatus.PASSED,
                    message=f"No secrets detected in {file.path}",
                    file=file.path,
                )
            )
    return findings


# ---------------------------------------------------------------------------
# Injection sinks
# ---------------------------------------------------------------------------

_INJECTION_PATTERNS: tuple[tuple[str, re.Pattern[str]], ...] = (
    ("eval", re.compile(r"(?<![.\w])eval\s*\(")),
    ("new Function", re.compile(r"\bnew\s+Function\s*\(")),
    ("innerHTML", re.compile(r"\.innerHTML\s*=(?!=)")),
    ("dangerouslySetInnerHTML", re.compile(r"\bdangerouslySetInnerHTML\b")),
    ("document.write", re.compile(r"\bdocument\.write(?:ln)?\s*\(")),
    # Bare exec( only; RegExp.prototype.exec is a method call.
    ("exec", re.compile(r"(?<![.\w])exec\s*\(")),
)


def check_injection(files: list[FileRecord]) -> list[CheckFinding]:
    """Report files that reach dynamic-code or raw-HTML sinks."""
    findings: list[CheckFinding] = []
    for file in files:
        if not file.content:
            continue

        sinks: list[str] = []
        first_line: int | None = None
        for name, pattern in _INJECTION_PATTERNS:
            match = pattern.search(file.content)
            if match is None:
                continue
            sinks.append(name)
            line = line_of(file.content, match.start())
            first_line = line if first_line is None else min(first_line, line)

        if sinks:
            findings.append(
                CheckFinding(
                    status=ResultStatus.WARNING,
                    message=f"Potential injection vulnerabilities in {file.path}",
                    file=file.path,
                    line=first_line,
                    details={"patterns": sinks},
                    suggestions=[
                        "Avoid evaluating strings built from user input",
                        "Sanitize HTML before assigning it to the DOM",
                        "Use parameterized queries for database operations",
                    ],
                )
            )
        else:
            findings.append(
                CheckFinding(
                    status=ResultStatus.PASSED,
                    message=f"No injection issues detected in {file.path}",
                    file=file.path,
                )
            )
    return findings
