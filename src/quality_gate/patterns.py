"""Pattern library shared by the gate checks and the regression detectors.

All regex patterns are compiled at module level. Each helper is a small
named heuristic so a grammar-aware analyzer can replace one language
without touching callers.
"""

from __future__ import annotations

import re
from pathlib import PurePosixPath

# ---------------------------------------------------------------------------
# Test-file naming
# ---------------------------------------------------------------------------

_TEST_FILE_PATTERN: re.Pattern[str] = re.compile(
    r"(?:^|/)(?:"
    r"test_[^/]+\.py|[^/]+_test\.(?:py|go)|"
    r"[^/]+\.(?:test|spec)\.(?:js|jsx|ts|tsx|mjs|cjs)|"
    r"[^/]+Test\.java"
    r")$"
)
_TEST_DIR_PATTERN: re.Pattern[str] = re.compile(r"(?:^|/)(?:tests?|__tests__)/")

SOURCE_EXTENSIONS: frozenset[str] = frozenset(
    {".py", ".js", ".jsx", ".mjs", ".cjs", ".ts", ".tsx", ".go", ".java"}
)


def is_test_file(path: str, type_hint: str | None = None) -> bool:
    """Return ``True`` when *path* names a test file by convention."""
    if type_hint and type_hint.lower() == "test":
        return True
    return bool(_TEST_FILE_PATTERN.search(path) or _TEST_DIR_PATTERN.search(path))


def is_source_file(path: str, type_hint: str | None = None) -> bool:
    """Return ``True`` for code files that are not tests."""
    if PurePosixPath(path).suffix.lower() not in SOURCE_EXTENSIONS:
        return False
    return not is_test_file(path, type_hint)


# ---------------------------------------------------------------------------
# Loop-wrapped queries (possible N+1)
# ---------------------------------------------------------------------------

_LOOP_HEADER_PATTERN: re.Pattern[str] = re.compile(
    r"(?:^\s*(?:for|while)\b)|(?:\bfor\s*\()|(?:\.forEach\s*\()|(?:\.map\s*\(\s*async\b)"
)
_QUERY_CALL_PATTERN: re.Pattern[str] = re.compile(
    r"(?:\.(?:find(?:One|Unique|First|Many|ById|All)?|query|execute|fetch(?:one|all|One|All)?|"
    r"select|get_or_create|aggregate|raw)\s*\()|(?:\bawait\s+fetch\s*\()",
)

_MAX_LOOP_BODY_LINES: int = 50


def _loop_body(lines: list[str], start: int) -> list[int]:
    """Return indexes of the lines forming the body of the loop at *start*."""
    header = lines[start]
    body: list[int] = []

    if header.rstrip().endswith(":"):
        indent = len(header) - len(header.lstrip())
        for idx in range(start + 1, min(len(lines), start + 1 + _MAX_LOOP_BODY_LINES)):
            line = lines[idx]
            if not line.strip():
                continue
            if len(line) - len(line.lstrip()) <= indent:
                break
            body.append(idx)
        return body

    depth = header.count("{") - header.count("}") + header.count("(") - header.count(")")
    for idx in range(start + 1, min(len(lines), start + 1 + _MAX_LOOP_BODY_LINES)):
        if depth <= 0:
            break
        line = lines[idx]
        body.append(idx)
        depth += line.count("{") - line.count("}") + line.count("(") - line.count(")")
    return body


def find_loop_wrapped_queries(content: str) -> list[int]:
    """Return 1-based line numbers of query calls made inside a loop body."""
    lines = content.splitlines()
    hits: set[int] = set()
    for idx, line in enumerate(lines):
        header = _LOOP_HEADER_PATTERN.search(line)
        if header is None:
            continue
        if _QUERY_CALL_PATTERN.search(line, header.end()):
            hits.add(idx + 1)
        for body_idx in _loop_body(lines, idx):
            if _QUERY_CALL_PATTERN.search(lines[body_idx]):
                hits.add(body_idx + 1)
    return sorted(hits)


# ---------------------------------------------------------------------------
# Unfiltered full-scan queries
# ---------------------------------------------------------------------------

_ORM_FULL_SCAN_PATTERN: re.Pattern[str] = re.compile(
    r"(?:\.findMany\s*\(\s*\))|(?:\.find\s*\(\s*(?:\{\s*\})?\s*\))|(?:\.objects\.all\s*\(\s*\))"
)
_SQL_SELECT_STAR_PATTERN: re.Pattern[str] = re.compile(
    r"\bSELECT\s+\*\s+FROM\s+[\w\"`.]+", re.IGNORECASE
)
_SQL_STATEMENT_END_PATTERN: re.Pattern[str] = re.compile(r"[;\"'`]|$", re.MULTILINE)
_SQL_FILTER_PATTERN: re.Pattern[str] = re.compile(r"\b(?:WHERE|LIMIT|TOP)\b", re.IGNORECASE)


def count_full_scans(content: str) -> int:
    """Count unfiltered full-table-scan shaped queries in *content*."""
    count = len(_ORM_FULL_SCAN_PATTERN.findall(content))
    for match in _SQL_SELECT_STAR_PATTERN.finditer(content):
        end = _SQL_STATEMENT_END_PATTERN.search(content, match.end())
        tail = content[match.end(): end.start() if end else len(content)]
        if not _SQL_FILTER_PATTERN.search(tail):
            count += 1
    return count


# ---------------------------------------------------------------------------
# Comment helpers
# ---------------------------------------------------------------------------

_DOC_BLOCK_PATTERN: re.Pattern[str] = re.compile(r"/\*\*[\s\S]*?\*/|\"\"\"[\s\S]*?\"\"\"|'''[\s\S]*?'''")
_HEADER_COMMENT_PATTERN: re.Pattern[str] = re.compile(r"^(?:\s*\n)*\s*(?://|#|/\*)")


def has_documentation(content: str) -> bool:
    """Return ``True`` if *content* carries a doc block or a header comment."""
    return bool(_DOC_BLOCK_PATTERN.search(content) or _HEADER_COMMENT_PATTERN.match(content))


def line_of(content: str, offset: int) -> int:
    """Return the 1-based line number of character *offset* in *content*."""
    return content.count("\n", 0, offset) + 1
