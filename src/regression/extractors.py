"""Source extractors used by the regression sub-detectors.

Each function is a small, language-keyed heuristic over raw text.  They
never raise on malformed input; unrecognised content simply yields
nothing.
"""

from __future__ import annotations

import re

from src.shared.utils import language_for_path

# ---------------------------------------------------------------------------
# Exported symbols
# ---------------------------------------------------------------------------

_JS_EXPORT_DECL_PATTERN: re.Pattern[str] = re.compile(
    r"\bexport\s+(?:default\s+)?(?:declare\s+)?(?:abstract\s+)?(?:async\s+)?"
    r"(?:const|let|var|function\s*\*?|class|interface|type|enum)\s+([\w$]+)"
)
_JS_EXPORT_LIST_PATTERN: re.Pattern[str] = re.compile(r"\bexport\s+(?:type\s+)?\{([^}]*)\}")
_PY_ALL_PATTERN: re.Pattern[str] = re.compile(
    r"^__all__\s*(?::[^=\n]+)?=\s*[\[(]([^\])]*)[\])]", re.MULTILINE
)
_PY_QUOTED_NAME_PATTERN: re.Pattern[str] = re.compile(r"['\"](\w+)['\"]")
_PY_PUBLIC_DEF_PATTERN: re.Pattern[str] = re.compile(
    r"^(?:async\s+def|def|class)\s+([A-Za-z]\w*)", re.MULTILINE
)
_GO_EXPORT_PATTERN: re.Pattern[str] = re.compile(
    r"^(?:func\s+(?:\([^)]*\)\s*)?|type\s+)([A-Z]\w*)", re.MULTILINE
)


def extract_exports(content: str, path: str) -> list[str]:
    """Return the public symbol names *content* exposes, in first-seen order."""
    language = language_for_path(path)
    names: list[str] = []

    if language == "python":
        all_match = _PY_ALL_PATTERN.search(content)
        if all_match:
            names = _PY_QUOTED_NAME_PATTERN.findall(all_match.group(1))
        else:
            names = _PY_PUBLIC_DEF_PATTERN.findall(content)
    elif language == "go":
        names = _GO_EXPORT_PATTERN.findall(content)
    elif language in (None, "javascript", "typescript"):
        names = _JS_EXPORT_DECL_PATTERN.findall(content)
        for match in _JS_EXPORT_LIST_PATTERN.finditer(content):
            for item in match.group(1).split(","):
                parts = item.split()
                if parts and parts[0] == "type":
                    parts = parts[1:]
                if not parts:
                    continue
                # "a as b" exports b
                names.append(parts[-1])

    return list(dict.fromkeys(names))


# ---------------------------------------------------------------------------
# Function signatures
# ---------------------------------------------------------------------------

_JS_FUNCTION_PATTERN: re.Pattern[str] = re.compile(
    r"\bfunction\s*\*?\s+([\w$]+)\s*(?:<[^>(]*>)?\s*\(([^)]*)\)"
)
_JS_ARROW_PATTERN: re.Pattern[str] = re.compile(
    r"\b(?:const|let|var)\s+([\w$]+)\s*(?::[^=\n]+)?=\s*(?:async\s+)?(?:function\s*\*?\s*)?\(([^)]*)\)"
)
_PY_BLOCK_PATTERN: re.Pattern[str] = re.compile(
    r"^(?P<indent>[ \t]*)(?:class\s+(?P<cls>\w+)|(?:async\s+)?def\s+(?P<fn>\w+)\s*\((?P<params>[^)]*)\))",
    re.MULTILINE,
)
_GO_FUNC_PATTERN: re.Pattern[str] = re.compile(
    r"^func\s+(?:\([^)]*\)\s*)?(\w+)\s*(?:\[[^\]]*\])?\s*\(([^)]*)\)", re.MULTILINE
)

_PY_NON_PARAMS: frozenset[str] = frozenset({"self", "cls", "*", "/"})


def _split_params(raw: str, opening: str = "([{<", closing: str = ")]}>") -> list[str]:
    """Split a parameter list on top-level commas."""
    params: list[str] = []
    depth = 0
    current: list[str] = []
    previous = ""
    for char in raw:
        if char in opening:
            depth += 1
        elif char in closing and not (char == ">" and previous == "="):
            depth -= 1
        previous = char
        if char == "," and depth <= 0:
            params.append("".join(current).strip())
            current = []
        else:
            current.append(char)
    params.append("".join(current).strip())
    return [p for p in params if p]


def _python_signatures(content: str) -> dict[str, str]:
    """Map Python function names to their raw parameter lists.

    Methods are qualified by their enclosing classes (``Store.__init__``) so
    same-named methods of different classes do not collide.
    """
    found: dict[str, str] = {}
    classes: list[tuple[int, str]] = []
    for match in _PY_BLOCK_PATTERN.finditer(content):
        indent = len(match.group("indent").expandtabs(4))
        while classes and classes[-1][0] >= indent:
            classes.pop()
        if match.group("cls"):
            classes.append((indent, match.group("cls")))
            continue
        name = ".".join([owner for _indent, owner in classes] + [match.group("fn")])
        found.setdefault(name, match.group("params"))
    return found


def extract_signatures(content: str, path: str) -> dict[str, int]:
    """Map function names to their parameter count (first definition wins)."""
    language = language_for_path(path)
    if language == "python":
        return {
            name: len([p for p in _split_params(raw) if p.split(":")[0].strip() not in _PY_NON_PARAMS])
            for name, raw in _python_signatures(content).items()
        }
    if language == "go":
        patterns = (_GO_FUNC_PATTERN,)
    elif language in (None, "javascript", "typescript"):
        patterns = (_JS_FUNCTION_PATTERN, _JS_ARROW_PATTERN)
    else:
        return {}

    signatures: dict[str, int] = {}
    for pattern in patterns:
        for name, raw_params in pattern.findall(content):
            signatures.setdefault(name, len(_split_params(raw_params)))
    return signatures


# ---------------------------------------------------------------------------
# Schema fields
# ---------------------------------------------------------------------------

_PRISMA_MODEL_PATTERN: re.Pattern[str] = re.compile(r"^\s*model\s+(\w+)\s*\{([^}]*)\}", re.MULTILINE)
_PRISMA_FIELD_PATTERN: re.Pattern[str] = re.compile(r"^\s*(\w+)\s+(\w+)(\[\])?(\?)?(.*)$")

_SQL_CREATE_TABLE_PATTERN: re.Pattern[str] = re.compile(
    r"\bCREATE\s+(?:TEMP(?:ORARY)?\s+)?TABLE\s+(?:IF\s+NOT\s+EXISTS\s+)?[\"`\[]?([\w.]+)[\"`\]]?\s*\(",
    re.IGNORECASE,
)
_SQL_CONSTRAINT_PATTERN: re.Pattern[str] = re.compile(
    r"^(?:PRIMARY\s+KEY|FOREIGN\s+KEY|CONSTRAINT|UNIQUE|CHECK|INDEX|KEY)\b", re.IGNORECASE
)
_SQL_NOT_NULL_PATTERN: re.Pattern[str] = re.compile(r"\bNOT\s+NULL\b|\bPRIMARY\s+KEY\b", re.IGNORECASE)
_SQL_DEFAULT_PATTERN: re.Pattern[str] = re.compile(r"\bDEFAULT\b", re.IGNORECASE)


def extract_prisma_fields(content: str) -> dict[str, bool]:
    """Map ``Model.field`` to whether the field is optional."""
    fields: dict[str, bool] = {}
    for model, body in _PRISMA_MODEL_PATTERN.findall(content):
        for line in body.splitlines():
            stripped = line.strip()
            if not stripped or stripped.startswith(("//", "@@")):
                continue
            match = _PRISMA_FIELD_PATTERN.match(stripped)
            if match is None:
                continue
            name, _type, is_list, is_optional, rest = match.groups()
            optional = bool(is_list or is_optional or "@default(" in rest)
            fields[f"{model}.{name}"] = optional
    return fields


def _balanced_body(content: str, open_index: int) -> str:
    """Return the text between the paren at *open_index* and its match."""
    depth = 0
    for idx in range(open_index, len(content)):
        if content[idx] == "(":
            depth += 1
        elif content[idx] == ")":
            depth -= 1
            if depth == 0:
                return content[open_index + 1: idx]
    return content[open_index + 1:]


def extract_sql_columns(content: str) -> dict[str, bool]:
    """Map ``table.column`` declared by ``CREATE TABLE`` to whether it is optional.

    A column is optional unless it is ``NOT NULL`` (or a primary key)
    without a ``DEFAULT``.
    """
    columns: dict[str, bool] = {}
    for match in _SQL_CREATE_TABLE_PATTERN.finditer(content):
        table = match.group(1)
        body = _balanced_body(content, match.end() - 1)
        for entry in _split_params(body, opening="(", closing=")"):
            entry = " ".join(entry.split())
            if not entry or _SQL_CONSTRAINT_PATTERN.match(entry):
                continue
            column = entry.split()[0].strip("\"`[]")
            required = bool(_SQL_NOT_NULL_PATTERN.search(entry)) and not _SQL_DEFAULT_PATTERN.search(entry)
            columns[f"{table}.{column}"] = not required
    return columns


# ---------------------------------------------------------------------------
# Destructive SQL
# ---------------------------------------------------------------------------

_DESTRUCTIVE_SQL_PATTERNS: dict[str, re.Pattern[str]] = {
    "DROP TABLE": re.compile(r"\bDROP\s+TABLE\b", re.IGNORECASE),
    "DROP COLUMN": re.compile(r"\bDROP\s+COLUMN\b", re.IGNORECASE),
    "TRUNCATE": re.compile(r"\bTRUNCATE\b", re.IGNORECASE),
    # DELETE FROM with no WHERE before the end of the statement.
    "DELETE FROM": re.compile(r"\bDELETE\s+FROM\s+[\w\"`.\[\]]+(?![^;]*\bWHERE\b)", re.IGNORECASE),
}


def count_destructive_statements(content: str) -> dict[str, int]:
    return {kind: len(p.findall(content)) for kind, p in _DESTRUCTIVE_SQL_PATTERNS.items()}


# ---------------------------------------------------------------------------
# Behavioral tokens
# ---------------------------------------------------------------------------

_ERROR_HANDLING_PATTERN: re.Pattern[str] = re.compile(
    r"\btry\s*[{:]|(?<!\.)\bcatch\s*\(|\.catch\s*\(|\bexcept\b|\bif\b[^\n{:]*\berr(?:or)?\b",
    re.IGNORECASE,
)
_VALIDATION_PATTERN: re.Pattern[str] = re.compile(
    r"\b(?:validat|assert|check)\w*|\btypeof\b|\binstanceof\b|\bisinstance\s*\(",
    re.IGNORECASE,
)


def count_error_handling(content: str) -> int:
    return len(_ERROR_HANDLING_PATTERN.findall(content))


def count_validation(content: str) -> int:
    return len(_VALIDATION_PATTERN.findall(content))
