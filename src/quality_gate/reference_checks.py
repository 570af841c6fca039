"""Reference checks: unknown imports and calls to members a framework lacks.

Both checks target code written by generators that sometimes invent
packages or API methods.  They resolve names against the allowlists in
:mod:`src.quality_gate.known_apis`, the standard library, modules present
in the submitted file set, and any dependency manifests submitted with it.
"""

from __future__ import annotations

import json
import logging
import re
import sys
import tomllib
from pathlib import PurePosixPath

from src.quality_gate.known_apis import (
    JS_GLOBAL_MEMBERS,
    JS_MODULE_MEMBERS,
    KNOWN_NPM_PACKAGES,
    KNOWN_PYTHON_PACKAGES,
    NODE_BUILTIN_MODULES,
    PYTHON_DISTRIBUTION_ALIASES,
    PYTHON_MODULE_MEMBERS,
)
from src.quality_gate.registry import CheckFinding
from src.shared.models.common import FileRecord
from src.shared.models.quality import ResultStatus
from src.shared.utils import language_for_path

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Import extraction
# ---------------------------------------------------------------------------

_PY_IMPORT_PATTERN: re.Pattern[str] = re.compile(
    r"^[ \t]*import[ \t]+([\w.]+(?:[ \t]+as[ \t]+\w+)?(?:[ \t]*,[ \t]*[\w.]+(?:[ \t]+as[ \t]+\w+)?)*)",
    re.MULTILINE,
)
_PY_FROM_IMPORT_PATTERN: re.Pattern[str] = re.compile(
    r"^[ \t]*from[ \t]+(\.*[\w.]*)[ \t]+import\b", re.MULTILINE
)
_JS_IMPORT_PATTERN: re.Pattern[str] = re.compile(
    r"""\b(?:import|export)\s+(?:type\s+)?(?:[\w*{}\s,$]+?\s+from\s+)?['"]([^'"\n]+)['"]"""
)
_JS_DYNAMIC_IMPORT_PATTERN: re.Pattern[str] = re.compile(
    r"""\b(?:require|import)\s*\(\s*['"]([^'"\n]+)['"]\s*\)"""
)
_JS_LOCAL_PREFIXES: tuple[str, ...] = (".", "/", "@/", "~/", "#")


def python_imports(content: str) -> list[tuple[str, str]]:
    """Return ``(module, bound_name)`` pairs for Python import statements.

    Relative ``from`` imports are returned with a leading dot and no
    bound name.
    """
    found: list[tuple[str, str]] = []
    for match in _PY_IMPORT_PATTERN.finditer(content):
        for part in match.group(1).split(","):
            pieces = part.split()
            module = pieces[0]
            alias = pieces[2] if len(pieces) == 3 else module.split(".")[0]
            found.append((module, alias))
    for match in _PY_FROM_IMPORT_PATTERN.finditer(content):
        found.append((match.group(1), ""))
    return found


def js_imports(content: str) -> list[str]:
    specifiers = _JS_IMPORT_PATTERN.findall(content)
    specifiers.extend(_JS_DYNAMIC_IMPORT_PATTERN.findall(content))
    return specifiers


def _js_package_name(specifier: str) -> str:
    specifier = specifier.removeprefix("node:")
    parts = specifier.split("/")
    if specifier.startswith("@") and len(parts) > 1:
        return "/".join(parts[:2])
    return parts[0]


# ---------------------------------------------------------------------------
# Name resolution
# ---------------------------------------------------------------------------


def _normalize(name: str) -> str:
    return name.lower().replace("-", "_")


def _local_module_names(files: list[FileRecord]) -> set[str]:
    names: set[str] = set()
    for file in files:
        path = PurePosixPath(file.path)
        names.update(path.parts[:-1])
        names.add(path.stem)
        if path.stem == "index" or path.stem == "__init__":
            names.update(path.parent.parts[-1:])
    return names


def _manifest_dependencies(files: list[FileRecord]) -> set[str]:
    """Collect dependency names declared by manifests in the file set."""
    deps: set[str] = set()
    for file in files:
        name = PurePosixPath(file.path).name
        if not file.content:
            continue
        if name == "package.json":
            try:
                manifest = json.loads(file.content)
            except ValueError as exc:
                logger.warning("Could not parse %s: %s", file.path, exc)
                continue
            if not isinstance(manifest, dict):
                continue
            for key in ("dependencies", "devDependencies", "peerDependencies", "optionalDependencies"):
                section = manifest.get(key)
                if isinstance(section, dict):
                    deps.update(section)
        elif name.startswith("requirements") and name.endswith(".txt"):
            for line in file.content.splitlines():
                match = re.match(r"\s*([A-Za-z0-9][A-Za-z0-9_.\-]*)", line)
                if match and not line.lstrip().startswith(("#", "-")):
                    deps.add(match.group(1))
        elif name == "pyproject.toml":
            deps.update(_pyproject_dependencies(file))
    return deps


def _pyproject_dependencies(file: FileRecord) -> set[str]:
    try:
        data = tomllib.loads(file.content)
    except tomllib.TOMLDecodeError as exc:
        logger.warning("Could not parse %s: %s", file.path, exc)
        return set()

    requirements: list[str] = []
    project = data.get("project", {})
    requirements.extend(project.get("dependencies", []))
    for group in project.get("optional-dependencies", {}).values():
        requirements.extend(group)
    poetry = data.get("tool", {}).get("poetry", {})
    requirements.extend(poetry.get("dependencies", {}))

    names: set[str] = set()
    for requirement in requirements:
        match = re.match(r"\s*([A-Za-z0-9][A-Za-z0-9_.\-]*)", str(requirement))
        if match:
            names.add(match.group(1))
    return names


def _known_python_names(manifest: set[str]) -> set[str]:
    names = {_normalize(n) for n in KNOWN_PYTHON_PACKAGES}
    names.update(_normalize(n) for n in sys.stdlib_module_names)
    for dep in manifest:
        names.add(_normalize(dep))
        alias = PYTHON_DISTRIBUTION_ALIASES.get(dep.lower())
        if alias:
            names.add(_normalize(alias))
    return names


# ---------------------------------------------------------------------------
# deps-imports
# ---------------------------------------------------------------------------


def check_imports(files: list[FileRecord]) -> list[CheckFinding]:
    """Flag imports that resolve to no known, local or declared package."""
    local = _local_module_names(files)
    manifest = _manifest_dependencies(files)
    known_python = _known_python_names(manifest)
    known_js = KNOWN_NPM_PACKAGES | NODE_BUILTIN_MODULES | manifest

    findings: list[CheckFinding] = []
    for file in files:
        if not file.content:
            continue
        language = language_for_path(file.path, file.language)
        unknown: list[str] = []
        if language == "python":
            imports = python_imports(file.content)
            for module, _alias in imports:
                if module.startswith("."):
                    continue
                top = module.split(".")[0]
                if top in local or _normalize(top) in known_python:
                    continue
                unknown.append(top)
        elif language in ("javascript", "typescript"):
            imports = js_imports(file.content)
            for specifier in imports:
                if specifier.startswith(_JS_LOCAL_PREFIXES):
                    continue
                package = _js_package_name(specifier)
                if package in known_js or package.split("/")[0] in local:
                    continue
                unknown.append(package)
        else:
            continue

        if not imports:
            continue
        unknown = sorted(set(unknown))
        if unknown:
            findings.append(
                CheckFinding(
                    status=ResultStatus.WARNING,
                    message=f"Unrecognised imports in {file.path}: {', '.join(unknown)}",
                    file=file.path,
                    details={"unknown_imports": unknown},
                    suggestions=[
                        "Check the package name is spelled correctly",
                        "Declare the dependency in the project manifest",
                    ],
                )
            )
        else:
            findings.append(
                CheckFinding(
                    status=ResultStatus.PASSED,
                    message=f"All imports in {file.path} resolve",
                    file=file.path,
                )
            )
    return findings


# ---------------------------------------------------------------------------
# api-references
# ---------------------------------------------------------------------------

_JS_DEFAULT_BINDING_PATTERN: re.Pattern[str] = re.compile(
    r"""\bimport\s+(?:\*\s+as\s+)?([\w$]+)\s*(?:,\s*\{[^}]*\})?\s+from\s+['"]([^'"\n]+)['"]"""
)
_JS_REQUIRE_BINDING_PATTERN: re.Pattern[str] = re.compile(
    r"""\b(?:const|let|var)\s+([\w$]+)\s*=\s*require\(\s*['"]([^'"\n]+)['"]\s*\)"""
)


def _bound_modules(content: str, language: str) -> dict[str, frozenset[str]]:
    """Map local names to the member table of the module they are bound to."""
    bound: dict[str, frozenset[str]] = {}
    if language == "python":
        for module, alias in python_imports(content):
            if alias and module in PYTHON_MODULE_MEMBERS:
                bound[alias] = PYTHON_MODULE_MEMBERS[module]
        return bound

    bound.update(JS_GLOBAL_MEMBERS)
    bindings = _JS_DEFAULT_BINDING_PATTERN.findall(content)
    bindings += _JS_REQUIRE_BINDING_PATTERN.findall(content)
    for name, specifier in bindings:
        module = specifier.removeprefix("node:")
        if module in JS_MODULE_MEMBERS:
            bound[name] = JS_MODULE_MEMBERS[module]
    return bound


def check_api_references(files: list[FileRecord]) -> list[CheckFinding]:
    """Flag ``module.member(`` calls whose member the module does not provide."""
    findings: list[CheckFinding] = []
    for file in files:
        if not file.content:
            continue
        language = language_for_path(file.path, file.language)
        if language not in ("python", "javascript", "typescript"):
            continue

        known_calls = 0
        unknown: list[str] = []
        for name, members in _bound_modules(file.content, language).items():
            call = re.compile(rf"(?<![\w.$]){re.escape(name)}\.(\w+)\s*\(")
            for member in call.findall(file.content):
                if member in members:
                    known_calls += 1
                else:
                    unknown.append(f"{name}.{member}")

        unknown = sorted(set(unknown))
        if unknown:
            findings.append(
                CheckFinding(
                    status=ResultStatus.WARNING,
                    message=f"Unknown API references in {file.path}: {', '.join(unknown)}",
                    file=file.path,
                    details={"unknown_references": unknown},
                    suggestions=["Check the method exists in the library's documentation"],
                )
            )
        elif known_calls:
            findings.append(
                CheckFinding(
                    status=ResultStatus.PASSED,
                    message=f"API references in {file.path} resolve",
                    file=file.path,
                )
            )
    return findings
