"""The built-in check list, assembled into a frozen registry."""

from __future__ import annotations

from src.quality_gate.code_checks import (
    check_complexity,
    check_documentation,
    check_syntax,
    check_type_safety,
)
from src.quality_gate.coverage_checks import check_test_coverage
from src.quality_gate.performance_checks import check_n_plus_one
from src.quality_gate.reference_checks import check_api_references, check_imports
from src.quality_gate.registry import Check, CheckRegistry
from src.quality_gate.security_checks import check_injection, check_secrets
from src.shared.models.quality import CheckType, Severity


def builtin_checks() -> list[Check]:
    """Return the built-in checks in registration order."""
    return [
        Check(
            id="lint-syntax",
            name="Syntax Validation",
            category="Code Style",
            check_type=CheckType.LINT,
            severity=Severity.CRITICAL,
            blocking=True,
            description="Check code files contain recognisable language constructs",
            run=check_syntax,
        ),
        Check(
            id="lint-complexity",
            name="Complexity Check",
            category="Maintainability",
            check_type=CheckType.COMPLEXITY,
            severity=Severity.MEDIUM,
            description="Detect overly complex files",
            run=check_complexity,
        ),
        Check(
            id="security-secrets",
            name="Secret Detection",
            category="Security",
            check_type=CheckType.SECURITY,
            severity=Severity.CRITICAL,
            blocking=True,
            description="Detect hardcoded secrets and API keys",
            run=check_secrets,
        ),
        Check(
            id="security-injection",
            name="Injection Prevention",
            category="Security",
            check_type=CheckType.SECURITY,
            severity=Severity.HIGH,
            description="Detect potential injection vulnerabilities",
            run=check_injection,
        ),
        Check(
            id="performance-queries",
            name="N+1 Query Detection",
            category="Performance",
            check_type=CheckType.PERFORMANCE,
            severity=Severity.MEDIUM,
            description="Detect queries issued from inside loops",
            run=check_n_plus_one,
        ),
        Check(
            id="test-coverage",
            name="Test Coverage",
            category="Testing",
            check_type=CheckType.TEST,
            severity=Severity.HIGH,
            description="Ensure there are enough test files for the source files",
            run=check_test_coverage,
        ),
        Check(
            id="docs-comments",
            name="Documentation Comments",
            category="Documentation",
            check_type=CheckType.DOCS,
            severity=Severity.LOW,
            description="Check longer files carry documentation",
            run=check_documentation,
        ),
        Check(
            id="types-basic",
            name="Type Safety",
            category="Type Safety",
            check_type=CheckType.TYPE_CHECK,
            severity=Severity.HIGH,
            description="Count type-checker escape hatches",
            run=check_type_safety,
        ),
        Check(
            id="deps-imports",
            name="Import Existence",
            category="Dependencies",
            check_type=CheckType.DEPENDENCY,
            severity=Severity.MEDIUM,
            description="Detect imports of unknown packages",
            run=check_imports,
        ),
        Check(
            id="api-references",
            name="API Reference Check",
            category="Dependencies",
            check_type=CheckType.DEPENDENCY,
            severity=Severity.MEDIUM,
            description="Detect calls to methods a known library does not provide",
            run=check_api_references,
        ),
    ]


def build_default_registry() -> CheckRegistry:
    """Build a fresh, frozen registry of the built-in checks."""
    return CheckRegistry.from_checks(builtin_checks())
