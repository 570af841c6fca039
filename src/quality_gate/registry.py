"""Check registry for the quality gate.

A :class:`Check` is a named, pure evaluation unit.  The registry keeps
checks in registration order and becomes read-only once frozen;
reconfiguration produces a new registry rather than mutating a shared one.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import Any, Callable, Iterable, Iterator

from src.shared.errors import CheckNotFoundError
from src.shared.models.common import FileRecord
from src.shared.models.quality import (
    CheckDescriptor,
    CheckType,
    QualityResult,
    ResultLocation,
    ResultStatus,
    Severity,
)

logger = logging.getLogger(__name__)


@dataclass
class CheckFinding:
    """One outcome produced by a check function, before it is stamped."""

    status: ResultStatus
    message: str
    file: str | None = None
    line: int | None = None
    details: dict[str, Any] | None = None
    suggestions: list[str] | None = None


CheckFunction = Callable[[list[FileRecord]], list[CheckFinding]]


@dataclass(frozen=True)
class Check:
    """A registered quality check."""

    id: str
    name: str
    category: str
    check_type: CheckType
    severity: Severity
    run: CheckFunction
    blocking: bool = False
    description: str = ""
    enabled: bool = True

    def evaluate(self, files: list[FileRecord]) -> list[QualityResult]:
        """Run the check and convert its findings into results."""
        return [self._to_result(finding) for finding in self.run(files)]

    def _to_result(self, finding: CheckFinding) -> QualityResult:
        location = None
        if finding.file:
            location = ResultLocation(file=finding.file, line=finding.line)
        return QualityResult(
            check_id=self.id,
            name=self.name,
            status=finding.status,
            message=finding.message,
            location=location,
            details=finding.details,
            suggestions=finding.suggestions,
        )

    def describe(self) -> CheckDescriptor:
        return CheckDescriptor(
            id=self.id,
            name=self.name,
            category=self.category,
            type=self.check_type,
            severity=self.severity,
            blocking=self.blocking,
            enabled=self.enabled,
            description=self.description,
        )


@dataclass
class CheckRegistry:
    """Ordered collection of checks.

    ``register`` appends; once :meth:`freeze` is called the registry is
    read-only and safe to share between evaluators and threads.
    """

    _checks: dict[str, Check] = field(default_factory=dict)
    _frozen: bool = False

    @classmethod
    def from_checks(cls, checks: Iterable[Check]) -> CheckRegistry:
        registry = cls()
        for check in checks:
            registry.register(check)
        return registry.freeze()

    def register(self, check: Check) -> None:
        """Append *check* to the registry.

        Raises:
            RuntimeError: If the registry is frozen.
            ValueError: If a check with the same id is already registered.
        """
        if self._frozen:
            raise RuntimeError("Cannot register checks on a frozen registry")
        if check.id in self._checks:
            raise ValueError(f"Duplicate check id: {check.id}")
        self._checks[check.id] = check

    def freeze(self) -> CheckRegistry:
        self._frozen = True
        return self

    @property
    def frozen(self) -> bool:
        return self._frozen

    def get(self, check_id: str) -> Check:
        try:
            return self._checks[check_id]
        except KeyError:
            raise CheckNotFoundError(f"Unknown check: {check_id}") from None

    def checks(self) -> list[Check]:
        return list(self._checks.values())

    def enabled_checks(self) -> list[Check]:
        return [c for c in self._checks.values() if c.enabled]

    def descriptors(self) -> list[CheckDescriptor]:
        return [c.describe() for c in self._checks.values()]

    def configure(
        self,
        disabled: Iterable[str] = (),
        blocking: dict[str, bool] | None = None,
        severity: dict[str, Severity | str] | None = None,
    ) -> CheckRegistry:
        """Return a new frozen registry with the given overrides applied.

        Unknown check ids are logged and ignored.

        Raises:
            ValueError: If a severity override is not a known severity.
        """
        disabled = set(disabled)
        blocking = blocking or {}
        severity = severity or {}

        for check_id in disabled | set(blocking) | set(severity):
            if check_id not in self._checks:
                logger.warning("Ignoring override for unknown check '%s'", check_id)

        configured = CheckRegistry()
        for check in self._checks.values():
            changes: dict[str, Any] = {}
            if check.id in disabled:
                changes["enabled"] = False
            if check.id in blocking:
                changes["blocking"] = bool(blocking[check.id])
            if check.id in severity:
                try:
                    changes["severity"] = Severity(severity[check.id])
                except ValueError as exc:
                    raise ValueError(
                        f"Unknown severity '{severity[check.id]}' for check '{check.id}'"
                    ) from exc
            configured.register(replace(check, **changes) if changes else check)
        return configured.freeze()

    def __len__(self) -> int:
        return len(self._checks)

    def __contains__(self, check_id: object) -> bool:
        return check_id in self._checks

    def __iter__(self) -> Iterator[Check]:
        return iter(self._checks.values())
