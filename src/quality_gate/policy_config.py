"""YAML gate policy: per-check overrides applied to the built-in registry."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from src.quality_gate.registry import CheckRegistry
from src.shared.models.quality import Severity

_SEVERITY_VALUES: tuple[str, ...] = tuple(s.value for s in Severity)


@dataclass
class GatePolicyConfig:
    """Overrides read from a gate policy file.

    Example::

        disabled_checks: [docs-comments]
        blocking:
          security-injection: true
        severity:
          lint-complexity: low
        max_workers: 4
    """

    disabled_checks: list[str] = field(default_factory=list)
    blocking: dict[str, bool] = field(default_factory=dict)
    severity: dict[str, str] = field(default_factory=dict)
    max_workers: int | None = None

    def apply(self, registry: CheckRegistry) -> CheckRegistry:
        """Return a new registry with this policy's overrides applied."""
        if not (self.disabled_checks or self.blocking or self.severity):
            return registry
        return registry.configure(
            disabled=self.disabled_checks,
            blocking=self.blocking,
            severity=self.severity,
        )


class PolicyConfigError(ValueError):
    """A gate policy file is malformed."""

    def __init__(self, path: Path, key: str | None, problem: str) -> None:
        self.path = path
        self.key = key
        location = f"{path}: '{key}'" if key else str(path)
        super().__init__(f"Invalid gate policy {location} {problem}")


def _validate(raw: Any, path: Path) -> dict[str, Any]:
    if not isinstance(raw, dict):
        raise PolicyConfigError(path, None, f"must be a mapping, got {type(raw).__name__}")

    disabled = raw.get("disabled_checks", [])
    if not isinstance(disabled, list) or not all(isinstance(c, str) for c in disabled):
        raise PolicyConfigError(path, "disabled_checks", "must be a list of check ids")

    for key in ("blocking", "severity"):
        if not isinstance(raw.get(key, {}), dict):
            raise PolicyConfigError(path, key, "must be a mapping of check id to value")

    for check_id, value in raw.get("severity", {}).items():
        if value not in _SEVERITY_VALUES:
            raise PolicyConfigError(
                path,
                f"severity.{check_id}",
                f"has unknown severity '{value}' (expected one of {', '.join(_SEVERITY_VALUES)})",
            )

    workers = raw.get("max_workers")
    if workers is not None and (isinstance(workers, bool) or not isinstance(workers, int) or workers < 1):
        raise PolicyConfigError(path, "max_workers", "must be a positive integer")
    return raw


def load_gate_policy(path: Path | str | None = None) -> GatePolicyConfig:
    """Load a gate policy from a YAML file.

    Unknown keys are silently ignored so that forward-compatible policy
    files work.

    Args:
        path: Path to the policy YAML.  If ``None`` or the file does not
              exist, returns an empty policy.

    Returns:
        Populated policy dataclass.

    Raises:
        PolicyConfigError: If the file is not a mapping or a known key
            holds a value of the wrong shape.
    """
    if not path:
        return GatePolicyConfig()

    path = Path(path)
    if not path.exists():
        return GatePolicyConfig()

    with open(path, "r", encoding="utf-8") as f:
        try:
            loaded = yaml.safe_load(f)
        except yaml.YAMLError as exc:
            raise PolicyConfigError(path, None, f"is not valid YAML: {exc}") from exc

    raw = _validate(loaded if loaded is not None else {}, path)
    valid = {f.name for f in GatePolicyConfig.__dataclass_fields__.values()}
    return GatePolicyConfig(**{k: v for k, v in raw.items() if k in valid})
