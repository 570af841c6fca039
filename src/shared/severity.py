"""Severity weight table shared by gate scoring and regression scoring."""
from __future__ import annotations

from typing import Iterable

SEVERITY_WEIGHTS: dict[str, int] = {
    "critical": 50,
    "high": 25,
    "medium": 10,
    "low": 5,
}

SEVERITY_ORDER: tuple[str, ...] = ("critical", "high", "medium", "low")

MAX_SCORE: int = 100


def severity_weight(severity: str) -> int:
    """Return the weight for *severity*; unknown severities weigh nothing."""
    return SEVERITY_WEIGHTS.get(severity, 0)


def weighted_score(severities: Iterable[str]) -> int:
    """Return ``100 - sum(weights)`` clamped to ``[0, 100]``."""
    penalty = sum(severity_weight(s) for s in severities)
    return max(0, min(MAX_SCORE, MAX_SCORE - penalty))
