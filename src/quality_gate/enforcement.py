"""Enforcement policy state machine using the ``transitions`` library.

An evaluation starts in ``evaluating`` and leaves it through a single
``decide`` trigger.  The conditional transitions are tried in priority
order; the first one whose guard holds wins:

    1. blocking check failed during a merge attempt -> ``blocked``
    2. any check failed                              -> ``requires_review``
    3. any warning                                   -> ``warn_only``
    4. otherwise                                     -> ``clean``
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from transitions import Machine

from src.shared.models.quality import EnforcementAction, GateRunStatus, GateSummary

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# States
# ---------------------------------------------------------------------------
STATES: list[str] = ["evaluating", "blocked", "requires_review", "warn_only", "clean"]

# ---------------------------------------------------------------------------
# Transitions -- same trigger, ordered by priority
# ---------------------------------------------------------------------------
TRANSITIONS: list[dict[str, Any]] = [
    {
        "trigger": "decide",
        "source": "evaluating",
        "dest": "blocked",
        "conditions": ["merge_blocked"],
    },
    {
        "trigger": "decide",
        "source": "evaluating",
        "dest": "requires_review",
        "conditions": ["any_failed"],
    },
    {
        "trigger": "decide",
        "source": "evaluating",
        "dest": "warn_only",
        "conditions": ["any_warnings"],
    },
    {
        "trigger": "decide",
        "source": "evaluating",
        "dest": "clean",
    },
]

ENFORCEMENT_ACTIONS: dict[str, EnforcementAction | None] = {
    "blocked": EnforcementAction.BLOCK_MERGE,
    "requires_review": EnforcementAction.REQUIRE_REVIEW,
    "warn_only": EnforcementAction.WARN_ONLY,
    "clean": None,
}

RUN_STATUSES: dict[str, GateRunStatus] = {
    "blocked": GateRunStatus.FAILED,
    "requires_review": GateRunStatus.FAILED,
    "warn_only": GateRunStatus.WARNING,
    "clean": GateRunStatus.PASSED,
}


class _Evaluation:
    """Model object driven by the enforcement machine."""

    state: str

    def __init__(self, summary: GateSummary) -> None:
        self._summary = summary

    def merge_blocked(self) -> bool:
        return bool(self._summary.blocked_by)

    def any_failed(self) -> bool:
        return self._summary.failed > 0

    def any_warnings(self) -> bool:
        return self._summary.warnings > 0


@dataclass(frozen=True)
class EnforcementDecision:
    """Terminal state of the enforcement machine and what it implies."""

    state: str
    has_failures: bool

    @property
    def is_blocked(self) -> bool:
        return self.state == "blocked"

    @property
    def can_proceed(self) -> bool:
        return not self.is_blocked and not self.has_failures

    @property
    def enforcement_action(self) -> EnforcementAction | None:
        return ENFORCEMENT_ACTIONS[self.state]

    @property
    def run_status(self) -> GateRunStatus:
        return RUN_STATUSES[self.state]


def create_enforcement_machine(model: Any) -> Machine:
    """Create a ``Machine`` bound to *model* in the ``evaluating`` state.

    The model must implement the guard methods referenced in
    ``TRANSITIONS`` (``merge_blocked``, ``any_failed``, ``any_warnings``).
    """
    return Machine(
        model=model,
        states=STATES,
        transitions=TRANSITIONS,
        initial="evaluating",
        auto_transitions=False,
    )


class EnforcementPolicy:
    """Maps a gate summary onto an enforcement decision."""

    def decide(self, summary: GateSummary) -> EnforcementDecision:
        evaluation = _Evaluation(summary)
        create_enforcement_machine(evaluation)
        evaluation.decide()

        decision = EnforcementDecision(state=evaluation.state, has_failures=summary.failed > 0)
        logger.debug(
            "Enforcement decision: state=%s action=%s can_proceed=%s",
            decision.state,
            decision.enforcement_action,
            decision.can_proceed,
        )
        return decision
