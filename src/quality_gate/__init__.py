"""Quality gate engine.

Runs registered heuristic checks over a submitted file set, scores the
results, and maps them onto an enforcement decision for merge gating.
"""

from src.quality_gate.builtin_checks import build_default_registry
from src.quality_gate.enforcement import EnforcementDecision, EnforcementPolicy
from src.quality_gate.gate_engine import GateEvaluator
from src.quality_gate.gate_service import QualityGateService
from src.quality_gate.registry import Check, CheckFinding, CheckRegistry
from src.quality_gate.scoring import ScoringEngine

__all__ = [
    "Check",
    "CheckFinding",
    "CheckRegistry",
    "EnforcementDecision",
    "EnforcementPolicy",
    "GateEvaluator",
    "QualityGateService",
    "ScoringEngine",
    "build_default_registry",
]
