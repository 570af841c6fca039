"""Quality gate Pydantic v2 data models."""
from __future__ import annotations

import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field

from src.shared.models.common import FileRecord


class Severity(str, Enum):
    """Severity of a check or regression finding."""
    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class CheckType(str, Enum):
    """Family a check belongs to."""
    LINT = "lint"
    SECURITY = "security"
    PERFORMANCE = "performance"
    TEST = "test"
    COMPLEXITY = "complexity"
    DOCS = "docs"
    TYPE_CHECK = "type_check"
    DEPENDENCY = "dependency"


class ResultStatus(str, Enum):
    """Outcome of a check against a file or the whole set."""
    PASSED = "passed"
    FAILED = "failed"
    WARNING = "warning"
    SKIPPED = "skipped"


class GateRunStatus(str, Enum):
    """Lifecycle status of a persisted gate run."""
    RUNNING = "running"
    PASSED = "passed"
    FAILED = "failed"
    WARNING = "warning"


class EnforcementAction(str, Enum):
    """Action the enforcement policy attaches to a decision."""
    BLOCK_MERGE = "block_merge"
    REQUIRE_REVIEW = "require_review"
    WARN_ONLY = "warn_only"


class ResultLocation(BaseModel):
    """Where a result applies."""
    file: str
    line: int | None = None
    column: int | None = None


class QualityResult(BaseModel):
    """The outcome of one check against one file or the whole set."""
    check_id: str
    name: str = ""
    status: ResultStatus
    message: str
    location: ResultLocation | None = None
    details: dict[str, Any] | None = None
    suggestions: list[str] | None = None

    model_config = {"from_attributes": True}


class GateContext(BaseModel):
    """Call context for an evaluation."""
    project_id: str = Field(..., min_length=1)
    is_merge_attempt: bool = False
    generation_id: str | None = None
    triggered_by: str = "system"


class GateSummary(BaseModel):
    """Aggregated counts and severity-weighted score."""
    total: int = 0
    passed: int = 0
    failed: int = 0
    warnings: int = 0
    skipped: int = 0
    blocked_by: list[str] = Field(default_factory=list)
    score: int = 100


class GateValidationResult(BaseModel):
    """Verdict returned by an evaluation."""
    passed: bool
    is_blocked: bool
    results: list[QualityResult]
    summary: GateSummary
    can_proceed: bool
    enforcement_action: EnforcementAction | None = None
    gate_run_id: str | None = None


class GateRun(BaseModel):
    """A persisted record of one evaluation pass."""
    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    project_id: str
    triggered_by: str = "system"
    status: GateRunStatus = GateRunStatus.RUNNING
    results: list[QualityResult] = Field(default_factory=list)
    summary: GateSummary | None = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    completed_at: datetime | None = None

    model_config = {"from_attributes": True}


class CheckDescriptor(BaseModel):
    """Public description of a registered check."""
    id: str
    name: str
    category: str
    type: CheckType
    severity: Severity
    blocking: bool
    enabled: bool
    description: str = ""


class EvaluateRequest(BaseModel):
    """Body of an evaluation request."""
    context: GateContext
    files: list[FileRecord] = Field(default_factory=list)


class RunCheckRequest(BaseModel):
    """Body of a single-check request."""
    files: list[FileRecord] = Field(default_factory=list)
