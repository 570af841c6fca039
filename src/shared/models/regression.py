"""Regression detection Pydantic v2 data models."""
from __future__ import annotations

import uuid
from datetime import datetime, timezone
from enum import Enum

from pydantic import AliasChoices, BaseModel, Field

from src.shared.models.common import FileRecord
from src.shared.models.quality import Severity


class RegressionType(str, Enum):
    """Category of a regression issue."""
    FUNCTIONAL = "functional"
    API = "api"
    DATABASE = "database"
    PERFORMANCE = "performance"
    SECURITY = "security"


class BreakingChangeType(str, Enum):
    """Category of a breaking change."""
    API = "api"
    DATABASE = "database"
    CONFIG = "config"
    BEHAVIOR = "behavior"


class FindingSource(str, Enum):
    """Which analysis produced a finding."""
    HEURISTIC = "heuristic"
    AI = "ai"


class RegressionSeverity(str, Enum):
    """Aggregate severity of a regression report."""
    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"
    NONE = "none"


class RegressionIssue(BaseModel):
    """A behaviour that changed between two versions of a file."""
    type: RegressionType
    severity: Severity
    file: str = ""
    line: int | None = None
    description: str
    original_behavior: str = Field(
        default="",
        validation_alias=AliasChoices("original_behavior", "originalBehavior"),
    )
    new_behavior: str = Field(
        default="",
        validation_alias=AliasChoices("new_behavior", "newBehavior"),
    )
    suggestion: str = ""
    source: FindingSource = FindingSource.HEURISTIC

    model_config = {"populate_by_name": True}


class BreakingChange(BaseModel):
    """A prior-version guarantee that no longer holds."""
    type: BreakingChangeType
    file: str = ""
    change: str
    impact: str
    migration_path: str | None = Field(
        default=None,
        validation_alias=AliasChoices("migration_path", "migrationPath"),
    )

    model_config = {"populate_by_name": True}


class TestImpact(BaseModel):
    """Estimated effect of a change on the test suite."""
    __test__ = False

    affected_tests: int = 0
    new_tests_needed: int = 0
    tests_to_update: list[str] = Field(default_factory=list)
    untested_files: list[str] = Field(default_factory=list)
    coverage_change: float = 0.0


class RegressionRequest(BaseModel):
    """Request to compare a new file set against a baseline."""
    project_id: str = Field(..., min_length=1)
    new_code: list[FileRecord] = Field(..., min_length=1)
    previous_code: list[FileRecord] | None = None
    base_commit: str | None = None
    compare_commit: str | None = None


class RegressionResult(BaseModel):
    """Outcome of a regression comparison."""
    has_regressions: bool
    severity: RegressionSeverity
    regressions: list[RegressionIssue] = Field(default_factory=list)
    breaking_changes: list[BreakingChange] = Field(default_factory=list)
    test_impact: TestImpact = Field(default_factory=TestImpact)
    score: int = 100
    summary: str = ""


class CodeSnapshot(BaseModel):
    """Immutable stored copy of file content used as a comparison baseline."""
    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    project_id: str
    file_path: str
    content: str = ""
    checksum: str
    commit_hash: str | None = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    model_config = {"from_attributes": True, "frozen": True}


class SnapshotCreate(BaseModel):
    """Request to store a snapshot of a file set."""
    project_id: str = Field(..., min_length=1)
    files: list[FileRecord] = Field(..., min_length=1)
    commit_hash: str | None = None


class SnapshotCreateResponse(BaseModel):
    """Stored snapshots and their count."""
    snapshots: list[CodeSnapshot]
    count: int


class RegressionReport(BaseModel):
    """A stored regression result, listed by project history."""
    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    project_id: str
    base_commit: str | None = None
    result: RegressionResult
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
