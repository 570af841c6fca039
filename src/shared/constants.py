"""Shared constants used across the quality gate service."""
from __future__ import annotations

# Application version
VERSION: str = "1.0.0"

# Port numbers
QUALITY_GATE_PORT: int = 8010

# Service names
QUALITY_GATE_SERVICE_NAME: str = "quality-gate"

# Database settings
DB_BUSY_TIMEOUT_MS: int = 30000

# Languages recognised by the per-language heuristics, keyed by file extension.
LANGUAGE_BY_EXTENSION: dict[str, str] = {
    ".py": "python",
    ".js": "javascript",
    ".jsx": "javascript",
    ".mjs": "javascript",
    ".cjs": "javascript",
    ".ts": "typescript",
    ".tsx": "typescript",
    ".go": "go",
    ".java": "java",
}

# Directories never walked when a file set is collected from disk.
EXCLUDED_DIRS: frozenset[str] = frozenset(
    {"node_modules", ".venv", "venv", "__pycache__", ".git", "dist", "build", ".next"}
)

# Thresholds for the built-in checks
COMPLEXITY_THRESHOLD: int = 10
TEST_COVERAGE_RATIO_THRESHOLD: float = 0.5
DOCUMENTATION_MIN_LINES: int = 20

# Regression detection
SNAPSHOT_QUERY_LIMIT: int = 100
AI_SNIPPET_CHARS: int = 3000
AI_MIN_CONTENT_CHARS: int = 100
AI_TIMEOUT_SECONDS: float = 120.0
AI_MAX_CONCURRENT_CALLS: int = 4
ERROR_HANDLING_DROP_RATIO: float = 0.8
VALIDATION_DROP_RATIO: float = 0.7
