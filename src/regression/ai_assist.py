"""AI-assisted regression analysis.

Used as a fallback for files where the heuristic detectors found nothing.
The call is bounded by a timeout and every failure mode (timeout,
transport error, unparsable output) degrades to an empty result.
"""

from __future__ import annotations

import asyncio
import json
import logging
from typing import Any

from pydantic import ValidationError

from src.regression.detectors import FileFindings
from src.shared.completion import CompletionBackend
from src.shared.constants import AI_SNIPPET_CHARS, AI_TIMEOUT_SECONDS
from src.shared.errors import ParsingError
from src.shared.models.regression import BreakingChange, FindingSource, RegressionIssue

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You are an expert software architect specializing in detecting code "
    "regressions and breaking changes."
)

_PROMPT_TEMPLATE = """Analyze the following code changes for regressions and breaking changes:

**File**: {path}

**Old Code**:
```
{old}
```

**New Code**:
```
{new}
```

Identify:
1. Functional regressions (behavior that changed)
2. API breaking changes
3. Security implications
4. Performance impacts

**Output Format** (JSON):
{{
  "issues": [
    {{
      "type": "functional|api|security|performance",
      "severity": "critical|high|medium|low",
      "description": "Clear description",
      "originalBehavior": "What was the old behavior",
      "newBehavior": "What is the new behavior",
      "suggestion": "How to fix or mitigate"
    }}
  ],
  "breakingChanges": [
    {{
      "type": "api|database|config|behavior",
      "change": "What changed",
      "impact": "Impact on users",
      "migrationPath": "How to migrate"
    }}
  ]
}}"""

TEMPERATURE = 0.3
MAX_TOKENS = 4096


def build_prompt(old: str, new: str, path: str) -> str:
    return _PROMPT_TEMPLATE.format(
        path=path,
        old=old[:AI_SNIPPET_CHARS],
        new=new[:AI_SNIPPET_CHARS],
    )


def extract_first_json_object(text: str) -> dict[str, Any]:
    """Return the first well-formed JSON object embedded in *text*.

    Raises:
        ParsingError: If *text* contains no JSON object.
    """
    decoder = json.JSONDecoder()
    index = text.find("{")
    while index != -1:
        try:
            value, _end = decoder.raw_decode(text, index)
        except ValueError:
            index = text.find("{", index + 1)
            continue
        if isinstance(value, dict):
            return value
        index = text.find("{", index + 1)
    raise ParsingError("No JSON object found in AI response")


def parse_ai_response(text: str, path: str) -> FileFindings:
    """Convert an AI response into findings, dropping malformed items.

    Raises:
        ParsingError: If *text* contains no JSON object.
    """
    data = extract_first_json_object(text)
    findings = FileFindings()

    issues = data.get("issues")
    for item in issues if isinstance(issues, list) else []:
        if not isinstance(item, dict):
            continue
        try:
            findings.issues.append(
                RegressionIssue.model_validate(
                    {**item, "file": item.get("file") or path, "source": FindingSource.AI}
                )
            )
        except ValidationError as exc:
            logger.debug("Dropping malformed AI issue for %s: %s", path, exc)

    changes = data.get("breakingChanges", data.get("breaking_changes"))
    for item in changes if isinstance(changes, list) else []:
        if not isinstance(item, dict):
            continue
        try:
            findings.breaking_changes.append(
                BreakingChange.model_validate({**item, "file": item.get("file") or path})
            )
        except ValidationError as exc:
            logger.debug("Dropping malformed AI breaking change for %s: %s", path, exc)

    return findings


class AIRegressionAnalyzer:
    """Asks a completion backend to review one file change.

    Args:
        backend: Anything implementing ``CompletionBackend.complete``.
        timeout: Upper bound in seconds for one completion call.
    """

    def __init__(self, backend: CompletionBackend, timeout: float = AI_TIMEOUT_SECONDS) -> None:
        self._backend = backend
        self._timeout = timeout

    async def analyze(self, old: str, new: str, path: str) -> FileFindings:
        """Return AI-sourced findings, or empty findings on any failure."""
        try:
            response = await asyncio.wait_for(
                self._backend.complete(
                    build_prompt(old, new, path),
                    SYSTEM_PROMPT,
                    TEMPERATURE,
                    MAX_TOKENS,
                ),
                timeout=self._timeout,
            )
        except asyncio.TimeoutError:
            logger.warning(
                "AI regression analysis timed out after %.1fs (non-blocking)",
                self._timeout,
                extra={"file_path": path},
            )
            return FileFindings()
        except Exception as exc:
            logger.warning(
                "AI regression analysis failed (non-blocking): %s",
                exc,
                extra={"file_path": path},
            )
            return FileFindings()

        try:
            return parse_ai_response(response or "", path)
        except ParsingError as exc:
            logger.warning("AI response unusable for %s: %s", path, exc.detail)
            return FileFindings()
