"""Tests for AI-assisted regression analysis."""
from __future__ import annotations

import asyncio
import json

import pytest

from src.regression.ai_assist import (
    AIRegressionAnalyzer,
    build_prompt,
    extract_first_json_object,
    parse_ai_response,
)
from src.shared.errors import ExternalServiceError, ParsingError
from src.shared.models.quality import Severity
from src.shared.models.regression import FindingSource

_AI_PAYLOAD = {
    "issues": [
        {
            "type": "functional",
            "severity": "high",
            "description": "Discount no longer applied",
            "originalBehavior": "10% off for members",
            "newBehavior": "No discount",
            "suggestion": "Restore the member check",
        },
        {"type": "not-a-type", "severity": "high", "description": "dropped"},
    ],
    "breakingChanges": [
        {
            "type": "behavior",
            "change": "Member pricing removed",
            "impact": "Members pay full price",
            "migrationPath": "Reintroduce pricing rules",
        }
    ],
}


class FakeBackend:
    """Completion backend returning a canned response."""

    def __init__(self, response: str = "", error: Exception | None = None, delay: float = 0.0):
        self.response = response
        self.error = error
        self.delay = delay
        self.calls: list[tuple[str, str, float, int]] = []

    async def complete(self, prompt, system_prompt, temperature, max_tokens):
        self.calls.append((prompt, system_prompt, temperature, max_tokens))
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return self.response


class TestParsing:
    def test_first_object_in_noisy_text(self):
        text = 'Sure! Here you go:\n```json\n{"issues": []}\n```\nAnd also {"other": 1}'
        assert extract_first_json_object(text) == {"issues": []}

    def test_skips_malformed_braces(self):
        assert extract_first_json_object('{not json} then {"a": 1}') == {"a": 1}

    def test_no_object_raises(self):
        with pytest.raises(ParsingError):
            extract_first_json_object("no json here [1, 2]")

    def test_parse_drops_malformed_items(self):
        findings = parse_ai_response("Result: " + json.dumps(_AI_PAYLOAD), "src/price.py")

        assert len(findings.issues) == 1
        issue = findings.issues[0]
        assert issue.source == FindingSource.AI
        assert issue.severity == Severity.HIGH
        assert issue.file == "src/price.py"
        assert issue.original_behavior == "10% off for members"
        assert findings.breaking_changes[0].migration_path == "Reintroduce pricing rules"

    def test_prompt_truncates_snippets(self):
        prompt = build_prompt("a" * 5000, "b" * 5000, "x.py")

        assert "a" * 3000 in prompt
        assert "a" * 3001 not in prompt
        assert "**File**: x.py" in prompt


class TestAIRegressionAnalyzer:
    async def test_successful_analysis(self):
        backend = FakeBackend(response=json.dumps(_AI_PAYLOAD))
        findings = await AIRegressionAnalyzer(backend).analyze("old", "new", "p.py")

        assert len(findings.issues) == 1
        _prompt, _system, temperature, max_tokens = backend.calls[0]
        assert temperature == 0.3
        assert max_tokens == 4096

    async def test_timeout_yields_empty(self):
        backend = FakeBackend(response=json.dumps(_AI_PAYLOAD), delay=1.0)
        findings = await AIRegressionAnalyzer(backend, timeout=0.01).analyze("old", "new", "p.py")
        assert not findings

    async def test_backend_error_yields_empty(self):
        backend = FakeBackend(error=ExternalServiceError("unreachable"))
        findings = await AIRegressionAnalyzer(backend).analyze("old", "new", "p.py")
        assert not findings

    async def test_unparsable_response_yields_empty(self):
        backend = FakeBackend(response="I could not analyse this change.")
        findings = await AIRegressionAnalyzer(backend).analyze("old", "new", "p.py")
        assert not findings
