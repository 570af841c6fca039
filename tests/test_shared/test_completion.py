"""Tests for the chat-completion client."""
from __future__ import annotations

import json

import httpx
import pytest

from src.shared.completion import (
    ChatCompletionClient,
    CompletionBackend,
    build_completion_client,
)
from src.shared.config import GateServiceConfig
from src.shared.errors import ExternalServiceError


def _client(handler) -> ChatCompletionClient:
    return ChatCompletionClient(
        base_url="https://llm.example/v1/",
        api_key="key-1",
        model="test-model",
        transport=httpx.MockTransport(handler),
    )


class TestChatCompletionClient:
    async def test_posts_chat_request(self):
        captured: dict = {}

        def handler(request: httpx.Request) -> httpx.Response:
            captured["url"] = str(request.url)
            captured["auth"] = request.headers["Authorization"]
            captured["body"] = json.loads(request.content)
            return httpx.Response(200, json={"choices": [{"message": {"content": "ok"}}]})

        text = await _client(handler).complete("prompt", "system", 0.3, 100)

        assert text == "ok"
        assert captured["url"] == "https://llm.example/v1/chat/completions"
        assert captured["auth"] == "Bearer key-1"
        assert captured["body"]["model"] == "test-model"
        assert captured["body"]["messages"][0] == {"role": "system", "content": "system"}
        assert captured["body"]["max_tokens"] == 100

    async def test_http_error_raises_external_service_error(self):
        client = _client(lambda request: httpx.Response(503, text="down"))
        with pytest.raises(ExternalServiceError):
            await client.complete("p", "s", 0.3, 10)

    async def test_missing_choices_raises(self):
        client = _client(lambda request: httpx.Response(200, json={"choices": []}))
        with pytest.raises(ExternalServiceError, match="no completion"):
            await client.complete("p", "s", 0.3, 10)

    def test_satisfies_backend_protocol(self):
        assert isinstance(_client(lambda r: httpx.Response(200)), CompletionBackend)


class TestBuildCompletionClient:
    def test_disabled_without_key(self):
        assert build_completion_client(GateServiceConfig(AI_API_KEY="")) is None

    def test_disabled_by_flag(self):
        assert build_completion_client(GateServiceConfig(AI_API_KEY="k", AI_ENABLED=False)) is None

    def test_enabled(self):
        client = build_completion_client(GateServiceConfig(AI_API_KEY="k", AI_MODEL="m"))
        assert isinstance(client, ChatCompletionClient)
        assert client.model == "m"
