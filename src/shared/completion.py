"""Language-model completion client used as an optional AI backend."""
from __future__ import annotations

import logging
from typing import Any, Protocol, runtime_checkable

import httpx

from src.shared.config import GateServiceConfig
from src.shared.errors import ExternalServiceError

logger = logging.getLogger(__name__)


@runtime_checkable
class CompletionBackend(Protocol):
    """Anything able to turn a prompt into completion text."""

    async def complete(
        self,
        prompt: str,
        system_prompt: str,
        temperature: float,
        max_tokens: int,
    ) -> str:
        """Return the completion text for *prompt*."""
        ...


class ChatCompletionClient:
    """Client for an OpenAI-compatible ``/chat/completions`` endpoint.

    Args:
        base_url: API root, e.g. ``https://api.openai.com/v1``.
        api_key: Bearer token sent with every request.
        model: Model name passed through to the endpoint.
        timeout: Per-request timeout in seconds.
        transport: Optional httpx transport (used by tests).
    """

    def __init__(
        self,
        base_url: str,
        api_key: str,
        model: str,
        timeout: float = 120.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._api_key = api_key
        self._model = model
        self._timeout = timeout
        self._transport = transport

    @property
    def model(self) -> str:
        return self._model

    async def complete(
        self,
        prompt: str,
        system_prompt: str,
        temperature: float,
        max_tokens: int,
    ) -> str:
        """Send one chat completion request and return the message text.

        Raises:
            ExternalServiceError: On transport errors, non-2xx responses, or
                a response without message content.
        """
        payload: dict[str, Any] = {
            "model": self._model,
            "messages": [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": prompt},
            ],
            "temperature": temperature,
            "max_tokens": max_tokens,
        }
        headers = {"Authorization": f"Bearer {self._api_key}"}

        try:
            async with httpx.AsyncClient(
                timeout=self._timeout, transport=self._transport
            ) as client:
                resp = await client.post(
                    f"{self._base_url}/chat/completions",
                    json=payload,
                    headers=headers,
                )
                resp.raise_for_status()
                data = resp.json()
        except httpx.HTTPError as exc:
            raise ExternalServiceError(f"AI backend request failed: {exc}") from exc
        except ValueError as exc:
            raise ExternalServiceError(f"AI backend returned invalid JSON: {exc}") from exc

        try:
            content = data["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError) as exc:
            raise ExternalServiceError("AI backend returned no completion") from exc
        return content or ""


def build_completion_client(config: GateServiceConfig) -> ChatCompletionClient | None:
    """Return a completion client, or ``None`` when AI assistance is off."""
    if not config.ai_enabled or not config.ai_api_key:
        logger.info("AI backend disabled; regression detection is heuristic-only")
        return None
    logger.info("AI backend configured: model=%s", config.ai_model)
    return ChatCompletionClient(
        base_url=config.ai_base_url,
        api_key=config.ai_api_key,
        model=config.ai_model,
        timeout=config.ai_timeout_seconds,
    )
