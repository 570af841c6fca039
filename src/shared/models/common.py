"""Common Pydantic v2 data models shared across services."""
from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field, field_validator


class FileRecord(BaseModel):
    """A submitted file: path plus optional content and hints."""
    path: str = Field(..., min_length=1)
    content: str = ""
    language: str | None = None
    type: str | None = None

    model_config = {"from_attributes": True}

    @field_validator("content", mode="before")
    @classmethod
    def _none_content_is_empty(cls, value: Any) -> Any:
        return "" if value is None else value


class HealthStatus(BaseModel):
    """Health status of a service."""
    status: str = Field(
        default="healthy",
        pattern=r"^(healthy|degraded|unhealthy)$"
    )
    service_name: str
    version: str
    database: str = Field(
        default="connected",
        pattern=r"^(connected|disconnected)$"
    )
    uptime_seconds: float
    ai_backend: str = Field(
        default="disabled",
        pattern=r"^(configured|disabled)$"
    )
    details: dict[str, Any] = Field(default_factory=dict)

    model_config = {"from_attributes": True}
