"""Shared configuration management using pydantic-settings."""
from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings

from src.shared.constants import AI_TIMEOUT_SECONDS, SNAPSHOT_QUERY_LIMIT


class SharedConfig(BaseSettings):
    """Base configuration shared across all services."""
    log_level: str = Field(default="info", validation_alias="LOG_LEVEL")
    database_path: str = Field(
        default="./data/service.db", validation_alias="DATABASE_PATH"
    )

    model_config = {
        "populate_by_name": True,
        "extra": "ignore",
    }


class GateServiceConfig(SharedConfig):
    """Configuration for the Quality Gate service."""
    database_path: str = Field(
        default="./data/quality_gate.db", validation_alias="DATABASE_PATH"
    )
    ai_enabled: bool = Field(default=True, validation_alias="AI_ENABLED")
    ai_api_key: str = Field(default="", validation_alias="AI_API_KEY")
    ai_base_url: str = Field(
        default="https://api.openai.com/v1", validation_alias="AI_BASE_URL"
    )
    ai_model: str = Field(default="gpt-4o", validation_alias="AI_MODEL")
    ai_timeout_seconds: float = Field(
        default=AI_TIMEOUT_SECONDS, gt=0, validation_alias="AI_TIMEOUT_SECONDS"
    )
    gate_workers: int = Field(default=1, ge=1, validation_alias="GATE_WORKERS")
    gate_policy_path: str = Field(default="", validation_alias="GATE_POLICY_PATH")
    snapshot_query_limit: int = Field(
        default=SNAPSHOT_QUERY_LIMIT, ge=1, validation_alias="SNAPSHOT_QUERY_LIMIT"
    )
