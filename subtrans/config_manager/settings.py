"""Pydantic models and helper utilities for configuration values."""
from __future__ import annotations

from typing import Any, Dict, Optional

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    SecretStr,
    ValidationError,
)
from pydantic_settings import BaseSettings, SettingsConfigDict

from subtrans import logging_manager

from .constants import (
    DEFAULT_BLOB_STORE_URL,
    DEFAULT_JOB_MAX_COMPLETION_TOKENS,
    DEFAULT_MODEL,
    DEFAULT_ONE_SHOT_CONCURRENCY,
    DEFAULT_ONE_SHOT_MAX_COMPLETION_TOKENS,
    DEFAULT_REDIS_NAMESPACE,
    DEFAULT_TARGET_LANGUAGE,
    DEFAULT_TRANSLATE_CONCURRENCY,
)

logger = logging_manager.get_logger().getChild("config")


class SubtransSettings(BaseModel):
    """Typed representation of the application configuration."""

    model_config = ConfigDict(extra="ignore")

    llm_endpoint: Optional[str] = None
    llm_model: str = DEFAULT_MODEL
    llm_api_key: Optional[SecretStr] = None
    llm_timeout_seconds: Optional[float] = Field(default=None, gt=0)
    job_max_completion_tokens: int = Field(default=DEFAULT_JOB_MAX_COMPLETION_TOKENS, ge=1)
    one_shot_max_completion_tokens: int = Field(
        default=DEFAULT_ONE_SHOT_MAX_COMPLETION_TOKENS, ge=1
    )
    translate_concurrency: int = Field(default=DEFAULT_TRANSLATE_CONCURRENCY, ge=1)
    one_shot_concurrency: int = Field(default=DEFAULT_ONE_SHOT_CONCURRENCY, ge=1)
    default_target_language: str = DEFAULT_TARGET_LANGUAGE
    blob_store_url: str = DEFAULT_BLOB_STORE_URL
    redis_namespace: str = DEFAULT_REDIS_NAMESPACE
    cors_origins: Optional[str] = None
    log_level: str = "INFO"

    def api_key_value(self) -> Optional[str]:
        """Return the plain API key, or ``None`` when it is missing or blank."""

        if self.llm_api_key is None:
            return None
        value = self.llm_api_key.get_secret_value().strip()
        return value or None


class EnvironmentOverrides(BaseSettings):
    """Configuration overrides sourced from environment variables."""

    model_config = SettingsConfigDict(env_prefix="", extra="ignore")

    llm_endpoint: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("LLM_ENDPOINT", "SUBTRANS_LLM_ENDPOINT")
    )
    llm_model: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("LLM_MODEL", "SUBTRANS_LLM_MODEL")
    )
    llm_api_key: Optional[SecretStr] = Field(
        default=None, validation_alias=AliasChoices("LLM_API_KEY", "SUBTRANS_LLM_API_KEY")
    )
    llm_timeout_seconds: Optional[float] = Field(
        default=None, validation_alias=AliasChoices("SUBTRANS_LLM_TIMEOUT_SECONDS")
    )
    job_max_completion_tokens: Optional[int] = Field(
        default=None, validation_alias=AliasChoices("SUBTRANS_JOB_MAX_COMPLETION_TOKENS")
    )
    one_shot_max_completion_tokens: Optional[int] = Field(
        default=None,
        validation_alias=AliasChoices("SUBTRANS_ONE_SHOT_MAX_COMPLETION_TOKENS"),
    )
    translate_concurrency: Optional[int] = Field(
        default=None, validation_alias=AliasChoices("SUBTRANS_TRANSLATE_CONCURRENCY")
    )
    one_shot_concurrency: Optional[int] = Field(
        default=None, validation_alias=AliasChoices("SUBTRANS_ONE_SHOT_CONCURRENCY")
    )
    default_target_language: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("SUBTRANS_DEFAULT_TARGET_LANGUAGE")
    )
    blob_store_url: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("BLOB_STORE_URL", "SUBTRANS_BLOB_STORE_URL"),
    )
    redis_namespace: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("SUBTRANS_REDIS_NAMESPACE")
    )
    cors_origins: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("SUBTRANS_CORS_ORIGINS")
    )
    log_level: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("SUBTRANS_LOG_LEVEL")
    )


def load_environment_overrides() -> Dict[str, Any]:
    """Return configuration overrides sourced from environment variables."""

    try:
        overrides = EnvironmentOverrides()
    except ValidationError as exc:
        logger.warning(
            "Invalid environment configuration detected; using defaults.",
            extra={"event": "config.env.validation_error", "error": str(exc)},
        )
        return {}
    return overrides.model_dump(exclude_none=True)


def apply_settings_updates(
    settings: SubtransSettings, updates: Dict[str, Any]
) -> SubtransSettings:
    """Return a validated copy of ``settings`` with ``updates`` applied."""

    if not updates:
        return settings
    payload = settings.model_dump()
    payload.update(updates)
    return SubtransSettings.model_validate(payload)


__all__ = [
    "EnvironmentOverrides",
    "SubtransSettings",
    "apply_settings_updates",
    "load_environment_overrides",
]
