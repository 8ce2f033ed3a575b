"""High-level configuration management for subtrans."""
from __future__ import annotations

from .constants import (
    CONFIG_FILE_ENV,
    CONF_DIR,
    DEFAULT_BLOB_STORE_URL,
    DEFAULT_CONFIG_PATH,
    DEFAULT_LLM_ENDPOINT,
    DEFAULT_JOB_MAX_COMPLETION_TOKENS,
    DEFAULT_LOCAL_CONFIG_PATH,
    DEFAULT_MODEL,
    DEFAULT_ONE_SHOT_CONCURRENCY,
    DEFAULT_ONE_SHOT_MAX_COMPLETION_TOKENS,
    DEFAULT_TARGET_LANGUAGE,
    DEFAULT_TRANSLATE_CONCURRENCY,
)
from .loader import get_settings, load_configuration, load_settings, reset_settings_cache
from .settings import SubtransSettings, EnvironmentOverrides

__all__ = [
    "CONFIG_FILE_ENV",
    "CONF_DIR",
    "DEFAULT_BLOB_STORE_URL",
    "DEFAULT_CONFIG_PATH",
    "DEFAULT_LLM_ENDPOINT",
    "DEFAULT_JOB_MAX_COMPLETION_TOKENS",
    "DEFAULT_LOCAL_CONFIG_PATH",
    "DEFAULT_MODEL",
    "DEFAULT_ONE_SHOT_CONCURRENCY",
    "DEFAULT_ONE_SHOT_MAX_COMPLETION_TOKENS",
    "DEFAULT_TARGET_LANGUAGE",
    "DEFAULT_TRANSLATE_CONCURRENCY",
    "EnvironmentOverrides",
    "SubtransSettings",
    "get_settings",
    "load_configuration",
    "load_settings",
    "reset_settings_cache",
]
