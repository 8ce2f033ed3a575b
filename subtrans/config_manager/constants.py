"""Shared constants for the configuration manager package."""
from __future__ import annotations

from pathlib import Path

MODULE_DIR = Path(__file__).resolve().parent
SCRIPT_DIR = MODULE_DIR.parents[1]
CONF_DIR = SCRIPT_DIR / "conf"
DEFAULT_CONFIG_PATH = CONF_DIR / "config.json"
DEFAULT_LOCAL_CONFIG_PATH = CONF_DIR / "config.local.json"
CONFIG_FILE_ENV = "SUBTRANS_CONFIG_FILE"

DEFAULT_LLM_ENDPOINT = "https://ark.cn-beijing.volces.com/api/v3/chat/completions"
DEFAULT_MODEL = "doubao-seed-1-6-flash-250828"
DEFAULT_TARGET_LANGUAGE = "zh-CN"
DEFAULT_TRANSLATE_CONCURRENCY = 30
DEFAULT_ONE_SHOT_CONCURRENCY = 100
DEFAULT_JOB_MAX_COMPLETION_TOKENS = 2000
DEFAULT_ONE_SHOT_MAX_COMPLETION_TOKENS = 4000
DEFAULT_BLOB_STORE_URL = "memory://"
DEFAULT_REDIS_NAMESPACE = "subtrans"

SENSITIVE_CONFIG_KEYS = {"llm_api_key"}

__all__ = [
    "CONFIG_FILE_ENV",
    "CONF_DIR",
    "DEFAULT_BLOB_STORE_URL",
    "DEFAULT_CONFIG_PATH",
    "DEFAULT_JOB_MAX_COMPLETION_TOKENS",
    "DEFAULT_LLM_ENDPOINT",
    "DEFAULT_LOCAL_CONFIG_PATH",
    "DEFAULT_MODEL",
    "DEFAULT_ONE_SHOT_CONCURRENCY",
    "DEFAULT_ONE_SHOT_MAX_COMPLETION_TOKENS",
    "DEFAULT_REDIS_NAMESPACE",
    "DEFAULT_TARGET_LANGUAGE",
    "DEFAULT_TRANSLATE_CONCURRENCY",
    "MODULE_DIR",
    "SCRIPT_DIR",
    "SENSITIVE_CONFIG_KEYS",
]
