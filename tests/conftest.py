"""Shared pytest fixtures for the subtrans test suite."""

from __future__ import annotations

import os
import tempfile

import pytest

# Keep the rotating log file out of the project tree during test runs.
os.environ.setdefault("SUBTRANS_LOG_DIR", tempfile.mkdtemp(prefix="subtrans-logs-"))

from subtrans import config_manager as cfg  # noqa: E402
from subtrans.webapi.dependencies import get_blob_store  # noqa: E402

_ISOLATED_ENV_VARS = (
    "LLM_API_KEY",
    "LLM_ENDPOINT",
    "LLM_MODEL",
    "BLOB_STORE_URL",
    "SUBTRANS_LLM_API_KEY",
    "SUBTRANS_LLM_ENDPOINT",
    "SUBTRANS_LLM_MODEL",
    "SUBTRANS_BLOB_STORE_URL",
    "SUBTRANS_TRANSLATE_CONCURRENCY",
    "SUBTRANS_ONE_SHOT_CONCURRENCY",
    "SUBTRANS_DEFAULT_TARGET_LANGUAGE",
    "SUBTRANS_CORS_ORIGINS",
    "SUBTRANS_LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def _isolate_settings(tmp_path, monkeypatch):
    for name in _ISOLATED_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv(cfg.CONFIG_FILE_ENV, str(tmp_path / "missing-config.json"))
    cfg.reset_settings_cache()
    get_blob_store.cache_clear()
    yield
    cfg.reset_settings_cache()
    get_blob_store.cache_clear()
