from __future__ import annotations

import json
from pathlib import Path

import pytest

from subtrans import config_manager as cfg


def test_load_settings_uses_packaged_defaults() -> None:
    settings = cfg.load_settings()

    assert settings.llm_model == cfg.DEFAULT_MODEL
    assert settings.translate_concurrency == 30
    assert settings.one_shot_concurrency == 100
    assert settings.default_target_language == "zh-CN"
    assert settings.blob_store_url == "memory://"
    assert settings.llm_timeout_seconds is None
    assert settings.api_key_value() is None


def test_local_config_file_overrides_defaults(tmp_path: Path) -> None:
    override = tmp_path / "config.json"
    override.write_text(
        json.dumps({"translate_concurrency": 8, "default_target_language": "ja"}),
        encoding="utf-8",
    )

    settings = cfg.load_settings(str(override))

    assert settings.translate_concurrency == 8
    assert settings.default_target_language == "ja"


def test_environment_overrides_config_files(tmp_path: Path, monkeypatch) -> None:
    override = tmp_path / "config.json"
    override.write_text(json.dumps({"translate_concurrency": 8}), encoding="utf-8")
    monkeypatch.setenv("SUBTRANS_TRANSLATE_CONCURRENCY", "12")
    monkeypatch.setenv("LLM_API_KEY", "env-key")
    monkeypatch.setenv("BLOB_STORE_URL", "redis://cache:6379/1")

    settings = cfg.load_settings(str(override))

    assert settings.translate_concurrency == 12
    assert settings.api_key_value() == "env-key"
    assert settings.blob_store_url == "redis://cache:6379/1"


def test_invalid_config_file_is_ignored(tmp_path: Path) -> None:
    override = tmp_path / "config.json"
    override.write_text("{not json", encoding="utf-8")

    settings = cfg.load_settings(str(override))

    assert settings.translate_concurrency == cfg.DEFAULT_TRANSLATE_CONCURRENCY


def test_out_of_range_value_is_rejected(tmp_path: Path) -> None:
    override = tmp_path / "config.json"
    override.write_text(json.dumps({"translate_concurrency": 0}), encoding="utf-8")

    with pytest.raises(RuntimeError):
        cfg.load_settings(str(override))


def test_load_configuration_omits_secrets(monkeypatch) -> None:
    monkeypatch.setenv("LLM_API_KEY", "top-secret")

    payload = cfg.load_configuration()

    assert "llm_api_key" not in payload
    assert payload["llm_model"] == cfg.DEFAULT_MODEL


def test_get_settings_caches_until_reset(monkeypatch) -> None:
    first = cfg.get_settings()
    monkeypatch.setenv("SUBTRANS_DEFAULT_TARGET_LANGUAGE", "ko")

    assert cfg.get_settings() is first

    cfg.reset_settings_cache()
    assert cfg.get_settings().default_target_language == "ko"


def test_blank_api_key_counts_as_missing() -> None:
    settings = cfg.SubtransSettings(llm_api_key="   ")

    assert settings.api_key_value() is None
