"""Configuration loading utilities."""
from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Dict, Optional

from pydantic import ValidationError

from subtrans import logging_manager

from .constants import (
    CONFIG_FILE_ENV,
    DEFAULT_CONFIG_PATH,
    DEFAULT_LOCAL_CONFIG_PATH,
    SENSITIVE_CONFIG_KEYS,
)
from .settings import (
    SubtransSettings,
    apply_settings_updates,
    load_environment_overrides,
)

logger = logging_manager.get_logger().getChild("config")

_ACTIVE_SETTINGS: Optional[SubtransSettings] = None


def _read_config_json(path: Optional[Path], label: str = "configuration") -> Dict[str, Any]:
    if not path:
        return {}
    try:
        with open(path, "r", encoding="utf-8") as handle:
            data = json.load(handle)
    except FileNotFoundError:
        logger.debug("No %s found at %s.", label, path)
        return {}
    except (OSError, json.JSONDecodeError) as exc:
        logger.warning(
            "Error loading %s from %s: %s. Proceeding without it.",
            label,
            path,
            exc,
            extra={"event": "config.file.invalid"},
        )
        return {}
    if not isinstance(data, dict):
        logger.warning("Ignoring %s at %s: expected a JSON object.", label, path)
        return {}
    logger.debug("Loaded %s from %s", label, path)
    return data


def _resolve_override_path(config_file: Optional[str]) -> Path:
    candidate = config_file or os.environ.get(CONFIG_FILE_ENV)
    if not candidate:
        return DEFAULT_LOCAL_CONFIG_PATH
    path = Path(candidate).expanduser()
    if not path.is_absolute():
        path = (Path.cwd() / path).resolve()
    return path


def load_settings(config_file: Optional[str] = None) -> SubtransSettings:
    """Build settings from defaults, JSON config files and the environment."""

    global _ACTIVE_SETTINGS

    payload: Dict[str, Any] = {}
    payload.update(_read_config_json(DEFAULT_CONFIG_PATH, label="default configuration"))
    payload.update(
        _read_config_json(_resolve_override_path(config_file), label="local configuration")
    )

    try:
        settings = SubtransSettings.model_validate(payload)
        settings = apply_settings_updates(settings, load_environment_overrides())
    except ValidationError as exc:
        raise RuntimeError("Invalid configuration detected") from exc

    _ACTIVE_SETTINGS = settings
    return settings


def load_configuration(config_file: Optional[str] = None) -> Dict[str, Any]:
    """Load the layered configuration and return a dictionary view without secrets."""

    settings = load_settings(config_file)
    return settings.model_dump(mode="python", exclude=SENSITIVE_CONFIG_KEYS)


def get_settings() -> SubtransSettings:
    """Return the currently loaded :class:`SubtransSettings` instance."""

    if _ACTIVE_SETTINGS is None:
        return load_settings()
    return _ACTIVE_SETTINGS


def reset_settings_cache() -> None:
    """Forget previously loaded settings so the next lookup re-reads them."""

    global _ACTIVE_SETTINGS
    _ACTIVE_SETTINGS = None


__all__ = ["get_settings", "load_configuration", "load_settings", "reset_settings_cache"]
