"""Centralized logging configuration for subtrans.

Every record is rendered as one JSON object. Translation code tags records
with a dotted ``event`` name, and values bound with :func:`log_context` (the
job being polled, for instance) are copied onto every record emitted inside
that block.
"""

from __future__ import annotations

import contextlib
import contextvars
import json
import logging
import os
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Dict, Iterator, Optional

SCRIPT_DIR = Path(__file__).resolve().parents[1]
LOG_DIR_ENV_VAR = "SUBTRANS_LOG_DIR"
LOG_FILE_NAME = "app.log"
DEFAULT_LOG_LEVEL = logging.INFO
LOGGER_NAME = "subtrans"

_logger: Optional[logging.Logger] = None
_log_context: contextvars.ContextVar[Dict[str, object]] = contextvars.ContextVar(
    "subtrans_log_context", default={}
)

# Attributes every LogRecord carries; anything else was passed through ``extra``.
_RECORD_ATTRIBUTES = frozenset(
    logging.LogRecord("", logging.NOTSET, "", 0, "", (), None).__dict__
) | {"message", "asctime", "taskName"}


def resolve_log_dir() -> Path:
    """Return the directory receiving the rotating log file."""

    override = os.environ.get(LOG_DIR_ENV_VAR)
    if override:
        return Path(override).expanduser()
    return SCRIPT_DIR / "log"


class JSONLogFormatter(logging.Formatter):
    """Render log records as structured JSON strings.

    Job and cue identifiers plus the event name are promoted to top-level keys;
    other ``extra`` values are nested under ``extra``.
    """

    PROMOTED_FIELDS: tuple[str, ...] = (
        "job_id",
        "event",
        "position",
        "status_code",
        "duration_ms",
    )

    def format(self, record: logging.LogRecord) -> str:  # noqa: D401
        payload: Dict[str, object] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "pid": record.process,
        }
        extra: Dict[str, object] = {}
        for key, value in record.__dict__.items():
            if key in _RECORD_ATTRIBUTES:
                continue
            if key in self.PROMOTED_FIELDS:
                if value is not None:
                    payload[key] = value
            else:
                extra[key] = value
        if extra:
            payload["extra"] = extra
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False, default=str)


class LogContextFilter(logging.Filter):
    """Copy bound context values onto records that do not set them already."""

    def filter(self, record: logging.LogRecord) -> bool:  # noqa: D401
        for key, value in _log_context.get().items():
            if not hasattr(record, key):
                setattr(record, key, value)
        return True


def setup_logging(log_level: int = DEFAULT_LOG_LEVEL) -> logging.Logger:
    """Attach the rotating file and console handlers to the ``subtrans`` logger."""
    global _logger

    if _logger is not None:
        configure_logging_level(log_level=log_level)
        return _logger

    log_dir = resolve_log_dir()
    log_dir.mkdir(parents=True, exist_ok=True)

    logger = logging.getLogger(LOGGER_NAME)
    logger.propagate = False
    formatter = JSONLogFormatter()
    context_filter = LogContextFilter()
    handlers = (
        RotatingFileHandler(
            log_dir / LOG_FILE_NAME, maxBytes=5 * 1024 * 1024, backupCount=5, encoding="utf-8"
        ),
        logging.StreamHandler(),
    )
    for handler in handlers:
        handler.setFormatter(formatter)
        handler.addFilter(context_filter)
        logger.addHandler(handler)

    _logger = logger
    configure_logging_level(log_level=log_level)
    return logger


def get_logger() -> logging.Logger:
    """Return the configured logger instance, initializing if necessary."""
    if _logger is None:
        return setup_logging()
    return _logger


def configure_logging_level(debug_enabled: bool = False, log_level: Optional[int | str] = None) -> int:
    """Adjust the global logger level based on debug preference or explicit level."""
    logger = get_logger()
    if isinstance(log_level, str):
        level = logging.getLevelName(log_level.strip().upper())
        if not isinstance(level, int):
            level = DEFAULT_LOG_LEVEL
    elif log_level is not None:
        level = log_level
    else:
        level = logging.DEBUG if debug_enabled else DEFAULT_LOG_LEVEL
    logger.setLevel(level)
    for handler in logger.handlers:
        handler.setLevel(level)
    return level


def get_log_context() -> Dict[str, object]:
    """Return the values currently bound by :func:`log_context`."""

    return dict(_log_context.get())


@contextlib.contextmanager
def log_context(**values: object) -> Iterator[None]:
    """Bind ``values`` to every record logged inside the block."""

    current = dict(_log_context.get())
    current.update({key: value for key, value in values.items() if value is not None})
    token = _log_context.set(current)
    try:
        yield
    finally:
        _log_context.reset(token)


logger = get_logger()
