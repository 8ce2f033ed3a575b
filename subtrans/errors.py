"""Exceptions shared by the translation job pipeline."""

from __future__ import annotations

from typing import Optional


class SubtransError(RuntimeError):
    """Base class for errors raised by :mod:`subtrans`."""


class EmptySubtitle(SubtransError):
    """Raised when submitted subtitle text yields no usable cues."""

    code = "empty_subtitle"


class MissingSubtitle(EmptySubtitle):
    """Raised when a request carries no subtitle text at all."""

    code = "missing_srt"


class JobNotFound(SubtransError):
    """Raised when a job record does not exist in the store."""

    def __init__(self, job_id: str) -> None:
        super().__init__(f"Translation job {job_id!r} was not found")
        self.job_id = job_id


class TranslationFailed(SubtransError):
    """Raised when a single translation request does not succeed."""

    def __init__(self, status_code: int, body: Optional[str] = None) -> None:
        detail = f"HTTP {status_code}" if status_code else "request error"
        if body:
            detail = f"{detail}: {body[:300]}"
        super().__init__(f"Translation request failed ({detail})")
        self.status_code = status_code
        self.body = body or ""


class TranslationNotConfigured(SubtransError):
    """Raised when translation is required but no API key is configured."""


class StoreUnavailable(SubtransError):
    """Raised when the backing blob store cannot be read or written."""


__all__ = [
    "EmptySubtitle",
    "JobNotFound",
    "MissingSubtitle",
    "StoreUnavailable",
    "SubtransError",
    "TranslationFailed",
    "TranslationNotConfigured",
]
