"""Common subtitle processing exceptions."""

from __future__ import annotations


class SubtitleProcessingError(RuntimeError):
    """Raised when subtitle text cannot be decoded or processed."""


__all__ = ["SubtitleProcessingError"]
