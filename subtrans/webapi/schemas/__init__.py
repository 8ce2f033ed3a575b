"""Pydantic schemas for the subtrans API."""

from .translate import (
    ErrorResponse,
    TranslationProgressResponse,
    TranslationRequest,
    TranslationResultResponse,
    TranslationSubmitResponse,
)

__all__ = [
    "ErrorResponse",
    "TranslationProgressResponse",
    "TranslationRequest",
    "TranslationResultResponse",
    "TranslationSubmitResponse",
]
