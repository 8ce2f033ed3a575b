"""Schemas for subtitle translation endpoints."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class TranslationRequest(BaseModel):
    """Subtitle text plus translation options, as sent by the browser client."""

    model_config = ConfigDict(populate_by_name=True)

    srt: Optional[str] = None
    target_language: Optional[str] = Field(default=None, alias="targetLanguage")
    note: Optional[str] = None


class TranslationSubmitResponse(BaseModel):
    """Identifier of a newly created translation job."""

    model_config = ConfigDict(populate_by_name=True)

    job_id: str = Field(alias="jobId")


class TranslationProgressResponse(BaseModel):
    """Progress snapshot for a translation job."""

    status: str
    completed: bool
    cursor: int
    total: int
    processed: int
    translated: int = 0
    failed: int = 0
    progressed: int = 0
    srt: Optional[str] = None


class TranslationResultResponse(BaseModel):
    """Translated subtitle text produced in a single request."""

    srt: str


class ErrorResponse(BaseModel):
    """Error payload returned for rejected requests."""

    error: Optional[str] = None
    status: Optional[str] = None
    message: Optional[str] = None
