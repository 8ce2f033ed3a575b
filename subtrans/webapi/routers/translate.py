"""Routes for submitting, polling and one-shot translating subtitle tracks."""

from __future__ import annotations

import time
from typing import Optional

from fastapi import APIRouter, Depends, status

from ... import config_manager as cfg
from ...jobs import TranslationJobService
from ...translation import Translator, translate_srt
from ..dependencies import get_app_settings, get_job_service, get_one_shot_translator
from ..metrics import record_one_shot, record_poll, record_submission
from ..schemas import (
    ErrorResponse,
    TranslationProgressResponse,
    TranslationRequest,
    TranslationResultResponse,
    TranslationSubmitResponse,
)

router = APIRouter(prefix="/api/translate", tags=["translate"])

_STORE_ERROR = {status.HTTP_503_SERVICE_UNAVAILABLE: {"model": ErrorResponse}}
_SUBMIT_ERRORS = {status.HTTP_400_BAD_REQUEST: {"model": ErrorResponse}, **_STORE_ERROR}
_POLL_ERRORS = {
    status.HTTP_404_NOT_FOUND: {"model": ErrorResponse},
    status.HTTP_500_INTERNAL_SERVER_ERROR: {"model": ErrorResponse},
    **_STORE_ERROR,
}
_ONE_SHOT_ERRORS = {
    status.HTTP_400_BAD_REQUEST: {"model": ErrorResponse},
    status.HTTP_500_INTERNAL_SERVER_ERROR: {"model": ErrorResponse},
}


@router.post(
    "/submit",
    response_model=TranslationSubmitResponse,
    response_model_by_alias=True,
    status_code=status.HTTP_201_CREATED,
    responses=_SUBMIT_ERRORS,
)
async def submit_translation(
    payload: TranslationRequest,
    service: TranslationJobService = Depends(get_job_service),
) -> TranslationSubmitResponse:
    """Create a translation job and return its identifier without translating anything."""

    job_id = await service.submit(payload.srt, payload.target_language, payload.note)
    record_submission()
    return TranslationSubmitResponse(job_id=job_id)


@router.get(
    "/{job_id}",
    response_model=TranslationProgressResponse,
    response_model_exclude_none=True,
    responses=_POLL_ERRORS,
)
async def poll_translation(
    job_id: str,
    service: TranslationJobService = Depends(get_job_service),
) -> TranslationProgressResponse:
    """Advance the job by one batch and report its progress."""

    started = time.perf_counter()
    progress = await service.poll(job_id)
    record_poll(progress, time.perf_counter() - started)
    return TranslationProgressResponse(**progress.to_dict())


@router.post("", response_model=TranslationResultResponse, responses=_ONE_SHOT_ERRORS)
async def translate_whole_track(
    payload: TranslationRequest,
    translator: Optional[Translator] = Depends(get_one_shot_translator),
    settings: cfg.SubtransSettings = Depends(get_app_settings),
) -> TranslationResultResponse:
    """Translate the whole track inside this request."""

    target_language = (payload.target_language or "").strip() or settings.default_target_language
    result = await translate_srt(
        payload.srt,
        translator,
        target_language,
        payload.note,
        concurrency=settings.one_shot_concurrency,
    )
    record_one_shot(result.translated, result.failed)
    return TranslationResultResponse(srt=result.srt)


__all__ = ["router"]
