"""Dependency wiring for the FastAPI application."""

from __future__ import annotations

from functools import lru_cache
from typing import AsyncIterator, Optional

from fastapi import Depends

from .. import config_manager as cfg
from .. import logging_manager as log_mgr
from ..jobs import ChunkedJobProcessor, JobRepository, TranslationJobService
from ..storage import BlobStore, create_blob_store
from ..translation import Translator, create_client

logger = log_mgr.get_logger().getChild("webapi.dependencies")


def get_app_settings() -> cfg.SubtransSettings:
    """Return the active application settings."""

    return cfg.get_settings()


@lru_cache(maxsize=1)
def get_blob_store() -> BlobStore:
    """Return the process-wide blob store selected by configuration."""

    settings = cfg.get_settings()
    store = create_blob_store(settings.blob_store_url, namespace=settings.redis_namespace)
    logger.debug("Blob store initialised: %s", type(store).__name__)
    return store


def get_job_repository(store: BlobStore = Depends(get_blob_store)) -> JobRepository:
    return JobRepository(store)


async def get_translator(
    settings: cfg.SubtransSettings = Depends(get_app_settings),
) -> AsyncIterator[Optional[Translator]]:
    """Yield a per-request translation client, or ``None`` without an API key."""

    if settings.api_key_value() is None:
        yield None
        return
    client = create_client(settings, max_completion_tokens=settings.job_max_completion_tokens)
    try:
        yield client
    finally:
        await client.aclose()


async def get_one_shot_translator(
    settings: cfg.SubtransSettings = Depends(get_app_settings),
) -> AsyncIterator[Optional[Translator]]:
    """Yield a client configured with the larger one-shot completion budget."""

    if settings.api_key_value() is None:
        yield None
        return
    client = create_client(
        settings, max_completion_tokens=settings.one_shot_max_completion_tokens
    )
    try:
        yield client
    finally:
        await client.aclose()


def get_job_processor(
    repository: JobRepository = Depends(get_job_repository),
    translator: Optional[Translator] = Depends(get_translator),
    settings: cfg.SubtransSettings = Depends(get_app_settings),
) -> ChunkedJobProcessor:
    return ChunkedJobProcessor(
        repository, translator, concurrency=settings.translate_concurrency
    )


def get_job_service(
    repository: JobRepository = Depends(get_job_repository),
    processor: ChunkedJobProcessor = Depends(get_job_processor),
    settings: cfg.SubtransSettings = Depends(get_app_settings),
) -> TranslationJobService:
    return TranslationJobService(
        repository,
        processor,
        default_target_language=settings.default_target_language,
    )


__all__ = [
    "get_app_settings",
    "get_blob_store",
    "get_job_processor",
    "get_job_repository",
    "get_job_service",
    "get_one_shot_translator",
    "get_translator",
]
