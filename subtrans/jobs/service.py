"""Submit/poll lifecycle for resumable translation jobs."""

from __future__ import annotations

import uuid
from typing import Optional

from .. import config_manager as cfg
from .. import logging_manager as log_mgr
from ..errors import EmptySubtitle, MissingSubtitle
from ..subtitles import parse_srt
from .models import TranslationJob
from .persistence import JobRepository
from .processor import ChunkedJobProcessor, JobProgress

logger = log_mgr.get_logger().getChild("jobs.service")


class TranslationJobService:
    """Create jobs from subtitle text and drive them forward on each poll."""

    def __init__(
        self,
        repository: JobRepository,
        processor: ChunkedJobProcessor,
        *,
        default_target_language: str = cfg.DEFAULT_TARGET_LANGUAGE,
    ) -> None:
        self._repository = repository
        self._processor = processor
        self._default_target_language = default_target_language

    async def submit(
        self,
        srt: Optional[str],
        target_language: Optional[str] = None,
        note: Optional[str] = None,
    ) -> str:
        """Persist a new job for ``srt`` and return its identifier."""

        if not srt:
            raise MissingSubtitle("Subtitle text is required")
        cues = parse_srt(srt)
        if not cues:
            raise EmptySubtitle("Subtitle text could not be parsed or is empty")

        language = (target_language or "").strip() or self._default_target_language
        job = TranslationJob(
            job_id=uuid.uuid4().hex,
            target_language=language,
            cues=cues,
            note=note,
        )
        await self._repository.save(job)
        logger.info(
            "Translation job submitted",
            extra={
                "event": "translate.job.submitted",
                "job_id": job.job_id,
                "total": job.total,
                "target_language": language,
            },
        )
        return job.job_id

    async def poll(self, job_id: str) -> JobProgress:
        """Advance ``job_id`` by one batch and return its progress."""

        return await self._processor.advance(job_id)


__all__ = ["TranslationJobService"]
