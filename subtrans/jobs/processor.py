"""Resumable, fixed-width batch processing of translation jobs.

Each call to :meth:`ChunkedJobProcessor.advance` is one stateless invocation:
load the record, translate at most ``concurrency`` cues from the cursor, write
the whole record back. Nothing is kept in memory between calls, so progress
survives across processes. Two overlapping invocations for the same job may
claim the same cues; the later write wins and the overlap is translated twice.
"""

from __future__ import annotations

import asyncio
import time
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from .. import config_manager as cfg
from .. import logging_manager as log_mgr
from ..errors import TranslationFailed, TranslationNotConfigured
from ..translation import Translator
from .models import TranslationJob
from .persistence import JobRepository

logger = log_mgr.get_logger().getChild("jobs.processor")

DEFAULT_CONCURRENCY = cfg.DEFAULT_TRANSLATE_CONCURRENCY


@dataclass(frozen=True)
class JobProgress:
    """Snapshot returned to pollers after one invocation."""

    job_id: str
    completed: bool
    cursor: int
    total: int
    processed: int
    translated: int
    failed: int
    claimed: int = 0
    progressed: int = 0
    newly_completed: bool = False
    srt: Optional[str] = None

    @property
    def status(self) -> str:
        return "completed" if self.completed else "processing"

    @classmethod
    def from_job(
        cls,
        job: TranslationJob,
        *,
        claimed: int = 0,
        progressed: int = 0,
        newly_completed: bool = False,
    ) -> "JobProgress":
        return cls(
            job_id=job.job_id,
            completed=job.completed,
            cursor=job.cursor,
            total=int(job.total or 0),
            processed=job.processed_count,
            translated=job.translated_count,
            failed=job.failed_count,
            claimed=claimed,
            progressed=progressed,
            newly_completed=newly_completed,
            srt=job.render() if job.completed else None,
        )

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "status": self.status,
            "completed": self.completed,
            "cursor": self.cursor,
            "total": self.total,
            "processed": self.processed,
            "translated": self.translated,
            "failed": self.failed,
            "progressed": self.progressed,
        }
        if self.srt is not None:
            payload["srt"] = self.srt
        return payload


class ChunkedJobProcessor:
    """Advance a persisted job by one bounded batch per call."""

    def __init__(
        self,
        repository: JobRepository,
        translator: Optional[Translator],
        *,
        concurrency: int = DEFAULT_CONCURRENCY,
    ) -> None:
        if concurrency < 1:
            raise ValueError("concurrency must be at least 1")
        self._repository = repository
        self._translator = translator
        self._concurrency = concurrency

    @property
    def concurrency(self) -> int:
        return self._concurrency

    async def advance(self, job_id: str) -> JobProgress:
        """Run one invocation for ``job_id`` and return the resulting progress."""

        with log_mgr.log_context(job_id=job_id):
            started = time.perf_counter()
            job = await self._repository.load(job_id)
            claimed: List[int] = []
            progressed = 0
            newly_completed = False

            translator = self._translator
            if not job.completed:
                if not job.exhausted and translator is None:
                    raise TranslationNotConfigured("LLM_API_KEY is not configured")
                claimed = job.claim(self._concurrency)
                if claimed and translator is not None:
                    progressed = await self._translate_batch(job, claimed, translator)
                if job.exhausted:
                    job.completed = True
                    newly_completed = True

            await self._repository.save(job)

            duration_ms = round((time.perf_counter() - started) * 1000, 2)
            logger.info(
                "Translation batch finished",
                extra={
                    "event": "translate.job.batch",
                    "claimed": len(claimed),
                    "progressed": progressed,
                    "cursor": job.cursor,
                    "total": job.total,
                    "duration_ms": duration_ms,
                },
            )
            if newly_completed:
                logger.info(
                    "Translation job completed",
                    extra={
                        "event": "translate.job.completed",
                        "translated": job.translated_count,
                        "failed": job.failed_count,
                    },
                )
            return JobProgress.from_job(
                job,
                claimed=len(claimed),
                progressed=progressed,
                newly_completed=newly_completed,
            )

    async def _translate_batch(
        self, job: TranslationJob, positions: List[int], translator: Translator
    ) -> int:
        """Translate the claimed cues concurrently and return how many succeeded."""

        async def translate_cue(position: int) -> bool:
            cue = job.cues[position]
            try:
                text = await translator.translate_one(
                    cue.source_text, job.target_language, job.note
                )
            except TranslationFailed as exc:
                logger.warning(
                    "Translation failed for cue %s; keeping source text",
                    position,
                    extra={
                        "event": "translate.cue.failed",
                        "position": position,
                        "status_code": exc.status_code,
                    },
                )
                cue.failed = True
                return False
            except Exception as exc:
                logger.warning(
                    "Translator raised for cue %s; keeping source text",
                    position,
                    exc_info=exc,
                    extra={"event": "translate.cue.failed", "position": position},
                )
                cue.failed = True
                return False
            if not text:
                cue.failed = True
                return False
            cue.translated_text = text
            cue.failed = False
            return True

        async with asyncio.TaskGroup() as group:
            tasks = [group.create_task(translate_cue(position)) for position in positions]
        return sum(1 for task in tasks if task.result())


__all__ = ["ChunkedJobProcessor", "DEFAULT_CONCURRENCY", "JobProgress"]
