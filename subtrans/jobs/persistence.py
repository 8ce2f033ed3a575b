"""Blob-store persistence for translation job records."""

from __future__ import annotations

from .. import logging_manager
from ..errors import JobNotFound, StoreUnavailable
from ..storage import BlobStore
from .models import TranslationJob

_LOGGER = logging_manager.get_logger().getChild("jobs.persistence")

JOB_KEY_PREFIX = "translate-jobs"
JOB_CONTENT_TYPE = "application/json"
_ALLOWED_ID_CHARACTERS = frozenset(
    "abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789-_"
)


def _sanitize_job_id(job_id: str) -> str:
    return "".join(ch if ch in _ALLOWED_ID_CHARACTERS else "_" for ch in job_id)


def job_key(job_id: str) -> str:
    """Return the blob key holding the record for ``job_id``."""

    return f"{JOB_KEY_PREFIX}/{_sanitize_job_id(job_id)}.json"


class JobRepository:
    """Whole-record load and save of :class:`TranslationJob` objects.

    There is no compare-and-swap: the last writer wins.
    """

    def __init__(self, store: BlobStore) -> None:
        self._store = store

    async def save(self, job: TranslationJob) -> None:
        payload = job.to_json().encode("utf-8")
        await self._store.put(job_key(job.job_id), payload, JOB_CONTENT_TYPE)
        _LOGGER.debug("Job %s persisted (cursor=%s/%s)", job.job_id, job.cursor, job.total)

    async def load(self, job_id: str) -> TranslationJob:
        if not job_id or _sanitize_job_id(job_id) != job_id:
            raise JobNotFound(job_id)
        blob = await self._store.get(job_key(job_id))
        if blob is None:
            raise JobNotFound(job_id)
        try:
            return TranslationJob.from_json(blob.text())
        except (KeyError, TypeError, ValueError) as exc:
            _LOGGER.warning(
                "Stored job record is unreadable",
                extra={"event": "storage.error", "job_id": job_id, "error": str(exc)},
            )
            raise StoreUnavailable(f"Job record {job_id!r} is corrupt") from exc


__all__ = ["JOB_CONTENT_TYPE", "JOB_KEY_PREFIX", "JobRepository", "job_key"]
