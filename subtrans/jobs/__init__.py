"""Persistent, resumable translation jobs."""

from .models import TranslationJob
from .persistence import JOB_KEY_PREFIX, JobRepository, job_key
from .processor import DEFAULT_CONCURRENCY, ChunkedJobProcessor, JobProgress
from .service import TranslationJobService

__all__ = [
    "ChunkedJobProcessor",
    "DEFAULT_CONCURRENCY",
    "JOB_KEY_PREFIX",
    "JobProgress",
    "JobRepository",
    "TranslationJob",
    "TranslationJobService",
    "job_key",
]
