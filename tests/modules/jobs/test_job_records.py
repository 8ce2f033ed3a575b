from __future__ import annotations

import asyncio
import json

import pytest

from subtrans.errors import JobNotFound, StoreUnavailable
from subtrans.jobs import JobRepository, TranslationJob, job_key
from subtrans.storage import InMemoryBlobStore
from subtrans.subtitles import parse_srt

from tests.helpers.translators import build_srt


def _job(count: int = 3, **kwargs) -> TranslationJob:
    return TranslationJob(
        job_id="job123",
        target_language="fr",
        cues=parse_srt(build_srt(count)),
        **kwargs,
    )


def test_new_job_starts_at_cursor_zero_with_total() -> None:
    job = _job(5)

    assert job.cursor == 0
    assert job.total == 5
    assert not job.completed
    assert not job.exhausted


def test_claim_advances_cursor_and_is_bounded_by_total() -> None:
    job = _job(5)

    assert job.claim(2) == [0, 1]
    assert job.cursor == 2
    assert job.claim(10) == [2, 3, 4]
    assert job.cursor == 5
    assert job.exhausted
    assert job.claim(3) == []
    assert job.cursor == 5


def test_claim_rejects_non_positive_limit() -> None:
    with pytest.raises(ValueError):
        _job().claim(0)


def test_counts_track_translated_and_failed_cues() -> None:
    job = _job(3)
    job.cues[0].translated_text = "un"
    job.cues[1].failed = True

    assert job.processed_count == 2
    assert job.translated_count == 1
    assert job.failed_count == 1


def test_render_uses_source_text_for_untranslated_cues() -> None:
    job = _job(2)
    job.cues[1].translated_text = "deux"

    rendered = job.render()

    assert "Line 1" in rendered
    assert "deux" in rendered
    assert "Line 2" not in rendered


def test_json_round_trip_preserves_state() -> None:
    job = _job(3, note="film noir")
    job.claim(2)
    job.cues[0].translated_text = "un"
    job.cues[1].failed = True

    restored = TranslationJob.from_json(job.to_json())

    assert restored == job


def test_from_dict_accepts_epoch_millisecond_timestamps() -> None:
    payload = _job().to_dict()
    payload["created_at"] = 1_700_000_000_000

    restored = TranslationJob.from_dict(payload)

    assert restored.created_at.year == 2023


def test_job_key_uses_prefix_and_sanitizes_identifier() -> None:
    assert job_key("abc") == "translate-jobs/abc.json"
    assert job_key("../etc/passwd") == "translate-jobs/___etc_passwd.json"


def test_repository_save_then_load() -> None:
    store = InMemoryBlobStore()
    repository = JobRepository(store)
    job = _job(4)

    asyncio.run(repository.save(job))
    loaded = asyncio.run(repository.load("job123"))

    assert loaded == job
    blob = asyncio.run(store.get("translate-jobs/job123.json"))
    assert blob is not None
    assert blob.content_type == "application/json"
    assert json.loads(blob.text())["cursor"] == 0


@pytest.mark.parametrize("job_id", ["missing", "", "../job123"])
def test_repository_load_unknown_job_raises_not_found(job_id: str) -> None:
    store = InMemoryBlobStore()
    repository = JobRepository(store)
    asyncio.run(repository.save(_job()))

    with pytest.raises(JobNotFound):
        asyncio.run(repository.load(job_id))


def test_repository_load_corrupt_record_raises_store_unavailable() -> None:
    store = InMemoryBlobStore()
    asyncio.run(store.put(job_key("broken"), b"not json", "application/json"))

    with pytest.raises(StoreUnavailable):
        asyncio.run(JobRepository(store).load("broken"))
