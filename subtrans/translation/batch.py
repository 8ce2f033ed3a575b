"""Whole-track translation within a single call."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, replace
from typing import List, Optional, Sequence

from .. import config_manager as cfg
from .. import logging_manager as log_mgr
from ..errors import (
    EmptySubtitle,
    MissingSubtitle,
    TranslationFailed,
    TranslationNotConfigured,
)
from ..subtitles import SubtitleCue, parse_srt, serialize_srt
from .client import Translator

logger = log_mgr.get_logger().getChild("translation.batch")


@dataclass(frozen=True)
class OneShotResult:
    """Outcome of translating a whole track in one call."""

    srt: str
    total: int
    translated: int
    failed: int


async def translate_cues(
    cues: Sequence[SubtitleCue],
    translator: Translator,
    target_language: str,
    note: Optional[str] = None,
    *,
    concurrency: int = cfg.DEFAULT_ONE_SHOT_CONCURRENCY,
) -> List[SubtitleCue]:
    """Translate every cue using a pool of workers sharing one cursor.

    Returns copies of ``cues``; a cue whose request fails or comes back empty
    keeps ``translated_text`` unset.
    """

    if concurrency < 1:
        raise ValueError("concurrency must be at least 1")
    translated = [replace(cue) for cue in cues]
    pending = iter(enumerate(translated))

    async def worker() -> None:
        for position, cue in pending:
            try:
                text = await translator.translate_one(cue.source_text, target_language, note)
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
                continue
            except Exception as exc:
                logger.warning(
                    "Translator raised for cue %s; keeping source text",
                    position,
                    exc_info=exc,
                    extra={"event": "translate.cue.failed", "position": position},
                )
                cue.failed = True
                continue
            if text:
                cue.translated_text = text
            else:
                cue.failed = True

    worker_count = min(concurrency, len(translated))
    async with asyncio.TaskGroup() as group:
        for _ in range(worker_count):
            group.create_task(worker())
    return translated


async def translate_srt(
    srt: Optional[str],
    translator: Optional[Translator],
    target_language: str,
    note: Optional[str] = None,
    *,
    concurrency: int = cfg.DEFAULT_ONE_SHOT_CONCURRENCY,
) -> OneShotResult:
    """Parse, translate and reassemble ``srt`` in one pass."""

    if not srt:
        raise MissingSubtitle("Subtitle text is required")
    cues = parse_srt(srt)
    if not cues:
        raise EmptySubtitle("Subtitle text could not be parsed or is empty")
    if translator is None:
        raise TranslationNotConfigured("LLM_API_KEY is not configured")
    logger.info(
        "Translating %s cues in one pass",
        len(cues),
        extra={"event": "translate.one_shot.start", "cues": len(cues)},
    )
    translated = await translate_cues(
        cues, translator, target_language, note, concurrency=concurrency
    )
    translated_count = sum(1 for cue in translated if cue.translated_text is not None)
    return OneShotResult(
        srt=serialize_srt(translated),
        total=len(translated),
        translated=translated_count,
        failed=len(translated) - translated_count,
    )


__all__ = ["OneShotResult", "translate_cues", "translate_srt"]
