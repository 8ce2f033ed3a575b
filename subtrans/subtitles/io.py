"""Subtitle text parsing and serialization helpers."""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional, Sequence

from .common import (
    SRT_BLOCK_SEPARATOR,
    SRT_INDEX_PATTERN,
    SRT_TIMING_PATTERN,
    SRT_TIMING_SEPARATOR,
    logger,
)
from .errors import SubtitleProcessingError
from .models import CueIndex, SubtitleCue, coerce_cue_index


def parse_srt(payload: str) -> List[SubtitleCue]:
    """Parse SRT ``payload`` into cues, silently dropping malformed blocks.

    An empty list means nothing matched; callers decide whether that is an
    error.
    """

    cues: List[SubtitleCue] = []
    dropped = 0
    for raw_block in _split_blocks(payload):
        lines = [line for line in raw_block.split("\n") if line.strip()]
        if len(lines) < 2:
            dropped += 1
            continue
        index = _parse_index(lines[0])
        match = SRT_TIMING_PATTERN.match(lines[1])
        if index is None or not match:
            dropped += 1
            continue
        cues.append(
            SubtitleCue(
                index=index,
                start=match.group("start"),
                end=match.group("end"),
                source_text="\n".join(lines[2:]),
            )
        )
    if dropped:
        logger.debug(
            "Dropped %s malformed subtitle block(s)",
            dropped,
            extra={"event": "subtitles.parse.dropped", "dropped": dropped},
        )
    return cues


def serialize_srt(cues: Sequence[SubtitleCue]) -> str:
    """Render ``cues`` in sequence order, using source text where untranslated."""

    blocks = [
        f"{cue.index}\n{cue.start}{SRT_TIMING_SEPARATOR}{cue.end}\n{cue.display_text()}"
        for cue in cues
    ]
    return "\n\n".join(blocks)


def decode_subtitle_bytes(raw: bytes, *, source: str = "<bytes>") -> str:
    """Return subtitle text decoded from ``raw``."""

    for encoding in ("utf-8", "utf-8-sig", "latin-1"):
        try:
            return raw.decode(encoding)
        except UnicodeDecodeError:
            continue

    raise SubtitleProcessingError(
        f"Unable to decode subtitle data from '{source}'. Please provide UTF-8 or Latin-1 encoded SRT."
    )


def read_subtitle_file(path: Path) -> str:
    """Read ``path`` and return its decoded subtitle text."""

    return decode_subtitle_bytes(path.read_bytes(), source=str(path))


def _split_blocks(payload: str) -> List[str]:
    sanitized = payload.replace("\r\n", "\n").lstrip("\ufeff")
    if not sanitized.strip():
        return []
    return SRT_BLOCK_SEPARATOR.split(sanitized)


def _parse_index(value: str) -> Optional[CueIndex]:
    candidate = value.strip()
    if not SRT_INDEX_PATTERN.fullmatch(candidate):
        return None
    try:
        return coerce_cue_index(candidate)
    except ValueError:
        return None


__all__ = [
    "decode_subtitle_bytes",
    "parse_srt",
    "read_subtitle_file",
    "serialize_srt",
]
