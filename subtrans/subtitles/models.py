"""Typed containers for subtitle cues."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Union

CueIndex = Union[int, float]


def coerce_cue_index(value: Any) -> CueIndex:
    """Return ``value`` as a finite cue index, preferring ``int`` when integral."""

    if isinstance(value, bool):
        raise ValueError("cue index must be a number")
    if isinstance(value, int):
        return value
    number = float(value)
    if not math.isfinite(number):
        raise ValueError(f"cue index must be finite, got {value!r}")
    if number.is_integer():
        return int(number)
    return number


@dataclass(slots=True)
class SubtitleCue:
    """One timed subtitle entry.

    ``start`` and ``end`` are kept verbatim in ``HH:MM:SS,mmm`` form and are
    never converted to numeric time. ``translated_text`` stays ``None`` until a
    translation succeeds; ``failed`` records that an attempt was made and fell
    back to the source text.
    """

    index: CueIndex
    start: str
    end: str
    source_text: str
    translated_text: Optional[str] = None
    failed: bool = False

    @property
    def resolved(self) -> bool:
        return self.translated_text is not None or self.failed

    def display_text(self) -> str:
        """Return the translated text, falling back to the source text."""

        if self.translated_text is not None:
            return self.translated_text
        return self.source_text

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "index": self.index,
            "start": self.start,
            "end": self.end,
            "source_text": self.source_text,
        }
        if self.translated_text is not None:
            payload["translated_text"] = self.translated_text
        if self.failed:
            payload["failed"] = True
        return payload

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "SubtitleCue":
        translated = data.get("translated_text")
        return cls(
            index=coerce_cue_index(data["index"]),
            start=str(data["start"]),
            end=str(data["end"]),
            source_text=str(data["source_text"]),
            translated_text=str(translated) if translated is not None else None,
            failed=bool(data.get("failed", False)),
        )


__all__ = ["CueIndex", "SubtitleCue", "coerce_cue_index"]
