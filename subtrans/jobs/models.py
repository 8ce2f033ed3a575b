"""Serialization helpers for translation job records."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Mapping, Optional

from ..subtitles import SubtitleCue, serialize_srt


@dataclass
class TranslationJob:
    """Persisted state of a resumable subtitle translation.

    The cue list is fixed at submission; only ``cursor``, ``completed`` and the
    per-cue translation fields change afterwards.
    """

    job_id: str
    target_language: str
    cues: List[SubtitleCue]
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    note: Optional[str] = None
    cursor: int = 0
    completed: bool = False
    total: Optional[int] = None

    def __post_init__(self) -> None:
        if self.total is None:
            self.total = len(self.cues)
        self.cursor = max(0, min(int(self.cursor), len(self.cues)))

    @property
    def exhausted(self) -> bool:
        """Return whether every cue has been claimed."""

        return self.cursor >= len(self.cues)

    @property
    def processed_count(self) -> int:
        return sum(1 for cue in self.cues if cue.resolved)

    @property
    def translated_count(self) -> int:
        return sum(1 for cue in self.cues if cue.translated_text is not None)

    @property
    def failed_count(self) -> int:
        return sum(1 for cue in self.cues if cue.failed and cue.translated_text is None)

    def claim(self, limit: int) -> List[int]:
        """Advance the cursor by up to ``limit`` cues and return their positions."""

        if limit < 1:
            raise ValueError("limit must be at least 1")
        start = self.cursor
        stop = min(start + limit, len(self.cues))
        self.cursor = stop
        return list(range(start, stop))

    def render(self) -> str:
        """Return the subtitle text with translations applied."""

        return serialize_srt(self.cues)

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "job_id": self.job_id,
            "created_at": self.created_at.isoformat(),
            "target_language": self.target_language,
            "cues": [cue.to_dict() for cue in self.cues],
            "cursor": self.cursor,
            "completed": self.completed,
            "total": self.total,
        }
        if self.note is not None:
            payload["note"] = self.note
        return payload

    def to_json(self) -> str:
        return json.dumps(
            self.to_dict(), ensure_ascii=False, sort_keys=True, separators=(",", ":")
        )

    @staticmethod
    def _parse_datetime(value: Any) -> datetime:
        if isinstance(value, (int, float)):
            return datetime.fromtimestamp(value / 1000.0, tz=timezone.utc)
        if isinstance(value, str) and value:
            return datetime.fromisoformat(value)
        return datetime.now(timezone.utc)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "TranslationJob":
        raw_cues = data["cues"]
        if not isinstance(raw_cues, list):
            raise TypeError("cues must be a list")
        cues = [SubtitleCue.from_dict(item) for item in raw_cues]
        note = data.get("note")
        total = data.get("total")
        return cls(
            job_id=str(data["job_id"]),
            target_language=str(data["target_language"]),
            cues=cues,
            created_at=cls._parse_datetime(data.get("created_at")),
            note=str(note) if note is not None else None,
            cursor=int(data.get("cursor", 0)),
            completed=bool(data.get("completed", False)),
            total=int(total) if total is not None else None,
        )

    @classmethod
    def from_json(cls, payload: str) -> "TranslationJob":
        return cls.from_dict(json.loads(payload))


__all__ = ["TranslationJob"]
