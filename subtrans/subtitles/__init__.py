"""Subtitle parsing and serialization utilities."""

from .errors import SubtitleProcessingError
from .io import decode_subtitle_bytes, parse_srt, read_subtitle_file, serialize_srt
from .models import CueIndex, SubtitleCue

__all__ = [
    "CueIndex",
    "SubtitleCue",
    "SubtitleProcessingError",
    "decode_subtitle_bytes",
    "parse_srt",
    "read_subtitle_file",
    "serialize_srt",
]
