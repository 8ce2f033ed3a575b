"""Shared constants and logger used across subtitle modules."""

from __future__ import annotations

import re

from subtrans import logging_manager as log_mgr

logger = log_mgr.get_logger().getChild("subtitles")

SRT_TIMING_PATTERN = re.compile(
    r"^(?P<start>\d{2}:\d{2}:\d{2},\d{3})\s*-->\s*(?P<end>\d{2}:\d{2}:\d{2},\d{3})"
)
SRT_BLOCK_SEPARATOR = re.compile(r"\n\s*\n")
SRT_TIMING_SEPARATOR = " --> "
SRT_INDEX_PATTERN = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?", re.ASCII)

__all__ = [
    "SRT_BLOCK_SEPARATOR",
    "SRT_INDEX_PATTERN",
    "SRT_TIMING_PATTERN",
    "SRT_TIMING_SEPARATOR",
    "logger",
]
