"""Normalization of chat-completion message content.

The vendor may return ``message.content`` either as a plain string or as a list
of typed parts. Both shapes are parsed into :data:`MessageContent` and reduced
to text by :func:`normalize_content`.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Tuple, Union


@dataclass(frozen=True, slots=True)
class TextContent:
    text: str


@dataclass(frozen=True, slots=True)
class ContentPart:
    type: str
    text: str = ""


@dataclass(frozen=True, slots=True)
class PartsContent:
    parts: Tuple[ContentPart, ...]


MessageContent = Union[TextContent, PartsContent]

EMPTY_CONTENT: MessageContent = PartsContent(parts=())


def parse_message_content(value: Any) -> MessageContent:
    """Return the :data:`MessageContent` variant describing ``value``."""

    if isinstance(value, str):
        return TextContent(text=value)
    if not isinstance(value, list):
        return EMPTY_CONTENT
    parts = []
    for item in value:
        if not isinstance(item, dict):
            continue
        text = item.get("text")
        parts.append(
            ContentPart(type=str(item.get("type") or ""), text="" if text is None else str(text))
        )
    return PartsContent(parts=tuple(parts))


def normalize_content(content: MessageContent) -> str:
    """Return the stripped text carried by ``content``.

    Only ``text`` parts contribute; they are joined with newlines.
    """

    if isinstance(content, TextContent):
        return content.text.strip()
    return "\n".join(part.text for part in content.parts if part.type == "text").strip()


def extract_completion_content(data: Any) -> MessageContent:
    """Return the first choice's message content from a completion response body."""

    if not isinstance(data, dict):
        return EMPTY_CONTENT
    choices = data.get("choices")
    if not isinstance(choices, list) or not choices:
        return EMPTY_CONTENT
    first = choices[0]
    message = first.get("message") if isinstance(first, dict) else None
    if not isinstance(message, dict):
        return EMPTY_CONTENT
    return parse_message_content(message.get("content"))


__all__ = [
    "ContentPart",
    "EMPTY_CONTENT",
    "MessageContent",
    "PartsContent",
    "TextContent",
    "extract_completion_content",
    "normalize_content",
    "parse_message_content",
]
