"""Prompt templates used for communicating with the LLM."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

TRANSLATION_INSTRUCTION = "Note: output only the translated sentence, without any explanation."


def build_translation_prompt(text: str, target_language: str, note: Optional[str] = None) -> str:
    """Return the instruction-wrapped prompt for translating ``text``."""

    context = f"\nAdditional context: {note}" if note else ""
    return (
        f"{TRANSLATION_INSTRUCTION}{context}\n"
        f"Translate the following text into {target_language}:\n{text}"
    )


def build_chat_messages(prompt: str) -> List[Dict[str, Any]]:
    """Wrap ``prompt`` as a single user message with one text part."""

    return [{"role": "user", "content": [{"type": "text", "text": prompt}]}]


__all__ = ["TRANSLATION_INSTRUCTION", "build_chat_messages", "build_translation_prompt"]
