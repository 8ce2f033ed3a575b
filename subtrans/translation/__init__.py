"""Translation vendor client and batch helpers."""

from .batch import OneShotResult, translate_cues, translate_srt
from .client import (
    ClientSettings,
    TranslationClient,
    Translator,
    create_client,
    resolve_completions_endpoint,
)
from .content import MessageContent, PartsContent, TextContent, normalize_content

__all__ = [
    "ClientSettings",
    "MessageContent",
    "OneShotResult",
    "PartsContent",
    "TextContent",
    "TranslationClient",
    "Translator",
    "create_client",
    "normalize_content",
    "resolve_completions_endpoint",
    "translate_cues",
    "translate_srt",
]
