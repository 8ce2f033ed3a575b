"""Async client for the chat-completion translation endpoint."""

from __future__ import annotations

import json
import re
from dataclasses import dataclass, replace
from typing import Any, Dict, Optional, Protocol

import httpx

from .. import config_manager as cfg
from .. import logging_manager as log_mgr
from ..errors import TranslationFailed, TranslationNotConfigured
from .content import extract_completion_content, normalize_content
from .prompts import build_chat_messages, build_translation_prompt

logger = log_mgr.get_logger().getChild("translation.client")

_ARK_HOST_PATTERN = re.compile(r"ark\.cn-beijing\.volces\.com$", re.IGNORECASE)
_ARK_COMPLETIONS_PATH = "/api/v3/chat/completions"


def resolve_completions_endpoint(raw: Optional[str]) -> str:
    """Return the chat-completions URL for a configured endpoint value."""

    trimmed = (raw or "").strip()
    if trimmed.endswith("/"):
        trimmed = trimmed[:-1]
    if not trimmed:
        return cfg.DEFAULT_LLM_ENDPOINT
    if "/api/" in trimmed:
        return trimmed
    if _ARK_HOST_PATTERN.search(trimmed):
        return f"{trimmed}{_ARK_COMPLETIONS_PATH}"
    return trimmed


class Translator(Protocol):
    """Anything able to translate a single text unit."""

    async def translate_one(
        self, text: str, target_language: str, note: Optional[str] = None
    ) -> str:
        ...


@dataclass(frozen=True)
class ClientSettings:
    """Immutable collection of configuration parameters for a :class:`TranslationClient`."""

    model: str = cfg.DEFAULT_MODEL
    api_url: Optional[str] = None
    api_key: Optional[str] = None
    max_completion_tokens: int = cfg.DEFAULT_JOB_MAX_COMPLETION_TOKENS
    timeout_seconds: Optional[float] = None
    debug: bool = False

    def resolve_api_url(self) -> str:
        return resolve_completions_endpoint(self.api_url)

    def with_updates(self, **updates: Any) -> "ClientSettings":
        """Return a copy of the settings with provided keyword overrides applied."""

        return replace(self, **updates)


class TranslationClient:
    """Translate one text unit per request; never retries on its own."""

    def __init__(
        self,
        settings: Optional[ClientSettings] = None,
        *,
        http_client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self._settings = settings or ClientSettings()
        if not self._settings.api_key:
            raise TranslationNotConfigured("LLM_API_KEY is not configured")
        self._owns_http_client = http_client is None
        self._http = http_client or httpx.AsyncClient(
            timeout=httpx.Timeout(self._settings.timeout_seconds)
        )

    @property
    def settings(self) -> ClientSettings:
        return self._settings

    @property
    def model(self) -> str:
        return self._settings.model

    @property
    def api_url(self) -> str:
        return self._settings.resolve_api_url()

    def _log_debug(self, message: str, *args: Any) -> None:
        if self._settings.debug:
            logger.debug(message, *args)

    def build_payload(self, text: str, target_language: str, note: Optional[str] = None) -> Dict[str, Any]:
        """Return the request body for translating ``text``."""

        prompt = build_translation_prompt(text, target_language, note)
        return {
            "model": self.model,
            "messages": build_chat_messages(prompt),
            "max_completion_tokens": self._settings.max_completion_tokens,
        }

    async def translate_one(
        self, text: str, target_language: str, note: Optional[str] = None
    ) -> str:
        """Return the translation of ``text``; raise :class:`TranslationFailed` on HTTP errors."""

        payload = self.build_payload(text, target_language, note)
        api_url = self.api_url
        self._log_debug("Dispatching translation request to %s", api_url)
        self._log_debug("Payload: %s", json.dumps(payload, ensure_ascii=False))

        headers = {
            "content-type": "application/json",
            "Authorization": f"Bearer {self._settings.api_key}",
        }
        try:
            response = await self._http.post(api_url, json=payload, headers=headers)
        except httpx.HTTPError as exc:
            self._log_debug("Translation request error: %s", exc)
            raise TranslationFailed(0, str(exc)) from exc

        body = response.text
        if not response.is_success:
            self._log_debug(
                "Received non-success response: %s - %s", response.status_code, body[:300]
            )
            raise TranslationFailed(response.status_code, body)

        try:
            data = json.loads(body)
        except json.JSONDecodeError:
            self._log_debug("Translation response was not JSON: %s", body[:300])
            data = None
        return normalize_content(extract_completion_content(data))

    async def aclose(self) -> None:
        """Release the HTTP connection pool when this client created it."""

        if self._owns_http_client:
            await self._http.aclose()

    async def __aenter__(self) -> "TranslationClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:  # pragma: no cover - trivial
        await self.aclose()


def create_client(
    settings: cfg.SubtransSettings,
    *,
    max_completion_tokens: Optional[int] = None,
    http_client: Optional[httpx.AsyncClient] = None,
) -> TranslationClient:
    """Return a new :class:`TranslationClient` built from application settings."""

    client_settings = ClientSettings(
        model=settings.llm_model,
        api_url=settings.llm_endpoint,
        api_key=settings.api_key_value(),
        max_completion_tokens=max_completion_tokens or settings.job_max_completion_tokens,
        timeout_seconds=settings.llm_timeout_seconds,
        debug=settings.log_level.strip().upper() == "DEBUG",
    )
    return TranslationClient(client_settings, http_client=http_client)


__all__ = [
    "ClientSettings",
    "TranslationClient",
    "Translator",
    "create_client",
    "resolve_completions_endpoint",
]
