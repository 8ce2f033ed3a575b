from __future__ import annotations

import asyncio
import json
from typing import Any, Dict, List

import httpx
import pytest

from subtrans import config_manager as cfg
from subtrans.errors import TranslationFailed, TranslationNotConfigured
from subtrans.translation import (
    ClientSettings,
    PartsContent,
    TextContent,
    TranslationClient,
    create_client,
    normalize_content,
    resolve_completions_endpoint,
)
from subtrans.translation.content import ContentPart, extract_completion_content
from subtrans.translation.prompts import build_translation_prompt


def _client(handler, **overrides: Any) -> TranslationClient:
    settings = ClientSettings(api_key="secret", api_url="https://llm.example/api/v3/chat/completions")
    if overrides:
        settings = settings.with_updates(**overrides)
    http_client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return TranslationClient(settings, http_client=http_client)


def _completion(content: Any) -> Dict[str, Any]:
    return {"choices": [{"message": {"role": "assistant", "content": content}}]}


def test_translate_one_posts_chat_completion_request() -> None:
    requests: List[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(200, json=_completion("  Bonjour  "))

    client = _client(handler, model="demo-model", max_completion_tokens=123)

    result = asyncio.run(client.translate_one("Hello", "fr", "greeting"))

    assert result == "Bonjour"
    request = requests[0]
    assert str(request.url) == "https://llm.example/api/v3/chat/completions"
    assert request.headers["Authorization"] == "Bearer secret"
    body = json.loads(request.content)
    assert body["model"] == "demo-model"
    assert body["max_completion_tokens"] == 123
    assert body["messages"] == [
        {
            "role": "user",
            "content": [{"type": "text", "text": build_translation_prompt("Hello", "fr", "greeting")}],
        }
    ]


def test_translate_one_joins_text_parts_and_skips_other_parts() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        content = [
            {"type": "text", "text": "第一"},
            {"type": "image_url", "image_url": {"url": "http://x"}},
            {"type": "text", "text": "第二"},
        ]
        return httpx.Response(200, json=_completion(content))

    assert asyncio.run(_client(handler).translate_one("x", "zh-CN")) == "第一\n第二"


@pytest.mark.parametrize("status_code", [400, 429, 500, 503])
def test_translate_one_raises_on_error_status(status_code: int) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(status_code, text="rate limited")

    with pytest.raises(TranslationFailed) as excinfo:
        asyncio.run(_client(handler).translate_one("Hello", "fr"))

    assert excinfo.value.status_code == status_code
    assert excinfo.value.body == "rate limited"


def test_translate_one_wraps_transport_errors() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(TranslationFailed) as excinfo:
        asyncio.run(_client(handler).translate_one("Hello", "fr"))

    assert excinfo.value.status_code == 0


@pytest.mark.parametrize("payload", [{}, {"choices": []}, {"choices": [{"message": {}}]}])
def test_translate_one_returns_empty_string_for_missing_content(payload) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json=payload)

    assert asyncio.run(_client(handler).translate_one("Hello", "fr")) == ""


def test_client_requires_api_key() -> None:
    with pytest.raises(TranslationNotConfigured):
        TranslationClient(ClientSettings(api_key=None))


def test_create_client_uses_application_settings() -> None:
    settings = cfg.SubtransSettings(
        llm_api_key="  key  ",
        llm_model="custom",
        llm_endpoint="https://ark.cn-beijing.volces.com",
    )

    client = create_client(settings, max_completion_tokens=4000)

    assert client.model == "custom"
    assert client.settings.api_key == "key"
    assert client.settings.max_completion_tokens == 4000
    assert client.api_url == "https://ark.cn-beijing.volces.com/api/v3/chat/completions"
    asyncio.run(client.aclose())


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        (None, cfg.DEFAULT_LLM_ENDPOINT),
        ("   ", cfg.DEFAULT_LLM_ENDPOINT),
        ("https://ark.cn-beijing.volces.com/", "https://ark.cn-beijing.volces.com/api/v3/chat/completions"),
        ("https://proxy.example/api/chat", "https://proxy.example/api/chat"),
        ("https://other.example/v1/chat/completions", "https://other.example/v1/chat/completions"),
    ],
)
def test_resolve_completions_endpoint(raw, expected) -> None:
    assert resolve_completions_endpoint(raw) == expected


def test_normalize_content_handles_both_variants() -> None:
    assert normalize_content(TextContent(text="  hi \n")) == "hi"
    parts = PartsContent(parts=(ContentPart(type="text", text="a"), ContentPart(type="text", text="b ")))
    assert normalize_content(parts) == "a\nb"
    assert normalize_content(extract_completion_content(None)) == ""


def test_prompt_includes_note_only_when_given() -> None:
    with_note = build_translation_prompt("Hello", "fr", "cooking show")
    without_note = build_translation_prompt("Hello", "fr")

    assert "Additional context: cooking show" in with_note
    assert "Additional context" not in without_note
    assert without_note.endswith("Translate the following text into fr:\nHello")
