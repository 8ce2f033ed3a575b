"""Shared fixtures for WebAPI route tests."""

from __future__ import annotations

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from subtrans import config_manager as cfg
from subtrans.storage import InMemoryBlobStore
from subtrans.webapi.application import create_app
from subtrans.webapi.dependencies import (
    get_app_settings,
    get_blob_store,
    get_one_shot_translator,
    get_translator,
)

from tests.helpers.translators import RecordingTranslator


@pytest.fixture
def translator() -> RecordingTranslator:
    return RecordingTranslator(render=lambda text, _language: f"{text}-ZH")


@pytest.fixture
def store() -> InMemoryBlobStore:
    return InMemoryBlobStore()


@pytest.fixture
def translate_app(store: InMemoryBlobStore, translator: RecordingTranslator) -> FastAPI:
    """Create a fresh FastAPI app wired to an in-memory store and a recording translator.

    Clears dependency overrides on teardown.
    """
    app = create_app()
    settings = cfg.SubtransSettings(translate_concurrency=2, one_shot_concurrency=4)
    app.dependency_overrides[get_app_settings] = lambda: settings
    app.dependency_overrides[get_blob_store] = lambda: store
    app.dependency_overrides[get_translator] = lambda: translator
    app.dependency_overrides[get_one_shot_translator] = lambda: translator
    yield app
    app.dependency_overrides.clear()


@pytest.fixture
def client(translate_app: FastAPI) -> TestClient:
    return TestClient(translate_app)
