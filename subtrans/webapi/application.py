"""Application factory for the subtrans FastAPI service."""

from __future__ import annotations

import re

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .. import config_manager as cfg
from .. import logging_manager as log_mgr
from ..storage import RedisBlobStore
from .dependencies import get_blob_store
from .errors import register_exception_handlers
from .metrics import setup_metrics
from .routers import translate_router

LOGGER = log_mgr.get_logger().getChild("webapi")


def _parse_cors_origins(raw_value: str | None) -> tuple[list[str], bool]:
    """Return the allowed origins and whether credentials are supported."""

    if raw_value is None:
        return [], False

    tokens = [token.strip() for token in re.split(r"[\s,]+", raw_value) if token.strip()]
    if not tokens:
        return [], False
    if "*" in tokens:
        return ["*"], False
    return tokens, True


def _configure_cors(app: FastAPI, settings: cfg.SubtransSettings) -> None:
    allowed_origins, allow_credentials = _parse_cors_origins(settings.cors_origins)
    if not allowed_origins:
        LOGGER.info("CORS middleware disabled; no allowed origins configured.")
        return

    app.add_middleware(
        CORSMiddleware,
        allow_origins=allowed_origins,
        allow_credentials=allow_credentials,
        allow_methods=["*"],
        allow_headers=["*"],
    )


def create_app() -> FastAPI:
    """Instantiate and configure the FastAPI application."""

    settings = cfg.get_settings()
    app = FastAPI(title="subtrans API", version="0.1.0")

    register_exception_handlers(app)

    @app.on_event("startup")
    async def _prepare_runtime() -> None:
        log_mgr.configure_logging_level(log_level=settings.log_level)
        LOGGER.info(
            "subtrans API starting",
            extra={
                "event": "app.startup",
                "blob_store": type(get_blob_store()).__name__,
                "translation_configured": settings.api_key_value() is not None,
            },
        )

    @app.on_event("shutdown")
    async def _cleanup_runtime() -> None:
        store = get_blob_store()
        if isinstance(store, RedisBlobStore):
            await store.aclose()
        get_blob_store.cache_clear()

    _configure_cors(app, settings)

    @app.get("/_health", tags=["health"])
    def healthcheck() -> dict[str, str]:
        """Simple healthcheck endpoint for smoke-testing the server."""

        return {"status": "ok"}

    setup_metrics(app)
    app.include_router(translate_router)

    return app


__all__ = ["create_app"]
