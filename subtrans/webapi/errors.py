"""Exception handlers mapping service errors to HTTP responses."""

from __future__ import annotations

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from .. import logging_manager as log_mgr
from ..errors import (
    EmptySubtitle,
    JobNotFound,
    StoreUnavailable,
    TranslationNotConfigured,
)
from .schemas import ErrorResponse

logger = log_mgr.get_logger().getChild("webapi.errors")


def _body(**fields: str) -> dict[str, str]:
    return ErrorResponse(**fields).model_dump(exclude_none=True)


async def _handle_empty_subtitle(_request: Request, exc: EmptySubtitle) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=_body(error=exc.code, message=str(exc)),
    )


async def _handle_job_not_found(_request: Request, exc: JobNotFound) -> JSONResponse:
    return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content=_body(status="not_found"))


async def _handle_not_configured(
    _request: Request, exc: TranslationNotConfigured
) -> JSONResponse:
    logger.error("Translation requested without credentials", extra={"event": "translate.config.missing"})
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=_body(status="error", message=str(exc)),
    )


async def _handle_store_unavailable(_request: Request, exc: StoreUnavailable) -> JSONResponse:
    logger.error(
        "Job store unavailable",
        exc_info=exc,
        extra={"event": "storage.unavailable"},
    )
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content=_body(status="error", message="store_unavailable"),
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Register exception handlers for translation errors."""

    app.add_exception_handler(EmptySubtitle, _handle_empty_subtitle)
    app.add_exception_handler(JobNotFound, _handle_job_not_found)
    app.add_exception_handler(TranslationNotConfigured, _handle_not_configured)
    app.add_exception_handler(StoreUnavailable, _handle_store_unavailable)


__all__ = ["register_exception_handlers"]
