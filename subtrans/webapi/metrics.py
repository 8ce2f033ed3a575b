"""Prometheus metrics exporter for the subtrans API.

Defines the application metrics and wires automatic HTTP instrumentation via
prometheus-fastapi-instrumentator.

Usage:
    from .metrics import setup_metrics
    setup_metrics(app)  # call once in create_app()
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, Response
from prometheus_client import (
    CONTENT_TYPE_LATEST,
    REGISTRY,
    Counter,
    Gauge,
    Histogram,
    Info,
    generate_latest,
)
from prometheus_fastapi_instrumentator import Instrumentator

from ..jobs import JobProgress

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Application info
# ---------------------------------------------------------------------------
APP_INFO = Info(
    "subtrans",
    "subtrans application information",
)

UP_GAUGE = Gauge(
    "subtrans_up",
    "Whether the subtrans backend is up (1=up, 0=down)",
)

# ---------------------------------------------------------------------------
# Translation jobs
# ---------------------------------------------------------------------------
JOBS_SUBMITTED = Counter(
    "subtrans_jobs_submitted_total",
    "Total translation jobs accepted",
)

JOBS_COMPLETED = Counter(
    "subtrans_jobs_completed_total",
    "Total translation jobs that reached completion",
)

CUES_TRANSLATED = Counter(
    "subtrans_cues_translated_total",
    "Total cues translated successfully",
    ["mode"],
)

CUE_FAILURES = Counter(
    "subtrans_cue_failures_total",
    "Total cues that fell back to source text",
    ["mode"],
)

POLL_DURATION = Histogram(
    "subtrans_poll_duration_seconds",
    "Duration of one job poll invocation in seconds",
    buckets=[0.1, 0.5, 1, 2.5, 5, 10, 30, 60],
)

_setup_done = False


def record_submission() -> None:
    JOBS_SUBMITTED.inc()


def record_poll(progress: JobProgress, duration_seconds: float) -> None:
    """Record counters derived from one poll snapshot."""

    POLL_DURATION.observe(duration_seconds)
    if progress.progressed:
        CUES_TRANSLATED.labels(mode="job").inc(progress.progressed)
    failures = progress.claimed - progress.progressed
    if failures > 0:
        CUE_FAILURES.labels(mode="job").inc(failures)
    if progress.newly_completed:
        JOBS_COMPLETED.inc()


def record_one_shot(translated: int, failed: int) -> None:
    if translated:
        CUES_TRANSLATED.labels(mode="one_shot").inc(translated)
    if failed:
        CUE_FAILURES.labels(mode="one_shot").inc(failed)


def setup_metrics(app: FastAPI) -> None:
    """Wire Prometheus metrics into the FastAPI application.

    Idempotent, so test suites may recreate the app.
    """
    global _setup_done

    try:
        APP_INFO.info({
            "version": getattr(app, "version", "unknown"),
            "title": getattr(app, "title", "subtrans"),
        })
    except ValueError:
        pass  # Already set
    UP_GAUGE.set(1)

    if not _setup_done:
        try:
            instrumentator = Instrumentator(
                should_group_status_codes=False,
                should_ignore_untemplated=True,
                should_respect_env_var=False,
                excluded_handlers=["/metrics", "/_health"],
            )
            instrumentator.instrument(app)
            instrumentator.expose(app, endpoint="/metrics", include_in_schema=False)
        except ValueError:
            # Metrics already registered in the global Prometheus registry.
            logger.debug("HTTP instrumentation already registered; skipping")
        _setup_done = True

    if not any(getattr(route, "path", None) == "/metrics" for route in app.routes):
        @app.get("/metrics", include_in_schema=False)
        async def _metrics_fallback() -> Response:
            return Response(
                content=generate_latest(REGISTRY),
                media_type=CONTENT_TYPE_LATEST,
            )


__all__ = [
    "CUES_TRANSLATED",
    "CUE_FAILURES",
    "JOBS_COMPLETED",
    "JOBS_SUBMITTED",
    "POLL_DURATION",
    "record_one_shot",
    "record_poll",
    "record_submission",
    "setup_metrics",
]
