"""FastAPI application exposing the subtitle translation endpoints."""

from .application import create_app

__all__ = ["create_app"]
