"""API routers for the subtrans web application."""

from .translate import router as translate_router

__all__ = ["translate_router"]
