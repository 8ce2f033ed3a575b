"""Resumable subtitle translation service."""

from .environment import load_environment

# Load environment variables from .env-style files as soon as the package is
# imported so the CLI and the FastAPI app resolve the same settings.
load_environment()

__all__ = ["load_environment"]
