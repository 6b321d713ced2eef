"""HTTP API for the sync and transcription jobs."""

from .app import app, create_app

__all__ = ["app", "create_app"]
