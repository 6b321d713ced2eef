"""Runtime configuration for the radio catalog jobs."""

from .settings import Settings, load_settings

__all__ = ["Settings", "load_settings"]
