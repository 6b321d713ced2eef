"""Logging helpers shared by the catalog jobs."""

from .logging_decorator import setup_logging, log_function

__all__ = ["setup_logging", "log_function"]
