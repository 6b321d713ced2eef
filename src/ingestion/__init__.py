"""
Ingestion package for the team radio catalog.

sync_radio.py pulls sessions from the OpenF1 API and, for each session,
upserts its drivers and race then inserts one clip per new radio message
(dedup on the recording URL).

Usage:
    uv run -m src.ingestion --year 2024
    uv run -m src.ingestion --session-key 9158
"""

from .sync_radio import (
    SyncSummary,
    sync_drivers,
    sync_radio_messages,
    sync_recent_radio,
    sync_session,
    sync_sessions,
)

__all__ = [
    "SyncSummary",
    "sync_drivers",
    "sync_radio_messages",
    "sync_recent_radio",
    "sync_session",
    "sync_sessions",
]
