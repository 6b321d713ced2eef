"""
OpenF1 data source client.

Read-only access to https://api.openf1.org/v1 (sessions, drivers, team radio,
meetings). See client.py for the HTTP layer and schemas.py for the records.
"""

from .client import OpenF1Client, OPENF1_BASE_URL
from .schemas import (
    OpenF1Driver,
    OpenF1Meeting,
    OpenF1Session,
    TeamRadioMessage,
    parse_datetime,
)

__all__ = [
    "OpenF1Client",
    "OPENF1_BASE_URL",
    "OpenF1Driver",
    "OpenF1Meeting",
    "OpenF1Session",
    "TeamRadioMessage",
    "parse_datetime",
]
