"""Records returned by the OpenF1 API.

Only the fields the catalog uses are declared. Unknown keys in the JSON
payload are ignored and missing ones fall back to None.
"""

from dataclasses import dataclass, fields
from datetime import datetime, timezone
from typing import Any, Optional


def parse_datetime(value: Optional[str]) -> Optional[datetime]:
    """
    Parse an OpenF1 ISO-8601 timestamp into a naive UTC datetime.

    Args:
        value: e.g. "2024-03-02T15:00:00+00:00" (None or "" allowed)

    Returns:
        Naive datetime in UTC, or None if value is empty or unparseable
    """
    if not value:
        return None
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


class _Record:
    @classmethod
    def from_dict(cls, data: dict[str, Any]):
        known = {f.name for f in fields(cls)}
        return cls(**{key: data.get(key) for key in known})


@dataclass
class OpenF1Session(_Record):
    session_key: int
    meeting_key: Optional[int] = None
    session_name: Optional[str] = None
    session_type: Optional[str] = None
    location: Optional[str] = None
    country_name: Optional[str] = None
    circuit_short_name: Optional[str] = None
    date_start: Optional[str] = None
    date_end: Optional[str] = None
    year: Optional[int] = None

    @property
    def display_name(self) -> str:
        """Race name shown in the catalog: "<location> - <session name>"."""
        return f"{self.location} - {self.session_name}"


@dataclass
class OpenF1Driver(_Record):
    driver_number: int
    full_name: Optional[str] = None
    broadcast_name: Optional[str] = None
    name_acronym: Optional[str] = None
    team_name: Optional[str] = None
    team_colour: Optional[str] = None
    country_code: Optional[str] = None
    headshot_url: Optional[str] = None
    session_key: Optional[int] = None


@dataclass
class TeamRadioMessage(_Record):
    driver_number: int
    recording_url: str
    session_key: Optional[int] = None
    meeting_key: Optional[int] = None
    date: Optional[str] = None


@dataclass
class OpenF1Meeting(_Record):
    meeting_key: int
    meeting_name: Optional[str] = None
    meeting_official_name: Optional[str] = None
    location: Optional[str] = None
    country_name: Optional[str] = None
    circuit_short_name: Optional[str] = None
    date_start: Optional[str] = None
    year: Optional[int] = None
