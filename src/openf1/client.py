"""
HTTP client for the OpenF1 API (https://openf1.org).

All endpoints are read-only GETs filtered through query parameters and
return JSON arrays. Filters with a falsy value are left out of the query
string, so calling fetch_sessions() with no argument returns every session.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Optional

import requests

from src.errors import DataSourceError
from src.logger import log_function
from .schemas import OpenF1Driver, OpenF1Meeting, OpenF1Session, TeamRadioMessage


OPENF1_BASE_URL = "https://api.openf1.org/v1"

logger = logging.getLogger("openf1")


class OpenF1Client:
    """Thin wrapper around the OpenF1 REST endpoints."""

    def __init__(
        self,
        base_url: str = OPENF1_BASE_URL,
        timeout: float = 30.0,
        session: Optional[requests.Session] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update({"Accept": "application/json"})

    def _get(self, endpoint: str, params: list[tuple[str, Any]]) -> list[dict]:
        """
        GET an endpoint and return the decoded JSON array.

        Args:
            endpoint: Path below the base URL, e.g. "sessions"
            params: (name, value) pairs; pairs with a falsy value are dropped

        Raises:
            DataSourceError: On transport failure (status 0) or non-2xx status
        """
        query = [(name, str(value)) for name, value in params if value]
        url = f"{self.base_url}/{endpoint}"
        logger.debug(f"GET {url} {query}")

        try:
            response = self.session.get(url, params=query, timeout=self.timeout)
        except requests.RequestException as e:
            logger.error(f"Request to {url} failed: {e}")
            raise DataSourceError(0, str(e)) from e

        if not response.ok:
            logger.error(f"OpenF1 returned {response.status_code} for {url}")
            raise DataSourceError(response.status_code, response.reason or "")

        try:
            payload = response.json()
        except ValueError as e:
            raise DataSourceError(response.status_code, f"Invalid JSON body: {e}") from e

        if not isinstance(payload, list):
            # OpenF1 answers {"detail": ...} when nothing matches some filters
            logger.warning(f"Unexpected payload from {url}: {payload!r}")
            return []
        return payload

    @log_function(logger_name="openf1", log_args=True)
    def fetch_sessions(
        self,
        session_key: Optional[int] = None,
        meeting_key: Optional[int] = None,
        year: Optional[int] = None,
        session_name: Optional[str] = None,
    ) -> list[OpenF1Session]:
        """Fetch sessions, optionally filtered."""
        rows = self._get(
            "sessions",
            [
                ("session_key", session_key),
                ("meeting_key", meeting_key),
                ("year", year),
                ("session_name", session_name),
            ],
        )
        return [OpenF1Session.from_dict(row) for row in rows]

    @log_function(logger_name="openf1", log_args=True)
    def fetch_drivers(
        self,
        session_key: Optional[int] = None,
        driver_number: Optional[int] = None,
    ) -> list[OpenF1Driver]:
        """Fetch the drivers entered in a session."""
        rows = self._get(
            "drivers",
            [("session_key", session_key), ("driver_number", driver_number)],
        )
        return [OpenF1Driver.from_dict(row) for row in rows]

    @log_function(logger_name="openf1", log_args=True)
    def fetch_team_radio(
        self,
        session_key: Optional[int] = None,
        driver_number: Optional[int] = None,
        date_start: Optional[str] = None,
        date_end: Optional[str] = None,
    ) -> list[TeamRadioMessage]:
        """Fetch team radio messages. Dates are ISO-8601 strings (inclusive)."""
        rows = self._get(
            "team_radio",
            [
                ("session_key", session_key),
                ("driver_number", driver_number),
                ("date>=", date_start),
                ("date<=", date_end),
            ],
        )
        return [TeamRadioMessage.from_dict(row) for row in rows]

    @log_function(logger_name="openf1", log_args=True)
    def fetch_meetings(
        self,
        meeting_key: Optional[int] = None,
        year: Optional[int] = None,
    ) -> list[OpenF1Meeting]:
        """Fetch meetings (race weekends)."""
        rows = self._get("meetings", [("meeting_key", meeting_key), ("year", year)])
        return [OpenF1Meeting.from_dict(row) for row in rows]

    def fetch_latest_team_radio(self, days: int = 7) -> list[TeamRadioMessage]:
        """Fetch the radio messages of the last `days` days."""
        since = datetime.now(timezone.utc) - timedelta(days=days)
        return self.fetch_team_radio(date_start=since.isoformat())
