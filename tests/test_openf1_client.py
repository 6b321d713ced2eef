"""OpenF1Client query building and error mapping."""

from datetime import datetime, timedelta, timezone

import pytest
import requests

from src.errors import DataSourceError
from src.openf1 import OpenF1Client, parse_datetime


class FakeResponse:
    def __init__(self, payload=None, status_code=200, reason="OK", bad_json=False):
        self._payload = payload
        self.status_code = status_code
        self.reason = reason
        self.ok = 200 <= status_code < 300
        self._bad_json = bad_json

    def json(self):
        if self._bad_json:
            raise ValueError("Expecting value")
        return self._payload


class FakeHttpSession:
    def __init__(self, response=None, error=None):
        self.headers = {}
        self.response = response
        self.error = error
        self.calls = []

    def get(self, url, params=None, timeout=None):
        self.calls.append({"url": url, "params": params, "timeout": timeout})
        if self.error is not None:
            raise self.error
        return self.response


def test_fetch_sessions_builds_filtered_query():
    http = FakeHttpSession(
        FakeResponse(
            [
                {
                    "session_key": 9472,
                    "meeting_key": 1229,
                    "session_name": "Race",
                    "location": "Sakhir",
                    "year": 2024,
                    "gmt_offset": "03:00:00",
                }
            ]
        )
    )
    client = OpenF1Client("https://api.openf1.org/v1/", timeout=5, session=http)

    [session] = client.fetch_sessions(year=2024)

    call = http.calls[0]
    assert call["url"] == "https://api.openf1.org/v1/sessions"
    assert call["params"] == [("year", "2024")]
    assert call["timeout"] == 5
    assert http.headers["Accept"] == "application/json"
    assert session.session_key == 9472
    assert session.display_name == "Sakhir - Race"


def test_fetch_team_radio_uses_date_range_operators():
    http = FakeHttpSession(
        FakeResponse(
            [
                {
                    "driver_number": 16,
                    "recording_url": "https://livetiming.formula1.com/r/16.mp3",
                    "session_key": 9472,
                    "date": "2024-03-02T15:10:00+00:00",
                }
            ]
        )
    )
    client = OpenF1Client(session=http)

    [radio] = client.fetch_team_radio(session_key=9472, date_start="2024-03-01")

    assert http.calls[0]["params"] == [("session_key", "9472"), ("date>=", "2024-03-01")]
    assert radio.driver_number == 16


def test_non_2xx_status_raises_data_source_error():
    http = FakeHttpSession(FakeResponse(status_code=503, reason="Service Unavailable"))
    client = OpenF1Client(session=http)

    with pytest.raises(DataSourceError) as excinfo:
        client.fetch_drivers(session_key=1)

    assert excinfo.value.status == 503
    assert str(excinfo.value) == "OpenF1 API error: 503 Service Unavailable"


def test_transport_failure_raises_data_source_error():
    client = OpenF1Client(session=FakeHttpSession(error=requests.ConnectionError("refused")))

    with pytest.raises(DataSourceError) as excinfo:
        client.fetch_sessions()

    assert excinfo.value.status == 0


def test_invalid_json_raises_data_source_error():
    client = OpenF1Client(session=FakeHttpSession(FakeResponse(bad_json=True)))

    with pytest.raises(DataSourceError):
        client.fetch_meetings(year=2024)


def test_non_list_payload_is_treated_as_empty():
    client = OpenF1Client(session=FakeHttpSession(FakeResponse({"detail": "Not found"})))

    assert client.fetch_sessions(session_key=1) == []


def test_parse_datetime_normalizes_to_naive_utc():
    parsed = parse_datetime("2024-03-02T18:00:00+03:00")

    assert parsed.tzinfo is None
    assert (parsed.hour, parsed.minute) == (15, 0)
    assert parse_datetime("") is None
    assert parse_datetime("not a date") is None


def test_fetch_latest_team_radio_filters_from_days_ago():
    http = FakeHttpSession(FakeResponse([]))
    client = OpenF1Client(session=http)

    assert client.fetch_latest_team_radio(days=7) == []

    [(name, value)] = http.calls[0]["params"]
    since = datetime.fromisoformat(value)
    assert name == "date>="
    assert http.calls[0]["url"].endswith("/team_radio")
    assert abs(datetime.now(timezone.utc) - since - timedelta(days=7)) < timedelta(minutes=1)
