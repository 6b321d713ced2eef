"""Shared fixtures: in-memory catalog, fakes for OpenF1 and the models."""

from __future__ import annotations

import itertools

import pytest

from src.db import CatalogStore, create_db_engine, create_session_factory, init_database
from src.openf1 import OpenF1Driver, OpenF1Session, TeamRadioMessage


@pytest.fixture
def engine():
    engine = create_db_engine("sqlite://")
    init_database(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def store(engine) -> CatalogStore:
    return CatalogStore(create_session_factory(engine))


class SleepRecorder:
    """Stands in for time.sleep and remembers every requested delay."""

    def __init__(self):
        self.calls: list[float] = []

    def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)


@pytest.fixture
def sleep() -> SleepRecorder:
    return SleepRecorder()


_urls = itertools.count(1)


def add_clip(store: CatalogStore, transcript: str | None = "", title: str | None = None) -> str:
    """Insert a clip with a unique audio URL and the given transcript."""
    n = next(_urls)
    clip_id = store.insert_clip_if_absent(
        title=title or f"Clip {n}",
        audio_url=f"https://livetiming.formula1.com/radio/{n}.mp3",
        driver_id=None,
        race_id=None,
    )
    if transcript != "":
        store.update_transcript(clip_id, transcript)
    return clip_id


class FakeOpenF1Client:
    """In-memory replacement for OpenF1Client keyed by session_key."""

    def __init__(self, sessions=None, drivers=None, radio=None):
        self.sessions: list[OpenF1Session] = sessions or []
        self.drivers: dict[int, list[OpenF1Driver]] = drivers or {}
        self.radio: dict[int, list[TeamRadioMessage]] = radio or {}
        self.session_queries: list[dict] = []

    def fetch_sessions(self, session_key=None, year=None, **kwargs):
        self.session_queries.append({"session_key": session_key, "year": year})
        return [
            s
            for s in self.sessions
            if (session_key is None or s.session_key == session_key)
            and (year is None or s.year == year)
        ]

    def fetch_drivers(self, session_key=None, **kwargs):
        return self.drivers.get(session_key, [])

    def fetch_team_radio(self, session_key=None, **kwargs):
        return self.radio.get(session_key, [])

    def fetch_latest_team_radio(self, days=7):
        self.latest_days = days
        return [message for messages in self.radio.values() for message in messages]


def make_session(session_key: int, year: int = 2024, location: str = "Sakhir") -> OpenF1Session:
    return OpenF1Session(
        session_key=session_key,
        meeting_key=1000 + session_key,
        session_name="Race",
        session_type="Race",
        location=location,
        date_start="2024-03-02T15:00:00+00:00",
        year=year,
    )


def make_driver(number: int, name: str = "Max VERSTAPPEN") -> OpenF1Driver:
    return OpenF1Driver(
        driver_number=number,
        full_name=name,
        name_acronym=name[:3].upper(),
        team_name="Red Bull Racing",
        team_colour="3671C6",
        country_code="NED",
    )


def make_radio(session_key: int, number: int, url: str) -> TeamRadioMessage:
    return TeamRadioMessage(
        driver_number=number,
        recording_url=url,
        session_key=session_key,
        date="2024-03-02T15:10:00.000000+00:00",
    )
