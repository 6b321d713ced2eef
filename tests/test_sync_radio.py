"""Sync of OpenF1 sessions into the catalog."""

import pytest
from sqlalchemy.exc import OperationalError

from src.db import ClipQuery
from src.errors import NoSessionsFound
from src.ingestion import sync_radio_messages, sync_recent_radio

from conftest import FakeOpenF1Client, make_driver, make_radio, make_session


@pytest.fixture
def client():
    return FakeOpenF1Client(
        sessions=[make_session(9472, year=2024), make_session(9480, year=2024, location="Jeddah")],
        drivers={
            9472: [make_driver(1), make_driver(16, "Charles LECLERC")],
            9480: [make_driver(1)],
        },
        radio={
            9472: [
                make_radio(9472, 1, "https://f1/r/1.mp3"),
                make_radio(9472, 16, "https://f1/r/2.mp3"),
            ],
            9480: [make_radio(9480, 1, "https://f1/r/3.mp3")],
        },
    )


def test_sync_inserts_one_clip_per_message(client, store):
    summary = sync_radio_messages(client, store, year=2024)

    assert summary.sessions_processed == 2
    assert summary.total_radio_messages == 3
    assert summary.new_radio_messages == 3

    clips = store.find_clips(ClipQuery())
    assert {c.title for c in clips} == {"Race - Driver 1", "Race - Driver 16"}
    assert all(c.transcript == "" for c in clips)
    assert all(c.driver_id is not None and c.race_id is not None for c in clips)


def test_second_sync_inserts_nothing(client, store):
    sync_radio_messages(client, store)
    again = sync_radio_messages(client, store)

    assert again.total_radio_messages == 3
    assert again.new_radio_messages == 0
    assert store.count_clips() == 3


def test_same_recording_in_two_sessions_is_cataloged_once(store):
    client = FakeOpenF1Client(
        sessions=[make_session(1), make_session(2)],
        drivers={1: [make_driver(1)], 2: [make_driver(1)]},
        radio={
            1: [make_radio(1, 1, "https://f1/r/shared.mp3")],
            2: [make_radio(2, 1, "https://f1/r/shared.mp3")],
        },
    )

    summary = sync_radio_messages(client, store)

    assert summary.new_radio_messages == 1
    assert store.count_clips() == 1


def test_message_from_unknown_driver_is_skipped(store):
    client = FakeOpenF1Client(
        sessions=[make_session(1)],
        drivers={1: [make_driver(1)]},
        radio={1: [make_radio(1, 1, "https://f1/r/a.mp3"), make_radio(1, 99, "https://f1/r/b.mp3")]},
    )

    summary = sync_radio_messages(client, store)

    assert summary.total_radio_messages == 2
    assert summary.new_radio_messages == 1
    assert summary.skipped_messages == 1
    assert not store.clip_exists("https://f1/r/b.mp3")


def test_session_key_wins_over_year(client, store):
    summary = sync_radio_messages(client, store, session_key=9480, year=2023)

    assert client.session_queries == [{"session_key": 9480, "year": None}]
    assert summary.sessions_processed == 1
    assert summary.new_radio_messages == 1


def test_no_sessions_raises(client, store):
    with pytest.raises(NoSessionsFound):
        sync_radio_messages(client, store, year=2019)

    assert store.count_clips() == 0


class FailingUpsertStore:
    """Delegates to a real store but fails chosen driver or race upserts."""

    def __init__(self, store, driver_numbers=(), session_keys=()):
        self._store = store
        self.driver_numbers = set(driver_numbers)
        self.session_keys = set(session_keys)

    def __getattr__(self, name):
        return getattr(self._store, name)

    def upsert_driver(self, number, **fields):
        if number in self.driver_numbers:
            raise OperationalError("INSERT INTO drivers", {}, Exception("database is locked"))
        return self._store.upsert_driver(number, **fields)

    def upsert_race(self, session_key, **fields):
        if session_key in self.session_keys:
            raise OperationalError("INSERT INTO races", {}, Exception("database is locked"))
        return self._store.upsert_race(session_key, **fields)


def test_failed_driver_upsert_does_not_abort_the_session(client, store):
    failing = FailingUpsertStore(store, driver_numbers={16})

    summary = sync_radio_messages(client, failing, session_key=9472)

    # Driver 16 was never stored, so its message is an orphan
    assert summary.total_radio_messages == 2
    assert summary.new_radio_messages == 1
    assert summary.skipped_messages == 1
    assert store.find_driver_id(1) is not None
    assert store.find_driver_id(16) is None


def test_failed_race_upsert_skips_only_that_session(client, store):
    failing = FailingUpsertStore(store, session_keys={9472})

    summary = sync_radio_messages(client, failing, year=2024)

    assert summary.sessions_processed == 2
    assert summary.total_radio_messages == 1
    assert summary.new_radio_messages == 1
    assert store.clip_exists("https://f1/r/3.mp3")
    assert not store.clip_exists("https://f1/r/1.mp3")


def test_recent_sync_covers_sessions_with_recent_radio(client, store):
    summary = sync_recent_radio(client, store, days=3)

    assert client.latest_days == 3
    assert client.session_queries == [
        {"session_key": 9472, "year": None},
        {"session_key": 9480, "year": None},
    ]
    assert summary.sessions_processed == 2
    assert summary.new_radio_messages == 3


def test_recent_sync_without_radio_raises(store):
    with pytest.raises(NoSessionsFound):
        sync_recent_radio(FakeOpenF1Client(sessions=[make_session(1)]), store)
