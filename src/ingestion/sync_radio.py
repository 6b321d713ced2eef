"""
OpenF1 to catalog synchronisation.

For every session matching the filter: upsert the drivers, upsert the race,
then insert one clip per team radio message not cataloged yet (dedup on
recording URL). Re-running the same sync inserts nothing new.

Usage:
    uv run -m src.ingestion                    # Sync every session
    uv run -m src.ingestion --year 2024        # Sync one season
    uv run -m src.ingestion --session-key 9158 # Sync a single session
"""

import logging
from dataclasses import dataclass, asdict
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError

from src.db import CatalogStore
from src.errors import NoSessionsFound
from src.logger import log_function
from src.openf1 import OpenF1Client, OpenF1Session, parse_datetime


logger = logging.getLogger("sync_radio")


@dataclass
class SyncSummary:
    """Counters returned by a sync run."""

    sessions_processed: int = 0
    total_radio_messages: int = 0
    new_radio_messages: int = 0
    skipped_messages: int = 0

    def to_dict(self) -> dict[str, int]:
        return asdict(self)


def clip_title(session: OpenF1Session, driver_number: int) -> str:
    return f"{session.session_name} - Driver {driver_number}"


def sync_drivers(client: OpenF1Client, store: CatalogStore, session: OpenF1Session) -> int:
    """
    Upsert every driver of a session.

    A failed upsert is logged and does not stop the others.

    Returns:
        Number of drivers upserted successfully
    """
    drivers = client.fetch_drivers(session_key=session.session_key)
    print(f"   Drivers: {len(drivers)}")

    synced = 0
    for driver in drivers:
        try:
            store.upsert_driver(
                driver.driver_number,
                name=driver.full_name,
                team=driver.team_name,
                team_color=driver.team_colour,
                country_code=driver.country_code,
                headshot_url=driver.headshot_url,
                name_acronym=driver.name_acronym,
            )
            synced += 1
        except SQLAlchemyError as e:
            print(f"   ✗ Error syncing driver {driver.full_name}: {e}")
            logger.error(f"Error syncing driver {driver.driver_number}: {e}")
    return synced


def sync_session(
    client: OpenF1Client, store: CatalogStore, session: OpenF1Session
) -> Optional[SyncSummary]:
    """
    Sync drivers, race and radio messages of one session.

    Returns:
        Per-session counters, or None when the race could not be stored
        (its messages cannot be attributed, so the session is skipped)
    """
    sync_drivers(client, store, session)

    try:
        race_id = store.upsert_race(
            session.session_key,
            name=session.display_name,
            location=session.location,
            season=session.year,
            race_date=parse_datetime(session.date_start),
            meeting_key=session.meeting_key,
        )
    except SQLAlchemyError as e:
        print(f"   ✗ Error syncing race: {e}")
        logger.error(f"Error syncing race for session {session.session_key}: {e}")
        return None

    messages = client.fetch_team_radio(session_key=session.session_key)
    print(f"   Radio Messages: {len(messages)}")

    stats = SyncSummary(total_radio_messages=len(messages))

    for radio in messages:
        try:
            driver_id = store.find_driver_id(radio.driver_number)
            if driver_id is None:
                print(f"   ⚠ Driver not found for number {radio.driver_number}")
                logger.warning(
                    f"Orphan radio message {radio.recording_url}: "
                    f"driver {radio.driver_number} unknown"
                )
                stats.skipped_messages += 1
                continue

            clip_id = store.insert_clip_if_absent(
                title=clip_title(session, radio.driver_number),
                audio_url=radio.recording_url,
                driver_id=driver_id,
                race_id=race_id,
                recorded_at=parse_datetime(radio.date),
            )
        except SQLAlchemyError as e:
            print(f"   ✗ Error inserting clip: {e}")
            logger.error(f"Error inserting clip {radio.recording_url}: {e}")
            continue

        if clip_id is None:
            stats.skipped_messages += 1
        else:
            stats.new_radio_messages += 1
            logger.info(f"Added clip {clip_id}: {radio.recording_url}")

    return stats


@log_function(logger_name="sync_radio", log_args=True, log_execution_time=True)
def sync_radio_messages(
    client: OpenF1Client,
    store: CatalogStore,
    session_key: Optional[int] = None,
    year: Optional[int] = None,
) -> SyncSummary:
    """
    Sync OpenF1 sessions into the catalog.

    Sessions are processed one after the other. A session key filter takes
    precedence over a year filter; with neither, every session is synced.

    Args:
        client: OpenF1 API client
        store: Catalog store
        session_key: Only sync this session
        year: Only sync sessions of this season

    Returns:
        SyncSummary with sessions processed, total and new radio messages

    Raises:
        NoSessionsFound: If the session query returns nothing
        DataSourceError: If the OpenF1 API fails
    """
    if session_key:
        sessions = client.fetch_sessions(session_key=session_key)
    elif year:
        sessions = client.fetch_sessions(year=year)
    else:
        sessions = client.fetch_sessions()

    print(f"Found {len(sessions)} sessions")
    if not sessions:
        logger.warning(f"No sessions found (session_key={session_key}, year={year})")
        raise NoSessionsFound("No sessions found")

    return sync_sessions(client, store, sessions)


@log_function(logger_name="sync_radio", log_args=True, log_execution_time=True)
def sync_recent_radio(
    client: OpenF1Client, store: CatalogStore, days: int = 7
) -> SyncSummary:
    """
    Sync the sessions that produced radio messages in the last `days` days.

    Raises:
        NoSessionsFound: If no radio message was recorded in that window
        DataSourceError: If the OpenF1 API fails
    """
    messages = client.fetch_latest_team_radio(days=days)
    session_keys = sorted({m.session_key for m in messages if m.session_key})
    print(f"Found {len(messages)} radio messages from {len(session_keys)} sessions")

    sessions = [
        session
        for key in session_keys
        for session in client.fetch_sessions(session_key=key)
    ]
    if not sessions:
        logger.warning(f"No sessions with radio messages in the last {days} days")
        raise NoSessionsFound("No sessions found")

    return sync_sessions(client, store, sessions)


def sync_sessions(
    client: OpenF1Client, store: CatalogStore, sessions: list[OpenF1Session]
) -> SyncSummary:
    """Sync each session in turn and add up the counters."""
    summary = SyncSummary(sessions_processed=len(sessions))
    for session in sessions:
        print(
            f"\nProcessing: {session.session_name} - {session.location} ({session.year})"
        )
        print(f"   Session Key: {session.session_key}")

        stats = sync_session(client, store, session)
        if stats is None:
            continue

        summary.total_radio_messages += stats.total_radio_messages
        summary.new_radio_messages += stats.new_radio_messages
        summary.skipped_messages += stats.skipped_messages
        print(f"   ✓ Synced {stats.total_radio_messages} messages")

    logger.info(f"Sync completed: {summary.to_dict()}")
    return summary
