"""
Catalog store: the narrow persistence interface used by the pipelines.

Pipelines never build SQL themselves. They describe the clips they want with
a ClipQuery and call one of the named operations below. Every write runs in
its own session and commits immediately, so an interrupted batch leaves the
catalog "partially processed" but never inconsistent.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Iterable, Optional

import uuid_utils as uuid
from sqlalchemy import and_, delete, exists, func, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import sessionmaker

from src.errors import DuplicateTagError
from .database import session_scope
from .models import Category, Clip, ClipTag, Driver, Race, Vote


logger = logging.getLogger("database")


class TranscriptFilter(str, Enum):
    """Transcript state used to select clips."""

    ANY = "any"
    MISSING = "missing"  # NULL or empty string
    PRESENT = "present"  # non-NULL and non-empty


@dataclass
class ClipQuery:
    """
    Typed description of a clip selection.

    Attributes:
        clip_id: Select exactly this clip (other filters still apply)
        transcript: Transcript state filter
        untagged_only: Only clips with zero ClipTag rows
        newest_first: Order by creation time descending (ascending if False)
        limit: Maximum number of rows (None for no limit)
        offset: Rows to skip, for pagination
    """

    clip_id: Optional[str] = None
    transcript: TranscriptFilter = TranscriptFilter.ANY
    untagged_only: bool = False
    newest_first: bool = True
    limit: Optional[int] = None
    offset: int = 0


@dataclass(frozen=True)
class ClipRecord:
    """Detached, read-only view of a clip row."""

    id: str
    title: str
    audio_url: str
    transcript: Optional[str]
    driver_id: Optional[int]
    race_id: Optional[int]
    created_at: Optional[datetime]

    @classmethod
    def from_model(cls, clip: Clip) -> "ClipRecord":
        return cls(
            id=clip.id,
            title=clip.title,
            audio_url=clip.audio_url,
            transcript=clip.transcript,
            driver_id=clip.driver_id,
            race_id=clip.race_id,
            created_at=clip.created_at,
        )


@dataclass(frozen=True)
class CategoryRecord:
    id: int
    name: str
    description: Optional[str]


def _is_unique_violation(error: IntegrityError) -> bool:
    message = str(error.orig).lower()
    return "unique" in message or "duplicate" in message


class CatalogStore:
    """SQLAlchemy-backed implementation of the catalog operations."""

    def __init__(self, session_factory: sessionmaker):
        self.session_factory = session_factory

    # ------------------------------------------------------------------
    # Drivers and races
    # ------------------------------------------------------------------

    def upsert_driver(self, number: int, **fields: Any) -> int:
        """
        Insert or update a driver keyed by car number.

        Args:
            number: Driver number (natural key)
            fields: Driver columns (name, team, team_color, ...); all overwritten

        Returns:
            Database id of the driver
        """
        with session_scope(self.session_factory) as session:
            driver = session.scalars(
                select(Driver).where(Driver.number == number)
            ).first()
            if driver is None:
                driver = Driver(number=number)
                session.add(driver)
            for key, value in fields.items():
                setattr(driver, key, value)
            session.commit()
            return driver.id

    def upsert_race(self, session_key: int, **fields: Any) -> int:
        """
        Insert or update a race keyed by OpenF1 session key.

        Returns:
            Database id of the race
        """
        with session_scope(self.session_factory) as session:
            race = session.scalars(
                select(Race).where(Race.session_key == session_key)
            ).first()
            if race is None:
                race = Race(session_key=session_key)
                session.add(race)
            for key, value in fields.items():
                setattr(race, key, value)
            session.commit()
            return race.id

    def find_driver_id(self, number: int) -> Optional[int]:
        """Return the id of the driver with this number, or None."""
        with session_scope(self.session_factory) as session:
            return session.scalar(select(Driver.id).where(Driver.number == number))

    # ------------------------------------------------------------------
    # Clips
    # ------------------------------------------------------------------

    def clip_exists(self, audio_url: str) -> bool:
        with session_scope(self.session_factory) as session:
            found = session.scalar(
                select(Clip.id).where(Clip.audio_url == audio_url).limit(1)
            )
            return found is not None

    def insert_clip_if_absent(
        self,
        title: str,
        audio_url: str,
        driver_id: Optional[int],
        race_id: Optional[int],
        recorded_at: Optional[datetime] = None,
    ) -> Optional[str]:
        """
        Insert a new, untranscribed clip unless one with the same audio URL exists.

        The existence check and the insert share one session but no lock:
        two concurrent syncs can still both insert.

        Returns:
            Id of the new clip, or None if the audio URL was already cataloged
        """
        with session_scope(self.session_factory) as session:
            existing = session.scalar(
                select(Clip.id).where(Clip.audio_url == audio_url).limit(1)
            )
            if existing is not None:
                return None

            clip = Clip(
                id=str(uuid.uuid7()),
                title=title,
                audio_url=audio_url,
                driver_id=driver_id,
                race_id=race_id,
                recorded_at=recorded_at,
                duration=0,
                transcript="",
            )
            session.add(clip)
            session.commit()
            return clip.id

    def _clip_conditions(self, query: ClipQuery) -> list:
        conditions = []
        if query.clip_id is not None:
            conditions.append(Clip.id == query.clip_id)
        if query.transcript == TranscriptFilter.MISSING:
            conditions.append(or_(Clip.transcript.is_(None), Clip.transcript == ""))
        elif query.transcript == TranscriptFilter.PRESENT:
            conditions.append(
                and_(Clip.transcript.is_not(None), Clip.transcript != "")
            )
        if query.untagged_only:
            conditions.append(~exists().where(ClipTag.clip_id == Clip.id))
        return conditions

    def find_clips(self, query: ClipQuery) -> list[ClipRecord]:
        """Return the clips matching query, ordered by creation time."""
        stmt = select(Clip).where(*self._clip_conditions(query))
        if query.newest_first:
            stmt = stmt.order_by(Clip.created_at.desc(), Clip.id.desc())
        else:
            stmt = stmt.order_by(Clip.created_at.asc(), Clip.id.asc())
        if query.offset:
            stmt = stmt.offset(query.offset)
        if query.limit is not None:
            stmt = stmt.limit(query.limit)

        with session_scope(self.session_factory) as session:
            return [ClipRecord.from_model(clip) for clip in session.scalars(stmt)]

    def count_clips(self, query: Optional[ClipQuery] = None) -> int:
        """Count clips matching query (limit/offset are ignored)."""
        query = query or ClipQuery()
        stmt = select(func.count(Clip.id)).where(*self._clip_conditions(query))
        with session_scope(self.session_factory) as session:
            return session.scalar(stmt) or 0

    def update_transcript(self, clip_id: str, transcript: str) -> None:
        """
        Store the transcript of a clip.

        Raises:
            LookupError: If the clip no longer exists
        """
        with session_scope(self.session_factory) as session:
            clip = session.get(Clip, clip_id)
            if clip is None:
                raise LookupError(f"Clip {clip_id} not found")
            clip.transcript = transcript
            session.commit()

    def delete_clips(self, clip_ids: Iterable[str]) -> int:
        """
        Hard-delete clips together with their tags and votes.

        Returns:
            Number of clips deleted
        """
        ids = list(clip_ids)
        if not ids:
            return 0
        with session_scope(self.session_factory) as session:
            session.execute(delete(ClipTag).where(ClipTag.clip_id.in_(ids)))
            session.execute(delete(Vote).where(Vote.clip_id.in_(ids)))
            result = session.execute(delete(Clip).where(Clip.id.in_(ids)))
            session.commit()
            return result.rowcount

    # ------------------------------------------------------------------
    # Categories and tags
    # ------------------------------------------------------------------

    def upsert_category(self, name: str, description: Optional[str] = None) -> int:
        """Insert or update a taxonomy entry keyed by name. Returns its id."""
        with session_scope(self.session_factory) as session:
            category = session.scalars(
                select(Category).where(Category.name == name)
            ).first()
            if category is None:
                category = Category(name=name)
                session.add(category)
            category.description = description
            session.commit()
            return category.id

    def list_categories(self) -> list[CategoryRecord]:
        """Return the whole taxonomy ordered by name."""
        with session_scope(self.session_factory) as session:
            return [
                CategoryRecord(id=c.id, name=c.name, description=c.description)
                for c in session.scalars(select(Category).order_by(Category.name))
            ]

    def count_clip_tags(self, clip_id: str) -> int:
        with session_scope(self.session_factory) as session:
            return (
                session.scalar(
                    select(func.count(ClipTag.id)).where(ClipTag.clip_id == clip_id)
                )
                or 0
            )

    def insert_clip_tag(self, clip_id: str, category_id: int) -> None:
        """
        Tag a clip with a category.

        Raises:
            DuplicateTagError: If the pair already exists
        """
        with session_scope(self.session_factory) as session:
            session.add(ClipTag(clip_id=clip_id, category_id=category_id))
            try:
                session.commit()
            except IntegrityError as e:
                session.rollback()
                if _is_unique_violation(e):
                    raise DuplicateTagError(
                        f"Clip {clip_id} already tagged with category {category_id}"
                    ) from e
                raise

    def list_tagged_clip_ids(self, offset: int = 0, limit: int = 1000) -> list[str]:
        """Return one page of ClipTag.clip_id values (duplicates included)."""
        stmt = (
            select(ClipTag.clip_id).order_by(ClipTag.id).offset(offset).limit(limit)
        )
        with session_scope(self.session_factory) as session:
            return list(session.scalars(stmt))

    def delete_all_clip_tags(self) -> int:
        """Remove every ClipTag row. Returns the number of rows deleted."""
        with session_scope(self.session_factory) as session:
            result = session.execute(delete(ClipTag))
            session.commit()
            return result.rowcount


def create_store(database_url: str) -> CatalogStore:
    """Build a CatalogStore on a fresh engine for database_url."""
    from .database import create_db_engine, create_session_factory

    return CatalogStore(create_session_factory(create_db_engine(database_url)))
