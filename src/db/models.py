"""
SQLAlchemy ORM models for the team radio catalog.

Models:
    Driver: Driver keyed by car number, refreshed on every sync
    Race: One OpenF1 session keyed by session_key
    Clip: One team radio recording with optional transcript
    Category: Fixed tagging taxonomy entry keyed by name
    ClipTag: Clip <-> Category association
    Vote: User vote on a clip (schema only, written by the web frontend)
    TimestampMixin: Provides automatic created_at/updated_at timestamps
"""

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    SmallInteger,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import declarative_base, relationship
from sqlalchemy.sql import func

Base = declarative_base()


class TimestampMixin:
    """
    Mixin adding created_at/updated_at columns.

    Both fields use database-level defaults (func.now()). Candidate queries
    order clips by created_at descending (newest first).
    """

    created_at = Column(DateTime, nullable=False, server_default=func.now())
    updated_at = Column(
        DateTime, nullable=False, server_default=func.now(), onupdate=func.now()
    )


class Driver(Base, TimestampMixin):
    """
    A driver, identified by car number.

    The number never changes once assigned. Every other column is
    overwritten by each sync (last write wins).
    """

    __tablename__ = "drivers"

    id = Column(Integer, primary_key=True, autoincrement=True)
    number = Column(Integer, nullable=False, unique=True)
    name = Column(String, nullable=True)
    team = Column(String, nullable=True)
    team_color = Column(String, nullable=True)
    country_code = Column(String, nullable=True)
    headshot_url = Column(String, nullable=True)
    name_acronym = Column(String, nullable=True)

    clips = relationship("Clip", back_populates="driver")

    def __repr__(self):
        return f"<Driver(number={self.number}, name='{self.name}', team='{self.team}')>"


class Race(Base, TimestampMixin):
    """
    An OpenF1 session (race, qualifying, practice...).

    name is "<location> - <session name>", e.g. "Monza - Race".
    """

    __tablename__ = "races"

    id = Column(Integer, primary_key=True, autoincrement=True)
    session_key = Column(Integer, nullable=False, unique=True)
    meeting_key = Column(Integer, nullable=True)
    name = Column(String, nullable=False)
    location = Column(String, nullable=True)
    season = Column(Integer, nullable=True)
    race_date = Column(DateTime, nullable=True)

    clips = relationship("Clip", back_populates="race")

    def __repr__(self):
        return f"<Race(session_key={self.session_key}, name='{self.name}', season={self.season})>"


class Clip(Base, TimestampMixin):
    """
    One team radio recording.

    Attributes:
        id: Primary key (UUID7 string, time ordered)
        title: "<session name> - Driver <number>"
        audio_url: Recording URL, used as dedup key by the sync (not unique
            at the database level)
        transcript: NULL or "" until transcribed
        duration: Length in seconds, 0 when the source does not provide it
        is_premium: Premium gating flag (managed by the web frontend)
        recorded_at: Radio message timestamp reported by OpenF1
    """

    __tablename__ = "clips"

    id = Column(String, primary_key=True)
    title = Column(String, nullable=False)
    audio_url = Column(String, nullable=False, index=True)
    transcript = Column(Text, nullable=True)
    duration = Column(Integer, nullable=False, default=0, server_default="0")
    driver_id = Column(Integer, ForeignKey("drivers.id"), nullable=True)
    race_id = Column(Integer, ForeignKey("races.id"), nullable=True)
    is_premium = Column(Boolean, nullable=False, default=False, server_default="0")
    recorded_at = Column(DateTime, nullable=True)

    driver = relationship("Driver", back_populates="clips")
    race = relationship("Race", back_populates="clips")
    tags = relationship("ClipTag", cascade="all, delete-orphan", passive_deletes=True)

    def __repr__(self):
        return f"<Clip(id={self.id}, title='{self.title}')>"


class Category(Base):
    """Entry of the tagging taxonomy. Names are matched exactly."""

    __tablename__ = "categories"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String, nullable=False, unique=True)
    description = Column(Text, nullable=True)

    def __repr__(self):
        return f"<Category(id={self.id}, name='{self.name}')>"


class ClipTag(Base):
    """Associates a clip with a category. Each pair exists at most once."""

    __tablename__ = "clip_tags"
    __table_args__ = (UniqueConstraint("clip_id", "category_id", name="uq_clip_tag"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    clip_id = Column(
        String, ForeignKey("clips.id", ondelete="CASCADE"), nullable=False, index=True
    )
    category_id = Column(
        Integer, ForeignKey("categories.id", ondelete="CASCADE"), nullable=False
    )
    created_at = Column(DateTime, nullable=False, server_default=func.now())


class Vote(Base):
    """Up (+1) or down (-1) vote of a user on a clip."""

    __tablename__ = "votes"
    __table_args__ = (UniqueConstraint("clip_id", "user_id", name="uq_vote"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    clip_id = Column(
        String, ForeignKey("clips.id", ondelete="CASCADE"), nullable=False
    )
    user_id = Column(String, nullable=False)
    value = Column(SmallInteger, nullable=False)
    created_at = Column(DateTime, nullable=False, server_default=func.now())
