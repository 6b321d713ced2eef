"""
Maintenance jobs for the radio catalog.

Modules:
    taxonomy: Reference categories and the seed job
    status: Transcription and tagging progress reports
    cleanup: Short-transcript cleanup and tag reset (destructive)
    connectivity: Database and OpenAI connection checks
"""

from .taxonomy import CATEGORIES, seed_categories
from .status import TagStatus, TranscriptionStatus, tag_status, transcription_status
from .connectivity import check_database, check_openai
from .cleanup import (
    clean_short_transcripts,
    find_short_transcript_clips,
    is_short_transcript,
    reset_tags,
)

__all__ = [
    "check_database",
    "check_openai",
    "CATEGORIES",
    "seed_categories",
    "TagStatus",
    "TranscriptionStatus",
    "tag_status",
    "transcription_status",
    "clean_short_transcripts",
    "find_short_transcript_clips",
    "is_short_transcript",
    "reset_tags",
]
