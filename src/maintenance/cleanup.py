"""
Destructive one-shot jobs.

Both jobs announce what they are about to delete and wait a few seconds
before committing, which leaves the operator time to press Ctrl+C.
"""

import logging
import time

from src.db import CatalogStore, ClipQuery, ClipRecord, TranscriptFilter
from src.logger import log_function
from src.pipeline.pacing import SleepFn


logger = logging.getLogger("maintenance")

GRACE_PERIOD_SECONDS = 5.0
SCAN_PAGE_SIZE = 1000
DELETE_BATCH_SIZE = 100
SAMPLE_SIZE = 10


def is_short_transcript(transcript: str | None) -> bool:
    """True when the transcript holds at most one whitespace-separated word."""
    return len((transcript or "").split()) <= 1


def find_short_transcript_clips(
    store: CatalogStore, page_size: int = SCAN_PAGE_SIZE
) -> list[ClipRecord]:
    """Scan every transcribed clip and return those with a one-word transcript."""
    clips: list[ClipRecord] = []
    offset = 0
    while True:
        batch = store.find_clips(
            ClipQuery(
                transcript=TranscriptFilter.PRESENT,
                newest_first=False,
                limit=page_size,
                offset=offset,
            )
        )
        clips.extend(batch)
        if len(batch) < page_size:
            break
        offset += page_size
        print(f"Fetched {len(clips)} clips...")

    print(f"Loaded {len(clips)} clips with transcripts")
    return [clip for clip in clips if is_short_transcript(clip.transcript)]


@log_function(logger_name="maintenance", log_execution_time=True)
def clean_short_transcripts(
    store: CatalogStore,
    grace_period: float = GRACE_PERIOD_SECONDS,
    sleep: SleepFn = time.sleep,
) -> int:
    """
    Delete clips whose transcript is a single word (or blank).

    Returns:
        Number of clips deleted
    """
    short_clips = find_short_transcript_clips(store)
    print(f"Found {len(short_clips)} clips with one-word transcripts\n")

    if not short_clips:
        print("✓ No clips to remove!")
        return 0

    print("Examples of clips to be removed:")
    for clip in short_clips[:SAMPLE_SIZE]:
        print(f'  - "{clip.transcript}"')

    print(f"\n⚠ This will delete {len(short_clips)} clips. Press Ctrl+C to cancel.")
    print(f"Waiting {grace_period:.0f} seconds...\n")
    sleep(grace_period)

    clip_ids = [clip.id for clip in short_clips]
    deleted = 0
    for start in range(0, len(clip_ids), DELETE_BATCH_SIZE):
        batch = clip_ids[start : start + DELETE_BATCH_SIZE]
        try:
            store.delete_clips(batch)
        except Exception as e:
            print(f"✗ Error deleting batch: {e}")
            logger.error(f"Error deleting batch starting at {start}: {e}")
            continue
        deleted += len(batch)
        print(f"✓ Deleted {deleted}/{len(clip_ids)} clips")

    logger.info(f"Deleted {deleted} clips with short transcripts")
    return deleted


@log_function(logger_name="maintenance", log_execution_time=True)
def reset_tags(
    store: CatalogStore,
    grace_period: float = GRACE_PERIOD_SECONDS,
    sleep: SleepFn = time.sleep,
) -> int:
    """
    Delete every ClipTag row so auto-tagging can start from scratch.

    Returns:
        Number of tags deleted
    """
    print("⚠ WARNING: This will delete ALL tags from the database!")
    print(f"Waiting {grace_period:.0f} seconds... Press Ctrl+C to cancel\n")
    sleep(grace_period)

    print("Deleting all tags...")
    deleted = store.delete_all_clip_tags()
    logger.info(f"Deleted {deleted} clip tags")
    return deleted
