"""Read-only progress reports for the transcription and tagging backlogs."""

import math
from dataclasses import dataclass

from src.db import CatalogStore, ClipQuery, TranscriptFilter


PAGE_SIZE = 1000
TAGGING_BATCH_ESTIMATE = 500


def _percent(part: int, total: int) -> float:
    return round(part / (total or 1) * 100, 1)


@dataclass
class TranscriptionStatus:
    total: int
    with_transcript: int

    @property
    def without_transcript(self) -> int:
        return self.total - self.with_transcript

    @property
    def progress(self) -> float:
        return _percent(self.with_transcript, self.total)


@dataclass
class TagStatus:
    total: int
    tagged: int

    @property
    def untagged(self) -> int:
        return self.total - self.tagged

    @property
    def progress(self) -> float:
        return _percent(self.tagged, self.total)

    @property
    def estimated_batches(self) -> int:
        return math.ceil(self.untagged / TAGGING_BATCH_ESTIMATE) if self.untagged > 0 else 0


def transcription_status(store: CatalogStore) -> TranscriptionStatus:
    total = store.count_clips()
    missing = store.count_clips(ClipQuery(transcript=TranscriptFilter.MISSING))
    return TranscriptionStatus(total=total, with_transcript=total - missing)


def tag_status(store: CatalogStore, page_size: int = PAGE_SIZE) -> TagStatus:
    """
    Count tagged clips by scanning clip_tags page by page.

    A clip with several tags counts once.
    """
    tagged_ids: set[str] = set()
    offset = 0
    while True:
        batch = store.list_tagged_clip_ids(offset=offset, limit=page_size)
        if not batch:
            break
        tagged_ids.update(batch)
        offset += page_size
        if len(batch) < page_size:
            break
    return TagStatus(total=store.count_clips(), tagged=len(tagged_ids))
