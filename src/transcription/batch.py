"""
Batch transcription of untranscribed clips.

Clips are processed one at a time, newest first. Each clip gets up to three
transcription attempts (2s then 4s backoff) and clips are separated by a
one-second pause. A clip that keeps failing is reported and skipped: it never
stops the batch.
"""

import logging
import time
from dataclasses import dataclass, field, asdict
from typing import Any, Optional, Protocol

from src.db import CatalogStore, ClipQuery, ClipRecord, TranscriptFilter
from src.logger import log_function
from src.pipeline.pacing import FixedIntervalGate, SleepFn, retry_with_backoff


logger = logging.getLogger("transcription")

DEFAULT_LIMIT = 10
MAX_ATTEMPTS = 3
BACKOFF_BASE_SECONDS = 2.0
PAUSE_BETWEEN_CLIPS = 1.0
PREVIEW_LENGTH = 100


class Transcriber(Protocol):
    def transcribe(self, audio_url: str) -> str: ...


@dataclass
class ClipTranscriptionResult:
    """Outcome for one clip. transcript holds a short preview on success."""

    id: str
    title: str
    success: bool
    transcript: Optional[str] = None
    error: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        data = {"id": self.id, "title": self.title, "success": self.success}
        if self.success:
            data["transcript"] = self.transcript
        else:
            data["error"] = self.error
        return data


@dataclass
class TranscriptionSummary:
    total: int = 0
    successful: int = 0
    failed: int = 0
    results: list[ClipTranscriptionResult] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["results"] = [result.to_dict() for result in self.results]
        return data


def select_transcription_candidates(
    store: CatalogStore, clip_id: Optional[str] = None, limit: Optional[int] = DEFAULT_LIMIT
) -> list[ClipRecord]:
    """
    Return the clips to transcribe.

    An explicit clip id targets that clip whatever its transcript. Otherwise
    only clips whose transcript is NULL or empty are returned, newest first.
    """
    if clip_id:
        query = ClipQuery(clip_id=clip_id, limit=limit)
    else:
        query = ClipQuery(transcript=TranscriptFilter.MISSING, limit=limit)
    return store.find_clips(query)


def transcribe_clip(
    store: CatalogStore,
    transcriber: Transcriber,
    clip: ClipRecord,
    sleep: SleepFn = time.sleep,
) -> ClipTranscriptionResult:
    """Transcribe one clip with retries and persist the text. Never raises."""
    try:
        transcript = retry_with_backoff(
            lambda: transcriber.transcribe(clip.audio_url),
            max_attempts=MAX_ATTEMPTS,
            base_delay=BACKOFF_BASE_SECONDS,
            sleep=sleep,
            logger=logger,
            description=f"Transcription of clip {clip.id}",
        )
    except Exception as e:
        logger.error(f"Transcription failed for clip {clip.id}: {e}")
        return ClipTranscriptionResult(clip.id, clip.title, False, error=str(e))

    try:
        store.update_transcript(clip.id, transcript)
    except Exception as e:
        logger.error(f"Error updating database for clip {clip.id}: {e}")
        return ClipTranscriptionResult(
            clip.id, clip.title, False, error=f"Error updating database: {e}"
        )

    logger.info(f"Transcript saved for clip {clip.id}")
    return ClipTranscriptionResult(
        clip.id, clip.title, True, transcript=transcript[:PREVIEW_LENGTH]
    )


@log_function(logger_name="transcription", log_args=True, log_execution_time=True)
def transcribe_clips(
    store: CatalogStore,
    transcriber: Transcriber,
    clip_id: Optional[str] = None,
    limit: Optional[int] = DEFAULT_LIMIT,
    gate: Optional[FixedIntervalGate] = None,
    sleep: SleepFn = time.sleep,
) -> TranscriptionSummary:
    """
    Transcribe clips lacking a transcript (or one explicit clip).

    Args:
        store: Catalog store
        transcriber: Object with a transcribe(audio_url) -> str method
        clip_id: Transcribe only this clip, even if it already has a transcript
        limit: Maximum number of clips (default 10)
        gate: Pacing between clips (default: 1 second)
        sleep: Sleep used for retry backoff

    Returns:
        TranscriptionSummary with per-clip results. Zero candidates is a
        successful run with total == 0.
    """
    clips = select_transcription_candidates(store, clip_id=clip_id, limit=limit)
    summary = TranscriptionSummary(total=len(clips))

    if not clips:
        print("No clips found that need transcription!")
        return summary

    print(f"Found {len(clips)} clip(s) to transcribe\n")
    gate = gate or FixedIntervalGate(PAUSE_BETWEEN_CLIPS, sleep=sleep)

    for i, clip in enumerate(clips, 1):
        gate.wait()
        print(f"[{i}/{len(clips)}] Processing: {clip.title}")
        print(f"   Clip ID: {clip.id}")

        result = transcribe_clip(store, transcriber, clip, sleep=sleep)
        summary.results.append(result)

        if result.success:
            summary.successful += 1
            print(f'   ✓ Transcription saved: "{result.transcript}"')
        else:
            summary.failed += 1
            print(f"   ✗ Transcription failed: {result.error}")

    logger.info(
        f"Transcription run completed: {summary.successful}/{summary.total} successful, "
        f"{summary.failed} failed"
    )
    return summary
