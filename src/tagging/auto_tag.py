"""
AI auto-tagging of transcribed clips.

For each untagged clip with a transcript (newest first) the classifier picks
names from the taxonomy; every exact match becomes a ClipTag row. The tag
count is re-read right before each model call so that a clip tagged by
someone else since the candidate list was built is never sent to the model.
"""

import logging
import time
from dataclasses import dataclass, field
from typing import Any, Iterable, Optional, Protocol

from src.db import CatalogStore, CategoryRecord, ClipQuery, ClipRecord, TranscriptFilter
from src.errors import CategoryParseError, DuplicateTagError, EmptyTaxonomyError
from src.llm import classification_system_prompt
from src.logger import log_function
from src.pipeline.pacing import FixedIntervalGate, SleepFn


logger = logging.getLogger("auto_tag")

DEFAULT_LIMIT = 1000
PAGE_SIZE = 1000
PAUSE_BETWEEN_CLIPS = 0.5
BATCH_SIZE = 100
PAUSE_BETWEEN_BATCHES = 2.0


class Classifier(Protocol):
    def classify(self, system_prompt: str, transcript: str) -> list[str]: ...


@dataclass
class AutoTagSummary:
    """
    Counters of one auto-tagging run.

    Clips that were already tagged, matched no category, or only hit
    duplicate tags are soft skips: they count in total but in neither
    tagged nor failed. clip_ids lists every clip examined.
    """

    total: int = 0
    tagged: int = 0
    failed: int = 0
    clip_ids: list[str] = field(default_factory=list, repr=False)

    @property
    def skipped(self) -> int:
        return self.total - self.tagged - self.failed

    def to_dict(self) -> dict[str, Any]:
        return {
            "total": self.total,
            "tagged": self.tagged,
            "failed": self.failed,
            "skipped": self.skipped,
        }


def select_tagging_candidates(
    store: CatalogStore,
    limit: Optional[int] = None,
    page_size: int = PAGE_SIZE,
    exclude_ids: Iterable[str] = (),
) -> list[ClipRecord]:
    """
    Return untagged clips with a non-empty transcript, newest first.

    Rows are read in pages of page_size until limit (default 1000) is
    reached or the table is exhausted; clips in exclude_ids are passed over
    and the result is trimmed to limit.
    """
    requested = DEFAULT_LIMIT if limit is None else limit
    excluded = set(exclude_ids)
    clips: list[ClipRecord] = []
    offset = 0

    while len(clips) < requested:
        batch = store.find_clips(
            ClipQuery(
                transcript=TranscriptFilter.PRESENT,
                untagged_only=True,
                limit=page_size,
                offset=offset,
            )
        )
        clips.extend(clip for clip in batch if clip.id not in excluded)
        if len(batch) < page_size:
            break
        offset += page_size

    return clips[:requested]


def match_categories(
    names: list[str], categories: list[CategoryRecord]
) -> list[CategoryRecord]:
    """
    Map model-returned names to taxonomy entries by exact name.

    Unknown names are dropped and repeated names are kept once, in the
    model's order.
    """
    by_name = {category.name: category for category in categories}
    matched: list[CategoryRecord] = []
    for name in names:
        category = by_name.get(name)
        if category is None or category in matched:
            continue
        matched.append(category)
    return matched


def tag_clip(
    store: CatalogStore,
    classifier: Classifier,
    clip: ClipRecord,
    categories: list[CategoryRecord],
    system_prompt: str,
) -> Optional[bool]:
    """
    Classify and tag one clip.

    Returns:
        True if at least one tag was saved, False on failure, None for a
        soft skip (already tagged, no matching category, only duplicates)
    """
    if store.count_clip_tags(clip.id) > 0:
        print("   ⏭ Already tagged, skipping")
        return None

    print(f'   Transcript: "{(clip.transcript or "")[:80]}..."')

    try:
        names = classifier.classify(system_prompt, clip.transcript or "")
    except CategoryParseError as e:
        print(f"   ✗ {e}")
        logger.error(f"Clip {clip.id}: {e}")
        return False
    except Exception as e:
        print(f"   ✗ Error: {e}")
        logger.error(f"Classification failed for clip {clip.id}: {e}")
        return False

    matched = match_categories(names, categories)
    if not matched:
        print("   ⚠ No valid categories found")
        logger.warning(f"Clip {clip.id}: no category matched in {names}")
        return None

    saved = 0
    for category in matched:
        try:
            store.insert_clip_tag(clip.id, category.id)
            saved += 1
        except DuplicateTagError:
            logger.info(f"Clip {clip.id} already tagged with {category.name}")
        except Exception as e:
            print(f"   ✗ Error saving tags: {e}")
            logger.error(f"Error saving tag {category.name} for clip {clip.id}: {e}")
            if saved == 0:
                return False
            # The clip is tagged and will not be selected again
            logger.warning(f"Clip {clip.id} partially tagged ({saved} tags saved)")
            return True

    if saved == 0:
        print("   ⏭ Already tagged, skipping")
        return None

    print(
        f"   ✓ Tagged with: {', '.join(c.name for c in matched)} ({saved} tags saved)"
    )
    return True


@log_function(logger_name="auto_tag", log_args=True, log_execution_time=True)
def auto_tag_clips(
    store: CatalogStore,
    classifier: Classifier,
    limit: Optional[int] = None,
    gate: Optional[FixedIntervalGate] = None,
    sleep: SleepFn = time.sleep,
    exclude_ids: Iterable[str] = (),
) -> AutoTagSummary:
    """
    Tag transcribed, untagged clips with categories chosen by the classifier.

    Args:
        store: Catalog store
        classifier: Object with classify(system_prompt, transcript) -> list[str]
        limit: Maximum clips to examine (default 1000)
        gate: Pacing between clips (default: 500ms)
        sleep: Sleep used by the default gate
        exclude_ids: Clips not to examine again (already seen in this run)

    Returns:
        AutoTagSummary (total examined, tagged, failed)

    Raises:
        EmptyTaxonomyError: If no category is seeded
    """
    categories = store.list_categories()
    if not categories:
        raise EmptyTaxonomyError(
            "No categories found. Run `python -m src.maintenance seed-categories` first!"
        )
    print(f"Found {len(categories)} categories\n")

    clips = select_tagging_candidates(store, limit=limit, exclude_ids=exclude_ids)
    summary = AutoTagSummary(total=len(clips), clip_ids=[clip.id for clip in clips])

    if not clips:
        print("No clips to tag!")
        return summary

    print(f"Processing up to {len(clips)} clips (will skip already-tagged)...\n")
    system_prompt = classification_system_prompt(categories)
    gate = gate or FixedIntervalGate(PAUSE_BETWEEN_CLIPS, sleep=sleep)

    for i, clip in enumerate(clips, 1):
        gate.wait()
        print(f"[{i}/{len(clips)}] Processing: {clip.title}")

        outcome = tag_clip(store, classifier, clip, categories, system_prompt)
        if outcome is True:
            summary.tagged += 1
        elif outcome is False:
            summary.failed += 1

    logger.info(f"Auto-tagging completed: {summary.to_dict()}")
    return summary


@log_function(logger_name="auto_tag", log_execution_time=True)
def auto_tag_all(
    store: CatalogStore,
    classifier: Classifier,
    batch_size: int = BATCH_SIZE,
    pause: float = PAUSE_BETWEEN_BATCHES,
    sleep: SleepFn = time.sleep,
) -> AutoTagSummary:
    """
    Run auto_tag_clips in batches until nothing is left to tag.

    Clips examined by an earlier batch are excluded from the next ones, so
    clips that failed or matched nothing do not hide older candidates. The
    loop stops when a batch finds no unexamined candidate.

    Returns:
        Totals over all batches
    """
    totals = AutoTagSummary()
    examined: set[str] = set()
    batch_number = 1

    while True:
        print(f"\nRunning batch {batch_number}...\n")
        summary = auto_tag_clips(
            store, classifier, limit=batch_size, sleep=sleep, exclude_ids=examined
        )

        if summary.total == 0:
            print("\n✓ All clips have been tagged!")
            break

        totals.total += summary.total
        totals.tagged += summary.tagged
        totals.failed += summary.failed
        totals.clip_ids.extend(summary.clip_ids)
        examined.update(summary.clip_ids)

        batch_number += 1
        sleep(pause)

    logger.info(f"Auto-tagging of all clips completed: {totals.to_dict()}")
    return totals
