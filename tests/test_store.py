"""CatalogStore operations against an in-memory SQLite catalog."""

import pytest

from src.db import ClipQuery, TranscriptFilter
from src.errors import DuplicateTagError

from conftest import add_clip


def test_insert_clip_if_absent_dedups_on_audio_url(store):
    first = store.insert_clip_if_absent("Race - Driver 1", "https://x/1.mp3", None, None)
    second = store.insert_clip_if_absent("Race - Driver 1", "https://x/1.mp3", None, None)

    assert first is not None
    assert second is None
    assert store.count_clips() == 1
    assert store.clip_exists("https://x/1.mp3")
    assert not store.clip_exists("https://x/2.mp3")


def test_new_clip_starts_untranscribed(store):
    clip_id = store.insert_clip_if_absent("Race - Driver 44", "https://x/44.mp3", None, None)

    [clip] = store.find_clips(ClipQuery(clip_id=clip_id))
    assert clip.transcript == ""
    assert clip.title == "Race - Driver 44"


def test_transcript_filters(store):
    empty = add_clip(store, transcript="")
    missing = add_clip(store, transcript=None)
    present = add_clip(store, transcript="Box box")

    missing_ids = {c.id for c in store.find_clips(ClipQuery(transcript=TranscriptFilter.MISSING))}
    present_ids = {c.id for c in store.find_clips(ClipQuery(transcript=TranscriptFilter.PRESENT))}

    assert missing_ids == {empty, missing}
    assert present_ids == {present}
    assert store.count_clips(ClipQuery(transcript=TranscriptFilter.MISSING)) == 2


def test_find_clips_newest_first_with_limit(store):
    ids = [add_clip(store) for _ in range(3)]

    clips = store.find_clips(ClipQuery(limit=2))

    assert [c.id for c in clips] == [ids[2], ids[1]]


def test_untagged_only_excludes_tagged_clips(store):
    category_id = store.upsert_category("Overtake", "Overtaking maneuvers")
    tagged = add_clip(store, transcript="Great move")
    untagged = add_clip(store, transcript="Tyres are gone")
    store.insert_clip_tag(tagged, category_id)

    clips = store.find_clips(ClipQuery(transcript=TranscriptFilter.PRESENT, untagged_only=True))

    assert [c.id for c in clips] == [untagged]
    assert store.count_clip_tags(tagged) == 1


def test_insert_clip_tag_twice_raises_duplicate(store):
    category_id = store.upsert_category("Rage")
    clip_id = add_clip(store, transcript="What was that?!")
    store.insert_clip_tag(clip_id, category_id)

    with pytest.raises(DuplicateTagError):
        store.insert_clip_tag(clip_id, category_id)

    assert store.count_clip_tags(clip_id) == 1


def test_upsert_driver_and_race_are_idempotent(store):
    first = store.upsert_driver(1, name="Max VERSTAPPEN", team="Red Bull Racing")
    second = store.upsert_driver(1, name="Max VERSTAPPEN", team="Red Bull")
    race_a = store.upsert_race(9472, name="Sakhir - Race", season=2024)
    race_b = store.upsert_race(9472, name="Sakhir - Race", season=2024)

    assert first == second
    assert race_a == race_b
    assert store.find_driver_id(1) == first
    assert store.find_driver_id(99) is None


def test_upsert_category_updates_description(store):
    first = store.upsert_category("Funny", "old")
    second = store.upsert_category("Funny", "Humorous moments")

    [category] = store.list_categories()
    assert first == second
    assert category.description == "Humorous moments"


def test_update_transcript_unknown_clip_raises(store):
    with pytest.raises(LookupError):
        store.update_transcript("missing-id", "hello")


def test_delete_clips_removes_their_tags(store):
    category_id = store.upsert_category("Viral")
    doomed = add_clip(store, transcript="ok")
    kept = add_clip(store, transcript="keep pushing mate")
    store.insert_clip_tag(doomed, category_id)
    store.insert_clip_tag(kept, category_id)

    deleted = store.delete_clips([doomed])

    assert deleted == 1
    assert store.count_clips() == 1
    assert store.list_tagged_clip_ids() == [kept]
    assert store.delete_clips([]) == 0


def test_delete_all_clip_tags(store):
    category_id = store.upsert_category("Strategy")
    for _ in range(3):
        store.insert_clip_tag(add_clip(store, transcript="plan B"), category_id)

    assert store.delete_all_clip_tags() == 3
    assert store.list_tagged_clip_ids() == []
