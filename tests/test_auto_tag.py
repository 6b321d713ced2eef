"""Auto-tagging: answer validation, category matching, skip rules, batching."""

import pytest
from sqlalchemy.exc import OperationalError

from src.db import ClipTag
from src.errors import CategoryParseError, DuplicateTagError, EmptyTaxonomyError
from src.maintenance import seed_categories
from src.pipeline import FixedIntervalGate
from src.tagging import (
    OpenAIClassifier,
    auto_tag_all,
    auto_tag_clips,
    parse_category_names,
)

from conftest import add_clip


class ScriptedClassifier:
    """Returns (or parses) a scripted raw answer per transcript."""

    def __init__(self, answers=None, default='["Information"]', on_call=None):
        self.answers = answers or {}
        self.default = default
        self.on_call = on_call
        self.calls: list[str] = []

    def classify(self, system_prompt, transcript):
        self.calls.append(transcript)
        if self.on_call is not None:
            self.on_call(transcript)
        return parse_category_names(self.answers.get(transcript, self.default))


@pytest.fixture
def seeded(store):
    seed_categories(store)
    return store


def _tag_names(store, clip_id):
    by_id = {c.id: c.name for c in store.list_categories()}
    with store.session_factory() as session:
        return sorted(
            by_id[t.category_id]
            for t in session.query(ClipTag).filter(ClipTag.clip_id == clip_id)
        )


@pytest.mark.parametrize(
    "raw",
    ["", "   ", "not json", '{"categories": ["Rage"]}', '["Rage", 3]', "Rage, Complaint"],
)
def test_parse_rejects_anything_but_array_of_strings(raw):
    with pytest.raises(CategoryParseError):
        parse_category_names(raw)


def test_parse_accepts_array_of_strings():
    assert parse_category_names(' ["Rage", "Complaint"] ') == ["Rage", "Complaint"]
    assert parse_category_names("[]") == []


def test_unknown_names_are_dropped(seeded, sleep):
    clip_id = add_clip(seeded, transcript="Great move into turn one")
    classifier = ScriptedClassifier(
        {"Great move into turn one": '["Overtake", "Unknown Category"]'}
    )

    summary = auto_tag_clips(seeded, classifier, sleep=sleep)

    assert summary.tagged == 1
    assert _tag_names(seeded, clip_id) == ["Overtake"]


def test_invalid_answer_fails_clip_and_batch_continues(seeded, sleep):
    older = add_clip(seeded, transcript="Tyres are gone")
    newer = add_clip(seeded, transcript="What is he doing?!")
    classifier = ScriptedClassifier({"What is he doing?!": "not json"}, default='["Complaint"]')

    summary = auto_tag_clips(seeded, classifier, sleep=sleep)

    assert summary.total == 2
    assert summary.failed == 1
    assert summary.tagged == 1
    assert _tag_names(seeded, newer) == []
    assert _tag_names(seeded, older) == ["Complaint"]


def test_every_distinct_matched_category_is_saved(seeded, sleep):
    clip_id = add_clip(seeded, transcript="Unbelievable, just unbelievable")
    classifier = ScriptedClassifier(
        default='["Rage", "Rage", "Complaint", "Incident", "Funny"]'
    )

    summary = auto_tag_clips(seeded, classifier, sleep=sleep)

    assert summary.tagged == 1
    assert _tag_names(seeded, clip_id) == ["Complaint", "Funny", "Incident", "Rage"]


def test_clips_without_transcript_or_already_tagged_are_not_candidates(seeded, sleep):
    add_clip(seeded, transcript="")
    tagged = add_clip(seeded, transcript="Simply lovely")
    category_id = seeded.list_categories()[0].id
    seeded.insert_clip_tag(tagged, category_id)
    classifier = ScriptedClassifier()

    summary = auto_tag_clips(seeded, classifier, sleep=sleep)

    assert summary.total == 0
    assert classifier.calls == []


def test_clip_tagged_concurrently_is_skipped_without_model_call(seeded, sleep):
    first = add_clip(seeded, transcript="first")
    second = add_clip(seeded, transcript="second")  # newest, processed first
    category_id = seeded.list_categories()[0].id

    def tag_other_clip(transcript):
        # Someone else tags the next clip while this one is being classified
        seeded.insert_clip_tag(first, category_id)

    classifier = ScriptedClassifier(on_call=tag_other_clip)

    summary = auto_tag_clips(seeded, classifier, sleep=sleep)

    assert classifier.calls == ["second"]
    assert summary.total == 2
    assert summary.tagged == 1
    assert summary.failed == 0
    assert summary.skipped == 1
    assert _tag_names(seeded, second) == ["Information"]


def test_no_matching_category_is_a_soft_skip(seeded, sleep):
    clip_id = add_clip(seeded, transcript="Radio check")
    classifier = ScriptedClassifier(default='["Nonsense"]')

    summary = auto_tag_clips(seeded, classifier, sleep=sleep)

    assert summary.to_dict() == {"total": 1, "tagged": 0, "failed": 0, "skipped": 1}
    assert _tag_names(seeded, clip_id) == []


def test_empty_taxonomy_raises(store, sleep):
    add_clip(store, transcript="Box box")

    with pytest.raises(EmptyTaxonomyError):
        auto_tag_clips(store, ScriptedClassifier(), sleep=sleep)


def test_clips_are_paced_half_a_second_apart(seeded, sleep):
    for n in range(3):
        add_clip(seeded, transcript=f"message {n}")

    auto_tag_clips(seeded, ScriptedClassifier(), sleep=sleep)

    assert sleep.calls == [0.5, 0.5]


def test_limit_caps_candidates(seeded, sleep):
    for n in range(5):
        add_clip(seeded, transcript=f"message {n}")

    summary = auto_tag_clips(
        seeded, ScriptedClassifier(), limit=2, gate=FixedIntervalGate(0), sleep=sleep
    )

    assert summary.total == 2


def test_auto_tag_all_runs_batches_until_done(seeded, sleep):
    for n in range(5):
        add_clip(seeded, transcript=f"message {n}")

    totals = auto_tag_all(seeded, ScriptedClassifier(), batch_size=2, pause=2.0, sleep=sleep)

    assert totals.tagged == 5
    assert sleep.calls.count(2.0) == 3


def test_auto_tag_all_examines_each_failing_clip_once(seeded, sleep):
    for n in range(3):
        add_clip(seeded, transcript=f"message {n}")
    classifier = ScriptedClassifier(default="not json")

    totals = auto_tag_all(seeded, classifier, batch_size=2, sleep=sleep)

    assert totals.total == 3
    assert totals.failed == 3
    assert totals.tagged == 0
    assert sorted(classifier.calls) == ["message 0", "message 1", "message 2"]


def test_auto_tag_all_reaches_clips_behind_unmatched_ones(seeded, sleep):
    older = add_clip(seeded, transcript="Overtake done")
    add_clip(seeded, transcript="radio check one")
    add_clip(seeded, transcript="radio check two")
    classifier = ScriptedClassifier({"Overtake done": '["Overtake"]'}, default="[]")

    totals = auto_tag_all(seeded, classifier, batch_size=2, sleep=sleep)

    assert totals.to_dict() == {"total": 3, "tagged": 1, "failed": 0, "skipped": 2}
    assert _tag_names(seeded, older) == ["Overtake"]


def test_limit_zero_selects_nothing(seeded, sleep):
    add_clip(seeded, transcript="Box box")

    summary = auto_tag_clips(seeded, ScriptedClassifier(), limit=0, sleep=sleep)

    assert summary.total == 0


class FlakyTagStore:
    """Delegates to a real store but fails or conflicts on chosen tag inserts."""

    def __init__(self, store, errors):
        self._store = store
        self.errors = list(errors)

    def __getattr__(self, name):
        return getattr(self._store, name)

    def insert_clip_tag(self, clip_id, category_id):
        error = self.errors.pop(0) if self.errors else None
        if error is not None:
            raise error
        self._store.insert_clip_tag(clip_id, category_id)


def test_duplicate_tags_only_is_a_soft_skip(seeded, sleep):
    add_clip(seeded, transcript="Safety car, safety car")
    store = FlakyTagStore(seeded, [DuplicateTagError("dup"), DuplicateTagError("dup")])
    classifier = ScriptedClassifier(default='["Safety Car", "Incident"]')

    summary = auto_tag_clips(store, classifier, sleep=sleep)

    assert summary.to_dict() == {"total": 1, "tagged": 0, "failed": 0, "skipped": 1}


def test_duplicate_tag_does_not_stop_remaining_inserts(seeded, sleep):
    clip_id = add_clip(seeded, transcript="Safety car, safety car")
    store = FlakyTagStore(seeded, [DuplicateTagError("dup"), None])
    classifier = ScriptedClassifier(default='["Safety Car", "Incident"]')

    summary = auto_tag_clips(store, classifier, sleep=sleep)

    assert summary.tagged == 1
    assert _tag_names(seeded, clip_id) == ["Incident"]


def test_store_error_after_a_saved_tag_counts_as_tagged(seeded, sleep):
    clip_id = add_clip(seeded, transcript="Engine, engine, I have no power")
    store = FlakyTagStore(seeded, [None, OperationalError("INSERT", {}, Exception("locked"))])
    classifier = ScriptedClassifier(default='["Technical Issue", "Complaint"]')

    summary = auto_tag_clips(store, classifier, sleep=sleep)

    assert summary.tagged == 1
    assert summary.failed == 0
    assert _tag_names(seeded, clip_id) == ["Technical Issue"]


def test_store_error_on_first_tag_fails_the_clip(seeded, sleep):
    add_clip(seeded, transcript="Engine, engine, I have no power")
    store = FlakyTagStore(seeded, [OperationalError("INSERT", {}, Exception("locked"))])
    classifier = ScriptedClassifier(default='["Technical Issue"]')

    summary = auto_tag_clips(store, classifier, sleep=sleep)

    assert summary.failed == 1


class FakeCompletions:
    def __init__(self, content):
        self.content = content
        self.kwargs = None

    def create(self, **kwargs):
        self.kwargs = kwargs
        message = type("Message", (), {"content": self.content})()
        choice = type("Choice", (), {"message": message})()
        return type("Completion", (), {"choices": [choice]})()


def test_openai_classifier_sends_transcript_and_parses_answer():
    completions = FakeCompletions('["Strategy"]')
    client = type("Client", (), {})()
    client.chat = type("Chat", (), {})()
    client.chat.completions = completions

    names = OpenAIClassifier(client).classify("system", "Plan B, plan B")

    assert names == ["Strategy"]
    assert completions.kwargs["model"] == "gpt-4o-mini"
    assert completions.kwargs["temperature"] == 0.3
    assert completions.kwargs["max_tokens"] == 100
    assert completions.kwargs["messages"][1]["content"] == (
        'Categorize this F1 radio message: "Plan B, plan B"'
    )
