import threading

import pytest

from notevoice.confidence import (
    StyleConfidenceTracker,
    compute_confidence,
    confidence_category,
    experience_bonus,
)
from notevoice.errors import InvalidInputError
from notevoice.models import ConfidenceCategory, GenerationAnalyticsRecord


def make_record(user_id="user-1", rating=None, match=None, note_id="note-1"):
    return GenerationAnalyticsRecord(
        user_id=user_id,
        note_id=note_id,
        original_generated="He folded laundry and did well.",
        user_satisfaction_score=rating,
        style_match_score=match
    )


@pytest.fixture
def tracker(store):
    return StyleConfidenceTracker(store)


# =============================================================================
# Pure computation
# =============================================================================

def test_no_history_uses_defaults():
    breakdown = compute_confidence([])
    assert breakdown.avg_satisfaction == 0.6
    assert breakdown.avg_style_match == 0.5
    assert breakdown.experience_bonus == 0.0
    assert breakdown.score == pytest.approx(0.44)
    assert breakdown.category == ConfidenceCategory.MEDIUM


def test_experienced_user():
    records = [make_record(rating=5, match=0.9) for _ in range(60)]
    breakdown = compute_confidence(records)
    assert breakdown.score == pytest.approx(0.96)
    assert breakdown.category == ConfidenceCategory.EXCELLENT


def test_score_is_clamped():
    records = [make_record(rating=5, match=1.0) for _ in range(80)]
    assert compute_confidence(records).score == 1.0

    records = [make_record(rating=1, match=0.0)]
    assert 0.0 <= compute_confidence(records).score <= 1.0


def test_unrated_records_count_towards_experience():
    records = [make_record() for _ in range(12)]
    breakdown = compute_confidence(records)
    assert breakdown.experience_bonus == 0.10
    assert breakdown.score == pytest.approx(0.54)


@pytest.mark.parametrize("count,bonus", [
    (0, 0.0), (1, 0.01), (9, 0.09), (10, 0.10), (19, 0.10),
    (20, 0.15), (49, 0.15), (50, 0.20), (500, 0.20),
])
def test_experience_bonus_steps(count, bonus):
    assert experience_bonus(count) == pytest.approx(bonus)


@pytest.mark.parametrize("score,category", [
    (1.0, ConfidenceCategory.EXCELLENT),
    (0.85, ConfidenceCategory.EXCELLENT),
    (0.849999, ConfidenceCategory.HIGH),
    (0.70, ConfidenceCategory.HIGH),
    (0.699999, ConfidenceCategory.MEDIUM),
    (0.40, ConfidenceCategory.MEDIUM),
    (0.399999, ConfidenceCategory.LOW),
    (0.0, ConfidenceCategory.LOW),
])
def test_category_boundaries(score, category):
    assert confidence_category(score) == category


# =============================================================================
# Tracker
# =============================================================================

def test_record_persists_and_recomputes(tracker, store):
    state = tracker.record(make_record(rating=4, match=0.8))

    assert state.total_generations == 1
    assert state.confidence_score == pytest.approx(0.4 * 0.8 + 0.4 * 0.8 + 0.01)
    assert store.count_analytics("user-1") == 1
    assert store.get_confidence_state("user-1") == state


def test_current_state_for_new_user(tracker):
    state = tracker.current_state("nobody")
    assert state.confidence_score == pytest.approx(0.44)
    assert state.total_generations == 0


def test_attach_feedback_recomputes(tracker):
    record = make_record()
    first = tracker.record(record)
    assert first.confidence_score == pytest.approx(0.45)

    second = tracker.attach_feedback(record.analytics_id, user_satisfaction_score=5)
    assert second.confidence_score == pytest.approx(0.61)


def test_delete_note_rebuilds_confidence(tracker):
    for _ in range(12):
        tracker.record(make_record(rating=5, match=1.0, note_id="n1"))
    before = tracker.record(make_record(note_id="n2"))
    assert before.total_generations == 13

    states = tracker.delete_note("n1")

    assert [s.user_id for s in states] == ["user-1"]
    assert states[0].total_generations == 1
    assert states[0].confidence_score == pytest.approx(0.45)
    assert tracker.current_state("user-1") == states[0]


def test_direct_store_delete_is_recomputed_on_read(tracker, store):
    for _ in range(12):
        tracker.record(make_record(note_id="n1"))
    assert tracker.current_state("user-1").total_generations == 12

    store.delete_note_analytics("n1")

    state = tracker.current_state("user-1")
    assert state.total_generations == 0
    assert state.confidence_score == pytest.approx(0.44)


def test_delete_unknown_note(tracker):
    assert tracker.delete_note("missing") == []


def test_attach_feedback_unknown_record(tracker):
    with pytest.raises(InvalidInputError):
        tracker.attach_feedback("missing", user_satisfaction_score=3)


def test_attach_feedback_invalid_rating(tracker):
    record = make_record()
    tracker.record(record)
    with pytest.raises(InvalidInputError):
        tracker.attach_feedback(record.analytics_id, user_satisfaction_score=9)


def test_concurrent_records_for_one_user(tracker, store):
    def worker():
        for _ in range(5):
            tracker.record(make_record(rating=4))

    threads = [threading.Thread(target=worker) for _ in range(4)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    state = store.get_confidence_state("user-1")
    assert store.count_analytics("user-1") == 20
    assert state.total_generations == 20
    assert state.confidence_score == pytest.approx(compute_confidence(store.list_analytics("user-1")).score)


def test_users_are_independent(tracker):
    tracker.record(make_record(user_id="a", rating=5, match=1.0))
    state_b = tracker.record(make_record(user_id="b", rating=1, match=0.0))
    assert state_b.total_generations == 1
    assert tracker.current_state("a").confidence_score > state_b.confidence_score


# =============================================================================
# Evolution
# =============================================================================

def test_evolve_records_previous_state(tracker, store):
    store.save_writing_sample("user-1", "Old sample text.")
    before = tracker.record(make_record(rating=4, match=0.7))

    evolution = tracker.evolve("user-1", "New sample text.", "User updated sample", {"edits": 2})

    assert evolution.previous_style == "Old sample text."
    assert evolution.updated_style == "New sample text."
    assert evolution.confidence_before == before.confidence_score
    assert evolution.confidence_after == pytest.approx(before.confidence_score)
    assert evolution.notes_analyzed == 1
    assert store.get_writing_sample("user-1") == "New sample text."
    assert store.list_evolution("user-1") == [evolution]


def test_first_evolution_has_no_previous_state(tracker):
    evolution = tracker.evolve("fresh", "A first sample.", "Onboarding")
    assert evolution.previous_style is None
    assert evolution.confidence_before is None
    assert evolution.confidence_after == pytest.approx(0.44)


@pytest.mark.parametrize("sample,reason", [("", "reason"), ("Sample.", ""), ("Sample.", "   ")])
def test_evolve_rejects_empty_input(tracker, sample, reason):
    with pytest.raises(InvalidInputError):
        tracker.evolve("user-1", sample, reason)
