import logging

import pytest

from notevoice.engine import StyleEngine
from notevoice.errors import InvalidInputError, InvalidSampleError
from notevoice.models import (
    ConfidenceCategory,
    DetailLevel,
    EditType,
    GenerationAnalyticsRecord,
    TaskContext,
    UserPreferences,
)

from tests.samples import DAY_SAMPLE, FORMAL_SAMPLE


@pytest.fixture
def onboarded(engine):
    engine.store.save_writing_sample("user-1", DAY_SAMPLE)
    return engine


def outcome(**kwargs):
    data = {
        "user_id": "user-1",
        "note_id": "note-1",
        "original_generated": "John folded his laundry and did great.",
    }
    data.update(kwargs)
    return data


# =============================================================================
# Instruction Building
# =============================================================================

def test_build_instruction_uses_stored_sample(onboarded):
    text = onboarded.build_instruction(
        "user-1",
        "John went bowling",
        task_context=TaskContext(task_description="Community outing", note_type="task"),
        tone_level=0,
        detail_level="brief"
    )
    assert "TONE SETTING: CONTINUOUS BLEND (0/100)" in text
    assert "DETAIL LEVEL: BRIEF (Concise and Essential)" in text
    assert "ISP Task: Community outing" in text
    assert '"John went bowling"' in text
    assert DAY_SAMPLE in text


def test_explicit_sample_overrides_stored(onboarded):
    text = onboarded.build_instruction("user-1", "Lunch", sample=FORMAL_SAMPLE)
    assert FORMAL_SAMPLE in text
    assert DAY_SAMPLE not in text


def test_missing_sample_raises(engine):
    with pytest.raises(InvalidInputError):
        engine.build_instruction("nobody", "John went bowling")


@pytest.mark.parametrize("prompt", ["", "   "])
def test_empty_prompt_raises(onboarded, prompt):
    with pytest.raises(InvalidInputError):
        onboarded.build_instruction("user-1", prompt)


@pytest.mark.parametrize("sample", [b"John folded his laundry.", 42])
def test_non_text_sample_raises(onboarded, sample):
    with pytest.raises(InvalidInputError):
        onboarded.build_instruction("user-1", "Lunch", sample=sample)


def test_out_of_range_tone_raises(onboarded):
    with pytest.raises(InvalidInputError):
        onboarded.build_instruction("user-1", "Lunch", tone_level=101)


def test_settings_defaults_apply(onboarded):
    text = onboarded.build_instruction("user-1", "Lunch")
    assert "CONTINUOUS BLEND (50/100)" in text
    assert "DETAIL LEVEL: BRIEF" in text


def test_preferences_fill_unset_values(onboarded):
    prefs = UserPreferences(default_tone_level=100, default_detail_level=DetailLevel.MODERATE)
    text = onboarded.build_instruction("user-1", "Lunch", preferences=prefs)
    assert "CONTINUOUS BLEND (100/100)" in text
    assert "DETAIL LEVEL: MODERATE (Balanced Detail)" in text

    text = onboarded.build_instruction("user-1", "Lunch", tone_level=10, preferences=prefs)
    assert "CONTINUOUS BLEND (10/100)" in text


def test_preferences_from_mapping(onboarded):
    text = onboarded.build_instruction(
        "user-1", "Lunch", preferences={"default_detail_level": "comprehensive"}
    )
    assert "DETAIL LEVEL: COMPREHENSIVE (Maximum Detail)" in text

    with pytest.raises(InvalidInputError):
        onboarded.build_instruction("user-1", "Lunch", preferences={"default_tone_level": 150})


def test_unknown_detail_level_is_brief(onboarded):
    text = onboarded.build_instruction("user-1", "Lunch", detail_level="verbose")
    assert "DETAIL LEVEL: BRIEF" in text


def test_invalid_task_context_raises(onboarded):
    with pytest.raises(InvalidInputError):
        onboarded.build_instruction("user-1", "Lunch", task_context={"note_type": "essay"})


# =============================================================================
# Profiles
# =============================================================================

def test_profiles_are_memoised(engine):
    first = engine.analyze_sample(DAY_SAMPLE)
    assert engine.analyze_sample(DAY_SAMPLE) is first
    assert engine.analyze_sample(FORMAL_SAMPLE) is not first


def test_long_sample_warns(engine, caplog):
    sample = "He cooked dinner with Sarah. " * 120
    with caplog.at_level(logging.WARNING, logger="notevoice.engine"):
        profile, _ = engine.analyze_sample(sample)
    assert "Writing sample longer than recommended" in caplog.text
    assert profile.word_count == 600


def test_assess_sample(engine):
    report = engine.assess_sample(DAY_SAMPLE)
    assert 0.0 <= report.score <= 1.0
    with pytest.raises(InvalidInputError):
        engine.assess_sample("  ")


# =============================================================================
# Feedback Loop
# =============================================================================

def test_record_outcome_from_mapping(engine):
    state = engine.record_generation_outcome(outcome(user_satisfaction_score=5, style_match_score=1.0))
    assert state.total_generations == 1
    assert state.confidence_score == pytest.approx(0.81)
    assert state.category == ConfidenceCategory.HIGH
    assert engine.store.count_analytics("user-1") == 1


def test_record_outcome_model(engine):
    state = engine.record_generation_outcome(GenerationAnalyticsRecord(**outcome()))
    assert state.confidence_score == pytest.approx(0.45)


def test_invalid_outcome_raises(engine):
    with pytest.raises(InvalidInputError):
        engine.record_generation_outcome(outcome(user_satisfaction_score=6))
    with pytest.raises(InvalidInputError):
        engine.record_generation_outcome({"user_id": "user-1"})


def test_learning_disabled_skips_recording(engine):
    engine.store.set_learning_enabled("user-1", False)
    state = engine.record_generation_outcome(outcome(user_satisfaction_score=5))
    assert engine.store.count_analytics("user-1") == 0
    assert state.total_generations == 0
    assert state.confidence_score == pytest.approx(0.44)


def test_record_feedback_derives_edit_type(onboarded):
    record = GenerationAnalyticsRecord(**outcome())
    onboarded.record_generation_outcome(record)

    edited = record.original_generated.replace("great", "well")
    state = onboarded.record_feedback(record.analytics_id, user_edited_version=edited, user_satisfaction_score=4)

    stored = onboarded.store.get_analytics(record.analytics_id)
    assert stored.user_edited_version == edited
    assert stored.edit_type == EditType.STYLE_CHANGE
    assert stored.user_satisfaction_score == 4
    assert stored.style_match_score is not None
    assert state.total_generations == 1


def test_record_feedback_rating_only(onboarded):
    record = GenerationAnalyticsRecord(**outcome())
    onboarded.record_generation_outcome(record)
    onboarded.record_feedback(record.analytics_id, user_satisfaction_score=2)

    stored = onboarded.store.get_analytics(record.analytics_id)
    assert stored.edit_type is None
    assert stored.style_match_score is None
    assert stored.user_satisfaction_score == 2


def test_record_feedback_unknown_record(engine):
    with pytest.raises(InvalidInputError):
        engine.record_feedback("missing", user_satisfaction_score=3)


def test_apply_style_evolution(onboarded):
    onboarded.record_generation_outcome(outcome(user_satisfaction_score=4))
    evolution = onboarded.apply_style_evolution("user-1", FORMAL_SAMPLE, "Updated sample")

    assert evolution.previous_style == DAY_SAMPLE
    assert evolution.updated_style == FORMAL_SAMPLE
    assert evolution.notes_analyzed == 1
    assert onboarded.store.get_writing_sample("user-1") == FORMAL_SAMPLE
    assert FORMAL_SAMPLE in onboarded.build_instruction("user-1", "Lunch")


def test_evolution_rejects_unusable_sample(onboarded):
    with pytest.raises(InvalidInputError):
        onboarded.apply_style_evolution("user-1", "  ", "Updated sample")
    with pytest.raises(InvalidSampleError):
        onboarded.apply_style_evolution("user-1", "... !!", "Updated sample")
    assert onboarded.store.get_writing_sample("user-1") == DAY_SAMPLE
    assert onboarded.store.list_evolution("user-1") == []


def test_delete_note_rebuilds_confidence(engine):
    for _ in range(12):
        engine.record_generation_outcome(outcome(note_id="n1", user_satisfaction_score=5, style_match_score=1.0))
    engine.record_generation_outcome(outcome(note_id="n2"))

    (state,) = engine.delete_note("n1")

    assert state.total_generations == 1
    assert state.confidence_score == pytest.approx(0.45)
    assert engine.confidence_state("user-1") == state
    assert engine.analytics_summary("user-1").total_notes == 1


def test_analytics_summary(onboarded):
    onboarded.record_generation_outcome(outcome(user_satisfaction_score=4, style_match_score=0.7))
    summary = onboarded.analytics_summary("user-1")
    assert summary.total_notes == 1
    assert summary.recent_notes == 1
    assert summary.avg_satisfaction == pytest.approx(4.0)
    assert summary.avg_confidence == onboarded.confidence_state("user-1").confidence_score


def test_injected_components_are_used(store, settings):
    engine = StyleEngine(store, settings=settings)
    assert engine.tracker.store is store
    assert engine.extractor.low_signal_word_threshold == settings.low_signal_word_threshold
