import pytest

from notevoice.composer import GenerationInstructionComposer
from notevoice.detail import DetailLevelPolicy
from notevoice.errors import InvalidInputError
from notevoice.models import TaskContext
from notevoice.tone import ToneBlendingEngine

from tests.samples import DAY_SAMPLE, FORMAL_SAMPLE, SHORT_SAMPLE


@pytest.fixture
def composer():
    return GenerationInstructionComposer()


def compose(composer, profile, mapping, tone_level=0, detail="brief", prompt="Sarah practiced cooking skills",
            context=None, sample=DAY_SAMPLE):
    tone_block = ToneBlendingEngine().instructions(tone_level, profile, mapping)
    detail_block = DetailLevelPolicy().instructions(detail)
    return composer.compose(prompt, context, sample, profile, tone_block, detail_block, mapping=mapping)


def test_authentic_brief_instruction(engine):
    text = engine.build_instruction(
        "user-1", "Sarah practiced cooking skills", tone_level=0, detail_level="brief", sample=DAY_SAMPLE
    )
    _, mapping = engine.analyze_sample(DAY_SAMPLE)

    assert mapping.changed_entries()
    for clinical, natural in mapping.changed_entries().items():
        assert f'"{clinical}" → "{natural}"' in text
    assert "the individual" not in text.lower()
    assert '"Sarah practiced cooking skills"' in text
    assert "Target length: 30-60 words total" in text


def test_no_role_phrases_anywhere_on_the_dial(engine):
    for tone_level in (0, 25, 50, 75, 100):
        text = engine.build_instruction("user-1", "Sarah practiced cooking skills",
                                        tone_level=tone_level, sample=DAY_SAMPLE)
        assert "the individual" not in text.lower()


ROLE_PHRASES = ("the individual", "the participant", "the client")


def test_role_phrase_in_prompt_becomes_pronoun_at_tone_zero(engine):
    text = engine.build_instruction(
        "user-1", "The individual practiced cooking skills", tone_level=0, sample=DAY_SAMPLE
    )
    assert "the individual" not in text.lower()
    assert '"They practiced cooking skills"' in text


def test_prompt_kept_as_written_above_tone_zero(engine):
    text = engine.build_instruction(
        "user-1", "The individual practiced cooking skills", tone_level=40, sample=DAY_SAMPLE
    )
    assert '"The individual practiced cooking skills"' in text


def test_formal_sample_at_tone_zero(engine):
    context = TaskContext(task_description="The client will fold laundry", note_type="task")
    text = engine.build_instruction(
        "user-1", "Sarah practiced cooking skills",
        task_context=context, tone_level=0, sample=FORMAL_SAMPLE
    )
    lowered = text.lower()
    for phrase in ROLE_PHRASES:
        assert phrase not in lowered
    assert "ISP Task: They will fold laundry" in text
    assert "They participated in the session; they completed all tasks." in text


def test_style_summary_omits_role_phrases(composer, extractor):
    profile = extractor.extract(FORMAL_SAMPLE)
    assert any("individual" in phrase.split() for phrase in profile.common_phrases)

    phrases = composer.style_preservation(profile).common_phrases
    assert phrases
    for phrase in phrases:
        assert not {"individual", "participant", "client"} & set(phrase.split())


def test_section_order(composer, day_profile, day_mapping):
    text = compose(composer, day_profile, day_mapping)
    headings = [
        "CRITICAL STYLE PRESERVATION REQUIREMENTS:",
        "TONE ADJUSTMENT INSTRUCTIONS:",
        "DETAIL LEVEL INSTRUCTIONS:",
        "ORIGINAL WRITING STYLE SAMPLE:",
        "CONTENT EXPANSION GUIDELINES:",
        "TASK CONTEXT:",
        "USER'S BRIEF INPUT:",
        "ENHANCED GENERATION INSTRUCTIONS:",
        "RESPONSE FORMAT:",
    ]
    positions = [text.index(h) for h in headings]
    assert positions == sorted(positions)


def test_style_summary_uses_profile_descriptions(composer, day_profile, day_mapping):
    text = compose(composer, day_profile, day_mapping)
    assert f"Use {day_profile.sentence_style.description}" in text
    assert f"Maintain {day_profile.vocabulary_level.description}" in text
    assert f"Follow {day_profile.punctuation_style.description} patterns" in text
    assert f"Preserve {day_profile.tone_profile.overall_tone.description}" in text
    assert DAY_SAMPLE in text


def test_task_context(composer, day_profile, day_mapping):
    context = TaskContext(task_description="Laundry folding", note_type="task")
    text = compose(composer, day_profile, day_mapping, context=context)
    assert "ISP Task: Laundry folding" in text
    assert "Note Type: task" in text

    text = compose(composer, day_profile, day_mapping)
    assert "General documentation task" in text
    assert "Note Type: general" in text


def test_blank_task_description_is_general(composer, day_profile, day_mapping):
    text = compose(composer, day_profile, day_mapping, context=TaskContext(task_description="   "))
    assert "General documentation task" in text


def test_clinical_end_of_dial(composer, day_profile, day_mapping):
    text = compose(composer, day_profile, day_mapping, tone_level=100)
    assert "VOCABULARY SUBSTITUTIONS" not in text
    assert "AUTHENTIC EXPRESSIONS" not in text
    assert "TIME-BASED NARRATIVE PATTERN" not in text
    assert "clinical-register vocabulary exclusively" in text
    assert text.index("PROFESSIONAL INSTRUCTIONS") < text.index("AUTHENTICITY INSTRUCTIONS")


def test_time_guidance_rendered(composer, day_profile, day_mapping):
    text = compose(composer, day_profile, day_mapping, tone_level=10)
    assert "User writes with time markers: 7:00 AM, 9:30 AM, afternoon" in text


def test_low_signal_caution(composer, extractor, day_mapping):
    profile = extractor.extract(SHORT_SAMPLE)
    text = compose(composer, profile, day_mapping, sample=SHORT_SAMPLE)
    assert "CAUTION" in text


def test_no_blank_runs(composer, day_profile, day_mapping):
    for tone_level in (0, 50, 100):
        text = compose(composer, day_profile, day_mapping, tone_level=tone_level)
        assert "\n\n\n" not in text


def test_composition_is_pure(composer, day_profile, day_mapping):
    assert compose(composer, day_profile, day_mapping) == compose(composer, day_profile, day_mapping)


@pytest.mark.parametrize("prompt", ["", "   "])
def test_empty_prompt_rejected(composer, day_profile, day_mapping, prompt):
    with pytest.raises(InvalidInputError):
        compose(composer, day_profile, day_mapping, prompt=prompt)
