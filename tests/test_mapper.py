import pytest

from notevoice.mapper import (
    DEFAULT_RULES,
    REGISTER_SUBSTITUTIONS,
    ClinicalToNaturalMapper,
    MappingRule,
)

from tests.samples import FORMAL_SAMPLE, SHORT_SAMPLE


@pytest.fixture
def short_mapping(extractor):
    return ClinicalToNaturalMapper().build_mapping(extractor.extract(SHORT_SAMPLE))


def test_profile_words_are_preferred(short_mapping):
    # profile verbs are helped and did; descriptors include well
    assert short_mapping.entries["demonstrated"] == "did"
    assert short_mapping.entries["facilitated"] == "helped"
    assert short_mapping.entries["efficiently"] == "well"


def test_fallbacks_and_identity(short_mapping):
    assert short_mapping.entries["initiated"] == "started"
    assert short_mapping.entries["completed"] == "completed"
    assert "completed" not in short_mapping.changed_entries()


def test_every_rule_and_fixed_term_has_an_entry(short_mapping):
    expected = {rule.clinical for rule in DEFAULT_RULES} | set(REGISTER_SUBSTITUTIONS)
    assert set(short_mapping.entries) == expected


def test_role_phrases_kept_out_of_entries(short_mapping):
    assert "the individual" not in short_mapping.entries
    assert short_mapping.referential["the individual"] == "they"


def test_apply_rewrites_clinical_terms(short_mapping):
    text = "Demonstrated good focus and will utilize the waste receptacle."
    assert short_mapping.apply(text) == "Did good focus and will use the garbage can."


def test_apply_referential_only_on_request(short_mapping):
    text = "The individual demonstrated skills."
    assert short_mapping.apply(text) == "The individual did skills."
    assert short_mapping.apply(text, include_referential=True) == "They did skills."


def test_apply_referential_leaves_other_words(short_mapping):
    text = "The individual demonstrated skills; the client utilized the waste receptacle."
    once = short_mapping.apply_referential(text)
    assert once == "They demonstrated skills; they utilized the waste receptacle."
    assert short_mapping.apply_referential(once) == once


def test_natural_text_is_unchanged(short_mapping):
    text = "John did well and used the garbage can after a reminder."
    assert short_mapping.apply(text, include_referential=True) == text


def test_mapping_is_idempotent(short_mapping):
    once = short_mapping.apply(FORMAL_SAMPLE, include_referential=True)
    twice = short_mapping.apply(once, include_referential=True)
    assert once != FORMAL_SAMPLE
    assert twice == once


def test_non_idempotent_table_rejected():
    with pytest.raises(ValueError):
        ClinicalToNaturalMapper(rules=(), fixed={"assist": "help", "help": "aid"})


def test_value_containing_its_own_key_rejected():
    with pytest.raises(ValueError):
        ClinicalToNaturalMapper(rules=(), fixed={"utilize": "utilize tools"})


def test_duplicate_terms_rejected():
    rules = (MappingRule(clinical="utilize", kind="action", candidates=("used",)),)
    with pytest.raises(ValueError):
        ClinicalToNaturalMapper(rules=rules)
