"""
Pydantic models for extracted writing-style profiles.

A VocabularyProfile is derived from a single writing sample and never edited
in place; a new sample produces a new profile. The VocabularyMapping is derived
from the profile in turn and carries the substitution table the tone engine
draws on.
"""
import re
from enum import Enum
from typing import Literal

from pydantic import BaseModel, Field


# =============================================================================
# Style Classifications
# =============================================================================

class SentenceStyle(str, Enum):
    """Sentence length band of a writing sample."""
    CONCISE = "concise"
    MODERATE = "moderate"
    COMPLEX = "complex"

    @property
    def description(self) -> str:
        return {
            SentenceStyle.CONCISE: "concise, direct sentences",
            SentenceStyle.MODERATE: "moderate-length sentences",
            SentenceStyle.COMPLEX: "complex, detailed sentences",
        }[self]


class VocabularyLevel(str, Enum):
    """Share of long words in a writing sample."""
    ACCESSIBLE = "accessible"
    MODERATE = "moderate"
    ADVANCED = "advanced"

    @property
    def description(self) -> str:
        return {
            VocabularyLevel.ACCESSIBLE: "clear, accessible vocabulary",
            VocabularyLevel.MODERATE: "moderate professional vocabulary",
            VocabularyLevel.ADVANCED: "advanced professional vocabulary",
        }[self]


class PunctuationStyle(str, Enum):
    """Dominant punctuation habit of a writing sample."""
    SIMPLE = "simple"
    COMMA_RICH = "comma_rich"
    DASHES = "dashes"
    FORMAL = "formal"

    @property
    def description(self) -> str:
        return {
            PunctuationStyle.SIMPLE: "simple, direct punctuation",
            PunctuationStyle.COMMA_RICH: "comma-rich, detailed punctuation",
            PunctuationStyle.DASHES: "uses dashes for emphasis",
            PunctuationStyle.FORMAL: "formal punctuation with semicolons",
        }[self]


class ToneClassification(str, Enum):
    """Overall register of a writing sample."""
    FORMAL = "formal"
    BALANCED = "balanced"
    CONVERSATIONAL = "conversational"

    @property
    def description(self) -> str:
        return {
            ToneClassification.FORMAL: "formal, professional tone",
            ToneClassification.BALANCED: "balanced, approachable tone",
            ToneClassification.CONVERSATIONAL: "conversational, personal tone",
        }[self]


# =============================================================================
# Profile Components
# =============================================================================

class TimePatternDescriptor(BaseModel):
    """How the sample refers to clock times and parts of the day."""
    model_config = {"frozen": True}

    has_time_markers: bool = False
    time_format: Literal["12-hour", "24-hour", "descriptive"] | None = None
    time_markers: list[str] = Field(default_factory=list)
    uses_sequential_timing: bool = False
    time_based_narrative: bool = False


class ToneProfile(BaseModel):
    """Formal versus casual indicator counts and the resulting classification."""
    model_config = {"frozen": True}

    overall_tone: ToneClassification
    tone_score: int
    formal_count: int = Field(..., ge=0)
    casual_count: int = Field(..., ge=0)
    personal_starters: int = Field(..., ge=0)
    role_starters: int = Field(..., ge=0)

    @property
    def prefers_casual_language(self) -> bool:
        return self.casual_count > self.formal_count

    @property
    def uses_personal_pronouns(self) -> bool:
        return self.personal_starters > self.role_starters


class VocabularyProfile(BaseModel):
    """
    Structured style profile extracted from a writing sample.

    Word lists hold only candidates that actually occur in the sample, most
    frequent first. `low_signal` marks samples too short for the lists and
    classifications to be trusted; callers still use the profile.
    """
    model_config = {"frozen": True}

    action_verbs: list[str] = Field(default_factory=list)
    descriptive_words: list[str] = Field(default_factory=list)
    transitions: list[str] = Field(default_factory=list)
    common_phrases: list[str] = Field(default_factory=list)
    natural_expressions: list[str] = Field(default_factory=list)
    time_patterns: TimePatternDescriptor = Field(default_factory=TimePatternDescriptor)

    sentence_style: SentenceStyle
    avg_sentence_length: float = Field(..., ge=0)
    vocabulary_level: VocabularyLevel
    complex_word_ratio: float = Field(..., ge=0, le=1)
    punctuation_style: PunctuationStyle
    tone_profile: ToneProfile

    word_count: int = Field(..., ge=0)
    sentence_count: int = Field(..., ge=0)
    low_signal: bool = False


# =============================================================================
# Clinical-to-Natural Mapping
# =============================================================================

class VocabularyMapping(BaseModel):
    """
    Substitution table from clinical terms to the user's natural equivalents.

    `entries` covers every clinical term the mapper knows about; terms with no
    better equivalent map to themselves. `referential` maps generic role
    phrases to a personal pronoun and is only applied at full authenticity.
    """
    model_config = {"frozen": True}

    entries: dict[str, str] = Field(default_factory=dict)
    referential: dict[str, str] = Field(default_factory=dict)

    def changed_entries(self) -> dict[str, str]:
        """Entries whose natural form differs from the clinical term, in table order."""
        return {k: v for k, v in self.entries.items() if k != v}

    def apply(self, text: str, include_referential: bool = False) -> str:
        """Rewrite clinical terms in `text` with their natural equivalents.

        Matching is whole-word and case-insensitive, longest term first, in a
        single pass. A capitalised match gets a capitalised replacement.

        Args:
            text: Text to rewrite
            include_referential: Also replace generic role phrases

        Returns:
            Rewritten text. Applying the mapping to its own output is a no-op.
        """
        table = {k.lower(): v for k, v in self.changed_entries().items()}
        if include_referential:
            table.update(self._referential_table())
        return _substitute(text, table)

    def apply_referential(self, text: str) -> str:
        """Replace generic role phrases only; every other word is left as written."""
        return _substitute(text, self._referential_table())

    def _referential_table(self) -> dict[str, str]:
        return {k.lower(): v for k, v in self.referential.items() if k != v}


def _substitute(text: str, table: dict[str, str]) -> str:
    """Single-pass, whole-word, case-insensitive replacement, longest key first."""
    if not table:
        return text

    keys = sorted(table, key=len, reverse=True)
    pattern = re.compile(
        r"\b(?:" + "|".join(r"\s+".join(map(re.escape, k.split())) for k in keys) + r")\b",
        re.IGNORECASE
    )

    def _replace(match: re.Match) -> str:
        found = match.group(0)
        replacement = table[" ".join(found.lower().split())]
        if found[0].isupper():
            return replacement[0].upper() + replacement[1:]
        return replacement

    return pattern.sub(_replace, text)


# =============================================================================
# Sample Quality
# =============================================================================

class SampleQualityReport(BaseModel):
    """Onboarding feedback on how useful a writing sample is for style learning."""

    quality: Literal["excellent", "good", "fair", "needs_improvement"]
    score: float = Field(..., ge=0)
    suggestions: list[str] = Field(default_factory=list)
    strengths: list[str] = Field(default_factory=list)
    weaknesses: list[str] = Field(default_factory=list)
    metrics: dict = Field(default_factory=dict)
