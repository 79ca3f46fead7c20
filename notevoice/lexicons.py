"""
Fixed candidate word tables used by profile extraction and tone blending.

A Lexicon is immutable configuration. The extractor and tone engine take one
at construction time, so tests (or another documentation domain) can swap in
different tables without touching module state.
"""
from pydantic import BaseModel, Field


class Lexicon(BaseModel):
    """Candidate word lists and patterns for style extraction."""
    model_config = {"frozen": True, "extra": "forbid"}

    action_verbs: tuple[str, ...] = Field(
        ...,
        description="Verbs a writer may use to describe what someone did"
    )
    descriptive_words: tuple[str, ...] = Field(
        ...,
        description="Adjectives and adverbs used to describe how it went"
    )
    transitions: tuple[str, ...] = Field(
        ...,
        description="Connectives, single or multi-word"
    )
    formal_indicators: tuple[str, ...] = Field(
        ...,
        description="Words that mark clinical or formal register"
    )
    casual_indicators: tuple[str, ...] = Field(
        ...,
        description="Words and phrases that mark conversational register"
    )
    personal_pronouns: tuple[str, ...] = Field(
        ...,
        description="Pronouns that count as personal sentence openers"
    )
    known_names: tuple[str, ...] = Field(
        default_factory=tuple,
        description="First names that count as personal sentence openers"
    )
    role_phrases: tuple[str, ...] = Field(
        ...,
        description="Generic role phrases that count as formal sentence openers"
    )
    natural_patterns: tuple[str, ...] = Field(
        ...,
        description="Regular expressions for hedges, intensifiers and informal phrasing"
    )
    clinical_register: tuple[str, ...] = Field(
        ...,
        description="Professional documentation vocabulary, most general first"
    )


DEFAULT_LEXICON = Lexicon(
    action_verbs=(
        'went', 'did', 'made', 'got', 'had', 'was', 'were', 'said', 'told', 'asked',
        'helped', 'worked', 'tried', 'started', 'finished', 'completed', 'showed',
        'demonstrated', 'practiced', 'learned', 'improved', 'struggled', 'succeeded',
        'participated', 'engaged', 'focused', 'concentrated', 'enjoyed', 'liked',
        'seemed', 'appeared', 'looked', 'felt', 'thought', 'believed', 'understood',
        'slept', 'woke', 'chose', 'decided', 'joined', 'gave', 'cooked', 'cleaned',
    ),
    descriptive_words=(
        'good', 'well', 'better', 'best', 'great', 'excellent', 'positive', 'nice',
        'bad', 'difficult', 'hard', 'challenging', 'tough', 'easy', 'simple',
        'happy', 'pleased', 'excited', 'motivated', 'focused', 'calm', 'relaxed',
        'frustrated', 'upset', 'anxious', 'nervous', 'confused', 'clear',
        'successful', 'effective', 'helpful', 'useful', 'important', 'necessary',
        'quick', 'quickly', 'slow', 'fast', 'careful', 'thorough', 'detailed', 'brief',
        'big', 'complete',
    ),
    transitions=(
        'then', 'after', 'before', 'during', 'while', 'when', 'since', 'until',
        'first', 'next', 'finally', 'also', 'and', 'but', 'however', 'although',
        'because', 'so', 'therefore', 'as well', 'in addition', 'meanwhile',
    ),
    formal_indicators=(
        'demonstrated', 'exhibited', 'participated', 'completed', 'initiated',
        'individual', 'participant', 'client', 'appropriate', 'significant',
    ),
    casual_indicators=(
        'got', 'did', 'went', 'made', 'had', 'said', 'told', 'seemed',
        'really', 'pretty', 'kind of', 'a bit', 'he would', 'she would',
    ),
    personal_pronouns=('he', 'she', 'they', 'i', 'we'),
    known_names=('chad', 'sarah', 'john'),
    role_phrases=('the individual', 'the participant', 'the client'),
    natural_patterns=(
        r"\b(?:seemed to|appeared to|looked like|felt like)\b",
        r"\b(?:really|pretty|quite|very|extremely)\s+\w+",
        r"\b(?:a bit|a little|kind of|sort of)\b",
        r"\b(?:he|she|they) would\b",
        r"\b(?:got|did|went|made|had)\s+\w+",
        r"\b\w+n't\b|\b(?:he|she|they|it|that)'(?:s|ll|d)\b",
    ),
    clinical_register=(
        'individual', 'demonstrated', 'participated', 'completed', 'achieved',
        'exhibited', 'maintained', 'progressed', 'responded', 'engaged',
        'intervention', 'assessment', 'documentation', 'observation', 'support',
        'assistance', 'independence', 'communication', 'behavior', 'skills',
    ),
)
