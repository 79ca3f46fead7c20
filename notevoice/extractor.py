"""
Vocabulary profile extraction from a raw writing sample.

The extractor turns a user's reference sample into a VocabularyProfile: which
of the lexicon's verbs, descriptors and transitions the user actually reaches
for, recurring phrases, informal expressions, how they mark time, and a few
coarse structural classifications (sentence length, vocabulary level,
punctuation habit, register).

Extraction is a pure function of the sample text. Identical samples always
produce equal profiles, which is what makes the profile safe to cache by text.

Usage:
    extractor = VocabularyProfileExtractor()
    profile = extractor.extract("John helped with meal prep today. He did really well.")
    profile.action_verbs      # ['helped', 'did']
    profile.tone_profile.overall_tone   # ToneClassification.CONVERSATIONAL
"""
import logging
import re
from typing import List, Tuple

from notevoice.errors import InvalidSampleError
from notevoice.lexicons import Lexicon, DEFAULT_LEXICON
from notevoice.models.profile_models import (
    PunctuationStyle,
    SentenceStyle,
    TimePatternDescriptor,
    ToneClassification,
    ToneProfile,
    VocabularyLevel,
    VocabularyProfile,
)
from notevoice.utils.logging import get_logger, log_with_context
from notevoice.utils.text import (
    count_term,
    first_position,
    split_sentences,
    strip_edges,
    whitespace_words,
    word_tokens,
)

logger = get_logger(__name__)


TWELVE_HOUR = re.compile(r"\b\d{1,2}:\d{2}\s?(?:AM|PM)\b", re.IGNORECASE)
TWENTY_FOUR_HOUR = re.compile(r"\b\d{1,2}:\d{2}\b")
DAY_PART = re.compile(r"\b(?:morning|afternoon|evening|night)\b", re.IGNORECASE)
HABITUAL_TIME = (
    re.compile(r"\b\d{1,2}:\d{2}\s?(?:AM|PM)?\s+\w+\s+would\b", re.IGNORECASE),
    re.compile(r"\b(?:morning|afternoon|evening)\s+\w+\s+would\b", re.IGNORECASE),
)


class VocabularyProfileExtractor:
    """Extract a VocabularyProfile from a writing sample.

    Candidate word tables come from the Lexicon bound at construction.
    """

    MAX_VERBS = 15
    MAX_DESCRIPTORS = 12
    MAX_TRANSITIONS = 10
    MAX_PHRASES = 8
    MAX_EXPRESSIONS = 10
    EXPRESSIONS_PER_PATTERN = 3
    MARKERS_PER_FORMAT = 5

    def __init__(self, lexicon: Lexicon = DEFAULT_LEXICON, low_signal_word_threshold: int = 20):
        """
        Args:
            lexicon: Candidate word tables and patterns
            low_signal_word_threshold: Samples with fewer words are flagged low_signal
        """
        self.lexicon = lexicon
        self.low_signal_word_threshold = low_signal_word_threshold
        self._natural_patterns = tuple(re.compile(p) for p in lexicon.natural_patterns)
        self._personal_openers = frozenset(
            w.lower() for w in lexicon.personal_pronouns + lexicon.known_names
        )

    def extract(self, sample: str) -> VocabularyProfile:
        """
        Build the style profile for a writing sample.

        Args:
            sample: The user's reference writing

        Returns:
            VocabularyProfile, flagged low_signal for very short samples

        Raises:
            InvalidSampleError: If the sample is not text or has no words
        """
        if not isinstance(sample, str):
            raise InvalidSampleError(f"Writing sample must be text, got {type(sample).__name__}")
        if not word_tokens(sample):
            raise InvalidSampleError("Writing sample is empty")

        sentences = split_sentences(sample)
        words = whitespace_words(sample)
        avg_sentence_length = sum(len(s.split()) for s in sentences) / len(sentences)
        complex_ratio = self._complex_word_ratio(sample)

        low_signal = len(words) < self.low_signal_word_threshold
        if low_signal:
            log_with_context(
                logger, logging.WARNING,
                "Writing sample too short for reliable extraction",
                word_count=len(words),
                threshold=self.low_signal_word_threshold
            )

        profile = VocabularyProfile(
            action_verbs=self._scan(sample, self.lexicon.action_verbs, self.MAX_VERBS),
            descriptive_words=self._scan(sample, self.lexicon.descriptive_words, self.MAX_DESCRIPTORS),
            transitions=self._scan(sample, self.lexicon.transitions, self.MAX_TRANSITIONS),
            common_phrases=self._common_phrases(sentences),
            natural_expressions=self._natural_expressions(sample),
            time_patterns=self._time_patterns(sample),
            sentence_style=self._sentence_style(avg_sentence_length),
            avg_sentence_length=round(avg_sentence_length, 1),
            vocabulary_level=self._vocabulary_level(complex_ratio),
            complex_word_ratio=round(complex_ratio, 4),
            punctuation_style=self._punctuation_style(sample, len(sentences)),
            tone_profile=self._tone_profile(sample, sentences),
            word_count=len(words),
            sentence_count=len(sentences),
            low_signal=low_signal
        )

        log_with_context(
            logger, logging.DEBUG,
            "Extracted vocabulary profile",
            word_count=profile.word_count,
            tone=profile.tone_profile.overall_tone.value,
            verbs=len(profile.action_verbs)
        )
        return profile

    # ==========================================================================
    # Structural classifications
    # ==========================================================================

    @staticmethod
    def _sentence_style(avg_sentence_length: float) -> SentenceStyle:
        if avg_sentence_length > 20:
            return SentenceStyle.COMPLEX
        if avg_sentence_length > 12:
            return SentenceStyle.MODERATE
        return SentenceStyle.CONCISE

    @staticmethod
    def _complex_word_ratio(sample: str) -> float:
        tokens = word_tokens(sample)
        return sum(1 for t in tokens if len(t) >= 8) / len(tokens)

    @staticmethod
    def _vocabulary_level(complex_ratio: float) -> VocabularyLevel:
        if complex_ratio > 0.15:
            return VocabularyLevel.ADVANCED
        if complex_ratio > 0.08:
            return VocabularyLevel.MODERATE
        return VocabularyLevel.ACCESSIBLE

    @staticmethod
    def _punctuation_style(sample: str, sentence_count: int) -> PunctuationStyle:
        if ";" in sample:
            return PunctuationStyle.FORMAL
        if "—" in sample or "--" in sample or " - " in sample:
            return PunctuationStyle.DASHES
        if sample.count(",") > sentence_count * 0.5:
            return PunctuationStyle.COMMA_RICH
        return PunctuationStyle.SIMPLE

    # ==========================================================================
    # Vocabulary
    # ==========================================================================

    @staticmethod
    def _scan(sample: str, candidates: Tuple[str, ...], limit: int) -> List[str]:
        """Candidates present in the sample, most frequent first, then earliest first."""
        found = []
        seen = set()
        for term in candidates:
            key = term.lower()
            if key in seen:
                continue
            seen.add(key)
            count = count_term(sample, term)
            if count:
                found.append((-count, first_position(sample, term), key))
        found.sort()
        return [term for _, _, term in found[:limit]]

    def _common_phrases(self, sentences: List[str]) -> List[str]:
        phrases = []
        for sentence in sentences:
            tokens = [strip_edges(w).lower() for w in sentence.split()]
            tokens = [t for t in tokens if t]

            for i in range(len(tokens) - 1):
                phrase = f"{tokens[i]} {tokens[i + 1]}"
                if len(phrase) > 6 and phrase not in phrases:
                    phrases.append(phrase)

            for i in range(len(tokens) - 2):
                phrase = f"{tokens[i]} {tokens[i + 1]} {tokens[i + 2]}"
                if len(phrase) > 10 and phrase not in phrases:
                    phrases.append(phrase)

        return phrases[:self.MAX_PHRASES]

    def _natural_expressions(self, sample: str) -> List[str]:
        lowered = sample.lower()
        expressions = []
        for pattern in self._natural_patterns:
            matches = [m.group(0) for m in pattern.finditer(lowered)]
            for match in matches[:self.EXPRESSIONS_PER_PATTERN]:
                if match not in expressions:
                    expressions.append(match)
        return expressions[:self.MAX_EXPRESSIONS]

    # ==========================================================================
    # Time references
    # ==========================================================================

    def _time_patterns(self, sample: str) -> TimePatternDescriptor:
        twelve = list(TWELVE_HOUR.finditer(sample))
        twelve_spans = [m.span() for m in twelve]
        twenty_four = [
            m for m in TWENTY_FOUR_HOUR.finditer(sample)
            if not any(start <= m.start() < end for start, end in twelve_spans)
        ]
        day_parts = list(DAY_PART.finditer(sample))

        markers = []
        seen = set()
        time_format = None
        for fmt, matches in (("12-hour", twelve), ("24-hour", twenty_four), ("descriptive", day_parts)):
            kept = 0
            for match in matches:
                key = " ".join(match.group(0).lower().split())
                if key in seen or kept >= self.MARKERS_PER_FORMAT:
                    continue
                seen.add(key)
                markers.append(match.group(0))
                kept += 1
            if kept and time_format is None:
                time_format = fmt

        sequential = len(seen) >= 2
        narrative = sequential or any(p.search(sample) for p in HABITUAL_TIME)

        return TimePatternDescriptor(
            has_time_markers=bool(markers),
            time_format=time_format,
            time_markers=markers,
            uses_sequential_timing=sequential,
            time_based_narrative=narrative
        )

    # ==========================================================================
    # Register
    # ==========================================================================

    def _tone_profile(self, sample: str, sentences: List[str]) -> ToneProfile:
        formal_count = sum(count_term(sample, w) for w in self.lexicon.formal_indicators)
        casual_count = sum(count_term(sample, w) for w in self.lexicon.casual_indicators)

        personal_starters = 0
        role_starters = 0
        for sentence in sentences:
            tokens = [strip_edges(w).lower() for w in sentence.split()]
            tokens = [t for t in tokens if t]
            if not tokens:
                continue
            if tokens[0] in self._personal_openers:
                personal_starters += 1
            for phrase in self.lexicon.role_phrases:
                parts = phrase.lower().split()
                if tokens[:len(parts)] == parts:
                    role_starters += 1
                    break

        tone_score = 2 * formal_count - 2 * casual_count + 3 * role_starters - personal_starters

        if tone_score > 5:
            overall = ToneClassification.FORMAL
        elif tone_score < -3:
            overall = ToneClassification.CONVERSATIONAL
        else:
            overall = ToneClassification.BALANCED

        return ToneProfile(
            overall_tone=overall,
            tone_score=tone_score,
            formal_count=formal_count,
            casual_count=casual_count,
            personal_starters=personal_starters,
            role_starters=role_starters
        )
