"""
Sample quality assessment and generation scoring.

- assess_sample_quality: onboarding feedback on a writing sample
- calculate_style_match_score: heuristic score for one generated section
- classify_edit: how much the user changed a generated section
"""
import math
from typing import Optional

from rapidfuzz.distance import Levenshtein

from notevoice.lexicons import Lexicon, DEFAULT_LEXICON
from notevoice.models.analytics_models import EditType
from notevoice.models.profile_models import SampleQualityReport
from notevoice.utils.text import count_term, normalize_whitespace, split_sentences


# =============================================================================
# Sample Quality
# =============================================================================

def sentence_variety(lengths: list[int]) -> float:
    """Coefficient of variation of sentence lengths (0 for fewer than two)."""
    if len(lengths) < 2:
        return 0.0
    mean = sum(lengths) / len(lengths)
    if mean == 0:
        return 0.0
    variance = sum((n - mean) ** 2 for n in lengths) / len(lengths)
    return math.sqrt(variance) / mean


def _present(text: str, terms: tuple[str, ...]) -> int:
    return sum(1 for term in terms if count_term(text, term))


def sample_metrics(sample: str, lexicon: Lexicon = DEFAULT_LEXICON) -> dict:
    """Measurements used by the quality score and its rule lists."""
    sentences = split_sentences(sample)
    words = sample.split()
    word_count = len(words)
    sentence_count = max(1, len(sentences))

    unique = {"".join(ch for ch in w.lower() if ch.isalnum() or ch == "_") for w in words}
    professional = _present(sample, lexicon.clinical_register)
    formal = _present(sample, lexicon.formal_indicators)
    casual = _present(sample, lexicon.casual_indicators)

    return {
        "word_count": word_count,
        "sentence_count": len(sentences),
        "avg_words_per_sentence": round(word_count / sentence_count, 1),
        "sentence_variety": sentence_variety([len(s.split()) for s in sentences]),
        "vocabulary_richness": len(unique) / word_count if word_count else 0.0,
        "professional_term_count": professional,
        "uses_semicolons": ";" in sample,
        "formality_score": formal / (formal + casual + 1),
        "style_consistency": min(1.0, (professional + formal) / (casual + 1)),
    }


def _suggestions(m: dict) -> list[str]:
    suggestions = []
    if m["word_count"] < 150:
        suggestions.append("Provide a longer writing sample (150+ words) for more accurate style analysis")
    if m["sentence_variety"] < 0.3:
        suggestions.append("Try varying sentence lengths more for better flow and readability")
    if m["vocabulary_richness"] < 0.6:
        suggestions.append("Consider using more varied vocabulary to enhance writing richness")
    if m["professional_term_count"] < 3:
        suggestions.append("Include more professional healthcare terminology in your writing")
    if m["avg_words_per_sentence"] < 8:
        suggestions.append("Consider combining some shorter sentences for better flow")
    elif m["avg_words_per_sentence"] > 25:
        suggestions.append("Break up longer sentences for improved clarity")
    if m["formality_score"] < 0.3:
        suggestions.append("Consider using more formal language for professional documentation")
    return suggestions


def _strengths(m: dict) -> list[str]:
    strengths = []
    if m["word_count"] >= 200:
        strengths.append("Provides comprehensive detail in documentation")
    if m["sentence_variety"] > 0.5:
        strengths.append("Good sentence length variation creates engaging flow")
    if m["vocabulary_richness"] > 0.7:
        strengths.append("Rich vocabulary demonstrates strong communication skills")
    if m["professional_term_count"] >= 5:
        strengths.append("Excellent use of professional healthcare terminology")
    if 12 <= m["avg_words_per_sentence"] <= 20:
        strengths.append("Well-balanced sentence structure for professional writing")
    if m["formality_score"] > 0.7:
        strengths.append("Maintains appropriate professional tone throughout")
    if m["uses_semicolons"]:
        strengths.append("Sophisticated punctuation usage enhances readability")
    return strengths


def _weaknesses(m: dict) -> list[str]:
    weaknesses = []
    if m["word_count"] < 100:
        weaknesses.append("Writing sample too brief for comprehensive analysis")
    if m["sentence_variety"] < 0.2:
        weaknesses.append("Limited sentence length variation may affect readability")
    if m["vocabulary_richness"] < 0.5:
        weaknesses.append("Vocabulary could be more varied and rich")
    if m["professional_term_count"] < 2:
        weaknesses.append("Limited use of professional healthcare terminology")
    if m["avg_words_per_sentence"] < 6:
        weaknesses.append("Sentences tend to be very short and choppy")
    elif m["avg_words_per_sentence"] > 30:
        weaknesses.append("Sentences tend to be overly long and complex")
    if m["formality_score"] < 0.2:
        weaknesses.append("Writing style may be too casual for professional documentation")
    if m["style_consistency"] < 0.5:
        weaknesses.append("Inconsistent writing style throughout the sample")
    return weaknesses


def assess_sample_quality(sample: str, lexicon: Lexicon = DEFAULT_LEXICON) -> SampleQualityReport:
    """
    Score a writing sample's usefulness for style learning.

    Args:
        sample: Candidate reference writing
        lexicon: Word tables for professional, formal and casual terms

    Returns:
        SampleQualityReport with a score in [0, 1], a quality band and
        suggestions, strengths and weaknesses
    """
    m = sample_metrics(sample, lexicon)

    score = 0.5
    if m["word_count"] >= 300:
        score += 0.25
    elif m["word_count"] >= 200:
        score += 0.2
    elif m["word_count"] >= 100:
        score += 0.1

    if 12 <= m["avg_words_per_sentence"] <= 20:
        score += 0.15
    if m["sentence_variety"] > 0.6:
        score += 0.1

    score += min(0.2, m["professional_term_count"] * 0.03)
    score += min(0.1, m["vocabulary_richness"] * 0.2)

    if m["style_consistency"] > 0.7:
        score += 0.1

    score = round(min(1.0, score), 2)

    if score >= 0.85:
        quality = "excellent"
    elif score >= 0.7:
        quality = "good"
    elif score >= 0.5:
        quality = "fair"
    else:
        quality = "needs_improvement"

    return SampleQualityReport(
        quality=quality,
        score=score,
        suggestions=_suggestions(m),
        strengths=_strengths(m),
        weaknesses=_weaknesses(m),
        metrics=m
    )


# =============================================================================
# Generation Scoring
# =============================================================================

def edit_distance(a: str, b: str) -> int:
    """Character-level Levenshtein distance."""
    return Levenshtein.distance(a, b)


def _edit_ratio(original: str, edited: str) -> float:
    return edit_distance(original, edited) / max(1, len(original))


def calculate_style_match_score(
    generated: str,
    sample: str,
    edited: Optional[str] = None
) -> float:
    """
    Heuristic style match for one generated section.

    Starts at 0.5, moves up to +/-0.1 with how close the generated length is
    to the sample's, then rewards light edits and penalises heavy ones.

    Args:
        generated: Text returned by the generator
        sample: The user's reference writing
        edited: The user's edited version, if any

    Returns:
        Score in [0, 1]
    """
    longest = max(len(generated), len(sample))
    length_ratio = min(len(generated), len(sample)) / longest if longest else 1.0
    score = 0.5 + (length_ratio - 0.5) * 0.2

    if edited is not None:
        ratio = _edit_ratio(generated, edited)
        if ratio < 0.1:
            score += 0.3
        elif ratio < 0.3:
            score += 0.1
        else:
            score -= 0.2

    return max(0.0, min(1.0, score))


def classify_edit(original: str, edited: Optional[str]) -> Optional[EditType]:
    """
    Classify how the user changed a generated section.

    Args:
        original: Generated text
        edited: The user's version

    Returns:
        None if unchanged, otherwise an EditType
    """
    if edited is None or edited == original:
        return None

    norm_original = normalize_whitespace(original).lower()
    norm_edited = normalize_whitespace(edited).lower()
    if norm_original == norm_edited:
        return EditType.MINOR

    if norm_original and norm_original in norm_edited and len(norm_edited) > 1.5 * len(norm_original):
        return EditType.CONTENT_ADDITION

    ratio = _edit_ratio(original, edited)
    if ratio < 0.1:
        return EditType.MINOR
    if ratio < 0.3:
        return EditType.STYLE_CHANGE
    if ratio < 0.7:
        return EditType.MAJOR
    return EditType.COMPLETE_REWRITE
