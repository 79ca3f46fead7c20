"""
Tokenisation helpers shared by the extractor and the quality report.

Deliberately shallow: sentences end at runs of terminal punctuation and words
are whitespace or letter runs. Nothing here tries to parse grammar.
"""
import re
from typing import List


SENTENCE_SPLIT = re.compile(r"[.!?]+")
WORD_TOKEN = re.compile(r"[A-Za-z][A-Za-z']*")
EDGE_PUNCTUATION = ",;:\"'()[]{}“”‘’"


def split_sentences(text: str) -> List[str]:
    """Split text into stripped, non-empty sentence fragments."""
    return [s.strip() for s in SENTENCE_SPLIT.split(text) if s.strip()]


def whitespace_words(text: str) -> List[str]:
    """Whitespace-delimited words, punctuation attached."""
    return text.split()


def word_tokens(text: str) -> List[str]:
    """Alphabetic word tokens (apostrophes kept), original case."""
    return WORD_TOKEN.findall(text)


def strip_edges(word: str) -> str:
    """Remove quote and clause punctuation from both ends of a word."""
    return word.strip(EDGE_PUNCTUATION)


def term_pattern(term: str) -> re.Pattern:
    """Whole-word, case-insensitive pattern for a word or multi-word term."""
    parts = [re.escape(p) for p in term.split()]
    return re.compile(r"\b" + r"\s+".join(parts) + r"\b", re.IGNORECASE)


def count_term(text: str, term: str) -> int:
    """Number of whole-word occurrences of `term` in `text`."""
    return len(term_pattern(term).findall(text))


def first_position(text: str, term: str) -> int:
    """Offset of the first whole-word occurrence of `term`, or -1."""
    match = term_pattern(term).search(text)
    return match.start() if match else -1


def normalize_whitespace(text: str) -> str:
    return " ".join(text.split())
