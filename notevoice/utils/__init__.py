"""
Utility modules for the style engine.

This package provides structured logging and the shallow tokenisation used by
profile extraction and sample quality scoring.
"""

from notevoice.utils.logging import (
    get_logger,
    log_with_context,
    StructuredFormatter
)

from notevoice.utils.text import (
    split_sentences,
    whitespace_words,
    word_tokens,
    strip_edges,
    term_pattern,
    count_term,
    first_position,
    normalize_whitespace
)

__all__ = [
    # Logging
    'get_logger',
    'log_with_context',
    'StructuredFormatter',
    # Text
    'split_sentences',
    'whitespace_words',
    'word_tokens',
    'strip_edges',
    'term_pattern',
    'count_term',
    'first_position',
    'normalize_whitespace'
]
