"""
One full generation round trip: instruction, generator call, analytics.

This is the only place where the style engine meets the text generator.
Timing, token estimation and retries happen here, outside the pure core.
"""
import logging
import math
import time
from typing import Any, Optional

from pydantic import BaseModel

from notevoice.engine import StyleEngine
from notevoice.llm import LLM
from notevoice.models.analytics_models import GenerationAnalyticsRecord, StyleConfidenceState
from notevoice.quality import calculate_style_match_score
from notevoice.utils.logging import get_logger, log_with_context

logger = get_logger(__name__)


class GeneratedSection(BaseModel):
    """A generated note section with its analytics record and updated confidence."""

    text: str
    analytics: GenerationAnalyticsRecord
    state: StyleConfidenceState


def estimate_tokens(text: str) -> int:
    """Rough token count: one token per four characters."""
    return math.ceil(len(text) / 4)


def generate_section(
    engine: StyleEngine,
    llm: LLM,
    user_id: str,
    note_id: str,
    raw_prompt: str,
    task_context: Any = None,
    tone_level: Optional[int] = None,
    detail_level: Any = None,
    note_section_id: Optional[str] = None,
    preferences: Any = None
) -> GeneratedSection:
    """
    Generate one note section in the user's voice and record the outcome.

    Args:
        engine: Style engine holding the user's sample and history
        llm: Text generator
        user_id: User identifier
        note_id: Note the section belongs to
        raw_prompt: The user's short input
        task_context: Task description and note type
        tone_level: 0-100, or None for the user's default
        detail_level: Detail selector, or None for the user's default
        note_section_id: Optional section identifier
        preferences: User defaults

    Returns:
        GeneratedSection

    Raises:
        InvalidInputError: If the request is invalid
        GenerationError: If the generator fails on every attempt
    """
    sample = engine.store.get_writing_sample(user_id)
    instruction = engine.build_instruction(
        user_id,
        raw_prompt,
        task_context=task_context,
        tone_level=tone_level,
        detail_level=detail_level,
        sample=sample,
        preferences=preferences
    )

    started = time.perf_counter()
    response = llm.generate(instruction)
    elapsed_ms = int((time.perf_counter() - started) * 1000)

    text = response.content.strip()
    tokens = response.total_tokens
    if tokens is None:
        tokens = estimate_tokens(instruction) + estimate_tokens(text)

    current = engine.confidence_state(user_id)
    record = GenerationAnalyticsRecord(
        user_id=user_id,
        note_id=note_id,
        note_section_id=note_section_id,
        original_generated=text,
        confidence_score=current.confidence_score,
        tokens_used=tokens,
        generation_time_ms=elapsed_ms,
        style_match_score=calculate_style_match_score(text, sample)
    )
    state = engine.record_generation_outcome(record)

    log_with_context(
        logger, logging.INFO,
        "Generated note section",
        user_id=user_id,
        note_id=note_id,
        tokens=tokens,
        generation_time_ms=elapsed_ms
    )
    return GeneratedSection(text=text, analytics=record, state=state)
