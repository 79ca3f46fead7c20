"""
Detail level policy: maps a detail selector to a length band and directives.
"""
import logging

from notevoice.models.detail_models import DetailBand, DetailLevel
from notevoice.models.prompt_models import DetailInstructionBlock
from notevoice.utils.logging import get_logger, log_with_context

logger = get_logger(__name__)


DEFAULT_BANDS = {
    DetailLevel.BRIEF: DetailBand(
        label="BRIEF (Concise and Essential)",
        min_words=30,
        max_words=60,
        directives=(
            "Keep responses SHORT and CONCISE (2-4 sentences maximum)",
            "Focus only on essential information and key points",
            "Avoid unnecessary elaboration or extensive details",
            "Include only the most critical observations or actions",
        )
    ),
    DetailLevel.MODERATE: DetailBand(
        label="MODERATE (Balanced Detail)",
        min_words=60,
        max_words=120,
        directives=(
            "Provide balanced detail with key context (1-2 short paragraphs)",
            "Include important observations and relevant background",
            "Balance brevity with necessary professional detail",
            "Include context that supports the main points",
        )
    ),
    DetailLevel.DETAILED: DetailBand(
        label="DETAILED (Full Context)",
        min_words=120,
        max_words=200,
        directives=(
            "Provide thorough documentation with full context",
            "Include detailed observations, background, and relevant details",
            "Expand on context while maintaining authenticity",
        )
    ),
    DetailLevel.COMPREHENSIVE: DetailBand(
        label="COMPREHENSIVE (Maximum Detail)",
        min_words=200,
        max_words=None,
        directives=(
            "Provide extensive, thorough documentation with complete context",
            "Include all relevant observations, background, and supporting details",
            "Expand as far as needed while keeping the user's own style",
        )
    ),
}


def resolve_detail_level(value) -> DetailLevel:
    """
    Coerce a caller-supplied detail level, falling back to BRIEF.

    Accepts DetailLevel members and case-insensitive strings. Anything else,
    including None, resolves to BRIEF.
    """
    if isinstance(value, DetailLevel):
        return value
    if isinstance(value, str):
        try:
            return DetailLevel(value.strip().lower())
        except ValueError:
            pass
    log_with_context(logger, logging.DEBUG, "Unknown detail level, using brief", requested=repr(value))
    return DetailLevel.BRIEF


class DetailLevelPolicy:
    """Build DetailInstructionBlocks from a band table."""

    def __init__(self, bands: dict[DetailLevel, DetailBand] | None = None):
        """
        Args:
            bands: One band per DetailLevel (defaults to DEFAULT_BANDS)

        Raises:
            ValueError: If any detail level has no band
        """
        self.bands = dict(DEFAULT_BANDS if bands is None else bands)
        missing = [level.value for level in DetailLevel if level not in self.bands]
        if missing:
            raise ValueError(f"Detail bands missing for levels: {missing}")

    def instructions(self, level) -> DetailInstructionBlock:
        """Return the instruction block for `level` (unknown values resolve to brief)."""
        resolved = resolve_detail_level(level)
        band = self.bands[resolved]
        return DetailInstructionBlock(
            level=resolved.value,
            label=band.label,
            min_words=band.min_words,
            max_words=band.max_words,
            directives=list(band.directives)
        )
