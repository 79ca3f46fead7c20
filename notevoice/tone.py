"""
Continuous tone blending between the user's voice and clinical register.

The tone dial (0-100) is turned into two weights that always sum to one:

    authenticity = (100 - tone) / 100
    professional = tone / 100

Every part of the resulting instruction block is sized from those weights:
guidance lines switch on one at a time as a weight crosses distinct
thresholds, and the substitution, expression and clinical-term lists grow by
proportional share. Neighbouring tone values therefore never differ by more
than a line or two of instruction, at any point on the dial.

At tone 0 every mapping entry and natural expression is offered; at tone 100
all of them are withheld and the block asks for clinical register only.
"""
import logging

from notevoice.errors import InvalidInputError
from notevoice.lexicons import Lexicon, DEFAULT_LEXICON
from notevoice.models.analytics_models import UserPreferences
from notevoice.models.profile_models import VocabularyMapping, VocabularyProfile
from notevoice.models.prompt_models import GuidanceItem, Substitution, ToneInstructionBlock
from notevoice.utils.logging import get_logger, log_with_context

logger = get_logger(__name__)


AUTHENTICITY_LADDER = (
    GuidanceItem(text="CRITICAL: Sound exactly like the user wrote it themselves", threshold=0.85),
    GuidanceItem(text="Copy the user's specific word choices, phrases, and expressions", threshold=0.65),
    GuidanceItem(text="Mimic their sentence flow and rhythm patterns", threshold=0.45),
    GuidanceItem(text="Use their preferred terminology when appropriate", threshold=0.25),
    GuidanceItem(text="Preserve some personal expressions and natural language", threshold=0.01),
)

CASUAL_PREFERENCE = GuidanceItem(
    text="The user prefers casual, conversational language over formal clinical terms",
    threshold=0.55
)

PROFESSIONAL_LADDER = (
    GuidanceItem(text="Prioritize formal clinical documentation standards", threshold=0.80),
    GuidanceItem(text="Use professional healthcare terminology", threshold=0.60),
    GuidanceItem(text="Maintain clinical objectivity and formal structure", threshold=0.40),
    GuidanceItem(text="Include some professional healthcare language", threshold=0.20),
    GuidanceItem(text="Add subtle professional elements", threshold=0.01),
)

MAX_TIME_MARKERS = 3


def validate_tone_level(tone_level) -> int:
    """Return tone_level if it is an integer in [0, 100], else raise InvalidInputError."""
    if isinstance(tone_level, bool) or not isinstance(tone_level, int):
        raise InvalidInputError(f"Tone level must be an integer, got {tone_level!r}")
    if not 0 <= tone_level <= 100:
        raise InvalidInputError(f"Tone level must be between 0 and 100, got {tone_level}")
    return tone_level


def tone_weights(tone_level: int) -> tuple[float, float]:
    """Return (authenticity_weight, professional_weight) for a tone level."""
    tone_level = validate_tone_level(tone_level)
    return max(0.0, (100 - tone_level) / 100), max(0.0, tone_level / 100)


def _share(count: int, percent: int) -> int:
    """ceil(count * percent / 100) in integer arithmetic."""
    return (count * percent + 99) // 100


def substitution_priority(authentic_pct: int, position: int, count: int) -> str:
    """
    Priority label for the substitution at `position` in a table of `count`.

    Each entry has its own cut-over points, staggered across a 30-point span
    by its position: ALWAYS while authentic_pct > 40 + offset, PREFER while
    authentic_pct > 10 + offset, then CONSIDER. Earlier entries hold the
    stronger label longest, and one step of the dial relabels at most
    ceil(count / 30) entries.
    """
    offset = (30 * position) // max(1, count)
    if authentic_pct > 40 + offset:
        return "ALWAYS"
    if authentic_pct > 10 + offset:
        return "PREFER"
    return "CONSIDER"


class ToneBlendingEngine:
    """Turn a tone level, profile and mapping into a ToneInstructionBlock."""

    def __init__(self, lexicon: Lexicon = DEFAULT_LEXICON):
        self.lexicon = lexicon

    def instructions(
        self,
        tone_level: int,
        profile: VocabularyProfile,
        mapping: VocabularyMapping,
        preferences: UserPreferences | None = None
    ) -> ToneInstructionBlock:
        """
        Build the tone block for one request.

        Args:
            tone_level: 0 (the user's own voice) to 100 (clinical register)
            profile: The user's style profile
            mapping: Clinical-to-natural table built from the profile
            preferences: User defaults; controls time-pattern guidance

        Returns:
            ToneInstructionBlock ready for rendering

        Raises:
            InvalidInputError: If tone_level is not an integer in [0, 100]
        """
        authenticity, professional = tone_weights(tone_level)
        authentic_pct = 100 - tone_level
        preferences = preferences or UserPreferences()

        authenticity_guidance = [
            item.text for item in self._ladder(profile) if authenticity >= item.threshold
        ]
        professional_guidance = [
            item.text for item in PROFESSIONAL_LADDER if professional >= item.threshold
        ]

        changed = list(mapping.changed_entries().items())
        substitutions = [
            Substitution(
                clinical=clinical,
                natural=natural,
                priority=substitution_priority(authentic_pct, position, len(changed))
            )
            for position, (clinical, natural) in enumerate(
                changed[:_share(len(changed), authentic_pct)]
            )
        ]

        expressions = profile.natural_expressions[
            :_share(len(profile.natural_expressions), authentic_pct)
        ]
        clinical_terms = list(
            self.lexicon.clinical_register[:_share(len(self.lexicon.clinical_register), tone_level)]
        )

        prefer_personal = tone_level == 0 or (
            authenticity >= 0.5 and profile.tone_profile.uses_personal_pronouns
        )

        time_markers = []
        time_format = None
        timing = profile.time_patterns
        if timing.time_based_narrative and authenticity > 0.3 and preferences.use_time_patterns:
            time_markers = timing.time_markers[:MAX_TIME_MARKERS]
            time_format = timing.time_format

        block = ToneInstructionBlock(
            tone_level=tone_level,
            authenticity_weight=authenticity,
            professional_weight=professional,
            authenticity_guidance=authenticity_guidance,
            professional_guidance=professional_guidance,
            substitutions=substitutions,
            expressions=list(expressions),
            clinical_terms=clinical_terms,
            prefer_personal_reference=prefer_personal,
            time_markers=list(time_markers),
            time_format=time_format,
            clinical_only=tone_level == 100,
            authenticity_first=authenticity >= professional
        )

        log_with_context(
            logger, logging.DEBUG,
            "Built tone instructions",
            tone_level=tone_level,
            substitutions=len(substitutions),
            clinical_terms=len(clinical_terms)
        )
        return block

    @staticmethod
    def _ladder(profile: VocabularyProfile) -> list[GuidanceItem]:
        ladder = list(AUTHENTICITY_LADDER)
        if profile.tone_profile.prefers_casual_language:
            ladder.insert(2, CASUAL_PREFERENCE)
        return ladder
