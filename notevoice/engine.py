"""
StyleEngine: the library boundary of notevoice.

Wires the extractor, mapper, tone engine, detail policy, composer and
confidence tracker together behind the calls the surrounding application
makes:

    engine = StyleEngine(WritingAnalyticsStore(settings.database_path))
    text = engine.build_instruction("user-1", "Sarah practiced cooking skills",
                                    tone_level=20, detail_level="moderate")
    state = engine.record_generation_outcome(record)
    evolution = engine.apply_style_evolution("user-1", new_sample, "Updated sample")

Profiles are memoised by sample text, so a style evolution needs no explicit
cache invalidation: the new sample is simply a new key.
"""
import logging
from functools import lru_cache
from typing import Any, Mapping, Optional, Union

from pydantic import ValidationError

from notevoice.analytics_store import WritingAnalyticsStore
from notevoice.analytics_summary import summarize_analytics
from notevoice.composer import GenerationInstructionComposer
from notevoice.confidence import StyleConfidenceTracker
from notevoice.config import Settings, get_settings
from notevoice.detail import DetailLevelPolicy
from notevoice.errors import InvalidInputError
from notevoice.extractor import VocabularyProfileExtractor
from notevoice.mapper import ClinicalToNaturalMapper
from notevoice.models.analytics_models import (
    AnalyticsSummary,
    GenerationAnalyticsRecord,
    StyleConfidenceState,
    StyleEvolutionRecord,
    UserPreferences,
)
from notevoice.models.profile_models import SampleQualityReport, VocabularyMapping, VocabularyProfile
from notevoice.models.prompt_models import TaskContext
from notevoice.quality import assess_sample_quality, calculate_style_match_score, classify_edit
from notevoice.tone import ToneBlendingEngine
from notevoice.utils.logging import get_logger, log_with_context

logger = get_logger(__name__)


class StyleEngine:
    """Facade over the style pipeline and its persistent state."""

    def __init__(
        self,
        store: WritingAnalyticsStore,
        settings: Optional[Settings] = None,
        extractor: Optional[VocabularyProfileExtractor] = None,
        mapper: Optional[ClinicalToNaturalMapper] = None,
        tone_engine: Optional[ToneBlendingEngine] = None,
        detail_policy: Optional[DetailLevelPolicy] = None,
        composer: Optional[GenerationInstructionComposer] = None,
        tracker: Optional[StyleConfidenceTracker] = None
    ):
        self.store = store
        self.settings = settings or get_settings()
        self.extractor = extractor or VocabularyProfileExtractor(
            low_signal_word_threshold=self.settings.low_signal_word_threshold
        )
        self.mapper = mapper or ClinicalToNaturalMapper()
        self.tone_engine = tone_engine or ToneBlendingEngine()
        self.detail_policy = detail_policy or DetailLevelPolicy()
        self.composer = composer or GenerationInstructionComposer(lexicon=self.extractor.lexicon)
        self.tracker = tracker or StyleConfidenceTracker(store)

        self._analyze = lru_cache(maxsize=self.settings.profile_cache_size)(self._analyze_uncached)

    # ==========================================================================
    # Profiles
    # ==========================================================================

    def _analyze_uncached(self, sample: str) -> tuple[VocabularyProfile, VocabularyMapping]:
        profile = self.extractor.extract(sample)
        return profile, self.mapper.build_mapping(profile)

    def analyze_sample(self, sample: str) -> tuple[VocabularyProfile, VocabularyMapping]:
        """
        Extract the profile and mapping for a writing sample (memoised by text).

        Raises:
            InvalidSampleError: If the sample has no usable text
        """
        if isinstance(sample, str) and len(sample) > self.settings.max_sample_chars:
            log_with_context(
                logger, logging.WARNING,
                "Writing sample longer than recommended",
                length=len(sample),
                max_sample_chars=self.settings.max_sample_chars
            )
        if not isinstance(sample, str):
            return self._analyze_uncached(sample)
        return self._analyze(sample)

    def assess_sample(self, sample: str) -> SampleQualityReport:
        """Onboarding quality report for a candidate writing sample."""
        if not isinstance(sample, str) or not sample.strip():
            raise InvalidInputError("Writing sample must not be empty")
        return assess_sample_quality(sample, self.extractor.lexicon)

    # ==========================================================================
    # Instruction Building
    # ==========================================================================

    def _preferences(self, preferences: Union[UserPreferences, Mapping, None]) -> UserPreferences:
        if preferences is None:
            return UserPreferences(
                default_tone_level=self.settings.default_tone_level,
                default_detail_level=self.settings.default_detail_level
            )
        if isinstance(preferences, UserPreferences):
            return preferences
        try:
            return UserPreferences.model_validate(preferences)
        except ValidationError as e:
            raise InvalidInputError(f"Invalid preferences: {e}") from e

    @staticmethod
    def _task_context(task_context: Union[TaskContext, Mapping, None]) -> TaskContext:
        if task_context is None:
            return TaskContext()
        if isinstance(task_context, TaskContext):
            return task_context
        try:
            return TaskContext.model_validate(task_context)
        except ValidationError as e:
            raise InvalidInputError(f"Invalid task context: {e}") from e

    def build_instruction(
        self,
        user_id: str,
        raw_prompt: str,
        task_context: Union[TaskContext, Mapping, None] = None,
        tone_level: Optional[int] = None,
        detail_level: Any = None,
        sample: Optional[str] = None,
        preferences: Union[UserPreferences, Mapping, None] = None
    ) -> str:
        """
        Build the instruction text for one generation.

        Args:
            user_id: User whose stored sample to use when `sample` is None
            raw_prompt: The user's short input
            task_context: Task description and note type
            tone_level: 0-100; falls back to preferences, then settings
            detail_level: DetailLevel or string; falls back to preferences,
                then settings; unknown values resolve to brief
            sample: Writing sample to use instead of the stored one
            preferences: User defaults

        Returns:
            Instruction text ready for the generator

        Raises:
            InvalidInputError: If there is no sample, the prompt is empty or
                the tone level is out of range
        """
        if not isinstance(raw_prompt, str) or not raw_prompt.strip():
            raise InvalidInputError("Prompt must not be empty")

        if sample is None:
            sample = self.store.get_writing_sample(user_id)
        if sample is not None and not isinstance(sample, str):
            raise InvalidInputError(f"Writing sample must be text, got {type(sample).__name__}")
        if not sample or not sample.strip():
            raise InvalidInputError(f"No writing sample available for user '{user_id}'")

        prefs = self._preferences(preferences)
        context = self._task_context(task_context)
        if tone_level is None:
            tone_level = prefs.default_tone_level
        if detail_level is None:
            detail_level = prefs.default_detail_level

        profile, mapping = self.analyze_sample(sample)
        tone_block = self.tone_engine.instructions(tone_level, profile, mapping, prefs)
        detail_block = self.detail_policy.instructions(detail_level)

        text = self.composer.compose(
            raw_prompt, context, sample, profile, tone_block, detail_block, mapping=mapping
        )

        log_with_context(
            logger, logging.DEBUG,
            "Built generation instruction",
            user_id=user_id,
            tone_level=tone_level,
            detail_level=detail_block.level,
            low_signal=profile.low_signal
        )
        return text

    # ==========================================================================
    # Feedback Loop
    # ==========================================================================

    def record_generation_outcome(
        self,
        record: Union[GenerationAnalyticsRecord, Mapping]
    ) -> StyleConfidenceState:
        """
        Store a generation outcome and return the user's updated confidence.

        When learning is disabled for the user the record is not stored and
        the current state is returned unchanged.

        Raises:
            InvalidInputError: If the record fails validation
        """
        if not isinstance(record, GenerationAnalyticsRecord):
            try:
                record = GenerationAnalyticsRecord.model_validate(record)
            except ValidationError as e:
                raise InvalidInputError(f"Invalid analytics record: {e}") from e

        if not self.store.is_learning_enabled(record.user_id):
            log_with_context(
                logger, logging.DEBUG,
                "Style learning disabled, outcome not recorded",
                user_id=record.user_id
            )
            return self.tracker.current_state(record.user_id)

        return self.tracker.record(record)

    def record_feedback(
        self,
        analytics_id: str,
        user_edited_version: Optional[str] = None,
        user_satisfaction_score: Optional[int] = None,
        feedback_notes: Optional[str] = None
    ) -> StyleConfidenceState:
        """
        Attach the user's edit and rating to a generation and recompute.

        The edit type and style-match score are derived from the edit.

        Raises:
            InvalidInputError: If the record doesn't exist or the values are invalid
        """
        record = self.store.get_analytics(analytics_id)
        if record is None:
            raise InvalidInputError(f"Analytics record '{analytics_id}' not found")

        edit_type = None
        style_match = None
        if user_edited_version is not None:
            edit_type = classify_edit(record.original_generated, user_edited_version)
            sample = self.store.get_writing_sample(record.user_id) or ""
            style_match = calculate_style_match_score(
                record.original_generated, sample, user_edited_version
            )

        return self.tracker.attach_feedback(
            analytics_id,
            user_edited_version=user_edited_version,
            edit_type=edit_type,
            user_satisfaction_score=user_satisfaction_score,
            feedback_notes=feedback_notes,
            style_match_score=style_match
        )

    def apply_style_evolution(
        self,
        user_id: str,
        new_sample: str,
        trigger_reason: str,
        improvement_metrics: Optional[dict] = None
    ) -> StyleEvolutionRecord:
        """
        Replace the user's writing sample and log the evolution.

        Raises:
            InvalidInputError: If the sample has no usable text or the
                trigger reason is empty
        """
        if not isinstance(new_sample, str) or not new_sample.strip():
            raise InvalidInputError("New writing sample must not be empty")
        self.analyze_sample(new_sample)
        return self.tracker.evolve(user_id, new_sample, trigger_reason, improvement_metrics)

    def delete_note(self, note_id: str) -> list[StyleConfidenceState]:
        """Remove a deleted note's analytics and return the rebuilt confidence states."""
        return self.tracker.delete_note(note_id)

    def confidence_state(self, user_id: str) -> StyleConfidenceState:
        """Current confidence state for display."""
        return self.tracker.current_state(user_id)

    def analytics_summary(self, user_id: str) -> AnalyticsSummary:
        """Dashboard summary of the user's generation history."""
        state = self.tracker.current_state(user_id)
        frame = self.store.analytics_dataframe(user_id)
        return summarize_analytics(frame, state.confidence_score)
