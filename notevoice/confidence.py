"""
Style confidence: how sure we are that generations sound like the user.

Confidence is derived state. It is never nudged up or down by individual
events; every write recomputes it from the user's complete analytics history:

    avg_satisfaction = mean(rating) / 5        (0.6 when nothing is rated)
    avg_style_match  = mean(style_match_score) (0.5 when nothing is scored)
    score = 0.4 * avg_style_match + 0.4 * avg_satisfaction + experience_bonus

The experience bonus is stepped: 0.01 per record below 10, then 0.10, 0.15
and 0.20 at 10, 20 and 50 records.
"""
import logging
import threading
from collections import defaultdict
from typing import Iterable, Optional

from notevoice.analytics_store import WritingAnalyticsStore
from notevoice.errors import InvalidInputError
from notevoice.models.analytics_models import (
    ConfidenceBreakdown,
    ConfidenceCategory,
    EditType,
    GenerationAnalyticsRecord,
    StyleConfidenceState,
    StyleEvolutionRecord,
    utc_now,
)
from notevoice.utils.logging import get_logger, log_with_context

logger = get_logger(__name__)


DEFAULT_SATISFACTION = 0.6
DEFAULT_STYLE_MATCH = 0.5
MATCH_WEIGHT = 0.4
SATISFACTION_WEIGHT = 0.4


def experience_bonus(record_count: int) -> float:
    """Stepped bonus for the number of generations on record."""
    if record_count >= 50:
        return 0.20
    if record_count >= 20:
        return 0.15
    if record_count >= 10:
        return 0.10
    return 0.01 * record_count


def confidence_category(score: float) -> ConfidenceCategory:
    """Display band for a confidence score."""
    if score >= 0.85:
        return ConfidenceCategory.EXCELLENT
    if score >= 0.70:
        return ConfidenceCategory.HIGH
    if score >= 0.40:
        return ConfidenceCategory.MEDIUM
    return ConfidenceCategory.LOW


def compute_confidence(records: Iterable[GenerationAnalyticsRecord]) -> ConfidenceBreakdown:
    """
    Compute confidence from a user's full analytics history.

    Args:
        records: Every analytics record for one user

    Returns:
        ConfidenceBreakdown with the averages, bonus, score and category
    """
    records = list(records)
    ratings = [r.user_satisfaction_score for r in records if r.user_satisfaction_score is not None]
    matches = [r.style_match_score for r in records if r.style_match_score is not None]

    avg_satisfaction = sum(ratings) / len(ratings) / 5 if ratings else DEFAULT_SATISFACTION
    avg_style_match = sum(matches) / len(matches) if matches else DEFAULT_STYLE_MATCH
    bonus = experience_bonus(len(records))

    raw = MATCH_WEIGHT * avg_style_match + SATISFACTION_WEIGHT * avg_satisfaction + bonus
    score = round(min(1.0, max(0.0, raw)), 10)

    return ConfidenceBreakdown(
        avg_satisfaction=avg_satisfaction,
        avg_style_match=avg_style_match,
        experience_bonus=bonus,
        record_count=len(records),
        score=score,
        category=confidence_category(score)
    )


class StyleConfidenceTracker:
    """Keep each user's StyleConfidenceState in step with their history.

    Recompute (read all records, compute, write state) runs under a per-user
    lock, so concurrent outcomes for one user cannot overwrite each other
    with stale state. Different users never wait on each other.
    """

    def __init__(self, store: WritingAnalyticsStore):
        self.store = store
        self._locks: dict[str, threading.Lock] = defaultdict(threading.Lock)
        self._locks_guard = threading.Lock()

    def _user_lock(self, user_id: str) -> threading.Lock:
        with self._locks_guard:
            return self._locks[user_id]

    # ==========================================================================
    # Recompute
    # ==========================================================================

    def _recompute_locked(self, user_id: str) -> StyleConfidenceState:
        breakdown = compute_confidence(self.store.list_analytics(user_id))
        state = StyleConfidenceState(
            user_id=user_id,
            confidence_score=breakdown.score,
            category=breakdown.category,
            last_updated=utc_now(),
            total_generations=breakdown.record_count
        )
        self.store.save_confidence_state(state)

        log_with_context(
            logger, logging.INFO,
            "Style confidence updated",
            user_id=user_id,
            confidence=state.confidence_score,
            category=state.category.value,
            records=breakdown.record_count
        )
        return state

    def recompute(self, user_id: str) -> StyleConfidenceState:
        """Rebuild a user's confidence state from their full history."""
        with self._user_lock(user_id):
            return self._recompute_locked(user_id)

    def record(self, record: GenerationAnalyticsRecord) -> StyleConfidenceState:
        """
        Persist an analytics record and recompute the user's confidence.

        Args:
            record: The generation outcome

        Returns:
            Updated StyleConfidenceState
        """
        with self._user_lock(record.user_id):
            self.store.save_analytics(record)
            return self._recompute_locked(record.user_id)

    def attach_feedback(
        self,
        analytics_id: str,
        user_edited_version: Optional[str] = None,
        edit_type: Optional[EditType] = None,
        user_satisfaction_score: Optional[int] = None,
        feedback_notes: Optional[str] = None,
        style_match_score: Optional[float] = None
    ) -> StyleConfidenceState:
        """
        Attach the user's edit or rating to a record and recompute.

        Raises:
            InvalidInputError: If the record doesn't exist or the values are invalid
        """
        existing = self.store.get_analytics(analytics_id)
        if existing is None:
            raise InvalidInputError(f"Analytics record '{analytics_id}' not found")

        with self._user_lock(existing.user_id):
            try:
                self.store.attach_feedback(
                    analytics_id,
                    user_edited_version=user_edited_version,
                    edit_type=edit_type,
                    user_satisfaction_score=user_satisfaction_score,
                    feedback_notes=feedback_notes,
                    style_match_score=style_match_score
                )
            except ValueError as e:
                raise InvalidInputError(str(e)) from e
            return self._recompute_locked(existing.user_id)

    def delete_note(self, note_id: str) -> list[StyleConfidenceState]:
        """
        Delete a note's analytics records and rebuild each affected user's confidence.

        Args:
            note_id: The deleted note

        Returns:
            The rebuilt state of every user who had records on the note
        """
        states = []
        for user_id in self.store.note_user_ids(note_id):
            with self._user_lock(user_id):
                deleted = self.store.delete_note_analytics(note_id, user_id=user_id)
                state = self._recompute_locked(user_id)
            log_with_context(
                logger, logging.INFO,
                "Note analytics deleted",
                user_id=user_id,
                note_id=note_id,
                deleted=deleted
            )
            states.append(state)
        return states

    def current_state(self, user_id: str) -> StyleConfidenceState:
        """Return the stored state, computing it first if it has never been computed."""
        state = self.store.get_confidence_state(user_id)
        if state is None:
            return self.recompute(user_id)
        return state

    # ==========================================================================
    # Style Evolution
    # ==========================================================================

    def evolve(
        self,
        user_id: str,
        new_sample: str,
        trigger_reason: str,
        improvement_metrics: Optional[dict] = None
    ) -> StyleEvolutionRecord:
        """
        Replace a user's writing sample and log the change.

        Captures the previous sample and confidence, stores the new sample,
        recomputes confidence from the existing history and appends a
        StyleEvolutionRecord.

        Args:
            user_id: User identifier
            new_sample: Replacement reference writing
            trigger_reason: Why the sample changed (shown in the audit log)
            improvement_metrics: Optional free-form metrics to keep with the record

        Returns:
            The appended StyleEvolutionRecord

        Raises:
            InvalidInputError: If new_sample or trigger_reason is empty
        """
        if not isinstance(new_sample, str) or not new_sample.strip():
            raise InvalidInputError("New writing sample must not be empty")
        if not isinstance(trigger_reason, str) or not trigger_reason.strip():
            raise InvalidInputError("Trigger reason must not be empty")
        if len(trigger_reason) > 500:
            raise InvalidInputError("Trigger reason must be at most 500 characters")

        with self._user_lock(user_id):
            previous_sample = self.store.get_writing_sample(user_id)
            previous_state = self.store.get_confidence_state(user_id)

            self.store.save_writing_sample(user_id, new_sample)
            state = self._recompute_locked(user_id)

            evolution = StyleEvolutionRecord(
                user_id=user_id,
                previous_style=previous_sample,
                updated_style=new_sample,
                confidence_before=previous_state.confidence_score if previous_state else None,
                confidence_after=state.confidence_score,
                trigger_reason=trigger_reason,
                notes_analyzed=state.total_generations,
                improvement_metrics=improvement_metrics
            )
            self.store.append_evolution(evolution)

        log_with_context(
            logger, logging.INFO,
            "Writing style evolved",
            user_id=user_id,
            trigger_reason=trigger_reason,
            confidence_before=evolution.confidence_before,
            confidence_after=evolution.confidence_after
        )
        return evolution
