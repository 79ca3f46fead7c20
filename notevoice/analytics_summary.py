"""Dashboard summary of a user's generation analytics."""
from datetime import datetime, timedelta
from typing import Optional

import pandas as pd

from notevoice.models.analytics_models import AnalyticsSummary, utc_now

RECENT_WINDOW = timedelta(days=30)
TREND_THRESHOLD = 0.1
DEFAULT_SATISFACTION = 3.0
DEFAULT_STYLE_MATCH = 0.5


def summarize_analytics(
    frame: pd.DataFrame,
    current_confidence: float,
    now: Optional[datetime] = None
) -> AnalyticsSummary:
    """
    Summarise one user's analytics records.

    The trend compares the current confidence with the mean per-record
    confidence of records created 30 to 60 days ago: more than 0.1 higher
    is improving, more than 0.1 lower is declining, anything else (including
    no records in that window) is stable.

    Args:
        frame: Output of WritingAnalyticsStore.analytics_dataframe for one user
        current_confidence: The user's current confidence score
        now: Reference time (defaults to the current UTC time)

    Returns:
        AnalyticsSummary
    """
    now = pd.Timestamp(now or utc_now())
    if now.tzinfo is None:
        now = now.tz_localize("UTC")

    if frame.empty:
        return AnalyticsSummary(
            total_notes=0,
            avg_confidence=float(current_confidence),
            avg_satisfaction=DEFAULT_SATISFACTION,
            avg_style_match=DEFAULT_STYLE_MATCH,
            recent_notes=0,
            improvement_trend="stable"
        )

    created = pd.to_datetime(frame["created_at"], utc=True)
    satisfaction = frame["user_satisfaction_score"].dropna()
    style_match = frame["style_match_score"].dropna()

    recent_start = now - RECENT_WINDOW
    old_start = now - 2 * RECENT_WINDOW
    old = frame.loc[(created >= old_start) & (created < recent_start), "confidence_score"]

    trend = "stable"
    if not old.empty:
        delta = current_confidence - float(old.mean())
        if delta > TREND_THRESHOLD:
            trend = "improving"
        elif delta < -TREND_THRESHOLD:
            trend = "declining"

    return AnalyticsSummary(
        total_notes=len(frame),
        avg_confidence=float(current_confidence),
        avg_satisfaction=float(satisfaction.mean()) if not satisfaction.empty else DEFAULT_SATISFACTION,
        avg_style_match=float(style_match.mean()) if not style_match.empty else DEFAULT_STYLE_MATCH,
        recent_notes=int((created >= recent_start).sum()),
        improvement_trend=trend
    )
