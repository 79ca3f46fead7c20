"""
Pydantic models for generation analytics and style confidence.

These models support the feedback loop that follows each generation: one
analytics record per generated section, a per-user confidence state derived
from the whole record history, and an append-only log of style evolutions.
"""
from datetime import datetime, timezone
from enum import Enum
from typing import Literal
from uuid import uuid4

from pydantic import BaseModel, Field

from notevoice.models.detail_models import DetailLevel


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def new_id() -> str:
    return uuid4().hex


class EditType(str, Enum):
    """How much a user changed a generated section."""
    MINOR = "minor"
    MAJOR = "major"
    STYLE_CHANGE = "style_change"
    CONTENT_ADDITION = "content_addition"
    COMPLETE_REWRITE = "complete_rewrite"


class ConfidenceCategory(str, Enum):
    """Display band for a style confidence score."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    EXCELLENT = "excellent"


class GenerationAnalyticsRecord(BaseModel):
    """
    One generated note section and what the user made of it.

    Written once per generation. The edited text, edit type and satisfaction
    rating may be attached afterwards; everything else is fixed.
    """

    analytics_id: str = Field(default_factory=new_id)
    user_id: str = Field(..., min_length=1)
    note_id: str = Field(..., min_length=1)
    note_section_id: str | None = None
    original_generated: str = Field(..., min_length=1)
    user_edited_version: str | None = None
    edit_type: EditType | None = None
    confidence_score: float = Field(0.50, ge=0, le=1)
    user_satisfaction_score: int | None = Field(None, ge=1, le=5)
    feedback_notes: str | None = Field(None, max_length=1000)
    tokens_used: int | None = Field(None, ge=0)
    generation_time_ms: int | None = Field(None, ge=0)
    style_match_score: float | None = Field(None, ge=0, le=1)
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)


class StyleConfidenceState(BaseModel):
    """Per-user running confidence, rebuilt from the full history on every write."""

    user_id: str = Field(..., min_length=1)
    confidence_score: float = Field(..., ge=0, le=1)
    category: ConfidenceCategory
    last_updated: datetime = Field(default_factory=utc_now)
    total_generations: int = Field(0, ge=0)


class StyleEvolutionRecord(BaseModel):
    """Audit entry written whenever the reference writing sample is replaced."""

    evolution_id: str = Field(default_factory=new_id)
    user_id: str = Field(..., min_length=1)
    previous_style: str | None = None
    updated_style: str = Field(..., min_length=1)
    confidence_before: float | None = Field(None, ge=0, le=1)
    confidence_after: float = Field(..., ge=0, le=1)
    trigger_reason: str = Field(..., min_length=1, max_length=500)
    notes_analyzed: int = Field(0, ge=0)
    improvement_metrics: dict | None = None
    created_at: datetime = Field(default_factory=utc_now)


class ConfidenceBreakdown(BaseModel):
    """The intermediate terms of a confidence computation."""

    avg_satisfaction: float = Field(..., ge=0, le=1)
    avg_style_match: float = Field(..., ge=0, le=1)
    experience_bonus: float = Field(..., ge=0)
    record_count: int = Field(..., ge=0)
    score: float = Field(..., ge=0, le=1)
    category: ConfidenceCategory


class AnalyticsSummary(BaseModel):
    """Dashboard figures for one user's generation history."""

    total_notes: int = Field(..., ge=0)
    avg_confidence: float
    avg_satisfaction: float
    avg_style_match: float
    recent_notes: int = Field(..., ge=0)
    improvement_trend: Literal["improving", "declining", "stable"]


class UserPreferences(BaseModel):
    """Per-user defaults applied when a request leaves tone or detail unset."""

    default_tone_level: int = Field(50, ge=0, le=100)
    default_detail_level: DetailLevel = DetailLevel.BRIEF
    use_time_patterns: bool = True
