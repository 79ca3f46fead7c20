"""
Pydantic models for detail levels.

A detail level is a discrete selector; each level owns a word-count band and
a few elaboration directives.
"""
from enum import Enum

from pydantic import BaseModel, Field


class DetailLevel(str, Enum):
    """Requested length and elaboration of a generated section."""
    BRIEF = "brief"
    MODERATE = "moderate"
    DETAILED = "detailed"
    COMPREHENSIVE = "comprehensive"


class DetailBand(BaseModel):
    """Target length band and directives for one detail level."""
    model_config = {"frozen": True}

    label: str = Field(..., min_length=1, description="Heading shown in the instructions")
    min_words: int = Field(..., ge=0)
    max_words: int | None = Field(None, ge=0, description="None means open-ended")
    directives: tuple[str, ...] = Field(default_factory=tuple)
