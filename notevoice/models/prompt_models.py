"""
Pydantic models for instruction templates.

Each model corresponds to a Jinja template in notevoice/prompts/, providing
type-safe validation and clear documentation of the variables a template
needs. Instruction blocks are data first: the tone and detail blocks are built
by their engines, inspected by tests, and only then rendered to text.
"""
from abc import ABC, abstractmethod
from typing import Literal

from pydantic import BaseModel, Field, field_validator


# =============================================================================
# Base Models
# =============================================================================

class BasePromptConfig(BaseModel, ABC):
    """Abstract base class for all prompt configurations."""
    model_config = {"extra": "forbid"}

    @classmethod
    @abstractmethod
    def template_name(cls) -> str:
        """Return the name of the Jinja template file (without .jinja extension)."""
        pass


# =============================================================================
# Task Context
# =============================================================================

class TaskContext(BaseModel):
    """What the note is for, as supplied by the surrounding application."""

    task_description: str | None = Field(
        None,
        description="Description of the plan task this note documents, if any"
    )
    note_type: Literal["task", "comment", "general"] = Field(
        "general",
        description="Kind of note section being written"
    )

    @field_validator("task_description")
    @classmethod
    def blank_to_none(cls, v: str | None) -> str | None:
        if v is not None and not v.strip():
            return None
        return v


# =============================================================================
# Instruction Blocks
# =============================================================================

class GuidanceItem(BaseModel):
    """One line of tone guidance, active once its side's weight reaches `threshold`."""
    model_config = {"frozen": True}

    text: str = Field(..., min_length=1)
    threshold: float = Field(..., ge=0, le=1)


class Substitution(BaseModel):
    """A clinical term the writer should replace with their own word."""
    model_config = {"frozen": True}

    clinical: str
    natural: str
    priority: Literal["ALWAYS", "PREFER", "CONSIDER"]


class ToneInstructionBlock(BasePromptConfig):
    """
    Configuration for tone_instructions.jinja.

    Built by ToneBlendingEngine from a tone level. Every list here grows or
    shrinks by at most a step or two between neighbouring tone levels, which
    is what keeps the rendered instructions free of jumps.
    """

    tone_level: int = Field(..., ge=0, le=100)
    authenticity_weight: float = Field(..., ge=0, le=1)
    professional_weight: float = Field(..., ge=0, le=1)

    authenticity_guidance: list[str] = Field(default_factory=list)
    professional_guidance: list[str] = Field(default_factory=list)
    substitutions: list[Substitution] = Field(default_factory=list)
    expressions: list[str] = Field(default_factory=list)
    clinical_terms: list[str] = Field(default_factory=list)

    prefer_personal_reference: bool = False
    time_markers: list[str] = Field(default_factory=list)
    time_format: str | None = None
    clinical_only: bool = False
    authenticity_first: bool = True

    @classmethod
    def template_name(cls) -> str:
        return "tone_instructions"

    @property
    def formality_signal(self) -> int:
        """Clinical pressure minus personal pressure, as counts of injected items."""
        return (
            len(self.clinical_terms) + len(self.professional_guidance)
            - len(self.substitutions) - len(self.authenticity_guidance)
        )


class DetailInstructionBlock(BasePromptConfig):
    """Configuration for detail_instructions.jinja."""

    level: str = Field(..., min_length=1)
    label: str = Field(..., min_length=1)
    min_words: int = Field(..., ge=0)
    max_words: int | None = Field(None, ge=0)
    directives: list[str] = Field(default_factory=list)

    @classmethod
    def template_name(cls) -> str:
        return "detail_instructions"

    @property
    def target_range(self) -> str:
        if self.max_words is None:
            return f"{self.min_words}+"
        return f"{self.min_words}-{self.max_words}"


class StylePreservationConfig(BasePromptConfig):
    """Configuration for style_preservation.jinja - summary of the writer's habits."""

    sentence_style: str
    avg_sentence_length: int = Field(..., ge=0)
    vocabulary_level: str
    punctuation_style: str
    tone: str
    action_verbs: list[str] = Field(default_factory=list)
    descriptive_words: list[str] = Field(default_factory=list)
    transitions: list[str] = Field(default_factory=list)
    common_phrases: list[str] = Field(default_factory=list)
    low_signal: bool = False

    @classmethod
    def template_name(cls) -> str:
        return "style_preservation"


class GenerationInstructionConfig(BasePromptConfig):
    """Configuration for generation_instructions.jinja - the full payload."""

    style_preservation: str = Field(..., min_length=1)
    tone_instructions: str = Field(..., min_length=1)
    detail_instructions: str = Field(..., min_length=1)
    writing_sample: str = Field(..., min_length=1)
    task_description: str | None = None
    note_type: Literal["task", "comment", "general"] = "general"
    detail_level: str
    raw_prompt: str = Field(..., min_length=1)
    sentence_style: str
    vocabulary_level: str
    punctuation_style: str
    tone: str

    @classmethod
    def template_name(cls) -> str:
        return "generation_instructions"
