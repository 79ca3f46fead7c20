from notevoice.models import (
    # LLM core
    LLMConfig,
    Message,
    LLMRole,
    LLMResponse,

    # Profile and instruction models
    DetailLevel,
    VocabularyProfile,
    VocabularyMapping,
    SampleQualityReport,
    TaskContext,
    ToneInstructionBlock,
    DetailInstructionBlock,

    # Analytics models
    EditType,
    ConfidenceCategory,
    GenerationAnalyticsRecord,
    StyleConfidenceState,
    StyleEvolutionRecord,
    AnalyticsSummary,
    UserPreferences,
)
from notevoice.errors import (
    InvalidInputError,
    InvalidSampleError,
    GenerationError,
)

# Expose commonly-used classes at top level for convenience
from notevoice.config import Settings, get_settings
from notevoice.lexicons import Lexicon, DEFAULT_LEXICON
from notevoice.extractor import VocabularyProfileExtractor
from notevoice.mapper import ClinicalToNaturalMapper
from notevoice.tone import ToneBlendingEngine, tone_weights
from notevoice.detail import DetailLevelPolicy, resolve_detail_level
from notevoice.prompt_maker import PromptMaker
from notevoice.composer import GenerationInstructionComposer
from notevoice.confidence import StyleConfidenceTracker, compute_confidence, confidence_category
from notevoice.analytics_store import WritingAnalyticsStore
from notevoice.analytics_summary import summarize_analytics
from notevoice.quality import assess_sample_quality, calculate_style_match_score, classify_edit
from notevoice.engine import StyleEngine
from notevoice.llm import LLM
from notevoice.generation import GeneratedSection, generate_section

__all__ = [
    # LLM core
    "LLMConfig", "Message", "LLMRole", "LLMResponse", "LLM",

    # Errors
    "InvalidInputError", "InvalidSampleError", "GenerationError",

    # Configuration
    "Settings", "get_settings",

    # Style pipeline
    "Lexicon", "DEFAULT_LEXICON",
    "VocabularyProfileExtractor", "ClinicalToNaturalMapper",
    "ToneBlendingEngine", "tone_weights",
    "DetailLevelPolicy", "resolve_detail_level",
    "PromptMaker", "GenerationInstructionComposer",

    # Confidence and analytics
    "StyleConfidenceTracker", "compute_confidence", "confidence_category",
    "WritingAnalyticsStore", "summarize_analytics",
    "assess_sample_quality", "calculate_style_match_score", "classify_edit",

    # Boundary
    "StyleEngine", "GeneratedSection", "generate_section",

    # Models
    "DetailLevel", "VocabularyProfile", "VocabularyMapping", "SampleQualityReport",
    "TaskContext", "ToneInstructionBlock", "DetailInstructionBlock",
    "EditType", "ConfidenceCategory", "GenerationAnalyticsRecord",
    "StyleConfidenceState", "StyleEvolutionRecord", "AnalyticsSummary",
    "UserPreferences",
]
