from notevoice.models.llm_config_models import (
    LLMConfig,
    Message,
    LLMRole,
    LLMResponse
)
from notevoice.models.detail_models import (
    DetailLevel,
    DetailBand
)
from notevoice.models.profile_models import (
    # Classifications
    SentenceStyle,
    VocabularyLevel,
    PunctuationStyle,
    ToneClassification,

    # Profile
    TimePatternDescriptor,
    ToneProfile,
    VocabularyProfile,
    VocabularyMapping,
    SampleQualityReport,
)
from notevoice.models.prompt_models import (
    # Base classes
    BasePromptConfig,

    # Request context
    TaskContext,

    # Instruction blocks
    GuidanceItem,
    Substitution,
    ToneInstructionBlock,
    DetailInstructionBlock,
    StylePreservationConfig,
    GenerationInstructionConfig,
)
from notevoice.models.analytics_models import (
    EditType,
    ConfidenceCategory,
    GenerationAnalyticsRecord,
    StyleConfidenceState,
    StyleEvolutionRecord,
    ConfidenceBreakdown,
    AnalyticsSummary,
    UserPreferences,
)

__all__ = [
    # LLM core
    "LLMConfig", "Message", "LLMRole", "LLMResponse",

    # Detail
    "DetailLevel", "DetailBand",

    # Classifications
    "SentenceStyle", "VocabularyLevel", "PunctuationStyle", "ToneClassification",

    # Profile
    "TimePatternDescriptor", "ToneProfile", "VocabularyProfile",
    "VocabularyMapping", "SampleQualityReport",

    # Prompts
    "BasePromptConfig", "TaskContext", "GuidanceItem", "Substitution",
    "ToneInstructionBlock", "DetailInstructionBlock",
    "StylePreservationConfig", "GenerationInstructionConfig",

    # Analytics
    "EditType", "ConfidenceCategory", "GenerationAnalyticsRecord",
    "StyleConfidenceState", "StyleEvolutionRecord", "ConfidenceBreakdown",
    "AnalyticsSummary", "UserPreferences",
]
