"""
Generation instruction composer.

Assembles the full instruction payload handed to the text generator: style
summary, tone block, detail block, the writing sample, task context and the
user's raw prompt. Composition is pure; nothing here touches the network or
the database.

At tone 0 the user's own text is passed through the vocabulary mapping before
it is embedded: the prompt and task description get every substitution plus
the role-phrase table, and the writing sample gets the role-phrase table only,
so no generic role label ("the individual") reaches the generator.
"""
import re

from notevoice.errors import InvalidInputError
from notevoice.lexicons import Lexicon, DEFAULT_LEXICON
from notevoice.models.profile_models import VocabularyMapping, VocabularyProfile
from notevoice.models.prompt_models import (
    DetailInstructionBlock,
    GenerationInstructionConfig,
    StylePreservationConfig,
    TaskContext,
    ToneInstructionBlock,
)
from notevoice.prompt_maker import PromptMaker

BLANK_RUNS = re.compile(r"\n{3,}")

MAX_VERBS_SHOWN = 8
MAX_DESCRIPTORS_SHOWN = 6
MAX_TRANSITIONS_SHOWN = 5
MAX_PHRASES_SHOWN = 4


class GenerationInstructionComposer:
    """Render instruction blocks into one instruction text."""

    def __init__(self, prompt_maker: PromptMaker | None = None, lexicon: Lexicon = DEFAULT_LEXICON):
        self.prompt_maker = prompt_maker or PromptMaker()
        self.role_nouns = frozenset(phrase.split()[-1].lower() for phrase in lexicon.role_phrases)

    def _is_role_phrase(self, phrase: str) -> bool:
        return bool(self.role_nouns & set(phrase.lower().split()))

    def style_preservation(self, profile: VocabularyProfile) -> StylePreservationConfig:
        """Summarise the profile for the style preservation section.

        Phrases built around a generic role noun are left out; the writer is
        never asked to reuse them.
        """
        phrases = [p for p in profile.common_phrases if not self._is_role_phrase(p)]
        return StylePreservationConfig(
            sentence_style=profile.sentence_style.description,
            avg_sentence_length=round(profile.avg_sentence_length),
            vocabulary_level=profile.vocabulary_level.description,
            punctuation_style=profile.punctuation_style.description,
            tone=profile.tone_profile.overall_tone.description,
            action_verbs=profile.action_verbs[:MAX_VERBS_SHOWN],
            descriptive_words=profile.descriptive_words[:MAX_DESCRIPTORS_SHOWN],
            transitions=profile.transitions[:MAX_TRANSITIONS_SHOWN],
            common_phrases=phrases[:MAX_PHRASES_SHOWN],
            low_signal=profile.low_signal
        )

    def compose(
        self,
        raw_prompt: str,
        task_context: TaskContext | None,
        sample: str,
        profile: VocabularyProfile,
        tone_block: ToneInstructionBlock,
        detail_block: DetailInstructionBlock,
        mapping: VocabularyMapping | None = None
    ) -> str:
        """
        Build the instruction text for one generation.

        Args:
            raw_prompt: The user's short input
            task_context: Optional task description and note type
            sample: The user's reference writing, included for grounding
            profile: Profile extracted from `sample`
            tone_block: Output of ToneBlendingEngine.instructions
            detail_block: Output of DetailLevelPolicy.instructions
            mapping: The user's vocabulary mapping; at tone 0 it rewrites the
                prompt, task description and sample before they are embedded

        Returns:
            Instruction text ready to send to the generator

        Raises:
            InvalidInputError: If raw_prompt or sample is empty
        """
        if not isinstance(raw_prompt, str) or not raw_prompt.strip():
            raise InvalidInputError("Prompt must not be empty")
        if not isinstance(sample, str) or not sample.strip():
            raise InvalidInputError("Writing sample must not be empty")
        task_context = task_context or TaskContext()

        raw_prompt = raw_prompt.strip()
        task_description = task_context.task_description
        sample = sample.strip()
        if mapping is not None and tone_block.tone_level == 0:
            raw_prompt = mapping.apply(raw_prompt, include_referential=True)
            if task_description:
                task_description = mapping.apply(task_description, include_referential=True)
            sample = mapping.apply_referential(sample)

        config = GenerationInstructionConfig(
            style_preservation=self.prompt_maker.render(self.style_preservation(profile)).strip(),
            tone_instructions=self.prompt_maker.render(tone_block).strip(),
            detail_instructions=self.prompt_maker.render(detail_block).strip(),
            writing_sample=sample,
            task_description=task_description,
            note_type=task_context.note_type,
            detail_level=detail_block.level,
            raw_prompt=raw_prompt,
            sentence_style=profile.sentence_style.value,
            vocabulary_level=profile.vocabulary_level.value,
            punctuation_style=profile.punctuation_style.value,
            tone=profile.tone_profile.overall_tone.value
        )
        text = self.prompt_maker.render(config)
        return BLANK_RUNS.sub("\n\n", text).strip() + "\n"
