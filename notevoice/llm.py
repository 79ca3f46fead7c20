"""
Text generator boundary over LiteLLM.

The style engine never calls a model itself; it produces instruction text.
This module is the thin wrapper the surrounding application uses to send
that text to any LiteLLM-supported model, with the retries the core leaves
out.
"""
import logging
from typing import Any, Dict, List, Optional, Union

import litellm

from notevoice.errors import GenerationError
from notevoice.models.llm_config_models import (
    LLMRole,
    Message,
    LLMResponse,
    LLMConfig
)
from notevoice.utils.logging import get_logger, log_with_context

logger = get_logger(__name__)


class LLM:
    """
    LLM wrapper for pure text completion.

    Handles basic text-in, text-out interactions with any LiteLLM-supported model.
    """

    def __init__(self, config: LLMConfig):
        self.config = config

    def _build_litellm_kwargs(self, messages: List[Message], **kwargs) -> Dict[str, Any]:
        """Build kwargs dict for litellm.completion()."""
        litellm_kwargs = {
            "model": self.config.model,
            "messages": [msg.to_dict() for msg in messages],
            "temperature": kwargs.pop("temperature", self.config.temperature),
            "top_p": kwargs.pop("top_p", self.config.top_p),
        }

        # Add optional parameters
        if self.config.max_tokens:
            litellm_kwargs["max_tokens"] = self.config.max_tokens
        if self.config.timeout:
            litellm_kwargs["timeout"] = self.config.timeout
        if self.config.api_key:
            litellm_kwargs["api_key"] = self.config.api_key
        if self.config.api_base:
            litellm_kwargs["api_base"] = self.config.api_base

        # Merge any extra params
        litellm_kwargs.update(self.config.extra_params)
        litellm_kwargs.update(kwargs)

        return litellm_kwargs

    def _parse_response(self, raw_response: Any) -> LLMResponse:
        """Parse raw LiteLLM response into standardized format."""
        choice = raw_response.choices[0]
        message = choice.message

        usage = getattr(raw_response, "usage", None)
        if usage is not None and not isinstance(usage, dict):
            usage = usage.model_dump() if hasattr(usage, "model_dump") else dict(usage)

        return LLMResponse(
            content=getattr(message, "content", None),
            finish_reason=getattr(choice, "finish_reason", None),
            model=getattr(raw_response, "model", None),
            usage=usage,
            raw_response=raw_response
        )

    def complete(
        self,
        messages: Union[str, List[Message]],
        system_prompt: Optional[str] = None,
        **kwargs
    ) -> LLMResponse:
        """
        Execute a single completion request.

        Args:
            messages: Either a string (converted to user message) or list of Message objects
            system_prompt: Optional system prompt to prepend
            **kwargs: Override config parameters for this call

        Returns:
            LLMResponse with the model's output
        """
        if isinstance(messages, str):
            msg_list = [Message(role=LLMRole.USER, content=messages)]
        else:
            msg_list = list(messages)

        if system_prompt:
            msg_list.insert(0, Message(role=LLMRole.SYSTEM, content=system_prompt))

        litellm_kwargs = self._build_litellm_kwargs(msg_list, **kwargs)
        raw_response = litellm.completion(**litellm_kwargs)

        return self._parse_response(raw_response)

    def generate(self, prompt: str, system_prompt: Optional[str] = None, **kwargs) -> LLMResponse:
        """
        Complete with retries on failure or empty output.

        Args:
            prompt: Instruction text
            system_prompt: Optional system prompt
            **kwargs: Override config parameters for this call

        Returns:
            The first LLMResponse that contains text

        Raises:
            GenerationError: After config.max_attempts failed attempts
        """
        last_error: Optional[Exception] = None
        for attempt in range(1, self.config.max_attempts + 1):
            try:
                response = self.complete(prompt, system_prompt=system_prompt, **kwargs)
            except Exception as e:
                last_error = e
                log_with_context(
                    logger, logging.WARNING,
                    "Generation attempt failed",
                    attempt=attempt,
                    max_attempts=self.config.max_attempts,
                    error=repr(e)
                )
                continue

            if response.has_text:
                return response

            last_error = None
            log_with_context(
                logger, logging.WARNING,
                "Generation attempt returned no text",
                attempt=attempt,
                max_attempts=self.config.max_attempts
            )

        message = f"Generation failed after {self.config.max_attempts} attempts"
        if last_error is not None:
            raise GenerationError(f"{message}: {last_error}") from last_error
        raise GenerationError(message)
