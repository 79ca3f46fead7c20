from pydantic import BaseModel, Field
from enum import Enum
from typing import Any


class LLMRole(str, Enum):
    """Message roles in conversation."""
    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"


class Message(BaseModel):
    """Represents a single message sent to the text generator."""
    role: LLMRole
    content: str

    def to_dict(self) -> dict:
        """Convert to LiteLLM-compatible dictionary."""
        return {
            "role": self.role.value,
            "content": self.content
        }


class LLMResponse(BaseModel):
    """Standardized response from the external text generator."""
    model_config = {"arbitrary_types_allowed": True}

    content: str | None = None
    finish_reason: str | None = None
    model: str | None = None
    usage: dict | None = None
    raw_response: Any = None

    @property
    def has_text(self) -> bool:
        """Check if the generator returned any non-blank text."""
        return bool(self.content and self.content.strip())

    @property
    def total_tokens(self) -> int | None:
        if not self.usage:
            return None
        return self.usage.get("total_tokens")


class LLMConfig(BaseModel):
    """Configuration for text generator invocation."""
    model: str
    temperature: float = Field(default=0.7, ge=0, le=2)
    max_tokens: int | None = Field(default=None, gt=0)
    top_p: float = Field(default=1.0, ge=0, le=1)
    timeout: int | None = Field(default=None, gt=0)
    api_key: str | None = Field(default=None)
    api_base: str | None = Field(default=None)
    max_attempts: int = Field(
        default=3,
        ge=1,
        description="Generation attempts before giving up on empty or failed output"
    )
    extra_params: dict = Field(default_factory=dict)
