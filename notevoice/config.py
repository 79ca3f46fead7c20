"""Configuration management for notevoice."""

from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from notevoice.models.detail_models import DetailLevel
from notevoice.models.llm_config_models import LLMConfig


class Settings(BaseSettings):
    """Engine settings loaded from NOTEVOICE_* environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="NOTEVOICE_",
        env_file=".env",
        extra="ignore",
    )

    # Storage
    database_path: Path = Field(default=Path("notevoice.db"), description="SQLite database file")

    # Request defaults
    default_tone_level: int = Field(default=50, ge=0, le=100, description="Tone when neither request nor preferences set one")
    default_detail_level: DetailLevel = Field(default=DetailLevel.BRIEF)

    # Extraction
    low_signal_word_threshold: int = Field(default=20, ge=1, description="Samples below this word count are flagged low_signal")
    max_sample_chars: int = Field(default=3000, gt=0, description="Samples longer than this are accepted with a warning")
    profile_cache_size: int = Field(default=256, ge=0, description="Profiles memoised per sample text")

    # Logging
    log_level: str = Field(default="INFO", description="Log level for notevoice loggers")

    # Text generator
    llm_model: str = Field(default="gemini/gemini-2.5-flash", description="LiteLLM model identifier")
    llm_api_key: str | None = Field(default=None)
    llm_api_base: str | None = Field(default=None)
    llm_temperature: float = Field(default=0.7, ge=0, le=2)
    llm_max_attempts: int = Field(default=3, ge=1)

    def llm_config(self) -> LLMConfig:
        """Generator configuration built from these settings."""
        return LLMConfig(
            model=self.llm_model,
            temperature=self.llm_temperature,
            api_key=self.llm_api_key,
            api_base=self.llm_api_base,
            max_attempts=self.llm_max_attempts,
        )


@lru_cache
def get_settings() -> Settings:
    """Return the process-wide settings instance."""
    return Settings()
