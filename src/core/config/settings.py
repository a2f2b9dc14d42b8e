# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Configuration of the tutoring orchestrator using Pydantic Settings.

Values come from the environment or a .env file:
- LLM_*        model selection and request limits
- TUTORING_*   session loop (turn cap, pacing, sampling)
- API_*        HTTP surface
Provider credentials keep their usual names (GOOGLE_API_KEY, OPENAI_API_KEY,
ANTHROPIC_API_KEY, OLLAMA_BASE_URL).

Example:
    >>> from src.core.config.settings import get_settings
    >>> get_settings().tutoring.max_turns
    15
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

Provider = Literal["google", "openai", "anthropic", "ollama"]

# LiteLLM model string used for each provider unless LLM_MODEL is set
PROVIDER_DEFAULT_MODELS: dict[str, str] = {
    "google": "gemini/gemini-2.0-flash",
    "openai": "gpt-4o-mini",
    "anthropic": "claude-3-5-haiku-20241022",
    "ollama": "ollama/qwen2.5:7b",
}


class LLMSettings(BaseSettings):
    """Model selection and provider credentials for agent calls.

    Attributes:
        default_provider: Provider whose default model is used.
        model: Explicit LiteLLM model string, overrides the provider default.
        request_timeout: Seconds per completion request.
        max_retries: Retries LiteLLM performs before giving up.
        ollama_base_url: Ollama server for ollama/ models.
        google_api_key: Key for gemini/ models.
        openai_api_key: Key for OpenAI models.
        anthropic_api_key: Key for Claude models.
    """

    model_config = SettingsConfigDict(
        env_prefix="LLM_",
        extra="ignore",
        populate_by_name=True,
    )

    default_provider: Provider = "google"
    model: str | None = None
    request_timeout: float = Field(default=60.0, gt=0)
    max_retries: int = Field(default=2, ge=0)

    ollama_base_url: str = Field(
        default="http://localhost:11434",
        validation_alias="OLLAMA_BASE_URL",
    )
    google_api_key: SecretStr | None = Field(default=None, validation_alias="GOOGLE_API_KEY")
    openai_api_key: SecretStr | None = Field(default=None, validation_alias="OPENAI_API_KEY")
    anthropic_api_key: SecretStr | None = Field(
        default=None,
        validation_alias="ANTHROPIC_API_KEY",
    )

    def get_default_model(self) -> str:
        """LiteLLM model string agents use when none is given."""
        return self.model or PROVIDER_DEFAULT_MODELS[self.default_provider]

    def get_provider_params(self, model: str) -> dict[str, str]:
        """Connection keyword arguments for litellm.acompletion().

        Args:
            model: LiteLLM model string.

        Returns:
            api_base for Ollama, api_key when one is configured, else empty.
        """
        if model.startswith(("ollama/", "ollama_chat/")):
            return {"api_base": self.ollama_base_url}

        if model.startswith("gemini/"):
            key = self.google_api_key
        elif model.startswith(("claude", "anthropic/")):
            key = self.anthropic_api_key
        else:
            key = self.openai_api_key

        return {"api_key": key.get_secret_value()} if key is not None else {}


class TutoringSettings(BaseSettings):
    """Session loop settings.

    Attributes:
        max_turns: Default cap on completed agent turns per session.
        turn_delay_seconds: Pause between automatic agent turns. Pacing only,
            0 disables it.
        agent_temperature: Sampling temperature for agents without an
            explicit temperature in their profile.
        max_output_tokens: Completion token limit per agent call.
        agent_profiles_dir: Directory with agent profile YAML files.
            Defaults to config/agents at the repository root.
        max_completed_sessions: Completed sessions kept in memory for
            viewing. The oldest are dropped when a new session is created.
    """

    model_config = SettingsConfigDict(
        env_prefix="TUTORING_",
        extra="ignore",
    )

    max_turns: int = Field(default=15, ge=1)
    turn_delay_seconds: float = Field(default=0.8, ge=0.0)
    agent_temperature: float = Field(default=0.7, ge=0.0, le=2.0)
    max_output_tokens: int = Field(default=2048, ge=1)
    agent_profiles_dir: str | None = None
    max_completed_sessions: int = Field(default=100, ge=0)


class APISettings(BaseSettings):
    """HTTP surface.

    Attributes:
        title: OpenAPI title.
        prefix: Mount point of the versioned router.
    """

    model_config = SettingsConfigDict(
        env_prefix="API_",
        extra="ignore",
    )

    title: str = "Tutoring Orchestrator API"
    prefix: str = "/api/v1"


class Settings(BaseSettings):
    """Top-level settings object handed around the application.

    Attributes:
        environment: development, test or production.
        debug: Serve the OpenAPI docs and log verbosely.
        log_level: Root level for process logs.
        llm: Model and provider settings.
        tutoring: Session loop settings.
        api: HTTP settings.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    environment: Literal["development", "test", "production"] = "development"
    debug: bool = True
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"

    llm: LLMSettings = Field(default_factory=LLMSettings)
    tutoring: TutoringSettings = Field(default_factory=TutoringSettings)
    api: APISettings = Field(default_factory=APISettings)

    @property
    def is_development(self) -> bool:
        return self.environment == "development"

    @property
    def is_production(self) -> bool:
        return self.environment == "production"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Process-wide settings, read once.

    clear_settings_cache() forces a reload from the environment.
    """
    return Settings()


def clear_settings_cache() -> None:
    """Forget the cached settings."""
    get_settings.cache_clear()
