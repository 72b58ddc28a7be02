"""
Daily Recipes - Configuration and settings.

All settings can be set through environment variables prefixed with
DAILY_RECIPES_ (e.g. DAILY_RECIPES_PROVIDER=anthropic) or through a .env file.
Provider API keys are also read from the usual OPENAI_API_KEY and
ANTHROPIC_API_KEY variables.
"""

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class RecipeSettings(BaseSettings):
    """Settings for generation, providers, persistence, and logging."""

    model_config = SettingsConfigDict(
        env_prefix="DAILY_RECIPES_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    # Provider selection
    provider: str = "openai"  # "openai", "anthropic", "ollama", "local"

    openai_api_key: str | None = Field(
        default=None,
        validation_alias=AliasChoices("DAILY_RECIPES_OPENAI_API_KEY", "OPENAI_API_KEY", "openai_api_key"),
    )
    anthropic_api_key: str | None = Field(
        default=None,
        validation_alias=AliasChoices(
            "DAILY_RECIPES_ANTHROPIC_API_KEY", "ANTHROPIC_API_KEY", "anthropic_api_key"
        ),
    )

    openai_base_url: str = "https://api.openai.com"
    openai_model: str = "gpt-4"
    anthropic_base_url: str = "https://api.anthropic.com"
    anthropic_model: str = "claude-3-sonnet-20240229"
    ollama_base_url: str = "http://localhost:11434"
    ollama_model: str = "llama2"
    local_base_url: str = "http://localhost:8080"
    local_model: str = "local-model"

    max_tokens: int = 2000
    temperature: float = 0.7

    # Network
    request_timeout_seconds: float = 60.0
    transport_retries: int = 1

    # Generation context
    language: str = "de"
    region: str = "DE"
    creativity_level: float = Field(default=0.7, ge=0.0, le=1.0)
    budget_level: Literal["low", "medium", "high"] = "medium"
    consider_sustainability: bool = True
    generate_nutrition: bool = True
    generate_tips: bool = True
    generate_image: bool = False

    # Learning
    # 1.0 keeps weights as plain running sums; < 1.0 shrinks old weights per rating
    preference_decay: float = Field(default=1.0, gt=0.0, le=1.0)

    # Persistence
    data_dir: Path = Path("data")
    max_cached_recipes: int = 50

    # Application
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    log_prompts: bool = False

    def api_key_for(self, provider: str) -> str | None:
        """Return the configured API key for a provider, if any."""
        if provider == "openai":
            return self.openai_api_key
        if provider == "anthropic":
            return self.anthropic_api_key
        return None


@lru_cache
def get_settings() -> RecipeSettings:
    """Get cached settings instance."""
    return RecipeSettings()


class _SettingsProxy:
    """Lazy proxy for settings to avoid loading .env at import time."""

    _instance: RecipeSettings | None = None

    def __getattr__(self, name: str):
        if self._instance is None:
            self._instance = get_settings()
        return getattr(self._instance, name)


settings = _SettingsProxy()
