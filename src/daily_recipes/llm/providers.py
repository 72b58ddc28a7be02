"""
Daily Recipes - Provider adapters.

One adapter per supported provider. Each adapter knows the wire shape of
its provider: request body, HTTP path, auth headers, and where the
generated text sits in the response.

Supported providers:
- openai: Chat Completions API
- anthropic: Messages API
- ollama: local Ollama generate API
- local: any OpenAI-compatible server on the local machine (llama.cpp, LM Studio)
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any

from daily_recipes.config import RecipeSettings, get_settings
from daily_recipes.errors import ProviderResponseError, UnknownProviderError

SYSTEM_PROMPT = "You are an experienced chef AI that generates personalized recipes as JSON."

ANTHROPIC_VERSION = "2023-06-01"


@dataclass(frozen=True)
class ProviderConfig:
    """Connection settings for one provider."""

    base_url: str
    model: str
    max_tokens: int = 2000
    temperature: float = 0.7

    def url_for(self, path: str) -> str:
        return self.base_url.rstrip("/") + path


class ProviderAdapter(ABC):
    """Wire format for one provider."""

    name: str
    path: str

    def __init__(self, config: ProviderConfig):
        self.config = config

    @property
    def url(self) -> str:
        return self.config.url_for(self.path)

    @abstractmethod
    def build_request(self, prompt: str) -> dict[str, Any]:
        """JSON body for a generation request."""

    @abstractmethod
    def headers(self, api_key: str | None) -> dict[str, str]:
        """Authentication headers (Content-Type is added by the client)."""

    @abstractmethod
    def extract_content(self, payload: Any) -> str:
        """Pull the generated text out of the decoded response body."""


def _missing(provider: str, detail: str) -> ProviderResponseError:
    return ProviderResponseError(f"Unexpected {provider} response: {detail}")


class OpenAIAdapter(ProviderAdapter):
    name = "openai"
    path = "/v1/chat/completions"

    def build_request(self, prompt: str) -> dict[str, Any]:
        return {
            "model": self.config.model,
            "messages": [
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": prompt},
            ],
            "max_tokens": self.config.max_tokens,
            "temperature": self.config.temperature,
            "response_format": {"type": "json_object"},
        }

    def headers(self, api_key: str | None) -> dict[str, str]:
        if not api_key:
            return {}
        return {"Authorization": f"Bearer {api_key}"}

    def extract_content(self, payload: Any) -> str:
        try:
            content = payload["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError) as e:
            raise _missing(self.name, "no choices[0].message.content") from e
        if not isinstance(content, str):
            raise _missing(self.name, "message content is not text")
        return content


class LocalAdapter(OpenAIAdapter):
    """OpenAI-compatible server running locally. No authentication."""

    name = "local"

    def build_request(self, prompt: str) -> dict[str, Any]:
        body = super().build_request(prompt)
        # Not every local server implements JSON mode
        body.pop("response_format")
        return body

    def headers(self, api_key: str | None) -> dict[str, str]:
        return {}


class AnthropicAdapter(ProviderAdapter):
    name = "anthropic"
    path = "/v1/messages"

    def build_request(self, prompt: str) -> dict[str, Any]:
        return {
            "model": self.config.model,
            "max_tokens": self.config.max_tokens,
            "system": SYSTEM_PROMPT,
            "messages": [{"role": "user", "content": prompt}],
            "temperature": self.config.temperature,
        }

    def headers(self, api_key: str | None) -> dict[str, str]:
        headers = {"anthropic-version": ANTHROPIC_VERSION}
        if api_key:
            headers["x-api-key"] = api_key
        return headers

    def extract_content(self, payload: Any) -> str:
        try:
            blocks = payload["content"]
        except (KeyError, TypeError) as e:
            raise _missing(self.name, "no content blocks") from e
        if not isinstance(blocks, list):
            raise _missing(self.name, "content is not a list")
        for block in blocks:
            if isinstance(block, dict) and isinstance(block.get("text"), str):
                return block["text"]
        raise _missing(self.name, "no text block in content")


class OllamaAdapter(ProviderAdapter):
    name = "ollama"
    path = "/api/generate"

    def build_request(self, prompt: str) -> dict[str, Any]:
        return {
            "model": self.config.model,
            "prompt": prompt,
            "system": SYSTEM_PROMPT,
            "stream": False,
            "format": "json",
            "options": {
                "temperature": self.config.temperature,
                "num_predict": self.config.max_tokens,
            },
        }

    def headers(self, api_key: str | None) -> dict[str, str]:
        return {}

    def extract_content(self, payload: Any) -> str:
        try:
            content = payload["response"]
        except (KeyError, TypeError) as e:
            raise _missing(self.name, "no response field") from e
        if not isinstance(content, str):
            raise _missing(self.name, "response is not text")
        return content


ADAPTERS: dict[str, type[ProviderAdapter]] = {
    "openai": OpenAIAdapter,
    "anthropic": AnthropicAdapter,
    "ollama": OllamaAdapter,
    "local": LocalAdapter,
}


def provider_config(provider: str, settings: RecipeSettings) -> ProviderConfig:
    """Default connection settings for a provider."""
    if provider not in ADAPTERS:
        raise UnknownProviderError(provider)
    return ProviderConfig(
        base_url=getattr(settings, f"{provider}_base_url"),
        model=getattr(settings, f"{provider}_model"),
        max_tokens=settings.max_tokens,
        temperature=settings.temperature,
    )


def get_adapter(
    provider: str,
    config: ProviderConfig | None = None,
    settings: RecipeSettings | None = None,
) -> ProviderAdapter:
    """
    Get the adapter for a provider identifier.

    Args:
        provider: "openai", "anthropic", "ollama" or "local"
        config: Explicit connection settings (otherwise taken from settings)
        settings: Settings to derive the default config from

    Raises:
        UnknownProviderError: For any other identifier
    """
    adapter_cls = ADAPTERS.get(provider)
    if adapter_cls is None:
        raise UnknownProviderError(provider)
    if config is None:
        config = provider_config(provider, settings or get_settings())
    return adapter_cls(config)
