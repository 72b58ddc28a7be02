"""Tests for provider adapters."""

import pytest

from daily_recipes.errors import ProviderResponseError, UnknownProviderError
from daily_recipes.llm.providers import (
    ADAPTERS,
    AnthropicAdapter,
    LocalAdapter,
    OllamaAdapter,
    OpenAIAdapter,
    ProviderConfig,
    get_adapter,
    provider_config,
)

CONFIG = ProviderConfig(base_url="https://example.test/", model="test-model", max_tokens=1234)


class TestGetAdapter:
    def test_known_providers(self, settings):
        assert isinstance(get_adapter("openai", settings=settings), OpenAIAdapter)
        assert isinstance(get_adapter("anthropic", settings=settings), AnthropicAdapter)
        assert isinstance(get_adapter("ollama", settings=settings), OllamaAdapter)
        assert isinstance(get_adapter("local", settings=settings), LocalAdapter)

    def test_unknown_provider(self, settings):
        with pytest.raises(UnknownProviderError) as exc:
            get_adapter("gemini", settings=settings)
        assert exc.value.provider == "gemini"

    def test_unknown_provider_config(self, settings):
        with pytest.raises(UnknownProviderError):
            provider_config("cohere", settings)

    def test_defaults_from_settings(self, settings):
        adapter = get_adapter("ollama", settings=settings)
        assert adapter.url == "http://localhost:11434/api/generate"
        assert adapter.config.model == "llama2"
        assert adapter.config.max_tokens == 2000

    def test_registry_is_closed(self):
        assert set(ADAPTERS) == {"openai", "anthropic", "ollama", "local"}


class TestOpenAIAdapter:
    def test_request(self):
        adapter = OpenAIAdapter(CONFIG)
        body = adapter.build_request("make dinner")
        assert adapter.url == "https://example.test/v1/chat/completions"
        assert body["model"] == "test-model"
        assert body["max_tokens"] == 1234
        assert body["messages"][0]["role"] == "system"
        assert body["messages"][1] == {"role": "user", "content": "make dinner"}
        assert body["response_format"] == {"type": "json_object"}

    def test_headers(self):
        assert OpenAIAdapter(CONFIG).headers("sk-1") == {"Authorization": "Bearer sk-1"}

    def test_extract(self):
        payload = {"choices": [{"message": {"content": "{}"}}]}
        assert OpenAIAdapter(CONFIG).extract_content(payload) == "{}"

    def test_extract_malformed(self):
        with pytest.raises(ProviderResponseError):
            OpenAIAdapter(CONFIG).extract_content({"choices": []})
        with pytest.raises(ProviderResponseError):
            OpenAIAdapter(CONFIG).extract_content({"error": {"message": "quota"}})


class TestAnthropicAdapter:
    def test_request(self):
        adapter = AnthropicAdapter(CONFIG)
        body = adapter.build_request("make dinner")
        assert adapter.path == "/v1/messages"
        assert body["max_tokens"] == 1234
        assert body["messages"] == [{"role": "user", "content": "make dinner"}]
        assert "system" in body

    def test_headers(self):
        headers = AnthropicAdapter(CONFIG).headers("ak-1")
        assert headers["x-api-key"] == "ak-1"
        assert headers["anthropic-version"] == "2023-06-01"

    def test_extract_first_text_block(self):
        payload = {"content": [{"type": "text", "text": '{"title": "x"}'}]}
        assert AnthropicAdapter(CONFIG).extract_content(payload) == '{"title": "x"}'

    def test_extract_without_text(self):
        with pytest.raises(ProviderResponseError):
            AnthropicAdapter(CONFIG).extract_content({"content": []})


class TestOllamaAdapter:
    def test_request(self):
        body = OllamaAdapter(CONFIG).build_request("make dinner")
        assert body["prompt"] == "make dinner"
        assert body["stream"] is False
        assert body["options"]["num_predict"] == 1234

    def test_no_auth(self):
        assert OllamaAdapter(CONFIG).headers("ignored") == {}

    def test_extract(self):
        assert OllamaAdapter(CONFIG).extract_content({"response": "{}"}) == "{}"
        with pytest.raises(ProviderResponseError):
            OllamaAdapter(CONFIG).extract_content({"done": True})


class TestLocalAdapter:
    def test_openai_shape_without_auth(self):
        adapter = LocalAdapter(CONFIG)
        assert adapter.path == "/v1/chat/completions"
        assert adapter.headers("sk-1") == {}
        assert "response_format" not in adapter.build_request("x")
