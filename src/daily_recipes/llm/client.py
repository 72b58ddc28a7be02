"""
Daily Recipes - Recipe Client.

Performs one request/response exchange with an AI provider and returns
the generated text. Parsing the text into a recipe is validation's job.

Failure classification:
- connection problems and timeouts -> TransportError (after retries)
- non-2xx status, non-JSON body, unexpected envelope -> ProviderResponseError
- unsupported provider id -> UnknownProviderError
"""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

import httpx

from daily_recipes.config import RecipeSettings, get_settings
from daily_recipes.errors import ProviderResponseError, TransportError
from daily_recipes.llm.prompt_logger import log_exchange
from daily_recipes.llm.providers import ProviderAdapter, get_adapter

logger = logging.getLogger(__name__)

# Characters of an error body kept in exception messages
ERROR_BODY_PREVIEW = 200


class RecipeClient:
    """
    HTTP client for recipe generation.

    Args:
        settings: Provider defaults, timeout, and retry count
        http_client: Optional shared httpx.AsyncClient (not closed by us)
    """

    def __init__(
        self,
        settings: RecipeSettings | None = None,
        http_client: httpx.AsyncClient | None = None,
    ):
        self.settings = settings or get_settings()
        self._http_client = http_client

    @asynccontextmanager
    async def _session(self) -> AsyncIterator[httpx.AsyncClient]:
        if self._http_client is not None:
            yield self._http_client
            return
        async with httpx.AsyncClient(timeout=self.settings.request_timeout_seconds) as client:
            yield client

    async def complete(self, prompt: str, provider: str, api_key: str | None = None) -> str:
        """
        Send a prompt to a provider and return the generated text.

        Args:
            prompt: Full generation prompt
            provider: "openai", "anthropic", "ollama" or "local"
            api_key: Overrides the key from settings

        Returns:
            The provider's text content, unparsed
        """
        adapter = get_adapter(provider, settings=self.settings)
        key = api_key or self.settings.api_key_for(provider)

        logger.info(f"Requesting recipe from {provider} ({adapter.config.model})")

        try:
            payload = await self._post(adapter, prompt, key)
            content = adapter.extract_content(payload)
        except (TransportError, ProviderResponseError) as e:
            log_exchange(
                provider=provider,
                model=adapter.config.model,
                url=adapter.url,
                prompt=prompt,
                error=str(e),
            )
            raise

        log_exchange(
            provider=provider,
            model=adapter.config.model,
            url=adapter.url,
            prompt=prompt,
            response=content,
        )
        logger.debug(f"{provider} returned {len(content)} characters")
        return content

    async def _post(self, adapter: ProviderAdapter, prompt: str, api_key: str | None) -> Any:
        body = adapter.build_request(prompt)
        headers = {"Content-Type": "application/json", **adapter.headers(api_key)}
        attempts = max(self.settings.transport_retries, 0) + 1

        async with self._session() as client:
            for attempt in range(1, attempts + 1):
                try:
                    response = await client.post(
                        adapter.url,
                        json=body,
                        headers=headers,
                        timeout=self.settings.request_timeout_seconds,
                    )
                    break
                except httpx.TransportError as e:
                    logger.warning(
                        f"{adapter.name} request failed (attempt {attempt}/{attempts}): {e!r}"
                    )
                    if attempt == attempts:
                        raise TransportError(f"AI API error ({adapter.name}): {e!r}") from e

        if not response.is_success:
            raise ProviderResponseError(
                f"{adapter.name} returned HTTP {response.status_code}: "
                f"{response.text[:ERROR_BODY_PREVIEW]}",
                status_code=response.status_code,
            )

        try:
            return response.json()
        except ValueError as e:
            raise ProviderResponseError(
                f"{adapter.name} returned a non-JSON body: {response.text[:ERROR_BODY_PREVIEW]}",
                status_code=response.status_code,
            ) from e
