"""Judgment providers: independent LLMs asked for a JSON verdict.

Each provider carries its own credentials and client, so tests can pass
stand-ins and nothing is shared between concurrent calls.
"""

from __future__ import annotations

import logging
from typing import Protocol

import anthropic
import httpx

from poly_edge.common.http import HttpClient
from poly_edge.common.llm import ask_claude
from poly_edge.config import Settings
from poly_edge.errors import ConfigurationError, ProviderError
from poly_edge.oracle.context import SYSTEM_PROMPT, build_user_prompt

logger = logging.getLogger(__name__)


class JudgmentProvider(Protocol):
    """An independent judge consulted by the oracle."""

    name: str

    async def judge(self, context: str) -> str:
        """Return the provider's raw text response for a market context.

        Raises:
            ProviderError: the call failed or returned no text
        """
        ...


class AnthropicProvider:
    """Claude via the Anthropic Messages API."""

    name = "claude"

    def __init__(
        self,
        api_key: str,
        model: str,
        max_tokens: int = 1024,
        temperature: float = 0.3,
        client: anthropic.AsyncAnthropic | None = None,
    ) -> None:
        if not api_key and client is None:
            raise ConfigurationError("ANTHROPIC_API_KEY is not set")
        self._api_key = api_key
        self._model = model
        self._max_tokens = max_tokens
        self._temperature = temperature
        self._client = client

    async def judge(self, context: str) -> str:
        try:
            if self._client is not None:
                return await self._ask(self._client, context)
            async with anthropic.AsyncAnthropic(api_key=self._api_key) as client:
                return await self._ask(client, context)
        except anthropic.APIError as exc:
            raise ProviderError(self.name, f"API error: {exc}") from exc
        except ValueError as exc:
            raise ProviderError(self.name, str(exc)) from exc

    async def _ask(self, client: anthropic.AsyncAnthropic, context: str) -> str:
        return await ask_claude(
            client,
            model=self._model,
            system=SYSTEM_PROMPT,
            user=build_user_prompt(context),
            max_tokens=self._max_tokens,
            temperature=self._temperature,
        )


class GeminiProvider:
    """Gemini via the generateContent REST endpoint, JSON response mode."""

    name = "gemini"

    def __init__(
        self,
        api_key: str,
        model: str,
        base_url: str = "https://generativelanguage.googleapis.com/v1beta",
        max_tokens: int = 1024,
        temperature: float = 0.3,
        timeout: float | None = None,
    ) -> None:
        if not api_key:
            raise ConfigurationError("GEMINI_API_KEY is not set")
        self._api_key = api_key
        self._model = model
        self._base_url = base_url
        self._max_tokens = max_tokens
        self._temperature = temperature
        self._timeout = timeout

    def _request_body(self, context: str) -> dict:
        return {
            "systemInstruction": {"parts": [{"text": SYSTEM_PROMPT}]},
            "contents": [{"role": "user", "parts": [{"text": build_user_prompt(context)}]}],
            "generationConfig": {
                "responseMimeType": "application/json",
                "temperature": self._temperature,
                "maxOutputTokens": self._max_tokens,
            },
        }

    async def judge(self, context: str) -> str:
        try:
            async with HttpClient(
                base_url=self._base_url,
                headers={"x-goog-api-key": self._api_key},
                timeout=self._timeout,
            ) as client:
                resp = await client.post(
                    f"/models/{self._model}:generateContent",
                    json=self._request_body(context),
                )
                data = resp.json()
        except httpx.HTTPStatusError as exc:
            raise ProviderError(self.name, f"HTTP {exc.response.status_code}") from exc
        except httpx.HTTPError as exc:
            raise ProviderError(self.name, f"transport error: {exc}") from exc
        except ValueError as exc:
            raise ProviderError(self.name, f"non-JSON body: {exc}") from exc

        try:
            parts = data["candidates"][0]["content"]["parts"]
            return "".join(part.get("text", "") for part in parts)
        except (KeyError, IndexError, TypeError, AttributeError) as exc:
            raise ProviderError(self.name, f"unexpected response shape: {exc!r}") from exc


def build_providers(settings: Settings) -> list[JudgmentProvider]:
    """Build a provider for every credential present in settings.

    Order is fixed (Claude, then Gemini) and defines provider priority.

    Raises:
        ConfigurationError: no provider credentials are configured
    """
    providers: list[JudgmentProvider] = []
    if settings.anthropic_api_key:
        providers.append(
            AnthropicProvider(
                api_key=settings.anthropic_api_key,
                model=settings.anthropic_model,
                max_tokens=settings.oracle_max_tokens,
                temperature=settings.oracle_temperature,
            )
        )
    if settings.gemini_api_key:
        providers.append(
            GeminiProvider(
                api_key=settings.gemini_api_key,
                model=settings.gemini_model,
                base_url=settings.gemini_api_url,
                max_tokens=settings.oracle_max_tokens,
                temperature=settings.oracle_temperature,
                timeout=settings.http_timeout,
            )
        )

    if not providers:
        raise ConfigurationError(
            "No judgment providers configured: set ANTHROPIC_API_KEY and/or GEMINI_API_KEY"
        )
    logger.debug("Configured providers: %s", ", ".join(p.name for p in providers))
    return providers
