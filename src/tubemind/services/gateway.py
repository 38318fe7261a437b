"""Gemini API gateway for tubemind.

Sends one prompt to the Gemini service per call and returns the raw text
plus any search-grounding sources. There is no retry and no streaming;
every failure of the call itself is raised as GatewayError.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Self

import httpx
from google import genai
from google.auth.exceptions import GoogleAuthError
from google.genai import errors, types

from tubemind.core.config import DEFAULT_MODEL, Config
from tubemind.core.errors import GatewayError
from tubemind.core.models import Source


@dataclass(frozen=True)
class GatewayResponse:
    """Raw result of one generation call.

    ``sources`` is None when the response carried no grounding metadata.
    """

    text: str
    sources: list[Source] | None = None


def _grounding_sources(response: types.GenerateContentResponse) -> list[Source] | None:
    """Map grounding chunks with a web reference to Source objects."""
    if not response.candidates:
        return None

    metadata = response.candidates[0].grounding_metadata
    if metadata is None or metadata.grounding_chunks is None:
        return None

    return [
        Source(title=chunk.web.title or "", uri=chunk.web.uri or "")
        for chunk in metadata.grounding_chunks
        if chunk.web is not None
    ]


class GeminiGateway:
    """Issues generation requests to the Gemini API."""

    def __init__(self, api_key: str, model: str = DEFAULT_MODEL) -> None:
        """
        Initialize the gateway.

        The client is created on the first request, so an empty key is
        reported then rather than at startup.

        Args:
            api_key: Gemini API key
            model: Gemini model identifier
        """
        self.api_key = api_key
        self.model = model
        self._client: genai.Client | None = None

    @classmethod
    def from_config(cls, config: Config) -> Self:
        """Create a GeminiGateway from configuration."""
        return cls(api_key=config.get_gemini_key(), model=config.model.name)

    def _get_client(self) -> genai.Client:
        if self._client is None:
            if not self.api_key:
                raise GatewayError(
                    "Gemini API key not configured. "
                    "Set GEMINI_API_KEY environment variable or configure in .tubemind/config"
                )
            try:
                self._client = genai.Client(api_key=self.api_key)
            except ValueError as e:
                raise GatewayError(f"Could not create Gemini client: {e}") from e
        return self._client

    async def generate(
        self,
        prompt: str,
        *,
        system_instruction: str | None = None,
        temperature: float | None = None,
        response_schema: types.Schema | None = None,
        enable_search: bool = False,
    ) -> GatewayResponse:
        """
        Send a single generation request.

        Args:
            prompt: Prompt text
            system_instruction: Optional system instruction
            temperature: Optional sampling temperature
            response_schema: Ask the service to emit JSON of this shape.
                Conformance is not checked here.
            enable_search: Enable Google Search grounding

        Returns:
            GatewayResponse with the response text ("" when the service
            returned none) and grounding sources

        Raises:
            GatewayError: If the request fails
        """
        client = self._get_client()

        config_params: dict[str, Any] = {}
        if system_instruction is not None:
            config_params["system_instruction"] = system_instruction
        if temperature is not None:
            config_params["temperature"] = temperature
        if response_schema is not None:
            config_params["response_mime_type"] = "application/json"
            config_params["response_schema"] = response_schema
        if enable_search:
            config_params["tools"] = [types.Tool(google_search=types.GoogleSearch())]

        try:
            response = await client.aio.models.generate_content(
                model=self.model,
                contents=prompt,
                config=types.GenerateContentConfig(**config_params),
            )
        except errors.APIError as e:
            raise GatewayError(f"Gemini API error: {e}") from e
        except GoogleAuthError as e:
            raise GatewayError(f"Gemini authentication failed: {e}") from e
        except (httpx.HTTPError, OSError, TimeoutError) as e:
            # Async transports other than httpx surface connection failures as OSError
            raise GatewayError(f"Could not reach Gemini API: {e}") from e

        return GatewayResponse(text=response.text or "", sources=_grounding_sources(response))
