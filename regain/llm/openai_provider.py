"""OpenAI LLM provider implementation."""
import json
import logging

import httpx

from regain.config.settings import get_settings
from regain.llm.base import (
    LLMProvider,
    LLMConfig,
    LLMResponse,
    Message,
)

logger = logging.getLogger(__name__)


def _as_dict(value) -> dict:
    return value if isinstance(value, dict) else {}


class OpenAIProvider(LLMProvider):
    """
    OpenAI-compatible LLM provider.

    Works with OpenAI API, OpenRouter, and other compatible endpoints.
    Uses the chat completions endpoint with JSON-schema constrained output.
    """

    def __init__(
        self,
        api_key: str | None = None,
        base_url: str | None = None,
        default_model: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        settings = get_settings()
        self.api_key = api_key or settings.openai_api_key
        self.base_url = (base_url or settings.openai_base_url).rstrip('/')
        self.default_model = default_model or settings.openai_model
        self.timeout = timeout or settings.openai_timeout
        self._transport = transport

        if not self.api_key:
            logger.warning("OpenAI API key not configured. LLM features will fail.")

        self._client: httpx.AsyncClient | None = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create async HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                timeout=httpx.Timeout(self.timeout),
                headers={
                    "Authorization": f"Bearer {self.api_key}",
                    "Content-Type": "application/json",
                },
                transport=self._transport,
            )
        return self._client

    async def close(self):
        """Close the HTTP client."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()

    def _build_messages(self, messages: list[Message]) -> list[dict]:
        """Convert Message objects to OpenAI format."""
        return [{"role": m.role, "content": m.content} for m in messages]

    async def chat(
        self,
        messages: list[Message],
        config: LLMConfig,
    ) -> LLMResponse:
        """
        Send chat request to OpenAI-compatible API.

        When a schema is provided the request uses ``response_format`` of type
        ``json_schema`` so the model is constrained to the node's output shape.
        """
        client = await self._get_client()

        payload = {
            "model": config.model or self.default_model,
            "messages": self._build_messages(messages),
            "temperature": config.temperature,
        }

        if config.max_tokens:
            payload["max_tokens"] = config.max_tokens

        if config.json_schema:
            payload["response_format"] = {
                "type": "json_schema",
                "json_schema": {
                    "name": config.schema_name or "structured_output",
                    "schema": config.json_schema,
                },
            }

        try:
            response = await client.post(
                f"{self.base_url}/chat/completions",
                json=payload,
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            logger.error(f"OpenAI API error: {e.response.status_code} - {e.response.text}")
            raise

        try:
            data = _as_dict(response.json())
        except ValueError:
            logger.warning(f"OpenAI returned a non-JSON body for {config.schema_name}")
            data = {}
        choices = data.get("choices")
        choice = _as_dict(choices[0]) if isinstance(choices, list) and choices else {}
        content = _as_dict(choice.get("message")).get("content")
        if not isinstance(content, str):
            content = ""

        # Parse structured data if schema was provided
        structured_data = None
        if config.json_schema:
            try:
                parsed = json.loads(content)
            except json.JSONDecodeError:
                logger.warning(f"Failed to parse JSON from OpenAI response for {config.schema_name}")
            else:
                if isinstance(parsed, dict):
                    structured_data = parsed

        usage = _as_dict(data.get("usage"))

        return LLMResponse(
            content=content,
            structured_data=structured_data,
            usage={
                "prompt_tokens": usage.get("prompt_tokens"),
                "completion_tokens": usage.get("completion_tokens"),
                "total_tokens": usage.get("total_tokens"),
            },
            model=data.get("model"),
            finish_reason=choice.get("finish_reason"),
        )

    async def health_check(self) -> bool:
        """
        Check if OpenAI API is accessible.

        Attempts to list models to verify connection.
        """
        if not self.api_key:
            return False

        try:
            client = await self._get_client()
            response = await client.get(f"{self.base_url}/models")
            return response.status_code == 200
        except httpx.HTTPError as e:
            logger.warning(f"OpenAI health check failed: {e}")
            return False
