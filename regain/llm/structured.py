"""Structured LLM calls for the probabilistic pipeline nodes.

Every node sends ``{system_instruction, context_variables, output_schema}`` and
gets back either a validated pydantic model or a typed failure. There is no
prose fallback and no retry with a relaxed schema.
"""
from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any, TypeVar

import httpx
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from regain.config.settings import get_settings
from regain.core.exceptions import LLMCallError, SchemaViolation
from regain.llm.base import LLMConfig, LLMProvider, Message

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)


@dataclass(frozen=True)
class StructuredRequest:
    """One structured LLM call.

    ``user_template`` is formatted with ``context_variables`` to build the user
    message; the system instruction carries the role and the task rules.
    """

    schema_name: str
    system_instruction: str
    user_template: str
    output_schema: dict[str, Any]
    context_variables: dict[str, Any] = field(default_factory=dict)

    def render_context(self) -> str:
        return self.user_template.format(**self.context_variables)


class StructuredLLMClient:
    """Runs StructuredRequests against an LLMProvider under a per-call timeout."""

    def __init__(
        self,
        provider: LLMProvider,
        timeout: float | None = None,
        temperature: float | None = None,
        model: str | None = None,
    ):
        settings = get_settings()
        self._provider = provider
        self._timeout = timeout if timeout is not None else settings.llm_call_timeout
        self._temperature = temperature if temperature is not None else settings.openai_temperature
        self._model = model

    async def call(self, node: str, request: StructuredRequest, output_model: type[M]) -> M:
        """Issue the request and validate the response against ``output_model``.

        Raises:
            LLMCallError: On timeout or transport failure.
            SchemaViolation: When the response is not JSON or does not match
                the node's output model.
        """
        messages = [
            Message(role="system", content=request.system_instruction),
            Message(role="user", content=request.render_context()),
        ]
        config = LLMConfig(
            model=self._model,
            temperature=self._temperature,
            json_schema=request.output_schema,
            schema_name=request.schema_name,
        )

        logger.debug(f"[{node}] Calling LLM schema={request.schema_name}")
        try:
            response = await asyncio.wait_for(
                self._provider.chat(messages, config),
                timeout=self._timeout,
            )
        except TimeoutError:
            raise LLMCallError(node, f"timed out after {self._timeout}s", {"timeout": self._timeout})
        except httpx.HTTPError as e:
            raise LLMCallError(node, str(e) or type(e).__name__, {"exception_type": type(e).__name__})

        if response.structured_data is None:
            raise SchemaViolation(
                node,
                "response is not a JSON object",
                {"content_preview": (response.content or "")[:200]},
            )

        try:
            result = output_model.model_validate(response.structured_data)
        except PydanticValidationError as e:
            raise SchemaViolation(
                node,
                f"{e.error_count()} validation error(s)",
                {"errors": e.errors(include_url=False, include_context=False)},
            )

        logger.debug(f"[{node}] LLM response validated as {output_model.__name__}")
        return result
