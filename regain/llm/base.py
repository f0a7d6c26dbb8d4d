"""Provider-agnostic LLM interfaces."""
from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Literal


@dataclass
class Message:
    role: Literal["system", "user", "assistant"]
    content: str


@dataclass
class LLMConfig:
    """Per-request generation settings."""

    model: str | None = None
    temperature: float = 0.7
    max_tokens: int | None = None
    json_schema: dict[str, Any] | None = None
    schema_name: str | None = None


@dataclass
class LLMResponse:
    content: str
    structured_data: dict[str, Any] | None = None
    usage: dict[str, int | None] = field(default_factory=dict)
    model: str | None = None
    finish_reason: str | None = None


class LLMProvider(ABC):
    """Chat-completion backend used by the probabilistic pipeline nodes."""

    @abstractmethod
    async def chat(self, messages: list[Message], config: LLMConfig) -> LLMResponse:
        """Send a chat request and return the (optionally structured) response."""

    async def close(self) -> None:
        """Release network resources held by the provider."""

    async def health_check(self) -> bool:
        return True
