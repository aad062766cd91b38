"""Language-model provider adapters."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Optional, Protocol

from any_llm import completion  # type: ignore[import-untyped]
from loguru import logger
from openai.types.chat import ChatCompletion

from ertagent.agent.result import ToolCall
from ertagent.errors import ToolCallError


@dataclass(frozen=True)
class ProviderReply:
    """Assistant text and tool calls for one turn."""

    text: str = ""
    tool_calls: list[ToolCall] = field(default_factory=list)


class Provider(Protocol):
    def complete(self, messages: list[dict[str, Any]], tools: list[dict[str, Any]]) -> ProviderReply: ...


def parse_arguments(name: str, raw: str | None) -> dict[str, Any]:
    """Decode the JSON argument payload of one tool call."""
    if not raw:
        return {}
    try:
        arguments = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise ToolCallError(f"tool call {name!r} has invalid JSON arguments: {raw!r}") from exc
    if not isinstance(arguments, dict):
        raise ToolCallError(f"tool call {name!r} arguments must be an object, got {type(arguments).__name__}")
    return arguments


class AnyLLMProvider:
    """Provider backed by any-llm's OpenAI-compatible completion API."""

    def __init__(
        self,
        model: str,
        api_key: Optional[str] = None,
        api_base: Optional[str] = None,
        max_tokens: Optional[int] = None,
    ) -> None:
        """Initialize the provider.

        Args:
            model: Model in `provider/model` form (e.g., 'openai/gpt-4o-mini')
            api_key: API key for the provider
            api_base: Optional API base URL
            max_tokens: Maximum tokens for responses
        """
        self.model = model
        self.api_key = api_key
        self.api_base = api_base
        self.max_tokens = max_tokens

    def complete(self, messages: list[dict[str, Any]], tools: list[dict[str, Any]]) -> ProviderReply:
        logger.debug("provider.call model={} messages={}", self.model, len(messages))
        response: ChatCompletion = completion(
            model=self.model,
            messages=messages,
            tools=tools,
            max_tokens=self.max_tokens,
            api_key=self.api_key,
            api_base=self.api_base,
        )
        message = response.choices[0].message
        calls = [
            ToolCall(
                id=call.id,
                name=call.function.name,
                arguments=parse_arguments(call.function.name, call.function.arguments),
            )
            for call in message.tool_calls or []
        ]
        return ProviderReply(text=message.content or "", tool_calls=calls)
