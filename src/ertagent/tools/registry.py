"""Tool definitions and the per-run tool registry."""

from __future__ import annotations

import json
import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from loguru import logger
from pydantic import BaseModel, ValidationError

ERROR_PREFIX = "error: "


def _shorten_text(text: str, width: int = 30, placeholder: str = "...") -> str:
    """Shorten text to width characters, cutting in the middle of words if needed."""
    if len(text) <= width:
        return text

    available = width - len(placeholder)
    if available <= 0:
        return placeholder

    return text[:available] + placeholder


def error_result(message: object) -> str:
    return f"{ERROR_PREFIX}{message}"


def is_error_result(output: str) -> bool:
    return output.startswith(ERROR_PREFIX)


@dataclass(frozen=True)
class ToolParameter:
    name: str
    type: str
    description: str
    required: bool = True


@dataclass(frozen=True)
class ToolDefinition:
    """Tool metadata and the handler bound to one run."""

    name: str
    description: str
    input_model: type[BaseModel]
    handler: Callable[[Any], str]

    def parameters(self) -> list[ToolParameter]:
        schema = self.input_model.model_json_schema()
        required = set(schema.get("required", []))
        return [
            ToolParameter(
                name=name,
                type=str(prop.get("type", "string")),
                description=str(prop.get("description", "")),
                required=name in required,
            )
            for name, prop in schema.get("properties", {}).items()
        ]

    def schema(self) -> dict[str, Any]:
        """Render the OpenAI function-calling schema."""
        params = self.parameters()
        return {
            "type": "function",
            "function": {
                "name": self.name,
                "description": self.description,
                "parameters": {
                    "type": "object",
                    "properties": {
                        param.name: {"type": param.type, "description": param.description} for param in params
                    },
                    "required": [param.name for param in params if param.required],
                },
            },
        }

    def run(self, arguments: dict[str, Any]) -> str:
        try:
            params = self.input_model.model_validate(arguments)
        except ValidationError as exc:
            return error_result(f"invalid arguments for {self.name}: {exc.errors(include_url=False)}")
        try:
            return self.handler(params)
        except Exception as exc:
            logger.exception("tool.handler.error name={}", self.name)
            return error_result(f"{type(exc).__name__}: {exc}")


class ToolRegistry:
    """Fixed set of tools exposed to the agent for one run."""

    def __init__(self) -> None:
        self._tools: dict[str, ToolDefinition] = {}

    def register(self, tool: ToolDefinition) -> None:
        if tool.name in self._tools:
            raise ValueError(f"Duplicate tool name: {tool.name}")
        self._tools[tool.name] = tool

    def has(self, name: str) -> bool:
        return name in self._tools

    def get(self, name: str) -> ToolDefinition | None:
        return self._tools.get(name)

    def names(self) -> list[str]:
        return list(self._tools)

    def definitions(self) -> list[ToolDefinition]:
        return list(self._tools.values())

    def model_tools(self) -> list[dict[str, Any]]:
        return [tool.schema() for tool in self._tools.values()]

    def compact_rows(self) -> list[str]:
        rows: list[str] = []
        for tool in self._tools.values():
            params = ", ".join(f"{param.name}: {param.type}" for param in tool.parameters())
            rows.append(f"{tool.name}({params}): {tool.description}")
        return rows

    def _log_tool_call(self, name: str, kwargs: dict[str, Any]) -> None:
        params: list[str] = []
        for key, value in kwargs.items():
            try:
                rendered = json.dumps(value, ensure_ascii=False)
            except TypeError:
                rendered = repr(value)
            value = _shorten_text(rendered, width=30, placeholder="...")
            if value.startswith('"') and not value.endswith('"'):
                value = value + '"'
            params.append(f"{key}={value}")
        logger.info("tool.call.start name={} {{ {} }}", name, ", ".join(params))

    def execute(self, name: str, *, kwargs: dict[str, Any]) -> str:
        """Run a tool by name. Unknown tools produce an error result."""
        tool = self.get(name)
        if tool is None:
            logger.warning("tool.call.unknown name={}", name)
            return error_result(f"unknown tool {name!r}; available: {', '.join(self._tools)}")

        self._log_tool_call(name, kwargs)
        start = time.monotonic()
        try:
            return tool.run(kwargs)
        except Exception:
            logger.exception("tool.call.error name={}", name)
            raise
        finally:
            duration = time.monotonic() - start
            logger.info("tool.call.end name={} duration={:.3f}ms", name, duration * 1000)
