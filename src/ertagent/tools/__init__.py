"""Tools exposed to the agent."""

from ertagent.tools.factories import DECLARE_FAIL, DECLARE_PASS, VERDICT_TOOLS, EmacsTools, create_tool_registry
from ertagent.tools.registry import ToolDefinition, ToolParameter, ToolRegistry, error_result, is_error_result

__all__ = [
    "DECLARE_FAIL",
    "DECLARE_PASS",
    "VERDICT_TOOLS",
    "EmacsTools",
    "ToolDefinition",
    "ToolParameter",
    "ToolRegistry",
    "create_tool_registry",
    "error_result",
    "is_error_result",
]
