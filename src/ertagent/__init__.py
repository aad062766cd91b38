"""ertagent - agent-driven acceptance tests for Emacs."""

from ertagent.agent import AgentLoop, AnyLLMProvider, Verdict
from ertagent.cases import TestCase, build_cases
from ertagent.config import Settings, get_settings
from ertagent.instance import EmacsChannel, InstanceHandle, InstanceManager
from ertagent.runner import TestRunner
from ertagent.spec import TestGroup, TestSpec, load_spec
from ertagent.tools import ToolRegistry, create_tool_registry

__version__ = "0.1.0"

__all__ = [
    "AgentLoop",
    "AnyLLMProvider",
    "EmacsChannel",
    "InstanceHandle",
    "InstanceManager",
    "Settings",
    "TestCase",
    "TestGroup",
    "TestRunner",
    "TestSpec",
    "ToolRegistry",
    "Verdict",
    "build_cases",
    "create_tool_registry",
    "get_settings",
    "load_spec",
]
