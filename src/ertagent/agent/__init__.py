"""Agent loop, provider adapters and run outcomes."""

from ertagent.agent.loop import AgentLoop
from ertagent.agent.provider import AnyLLMProvider, Provider, ProviderReply
from ertagent.agent.result import AgentTurn, ToolCall, ToolOutcome, Verdict

__all__ = ["AgentLoop", "AgentTurn", "AnyLLMProvider", "Provider", "ProviderReply", "ToolCall", "ToolOutcome", "Verdict"]
