"""Tool-calling agent loop."""

from __future__ import annotations

import json
from typing import Any

from loguru import logger

from ertagent.agent.prompt import CONTINUE_PROMPT
from ertagent.agent.provider import Provider, ProviderReply
from ertagent.agent.result import AgentTurn, ToolCall, ToolOutcome, Verdict
from ertagent.tools.factories import DECLARE_FAIL, DECLARE_PASS
from ertagent.tools.registry import ToolRegistry, is_error_result


class AgentLoop:
    """Drive the conversation until a verdict tool fires or the budget runs out."""

    def __init__(self, *, provider: Provider, registry: ToolRegistry, max_iterations: int = 20) -> None:
        if max_iterations < 1:
            raise ValueError("max_iterations must be at least 1")
        self._provider = provider
        self._registry = registry
        self._max_iterations = max_iterations
        self.turns: list[AgentTurn] = []

    def run(self, messages: list[dict[str, Any]]) -> Verdict:
        """Run the loop over `messages`, which is extended in place."""
        tools = self._registry.model_tools()
        for iteration in range(1, self._max_iterations + 1):
            logger.info("agent.step iteration={} max={}", iteration, self._max_iterations)
            reply = self._provider.complete(messages, tools)
            outcomes = self._dispatch(messages, reply)
            self.turns.append(
                AgentTurn(
                    iteration=iteration,
                    text=reply.text,
                    calls=tuple(reply.tool_calls),
                    outcomes=tuple(outcomes),
                )
            )

            verdict = _find_verdict(outcomes)
            if verdict is not None:
                logger.info("agent.verdict passed={} iteration={} reason={}", verdict.passed, iteration, verdict.reason)
                return verdict

        logger.warning("agent.exhausted max={}", self._max_iterations)
        return Verdict.exhausted(self._max_iterations)

    def _dispatch(self, messages: list[dict[str, Any]], reply: ProviderReply) -> list[ToolOutcome]:
        if not reply.tool_calls:
            if reply.text:
                messages.append({"role": "assistant", "content": reply.text})
            messages.append({"role": "user", "content": CONTINUE_PROMPT})
            return []

        messages.append(_assistant_message(reply))
        outcomes: list[ToolOutcome] = []
        for call in reply.tool_calls:
            output = self._registry.execute(call.name, kwargs=dict(call.arguments))
            outcomes.append(ToolOutcome(call=call, output=output))
            messages.append({"role": "tool", "tool_call_id": call.id, "content": output})
        return outcomes


def _assistant_message(reply: ProviderReply) -> dict[str, Any]:
    return {
        "role": "assistant",
        "content": reply.text or None,
        "tool_calls": [
            {
                "id": call.id,
                "type": "function",
                "function": {"name": call.name, "arguments": json.dumps(call.arguments, ensure_ascii=False)},
            }
            for call in reply.tool_calls
        ],
    }


def _find_verdict(outcomes: list[ToolOutcome]) -> Verdict | None:
    # declare_pass wins when both verdict tools fire in one turn, regardless of order.
    passed = _first_verdict_call(outcomes, DECLARE_PASS)
    if passed is not None:
        return Verdict.passing(_reason(passed))
    failed = _first_verdict_call(outcomes, DECLARE_FAIL)
    if failed is not None:
        return Verdict.failing(_reason(failed))
    return None


def _first_verdict_call(outcomes: list[ToolOutcome], name: str) -> ToolCall | None:
    for outcome in outcomes:
        if outcome.call.name == name and not is_error_result(outcome.output):
            return outcome.call
    return None


def _reason(call: ToolCall) -> str:
    return str(call.arguments.get("reason", ""))
