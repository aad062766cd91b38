"""Run outcome types."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class Verdict:
    """Terminal pass/fail outcome of one test run."""

    passed: bool
    reason: str

    @classmethod
    def passing(cls, reason: str) -> Verdict:
        return cls(passed=True, reason=reason)

    @classmethod
    def failing(cls, reason: str) -> Verdict:
        return cls(passed=False, reason=reason)

    @classmethod
    def exhausted(cls, max_iterations: int) -> Verdict:
        return cls(
            passed=False,
            reason=f"Agent exceeded the maximum of {max_iterations} iterations without reaching a verdict",
        )


@dataclass(frozen=True)
class ToolCall:
    """One tool invocation requested by the provider."""

    id: str
    name: str
    arguments: dict[str, object] = field(default_factory=dict)


@dataclass(frozen=True)
class ToolOutcome:
    call: ToolCall
    output: str


@dataclass(frozen=True)
class AgentTurn:
    """One round of the loop."""

    iteration: int
    text: str
    calls: tuple[ToolCall, ...]
    outcomes: tuple[ToolOutcome, ...]
