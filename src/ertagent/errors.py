"""Application-level exception types for ertagent."""

from __future__ import annotations


class ErtAgentError(Exception):
    """Base exception for ertagent."""


class SpecError(ErtAgentError):
    """Raised when a spec document is malformed or incomplete."""


class StartupTimeout(ErtAgentError):
    """Raised when an Emacs instance does not become ready before its deadline."""


class ChannelError(ErtAgentError):
    """Raised when an evaluation over the control channel fails."""

    def __init__(self, returncode: int | None, output: str) -> None:
        self.returncode = returncode
        self.output = output
        super().__init__(f"exit={returncode}: {output or '(empty)'}")


class ToolCallError(ErtAgentError):
    """Raised when the provider returns a tool call that cannot be decoded."""
