"""Tool input models."""

from __future__ import annotations

from pydantic import BaseModel, Field


class EvalInput(BaseModel):
    """Evaluate an Emacs Lisp form."""

    code: str = Field(..., description="Emacs Lisp form to evaluate, e.g. (+ 1 2)")


class BufferInput(BaseModel):
    """Name a buffer."""

    name: str = Field(..., description="Buffer name, e.g. *scratch*")


class KeysInput(BaseModel):
    """Simulate typed keys."""

    keys: str = Field(..., description="Key sequence in `kbd` notation, e.g. C-x C-f or M-x")


class ReasonInput(BaseModel):
    """Explain a verdict."""

    reason: str = Field(..., description="Why the test passed or failed")


class EmptyInput(BaseModel):
    """Empty input payload."""
