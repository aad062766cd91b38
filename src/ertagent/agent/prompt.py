"""Prompt text for the test agent."""

from __future__ import annotations

from typing import Any

from ertagent.tools.factories import DECLARE_FAIL, DECLARE_PASS

DEFAULT_SYSTEM_PROMPT = f"""You are a QA engineer testing GNU Emacs.

A fresh `emacs -Q` instance has been started for this test. You interact with it only through tools:
evaluate Emacs Lisp, read and list buffers, and send key sequences.

Work through the test description step by step and verify each expectation with evidence you
gathered from Emacs. When every expectation has been checked, call `{DECLARE_PASS}` with a short reason.
As soon as an expectation is clearly not met, call `{DECLARE_FAIL}` with a reason that quotes what
you observed. Tool results starting with `error:` mean the action failed; read the message and
decide whether to retry differently or fail the test."""

CONTINUE_PROMPT = f"Continue testing. Finish by calling `{DECLARE_PASS}` or `{DECLARE_FAIL}`."


def render_test_prompt(description: str, setup: str = "") -> str:
    blocks: list[str] = []
    if setup.strip():
        blocks.append(f"<setup>\n{setup.strip()}\n</setup>")
    blocks.append(f"<test>\n{description.strip()}\n</test>")
    return "\n\n".join(blocks)


def initial_messages(description: str, setup: str = "", system_prompt: str = DEFAULT_SYSTEM_PROMPT) -> list[dict[str, Any]]:
    """Build the opening conversation for one test description."""
    return [
        {"role": "system", "content": system_prompt},
        {"role": "user", "content": render_test_prompt(description, setup)},
    ]
