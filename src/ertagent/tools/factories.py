"""Tool factories bound to one Emacs instance."""

from __future__ import annotations

from ertagent.errors import ChannelError
from ertagent.instance.channel import EmacsChannel, lisp_string, unquote_lisp_string
from ertagent.instance.lifecycle import InstanceHandle
from ertagent.tools.registry import ToolDefinition, ToolRegistry, error_result, is_error_result
from ertagent.tools.shared import BufferInput, EmptyInput, EvalInput, KeysInput, ReasonInput

EVAL_ELISP = "eval_elisp"
GET_BUFFER_CONTENT = "get_buffer_content"
LIST_BUFFERS = "list_buffers"
SEND_KEYS = "send_keys"
DECLARE_PASS = "declare_pass"
DECLARE_FAIL = "declare_fail"

VERDICT_TOOLS = (DECLARE_PASS, DECLARE_FAIL)
PASS_TAG = "PASS: "
FAIL_TAG = "FAIL: "


class EmacsTools:
    """Handlers for the Emacs-facing tools, bound to one instance."""

    def __init__(self, handle: InstanceHandle, channel: EmacsChannel) -> None:
        self.handle = handle
        self.channel = channel

    def _evaluate(self, code: str) -> str:
        try:
            return self.channel.evaluate(self.handle, code)
        except ChannelError as exc:
            return error_result(exc)

    def eval_elisp(self, params: EvalInput) -> str:
        output = self._evaluate(params.code)
        return output if output else "(empty)"

    def get_buffer_content(self, params: BufferInput) -> str:
        code = (
            f"(with-current-buffer {lisp_string(params.name)} "
            "(buffer-substring-no-properties (point-min) (point-max)))"
        )
        output = self._evaluate(code)
        if is_error_result(output):
            return output
        return unquote_lisp_string(output)

    def list_buffers(self, _params: EmptyInput) -> str:
        output = self._evaluate("(mapconcat #'buffer-name (buffer-list) \"\\n\")")
        if is_error_result(output):
            return output
        return unquote_lisp_string(output)

    def send_keys(self, params: KeysInput) -> str:
        output = self._evaluate(f"(progn (execute-kbd-macro (kbd {lisp_string(params.keys)})) nil)")
        if is_error_result(output):
            return output
        return f"sent keys: {params.keys}"


def declare_pass(params: ReasonInput) -> str:
    return f"{PASS_TAG}{params.reason}"


def declare_fail(params: ReasonInput) -> str:
    return f"{FAIL_TAG}{params.reason}"


def create_tool_registry(handle: InstanceHandle, channel: EmacsChannel) -> ToolRegistry:
    """Build the fixed tool set for one run, bound to `handle`."""
    tools = EmacsTools(handle, channel)
    registry = ToolRegistry()
    registry.register(
        ToolDefinition(
            name=EVAL_ELISP,
            description="Evaluate an Emacs Lisp form in the Emacs under test and return the printed result",
            input_model=EvalInput,
            handler=tools.eval_elisp,
        )
    )
    registry.register(
        ToolDefinition(
            name=GET_BUFFER_CONTENT,
            description="Return the full text of the named buffer",
            input_model=BufferInput,
            handler=tools.get_buffer_content,
        )
    )
    registry.register(
        ToolDefinition(
            name=LIST_BUFFERS,
            description="List the names of all open buffers, one per line",
            input_model=EmptyInput,
            handler=tools.list_buffers,
        )
    )
    registry.register(
        ToolDefinition(
            name=SEND_KEYS,
            description="Simulate typing a key sequence, as if the user pressed the keys",
            input_model=KeysInput,
            handler=tools.send_keys,
        )
    )
    registry.register(
        ToolDefinition(
            name=DECLARE_PASS,
            description="Finish the test as passed once the expected behavior was verified",
            input_model=ReasonInput,
            handler=declare_pass,
        )
    )
    registry.register(
        ToolDefinition(
            name=DECLARE_FAIL,
            description="Finish the test as failed when the behavior does not match the description",
            input_model=ReasonInput,
            handler=declare_fail,
        )
    )
    return registry
