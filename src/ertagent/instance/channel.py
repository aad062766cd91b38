"""Synchronous evaluation over the Emacs server socket."""

from __future__ import annotations

import re
import subprocess
from typing import TYPE_CHECKING

from loguru import logger

from ertagent.errors import ChannelError

if TYPE_CHECKING:
    from ertagent.instance.lifecycle import InstanceHandle

_LISP_ESCAPE_RE = re.compile(r"\\(.)", re.DOTALL)


def lisp_string(value: str) -> str:
    """Render a Python string as an Emacs Lisp string literal."""
    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def unquote_lisp_string(value: str) -> str:
    """Undo the `prin1` quoting emacsclient applies to string results.

    Values that are not printed strings are returned unchanged.
    """
    if len(value) < 2 or not (value.startswith('"') and value.endswith('"')):
        return value
    return _LISP_ESCAPE_RE.sub(r"\1", value[1:-1])


class EmacsChannel:
    """Send Lisp forms to a running instance through emacsclient."""

    def __init__(self, emacsclient_path: str = "emacsclient", timeout_seconds: float | None = 30) -> None:
        self._emacsclient_path = emacsclient_path
        self._timeout_seconds = timeout_seconds

    def evaluate(self, handle: InstanceHandle, command: str) -> str:
        """Evaluate `command` in the instance and return its printed value."""
        logger.debug("channel.eval name={} command={!r}", handle.name, command)
        try:
            result = subprocess.run(  # noqa: S603
                [self._emacsclient_path, "--socket-name", str(handle.socket_path), "--eval", command],
                capture_output=True,
                text=True,
                encoding="utf-8",
                errors="replace",
                timeout=self._timeout_seconds,
            )
        except subprocess.TimeoutExpired as exc:
            output = _decode(exc.stdout) + _decode(exc.stderr)
            raise ChannelError(None, f"timed out after {self._timeout_seconds}s {output}".strip()) from exc
        except OSError as exc:
            raise ChannelError(None, str(exc)) from exc

        output = ((result.stdout or "") + (result.stderr or "")).strip()
        if result.returncode != 0:
            logger.debug("channel.eval.error name={} exit={}", handle.name, result.returncode)
            raise ChannelError(result.returncode, output)
        return (result.stdout or "").strip()


def _decode(value: bytes | str | None) -> str:
    if value is None:
        return ""
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")
    return value
