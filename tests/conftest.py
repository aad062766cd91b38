from __future__ import annotations

import os
import stat
from collections.abc import Callable
from pathlib import Path

import pytest

from ertagent.errors import ChannelError


FAKE_EMACS = """#!/bin/sh
printf "%s\\n" "$@" > "$0.argv"
clean=
for arg in "$@"; do
  case "$arg" in
    -Q) clean=1 ;;
  esac
done
[ -n "$clean" ] || exit 2
for arg in "$@"; do
  case "$arg" in
    --fg-daemon=*) touch "${arg#--fg-daemon=}" ;;
  esac
done
exec sleep 60
"""

SILENT_EMACS = """#!/bin/sh
exec sleep 60
"""

CRASHING_EMACS = """#!/bin/sh
exit 3
"""

FAKE_EMACSCLIENT = """#!/bin/sh
code="$4"
case "$code" in
  "(+ 1 2)") echo "  3  " ;;
  "(+ 10 20)") echo "30" ;;
  "(buffer-string)") printf '"caf\\351"\\n' ;;
  "(kill-emacs)") exit 1 ;;
  "(sleep)") exec sleep 5 ;;
  "(error)") echo "*ERROR*: boom" >&2; exit 1 ;;
  *) printf '%s\\n' "$code" ;;
esac
"""


@pytest.fixture
def write_script(tmp_path: Path) -> Callable[[str, str], str]:
    bin_dir = tmp_path / "bin"
    bin_dir.mkdir()

    def _write(name: str, body: str) -> str:
        path = bin_dir / name
        path.write_text(body, encoding="utf-8")
        path.chmod(path.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
        return os.fspath(path)

    return _write


@pytest.fixture
def fake_emacs(write_script: Callable[[str, str], str]) -> str:
    return write_script("emacs", FAKE_EMACS)


@pytest.fixture
def fake_emacsclient(write_script: Callable[[str, str], str]) -> str:
    return write_script("emacsclient", FAKE_EMACSCLIENT)


class FakeChannel:
    """Channel double that answers from a table of Lisp forms."""

    def __init__(self, responses: dict[str, str | ChannelError] | None = None) -> None:
        self.responses = responses or {}
        self.calls: list[str] = []

    def evaluate(self, handle: object, command: str) -> str:
        self.calls.append(command)
        response = self.responses.get(command, "nil")
        if isinstance(response, ChannelError):
            raise response
        return response
