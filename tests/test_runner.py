from __future__ import annotations

import sys
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Any

import pytest
from conftest import FakeChannel

from ertagent.agent.provider import ProviderReply
from ertagent.agent.result import ToolCall
from ertagent.config import Settings
from ertagent.errors import StartupTimeout
from ertagent.runner import TestRunner, build_instance_manager
from ertagent.spec import load_spec_text


class FakeManager:
    def __init__(self, channel: FakeChannel, *, fail_start: bool = False) -> None:
        self.channel = channel
        self.fail_start = fail_start
        self.started = 0
        self.stopped = 0

    @contextmanager
    def instance(self) -> Iterator[object]:
        if self.fail_start:
            raise StartupTimeout("no socket")
        self.started += 1
        try:
            yield object()
        finally:
            self.stopped += 1


class OneShotProvider:
    def __init__(self, *calls: ToolCall) -> None:
        self._calls = list(calls)
        self.prompts: list[str] = []

    def complete(self, messages: list[dict[str, Any]], tools: list[dict[str, Any]]) -> ProviderReply:
        self.prompts.append(messages[1]["content"])
        return ProviderReply(tool_calls=self._calls)


class ExplodingProvider:
    def complete(self, messages: list[dict[str, Any]], tools: list[dict[str, Any]]) -> ProviderReply:
        raise ConnectionError("reset by peer")


GROUP = load_spec_text("group: basics\nsetup: Use *scratch*.\ntests:\n  - description: one\n  - description: two\n")


def _settings(**overrides: Any) -> Settings:
    return Settings(max_iterations=2, **overrides)


def test_run_group_uses_one_instance_per_case() -> None:
    manager = FakeManager(FakeChannel())
    provider = OneShotProvider(ToolCall(id="c1", name="declare_pass", arguments={"reason": "ok"}))
    runner = TestRunner(_settings(), provider=provider, manager=manager)

    results = list(runner.run_group(GROUP))

    assert [case.case_id for case, _ in results] == ["basics::01-one", "basics::02-two"]
    assert all(verdict.passed for _, verdict in results)
    assert manager.started == manager.stopped == 2
    assert provider.prompts[0] == "<setup>\nUse *scratch*.\n</setup>\n\n<test>\none\n</test>"


def test_exhausted_run_still_stops_instance() -> None:
    manager = FakeManager(FakeChannel())
    provider = OneShotProvider(ToolCall(id="c1", name="list_buffers"))
    runner = TestRunner(_settings(), provider=provider, manager=manager)

    _, verdict = next(runner.run_group(GROUP))

    assert not verdict.passed
    assert "maximum of 2 iterations" in verdict.reason
    assert manager.stopped == 1


def test_fatal_provider_error_still_stops_instance() -> None:
    manager = FakeManager(FakeChannel())
    runner = TestRunner(_settings(), provider=ExplodingProvider(), manager=manager)

    with pytest.raises(ConnectionError):
        next(runner.run_group(GROUP))

    assert manager.started == manager.stopped == 1


def test_startup_failure_is_raised_before_loop() -> None:
    manager = FakeManager(FakeChannel(), fail_start=True)
    provider = OneShotProvider()
    runner = TestRunner(_settings(), provider=provider, manager=manager)

    with pytest.raises(StartupTimeout):
        next(runner.run_group(GROUP))

    assert provider.prompts == []


@pytest.mark.skipif(sys.platform == "win32", reason="fake executables are shell scripts")
def test_build_instance_manager_uses_settings(fake_emacs: str, fake_emacsclient: str) -> None:
    settings = _settings(
        emacs_path=fake_emacs,
        emacsclient_path=fake_emacsclient,
        poll_interval_seconds=0.02,
        shutdown_grace_seconds=0.2,
    )
    manager = build_instance_manager(settings)

    with manager.instance() as handle:
        assert manager.channel.evaluate(handle, "(+ 1 2)") == "3"

    assert Path(f"{fake_emacs}.argv").exists()
    assert handle.stopped
