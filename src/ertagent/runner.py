"""Run test cases against fresh Emacs instances."""

from __future__ import annotations

from collections.abc import Iterator

from loguru import logger

from ertagent.agent.loop import AgentLoop
from ertagent.agent.prompt import initial_messages
from ertagent.agent.provider import AnyLLMProvider, Provider
from ertagent.agent.result import Verdict
from ertagent.cases import TestCase, build_cases
from ertagent.config import Settings
from ertagent.instance.channel import EmacsChannel
from ertagent.instance.lifecycle import InstanceManager
from ertagent.spec import TestGroup
from ertagent.tools.factories import create_tool_registry


def build_instance_manager(settings: Settings) -> InstanceManager:
    channel = EmacsChannel(settings.emacsclient_path, timeout_seconds=settings.eval_timeout_seconds)
    return InstanceManager(
        channel=channel,
        emacs_path=settings.emacs_path,
        startup_timeout_seconds=settings.startup_timeout_seconds,
        poll_interval_seconds=settings.poll_interval_seconds,
        shutdown_grace_seconds=settings.shutdown_grace_seconds,
    )


def build_provider(settings: Settings) -> AnyLLMProvider:
    return AnyLLMProvider(
        settings.model,
        api_key=settings.api_key,
        api_base=settings.api_base,
        max_tokens=settings.max_tokens,
    )


class TestRunner:
    """Run each case in its own instance and return its verdict."""

    __test__ = False

    def __init__(
        self,
        settings: Settings,
        *,
        provider: Provider | None = None,
        manager: InstanceManager | None = None,
    ) -> None:
        self.settings = settings
        self.provider = provider or build_provider(settings)
        self.manager = manager or build_instance_manager(settings)

    def run_case(self, case: TestCase) -> Verdict:
        logger.info("runner.case.start id={}", case.case_id)
        with self.manager.instance() as handle:
            registry = create_tool_registry(handle, self.manager.channel)
            loop = AgentLoop(
                provider=self.provider,
                registry=registry,
                max_iterations=self.settings.max_iterations,
            )
            verdict = loop.run(initial_messages(case.description, case.setup))
        logger.info("runner.case.end id={} passed={}", case.case_id, verdict.passed)
        return verdict

    def run_group(self, group: TestGroup) -> Iterator[tuple[TestCase, Verdict]]:
        for case in build_cases(group):
            yield case, self.run_case(case)
