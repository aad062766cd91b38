"""Lifecycle of disposable Emacs instances."""

from __future__ import annotations

import itertools
import os
import shutil
import subprocess
import tempfile
import threading
import time
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
from pathlib import Path

from loguru import logger

from ertagent.errors import ChannelError, StartupTimeout
from ertagent.instance.channel import EmacsChannel

SOCKET_FILE_NAME = "server"


@dataclass
class InstanceHandle:
    """A running Emacs daemon owned by one test run."""

    name: str
    process: subprocess.Popen[bytes]
    directory: Path
    stopped: bool = field(default=False, compare=False)

    @property
    def socket_path(self) -> Path:
        return self.directory / SOCKET_FILE_NAME

    @property
    def pid(self) -> int:
        return self.process.pid

    def is_alive(self) -> bool:
        return self.process.poll() is None


class InstanceManager:
    """Start and stop isolated `emacs -Q` daemons.

    Each daemon listens on a socket inside its own temporary directory, so
    concurrent runs never share a control-channel address.
    """

    def __init__(
        self,
        *,
        channel: EmacsChannel,
        emacs_path: str = "emacs",
        startup_timeout_seconds: float = 10,
        poll_interval_seconds: float = 0.1,
        shutdown_grace_seconds: float = 2,
    ) -> None:
        self.channel = channel
        self._emacs_path = emacs_path
        self._startup_timeout_seconds = startup_timeout_seconds
        self._poll_interval_seconds = poll_interval_seconds
        self._shutdown_grace_seconds = shutdown_grace_seconds
        self._counter = itertools.count(1)
        self._counter_lock = threading.Lock()

    def next_name(self) -> str:
        with self._counter_lock:
            serial = next(self._counter)
        return f"ertagent-{os.getpid()}-{serial}"

    def start(self) -> InstanceHandle:
        name = self.next_name()
        directory = Path(tempfile.mkdtemp(prefix=f"{name}-"))
        socket_path = directory / SOCKET_FILE_NAME
        logger.info("instance.start name={} dir={}", name, directory)
        try:
            process = subprocess.Popen(  # noqa: S603
                [self._emacs_path, "-Q", f"--fg-daemon={socket_path}"],
                stdin=subprocess.DEVNULL,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
            )
        except OSError:
            shutil.rmtree(directory, ignore_errors=True)
            raise

        handle = InstanceHandle(name=name, process=process, directory=directory)
        try:
            self._wait_ready(handle)
        except BaseException:
            self._force_cleanup(handle)
            raise

        logger.info("instance.ready name={} pid={}", name, handle.pid)
        return handle

    def stop(self, handle: InstanceHandle) -> None:
        """Shut the instance down and remove its directory. Safe to repeat."""
        if handle.stopped:
            return
        handle.stopped = True

        if handle.is_alive():
            try:
                self.channel.evaluate(handle, "(kill-emacs)")
            except ChannelError as exc:
                logger.debug("instance.stop.graceful_failed name={} error={}", handle.name, exc)
            try:
                handle.process.wait(timeout=self._shutdown_grace_seconds)
            except subprocess.TimeoutExpired:
                logger.warning("instance.stop.kill name={} pid={}", handle.name, handle.pid)
                self._kill(handle)
        shutil.rmtree(handle.directory, ignore_errors=True)
        logger.info("instance.stop name={}", handle.name)

    @contextmanager
    def instance(self) -> Iterator[InstanceHandle]:
        """Scope one instance: started on entry, stopped on every exit path."""
        handle = self.start()
        try:
            yield handle
        finally:
            self.stop(handle)

    def _wait_ready(self, handle: InstanceHandle) -> None:
        deadline = time.monotonic() + self._startup_timeout_seconds
        while not handle.socket_path.exists():
            if not handle.is_alive():
                raise StartupTimeout(
                    f"{handle.name}: emacs exited with code {handle.process.returncode} before the server was ready"
                )
            if time.monotonic() >= deadline:
                raise StartupTimeout(
                    f"{handle.name}: server socket did not appear within {self._startup_timeout_seconds}s"
                )
            time.sleep(self._poll_interval_seconds)

    def _force_cleanup(self, handle: InstanceHandle) -> None:
        handle.stopped = True
        self._kill(handle)
        shutil.rmtree(handle.directory, ignore_errors=True)

    @staticmethod
    def _kill(handle: InstanceHandle) -> None:
        if handle.is_alive():
            handle.process.kill()
        try:
            handle.process.wait(timeout=5)
        except subprocess.TimeoutExpired:
            logger.error("instance.kill.unresponsive name={} pid={}", handle.name, handle.pid)
