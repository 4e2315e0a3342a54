"""Subprocess helpers for script generators and shell queries.

CapturedProcess:
    Runs one command to completion with its output captured, bounded by a
    timeout. A process still running at the deadline is stopped with the
    usual SIGTERM -> wait -> SIGKILL sequence.
"""

from __future__ import annotations

__all__ = ["CapturedProcess", "ProcessOutput"]

import asyncio
import contextlib
from dataclasses import dataclass
from typing import Any

from .constants import PROCESS_GRACEFUL_TIMEOUT


@dataclass(frozen=True)
class ProcessOutput:
    """Result of a finished process."""

    returncode: int
    stdout: str
    stderr: str = ""

    @property
    def ok(self) -> bool:
        """Return True if the process exited successfully."""
        return self.returncode == 0


class CapturedProcess:
    """Runs a command and captures its output.

    Usage:
        proc = CapturedProcess(timeout=5.0)
        output = await proc.run("git", "branch", cwd="/repo")
        if output.ok:
            print(output.stdout)
    """

    def __init__(self, timeout: float, graceful_timeout: float = PROCESS_GRACEFUL_TIMEOUT) -> None:
        """Initialize.

        Args:
            timeout: Seconds the command may run
            graceful_timeout: Seconds to wait after SIGTERM before SIGKILL
        """
        self._proc: asyncio.subprocess.Process | None = None
        self._timeout = timeout
        self._graceful_timeout = graceful_timeout

    async def run(self, command: str, *args: str, **subprocess_kwargs: Any) -> ProcessOutput:
        """Run `command` with `args` until it exits.

        Args:
            command: Program to run (looked up in PATH)
            *args: Program arguments
            **subprocess_kwargs: Passed to create_subprocess_exec (e.g., cwd, env)

        Returns:
            The exit code and decoded output

        Raises:
            OSError: If the program cannot be started
            TimeoutError: If the program did not finish in time (it is stopped)
        """
        self._proc = await asyncio.create_subprocess_exec(
            command,
            *args,
            stdin=asyncio.subprocess.DEVNULL,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
            **subprocess_kwargs,
        )
        try:
            stdout, stderr = await asyncio.wait_for(self._proc.communicate(), timeout=self._timeout)
        except TimeoutError:
            await self.stop()
            raise
        return ProcessOutput(
            self._proc.returncode or 0,
            stdout.decode("utf-8", errors="replace"),
            stderr.decode("utf-8", errors="replace"),
        )

    async def stop(self) -> int | None:
        """Stop the process gracefully.

        Shutdown sequence:
        1. SIGTERM (graceful)
        2. Wait up to graceful_timeout
        3. SIGKILL if still alive
        4. wait() to reap

        Returns:
            The process return code, or None if not running
        """
        if self._proc is None:
            return None

        if self._proc.returncode is not None:
            return self._proc.returncode

        with contextlib.suppress(ProcessLookupError):
            self._proc.terminate()

        try:
            await asyncio.wait_for(self._proc.wait(), timeout=self._graceful_timeout)
        except TimeoutError:
            with contextlib.suppress(ProcessLookupError):
                self._proc.kill()
            await self._proc.wait()

        return self._proc.returncode

