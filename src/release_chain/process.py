"""Asynchronous external process execution.

Every git operation and every command-backed post target goes through a
ProcessRunner. The default implementation spawns the command with
asyncio and captures its output.
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import TYPE_CHECKING, Protocol

from release_chain.exceptions import ProcessFailure

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

logger = logging.getLogger(__name__)


class ProcessRunner(Protocol):
    """Runs a command and returns its captured output."""

    async def run(self, command: str, args: Sequence[str]) -> str:
        """Run ``command`` with ``args``.

        Returns:
            Captured standard output followed by standard error

        Raises:
            ProcessFailure: If the command cannot be started or exits non-zero
        """
        ...


class AsyncProcessRunner:
    """ProcessRunner backed by asyncio subprocesses.

    Cancelling the awaiting task does not terminate a child that is
    already running; it is left to finish on its own.
    """

    def __init__(self, cwd: Path | None = None, env: Mapping[str, str] | None = None) -> None:
        self.cwd = cwd
        self.env = dict(env) if env is not None else None

    async def run(self, command: str, args: Sequence[str]) -> str:
        argv = [command, *args]
        logger.debug("Running %s", " ".join(argv))

        try:
            proc = await asyncio.create_subprocess_exec(
                *argv,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                cwd=self.cwd,
                env=self.env,
            )
        except OSError as e:
            message = f"Failed to start {command}: {e.strerror or e}"
            raise ProcessFailure(message, stderr=str(e)) from e

        stdout, stderr = await proc.communicate()
        out = stdout.decode(errors="replace")
        err = stderr.decode(errors="replace")

        if proc.returncode != 0:
            subject = " ".join([command, *args[:1]])
            raise ProcessFailure(
                f"{subject} failed with exit code {proc.returncode}",
                stderr=err.strip() or out.strip(),
                returncode=proc.returncode,
            )

        return out + err
