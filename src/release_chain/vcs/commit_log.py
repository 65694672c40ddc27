"""Streaming commit log reading.

A CommitLogStream pushes raw commit messages to a listener one chunk at a
time and finishes with either ``on_close`` or ``on_finish``; both mean
"done". CommitAccumulator buffers the chunks and releases the complete,
ordered list exactly once.
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Protocol

from release_chain.exceptions import ProcessFailure

if TYPE_CHECKING:
    from pathlib import Path

logger = logging.getLogger(__name__)

# Line written after every message by the log format
COMMIT_DELIMITER = "------------------------ >8 ------------------------"


class CommitLogListener(Protocol):
    def on_data(self, chunk: str) -> None: ...

    def on_error(self, error: BaseException) -> None: ...

    def on_close(self) -> None: ...

    def on_finish(self) -> None: ...


class CommitLogStream(Protocol):
    """Source of commit messages between ``from_ref`` and HEAD."""

    def open(self, from_ref: str, path: str, listener: CommitLogListener) -> None:
        """Start streaming commit messages for ``path`` to ``listener``."""
        ...


class CommitAccumulator:
    """Listener that folds streamed commit messages into one list.

    ``result`` resolves with every chunk, in arrival order, once the stream
    completes. An error before completion fails ``result`` instead. Any
    signal arriving after the first terminal one is ignored.
    """

    def __init__(self) -> None:
        self.commits: list[str] = []
        self.result: asyncio.Future[list[str]] = asyncio.get_running_loop().create_future()

    @property
    def done(self) -> bool:
        return self.result.done()

    def on_data(self, chunk: str) -> None:
        if not self.done:
            self.commits.append(chunk)

    def on_error(self, error: BaseException) -> None:
        if not self.done:
            self.result.set_exception(error)

    def on_close(self) -> None:
        self._complete()

    def on_finish(self) -> None:
        self._complete()

    def _complete(self) -> None:
        if not self.done:
            self.result.set_result(list(self.commits))


class GitLogStream:
    """CommitLogStream reading ``git log`` output from a subprocess.

    Each commit body is pushed to the listener as soon as its delimiter is
    read. The reading task is not tied to the consumer: abandoning the
    consumer leaves the git process running to completion.
    """

    def __init__(self, cwd: Path | None = None) -> None:
        self.cwd = cwd
        self._tasks: set[asyncio.Task[None]] = set()

    def open(self, from_ref: str, path: str, listener: CommitLogListener) -> None:
        task = asyncio.get_running_loop().create_task(self._pump(from_ref, path, listener))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    def _argv(self, from_ref: str, path: str) -> list[str]:
        revision = f"{from_ref}..HEAD" if from_ref else "HEAD"
        return [
            "git",
            "log",
            f"--format=%B%n{COMMIT_DELIMITER}",
            revision,
            "--",
            path or ".",
        ]

    async def _pump(self, from_ref: str, path: str, listener: CommitLogListener) -> None:
        try:
            await self._stream(from_ref, path, listener)
        except Exception as e:
            listener.on_error(e)

    async def _stream(self, from_ref: str, path: str, listener: CommitLogListener) -> None:
        argv = self._argv(from_ref, path)
        logger.debug("Streaming %s", " ".join(argv))

        try:
            proc = await asyncio.create_subprocess_exec(
                *argv,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                cwd=self.cwd,
            )
        except OSError as e:
            failure = ProcessFailure(f"Failed to start git: {e.strerror or e}", stderr=str(e))
            listener.on_error(failure)
            return

        assert proc.stdout is not None
        assert proc.stderr is not None

        # stderr drains alongside stdout; git blocks once either pipe fills
        stderr_task = asyncio.get_running_loop().create_task(proc.stderr.read())

        buffer: list[str] = []
        async for raw in proc.stdout:
            line = raw.decode(errors="replace").rstrip("\n")
            if line == COMMIT_DELIMITER:
                listener.on_data("\n".join(buffer).strip("\n") + "\n")
                buffer = []
            else:
                buffer.append(line)

        stderr = (await stderr_task).decode(errors="replace")
        returncode = await proc.wait()

        if returncode != 0:
            listener.on_error(
                ProcessFailure(
                    f"git log failed with exit code {returncode}",
                    stderr=stderr.strip(),
                    returncode=returncode,
                )
            )
            return

        listener.on_finish()
        listener.on_close()
