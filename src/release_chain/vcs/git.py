"""Git operations used by the release pipeline.

Each operation is a coroutine built on a ProcessRunner with a fixed
argument list, so the exact git invocation is easy to assert in tests.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

from release_chain.exceptions import AtomicFallbackExhausted, ConfigurationError, ProcessFailure
from release_chain.log import StepLogger
from release_chain.process import AsyncProcessRunner
from release_chain.vcs.commit_log import CommitAccumulator, GitLogStream
from release_chain.vcs.tag import format_tag

if TYPE_CHECKING:
    from collections.abc import Sequence

    from release_chain.process import ProcessRunner
    from release_chain.vcs.commit_log import CommitLogStream


@dataclass(frozen=True)
class StageSpec:
    paths: Sequence[str]
    dry_run: bool = False


@dataclass(frozen=True)
class CommitSpec:
    commit_message: str
    dry_run: bool = False
    no_verify: bool = False


@dataclass(frozen=True)
class TagSpec:
    version: str
    tag_prefix: str
    commit_message: str
    dry_run: bool = False


@dataclass(frozen=True)
class PushSpec:
    remote: str | None
    branch: str | None
    no_verify: bool = False


def is_atomic_unsupported(failure_text: str) -> bool:
    """Whether a failed push looks like the remote rejected ``--atomic``.

    This relies on git mentioning "atomic" in its error output, e.g.
    "fatal: the receiving end does not support --atomic push".
    """
    return "atomic" in failure_text


@dataclass
class GitRepository:
    """Git operations for a working tree.

    Attributes:
        path: Working tree root
        runner: Executes git commands
        log_stream: Source of commit messages
        step_logger: Records each completed step
    """

    path: Path = field(default_factory=Path.cwd)
    runner: ProcessRunner | None = None
    log_stream: CommitLogStream | None = None
    step_logger: StepLogger = field(default_factory=StepLogger)

    def __post_init__(self) -> None:
        if self.runner is None:
            self.runner = AsyncProcessRunner(cwd=self.path)
        if self.log_stream is None:
            self.log_stream = GitLogStream(cwd=self.path)

    async def _git(self, *args: str) -> str:
        assert self.runner is not None
        return await self.runner.run("git", list(args))

    # =========================================================================
    # History
    # =========================================================================

    async def get_commits(self, project_root: str, since: str) -> list[str]:
        """Return every commit message since ``since`` touching ``project_root``.

        Args:
            project_root: Path the log is restricted to
            since: Exclusive lower bound (tag or SHA)

        Returns:
            Commit messages in log order (newest first); empty if none

        Raises:
            ProcessFailure: If the log stream fails
        """
        assert self.log_stream is not None
        accumulator = CommitAccumulator()
        self.log_stream.open(since, project_root, accumulator)
        return await accumulator.result

    async def get_first_commit_ref(self) -> str:
        """Return the SHA of the repository's root commit."""
        output = await self._git("rev-list", "--max-parents=0", "HEAD")
        return output.strip()

    # =========================================================================
    # Mutations
    # =========================================================================

    async def add_to_stage(self, spec: StageSpec) -> None:
        if not spec.paths:
            return

        options = [*(["--dry-run"] if spec.dry_run else []), *spec.paths]
        await self._git("add", *options)

    async def commit(self, spec: CommitSpec) -> None:
        await self._git(
            "commit",
            *(["--dry-run"] if spec.dry_run else []),
            *(["--no-verify"] if spec.no_verify else []),
            "-m",
            spec.commit_message,
        )
        self.step_logger.record("commit_success", f'Committed "{spec.commit_message}"')

    async def create_tag(self, spec: TagSpec) -> str | None:
        """Create an annotated tag.

        Returns:
            The tag name, or None under dry run (nothing is created)
        """
        if spec.dry_run:
            return None

        tag = format_tag(spec.tag_prefix, spec.version)
        await self._git("tag", "-a", tag, "-m", spec.commit_message)
        return self.step_logger.record("tag_success", f'Created tag "{tag}"', tag)

    async def try_push(self, spec: PushSpec) -> None:
        """Push commits and tags, retrying without --atomic if unsupported.

        Raises:
            ConfigurationError: If remote or branch is missing
            AtomicFallbackExhausted: If the non-atomic retry also fails
            ProcessFailure: If the atomic push fails for another reason
        """
        required = {"remote": spec.remote, "branch": spec.branch}
        missing = [f"--{name}" for name, value in required.items() if not value]
        if missing:
            raise ConfigurationError(
                f"Missing git options {' and '.join(missing)}, "
                "set git.remote and git.branch in [tool.release-chain]"
            )

        push_options = ["--follow-tags", *(["--no-verify"] if spec.no_verify else [])]

        try:
            await self._git("push", *push_options, "--atomic", spec.remote, spec.branch)
        except ProcessFailure as e:
            if not is_atomic_unsupported(e.failure_text):
                raise

            self.step_logger.warning("git push --atomic failed, attempting non-atomic push")
            try:
                await self._git("push", *push_options, spec.remote, spec.branch)
            except ProcessFailure as retry_error:
                raise AtomicFallbackExhausted(
                    str(retry_error),
                    stderr=retry_error.stderr,
                    returncode=retry_error.returncode,
                ) from retry_error

        self.step_logger.record("push_success", f'Pushed to "{spec.remote}" "{spec.branch}"')
