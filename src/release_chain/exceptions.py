"""Exception hierarchy for release-chain.

All errors raised by the package derive from ReleaseChainError so that
front-ends can catch a single base class and report it.
"""

from __future__ import annotations

from collections.abc import Iterable


class ReleaseChainError(Exception):
    """Base class for all release-chain errors."""


# =============================================================================
# Configuration
# =============================================================================


class ConfigError(ReleaseChainError):
    """Problem loading the [tool.release-chain] configuration."""


class ConfigNotFoundError(ConfigError):
    """No pyproject.toml could be located."""


class ConfigValidationError(ConfigError):
    """Configuration data failed validation."""


class ConfigurationError(ReleaseChainError):
    """Required release options are missing (e.g. push remote or branch)."""


# =============================================================================
# External processes
# =============================================================================


class ProcessFailure(ReleaseChainError):
    """An external command exited with a failure.

    Attributes:
        stderr: Captured failure text of the command
        returncode: Exit status, if the process was started
    """

    def __init__(self, message: str, stderr: str = "", returncode: int | None = None) -> None:
        super().__init__(message)
        self.stderr = stderr
        self.returncode = returncode

    @property
    def failure_text(self) -> str:
        """Message and captured stderr, as inspected by callers."""
        if self.stderr:
            return f"{self}\n{self.stderr}"
        return str(self)


class AtomicFallbackExhausted(ProcessFailure):
    """The non-atomic retry of a push failed after --atomic was rejected."""


# =============================================================================
# Post targets
# =============================================================================


def _quoted(names: Iterable[str]) -> str:
    return ",".join(f'"{name}"' for name in names)


class RegistryLookupError(ReleaseChainError):
    """A post target references something the workspace does not know."""


class ProjectNotFoundError(RegistryLookupError):
    def __init__(self, project: str, available: Iterable[str]) -> None:
        self.project = project
        self.available = list(available)
        super().__init__(
            f'The target project "{project}" does not exist in your workspace. '
            f"Available projects: {_quoted(self.available)}"
        )


class TargetNotFoundError(RegistryLookupError):
    def __init__(self, project: str, target: str, available: Iterable[str]) -> None:
        self.project = project
        self.target = target
        self.available = list(available)
        super().__init__(
            f'The target name "{target}" does not exist. '
            f'Available targets for "{project}": {_quoted(self.available)}'
        )


class PostTargetFailure(ReleaseChainError):
    """A post target reported an unsuccessful run."""

    def __init__(self, project: str, target: str) -> None:
        self.project = project
        self.target = target
        super().__init__(f'Something went wrong with post target: "{project}:{target}"')
