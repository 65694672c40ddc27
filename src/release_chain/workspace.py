"""Workspace registry: projects, their targets, and target execution.

Post targets are addressed as ``project:target[:configuration]`` and
resolved against a WorkspaceRegistry. The default registry is built from
the ``projects`` table of the release-chain configuration, where each
target declares a command to run.
"""

from __future__ import annotations

import json
import logging
from collections.abc import AsyncIterator, Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Protocol

from release_chain.exceptions import ConfigurationError, ConfigValidationError, ProcessFailure

if TYPE_CHECKING:
    from release_chain.config.models import ProjectConfig
    from release_chain.process import ProcessRunner

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TargetRef:
    project: str
    target: str
    configuration: str | None = None

    def __str__(self) -> str:
        return f"{self.project}:{self.target}"


@dataclass(frozen=True)
class TargetResult:
    """One result signal from a target run."""

    success: bool
    output: str = ""


def parse_target_string(value: str) -> TargetRef:
    """Parse ``"project:target"`` or ``"project:target:configuration"``.

    Raises:
        ConfigurationError: If the string has fewer than two segments
    """
    project, _, rest = value.partition(":")
    target, _, configuration = rest.partition(":")
    if not project or not target:
        raise ConfigurationError(
            f'Invalid post target "{value}", expected "project:target[:configuration]"'
        )
    return TargetRef(project=project, target=target, configuration=configuration or None)


class WorkspaceRegistry(Protocol):
    """Lookup and execution of workspace targets."""

    @property
    def projects(self) -> Mapping[str, ProjectConfig]: ...

    def read_target_options(self, ref: TargetRef) -> dict[str, Any]:
        """Declared default options for ``ref``, configuration applied."""
        ...

    def run_target(
        self,
        ref: TargetRef,
        options: Mapping[str, Any],
        context: Mapping[str, Any],
    ) -> AsyncIterator[TargetResult]:
        """Execute ``ref`` and yield its result signals."""
        ...


def format_option_flags(options: Mapping[str, Any]) -> list[str]:
    """Render resolved options as ``--name=value`` command line flags.

    Booleans are written as ``true``/``false``, structured values as JSON
    and ``None`` values are omitted.
    """
    flags = []
    for name, value in options.items():
        if value is None:
            continue
        if isinstance(value, bool):
            rendered = "true" if value else "false"
        elif isinstance(value, (dict, list)):
            rendered = json.dumps(value, separators=(",", ":"))
        else:
            rendered = str(value)
        flags.append(f"--{name}={rendered}")
    return flags


class CommandWorkspace:
    """WorkspaceRegistry whose targets run external commands.

    Attributes:
        projects: Project name to its declared targets
        runner: Runs each target's command
    """

    def __init__(self, projects: Mapping[str, ProjectConfig], runner: ProcessRunner) -> None:
        self._projects = dict(projects)
        self.runner = runner

    @property
    def projects(self) -> Mapping[str, ProjectConfig]:
        return self._projects

    def read_target_options(self, ref: TargetRef) -> dict[str, Any]:
        target = self._projects[ref.project].targets[ref.target]
        options = dict(target.options)
        if ref.configuration:
            options.update(target.configurations.get(ref.configuration, {}))
        return options

    async def run_target(
        self,
        ref: TargetRef,
        options: Mapping[str, Any],
        context: Mapping[str, Any],
    ) -> AsyncIterator[TargetResult]:
        target = self._projects[ref.project].targets[ref.target]
        if not target.command:
            raise ConfigValidationError(f'Target "{ref}" does not declare a command')

        command, *args = target.command
        logger.debug("Running target %s (version %s)", ref, context.get("version", "?"))

        try:
            output = await self.runner.run(command, [*args, *format_option_flags(options)])
        except ProcessFailure as e:
            logger.error("Target %s failed: %s", ref, e.failure_text)
            yield TargetResult(success=False, output=e.stderr)
            return

        yield TargetResult(success=True, output=output)
