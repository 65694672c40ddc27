"""Implementation of the 'release' command.

The release command commits, tags and pushes an already computed
version, then runs the configured post targets.
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import TYPE_CHECKING

from rich.panel import Panel

from release_chain.config import load_config
from release_chain.core.pipeline import ReleasePipeline, ReleaseRequest
from release_chain.exceptions import ConfigError, ReleaseChainError
from release_chain.log import StepLogger
from release_chain.process import AsyncProcessRunner
from release_chain.vcs import GitRepository
from release_chain.workspace import CommandWorkspace

if TYPE_CHECKING:
    from rich.console import Console


def run_release(
    path: str | None,
    version: str,
    since: str | None,
    push: bool | None,
    dry_run: bool,
    no_verify: bool,
    post_targets: list[str],
    console: Console,
    err_console: Console,
) -> None:
    """Run the release command.

    Args:
        path: Optional path to project directory
        version: Version being released (e.g., "1.2.0")
        since: Previous release ref; defaults to the first commit
        push: Override the configured git.push setting
        dry_run: Skip tagging and pushing, pass --dry-run to git
        no_verify: Pass --no-verify to git commit and push
        post_targets: Extra post targets, run after the configured ones
        console: Console for standard output
        err_console: Console for error output
    """
    project_path = Path(path) if path else Path.cwd()

    try:
        config = load_config(project_path)
    except ConfigError as e:
        err_console.print(f"[red]Error loading config:[/] {e}")
        raise SystemExit(1) from e

    overrides: dict[str, object] = {
        "dry_run": dry_run or config.dry_run,
        "no_verify": no_verify or config.no_verify,
        "post_targets": [*config.post_targets, *post_targets],
    }
    config = config.model_copy(update=overrides)
    if push is not None:
        config = config.model_copy(update={"git": config.git.model_copy(update={"push": push})})

    runner = AsyncProcessRunner(cwd=project_path)
    repo = GitRepository(path=project_path, runner=runner, step_logger=StepLogger())
    registry = CommandWorkspace(config.projects, runner)
    pipeline = ReleasePipeline(config, repo, registry)

    mode_str = "[yellow]DRY-RUN[/]" if config.dry_run else "[green]EXECUTING[/]"
    console.print(f"\n{mode_str} - Releasing [green]{version}[/]\n")

    try:
        result = asyncio.run(pipeline.run(ReleaseRequest(version=version, since=since)))
    except ReleaseChainError as e:
        err_console.print(f"[red]Release failed:[/] {e}")
        stderr = getattr(e, "stderr", "")
        if stderr:
            err_console.print(f"[red]{stderr}[/]")
        raise SystemExit(1) from e

    if result.skipped:
        console.print("[yellow]No commits found since last release. Nothing to do.[/]")
        return

    for entry in repo.step_logger.entries:
        console.print(f"  [green]✓[/] {entry.message}")

    console.print(
        Panel(
            f"[green]Released {result.tag}[/] ({len(result.commits)} commit(s))",
            title="[green]Release Complete[/]",
            border_style="green",
        )
    )
