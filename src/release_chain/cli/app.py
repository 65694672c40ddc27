"""Command line entry point for release-chain."""

from __future__ import annotations

from typing import Optional

import typer
from rich.console import Console

from release_chain import __version__
from release_chain.cli.commands.release import run_release
from release_chain.log import configure_logging

app = typer.Typer(add_completion=False, no_args_is_help=True)
console = Console()
err_console = Console(stderr=True)


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"release-chain {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show every git command."),
    version: Optional[bool] = typer.Option(
        None, "--version", callback=_version_callback, is_eager=True, help="Show version."
    ),
) -> None:
    """Commit, tag, push and run post targets for a release."""
    configure_logging(verbose=verbose, console=err_console)


@app.command()
def release(
    version: str = typer.Argument(..., help="Version to release, e.g. 1.2.0"),
    path: Optional[str] = typer.Option(None, "--path", "-p", help="Project directory."),
    since: Optional[str] = typer.Option(None, "--since", help="Previous release tag or SHA."),
    push: Optional[bool] = typer.Option(None, "--push/--no-push", help="Override git.push."),
    dry_run: bool = typer.Option(False, "--dry-run", help="Do not tag or push."),
    no_verify: bool = typer.Option(False, "--no-verify", help="Skip git hooks."),
    post_target: list[str] = typer.Option(
        [], "--post-target", help="Extra post target (project:target[:configuration])."
    ),
) -> None:
    """Release VERSION."""
    run_release(
        path=path,
        version=version,
        since=since,
        push=push,
        dry_run=dry_run,
        no_verify=no_verify,
        post_targets=post_target,
        console=console,
        err_console=err_console,
    )
