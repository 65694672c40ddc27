"""Tests for the release command."""

from __future__ import annotations

from typing import TYPE_CHECKING
from unittest.mock import AsyncMock, patch

import pytest
from rich.console import Console
from typer.testing import CliRunner

from release_chain.cli.app import app
from release_chain.cli.commands.release import run_release
from release_chain.core.pipeline import ReleaseResult
from release_chain.exceptions import PostTargetFailure

if TYPE_CHECKING:
    from pathlib import Path


def _consoles() -> tuple[Console, Console]:
    return Console(record=True, width=200), Console(record=True, width=200)


def _run(path: Path, **overrides) -> tuple[Console, Console]:
    console, err_console = _consoles()
    kwargs = {
        "path": str(path),
        "version": "1.1.0",
        "since": "test-project-1.0.0",
        "push": None,
        "dry_run": False,
        "no_verify": False,
        "post_targets": [],
        "console": console,
        "err_console": err_console,
    }
    kwargs.update(overrides)
    run_release(**kwargs)
    return console, err_console


class TestRunRelease:
    """Tests for run_release()."""

    def test_success(self, temp_project_with_pyproject: Path):
        result = ReleaseResult(version="1.1.0", tag="test-project-1.1.0", commits=["feat: a"])

        with patch(
            "release_chain.cli.commands.release.ReleasePipeline.run",
            new=AsyncMock(return_value=result),
        ) as mock_run:
            console, _ = _run(temp_project_with_pyproject)

        request = mock_run.call_args[0][0]
        assert request.version == "1.1.0"
        assert request.since == "test-project-1.0.0"
        assert "Released test-project-1.1.0" in console.export_text()

    def test_overrides_applied(self, temp_project_with_pyproject: Path):
        seen = {}

        async def fake_run(self, request):
            seen["config"] = self.config
            return ReleaseResult(version=request.version, tag="t", commits=[])

        with patch("release_chain.cli.commands.release.ReleasePipeline.run", new=fake_run):
            _run(
                temp_project_with_pyproject,
                push=False,
                dry_run=True,
                post_targets=["docs:deploy"],
            )

        config = seen["config"]
        assert config.dry_run is True
        assert config.git.push is False
        assert config.git.remote == "origin"
        assert config.post_targets == ["docs:deploy:production", "docs:deploy"]

    def test_skipped_release(self, temp_project_with_pyproject: Path):
        result = ReleaseResult(version="1.1.0", tag="t", skipped=True)

        with patch(
            "release_chain.cli.commands.release.ReleasePipeline.run",
            new=AsyncMock(return_value=result),
        ):
            console, _ = _run(temp_project_with_pyproject)

        assert "Nothing to do" in console.export_text()

    def test_failure_exits(self, temp_project_with_pyproject: Path):
        with patch(
            "release_chain.cli.commands.release.ReleasePipeline.run",
            new=AsyncMock(side_effect=PostTargetFailure("docs", "deploy")),
        ):
            console, err_console = _consoles()
            with pytest.raises(SystemExit) as exc_info:
                run_release(
                    path=str(temp_project_with_pyproject),
                    version="1.1.0",
                    since=None,
                    push=None,
                    dry_run=False,
                    no_verify=False,
                    post_targets=[],
                    console=console,
                    err_console=err_console,
                )

        assert exc_info.value.code == 1
        assert '"docs:deploy"' in err_console.export_text()

    def test_invalid_config_exits(self, tmp_path: Path):
        (tmp_path / "pyproject.toml").write_text("[tool.release-chain]\nbogus = 1\n")

        with pytest.raises(SystemExit):
            _run(tmp_path)


class TestApp:
    def test_version_flag(self):
        result = CliRunner().invoke(app, ["--version"])

        assert result.exit_code == 0
        assert "release-chain" in result.output

    def test_release_invokes_command(self, tmp_path: Path):
        with patch("release_chain.cli.app.run_release") as mock_run:
            result = CliRunner().invoke(
                app,
                ["release", "2.0.0", "--path", str(tmp_path), "--no-push", "--post-target", "a:b"],
            )

        assert result.exit_code == 0, result.output
        kwargs = mock_run.call_args.kwargs
        assert kwargs["version"] == "2.0.0"
        assert kwargs["push"] is False
        assert kwargs["post_targets"] == ["a:b"]

    def test_verbose_is_an_app_option(self, tmp_path: Path):
        with patch("release_chain.cli.app.run_release") as mock_run:
            result = CliRunner().invoke(
                app, ["--verbose", "release", "2.0.0", "--path", str(tmp_path)]
            )

        assert result.exit_code == 0, result.output
        assert mock_run.call_args.kwargs["version"] == "2.0.0"
