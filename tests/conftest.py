"""Shared fixtures for release-chain tests."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import pytest

from release_chain.log import StepLogger
from release_chain.vcs.git import GitRepository
from tests.unit.fakes import FakeCommitLogStream, FakeProcessRunner

if TYPE_CHECKING:
    from pathlib import Path


@pytest.fixture
def runner() -> FakeProcessRunner:
    return FakeProcessRunner()


@pytest.fixture
def log_stream() -> FakeCommitLogStream:
    return FakeCommitLogStream()


@pytest.fixture
def step_logger() -> StepLogger:
    return StepLogger()


@pytest.fixture
def repo(
    tmp_path: Path,
    runner: FakeProcessRunner,
    log_stream: FakeCommitLogStream,
    step_logger: StepLogger,
) -> GitRepository:
    """GitRepository wired to fakes; nothing touches a real git."""
    return GitRepository(
        path=tmp_path,
        runner=runner,
        log_stream=log_stream,
        step_logger=step_logger,
    )


@pytest.fixture
def temp_project_with_pyproject(tmp_path: Path) -> Path:
    """Directory containing a pyproject.toml with release-chain config."""
    (tmp_path / "pyproject.toml").write_text(
        """\
[project]
name = "test-project"
version = "1.0.0"

[tool.release-chain]
post_targets = ["docs:deploy:production"]

[tool.release-chain.git]
remote = "origin"
branch = "main"
push = true

[tool.release-chain.projects.docs.targets.deploy]
command = ["./deploy.sh"]
options = { version = "${version}", notify = "${dryRun}", matrix = ["a", "b"] }
configurations.production = { url = "https://docs.example.com" }
"""
    )
    return tmp_path


@pytest.fixture(autouse=True)
def _reset_package_logging():
    """Undo configure_logging() so caplog keeps seeing package records."""
    yield
    package_logger = logging.getLogger("release_chain")
    package_logger.handlers.clear()
    package_logger.propagate = True
    package_logger.setLevel(logging.NOTSET)
