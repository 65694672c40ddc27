"""Configuration models for release-chain.

Configuration lives under ``[tool.release-chain]`` in pyproject.toml:

    [tool.release-chain]
    project_name = "my-lib"
    tag_prefix = "${projectName}-"
    post_targets = ["my-lib:publish", "docs:deploy:production"]

    [tool.release-chain.git]
    remote = "origin"
    branch = "main"
    push = true

    [tool.release-chain.projects.docs.targets.deploy]
    command = ["./scripts/deploy-docs.sh"]
    options = { version = "${version}", notify = "${dryRun}" }
    configurations.production = { url = "https://docs.example.com" }
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_TAG_PREFIX = "${projectName}-"
DEFAULT_COMMIT_MESSAGE_FORMAT = "chore(${projectName}): release ${version}"


class GitConfig(BaseModel):
    """Git behaviour during a release."""

    model_config = ConfigDict(extra="forbid")

    remote: str | None = None
    branch: str | None = None
    push: bool = False
    add_paths: list[str] = Field(default_factory=list)


class TargetConfig(BaseModel):
    """A runnable target declared by a workspace project.

    ``options`` are the declared defaults; a named configuration's
    values override them.
    """

    model_config = ConfigDict(extra="forbid")

    command: list[str] = Field(default_factory=list)
    options: dict[str, Any] = Field(default_factory=dict)
    configurations: dict[str, dict[str, Any]] = Field(default_factory=dict)


class ProjectConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    root: str = "."
    targets: dict[str, TargetConfig] = Field(default_factory=dict)


class ReleaseChainConfig(BaseModel):
    """Root configuration model."""

    model_config = ConfigDict(extra="forbid")

    project_name: str | None = None
    tag_prefix: str = DEFAULT_TAG_PREFIX
    commit_message_format: str = DEFAULT_COMMIT_MESSAGE_FORMAT
    dry_run: bool = False
    no_verify: bool = False
    skip_commit: bool = False
    allow_empty: bool = False
    post_targets: list[str] = Field(default_factory=list)
    git: GitConfig = Field(default_factory=GitConfig)
    projects: dict[str, ProjectConfig] = Field(default_factory=dict)
