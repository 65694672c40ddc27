"""Release orchestration.

Runs the release chain for an already computed version:

1. read commits since the previous release
2. stage and commit release files
3. create the annotated tag
4. push (atomic first, plain push as fallback)
5. run post targets

Every step awaits the previous one; nothing runs concurrently.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from release_chain.core.post_targets import run_post_targets
from release_chain.core.template import create_template_string
from release_chain.vcs.git import CommitSpec, PushSpec, StageSpec, TagSpec
from release_chain.vcs.tag import format_tag

if TYPE_CHECKING:
    from release_chain.config.models import ReleaseChainConfig
    from release_chain.vcs.git import GitRepository
    from release_chain.workspace import WorkspaceRegistry

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReleaseRequest:
    """Per-invocation release inputs.

    ``since`` is the previous release tag; None releases everything since
    the first commit.
    """

    version: str
    since: str | None = None
    previous_tag: str = ""
    notes: str = ""
    paths: tuple[str, ...] = ()


@dataclass
class ReleaseResult:
    version: str
    tag: str
    commits: list[str] = field(default_factory=list)
    skipped: bool = False


class ReleasePipeline:
    """Drives a single release against one repository."""

    def __init__(
        self,
        config: ReleaseChainConfig,
        repo: GitRepository,
        registry: WorkspaceRegistry,
    ) -> None:
        self.config = config
        self.repo = repo
        self.registry = registry

    @property
    def project_name(self) -> str:
        return self.config.project_name or ""

    @property
    def project_root(self) -> str:
        project = self.config.projects.get(self.project_name)
        return project.root if project else "."

    def resolve_tag_prefix(self) -> str:
        return create_template_string(
            self.config.tag_prefix,
            {"projectName": self.project_name, "target": self.project_name},
        )

    def format_commit_message(self, version: str) -> str:
        return create_template_string(
            self.config.commit_message_format,
            {"projectName": self.project_name, "version": version},
        )

    def template_context(self, request: ReleaseRequest, tag: str) -> dict[str, Any]:
        """Values available to post target option templates."""
        return {
            "projectName": self.project_name,
            "version": request.version,
            "tag": tag,
            "previousTag": request.previous_tag,
            "dryRun": self.config.dry_run,
            "notes": request.notes,
        }

    async def run(self, request: ReleaseRequest) -> ReleaseResult:
        config = self.config
        tag_prefix = self.resolve_tag_prefix()
        tag = format_tag(tag_prefix, request.version)
        commit_message = self.format_commit_message(request.version)

        since = request.since or await self.repo.get_first_commit_ref()
        commits = await self.repo.get_commits(self.project_root, since)
        logger.info("Found %d commit(s) since %s", len(commits), since)

        if not commits and not config.allow_empty:
            logger.warning("No commits since %s, skipping release of %s", since, tag)
            return ReleaseResult(version=request.version, tag=tag, skipped=True)

        if not config.skip_commit:
            paths = [*config.git.add_paths, *request.paths]
            await self.repo.add_to_stage(StageSpec(paths=paths, dry_run=config.dry_run))
            await self.repo.commit(
                CommitSpec(
                    commit_message=commit_message,
                    dry_run=config.dry_run,
                    no_verify=config.no_verify,
                )
            )

        await self.repo.create_tag(
            TagSpec(
                version=request.version,
                tag_prefix=tag_prefix,
                commit_message=commit_message,
                dry_run=config.dry_run,
            )
        )

        if config.git.push and not config.dry_run:
            await self.repo.try_push(
                PushSpec(
                    remote=config.git.remote,
                    branch=config.git.branch,
                    no_verify=config.no_verify,
                )
            )

        await run_post_targets(
            config.post_targets,
            self.template_context(request, tag),
            self.registry,
            self.repo.step_logger,
        )

        return ReleaseResult(version=request.version, tag=tag, commits=commits)
