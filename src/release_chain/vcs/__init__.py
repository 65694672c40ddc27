"""Version control integration for release-chain."""

from __future__ import annotations

from release_chain.vcs.commit_log import CommitAccumulator, GitLogStream
from release_chain.vcs.git import (
    CommitSpec,
    GitRepository,
    PushSpec,
    StageSpec,
    TagSpec,
    is_atomic_unsupported,
)

__all__ = [
    "CommitAccumulator",
    "CommitSpec",
    "GitLogStream",
    "GitRepository",
    "PushSpec",
    "StageSpec",
    "TagSpec",
    "is_atomic_unsupported",
]
