"""Core release logic for release-chain.

This module contains the building blocks that do not talk to git
directly:
- Tag name formatting
- Template substitution and coercion for post target options
- Post target execution
- Release orchestration
"""

from __future__ import annotations

from release_chain.core.pipeline import ReleasePipeline, ReleaseRequest, ReleaseResult
from release_chain.core.post_targets import (
    check_target_exists,
    resolve_target_options,
    run_post_targets,
)
from release_chain.core.template import coerce, create_template_string
from release_chain.vcs.tag import format_tag

__all__ = [
    # Pipeline
    "ReleasePipeline",
    "ReleaseRequest",
    "ReleaseResult",
    # Post targets
    "check_target_exists",
    # Template
    "coerce",
    "create_template_string",
    # Tag
    "format_tag",
    "resolve_target_options",
    "run_post_targets",
]
