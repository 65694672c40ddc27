"""Post-release target execution.

Post targets run one after another once the release is tagged and
pushed. A target only starts after the previous one reported success;
the first failure stops the chain.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import TYPE_CHECKING, Any

from release_chain.core.template import coerce, create_template_string, render_value
from release_chain.exceptions import PostTargetFailure, ProjectNotFoundError, TargetNotFoundError
from release_chain.workspace import parse_target_string

if TYPE_CHECKING:
    from release_chain.log import StepLogger
    from release_chain.workspace import TargetRef, WorkspaceRegistry


async def run_post_targets(
    post_targets: Sequence[str],
    template_context: Mapping[str, Any],
    registry: WorkspaceRegistry,
    step_logger: StepLogger,
) -> None:
    """Run post targets sequentially.

    Args:
        post_targets: Target strings, e.g. ``"my-lib:publish"``
        template_context: Values for ``${name}`` placeholders in options
        registry: Workspace that owns and executes the targets
        step_logger: Records each successful target

    Raises:
        ProjectNotFoundError: If a target's project is unknown
        TargetNotFoundError: If a target is unknown for its project
        PostTargetFailure: If a target reports an unsuccessful result
    """
    for post_target in post_targets:
        ref = parse_target_string(post_target)
        check_target_exists(ref, registry)

        options = resolve_target_options(registry.read_target_options(ref), template_context)

        async for result in registry.run_target(ref, options, template_context):
            if not result.success:
                raise PostTargetFailure(ref.project, ref.target)

        step_logger.record("post_target_success", f'Ran post-target "{post_target}"')


def resolve_target_options(
    target_options: Mapping[str, Any] | None,
    context: Mapping[str, Any],
) -> dict[str, Any]:
    """Substitute template values into declared options.

    Primitive values are templated and coerced back to bool/number/str.
    Structured values (tables, arrays) are returned untouched.
    """
    resolved: dict[str, Any] = {}
    for option, value in (target_options or {}).items():
        if isinstance(value, (bool, int, float, str)):
            resolved[option] = coerce(create_template_string(render_value(value), context))
        else:
            resolved[option] = value
    return resolved


def check_target_exists(ref: TargetRef, registry: WorkspaceRegistry) -> None:
    project = registry.projects.get(ref.project)
    if project is None:
        raise ProjectNotFoundError(ref.project, registry.projects.keys())

    if ref.target not in project.targets:
        raise TargetNotFoundError(ref.project, ref.target, project.targets.keys())
