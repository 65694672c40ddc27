"""Template string substitution and primitive coercion.

Post target options and the tag prefix / commit message formats use
``${name}`` placeholders, e.g. ``"chore(${projectName}): release ${version}"``.
After substitution, option values are coerced back into the most
specific primitive type so that ``"${dryRun}"`` becomes a real boolean.
"""

from __future__ import annotations

import math
import re
from collections.abc import Mapping
from typing import Any

Primitive = bool | int | float | str

_PLACEHOLDER_RE = re.compile(r"\$\{([^}]+)\}")
_NUMBER_RE = re.compile(r"[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?", re.ASCII)


def render_value(value: Any) -> str:
    """Render a context value the way it appears inside a template."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return ""
    return str(value)


def create_template_string(template: str, context: Mapping[str, Any]) -> str:
    """Substitute ``${name}`` placeholders from ``context``.

    Placeholders without a matching context key are left untouched.
    """

    def replace(match: re.Match[str]) -> str:
        name = match.group(1)
        if name not in context:
            return match.group(0)
        return render_value(context[name])

    return _PLACEHOLDER_RE.sub(replace, template)


def coerce(value: str) -> Primitive:
    """Coerce a substituted string: boolean, then number, then string.

    Examples:
        >>> coerce("true")
        True
        >>> coerce("42")
        42
        >>> coerce("1.5")
        1.5
        >>> coerce("1.2.0")
        '1.2.0'
    """
    if value in ("true", "false"):
        return value == "true"

    # Plain ASCII literals only; int() and float() also take "1_000" and "nan"
    stripped = value.strip()
    if not _NUMBER_RE.fullmatch(stripped):
        return value

    try:
        return int(stripped)
    except ValueError:
        pass

    number = float(stripped)
    if math.isinf(number):
        return value
    return number
