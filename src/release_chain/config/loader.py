"""Configuration loading from pyproject.toml."""

from __future__ import annotations

import tomllib
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from release_chain.config.models import ReleaseChainConfig
from release_chain.exceptions import ConfigNotFoundError, ConfigValidationError

TOOL_KEY = "release-chain"


def find_pyproject_toml(start: Path | None = None) -> Path:
    """Walk up from ``start`` looking for pyproject.toml.

    Raises:
        ConfigNotFoundError: If no pyproject.toml exists in any parent
    """
    current = (start or Path.cwd()).resolve()
    for directory in (current, *current.parents):
        candidate = directory / "pyproject.toml"
        if candidate.is_file():
            return candidate

    raise ConfigNotFoundError(f"No pyproject.toml found in {current} or any parent directory")


def load_pyproject_toml(path: Path) -> dict[str, Any]:
    if not path.is_file():
        raise ConfigNotFoundError(f"Configuration file not found: {path}")

    try:
        with path.open("rb") as f:
            return tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigValidationError(f"Invalid TOML in {path}: {e}") from e


def extract_release_chain_config(pyproject: dict[str, Any]) -> dict[str, Any]:
    """Return the [tool.release-chain] table, or {} when absent."""
    return pyproject.get("tool", {}).get(TOOL_KEY, {})


def get_project_name(path: Path | None = None) -> str:
    """Read [project].name from the nearest pyproject.toml."""
    data = load_pyproject_toml(find_pyproject_toml(path))
    name = data.get("project", {}).get("name")
    if not name:
        raise ConfigValidationError("Missing [project].name in pyproject.toml")
    return name


def load_config(path: Path | None = None) -> ReleaseChainConfig:
    """Load and validate release-chain configuration.

    ``project_name`` falls back to [project].name when not set explicitly.

    Args:
        path: Project directory (or any directory below it)

    Raises:
        ConfigNotFoundError: If pyproject.toml cannot be found
        ConfigValidationError: If the configuration is invalid
    """
    pyproject_path = find_pyproject_toml(path)
    data = load_pyproject_toml(pyproject_path)
    raw = dict(extract_release_chain_config(data))

    if "project_name" not in raw and data.get("project", {}).get("name"):
        raw["project_name"] = data["project"]["name"]

    try:
        return ReleaseChainConfig.model_validate(raw)
    except ValidationError as e:
        raise ConfigValidationError(f"Invalid [tool.{TOOL_KEY}] configuration:\n{e}") from e
