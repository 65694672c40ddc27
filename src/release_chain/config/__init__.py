"""Configuration management for release-chain."""

from __future__ import annotations

from release_chain.config.loader import load_config
from release_chain.config.models import (
    GitConfig,
    ProjectConfig,
    ReleaseChainConfig,
    TargetConfig,
)

__all__ = [
    "GitConfig",
    "ProjectConfig",
    "ReleaseChainConfig",
    "TargetConfig",
    "load_config",
]
