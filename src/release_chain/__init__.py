"""release-chain: commit, tag, push and post-release targets for a version."""

from __future__ import annotations

__version__ = "0.1.0"
