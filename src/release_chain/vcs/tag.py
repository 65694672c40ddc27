"""Tag name formatting."""

from __future__ import annotations


def format_tag(tag_prefix: str, version: str) -> str:
    """Build a tag name such as ``my-lib-1.2.0`` or ``v1.2.0``."""
    return f"{tag_prefix}{version}"
