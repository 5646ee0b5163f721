"""Hierarchical tag helpers.

Tags written as ``systems/networking`` also count as ``systems`` so that
browsing a parent tag lists every note filed under one of its children.
"""

from __future__ import annotations

from typing import Any, Iterable


def normalize_tag(tag: str) -> str:
    """Strip surrounding whitespace and any leading ``#`` markers."""
    return tag.strip().lstrip("#")


def expand_tags(tags: Iterable[Any] | None) -> set[str]:
    """Expand each tag into itself plus every ancestor prefix.

    ``["a/b/c"]`` yields ``{"a/b/c", "a/b", "a"}``. Non-string entries are
    ignored. Prefixes ending in an empty segment (from a leading or doubled
    ``/``) are skipped.
    """
    expanded: set[str] = set()
    for tag in tags or ():
        if not isinstance(tag, str) or not tag:
            continue
        expanded.add(tag)
        parts = tag.split("/")
        for i in range(1, len(parts)):
            if parts[i - 1]:
                expanded.add("/".join(parts[:i]))
    return expanded
