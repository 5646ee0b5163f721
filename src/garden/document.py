"""Core Document dataclass."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from pathlib import Path
from typing import Any


@dataclass
class Document:
    """A single markdown note in the vault, as produced by one scan."""

    #: Vault-relative path without extension, ``/``-separated
    identity: str
    title: str
    body: str
    #: SHA-256 of the original file bytes
    digest: str
    path: Path | None = None
    tags: list[str] = field(default_factory=list)
    #: Reference tokens as authored (bare names or ``folder/name`` paths)
    links: list[str] = field(default_factory=list)
    aliases: list[str] = field(default_factory=list)
    draft: bool = False
    publish: bool | None = None
    frontmatter: dict[str, Any] = field(default_factory=dict)

    @property
    def filename(self) -> str:
        """Bare filename: the last segment of :attr:`identity`."""
        return self.identity.rsplit("/", 1)[-1]

    @property
    def created(self) -> Any:
        return self.frontmatter.get("created")

    @property
    def updated(self) -> Any:
        return self.frontmatter.get("updated")

    @property
    def date(self) -> Any:
        return self.frontmatter.get("date")

    def to_dict(self) -> dict[str, Any]:
        return {
            "identity": self.identity,
            "title": self.title,
            "body": self.body,
            "digest": self.digest,
            "tags": self.tags,
            "links": self.links,
            "aliases": self.aliases,
            "draft": self.draft,
            "publish": self.publish,
            "frontmatter": _jsonable(self.frontmatter),
        }


def _jsonable(value: Any) -> Any:
    """Convert YAML-produced dates (recursively) to ISO strings."""
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, dict):
        return {str(k): _jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple, set)):
        return [_jsonable(v) for v in value]
    return value
