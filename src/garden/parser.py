"""WikiLink, YAML-frontmatter and digest helpers."""

from __future__ import annotations

import hashlib
import re
from typing import Any

import yaml

from garden.errors import FrontmatterError

# [[Target]], ![[Embed]], [[Target#Heading]], [[Target|Alias]], [[Target\|Alias]]
_WIKILINK_RE = re.compile(r"!?\[\[([^\[\]|#\\]+)?(#+[^\[\]|#\\]+)?(\\?\|[^\[\]#]*)?\]\]")
# YAML front-matter block at the very start of the file
_FRONTMATTER_RE = re.compile(
    r"\A---[ \t]*\r?\n(.*?)^---[ \t]*\r?$(?:\r?\n)?", re.DOTALL | re.MULTILINE
)

# Links to local files and Zotero items never resolve on the published site
_DISALLOWED_LINK_RES = (
    re.compile(r"\[[^\]]+\]\(<file://[^>]+>\)"),
    re.compile(r"\[[^\]]+\]\(file://[^)]+\)"),
    re.compile(r"\[[^\]]+\]\(zotero://[^)]+\)"),
    re.compile(r"file://[^\s)]+"),
    re.compile(r"zotero://[^\s)]+"),
)

_SLUG_STRIP_RE = re.compile(r"[^\w\- ]")


# ---------------------------------------------------------------------------
# Front-matter
# ---------------------------------------------------------------------------


def split_frontmatter(content: str) -> tuple[str | None, str]:
    """Split the raw front-matter block from body text.

    Returns ``(raw_yaml, body)``; ``raw_yaml`` is ``None`` when the file does
    not open with a ``---`` delimited block.
    """
    match = _FRONTMATTER_RE.match(content)
    if not match:
        return None, content
    return match.group(1), content[match.end() :].strip()


def parse_frontmatter(content: str) -> tuple[dict[str, Any], str]:
    """Split YAML front-matter from body text and parse it.

    Returns ``(metadata_dict, body)``; ``metadata_dict`` is empty when there
    is no front-matter block or the block is empty.

    Raises
    ------
    FrontmatterError
        When the block is not valid YAML or does not hold a mapping.
    """
    raw, body = split_frontmatter(content)
    if raw is None:
        return {}, body
    try:
        meta = yaml.safe_load(raw)
    except yaml.YAMLError as exc:
        raise FrontmatterError(f"invalid YAML front-matter ({exc})") from exc
    if meta is None:
        return {}, body
    if not isinstance(meta, dict):
        raise FrontmatterError(
            f"front-matter must be a mapping, got {type(meta).__name__}"
        )
    return meta, body


def compute_digest(raw: bytes) -> str:
    """Return the SHA-256 hex digest of the untouched file bytes."""
    return hashlib.sha256(raw).hexdigest()


def strip_disallowed_links(body: str) -> str:
    """Remove ``file://`` and ``zotero://`` links (markdown syntax and bare)."""
    for pattern in _DISALLOWED_LINK_RES:
        body = pattern.sub("", body)
    return body


# ---------------------------------------------------------------------------
# Slugs
# ---------------------------------------------------------------------------


def slugify(text: str) -> str:
    """GitHub-style heading slug: lower-case, punctuation dropped, spaces to ``-``."""
    return _SLUG_STRIP_RE.sub("", text.strip().lower()).replace(" ", "-")


def slugify_path(path: str) -> str:
    """Slugify every ``/``-separated segment of *path*.

    ``"My Folder/My Note"`` becomes ``"my-folder/my-note"``.
    """
    return "/".join(slugify(part) for part in path.split("/"))


# ---------------------------------------------------------------------------
# Wikilinks
# ---------------------------------------------------------------------------


def parse_wikilinks(text: str, *, slugify_targets: bool = False) -> list[str]:
    """Return all ``[[WikiLink]]`` targets found in *text* (de-duped, ordered).

    Headings and aliases are dropped; links made only of a heading
    (``[[#Section]]``) point at the current note and are skipped.
    """
    seen: set[str] = set()
    result: list[str] = []
    for m in _WIKILINK_RE.finditer(text):
        raw = m.group(1)
        if not raw:
            continue
        target = raw.strip()
        if not target:
            continue
        if slugify_targets:
            target = slugify_path(target)
        if target not in seen:
            seen.add(target)
            result.append(target)
    return result
