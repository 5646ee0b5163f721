"""Vault scanner: walks a directory tree and loads every note as a Document."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterable

from garden.document import Document
from garden.errors import FrontmatterError, VaultNotFoundError
from garden.parser import (
    compute_digest,
    parse_frontmatter,
    parse_wikilinks,
    slugify_path,
    strip_disallowed_links,
)
from garden.tags import expand_tags, normalize_tag

logger = logging.getLogger(__name__)

MARKDOWN_EXTENSIONS: tuple[str, ...] = (".md", ".mdx")


@dataclass
class ScanResult:
    """Documents loaded by one :func:`scan_vault` call plus diagnostics."""

    root: Path
    documents: list[Document] = field(default_factory=list)
    skipped_paths: list[Path] = field(default_factory=list)

    @property
    def loaded(self) -> int:
        return len(self.documents)

    @property
    def skipped(self) -> int:
        return len(self.skipped_paths)

    def identities(self) -> list[str]:
        return [doc.identity for doc in self.documents]

    def by_identity(self) -> dict[str, Document]:
        return {doc.identity: doc for doc in self.documents}


# ---------------------------------------------------------------------------
# Walk
# ---------------------------------------------------------------------------


def iter_markdown_files(
    root: Path, extensions: Iterable[str] = MARKDOWN_EXTENSIONS
) -> list[Path]:
    """Return every Markdown file under *root* in traversal order.

    Entries of each directory are visited sorted by name so that the order,
    and therefore which duplicate filename is seen first, is reproducible.
    Directories whose name starts with ``.`` are not descended into.
    """
    suffixes = tuple(extensions)
    found: list[Path] = []

    def _walk(directory: Path) -> None:
        with os.scandir(directory) as it:
            entries = sorted(it, key=lambda e: e.name)
        for entry in entries:
            if entry.is_dir():
                if not entry.name.startswith("."):
                    _walk(Path(entry.path))
            elif entry.is_file() and entry.name.endswith(suffixes):
                found.append(Path(entry.path))

    _walk(root)
    return found


def identity_for(path: Path, root: Path, *, slugify: bool = False) -> str:
    """Vault-relative, extension-less, ``/``-separated identity of *path*."""
    rel = path.relative_to(root).with_suffix("").as_posix()
    return slugify_path(rel) if slugify else rel


# ---------------------------------------------------------------------------
# Per-file loading
# ---------------------------------------------------------------------------


def _as_list(value: Any) -> list[Any]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, (list, tuple, set)):
        return list(value)
    return [value]


def load_document(path: Path, root: Path, *, slugify: bool = False) -> Document:
    """Read one note and return a fully-populated :class:`Document`.

    Raises ``OSError``, ``UnicodeDecodeError`` or :class:`FrontmatterError`;
    :func:`scan_vault` turns those into skipped files.
    """
    raw = path.read_bytes()
    digest = compute_digest(raw)
    content = raw.decode("utf-8")
    try:
        frontmatter, body = parse_frontmatter(content)
    except FrontmatterError as exc:
        raise FrontmatterError(str(exc), path) from exc

    identity = identity_for(path, root, slugify=slugify)

    title = frontmatter.get("title")
    if not isinstance(title, str) or not title.strip():
        title = path.stem
        frontmatter["title"] = title

    tags = [normalize_tag(t) for t in _as_list(frontmatter.get("tags")) if isinstance(t, str)]
    expanded = sorted(expand_tags(t for t in tags if t))
    frontmatter["tags"] = expanded

    links = [str(link) for link in _as_list(frontmatter.get("links")) if link is not None]
    if not links:
        links = parse_wikilinks(body, slugify_targets=slugify)
    frontmatter["links"] = links

    aliases = [str(a) for a in _as_list(frontmatter.get("aliases")) if a is not None]
    frontmatter["aliases"] = aliases

    draft = bool(frontmatter.get("draft", False))
    frontmatter["draft"] = draft
    publish = frontmatter.get("publish")

    return Document(
        identity=identity,
        title=title,
        body=strip_disallowed_links(body),
        digest=digest,
        path=path,
        tags=expanded,
        links=links,
        aliases=aliases,
        draft=draft,
        publish=publish if publish is None else bool(publish),
        frontmatter=frontmatter,
    )


# ---------------------------------------------------------------------------
# Scan
# ---------------------------------------------------------------------------


def scan_vault(
    root: Path | str,
    *,
    extensions: Iterable[str] = MARKDOWN_EXTENSIONS,
    slugify: bool = False,
) -> ScanResult:
    """Recursively load every note under *root*.

    A file that cannot be read or whose front-matter is malformed is logged,
    counted as skipped and left out; the scan itself carries on.

    Parameters
    ----------
    root:
        Vault directory.
    extensions:
        File suffixes treated as notes.
    slugify:
        Slugify identities and body wikilinks (``"My Note"`` → ``"my-note"``).
    """
    root = Path(root)
    if not root.is_dir():
        raise VaultNotFoundError(root)

    result = ScanResult(root=root)
    for path in iter_markdown_files(root, extensions):
        try:
            result.documents.append(load_document(path, root, slugify=slugify))
        except (OSError, UnicodeDecodeError, FrontmatterError) as exc:
            logger.warning("Skipping %s: %s", path.relative_to(root).as_posix(), exc)
            result.skipped_paths.append(path)

    logger.info("Loaded %d files, skipped %d", result.loaded, result.skipped)
    return result
