"""Slug index: maps bare note filenames to their full vault identities.

Writers link to notes by bare name (``[[networking]]``) as often as by path
(``[[systems/networking]]``). The index built here lets a bare name stand in
for its full identity as long as exactly one note in the vault carries that
filename. A filename found in two or more folders is *ambiguous*: it is
dropped from the mapping so that a bare link can never silently point at the
wrong note, and authors have to spell out the folder.

Which note claims a name first depends on scan order, so the scanner walks
directories in a sorted, reproducible order.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Iterable

logger = logging.getLogger(__name__)


def bare_name(identity: str) -> str:
    """Return the last ``/``-separated segment of *identity*."""
    return identity.rsplit("/", 1)[-1] or identity


@dataclass
class SlugIndex:
    """Bare filename → identity mapping plus the set of ambiguous filenames."""

    mapping: dict[str, str] = field(default_factory=dict)
    ambiguous: set[str] = field(default_factory=set)
    #: filename → identity of its first occurrence in scan order
    first_seen: dict[str, str] = field(default_factory=dict)

    def __len__(self) -> int:
        return len(self.mapping)

    def __contains__(self, name: object) -> bool:
        return name in self.mapping

    def resolve(self, token: str) -> str:
        """Resolve a wikilink *token* to a note identity.

        Tokens containing ``/`` are already identities and are returned as-is.
        Bare names are looked up in :attr:`mapping`; a miss (unknown or
        ambiguous name) returns the token unchanged, which is also how
        root-level notes resolve to themselves.
        """
        if "/" in token:
            logger.debug("Resolve %r: qualified path, used as-is", token)
            return token
        resolved = self.mapping.get(token)
        logger.debug("Resolve %r: %s", token, resolved or "not in slug map")
        return resolved or token

    def is_ambiguous(self, token: str) -> bool:
        """True when *token* is a bare name shared by several notes."""
        return "/" not in token and token in self.ambiguous


def build_slug_index(entries: Iterable[Any]) -> SlugIndex:
    """Build a fresh :class:`SlugIndex` from *entries*.

    *entries* may be :class:`~garden.document.Document` objects (anything with
    an ``identity`` attribute) or plain identity strings. A warning is logged
    once per ambiguous filename, however many further duplicates follow.
    """
    index = SlugIndex()
    count = 0
    for entry in entries:
        identity = getattr(entry, "identity", entry)
        count += 1
        name = bare_name(identity)

        first = index.first_seen.get(name)
        if first is None:
            index.first_seen[name] = identity
            index.mapping[name] = identity
            continue
        if first == identity:
            continue

        if name not in index.ambiguous:
            index.ambiguous.add(name)
            logger.warning(
                'Duplicate filename: "%s" in "%s" and "%s" - use full paths',
                name,
                first,
                identity,
            )
        index.mapping.pop(name, None)

    logger.info("Built slug map with %d entries from %d notes", len(index.mapping), count)
    return index


def resolve_wikilink(token: str, index: SlugIndex) -> str:
    """Module-level shorthand for :meth:`SlugIndex.resolve`."""
    return index.resolve(token)
