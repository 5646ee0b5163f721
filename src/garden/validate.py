"""Wikilink integrity check.

Every outbound link of every note is resolved through the slug index and
checked against the set of identities that actually exist. The same
:class:`ValidationReport` backs the ``garden validate`` command and the JSON
payload served to external reporting endpoints.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable

from garden.document import Document
from garden.slugs import SlugIndex, build_slug_index


@dataclass(frozen=True)
class BrokenLink:
    source_file: str  # identity of the note holding the link
    target_slug: str  # token as authored

    def to_dict(self) -> dict[str, str]:
        return {"sourceFile": self.source_file, "targetSlug": self.target_slug}


@dataclass
class ValidationReport:
    total_notes: int = 0
    total_links_checked: int = 0
    broken_links: list[BrokenLink] = field(default_factory=list)

    @property
    def broken_links_count(self) -> int:
        return len(self.broken_links)

    @property
    def is_valid(self) -> bool:
        return not self.broken_links

    @property
    def status_code(self) -> int:
        """HTTP status for the report: 200 when valid, 422 otherwise."""
        return 200 if self.is_valid else 422

    def by_source(self) -> dict[str, list[str]]:
        """Broken link targets grouped by source note, in discovery order."""
        grouped: dict[str, list[str]] = {}
        for broken in self.broken_links:
            grouped.setdefault(broken.source_file, []).append(broken.target_slug)
        return grouped

    def to_dict(self) -> dict[str, Any]:
        return {
            "totalNotes": self.total_notes,
            "totalLinksChecked": self.total_links_checked,
            "brokenLinksCount": self.broken_links_count,
            "brokenLinks": [b.to_dict() for b in self.broken_links],
            "isValid": self.is_valid,
        }


def validate_links(
    documents: Iterable[Document], index: SlugIndex | None = None
) -> ValidationReport:
    """Return a :class:`ValidationReport` for every link in *documents*.

    When *index* is omitted it is built from *documents*.
    """
    docs = list(documents)
    if index is None:
        index = build_slug_index(docs)
    valid = {doc.identity for doc in docs}

    report = ValidationReport(total_notes=len(docs))
    for doc in docs:
        for token in doc.links:
            report.total_links_checked += 1
            if index.resolve(token) not in valid:
                report.broken_links.append(BrokenLink(doc.identity, token))
    return report


def format_report(report: ValidationReport) -> str:
    """Render *report* as the human-readable text printed by the CLI."""
    if report.is_valid:
        return (
            "All links are valid!\n"
            f"   Checked {report.total_links_checked} links "
            f"across {report.total_notes} notes\n"
        )

    grouped = report.by_source()
    lines = [f"Found {report.broken_links_count} broken link(s):", ""]
    for source, targets in grouped.items():
        lines.append(f"   {source}:")
        lines.extend(f"      -> [[{target}]] (not found)" for target in targets)
        lines.append("")
    lines.append(
        f"Total: {report.broken_links_count} broken links in {len(grouped)} files"
    )
    lines.append("")
    lines.append("Tip: check these wikilinks and either:")
    lines.append("   1. Fix the link to point to an existing note")
    lines.append("   2. Create the missing note")
    lines.append("   3. Remove the link if it's no longer needed")
    return "\n".join(lines) + "\n"
