"""garden: Markdown vault indexing, wikilink integrity and link-metadata cache."""

from garden.cache import MetadataCache
from garden.document import Document
from garden.errors import FrontmatterError, GardenError, VaultNotFoundError
from garden.parser import compute_digest, parse_frontmatter, parse_wikilinks
from garden.scanner import ScanResult, scan_vault
from garden.slugs import SlugIndex, build_slug_index, resolve_wikilink
from garden.tags import expand_tags
from garden.validate import BrokenLink, ValidationReport, validate_links

__all__ = [
    "Document",
    "ScanResult",
    "scan_vault",
    "parse_frontmatter",
    "parse_wikilinks",
    "compute_digest",
    "expand_tags",
    "SlugIndex",
    "build_slug_index",
    "resolve_wikilink",
    "BrokenLink",
    "ValidationReport",
    "validate_links",
    "MetadataCache",
    "GardenError",
    "FrontmatterError",
    "VaultNotFoundError",
]
