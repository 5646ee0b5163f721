"""CLI entry point for garden."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from garden.cache import MetadataCache
from garden.config import GardenSettings
from garden.errors import VaultNotFoundError
from garden.fetch import extract_external_links, fetch_metadata, group_links_by_domain
from garden.scanner import ScanResult, scan_vault
from garden.slugs import build_slug_index
from garden.validate import format_report, validate_links

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_BROKEN_LINKS = 1
EXIT_NO_VAULT = 2


def _scan(settings: GardenSettings) -> ScanResult | None:
    try:
        return scan_vault(settings.vault_dir, slugify=settings.slugify)
    except VaultNotFoundError as exc:
        logger.error("%s", exc)
        return None


def validate(settings: GardenSettings, *, as_json: bool = False) -> int:
    """Check every wikilink in the vault.

    Returns the process exit status: 0 when every link resolves, 1 otherwise.
    """
    scan = _scan(settings)
    if scan is None:
        return EXIT_NO_VAULT

    index = build_slug_index(scan.documents)
    report = validate_links(scan.documents, index)

    if as_json:
        print(json.dumps(report.to_dict(), indent=2))
    elif report.is_valid:
        print(format_report(report))
    else:
        print(format_report(report), file=sys.stderr)
    return EXIT_OK if report.is_valid else EXIT_BROKEN_LINKS


def scan(settings: GardenSettings, *, as_json: bool = False) -> int:
    """Print loaded/skipped counts and the digest of every note."""
    result = _scan(settings)
    if result is None:
        return EXIT_NO_VAULT

    if as_json:
        payload = {
            "loaded": result.loaded,
            "skipped": result.skipped,
            "documents": {doc.identity: doc.digest for doc in result.documents},
        }
        print(json.dumps(payload, indent=2))
        return EXIT_OK

    print(f"Vault: {result.root}")
    print(f"  Loaded: {result.loaded}")
    print(f"  Skipped: {result.skipped}")
    for path in result.skipped_paths:
        print(f"    ! {path.relative_to(result.root).as_posix()}")
    print("")
    for doc in result.documents:
        print(f"  {doc.digest[:12]}  {doc.identity}")
    return EXIT_OK


def links(settings: GardenSettings, *, fetch: bool = False) -> int:
    """List external links by domain, optionally filling the metadata cache."""
    result = _scan(settings)
    if result is None:
        return EXIT_NO_VAULT

    found = []
    seen: set[str] = set()
    for doc in result.documents:
        for link in extract_external_links(doc.body):
            if link.url not in seen:
                seen.add(link.url)
                found.append(link)

    cache = MetadataCache(settings.cache_file, max_age=settings.cache_max_age) if fetch else None

    for group in group_links_by_domain(found):
        print(f"{group.domain} ({group.count})")
        for link in group.links:
            line = f"  {link.url}"
            if cache is not None:
                meta = cache.get_or_fetch_metadata(
                    link.url,
                    lambda url: fetch_metadata(url, timeout=settings.fetch_timeout),
                )
                if meta and meta.get("title"):
                    line += f"  - {meta['title']}"
            print(line)
    return EXIT_OK


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="garden",
        description="Index a Markdown vault and check its wikilinks",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Increase log output (-v info, -vv debug)",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    validate_parser = subparsers.add_parser(
        "validate",
        help="Report wikilinks that do not resolve to a note",
    )
    validate_parser.add_argument("vault", nargs="?", help="Vault directory")
    validate_parser.add_argument("--json", action="store_true", help="Print the JSON report")
    validate_parser.add_argument(
        "--slugify", action="store_true", help="Slugify note identities and links"
    )

    scan_parser = subparsers.add_parser(
        "scan",
        help="Load the vault and print per-note digests",
    )
    scan_parser.add_argument("vault", nargs="?", help="Vault directory")
    scan_parser.add_argument("--json", action="store_true", help="Print JSON")
    scan_parser.add_argument(
        "--slugify", action="store_true", help="Slugify note identities and links"
    )

    links_parser = subparsers.add_parser(
        "links",
        help="List external links grouped by domain",
    )
    links_parser.add_argument("vault", nargs="?", help="Vault directory")
    links_parser.add_argument("--cache", help="Metadata cache file")
    links_parser.add_argument(
        "--fetch",
        action="store_true",
        help="Fetch page metadata for links missing from the cache",
    )

    return parser


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    args = build_parser().parse_args(argv)

    settings = GardenSettings.from_env(
        vault_dir=args.vault,
        cache_file=getattr(args, "cache", None),
        slugify=True if getattr(args, "slugify", False) else None,
    )
    if args.verbose >= 2:
        level = logging.DEBUG
    elif args.verbose == 1:
        level = logging.INFO
    else:
        level = logging.getLevelName(settings.log_level)
        if not isinstance(level, int):
            level = logging.WARNING
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")

    if args.command == "validate":
        return validate(settings, as_json=args.json)
    if args.command == "scan":
        return scan(settings, as_json=args.json)
    if args.command == "links":
        return links(settings, fetch=args.fetch)
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
