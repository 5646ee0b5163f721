"""External link discovery and OpenGraph metadata fetching.

:func:`fetch_metadata` is the default fetcher handed to
:meth:`garden.cache.MetadataCache.get_or_fetch_metadata`. It makes a single
request; retrying is left to callers.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Any
from urllib.parse import urlparse

import httpx

from garden.cache import now_ms

logger = logging.getLogger(__name__)

USER_AGENT = "Mozilla/5.0 (compatible; garden-vault/0.1)"

_MARKDOWN_LINK_RE = re.compile(r"\[([^\]]+)\]\(([^)]+)\)")
_BARE_URL_RE = re.compile(r"https?://[^\s<>\"{}|\\^`\[\])]+")

_OG_TITLE_RE = re.compile(r"<meta[^>]*property=[\"']og:title[\"'][^>]*content=[\"']([^\"']*)[\"']", re.I)
_TITLE_RE = re.compile(r"<title[^>]*>([^<]+)</title>", re.I)
_OG_DESC_RE = re.compile(r"<meta[^>]*property=[\"']og:description[\"'][^>]*content=[\"']([^\"']*)[\"']", re.I)
_OG_IMAGE_RE = re.compile(r"<meta[^>]*property=[\"']og:image[\"'][^>]*content=[\"']([^\"']*)[\"']", re.I)
_AUTHOR_RE = re.compile(r"<meta[^>]*name=[\"']author[\"'][^>]*content=[\"']([^\"']*)[\"']", re.I)

_ENTITIES = {
    "&amp;": "&",
    "&lt;": "<",
    "&gt;": ">",
    "&quot;": '"',
    "&#39;": "'",
    "&apos;": "'",
}
_ENTITY_RE = re.compile(r"&[#\w]+;")


# ---------------------------------------------------------------------------
# Link extraction
# ---------------------------------------------------------------------------


@dataclass
class ExternalLink:
    url: str
    domain: str
    title: str | None = None  # link text, when written as [text](url)


@dataclass
class GroupedLinks:
    domain: str
    links: list[ExternalLink] = field(default_factory=list)

    @property
    def count(self) -> int:
        return len(self.links)


def _domain(url: str) -> str | None:
    try:
        parsed = urlparse(url)
    except ValueError:
        return None
    if parsed.scheme not in ("http", "https") or not parsed.hostname:
        return None
    return parsed.hostname


def extract_external_links(markdown: str) -> list[ExternalLink]:
    """Return every http(s) URL in *markdown*, de-duplicated by URL.

    ``[text](url)`` links come first (keeping their text as title), then bare
    URLs not already seen.
    """
    links: list[ExternalLink] = []
    seen: set[str] = set()

    for m in _MARKDOWN_LINK_RE.finditer(markdown):
        text, url = m.group(1), m.group(2).strip()
        domain = _domain(url)
        if domain and url not in seen:
            seen.add(url)
            links.append(ExternalLink(url=url, domain=domain, title=text))

    for m in _BARE_URL_RE.finditer(markdown):
        url = m.group(0)
        domain = _domain(url)
        if domain and url not in seen:
            seen.add(url)
            links.append(ExternalLink(url=url, domain=domain))

    return links


def group_links_by_domain(links: list[ExternalLink]) -> list[GroupedLinks]:
    """Group *links* by domain, most-linked domain first."""
    grouped: dict[str, GroupedLinks] = {}
    for link in links:
        grouped.setdefault(link.domain, GroupedLinks(link.domain)).links.append(link)
    return sorted(grouped.values(), key=lambda g: g.count, reverse=True)


# ---------------------------------------------------------------------------
# Metadata
# ---------------------------------------------------------------------------


def decode_html_entities(text: str) -> str:
    return _ENTITY_RE.sub(lambda m: _ENTITIES.get(m.group(0), m.group(0)), text)


def parse_metadata(html: str) -> dict[str, Any]:
    """Pull title, description, image and author out of an HTML page."""
    metadata: dict[str, Any] = {}

    m = _OG_TITLE_RE.search(html)
    if m:
        metadata["title"] = decode_html_entities(m.group(1))
    else:
        m = _TITLE_RE.search(html)
        if m:
            metadata["title"] = decode_html_entities(m.group(1).strip())

    m = _OG_DESC_RE.search(html)
    if m:
        metadata["description"] = decode_html_entities(m.group(1))

    m = _OG_IMAGE_RE.search(html)
    if m:
        metadata["image"] = m.group(1)

    m = _AUTHOR_RE.search(html)
    if m:
        metadata["author"] = decode_html_entities(m.group(1))

    return metadata


def fetch_metadata(
    url: str,
    *,
    client: httpx.Client | None = None,
    timeout: float = 5.0,
) -> dict[str, Any] | None:
    """GET *url* and return its metadata stamped with ``fetchedAt``.

    Returns ``None`` on a non-2xx status, a timeout or any transport error.
    """
    owns_client = client is None
    if client is None:
        client = httpx.Client(
            headers={"User-Agent": USER_AGENT},
            timeout=timeout,
            follow_redirects=True,
        )
    try:
        response = client.get(url)
        if not response.is_success:
            logger.warning("Failed to fetch %s: %d", url, response.status_code)
            return None
        metadata = parse_metadata(response.text)
    except httpx.TimeoutException:
        logger.warning("Timeout fetching metadata for %s", url)
        return None
    except httpx.HTTPError as exc:
        logger.warning("Error fetching metadata for %s: %s", url, exc)
        return None
    finally:
        if owns_client:
            client.close()

    metadata["fetchedAt"] = now_ms()
    return metadata
