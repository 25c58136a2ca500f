# Copyright (c) 2025 zvuk-dl and contributors. All rights reserved.
# Licensed under the MIT license. See LICENSE file in the project root for details.

"""URL parsing for zvuk.com catalog links."""

import logging
import re
from collections.abc import Iterable
from dataclasses import dataclass, field
from urllib.parse import urlparse

from zvukdl.models.enums import ContentType

logger = logging.getLogger(__name__)

ZVUK_DOMAINS = (r"^(www\.)?zvuk\.com$",)

CONTENT_PATTERNS = {
    ContentType.RELEASE: r"^/release/([^/?#]+)/?$",
    ContentType.TRACK: r"^/track/([^/?#]+)/?$",
    ContentType.ABOOK: r"^/abook/([^/?#]+)/?$",
}


@dataclass
class ParsedURL:
    """Result of URL parsing."""

    content_type: ContentType
    content_id: str
    url: str

    @property
    def is_valid(self) -> bool:
        """Check if the parsed URL is valid."""
        return self.content_type != ContentType.UNKNOWN and bool(self.content_id)


@dataclass
class CatalogRequest:
    """Catalog ids grouped by kind, in input order and without duplicates."""

    release_ids: list[str] = field(default_factory=list)
    track_ids: list[str] = field(default_factory=list)
    book_ids: list[str] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not (self.release_ids or self.track_ids or self.book_ids)

    def add(self, parsed: ParsedURL) -> None:
        """Add a parsed URL to the matching id list."""
        target = {
            ContentType.RELEASE: self.release_ids,
            ContentType.TRACK: self.track_ids,
            ContentType.ABOOK: self.book_ids,
        }[parsed.content_type]
        if parsed.content_id not in target:
            target.append(parsed.content_id)


class URLParser:
    """Parser for zvuk.com release, track and audiobook URLs."""

    def __init__(self) -> None:
        self.domain_patterns = [re.compile(p) for p in ZVUK_DOMAINS]
        self.content_patterns = {
            content_type: re.compile(pattern)
            for content_type, pattern in CONTENT_PATTERNS.items()
        }

    def parse_url(self, url: str) -> ParsedURL:
        """Parse a zvuk.com URL."""
        url = url.strip()
        try:
            parsed = urlparse(url)
        except ValueError:
            return self._create_invalid_result(url)

        if parsed.scheme not in ("http", "https") or not any(
            p.match(parsed.netloc.lower()) for p in self.domain_patterns
        ):
            return self._create_invalid_result(url)

        for content_type, pattern in self.content_patterns.items():
            match = pattern.match(parsed.path)
            if match:
                return ParsedURL(
                    content_type=content_type, content_id=match.group(1), url=url
                )

        return self._create_invalid_result(url)

    def group_urls(self, urls: Iterable[str]) -> CatalogRequest:
        """Sort URLs into release, track and audiobook ids, skipping the rest."""
        request = CatalogRequest()
        for url in urls:
            parsed = self.parse_url(url)
            if not parsed.is_valid:
                logger.warning("Skipping unrecognized URL: %s", url)
                continue
            request.add(parsed)
        return request

    def _create_invalid_result(self, url: str) -> ParsedURL:
        """Create an invalid parse result."""
        return ParsedURL(content_type=ContentType.UNKNOWN, content_id="", url=url)


# Convenience functions
def parse_music_url(url: str) -> ParsedURL:
    """Parse a zvuk.com URL using the default parser."""
    return URLParser().parse_url(url)


def group_urls(urls: Iterable[str]) -> CatalogRequest:
    """Group URLs by content type using the default parser."""
    return URLParser().group_urls(urls)
