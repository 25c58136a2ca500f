# Copyright (c) 2025 zvuk-dl and contributors. All rights reserved.
# Licensed under the MIT license. See LICENSE file in the project root for details.

"""Metadata resolution for albums, tracks and audiobooks.

Every failure here aborts the whole batch: partial metadata is not
actionable downstream.
"""

import contextlib
import logging
from collections.abc import Iterator
from dataclasses import dataclass, field

from zvukdl.downloader.exceptions import (
    DownloadError,
    LinkCountMismatchError,
    MetadataError,
)
from zvukdl.downloader.zvuk.client import ZvukClient
from zvukdl.models.chapter import BookChapter
from zvukdl.models.enums import Quality
from zvukdl.models.release import Release
from zvukdl.models.track import Track, TrackLink

logger = logging.getLogger(__name__)


@contextlib.contextmanager
def metadata_stage(description: str) -> Iterator[None]:
    """Wrap errors raised inside the block with the failing stage."""
    try:
        yield
    except LinkCountMismatchError:
        raise
    except DownloadError as e:
        raise MetadataError(description, details={"stage": description}) from e


@dataclass(frozen=True)
class ResolvedBatch:
    """Tracks, their links and their releases, ready for downloading."""

    tracks: dict[str, Track] = field(default_factory=dict)
    links: dict[str, TrackLink] = field(default_factory=dict)
    releases: dict[str, Release] = field(default_factory=dict)

    def release_for(self, track: Track) -> Release:
        """Get the release a track belongs to."""
        release = self.releases.get(track.release_id)
        if release is None:
            msg = f"No release info for track id {track.track_id}"
            raise MetadataError(msg, details={"release_id": track.release_id})
        return release

    def ordered_tracks(self) -> list[Track]:
        """Tracks sorted by release then position."""
        return sorted(
            self.tracks.values(),
            key=lambda t: (t.release_id, t.number, t.track_id),
        )


@dataclass(frozen=True)
class ResolvedBooks:
    """Audiobook chapters and their stream URLs."""

    chapters: dict[str, BookChapter] = field(default_factory=dict)
    links: dict[str, str] = field(default_factory=dict)

    def ordered_chapters(self) -> list[BookChapter]:
        """Chapters sorted by book then position."""
        return sorted(
            self.chapters.values(),
            key=lambda c: (c.author, c.book_title, c.number, c.chapter_id),
        )


def check_links(expected: dict, links: dict, what: str) -> None:
    """Ensure links exist for exactly the expected keys."""
    if len(expected) != len(links) or expected.keys() != links.keys():
        missing = sorted(expected.keys() - links.keys())
        msg = (
            f"{what} metadata and links have different length "
            f"({len(expected)} != {len(links)})"
        )
        raise LinkCountMismatchError(
            msg,
            expected=len(expected),
            actual=len(links),
            details={"missing": missing},
        )


class MetadataResolver:
    """Resolves ids into entities and stream links through a ZvukClient."""

    def __init__(self, client: ZvukClient, quality: Quality) -> None:
        self.client = client
        self.quality = quality

    async def resolve_releases(self, release_ids: list[str]) -> dict[str, Release]:
        """Get releases with label names merged in."""
        with metadata_stage("Failed to get releases metadata"):
            return await self.client.get_releases_info(release_ids)

    async def resolve_albums(self, release_ids: list[str]) -> ResolvedBatch:
        """Resolve every track of the given releases."""
        releases = await self.resolve_releases(release_ids)
        track_ids = [
            track_id for release in releases.values() for track_id in release.track_ids
        ]
        return await self.resolve_tracks(track_ids, releases)

    async def resolve_tracks(
        self,
        track_ids: list[str],
        known_releases: dict[str, Release] | None = None,
    ) -> ResolvedBatch:
        """
        Resolve tracks and their stream links.

        Args:
            track_ids: Tracks to resolve
            known_releases: Releases already resolved by the caller. When empty,
                the releases the tracks reference are looked up once each.
        """
        if not track_ids:
            logger.warning("No tracks to resolve")
            return ResolvedBatch(releases=dict(known_releases or {}))

        with metadata_stage("Failed to get tracks metadata"):
            tracks = await self.client.get_tracks_metadata(track_ids)

        with metadata_stage("Failed to get tracks download links"):
            links = await self.client.get_tracks_links(tracks, self.quality)
        check_links(tracks, links, "Tracks")

        if known_releases:
            releases = known_releases
        else:
            release_ids = sorted({track.release_id for track in tracks.values()})
            releases = await self.resolve_releases(release_ids)

        return ResolvedBatch(tracks=tracks, links=links, releases=releases)

    async def resolve_books(self, book_ids: list[str]) -> ResolvedBooks:
        """Resolve every chapter of the given books and their stream links."""
        with metadata_stage("Failed to get books metadata"):
            chapters = await self.client.get_books_metadata(book_ids)

        with metadata_stage("Failed to get audiobook download links"):
            urls = await self.client.get_chapter_links(list(chapters))

        if len(urls) != len(chapters):
            msg = (
                "Audiobook metadata and links have different length "
                f"({len(chapters)} != {len(urls)})"
            )
            raise LinkCountMismatchError(msg, expected=len(chapters), actual=len(urls))

        # getStream answers in request order
        links = dict(zip(chapters, urls, strict=True))
        return ResolvedBooks(chapters=chapters, links=links)
