# Copyright (c) 2025 zvuk-dl and contributors. All rights reserved.
# Licensed under the MIT license. See LICENSE file in the project root for details.

"""Download and tag orchestration for zvuk.com content."""

import contextlib
import logging
from collections.abc import Iterator
from dataclasses import dataclass
from pathlib import Path

from zvukdl.config.settings import ZvukConfig
from zvukdl.downloader.exceptions import DownloadError
from zvukdl.downloader.session import SessionManager
from zvukdl.downloader.utils import (
    format_error_chain,
    raise_error,
    sanitize_path,
    write_atomically,
)
from zvukdl.downloader.zvuk.client import ZvukClient
from zvukdl.downloader.zvuk.resolver import (
    MetadataResolver,
    ResolvedBatch,
    ResolvedBooks,
)
from zvukdl.metadata.artwork import COVER_FILENAME, ensure_cover
from zvukdl.metadata.tagger import tag_chapter, tag_track
from zvukdl.models.chapter import BookChapter
from zvukdl.models.enums import Quality
from zvukdl.models.release import Release
from zvukdl.models.track import Lyrics, Track, TrackLink

logger = logging.getLogger(__name__)

# Audiobook streams are only served as MP3
CHAPTER_QUALITY = Quality.MP3_MID


@dataclass
class DownloadSummary:
    """Outcome counters of a download run."""

    downloaded: int = 0
    skipped: int = 0
    failed: int = 0

    def record(self, downloaded: bool) -> None:
        """Count one finished item."""
        if downloaded:
            self.downloaded += 1
        else:
            self.skipped += 1

    def merge(self, other: "DownloadSummary") -> "DownloadSummary":
        """Add another summary's counters to this one."""
        self.downloaded += other.downloaded
        self.skipped += other.skipped
        self.failed += other.failed
        return self

    @property
    def total(self) -> int:
        return self.downloaded + self.skipped + self.failed


class ZvukDownloader:
    """Downloads and tags tracks and audiobook chapters one at a time.

    Metadata errors abort the whole batch. Errors while processing a single
    track or chapter are logged and counted, and the loop moves on.
    """

    def __init__(self, config: ZvukConfig, session_manager: SessionManager) -> None:
        self.config = config
        self.session_manager = session_manager
        self.client = ZvukClient(config, session_manager)
        self.resolver = MetadataResolver(self.client, config.quality)

    @property
    def output_dir(self) -> Path:
        return Path(self.config.output_dir)

    async def download_albums(self, release_ids: list[str]) -> DownloadSummary:
        """Download every track of the given releases."""
        batch = await self.resolver.resolve_albums(release_ids)
        return await self._download_batch(batch)

    async def download_tracks(
        self,
        track_ids: list[str],
        releases: dict[str, Release] | None = None,
    ) -> DownloadSummary:
        """Download individual tracks."""
        batch = await self.resolver.resolve_tracks(track_ids, releases)
        return await self._download_batch(batch)

    async def download_abooks(self, book_ids: list[str]) -> DownloadSummary:
        """Download every chapter of the given audiobooks."""
        books = await self.resolver.resolve_books(book_ids)
        return await self._download_books(books)

    async def _download_batch(self, batch: ResolvedBatch) -> DownloadSummary:
        summary = DownloadSummary()
        for track in batch.ordered_tracks():
            try:
                release = batch.release_for(track)
                link = batch.links[track.track_id]
                summary.record(await self.get_and_save_track(link, track, release))
            except Exception as e:  # noqa: BLE001
                summary.failed += 1
                logger.warning(
                    "Failed to download and process track id=%s: %s",
                    track.track_id,
                    format_error_chain(e),
                )
        return summary

    async def _download_books(self, books: ResolvedBooks) -> DownloadSummary:
        summary = DownloadSummary()
        for chapter in books.ordered_chapters():
            try:
                link = books.links[chapter.chapter_id]
                summary.record(await self.get_and_save_chapter(link, chapter))
            except Exception as e:  # noqa: BLE001
                summary.failed += 1
                logger.warning(
                    "Failed to download and process chapter id=%s: %s",
                    chapter.chapter_id,
                    format_error_chain(e),
                )
        return summary

    def _make_directory(self, name: str) -> Path:
        directory = self.output_dir / sanitize_path(name, self.config.sanitize_profile)
        directory.mkdir(parents=True, exist_ok=True)
        return directory

    def _file_path(self, directory: Path, number: int, title: str, ext: str) -> Path:
        filename = f"{number:02} - {title}.{ext}"
        return directory / sanitize_path(filename, self.config.sanitize_profile)

    async def _ensure_cover(self, url: str, directory: Path) -> Path:
        cover_path = directory / COVER_FILENAME
        try:
            await ensure_cover(self.session_manager, url, cover_path, self.config)
        except DownloadError as e:
            msg = "Failed to download and process album cover"
            raise_error(DownloadError, msg, base_error=e)
        return cover_path

    async def _download_audio(self, url: str, path: Path) -> None:
        logger.info("Downloading %s", path)
        data = await self.session_manager.get_bytes(url)
        await write_atomically(path, data)

    @staticmethod
    @contextlib.contextmanager
    def _discard_on_error(path: Path) -> Iterator[None]:
        """Remove a downloaded file whose processing failed.

        An untagged file left in place would be skipped as already downloaded
        on every later run.
        """
        try:
            yield
        except BaseException:
            logger.debug("Removing unfinished %s", path)
            path.unlink(missing_ok=True)
            raise

    async def _get_lyrics(self, track: Track, path: Path) -> Lyrics | None:
        if not (self.config.download_lyrics and track.lyrics):
            return None
        lyrics = await self.client.get_lyrics(track.track_id)
        if lyrics.is_empty:
            logger.warning("No lyrics for %s", path)
        return lyrics

    async def get_and_save_track(
        self, link: TrackLink, track: Track, release: Release
    ) -> bool:
        """
        Download, then tag one track.

        Returns:
            True when the track was downloaded, False when it already existed
        """
        directory = self._make_directory(
            f"{release.author} - {release.album} ({release.year})"
        )
        cover_path = await self._ensure_cover(track.image, directory)

        path = self._file_path(
            directory, track.number, track.name, link.quality.extension
        )
        if path.exists():
            logger.info("Skipping %s, file already exists", path)
            return False

        await self._download_audio(link.url, path)
        with self._discard_on_error(path):
            lyrics = await self._get_lyrics(track, path)
            await tag_track(
                path,
                cover_path,
                track,
                release,
                link.quality,
                lyrics=lyrics,
                embed_cover=self.config.embed_cover,
            )
        return True

    async def get_and_save_chapter(self, link: str, chapter: BookChapter) -> bool:
        """
        Download, then tag one audiobook chapter.

        Returns:
            True when the chapter was downloaded, False when it already existed
        """
        directory = self._make_directory(f"{chapter.author} - {chapter.book_title}")
        cover_path = await self._ensure_cover(chapter.image, directory)

        path = self._file_path(
            directory, chapter.number, chapter.title, CHAPTER_QUALITY.extension
        )
        if path.exists():
            logger.info("Skipping %s, file already exists", path)
            return False

        await self._download_audio(link, path)
        with self._discard_on_error(path):
            await tag_chapter(
                path, cover_path, chapter, embed_cover=self.config.embed_cover
            )
        return True
