# Copyright (c) 2025 zvuk-dl and contributors. All rights reserved.
# Licensed under the MIT license. See LICENSE file in the project root for details.

"""zvuk.com API client implementation."""

import asyncio
import logging
from collections.abc import Iterable

from yarl import URL

from zvukdl.config.settings import ZvukConfig
from zvukdl.downloader.exceptions import (
    ConfigurationError,
    DownloadError,
    MetadataError,
)
from zvukdl.downloader.session import SessionManager
from zvukdl.downloader.utils import format_error_chain, raise_error
from zvukdl.downloader.zvuk import gql
from zvukdl.downloader.zvuk.models import (
    ZvukDownloadResponse,
    ZvukGQLResponse,
    ZvukLabelsResponse,
    ZvukLyricsResponse,
    ZvukResponse,
    convert_entities,
    parse_response,
)
from zvukdl.downloader.zvuk.quality import log_quality_selection, negotiate
from zvukdl.models.chapter import BookChapter
from zvukdl.models.enums import Quality
from zvukdl.models.release import Release
from zvukdl.models.track import Lyrics, Track, TrackLink

logger = logging.getLogger(__name__)


def _join_url(host: str, endpoint: str) -> str:
    """Join an endpoint path onto the API host."""
    url = URL(host).join(URL(endpoint))
    if not url.is_absolute() or url.scheme not in ("http", "https"):
        msg = f"Invalid API endpoint {endpoint!r} for host {host!r}"
        raise ConfigurationError(msg)
    return str(url)


def _csv(ids: Iterable[str]) -> str:
    return ",".join(ids)


class ZvukClient:
    """Client for the zvuk.com tiny REST API and GraphQL endpoint.

    Every method issues its requests sequentially and returns internal
    entities; upstream shapes never leave this module.
    """

    def __init__(self, config: ZvukConfig, session_manager: SessionManager) -> None:
        self.config = config
        self.session_manager = session_manager

        host = config.zvuk_host
        self.releases_url = _join_url(host, config.releases_endpoint)
        self.labels_url = _join_url(host, config.labels_endpoint)
        self.tracks_url = _join_url(host, config.tracks_endpoint)
        self.download_url = _join_url(host, config.download_endpoint)
        self.lyrics_url = _join_url(host, config.lyrics_endpoint)
        self.graphql_url = _join_url(host, config.graphql_endpoint)

    async def get_releases_info(self, release_ids: list[str]) -> dict[str, Release]:
        """Get releases with their label names filled in."""
        logger.info("Getting releases metadata")
        body = await self.session_manager.get_json(
            self.releases_url, params={"ids": _csv(release_ids)}
        )
        response = parse_response(ZvukResponse, body, "releases metadata")
        releases: dict[str, Release] = convert_entities(
            response.result.releases, "release"
        )

        label_ids = sorted({release.label_id for release in releases.values()})
        labels = await self.get_labels_info(label_ids)

        merged = {}
        for release_id, release in releases.items():
            label = labels.get(release.label_id)
            if label is None:
                msg = f"No label info for release {release_id} (label {release.label_id})"
                raise MetadataError(msg, details={"release_id": release_id})
            merged[release_id] = release.with_label(label)
        return merged

    async def get_labels_info(self, label_ids: list[str]) -> dict[str, str]:
        """Get label names keyed by label id."""
        if not label_ids:
            return {}
        logger.info("Getting labels info")
        body = await self.session_manager.get_json(
            self.labels_url, params={"ids": _csv(label_ids)}
        )
        response = parse_response(ZvukLabelsResponse, body, "labels info")
        return {
            label_id: label.title
            for label_id, label in response.result.labels.items()
        }

    async def get_tracks_metadata(self, track_ids: list[str]) -> dict[str, Track]:
        """Get track metadata keyed by track id."""
        logger.info("Getting tracks metadata")
        body = await self.session_manager.get_json(
            self.tracks_url, params={"ids": _csv(track_ids)}
        )
        response = parse_response(ZvukResponse, body, "tracks metadata")
        return convert_entities(response.result.tracks, "track")

    async def fetch_track_link(self, track_id: str, quality: Quality) -> str:
        """Get a stream URL for one track in the given quality."""
        try:
            body = await self.session_manager.get_json(
                self.download_url,
                params={"quality": quality.value, "id": track_id},
            )
            response = parse_response(ZvukDownloadResponse, body, "download link")
        except DownloadError as e:
            msg = f"Failed to get download link for track id {track_id}"
            raise_error(
                DownloadError, msg, base_error=e, details={"track_id": track_id}
            )
        return response.result.stream

    async def get_tracks_links(
        self, metadata: dict[str, Track], requested: Quality
    ) -> dict[str, TrackLink]:
        """
        Get stream URLs for every track, negotiating quality per track.

        A track whose link lookup fails is logged and left out, so callers
        comparing the result against ``metadata`` see the gap.
        """
        logger.info("Getting tracks download links")
        links: dict[str, TrackLink] = {}
        for track_id, track in metadata.items():
            effective = negotiate(requested, track.has_flac)
            log_quality_selection(track_id, requested, effective, track.has_flac)
            try:
                url = await self.fetch_track_link(track_id, effective)
            except DownloadError as e:
                logger.warning("%s", format_error_chain(e))
            else:
                links[track_id] = TrackLink(url=url, quality=effective)
            await asyncio.sleep(self.config.pause_between_getting_track_links)
        return links

    async def get_lyrics(self, track_id: str) -> Lyrics:
        """Get lyrics of a track."""
        logger.info("Getting lyrics for track id %s", track_id)
        body = await self.session_manager.get_json(
            self.lyrics_url, params={"track_id": track_id}
        )
        response = parse_response(ZvukLyricsResponse, body, "lyrics")
        return response.result.to_entity()

    async def get_books_metadata(self, book_ids: list[str]) -> dict[str, BookChapter]:
        """Get every chapter of the given books keyed by chapter id."""
        logger.info("Getting books metadata")
        payload = gql.build_payload(
            gql.GET_BOOK_CHAPTERS_QUERY,
            gql.GET_BOOK_CHAPTERS_OPERATION,
            {"ids": book_ids},
        )
        body = await self.session_manager.post_json(self.graphql_url, payload)
        response = parse_response(ZvukGQLResponse, body, "books metadata")
        books = response.data.get_books
        if books is None:
            msg = "No book info in response"
            raise MetadataError(msg)

        chapters = {}
        for book in books:
            chapters.update(
                convert_entities({c.id: c for c in book.chapters}, "chapter")
            )
        return chapters

    async def get_chapter_links(self, chapter_ids: list[str]) -> list[str]:
        """Get stream URLs of chapters, in the order of ``chapter_ids``."""
        logger.info("Getting audiobook download links")
        payload = gql.build_payload(
            gql.GET_STREAM_QUERY,
            gql.GET_STREAM_OPERATION,
            {"includeFlacDrm": False, "ids": chapter_ids},
        )
        body = await self.session_manager.post_json(self.graphql_url, payload)
        response = parse_response(ZvukGQLResponse, body, "audiobook links")
        contents = response.data.media_contents
        if contents is None:
            msg = "No media contents in response"
            raise MetadataError(msg)
        return [content.stream.mid for content in contents]

    async def download_bytes(self, url: str) -> bytes:
        """Download a stream or an image."""
        return await self.session_manager.get_bytes(url)
