# Copyright (c) 2025 zvuk-dl and contributors. All rights reserved.
# Licensed under the MIT license. See LICENSE file in the project root for details.

"""Run a download for a list of catalog URLs."""

import logging
from collections.abc import Iterable

from zvukdl.config.settings import ZvukConfig
from zvukdl.core.url_parser import URLParser
from zvukdl.downloader.session import SessionManager
from zvukdl.downloader.zvuk.downloader import DownloadSummary, ZvukDownloader

logger = logging.getLogger(__name__)


async def download(config: ZvukConfig, urls: Iterable[str]) -> DownloadSummary:
    """
    Download every release, track and audiobook the URLs point at.

    Releases go first, then tracks, then audiobooks. A metadata error in any
    of these stops the run; per-track failures are only counted.
    """
    request = URLParser().group_urls(urls)
    summary = DownloadSummary()
    if request.is_empty:
        logger.warning("Nothing to download")
        return summary

    async with SessionManager(config) as session_manager:
        downloader = ZvukDownloader(config, session_manager)
        if request.release_ids:
            summary.merge(await downloader.download_albums(request.release_ids))
        if request.track_ids:
            summary.merge(await downloader.download_tracks(request.track_ids))
        if request.book_ids:
            summary.merge(await downloader.download_abooks(request.book_ids))

    logger.info(
        "Done: %d downloaded, %d skipped, %d failed",
        summary.downloaded,
        summary.skipped,
        summary.failed,
    )
    return summary
