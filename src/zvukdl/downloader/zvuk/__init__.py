# Copyright (c) 2025 zvuk-dl and contributors. All rights reserved.
# Licensed under the MIT license. See LICENSE file in the project root for details.

"""zvuk.com downloader implementation."""

from zvukdl.downloader.zvuk.client import ZvukClient
from zvukdl.downloader.zvuk.downloader import DownloadSummary, ZvukDownloader
from zvukdl.downloader.zvuk.resolver import MetadataResolver, ResolvedBatch

__all__ = [
    "DownloadSummary",
    "MetadataResolver",
    "ResolvedBatch",
    "ZvukClient",
    "ZvukDownloader",
]
