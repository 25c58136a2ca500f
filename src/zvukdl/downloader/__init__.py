# Copyright (c) 2025 zvuk-dl and contributors. All rights reserved.
# Licensed under the MIT license. See LICENSE file in the project root for details.

"""Transport, errors and helpers shared by the zvuk.com downloader."""

from zvukdl.downloader.exceptions import (
    AuthenticationError,
    ConfigurationError,
    ContentNotFoundError,
    CoverResizeError,
    DownloadError,
    DownloadPermissionError,
    DownloadTimeoutError,
    LinkCountMismatchError,
    MetadataError,
    NetworkError,
    RateLimitError,
    TaggingError,
)
from zvukdl.downloader.session import SessionManager

__all__ = [
    "AuthenticationError",
    "ConfigurationError",
    "ContentNotFoundError",
    "CoverResizeError",
    "DownloadError",
    "DownloadPermissionError",
    "DownloadTimeoutError",
    "LinkCountMismatchError",
    "MetadataError",
    "NetworkError",
    "RateLimitError",
    "SessionManager",
    "TaggingError",
]
