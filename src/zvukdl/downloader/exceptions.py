# Copyright (c) 2025 zvuk-dl and contributors. All rights reserved.
# Licensed under the MIT license. See LICENSE file in the project root for details.

"""Exceptions for the downloader module."""

from typing import Any


class DownloadError(Exception):
    """Base exception for download-related errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}


class NetworkError(DownloadError):
    """Exception raised for network-related errors."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, details)
        self.status_code = status_code


class DownloadTimeoutError(NetworkError):
    """Exception raised when a request times out."""

    def __init__(
        self,
        message: str,
        timeout_seconds: float,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, details=details)
        self.timeout_seconds = timeout_seconds


class AuthenticationError(DownloadError):
    """Exception raised for authentication-related errors."""

    def __init__(
        self,
        message: str,
        source: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, details)
        self.source = source


class RateLimitError(DownloadError):
    """Exception raised when rate limits are exceeded."""

    def __init__(
        self,
        message: str,
        retry_after: float | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, details)
        self.retry_after = retry_after


class ContentNotFoundError(DownloadError):
    """Exception raised when content is not found."""

    def __init__(
        self,
        message: str,
        content_id: str | None = None,
        source: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, details)
        self.content_id = content_id
        self.source = source


class DownloadPermissionError(DownloadError):
    """Exception raised for download permission-related errors."""

    def __init__(
        self,
        message: str,
        path: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, details)
        self.path = path


class MetadataError(DownloadError):
    """Exception raised when upstream metadata is missing or malformed."""


class LinkCountMismatchError(MetadataError):
    """Exception raised when download links do not cover every resolved item."""

    def __init__(
        self,
        message: str,
        expected: int,
        actual: int,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, details)
        self.expected = expected
        self.actual = actual


class CoverResizeError(DownloadError):
    """Exception raised when the external cover resize command fails."""

    def __init__(
        self,
        message: str,
        returncode: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, details)
        self.returncode = returncode


class TaggingError(DownloadError):
    """Exception raised when tags cannot be written to a file."""

    def __init__(
        self,
        message: str,
        path: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, details)
        self.path = path


class ConfigurationError(DownloadError):
    """Exception raised for invalid configuration values."""
