# Copyright (c) 2025 zvuk-dl and contributors. All rights reserved.
# Licensed under the MIT license. See LICENSE file in the project root for details.

"""Session management for API requests and downloads."""

import contextlib
import logging
from collections.abc import Awaitable, Callable
from types import TracebackType
from typing import TYPE_CHECKING, Any, TypeVar, cast

import aiohttp
from aiohttp import ClientTimeout
from yarl import URL

from zvukdl.downloader.exceptions import (
    AuthenticationError,
    ContentNotFoundError,
    DownloadPermissionError,
    DownloadTimeoutError,
    MetadataError,
    NetworkError,
    RateLimitError,
)
from zvukdl.downloader.utils import raise_error

if TYPE_CHECKING:
    from zvukdl.config.settings import ZvukConfig

logger = logging.getLogger(__name__)

T = TypeVar("T")

AUTH_COOKIE = "auth"


class SessionManager:
    """Owns the single HTTP session of a run.

    Requests go out one at a time; every method awaits the full response
    before returning.
    """

    def __init__(self, config: "ZvukConfig") -> None:
        self.config = config
        self._session: aiohttp.ClientSession | None = None

    async def get_session(self) -> aiohttp.ClientSession:
        """Get or create the HTTP session."""
        if self._session is None or self._session.closed:
            self._session = await self._create_session()
        return self._session

    async def _create_session(self) -> aiohttp.ClientSession:
        """Create a new HTTP session carrying the auth cookie."""
        timeout = ClientTimeout(total=self.config.request_timeout)

        headers = {
            "User-Agent": self.config.user_agent,
        }

        # The cookie is scoped to the API host so it never reaches the CDN.
        # unsafe=True allows a host given as an IP address.
        cookie_jar = aiohttp.CookieJar(unsafe=True)
        cookie_jar.update_cookies(
            {AUTH_COOKIE: self.config.token.get_secret_value()},
            response_url=URL(self.config.zvuk_host),
        )

        return aiohttp.ClientSession(
            timeout=timeout,
            headers=headers,
            cookie_jar=cookie_jar,
            raise_for_status=False,  # We'll handle status codes manually
        )

    async def get_json(self, url: str, params: dict[str, str] | None = None) -> Any:
        """Perform a GET request and decode the JSON body."""
        return await self._request("GET", url, self._read_json, params=params)

    async def post_json(self, url: str, payload: dict[str, Any]) -> Any:
        """Perform a POST request with a JSON payload and decode the JSON body."""
        return await self._request("POST", url, self._read_json, json=payload)

    async def get_bytes(self, url: str) -> bytes:
        """Download a whole response body."""
        return await self._request("GET", url, self._read_bytes)

    async def _request(
        self,
        method: str,
        url: str,
        reader: Callable[[aiohttp.ClientResponse], Awaitable[T]],
        **kwargs: Any,
    ) -> T:
        """Send a request, check its status and read the body with ``reader``."""
        session = await self.get_session()
        logger.debug("%s %s %s", method, url, kwargs.get("params") or "")
        try:
            async with session.request(method, url, **kwargs) as response:
                await self._check_response_status(response)
                return await reader(response)
        except TimeoutError as e:
            msg = f"{method} request to {url} timed out"
            raise DownloadTimeoutError(
                msg, timeout_seconds=self.config.request_timeout
            ) from e
        except aiohttp.ClientError as e:
            msg = f"{method} request to {url} failed: {e}"
            raise NetworkError(msg) from e

    @staticmethod
    async def _read_json(response: aiohttp.ClientResponse) -> Any:
        # UnicodeDecodeError and JSONDecodeError are both ValueError
        try:
            text = await response.text()
            logger.debug("Response from %s: %s", response.url, text)
            return await response.json(content_type=None)
        except ValueError as e:
            msg = f"Response from {response.url} is not valid JSON"
            raise MetadataError(msg) from e

    @staticmethod
    async def _read_bytes(response: aiohttp.ClientResponse) -> bytes:
        return await response.read()

    async def _check_response_status(self, response: aiohttp.ClientResponse) -> None:
        """Check response status and raise appropriate exceptions."""
        if response.status < 400:
            return

        error_details = await self._build_error_details(response)
        self._raise_status_specific_exception(response.status, error_details)

    async def _build_error_details(
        self, response: aiohttp.ClientResponse
    ) -> dict[str, Any]:
        """Build error details dictionary from response."""
        error_details = {
            "url": str(response.url),
            "status_code": response.status,
            "headers": dict(cast("Any", response.headers).items())
            if response.headers
            else {},
        }

        # Try to get error message from response
        try:
            error_text = await response.text()
            if error_text:
                error_details["response_text"] = error_text[:500]  # Limit size
        except (aiohttp.ClientError, UnicodeDecodeError) as e:
            logger.debug("Failed to read error response content: %s", e)

        return error_details

    def _raise_status_specific_exception(
        self, status_code: int, error_details: dict[str, Any]
    ) -> None:
        """Raise appropriate exception based on HTTP status code."""
        if status_code == 401:
            msg = f"Authentication failed: {status_code}"
            raise_error(AuthenticationError, msg, source="zvuk", details=error_details)
        elif status_code == 403:
            msg = f"Access forbidden: {status_code}"
            raise_error(DownloadPermissionError, msg, details=error_details)
        elif status_code == 404:
            msg = f"Content not found: {status_code}"
            raise_error(
                ContentNotFoundError, msg, source="zvuk", details=error_details
            )
        elif status_code == 429:
            retry_after = self._extract_retry_after(error_details["headers"])
            msg = f"Rate limit exceeded: {status_code}"
            raise_error(
                RateLimitError, msg, retry_after=retry_after, details=error_details
            )
        elif 500 <= status_code < 600:
            msg = f"Server error: {status_code}"
            raise_error(
                NetworkError, msg, status_code=status_code, details=error_details
            )
        else:
            msg = f"HTTP error: {status_code}"
            raise_error(
                NetworkError, msg, status_code=status_code, details=error_details
            )

    def _extract_retry_after(self, headers: dict[str, str]) -> float | None:
        """Extract retry-after value from headers."""
        retry_after_header = headers.get("Retry-After") or headers.get("retry-after")
        if retry_after_header is None:
            return None

        with contextlib.suppress(ValueError):
            return float(retry_after_header)
        return None

    async def close(self) -> None:
        """Close the session."""
        if self._session and not self._session.closed:
            await self._session.close()
        self._session = None

    async def __aenter__(self) -> "SessionManager":
        """Async context manager entry."""
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        """Async context manager exit."""
        await self.close()
