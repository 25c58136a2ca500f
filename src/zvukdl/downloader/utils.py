# Copyright (c) 2025 zvuk-dl and contributors. All rights reserved.
# Licensed under the MIT license. See LICENSE file in the project root for details.

"""Utility functions for the downloader module."""

import contextlib
from pathlib import Path
from uuid import uuid4

import aiofiles

from zvukdl.models.enums import SanitizeProfile

_FORBIDDEN_CHARS = {
    SanitizeProfile.POSIX: "/",
    SanitizeProfile.WINDOWS: '<>:"/\\|?*',
}


def raise_error(
    error_type: type[Exception],
    msg: str,
    base_error: Exception | None = None,
    **kwargs: object,
) -> None:
    """
    Raise an error with the specified type and message.

    Args:
        error_type: The exception class to raise
        msg: The error message
        base_error: Optional base exception to chain from
        **kwargs: Additional keyword arguments to pass to the exception constructor
    """
    if base_error is not None:
        raise error_type(msg, **kwargs) from base_error
    raise error_type(msg, **kwargs)


def format_error_chain(error: BaseException) -> str:
    """Join an exception and its causes into one line, outermost first."""
    parts: list[str] = []
    current: BaseException | None = error
    while current is not None:
        text = str(current) or type(current).__name__
        if not parts or parts[-1] != text:
            parts.append(text)
        current = current.__cause__
    return ": ".join(parts)


def sanitize_path(name: str, profile: SanitizeProfile) -> str:
    """
    Replace characters that are not allowed in a path component with ``_``.

    Args:
        name: A single path component, such as a folder or file name
        profile: Which platform's character set to replace

    Returns:
        The sanitized component
    """
    forbidden = _FORBIDDEN_CHARS[profile]
    return "".join("_" if char in forbidden else char for char in name)


async def write_atomically(path: Path, data: bytes) -> None:
    """Write bytes next to ``path`` first, then move them into place.

    An interrupted write never leaves a partial file under the final name,
    so skip-if-exists checks stay reliable.
    """
    temp_path = path.with_name(f".{path.name}.{uuid4().hex[:8]}.part")
    try:
        async with aiofiles.open(temp_path, "wb") as f:
            await f.write(data)
        temp_path.replace(path)
    finally:
        with contextlib.suppress(OSError):
            temp_path.unlink(missing_ok=True)
