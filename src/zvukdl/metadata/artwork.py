# Copyright (c) 2025 zvuk-dl and contributors. All rights reserved.
# Licensed under the MIT license. See LICENSE file in the project root for details.

"""Cover art downloading and resizing."""

import asyncio
import logging
from pathlib import Path

from zvukdl.config.settings import (
    RESIZE_SOURCE_PLACEHOLDER,
    RESIZE_TARGET_PLACEHOLDER,
    ZvukConfig,
    validate_resize_command,
)
from zvukdl.downloader.exceptions import CoverResizeError
from zvukdl.downloader.session import SessionManager
from zvukdl.downloader.utils import write_atomically

logger = logging.getLogger(__name__)

COVER_FILENAME = "cover.jpg"


def build_resize_command(command: str, path: Path) -> list[str]:
    """
    Turn a resize command template into an argument list.

    The template is split on whitespace first, then both placeholders are
    replaced with ``path``, so paths containing spaces stay one argument.
    """
    validate_resize_command(command)
    return [
        part.replace(RESIZE_SOURCE_PLACEHOLDER, str(path)).replace(
            RESIZE_TARGET_PLACEHOLDER, str(path)
        )
        for part in command.split()
    ]


async def resize_cover(path: Path, command: str) -> None:
    """Shrink a cover in place with the external resize command."""
    args = build_resize_command(command, path)
    logger.debug("Resizing cover %s: %s", path, args)
    try:
        process = await asyncio.create_subprocess_exec(*args)
    except OSError as e:
        msg = f"Failed to run resize command {args[0]!r}"
        raise CoverResizeError(msg) from e

    returncode = await process.wait()
    if returncode != 0:
        msg = f"Resize command exited with status {returncode}"
        raise CoverResizeError(msg, returncode=returncode, details={"args": args})


async def ensure_cover(
    session_manager: SessionManager, url: str, cover_path: Path, config: ZvukConfig
) -> None:
    """Download a cover unless it is on disk, then shrink it when too large."""
    if not cover_path.exists():
        logger.info("Downloading cover %s", cover_path)
        data = await session_manager.get_bytes(url)
        await write_atomically(cover_path, data)

    if config.resize_cover and cover_path.stat().st_size > config.resize_cover_limit:
        await resize_cover(cover_path, config.resize_command)
