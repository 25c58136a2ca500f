# Copyright (c) 2025 zvuk-dl and contributors. All rights reserved.
# Licensed under the MIT license. See LICENSE file in the project root for details.

"""Command line interface."""

import asyncio
import logging
import sys
from pathlib import Path

import click
from dotenv import load_dotenv
from pydantic import ValidationError

from zvukdl import __version__
from zvukdl.config.settings import (
    DEFAULT_RESIZE_COMMAND,
    DEFAULT_USER_AGENT,
    LOG_LEVELS,
    ZVUK_HOST,
    ZvukConfig,
)
from zvukdl.downloader.exceptions import DownloadError
from zvukdl.downloader.utils import format_error_chain
from zvukdl.main import download
from zvukdl.models.enums import Quality, SanitizeProfile

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def setup_logging(level: str) -> None:
    """Configure root logging once for the whole run."""
    logging.basicConfig(format=LOG_FORMAT, level=level, stream=sys.stderr)


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.argument("urls", nargs=-1, required=True)
@click.option(
    "--token", envvar="TOKEN", required=True, help="Value of the 'auth' cookie."
)
@click.option(
    "--output-dir",
    envvar="OUTPUT_DIR",
    type=click.Path(file_okay=False, path_type=Path),
    default=Path("."),
    show_default=True,
    help="Directory to write downloads to.",
)
@click.option(
    "--quality",
    envvar="QUALITY",
    type=click.Choice([q.value for q in Quality]),
    default=Quality.FLAC.value,
    show_default=True,
    help="Requested quality: flac, high (MP3 320) or mid (MP3 128).",
)
@click.option(
    "--embed-cover/--no-embed-cover",
    envvar="EMBED_COVER",
    default=False,
    show_default=True,
    help="Embed the cover into each file.",
)
@click.option(
    "--resize-cover/--no-resize-cover",
    envvar="RESIZE_COVER",
    default=True,
    show_default=True,
    help="Shrink covers larger than --resize-cover-limit.",
)
@click.option(
    "--resize-cover-limit",
    envvar="RESIZE_COVER_LIMIT",
    type=int,
    default=2_000_000,
    show_default=True,
    help="Cover size limit in bytes.",
)
@click.option(
    "--resize-command",
    envvar="RESIZE_COMMAND",
    default=DEFAULT_RESIZE_COMMAND,
    show_default=True,
    help="Command used to shrink covers, with {source} and {target} placeholders.",
)
@click.option(
    "--download-lyrics/--no-download-lyrics",
    envvar="DOWNLOAD_LYRICS",
    default=True,
    show_default=True,
    help="Embed lyrics when a track has them.",
)
@click.option("--user-agent", envvar="USER_AGENT", default=DEFAULT_USER_AGENT)
@click.option(
    "--pause-between-getting-track-links",
    envvar="PAUSE_BETWEEN_GETTING_TRACK_LINKS",
    type=float,
    default=1.0,
    show_default=True,
    help="Seconds to wait after each download link lookup.",
)
@click.option(
    "--request-timeout",
    envvar="REQUEST_TIMEOUT",
    type=float,
    default=30.0,
    show_default=True,
    help="Timeout of a single request in seconds.",
)
@click.option("--zvuk-host", envvar="ZVUK_HOST", default=ZVUK_HOST, hidden=True)
@click.option(
    "--sanitize-profile",
    envvar="SANITIZE_PROFILE",
    type=click.Choice([p.value for p in SanitizeProfile]),
    default=None,
    help="Characters to replace in names [default: the current platform's].",
)
@click.option(
    "--log-level",
    envvar="LOG_LEVEL",
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    default="INFO",
    show_default=True,
)
@click.version_option(__version__, prog_name="zvuk-dl")
def cli(urls: tuple[str, ...], **options: object) -> None:
    """Download releases, tracks and audiobooks from zvuk.com URLS."""
    settings = {key: value for key, value in options.items() if value is not None}
    try:
        config = ZvukConfig(**settings)
    except ValidationError as e:
        raise click.UsageError(str(e)) from e

    setup_logging(config.log_level)
    config.log_values()

    try:
        summary = asyncio.run(download(config, urls))
    except DownloadError as e:
        logger.error("%s", format_error_chain(e))  # noqa: TRY400
        sys.exit(1)
    except KeyboardInterrupt:
        click.echo("\nInterrupted by user", err=True)
        sys.exit(130)

    if summary.failed:
        logger.warning("%d item(s) failed, see the log above", summary.failed)


def main() -> None:
    """Entry point for the ``zvuk-dl`` script."""
    load_dotenv()
    cli()
