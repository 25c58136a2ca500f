# Copyright (c) 2025 zvuk-dl and contributors. All rights reserved.
# Licensed under the MIT license. See LICENSE file in the project root for details.

"""Run configuration for zvuk-dl."""

import logging
import sys
from pathlib import Path

from pydantic import Field, SecretStr, field_validator

from zvukdl.config.base import PathConfig
from zvukdl.models.enums import Quality, SanitizeProfile

logger = logging.getLogger(__name__)

ZVUK_HOST = "https://zvuk.com"
ZVUK_RELEASES_ENDPOINT = "/api/tiny/releases"
ZVUK_LABELS_ENDPOINT = "/api/tiny/labels"
ZVUK_TRACKS_ENDPOINT = "/api/tiny/tracks"
ZVUK_DOWNLOAD_ENDPOINT = "/api/tiny/track/stream"
ZVUK_LYRICS_ENDPOINT = "/api/tiny/lyrics"
ZVUK_GRAPHQL_ENDPOINT = "/api/v1/graphql"

DEFAULT_RESIZE_COMMAND = "magick {source} -define jpeg:extent=1MB {target}"
DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/131.0.0.0 Safari/537.36"
)

RESIZE_SOURCE_PLACEHOLDER = "{source}"
RESIZE_TARGET_PLACEHOLDER = "{target}"

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

MASKED_VALUE = "******"


def default_sanitize_profile() -> SanitizeProfile:
    """Pick the path sanitizing profile for the running platform."""
    if sys.platform == "win32":
        return SanitizeProfile.WINDOWS
    return SanitizeProfile.POSIX


def validate_resize_command(command: str) -> str:
    """Ensure a resize command carries both the source and target placeholders."""
    if (
        RESIZE_SOURCE_PLACEHOLDER not in command
        or RESIZE_TARGET_PLACEHOLDER not in command
    ):
        msg = "command is required to have {source} and {target} placeholders"
        raise ValueError(msg)
    return command


class ZvukConfig(PathConfig):
    """All settings of a download run."""

    token: SecretStr = Field(..., description="Value of the 'auth' cookie")
    output_dir: Path = Field(
        default=Path("."), description="Directory downloads are written to"
    )
    quality: Quality = Field(default=Quality.FLAC, description="Requested quality")

    # Cover handling
    embed_cover: bool = Field(
        default=False, description="Embed the cover into each audio file"
    )
    resize_cover: bool = Field(
        default=True, description="Resize covers larger than the limit"
    )
    resize_cover_limit: int = Field(
        default=2_000_000, gt=0, description="Cover size limit in bytes"
    )
    resize_command: str = Field(
        default=DEFAULT_RESIZE_COMMAND,
        description="External command used to shrink covers in place",
    )

    download_lyrics: bool = Field(default=True, description="Embed lyrics when present")

    # Request behaviour
    user_agent: str = Field(default=DEFAULT_USER_AGENT, description="User-Agent header")
    pause_between_getting_track_links: float = Field(
        default=1.0, ge=0, description="Seconds to wait after each link lookup"
    )
    request_timeout: float = Field(
        default=30.0, gt=0, description="Total timeout of one request in seconds"
    )

    # API settings (should not be changed by users)
    zvuk_host: str = Field(default=ZVUK_HOST, description="Base URL of the API")
    releases_endpoint: str = Field(default=ZVUK_RELEASES_ENDPOINT)
    labels_endpoint: str = Field(default=ZVUK_LABELS_ENDPOINT)
    tracks_endpoint: str = Field(default=ZVUK_TRACKS_ENDPOINT)
    download_endpoint: str = Field(default=ZVUK_DOWNLOAD_ENDPOINT)
    lyrics_endpoint: str = Field(default=ZVUK_LYRICS_ENDPOINT)
    graphql_endpoint: str = Field(default=ZVUK_GRAPHQL_ENDPOINT)

    sanitize_profile: SanitizeProfile = Field(
        default_factory=default_sanitize_profile,
        description="Characters replaced in folder and file names",
    )
    log_level: str = Field(default="INFO", description="Logging level")

    @field_validator("token")
    @classmethod
    def validate_token(cls, v: SecretStr) -> SecretStr:
        """Validate the token is not blank."""
        if not v.get_secret_value().strip():
            msg = "token must not be empty"
            raise ValueError(msg)
        return v

    @field_validator("resize_command")
    @classmethod
    def validate_resize_command(cls, v: str) -> str:
        """Validate the resize command has both placeholders."""
        return validate_resize_command(v)

    @field_validator("zvuk_host")
    @classmethod
    def validate_zvuk_host(cls, v: str) -> str:
        """Validate the host is an http(s) URL."""
        if not v.startswith(("http://", "https://")):
            msg = f"zvuk_host must be an http(s) URL, got {v!r}"
            raise ValueError(msg)
        return v.rstrip("/")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is one of the standard names."""
        level = v.upper()
        if level not in LOG_LEVELS:
            msg = f"log_level must be one of {', '.join(LOG_LEVELS)}"
            raise ValueError(msg)
        return level

    def log_values(self) -> None:
        """Log every setting at debug level with the token masked."""
        for name, value in self.model_dump().items():
            if name == "token":
                value = MASKED_VALUE
            logger.debug("%s: %s", name, value)
