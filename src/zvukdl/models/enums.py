# Copyright (c) 2025 zvuk-dl and contributors. All rights reserved.
# Licensed under the MIT license. See LICENSE file in the project root for details.

"""Enums shared across the package."""

from enum import StrEnum


class Quality(StrEnum):
    """Audio quality tiers, valued by the name the stream endpoint expects."""

    FLAC = "flac"
    MP3_HIGH = "high"  # 320 kbps
    MP3_MID = "mid"  # 128 kbps

    @property
    def extension(self) -> str:
        """Get the file extension for this tier."""
        if self is Quality.FLAC:
            return "flac"
        return "mp3"

    @property
    def is_lossless(self) -> bool:
        """Check if this tier is lossless."""
        return self is Quality.FLAC


class LyricsKind(StrEnum):
    """Kind of lyrics returned by the lyrics endpoint."""

    SUBTITLE = "subtitle"
    LYRICS = "lyrics"

    @classmethod
    def from_wire(cls, value: str | None) -> "LyricsKind":
        """Map the upstream ``type`` field, defaulting to plain lyrics."""
        if value == cls.SUBTITLE.value:
            return cls.SUBTITLE
        return cls.LYRICS


class ContentType(StrEnum):
    """Kind of catalog item a URL points at."""

    RELEASE = "release"
    TRACK = "track"
    ABOOK = "abook"
    UNKNOWN = "unknown"


class SanitizeProfile(StrEnum):
    """Set of characters replaced in path components."""

    POSIX = "posix"
    WINDOWS = "windows"
