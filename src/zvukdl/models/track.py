# Copyright (c) 2025 zvuk-dl and contributors. All rights reserved.
# Licensed under the MIT license. See LICENSE file in the project root for details.

"""Track, track link and lyrics entities."""

from pydantic import Field

from zvukdl.models.base import UInt32, ZvukEntity
from zvukdl.models.enums import LyricsKind, Quality


class Track(ZvukEntity):
    """A track as needed for downloading and tagging."""

    track_id: str = Field(..., description="Track identifier")
    author: str = Field(..., description="Credited artist")
    name: str = Field(..., description="Track title")
    album: str = Field(..., description="Release title")
    release_id: str = Field(..., description="Identifier of the owning release")
    genre: str = Field(default="", description="Comma separated genres")
    number: UInt32 = Field(..., description="Position on the release")
    image: str = Field(default="", description="Cover image URL")
    lyrics: bool = Field(default=False, description="Whether lyrics are available")
    has_flac: bool = Field(default=False, description="Whether FLAC is available")


class TrackLink(ZvukEntity):
    """A short-lived stream URL together with the quality it was requested in."""

    url: str = Field(..., description="Stream URL")
    quality: Quality = Field(..., description="Effective quality")


class Lyrics(ZvukEntity):
    """Lyrics of a track."""

    kind: LyricsKind = Field(default=LyricsKind.LYRICS, description="Lyrics kind")
    text: str = Field(default="", description="Lyrics body")

    @property
    def is_empty(self) -> bool:
        """Check if there is nothing worth embedding."""
        return not self.text
