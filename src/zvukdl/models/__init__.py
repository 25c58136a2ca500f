# Copyright (c) 2025 zvuk-dl and contributors. All rights reserved.
# Licensed under the MIT license. See LICENSE file in the project root for details.

"""Internal entities shared by the resolver, the downloader and the tagger."""

from zvukdl.models.base import UInt32, ZvukBaseModel, ZvukEntity
from zvukdl.models.chapter import BookChapter
from zvukdl.models.enums import ContentType, LyricsKind, Quality, SanitizeProfile
from zvukdl.models.release import Release
from zvukdl.models.track import Lyrics, Track, TrackLink

__all__ = [
    "BookChapter",
    "ContentType",
    "Lyrics",
    "LyricsKind",
    "Quality",
    "Release",
    "SanitizeProfile",
    "Track",
    "TrackLink",
    "UInt32",
    "ZvukBaseModel",
    "ZvukEntity",
]
