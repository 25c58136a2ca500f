# Copyright (c) 2025 zvuk-dl and contributors. All rights reserved.
# Licensed under the MIT license. See LICENSE file in the project root for details.

"""Audio file tagging with metadata, lyrics and artwork embedding."""

import logging
from enum import Enum
from pathlib import Path
from typing import Any

import aiofiles
from mutagen import MutagenError, id3
from mutagen.flac import FLAC, Picture
from mutagen.id3 import (
    APIC,  # type: ignore
    ID3,
    ID3NoHeaderError,
)

from zvukdl.downloader.exceptions import TaggingError
from zvukdl.models.chapter import BookChapter
from zvukdl.models.enums import Quality
from zvukdl.models.release import Release
from zvukdl.models.track import Lyrics, Track

logger = logging.getLogger(__name__)

FLAC_MAX_BLOCKSIZE = 16777215  # 16.7 MB

# Empty language subfield; ID3 requires exactly three bytes
LYRICS_LANGUAGE = "\x00\x00\x00"

METADATA_TYPES = (
    "title",
    "artist",
    "album",
    "genre",
    "tracknumber",
    "tracktotal",
    "date",
    "year",
)

# FLAC uses uppercase field names
FLAC_KEY = {v: v.upper() for v in METADATA_TYPES}
FLAC_KEY["tracktotal"] = "TOTALTRACKS"

# MP3 ID3 tag mappings
MP3_KEY = {
    "title": id3.TIT2,
    "artist": id3.TPE1,
    "album": id3.TALB,
    "genre": id3.TCON,
    "tracknumber": id3.TRCK,  # "number/total"
    "tracktotal": None,  # handled with track number
    "date": id3.TDRC,  # saved as TYER/TDAT in ID3v2.3
    "year": None,  # same as date
}


class Container(Enum):
    """Tag container formats."""

    FLAC = 1
    MP3 = 2

    @classmethod
    def for_quality(cls, quality: Quality) -> "Container":
        """Get the container that matches the quality a file was fetched in."""
        if quality is Quality.FLAC:
            return cls.FLAC
        return cls.MP3

    def load(self, path: Path) -> Any:
        """Load existing tags, or start an empty tag container."""
        if self == Container.FLAC:
            try:
                audio = FLAC(path)
            except MutagenError as e:
                msg = f"Failed to read FLAC file {path}"
                raise TaggingError(msg, path=str(path)) from e
            if audio.tags is None:
                logger.debug("No FLAC tag in %s, starting a new one", path)
                audio.add_tags()
            return audio

        try:
            return ID3(path)
        except ID3NoHeaderError:
            logger.debug("No ID3v2 tag in %s, starting a new one", path)
            return ID3()

    def get_tag_pairs(self, metadata: dict[str, Any]) -> list[tuple]:
        """Get tag key-value pairs for this container format."""
        if self == Container.FLAC:
            return self._tag_flac(metadata)
        return self._tag_mp3(metadata)

    def _tag_flac(self, metadata: dict[str, Any]) -> list[tuple]:
        """Create Vorbis comments from metadata."""
        out = []
        for k, v in FLAC_KEY.items():
            tag = metadata.get(k)
            if tag is not None:
                out.append((v, str(tag)))
        return out

    def _tag_mp3(self, metadata: dict[str, Any]) -> list[tuple]:
        """Create ID3 frames from metadata."""
        out = []
        for k, v in MP3_KEY.items():
            if k == "tracknumber":
                tracktotal = metadata.get("tracktotal")
                text = (
                    f"{metadata['tracknumber']}/{tracktotal}"
                    if tracktotal
                    else str(metadata["tracknumber"])
                )
            else:
                text = metadata.get(k)

            if text is not None and v is not None:
                out.append((v.__name__, v(encoding=3, text=str(text))))
        return out

    def get_extra_pairs(
        self, track: Track, release: Release, lyrics: Lyrics | None
    ) -> list[tuple]:
        """Get the fields only one of the formats carries."""
        has_lyrics = lyrics is not None and not lyrics.is_empty
        if self == Container.FLAC:
            out = [
                ("COPYRIGHT", release.label),
                ("RELEASE_ID", release.release_id),
                ("TRACK_ID", track.track_id),
            ]
            if has_lyrics:
                out.append(("LYRICS", lyrics.text))
            return out

        out = [("TCOP", id3.TCOP(encoding=3, text=release.label))]
        if has_lyrics:
            frame = id3.USLT(
                encoding=3, lang=LYRICS_LANGUAGE, desc="", text=lyrics.text
            )
            out.append((frame.HashKey, frame))
        return out

    def tag_audio(self, audio: Any, tags: list[tuple]) -> None:
        """Apply tags to the loaded container."""
        for k, v in tags:
            if self == Container.MP3:
                audio.add(v)
            else:
                audio[k] = v

    async def embed_cover(self, audio: Any, cover_path: Path) -> None:
        """Embed a JPEG front cover."""
        async with aiofiles.open(cover_path, "rb") as img:
            data = await img.read()

        if self == Container.FLAC:
            if len(data) > FLAC_MAX_BLOCKSIZE:
                logger.error("Cover art too big for FLAC: %d bytes", len(data))
                return

            cover = Picture()
            cover.type = 3  # Cover (front)
            cover.mime = "image/jpeg"
            cover.data = data
            audio.clear_pictures()
            audio.add_picture(cover)
        else:
            audio.add(
                APIC(encoding=3, mime="image/jpeg", type=3, desc="Cover", data=data)
            )

    def save_audio(self, audio: Any, path: Path) -> None:
        """Write the tags back to the file."""
        if self == Container.FLAC:
            audio.save()
        else:
            audio.update_to_v23()
            audio.save(path, v2_version=3)


def _release_metadata(release: Release) -> dict[str, Any]:
    metadata: dict[str, Any] = {"album": release.album}
    parsed = release.parsed_date
    if parsed is not None:
        metadata["date"] = parsed.isoformat()
        metadata["year"] = parsed.year
    return metadata


async def _write(
    container: Container,
    path: Path,
    tags: list[tuple],
    cover_path: Path | None,
) -> None:
    try:
        audio = container.load(path)
        logger.debug("Tagging %s with %d tags", path, len(tags))
        container.tag_audio(audio, tags)
        if cover_path is not None:
            await container.embed_cover(audio, cover_path)
            logger.debug("Embedded cover art from %s", cover_path)
        container.save_audio(audio, path)
    except (MutagenError, OSError) as e:
        msg = f"Failed to write tags to {path}"
        raise TaggingError(msg, path=str(path)) from e


async def tag_track(
    path: Path,
    cover_path: Path,
    track: Track,
    release: Release,
    quality: Quality,
    lyrics: Lyrics | None = None,
    embed_cover: bool = False,
) -> None:
    """Tag a downloaded track.

    Args:
        path: Path to the audio file
        cover_path: Path to the release cover on disk
        track: Track metadata
        release: Release the track belongs to
        quality: Quality the file was fetched in; decides the tag format
        lyrics: Lyrics to embed, skipped when empty
        embed_cover: Whether to embed the cover
    """
    container = Container.for_quality(quality)
    metadata = {
        "title": track.name,
        "artist": track.author,
        "genre": track.genre,
        "tracknumber": track.number,
        "tracktotal": release.track_count,
        **_release_metadata(release),
    }
    tags = container.get_tag_pairs(metadata)
    tags += container.get_extra_pairs(track, release, lyrics)
    await _write(container, path, tags, cover_path if embed_cover else None)
    logger.info("Tagged %s", path)


async def tag_chapter(
    path: Path, cover_path: Path, chapter: BookChapter, embed_cover: bool = False
) -> None:
    """Tag a downloaded audiobook chapter. Chapters are always MP3."""
    container = Container.MP3
    metadata = {
        "title": chapter.title,
        "artist": chapter.author,
        "album": chapter.book_title,
        "tracknumber": chapter.number,
    }
    tags = container.get_tag_pairs(metadata)
    await _write(container, path, tags, cover_path if embed_cover else None)
    logger.info("Tagged %s", path)


def read_tags(path: Path) -> dict[str, str]:
    """Read the common fields back from a tagged file."""
    if path.suffix.lower() == ".flac":
        tags = FLAC(path).tags
        if tags is None:
            return {}
        return {
            key: tags[name][0] for key, name in FLAC_KEY.items() if name in tags
        }

    try:
        frames = ID3(path)
    except ID3NoHeaderError:
        return {}
    out = {}
    for key, frame_class in MP3_KEY.items():
        if frame_class is not None and frame_class.__name__ in frames:
            out[key] = str(frames[frame_class.__name__].text[0])
    return out
