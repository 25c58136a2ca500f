# Copyright (c) 2025 zvuk-dl and contributors. All rights reserved.
# Licensed under the MIT license. See LICENSE file in the project root for details.

"""Tests for audio file tagging."""

import pytest
from conftest import make_flac_stub
from mutagen.flac import FLAC
from mutagen.id3 import ID3

from zvukdl.downloader.exceptions import TaggingError
from zvukdl.metadata.tagger import (
    FLAC_KEY,
    MP3_KEY,
    Container,
    read_tags,
    tag_chapter,
    tag_track,
)
from zvukdl.models.chapter import BookChapter
from zvukdl.models.enums import LyricsKind, Quality
from zvukdl.models.release import Release
from zvukdl.models.track import Lyrics, Track

COVER = b"\xff\xd8\xff\xe0cover"


@pytest.fixture
def track():
    return Track(
        track_id="1",
        author="Some artist",
        name="Some track title",
        album="Some release title",
        release_id="99",
        genre="Pop, Rock",
        number=3,
        lyrics=True,
        has_flac=True,
    )


@pytest.fixture
def release():
    return Release(
        release_id="99",
        track_ids=("1", "2", "3"),
        track_count=3,
        label_id="7",
        label="Some label",
        date="20240115",
        album="Some release title",
        author="Some artist",
    )


@pytest.fixture
def flac_path(tmp_path):
    path = tmp_path / "track.flac"
    path.write_bytes(make_flac_stub())
    return path


@pytest.fixture
def mp3_path(tmp_path):
    path = tmp_path / "track.mp3"
    path.write_bytes(b"ohi")
    return path


@pytest.fixture
def cover_path(tmp_path):
    path = tmp_path / "cover.jpg"
    path.write_bytes(COVER)
    return path


class TestKeyMaps:
    """Test tag key tables."""

    def test_flac_keys(self):
        """Test Vorbis comment names."""
        assert FLAC_KEY["title"] == "TITLE"
        assert FLAC_KEY["tracktotal"] == "TOTALTRACKS"

    def test_mp3_keys(self):
        """Test the track total rides along with the track number."""
        assert MP3_KEY["tracktotal"] is None
        assert MP3_KEY["tracknumber"].__name__ == "TRCK"

    def test_container_for_quality(self):
        """Test only FLAC quality maps to the FLAC container."""
        assert Container.for_quality(Quality.FLAC) is Container.FLAC
        assert Container.for_quality(Quality.MP3_HIGH) is Container.MP3
        assert Container.for_quality(Quality.MP3_MID) is Container.MP3


class TestFlacTagging:
    """Test Vorbis comment tagging."""

    @pytest.mark.asyncio
    async def test_tags_written(self, flac_path, cover_path, track, release):
        """Test every field lands in the file."""
        lyrics = Lyrics(kind=LyricsKind.LYRICS, text="la la")

        await tag_track(flac_path, cover_path, track, release, Quality.FLAC, lyrics)

        assert read_tags(flac_path) == {
            "title": "Some track title",
            "artist": "Some artist",
            "album": "Some release title",
            "genre": "Pop, Rock",
            "tracknumber": "3",
            "tracktotal": "3",
            "date": "2024-01-15",
            "year": "2024",
        }
        audio = FLAC(flac_path)
        assert audio["COPYRIGHT"] == ["Some label"]
        assert audio["LYRICS"] == ["la la"]
        assert audio.pictures == []

    @pytest.mark.asyncio
    async def test_embed_cover(self, flac_path, cover_path, track, release):
        """Test the cover becomes the front cover picture."""
        await tag_track(
            flac_path, cover_path, track, release, Quality.FLAC, embed_cover=True
        )

        picture = FLAC(flac_path).pictures[0]
        assert picture.type == 3
        assert picture.mime == "image/jpeg"
        assert picture.data == COVER

    @pytest.mark.asyncio
    async def test_empty_lyrics_skipped(self, flac_path, cover_path, track, release):
        """Test empty lyrics are not written."""
        await tag_track(
            flac_path, cover_path, track, release, Quality.FLAC, Lyrics(text="")
        )

        assert "LYRICS" not in FLAC(flac_path)

    @pytest.mark.asyncio
    async def test_unparsable_date(self, flac_path, cover_path, track, release):
        """Test a date that is not YYYYMMDD is left out."""
        release = release.model_copy(update={"date": "2024"})

        await tag_track(flac_path, cover_path, track, release, Quality.FLAC)

        tags = read_tags(flac_path)
        assert "date" not in tags
        assert "year" not in tags

    @pytest.mark.asyncio
    async def test_retag_replaces_values(self, flac_path, cover_path, track, release):
        """Test tagging twice keeps one value per field."""
        await tag_track(flac_path, cover_path, track, release, Quality.FLAC)
        renamed = track.model_copy(update={"name": "Renamed"})

        await tag_track(flac_path, cover_path, renamed, release, Quality.FLAC)

        assert FLAC(flac_path)["TITLE"] == ["Renamed"]

    @pytest.mark.asyncio
    async def test_not_a_flac_file(self, mp3_path, cover_path, track, release):
        """Test a file that is not FLAC cannot be tagged as FLAC."""
        with pytest.raises(TaggingError, match="Failed to read FLAC file"):
            await tag_track(mp3_path, cover_path, track, release, Quality.FLAC)


class TestMp3Tagging:
    """Test ID3 tagging."""

    @pytest.mark.asyncio
    async def test_tags_written(self, mp3_path, cover_path, track, release):
        """Test frames are written as ID3v2.3."""
        lyrics = Lyrics(text="la la")

        await tag_track(
            mp3_path, cover_path, track, release, Quality.MP3_HIGH, lyrics
        )

        frames = ID3(mp3_path)
        assert frames.version[:2] == (2, 3)
        assert frames["TIT2"].text == ["Some track title"]
        assert frames["TRCK"].text == ["3/3"]
        assert frames["TCOP"].text == ["Some label"]
        uslt = frames.getall("USLT")[0]
        assert uslt.text == "la la"
        assert uslt.lang == "\x00\x00\x00"
        assert uslt.desc == ""
        assert read_tags(mp3_path)["date"] == "2024-01-15"

    @pytest.mark.asyncio
    async def test_embed_cover(self, mp3_path, cover_path, track, release):
        """Test the cover becomes an APIC frame."""
        await tag_track(
            mp3_path, cover_path, track, release, Quality.MP3_MID, embed_cover=True
        )

        apic = ID3(mp3_path).getall("APIC")[0]
        assert apic.type == 3
        assert apic.mime == "image/jpeg"
        assert apic.data == COVER

    @pytest.mark.asyncio
    async def test_no_lyrics(self, mp3_path, cover_path, track, release):
        """Test no USLT frame is written without lyrics."""
        await tag_track(mp3_path, cover_path, track, release, Quality.MP3_HIGH)

        assert ID3(mp3_path).getall("USLT") == []


class TestChapterTagging:
    """Test audiobook chapter tagging."""

    @pytest.mark.asyncio
    async def test_chapter(self, mp3_path, cover_path):
        """Test chapters carry only the book fields."""
        chapter = BookChapter(
            chapter_id="88",
            author="Rname",
            book_title="Some book",
            title="Chapter one",
            number=1,
        )

        await tag_chapter(mp3_path, cover_path, chapter)

        assert read_tags(mp3_path) == {
            "title": "Chapter one",
            "artist": "Rname",
            "album": "Some book",
            "tracknumber": "1",
        }
        assert ID3(mp3_path).getall("APIC") == []


def test_read_tags_untagged(mp3_path):
    """Test an untagged MP3 reads as empty."""
    assert read_tags(mp3_path) == {}
