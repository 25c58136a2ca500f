# Copyright (c) 2025 zvuk-dl and contributors. All rights reserved.
# Licensed under the MIT license. See LICENSE file in the project root for details.

"""Tests for downloader utility functions."""

import pytest

from zvukdl.downloader.exceptions import DownloadError, MetadataError, NetworkError
from zvukdl.downloader.utils import (
    format_error_chain,
    raise_error,
    sanitize_path,
    write_atomically,
)
from zvukdl.models.enums import SanitizeProfile


class TestRaiseError:
    """Test the raise_error helper."""

    def test_raises_given_type(self):
        """Test the error type and message."""
        with pytest.raises(NetworkError, match="boom") as exc_info:
            raise_error(NetworkError, "boom", status_code=502)

        assert exc_info.value.status_code == 502

    def test_chains_base_error(self):
        """Test the base error becomes the cause."""
        base = ValueError("inner")

        with pytest.raises(DownloadError) as exc_info:
            raise_error(DownloadError, "outer", base_error=base)

        assert exc_info.value.__cause__ is base


class TestFormatErrorChain:
    """Test flattening exception chains."""

    def test_single_error(self):
        """Test an error without a cause."""
        assert format_error_chain(DownloadError("only")) == "only"

    def test_chain_outermost_first(self):
        """Test causes follow the outer message."""
        try:
            try:
                raise NetworkError("Server error: 500")
            except NetworkError as e:
                raise MetadataError("Failed to get tracks metadata") from e
        except MetadataError as e:
            text = format_error_chain(e)

        assert text == "Failed to get tracks metadata: Server error: 500"

    def test_error_without_message_uses_type_name(self):
        """Test empty messages fall back to the exception type."""
        error = DownloadError("outer")
        error.__cause__ = TimeoutError()

        assert format_error_chain(error) == "outer: TimeoutError"


class TestSanitizePath:
    """Test path component sanitizing."""

    def test_posix_replaces_slash_only(self):
        """Test POSIX only replaces the separator."""
        name = 'AC/DC - Back: In "Black"?'

        assert sanitize_path(name, SanitizeProfile.POSIX) == 'AC_DC - Back: In "Black"?'

    def test_windows_replaces_reserved_characters(self):
        """Test Windows replaces every reserved character."""
        name = 'a<b>c:d"e/f\\g|h?i*j'

        assert sanitize_path(name, SanitizeProfile.WINDOWS) == "a_b_c_d_e_f_g_h_i_j"

    def test_clean_name_unchanged(self):
        """Test names without reserved characters are kept."""
        name = "Some artist - Some release title (2024)"

        assert sanitize_path(name, SanitizeProfile.WINDOWS) == name


class TestWriteAtomically:
    """Test atomic file writes."""

    @pytest.mark.asyncio
    async def test_writes_file_without_leftovers(self, tmp_path):
        """Test the data lands under the final name and no temp file remains."""
        target = tmp_path / "01 - song.flac"

        await write_atomically(target, b"data")

        assert target.read_bytes() == b"data"
        assert [p.name for p in tmp_path.iterdir()] == ["01 - song.flac"]

    @pytest.mark.asyncio
    async def test_missing_directory_raises(self, tmp_path):
        """Test write errors propagate."""
        with pytest.raises(OSError):
            await write_atomically(tmp_path / "missing" / "file.mp3", b"data")

    @pytest.mark.asyncio
    async def test_long_file_name(self, tmp_path):
        """Test a name close to the file system limit can still be written."""
        target = tmp_path / ("a" * 225 + ".flac")

        await write_atomically(target, b"data")

        assert target.read_bytes() == b"data"
