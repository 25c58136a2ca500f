# Copyright (c) 2025 zvuk-dl and contributors. All rights reserved.
# Licensed under the MIT license. See LICENSE file in the project root for details.

"""Global pytest configuration for zvuk-dl tests."""

from pathlib import Path
from typing import Any

import pytest
import pytest_asyncio
from aiohttp import web
from aiohttp.test_utils import TestServer

from zvukdl.config.settings import ZvukConfig

# Configure pytest-asyncio for all async tests
pytest_plugins = ["pytest_asyncio"]

MOCK_TOKEN = "test-token"
MOCK_RELEASE_ID = "99"
MOCK_LABEL_ID = "7"
MOCK_LABEL = "Some label"
MOCK_ARTIST = "Some artist"
MOCK_RELEASE_TITLE = "Some release title"
MOCK_LYRICS = "mocked lyrics"
MOCK_BOOK_ID = "00"
MOCK_CHAPTER_ID = "88"
MOCK_COVER = b"\xff\xd8\xff\xe0mock-cover"


# Mark all async test functions with asyncio marker
def pytest_configure(config):
    """Configure pytest with asyncio markers."""
    config.addinivalue_line("markers", "asyncio: mark test as async")


def make_flac_stub() -> bytes:
    """Build the smallest FLAC file mutagen accepts: a lone STREAMINFO block."""
    streaminfo = (
        (4096).to_bytes(2, "big") * 2  # min/max block size
        + bytes(6)  # min/max frame size, unknown
        # 44100 Hz, 2 channels, 16 bits per sample, 0 samples
        + bytes([0x0A, 0xC4, 0x42, 0xF0, 0x00, 0x00, 0x00, 0x00])
        + bytes(16)  # MD5 of the audio
    )
    # Last-metadata-block flag, block type 0, length 34
    return b"fLaC" + bytes([0x80, 0x00, 0x00, 0x22]) + streaminfo


class MockZvuk:
    """In-process stand-in for the zvuk.com API and CDN.

    Payloads are built from plain attributes so tests can tweak them before
    running a download. Every request is recorded in ``requests``.
    """

    def __init__(self) -> None:
        self.base_url = ""
        self.requests: list[tuple[str, str, dict[str, str]]] = []
        self.cookies: list[str | None] = []
        self.user_agents: list[str | None] = []

        self.release_date: int | str = 20240115
        self.labels = {MOCK_LABEL_ID: MOCK_LABEL}
        self.tracks: dict[int, dict[str, Any]] = {}
        self.add_track(1, "Some track title", position=1)
        self.lyrics_text = MOCK_LYRICS
        self.lyrics_type: object = "lyrics"
        self.failing_lyrics: set[str] = set()
        self.raw_lyrics: dict[str, bytes] = {}
        self.failing_links: set[str] = set()
        self.failing_audio: set[str] = set()
        self.flac_audio = make_flac_stub()
        self.mp3_audio = b"ohi"
        self.cover = MOCK_COVER

        self.app = web.Application()
        self.app.router.add_get("/api/tiny/releases", self.releases)
        self.app.router.add_get("/api/tiny/labels", self.labels_handler)
        self.app.router.add_get("/api/tiny/tracks", self.tracks_handler)
        self.app.router.add_get("/api/tiny/track/stream", self.stream)
        self.app.router.add_get("/api/tiny/lyrics", self.lyrics)
        self.app.router.add_post("/api/v1/graphql", self.graphql)
        self.app.router.add_get("/audio/{name}", self.audio)
        self.app.router.add_get("/file.jpg", self.cover_handler)

    def add_track(
        self,
        track_id: int,
        title: str,
        position: int,
        has_flac: bool = True,
        lyrics: bool | None = True,
    ) -> None:
        """Add a track to the mock release."""
        self.tracks[track_id] = {
            "id": track_id,
            "title": title,
            "credits": MOCK_ARTIST,
            "genres": ["Pop", "Rock"],
            "has_flac": has_flac,
            "lyrics": lyrics,
            "position": position,
            "release_id": int(MOCK_RELEASE_ID),
            "release_title": MOCK_RELEASE_TITLE,
            "duration": 180,
            "explicit": False,
            "highest_quality": "flac",
        }

    def count(self, path: str) -> int:
        """Count recorded requests whose path starts with ``path``."""
        return sum(1 for _, p, _ in self.requests if p.startswith(path))

    def _record(self, request: web.Request) -> None:
        self.requests.append((request.method, request.path, dict(request.query)))
        self.cookies.append(request.cookies.get("auth"))
        self.user_agents.append(request.headers.get("User-Agent"))

    def _image(self) -> dict[str, str]:
        return {
            "src": f"{self.base_url}/file.jpg?id={MOCK_RELEASE_ID}&size={{size}}&ext=jpg",
            "palette": "#000000",
            "palette_bottom": "#ffffff",
        }

    def release_payload(self) -> dict[str, Any]:
        return {
            "id": int(MOCK_RELEASE_ID),
            "title": MOCK_RELEASE_TITLE,
            "credits": MOCK_ARTIST,
            "date": self.release_date,
            "label_id": int(MOCK_LABEL_ID),
            "track_ids": list(self.tracks),
            "image": self._image(),
            "artist_ids": [5],
            "artist_names": [MOCK_ARTIST],
            "explicit": False,
            "type": "album",
        }

    async def releases(self, request: web.Request) -> web.Response:
        self._record(request)
        ids = request.query["ids"].split(",")
        releases = {
            MOCK_RELEASE_ID: self.release_payload()
        } if MOCK_RELEASE_ID in ids else {}
        return web.json_response({"result": {"releases": releases}})

    async def labels_handler(self, request: web.Request) -> web.Response:
        self._record(request)
        ids = request.query["ids"].split(",")
        labels = {
            label_id: {"title": title}
            for label_id, title in self.labels.items()
            if label_id in ids
        }
        return web.json_response({"result": {"labels": labels}})

    async def tracks_handler(self, request: web.Request) -> web.Response:
        self._record(request)
        ids = request.query["ids"].split(",")
        tracks = {
            str(track_id): {**track, "image": self._image()}
            for track_id, track in self.tracks.items()
            if str(track_id) in ids
        }
        return web.json_response({"result": {"tracks": tracks}})

    async def stream(self, request: web.Request) -> web.Response:
        self._record(request)
        track_id = request.query["id"]
        if track_id in self.failing_links:
            return web.Response(status=500, text="link lookup failed")
        ext = "flac" if request.query["quality"] == "flac" else "mp3"
        return web.json_response(
            {
                "result": {
                    "expire": 1700000000,
                    "expire_delta": 3600,
                    "stream": f"{self.base_url}/audio/{track_id}.{ext}",
                }
            }
        )

    async def lyrics(self, request: web.Request) -> web.Response:
        self._record(request)
        track_id = request.query["track_id"]
        if track_id in self.failing_lyrics:
            return web.Response(status=500, text="lyrics unavailable")
        if track_id in self.raw_lyrics:
            return web.Response(
                body=self.raw_lyrics[track_id], content_type="application/json"
            )
        return web.json_response(
            {"result": {"lyrics": self.lyrics_text, "type": self.lyrics_type}}
        )

    async def graphql(self, request: web.Request) -> web.Response:
        self._record(request)
        body = await request.json()
        if body["operationName"] == "getBookChapters":
            return web.json_response(self.books_payload(body["variables"]["ids"]))
        return web.json_response(
            {
                "data": {
                    "mediaContents": [
                        {
                            "__typename": "Chapter",
                            "stream": {
                                "expire": "1700000000",
                                "mid": f"{self.base_url}/audio/{chapter_id}.mp3",
                            },
                        }
                        for chapter_id in body["variables"]["ids"]
                    ]
                }
            }
        )

    def books_payload(self, book_ids: list[str]) -> dict[str, Any]:
        if MOCK_BOOK_ID not in book_ids:
            return {"data": {"getBooks": []}}
        chapter = {
            "id": MOCK_CHAPTER_ID,
            "title": "Some chapter title",
            "availability": 2,
            "duration": 600,
            "childParam": "",
            "image": {"src": f"{self.base_url}/file.jpg?id={MOCK_BOOK_ID}"},
            "book": {"id": MOCK_BOOK_ID, "title": "Some book", "explicit": False},
            "bookAuthors": [
                {"id": "5", "rname": "Rname", "image": {"src": ""}},
            ],
            "position": 1,
            "__typename": "Chapter",
        }
        return {
            "data": {
                "getBooks": [
                    {"title": "Some book", "explicit": False, "chapters": [chapter]}
                ]
            }
        }

    async def audio(self, request: web.Request) -> web.Response:
        self._record(request)
        track_id, _, ext = request.match_info["name"].partition(".")
        if track_id in self.failing_audio:
            return web.Response(status=500, text="audio unavailable")
        body = self.flac_audio if ext == "flac" else self.mp3_audio
        return web.Response(body=body, content_type="application/octet-stream")

    async def cover_handler(self, request: web.Request) -> web.Response:
        self._record(request)
        return web.Response(body=self.cover, content_type="image/jpeg")


@pytest_asyncio.fixture
async def zvuk_server():
    """Start the mock API on a local port."""
    mock = MockZvuk()
    server = TestServer(mock.app)
    await server.start_server()
    mock.base_url = str(server.make_url("/")).rstrip("/")
    yield mock
    await server.close()


@pytest.fixture
def output_dir(tmp_path: Path) -> Path:
    """Create a download directory."""
    directory = tmp_path / "downloads"
    directory.mkdir()
    return directory


@pytest.fixture
def config(output_dir: Path) -> ZvukConfig:
    """Create a configuration that never waits between requests."""
    return ZvukConfig(
        token=MOCK_TOKEN,
        output_dir=output_dir,
        pause_between_getting_track_links=0,
        sanitize_profile="posix",
    )


@pytest.fixture
def server_config(config: ZvukConfig, zvuk_server: MockZvuk) -> ZvukConfig:
    """Create a configuration pointing at the mock API."""
    return config.model_copy(update={"zvuk_host": zvuk_server.base_url})
