# Copyright (c) 2025 zvuk-dl and contributors. All rights reserved.
# Licensed under the MIT license. See LICENSE file in the project root for details.

"""Pydantic models for zvuk.com API responses.

Field types are strict: a string where a number is expected is a
validation error, not a silent coercion.
"""

from typing import Any, TypeVar

from pydantic import (
    AliasChoices,
    BaseModel,
    Field,
    StrictBool,
    StrictInt,
    StrictStr,
    ValidationError,
    field_validator,
)

from zvukdl.downloader.exceptions import MetadataError
from zvukdl.models.base import ZvukBaseModel
from zvukdl.models.chapter import BookChapter
from zvukdl.models.enums import LyricsKind
from zvukdl.models.release import Release
from zvukdl.models.track import Lyrics, Track

ModelT = TypeVar("ModelT", bound=BaseModel)

# Template artefact upstream leaves in track image URLs
IMAGE_SIZE_TEMPLATE = "&size={size}&ext=jpg"


class ZvukImage(ZvukBaseModel):
    """Image reference in the tiny API."""

    src: StrictStr = Field(..., description="Image URL")
    palette: StrictStr | None = Field(default=None)
    palette_bottom: StrictStr | None = Field(default=None)


class ZvukRelease(ZvukBaseModel):
    """Release object from the releases endpoint."""

    id: StrictInt = Field(..., description="Release ID")
    title: StrictStr = Field(..., description="Release title")
    credits: StrictStr = Field(..., description="Credited artists")
    date: StrictInt | StrictStr = Field(..., description="Release date, YYYYMMDD")
    label_id: StrictInt = Field(..., description="Record label ID")
    track_ids: list[StrictInt] = Field(..., description="Track IDs in release order")
    image: ZvukImage | None = Field(default=None)
    artist_ids: list[StrictInt] = Field(default_factory=list)
    artist_names: list[StrictStr] = Field(default_factory=list)
    explicit: StrictBool = Field(default=False)
    type_: StrictStr | None = Field(default=None, alias="type")

    def to_entity(self) -> Release:
        """Convert to a Release. The label name is filled in by a second lookup."""
        track_ids = tuple(str(track_id) for track_id in self.track_ids)
        return Release(
            release_id=str(self.id),
            track_ids=track_ids,
            track_count=len(track_ids),
            label_id=str(self.label_id),
            date=str(self.date),
            album=self.title,
            author=self.credits,
        )


class ZvukTrack(ZvukBaseModel):
    """Track object from the tracks endpoint."""

    id: StrictInt = Field(..., description="Track ID")
    title: StrictStr = Field(..., description="Track title")
    credits: StrictStr = Field(..., description="Credited artists")
    genres: list[StrictStr] = Field(..., description="Genre names")
    has_flac: StrictBool = Field(..., description="Whether a FLAC stream exists")
    image: ZvukImage = Field(..., description="Cover image")
    lyrics: StrictBool | None = Field(default=None, description="Lyrics available")
    position: StrictInt = Field(..., description="Position on the release")
    release_id: StrictInt = Field(..., description="Owning release ID")
    release_title: StrictStr = Field(..., description="Owning release title")
    duration: StrictInt | None = Field(default=None)
    explicit: StrictBool = Field(default=False)
    highest_quality: StrictStr | None = Field(default=None)

    def to_entity(self) -> Track:
        """Convert to a Track."""
        return Track(
            track_id=str(self.id),
            author=self.credits,
            name=self.title,
            album=self.release_title,
            release_id=str(self.release_id),
            genre=", ".join(self.genres),
            number=self.position,
            image=self.image.src.replace(IMAGE_SIZE_TEMPLATE, ""),
            lyrics=bool(self.lyrics),
            has_flac=self.has_flac,
        )


class ZvukResult(ZvukBaseModel):
    """Result envelope of the releases and tracks endpoints."""

    releases: dict[str, ZvukRelease] = Field(default_factory=dict)
    tracks: dict[str, ZvukTrack] = Field(default_factory=dict)


class ZvukResponse(ZvukBaseModel):
    """Response of the releases and tracks endpoints."""

    result: ZvukResult


class ZvukLabel(ZvukBaseModel):
    """Record label object."""

    title: StrictStr = Field(..., description="Label name")


class ZvukLabelsResult(ZvukBaseModel):
    labels: dict[str, ZvukLabel] = Field(default_factory=dict)


class ZvukLabelsResponse(ZvukBaseModel):
    """Response of the labels endpoint."""

    result: ZvukLabelsResult


class ZvukLyrics(ZvukBaseModel):
    """Lyrics object."""

    lyrics: StrictStr = Field(default="", description="Lyrics body")
    type_: StrictStr | None = Field(default=None, alias="type")

    @field_validator("type_", mode="before")
    @classmethod
    def ignore_non_string_type(cls, value: Any) -> Any:
        """Treat a missing or non-string type as plain lyrics."""
        return value if isinstance(value, str) else None

    def to_entity(self) -> Lyrics:
        """Convert to Lyrics."""
        return Lyrics(kind=LyricsKind.from_wire(self.type_), text=self.lyrics)


class ZvukLyricsResponse(ZvukBaseModel):
    """Response of the lyrics endpoint."""

    result: ZvukLyrics


class ZvukDownload(ZvukBaseModel):
    """Stream link object."""

    stream: StrictStr = Field(..., description="Short-lived stream URL")
    expire: StrictInt | None = Field(default=None)
    expire_delta: StrictInt | None = Field(default=None)


class ZvukDownloadResponse(ZvukBaseModel):
    """Response of the stream endpoint."""

    result: ZvukDownload


class ZvukGQLImage(ZvukBaseModel):
    src: StrictStr


class ZvukBook(ZvukBaseModel):
    """Book reference inside a chapter."""

    id: StrictStr
    title: StrictStr
    explicit: StrictBool = Field(default=False)


class ZvukBookAuthor(ZvukBaseModel):
    """Book author reference inside a chapter."""

    id: StrictStr
    rname: StrictStr = Field(..., description="Author display name")
    image: ZvukGQLImage | None = Field(default=None)


class ZvukGQLChapter(ZvukBaseModel):
    """Chapter object from ``getBookChapters``."""

    id: StrictStr = Field(..., description="Chapter ID")
    title: StrictStr = Field(..., description="Chapter title")
    image: ZvukGQLImage
    book: ZvukBook
    book_authors: list[ZvukBookAuthor] = Field(
        ..., validation_alias=AliasChoices("bookAuthors", "book_authors")
    )
    position: StrictInt = Field(..., description="Chapter position in the book")
    availability: StrictInt | None = Field(default=None)
    duration: StrictInt | None = Field(default=None)
    typename: StrictStr | None = Field(default=None, alias="__typename")

    def to_entity(self) -> BookChapter:
        """Convert to a BookChapter."""
        return BookChapter(
            chapter_id=self.id,
            author=", ".join(author.rname for author in self.book_authors),
            book_title=self.book.title,
            title=self.title,
            image=self.image.src,
            number=self.position,
        )


class ZvukGQLBook(ZvukBaseModel):
    """Book object from ``getBookChapters``."""

    title: StrictStr
    explicit: StrictBool = Field(default=False)
    chapters: list[ZvukGQLChapter] = Field(default_factory=list)


class ZvukGQLStream(ZvukBaseModel):
    mid: StrictStr = Field(..., description="Stream URL")
    expire: StrictStr | None = Field(default=None)


class ZvukGQLMediaContent(ZvukBaseModel):
    """Media content object from ``getStream``."""

    stream: ZvukGQLStream
    typename: StrictStr | None = Field(default=None, alias="__typename")


class ZvukGQLData(ZvukBaseModel):
    get_books: list[ZvukGQLBook] | None = Field(
        default=None, validation_alias=AliasChoices("getBooks", "get_books")
    )
    media_contents: list[ZvukGQLMediaContent] | None = Field(
        default=None, validation_alias=AliasChoices("mediaContents", "media_contents")
    )


class ZvukGQLResponse(ZvukBaseModel):
    """Response of the GraphQL endpoint."""

    data: ZvukGQLData


def parse_response(model: type[ModelT], body: Any, what: str) -> ModelT:
    """
    Validate a decoded response body against a response model.

    Args:
        model: Response model class
        body: Decoded JSON body
        what: Human readable name of the payload, used in the error message

    Raises:
        MetadataError: When the body does not match the model
    """
    try:
        return model.model_validate(body)
    except ValidationError as e:
        msg = f"Failed to parse {what}: {e}"
        raise MetadataError(msg, details={"errors": e.errors()}) from e


def convert_entities(items: dict[str, Any], what: str) -> dict[str, Any]:
    """
    Convert a map of wire objects into entities with ``to_entity``.

    Raises:
        MetadataError: When a value does not fit the entity, e.g. a counter overflow
    """
    converted = {}
    for key, item in items.items():
        try:
            converted[key] = item.to_entity()
        except ValidationError as e:
            msg = f"Failed to convert {what} {key}: {e}"
            raise MetadataError(msg, details={"id": key}) from e
    return converted
