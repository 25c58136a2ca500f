# Copyright (c) 2025 zvuk-dl and contributors. All rights reserved.
# Licensed under the MIT license. See LICENSE file in the project root for details.

"""Audiobook chapter entity."""

from pydantic import Field

from zvukdl.models.base import UInt32, ZvukEntity


class BookChapter(ZvukEntity):
    """A single audiobook chapter. Chapters stand alone, without a release."""

    chapter_id: str = Field(..., description="Chapter identifier")
    author: str = Field(..., description="Book authors joined by comma")
    book_title: str = Field(..., description="Book title")
    title: str = Field(..., description="Chapter title")
    image: str = Field(default="", description="Cover image URL")
    number: UInt32 = Field(..., description="Chapter position in the book")
