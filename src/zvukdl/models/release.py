# Copyright (c) 2025 zvuk-dl and contributors. All rights reserved.
# Licensed under the MIT license. See LICENSE file in the project root for details.

"""Release (album) entity."""

import datetime as dt
import re

from pydantic import Field, model_validator

from zvukdl.models.base import UInt32, ZvukEntity

_DATE_PATTERN = re.compile(r"^\d{8}$")


class Release(ZvukEntity):
    """A release with everything needed for folder naming and tagging."""

    release_id: str = Field(..., description="Release identifier")
    track_ids: tuple[str, ...] = Field(
        default=(), description="Identifiers of the tracks on this release"
    )
    track_count: UInt32 = Field(..., description="Number of tracks on this release")
    label_id: str = Field(default="", description="Record label identifier")
    label: str = Field(default="", description="Record label name")
    date: str = Field(..., description="Raw release date, usually YYYYMMDD")
    album: str = Field(..., description="Release title")
    author: str = Field(..., description="Credited artist")

    @model_validator(mode="after")
    def check_track_count(self) -> "Release":
        """Ensure the track count matches the track list."""
        if self.track_count != len(self.track_ids):
            msg = (
                f"track_count {self.track_count} does not match "
                f"{len(self.track_ids)} track ids"
            )
            raise ValueError(msg)
        return self

    @property
    def year(self) -> str:
        """Get the year part of the raw date."""
        return self.date[:4]

    @property
    def parsed_date(self) -> dt.date | None:
        """Parse the raw date as YYYYMMDD, or None when it is not in that form."""
        if not _DATE_PATTERN.match(self.date):
            return None
        try:
            return dt.datetime.strptime(self.date, "%Y%m%d").date()  # noqa: DTZ007
        except ValueError:
            return None

    def with_label(self, label: str) -> "Release":
        """Return a copy with the label name filled in."""
        return self.model_copy(update={"label": label})
