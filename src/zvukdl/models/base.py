# Copyright (c) 2025 zvuk-dl and contributors. All rights reserved.
# Licensed under the MIT license. See LICENSE file in the project root for details.

"""Base model classes with common functionality."""

from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field

# Counters (track numbers, track totals) are stored as unsigned 32-bit values
UInt32 = Annotated[int, Field(ge=0, le=0xFFFFFFFF)]


class ZvukBaseModel(BaseModel):
    """Base model for upstream API payloads."""

    model_config = ConfigDict(
        # Upstream adds fields over time, keep them around instead of failing
        extra="allow",
        # Allow both the Python field name and the upstream alias
        populate_by_name=True,
        validate_default=True,
    )


class ZvukEntity(BaseModel):
    """Base model for internal entities.

    Entities are built once from upstream data and never mutated afterwards.
    """

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        validate_default=True,
    )
