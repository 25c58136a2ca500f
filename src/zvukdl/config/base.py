# Copyright (c) 2025 zvuk-dl and contributors. All rights reserved.
# Licensed under the MIT license. See LICENSE file in the project root for details.

"""Base configuration classes with common functionality."""

from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator


class BaseConfig(BaseModel):
    """Base configuration class with common settings."""

    model_config = ConfigDict(
        # Enable validation on assignment
        validate_assignment=True,
        # Reject unknown settings so typos surface early
        extra="forbid",
        # Validate default values
        validate_default=True,
    )


class PathConfig(BaseConfig):
    """Base configuration for path-related settings."""

    @field_validator("*", mode="before")
    @classmethod
    def validate_paths(cls, v: Any, info) -> Any:
        """Convert string paths to Path objects where appropriate."""
        if info.field_name and info.field_name.endswith("_dir") and isinstance(v, str):
            return Path(v).expanduser()
        return v
