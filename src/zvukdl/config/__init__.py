# Copyright (c) 2025 zvuk-dl and contributors. All rights reserved.
# Licensed under the MIT license. See LICENSE file in the project root for details.

"""Configuration package for zvuk-dl."""

from zvukdl.config.base import BaseConfig, PathConfig
from zvukdl.config.settings import ZvukConfig, validate_resize_command

__all__ = [
    "BaseConfig",
    "PathConfig",
    "ZvukConfig",
    "validate_resize_command",
]
