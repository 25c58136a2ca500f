# Copyright (c) 2025 zvuk-dl and contributors. All rights reserved.
# Licensed under the MIT license. See LICENSE file in the project root for details.

"""Download releases, tracks and audiobooks from zvuk.com with proper tags."""

__version__ = "0.3.0"
