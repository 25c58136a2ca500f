# Copyright (c) 2025 zvuk-dl and contributors. All rights reserved.
# Licensed under the MIT license. See LICENSE file in the project root for details.

"""Cover art handling and audio tagging."""

from zvukdl.metadata.artwork import ensure_cover
from zvukdl.metadata.tagger import Container, read_tags, tag_chapter, tag_track

__all__ = ["Container", "ensure_cover", "read_tags", "tag_chapter", "tag_track"]
