# Copyright (c) 2025 zvuk-dl and contributors. All rights reserved.
# Licensed under the MIT license. See LICENSE file in the project root for details.

"""Per-track quality negotiation."""

import logging

from zvukdl.models.enums import Quality

logger = logging.getLogger(__name__)


def negotiate(requested: Quality, has_flac: bool) -> Quality:
    """
    Pick the quality a track is fetched in.

    FLAC falls back to MP3 320 when the track has no FLAC stream. An MP3
    request is honoured as is, even when FLAC is available.
    """
    if requested is Quality.FLAC:
        return Quality.FLAC if has_flac else Quality.MP3_HIGH
    return requested


def log_quality_selection(
    track_id: str, requested: Quality, effective: Quality, has_flac: bool
) -> None:
    """Log whether the requested quality was used or a fallback happened."""
    if effective is requested:
        logger.debug(
            "Track id %s: Using requested %s quality (FLAC available: %s)",
            track_id,
            effective,
            has_flac,
        )
    else:
        logger.info(
            "Track id %s: Falling back to %s quality (FLAC available: %s)",
            track_id,
            effective,
            has_flac,
        )
