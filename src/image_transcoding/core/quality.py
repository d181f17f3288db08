"""Adaptive encoder quality from the source's bytes-per-pixel density."""

import math
from typing import Optional

from .models import TranscodingConfig


def observed_density(content_length: int, width: int, height: int) -> float:
    """Encoded bytes per pixel of the source image."""
    pixels = width * height
    if pixels <= 0:
        return 0.0
    return content_length / pixels


def estimate_quality(
    content_length: int, width: int, height: int, config: TranscodingConfig
) -> Optional[int]:
    """
    Choose one encoder quality for every variant of a job.

    Sources already under the density ceiling keep the encoder default
    (None). Denser sources are scaled into ``[min_quality, 100]``:
    ``floor(ratio * (100 - min_quality) + min_quality)`` with
    ``ratio = ceiling / observed``.

    A zero density (content length reported as 0) also yields None.
    """
    density = observed_density(content_length, width, height)
    if density <= 0:
        return None

    ratio = config.ceiling_density / density
    if ratio >= 1:
        return None

    return math.floor(ratio * (100 - config.min_quality) + config.min_quality)
