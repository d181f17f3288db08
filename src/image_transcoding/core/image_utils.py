"""Image processing utilities for image transcoding."""

import io
import math
from typing import Optional, Tuple

from PIL import Image

from .models import ImageType


def round_half_up(value: float) -> int:
    """
    Round to the nearest integer with halves going toward positive infinity.

    Python's ``round`` uses banker's rounding; variant widths are computed
    with half-up rounding so existing outputs keep their exact sizes.
    """
    return math.floor(value + 0.5)


def compute_scaling_factor(width: int, height: int, max_dimension: int) -> float:
    """Factor that fits ``width x height`` inside a ``max_dimension`` square."""
    return min(max_dimension / width, max_dimension / height)


def compute_target_dimensions(
    width: int, height: int, max_dimension: int
) -> Optional[Tuple[int, int]]:
    """
    Calculate the even output dimensions of one variant.

    Args:
        width: Source width in pixels
        height: Source height in pixels
        max_dimension: Longest side allowed for the variant

    Returns:
        ``(target_width, target_height)``, or None when the source already
        fits and the variant must be skipped rather than upscaled.

    The width is rounded to the nearest even number while the height is
    floored to an even number. Both are kept as-is for parity with variants
    already in the destination buckets.
    """
    scaling_factor = compute_scaling_factor(width, height, max_dimension)
    if scaling_factor >= 1:
        return None

    target_width = 2 * round_half_up(scaling_factor * width / 2)
    target_height = 2 * math.floor(scaling_factor * height / 2)
    return target_width, target_height


def variant_key(label: str, source_key: str) -> str:
    """Destination key of one variant: ``<label>-<source_key>``."""
    return f"{label}-{source_key}"


def probe_image(image_bytes: bytes) -> Image.Image:
    """Decode an image fully so its pixels can be shared between threads."""
    image = Image.open(io.BytesIO(image_bytes))
    image.load()
    return image


def resize_image(image: Image.Image, size: Tuple[int, int]) -> Image.Image:
    """Return a resized copy; the source image is never modified."""
    return image.resize(size, Image.Resampling.LANCZOS)


def encode_image(
    image: Image.Image, image_type: ImageType, quality: Optional[int] = None
) -> bytes:
    """
    Encode an image in the given type.

    Args:
        image: PIL Image to encode
        image_type: Output type, always the type of the source
        quality: Encoder quality override; ignored for lossless types

    Returns:
        Encoded image bytes
    """
    output_stream = io.BytesIO()
    save_kwargs = {}
    if quality is not None and image_type.supports_quality:
        save_kwargs["quality"] = quality

    image.save(output_stream, format=image_type.pillow_format, **save_kwargs)
    return output_stream.getvalue()
