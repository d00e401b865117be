"""
Export operations for composed coloring pages.

Encodes composites to lossless image bytes. Persisting or downloading the
bytes is left to the host.

Functions:
    normalize_export_format: Validate a lossless export format name
    encode_image: Encode a PIL Image to lossless bytes
"""

import io
from typing import Any

from CB_Libs.constants import DEFAULT_EXPORT_FORMAT, LOSSLESS_EXPORT_FORMATS


def normalize_export_format(fmt: str) -> str:
    """
    Validate and upper-case an export format name.

    Raises:
        ValueError: If the format is not a supported lossless format
    """
    normalized = str(fmt).strip().upper()
    if normalized == "TIF":
        normalized = "TIFF"
    if normalized not in LOSSLESS_EXPORT_FORMATS:
        supported = ", ".join(sorted(LOSSLESS_EXPORT_FORMATS))
        raise ValueError(f"Unsupported export format '{fmt}'. Supported: {supported}")
    return normalized


def encode_image(image: Any, fmt: str = DEFAULT_EXPORT_FORMAT) -> bytes:
    """
    Encode an image to bytes in a lossless format.

    Args:
        image: PIL Image to encode
        fmt: 'PNG', 'BMP' or 'TIFF'

    Returns:
        Encoded image data

    Raises:
        ValueError: If fmt is not a supported lossless format
        TypeError: If image is not a PIL Image
    """
    if not hasattr(image, "save"):
        raise TypeError(f"Expected PIL Image, got {type(image)}")

    save_format = normalize_export_format(fmt)
    if save_format == "BMP" and image.mode == "RGBA":
        image = image.convert("RGB")

    stream = io.BytesIO()
    image.save(stream, format=save_format)
    return stream.getvalue()
