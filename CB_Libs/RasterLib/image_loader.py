"""
Background image loading for coloring sessions.

Loads line-art backgrounds from the file system, raw bytes, binary file
objects or existing PIL images. Every source is fully decoded, converted to
RGBA and flattened onto the paper color so that transparent regions of the
art behave like blank paper for fills.

Functions:
    get_supported_image_formats: List the accepted file extensions
    is_supported_format: Check a path's extension
    load_background_image: Decode and flatten a background source
    flatten_onto_paper: Composite an RGBA image over a solid paper color
"""

import io
from pathlib import Path
from typing import Any, List, Sequence

from CB_Libs.constants import PAPER_COLOR, SUPPORTED_STANDARD_IMAGES
from CB_Libs.pillow_compat import Image
from CB_Libs.RasterLib.raster_models import normalize_rgb, opaque


def get_supported_image_formats() -> List[str]:
    """
    Get list of supported background image formats.

    Returns:
        List of file extensions (e.g., ['.bmp', '.gif', ...])
    """
    return sorted(SUPPORTED_STANDARD_IMAGES)


def is_supported_format(file_path: Path) -> bool:
    """
    Check if a file path has a supported image extension.

    Args:
        file_path: Path to the file

    Returns:
        True if file extension is supported
    """
    return Path(file_path).suffix.lower() in SUPPORTED_STANDARD_IMAGES


def flatten_onto_paper(image: Any, paper_color: Sequence[int] = PAPER_COLOR) -> Any:
    """
    Composite an image over an opaque paper color.

    Args:
        image: PIL Image (any mode)
        paper_color: RGB color placed behind transparent pixels

    Returns:
        Fully opaque RGBA PIL Image of the same size
    """
    rgba = image.convert("RGBA")
    paper = Image.new("RGBA", rgba.size, opaque(normalize_rgb(paper_color)))
    return Image.alpha_composite(paper, rgba)


def load_background_image(source: Any, paper_color: Sequence[int] = PAPER_COLOR) -> Any:
    """
    Decode a background source into an opaque RGBA image.

    Args:
        source: str/Path to an image file, raw encoded bytes, a binary file
                object, or a PIL Image
        paper_color: RGB color placed behind transparent pixels

    Returns:
        Decoded, flattened RGBA PIL Image

    Raises:
        FileNotFoundError: If a path does not exist
        ValueError: If a path has an unsupported extension or is not a file
        TypeError: If the source type is not supported
        OSError: If the data cannot be decoded
    """
    if hasattr(source, "convert") and hasattr(source, "load"):
        image = source
    elif isinstance(source, (str, Path)):
        image = _open_path(Path(source))
    elif isinstance(source, (bytes, bytearray, memoryview)):
        image = _open_stream(io.BytesIO(bytes(source)), "<bytes>")
    elif hasattr(source, "read"):
        image = _open_stream(source, getattr(source, "name", "<stream>"))
    else:
        raise TypeError(f"Unsupported background source: {type(source)}")

    try:
        image.load()
    except Exception as e:
        raise OSError(f"Failed to decode background image: {str(e)}")

    return flatten_onto_paper(image, paper_color)


def _open_path(file_path: Path) -> Any:
    if not file_path.exists():
        raise FileNotFoundError(f"Image file not found: {file_path}")

    if not file_path.is_file():
        raise ValueError(f"Path is not a file: {file_path}")

    if not is_supported_format(file_path):
        supported = ", ".join(get_supported_image_formats())
        raise ValueError(
            f"Unsupported image format '{file_path.suffix}'. Supported: {supported}"
        )

    return _open_stream(file_path, str(file_path))


def _open_stream(stream: Any, label: str) -> Any:
    try:
        image = Image.open(stream)
        image.load()
        return image
    except Exception as e:
        raise OSError(f"Failed to load image from {label}: {str(e)}")
