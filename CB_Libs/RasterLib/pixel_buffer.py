"""
Pixel buffer for the coloring engine.

A PixelBuffer owns one width x height RGBA raster. It exposes read/write
primitives only; the flood fill engine and the compositor build on it.

Pixels are stored in a numpy uint8 array of shape (height, width, 4). The
flat byte layout returned by `pixels` follows the usual row-major RGBA
order, so the channel bytes of pixel (x, y) start at (y * width + x) * 4.

Example:
    >>> buffer = PixelBuffer.from_image(Image.open("page.png"))
    >>> buffer.get(10, 10)
    (255, 255, 255, 255)
    >>> buffer.set(10, 10, (255, 0, 0))
"""

from typing import Any, Sequence, Tuple

import numpy as np

from CB_Libs.constants import OPAQUE_ALPHA, TRANSPARENT
from CB_Libs.pillow_compat import Image
from CB_Libs.RasterLib.raster_models import RgbaColor

CHANNELS = 4


class PixelOutOfBoundsError(IndexError):
    """Raised when a coordinate falls outside [0, width) x [0, height)."""

    def __init__(self, x: int, y: int, width: int, height: int):
        super().__init__(
            f"Pixel ({x}, {y}) is outside buffer bounds {width}x{height}"
        )
        self.x = x
        self.y = y


class PixelBuffer:
    """Width x height RGBA raster with bounds-checked pixel access."""

    def __init__(self, width: int, height: int, fill: Sequence[int] = TRANSPARENT):
        """
        Create a buffer filled with a single color.

        Args:
            width: Buffer width in pixels (> 0)
            height: Buffer height in pixels (> 0)
            fill: RGBA (or RGB, painted opaque) color for every pixel

        Raises:
            ValueError: If width or height is not positive
        """
        width = int(width)
        height = int(height)
        if width <= 0 or height <= 0:
            raise ValueError(f"Buffer size must be positive, got {width}x{height}")

        self._width = width
        self._height = height
        self._array = np.empty((height, width, CHANNELS), dtype=np.uint8)
        self._array[:, :] = self._to_rgba(fill)

    @classmethod
    def from_image(cls, image: Any) -> "PixelBuffer":
        """
        Build a buffer from a Pillow image.

        Forces the image to finish decoding before reading pixel data.

        Args:
            image: PIL Image (any mode, converted to RGBA)

        Returns:
            A new PixelBuffer holding a copy of the image pixels

        Raises:
            TypeError: If image is not a PIL Image
        """
        if not hasattr(image, "convert") or not hasattr(image, "load"):
            raise TypeError(f"Expected PIL Image, got {type(image)}")

        image.load()
        rgba = image.convert("RGBA")
        buffer = cls.__new__(cls)
        buffer._width, buffer._height = rgba.size
        buffer._array = np.array(rgba, dtype=np.uint8)
        return buffer

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    @property
    def size(self) -> Tuple[int, int]:
        return self._width, self._height

    @property
    def pixels(self) -> bytes:
        """Snapshot of the raster as row-major RGBA bytes."""
        return self._array.tobytes()

    def contains(self, x: int, y: int) -> bool:
        return 0 <= x < self._width and 0 <= y < self._height

    def offset(self, x: int, y: int) -> int:
        """
        Byte offset of pixel (x, y) in `pixels`.

        Raises:
            PixelOutOfBoundsError: If (x, y) is outside the buffer
        """
        self._check_bounds(x, y)
        return (y * self._width + x) * CHANNELS

    def get(self, x: int, y: int) -> RgbaColor:
        """
        Read the RGBA color at (x, y).

        Raises:
            PixelOutOfBoundsError: If (x, y) is outside the buffer
        """
        self._check_bounds(x, y)
        r, g, b, a = self._array[y, x]
        return int(r), int(g), int(b), int(a)

    def set(self, x: int, y: int, color: Sequence[int]) -> None:
        """
        Write a color at (x, y). RGB colors are written fully opaque.

        Raises:
            PixelOutOfBoundsError: If (x, y) is outside the buffer
            ValueError: If the color is malformed
        """
        self._check_bounds(x, y)
        self._array[y, x] = self._to_rgba(color)

    def write_pixels(self, data: Any) -> None:
        """
        Replace the whole raster from row-major RGBA bytes in one write.

        Args:
            data: bytes, bytearray or memoryview of length width*height*4

        Raises:
            ValueError: If the data length does not match the buffer
        """
        expected = self._width * self._height * CHANNELS
        if len(data) != expected:
            raise ValueError(
                f"Pixel data length {len(data)} does not match buffer size {expected}"
            )
        self._array = np.frombuffer(data, dtype=np.uint8).reshape(
            (self._height, self._width, CHANNELS)
        ).copy()

    def count_color(self, color: Sequence[int]) -> int:
        """Count pixels exactly equal to an RGBA (or opaque RGB) color."""
        target = np.array(self._to_rgba(color), dtype=np.uint8)
        return int(np.all(self._array == target, axis=-1).sum())

    def copy(self) -> "PixelBuffer":
        clone = PixelBuffer.__new__(PixelBuffer)
        clone._width = self._width
        clone._height = self._height
        clone._array = self._array.copy()
        return clone

    def to_image(self) -> Any:
        """Return a new RGBA PIL Image with the buffer contents."""
        return Image.fromarray(self._array.copy())

    def _check_bounds(self, x: int, y: int) -> None:
        # numpy would wrap negative indices, so reject them here
        if not self.contains(x, y):
            raise PixelOutOfBoundsError(x, y, self._width, self._height)

    @staticmethod
    def _to_rgba(color: Sequence[int]) -> RgbaColor:
        if len(color) == 3:
            channels = (*color, OPAQUE_ALPHA)
        elif len(color) == 4:
            channels = tuple(color)
        else:
            raise ValueError(f"Color must have 3 or 4 channels, got {len(color)}")

        channels = tuple(int(value) for value in channels)
        for value in channels:
            if not 0 <= value <= 255:
                raise ValueError(f"Color channel out of range 0-255: {value}")
        return channels

    def __repr__(self) -> str:
        return f"PixelBuffer({self._width}x{self._height})"
