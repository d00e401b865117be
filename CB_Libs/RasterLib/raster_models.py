"""
Raster data models for the coloring engine.

This module defines the small value types shared by the pixel buffer,
the color matcher and the flood fill engine.

Classes:
    ToleranceSpec: Per-channel color tolerance for one fill operation
    FillBudget: Cap on pixels painted by one fill operation
    FillResult: Outcome of one fill call

Functions:
    normalize_rgb: Turn a host-supplied color into an RGB triple
    opaque: Extend an RGB color to RGBA with full alpha

Type Aliases:
    RgbColor: A tuple of 3 integers (0-255)
    RgbaColor: A tuple of 4 integers (0-255)
"""

from dataclasses import dataclass
from typing import Literal, Optional, Sequence, Tuple, Union

from CB_Libs.constants import (
    DEFAULT_MAX_PIXELS,
    DEFAULT_TOLERANCE,
    FILL_STATUS_FILLED,
    MAX_TOLERANCE,
    MIN_TOLERANCE,
    OPAQUE_ALPHA,
)
from CB_Libs.pillow_compat import ImageColor

RgbColor = Tuple[int, int, int]
RgbaColor = Tuple[int, int, int, int]
ColorLike = Union[str, Sequence[int]]
Point = Tuple[int, int]
FillStatus = Literal["filled", "unchanged", "out_of_bounds", "not_ready", "invalid"]


def normalize_rgb(color: ColorLike) -> RgbColor:
    """
    Convert a color given as a CSS string or channel sequence to an RGB triple.

    Any alpha component is dropped; fills and strokes are always painted
    fully opaque.

    Args:
        color: "#rrggbb", a named color, or a sequence of 3 or 4 ints

    Returns:
        (r, g, b) tuple of ints in 0-255

    Raises:
        ValueError: If the string cannot be parsed or a channel is out of range
        TypeError: If color is neither a string nor a sequence
    """
    if isinstance(color, str):
        return tuple(ImageColor.getrgb(color)[:3])

    if not isinstance(color, Sequence):
        raise TypeError(f"Expected color string or sequence, got {type(color)}")

    if len(color) not in (3, 4):
        raise ValueError(f"Color must have 3 or 4 channels, got {len(color)}")

    channels = tuple(int(value) for value in color[:3])
    for value in channels:
        if not 0 <= value <= 255:
            raise ValueError(f"Color channel out of range 0-255: {value}")
    return channels


def opaque(color: RgbColor) -> RgbaColor:
    return (color[0], color[1], color[2], OPAQUE_ALPHA)


@dataclass(frozen=True)
class ToleranceSpec:
    """Per-channel tolerance used to decide whether two colors are the same.

    Attributes:
        value: Two channels match when their absolute difference is strictly
               less than this value (1-256)
    """
    value: int = DEFAULT_TOLERANCE

    def __post_init__(self):
        if isinstance(self.value, bool) or not isinstance(self.value, int):
            raise TypeError(f"tolerance must be an int, got {type(self.value)}")
        if not (MIN_TOLERANCE <= self.value <= MAX_TOLERANCE):
            raise ValueError(
                f"tolerance must be {MIN_TOLERANCE}-{MAX_TOLERANCE}, got {self.value}"
            )


@dataclass(frozen=True)
class FillBudget:
    """Circuit breaker on the number of pixels one fill may paint.

    Attributes:
        max_pixels: Pixel cap, or None for no cap
    """
    max_pixels: Optional[int] = DEFAULT_MAX_PIXELS

    def __post_init__(self):
        if self.max_pixels is None:
            return
        if isinstance(self.max_pixels, bool) or not isinstance(self.max_pixels, int):
            raise TypeError(f"max_pixels must be an int or None, got {type(self.max_pixels)}")
        if self.max_pixels < 1:
            raise ValueError(f"max_pixels must be >= 1, got {self.max_pixels}")

    def is_exhausted(self, processed: int) -> bool:
        return self.max_pixels is not None and processed >= self.max_pixels


@dataclass
class FillResult:
    """Outcome of a single fill call.

    Attributes:
        seed: The requested seed point in buffer coordinates
        status: 'filled', 'unchanged', 'out_of_bounds', 'not_ready' or
            'invalid'
        painted: Number of pixels repainted
        budget_exhausted: True when the fill stopped at the pixel budget
    """
    seed: Point
    status: FillStatus = FILL_STATUS_FILLED
    painted: int = 0
    budget_exhausted: bool = False

    @property
    def changed(self) -> bool:
        return self.status == FILL_STATUS_FILLED
