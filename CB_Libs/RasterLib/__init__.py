"""
RasterLib - Pixel-level coloring primitives

This module provides the RGBA pixel buffer, tolerance-based color
matching, the scanline flood fill engine and background loading.
"""

from CB_Libs.RasterLib.raster_models import (
    RgbColor,
    RgbaColor,
    ToleranceSpec,
    FillBudget,
    FillResult,
    normalize_rgb,
)
from CB_Libs.RasterLib.pixel_buffer import PixelBuffer, PixelOutOfBoundsError
from CB_Libs.RasterLib.color_matcher import ColorMatcher, colors_match
from CB_Libs.RasterLib.flood_fill import FloodFillEngine, flood_fill
from CB_Libs.RasterLib.image_loader import (
    load_background_image,
    flatten_onto_paper,
    get_supported_image_formats,
    is_supported_format,
)

__all__ = [
    "RgbColor",
    "RgbaColor",
    "ToleranceSpec",
    "FillBudget",
    "FillResult",
    "normalize_rgb",
    "PixelBuffer",
    "PixelOutOfBoundsError",
    "ColorMatcher",
    "colors_match",
    "FloodFillEngine",
    "flood_fill",
    "load_background_image",
    "flatten_onto_paper",
    "get_supported_image_formats",
    "is_supported_format",
]
