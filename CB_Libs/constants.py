"""
Constants and configuration values for the coloring engine.

This module centralizes all constant values, magic numbers, and
default settings used throughout the library.
"""

# Fill defaults
DEFAULT_TOLERANCE = 40
MIN_TOLERANCE = 1
MAX_TOLERANCE = 256
DEFAULT_MAX_PIXELS = 1_000_000
DEFAULT_FILL_COLOR = (255, 0, 0)

# Stroke defaults
DEFAULT_STROKE_COLOR = "#000000"
DEFAULT_STROKE_WIDTH = 4
MAX_STROKE_WIDTH = 200

# Paper (plain background) color; erasers paint with it
PAPER_COLOR = (255, 255, 255)

# Canvas defaults
DEFAULT_CANVAS_WIDTH = 600
DEFAULT_CANVAS_HEIGHT = 400

# Opaque / transparent alpha
OPAQUE_ALPHA = 255
TRANSPARENT = (0, 0, 0, 0)

# Resampling filters (names map to Pillow Image.Resampling members)
DEFAULT_RESAMPLE = "lanczos"
RESAMPLE_FILTERS = {
    "nearest": "NEAREST",
    "bilinear": "BILINEAR",
    "bicubic": "BICUBIC",
    "lanczos": "LANCZOS",
}

# Export
DEFAULT_EXPORT_FORMAT = "PNG"
LOSSLESS_EXPORT_FORMATS = {"PNG", "BMP", "TIFF"}

# Supported background formats
SUPPORTED_STANDARD_IMAGES = {".png", ".jpg", ".jpeg", ".bmp", ".gif", ".tiff", ".webp"}

# Config file constants
CONFIG_EXTENSION = ".cbconfig"
SCHEMA_VERSION = 1

# Config field names
FIELD_SCHEMA_VERSION = "schema_version"
FIELD_SETTINGS = "settings"

# Fill result statuses
FILL_STATUS_FILLED = "filled"
FILL_STATUS_UNCHANGED = "unchanged"
FILL_STATUS_OUT_OF_BOUNDS = "out_of_bounds"
FILL_STATUS_NOT_READY = "not_ready"
FILL_STATUS_INVALID = "invalid"
