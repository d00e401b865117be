"""
StrokeLib - Freehand drawing layer

Vector stroke capture kept separate from the filled raster.
"""

from CB_Libs.StrokeLib.stroke_layer import StrokePath, StrokeLayer

__all__ = [
    "StrokePath",
    "StrokeLayer",
]
