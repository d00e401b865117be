"""
CompositeLib - Export composition

Merges background, fill and strokes into one image and encodes the result.
"""

from CB_Libs.CompositeLib.compositor import Compositor, compose_layers
from CB_Libs.CompositeLib.export_ops import encode_image, normalize_export_format

__all__ = [
    "Compositor",
    "compose_layers",
    "encode_image",
    "normalize_export_format",
]
