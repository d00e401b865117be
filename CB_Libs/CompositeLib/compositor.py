"""
Export Compositor.

Merges the background art, the filled raster and the stroke layer into one
RGBA image at the size requested for export. Layers stack in a fixed order:

    1. background image
    2. fill raster (PixelBuffer or image, optional)
    3. strokes

Raster layers are resampled to the target size; strokes are rendered
directly at the target size so they stay sharp.

Example:
    >>> composite = Compositor.compose(
    ...     background,
    ...     buffer,
    ...     strokes,
    ...     target_size=(800, 600),
    ... )
    >>> composite.size
    (800, 600)
"""

from typing import Any, Optional, Sequence, Tuple

from CB_Libs.constants import DEFAULT_RESAMPLE
from CB_Libs.pillow_compat import Image, resample_filter
from CB_Libs.RasterLib.pixel_buffer import PixelBuffer
from CB_Libs.StrokeLib.stroke_layer import StrokeLayer


class Compositor:
    """Handles background + fill + stroke composition for export."""

    @staticmethod
    def compose(
        background: Any,
        fill_buffer: Optional[Any],
        stroke_layer: Optional[StrokeLayer],
        target_size: Sequence[int],
        resample: str = DEFAULT_RESAMPLE,
    ) -> Any:
        """
        Composite all layers into a new image.

        Args:
            background: PIL Image of the line art (converted to RGBA)
            fill_buffer: PixelBuffer or PIL Image holding the fill, or None
                         when the fill is already baked into the background
            stroke_layer: StrokeLayer to draw on top, or None
            target_size: (width, height) of the output image
            resample: Resampling filter name for raster layers

        Returns:
            Composited PIL Image in RGBA mode of target_size

        Raises:
            ValueError: If target_size is not two positive ints or the
                        resample filter is unknown
            TypeError: If background or fill_buffer are not images
        """
        size = Compositor._validate_size(target_size)
        resample_mode = resample_filter(resample)

        if not hasattr(background, "mode"):
            raise TypeError(f"Expected PIL Image for background, got {type(background)}")

        result = Compositor._fit(background.convert("RGBA"), size, resample_mode)

        if fill_buffer is not None:
            fill_image = Compositor._as_image(fill_buffer)
            fill_image = Compositor._fit(fill_image, size, resample_mode)
            result = Image.alpha_composite(result, fill_image)

        if stroke_layer is not None and stroke_layer.path_count:
            result = Image.alpha_composite(result, stroke_layer.render(size))

        return result

    @staticmethod
    def _validate_size(target_size: Sequence[int]) -> Tuple[int, int]:
        if target_size is None or len(target_size) != 2:
            raise ValueError(f"target_size must be (width, height), got {target_size}")
        width, height = int(target_size[0]), int(target_size[1])
        if width <= 0 or height <= 0:
            raise ValueError(f"target_size must be positive, got {width}x{height}")
        return width, height

    @staticmethod
    def _as_image(fill_buffer: Any) -> Any:
        if isinstance(fill_buffer, PixelBuffer):
            return fill_buffer.to_image()
        if hasattr(fill_buffer, "convert"):
            return fill_buffer.convert("RGBA")
        raise TypeError(
            f"Expected PixelBuffer or PIL Image for fill, got {type(fill_buffer)}"
        )

    @staticmethod
    def _fit(image: Any, size: Tuple[int, int], resample_mode: Any) -> Any:
        if image.size == size:
            return image
        return image.resize(size, resample_mode)


def compose_layers(
    background: Any,
    fill_buffer: Optional[Any] = None,
    stroke_layer: Optional[StrokeLayer] = None,
    target_size: Optional[Sequence[int]] = None,
    resample: str = DEFAULT_RESAMPLE,
) -> Any:
    """
    Compose layers, defaulting the target size to the background size.

    See Compositor.compose for arguments.
    """
    if target_size is None:
        target_size = background.size
    return Compositor.compose(background, fill_buffer, stroke_layer, target_size, resample)
