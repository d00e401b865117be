"""
Scanline flood fill over a PixelBuffer.

The engine repaints every pixel reachable from a seed through 4-connected
neighbors whose color matches the seed's original color within a tolerance.
Line art acts as the boundary because its color falls outside the tolerance.

Algorithm:
    1. Capture the seed's original color before any writes. All matches
       compare against this fixed color, never against the evolving raster.
    2. Keep an explicit stack of seeds, starting with the clicked point.
    3. Pop a seed and walk up its column to the topmost matching pixel.
    4. Walk down from there, painting each matching pixel.
    5. On each painted row, push the left and right neighbors once per
       contiguous matching run (reach_left / reach_right flags).
    6. Stop when the stack is empty or the pixel budget is used up.
    7. Commit the working copy back to the buffer in one write.

A visited mask keeps every pixel painted at most once, so the fill ends even
when the fill color itself falls within tolerance of the original color.

Example:
    >>> engine = FloodFillEngine(tolerance=40, max_pixels=1_000_000)
    >>> result = engine.fill(buffer, 12, 30, "#ff0000")
    >>> result.painted
    5120
"""

import logging
from typing import Optional, Union

from CB_Libs.constants import (
    DEFAULT_MAX_PIXELS,
    DEFAULT_TOLERANCE,
    FILL_STATUS_FILLED,
    FILL_STATUS_OUT_OF_BOUNDS,
    FILL_STATUS_UNCHANGED,
)
from CB_Libs.RasterLib.color_matcher import ColorMatcher
from CB_Libs.RasterLib.pixel_buffer import CHANNELS, PixelBuffer
from CB_Libs.RasterLib.raster_models import (
    ColorLike,
    FillBudget,
    FillResult,
    ToleranceSpec,
    normalize_rgb,
    opaque,
)

logger = logging.getLogger(__name__)


class FloodFillEngine:
    """
    Stack-based scanline region fill.

    The engine holds the tolerance and pixel budget; each call to `fill`
    works on the buffer it is given and keeps no state between calls.
    """

    def __init__(
        self,
        tolerance: Union[int, ToleranceSpec] = DEFAULT_TOLERANCE,
        max_pixels: Union[Optional[int], FillBudget] = DEFAULT_MAX_PIXELS,
    ):
        """
        Args:
            tolerance: Per-channel tolerance (int or ToleranceSpec)
            max_pixels: Pixel budget per fill (int, None for unbounded,
                        or FillBudget)

        Raises:
            ValueError: If tolerance or budget is out of range
        """
        self.matcher = ColorMatcher(tolerance)
        self.budget = max_pixels if isinstance(max_pixels, FillBudget) else FillBudget(max_pixels)

    @property
    def tolerance(self) -> int:
        return self.matcher.tolerance

    @property
    def max_pixels(self) -> Optional[int]:
        return self.budget.max_pixels

    def fill(self, buffer: PixelBuffer, x: int, y: int, color: ColorLike) -> FillResult:
        """
        Fill the region containing (x, y) with a color.

        Args:
            buffer: PixelBuffer to repaint in place
            x: Seed column in buffer coordinates
            y: Seed row in buffer coordinates
            color: Fill color; painted with alpha 255

        Returns:
            FillResult with the number of pixels painted. Seeds outside the
            buffer give status 'out_of_bounds' and leave the buffer untouched;
            status is 'unchanged' when every painted pixel already had the
            fill color

        Raises:
            ValueError: If color is malformed
        """
        seed = (x, y)
        fill_rgba = opaque(normalize_rgb(color))

        if not buffer.contains(x, y):
            logger.debug(f"Fill seed {seed} outside {buffer.width}x{buffer.height}, ignored")
            return FillResult(seed=seed, status=FILL_STATUS_OUT_OF_BOUNDS)

        original = buffer.get(x, y)
        width, height = buffer.size
        before = buffer.pixels
        data = bytearray(before)
        painted, exhausted = self._scanline_fill(data, width, height, x, y, original, fill_rgba)

        # No shortcut for a seed that already has the fill color: near
        # matches around it are repainted too
        status = FILL_STATUS_FILLED if data != before else FILL_STATUS_UNCHANGED
        if status == FILL_STATUS_FILLED:
            buffer.write_pixels(data)

        if exhausted:
            logger.info(
                f"Fill at {seed} stopped at pixel budget {self.budget.max_pixels}; "
                f"region left partially filled"
            )
        else:
            logger.debug(f"Fill at {seed} painted {painted} pixels")

        return FillResult(
            seed=seed,
            status=status,
            painted=painted,
            budget_exhausted=exhausted,
        )

    def _scanline_fill(self, data, width, height, seed_x, seed_y, original, fill_rgba):
        """Run the scanline fill on raw RGBA bytes. Returns (painted, exhausted)."""
        matches = self.matcher.matches
        budget = self.budget
        visited = bytearray(width * height)

        def is_fillable(px: int, py: int) -> bool:
            index = py * width + px
            if visited[index]:
                return False
            offset = index * CHANNELS
            return matches(data[offset:offset + 3], original)

        processed = 0
        stack = [(seed_x, seed_y)]

        while stack:
            x, y = stack.pop()
            if not is_fillable(x, y):
                continue

            while y > 0 and is_fillable(x, y - 1):
                y -= 1

            reach_left = False
            reach_right = False

            while y < height and is_fillable(x, y):
                index = y * width + x
                offset = index * CHANNELS
                data[offset:offset + CHANNELS] = bytes(fill_rgba)
                visited[index] = 1
                processed += 1

                if budget.is_exhausted(processed):
                    return processed, True

                if x > 0:
                    if is_fillable(x - 1, y):
                        if not reach_left:
                            stack.append((x - 1, y))
                            reach_left = True
                    else:
                        reach_left = False

                if x < width - 1:
                    if is_fillable(x + 1, y):
                        if not reach_right:
                            stack.append((x + 1, y))
                            reach_right = True
                    else:
                        reach_right = False

                y += 1

        return processed, False


def flood_fill(
    buffer: PixelBuffer,
    x: int,
    y: int,
    color: ColorLike,
    tolerance: int = DEFAULT_TOLERANCE,
    max_pixels: Optional[int] = DEFAULT_MAX_PIXELS,
) -> FillResult:
    """
    Fill the region containing (x, y) using a one-off engine.

    See FloodFillEngine.fill for arguments and return value.
    """
    return FloodFillEngine(tolerance=tolerance, max_pixels=max_pixels).fill(buffer, x, y, color)
