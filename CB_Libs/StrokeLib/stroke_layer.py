"""
Freehand stroke layer.

Records pointer-drag input as vector paths kept apart from the raster fill,
so strokes stay resolution independent until export and can be cleared
without touching the filled raster.

An eraser is a stroke painted with the paper color. It only hides what lies
under it when the art underneath is plain paper; it does not punch through
to transparency.

Example:
    >>> layer = StrokeLayer(600, 400)
    >>> layer.begin_stroke("#000000", 4)
    >>> layer.extend_stroke((10, 10))
    >>> layer.extend_stroke((50, 40))
    >>> layer.end_stroke()
    >>> overlay = layer.render((1200, 800))
"""

import logging
from dataclasses import dataclass, field
from typing import Any, List, Optional, Sequence, Tuple

from CB_Libs.constants import (
    DEFAULT_STROKE_COLOR,
    DEFAULT_STROKE_WIDTH,
    MAX_STROKE_WIDTH,
    PAPER_COLOR,
    TRANSPARENT,
)
from CB_Libs.pillow_compat import Image, ImageDraw
from CB_Libs.RasterLib.raster_models import ColorLike, RgbColor, normalize_rgb, opaque

logger = logging.getLogger(__name__)

StrokePoint = Tuple[float, float]


@dataclass
class StrokePath:
    """One continuous freehand gesture.

    Attributes:
        color: RGB stroke color, rendered fully opaque
        width: Stroke width in buffer pixels
        points: Ordered points in buffer coordinates
        eraser: True when the stroke paints the paper color as an eraser
    """
    color: RgbColor
    width: float = DEFAULT_STROKE_WIDTH
    points: List[StrokePoint] = field(default_factory=list)
    eraser: bool = False

    def __post_init__(self):
        if not (0 < self.width <= MAX_STROKE_WIDTH):
            raise ValueError(f"width must be 0-{MAX_STROKE_WIDTH}, got {self.width}")

    def add_point(self, point: StrokePoint) -> None:
        self.points.append((float(point[0]), float(point[1])))

    def to_dict(self):
        """Convert to dictionary."""
        return {
            "color": list(self.color),
            "width": self.width,
            "points": [list(point) for point in self.points],
            "eraser": self.eraser,
        }


class StrokeLayer:
    """Append-only collection of stroke paths over a fixed-size canvas."""

    def __init__(self, width: int, height: int, paper_color: ColorLike = PAPER_COLOR):
        """
        Args:
            width: Canvas width in buffer pixels (> 0)
            height: Canvas height in buffer pixels (> 0)
            paper_color: Color painted by eraser strokes

        Raises:
            ValueError: If width or height is not positive
        """
        if width <= 0 or height <= 0:
            raise ValueError(f"Layer size must be positive, got {width}x{height}")
        self._width = int(width)
        self._height = int(height)
        self._paper_color = normalize_rgb(paper_color)
        self._paths: List[StrokePath] = []
        self._active: Optional[StrokePath] = None

    @property
    def size(self) -> Tuple[int, int]:
        return self._width, self._height

    @property
    def paths(self) -> List[StrokePath]:
        """Completed paths followed by the stroke in progress, if any."""
        paths = list(self._paths)
        if self._active is not None and self._active.points:
            paths.append(self._active)
        return paths

    @property
    def path_count(self) -> int:
        return len(self.paths)

    @property
    def is_drawing(self) -> bool:
        return self._active is not None

    def contains(self, point: Sequence[float]) -> bool:
        x, y = point[0], point[1]
        return 0 <= x < self._width and 0 <= y < self._height

    def begin_stroke(
        self,
        color: ColorLike = DEFAULT_STROKE_COLOR,
        width: float = DEFAULT_STROKE_WIDTH,
        eraser: bool = False,
    ) -> StrokePath:
        """
        Start a new stroke. A stroke already in progress is ended first.

        Args:
            color: Stroke color; ignored for erasers, which use the paper color
            width: Stroke width in buffer pixels
            eraser: Paint with the paper color

        Returns:
            The new, empty StrokePath

        Raises:
            ValueError: If color or width is invalid
        """
        stroke_color = self._paper_color if eraser else normalize_rgb(color)
        path = StrokePath(color=stroke_color, width=width, eraser=eraser)

        if self._active is not None:
            self.end_stroke()
        self._active = path
        logger.debug(f"Stroke started: color={stroke_color} width={width} eraser={eraser}")
        return path

    def extend_stroke(self, point: Sequence[float]) -> bool:
        """
        Append a point to the stroke in progress.

        Returns:
            True if the point was recorded; False when no stroke is active or
            the point lies outside the layer
        """
        if self._active is None:
            return False
        if not self.contains(point):
            logger.debug(f"Stroke point {tuple(point)} outside {self._width}x{self._height}, ignored")
            return False
        self._active.add_point(point)
        return True

    def end_stroke(self) -> Optional[StrokePath]:
        """
        Finish the stroke in progress.

        Returns:
            The completed StrokePath, or None if nothing was drawn
        """
        stroke = self._active
        self._active = None
        if stroke is None or not stroke.points:
            return None
        self._paths.append(stroke)
        logger.debug(f"Stroke ended with {len(stroke.points)} points")
        return stroke

    def clear(self) -> None:
        self._paths = []
        self._active = None

    def render(self, target_size: Optional[Tuple[int, int]] = None) -> Any:
        """
        Rasterize every path onto a transparent RGBA image.

        Points and widths are scaled from the layer size to target_size.

        Args:
            target_size: (width, height) of the output; defaults to layer size

        Returns:
            RGBA PIL Image of target_size

        Raises:
            ValueError: If target_size is not positive
        """
        if target_size is None:
            target_size = self.size
        target_width, target_height = int(target_size[0]), int(target_size[1])
        if target_width <= 0 or target_height <= 0:
            raise ValueError(f"Target size must be positive, got {target_size}")

        scale_x = target_width / self._width
        scale_y = target_height / self._height
        width_scale = (scale_x + scale_y) / 2.0

        canvas = Image.new("RGBA", (target_width, target_height), TRANSPARENT)
        draw = ImageDraw.Draw(canvas)

        for path in self.paths:
            points = [(x * scale_x, y * scale_y) for x, y in path.points]
            line_width = max(1, int(round(path.width * width_scale)))
            self._draw_path(draw, points, opaque(path.color), line_width)

        return canvas

    @staticmethod
    def _draw_path(draw: Any, points: List[StrokePoint], color, line_width: int) -> None:
        if len(points) > 1:
            draw.line(points, fill=color, width=line_width, joint="curve")

        # Round caps (and single-point dots)
        radius = line_width / 2.0
        if radius < 1:
            draw.point(points[0], fill=color)
            draw.point(points[-1], fill=color)
            return
        for x, y in (points[0], points[-1]):
            draw.ellipse((x - radius, y - radius, x + radius, y + radius), fill=color)
