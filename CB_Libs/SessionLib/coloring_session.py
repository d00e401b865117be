"""
Coloring session: the host-facing facade of the coloring engine.

A session owns one background image, the working PixelBuffer the fills are
baked into, and the StrokeLayer for freehand drawing. The host UI feeds it
buffer coordinates (see `to_buffer_point` for mapping from on-screen
coordinates) and asks it for an exported composite at any size.

No operation raises to the host. Pointer input outside the canvas, calls made
before the background has finished decoding and malformed colors or widths
all degrade to logged no-ops.

The session is single-threaded. `load_background_async` only decodes on the
executor; the host installs the decoded page from its own thread by calling
`poll_background`.

Example:
    >>> session = ColoringSession("activity-12")
    >>> session.load_background("pages/12.png")
    True
    >>> session.fill(40, 60, "#ffcc00")
    FillResult(seed=(40, 60), status='filled', painted=5312, budget_exhausted=False)
    >>> session.begin_stroke("#000000", 4)
    True
    >>> session.extend_stroke(10, 10)
    True
    >>> session.end_stroke()
    True
    >>> png_bytes = session.export_composite((800, 600))
"""

import logging
import math
from concurrent.futures import Executor, Future
from typing import Any, Callable, List, Optional, Sequence, Tuple

from CB_Libs.constants import FILL_STATUS_INVALID, FILL_STATUS_NOT_READY
from CB_Libs.CompositeLib.compositor import Compositor
from CB_Libs.CompositeLib.export_ops import encode_image
from CB_Libs.RasterLib.flood_fill import FloodFillEngine
from CB_Libs.RasterLib.image_loader import load_background_image
from CB_Libs.RasterLib.pixel_buffer import PixelBuffer
from CB_Libs.RasterLib.raster_models import ColorLike, FillResult
from CB_Libs.SessionLib.session_config import ColoringConfig
from CB_Libs.StrokeLib.stroke_layer import StrokeLayer

logger = logging.getLogger(__name__)

ReadyCallback = Callable[["ColoringSession"], None]


def map_display_point(
    x: float,
    y: float,
    display_size: Sequence[float],
    buffer_size: Sequence[int],
) -> Optional[Tuple[int, int]]:
    """
    Map a point on the displayed canvas element to buffer pixel coordinates.

    Args:
        x: Pointer x relative to the displayed element's left edge
        y: Pointer y relative to the displayed element's top edge
        display_size: (width, height) of the element as shown on screen
        buffer_size: (width, height) of the buffer's native resolution

    Returns:
        (column, row) in the buffer, or None when the point is outside the
        displayed element or the display size is degenerate
    """
    display_width, display_height = float(display_size[0]), float(display_size[1])
    if display_width <= 0 or display_height <= 0:
        return None
    if not (0 <= x < display_width and 0 <= y < display_height):
        return None

    buffer_width, buffer_height = int(buffer_size[0]), int(buffer_size[1])
    column = min(int(x * buffer_width / display_width), buffer_width - 1)
    row = min(int(y * buffer_height / display_height), buffer_height - 1)
    return column, row


class ColoringSession:
    """
    One active coloring page.

    The session is the single writer of its PixelBuffer and StrokeLayer.
    Both are created when the background finishes decoding and are reset
    to the background state by `clear()`.
    """

    def __init__(self, activity_id: str, config: Optional[ColoringConfig] = None):
        """
        Args:
            activity_id: Host identifier of the coloring activity
            config: Session settings; defaults if omitted
        """
        self.activity_id = str(activity_id)
        self.config = config if config is not None else ColoringConfig()
        self.engine = FloodFillEngine(
            tolerance=self.config.tolerance_spec,
            max_pixels=self.config.fill_budget,
        )
        self._background: Optional[Any] = None
        self._buffer: Optional[PixelBuffer] = None
        self._strokes: Optional[StrokeLayer] = None
        self._ready_callbacks: List[ReadyCallback] = []
        self._pending_load: Optional[Future] = None

    @property
    def is_ready(self) -> bool:
        return self._buffer is not None

    @property
    def size(self) -> Optional[Tuple[int, int]]:
        """Native (width, height) of the working buffer, or None before load."""
        return self._buffer.size if self._buffer is not None else None

    @property
    def buffer(self) -> Optional[PixelBuffer]:
        return self._buffer

    @property
    def strokes(self) -> Optional[StrokeLayer]:
        return self._strokes

    @property
    def background(self) -> Optional[Any]:
        return self._background

    def on_ready(self, callback: ReadyCallback) -> None:
        """
        Register a callback fired each time a background finishes loading.

        If the session is already ready the callback fires immediately.
        """
        self._ready_callbacks.append(callback)
        if self.is_ready:
            callback(self)

    def load_background(self, source: Any) -> bool:
        """
        Decode a background and reset the session onto it.

        Args:
            source: Path, encoded bytes, binary file object or PIL Image

        Returns:
            True when the background was installed; False if it could not be
            decoded (the session keeps its previous state)
        """
        self._pending_load = None
        try:
            image = load_background_image(source, self.config.paper_color)
        except (OSError, ValueError, TypeError) as e:
            logger.error(f"Activity {self.activity_id}: background load failed: {e}")
            return False

        self._install_background(image)
        return True

    def load_background_async(self, source: Any, executor: Executor) -> Future:
        """
        Decode a background on an executor.

        Only the decode runs on the executor. The session keeps its current
        state until the host calls `poll_background` after the returned
        future completes. A later load supersedes a pending one.

        Returns:
            Future resolving to the decoded RGBA image
        """
        logger.debug(f"Activity {self.activity_id}: background decode submitted")
        future = executor.submit(load_background_image, source, self.config.paper_color)
        self._pending_load = future
        return future

    def poll_background(self) -> bool:
        """
        Install a background decoded by `load_background_async`.

        Call from the host thread. Returns True when a new background was
        installed; False while the decode is still running, when nothing is
        pending or when the decode failed.
        """
        future = self._pending_load
        if future is None or not future.done():
            return False
        self._pending_load = None

        try:
            image = future.result()
        except (OSError, ValueError, TypeError) as e:
            logger.error(f"Activity {self.activity_id}: background load failed: {e}")
            return False

        self._install_background(image)
        return True

    def _install_background(self, image: Any) -> None:
        strokes = StrokeLayer(image.width, image.height, self.config.paper_color)
        buffer = PixelBuffer.from_image(image)
        self._background = image
        self._strokes = strokes
        self._buffer = buffer
        logger.info(
            f"Activity {self.activity_id}: background ready ({image.width}x{image.height})"
        )
        for callback in list(self._ready_callbacks):
            callback(self)

    def to_buffer_point(
        self, x: float, y: float, display_size: Sequence[float]
    ) -> Optional[Tuple[int, int]]:
        """Map on-screen coordinates to buffer coordinates (None if unmappable)."""
        if not self.is_ready:
            return None
        return map_display_point(x, y, display_size, self._buffer.size)

    def fill(self, x: float, y: float, color: Optional[ColorLike] = None) -> FillResult:
        """
        Flood fill the region containing (x, y).

        Args:
            x: Column in buffer coordinates
            y: Row in buffer coordinates
            color: Fill color; config.fill_color if omitted

        Returns:
            FillResult; status 'not_ready' before the background loads,
            'out_of_bounds' for seeds outside the buffer and 'invalid' for
            malformed coordinates or colors
        """
        if not self.is_ready:
            logger.debug(f"Activity {self.activity_id}: fill before background ready, ignored")
            return FillResult(seed=(x, y), status=FILL_STATUS_NOT_READY)

        fill_color = self.config.fill_color if color is None else color
        try:
            # Floor so -0.5 maps to column -1, outside the buffer
            column, row = math.floor(x), math.floor(y)
            return self.engine.fill(self._buffer, column, row, fill_color)
        except (TypeError, ValueError, OverflowError) as e:
            logger.warning(f"Activity {self.activity_id}: fill skipped: {e}")
            return FillResult(seed=(x, y), status=FILL_STATUS_INVALID)

    def begin_stroke(self, color: Optional[ColorLike] = None, width: Optional[float] = None) -> bool:
        """
        Start a freehand stroke.

        Returns False if the session is not ready or the color or width is
        invalid.
        """
        return self._begin(
            color=self.config.stroke_color if color is None else color,
            width=self.config.stroke_width if width is None else width,
        )

    def begin_eraser(self, width: Optional[float] = None) -> bool:
        """Start an eraser stroke painted with the paper color."""
        return self._begin(
            width=self.config.stroke_width if width is None else width,
            eraser=True,
        )

    def _begin(self, **stroke_args: Any) -> bool:
        if not self.is_ready:
            logger.debug(f"Activity {self.activity_id}: stroke before background ready, ignored")
            return False
        try:
            self._strokes.begin_stroke(**stroke_args)
        except (TypeError, ValueError) as e:
            logger.warning(f"Activity {self.activity_id}: stroke skipped: {e}")
            return False
        return True

    def extend_stroke(self, x: float, y: float) -> bool:
        """Add a point in buffer coordinates to the stroke in progress."""
        if not self.is_ready:
            return False
        try:
            return self._strokes.extend_stroke((x, y))
        except (TypeError, ValueError) as e:
            logger.warning(f"Activity {self.activity_id}: stroke point skipped: {e}")
            return False

    def end_stroke(self) -> bool:
        """Finish the stroke in progress. Returns True if a path was kept."""
        if not self.is_ready:
            return False
        return self._strokes.end_stroke() is not None

    def clear(self) -> None:
        """Reset fills and strokes to the loaded background."""
        if not self.is_ready:
            return
        self._buffer = PixelBuffer.from_image(self._background)
        self._strokes.clear()
        logger.info(f"Activity {self.activity_id}: cleared")

    def compose(self, target_size: Optional[Sequence[int]] = None) -> Optional[Any]:
        """
        Compose background, fill and strokes into one RGBA image.

        Args:
            target_size: (width, height) of the output; native size if omitted

        Returns:
            RGBA PIL Image, or None when not ready or target_size is invalid
        """
        if not self.is_ready:
            logger.debug(f"Activity {self.activity_id}: export before background ready, ignored")
            return None

        size = self._buffer.size if target_size is None else target_size
        try:
            return Compositor.compose(
                self._background,
                self._buffer,
                self._strokes,
                size,
                resample=self.config.resample,
            )
        except (TypeError, ValueError) as e:
            logger.warning(f"Activity {self.activity_id}: export skipped: {e}")
            return None

    def export_composite(
        self,
        target_size: Optional[Sequence[int]] = None,
        fmt: Optional[str] = None,
    ) -> Optional[bytes]:
        """
        Compose and encode the page.

        Args:
            target_size: (width, height) of the output; native size if omitted
            fmt: Lossless format; config.export_format if omitted

        Returns:
            Encoded image bytes, or None when not ready or arguments are invalid
        """
        image = self.compose(target_size)
        if image is None:
            return None
        try:
            return encode_image(image, self.config.export_format if fmt is None else fmt)
        except ValueError as e:
            logger.warning(f"Activity {self.activity_id}: export skipped: {e}")
            return None

    def close(self) -> None:
        """Release the background, buffer and strokes."""
        self._background = None
        self._buffer = None
        self._strokes = None
        self._ready_callbacks = []
        if self._pending_load is not None:
            self._pending_load.cancel()
            self._pending_load = None
        logger.info(f"Activity {self.activity_id}: session closed")

    def __repr__(self) -> str:
        state = f"{self.size[0]}x{self.size[1]}" if self.is_ready else "not ready"
        return f"ColoringSession({self.activity_id!r}, {state})"
