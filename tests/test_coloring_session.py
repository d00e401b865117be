"""
Tests for the ColoringSession host facade.

Tests cover:
- Readiness: every operation is a no-op before the background decodes
- Synchronous and executor-based background loading
- Fill and stroke operations with default settings
- Display-to-buffer coordinate mapping
- clear() restoring the background exactly
- Exporting composites at other sizes
"""

import io
import threading
import unittest
from concurrent.futures import Future, ThreadPoolExecutor

import pytest
from PIL import Image, ImageDraw

from CB_Libs.SessionLib.coloring_session import ColoringSession, map_display_point
from CB_Libs.SessionLib.session_config import ColoringConfig

WHITE = (255, 255, 255, 255)
BLACK = (0, 0, 0, 255)
RED = (255, 0, 0, 255)


def _decode(data):
    return Image.open(io.BytesIO(data)).convert("RGBA")


class TestNotReady(unittest.TestCase):
    """Test operations before the background is loaded."""

    def setUp(self):
        self.session = ColoringSession("activity-1")

    def test_not_ready_initially(self):
        """Test a new session has no buffer."""
        self.assertFalse(self.session.is_ready)
        self.assertIsNone(self.session.size)
        self.assertIsNone(self.session.buffer)

    def test_fill_is_noop(self):
        """Test fill reports not_ready instead of raising."""
        result = self.session.fill(3, 3, "#ff0000")

        self.assertEqual(result.status, "not_ready")
        self.assertEqual(result.painted, 0)

    def test_strokes_are_noops(self):
        """Test stroke calls return False."""
        self.assertFalse(self.session.begin_stroke())
        self.assertFalse(self.session.begin_eraser())
        self.assertFalse(self.session.extend_stroke(1, 1))
        self.assertFalse(self.session.end_stroke())

    def test_export_returns_none(self):
        """Test exporting before load yields nothing."""
        self.assertIsNone(self.session.compose())
        self.assertIsNone(self.session.export_composite((10, 10)))

    def test_clear_and_mapping_are_noops(self):
        """Test clear and coordinate mapping do nothing."""
        self.session.clear()
        self.assertIsNone(self.session.to_buffer_point(5, 5, (100, 100)))


class TestLoading:
    """Tests for background loading."""

    def test_load_from_path(self, line_art_png):
        """Should become ready with the image size."""
        session = ColoringSession("a")

        assert session.load_background(line_art_png)
        assert session.is_ready
        assert session.size == (60, 40)
        assert session.strokes.size == (60, 40)

    def test_failed_load_keeps_not_ready(self, tmp_path):
        """Should return False and stay not ready on decode failure."""
        bad = tmp_path / "bad.png"
        bad.write_bytes(b"garbage")
        session = ColoringSession("a")

        assert session.load_background(bad) is False
        assert not session.is_ready
        assert session.fill(0, 0).status == "not_ready"

    def test_failed_reload_keeps_previous_page(self, line_art_image, tmp_path):
        """Should keep the current page when a new load fails."""
        session = ColoringSession("a")
        session.load_background(line_art_image)

        assert session.load_background(tmp_path / "missing.png") is False
        assert session.size == (60, 40)

    def test_on_ready_callbacks(self, line_art_image):
        """Should notify listeners on load, and immediately once ready."""
        session = ColoringSession("a")
        seen = []
        session.on_ready(lambda s: seen.append(("early", s.size)))

        session.load_background(line_art_image)
        session.on_ready(lambda s: seen.append(("late", s.size)))

        assert seen == [("early", (60, 40)), ("late", (60, 40))]

    def test_async_load_installs_on_poll(self, line_art_png):
        """Should stay not ready until the host polls the finished decode."""
        session = ColoringSession("a")
        with ThreadPoolExecutor(max_workers=1) as executor:
            future = session.load_background_async(line_art_png, executor)
            assert future.result(timeout=10).size == (60, 40)

        assert not session.is_ready
        assert session.poll_background()
        assert session.is_ready
        assert session.fill(20, 20, "#ff0000").painted > 0
        assert not session.poll_background()

    def test_async_ready_callbacks_run_on_polling_thread(self, line_art_png):
        """Should install and notify from the thread that polls."""
        session = ColoringSession("a")
        threads = []
        session.on_ready(lambda s: threads.append(threading.get_ident()))

        with ThreadPoolExecutor(max_workers=1) as executor:
            session.load_background_async(line_art_png, executor).result(timeout=10)

        assert threads == []
        session.poll_background()
        assert threads == [threading.get_ident()]

    def test_poll_while_decoding(self):
        """Should report nothing installed while the decode is running."""
        pending = Future()

        class _HeldExecutor:
            def submit(self, fn, *args):
                return pending

        session = ColoringSession("a")
        session.load_background_async("page.png", _HeldExecutor())

        assert session.poll_background() is False
        assert not session.is_ready

    def test_async_load_failure(self, tmp_path):
        """Should log and stay not ready for undecodable sources."""
        session = ColoringSession("a")
        with ThreadPoolExecutor(max_workers=1) as executor:
            future = session.load_background_async(tmp_path / "nope.png", executor)
            future.exception(timeout=10)

        assert session.poll_background() is False
        assert not session.is_ready

    def test_sync_load_supersedes_pending_decode(self, line_art_png):
        """Should drop a pending decode once a newer page is loaded."""
        session = ColoringSession("a")
        with ThreadPoolExecutor(max_workers=1) as executor:
            session.load_background_async(line_art_png, executor).result(timeout=10)
        small = Image.new("RGBA", (5, 5), WHITE)

        session.load_background(small)

        assert session.poll_background() is False
        assert session.size == (5, 5)

    def test_transparent_art_flattened(self):
        """Should treat transparent regions as paper."""
        art = Image.new("RGBA", (4, 4), (0, 0, 0, 0))
        session = ColoringSession("a")
        session.load_background(art)

        assert session.buffer.get(0, 0) == WHITE


class TestFillAndStrokes:
    """Tests for drawing operations."""

    @pytest.fixture
    def session(self, line_art_image):
        session = ColoringSession("page-3")
        session.load_background(line_art_image)
        return session

    def test_fill_inside_shape(self, session):
        """Should fill the enclosed region with the requested color."""
        result = session.fill(20, 20, "#ff0000")

        assert result.status == "filled"
        assert session.buffer.get(20, 20) == RED
        assert session.buffer.get(5, 5) == WHITE

    def test_fill_uses_default_color(self, session):
        """Should use config.fill_color when no color is given."""
        session.fill(20, 20)
        assert session.buffer.get(20, 20) == RED

    def test_fill_out_of_bounds_is_noop(self, session):
        """Should ignore seeds outside the buffer."""
        before = session.buffer.pixels

        result = session.fill(60, 5, "#ff0000")

        assert result.status == "out_of_bounds"
        assert session.buffer.pixels == before

    def test_fill_negative_fractional_seed_is_out_of_bounds(self, session):
        """Should reject seeds just left of or above the buffer."""
        before = session.buffer.pixels

        assert session.fill(-0.5, 3, "#ff0000").status == "out_of_bounds"
        assert session.fill(3, -0.25, "#ff0000").status == "out_of_bounds"
        assert session.buffer.pixels == before

    def test_fill_fractional_seed_floors(self, session):
        """Should fill the pixel containing a fractional seed."""
        result = session.fill(20.9, 20.9, "#ff0000")

        assert result.seed == (20, 20)
        assert result.status == "filled"

    def test_fill_invalid_color_is_noop(self, session):
        """Should report an invalid fill instead of raising."""
        before = session.buffer.pixels

        result = session.fill(2, 2, "not-a-color")

        assert result.status == "invalid"
        assert result.painted == 0
        assert session.buffer.pixels == before

    def test_fill_invalid_coordinates_is_noop(self, session):
        """Should report an invalid fill for non-numeric coordinates."""
        assert session.fill("left", 2).status == "invalid"
        assert session.fill(float("nan"), 2).status == "invalid"

    def test_fill_respects_configured_budget(self, line_art_image):
        """Should stop at the configured pixel budget."""
        session = ColoringSession("a", ColoringConfig(max_pixels=10))
        session.load_background(line_art_image)

        result = session.fill(20, 20, "#ff0000")

        assert result.painted == 10
        assert result.budget_exhausted

    def test_stroke_with_defaults(self, session):
        """Should record strokes with configured color and width."""
        assert session.begin_stroke()
        assert session.extend_stroke(40, 5)
        assert session.extend_stroke(55, 5)
        assert session.end_stroke()

        path = session.strokes.paths[0]
        assert path.color == (0, 0, 0)
        assert path.width == 4

    def test_eraser_stroke(self, session):
        """Should record eraser strokes in the paper color."""
        session.begin_eraser(8)
        session.extend_stroke(20, 20)
        session.end_stroke()

        path = session.strokes.paths[0]
        assert path.eraser
        assert path.color == (255, 255, 255)

    def test_stroke_point_outside_ignored(self, session):
        """Should drop pointer samples outside the canvas."""
        session.begin_stroke("#0000ff", 2)
        assert not session.extend_stroke(-3, 5)
        assert not session.end_stroke()
        assert session.strokes.path_count == 0

    def test_invalid_stroke_settings_are_noops(self, session):
        """Should return False instead of raising for bad colors or widths."""
        assert session.begin_stroke("#000000", 0) is False
        assert session.begin_stroke("not-a-color", 4) is False
        assert session.begin_eraser(-3) is False
        assert not session.strokes.is_drawing

    def test_invalid_stroke_point_is_noop(self, session):
        """Should ignore non-numeric pointer samples."""
        session.begin_stroke("#000000", 2)

        assert session.extend_stroke("x", 5) is False
        assert session.extend_stroke(5, 5)


class TestClearAndExport:
    """Tests for clear() and exporting."""

    @pytest.fixture
    def session(self, line_art_image):
        session = ColoringSession("page-9")
        session.load_background(line_art_image)
        return session

    def test_clear_then_export_reproduces_background(self, session, line_art_image):
        """Should export the original background after clearing."""
        session.fill(20, 20, "#ff0000")
        session.fill(0, 0, "#00ff00")
        session.begin_stroke("#0000ff", 6)
        session.extend_stroke(1, 1)
        session.extend_stroke(50, 30)
        session.end_stroke()

        session.clear()
        exported = _decode(session.export_composite())

        assert session.strokes.path_count == 0
        assert list(exported.getdata()) == list(line_art_image.getdata())

    def test_clear_is_idempotent(self, session, line_art_image):
        """Should give the same result when cleared twice."""
        session.fill(20, 20, "#ff0000")
        session.clear()
        first = session.export_composite()
        session.clear()

        assert session.export_composite() == first

    def test_export_other_size(self):
        """Should export a 1100x700 page at 800x600 with every layer scaled."""
        page = Image.new("RGBA", (1100, 700), WHITE)
        ImageDraw.Draw(page).rectangle((100, 100, 299, 299), outline=BLACK, width=6)
        session = ColoringSession("big")
        session.load_background(page)

        session.fill(200, 200, "#ff0000")
        session.begin_stroke("#0000ff", 10)
        session.extend_stroke(800, 350)
        session.extend_stroke(1000, 350)
        session.end_stroke()

        exported = _decode(session.export_composite((800, 600)))

        assert exported.size == (800, 600)
        # (200, 200) -> (145, 171); inside the filled square
        assert exported.getpixel((145, 171)) == RED
        # (900, 350) -> (655, 300); on the stroke
        assert exported.getpixel((655, 300)) == (0, 0, 255, 255)
        # Paper far from any art
        assert exported.getpixel((400, 550)) == WHITE

    def test_export_defaults_to_native_png(self, session):
        """Should encode PNG at the buffer size by default."""
        data = session.export_composite()

        assert data.startswith(b"\x89PNG")
        assert _decode(data).size == (60, 40)

    def test_export_other_format(self, session):
        """Should honor an explicit lossless format."""
        assert session.export_composite(fmt="BMP").startswith(b"BM")

    def test_invalid_export_arguments_are_noops(self, session):
        """Should return None instead of raising for bad sizes or formats."""
        assert session.export_composite((0, 10)) is None
        assert session.export_composite(fmt="JPEG") is None

    def test_close_releases_state(self, session):
        """Should drop everything and stop accepting operations."""
        session.close()

        assert not session.is_ready
        assert session.background is None
        assert session.export_composite() is None


class TestCoordinateMapping:
    """Tests for display-to-buffer mapping."""

    def test_scales_by_display_ratio(self):
        """Should scale by native size / displayed size."""
        assert map_display_point(300, 200, (600, 400), (1200, 800)) == (600, 400)
        assert map_display_point(0, 0, (600, 400), (1200, 800)) == (0, 0)

    def test_downscaled_buffer(self):
        """Should map to smaller buffers."""
        assert map_display_point(599.9, 399.9, (600, 400), (60, 40)) == (59, 39)

    def test_outside_display_is_none(self):
        """Should reject points outside the displayed element."""
        assert map_display_point(-1, 5, (600, 400), (60, 40)) is None
        assert map_display_point(600, 5, (600, 400), (60, 40)) is None
        assert map_display_point(5, 400, (600, 400), (60, 40)) is None

    def test_degenerate_display_is_none(self):
        """Should reject zero-sized displays."""
        assert map_display_point(0, 0, (0, 400), (60, 40)) is None

    def test_session_mapping(self, line_art_image):
        """Should map through the session's buffer size."""
        session = ColoringSession("a")
        session.load_background(line_art_image)

        assert session.to_buffer_point(150, 100, (300, 200)) == (30, 20)
