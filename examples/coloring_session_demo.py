"""
Coloring session walkthrough.

Builds a small line-art page, fills two regions, draws a stroke, erases part
of it and exports the page at two sizes. Also times a large fill to show the
pixel budget at work.

Run:
    python examples/coloring_session_demo.py [output_dir]
"""

import sys
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

import logging
import time
from PIL import Image, ImageDraw

from CB_Libs.constants import DEFAULT_CANVAS_HEIGHT, DEFAULT_CANVAS_WIDTH
from CB_Libs.SessionLib.session_config import ColoringConfig
from CB_Libs.SessionLib.session_registry import SessionRegistry


def build_page(width=DEFAULT_CANVAS_WIDTH, height=DEFAULT_CANVAS_HEIGHT):
    """Draw a page with a house outline."""
    page = Image.new("RGBA", (width, height), (255, 255, 255, 255))
    draw = ImageDraw.Draw(page)
    draw.rectangle((150, 180, 450, 360), outline=(0, 0, 0, 255), width=4)
    draw.polygon([(130, 180), (300, 60), (470, 180)], outline=(0, 0, 0, 255), width=4)
    draw.rectangle((270, 260, 330, 360), outline=(0, 0, 0, 255), width=4)
    return page


def demo_session(output_dir):
    print("\nColoring a page")
    print("-" * 60)

    registry = SessionRegistry(default_config=ColoringConfig(tolerance=40))
    session = registry.open_session("house-page", background=build_page())

    walls = session.fill(200, 300, "#f4a460")
    roof = session.fill(300, 150, "#b22222")
    print(f"Walls: {walls.painted} px, roof: {roof.painted} px")

    session.begin_stroke("#1e90ff", 6)
    for x in range(20, 580, 10):
        session.extend_stroke(x, 30)
    session.end_stroke()

    session.begin_eraser(12)
    for x in range(250, 350, 5):
        session.extend_stroke(x, 30)
    session.end_stroke()
    print(f"Strokes recorded: {session.strokes.path_count}")

    for size in [(600, 400), (800, 600)]:
        path = output_dir / f"{session.activity_id}_{size[0]}x{size[1]}.png"
        path.write_bytes(session.export_composite(size))
        print(f"Exported {size[0]}x{size[1]} -> {path}")

    registry.close_all()


def demo_budget():
    print("\nFill budget on a 2000x2000 blank page")
    print("-" * 60)

    registry = SessionRegistry()
    page = Image.new("RGBA", (2000, 2000), (255, 255, 255, 255))

    for budget in (100_000, 1_000_000):
        session = registry.open_session(
            f"budget-{budget}", background=page, config=ColoringConfig(max_pixels=budget)
        )
        start = time.time()
        result = session.fill(1000, 1000, "#00ff00")
        elapsed = time.time() - start
        print(
            f"max_pixels={budget:>9,}: painted {result.painted:>9,} px "
            f"in {elapsed:.2f}s (budget exhausted: {result.budget_exhausted})"
        )

    registry.close_all()


def main():
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    output_dir = Path(sys.argv[1]) if len(sys.argv) > 1 else Path("demo_output")
    output_dir.mkdir(parents=True, exist_ok=True)

    demo_session(output_dir)
    demo_budget()


if __name__ == "__main__":
    main()
