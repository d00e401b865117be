"""
Pytest configuration and shared fixtures for coloring engine tests.

This module provides shared test fixtures and configuration
used across multiple test modules.
"""

import pytest
from PIL import Image, ImageDraw

from CB_Libs.RasterLib.pixel_buffer import PixelBuffer


WHITE = (255, 255, 255, 255)
BLACK = (0, 0, 0, 255)
RED = (255, 0, 0, 255)


@pytest.fixture
def divided_buffer():
    """
    Provide a 10x10 white buffer split by a black line at column 5.

    Returns:
        PixelBuffer with column x=5 black and everything else white
    """
    buffer = PixelBuffer(10, 10, WHITE)
    for y in range(10):
        buffer.set(5, y, BLACK)
    return buffer


@pytest.fixture
def line_art_image():
    """
    Provide a 60x40 line-art page: white paper with a closed black square.

    The square outline spans (10, 10)-(30, 30) with a 2 px stroke.

    Returns:
        RGBA PIL Image
    """
    image = Image.new("RGBA", (60, 40), WHITE)
    draw = ImageDraw.Draw(image)
    draw.rectangle((10, 10, 30, 30), outline=BLACK, width=2)
    return image


@pytest.fixture
def line_art_png(tmp_path, line_art_image):
    """
    Provide the line-art page saved as a PNG file.

    Returns:
        Path to the PNG file
    """
    path = tmp_path / "page.png"
    line_art_image.save(path, format="PNG")
    return path


@pytest.fixture
def sample_rgba_colors():
    """
    Provide a list of sample RGBA color tuples for testing.

    Returns:
        List of (R, G, B, A) tuples with common test colors
    """
    return [
        (255, 0, 0, 255),    # Red
        (0, 255, 0, 255),    # Green
        (0, 0, 255, 255),    # Blue
        (255, 255, 255, 255),  # White
        (0, 0, 0, 255),      # Black
        (128, 128, 128, 255),  # Gray
    ]
