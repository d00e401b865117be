"""
CB_Libs - Coloring Book Library Modules

This package contains the raster coloring engine, organized into
specialized sub-packages:

- RasterLib: Pixel buffer, color matching, scanline flood fill, background loading
- StrokeLib: Freehand stroke capture and rendering
- CompositeLib: Export composition and encoding
- SessionLib: Session configuration, host-facing session facade and registry
"""

__version__ = "0.1.0"
