"""
Tolerance-based color equality for region fills.

Two colors match when each of their first three channels differs by strictly
less than the tolerance. Alpha is ignored. The comparison is symmetric, so it
does not matter which side is the buffer color and which is the reference.
"""

from typing import Sequence, Union

from CB_Libs.RasterLib.raster_models import ToleranceSpec


def colors_match(color: Sequence[int], reference: Sequence[int], tolerance: int) -> bool:
    """
    Check whether two colors are the same within a per-channel tolerance.

    Args:
        color: Color read from the buffer (RGB or RGBA)
        reference: Color to compare against (RGB or RGBA)
        tolerance: Strict upper bound on each channel's absolute difference

    Returns:
        True if every RGB channel differs by less than tolerance
    """
    return (
        abs(color[0] - reference[0]) < tolerance
        and abs(color[1] - reference[1]) < tolerance
        and abs(color[2] - reference[2]) < tolerance
    )


class ColorMatcher:
    """Binds a tolerance for the duration of one fill operation."""

    def __init__(self, tolerance: Union[int, ToleranceSpec] = ToleranceSpec()):
        if not isinstance(tolerance, ToleranceSpec):
            tolerance = ToleranceSpec(tolerance)
        self._tolerance = tolerance

    @property
    def tolerance(self) -> int:
        return self._tolerance.value

    def matches(self, color: Sequence[int], reference: Sequence[int]) -> bool:
        return colors_match(color, reference, self._tolerance.value)

    def __repr__(self) -> str:
        return f"ColorMatcher(tolerance={self._tolerance.value})"
