"""
Unit type annotations for numeric parameters.

These NewType aliases document which coordinate space a value lives in. A
waypoint travels through three of them: geographic degrees, document raster
pixels and page drawing units (PDF points).

Usage Example:
    >>> from gpx2pdf.types import Degrees, PageUnits, PixelsFloat
    >>>
    >>> def to_page(px: PixelsFloat, scale: float) -> PageUnits:
    ...     return PageUnits(px * scale)
"""

from typing import NewType

# Angular units
Degrees = NewType('Degrees', float)
"""Angle in degrees (latitude, longitude)"""

# Projected coordinates
WorldUnits = NewType('WorldUnits', float)
"""Coordinate in the document's native spatial reference (e.g., UTM meters)"""

# Raster coordinate units
Pixels = NewType('Pixels', int)
"""Raster dimensions in pixels (width, height)"""

PixelsFloat = NewType('PixelsFloat', float)
"""Floating-point raster coordinates in pixels (sub-pixel column/row)"""

# Page drawing units
PageUnits = NewType('PageUnits', float)
"""Position or size on the PDF page in points (1/72 inch)"""
