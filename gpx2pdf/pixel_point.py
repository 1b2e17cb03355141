"""Pixel and page coordinate representations."""

from dataclasses import dataclass

from gpx2pdf.types import PageUnits, PixelsFloat


@dataclass(frozen=True)
class PixelPoint:
    """Fractional pixel coordinates in the document raster.

    Attributes:
        x: Pixel x coordinate (column).
        y: Pixel y coordinate (row).
    """

    x: PixelsFloat
    y: PixelsFloat


@dataclass(frozen=True)
class PagePoint:
    """Position on a PDF page in drawing units, origin at the top-left corner.

    Attributes:
        x: Distance from the left page edge.
        y: Distance from the top page edge.
    """

    x: PageUnits
    y: PageUnits
