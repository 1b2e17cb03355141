"""Conversion from document raster pixels to PDF page units."""

from dataclasses import dataclass

from gpx2pdf.pixel_point import PagePoint, PixelPoint
from gpx2pdf.types import PageUnits, Pixels


@dataclass(frozen=True)
class PageGeometry:
    """Physical and raster size of one PDF page.

    The raster size comes from GDAL, which renders the page at some DPI it
    does not expose. Page units per pixel are therefore taken as
    ``page size / pixel count`` on each axis.

    Attributes:
        width_units: Page width in PDF points.
        height_units: Page height in PDF points.
        width_pixels: Raster width in pixels.
        height_pixels: Raster height in pixels.
    """

    width_units: PageUnits
    height_units: PageUnits
    width_pixels: Pixels
    height_pixels: Pixels

    def __post_init__(self) -> None:
        if self.width_pixels <= 0 or self.height_pixels <= 0:
            raise ValueError(
                f"Pixel dimensions must be positive, got "
                f"{self.width_pixels}x{self.height_pixels}"
            )

    @property
    def scale_x(self) -> float:
        return self.width_units / self.width_pixels

    @property
    def scale_y(self) -> float:
        return self.height_units / self.height_pixels

    def to_page_units(self, pixel: PixelPoint) -> PagePoint:
        """Scale a raster position into page units (origin top-left)."""
        return PagePoint(x=pixel.x * self.scale_x, y=pixel.y * self.scale_y)

    def contains(self, point: PagePoint) -> bool:
        """Return True if ``point`` lies on the page, edges included."""
        return 0 <= point.x <= self.width_units and 0 <= point.y <= self.height_units
