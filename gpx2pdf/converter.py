"""
GPX to GeoPDF conversion.

``convert`` is the core entry point: it resolves the page's spatial reference,
maps every waypoint to page units and draws the markers. ``Gpx2PdfConverter``
wraps it with file handling, mirroring the command line workflow:

    load_gpx()  ->  get_geospatial_data()  ->  save_pdf()

Example Usage:
    >>> converter = Gpx2PdfConverter("caches.gpx", "map.pdf", "map_marked.pdf")
    >>> result = converter.do_conversion()
    >>> print(f"{result.placed_count} waypoint(s) placed")
"""

import logging
from pathlib import Path
from typing import Optional, Sequence

from gpx2pdf.config import ConversionConfig, get_default_config
from gpx2pdf.coordinate_mapper import CoordinateMapper
from gpx2pdf.document import MapDocument, check_page_number, open_pdf, read_geospatial_info
from gpx2pdf.exceptions import AllWaypointsOffPageError
from gpx2pdf.gpx import load_waypoints
from gpx2pdf.overlay import MarkerStyle, OverlayRenderer, RenderResult
from gpx2pdf.page_units import PageGeometry
from gpx2pdf.pdf_surface import PdfPageSurface
from gpx2pdf.spatial_reference import GeospatialInfo, resolve_reference
from gpx2pdf.waypoint import Waypoint

logger = logging.getLogger(__name__)

GPX2PDF_VERSION = "1.0.0"


def convert(
    waypoints: Sequence[Waypoint],
    document: MapDocument,
    page_index: int,
    font_size: float,
) -> RenderResult:
    """
    Draw waypoints onto one page of a map document.

    The document is modified in memory only; call ``document.save`` to persist
    it. Nothing should be saved when this raises.

    Args:
        waypoints: Waypoints in drawing order.
        document: Opened map document; its ``geospatial`` info must describe
            the page at ``page_index``.
        page_index: Zero-based page index.
        font_size: Label font size in page units.

    Returns:
        RenderResult with placed, skipped and conversion error counts.

    Raises:
        InvalidPageIndexError: If the page does not exist.
        NotGeoreferencedError: If the page has no usable geotransform.
        InternalGeospatialError: If the page has no usable spatial reference.
        AllWaypointsOffPageError: If no waypoint could be placed.
    """
    page = document.page(page_index)
    width_units, height_units = document.page_size(page_index)

    with resolve_reference(document.geospatial) as reference:
        geometry = PageGeometry(
            width_units=width_units,
            height_units=height_units,
            width_pixels=reference.width,
            height_pixels=reference.height,
        )
        mapped = CoordinateMapper(reference).map_waypoints(waypoints)

    surface = PdfPageSurface(page, font_size=font_size)
    renderer = OverlayRenderer(surface, MarkerStyle(font_size=font_size))
    result = renderer.render(mapped, geometry)

    if result.placed_count == 0:
        raise AllWaypointsOffPageError(result)

    return result


class Gpx2PdfConverter:
    """Place the waypoints of a GPX file on a GeoPDF and save a copy.

    Args:
        gpx_file: GPX file with the waypoints.
        pdf_file_in: GeoPDF with the map; never modified.
        pdf_file_out: Where the annotated PDF is written.
        config: Conversion options (default: ``get_default_config()``).
    """

    def __init__(
        self,
        gpx_file: str | Path,
        pdf_file_in: str | Path,
        pdf_file_out: str | Path,
        config: Optional[ConversionConfig] = None,
    ):
        self.gpx_file = Path(gpx_file)
        self.pdf_file_in = Path(pdf_file_in)
        self.pdf_file_out = Path(pdf_file_out)
        self.config = config or get_default_config()

        self.waypoints: list[Waypoint] = []
        self.geospatial: Optional[GeospatialInfo] = None

    def load_gpx(self) -> list[Waypoint]:
        """Read waypoints from the GPX file.

        Raises:
            GpxFileError, GpxParseError, NoWaypointsError
        """
        self.waypoints = load_waypoints(self.gpx_file, self.config.name_policy)
        return self.waypoints

    def get_geospatial_data(self) -> GeospatialInfo:
        """Read georeferencing metadata of the configured page.

        The page number is checked against the PDF first, so a page past the
        end is reported as such rather than as a GDAL open failure.

        Raises:
            DocumentOpenError: If the PDF cannot be opened.
            InvalidPageIndexError: If the configured page does not exist.
        """
        with open_pdf(self.pdf_file_in, self.config.pdf_password) as pdf:
            check_page_number(pdf, self.config.page_number)

        self.geospatial = read_geospatial_info(
            self.pdf_file_in, self.config.pdf_password, self.config.page_number
        )
        return self.geospatial

    def save_pdf(self) -> RenderResult:
        """Overlay the loaded waypoints and write the output PDF.

        Raises:
            ValueError: If called before ``load_gpx`` and ``get_geospatial_data``.
            Gpx2PdfError: Any error from ``convert`` or writing the file.
        """
        if self.geospatial is None:
            raise ValueError("Geospatial data not loaded. Call get_geospatial_data() first.")

        with open_pdf(self.pdf_file_in, self.config.pdf_password) as pdf:
            document = MapDocument(pdf=pdf, geospatial=self.geospatial, path=self.pdf_file_in)
            result = convert(
                self.waypoints,
                document,
                self.config.page_number - 1,
                self.config.name_font_size,
            )
            document.save(self.pdf_file_out)

        return result

    def do_conversion(self) -> RenderResult:
        """Run ``load_gpx``, ``get_geospatial_data`` and ``save_pdf`` in order."""
        logger.info(f"gpx2pdf version {GPX2PDF_VERSION}")
        self.load_gpx()
        self.get_geospatial_data()
        return self.save_pdf()
