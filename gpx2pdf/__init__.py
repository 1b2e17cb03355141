"""
gpx2pdf: place GPX waypoints on a georeferenced PDF map.

A GeoPDF carries a pixel-to-world affine transform and a spatial reference
for its map page. gpx2pdf uses them to find where each waypoint of a GPX file
falls on the page and draws it there as a marker with a name label.

Pipeline:
    - Spatial reference resolution: geotransform + WGS84 -> document CRS
      transformer (``resolve_reference``)
    - Coordinate mapping: lat/lon -> raster pixels (``CoordinateMapper``)
    - Page units: raster pixels -> PDF points (``PageGeometry``)
    - Overlay: markers and labels for on-page waypoints (``OverlayRenderer``)

Example Usage:
    >>> from gpx2pdf import Gpx2PdfConverter, ConversionConfig
    >>>
    >>> config = ConversionConfig(page_number=1, max_name_length=12)
    >>> converter = Gpx2PdfConverter("caches.gpx", "map.pdf", "map_marked.pdf", config)
    >>> result = converter.do_conversion()
    >>> print(f"{result.placed_count} placed, {result.skipped_count} off page")
"""

from gpx2pdf.config import ConversionConfig, get_default_config
from gpx2pdf.converter import GPX2PDF_VERSION, Gpx2PdfConverter, convert
from gpx2pdf.coordinate_mapper import CoordinateMapper, MappedWaypoint, map_to_pixels
from gpx2pdf.document import MapDocument, open_map_document
from gpx2pdf.overlay import OverlayRenderer, RenderResult
from gpx2pdf.page_units import PageGeometry
from gpx2pdf.spatial_reference import GeoReference, GeospatialInfo, resolve_reference
from gpx2pdf.waypoint import Waypoint

__all__ = [
    # Core
    'convert',
    'map_to_pixels',
    'CoordinateMapper',
    'MappedWaypoint',
    'GeoReference',
    'GeospatialInfo',
    'resolve_reference',
    'PageGeometry',
    'OverlayRenderer',
    'RenderResult',
    'Waypoint',

    # Documents and orchestration
    'MapDocument',
    'open_map_document',
    'Gpx2PdfConverter',

    # Configuration
    'ConversionConfig',
    'get_default_config',
]

# Package metadata
__version__ = GPX2PDF_VERSION
__description__ = 'Place GPX waypoints as labeled markers on a georeferenced PDF map'
