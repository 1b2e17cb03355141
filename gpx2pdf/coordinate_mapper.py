"""WGS84 latitude/longitude to document pixel coordinates."""

import logging
import math
from dataclasses import dataclass
from typing import Iterable, Optional

from pyproj.exceptions import ProjError

from gpx2pdf.exceptions import ConversionError, NoTransformLoadedError, TransformFailedError
from gpx2pdf.geotransform import invert_geotransform
from gpx2pdf.pixel_point import PixelPoint
from gpx2pdf.spatial_reference import GeoReference
from gpx2pdf.waypoint import Waypoint

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MappedWaypoint:
    """Outcome of mapping one waypoint.

    Exactly one of ``pixel`` and ``error`` is set.
    """

    waypoint: Waypoint
    pixel: Optional[PixelPoint] = None
    error: Optional[ConversionError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


class CoordinateMapper:
    """Map geographic coordinates onto the raster of a georeferenced document.

    Args:
        reference: Resolved spatial reference of the document.

    Example:
        >>> with resolve_reference(info) as reference:
        ...     mapper = CoordinateMapper(reference)
        ...     pixel = mapper.map_to_pixels(45.0, 15.0)
    """

    def __init__(self, reference: Optional[GeoReference]):
        self.reference = reference

    def map_to_pixels(self, lat: float, lon: float) -> PixelPoint:
        """Convert a WGS84 coordinate to fractional pixel coordinates.

        The point is first transformed into the document's CRS, then the
        document's geotransform is inverted. The result is not rounded.

        Args:
            lat: Latitude in decimal degrees.
            lon: Longitude in decimal degrees.

        Returns:
            PixelPoint with column and row of the coordinate.

        Raises:
            NoTransformLoadedError: If no live transformation is bound.
            TransformFailedError: If the coordinate cannot be transformed.
        """
        if self.reference is None or self.reference.transformer is None:
            raise NoTransformLoadedError("No coordinate transformation loaded")

        try:
            x, y = self.reference.transformer.transform(lon, lat, errcheck=True)
        except ProjError as e:
            raise TransformFailedError(f"Unable to transform ({lat}, {lon}): {e}") from e

        if not (math.isfinite(x) and math.isfinite(y)):
            raise TransformFailedError(f"Unable to transform ({lat}, {lon}): result is not finite")

        px, py = invert_geotransform(x, y, self.reference.geotransform)
        return PixelPoint(x=px, y=py)

    def map_waypoint(self, waypoint: Waypoint) -> MappedWaypoint:
        """Map a waypoint, capturing per-point transform failures in the result.

        Raises:
            NoTransformLoadedError: If no live transformation is bound; this is
                a sequencing error, not a per-point failure.
        """
        try:
            pixel = self.map_to_pixels(waypoint.latitude, waypoint.longitude)
        except TransformFailedError as e:
            logger.debug(f"Waypoint '{waypoint.name}' not converted: {e}")
            return MappedWaypoint(waypoint=waypoint, error=e)
        return MappedWaypoint(waypoint=waypoint, pixel=pixel)

    def map_waypoints(self, waypoints: Iterable[Waypoint]) -> list[MappedWaypoint]:
        """Map waypoints in order."""
        return [self.map_waypoint(waypoint) for waypoint in waypoints]


def map_to_pixels(reference: GeoReference, lat: float, lon: float) -> PixelPoint:
    """Convert a WGS84 coordinate to pixels of the document ``reference`` describes."""
    return CoordinateMapper(reference).map_to_pixels(lat, lon)
