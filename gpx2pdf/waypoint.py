"""Geographic waypoint to be placed on a map page."""

from dataclasses import dataclass

from gpx2pdf.types import Degrees


@dataclass(frozen=True)
class Waypoint:
    """Named WGS84 point.

    Attributes:
        latitude: Latitude in decimal degrees (WGS84).
        longitude: Longitude in decimal degrees (WGS84).
        name: Display name, already resolved and truncated.
    """

    latitude: Degrees
    longitude: Degrees
    name: str
