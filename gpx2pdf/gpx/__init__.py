"""GPX waypoint input."""

from gpx2pdf.gpx.gpx import Gpx, load_waypoints
from gpx2pdf.gpx.name_policy import NamePolicy

__all__ = ["Gpx", "NamePolicy", "load_waypoints"]
