"""GPX waypoint file parser."""

import logging
import xml.etree.ElementTree as ET
from functools import cached_property
from pathlib import Path

from gpx2pdf.exceptions import GpxFileError, GpxParseError, NoWaypointsError
from gpx2pdf.gpx.name_policy import NamePolicy, local_name
from gpx2pdf.waypoint import Waypoint

logger = logging.getLogger(__name__)


class Gpx:
    """Parser for GPX files containing waypoints.

    Namespaces are ignored, so GPX 1.0 and 1.1 files with Groundspeak or GSAK
    extensions are read the same way.

    Args:
        gpx_text: GPX file content. Pass bytes to let the XML declaration
            choose the encoding.

    Raises:
        GpxParseError: If the content is not well-formed XML.

    Example:
        >>> gpx = Gpx(gpx_content)
        >>> for waypoint in gpx.waypoints(NamePolicy(max_length=None)):
        ...     print(f"{waypoint.name}: {waypoint.latitude}, {waypoint.longitude}")
    """

    def __init__(self, gpx_text: str | bytes):
        try:
            self._root = ET.fromstring(gpx_text)
        except ET.ParseError as e:
            raise GpxParseError(f"Unable to parse GPX file - GPX file is not valid: {e}") from e

    @classmethod
    def from_file(cls, path: str | Path) -> "Gpx":
        """Read and parse a GPX file.

        Raises:
            GpxFileError: If the file cannot be read.
            GpxParseError: If the file is not valid XML.
        """
        logger.info(f"Reading GPX file: {path}")
        try:
            data = Path(path).read_bytes()
        except OSError as e:
            raise GpxFileError(f"Unable to open GPX file for reading: {path}") from e
        return cls(data)

    @cached_property
    def wpt_elements(self) -> list[ET.Element]:
        """All ``<wpt>`` elements in document order."""
        return [el for el in self._root.iter() if local_name(el.tag) == "wpt"]

    def waypoints(self, policy: NamePolicy) -> list[Waypoint]:
        """Extract waypoints with names chosen by ``policy``.

        Waypoints without ``lat``/``lon`` attributes, with unparseable
        coordinates, or without a ``<name>`` element are skipped.
        """
        waypoints: list[Waypoint] = []

        for index, wpt in enumerate(self.wpt_elements):
            lat_text = wpt.get("lat")
            lon_text = wpt.get("lon")
            if lat_text is None or lon_text is None:
                logger.debug(f"Skipping wpt #{index}: missing lat/lon")
                continue

            name = policy.resolve(wpt)
            if name is None:
                logger.debug(f"Skipping wpt #{index}: no name")
                continue

            try:
                lat = float(lat_text)
                lon = float(lon_text)
            except ValueError:
                logger.debug(f"Skipping wpt #{index}: invalid coordinates ({lat_text}, {lon_text})")
                continue

            waypoints.append(Waypoint(latitude=lat, longitude=lon, name=name))

        return waypoints


def load_waypoints(path: str | Path, policy: NamePolicy) -> list[Waypoint]:
    """Read the waypoints of a GPX file.

    Raises:
        GpxFileError: If the file cannot be read.
        GpxParseError: If the file is not valid XML.
        NoWaypointsError: If the file has no usable waypoints.
    """
    waypoints = Gpx.from_file(path).waypoints(policy)
    logger.info(f"{len(waypoints)} waypoint(s) read")
    if not waypoints:
        raise NoWaypointsError(f"No waypoints found in GPX file: {path}")
    return waypoints
