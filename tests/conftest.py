"""Shared fixtures for gpx2pdf tests.

The reference map is a 200 x 100 pixel raster in WGS 84 / UTM zone 33N with
10 m pixels and its upper-left corner at (500000, 4500000).
"""

from pathlib import Path

import fitz
import pytest
from pyproj import CRS, Transformer

from gpx2pdf.geotransform import Geotransform, apply_geotransform
from gpx2pdf.spatial_reference import GeospatialInfo
from gpx2pdf.waypoint import Waypoint

UTM_33N = "EPSG:32633"
UTM_GEOTRANSFORM: Geotransform = (500000.0, 10.0, 0.0, 4500000.0, 0.0, -10.0)
RASTER_WIDTH = 200
RASTER_HEIGHT = 100

_to_wgs84 = Transformer.from_crs(UTM_33N, "EPSG:4326", always_xy=True)


def waypoint_at_pixel(px: float, py: float, name: str, gt: Geotransform = UTM_GEOTRANSFORM) -> Waypoint:
    """Waypoint whose WGS84 position maps to pixel (px, py) of the UTM raster."""
    easting, northing = apply_geotransform(px, py, gt)
    lon, lat = _to_wgs84.transform(easting, northing)
    return Waypoint(latitude=lat, longitude=lon, name=name)


@pytest.fixture
def utm_info() -> GeospatialInfo:
    """Georeferencing of the reference map."""
    return GeospatialInfo(
        geotransform=UTM_GEOTRANSFORM,
        crs_wkt=CRS.from_user_input(UTM_33N).to_wkt(),
        width=RASTER_WIDTH,
        height=RASTER_HEIGHT,
    )


@pytest.fixture
def blank_pdf(tmp_path: Path) -> Path:
    """Two-page PDF; page 1 is 400 x 200 points (2 points per raster pixel)."""
    path = tmp_path / "map.pdf"
    doc = fitz.open()
    doc.new_page(width=400, height=200)
    doc.new_page(width=400, height=200)
    doc.save(str(path))
    doc.close()
    return path


@pytest.fixture
def pixel_waypoint():
    """Factory for waypoints placed at a given raster pixel."""
    return waypoint_at_pixel


def gpx_text(waypoints, version: str = "1.1") -> str:
    """Minimal GPX document with one ``<wpt>`` per waypoint."""
    namespace = f"http://www.topografix.com/GPX/{version.replace('.', '/')}"
    body = "".join(
        f'  <wpt lat="{wp.latitude!r}" lon="{wp.longitude!r}"><name>{wp.name}</name></wpt>\n'
        for wp in waypoints
    )
    return (
        '<?xml version="1.0" encoding="UTF-8"?>\n'
        f'<gpx version="{version}" creator="tests" xmlns="{namespace}">\n'
        f"{body}"
        "</gpx>\n"
    )


@pytest.fixture
def write_gpx(tmp_path: Path):
    """Write waypoints to ``tmp_path/<name>`` as GPX and return the path."""

    def _write(waypoints, name: str = "waypoints.gpx") -> Path:
        path = tmp_path / name
        path.write_text(gpx_text(waypoints), encoding="utf-8")
        return path

    return _write
