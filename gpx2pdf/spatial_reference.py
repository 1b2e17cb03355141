"""
Spatial reference resolution for georeferenced map documents.

A document is usable when it carries both a pixel-to-world affine
geotransform and a coordinate reference system. This module turns that raw
metadata into a ``GeoReference``: the geotransform plus a pyproj
``Transformer`` from WGS84 into the document's CRS.

The transformer is owned by exactly one ``GeoReference`` and released when
the run that created it ends:

    >>> with resolve_reference(info) as reference:
    ...     mapper = CoordinateMapper(reference)
    ...     point = mapper.map_to_pixels(lat, lon)

Coordinate order:
    All transformers are built with ``always_xy=True`` so geographic input is
    always (longitude, latitude) and projected output is (easting, northing),
    whatever axis order the CRS definition declares.
"""

import logging
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Iterator, Optional

from pyproj import CRS, Transformer
from pyproj.exceptions import CRSError, ProjError

from gpx2pdf.exceptions import InternalGeospatialError, NotGeoreferencedError
from gpx2pdf.geotransform import Geotransform, determinant, is_invertible

logger = logging.getLogger(__name__)

# Source reference for every waypoint. Shared, never mutated.
WGS84 = CRS.from_epsg(4326)


@dataclass(frozen=True)
class GeospatialInfo:
    """Georeferencing metadata read from one page of a map document.

    Attributes:
        geotransform: Pixel-to-world affine, or None when the page is not
            georeferenced.
        crs_wkt: WKT of the page's native spatial reference, or None.
        width: Raster width in pixels.
        height: Raster height in pixels.
    """

    geotransform: Optional[Geotransform]
    crs_wkt: Optional[str]
    width: int
    height: int


class GeoReference:
    """Resolved spatial reference for one conversion run.

    Holds its own copy of the destination CRS and the WGS84 -> CRS
    transformer. After ``close()`` both are dropped and ``transformer`` is
    None.
    """

    def __init__(self, geotransform: Geotransform, crs: CRS, width: int, height: int):
        self.geotransform = geotransform
        self.width = width
        self.height = height
        self.crs: Optional[CRS] = crs
        self.transformer: Optional[Transformer] = Transformer.from_crs(
            WGS84, crs, always_xy=True
        )

    @property
    def is_loaded(self) -> bool:
        """Return True while the coordinate transformation is available."""
        return self.transformer is not None

    def close(self) -> None:
        """Release the transformer and destination CRS."""
        self.transformer = None
        self.crs = None

    def __enter__(self) -> "GeoReference":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


def build_reference(info: GeospatialInfo) -> GeoReference:
    """
    Validate georeferencing metadata and build a GeoReference.

    Args:
        info: Metadata read from the map document.

    Returns:
        GeoReference owning a fresh CRS and transformer. The caller is
        responsible for closing it; prefer ``resolve_reference``.

    Raises:
        NotGeoreferencedError: If there is no geotransform, or it is singular.
        InternalGeospatialError: If the geotransform is present but the CRS is
            missing or unusable.
    """
    gt = info.geotransform
    if gt is None:
        raise NotGeoreferencedError(
            "Geospatial data not found, are you sure this is a GeoPDF?"
        )

    if not is_invertible(gt):
        raise NotGeoreferencedError(
            f"Geotransform is singular (determinant {determinant(gt)}), "
            f"pixel coordinates cannot be recovered"
        )

    logger.info(
        f"Geospatial data found: Origin = ({gt[0]:f}, {gt[3]:f}), "
        f"Pixel Size = ({gt[1]:f}, {gt[5]:f})"
    )

    if not info.crs_wkt:
        raise InternalGeospatialError(
            "Document has a geotransform but no spatial reference"
        )

    try:
        crs = CRS.from_wkt(info.crs_wkt)
    except CRSError as e:
        raise InternalGeospatialError(f"Unable to parse document spatial reference: {e}") from e

    try:
        reference = GeoReference(gt, crs, info.width, info.height)
    except ProjError as e:
        raise InternalGeospatialError(
            f"Unable to create coordinate transformation to {crs.name}: {e}"
        ) from e

    logger.debug(f"Coordinate transformation WGS84 -> {crs.name} created")
    return reference


@contextmanager
def resolve_reference(info: GeospatialInfo) -> Iterator[GeoReference]:
    """
    Resolve a GeoReference for the duration of a ``with`` block.

    The reference is released on exit whether the block succeeds or raises.

    Raises:
        NotGeoreferencedError: See ``build_reference``.
        InternalGeospatialError: See ``build_reference``.
    """
    reference = build_reference(info)
    try:
        yield reference
    finally:
        reference.close()
