"""
GDAL 6-parameter affine GeoTransform utilities.

Converts between raster pixel coordinates and the world coordinates of a
georeferenced document (e.g., UTM eastings/northings).

References:
    - GDAL GeoTransform: https://gdal.org/tutorials/geotransforms_tut.html
"""

from typing import Sequence, Tuple

from gpx2pdf.types import PixelsFloat, WorldUnits

# Type alias for the 6-parameter GDAL geotransform
Geotransform = tuple[float, float, float, float, float, float]

# Below this the 2x2 linear part is treated as singular
SINGULAR_EPSILON = 1e-12


def as_geotransform(values: Sequence[float]) -> Geotransform:
    """
    Validate and normalize a sequence into a Geotransform tuple.

    Raises:
        ValueError: If ``values`` does not hold exactly 6 elements.
    """
    if len(values) != 6:
        raise ValueError(f"geotransform must have exactly 6 elements, got {len(values)}")
    return tuple(float(v) for v in values)  # type: ignore[return-value]


def determinant(gt: Sequence[float]) -> float:
    """Determinant of the linear part ``[[GT1, GT2], [GT4, GT5]]``."""
    return gt[1] * gt[5] - gt[2] * gt[4]


def is_invertible(gt: Sequence[float]) -> bool:
    """Return True if the geotransform can be inverted."""
    return abs(determinant(gt)) >= SINGULAR_EPSILON


def apply_geotransform(
    px: PixelsFloat, py: PixelsFloat, gt: Sequence[float]
) -> Tuple[WorldUnits, WorldUnits]:
    """
    Apply GDAL 6-parameter affine geotransform to convert pixel to world coordinates.

    Implements the GDAL GeoTransform formula:
        Xgeo = GT[0] + P*GT[1] + L*GT[2]
        Ygeo = GT[3] + P*GT[4] + L*GT[5]

    Where:
        GT[0]: X-coordinate of upper-left corner (origin easting)
        GT[1]: Pixel width (world units per pixel in X direction)
        GT[2]: Row rotation (typically 0 for north-up rasters)
        GT[3]: Y-coordinate of upper-left corner (origin northing)
        GT[4]: Column rotation (typically 0 for north-up rasters)
        GT[5]: Pixel height (typically negative)

    Args:
        px: Pixel X coordinate (column), 0-indexed from left
        py: Pixel Y coordinate (row), 0-indexed from top
        gt: GeoTransform array [GT0, GT1, GT2, GT3, GT4, GT5]

    Returns:
        Tuple of (x, y) in the document's coordinate reference system.

    Examples:
        >>> gt = [500000, 10, 0, 4500000, 0, -10]
        >>> apply_geotransform(50, 50, gt)
        (500500, 4499500)
    """
    if len(gt) != 6:
        raise ValueError(f"geotransform must have exactly 6 elements, got {len(gt)}")

    x = gt[0] + px * gt[1] + py * gt[2]
    y = gt[3] + px * gt[4] + py * gt[5]
    return x, y


def invert_geotransform(
    x: WorldUnits, y: WorldUnits, gt: Sequence[float]
) -> Tuple[PixelsFloat, PixelsFloat]:
    """
    Convert world coordinates back to pixel coordinates.

    Solves the 2x2 system exactly:
        [x - GT[0]]   [GT[1]  GT[2]]   [px]
        [y - GT[3]] = [GT[4]  GT[5]] * [py]

    so that ``apply_geotransform(*invert_geotransform(x, y, gt), gt) == (x, y)``
    for every invertible geotransform. No rounding is applied.

    For north-up rasters (GT[2]=0, GT[4]=0) this simplifies to:
        px = (x - GT[0]) / GT[1]
        py = (y - GT[3]) / GT[5]

    Args:
        x: World X coordinate (e.g., easting)
        y: World Y coordinate (e.g., northing)
        gt: GeoTransform array [GT0, GT1, GT2, GT3, GT4, GT5]

    Returns:
        Tuple of (px, py) fractional pixel coordinates.

    Raises:
        ValueError: If the geotransform matrix is singular.
    """
    det = determinant(gt)
    if abs(det) < SINGULAR_EPSILON:
        raise ValueError("Geotransform matrix is singular (cannot invert)")

    dx = x - gt[0]
    dy = y - gt[3]

    px = (gt[5] * dx - gt[2] * dy) / det
    py = (gt[1] * dy - gt[4] * dx) / det
    return px, py
