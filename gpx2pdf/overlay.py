"""
Waypoint overlay rendering.

Each waypoint that maps onto the page is drawn as a small white circle with a
cross-hair, connected by a short line to a yellow label box holding its name:

          +---------+
          |  NAME   |
          +----+----+
               |
              (+)

Geometry is expressed in page units with the origin at the top-left corner of
the page and y growing downward. The renderer only decides what to draw and
where; the ``DrawingSurface`` does the drawing.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Protocol

from gpx2pdf.coordinate_mapper import MappedWaypoint
from gpx2pdf.page_units import PageGeometry

logger = logging.getLogger(__name__)

Color = tuple[float, float, float]

BLACK: Color = (0.0, 0.0, 0.0)
WHITE: Color = (1.0, 1.0, 1.0)
YELLOW: Color = (1.0, 1.0, 0.0)


@dataclass(frozen=True)
class Rect:
    """Axis-aligned rectangle in page units (top-left origin)."""

    x0: float
    y0: float
    x1: float
    y1: float

    @property
    def width(self) -> float:
        return self.x1 - self.x0

    @property
    def height(self) -> float:
        return self.y1 - self.y0


class DrawingSurface(Protocol):
    """Primitive drawing operations on one page."""

    def measure_text_width(self, text: str) -> float:
        """Width of ``text`` in page units at the surface's font size."""
        ...

    def draw_filled_rect(self, rect: Rect, fill: Color, stroke: Color, width: float) -> None:
        ...

    def draw_line(self, start: tuple[float, float], end: tuple[float, float],
                  stroke: Color, width: float) -> None:
        ...

    def draw_filled_circle(self, center: tuple[float, float], radius: float,
                           fill: Color, stroke: Color, width: float) -> None:
        ...

    def draw_centered_text(self, text: str, rect: Rect, color: Color) -> None:
        """Draw ``text`` centered horizontally and vertically in ``rect``."""
        ...

    def finish_page(self) -> None:
        """Flush everything drawn so far to the page."""
        ...


@dataclass(frozen=True)
class MarkerStyle:
    """Marker and label geometry in page units.

    Attributes:
        font_size: Label font size.
        label_padding: Horizontal padding on each side of the name.
        label_offset: Gap between the marker center and the label's bottom edge.
        marker_radius: Radius of the waypoint circle.
        cross_size: Half-length of the cross-hair arms.
        stroke_width: Width of every stroke.
    """

    font_size: float = 8.0
    label_padding: float = 2.0
    label_offset: float = 6.0
    marker_radius: float = 3.0
    cross_size: float = 2.0
    stroke_width: float = 1.0
    label_fill: Color = YELLOW
    marker_fill: Color = WHITE
    stroke_color: Color = BLACK
    text_color: Color = BLACK


@dataclass(frozen=True)
class RenderResult:
    """Counts from one overlay pass.

    Attributes:
        total: Waypoints submitted.
        placed_count: Waypoints drawn on the page.
        conversion_error_count: Waypoints whose coordinates could not be
            transformed.
    """

    total: int
    placed_count: int
    conversion_error_count: int

    @property
    def skipped_count(self) -> int:
        """Waypoints that mapped correctly but fell outside the page."""
        return self.total - self.placed_count - self.conversion_error_count


class OverlayRenderer:
    """Draw mapped waypoints onto a page.

    Args:
        surface: Drawing surface of the target page.
        style: Marker geometry and colors.
    """

    def __init__(self, surface: DrawingSurface, style: MarkerStyle | None = None):
        self.surface = surface
        self.style = style or MarkerStyle()

    def label_rect(self, x: float, y: float, text_width: float) -> Rect:
        """Label box for a marker at (x, y), centered above it."""
        s = self.style
        bottom = y - s.label_offset
        return Rect(
            x0=x - text_width / 2 - s.label_padding,
            y0=bottom - (s.font_size + 3),
            x1=x + text_width / 2 + s.label_padding,
            y1=bottom,
        )

    def draw_marker(self, x: float, y: float, name: str) -> None:
        """Draw one waypoint marker with its label."""
        s = self.style
        surface = self.surface

        text_width = surface.measure_text_width(name)
        label = self.label_rect(x, y, text_width)

        surface.draw_filled_rect(label, s.label_fill, s.stroke_color, s.stroke_width)
        surface.draw_line((x, label.y1), (x, y), s.stroke_color, s.stroke_width)
        surface.draw_filled_circle((x, y), s.marker_radius, s.marker_fill,
                                   s.stroke_color, s.stroke_width)
        surface.draw_line((x, y - s.cross_size), (x, y + s.cross_size),
                          s.stroke_color, s.stroke_width)
        surface.draw_line((x + s.cross_size, y), (x - s.cross_size, y),
                          s.stroke_color, s.stroke_width)

        # text box is one unit shorter than the label, sharing its bottom edge
        text_rect = Rect(label.x0, label.y1 - (s.font_size + 2), label.x1, label.y1)
        surface.draw_centered_text(name, text_rect, s.text_color)

    def render(self, mapped: Iterable[MappedWaypoint], page: PageGeometry) -> RenderResult:
        """Draw every on-page waypoint and count the outcomes.

        Waypoints are drawn in input order; later markers cover earlier ones.

        Args:
            mapped: Mapping results, in the order the waypoints were read.
            page: Geometry of the target page.

        Returns:
            RenderResult with placed, skipped and conversion error counts.
        """
        total = 0
        placed = 0
        errors = 0

        for item in mapped:
            total += 1
            if item.pixel is None:
                errors += 1
                continue

            point = page.to_page_units(item.pixel)
            if not page.contains(point):
                logger.debug(
                    f"Waypoint '{item.waypoint.name}' is off the page at "
                    f"({point.x:.1f}, {point.y:.1f})"
                )
                continue

            self.draw_marker(point.x, point.y, item.waypoint.name)
            placed += 1

        self.surface.finish_page()

        logger.info(f"{placed} waypoint(s) added to PDF file")
        if errors:
            logger.warning("Error converting waypoint coordinates.")

        return RenderResult(total=total, placed_count=placed, conversion_error_count=errors)
