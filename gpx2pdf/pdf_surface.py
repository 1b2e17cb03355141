"""PyMuPDF implementation of the overlay drawing surface."""

import fitz  # PyMuPDF

from gpx2pdf.overlay import Color, Rect

DEFAULT_FONT = "helv"  # Helvetica, one of the PDF base-14 fonts


class PdfPageSurface:
    """Draw on a PyMuPDF page through a single ``Shape``.

    Nothing reaches the page until ``finish_page()`` commits the shape. Text
    is committed after the shape's graphics, so labels are never covered by
    a neighbouring marker.

    Args:
        page: Page to draw on.
        font_size: Font size for label text, in page units.
        fontname: PyMuPDF base-14 font name.
    """

    def __init__(self, page: fitz.Page, font_size: float, fontname: str = DEFAULT_FONT):
        self.page = page
        self.font_size = font_size
        self.fontname = fontname
        self._font = fitz.Font(fontname)
        self._shape = page.new_shape()

    def measure_text_width(self, text: str) -> float:
        return fitz.get_text_length(text, fontname=self.fontname, fontsize=self.font_size)

    def draw_filled_rect(self, rect: Rect, fill: Color, stroke: Color, width: float) -> None:
        self._shape.draw_rect(fitz.Rect(rect.x0, rect.y0, rect.x1, rect.y1))
        self._shape.finish(color=stroke, fill=fill, width=width)

    def draw_line(self, start, end, stroke: Color, width: float) -> None:
        self._shape.draw_line(fitz.Point(*start), fitz.Point(*end))
        self._shape.finish(color=stroke, width=width)

    def draw_filled_circle(self, center, radius: float, fill: Color,
                           stroke: Color, width: float) -> None:
        self._shape.draw_circle(fitz.Point(*center), radius)
        self._shape.finish(color=stroke, fill=fill, width=width)

    def draw_centered_text(self, text: str, rect: Rect, color: Color) -> None:
        text_width = self.measure_text_width(text)
        x = rect.x0 + (rect.width - text_width) / 2
        # baseline that puts the middle of ascender..descender on the rect center
        center_y = rect.y0 + rect.height / 2
        baseline = center_y + (self._font.ascender + self._font.descender) / 2 * self.font_size
        self._shape.insert_text(
            fitz.Point(x, baseline),
            text,
            fontsize=self.font_size,
            fontname=self.fontname,
            color=color,
        )

    def finish_page(self) -> None:
        self._shape.commit()
        self._shape = self.page.new_shape()
