"""
gpx2pdf exceptions.

Every error carries an ``exit_code`` so the command line can report the same
status codes for the same failures regardless of where they were raised.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from gpx2pdf.overlay import RenderResult

# Process exit codes
EXIT_SUCCESS = 0
EXIT_ERROR = 1
EXIT_EMPTY_DATA = 2
EXIT_INVALID_ARGUMENT = 3
EXIT_FILE_ERROR = 4
EXIT_PARSE_ERROR = 5


class Gpx2PdfError(Exception):
    """Base exception for gpx2pdf errors"""
    exit_code = EXIT_ERROR


# GPX input
class GpxFileError(Gpx2PdfError):
    """GPX file could not be opened for reading"""
    exit_code = EXIT_FILE_ERROR


class GpxParseError(Gpx2PdfError):
    """GPX file is not valid XML"""
    exit_code = EXIT_PARSE_ERROR


class NoWaypointsError(Gpx2PdfError):
    """GPX file contains no usable waypoints"""
    exit_code = EXIT_EMPTY_DATA


# Document opening
class DocumentOpenError(Gpx2PdfError):
    """Base class for errors opening the map document"""
    exit_code = EXIT_ERROR


class DocumentNotFoundError(DocumentOpenError):
    """Map document does not exist or cannot be read"""
    exit_code = EXIT_FILE_ERROR


class PasswordRequiredError(DocumentOpenError):
    """Map document is encrypted and no password was given"""
    exit_code = EXIT_FILE_ERROR


class InvalidPasswordError(DocumentOpenError):
    """Password given for the map document is wrong"""
    pass


class CorruptDocumentError(DocumentOpenError):
    """Map document is not a readable PDF"""
    pass


class PdfDriverUnavailableError(DocumentOpenError):
    """GDAL in this environment cannot read PDF files"""
    pass


# Georeferencing
class NotGeoreferencedError(Gpx2PdfError):
    """Document has no usable pixel-to-world affine transform"""
    exit_code = EXIT_PARSE_ERROR


class InternalGeospatialError(Gpx2PdfError):
    """Document has an affine transform but no usable spatial reference"""
    pass


# Per-point conversion
class ConversionError(Gpx2PdfError):
    """Base class for errors converting a single coordinate"""
    pass


class TransformFailedError(ConversionError):
    """Coordinate could not be transformed into the document's reference"""
    exit_code = EXIT_INVALID_ARGUMENT


class NoTransformLoadedError(ConversionError):
    """Mapper was used without a live coordinate transformation"""
    pass


# Rendering and output
class InvalidPageIndexError(Gpx2PdfError):
    """Requested page does not exist in the document"""
    exit_code = EXIT_INVALID_ARGUMENT

    def __init__(self, page_index: int, page_count: int):
        self.page_index = page_index
        self.page_count = page_count
        super().__init__(
            f"Invalid page number: {page_index + 1} "
            f"(PDF file has {page_count} pages)"
        )


class AllWaypointsOffPageError(Gpx2PdfError):
    """No waypoint could be placed on the page; nothing is written"""
    exit_code = EXIT_INVALID_ARGUMENT

    def __init__(self, result: RenderResult):
        self.result = result
        super().__init__(
            f"No waypoints are within the page limits "
            f"({result.total} waypoint(s), {result.skipped_count} off page, "
            f"{result.conversion_error_count} conversion error(s)). "
            f"Output file not written."
        )


class WriteError(Gpx2PdfError):
    """Annotated document could not be written"""
    pass
