"""
Map document access.

A GeoPDF is read twice:

1. With rasterio (GDAL's PDF driver) for the georeferencing metadata: the
   pixel-to-world geotransform, the spatial reference and the size of the
   raster GDAL renders the page into.
2. With PyMuPDF for the page itself: its size in points, drawing, and writing
   the annotated copy.
"""

import logging
import warnings
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, Optional

import fitz  # PyMuPDF
import rasterio
from rasterio.errors import NotGeoreferencedWarning, RasterioIOError

from gpx2pdf.exceptions import (
    CorruptDocumentError,
    DocumentNotFoundError,
    InvalidPageIndexError,
    InvalidPasswordError,
    PasswordRequiredError,
    PdfDriverUnavailableError,
    WriteError,
)
from gpx2pdf.geotransform import as_geotransform
from gpx2pdf.spatial_reference import GeospatialInfo

logger = logging.getLogger(__name__)


# GDAL's error text when no driver can open a file
_UNSUPPORTED_FORMAT = "not recognized as being in a supported file format"


def _is_pdf(path: Path) -> bool:
    with open(path, "rb") as f:
        return f.read(5) == b"%PDF-"


def _gdal_page_path(path: Path, page_number: int) -> str:
    """GDAL dataset name for a page; pages after the first are subdatasets."""
    if page_number == 1:
        return str(path)
    return f"PDF:{page_number}:{path}"


def read_geospatial_info(
    path: str | Path, password: Optional[str] = None, page_number: int = 1
) -> GeospatialInfo:
    """
    Read georeferencing metadata for one page of a map document.

    Args:
        path: Path to the GeoPDF (any GDAL raster format works).
        password: User password for encrypted PDFs.
        page_number: One-based page number.

    Returns:
        GeospatialInfo. ``geotransform`` is None when GDAL reports no
        geotransform (rasterio then returns the identity transform), and
        ``crs_wkt`` is None when no spatial reference is attached.

    Raises:
        DocumentNotFoundError: If the file does not exist.
        PasswordRequiredError: If the PDF is encrypted and no password was given.
        InvalidPasswordError: If the password is rejected.
        CorruptDocumentError: If GDAL cannot open the file.
        PdfDriverUnavailableError: If the file is a PDF but GDAL has no PDF
            reading support.
    """
    path = Path(path)
    if not path.is_file():
        raise DocumentNotFoundError(f"Unable to open PDF file for reading: {path}")

    logger.info(f"Extracting Geospatial Data from PDF file: {path}")

    open_options = {"USER_PWD": password} if password else {}
    try:
        with warnings.catch_warnings():
            warnings.simplefilter("ignore", NotGeoreferencedWarning)
            with rasterio.open(_gdal_page_path(path, page_number), **open_options) as dataset:
                transform = dataset.transform
                crs = dataset.crs
                width = dataset.width
                height = dataset.height
    except RasterioIOError as e:
        message = str(e)
        if "password" in message.lower():
            if password:
                raise InvalidPasswordError(f"Invalid password for {path}") from e
            raise PasswordRequiredError(f"PDF file is encrypted: {path}") from e
        if _UNSUPPORTED_FORMAT in message and _is_pdf(path):
            raise PdfDriverUnavailableError(
                f"Unable to read geospatial data from {path}: the GDAL library used by "
                f"rasterio cannot read PDF files. A GDAL built with Poppler or PDFium "
                f"support is needed."
            ) from e
        raise CorruptDocumentError(f"Unable to read geospatial data from {path}: {message}") from e

    geotransform = None if transform.is_identity else as_geotransform(transform.to_gdal())
    crs_wkt = crs.to_wkt() if crs else None

    logger.debug(f"Raster size {width}x{height}, geotransform {geotransform}")
    return GeospatialInfo(geotransform=geotransform, crs_wkt=crs_wkt, width=width, height=height)


def open_pdf(path: str | Path, password: Optional[str] = None) -> fitz.Document:
    """
    Open a PDF for drawing, decrypting it when needed.

    Raises:
        DocumentNotFoundError: If the file does not exist.
        CorruptDocumentError: If the file is not a readable PDF.
        PasswordRequiredError: If the PDF is encrypted and no password was given.
        InvalidPasswordError: If the password is rejected.
    """
    path = Path(path)
    if not path.is_file():
        raise DocumentNotFoundError(f"Unable to open PDF file for reading: {path}")

    try:
        doc = fitz.open(path, filetype="pdf")
    except (fitz.FileDataError, RuntimeError) as e:
        raise CorruptDocumentError(f"Invalid PDF: {path}: {e}") from e

    if doc.page_count == 0 and not doc.needs_pass:
        doc.close()
        raise CorruptDocumentError(f"Invalid PDF: {path}: document has no pages")

    if doc.needs_pass:
        if not password:
            doc.close()
            raise PasswordRequiredError(f"PDF file is encrypted: {path}")
        if not doc.authenticate(password):
            doc.close()
            raise InvalidPasswordError(f"Invalid password for {path}")

    return doc


def check_page_number(pdf: fitz.Document, page_number: int) -> None:
    """Raise InvalidPageIndexError unless one-based ``page_number`` exists in ``pdf``."""
    if page_number < 1 or page_number > pdf.page_count:
        raise InvalidPageIndexError(page_number - 1, pdf.page_count)


@dataclass
class MapDocument:
    """An opened map document: PDF pages plus their georeferencing.

    Attributes:
        pdf: PyMuPDF document used for drawing and writing.
        geospatial: Georeferencing of the page being annotated.
        path: Source file.
    """

    pdf: fitz.Document
    geospatial: GeospatialInfo
    path: Path

    @property
    def page_count(self) -> int:
        return self.pdf.page_count

    def page(self, index: int) -> fitz.Page:
        """Return the page at zero-based ``index``.

        Raises:
            InvalidPageIndexError: If the page does not exist.
        """
        if index < 0 or index >= self.page_count:
            raise InvalidPageIndexError(index, self.page_count)
        return self.pdf[index]

    def page_size(self, index: int) -> tuple[float, float]:
        """Width and height of a page in points."""
        rect = self.page(index).rect
        return rect.width, rect.height

    def save(self, path: str | Path) -> None:
        """Write the (annotated) document to ``path``.

        Raises:
            WriteError: If the file cannot be written.
        """
        try:
            self.pdf.save(str(path), garbage=1, deflate=True)
        except Exception as e:
            raise WriteError(f"Error writing PDF file {path}: {e}") from e
        logger.info(f"PDF file written: {path}")

    def close(self) -> None:
        self.pdf.close()


@contextmanager
def open_map_document(
    path: str | Path, password: Optional[str] = None, page_number: int = 1
) -> Iterator[MapDocument]:
    """
    Open a map document for the duration of a ``with`` block.

    Args:
        path: Path to the GeoPDF.
        password: User password for encrypted PDFs.
        page_number: One-based page whose georeferencing is read.

    Raises:
        DocumentOpenError: Any subclass, see ``open_pdf`` and
            ``read_geospatial_info``.
        InvalidPageIndexError: If ``page_number`` is outside the document.
    """
    pdf = open_pdf(path, password)
    try:
        check_page_number(pdf, page_number)
        info = read_geospatial_info(path, password, page_number)
        yield MapDocument(pdf=pdf, geospatial=info, path=Path(path))
    finally:
        pdf.close()
