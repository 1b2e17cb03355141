"""Tests for gpx2pdf.document: metadata reading, PDF opening and saving."""

from pathlib import Path

import fitz
import numpy as np
import pytest
import rasterio
from rasterio.errors import RasterioIOError
from rasterio.transform import Affine

from gpx2pdf.document import MapDocument, _gdal_page_path, open_map_document, open_pdf, read_geospatial_info
from gpx2pdf.exceptions import (
    CorruptDocumentError,
    DocumentNotFoundError,
    InvalidPageIndexError,
    InvalidPasswordError,
    PasswordRequiredError,
    PdfDriverUnavailableError,
    WriteError,
)

UTM_33N = "EPSG:32633"
UTM_GEOTRANSFORM = (500000.0, 10.0, 0.0, 4500000.0, 0.0, -10.0)
RASTER_WIDTH = 200
RASTER_HEIGHT = 100


def write_geotiff(path: Path, crs=None, transform=None) -> Path:
    kwargs = {}
    if crs is not None:
        kwargs["crs"] = crs
    if transform is not None:
        kwargs["transform"] = transform
    with rasterio.open(
        path, "w", driver="GTiff", width=RASTER_WIDTH, height=RASTER_HEIGHT,
        count=1, dtype="uint8", **kwargs,
    ) as dst:
        dst.write(np.zeros((1, RASTER_HEIGHT, RASTER_WIDTH), dtype="uint8"))
    return path


@pytest.fixture
def encrypted_pdf(tmp_path: Path) -> Path:
    path = tmp_path / "locked.pdf"
    doc = fitz.open()
    doc.new_page(width=400, height=200)
    doc.save(
        str(path),
        encryption=fitz.PDF_ENCRYPT_AES_256,
        owner_pw="owner",
        user_pw="secret",
    )
    doc.close()
    return path


class TestGdalPagePath:

    def test_first_page_is_plain_path(self, tmp_path: Path) -> None:
        assert _gdal_page_path(tmp_path / "a.pdf", 1) == str(tmp_path / "a.pdf")

    def test_later_pages_use_subdataset_syntax(self, tmp_path: Path) -> None:
        assert _gdal_page_path(tmp_path / "a.pdf", 3) == f"PDF:3:{tmp_path / 'a.pdf'}"


class TestReadGeospatialInfo:

    def test_reads_geotransform_crs_and_size(self, tmp_path: Path) -> None:
        path = write_geotiff(
            tmp_path / "map.tif",
            crs=UTM_33N,
            transform=Affine.from_gdal(*UTM_GEOTRANSFORM),
        )

        info = read_geospatial_info(path)

        assert info.geotransform == pytest.approx(UTM_GEOTRANSFORM)
        assert info.width == RASTER_WIDTH
        assert info.height == RASTER_HEIGHT
        assert info.crs_wkt is not None
        assert "UTM zone 33N" in info.crs_wkt

    @pytest.mark.filterwarnings("ignore::rasterio.errors.NotGeoreferencedWarning")
    def test_missing_georeferencing_is_reported_as_none(self, tmp_path: Path) -> None:
        path = write_geotiff(tmp_path / "plain.tif")

        info = read_geospatial_info(path)

        assert info.geotransform is None
        assert info.crs_wkt is None

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(DocumentNotFoundError):
            read_geospatial_info(tmp_path / "nope.pdf")

    def test_unreadable_file(self, tmp_path: Path) -> None:
        path = tmp_path / "junk.pdf"
        path.write_text("this is not a raster")

        with pytest.raises(CorruptDocumentError):
            read_geospatial_info(path)


class TestOpenPdf:

    def test_opens_plain_pdf(self, blank_pdf: Path) -> None:
        with open_pdf(blank_pdf) as doc:
            assert doc.page_count == 2

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(DocumentNotFoundError) as exc_info:
            open_pdf(tmp_path / "nope.pdf")

        assert exc_info.value.exit_code == 4

    @pytest.mark.parametrize("content", [b"", b"this is not a pdf"], ids=["empty", "garbage"])
    def test_corrupt_file(self, tmp_path: Path, content: bytes) -> None:
        path = tmp_path / "bad.pdf"
        path.write_bytes(content)

        with pytest.raises(CorruptDocumentError):
            open_pdf(path)

    def test_encrypted_without_password(self, encrypted_pdf: Path) -> None:
        with pytest.raises(PasswordRequiredError):
            open_pdf(encrypted_pdf)

    def test_encrypted_with_wrong_password(self, encrypted_pdf: Path) -> None:
        with pytest.raises(InvalidPasswordError):
            open_pdf(encrypted_pdf, "wrong")

    def test_encrypted_with_password(self, encrypted_pdf: Path) -> None:
        with open_pdf(encrypted_pdf, "secret") as doc:
            assert doc.page_count == 1
            assert doc[0].rect.width == 400


class TestMapDocument:

    @pytest.fixture
    def document(self, blank_pdf: Path, utm_info):
        doc = MapDocument(pdf=open_pdf(blank_pdf), geospatial=utm_info, path=blank_pdf)
        yield doc
        doc.close()

    def test_page_count(self, document: MapDocument) -> None:
        assert document.page_count == 2

    def test_page_size(self, document: MapDocument) -> None:
        assert document.page_size(0) == (400, 200)

    @pytest.mark.parametrize("index", [-1, 2, 10])
    def test_invalid_page_index(self, document: MapDocument, index: int) -> None:
        with pytest.raises(InvalidPageIndexError) as exc_info:
            document.page(index)

        assert exc_info.value.page_count == 2
        assert "2 pages" in str(exc_info.value)

    def test_save_round_trip(self, document: MapDocument, tmp_path: Path) -> None:
        out = tmp_path / "out.pdf"
        document.save(out)

        with fitz.open(out) as saved:
            assert saved.page_count == 2

    def test_save_to_missing_directory(self, document: MapDocument, tmp_path: Path) -> None:
        with pytest.raises(WriteError):
            document.save(tmp_path / "missing" / "out.pdf")


class TestOpenMapDocument:

    def test_yields_document_and_closes(self, blank_pdf: Path, utm_info, monkeypatch) -> None:
        calls = []

        def fake_read(path, password=None, page_number=1):
            calls.append((Path(path), password, page_number))
            return utm_info

        monkeypatch.setattr("gpx2pdf.document.read_geospatial_info", fake_read)

        with open_map_document(blank_pdf, page_number=2) as document:
            assert document.geospatial is utm_info
            assert document.page_count == 2
            pdf = document.pdf

        assert pdf.is_closed
        assert calls == [(blank_pdf, None, 2)]

    @pytest.mark.parametrize("page_number", [0, 3])
    def test_page_out_of_range(self, blank_pdf: Path, page_number: int) -> None:
        with pytest.raises(InvalidPageIndexError):
            with open_map_document(blank_pdf, page_number=page_number):
                pass


class TestGdalErrorMapping:
    """How GDAL open failures surface, with ``rasterio.open`` replaced."""

    @staticmethod
    def failing_open(message: str):
        def _open(*args, **kwargs):
            raise RasterioIOError(message)
        return _open

    def test_pdf_without_gdal_pdf_support(self, blank_pdf: Path, monkeypatch) -> None:
        monkeypatch.setattr(
            "gpx2pdf.document.rasterio.open",
            self.failing_open(f"'{blank_pdf}' not recognized as being in a supported file format."),
        )

        with pytest.raises(PdfDriverUnavailableError) as exc_info:
            read_geospatial_info(blank_pdf)

        assert "Poppler or PDFium" in str(exc_info.value)
        assert exc_info.value.exit_code == 1

    def test_unsupported_non_pdf_is_corrupt(self, tmp_path: Path, monkeypatch) -> None:
        path = tmp_path / "junk.pdf"
        path.write_text("this is not a raster")
        monkeypatch.setattr(
            "gpx2pdf.document.rasterio.open",
            self.failing_open(f"'{path}' not recognized as being in a supported file format."),
        )

        with pytest.raises(CorruptDocumentError):
            read_geospatial_info(path)

    @pytest.mark.parametrize(
        "password, expected",
        [(None, PasswordRequiredError), ("wrong", InvalidPasswordError)],
        ids=["no_password", "wrong_password"],
    )
    def test_password_errors(self, blank_pdf: Path, monkeypatch, password, expected) -> None:
        monkeypatch.setattr(
            "gpx2pdf.document.rasterio.open",
            self.failing_open("PDF file is password protected. Invalid password."),
        )

        with pytest.raises(expected):
            read_geospatial_info(blank_pdf, password)
