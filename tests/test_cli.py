"""Tests for the gpx2pdf command line."""

import math
from pathlib import Path

import fitz
import pytest
from rasterio.errors import RasterioIOError
from typer.testing import CliRunner

from gpx2pdf.cli import app
from gpx2pdf.document import read_geospatial_info
from gpx2pdf.waypoint import Waypoint

runner = CliRunner()


@pytest.fixture(autouse=True)
def fake_geospatial(monkeypatch, utm_info):
    calls = []

    def fake_read(path, password=None, page_number=1):
        calls.append((Path(path), password, page_number))
        return utm_info

    monkeypatch.setattr("gpx2pdf.converter.read_geospatial_info", fake_read)
    return calls


def run(*args):
    return runner.invoke(app, ["convert", *[str(a) for a in args]])


class TestConvertCommand:

    def test_success(self, blank_pdf, write_gpx, pixel_waypoint, tmp_path) -> None:
        gpx = write_gpx([pixel_waypoint(50, 50, "GC1")])
        out = tmp_path / "out.pdf"

        result = run(gpx, blank_pdf, out)

        assert result.exit_code == 0, result.output
        assert "GPX waypoints successfully added to PDF file" in result.output
        assert out.exists()

    def test_options_are_applied(self, blank_pdf, write_gpx, pixel_waypoint, tmp_path,
                                 fake_geospatial) -> None:
        gpx = write_gpx([pixel_waypoint(50, 50, "GC1234567890")])
        out = tmp_path / "out.pdf"

        result = run(gpx, blank_pdf, out, "--page", 2, "--max-name-length", 3,
                     "--password", "pw", "--font-size", 6)

        assert result.exit_code == 0, result.output
        assert fake_geospatial == [(blank_pdf, "pw", 2)]
        with fitz.open(out) as saved:
            text = saved[1].get_text()
        assert "GC1" in text
        assert "GC12" not in text

    def test_unlimited_name_length(self, blank_pdf, write_gpx, pixel_waypoint, tmp_path) -> None:
        gpx = write_gpx([pixel_waypoint(50, 50, "GC1234567890")])
        out = tmp_path / "out.pdf"

        result = run(gpx, blank_pdf, out, "--max-name-length", -1)

        assert result.exit_code == 0, result.output
        with fitz.open(out) as saved:
            assert "GC1234567890" in saved[0].get_text()

    def test_config_file(self, blank_pdf, write_gpx, pixel_waypoint, tmp_path,
                         fake_geospatial) -> None:
        config = tmp_path / "gpx2pdf.yaml"
        config.write_text("gpx2pdf:\n  page_number: 2\n  pdf_password: fromfile\n")
        gpx = write_gpx([pixel_waypoint(50, 50, "GC1")])

        result = run(gpx, blank_pdf, tmp_path / "out.pdf", "--config", config, "--password", "cli")

        assert result.exit_code == 0, result.output
        assert fake_geospatial == [(blank_pdf, "cli", 2)]

    def test_conversion_errors_are_reported(self, blank_pdf, write_gpx, pixel_waypoint,
                                            tmp_path) -> None:
        gpx = write_gpx([pixel_waypoint(50, 50, "GC1"), Waypoint(math.nan, math.nan, "BAD")])

        result = run(gpx, blank_pdf, tmp_path / "out.pdf")

        assert result.exit_code == 0, result.output
        assert "1 waypoint(s) could not be converted" in result.output


class TestConvertCommandErrors:

    def test_missing_gpx(self, blank_pdf, tmp_path) -> None:
        result = run(tmp_path / "absent.gpx", blank_pdf, tmp_path / "out.pdf")

        assert result.exit_code == 4
        assert "Unable to open GPX file" in result.output

    def test_gpx_without_waypoints(self, blank_pdf, write_gpx, tmp_path) -> None:
        result = run(write_gpx([]), blank_pdf, tmp_path / "out.pdf")

        assert result.exit_code == 2

    def test_invalid_gpx(self, blank_pdf, tmp_path) -> None:
        gpx = tmp_path / "broken.gpx"
        gpx.write_text("<gpx><wpt>")

        result = run(gpx, blank_pdf, tmp_path / "out.pdf")

        assert result.exit_code == 5

    def test_all_waypoints_off_page(self, blank_pdf, write_gpx, pixel_waypoint, tmp_path) -> None:
        out = tmp_path / "out.pdf"

        result = run(write_gpx([pixel_waypoint(-20, 500, "FAR")]), blank_pdf, out)

        assert result.exit_code == 3
        assert "Output file not written" in result.output
        assert not out.exists()

    def test_page_out_of_range(self, blank_pdf, write_gpx, pixel_waypoint, tmp_path) -> None:
        result = run(write_gpx([pixel_waypoint(50, 50, "GC1")]), blank_pdf,
                     tmp_path / "out.pdf", "--page", 7)

        assert result.exit_code == 3
        assert "Invalid page number: 7" in result.output

    def test_invalid_page_option(self, blank_pdf, write_gpx, pixel_waypoint, tmp_path) -> None:
        result = run(write_gpx([pixel_waypoint(50, 50, "GC1")]), blank_pdf,
                     tmp_path / "out.pdf", "--page", 0)

        assert result.exit_code == 1
        assert "page_number" in result.output

    def test_bad_config_file(self, blank_pdf, write_gpx, pixel_waypoint, tmp_path) -> None:
        config = tmp_path / "bad.yaml"
        config.write_text("something_else: {}\n")

        result = run(write_gpx([pixel_waypoint(50, 50, "GC1")]), blank_pdf,
                     tmp_path / "out.pdf", "--config", config)

        assert result.exit_code == 1
        assert "missing 'gpx2pdf' section" in result.output

    def test_missing_pdf(self, write_gpx, pixel_waypoint, tmp_path) -> None:
        result = run(write_gpx([pixel_waypoint(50, 50, "GC1")]), tmp_path / "absent.pdf",
                     tmp_path / "out.pdf")

        assert result.exit_code == 4

    def test_page_past_end_is_checked_before_gdal(self, blank_pdf, write_gpx, pixel_waypoint,
                                                  tmp_path, monkeypatch) -> None:
        def missing_subdataset(path, *args, **kwargs):
            raise RasterioIOError(f"{path}: Invalid page number")

        monkeypatch.setattr("gpx2pdf.converter.read_geospatial_info", read_geospatial_info)
        monkeypatch.setattr("gpx2pdf.document.rasterio.open", missing_subdataset)

        result = run(write_gpx([pixel_waypoint(50, 50, "GC1")]), blank_pdf,
                     tmp_path / "out.pdf", "--page", 7)

        assert result.exit_code == 3, result.output
        assert "Invalid page number: 7 (PDF file has 2 pages)" in result.output

    def test_scalar_config_file(self, blank_pdf, write_gpx, pixel_waypoint, tmp_path) -> None:
        config = tmp_path / "scalar.yaml"
        config.write_text("42\n")

        result = run(write_gpx([pixel_waypoint(50, 50, "GC1")]), blank_pdf,
                     tmp_path / "out.pdf", "--config", config)

        assert result.exit_code == 1
        assert "missing 'gpx2pdf' section" in result.output
