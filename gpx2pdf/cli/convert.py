"""Conversion CLI command."""

from pathlib import Path

import typer

from gpx2pdf.cli.main import app
from gpx2pdf.config import ConversionConfig, get_default_config
from gpx2pdf.converter import Gpx2PdfConverter
from gpx2pdf.exceptions import Gpx2PdfError


def _load_config(config_file: Path | None) -> ConversionConfig:
    if config_file is None:
        return get_default_config()
    try:
        return ConversionConfig.from_yaml(config_file)
    except (FileNotFoundError, ValueError) as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)


@app.command("convert")
def convert_command(
    gpx_file: Path = typer.Argument(..., help="GPX file with the waypoints"),
    pdf_file_in: Path = typer.Argument(..., help="GeoPDF with the map (not modified)"),
    pdf_file_out: Path = typer.Argument(..., help="Where to write the annotated PDF"),
    page: int | None = typer.Option(None, "--page", help="Page number to annotate (1-based)"),
    password: str | None = typer.Option(None, help="Password for encrypted PDFs"),
    geocache_name: bool | None = typer.Option(
        None, "--geocache-name/--no-geocache-name",
        help="Use the Groundspeak cache name when available",
    ),
    smart_name: bool | None = typer.Option(
        None, "--smart-name/--no-smart-name",
        help="Use the GSAK smart name when available",
    ),
    max_name_length: int | None = typer.Option(
        None, help="Maximum printed name length (-1 for no limit)"
    ),
    font_size: float | None = typer.Option(None, help="Font size for waypoint names"),
    config_file: Path | None = typer.Option(None, "--config", help="YAML configuration file"),
) -> None:
    """
    Add the waypoints of a GPX file to a GeoPDF map.

    Each waypoint on the page gets a marker and a yellow name label. Waypoints
    outside the page are skipped. If none is on the page, no output is written.

    Example:
        gpx2pdf convert caches.gpx map.pdf map_marked.pdf
        gpx2pdf convert caches.gpx map.pdf out.pdf --page 2 --max-name-length -1
        gpx2pdf convert caches.gpx map.pdf out.pdf --config gpx2pdf.yaml
    """
    base = _load_config(config_file)
    try:
        config = base.with_overrides(
            page_number=page,
            pdf_password=password,
            use_geocache_name=geocache_name,
            use_gsak_smart_name=smart_name,
            max_name_length=max_name_length,
            name_font_size=font_size,
        )
    except ValueError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    converter = Gpx2PdfConverter(gpx_file, pdf_file_in, pdf_file_out, config)
    try:
        result = converter.do_conversion()
    except Gpx2PdfError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(e.exit_code)

    if result.conversion_error_count:
        typer.echo(
            f"Warning: {result.conversion_error_count} waypoint(s) could not be converted",
            err=True,
        )
    typer.echo("GPX waypoints successfully added to PDF file")
