"""CLI module for gpx2pdf.

Provides the `gpx2pdf` command-line interface.
"""

from gpx2pdf.cli.main import app

__all__ = ["app"]
