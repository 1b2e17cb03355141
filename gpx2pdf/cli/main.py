"""Main Typer CLI application for gpx2pdf."""

import logging

import typer

app = typer.Typer(
    help="Place GPX waypoints on a georeferenced PDF map",
    no_args_is_help=True,
)


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug messages"),
) -> None:
    """Configure logging for every command."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
    )


def _register_commands() -> None:
    """
    Import command modules to register commands with the app.

    Commands use the @app.command() decorator, which registers them when the
    module is imported.
    """
    from gpx2pdf.cli import convert

    # Avoid "imported but unused" warnings by explicitly using the module
    _ = convert


_register_commands()


if __name__ == "__main__":
    app()
