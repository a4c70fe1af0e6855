"""
Main CLI entry point for atacdash.

Provides subcommands:
- report: Export the QC dashboard as self-contained HTML
- summary: List experiments and samples in a metrics file
"""

from __future__ import annotations

import typer
from rich import print as rprint

from atacdash import __version__

app = typer.Typer(
    name="atacdash",
    help="Interactive quality-control dashboard for ATAC-seq experiments",
    add_completion=False,
    no_args_is_help=True,
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        rprint(f"atacdash version {__version__}")
        raise typer.Exit


@app.callback()
def main(
    version: bool = typer.Option(
        None,
        "--version",
        "-V",
        help="Show version and exit",
        callback=version_callback,
        is_eager=True,
    ),
) -> None:
    """
    atacdash: linked plots and tables for ATAC-seq QC metrics.

    Reads the metrics artifact produced by ataqv (one record per sequencing
    library) and renders fragment length, mapping quality and peak metrics
    for comparison across experiments and samples.
    """


# Import subcommands
from atacdash.cli import report, summary

# Register subcommands
app.add_typer(report.app, name="report")
app.command(name="summary")(summary.summary)


if __name__ == "__main__":
    app()
