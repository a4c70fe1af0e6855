"""
Report command for exporting the dashboard as HTML.

Creates a self-contained HTML dashboard with interactive plots, metrics
tables and the experiment list.
"""

from __future__ import annotations

from pathlib import Path

import typer
from rich.console import Console

from atacdash.cli.utils import QuietConsole, configure_logging, load_dashboard_config, spinner_progress
from atacdash.core.exceptions import AtacdashError
from atacdash.core.io_utils import load_metrics
from atacdash.models.config import SCATTER_Y_SOURCES

app = typer.Typer(
    name="report",
    help="Export the QC dashboard as a self-contained HTML report",
    no_args_is_help=True,
)

console = Console()


@app.command(name="generate")
def generate_report(
    metrics: Path = typer.Option(
        ...,
        "--metrics", "-m",
        help="Metrics file (JSON, optionally gzipped, or an ataqv.configure(...) script)",
        exists=True,
        dir_okay=False,
    ),
    output: Path = typer.Option(
        ...,
        "--output", "-o",
        help="Output HTML report path",
    ),
    config_path: Path | None = typer.Option(
        None,
        "--config", "-c",
        help="Dashboard configuration (YAML)",
        exists=True,
        dir_okay=False,
    ),
    title: str = typer.Option(
        "ATAC-seq QC Dashboard",
        "--title", "-t",
        help="Report title",
    ),
    theme: str = typer.Option(
        "light",
        "--theme",
        help="Color theme: 'light' or 'dark'",
    ),
    resolution: int | None = typer.Option(
        None,
        "--resolution", "-r",
        help="Fragment length bin width",
        min=1,
    ),
    y_source: str | None = typer.Option(
        None,
        "--y-source",
        help="Scatter y axis: " + ", ".join(SCATTER_Y_SOURCES),
    ),
    y_exponent: float | None = typer.Option(
        None,
        "--y-exponent",
        help="Exponent of line-chart y axes (1 = linear)",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose", "-v",
        help="Enable verbose output",
    ),
    quiet: bool = typer.Option(
        False,
        "--quiet", "-q",
        help="Suppress progress output",
    ),
) -> None:
    """
    Generate an HTML dashboard from an ataqv metrics file.

    Example:

        atacdash report generate \\
            --metrics experiments.json.gz \\
            --output dashboard.html

        # Finer fragment length bins and a square-root y axis
        atacdash report generate -m experiments.json -o dashboard.html \\
            --resolution 5 --y-exponent 0.5
    """
    out = QuietConsole(console, quiet=quiet)
    configure_logging(verbose, console)

    out.print("\n[bold blue]atacdash Report Generator[/bold blue]\n")

    if theme not in ("light", "dark"):
        console.print(f"[red]Error: Invalid theme '{theme}'. Use 'light' or 'dark'.[/red]")
        raise typer.Exit(code=1) from None

    try:
        dashboard_config = load_dashboard_config(
            config_path,
            {
                "default_resolution": resolution,
                "scatter_y_source": y_source,
                "y_scale_exponent": y_exponent,
            },
        )
    except (AtacdashError, ValueError) as e:
        console.print(f"[red]Error in configuration: {e}[/red]")
        raise typer.Exit(code=1) from None

    out.print("[bold]Step 1:[/bold] Loading metrics...")
    with spinner_progress("Reading metrics...", console, quiet):
        try:
            dataset = load_metrics(metrics)
        except AtacdashError as e:
            console.print(f"[red]Error: {e.message}[/red]")
            if e.suggestion:
                console.print(f"\n[dim]{e.suggestion}[/dim]")
            raise typer.Exit(code=1) from None

    out.print(
        f"  [green]Loaded {len(dataset.metrics):,} experiments "
        f"in {len(dataset.sample_ids):,} samples[/green]"
    )

    from atacdash.visualization.report import DashboardReportGenerator, ReportConfig

    out.print("\n[bold]Step 2:[/bold] Generating report...")
    with spinner_progress("Building plots and tables...", console, quiet):
        try:
            generator = DashboardReportGenerator(
                dataset,
                config=ReportConfig(title=title, theme=theme),
                dashboard_config=dashboard_config,
            )
            generator.generate(output)
        except AtacdashError as e:
            console.print(f"\n[red]Error generating report: {e.message}[/red]")
            if e.suggestion:
                console.print(f"\n[dim]{e.suggestion}[/dim]")
            if verbose:
                console.print_exception()
            raise typer.Exit(code=1) from None

    file_size_mb = output.stat().st_size / (1024 * 1024)
    out.print(f"  [green]Report saved to {output}[/green]")
    out.print(f"  [dim]File size: {file_size_mb:.1f} MB[/dim]")
    out.print(f"\n[dim]Open in browser: file://{output.absolute()}[/dim]\n")
