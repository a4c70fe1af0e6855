"""
Summary command: list the experiments and samples in a metrics file.
"""

from __future__ import annotations

from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from atacdash.cli.utils import configure_logging
from atacdash.core.exceptions import AtacdashError
from atacdash.core.formatting import format_count
from atacdash.core.store import MetricsStore

console = Console()


def summary(
    metrics: Path = typer.Option(
        ...,
        "--metrics", "-m",
        help="Metrics file (JSON, optionally gzipped)",
        exists=True,
        dir_okay=False,
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose", "-v",
        help="Enable verbose output",
    ),
) -> None:
    """Print the experiments and per-sample library counts of a metrics file."""
    configure_logging(verbose, console)

    try:
        store = MetricsStore.from_file(metrics)
    except AtacdashError as e:
        console.print(f"[red]Error: {e.message}[/red]")
        if e.suggestion:
            console.print(f"\n[dim]{e.suggestion}[/dim]")
        raise typer.Exit(code=1) from None

    if store.description:
        console.print(f"\n[bold]{store.description}[/bold]")

    experiments = Table(title="Experiments")
    experiments.add_column("Experiment", style="cyan")
    experiments.add_column("Sample")
    experiments.add_column("Library")
    experiments.add_column("Total reads", justify="right")
    experiments.add_column("Description")
    for experiment_id, experiment in store:
        experiments.add_row(
            experiment_id,
            experiment.sample_id,
            experiment.library_name,
            format_count(experiment.total_reads),
            experiment.library.description or "",
        )
    console.print(experiments)

    samples = Table(title="Samples")
    samples.add_column("Sample", style="cyan")
    samples.add_column("Libraries", justify="right")
    for sample_id in store.sample_ids:
        samples.add_row(sample_id, str(len(store.experiments_for_sample(sample_id))))
    console.print(samples)

    if store.reference is not None:
        console.print(f"\nReference fragment length distribution: {store.reference.source}")
