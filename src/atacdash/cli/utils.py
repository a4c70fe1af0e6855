"""
Helpers shared by the atacdash commands: console output, logging and
config loading.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Any

from rich.console import Console
from rich.logging import RichHandler
from rich.progress import Progress, SpinnerColumn, TextColumn, TimeElapsedColumn

from atacdash.models.config import DashboardConfig


@contextmanager
def spinner_progress(
    description: str,
    console: Console | None = None,
    quiet: bool = False,
) -> Iterator[Progress]:
    """Show an indeterminate spinner for the duration of the block.

    A disabled Progress is still yielded in quiet mode so callers can
    update it unconditionally.
    """
    columns = (
        SpinnerColumn(),
        TextColumn("{task.description}"),
        TimeElapsedColumn(),
    )
    progress = Progress(*columns, console=None if quiet else console, disable=quiet, transient=True)
    with progress:
        progress.add_task(description, total=None)
        yield progress


def configure_logging(verbose: bool = False, console: Console | None = None) -> None:
    """Route package log records through Rich; DEBUG when verbose."""
    logger = logging.getLogger("atacdash")
    logger.setLevel(logging.DEBUG if verbose else logging.WARNING)
    if not any(isinstance(h, RichHandler) for h in logger.handlers):
        logger.addHandler(RichHandler(console=console, show_path=False))


def load_dashboard_config(
    config_path: Path | None,
    overrides: dict[str, Any] | None = None,
) -> DashboardConfig:
    """Load the YAML config (or defaults) and apply command-line overrides.

    Overrides whose value is None are ignored. The merged values are
    validated again, so an invalid override raises like an invalid file.
    """
    config = DashboardConfig.from_yaml(config_path) if config_path else DashboardConfig()
    updates = {k: v for k, v in (overrides or {}).items() if v is not None}
    if not updates:
        return config
    return DashboardConfig.model_validate({**config.model_dump(), **updates})


class QuietConsole:
    """Drops ``print`` calls when quiet; anything else reaches the real console."""

    def __init__(self, console: Console, quiet: bool = False):
        self.console = console
        self.quiet = quiet

    def print(self, *objects: Any, **kwargs: Any) -> None:
        if self.quiet:
            return
        self.console.print(*objects, **kwargs)

    def __getattr__(self, name: str) -> Any:
        return getattr(self.console, name)
