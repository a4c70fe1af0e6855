"""
Rendering host capability set.

Views never draw primitives themselves: they hand draw commands, element
class updates, detail text, legend entries and table rows to named regions
provided by a host. A host that lacks a region simply does not receive that
output. ``RecordingHost`` keeps everything in memory and serves as the
headless host for tests and exports.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from atacdash.visualization.plots.base import Detail, DrawCommand
    from atacdash.visualization.plots.legend import LegendEntry
    from atacdash.visualization.tables import TableRow, TableSpec


class Region(Protocol):
    """A named area of the host page."""

    def draw(self, commands: Sequence[DrawCommand]) -> None: ...

    def update_classes(self, classes: Mapping[str, frozenset[str]]) -> None: ...

    def show_detail(self, detail: Detail) -> None: ...

    def show_legend(self, entries: Sequence[LegendEntry]) -> None: ...

    def set_rows(self, spec: TableSpec, rows: Sequence[TableRow]) -> None: ...


class RenderHost(Protocol):
    """Named-region lookup plus the status indicator."""

    def region(self, name: str) -> Region | None: ...

    def set_status(self, message: str | None, spinner: bool = False) -> None: ...

    def clear_status(self) -> None: ...


@dataclass
class RecordingRegion:
    """Region that remembers the latest output of every kind."""

    name: str
    commands: list[Any] = field(default_factory=list)
    classes: dict[str, frozenset[str]] = field(default_factory=dict)
    detail: Any = None
    legend: list[Any] = field(default_factory=list)
    rows: list[Any] = field(default_factory=list)
    draw_count: int = 0
    class_updates: int = 0

    def draw(self, commands: Sequence[DrawCommand]) -> None:
        self.commands = list(commands)
        self.draw_count += 1

    def update_classes(self, classes: Mapping[str, frozenset[str]]) -> None:
        self.classes = dict(classes)
        self.class_updates += 1

    def show_detail(self, detail: Detail) -> None:
        self.detail = detail

    def show_legend(self, entries: Sequence[LegendEntry]) -> None:
        self.legend = list(entries)

    def set_rows(self, spec: TableSpec, rows: Sequence[TableRow]) -> None:
        self.rows = list(rows)


class RecordingHost:
    """In-memory host creating regions on first lookup."""

    def __init__(self, names: Sequence[str] | None = None) -> None:
        self._allowed = set(names) if names is not None else None
        self.regions: dict[str, RecordingRegion] = {}
        self.status: str | None = None
        self.spinner = False
        self.status_history: list[str | None] = []

    def region(self, name: str) -> RecordingRegion | None:
        if self._allowed is not None and name not in self._allowed:
            return None
        if name not in self.regions:
            self.regions[name] = RecordingRegion(name)
        return self.regions[name]

    def set_status(self, message: str | None, spinner: bool = False) -> None:
        self.status = message
        self.spinner = spinner
        self.status_history.append(message)

    def clear_status(self) -> None:
        self.status = None
        self.spinner = False
        self.status_history.append(None)
