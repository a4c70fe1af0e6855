"""
Per-chart sample legend.

Entries toggle sample visibility on click and highlight the sample's
libraries across every chart on hover.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from atacdash.core.events import EventKind, SelectionChanged

if TYPE_CHECKING:
    from atacdash.visualization.plots.base import PlotView

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LegendEntry:
    """
    One sample in a legend.

    Attributes:
        sample_id: Sample shown by the entry
        color: Swatch colour, the sample's colour in the chart
        target_hidden: True when the sample is currently hidden
        full_width: Entries of short legends take a full row each
        libraries: Number of libraries of the sample in the chart
    """

    sample_id: str
    color: str
    target_hidden: bool
    full_width: bool
    libraries: int = 1


class LegendView:
    """Legend bound to one plot view."""

    def __init__(self, view: PlotView) -> None:
        self.view = view
        self.entries: list[LegendEntry] = []

    @property
    def namespace(self) -> str:
        return f"{self.view.chart_id}.legend"

    @property
    def session(self):
        return self.view.session

    def build(self) -> list[LegendEntry]:
        """Rebuild entries from the view's current sample groups."""
        self.session.bus.on(EventKind.SELECTION_CHANGED, self.namespace, self._on_selection_changed)
        self.entries = self._entries()
        self._publish()
        return self.entries

    def _entries(self) -> list[LegendEntry]:
        groups = self.view.groups
        selection = self.session.selection
        full_width = len(groups) < self.view.config.compact_legend_threshold
        return [
            LegendEntry(
                sample_id=sample_id,
                color=self.view.colors(sample_id),
                target_hidden=not selection.is_visible(sample_id),
                full_width=full_width,
                libraries=group.library_count,
            )
            for sample_id, group in groups.items()
        ]

    def _publish(self) -> None:
        region = self.view.region
        if region is not None:
            region.show_legend(self.entries)

    def _on_selection_changed(self, event: SelectionChanged) -> None:
        self.entries = self._entries()
        self._publish()

    def click(self, sample_id: str) -> None:
        if sample_id not in self.view.groups:
            logger.debug("Ignoring legend click on unknown sample %s", sample_id)
            return
        self.session.toggle_sample(sample_id)

    def hover(self, sample_id: str | None) -> None:
        """Pointer entered (sample) or left (None) an entry."""
        self.session.hover_sample(sample_id, source=self.view.chart_id)

    def hide_all(self) -> None:
        self.session.deselect_all()

    def show_all(self) -> None:
        self.session.select_all()
