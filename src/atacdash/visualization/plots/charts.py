"""
Registry of the dashboard's charts.

Charts are created in registry order, which is also the order in which the
load sequence renders them.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from atacdash.core.exceptions import UnknownChartError
from atacdash.visualization.plots.base import PlotView
from atacdash.visualization.plots.lines import LinePlotView
from atacdash.visualization.plots.scatter import ScatterPlotView

if TYPE_CHECKING:
    from atacdash.core.session import DashboardSession


@dataclass(frozen=True)
class ChartSpec:
    chart_id: str
    title: str
    view_type: type[PlotView]
    extra_help: tuple[str, ...] = field(default_factory=tuple)


CHARTS: tuple[ChartSpec, ...] = (
    ChartSpec("fragment_length_distance", "Fragment length distance", ScatterPlotView),
    ChartSpec(
        "fragment_length",
        "Fragment length distribution",
        LinePlotView,
        (
            "Switching the y axis scale to exponential can reveal nucleosomal "
            "periodicity at higher fragment lengths.",
            "The dashed red line is the reference fragment length distribution. "
            "You can toggle it on and off.",
        ),
    ),
    ChartSpec("mapq", "Mapping quality", LinePlotView),
    ChartSpec("peak_read_counts", "Reads in peaks", LinePlotView),
    ChartSpec("peak_territory", "Peak territory", LinePlotView),
)

CHART_IDS: tuple[str, ...] = tuple(spec.chart_id for spec in CHARTS)


def chart_spec(chart_id: str) -> ChartSpec:
    for spec in CHARTS:
        if spec.chart_id == chart_id:
            return spec
    raise UnknownChartError(chart_id, list(CHART_IDS))


def create_view(chart_id: str, session: DashboardSession) -> PlotView:
    """Instantiate the view registered for ``chart_id``."""
    spec = chart_spec(chart_id)
    return spec.view_type(spec.chart_id, spec.title, session, extra_help=spec.extra_help)
