"""
Fragment length distance scatter chart.

One dot per experiment: distance from the reference fragment length
distribution on x, a selectable per-experiment metric on y.
"""

from __future__ import annotations

import logging
from typing import ClassVar

from atacdash.core.formatting import format_distance, format_number
from atacdash.core.transforms import (
    FragmentLengthDistanceTransformer,
    PlotDataset,
    SampleGroup,
    ScatterOptions,
    Series,
)
from atacdash.models.metrics import ExperimentMetrics
from atacdash.visualization.plots.base import Detail, Marker, PlotView
from atacdash.visualization.plots.scales import LinearScale
from atacdash.visualization.plots.viewport import ViewportTransform, marker_radius

logger = logging.getLogger(__name__)

# Headroom above the highest dot, in y units.
Y_PADDING = 10.0
X_PADDING = 1.05


def scatter_x_domain(x_values: list[float]) -> tuple[float, float]:
    """
    X domain for distances: symmetric around zero when any value is negative.

    Example:
        >>> scatter_x_domain([-1.0, 2.0])
        (-2.1, 2.1)
    """
    if not x_values:
        return (0.0, 0.0)
    low, high = min(x_values), max(x_values)
    limit = max(abs(low), abs(high)) * X_PADDING
    if low < 0:
        return (-limit, limit)
    return (0.0, limit)


def scatter_y_domain(y_values: list[float]) -> tuple[float, float]:
    if not y_values:
        return (0.0, Y_PADDING)
    return (0.0, max(y_values) + Y_PADDING)


class ScatterPlotView(PlotView):
    """Scatter chart with per-sample distance statistics on legend hover."""

    zoom_extent_field: ClassVar[str] = "scatter_zoom_extent"
    item_help: ClassVar[str] = "Mouse over dots to see experiment details."

    def default_options(self) -> ScatterOptions:
        return ScatterOptions(y_source=self.config.scatter_y_source)

    def x_domain(self, dataset: PlotDataset) -> tuple[float, float]:
        return scatter_x_domain(dataset.x_values())

    def y_scale(self, dataset: PlotDataset, output_range: tuple[float, float]) -> LinearScale:
        return LinearScale(scatter_y_domain(dataset.y_values()), output_range)

    def _x_axis_origin(self, dataset: PlotDataset) -> bool:
        values = dataset.x_values()
        return bool(values) and min(values) < 0

    def _element(
        self,
        series: Series,
        x_scale: LinearScale,
        y_scale: LinearScale,
        viewport: ViewportTransform,
        color: str,
        classes: frozenset[str],
    ) -> Marker:
        point = series.points[0]
        cx, cy = viewport.apply((x_scale(point.x), y_scale(point.y)))
        return Marker(
            key=series.experiment_id,
            sample=series.sample,
            cx=cx,
            cy=cy,
            radius=marker_radius(self.config.marker_radius, viewport.k),
            color=color,
            data=(point.x, point.y),
            classes=classes,
        )

    def option_help(self) -> tuple[str, ...]:
        return ("You can change the data source of the y axis with the Y AXIS select box below.",)

    def item_detail(self, experiment_id: str, experiment: ExperimentMetrics) -> Detail:
        detail = super().item_detail(experiment_id, experiment)
        assert isinstance(self.options, ScatterOptions)
        y = FragmentLengthDistanceTransformer.y_value(experiment_id, experiment, self.options.y_source)
        rows = detail.rows + (
            (self.options.y_label, format_number(y)),
            ("Distance", format_distance(experiment.fragment_length_distance)),
        )
        return Detail(title=detail.title, rows=rows)

    def sample_detail(self, group: SampleGroup) -> Detail:
        stats = group.distance_stats()
        return Detail(
            title=group.sample_id,
            rows=(
                ("Libraries:", str(group.library_count)),
                ("Minimum distance:", format_distance(stats.minimum)),
                ("Maximum distance:", format_distance(stats.maximum)),
                ("Mean distance:", format_distance(stats.mean)),
                ("Standard deviation:", format_distance(stats.stddev)),
            ),
        )

    def set_y_source(self, y_source: str) -> None:
        """Plot a different metric on the y axis."""
        self.set_options(y_source=y_source)
