"""
Line charts: fragment length, mapping quality and peak percentile curves.

All line charts share one view class; the chart's transformer decides what
the lines are. The fragment length chart additionally has a bin resolution,
a power-scaled y axis and a toggleable reference curve.
"""

from __future__ import annotations

import logging
from typing import ClassVar

from atacdash.core.exceptions import InvalidPlotOptionError
from atacdash.core.transforms import FragmentLengthOptions, PlotDataset, Series, TransformOptions
from atacdash.visualization.plots.base import (
    HIDDEN,
    REFERENCE,
    REFERENCE_COLOR,
    REFERENCE_KEY,
    DrawCommand,
    PlotView,
    Polyline,
)
from atacdash.visualization.plots.scales import LinearScale, PowScale
from atacdash.visualization.plots.viewport import ViewportTransform

logger = logging.getLogger(__name__)


class LinePlotView(PlotView):
    """One smoothed line per experiment, optionally with a dashed reference."""

    zoom_extent_field: ClassVar[str] = "line_zoom_extent"
    y_tick_count: ClassVar[int] = 5

    def __init__(self, *args, y_exponent: float | None = None, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self.y_exponent = self.config.y_scale_exponent if y_exponent is None else y_exponent
        self.show_reference = self.config.show_reference

    @property
    def has_resolution(self) -> bool:
        return isinstance(self.options, FragmentLengthOptions)

    def default_options(self) -> TransformOptions:
        options = self.transformer.default_options()
        if isinstance(options, FragmentLengthOptions):
            return FragmentLengthOptions(resolution=self.config.default_resolution)
        return options

    def x_domain(self, dataset: PlotDataset) -> tuple[float, float]:
        return (0.0, float(dataset.x_max))

    def y_scale(self, dataset: PlotDataset, output_range: tuple[float, float]) -> PowScale:
        return PowScale((0.0, float(dataset.y_max)), output_range, exponent=self.y_exponent)

    def _project(
        self,
        points,
        x_scale: LinearScale,
        y_scale: LinearScale,
        viewport: ViewportTransform,
    ) -> tuple[tuple[float, float], ...]:
        return tuple(viewport.apply((x_scale(p.x), y_scale(p.y))) for p in points)

    def _element(
        self,
        series: Series,
        x_scale: LinearScale,
        y_scale: LinearScale,
        viewport: ViewportTransform,
        color: str,
        classes: frozenset[str],
    ) -> Polyline:
        return Polyline(
            key=series.experiment_id,
            sample=series.sample,
            points=self._project(series.points, x_scale, y_scale, viewport),
            data=tuple((p.x, p.y) for p in series.points),
            color=color,
            classes=classes,
        )

    def _reference_classes(self) -> frozenset[str]:
        return frozenset({REFERENCE} if self.show_reference else {REFERENCE, HIDDEN})

    def _extras(
        self,
        dataset: PlotDataset,
        x_scale: LinearScale,
        y_scale: LinearScale,
        viewport: ViewportTransform,
    ) -> list[DrawCommand]:
        reference = dataset.reference_series
        if reference is None:
            return []
        return [
            Polyline(
                key=REFERENCE_KEY,
                sample=None,
                points=self._project(reference.points, x_scale, y_scale, viewport),
                data=tuple((p.x, p.y) for p in reference.points),
                color=REFERENCE_COLOR,
                classes=self._reference_classes(),
                dashed=True,
            )
        ]

    def extra_classes(self) -> dict[str, frozenset[str]]:
        if self.dataset is None or self.dataset.reference_series is None:
            return {}
        return {REFERENCE_KEY: self._reference_classes()}

    def option_help(self) -> tuple[str, ...]:
        if not self.has_resolution:
            return ()
        return (
            "You can smooth the lines to make it easier to compare experiments, "
            "or make the plot more responsive if you have a lot of data.",
        )

    def set_resolution(self, resolution: int) -> None:
        """Re-bin the fragment length histogram and re-render."""
        if not self.has_resolution:
            raise InvalidPlotOptionError(self.chart_id, "resolution", resolution, "not supported by this chart")
        self.set_options(resolution=resolution)

    def set_y_exponent(self, exponent: float) -> None:
        """Switch between linear (1) and power-scaled y axes and re-render."""
        if exponent <= 0:
            raise InvalidPlotOptionError(self.chart_id, "y_exponent", exponent, "a positive number")
        self.y_exponent = float(exponent)
        self.session.request_render(self.chart_id)

    def set_show_reference(self, show: bool) -> None:
        """Toggle the reference curve without re-rendering."""
        self.show_reference = show
        self._restyle()
