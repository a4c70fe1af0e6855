"""Plot views, scales and viewport handling."""

from atacdash.visualization.plots.base import (
    CATEGORY20C,
    Axis,
    Detail,
    DrawCommand,
    Marker,
    OrdinalColorScale,
    PlotView,
    Polyline,
    ViewState,
)
from atacdash.visualization.plots.charts import CHART_IDS, CHARTS, ChartSpec, chart_spec, create_view
from atacdash.visualization.plots.legend import LegendEntry, LegendView
from atacdash.visualization.plots.lines import LinePlotView
from atacdash.visualization.plots.scales import LinearScale, PowScale, tick_values
from atacdash.visualization.plots.scatter import ScatterPlotView
from atacdash.visualization.plots.viewport import ViewportTransform, ZoomBehavior

__all__ = [
    "CATEGORY20C",
    "CHARTS",
    "CHART_IDS",
    "Axis",
    "ChartSpec",
    "Detail",
    "DrawCommand",
    "LegendEntry",
    "LegendView",
    "LinePlotView",
    "LinearScale",
    "Marker",
    "OrdinalColorScale",
    "PlotView",
    "Polyline",
    "PowScale",
    "ScatterPlotView",
    "ViewState",
    "ViewportTransform",
    "ZoomBehavior",
    "chart_spec",
    "create_view",
    "tick_values",
]
