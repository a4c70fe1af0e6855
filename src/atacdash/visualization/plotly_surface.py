"""
Plotly rendering of plot views.

Converts a rendered view's draw commands into a Plotly figure for static
HTML export. Each sample is one legend group, so clicking a sample in the
Plotly legend toggles all of its libraries; hidden samples start as
``legendonly``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import plotly.graph_objects as go

from atacdash.core.formatting import format_number
from atacdash.visualization.plots.base import (
    HIDDEN,
    REFERENCE_KEY,
    Axis,
    Marker,
    PlotView,
    Polyline,
)
from atacdash.visualization.plots.scales import PowScale


@dataclass
class FigureStyle:
    """Common styling for exported figures."""

    template: str = "plotly_white"
    font_family: str = "Arial, Helvetica, sans-serif"
    title_font_size: int = 16
    axis_font_size: int = 12
    legend_font_size: int = 11

    def to_layout_dict(self, title: str | None = None) -> dict[str, Any]:
        layout: dict[str, Any] = {
            "template": self.template,
            "font": {"family": self.font_family, "size": self.axis_font_size},
            "legend": {"font": {"size": self.legend_font_size}},
        }
        if title:
            layout["title"] = {"text": title, "font": {"size": self.title_font_size}}
        return layout


class PlotlyFigure:
    """Plotly figure built from one rendered plot view."""

    def __init__(self, view: PlotView, style: FigureStyle | None = None) -> None:
        self.view = view
        self.style = style or FigureStyle()

    def _axis_layout(self, axis: Axis) -> dict[str, Any]:
        layout: dict[str, Any] = {"title": {"text": axis.label}, "zeroline": axis.origin}
        if axis.exponent == 1.0:
            layout["range"] = list(axis.domain)
            return layout
        # Plotly has no power axis; plot transformed values and relabel ticks.
        scale = PowScale(axis.domain, axis.range, exponent=axis.exponent)
        layout["range"] = [scale.transform(v) for v in axis.domain]
        layout["tickvals"] = [scale.transform(t) for t in axis.ticks]
        layout["ticktext"] = [format_number(t) for t in axis.ticks]
        return layout

    def create_figure(self) -> go.Figure:
        """Create the figure; the view must have been rendered."""
        view = self.view
        config = view.config
        axes = {c.orientation: c for c in view.commands if isinstance(c, Axis)}
        y_axis = axes.get("y")
        exponent = y_axis.exponent if y_axis is not None else 1.0
        y_transform = PowScale((0.0, 1.0), (0.0, 1.0), exponent=exponent).transform

        fig = go.Figure()
        seen_groups: set[str] = set()
        for command in view.commands:
            if isinstance(command, Axis):
                continue
            visible: bool | str = "legendonly" if HIDDEN in command.classes else True

            if isinstance(command, Marker):
                fig.add_trace(
                    go.Scatter(
                        x=[command.data[0]],
                        y=[command.data[1]],
                        mode="markers",
                        marker={"size": 2 * command.radius, "color": command.color},
                        name=command.sample,
                        legendgroup=command.sample,
                        showlegend=command.sample not in seen_groups,
                        visible=visible,
                        customdata=[command.key],
                        hovertemplate=(
                            f"<b>{command.key}</b><br>"
                            "Distance: %{x:.4g}<br>"
                            f"{y_axis.label if y_axis else 'y'}: %{{y:.3f}}<extra>{command.sample}</extra>"
                        ),
                    )
                )
                seen_groups.add(command.sample)
            elif isinstance(command, Polyline) and command.key == REFERENCE_KEY:
                fig.add_trace(
                    go.Scatter(
                        x=[p[0] for p in command.data],
                        y=[y_transform(p[1]) for p in command.data],
                        mode="lines",
                        line={"color": command.color, "dash": "dash", "shape": "spline"},
                        name="Reference",
                        visible=visible,
                        hoverinfo="skip",
                    )
                )
            elif isinstance(command, Polyline):
                fig.add_trace(
                    go.Scatter(
                        x=[p[0] for p in command.data],
                        y=[y_transform(p[1]) for p in command.data],
                        mode="lines",
                        line={"color": command.color, "shape": "spline"},
                        name=command.sample,
                        legendgroup=command.sample,
                        showlegend=command.sample not in seen_groups,
                        visible=visible,
                        hovertemplate=f"<b>{command.key}</b><extra>{command.sample}</extra>",
                    )
                )
                seen_groups.add(command.sample)

        fig.update_layout(
            **self.style.to_layout_dict(view.title),
            width=config.plot_width,
            height=config.plot_height,
            margin={
                "t": config.margin_top + 40,
                "r": config.margin_right,
                "b": config.margin_bottom,
                "l": config.margin_left,
            },
        )
        if "x" in axes:
            fig.update_xaxes(**self._axis_layout(axes["x"]))
        if y_axis is not None:
            fig.update_yaxes(**self._axis_layout(y_axis))
        return fig

    def div_id(self) -> str:
        return f"plot-{self.view.chart_id.replace('_', '-')}"

    def to_json(self) -> str:
        return self.create_figure().to_json()

    def to_html_div(self, include_plotlyjs: bool = False) -> str:
        return self.create_figure().to_html(
            full_html=False,
            include_plotlyjs="cdn" if include_plotlyjs else False,
            div_id=self.div_id(),
        )

    def save(self, path: str, **kwargs: Any) -> None:
        """Save as .html or .json."""
        fig = self.create_figure()
        if path.endswith(".html"):
            fig.write_html(path, include_plotlyjs=True, **kwargs)
        elif path.endswith(".json"):
            fig.write_json(path, **kwargs)
        else:
            msg = f"Unsupported file format: {path}"
            raise ValueError(msg)
