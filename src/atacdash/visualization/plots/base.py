"""
Base classes and utilities for plot views.

Defines the colour palette, the draw-command vocabulary handed to rendering
hosts, and the ``PlotView`` base class shared by the scatter and line charts.

A plot view goes ``empty -> rendering -> interactive`` and back to
``rendering`` whenever an option changes. Rendering is the only time the
chart's transformer runs; selection changes, hovering and zooming re-derive
presentation (element classes, detail text, geometry under the current
viewport) from the cached plot dataset.
"""

from __future__ import annotations

import dataclasses
import logging
from abc import ABC, abstractmethod
from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, ClassVar, Literal

from atacdash.core.events import EventKind, ItemHovered, SampleHovered, SelectionChanged
from atacdash.core.transforms import (
    DataTransformer,
    PlotDataset,
    SampleGroup,
    Series,
    TransformOptions,
    get_transformer,
    group_by_sample,
)
from atacdash.models.metrics import ExperimentMetrics
from atacdash.visualization.plots.legend import LegendView
from atacdash.visualization.plots.scales import LinearScale
from atacdash.visualization.plots.viewport import ViewportTransform, ZoomBehavior

if TYPE_CHECKING:
    from atacdash.core.selection import SelectionState
    from atacdash.core.session import DashboardSession
    from atacdash.visualization.host import Region

logger = logging.getLogger(__name__)


# =============================================================================
# Colour Palettes
# =============================================================================

# 20-colour categorical palette in four shades per hue
CATEGORY20C: list[str] = [
    "#3182bd", "#6baed6", "#9ecae1", "#c6dbef",  # Blues
    "#e6550d", "#fd8d3c", "#fdae6b", "#fdd0a2",  # Oranges
    "#31a354", "#74c476", "#a1d99b", "#c7e9c0",  # Greens
    "#756bb1", "#9e9ac8", "#bcbddc", "#dadaeb",  # Purples
    "#636363", "#969696", "#bdbdbd", "#d9d9d9",  # Grays
]

REFERENCE_COLOR = "#e41a1c"
REFERENCE_KEY = "__reference__"

# Element classes
HIDDEN = "hidden"
HIGHLIGHT = "highlight"
UNHIGHLIGHT = "unhighlight"
REFERENCE = "reference"
ORIGIN = "origin"


class OrdinalColorScale:
    """Assign palette colours to keys in order of first request."""

    def __init__(self, palette: Sequence[str] = CATEGORY20C) -> None:
        self.palette = list(palette)
        self._assigned: dict[str, str] = {}

    def __call__(self, key: str) -> str:
        if key not in self._assigned:
            self._assigned[key] = self.palette[len(self._assigned) % len(self.palette)]
        return self._assigned[key]

    @property
    def domain(self) -> list[str]:
        return list(self._assigned)


# =============================================================================
# Draw commands
# =============================================================================

@dataclass(frozen=True)
class Axis:
    """An axis under the current viewport (domain already rescaled)."""

    orientation: Literal["x", "y"]
    domain: tuple[float, float]
    range: tuple[float, float]
    ticks: tuple[float, ...]
    label: str
    exponent: float = 1.0
    origin: bool = False


@dataclass(frozen=True)
class Marker:
    """A scatter dot; ``cx``/``cy`` are surface coordinates, ``data`` the datum."""

    key: str
    sample: str
    cx: float
    cy: float
    radius: float
    color: str
    data: tuple[float, float]
    classes: frozenset[str] = frozenset()


@dataclass(frozen=True)
class Polyline:
    """A smoothed line through surface-coordinate ``points``."""

    key: str
    sample: str | None
    points: tuple[tuple[float, float], ...]
    data: tuple[tuple[float, float], ...]
    color: str
    classes: frozenset[str] = frozenset()
    dashed: bool = False
    curve: str = "basis"


DrawCommand = Axis | Marker | Polyline


def stack(commands: Sequence[DrawCommand]) -> list[DrawCommand]:
    """Order commands for drawing: axes, plain items, highlighted items, reference."""
    axes = [c for c in commands if isinstance(c, Axis)]
    items = [c for c in commands if not isinstance(c, Axis) and c.key != REFERENCE_KEY]
    reference = [c for c in commands if not isinstance(c, Axis) and c.key == REFERENCE_KEY]
    raised = [c for c in items if HIGHLIGHT in c.classes]
    rest = [c for c in items if HIGHLIGHT not in c.classes]
    return axes + rest + raised + reference


# =============================================================================
# Detail panel
# =============================================================================

@dataclass(frozen=True)
class Detail:
    """Content of a chart's detail panel: either a record or help text."""

    title: str | None = None
    rows: tuple[tuple[str, str], ...] = ()
    help: tuple[str, ...] = ()

    @property
    def is_help(self) -> bool:
        return self.title is None


HELP_ZOOM = "Double click or use the mouse wheel or trackpad scroll to zoom. Drag to pan."
HELP_LEGEND = "Mouse over legend items to highlight samples. Click them to toggle sample visibility."


class ViewState(str, Enum):
    EMPTY = "empty"
    RENDERING = "rendering"
    INTERACTIVE = "interactive"


# =============================================================================
# Base Plot View
# =============================================================================

class PlotView(ABC):
    """Abstract base class for all chart views."""

    zoom_extent_field: ClassVar[str] = "line_zoom_extent"
    item_help: ClassVar[str] = "Mouse over lines to see experiment details."
    y_tick_count: ClassVar[int] = 10

    def __init__(
        self,
        chart_id: str,
        title: str,
        session: DashboardSession,
        transformer: DataTransformer | None = None,
        options: TransformOptions | None = None,
        extra_help: Sequence[str] = (),
    ) -> None:
        """
        Initialize a plot view.

        Args:
            chart_id: Identifier of the chart; also the host region name
            title: Chart title
            session: Coordinator shared by every view of the loaded dataset
            transformer: Transformer producing the chart's data (looked up by chart_id if omitted)
            options: Transformer options (transformer defaults if omitted)
            extra_help: Chart-specific help paragraphs
        """
        self.chart_id = chart_id
        self.title = title
        self.session = session
        self.config = session.config
        self.transformer = transformer or get_transformer(chart_id)
        self.options = options if options is not None else self.default_options()
        self.extra_help = tuple(extra_help)

        self.state = ViewState.EMPTY
        self.dataset: PlotDataset | None = None
        self.groups: dict[str, SampleGroup] = {}
        self.colors = OrdinalColorScale()
        self.zoom = ZoomBehavior(getattr(self.config, self.zoom_extent_field))
        self.highlighted: frozenset[str] | None = None
        self.commands: list[DrawCommand] = []
        self.detail = self.help_detail()
        self.legend = LegendView(self)
        self.render_count = 0

    def default_options(self) -> TransformOptions:
        return self.transformer.default_options()

    # -------------------------------------------------------------------------
    # Host
    # -------------------------------------------------------------------------

    @property
    def region(self) -> Region | None:
        return self.session.region(self.chart_id)

    def _publish_draw(self) -> None:
        region = self.region
        if region is not None:
            region.draw(self.commands)

    def _publish_classes(self) -> None:
        region = self.region
        if region is not None:
            region.update_classes(self.element_class_map())

    def _publish_detail(self) -> None:
        region = self.region
        if region is not None:
            region.show_detail(self.detail)

    # -------------------------------------------------------------------------
    # Rendering
    # -------------------------------------------------------------------------

    def render(self) -> list[DrawCommand]:
        """
        Transform, rebind and redraw the chart from scratch.

        Every render replaces the view's event bindings and resets its
        viewport, highlight and detail panel.
        """
        previous = self.state
        self.state = ViewState.RENDERING
        try:
            dataset = self.transformer.produce(self.session.store.dataset, self.options)
        except Exception:
            self.state = previous
            raise

        self.dataset = dataset
        self.groups = group_by_sample(dataset)
        self.colors = self.color_scale(dataset)
        self.zoom = ZoomBehavior(getattr(self.config, self.zoom_extent_field))
        self.highlighted = None
        self.detail = self.help_detail()

        self._bind()
        self.commands = self.render_commands(dataset, self.session.selection, self.zoom.transform)
        self._publish_draw()
        self._publish_detail()
        self.legend.build()

        self.render_count += 1
        self.state = ViewState.INTERACTIVE
        logger.debug("Rendered %s (%d series)", self.chart_id, len(dataset.series))
        return self.commands

    def _bind(self) -> None:
        bus = self.session.bus
        bus.on(EventKind.SELECTION_CHANGED, self.chart_id, self._on_selection_changed)
        bus.on(EventKind.ITEM_HOVERED, self.chart_id, self._on_item_hovered)
        bus.on(EventKind.SAMPLE_HOVERED, self.chart_id, self._on_sample_hovered)

    @staticmethod
    def color_scale(dataset: PlotDataset) -> OrdinalColorScale:
        colors = OrdinalColorScale()
        for series in dataset.iter_series():
            colors(series.sample)
        return colors

    def base_scales(self, dataset: PlotDataset) -> tuple[LinearScale, LinearScale]:
        """Scales at the identity viewport, with domains from the full dataset."""
        x_scale = LinearScale(self.x_domain(dataset), (0.0, float(self.config.inner_width)))
        y_scale = self.y_scale(dataset, (float(self.config.inner_height), 0.0))
        return x_scale, y_scale

    @abstractmethod
    def x_domain(self, dataset: PlotDataset) -> tuple[float, float]:
        ...

    @abstractmethod
    def y_scale(self, dataset: PlotDataset, output_range: tuple[float, float]) -> LinearScale:
        ...

    @abstractmethod
    def _element(
        self,
        series: Series,
        x_scale: LinearScale,
        y_scale: LinearScale,
        viewport: ViewportTransform,
        color: str,
        classes: frozenset[str],
    ) -> DrawCommand:
        ...

    def _extras(
        self,
        dataset: PlotDataset,
        x_scale: LinearScale,
        y_scale: LinearScale,
        viewport: ViewportTransform,
    ) -> list[DrawCommand]:
        return []

    def _x_axis_origin(self, dataset: PlotDataset) -> bool:
        return False

    def render_commands(
        self,
        dataset: PlotDataset,
        selection: SelectionState,
        viewport: ViewportTransform,
        highlighted: frozenset[str] | None = None,
    ) -> list[DrawCommand]:
        """
        Draw commands for ``dataset`` filtered by ``selection`` under ``viewport``.

        Axis domains come from the whole dataset, so hiding samples never
        changes the scale. Hidden series are emitted with the ``hidden``
        class rather than dropped.
        """
        x_scale, y_scale = self.base_scales(dataset)
        visible_x = viewport.rescale_x(x_scale)
        visible_y = viewport.rescale_y(y_scale)
        commands: list[DrawCommand] = [
            Axis(
                "x",
                visible_x.domain,
                visible_x.range,
                tuple(visible_x.ticks()),
                dataset.x_label,
                origin=self._x_axis_origin(dataset),
            ),
            Axis(
                "y",
                visible_y.domain,
                visible_y.range,
                tuple(visible_y.ticks(self.y_tick_count)),
                dataset.y_label,
                exponent=getattr(y_scale, "exponent", 1.0),
            ),
        ]

        colors = self.color_scale(dataset)
        for series in dataset.iter_series():
            classes = self.element_classes(series, selection, highlighted)
            commands.append(
                self._element(series, x_scale, y_scale, viewport, colors(series.sample), classes)
            )
        commands.extend(self._extras(dataset, x_scale, y_scale, viewport))
        return stack(commands)

    @staticmethod
    def element_classes(
        series: Series,
        selection: SelectionState,
        highlighted: frozenset[str] | None,
    ) -> frozenset[str]:
        classes = set()
        if not selection.is_visible(series.sample):
            classes.add(HIDDEN)
        if highlighted is not None:
            classes.add(HIGHLIGHT if series.experiment_id in highlighted else UNHIGHLIGHT)
        return frozenset(classes)

    def element_class_map(self) -> dict[str, frozenset[str]]:
        return {c.key: c.classes for c in self.commands if not isinstance(c, Axis)}

    def extra_classes(self) -> dict[str, frozenset[str]]:
        return {}

    def _restyle(self) -> None:
        """Recompute element classes and stacking without touching geometry."""
        if self.dataset is None:
            return
        selection = self.session.selection
        classes = {
            s.experiment_id: self.element_classes(s, selection, self.highlighted)
            for s in self.dataset.iter_series()
        }
        classes.update(self.extra_classes())
        self.commands = stack(
            [
                dataclasses.replace(c, classes=classes[c.key])
                if not isinstance(c, Axis) and c.key in classes
                else c
                for c in self.commands
            ]
        )
        self._publish_classes()

    def _redraw_viewport(self, transform: ViewportTransform | None = None) -> None:
        if self.dataset is None:
            return
        order = [c.key for c in self.commands if not isinstance(c, Axis)]
        commands = self.render_commands(
            self.dataset,
            self.session.selection,
            transform or self.zoom.transform,
            self.highlighted,
        )
        # Keep any z-order the user changed by clicking.
        rank = {key: i for i, key in enumerate(order)}
        commands.sort(key=lambda c: -1 if isinstance(c, Axis) else rank.get(c.key, len(rank)))
        self.commands = stack(commands)
        self._publish_draw()

    # -------------------------------------------------------------------------
    # Event handlers
    # -------------------------------------------------------------------------

    def _on_selection_changed(self, event: SelectionChanged) -> None:
        self._restyle()

    def _on_item_hovered(self, event: ItemHovered) -> None:
        if self.dataset is None:
            return
        experiment = self.session.store.get(event.experiment_id)
        if experiment is not None and event.experiment_id is not None:
            self.highlighted = frozenset({event.experiment_id})
            self.detail = self.item_detail(event.experiment_id, experiment)
        else:
            self.highlighted = None
            self.detail = self.help_detail()
        self._restyle()
        self._publish_detail()

    def _on_sample_hovered(self, event: SampleHovered) -> None:
        if self.dataset is None:
            return
        group = self.groups.get(event.sample_id) if event.sample_id is not None else None
        if group is not None:
            self.highlighted = frozenset(group.experiment_ids)
            if event.source == self.chart_id:
                self.detail = self.sample_detail(group)
        else:
            self.highlighted = None
            if event.source == self.chart_id:
                self.detail = self.help_detail()
        self._restyle()
        self._publish_detail()

    # -------------------------------------------------------------------------
    # Detail panel
    # -------------------------------------------------------------------------

    def option_help(self) -> tuple[str, ...]:
        return ()

    def help_detail(self) -> Detail:
        return Detail(
            help=(self.item_help, HELP_ZOOM, HELP_LEGEND) + self.option_help() + self.extra_help
        )

    def item_detail(self, experiment_id: str, experiment: ExperimentMetrics) -> Detail:
        return Detail(
            title=experiment_id,
            rows=(
                ("Library", experiment.library_name or experiment_id),
                ("Sample", experiment.sample_id or experiment_id),
                ("Description", str(experiment.library.description)),
            ),
        )

    def sample_detail(self, group: SampleGroup) -> Detail:
        return Detail(title=group.sample_id, rows=(("Libraries:", str(group.library_count)),))

    # -------------------------------------------------------------------------
    # User interaction
    # -------------------------------------------------------------------------

    def hover_element(self, experiment_id: str | None) -> None:
        """Pointer entered (id) or left (None) an element of this chart."""
        self.session.hover_item(experiment_id)

    def click_element(self, experiment_id: str) -> None:
        """Send the clicked element to the back so overlapped ones can be reached."""
        items = [c for c in self.commands if not isinstance(c, Axis)]
        clicked = [c for c in items if c.key == experiment_id]
        if not clicked:
            return
        axes = [c for c in self.commands if isinstance(c, Axis)]
        self.commands = axes + clicked + [c for c in items if c.key != experiment_id]
        self._publish_draw()

    def zoom_to(self, k: float, anchor: tuple[float, float] = (0.0, 0.0)) -> ViewportTransform:
        transform = self.zoom.scale_to(k, anchor)
        self._redraw_viewport()
        return transform

    def wheel(self, delta_y: float, anchor: tuple[float, float]) -> ViewportTransform:
        transform = self.zoom.wheel(delta_y, anchor)
        self._redraw_viewport()
        return transform

    def double_click(self, anchor: tuple[float, float], shift: bool = False) -> ViewportTransform:
        transform = self.zoom.double_click(anchor, shift)
        self._redraw_viewport()
        return transform

    def pan(self, dx: float, dy: float) -> ViewportTransform:
        transform = self.zoom.translate_by(dx, dy)
        self._redraw_viewport()
        return transform

    def reset(self) -> list[ViewportTransform]:
        """Animate back to the identity view and restore the help text."""
        self.detail = self.help_detail()
        self._publish_detail()
        frames = self.zoom.reset(self.config.reset_transition_frames)
        for frame in frames:
            self._redraw_viewport(frame)
        return frames

    @property
    def frame_interval_ms(self) -> float:
        return self.config.reset_transition_ms / self.config.reset_transition_frames

    def set_options(self, **changes: object) -> None:
        """Change transformer options and re-render the chart."""
        self.options = dataclasses.replace(self.options, **changes)
        self.session.request_render(self.chart_id)
