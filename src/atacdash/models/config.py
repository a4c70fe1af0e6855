"""
Pydantic configuration models for atacdash.

These models define the dashboard's layout, interaction and scheduling
settings. Configuration can be loaded from YAML files or assembled from
CLI arguments.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Self

from pydantic import BaseModel, Field, model_validator

logger = logging.getLogger(__name__)


# Y-axis sources offered by the fragment length distance scatter plot.
SCATTER_Y_SOURCES: dict[str, str] = {
    "hqaa": "High-quality autosomal alignments (% of all reads)",
    "short_mononucleosomal_ratio": "Short to mononucleosomal ratio",
    "duplicate_autosomal_reads": "Duplicate autosomal reads (% of autosomal reads)",
    "total_autosomal_reads": "Autosomal reads (% of all reads)",
}


class DashboardConfig(BaseModel):
    """
    Configuration for dashboard rendering and interaction.

    Layout:
        plot_width / plot_height: Size of each chart's drawing surface in pixels.
        margin_*: Space reserved around the plotting area for axes and labels.

    Interaction:
        scatter_zoom_extent / line_zoom_extent: Bounds on the zoom scale factor.
        reset_transition_ms: Duration of the animated return to the identity view.
        marker_radius: Scatter marker radius at scale 1.

    Plots:
        default_resolution: Fragment length bin width.
        y_scale_exponent: Exponent for line-chart y axes (1 = linear).
        scatter_y_source: Metric plotted against fragment length distance.

    Scheduling:
        resize_debounce_ms: Quiet period before a resize triggers a re-render.
        stage_delay_ms / final_stage_delay_ms: Yield between load stages.
    """

    plot_width: int = Field(default=800, ge=200)
    plot_height: int = Field(default=500, ge=150)
    margin_top: int = Field(default=15, ge=0)
    margin_right: int = Field(default=20, ge=0)
    margin_bottom: int = Field(default=100, ge=0)
    margin_left: int = Field(default=100, ge=0)

    marker_radius: float = Field(default=5.5, gt=0)
    scatter_zoom_extent: tuple[float, float] = (1.0, 40.0)
    line_zoom_extent: tuple[float, float] = (1.0, 2.0)
    reset_transition_ms: int = Field(default=500, ge=0)
    reset_transition_frames: int = Field(default=20, ge=1)

    default_resolution: int = Field(default=10, ge=1)
    resolution_choices: tuple[int, ...] = (1, 5, 10, 20, 50)
    y_scale_exponent: float = Field(default=1.0, gt=0)
    y_scale_choices: tuple[float, ...] = (1.0, 0.5, 0.25)
    scatter_y_source: str = Field(default="hqaa")
    show_reference: bool = True
    compact_legend_threshold: int = Field(
        default=7,
        ge=1,
        description="Legends with fewer entries than this use full-width rows",
    )

    resize_debounce_ms: int = Field(default=500, ge=0)
    stage_delay_ms: int = Field(default=100, ge=0)
    final_stage_delay_ms: int = Field(default=10, ge=0)

    preferences_path: Path | None = Field(
        default=None,
        description="JSON file for table sort/search preferences; None disables persistence",
    )

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def validate_extents(self) -> Self:
        for name in ("scatter_zoom_extent", "line_zoom_extent"):
            low, high = getattr(self, name)
            if low <= 0 or high < low:
                msg = f"{name} must satisfy 0 < min <= max, got ({low}, {high})"
                raise ValueError(msg)
        if self.scatter_y_source not in SCATTER_Y_SOURCES:
            msg = (
                f"scatter_y_source must be one of {', '.join(SCATTER_Y_SOURCES)}, "
                f"got {self.scatter_y_source!r}"
            )
            raise ValueError(msg)
        return self

    @property
    def inner_width(self) -> float:
        return max(self.plot_width - self.margin_left - self.margin_right, 1)

    @property
    def inner_height(self) -> float:
        return max(self.plot_height - self.margin_bottom, 1)

    @classmethod
    def from_yaml(cls, path: Path) -> DashboardConfig:
        """
        Load dashboard configuration from a YAML file.

        The YAML file groups settings into ``layout``, ``interaction``,
        ``plots``, ``scheduling`` and ``preferences`` sections. Unknown keys
        are ignored (forward compatibility).

        Args:
            path: Path to YAML configuration file.

        Returns:
            DashboardConfig populated from YAML values merged with defaults.

        Raises:
            FileNotFoundError: If YAML file does not exist.
            ValueError: If YAML contains invalid values.
        """
        import yaml

        raw = yaml.safe_load(path.read_text())
        if raw is None:
            raw = {}
        if not isinstance(raw, dict):
            msg = f"YAML config must be a mapping, got {type(raw).__name__}"
            raise ValueError(msg)

        return cls(**_flatten_yaml_config(raw))

    def to_yaml(self, path: Path) -> None:
        """Write dashboard configuration to a YAML file."""
        path.write_text(self.to_yaml_str())

    def to_yaml_str(self) -> str:
        """Serialize dashboard configuration to a YAML string."""
        import yaml

        return yaml.dump(_build_yaml_structure(self), default_flow_style=False, sort_keys=False)


_YAML_SECTIONS: dict[str, dict[str, str]] = {
    "layout": {
        "width": "plot_width",
        "height": "plot_height",
        "margin_top": "margin_top",
        "margin_right": "margin_right",
        "margin_bottom": "margin_bottom",
        "margin_left": "margin_left",
    },
    "interaction": {
        "marker_radius": "marker_radius",
        "scatter_zoom_extent": "scatter_zoom_extent",
        "line_zoom_extent": "line_zoom_extent",
        "reset_transition_ms": "reset_transition_ms",
        "reset_transition_frames": "reset_transition_frames",
    },
    "plots": {
        "resolution": "default_resolution",
        "resolution_choices": "resolution_choices",
        "y_scale_exponent": "y_scale_exponent",
        "y_scale_choices": "y_scale_choices",
        "scatter_y_source": "scatter_y_source",
        "show_reference": "show_reference",
        "compact_legend_threshold": "compact_legend_threshold",
    },
    "scheduling": {
        "resize_debounce_ms": "resize_debounce_ms",
        "stage_delay_ms": "stage_delay_ms",
        "final_stage_delay_ms": "final_stage_delay_ms",
    },
    "preferences": {
        "path": "preferences_path",
    },
}


def _flatten_yaml_config(raw: dict[str, Any]) -> dict[str, Any]:
    """
    Flatten the nested YAML structure into DashboardConfig keyword arguments.

        layout.width -> plot_width
        plots.resolution -> default_resolution
        preferences.path -> preferences_path
    """
    flat: dict[str, Any] = {}
    for section, mapping in _YAML_SECTIONS.items():
        source = raw.get(section) or {}
        if not isinstance(source, dict):
            logger.warning("Ignoring config section %r: expected a mapping", section)
            continue
        for source_key, target_key in mapping.items():
            _map_if_present(source, source_key, flat, target_key)
    return flat


def _map_if_present(
    source: dict[str, Any],
    source_key: str,
    target: dict[str, Any],
    target_key: str,
) -> None:
    """Copy value from source dict to target dict if key exists."""
    if source_key in source and source[source_key] is not None:
        target[target_key] = source[source_key]


def _build_yaml_structure(config: DashboardConfig) -> dict[str, Any]:
    """Build nested YAML dict from a DashboardConfig instance."""
    data: dict[str, Any] = {}
    for section, mapping in _YAML_SECTIONS.items():
        values: dict[str, Any] = {}
        for yaml_key, field_name in mapping.items():
            value = getattr(config, field_name)
            if isinstance(value, tuple):
                value = list(value)
            elif isinstance(value, Path):
                value = str(value)
            values[yaml_key] = value
        data[section] = values
    return data
