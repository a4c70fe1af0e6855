"""
Core state and data flow for the dashboard.

This module contains the metrics store, the chart transformers, the
selection state and event bus shared by views, and the cooperative load
scheduler. The session coordinator lives in ``atacdash.core.session``.
"""

from atacdash.core.events import EventBus, EventKind, ItemHovered, SampleHovered, SelectionChanged
from atacdash.core.selection import SelectionState
from atacdash.core.store import MetricsStore
from atacdash.core.transforms import (
    DataTransformer,
    PlotDataset,
    Series,
    get_transformer,
)

__all__ = [
    "DataTransformer",
    "EventBus",
    "EventKind",
    "ItemHovered",
    "MetricsStore",
    "PlotDataset",
    "SampleHovered",
    "SelectionChanged",
    "SelectionState",
    "Series",
    "get_transformer",
]
