"""
Pydantic data models for atacdash.

Provides type-safe models for the metrics artifact and dashboard configuration.
"""

from atacdash.models.config import SCATTER_Y_SOURCES, DashboardConfig
from atacdash.models.metrics import (
    ExperimentMetrics,
    FragmentLengthReference,
    LibraryInfo,
    MetricsDataset,
    PeakPercentiles,
)

__all__ = [
    "SCATTER_Y_SOURCES",
    "DashboardConfig",
    "ExperimentMetrics",
    "FragmentLengthReference",
    "LibraryInfo",
    "MetricsDataset",
    "PeakPercentiles",
]
