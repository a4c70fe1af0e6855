"""
atacdash: interactive quality-control dashboard for ATAC-seq experiments.

Loads a precomputed metrics artifact (one record per sequencing library),
derives per-chart plot data, and coordinates linked plots, legends and
metrics tables through a shared selection state and event bus.
"""

__version__ = "0.1.0"

from atacdash.core.session import DashboardSession
from atacdash.models.metrics import ExperimentMetrics, MetricsDataset

__all__ = [
    "DashboardSession",
    "ExperimentMetrics",
    "MetricsDataset",
    "__version__",
]
