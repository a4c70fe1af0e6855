"""
Visualization module for atacdash.

Plot views, legends and tables produce host-agnostic output; the Plotly
surface and the report package turn it into an HTML dashboard.
"""

from atacdash.visualization.host import RecordingHost, RecordingRegion, Region, RenderHost
from atacdash.visualization.tables import DEFAULT_TABLES, TableSpec, TableView

__all__ = [
    "DEFAULT_TABLES",
    "RecordingHost",
    "RecordingRegion",
    "Region",
    "RenderHost",
    "TableSpec",
    "TableView",
]
