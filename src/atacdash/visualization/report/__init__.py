"""
Report generation module for atacdash.

Exports the dashboard as a single, self-contained, interactive HTML document.
"""

from atacdash.visualization.report.generator import (
    DashboardReportGenerator,
    ReportConfig,
    generate_report,
)
from atacdash.visualization.report.styles import (
    DARK_THEME,
    LIGHT_THEME,
    get_css_styles,
)

__all__ = [
    "DARK_THEME",
    "LIGHT_THEME",
    "DashboardReportGenerator",
    "ReportConfig",
    "generate_report",
    "get_css_styles",
]
