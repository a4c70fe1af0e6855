"""
CLI commands for atacdash.

Provides the command-line interface for exporting dashboards and
summarizing metrics files.
"""

__all__ = ["main", "report", "summary"]
