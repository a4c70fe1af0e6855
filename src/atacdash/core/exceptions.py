"""
Custom exceptions with actionable guidance.

Provides specific error types for the failure scenarios the dashboard
cannot recover from locally, each with a helpful suggestion for resolution.
Degraded-but-usable inputs (missing sample names, partial percentile data,
unformattable numbers) are logged instead of raised.
"""

from __future__ import annotations


class AtacdashError(Exception):
    """Base exception for atacdash errors."""

    def __init__(self, message: str, suggestion: str | None = None):
        self.message = message
        self.suggestion = suggestion
        super().__init__(self.full_message)

    @property
    def full_message(self) -> str:
        if self.suggestion:
            return f"{self.message}\n\nSuggestion: {self.suggestion}"
        return self.message


class MetricsFileError(AtacdashError):
    """Base class for metrics artifact errors."""



class EmptyMetricsFileError(MetricsFileError):
    """Raised when the metrics artifact is empty or lists no experiments."""

    def __init__(self, path: str):
        super().__init__(
            message=f"Metrics file is empty or contains no experiments: {path}",
            suggestion=(
                "Check that the metrics collection step completed successfully "
                "and that the file contains a 'metrics' mapping with at least "
                "one experiment."
            ),
        )
        self.path = path


class MalformedMetricsFileError(MetricsFileError):
    """Raised when the metrics artifact cannot be parsed or validated."""

    def __init__(self, path: str, detail: str):
        super().__init__(
            message=f"Malformed metrics file '{path}': {detail}",
            suggestion=(
                "The file must be a JSON document (optionally gzip-compressed) of the form\n"
                "  {\"description\": ..., \"metrics\": {<experiment>: {...}},\n"
                "   \"fragment_length_reference\": {\"source\": ..., \"distribution\": [...]}}\n\n"
                "Regenerate it with the metrics collection step if it was "
                "truncated or edited by hand."
            ),
        )
        self.path = path
        self.detail = detail


class UnknownSampleError(AtacdashError, KeyError):
    """Raised when a selection operation names a sample not in the dataset."""

    def __init__(self, sample_id: str, known: list[str]):
        examples = ", ".join(known[:5])
        if len(known) > 5:
            examples += f"... and {len(known) - 5} more"
        super().__init__(
            message=f"Unknown sample: {sample_id!r}",
            suggestion=f"Known samples: {examples}" if known else "The dataset has no samples.",
        )
        self.sample_id = sample_id

    def __str__(self) -> str:
        return self.full_message


class ConfigurationError(AtacdashError):
    """Raised when configuration is invalid."""



class InvalidPlotOptionError(ConfigurationError):
    """Raised when a chart-local option has an unsupported value."""

    def __init__(self, chart: str, option: str, value: object, allowed: str):
        super().__init__(
            message=f"Invalid value for {chart} option '{option}': {value!r}",
            suggestion=f"Set '{option}' to {allowed}.",
        )
        self.chart = chart
        self.option = option
        self.value = value


class UnknownChartError(ConfigurationError):
    """Raised when a chart identifier does not name a registered chart."""

    def __init__(self, chart: str, known: list[str]):
        super().__init__(
            message=f"Unknown chart: {chart!r}",
            suggestion=f"Choose one of: {', '.join(known)}",
        )
        self.chart = chart
