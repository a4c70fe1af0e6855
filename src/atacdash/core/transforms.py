"""
Data transformers: metrics dataset -> per-chart plot dataset.

Each chart type has one transformer implementing
``produce(dataset, options) -> PlotDataset``. Transformers are pure: they do
not look at selection or viewport state and never touch a drawing surface,
so they can be unit tested headlessly and are only re-run when a chart-local
option (bin resolution, y-axis source) changes.

Transforms:
    - Fragment length distance vs. a per-experiment metric (scatter)
    - Fragment length distribution, block-mean resampled (line)
    - Mapping quality distribution (line)
    - Cumulative fraction of reads in peaks by peak percentile (line)
    - Cumulative fraction of peak territory by peak percentile (line)
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import ClassVar, Literal

import numpy as np

from atacdash.core.exceptions import InvalidPlotOptionError, UnknownChartError
from atacdash.models.config import SCATTER_Y_SOURCES
from atacdash.models.metrics import ExperimentMetrics, MetricsDataset

logger = logging.getLogger(__name__)

PERCENTILE_STEPS = 100


# =============================================================================
# Plot dataset
# =============================================================================

@dataclass(frozen=True)
class Point:
    """One (x, y) datum in data coordinates."""

    x: float
    y: float


@dataclass
class Series:
    """Points derived from a single experiment."""

    experiment_id: str
    library: str
    sample: str
    description: str | None
    points: list[Point] = field(default_factory=list)


@dataclass
class ReferenceSeries:
    """Reference curve sharing the data series' x-binning."""

    source: str
    points: list[Point] = field(default_factory=list)


@dataclass
class PlotDataset:
    """
    Output of a transformer, consumed by exactly one chart.

    ``kind`` tags the variant: ``scatter`` datasets hold one point per series,
    ``line`` datasets hold a polyline per series and may carry a reference curve.
    """

    kind: Literal["scatter", "line"]
    series: dict[str, Series]
    x_max: float
    y_max: float
    x_label: str
    y_label: str
    reference_series: ReferenceSeries | None = None

    def iter_series(self) -> list[Series]:
        """Series in lexicographic experiment order."""
        return [self.series[key] for key in sorted(self.series)]

    def x_values(self) -> list[float]:
        return [p.x for s in self.series.values() for p in s.points]

    def y_values(self) -> list[float]:
        return [p.y for s in self.series.values() for p in s.points]


# =============================================================================
# Sample groups
# =============================================================================

@dataclass(frozen=True)
class DistanceStats:
    """Aggregate fragment length distance over a sample's libraries."""

    minimum: float
    maximum: float
    mean: float
    stddev: float


def population_stats(values: Sequence[float]) -> DistanceStats:
    """Min, max, mean and population standard deviation (divisor N)."""
    if not values:
        return DistanceStats(0.0, 0.0, 0.0, 0.0)
    arr = np.asarray(values, dtype=float)
    return DistanceStats(
        minimum=float(arr.min()),
        maximum=float(arr.max()),
        mean=float(arr.mean()),
        stddev=float(arr.std(ddof=0)),
    )


@dataclass
class SampleGroup:
    """Libraries of one sample within a plot dataset."""

    sample_id: str
    libraries: list[Series] = field(default_factory=list)

    @property
    def library_count(self) -> int:
        return len(self.libraries)

    @property
    def experiment_ids(self) -> list[str]:
        return [s.experiment_id for s in self.libraries]

    def distance_stats(self) -> DistanceStats:
        """Stats over each library's first x value (the scatter distance)."""
        return population_stats([s.points[0].x for s in self.libraries if s.points])


def group_by_sample(dataset: PlotDataset) -> dict[str, SampleGroup]:
    """Group a dataset's series by sample, keyed in lexicographic sample order."""
    groups: dict[str, SampleGroup] = {}
    for series in dataset.iter_series():
        groups.setdefault(series.sample, SampleGroup(series.sample)).libraries.append(series)
    return {key: groups[key] for key in sorted(groups)}


# =============================================================================
# Resampling helpers
# =============================================================================

def block_mean(values: Sequence[float], length: int, resolution: int) -> list[Point]:
    """
    Average consecutive fixed-width windows of ``values[:length]``.

    Emits one point per window at the window's start index with value
    ``sum(window) / resolution``; positions past the end of ``values`` count
    as zero.

    Example:
        >>> block_mean([2, 4, 6, 8], 4, 2)
        [Point(x=0.0, y=3.0), Point(x=2.0, y=7.0)]
    """
    if length <= 0:
        return []
    arr = np.zeros(length, dtype=float)
    available = min(len(values), length)
    arr[:available] = values[:available]
    starts = np.arange(0, length, resolution)
    means = np.add.reduceat(arr, starts) / resolution
    return [Point(float(x), float(y)) for x, y in zip(starts, means)]


def carry_forward(values: Sequence[float], steps: int = PERCENTILE_STEPS) -> list[Point]:
    """
    Expand a percentile array to ``steps`` points at x = 1..steps.

    Indices beyond the available data repeat the last available value; an
    empty array yields zeros.
    """
    points = []
    current = 0.0
    for index in range(steps):
        if index < len(values):
            current = float(values[index])
        points.append(Point(float(index + 1), current))
    return points


def _percent_of(numerator: float | None, denominator: float, experiment_id: str, field_name: str) -> float:
    if numerator is None:
        logger.warning("Experiment %s has no %s; plotting 0", experiment_id, field_name)
        return 0.0
    if not denominator:
        logger.warning(
            "Experiment %s has a zero denominator for %s; plotting 0", experiment_id, field_name
        )
        return 0.0
    return 100.0 * float(numerator) / float(denominator)


# =============================================================================
# Options
# =============================================================================

@dataclass(frozen=True)
class TransformOptions:
    """Chart-local options that change a transformer's output."""


@dataclass(frozen=True)
class ScatterOptions(TransformOptions):
    y_source: str = "hqaa"

    def __post_init__(self) -> None:
        if self.y_source not in SCATTER_Y_SOURCES:
            raise InvalidPlotOptionError(
                "fragment_length_distance",
                "y_source",
                self.y_source,
                "one of " + ", ".join(SCATTER_Y_SOURCES),
            )

    @property
    def y_label(self) -> str:
        return SCATTER_Y_SOURCES[self.y_source]


@dataclass(frozen=True)
class FragmentLengthOptions(TransformOptions):
    resolution: int = 10

    def __post_init__(self) -> None:
        if not isinstance(self.resolution, int) or isinstance(self.resolution, bool) or self.resolution < 1:
            raise InvalidPlotOptionError(
                "fragment_length", "resolution", self.resolution, "a positive integer"
            )


# =============================================================================
# Transformers
# =============================================================================

class DataTransformer(ABC):
    """Abstract base class for all chart transformers."""

    chart_id: ClassVar[str]
    kind: ClassVar[Literal["scatter", "line"]] = "line"
    x_label: ClassVar[str] = ""
    y_label: ClassVar[str] = ""
    options_type: ClassVar[type[TransformOptions]] = TransformOptions

    def default_options(self) -> TransformOptions:
        return self.options_type()

    def produce(self, dataset: MetricsDataset, options: TransformOptions | None = None) -> PlotDataset:
        """Derive the chart's plot dataset from the full metrics dataset."""
        if options is None:
            options = self.default_options()
        elif not isinstance(options, self.options_type):
            raise InvalidPlotOptionError(
                self.chart_id, "options", options, f"a {self.options_type.__name__}"
            )
        result = self._produce(dataset, options)
        logger.debug(
            "Produced %s dataset: %d series, x_max=%s, y_max=%s",
            self.chart_id, len(result.series), result.x_max, result.y_max,
        )
        return result

    @abstractmethod
    def _produce(self, dataset: MetricsDataset, options: TransformOptions) -> PlotDataset:
        ...

    def _series(self, experiment_id: str, experiment: ExperimentMetrics, points: list[Point]) -> Series:
        return Series(
            experiment_id=experiment_id,
            library=experiment.library_name or experiment_id,
            sample=experiment.sample_id or experiment_id,
            description=experiment.library.description,
            points=points,
        )

    def _empty(self, x_label: str | None = None, y_label: str | None = None) -> PlotDataset:
        return PlotDataset(
            kind=self.kind,
            series={},
            x_max=0.0,
            y_max=0.0,
            x_label=x_label or self.x_label,
            y_label=y_label or self.y_label,
        )


class FragmentLengthDistanceTransformer(DataTransformer):
    """Fragment length distance (x) against a selectable metric (y)."""

    chart_id = "fragment_length_distance"
    kind = "scatter"
    x_label = "Distance from reference fragment length distribution"
    options_type = ScatterOptions

    @staticmethod
    def y_value(experiment_id: str, experiment: ExperimentMetrics, y_source: str) -> float:
        if y_source == "short_mononucleosomal_ratio":
            return float(experiment.short_mononucleosomal_ratio)
        if y_source == "duplicate_autosomal_reads":
            return _percent_of(
                experiment.duplicate_autosomal_reads,
                experiment.total_autosomal_reads,
                experiment_id,
                y_source,
            )
        return _percent_of(experiment.metric(y_source), experiment.total_reads, experiment_id, y_source)

    def _produce(self, dataset: MetricsDataset, options: TransformOptions) -> PlotDataset:
        assert isinstance(options, ScatterOptions)
        result = self._empty(y_label=options.y_label)
        for experiment_id in dataset.experiment_ids:
            experiment = dataset.metrics[experiment_id]
            point = Point(
                float(experiment.fragment_length_distance),
                self.y_value(experiment_id, experiment, options.y_source),
            )
            result.series[experiment_id] = self._series(experiment_id, experiment, [point])

        if result.series:
            result.x_max = max(result.x_values())
            result.y_max = max(result.y_values())
        return result


class FragmentLengthTransformer(DataTransformer):
    """Fragment length distribution, block-mean resampled, with reference curve."""

    chart_id = "fragment_length"
    x_label = "Fragment length (bp)"
    y_label = "Fraction of all reads"
    options_type = FragmentLengthOptions

    def _produce(self, dataset: MetricsDataset, options: TransformOptions) -> PlotDataset:
        assert isinstance(options, FragmentLengthOptions)
        result = self._empty()
        experiment_ids = dataset.experiment_ids

        # Every series and the reference share the shortest histogram's range.
        max_length = min(
            (len(dataset.metrics[e].fragment_length_counts) for e in experiment_ids),
            default=0,
        )
        result.x_max = float(max_length)

        y_max = 0.0
        for experiment_id in experiment_ids:
            experiment = dataset.metrics[experiment_id]
            fractions = [fraction for _, fraction in experiment.fragment_length_counts]
            points = block_mean(fractions, max_length, options.resolution)
            result.series[experiment_id] = self._series(experiment_id, experiment, points)
            y_max = max([y_max] + [p.y for p in points])

        reference = dataset.fragment_length_reference
        if reference is not None:
            fractions = [fraction for _, fraction in reference.distribution]
            if len(fractions) < max_length:
                logger.warning(
                    "Reference distribution covers %d of %d fragment lengths; "
                    "missing lengths plotted as 0",
                    len(fractions), max_length,
                )
            points = block_mean(fractions, max_length, options.resolution)
            result.reference_series = ReferenceSeries(source=reference.source, points=points)
            y_max = max([y_max] + [p.y for p in points])

        result.y_max = y_max
        return result


class MapqTransformer(DataTransformer):
    """Mapping quality distribution normalized by total reads."""

    chart_id = "mapq"
    x_label = "Mapping quality"
    y_label = "Fraction of all reads"

    def _produce(self, dataset: MetricsDataset, options: TransformOptions) -> PlotDataset:
        result = self._empty()
        for experiment_id in dataset.experiment_ids:
            experiment = dataset.metrics[experiment_id]
            total_reads = experiment.total_reads
            if not total_reads and experiment.mapq_counts:
                logger.warning("Experiment %s has no total_reads; plotting MAPQ as 0", experiment_id)

            points = []
            for quality, count in experiment.mapq_counts:
                normed = count / total_reads if total_reads else 0.0
                points.append(Point(float(quality), float(normed)))
                result.x_max = max(result.x_max, float(quality))
                result.y_max = max(result.y_max, float(normed))
            result.series[experiment_id] = self._series(experiment_id, experiment, points)
        return result


class PeakPercentileTransformer(DataTransformer):
    """Cumulative curve over 100 peak percentiles with carry-forward fill."""

    percentile_field: ClassVar[str]

    x_label = "Peak percentile"

    def _produce(self, dataset: MetricsDataset, options: TransformOptions) -> PlotDataset:
        result = self._empty()
        result.x_max = float(PERCENTILE_STEPS)

        for experiment_id in dataset.experiment_ids:
            experiment = dataset.metrics[experiment_id]
            if experiment.peak_percentiles is None:
                logger.debug("Experiment %s has no peak percentiles; plotting zeros", experiment_id)
                values: list[float] = [0.0] * PERCENTILE_STEPS
            else:
                values = list(getattr(experiment.peak_percentiles, self.percentile_field))
                if len(values) < PERCENTILE_STEPS:
                    # Flat plateau may hide an incomplete upstream run.
                    logger.debug(
                        "Experiment %s has %d of %d %s values; carrying the last value forward",
                        experiment_id, len(values), PERCENTILE_STEPS, self.percentile_field,
                    )

            points = carry_forward(values)
            result.series[experiment_id] = self._series(experiment_id, experiment, points)
            result.y_max = max([result.y_max] + [p.y for p in points])
        return result


class PeakReadCountsTransformer(PeakPercentileTransformer):
    chart_id = "peak_read_counts"
    y_label = "Cumulative fraction of high-quality autosomal reads"
    percentile_field = "cumulative_fraction_of_hqaa"


class PeakTerritoryTransformer(PeakPercentileTransformer):
    chart_id = "peak_territory"
    y_label = "Cumulative fraction of peak territory"
    percentile_field = "cumulative_fraction_of_territory"


TRANSFORMERS: dict[str, type[DataTransformer]] = {
    cls.chart_id: cls
    for cls in (
        FragmentLengthDistanceTransformer,
        FragmentLengthTransformer,
        MapqTransformer,
        PeakReadCountsTransformer,
        PeakTerritoryTransformer,
    )
}


def get_transformer(chart_id: str) -> DataTransformer:
    """Instantiate the transformer registered for a chart."""
    try:
        return TRANSFORMERS[chart_id]()
    except KeyError:
        raise UnknownChartError(chart_id, list(TRANSFORMERS)) from None
