"""
Unit tests for the chart data transformers.

Covers block-mean resampling, percentile carry-forward, the per-chart
transformers and per-sample distance statistics.
"""

from __future__ import annotations

import math

import pytest

from atacdash.core.exceptions import InvalidPlotOptionError, UnknownChartError
from atacdash.core.transforms import (
    PERCENTILE_STEPS,
    FragmentLengthDistanceTransformer,
    FragmentLengthOptions,
    FragmentLengthTransformer,
    MapqTransformer,
    PeakReadCountsTransformer,
    PeakTerritoryTransformer,
    Point,
    ScatterOptions,
    block_mean,
    carry_forward,
    get_transformer,
    group_by_sample,
    population_stats,
)
from atacdash.models.metrics import MetricsDataset


class TestBlockMean:
    """Tests for fixed-window resampling."""

    def test_even_windows(self):
        assert block_mean([2, 4, 6, 8], 4, 2) == [Point(0.0, 3.0), Point(2.0, 7.0)]

    def test_resolution_one_is_identity(self):
        points = block_mean([0.1, 0.2, 0.3], 3, 1)
        assert [p.x for p in points] == [0.0, 1.0, 2.0]
        assert [p.y for p in points] == pytest.approx([0.1, 0.2, 0.3])

    def test_partial_last_window_divides_by_resolution(self):
        """The short final window is averaged over the full resolution."""
        points = block_mean([1, 2, 3], 3, 2)
        assert points == [Point(0.0, 1.5), Point(2.0, 1.5)]

    def test_truncates_to_length(self):
        points = block_mean([1, 1, 1, 1, 100, 100], 4, 2)
        assert points == [Point(0.0, 1.0), Point(2.0, 1.0)]

    def test_missing_values_count_as_zero(self):
        points = block_mean([4, 4], 4, 2)
        assert points == [Point(0.0, 4.0), Point(2.0, 0.0)]

    def test_zero_length(self):
        assert block_mean([1, 2, 3], 0, 2) == []


class TestCarryForward:
    """Tests for percentile expansion to 100 steps."""

    def test_full_array(self):
        values = [i / 100 for i in range(1, 101)]
        points = carry_forward(values)
        assert len(points) == PERCENTILE_STEPS
        assert points[0] == Point(1.0, 0.01)
        assert points[-1] == Point(100.0, 1.0)

    def test_short_array_repeats_last_value(self):
        points = carry_forward([0.1, 0.2, 0.3])
        assert [p.y for p in points[:3]] == [0.1, 0.2, 0.3]
        assert all(p.y == 0.3 for p in points[3:])
        assert [p.x for p in points] == [float(i) for i in range(1, 101)]

    def test_empty_array_yields_zeros(self):
        points = carry_forward([])
        assert len(points) == PERCENTILE_STEPS
        assert all(p.y == 0.0 for p in points)


class TestPopulationStats:
    """Tests for per-sample distance statistics."""

    def test_population_standard_deviation(self):
        stats = population_stats([10, 20, 30])
        assert stats.minimum == 10
        assert stats.maximum == 30
        assert stats.mean == 20
        assert stats.stddev == pytest.approx(math.sqrt(200 / 3))

    def test_single_value_has_zero_deviation(self):
        stats = population_stats([4.2])
        assert stats.stddev == 0.0
        assert stats.mean == pytest.approx(4.2)

    def test_empty(self):
        stats = population_stats([])
        assert (stats.minimum, stats.maximum, stats.mean, stats.stddev) == (0.0, 0.0, 0.0, 0.0)


class TestScatterTransformer:
    """Tests for fragment length distance vs. metric."""

    def test_hqaa_percent_of_total_reads(self, metrics_dataset):
        result = FragmentLengthDistanceTransformer().produce(metrics_dataset)

        assert result.kind == "scatter"
        assert list(result.series) == ["exp_a1", "exp_a2", "exp_b1"]
        assert result.series["exp_a1"].points == [Point(0.1, 50.0)]
        assert result.series["exp_a2"].points == [Point(0.3, 60.0)]
        assert result.series["exp_b1"].points == [Point(-0.2, 20.0)]
        assert result.x_max == 0.3
        assert result.y_max == 60.0

    def test_duplicate_autosomal_percent(self, metrics_dataset):
        options = ScatterOptions(y_source="duplicate_autosomal_reads")
        result = FragmentLengthDistanceTransformer().produce(metrics_dataset, options)

        assert [s.points[0].y for s in result.iter_series()] == pytest.approx([10.0, 20.0, 0.0])
        assert result.y_label.startswith("Duplicate autosomal reads")

    def test_ratio_is_plotted_unscaled(self, metrics_dataset):
        options = ScatterOptions(y_source="short_mononucleosomal_ratio")
        result = FragmentLengthDistanceTransformer().produce(metrics_dataset, options)

        assert [s.points[0].y for s in result.iter_series()] == [1.5, 2.0, 0.5]

    def test_zero_total_reads_plots_zero(self, metrics_dict):
        metrics_dict["metrics"]["exp_a1"]["total_reads"] = 0
        dataset = MetricsDataset.model_validate(metrics_dict)

        result = FragmentLengthDistanceTransformer().produce(dataset)
        assert result.series["exp_a1"].points[0].y == 0.0

    def test_series_identity(self, metrics_dataset):
        result = FragmentLengthDistanceTransformer().produce(metrics_dataset)
        series = result.series["exp_a1"]
        assert series.library == "libA1"
        assert series.sample == "sampleA"
        assert series.description == "Library A1"

    def test_unknown_y_source_rejected(self):
        with pytest.raises(InvalidPlotOptionError) as exc_info:
            ScatterOptions(y_source="bogus")
        assert exc_info.value.option == "y_source"

    def test_wrong_options_type_rejected(self, metrics_dataset):
        with pytest.raises(InvalidPlotOptionError):
            FragmentLengthDistanceTransformer().produce(metrics_dataset, FragmentLengthOptions())


class TestFragmentLengthTransformer:
    """Tests for the resampled fragment length distribution."""

    def test_block_means_and_shared_range(self, metrics_dataset):
        result = FragmentLengthTransformer().produce(
            metrics_dataset, FragmentLengthOptions(resolution=2)
        )

        assert result.kind == "line"
        assert result.x_max == 4.0
        assert [(p.x, p.y) for p in result.series["exp_a1"].points] == pytest.approx(
            [(0.0, 0.15), (2.0, 0.35)]
        )
        assert [(p.x, p.y) for p in result.series["exp_a2"].points] == pytest.approx(
            [(0.0, 0.05), (2.0, 0.25)]
        )
        assert result.y_max == pytest.approx(0.375)

    def test_reference_padded_to_shared_range(self, metrics_dataset):
        result = FragmentLengthTransformer().produce(
            metrics_dataset, FragmentLengthOptions(resolution=2)
        )

        reference = result.reference_series
        assert reference is not None
        assert reference.source == "reference.txt"
        assert [(p.x, p.y) for p in reference.points] == pytest.approx([(0.0, 0.1), (2.0, 0.05)])

    def test_no_reference(self, metrics_dict):
        del metrics_dict["fragment_length_reference"]
        dataset = MetricsDataset.model_validate(metrics_dict)

        result = FragmentLengthTransformer().produce(dataset)
        assert result.reference_series is None

    def test_truncates_to_shortest_histogram(self):
        dataset = MetricsDataset.model_validate({
            "metrics": {
                "long": {"fragment_length_counts": [[i, 0.01] for i in range(150)]},
                "short": {"fragment_length_counts": [[i, 0.01] for i in range(120)]},
            },
            "fragment_length_reference": {
                "source": "long_reference.txt",
                "distribution": [[i, 0.02] for i in range(150)],
            },
        })

        result = FragmentLengthTransformer().produce(dataset, FragmentLengthOptions(resolution=10))

        assert result.x_max == 120.0
        assert len(result.series["long"].points) == 12
        assert len(result.series["short"].points) == 12
        assert result.series["long"].points[-1].x == 110.0

        reference = result.reference_series.points
        assert len(reference) == 12
        assert reference[-1].x == 110.0
        assert reference[-1].y == pytest.approx(0.02)

    def test_invalid_resolution(self):
        with pytest.raises(InvalidPlotOptionError):
            FragmentLengthOptions(resolution=0)
        with pytest.raises(InvalidPlotOptionError):
            FragmentLengthOptions(resolution=2.5)


class TestMapqTransformer:
    """Tests for the mapping quality distribution."""

    def test_normalized_by_total_reads(self, metrics_dataset):
        result = MapqTransformer().produce(metrics_dataset)

        assert [(p.x, p.y) for p in result.series["exp_a1"].points] == pytest.approx(
            [(0.0, 0.1), (30.0, 0.4), (60.0, 0.5)]
        )
        assert result.x_max == 60.0
        assert result.y_max == pytest.approx(0.9)

    def test_zero_total_reads(self, metrics_dict):
        metrics_dict["metrics"]["exp_b1"]["total_reads"] = 0
        dataset = MetricsDataset.model_validate(metrics_dict)

        result = MapqTransformer().produce(dataset)
        assert [p.y for p in result.series["exp_b1"].points] == [0.0]


class TestPeakPercentileTransformers:
    """Tests for the cumulative peak curves."""

    def test_read_counts_carry_forward(self, metrics_dataset):
        result = PeakReadCountsTransformer().produce(metrics_dataset)

        a1 = [p.y for p in result.series["exp_a1"].points]
        assert len(a1) == PERCENTILE_STEPS
        assert a1[:3] == [0.1, 0.2, 0.3]
        assert a1[-1] == 0.3
        assert result.x_max == 100.0
        assert result.y_max == 0.5

    def test_missing_percentiles_plot_zeros(self, metrics_dataset):
        result = PeakReadCountsTransformer().produce(metrics_dataset)

        assert all(p.y == 0.0 for p in result.series["exp_a2"].points)

    def test_territory_uses_its_own_array(self, metrics_dataset):
        result = PeakTerritoryTransformer().produce(metrics_dataset)

        assert [p.y for p in result.series["exp_a1"].points[:3]] == [0.05, 0.1, 0.1]
        assert all(p.y == 0.0 for p in result.series["exp_b1"].points)
        assert result.y_max == 0.1


class TestGrouping:
    """Tests for sample grouping of plot datasets."""

    def test_groups_in_sample_order(self, metrics_dataset):
        dataset = FragmentLengthDistanceTransformer().produce(metrics_dataset)
        groups = group_by_sample(dataset)

        assert list(groups) == ["sampleA", "sampleB"]
        assert groups["sampleA"].experiment_ids == ["exp_a1", "exp_a2"]
        assert groups["sampleB"].library_count == 1

    def test_distance_stats(self, metrics_dataset):
        dataset = FragmentLengthDistanceTransformer().produce(metrics_dataset)
        stats = group_by_sample(dataset)["sampleA"].distance_stats()

        assert stats.minimum == 0.1
        assert stats.maximum == 0.3
        assert stats.mean == pytest.approx(0.2)
        assert stats.stddev == pytest.approx(0.1)


class TestTransformerRegistry:
    def test_every_chart_has_a_transformer(self):
        from atacdash.visualization.plots.charts import CHART_IDS

        for chart_id in CHART_IDS:
            assert get_transformer(chart_id).chart_id == chart_id

    def test_unknown_chart(self):
        with pytest.raises(UnknownChartError):
            get_transformer("coverage")
