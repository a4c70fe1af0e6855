"""
Unit tests for metrics artifact loading.
"""

from __future__ import annotations

import json

import pytest

from atacdash.core.exceptions import EmptyMetricsFileError, MalformedMetricsFileError
from atacdash.core.io_utils import load_metrics, metrics_from_mapping, parse_metrics_document, read_text


class TestLoadMetrics:
    """Tests for reading the supported artifact formats."""

    def test_plain_json(self, temp_metrics_file):
        dataset = load_metrics(temp_metrics_file)
        assert dataset.experiment_ids == ["exp_a1", "exp_a2", "exp_b1"]
        assert dataset.fragment_length_reference.source == "reference.txt"

    def test_gzipped_json(self, temp_metrics_gz, metrics_dict):
        assert read_text(temp_metrics_gz) == json.dumps(metrics_dict)
        assert load_metrics(temp_metrics_gz).sample_ids == ["sampleA", "sampleB"]

    def test_configure_wrapper(self, temp_dir, metrics_dict):
        path = temp_dir / "configuration.js"
        path.write_text(f"ataqv.configure({json.dumps(metrics_dict)});\n")

        assert len(load_metrics(str(path)).metrics) == 3

    def test_empty_file(self, temp_dir):
        path = temp_dir / "blank.json"
        path.write_text("   \n")
        with pytest.raises(EmptyMetricsFileError) as exc_info:
            load_metrics(path)
        assert exc_info.value.path == str(path)

    def test_no_experiments(self, empty_metrics_file):
        with pytest.raises(EmptyMetricsFileError):
            load_metrics(empty_metrics_file)

    def test_malformed_json(self, malformed_metrics_file):
        with pytest.raises(MalformedMetricsFileError) as exc_info:
            load_metrics(malformed_metrics_file)
        assert "invalid JSON" in exc_info.value.detail
        assert exc_info.value.suggestion


class TestParsing:
    def test_non_object(self):
        with pytest.raises(MalformedMetricsFileError):
            parse_metrics_document("[1, 2, 3]")

    def test_validation_error_names_field(self, metrics_dict):
        metrics_dict["metrics"]["exp_a1"]["total_reads"] = -5
        with pytest.raises(MalformedMetricsFileError) as exc_info:
            metrics_from_mapping(metrics_dict, source="test.json")
        assert "total_reads" in exc_info.value.detail
        assert "test.json" in exc_info.value.message
