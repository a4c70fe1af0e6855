"""
Shared pytest fixtures for atacdash tests.

Provides a small metrics artifact (two samples, three experiments),
temporary files, headless sessions and the CLI runner.
"""

from __future__ import annotations

import copy
import gzip
import json
import tempfile
from pathlib import Path
from typing import Any

import pytest


# =============================================================================
# Metrics Test Data Fixtures
# =============================================================================

_METRICS: dict[str, Any] = {
    "description": "Test ATAC-seq experiments",
    "metrics": {
        "exp_a1": {
            "name": "exp_a1",
            "library": {"sample": "sampleA", "library": "libA1", "description": "Library A1"},
            "description": "First experiment",
            "url": "http://example.org/exp_a1",
            "metrics_url": "http://example.org/exp_a1.json.gz",
            "total_reads": 1000,
            "total_autosomal_reads": 800,
            "duplicate_autosomal_reads": 80,
            "hqaa": 500,
            "short_mononucleosomal_ratio": 1.5,
            "fragment_length_distance": 0.1,
            "fragment_length_counts": [[0, 0.1], [1, 0.2], [2, 0.3], [3, 0.4]],
            "mapq_counts": [[0, 100], [30, 400], [60, 500]],
            "peak_percentiles": {
                "cumulative_fraction_of_hqaa": [0.1, 0.2, 0.3],
                "cumulative_fraction_of_territory": [0.05, 0.1],
            },
            "peak_count": 1200,
        },
        "exp_a2": {
            "name": "exp_a2",
            "library": {"sample": "sampleA", "library": "libA2", "description": "Library A2"},
            "description": "Second experiment",
            "total_reads": 2000,
            "total_autosomal_reads": 1500,
            "duplicate_autosomal_reads": 300,
            "hqaa": 1200,
            "short_mononucleosomal_ratio": 2.0,
            "fragment_length_distance": 0.3,
            "fragment_length_counts": [[0, 0.0], [1, 0.1], [2, 0.2], [3, 0.3], [4, 0.2], [5, 0.2]],
            "mapq_counts": [[0, 200], [60, 1800]],
            "peak_count": 800,
        },
        "exp_b1": {
            "name": "exp_b1",
            "library": {"sample": "sampleB", "library": "libB1"},
            "total_reads": 500,
            "total_autosomal_reads": 400,
            "duplicate_autosomal_reads": 0,
            "hqaa": 100,
            "short_mononucleosomal_ratio": 0.5,
            "fragment_length_distance": -0.2,
            "fragment_length_counts": [[0, 0.5], [1, 0.25], [2, 0.25], [3, 0.0], [4, 0.0]],
            "mapq_counts": [[10, 50]],
            "peak_percentiles": {
                "cumulative_fraction_of_hqaa": [0.5],
                "cumulative_fraction_of_territory": [],
            },
        },
    },
    "fragment_length_reference": {
        "source": "reference.txt",
        "distribution": [[0, 0.1], [1, 0.1], [2, 0.1]],
    },
}


@pytest.fixture
def metrics_dict() -> dict[str, Any]:
    """Metrics artifact as a plain mapping (deep copy, safe to mutate)."""
    return copy.deepcopy(_METRICS)


@pytest.fixture
def metrics_dataset(metrics_dict: dict[str, Any]):
    """Validated MetricsDataset built from ``metrics_dict``."""
    from atacdash.models.metrics import MetricsDataset

    return MetricsDataset.model_validate(metrics_dict)


# =============================================================================
# File Fixtures
# =============================================================================


@pytest.fixture
def temp_dir() -> Path:
    """Temporary directory that is cleaned up after tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def temp_metrics_file(temp_dir: Path, metrics_dict: dict[str, Any]) -> Path:
    """Metrics artifact written as plain JSON."""
    path = temp_dir / "metrics.json"
    path.write_text(json.dumps(metrics_dict))
    return path


@pytest.fixture
def temp_metrics_gz(temp_dir: Path, metrics_dict: dict[str, Any]) -> Path:
    """Metrics artifact written as gzip-compressed JSON."""
    path = temp_dir / "metrics.json.gz"
    with gzip.open(path, "wt", encoding="utf-8") as handle:
        json.dump(metrics_dict, handle)
    return path


@pytest.fixture
def empty_metrics_file(temp_dir: Path) -> Path:
    """Metrics artifact with no experiments."""
    path = temp_dir / "empty.json"
    path.write_text(json.dumps({"description": "nothing", "metrics": {}}))
    return path


@pytest.fixture
def malformed_metrics_file(temp_dir: Path) -> Path:
    """Metrics artifact that is not valid JSON."""
    path = temp_dir / "malformed.json"
    path.write_text('{"metrics": {"exp": ')
    return path


# =============================================================================
# Session Fixtures
# =============================================================================


@pytest.fixture
def fast_config():
    """Dashboard config with a bin resolution of 2 and no load delays."""
    from atacdash.models.config import DashboardConfig

    return DashboardConfig(
        default_resolution=2,
        stage_delay_ms=0,
        final_stage_delay_ms=0,
        resize_debounce_ms=10,
    )


@pytest.fixture
def host():
    from atacdash.visualization.host import RecordingHost

    return RecordingHost()


@pytest.fixture
def session(metrics_dataset, fast_config, host):
    """Headless session with every chart and table, preferences not persisted."""
    from atacdash.core.preferences import NullPreferenceStore
    from atacdash.core.session import DashboardSession

    return DashboardSession(
        metrics_dataset,
        config=fast_config,
        host=host,
        preferences=NullPreferenceStore(),
    )


@pytest.fixture
def rendered_session(session):
    """Session with every chart rendered."""
    session.populate_plots()
    return session


# =============================================================================
# CLI Fixtures
# =============================================================================


@pytest.fixture
def cli_runner():
    """Typer CLI runner for testing commands."""
    from typer.testing import CliRunner

    return CliRunner()
