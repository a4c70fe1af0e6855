"""
Read-only holder of the loaded metrics dataset.

The store is populated once per session and never mutated afterwards; views
look experiments up here to fill their detail panels.
"""

from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path

from atacdash.core.io_utils import load_metrics
from atacdash.models.metrics import ExperimentMetrics, FragmentLengthReference, MetricsDataset


class MetricsStore:
    """Immutable-per-session access to experiments, samples and the reference curve."""

    def __init__(self, dataset: MetricsDataset) -> None:
        self._dataset = dataset
        self._experiment_ids = tuple(sorted(dataset.metrics))
        self._samples: dict[str, tuple[str, ...]] = {}
        for experiment_id in self._experiment_ids:
            sample_id = dataset.metrics[experiment_id].sample_id
            self._samples[sample_id] = self._samples.get(sample_id, ()) + (experiment_id,)

    @classmethod
    def from_file(cls, path: Path | str) -> MetricsStore:
        return cls(load_metrics(path))

    @property
    def dataset(self) -> MetricsDataset:
        return self._dataset

    @property
    def description(self) -> str | None:
        return self._dataset.description

    @property
    def reference(self) -> FragmentLengthReference | None:
        return self._dataset.fragment_length_reference

    @property
    def experiment_ids(self) -> tuple[str, ...]:
        """Experiment identifiers in lexicographic order."""
        return self._experiment_ids

    @property
    def sample_ids(self) -> tuple[str, ...]:
        """Sample identifiers in lexicographic order."""
        return tuple(sorted(self._samples))

    def get(self, experiment_id: str | None) -> ExperimentMetrics | None:
        """Return the experiment, or None for unknown or missing identifiers."""
        if experiment_id is None:
            return None
        return self._dataset.metrics.get(experiment_id)

    def experiments_for_sample(self, sample_id: str) -> tuple[str, ...]:
        return self._samples.get(sample_id, ())

    def has_sample(self, sample_id: str | None) -> bool:
        return sample_id is not None and sample_id in self._samples

    def __contains__(self, experiment_id: object) -> bool:
        return experiment_id in self._dataset.metrics

    def __iter__(self) -> Iterator[tuple[str, ExperimentMetrics]]:
        for experiment_id in self._experiment_ids:
            yield experiment_id, self._dataset.metrics[experiment_id]

    def __len__(self) -> int:
        return len(self._experiment_ids)
