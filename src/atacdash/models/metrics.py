"""
Pydantic models for the ATAC-seq metrics artifact.

The artifact is produced upstream by the metrics collection pipeline and
consumed read-only by the dashboard. Upstream emits many more metrics than the
plots need; unknown fields are preserved so the metrics tables can show them.
"""

from __future__ import annotations

import logging
from typing import Any, Self

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationInfo,
    field_validator,
    model_validator,
)

logger = logging.getLogger(__name__)


def _coerce_pairs(value: Any, field_name: str) -> list[tuple[float, float]]:
    """Reduce histogram rows to (key, value) pairs.

    Upstream histograms may carry extra columns (e.g. raw count before the
    fraction); only the first two are used. Missing values become 0.
    """
    if value is None:
        return []
    if isinstance(value, dict):
        value = sorted(value.items(), key=lambda item: float(item[0]))

    pairs: list[tuple[float, float]] = []
    for row in value:
        if not isinstance(row, (list, tuple)) or not row:
            msg = f"{field_name} rows must be [key, value, ...] sequences, got {row!r}"
            raise ValueError(msg)
        key = float(row[0])
        val = row[1] if len(row) > 1 and row[1] is not None else 0.0
        pairs.append((key, float(val)))
    return pairs


class LibraryInfo(BaseModel):
    """Library identity of one experiment.

    Attributes:
        sample: Biological sample the library was prepared from
        library: Library name
        description: Free-text library description
    """

    sample: str | None = Field(default=None, description="Sample name")
    library: str | None = Field(default=None, description="Library name")
    description: str | None = Field(default=None, description="Library description")

    model_config = ConfigDict(frozen=True, extra="allow")


class PeakPercentiles(BaseModel):
    """Cumulative fractions over peaks ranked by read count (at most 100 entries)."""

    cumulative_fraction_of_hqaa: list[float] = Field(default_factory=list)
    cumulative_fraction_of_territory: list[float] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True, extra="allow")

    @field_validator("cumulative_fraction_of_hqaa", "cumulative_fraction_of_territory")
    @classmethod
    def at_most_one_hundred(cls, v: list[float]) -> list[float]:
        if len(v) > 100:
            msg = f"Peak percentile arrays hold at most 100 values, got {len(v)}"
            raise ValueError(msg)
        return v


class ExperimentMetrics(BaseModel):
    """Precomputed QC metrics for one sequencing experiment."""

    name: str | None = Field(default=None, description="Display name")
    library: LibraryInfo = Field(default_factory=LibraryInfo)
    description: str | None = None
    url: str | None = None
    metrics_url: str | None = None

    total_reads: int = Field(default=0, ge=0)
    total_autosomal_reads: int = Field(default=0, ge=0)
    duplicate_autosomal_reads: int = Field(default=0, ge=0)
    hqaa: int | None = Field(default=None, ge=0, description="High-quality autosomal alignments")
    short_mononucleosomal_ratio: float = 0.0
    fragment_length_distance: float = 0.0

    fragment_length_counts: list[tuple[float, float]] = Field(default_factory=list)
    mapq_counts: list[tuple[float, float]] = Field(default_factory=list)
    peak_percentiles: PeakPercentiles | None = None

    model_config = ConfigDict(frozen=True, extra="allow")

    @field_validator("fragment_length_counts", "mapq_counts", mode="before")
    @classmethod
    def reduce_histogram_rows(cls, v: Any, info: ValidationInfo) -> list[tuple[float, float]]:
        return _coerce_pairs(v, info.field_name)

    @property
    def display_name(self) -> str:
        return self.name or ""

    @property
    def sample_id(self) -> str:
        """Sample this experiment belongs to, falling back to the display name."""
        return self.library.sample or self.display_name

    @property
    def library_name(self) -> str:
        return self.library.library or self.display_name

    def metric(self, key: str) -> Any:
        """Look up a metric by name, including fields not declared on the model."""
        if key in type(self).model_fields:
            return getattr(self, key)
        extra = self.model_extra or {}
        return extra.get(key)

    def get_path(self, path: str) -> Any:
        """Resolve a dotted path such as ``library.sample`` against the raw record."""
        value: Any = self.model_dump()
        for component in path.split("."):
            if not isinstance(value, dict):
                return None
            value = value.get(component)
        return value


class FragmentLengthReference(BaseModel):
    """Reference fragment length distribution plotted beside the experiments."""

    source: str = Field(default="", description="Where the reference distribution came from")
    distribution: list[tuple[float, float]] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True, extra="allow")

    @field_validator("distribution", mode="before")
    @classmethod
    def reduce_rows(cls, v: Any) -> list[tuple[float, float]]:
        return _coerce_pairs(v, "distribution")


class MetricsDataset(BaseModel):
    """The complete metrics artifact: experiments plus optional reference curve."""

    description: str | None = None
    metrics: dict[str, ExperimentMetrics] = Field(default_factory=dict)
    fragment_length_reference: FragmentLengthReference | None = None

    model_config = ConfigDict(frozen=True, extra="allow")

    @model_validator(mode="before")
    @classmethod
    def fill_display_names(cls, data: Any) -> Any:
        """Experiments without a name are displayed under their identifier."""
        if not isinstance(data, dict):
            return data
        metrics = data.get("metrics")
        if not isinstance(metrics, dict):
            return data

        filled: dict[str, Any] = {}
        for experiment_id, record in metrics.items():
            if isinstance(record, dict) and not record.get("name"):
                logger.warning(
                    "Experiment %s has no name; using its identifier", experiment_id
                )
                record = {**record, "name": experiment_id}
            elif isinstance(record, ExperimentMetrics) and not record.name:
                record = record.model_copy(update={"name": experiment_id})
            filled[experiment_id] = record
        return {**data, "metrics": filled}

    @model_validator(mode="after")
    def warn_incomplete_identity(self) -> Self:
        for experiment_id, experiment in self.metrics.items():
            if not experiment.library.sample:
                logger.warning(
                    "Experiment %s has no sample name; grouping it as %r",
                    experiment_id,
                    experiment.sample_id,
                )
        return self

    @property
    def experiment_ids(self) -> list[str]:
        """Experiment identifiers in lexicographic order."""
        return sorted(self.metrics)

    @property
    def sample_ids(self) -> list[str]:
        """Distinct sample identifiers in lexicographic order."""
        return sorted({m.sample_id for m in self.metrics.values()})
