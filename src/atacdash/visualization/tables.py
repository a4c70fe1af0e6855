"""
Metrics tables.

Each table is a list of column specs addressing experiment fields by dotted
path. ``TableView`` turns the metrics store into display rows with polars,
applies the user's sort and search, and persists that state in the session's
preference store so it survives a reload.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Literal

import polars as pl

from atacdash.core.exceptions import InvalidPlotOptionError
from atacdash.core.formatting import format_table_value
from atacdash.models.metrics import ExperimentMetrics

if TYPE_CHECKING:
    from atacdash.core.session import DashboardSession

logger = logging.getLogger(__name__)

SortDirection = Literal["asc", "desc"]

# Columns computed from several fields rather than read by path
LIBRARY_DESCRIPTION = "library_description"
DESCRIPTION_WITH_URL = "description_with_url"
DOWNLOAD_LINK = "download_link"


@dataclass(frozen=True)
class ColumnSpec:
    """
    One table column.

    Attributes:
        metric: Dotted path into the experiment record, or a computed column name
        title: Header text
        class_name: CSS class applied to the column's cells
        order: Default ordering as ``"<column index>:<asc|desc>"``
        orderable: Whether the column can be sorted
        searchable: Whether search matches the column's text
    """

    metric: str
    title: str
    class_name: str = ""
    order: str | None = None
    orderable: bool = True
    searchable: bool = True


@dataclass(frozen=True)
class TableSpec:
    table_id: str
    title: str
    columns: tuple[ColumnSpec, ...]
    kind: Literal["metrics", "experiments"] = "metrics"

    @property
    def default_order(self) -> list[tuple[int, SortDirection]]:
        """Default ordering parsed from the column specs, sorted by column index."""
        order = []
        for column in self.columns:
            if column.order:
                index, direction = column.order.split(":")
                order.append((int(index), direction))
        return sorted(order)


@dataclass(frozen=True)
class Cell:
    text: str
    hover: str | None = None
    href: str | None = None


@dataclass(frozen=True)
class TableRow:
    experiment_id: str
    cells: tuple[Cell, ...] = field(default_factory=tuple)

    @property
    def texts(self) -> list[str]:
        return [cell.text for cell in self.cells]


def _name_column() -> ColumnSpec:
    return ColumnSpec("name", "Experiment", order="0:asc")


def _metric(path: str, title: str) -> ColumnSpec:
    return ColumnSpec(path, title, class_name="numeric")


EXPERIMENTS_TABLE = TableSpec(
    "experiments",
    "Experiments",
    (
        ColumnSpec("name", "Experiment", order="0:asc"),
        ColumnSpec("library.sample", "Sample", order="1:asc"),
        ColumnSpec("library.library", "Library", order="2:asc"),
        ColumnSpec(LIBRARY_DESCRIPTION, "Library description"),
        ColumnSpec(DESCRIPTION_WITH_URL, "Description"),
        ColumnSpec(DOWNLOAD_LINK, "Metrics", orderable=False, searchable=False),
    ),
    kind="experiments",
)

DEFAULT_TABLES: tuple[TableSpec, ...] = (
    TableSpec(
        "reads",
        "Read metrics",
        (
            _name_column(),
            _metric("total_reads", "Total reads"),
            _metric("hqaa", "High-quality autosomal alignments"),
            _metric("properly_paired_and_mapped_reads", "Properly paired and mapped"),
            _metric("secondary_reads", "Secondary"),
            _metric("supplementary_reads", "Supplementary"),
            _metric("duplicate_reads", "Duplicate"),
            _metric("unmapped_reads", "Unmapped"),
            _metric("qcfailed_reads", "QC failed"),
        ),
    ),
    TableSpec(
        "autosomal",
        "Autosomal and mitochondrial metrics",
        (
            _name_column(),
            _metric("total_autosomal_reads", "Total autosomal reads"),
            _metric("duplicate_autosomal_reads", "Duplicate autosomal reads"),
            _metric("total_mitochondrial_reads", "Total mitochondrial reads"),
            _metric("duplicate_mitochondrial_reads", "Duplicate mitochondrial reads"),
        ),
    ),
    TableSpec(
        "fragments",
        "Fragment length metrics",
        (
            _name_column(),
            _metric("short_mononucleosomal_ratio", "Short to mononucleosomal ratio"),
            _metric("fragment_length_distance", "Fragment length distance"),
            _metric("hqaa_tf_count", "HQAA in TF-sized fragments"),
            _metric("hqaa_mononucleosomal_count", "HQAA in mononucleosomal fragments"),
            _metric("maximum_proper_pair_fragment_size", "Maximum proper pair fragment size"),
        ),
    ),
    TableSpec(
        "peaks",
        "Peak metrics",
        (
            _name_column(),
            _metric("peak_count", "Peaks"),
            _metric("total_peak_territory", "Total peak territory"),
            _metric("hqaa_in_peaks", "HQAA in peaks"),
            _metric("tss_enrichment", "TSS enrichment"),
        ),
    ),
    EXPERIMENTS_TABLE,
)


def _column_dtype(values: list[Any]) -> pl.DataType:
    numeric = all(
        v is None or (isinstance(v, (int, float)) and not isinstance(v, bool)) for v in values
    )
    return pl.Float64 if numeric else pl.Utf8


class TableView:
    """Rows of one table with sort and search state."""

    def __init__(self, spec: TableSpec, session: DashboardSession) -> None:
        self.spec = spec
        self.session = session
        self.order: list[tuple[int, SortDirection]] = spec.default_order
        self.query = ""
        self.rows: list[TableRow] = []
        self._restore()

    @property
    def preference_key(self) -> str:
        return f"table:{self.spec.table_id}"

    # -------------------------------------------------------------------------
    # Values
    # -------------------------------------------------------------------------

    @staticmethod
    def raw_value(experiment: ExperimentMetrics, column: ColumnSpec) -> Any:
        if column.metric == LIBRARY_DESCRIPTION:
            return experiment.library.description
        if column.metric == DESCRIPTION_WITH_URL:
            return experiment.description
        if column.metric == DOWNLOAD_LINK:
            return "Download" if experiment.metrics_url else None
        return experiment.get_path(column.metric)

    @staticmethod
    def link(experiment: ExperimentMetrics, column: ColumnSpec) -> str | None:
        if column.metric == DESCRIPTION_WITH_URL:
            return experiment.url
        if column.metric == DOWNLOAD_LINK:
            return experiment.metrics_url
        return None

    def frame(self) -> pl.DataFrame:
        """
        One row per experiment in identifier order.

        ``value_<i>`` holds column ``i``'s sortable value, ``text_<i>`` its
        formatted display text.
        """
        store = self.session.store
        experiment_ids = list(store.experiment_ids)
        data: dict[str, pl.Series] = {
            "experiment_id": pl.Series("experiment_id", experiment_ids, dtype=pl.Utf8),
        }
        for index, column in enumerate(self.spec.columns):
            raw = [self.raw_value(store.get(e), column) for e in experiment_ids]
            dtype = _column_dtype(raw)
            if dtype == pl.Float64:
                values = [None if v is None else float(v) for v in raw]
            else:
                values = [None if v is None else str(v) for v in raw]
            data[f"value_{index}"] = pl.Series(f"value_{index}", values, dtype=dtype)
            data[f"text_{index}"] = pl.Series(
                f"text_{index}", [format_table_value(v) for v in raw], dtype=pl.Utf8
            )
        return pl.DataFrame(data)

    def build_rows(self) -> list[TableRow]:
        """Rows after search filtering and ordering."""
        frame = self.frame()

        if self.query:
            needle = self.query.lower()
            matches = [
                pl.col(f"text_{i}").str.to_lowercase().str.contains(needle, literal=True)
                for i, column in enumerate(self.spec.columns)
                if column.searchable
            ]
            frame = frame.filter(pl.any_horizontal(matches)) if matches else frame.clear()

        if self.order:
            by = [f"value_{index}" for index, _ in self.order] + ["experiment_id"]
            descending = [direction == "desc" for _, direction in self.order] + [False]
            frame = frame.sort(by, descending=descending, nulls_last=True)

        store = self.session.store
        rows = []
        for record in frame.iter_rows(named=True):
            experiment_id = record["experiment_id"]
            experiment = store.get(experiment_id)
            hover = None
            if self.spec.kind == "metrics" and experiment.library.description:
                hover = experiment.library.description
            cells = tuple(
                Cell(
                    text=record[f"text_{i}"],
                    hover=hover,
                    href=self.link(experiment, column),
                )
                for i, column in enumerate(self.spec.columns)
            )
            rows.append(TableRow(experiment_id, cells))
        return rows

    # -------------------------------------------------------------------------
    # Host output and user state
    # -------------------------------------------------------------------------

    def populate(self) -> list[TableRow]:
        self.rows = self.build_rows()
        region = self.session.region(self.spec.table_id)
        if region is not None:
            region.set_rows(self.spec, self.rows)
        logger.debug("Populated table %s with %d rows", self.spec.table_id, len(self.rows))
        return self.rows

    def _check_order(self, index: int, direction: str) -> None:
        if not 0 <= index < len(self.spec.columns):
            raise InvalidPlotOptionError(
                self.spec.table_id, "order", index, f"a column index below {len(self.spec.columns)}"
            )
        if not self.spec.columns[index].orderable:
            raise InvalidPlotOptionError(
                self.spec.table_id, "order", index, "an orderable column"
            )
        if direction not in ("asc", "desc"):
            raise InvalidPlotOptionError(self.spec.table_id, "direction", direction, "'asc' or 'desc'")

    def sort_by(self, index: int, direction: SortDirection = "asc") -> list[TableRow]:
        self._check_order(index, direction)
        self.order = [(index, direction)]
        self._save()
        return self.populate()

    def search(self, query: str) -> list[TableRow]:
        self.query = query.strip()
        self._save()
        return self.populate()

    def reset_state(self) -> list[TableRow]:
        """Back to the default ordering with no search, forgetting stored state."""
        self.order = self.spec.default_order
        self.query = ""
        self.session.preferences.remove(self.preference_key)
        return self.populate()

    def _save(self) -> None:
        self.session.preferences.set(
            self.preference_key,
            {"order": [[index, direction] for index, direction in self.order], "search": self.query},
        )

    def _restore(self) -> None:
        state = self.session.preferences.get(self.preference_key)
        if not state:
            return
        try:
            order = [(int(index), str(direction)) for index, direction in state.get("order", [])]
            for index, direction in order:
                self._check_order(index, direction)
        except (InvalidPlotOptionError, TypeError, ValueError) as e:
            logger.warning("Ignoring stored state for table %s: %s", self.spec.table_id, e)
            return
        self.order = order
        self.query = str(state.get("search", ""))
