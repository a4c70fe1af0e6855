"""
Dashboard session: one coordinator per loaded metrics dataset.

The session owns the store, the event bus, the selection state, the plot
views and the tables, and is passed by reference to every view. Loading a
different dataset replaces the session wholesale via ``reload``.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence
from pathlib import Path

from atacdash.core.events import EventBus, ItemHovered, SampleHovered
from atacdash.core.exceptions import UnknownChartError
from atacdash.core.io_utils import load_metrics
from atacdash.core.preferences import PreferenceStore, open_preference_store
from atacdash.core.scheduler import Debouncer, LoadSequence, RenderQueue, Stage
from atacdash.core.selection import SelectionState
from atacdash.core.store import MetricsStore
from atacdash.models.config import DashboardConfig
from atacdash.models.metrics import MetricsDataset
from atacdash.visualization.host import Region, RenderHost
from atacdash.visualization.plots.base import PlotView
from atacdash.visualization.plots.charts import CHART_IDS, create_view
from atacdash.visualization.tables import DEFAULT_TABLES, TableSpec, TableView

logger = logging.getLogger(__name__)

STATUS_PLOTS = "Creating plots..."
STATUS_TABLES = "Creating metrics tables..."


class DashboardSession:
    """Coordinator shared by every view of one dataset."""

    def __init__(
        self,
        dataset: MetricsDataset,
        config: DashboardConfig | None = None,
        host: RenderHost | None = None,
        preferences: PreferenceStore | None = None,
        charts: Sequence[str] = CHART_IDS,
        tables: Sequence[TableSpec] = DEFAULT_TABLES,
    ) -> None:
        """
        Create a session for a validated dataset.

        Args:
            dataset: Metrics dataset, immutable for the session's lifetime
            config: Dashboard configuration (defaults if omitted)
            host: Rendering host providing named regions and a status indicator
            preferences: Table preference store (from config.preferences_path if omitted)
            charts: Chart identifiers to create, in render order
            tables: Table specs to populate
        """
        self.config = config or DashboardConfig()
        self.host = host
        self.preferences = (
            preferences if preferences is not None else open_preference_store(self.config.preferences_path)
        )
        self.store = MetricsStore(dataset)
        self.bus = EventBus()
        self.selection = SelectionState(self.store.sample_ids, self.bus)
        self.renders = RenderQueue()
        self.resize = Debouncer(self.populate_plots, self.config.resize_debounce_ms)

        self.plots: dict[str, PlotView] = {chart_id: create_view(chart_id, self) for chart_id in charts}
        self.tables: dict[str, TableView] = {spec.table_id: TableView(spec, self) for spec in tables}
        self.experiments_listed = False
        self.layout_final = False
        self.closed = False

    @classmethod
    def from_file(cls, path: Path | str, **kwargs) -> DashboardSession:
        return cls(load_metrics(path), **kwargs)

    # -------------------------------------------------------------------------
    # Lookup
    # -------------------------------------------------------------------------

    def region(self, name: str) -> Region | None:
        if self.host is None or self.closed:
            return None
        return self.host.region(name)

    def plot(self, chart_id: str) -> PlotView:
        try:
            return self.plots[chart_id]
        except KeyError:
            raise UnknownChartError(chart_id, list(self.plots)) from None

    # -------------------------------------------------------------------------
    # Events published on behalf of views
    # -------------------------------------------------------------------------

    def hover_item(self, experiment_id: str | None) -> None:
        self.bus.emit(ItemHovered(experiment_id))

    def hover_sample(self, sample_id: str | None, source: str | None = None) -> None:
        if sample_id is not None and not self.store.has_sample(sample_id):
            logger.debug("Ignoring hover on unknown sample %s", sample_id)
            return
        self.bus.emit(SampleHovered(sample_id, source))

    def toggle_sample(self, sample_id: str) -> bool:
        return self.selection.toggle(sample_id)

    def select_all(self) -> None:
        self.selection.select_all()

    def deselect_all(self) -> None:
        self.selection.deselect_all()

    # -------------------------------------------------------------------------
    # Rendering
    # -------------------------------------------------------------------------

    def request_render(self, chart_id: str) -> None:
        """Render one chart, after any render already in progress."""
        view = self.plot(chart_id)
        self.renders.request(chart_id, view.render)

    def populate_plots(self) -> None:
        for chart_id in self.plots:
            self.request_render(chart_id)

    def populate_tables(self) -> None:
        for table in self.tables.values():
            table.populate()

    def list_experiments(self) -> None:
        experiments = self.tables.get("experiments")
        if experiments is not None:
            experiments.populate()
        self.experiments_listed = True
        logger.info("Loaded %d experiments in %d samples", len(self.store), len(self.store.sample_ids))

    def finalize_layout(self) -> None:
        if self.host is not None:
            self.host.clear_status()
        self.layout_final = True

    def load_sequence(self) -> LoadSequence:
        """The staged initial population: experiments, plots, tables, layout."""
        config = self.config
        metrics_tables = [t for t in self.tables.values() if t.spec.kind == "metrics"]

        def populate_metrics_tables() -> None:
            for table in metrics_tables:
                table.populate()

        stages = [
            Stage("list_experiments", self.list_experiments, delay_ms=config.stage_delay_ms),
            Stage("populate_plots", self.populate_plots, STATUS_PLOTS, config.stage_delay_ms),
            Stage("populate_tables", populate_metrics_tables, STATUS_TABLES, config.stage_delay_ms),
            Stage("finalize_layout", self.finalize_layout, delay_ms=config.final_stage_delay_ms),
        ]
        return LoadSequence(stages, self.host)

    async def load(self) -> LoadSequence:
        sequence = self.load_sequence()
        await sequence.run()
        return sequence

    def load_sync(self) -> LoadSequence:
        """Run the load sequence to completion on a fresh event loop."""
        return asyncio.run(self.load())

    def on_resize(self) -> None:
        """Window resize: re-render every chart once the burst is over."""
        self.resize()

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    def close(self) -> None:
        """Detach every listener and stop writing to the host."""
        self.resize.cancel()
        self.bus.clear()
        self.closed = True

    def reload(self, dataset: MetricsDataset) -> DashboardSession:
        """Replace this session with one for ``dataset``, sharing host and preferences."""
        self.close()
        return DashboardSession(
            dataset,
            config=self.config,
            host=self.host,
            preferences=self.preferences,
            charts=tuple(self.plots),
            tables=tuple(t.spec for t in self.tables.values()),
        )
