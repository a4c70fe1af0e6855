"""
Report generator for self-contained HTML dashboards.

Renders every chart through a headless dashboard session, converts the
views to Plotly figures and writes one HTML document with tabbed
navigation for plots, metrics tables and the experiment list.
"""

from __future__ import annotations

import html
import logging
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

from atacdash.core.io_utils import load_metrics
from atacdash.core.preferences import NullPreferenceStore
from atacdash.core.session import DashboardSession
from atacdash.models.config import DashboardConfig
from atacdash.models.metrics import MetricsDataset
from atacdash.visualization.host import RecordingHost
from atacdash.visualization.plotly_surface import FigureStyle, PlotlyFigure
from atacdash.visualization.plots.base import PlotView
from atacdash.visualization.report.styles import get_css_styles
from atacdash.visualization.report.templates import (
    DATA_TABLE_JS,
    DATA_TABLE_TEMPLATE,
    DESCRIPTION_TEMPLATE,
    LEGEND_ITEM_TEMPLATE,
    PLOT_CONTAINER_TEMPLATE,
    PLOTLY_CDN,
    REPORT_BASE_TEMPLATE,
    TAB_NAVIGATION_JS,
    TAB_SECTION_TEMPLATE,
)
from atacdash.visualization.tables import TableView

logger = logging.getLogger(__name__)


@dataclass
class ReportConfig:
    """Configuration for report generation."""

    title: str = "ATAC-seq QC Dashboard"
    theme: str = "light"
    include_plotlyjs: str = "cdn"  # 'cdn' or 'embed'


class DashboardReportGenerator:
    """
    Generates a self-contained HTML dashboard from a metrics dataset.

    The document contains:
    - One interactive Plotly chart per dashboard chart, with help text and legend
    - Every metrics table
    - The experiment list with description and download links
    """

    def __init__(
        self,
        dataset: MetricsDataset,
        config: ReportConfig | None = None,
        dashboard_config: DashboardConfig | None = None,
    ) -> None:
        """
        Initialize report generator.

        Args:
            dataset: Validated metrics dataset
            config: Report configuration
            dashboard_config: Chart options and layout
        """
        self.dataset = dataset
        self.config = config or ReportConfig()
        self.host = RecordingHost()
        self.session = DashboardSession(
            dataset,
            config=dashboard_config,
            host=self.host,
            preferences=NullPreferenceStore(),
        )
        self.style = FigureStyle(template="plotly_dark" if self.config.theme == "dark" else "plotly_white")

        # Store generated plot JSON
        self._plot_data: dict[str, str] = {}

    def populate(self) -> None:
        """Run the dashboard's population steps without the load delays."""
        self.session.list_experiments()
        self.session.populate_plots()
        self.session.populate_tables()
        self.session.finalize_layout()

    def generate(self, output_path: Path | str) -> None:
        """
        Generate and save the HTML report.

        Args:
            output_path: Path for output HTML file
        """
        html_text = self._build_html()

        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(html_text, encoding="utf-8")
        logger.info("Wrote dashboard to %s", output_path)

    def _build_html(self) -> str:
        """Build the complete HTML report."""
        self.populate()

        content = "\n".join([
            self._build_plots_section(),
            self._build_tables_section(),
            self._build_experiments_section(),
        ])

        description = ""
        if self.dataset.description:
            description = DESCRIPTION_TEMPLATE.format(description=html.escape(self.dataset.description))

        return REPORT_BASE_TEMPLATE.format(
            title=html.escape(self.config.title),
            css_styles=get_css_styles(self.config.theme),
            plotly_script=self._plotly_script(),
            experiment_count=len(self.session.store),
            sample_count=len(self.session.store.sample_ids),
            timestamp=datetime.now().strftime("%Y-%m-%d %H:%M:%S"),
            description=description,
            navigation=self._build_navigation(),
            content=content,
            version=_version(),
            plotly_js=self._build_plotly_js(),
            js_scripts=TAB_NAVIGATION_JS + DATA_TABLE_JS,
        )

    def _plotly_script(self) -> str:
        if self.config.include_plotlyjs == "embed":
            from plotly.offline import get_plotlyjs

            return f"<script>{get_plotlyjs()}</script>"
        return f'<script src="{PLOTLY_CDN}"></script>'

    def _build_navigation(self) -> str:
        tabs = [("plots", "Plots", True), ("tables", "Metrics tables", False), ("experiments", "Experiments", False)]
        nav_items = []
        for tab_id, label, is_active in tabs:
            active_class = " active" if is_active else ""
            nav_items.append(
                f'    <button class="tab-btn{active_class}" data-tab="{tab_id}" '
                f"onclick=\"showTab('{tab_id}')\">{label}</button>"
            )
        return "\n".join(nav_items)

    # -------------------------------------------------------------------------
    # Plots
    # -------------------------------------------------------------------------

    def _build_plots_section(self) -> str:
        containers = [self._build_plot(view) for view in self.session.plots.values()]
        return TAB_SECTION_TEMPLATE.format(
            tab_id="plots",
            active_class=" active",
            section_title="Plots",
            content="\n".join(containers),
        )

    def _build_plot(self, view: PlotView) -> str:
        figure = PlotlyFigure(view, self.style)
        plot_id = figure.div_id()
        self._register_plot(plot_id, figure)

        detail = "".join(f"<p>{html.escape(p)}</p>" for p in view.detail.help)
        legend = "".join(
            LEGEND_ITEM_TEMPLATE.format(
                classes=" ".join(
                    ["legendItem"]
                    + (["full-width"] if entry.full_width else [])
                    + (["targetHidden"] if entry.target_hidden else [])
                ),
                sample=html.escape(entry.sample_id),
                color=entry.color,
            )
            for entry in view.legend.entries
        )
        return PLOT_CONTAINER_TEMPLATE.format(
            container_id=f"{plot_id}-container",
            title=html.escape(view.title),
            plot_id=plot_id,
            detail=detail,
            legend=legend,
        )

    def _register_plot(self, plot_id: str, figure: PlotlyFigure) -> None:
        """Register a plot for later JS initialization."""
        self._plot_data[plot_id] = figure.to_json()

    def _build_plotly_js(self) -> str:
        """Build Plotly.js initialization code for all plots."""
        js_lines = ["<script>"]
        js_lines.append("document.addEventListener('DOMContentLoaded', function() {")
        for plot_id, plot_json in self._plot_data.items():
            var = "data_" + plot_id.replace("-", "_")
            js_lines.append(f"  var {var} = {plot_json};")
            js_lines.append(
                f"  Plotly.newPlot('{plot_id}', {var}.data, {var}.layout, {{responsive: true}});"
            )
        js_lines.append("});")
        js_lines.append("</script>")
        return "\n".join(js_lines)

    # -------------------------------------------------------------------------
    # Tables
    # -------------------------------------------------------------------------

    def _build_tables_section(self) -> str:
        tables = [
            self._build_table(table)
            for table in self.session.tables.values()
            if table.spec.kind == "metrics"
        ]
        return TAB_SECTION_TEMPLATE.format(
            tab_id="tables",
            active_class="",
            section_title="Metrics tables",
            content="\n".join(tables),
        )

    def _build_experiments_section(self) -> str:
        tables = [
            self._build_table(table)
            for table in self.session.tables.values()
            if table.spec.kind == "experiments"
        ]
        return TAB_SECTION_TEMPLATE.format(
            tab_id="experiments",
            active_class="",
            section_title="Experiments",
            content="\n".join(tables),
        )

    @staticmethod
    def _build_table(table: TableView) -> str:
        spec = table.spec
        header = "".join(
            f'<th class="{column.class_name}" data-orderable="{str(column.orderable).lower()}">'
            f"{html.escape(column.title)}</th>"
            for column in spec.columns
        )

        rows_html = []
        for row in table.rows:
            cells = []
            for column, cell in zip(spec.columns, row.cells):
                text = html.escape(cell.text)
                if cell.href:
                    text = f'<a href="{html.escape(cell.href)}" target="_blank">{text}</a>'
                title = f' title="{html.escape(cell.hover)}"' if cell.hover else ""
                cells.append(
                    f'<td class="{column.class_name}" data-value="{html.escape(cell.text.replace(",", ""))}"'
                    f"{title}>{text}</td>"
                )
            rows_html.append(f'<tr id="{html.escape(row.experiment_id)}">{"".join(cells)}</tr>')

        return DATA_TABLE_TEMPLATE.format(
            title=html.escape(spec.title),
            table_id=f"table-{spec.table_id}",
            order=",".join(f"{i}:{d}" for i, d in table.order),
            header=header,
            rows="\n".join(rows_html),
        )


def _version() -> str:
    from atacdash import __version__

    return __version__


def generate_report(
    metrics_path: Path | str,
    output_path: Path | str,
    title: str = "ATAC-seq QC Dashboard",
    theme: str = "light",
    dashboard_config: DashboardConfig | None = None,
) -> None:
    """
    Convenience function to generate a report from a metrics file.

    Args:
        metrics_path: Path to the metrics JSON (optionally gzipped)
        output_path: Output path for HTML report
        title: Report title
        theme: Color theme ('light' or 'dark')
        dashboard_config: Chart options and layout
    """
    dataset = load_metrics(metrics_path)
    config = ReportConfig(title=title, theme=theme)
    generator = DashboardReportGenerator(dataset, config=config, dashboard_config=dashboard_config)
    generator.generate(output_path)
