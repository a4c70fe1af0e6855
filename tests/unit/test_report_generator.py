"""
Tests for the HTML report generator and the Plotly figure conversion.
"""

from __future__ import annotations

import json

import pytest

# Skip if plotly not available
plotly = pytest.importorskip("plotly")


@pytest.fixture
def generator(metrics_dataset, fast_config):
    from atacdash.visualization.report.generator import DashboardReportGenerator

    return DashboardReportGenerator(metrics_dataset, dashboard_config=fast_config)


class TestPlotlyFigure:
    """Tests for converting rendered views to Plotly figures."""

    def test_scatter_traces(self, rendered_session):
        from atacdash.visualization.plotly_surface import PlotlyFigure

        fig = PlotlyFigure(rendered_session.plot("fragment_length_distance")).create_figure()

        assert len(fig.data) == 3
        assert [t.legendgroup for t in fig.data] == ["sampleA", "sampleA", "sampleB"]
        assert [t.showlegend for t in fig.data] == [True, False, True]
        assert list(fig.layout.xaxis.range) == pytest.approx([-0.315, 0.315])
        assert fig.layout.title.text == "Fragment length distance"

    def test_reference_trace(self, rendered_session):
        from atacdash.visualization.plotly_surface import PlotlyFigure

        fig = PlotlyFigure(rendered_session.plot("fragment_length")).create_figure()

        reference = fig.data[-1]
        assert reference.name == "Reference"
        assert reference.line.dash == "dash"

    def test_hidden_samples_start_legendonly(self, rendered_session):
        from atacdash.visualization.plotly_surface import PlotlyFigure

        rendered_session.toggle_sample("sampleB")
        fig = PlotlyFigure(rendered_session.plot("mapq")).create_figure()

        visibility = {t.hovertemplate.split("</b>")[0][3:]: t.visible for t in fig.data}
        assert visibility["exp_b1"] == "legendonly"
        assert visibility["exp_a1"] is True

    def test_power_axis_relabels_ticks(self, rendered_session):
        from atacdash.visualization.plotly_surface import PlotlyFigure

        view = rendered_session.plot("fragment_length")
        view.set_y_exponent(0.5)
        fig = PlotlyFigure(view).create_figure()

        assert fig.layout.yaxis.tickvals is not None
        assert len(fig.layout.yaxis.tickvals) == len(fig.layout.yaxis.ticktext)
        assert fig.layout.yaxis.range[1] == pytest.approx(0.375 ** 0.5)

    def test_div_id(self, rendered_session):
        from atacdash.visualization.plotly_surface import PlotlyFigure

        assert PlotlyFigure(rendered_session.plot("peak_read_counts")).div_id() == "plot-peak-read-counts"

    def test_save(self, rendered_session, temp_dir):
        from atacdash.visualization.plotly_surface import PlotlyFigure

        figure = PlotlyFigure(rendered_session.plot("mapq"))
        figure.save(str(temp_dir / "mapq.json"))
        assert "data" in json.loads((temp_dir / "mapq.json").read_text())

        with pytest.raises(ValueError):
            figure.save(str(temp_dir / "mapq.png"))


class TestDashboardReportGenerator:
    """Tests for DashboardReportGenerator."""

    def test_populate(self, generator):
        generator.populate()

        assert generator.session.layout_final
        for view in generator.session.plots.values():
            assert view.render_count == 1
        assert generator.host.status is None

    def test_generate_creates_file(self, generator, temp_dir):
        output = temp_dir / "sub" / "report.html"
        generator.generate(output)

        html = output.read_text()
        assert html.startswith("<!DOCTYPE html>")
        assert "ATAC-seq QC Dashboard" in html
        assert "Test ATAC-seq experiments" in html
        assert "Experiments: 3" in html
        assert "Samples: 2" in html

    def test_every_chart_and_table_present(self, generator, temp_dir):
        output = temp_dir / "report.html"
        generator.generate(output)
        html = output.read_text()

        for chart_id in generator.session.plots:
            assert f"plot-{chart_id.replace('_', '-')}" in html
        for table_id in generator.session.tables:
            assert f'id="table-{table_id}"' in html
        assert "Plotly.newPlot" in html

    def test_legend_and_help(self, generator, temp_dir):
        output = temp_dir / "report.html"
        generator.generate(output)
        html = output.read_text()

        assert 'data-sample="sampleA"' in html
        assert "Mouse over dots to see experiment details." in html

    def test_table_cells_escaped_and_linked(self, metrics_dict, fast_config, temp_dir):
        from atacdash.models.metrics import MetricsDataset
        from atacdash.visualization.report.generator import DashboardReportGenerator

        metrics_dict["metrics"]["exp_a1"]["description"] = "<b>bold</b>"
        generator = DashboardReportGenerator(
            MetricsDataset.model_validate(metrics_dict), dashboard_config=fast_config
        )
        output = temp_dir / "report.html"
        generator.generate(output)
        html = output.read_text()

        assert "&lt;b&gt;bold&lt;/b&gt;" in html
        assert 'href="http://example.org/exp_a1.json.gz"' in html
        assert 'data-value="1000"' in html

    def test_dark_theme_and_embedded_plotly(self, metrics_dataset, fast_config, temp_dir):
        from atacdash.visualization.report.generator import DashboardReportGenerator, ReportConfig
        from atacdash.visualization.report.templates import PLOTLY_CDN

        generator = DashboardReportGenerator(
            metrics_dataset,
            config=ReportConfig(title="Dark", theme="dark", include_plotlyjs="embed"),
            dashboard_config=fast_config,
        )
        output = temp_dir / "report.html"
        generator.generate(output)
        html = output.read_text()

        assert generator.style.template == "plotly_dark"
        assert PLOTLY_CDN not in html

    def test_generate_report_function(self, temp_metrics_file, temp_dir):
        from atacdash.visualization.report.generator import generate_report

        output = temp_dir / "report.html"
        generate_report(temp_metrics_file, output, title="Function")

        assert "Function" in output.read_text()
