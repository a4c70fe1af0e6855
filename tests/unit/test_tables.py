"""
Unit tests for metrics tables: rows, formatting, sort, search and
persisted preferences.
"""

from __future__ import annotations

import polars as pl
import pytest

from atacdash.core.exceptions import InvalidPlotOptionError
from atacdash.core.preferences import JsonFilePreferenceStore
from atacdash.visualization.tables import DEFAULT_TABLES, EXPERIMENTS_TABLE


def _ids(rows):
    return [row.experiment_id for row in rows]


class TestTableSpecs:
    def test_default_order(self):
        assert EXPERIMENTS_TABLE.default_order == [(0, "asc"), (1, "asc"), (2, "asc")]
        for spec in DEFAULT_TABLES:
            assert spec.default_order[0] == (0, "asc")

    def test_table_ids_unique(self):
        ids = [spec.table_id for spec in DEFAULT_TABLES]
        assert len(set(ids)) == len(ids)


class TestTableRows:
    """Tests for row construction and formatting."""

    def test_frame_columns(self, session):
        frame = session.tables["reads"].frame()

        assert frame.height == 3
        assert frame["experiment_id"].to_list() == ["exp_a1", "exp_a2", "exp_b1"]
        assert frame.schema["value_0"] == pl.Utf8
        assert frame.schema["value_1"] == pl.Float64

    def test_default_rows(self, session):
        rows = session.tables["reads"].populate()

        assert _ids(rows) == ["exp_a1", "exp_a2", "exp_b1"]
        assert rows[0].texts[:3] == ["exp_a1", "1,000", "500"]

    def test_missing_metric_is_blank(self, session):
        rows = session.tables["reads"].populate()
        # properly_paired_and_mapped_reads is absent from every experiment
        assert all(row.texts[3] == "" for row in rows)

    def test_float_metrics_have_three_decimals(self, session):
        rows = {r.experiment_id: r for r in session.tables["fragments"].populate()}

        assert rows["exp_a1"].texts[2] == "0.100"
        assert rows["exp_b1"].texts[2] == "-0.200"
        assert rows["exp_a2"].texts[1] == "2"

    def test_hover_shows_library_description(self, session):
        rows = {r.experiment_id: r for r in session.tables["reads"].populate()}

        assert rows["exp_a1"].cells[0].hover == "Library A1"
        assert rows["exp_b1"].cells[0].hover is None

    def test_experiment_links(self, session):
        rows = {r.experiment_id: r for r in session.tables["experiments"].populate()}

        description, download = rows["exp_a1"].cells[4], rows["exp_a1"].cells[5]
        assert description.text == "First experiment"
        assert description.href == "http://example.org/exp_a1"
        assert download.text == "Download"
        assert download.href == "http://example.org/exp_a1.json.gz"

        assert rows["exp_a2"].cells[5].text == ""
        assert rows["exp_a2"].cells[5].href is None

    def test_rows_published_to_region(self, session, host):
        session.populate_tables()
        assert _ids(host.regions["peaks"].rows) == ["exp_a1", "exp_a2", "exp_b1"]


class TestSortAndSearch:
    """Tests for user ordering and filtering."""

    def test_sort_descending(self, session):
        rows = session.tables["reads"].sort_by(1, "desc")
        assert _ids(rows) == ["exp_a2", "exp_a1", "exp_b1"]

    def test_missing_values_sort_last(self, session):
        table = session.tables["peaks"]
        assert _ids(table.sort_by(1, "asc")) == ["exp_a2", "exp_a1", "exp_b1"]
        assert _ids(table.sort_by(1, "desc")) == ["exp_a1", "exp_a2", "exp_b1"]

    def test_ties_broken_by_experiment_id(self, session):
        rows = session.tables["experiments"].sort_by(1, "desc")
        assert _ids(rows) == ["exp_b1", "exp_a1", "exp_a2"]

    def test_invalid_order(self, session):
        table = session.tables["experiments"]
        with pytest.raises(InvalidPlotOptionError):
            table.sort_by(42)
        with pytest.raises(InvalidPlotOptionError):
            table.sort_by(5)
        with pytest.raises(InvalidPlotOptionError):
            table.sort_by(0, "sideways")

    def test_search_is_case_insensitive(self, session):
        rows = session.tables["reads"].search("  EXP_A2 ")
        assert _ids(rows) == ["exp_a2"]
        assert session.tables["reads"].query == "EXP_A2"

    def test_search_is_literal(self, session):
        assert session.tables["reads"].search("exp_a.") == []

    def test_search_matches_descriptions(self, session):
        rows = session.tables["experiments"].search("library a1")
        assert _ids(rows) == ["exp_a1"]

    def test_search_skips_unsearchable_columns(self, session):
        assert session.tables["experiments"].search("download") == []

    def test_empty_search_shows_all(self, session):
        table = session.tables["reads"]
        table.search("exp_b")
        assert len(table.search("")) == 3


class TestPreferences:
    """Tests for persisted sort/search state."""

    def _session(self, dataset, store):
        from atacdash.core.session import DashboardSession

        return DashboardSession(dataset, preferences=store)

    def test_state_survives_reload(self, metrics_dataset, temp_dir):
        store = JsonFilePreferenceStore(temp_dir / "prefs.json")
        first = self._session(metrics_dataset, store)
        first.tables["reads"].sort_by(1, "desc")
        first.tables["reads"].search("exp_a")

        reopened = JsonFilePreferenceStore(temp_dir / "prefs.json")
        second = self._session(metrics_dataset, reopened)
        table = second.tables["reads"]

        assert table.order == [(1, "desc")]
        assert table.query == "exp_a"
        assert _ids(table.populate()) == ["exp_a2", "exp_a1"]

    def test_keyed_by_table(self, metrics_dataset, temp_dir):
        store = JsonFilePreferenceStore(temp_dir / "prefs.json")
        session = self._session(metrics_dataset, store)
        session.tables["reads"].sort_by(1, "desc")

        assert store.get("table:reads") == {"order": [[1, "desc"]], "search": ""}
        assert store.get("table:peaks") is None

    def test_reset_forgets_state(self, metrics_dataset, temp_dir):
        store = JsonFilePreferenceStore(temp_dir / "prefs.json")
        session = self._session(metrics_dataset, store)
        table = session.tables["reads"]
        table.sort_by(1, "desc")

        table.reset_state()

        assert table.order == [(0, "asc")]
        assert store.get("table:reads") is None

    def test_invalid_stored_state_ignored(self, metrics_dataset, temp_dir):
        store = JsonFilePreferenceStore(temp_dir / "prefs.json")
        store.set("table:reads", {"order": [[99, "asc"]], "search": "x"})

        table = self._session(metrics_dataset, store).tables["reads"]

        assert table.order == [(0, "asc")]
        assert table.query == ""
