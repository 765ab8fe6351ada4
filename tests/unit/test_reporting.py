"""
Unit tests for reporting/selection_log.py and reporting/matrix.py
"""

import logging

import pytest

from cascading.core.engine import CascadeEngine
from cascading.core.view import DerivedView
from cascading.reporting import (
    DEFAULT_SCENARIOS,
    ScenarioMatrix,
    SelectionLogReporter,
    format_notification,
)


class TestFormatNotification:
    """Tests for the log line format."""

    def test_selection_line(self, product_engine):
        view = product_engine.select("category", "Electronics")
        line = format_notification("category", "Electronics", view)
        assert line == (
            '[CATEGORY] Electronics → Options: '
            '{"category":3,"subcategory":2,"brand":5,"name":9} | Products: 9'
        )

    def test_unset_value_shows_reset(self):
        view = DerivedView(current_selections={"a": None}, available_options={"a": [1, 2]})
        assert format_notification("a", None, view) == '[A] RESET → Options: {"a":2} | Products: 0'

    def test_empty_string_is_a_value(self):
        """Only an unset value is shown as RESET."""
        view = DerivedView(current_selections={"a": ""}, available_options={"a": [""]})
        line = format_notification("a", "", view)
        assert "RESET" not in line
        assert line.startswith("[A]  → Options")


class TestSelectionLogReporter:
    """Tests for SelectionLogReporter."""

    def test_records_history(self, product_engine):
        reporter = SelectionLogReporter()
        reporter.attach(product_engine)

        product_engine.select("category", "Electronics")
        product_engine.select("subcategory", "Laptops")

        history = reporter.history
        assert [e.field_name for e in history] == ["category", "subcategory"]
        assert history[1].record_count == 4
        assert history[1].option_counts["brand"] == 3
        assert [e.sequence for e in history] == [1, 2]

    def test_sink_receives_lines(self, product_engine):
        lines = []
        reporter = SelectionLogReporter(sink=lines.append)
        reporter.attach(product_engine)

        product_engine.reset()

        assert lines == reporter.messages()
        assert lines[0].startswith("[RESET] RESET")

    def test_logs_at_info(self, product_engine, caplog):
        SelectionLogReporter().attach(product_engine)
        with caplog.at_level(logging.INFO, logger="cascading.reporting.selection_log"):
            product_engine.select("category", "Sports")
        assert any("[CATEGORY] Sports" in r.getMessage() for r in caplog.records)

    def test_detach(self, product_engine):
        reporter = SelectionLogReporter()
        reporter.attach(product_engine)
        assert reporter.detach() is True
        assert reporter.detach() is False

        product_engine.select("category", "Sports")

        assert reporter.history == []
        assert product_engine.observer_count == 0

    def test_attach_moves_between_engines(self, product_engine, sample_engine):
        reporter = SelectionLogReporter()
        reporter.attach(product_engine)
        reporter.attach(sample_engine)

        product_engine.select("category", "Sports")
        sample_engine.select("category", "Sports")

        assert reporter.event_count == 1
        assert reporter.history[0].record_count == 1

    def test_history_is_bounded(self, product_engine):
        reporter = SelectionLogReporter(max_history=2)
        reporter.attach(product_engine)
        for value in ("Sports", "Clothing", "Electronics"):
            product_engine.select("category", value)

        assert [e.value for e in reporter.history] == ["Clothing", "Electronics"]
        assert reporter.event_count == 3

    def test_get_history_filter(self, product_engine):
        reporter = SelectionLogReporter()
        reporter.attach(product_engine)
        product_engine.select("category", "Sports")
        product_engine.select("subcategory", "Footwear")

        assert [e.value for e in reporter.get_history(field_name="subcategory")] == ["Footwear"]
        assert len(reporter.get_history(limit=1)) == 1

    def test_clear_history(self, product_engine):
        reporter = SelectionLogReporter()
        reporter.attach(product_engine)
        product_engine.select("category", "Sports")
        reporter.clear_history()
        assert reporter.history == []
        assert reporter.event_count == 0

    def test_empty_string_selection_not_counted_as_reset(self):
        engine = CascadeEngine(
            [{"kind": "", "size": 1}],
            [{"field": "kind", "depends_on": []}, {"field": "size", "depends_on": ["kind"]}],
        )
        reporter = SelectionLogReporter()
        reporter.attach(engine)

        engine.select("kind", "")

        entry = reporter.history[0]
        assert entry.is_reset is False
        assert "RESET" not in entry.message
        assert reporter.reset_count == 0

    def test_reset_count_excludes_full_reset(self, product_engine):
        reporter = SelectionLogReporter()
        reporter.attach(product_engine)
        product_engine.select("category", "Sports")
        product_engine.select("subcategory", "Footwear")
        product_engine.select("category", "Clothing")
        product_engine.reset()

        assert reporter.history[-1].is_reset
        assert not reporter.history[-1].is_cascade_reset
        assert reporter.reset_count == 1


class TestScenarioMatrix:
    """Tests for ScenarioMatrix."""

    @pytest.fixture
    def matrix(self, product_engine):
        return ScenarioMatrix(product_engine)

    def test_run_scenario_captures_events(self, matrix):
        result = matrix.run_scenario("path", [("category", "Sports"), ("subcategory", "Footwear")])
        assert result.event_count == 2
        assert result.reset_count == 0
        assert len(result.final_view.filtered_data) == 3

    def test_default_matrix_event_counts(self, matrix):
        results = matrix.run_default_matrix()

        assert len(results) == len(DEFAULT_SCENARIOS)
        assert [r.event_count for r in results] == [4, 4, 3, 3, 4, 6]
        assert [r.reset_count for r in results] == [0, 3, 0, 2, 0, 3]

    def test_category_switch_scenario_order(self, matrix):
        matrix.run_scenario(*DEFAULT_SCENARIOS[0])
        result = matrix.run_scenario(*DEFAULT_SCENARIOS[1])

        assert [(e.field_name, e.value) for e in result.entries] == [
            ("name", None),
            ("brand", None),
            ("subcategory", None),
            ("category", "Sports"),
        ]

    def test_summary(self, matrix):
        matrix.run_default_matrix()
        summary = matrix.summary()

        assert summary["scenarios"] == 6
        assert summary["total_events"] == 24
        assert summary["cascade_resets"] == 8
        assert summary["values_selected"]["category"] == ["Clothing", "Electronics", "Sports"]

    def test_availability_matrix(self, matrix):
        matrix.run_default_matrix()
        availability = matrix.availability_matrix()

        assert availability.options["subcategory"] == ["Equipment", "Footwear"]
        assert len(availability.records) == 5

        lines = availability.lines()
        assert lines[0].startswith("category")
        assert "Filtered Products: 5" in lines
        assert "  * Air Max 90 (Nike)" in lines

    def test_to_dict(self, matrix):
        result = matrix.run_scenario("one", [("category", "Clothing")])
        data = result.to_dict()
        assert data["name"] == "one"
        assert data["record_count"] == 5
        assert len(data["events"]) == 1
        assert data["event_count"] == 1

    def test_counts_survive_bounded_history(self, product_engine):
        """Scenario counts stay exact once the reporter starts dropping entries."""
        matrix = ScenarioMatrix(product_engine, SelectionLogReporter(max_history=5))
        results = matrix.run_default_matrix()

        assert [r.event_count for r in results] == [4, 4, 3, 3, 4, 6]
        assert [r.reset_count for r in results] == [0, 3, 0, 2, 0, 3]
        assert matrix.summary()["cascade_resets"] == 8

        last = results[-1]
        assert len(last.entries) == 5
        assert last.entries[-1].message.startswith("[CATEGORY] Sports")
        assert [e.field_name for e in results[2].entries] == ["subcategory", "brand", "name"]
