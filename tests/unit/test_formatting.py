"""
Unit tests for metric display formatting.
"""

from __future__ import annotations

from atacdash.core.formatting import (
    format_count,
    format_distance,
    format_number,
    format_table_value,
)


class TestFormatNumber:
    """Tests for three-significant-digit formatting."""

    def test_float(self):
        assert format_number(0.123456) == "0.123"
        assert format_number(12.3456) == "12.3"

    def test_trailing_zeros_kept(self):
        assert format_number(0.5) == "0.500"

    def test_integers_unchanged(self):
        assert format_number(42) == "42"
        assert format_number("42") == "42"
        assert format_number("-7") == "-7"

    def test_numeric_string(self):
        assert format_number("0.123456") == "0.123"

    def test_unrecognized_values_verbatim(self):
        assert format_number("n/a") == "n/a"
        assert format_number(None) == "None"
        assert format_number(float("nan")) == "nan"


class TestFormatTableValue:
    """Tests for table cell formatting."""

    def test_integers_get_separators(self):
        assert format_table_value(1234567) == "1,234,567"
        assert format_table_value(2.0) == "2"

    def test_floats_get_three_decimals(self):
        assert format_table_value(0.1) == "0.100"
        assert format_table_value(1234.5) == "1,234.500"

    def test_non_numeric(self):
        assert format_table_value(None) == ""
        assert format_table_value("abc") == "abc"
        assert format_table_value(True) == "True"


class TestOtherFormats:
    def test_distance(self):
        assert format_distance(0.1) == "0.1"
        assert format_distance(0.123456789012) == "0.123456789"

    def test_count(self):
        assert format_count(999) == "999"
        assert format_count(2500) == "2.5K"
        assert format_count(1_500_000) == "1.5M"
