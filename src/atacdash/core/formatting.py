"""
Display formatting for metric values.

Values that are not cleanly an integer or a float are shown unformatted
rather than rejected.
"""

from __future__ import annotations

import logging
import math
import re
from typing import Any

logger = logging.getLogger(__name__)

_INTEGER = re.compile(r"^[-+]?([0-9]+|Infinity)$")


def _as_float(value: Any) -> float | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value)
        except ValueError:
            return None
    return None


def format_number(value: Any) -> str:
    """
    Format a value to three significant digits when it is a non-integer number.

    Integers (or integer strings) are returned as-is, floats get three
    significant digits, anything else is returned verbatim.

    Example:
        >>> format_number(0.123456)
        '0.123'
        >>> format_number("42")
        '42'
        >>> format_number("n/a")
        'n/a'
    """
    if isinstance(value, str) and _INTEGER.match(value):
        return value
    number = _as_float(value)
    if number is None or math.isnan(number):
        logger.debug("Unrecognized numeric format: %r", value)
        return str(value)
    if math.isinf(number) or number.is_integer():
        return str(value)
    text = f"{number:#.3g}"
    return text[:-1] if text.endswith(".") else text


def format_integer(value: float | int) -> str:
    """Integer with thousands separators."""
    return f"{int(value):,}"


def format_decimal(value: float) -> str:
    """Number with thousands separators and exactly three decimals."""
    return f"{value:,.3f}"


def format_distance(value: float) -> str:
    """Up to ten significant digits, as shown in scatter detail panels."""
    return f"{value:.10g}"


def format_table_value(value: Any) -> str:
    """
    Format a metric for a table cell.

    Integral numbers get thousands separators, other numbers three decimals,
    and non-numeric values are shown unformatted.
    """
    if value is None:
        return ""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return str(value)
    if isinstance(value, float) and (math.isnan(value) or math.isinf(value)):
        return str(value)
    if isinstance(value, int) or value.is_integer():
        return format_integer(value)
    return format_decimal(value)


def format_count(count: int) -> str:
    """Format large counts with K/M suffixes."""
    if count >= 1_000_000:
        return f"{count / 1_000_000:.1f}M"
    if count >= 1_000:
        return f"{count / 1_000:.1f}K"
    return str(count)
