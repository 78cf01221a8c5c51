"""Utilities for converting driver values into display strings."""

from __future__ import annotations

from datetime import date, datetime
from typing import Any

from sqlpad.constants import MAX_CELL_LENGTH, NULL_DISPLAY, TIMESTAMP_FORMAT, TRUNCATION_MARKER


def truncate_text(text: str, limit: int = MAX_CELL_LENGTH) -> str:
    """Cut ``text`` to ``limit`` characters, marking the cut with an ellipsis."""
    if len(text) > limit:
        return text[:limit] + TRUNCATION_MARKER
    return text


def format_cell_value(value: Any) -> str:
    """
    Format a raw driver value for the result grid.

    - None → "(null)"
    - datetime/date → "YYYY-MM-DD HH:MM:SS" (dates render at midnight)
    - Other values → str(value)

    Anything longer than 255 characters is truncated.
    """
    if value is None:
        return NULL_DISPLAY

    if isinstance(value, datetime):
        return value.strftime(TIMESTAMP_FORMAT)

    if isinstance(value, date):
        return datetime(value.year, value.month, value.day).strftime(TIMESTAMP_FORMAT)

    text = value if isinstance(value, str) else str(value)
    return truncate_text(text)
