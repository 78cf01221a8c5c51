"""Tabular result model rendered by the console.

A ``ResultTable`` is an immutable grid of display strings. Row 0 is always the
header (column names) and every row has the same length. Column widths are
measured lazily against a cell budget and cached on the table instance, so a
new query result means a new table and a fresh measurement.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator, Sequence
from dataclasses import dataclass, field
from typing import Any

from sqlpad.constants import DEFAULT_MAX_DISPLAY_CELLS, ERROR_COLUMN, MIN_COLUMN_WIDTH

Metric = Callable[[str], float]


@dataclass(frozen=True)
class ColumnLayout:
    """Measured column widths for one table.

    Attributes:
        widths: Column index → display width in measurement units
        measured_rows: Number of rows (header included) that were measured
        truncated: True when rows beyond the cell budget were skipped
    """

    widths: dict[int, float]
    measured_rows: int
    truncated: bool


@dataclass(frozen=True)
class ResultTable:
    """Immutable display grid produced by one query execution.

    Attributes:
        rows: Header row followed by value rows
        failed: True for the synthetic two-row error table
    """

    rows: tuple[tuple[str, ...], ...] = ()
    failed: bool = False
    _layouts: dict[tuple[Any, ...], ColumnLayout] = field(
        default_factory=dict, init=False, repr=False, compare=False
    )

    def __post_init__(self) -> None:
        rows = tuple(tuple(row) for row in self.rows)
        if rows:
            width = len(rows[0])
            for index, row in enumerate(rows):
                if len(row) != width:
                    raise ValueError(
                        f"Row {index} has {len(row)} cells, expected {width} to match the header"
                    )
        object.__setattr__(self, "rows", rows)

    @classmethod
    def from_rows(
        cls, header: Sequence[str], rows: Iterable[Sequence[str]] = ()
    ) -> "ResultTable":
        """Build a table from a header and value rows."""
        return cls(rows=(tuple(header), *(tuple(row) for row in rows)))

    @classmethod
    def error(cls, message: str) -> "ResultTable":
        """Build the two-row, one-column table used to report a failure."""
        return cls(rows=((ERROR_COLUMN,), (message,)), failed=True)

    @property
    def header(self) -> tuple[str, ...]:
        return self.rows[0] if self.rows else ()

    @property
    def column_count(self) -> int:
        return len(self.header)

    @property
    def row_count(self) -> int:
        """Number of value rows (header excluded)."""
        return max(len(self.rows) - 1, 0)

    @property
    def is_empty(self) -> bool:
        """True when there is nothing to draw (no columns)."""
        return self.column_count == 0

    def measured_row_limit(self, max_cells: int = DEFAULT_MAX_DISPLAY_CELLS) -> int:
        """Number of leading rows that fall inside the cell budget.

        Row ``i`` is inside the budget while ``i * column_count <= max_cells``.
        """
        columns = self.column_count
        if columns == 0:
            return len(self.rows)
        return min(len(self.rows), max_cells // columns + 1)

    def is_truncated(self, max_cells: int = DEFAULT_MAX_DISPLAY_CELLS) -> bool:
        return self.measured_row_limit(max_cells) < len(self.rows)

    def visible_rows(self, max_cells: int = DEFAULT_MAX_DISPLAY_CELLS) -> Iterator[tuple[str, ...]]:
        """Iterate the header and the value rows that fit the cell budget."""
        limit = self.measured_row_limit(max_cells)
        for index in range(limit):
            yield self.rows[index]

    def layout(
        self,
        name_metric: Metric,
        value_metric: Metric,
        max_cells: int = DEFAULT_MAX_DISPLAY_CELLS,
        min_width: float = MIN_COLUMN_WIDTH,
    ) -> ColumnLayout:
        """Measure column widths once per table and metric combination.

        Each column is as wide as its widest measured cell, using
        ``name_metric`` for the header and ``value_metric`` for values.
        Measurement stops at the first row whose ``row_index * column_count``
        exceeds ``max_cells``. Widths never drop below ``min_width`` or
        ``MIN_COLUMN_WIDTH``, whichever is larger.
        """
        key = (name_metric, value_metric, max_cells, min_width)
        cached = self._layouts.get(key)
        if cached is not None:
            return cached

        widths: dict[int, float] = {index: 0.0 for index in range(self.column_count)}
        measured = 0
        truncated = False
        for row_index, row in enumerate(self.rows):
            if row_index * self.column_count > max_cells:
                truncated = True
                break

            metric = name_metric if row_index == 0 else value_metric
            for column_index, value in enumerate(row):
                size = metric(value)
                if size > widths[column_index]:
                    widths[column_index] = size
            measured += 1

        floor = max(min_width, MIN_COLUMN_WIDTH)
        for column_index, width in widths.items():
            if not width or width < floor:
                widths[column_index] = floor

        result = ColumnLayout(widths=widths, measured_rows=measured, truncated=truncated)
        self._layouts[key] = result
        return result

    def widths(
        self,
        name_metric: Metric,
        value_metric: Metric,
        max_cells: int = DEFAULT_MAX_DISPLAY_CELLS,
    ) -> dict[int, float]:
        """Column index → width mapping (see :meth:`layout`)."""
        return self.layout(name_metric, value_metric, max_cells).widths
