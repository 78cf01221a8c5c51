"""
GridRenderer for displaying ResultTables as Rich tables.

Provides console-based grid rendering with:
- Column widths measured once per table against a cell budget
- Cyan bold header row, alternating row shading
- A notice instead of the rows that fall outside the budget
- ASCII fallback box when the console cannot draw Unicode
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from rich import box
from rich.box import Box
from rich.cells import cell_len
from rich.console import Console
from rich.table import Table
from rich.text import Text

from sqlpad.constants import DEFAULT_MAX_DISPLAY_CELLS, MIN_COLUMN_WIDTH, TRUNCATION_NOTICE
from sqlpad.models.result import ColumnLayout, ResultTable


@dataclass(frozen=True)
class TextMetric:
    """Measures text in display units: ``cell_len(text) * char_width + padding``.

    Units behave like pixels of a monospaced font ``char_width`` wide; wide
    glyphs count as two cells.
    """

    char_width: int = 8
    padding: int = 6

    def __call__(self, text: str) -> float:
        return float(cell_len(text) * self.char_width + self.padding)

    def to_cells(self, units: float) -> int:
        """Convert a width in units back to terminal cells (at least 1)."""
        return max(1, math.ceil(max(units - self.padding, 0) / self.char_width))


HEADER_METRIC = TextMetric(char_width=8, padding=8)
VALUE_METRIC = TextMetric(char_width=8, padding=6)


@dataclass(frozen=True)
class GridLayout:
    """Console-dependent rendering options."""

    width: int
    height: int
    ascii_only: bool
    grid_box: Box


class LayoutCache:
    """Keeps one GridLayout, rebuilt whenever the console size changes."""

    def __init__(self) -> None:
        self._key: tuple[int, int, bool] | None = None
        self._layout: GridLayout | None = None
        self.builds = 0

    def get(self, console: Console) -> GridLayout:
        ascii_only = False
        try:
            ascii_only = bool(getattr(console.options, "ascii_only", False))
        except Exception:
            ascii_only = False

        size = console.size
        key = (size.width, size.height, ascii_only)
        if self._layout is None or key != self._key:
            self._key = key
            self._layout = GridLayout(
                width=size.width,
                height=size.height,
                ascii_only=ascii_only,
                grid_box=box.ASCII if ascii_only else box.ROUNDED,
            )
            self.builds += 1
        return self._layout


class GridRenderer:
    """
    Renders a ResultTable as a Rich table.

    Widths come from :meth:`ResultTable.layout`, so they are measured once
    per table instance; only rows inside the cell budget are drawn.
    """

    def __init__(
        self,
        max_cells: int = DEFAULT_MAX_DISPLAY_CELLS,
        min_column_width: int = MIN_COLUMN_WIDTH,
        name_metric: TextMetric = HEADER_METRIC,
        value_metric: TextMetric = VALUE_METRIC,
    ) -> None:
        """
        Initialize GridRenderer.

        Args:
            max_cells: Truncation budget (rows x columns) for measuring and drawing
            min_column_width: Narrowest column width in units
            name_metric: Metric for header cells
            value_metric: Metric for value cells
        """
        self.max_cells = max_cells
        self.min_column_width = min_column_width
        self.name_metric = name_metric
        self.value_metric = value_metric
        self.layout_cache = LayoutCache()

    def column_layout(self, table: ResultTable) -> ColumnLayout:
        return table.layout(
            self.name_metric, self.value_metric, self.max_cells, self.min_column_width
        )

    def column_cells(self, table: ResultTable) -> list[int]:
        """Column widths in terminal cells."""
        widths = self.column_layout(table).widths
        return [self.value_metric.to_cells(widths[index]) for index in range(table.column_count)]

    def build(self, table: ResultTable, console: Console) -> Table | None:
        """
        Create the Rich Table for ``table``.

        Returns:
            Rich Table, or None when the table has no columns
        """
        if table.is_empty:
            return None

        layout = self.layout_cache.get(console)
        cells = self.column_cells(table)

        grid = Table(
            show_header=True,
            header_style="bold cyan",
            row_styles=["", "dim"],
            border_style="cyan",
            box=layout.grid_box,
        )
        for name, width in zip(table.header, cells):
            grid.add_column(Text(name), width=width, no_wrap=True, overflow="ellipsis")

        rows = table.visible_rows(self.max_cells)
        next(rows, None)  # header
        for row in rows:
            grid.add_row(*(Text(value) for value in row))
        return grid

    def render(self, table: ResultTable, console: Console | None = None) -> None:
        """Print ``table`` and, when rows were cut, the truncation notice once."""
        console = console or Console()
        grid = self.build(table, console)
        if grid is None:
            console.print("[yellow]Statement returned no result set[/yellow]")
            return

        console.print(grid)
        if self.column_layout(table).truncated:
            console.print(f"[yellow]{TRUNCATION_NOTICE}[/yellow]", highlight=False)
