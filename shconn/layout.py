"""
Menu layout.

Each group becomes one column. Columns are batched side by side up to the
column count; every batch is printed as its own table segment.
"""

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple

from rich.console import Console
from rich.markup import escape
from rich.table import Table
from rich.text import Text

from shconn.models import Capability, IndexedEntry

logger = logging.getLogger(__name__)

Cell = Optional[str]

COLUMN_GAP = 2  # blank cells between two group columns


# ------------------------------
# Data Models
# ------------------------------
@dataclass(frozen=True)
class ColumnMode:
    """Fixed column count when ``count`` is set, derived from width otherwise."""

    count: Optional[int] = None

    @property
    def is_auto(self) -> bool:
        return self.count is None


@dataclass(frozen=True)
class GridSegment:
    """One printed table: a header per column and rows of optional cells."""

    headers: Tuple[str, ...]
    rows: Tuple[Tuple[Cell, ...], ...]


@dataclass(frozen=True)
class Grid:
    columns: int
    segments: Tuple[GridSegment, ...]


# ------------------------------
# Display strings
# ------------------------------
def capability_tag(indexed: IndexedEntry) -> str:
    """``(lftp,mount)``-style tag, or an empty string for ssh-only hosts."""
    extra = [
        c.value
        for c in indexed.entry.capabilities
        if c in (Capability.TRANSFER, Capability.MOUNT)
    ]
    return f"({','.join(extra)})" if extra else ""


def entry_label(indexed: IndexedEntry) -> str:
    """Rich markup for one menu cell, e.g. `` (1) Server (lftp)``."""
    pad = " " if indexed.index < 10 else ""
    label = (
        f"{pad}([index]{indexed.index}[/index]) "
        f"[name]{escape(indexed.entry.name)}[/name]"
    )
    tag = capability_tag(indexed)
    if tag:
        label += f" {tag}"
    return label


def label_width(markup: str) -> int:
    """Printable width of a markup string, styling excluded."""
    return Text.from_markup(markup).cell_len


# ------------------------------
# Layout
# ------------------------------
def column_count(mode: ColumnMode, terminal_width: int, max_label_width: int) -> int:
    """
    Number of group columns per table segment.

    Args:
        mode: Fixed or automatic column mode.
        terminal_width: Available width in cells.
        max_label_width: Widest entry label in cells.

    Returns:
        At least 1.
    """
    if not mode.is_auto:
        return max(1, mode.count)
    if max_label_width <= 0:
        return 1
    return max(1, terminal_width // max_label_width)


def layout(
    entries: Sequence[IndexedEntry],
    labels: Sequence[str],
    terminal_width: int,
    mode: ColumnMode,
) -> Grid:
    """
    Arrange flattened entries into table segments.

    Args:
        entries: Output of ``flatten``.
        labels: Group labels in column order.
        terminal_width: Available width in cells.
        mode: Fixed or automatic column mode.

    Returns:
        The grid of segments; short columns are padded with None.
    """
    cells: Dict[int, List[str]] = {position: [] for position in range(len(labels))}
    max_width = 0
    for indexed in entries:
        markup = entry_label(indexed)
        cells.setdefault(indexed.column, []).append(markup)
        max_width = max(max_width, label_width(markup))

    columns = column_count(mode, terminal_width, max_width)
    logger.debug(
        f"Laying out {len(labels)} groups in {columns} columns "
        f"(terminal width {terminal_width}, widest label {max_width})"
    )

    segments = []
    for start in range(0, len(labels), columns):
        positions = range(start, min(start + columns, len(labels)))
        height = max((len(cells[p]) for p in positions), default=0)
        logger.debug(f"Segment {start + 1}-{positions[-1] + 1} has {height} rows")
        rows = tuple(
            tuple(cells[p][r] if r < len(cells[p]) else None for p in positions)
            for r in range(height)
        )
        segments.append(
            GridSegment(headers=tuple(labels[p] for p in positions), rows=rows)
        )
    return Grid(columns=columns, segments=tuple(segments))


def segment_widths(segment: GridSegment) -> List[int]:
    """Widest header or cell of every column in a segment."""
    widths = [label_width(escape(header)) for header in segment.headers]
    for row in segment.rows:
        for position, cell in enumerate(row):
            if cell is not None:
                widths[position] = max(widths[position], label_width(cell))
    return widths


def render_grid(grid: Grid, console: Console) -> None:
    """
    Print each segment as a borderless table followed by a blank line.

    The table is sized to its content rather than to the console, and printed
    uncropped. Labels that do not fit run past the edge of the terminal and
    are never shortened.
    """
    for segment in grid.segments:
        widths = segment_widths(segment)
        table = Table(
            box=None,
            show_header=True,
            header_style="header",
            show_edge=False,
            pad_edge=False,
            padding=(0, COLUMN_GAP, 0, 0),
            width=sum(widths) + COLUMN_GAP * (len(widths) - 1),
        )
        for header in segment.headers:
            table.add_column(escape(header), no_wrap=True)
        for row in segment.rows:
            table.add_row(*(cell if cell is not None else "" for cell in row))
        console.print(table, crop=False)
        console.print()
