"""Column layout, header hit-testing and selection state for the results list."""

from __future__ import annotations

import enum
from dataclasses import dataclass


class SortColumn(enum.Enum):
    """Column the results are ordered by; RELEVANCE means search score (or date without a query)."""

    RELEVANCE = "relevance"
    AGENT = "agent"
    TITLE = "title"
    DIRECTORY = "directory"
    TURNS = "turns"
    DATE = "date"


class SortDirection(enum.Enum):
    ASC = "asc"
    DESC = "desc"


@dataclass(frozen=True)
class ColumnWidths:
    """Cell widths of each results column for a given content width."""

    agent_w: int
    title_w: int
    dir_w: int
    turns_w: int
    date_w: int
    show_dir: bool


def compute_column_widths(width: int) -> ColumnWidths:
    """Lay out the columns; the title column takes whatever is left."""
    if width >= 120:
        agent_w, dir_w, turns_w, date_w, show_dir = 10, 28, 6, 14, True
    elif width >= 90:
        agent_w, dir_w, turns_w, date_w, show_dir = 10, 22, 5, 12, True
    elif width >= 60:
        agent_w, dir_w, turns_w, date_w, show_dir = 10, 16, 5, 10, True
    else:
        agent_w, dir_w, turns_w, date_w, show_dir = 10, 0, 4, 10, False
    title_w = max(0, width - (agent_w + turns_w + date_w + 3))
    if show_dir:
        title_w = max(0, title_w - (dir_w + 1))
    return ColumnWidths(agent_w, title_w, dir_w, turns_w, date_w, show_dir)


def hit_test_header(col: int, widths: ColumnWidths) -> SortColumn | None:
    """Which column a header click at offset ``col`` falls in, if any."""
    columns = [(SortColumn.AGENT, widths.agent_w), (SortColumn.TITLE, widths.title_w)]
    if widths.show_dir:
        columns.append((SortColumn.DIRECTORY, widths.dir_w))
    columns += [(SortColumn.TURNS, widths.turns_w), (SortColumn.DATE, widths.date_w)]

    x = 0
    for column, width in columns:
        if col < x + width:
            return column
        x += width + 1
    return None


@dataclass
class ResultsState:
    """Selected row and scroll offset of the results list."""

    selected: int = 0
    offset: int = 0

    def select_next(self, total: int) -> None:
        if total == 0:
            return
        self.selected = min(self.selected + 1, total - 1)

    def select_prev(self) -> None:
        self.selected = max(0, self.selected - 1)

    def select_first(self) -> None:
        self.selected = 0

    def page_down(self, page_size: int, total: int) -> None:
        if total == 0:
            return
        self.selected = min(self.selected + page_size, total - 1)

    def page_up(self, page_size: int) -> None:
        self.selected = max(0, self.selected - page_size)

    def ensure_visible(self, visible_rows: int) -> None:
        """Scroll so the selected row lies within ``visible_rows`` rows."""
        if visible_rows < 1:
            raise ValueError("visible_rows must be at least 1")
        if self.selected < self.offset:
            self.offset = self.selected
        elif self.selected >= self.offset + visible_rows:
            self.offset = max(0, self.selected - (visible_rows - 1))