"""Session records plus the filtering, scoping and sorting rules of the results list."""

from __future__ import annotations

import enum
from collections import Counter
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from datetime import datetime

from .results_list import SortColumn, SortDirection

_ASCII_LOWER = str.maketrans(
    "ABCDEFGHIJKLMNOPQRSTUVWXYZ", "abcdefghijklmnopqrstuvwxyz"
)


@dataclass
class Session:
    """One coding-agent session as shown in the results list."""

    id: str
    agent: str
    title: str = ""
    directory: str = ""
    timestamp: datetime = field(default_factory=lambda: datetime.fromtimestamp(0))
    content: str = ""
    message_count: int = 0
    mtime: float = 0.0


class DirectoryScope(enum.Enum):
    """How the directory filter restricts sessions."""

    LOCAL = "local"  # exactly this directory
    PROJECT = "project"  # directory contains the filter string
    GLOBAL = "global"  # no directory restriction


def default_direction(column: SortColumn) -> SortDirection:
    """Direction a column sorts in when first chosen."""
    if column in (SortColumn.DATE, SortColumn.TURNS):
        return SortDirection.DESC
    return SortDirection.ASC


def _flip(direction: SortDirection) -> SortDirection:
    return SortDirection.DESC if direction is SortDirection.ASC else SortDirection.ASC


@dataclass
class SortState:
    """The active sort column and direction, and the query state they react to."""

    column: SortColumn = SortColumn.DATE
    direction: SortDirection = SortDirection.DESC
    prev_query_empty: bool = True

    def toggle_column(self, column: SortColumn) -> None:
        """Pick a column; choosing it again flips it, a third time resets to relevance."""
        if self.column is column:
            default = default_direction(column)
            if self.direction is default:
                self.direction = _flip(default)
            else:
                self.column = SortColumn.RELEVANCE
                self.direction = SortDirection.DESC
        else:
            self.column = column
            self.direction = default_direction(column)

    def toggle_sort(self, has_query: bool) -> None:
        """Sort key: relevance and date alternate with a query, date flips without one."""
        if has_query:
            if self.column is SortColumn.RELEVANCE:
                self.column = SortColumn.DATE
                self.direction = SortDirection.DESC
            else:
                self.column = SortColumn.RELEVANCE
        else:
            self.toggle_column(SortColumn.DATE)

    def on_query_change(self, has_query: bool) -> None:
        """Switch to relevance when a query appears and back to date when it clears."""
        if has_query and self.prev_query_empty:
            self.column = SortColumn.RELEVANCE
        elif not has_query and not self.prev_query_empty:
            self.column = SortColumn.DATE
            self.direction = SortDirection.DESC
        self.prev_query_empty = not has_query


def matches_scope(directory: str, scope: DirectoryScope, dir_filter: str | None) -> bool:
    """Whether a session directory passes the directory filter under ``scope``."""
    if dir_filter is None or scope is DirectoryScope.GLOBAL:
        return True
    if scope is DirectoryScope.LOCAL:
        return directory == dir_filter
    needle = dir_filter.lower().translate(_ASCII_LOWER)
    return not needle or needle in directory.translate(_ASCII_LOWER)


def next_scope(scope: DirectoryScope) -> DirectoryScope:
    """Scope that follows ``scope`` in the local → project → global cycle."""
    return {
        DirectoryScope.LOCAL: DirectoryScope.PROJECT,
        DirectoryScope.PROJECT: DirectoryScope.GLOBAL,
        DirectoryScope.GLOBAL: DirectoryScope.LOCAL,
    }[scope]


def count_agents(
    sessions: Iterable[Session], scope: DirectoryScope, dir_filter: str | None
) -> tuple[dict[str, int], int]:
    """Sessions per agent within the scope, and their total."""
    counts = Counter(
        s.agent for s in sessions if matches_scope(s.directory, scope, dir_filter)
    )
    return dict(counts), sum(counts.values())


def filter_sessions(
    sessions: Iterable[Session],
    agent: str | None,
    scope: DirectoryScope,
    dir_filter: str | None,
) -> list[Session]:
    """Sessions of the given agent (any if None) that lie within the scope."""
    return [
        s
        for s in sessions
        if (agent is None or s.agent == agent)
        and matches_scope(s.directory, scope, dir_filter)
    ]


_COLUMN_KEYS = {
    SortColumn.DATE: lambda s: s.mtime,
    SortColumn.AGENT: lambda s: s.agent,
    SortColumn.TITLE: lambda s: s.title,
    SortColumn.DIRECTORY: lambda s: s.directory,
    SortColumn.TURNS: lambda s: s.message_count,
}


def sort_sessions(
    sessions: Iterable[Session],
    column: SortColumn,
    direction: SortDirection,
    scores: Mapping[str, float],
    has_query: bool,
) -> list[Session]:
    """Order sessions for display; the sort is stable.

    Relevance sorts by search score (or newest first without a query). Other
    columns sort by the column, with the search score breaking ties when
    there is a query.
    """
    items = list(sessions)

    def score(s: Session) -> float:
        return scores.get(s.id, 0.0)

    if column is SortColumn.RELEVANCE:
        if has_query:
            return sorted(items, key=score, reverse=True)
        return sorted(items, key=lambda s: s.mtime, reverse=True)

    if has_query:
        items.sort(key=score, reverse=True)
    items.sort(key=_COLUMN_KEYS[column], reverse=direction is SortDirection.DESC)
    return items


def available_agents(agent_counts: Mapping[str, int]) -> list[str]:
    """Agents with at least one session, in name order."""
    return sorted(name for name, count in agent_counts.items() if count > 0)


def cycle_agent_forward(agents: Sequence[str], current: str | None) -> str | None:
    """Next agent filter after ``current``; None means all agents."""
    if current is None:
        return agents[0] if agents else None
    if current in agents:
        index = agents.index(current)
        if index + 1 < len(agents):
            return agents[index + 1]
    return None


def cycle_agent_backward(agents: Sequence[str], current: str | None) -> str | None:
    """Previous agent filter before ``current``; None means all agents."""
    if current is None:
        return agents[-1] if agents else None
    if current in agents:
        index = agents.index(current)
        if index > 0:
            return agents[index - 1]
    return None