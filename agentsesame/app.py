"""Interactive state of the session browser: query, filters, sorting, focus and input handling."""

from __future__ import annotations

import enum
import os
import time
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass

from .editing import PathInput, QueryInput
from .keybindings import Action, KeyBindings, KeyCode, KeyEvent, KeyModifiers
from .results_list import (
    ResultsState,
    SortColumn,
    compute_column_widths,
    hit_test_header,
)
from .sorting import (
    DirectoryScope,
    Session,
    SortState,
    available_agents,
    count_agents,
    cycle_agent_backward,
    cycle_agent_forward,
    filter_sessions,
    next_scope,
    sort_sessions,
)
from .theme import Theme
from .utils import copy_to_clipboard

SearchFn = Callable[[str, "str | None", "str | None", int], Sequence[tuple[Session, float]]]
RelocateFn = Callable[[Session, str], str]

_PAGE_SIZE = 10
_DOUBLE_CLICK_SECONDS = 0.4
_MAX_SCROLL = 0xFFFF


class FocusedPane(enum.Enum):
    RESULTS = "results"
    PREVIEW = "preview"


def _no_search(
    query: str, agent: str | None, directory: str | None, limit: int
) -> list[tuple[Session, float]]:
    """Used when no search engine is attached: nothing matches."""
    return []


def _clamp_scroll(value: int) -> int:
    return max(0, min(_MAX_SCROLL, value))


@dataclass
class _Click:
    at: float
    index: int


class App:
    """Everything the browser shows and how it reacts to keys and mouse input."""

    def __init__(
        self,
        *,
        search: SearchFn | None = None,
        keybindings: KeyBindings | None = None,
        theme: Theme | None = None,
        yolo: bool = False,
        search_limit: int = 100,
        relocator: RelocateFn | None = None,
        clipboard: Callable[[str], bool] = copy_to_clipboard,
    ) -> None:
        self.search = search or _no_search
        self.keybindings = keybindings or KeyBindings.load({})
        self.theme = theme or Theme.from_config(None)
        self.yolo = yolo
        self.search_limit_cap = search_limit
        self.relocator = relocator
        self.clipboard = clipboard

        self.input = QueryInput()
        self.sessions: list[Session] = []
        self.filtered: list[Session] = []
        self.results_state = ResultsState()
        self.sort = SortState()
        self.search_scores: dict[str, float] = {}

        self.agent_filter: str | None = None
        self.agent_counts: dict[str, int] = {}
        self.total_count = 0
        self.directory_filter: str | None = None
        self.directory_scope = DirectoryScope.GLOBAL

        self.show_preview = True
        self.preview_bottom = True
        self.preview_scroll = 0
        self.preview_auto_scroll = False
        self.preview_total_lines = 0
        self.preview_height = 0
        self.focused_pane = FocusedPane.RESULTS

        self.should_quit = False
        self.resume_session: Session | None = None
        self.status_msg: str | None = None
        self.search_dirty = False
        self.last_search_time: float | None = None
        self.mouse_captured = True
        self.mouse_toggle_pending = False
        self.refresh_requested = False

        self.relocate_mode = False
        self.relocate_input = PathInput()
        self._last_click: _Click | None = None

    @property
    def query(self) -> str:
        return self.input.text

    # ------------------------------------------------------------------ data

    def set_sessions(self, sessions: Iterable[Session]) -> None:
        """Replace the loaded sessions and refresh the visible list."""
        self.sessions = list(sessions)
        self.update_agent_counts()
        self.apply_filter()

    def update_agent_counts(self) -> None:
        self.agent_counts, self.total_count = count_agents(
            self.sessions, self.directory_scope, self.directory_filter
        )

    def apply_filter(self) -> None:
        """Recompute the visible sessions from query, filters and sort order."""
        start = time.perf_counter()
        scope = self.directory_scope
        dir_filter = self.directory_filter
        has_query = bool(self.query)
        self.sort.on_query_change(has_query)

        if not has_query:
            self.search_scores = {}
            filtered = filter_sessions(self.sessions, self.agent_filter, scope, dir_filter)
        else:
            if self.agent_filter is not None:
                limit = self.agent_counts.get(self.agent_filter, self.total_count)
            else:
                limit = self.total_count
            limit = max(1, min(limit, self.search_limit_cap))
            effective_dir = None if scope is DirectoryScope.GLOBAL else dir_filter
            results = self.search(self.query, self.agent_filter, effective_dir, limit)
            self.search_scores = {session.id: score for session, score in results}
            filtered = [session for session, _ in results]
            # The engine matches directories by containment; Local wants exact.
            if scope is DirectoryScope.LOCAL:
                filtered = filter_sessions(filtered, None, scope, dir_filter)

        self.filtered = sort_sessions(
            filtered, self.sort.column, self.sort.direction, self.search_scores, has_query
        )
        self.last_search_time = time.perf_counter() - start
        self.results_state.select_first()
        self._reset_preview()
        self.search_dirty = False

    def selected_session(self) -> Session | None:
        index = self.results_state.selected
        if 0 <= index < len(self.filtered):
            return self.filtered[index]
        return None

    def toggle_sort_column(self, column: SortColumn) -> None:
        self.sort.toggle_column(column)
        self.search_dirty = True

    # ------------------------------------------------------------------ keys

    def handle_key(self, key: KeyEvent) -> bool:
        """React to a key press; True if it did anything."""
        if self.relocate_mode:
            self._handle_relocate_key(key)
            return True

        preview_focused = self.focused_pane is FocusedPane.PREVIEW
        handled = False
        for action in self.keybindings.lookup(key):
            if self._dispatch(action, preview_focused):
                handled = True

        if (
            not handled
            and isinstance(key.code, str)
            and KeyModifiers.CONTROL not in key.modifiers
            and not preview_focused
        ):
            self.input.insert(key.code)
            self.search_dirty = True
            handled = True
        return handled

    def handle_action(self, action: Action) -> bool:
        """Perform one action under the current focus; False if it does not apply."""
        return self._dispatch(action, self.focused_pane is FocusedPane.PREVIEW)

    def _dispatch(self, action: Action, preview_focused: bool) -> bool:
        handler = _GLOBAL_ACTIONS.get(action)
        if handler is not None:
            handler(self)
            return True
        if action in _SHIFT_ACTIONS:
            _SHIFT_ACTIONS[action](self, preview_focused)
            return True
        pane_actions = _PREVIEW_ACTIONS if preview_focused else _RESULTS_ACTIONS
        handler = pane_actions.get(action)
        if handler is None:
            return False
        handler(self)
        return True

    # Global actions

    def _quit(self) -> None:
        self.should_quit = True

    def _resume(self) -> None:
        session = self.selected_session()
        if session is not None:
            self.resume_session = session
            self.should_quit = True

    def _toggle_preview(self) -> None:
        self.show_preview = not self.show_preview
        if not self.show_preview:
            self.focused_pane = FocusedPane.RESULTS

    def _toggle_preview_layout(self) -> None:
        self.preview_bottom = not self.preview_bottom

    def _toggle_sort(self) -> None:
        self.sort.toggle_sort(bool(self.query))
        self.search_dirty = True

    def _delete_word_backward(self) -> None:
        self.input.delete_word_backward()
        self.search_dirty = True

    def _clear_search(self) -> None:
        self.input.clear()
        self.search_dirty = True

    def _toggle_mouse(self) -> None:
        self.mouse_captured = not self.mouse_captured
        self.mouse_toggle_pending = True

    def _toggle_pane_focus(self) -> None:
        if self.show_preview:
            self.focused_pane = (
                FocusedPane.PREVIEW
                if self.focused_pane is FocusedPane.RESULTS
                else FocusedPane.RESULTS
            )

    def _cycle_scope(self) -> None:
        if self.directory_filter is not None:
            self.directory_scope = next_scope(self.directory_scope)
            self.update_agent_counts()
            self.search_dirty = True

    def _cycle_agent_forward(self) -> None:
        agents = available_agents(self.agent_counts)
        self.agent_filter = cycle_agent_forward(agents, self.agent_filter)
        self.search_dirty = True

    def _cycle_agent_backward(self) -> None:
        agents = available_agents(self.agent_counts)
        self.agent_filter = cycle_agent_backward(agents, self.agent_filter)
        self.search_dirty = True

    def _refresh(self) -> None:
        self.refresh_requested = True

    def _start_relocate(self) -> None:
        session = self.selected_session()
        if session is None:
            return
        if session.agent != "claude":
            self.status_msg = "Relocate only supports Claude sessions"
            return
        cwd = os.getcwd()
        self.relocate_input = PathInput(text=cwd, cursor=len(cwd))
        self.relocate_mode = True

    # Results-focused actions

    def _navigate_next(self) -> None:
        self.results_state.select_next(len(self.filtered))
        self._reset_preview()

    def _navigate_prev(self) -> None:
        self.results_state.select_prev()
        self._reset_preview()

    def _page_down(self) -> None:
        self.results_state.page_down(_PAGE_SIZE, len(self.filtered))
        self._reset_preview()

    def _page_up(self) -> None:
        self.results_state.page_up(_PAGE_SIZE)
        self._reset_preview()

    def _delete_char_backward(self) -> None:
        if self.input.delete_char_backward():
            self.search_dirty = True

    def _switch_to_preview(self) -> None:
        if self.show_preview:
            self.focused_pane = FocusedPane.PREVIEW

    # Preview-focused actions

    def _scroll_to_bottom(self) -> None:
        visible = max(0, self.preview_height - 2)
        self.preview_scroll = _clamp_scroll(max(0, self.preview_total_lines - visible))

    def _copy_content(self) -> None:
        session = self.selected_session()
        if session is None:
            return
        if self.clipboard(session.content):
            self.status_msg = "Copied to clipboard"
        else:
            self.status_msg = "Copy failed (no clipboard tool)"

    def _switch_to_results(self) -> None:
        self.focused_pane = FocusedPane.RESULTS

    # Cross-pane actions

    def _shift_step(self, preview_focused: bool, down: bool) -> None:
        if preview_focused:
            self._navigate_next() if down else self._navigate_prev()
        else:
            self.scroll_preview(1 if down else -1)

    def _shift_page(self, preview_focused: bool, down: bool) -> None:
        if preview_focused:
            self._page_down() if down else self._page_up()
        else:
            self.scroll_preview(_PAGE_SIZE if down else -_PAGE_SIZE)

    # ------------------------------------------------------------------ relocate

    def _handle_relocate_key(self, key: KeyEvent) -> None:
        code = key.code
        ctrl = KeyModifiers.CONTROL in key.modifiers
        path = self.relocate_input

        if code is KeyCode.ESC:
            self.relocate_mode = False
        elif code is KeyCode.ENTER:
            self._finish_relocate()
        elif ctrl and (code == "w" or code is KeyCode.BACKSPACE):
            path.delete_segment_backward()
        elif code is KeyCode.BACKSPACE:
            path.backspace()
        elif code is KeyCode.LEFT:
            path.move_segment_left() if ctrl else path.move_left()
        elif code is KeyCode.RIGHT:
            path.move_segment_right() if ctrl else path.move_right()
        elif code is KeyCode.HOME:
            path.move_home()
        elif code is KeyCode.END:
            path.move_end()
        elif ctrl and code == "u":
            path.clear()
        elif code in (KeyCode.TAB, KeyCode.BACKTAB):
            path.complete()
        elif isinstance(code, str) and not ctrl:
            path.insert(code)

    def _finish_relocate(self) -> None:
        self.relocate_mode = False
        target = self.relocate_input.text
        self.relocate_input = PathInput()
        if not target:
            return
        session = self.selected_session()
        if session is None:
            return
        try:
            if self.relocator is None:
                raise RuntimeError("relocation is not available")
            new_dir = self.relocator(session, target)
        except Exception as exc:  # any failure is reported in the status line
            self.status_msg = f"Relocate failed: {exc}"
            return

        home = os.path.expanduser("~")
        short = new_dir.replace(home, "~") if home and home != "~" else new_dir
        self.status_msg = f"Relocated to {short}"
        for s in (*self.sessions, *self.filtered):
            if s.id == session.id:
                s.directory = new_dir

    # ------------------------------------------------------------------ scrolling and mouse

    def scroll_preview(self, delta: int) -> None:
        self.preview_scroll = _clamp_scroll(self.preview_scroll + delta)

    def scroll_wheel(self, down: bool, over_preview: bool) -> None:
        """Mouse wheel: scroll the preview under the pointer, else move the selection."""
        if over_preview:
            self.scroll_preview(1 if down else -1)
        elif down:
            self._navigate_next()
        else:
            self._navigate_prev()

    def click_row(self, row_in_view: int, now: float | None = None) -> bool:
        """Select the clicked row; a second click within 0.4 s resumes it. True if resumed."""
        if now is None:
            now = time.monotonic()
        index = self.results_state.offset + row_in_view
        if not 0 <= index < len(self.filtered):
            return False
        last = self._last_click
        if (
            last is not None
            and last.index == index
            and now - last.at < _DOUBLE_CLICK_SECONDS
        ):
            self.resume_session = self.filtered[index]
            self.should_quit = True
            return True
        self._last_click = _Click(now, index)
        self.results_state.selected = index
        self._reset_preview()
        return False

    def click_header(self, col: int, inner_width: int) -> SortColumn | None:
        """Toggle sorting by the header column at ``col``; returns that column."""
        column = hit_test_header(col, compute_column_widths(inner_width))
        if column is not None:
            self.toggle_sort_column(column)
        return column

    def _reset_preview(self) -> None:
        self.preview_scroll = 0
        self.preview_auto_scroll = True


_GLOBAL_ACTIONS: dict[Action, Callable[[App], None]] = {
    Action.QUIT: App._quit,
    Action.RESUME_SESSION: App._resume,
    Action.TOGGLE_PREVIEW: App._toggle_preview,
    Action.TOGGLE_PREVIEW_LAYOUT: App._toggle_preview_layout,
    Action.TOGGLE_SORT: App._toggle_sort,
    Action.DELETE_WORD_BACKWARD: App._delete_word_backward,
    Action.CLEAR_SEARCH: App._clear_search,
    Action.TOGGLE_MOUSE_CAPTURE: App._toggle_mouse,
    Action.TOGGLE_PANE_FOCUS: App._toggle_pane_focus,
    Action.CYCLE_DIRECTORY_SCOPE: App._cycle_scope,
    Action.CYCLE_AGENT_FILTER_FORWARD: App._cycle_agent_forward,
    Action.CYCLE_AGENT_FILTER_BACKWARD: App._cycle_agent_backward,
    Action.REFRESH_SESSIONS: App._refresh,
    Action.RELOCATE_SESSION: App._start_relocate,
    Action.CURSOR_WORD_LEFT: lambda app: app.input.move_word_left(),
    Action.CURSOR_WORD_RIGHT: lambda app: app.input.move_word_right(),
}

_RESULTS_ACTIONS: dict[Action, Callable[[App], None]] = {
    Action.NAVIGATE_DOWN: App._navigate_next,
    Action.NAVIGATE_UP: App._navigate_prev,
    Action.PAGE_DOWN: App._page_down,
    Action.PAGE_UP: App._page_up,
    Action.CURSOR_HOME: lambda app: app.input.move_home(),
    Action.CURSOR_END: lambda app: app.input.move_end(),
    Action.CURSOR_LEFT: lambda app: app.input.move_left(),
    Action.CURSOR_RIGHT: lambda app: app.input.move_right(),
    Action.DELETE_CHAR_BACKWARD: App._delete_char_backward,
    Action.SWITCH_TO_PREVIEW: App._switch_to_preview,
}

_PREVIEW_ACTIONS: dict[Action, Callable[[App], None]] = {
    Action.SCROLL_PREVIEW_DOWN: lambda app: app.scroll_preview(1),
    Action.SCROLL_PREVIEW_UP: lambda app: app.scroll_preview(-1),
    Action.PAGE_PREVIEW_DOWN: lambda app: app.scroll_preview(_PAGE_SIZE),
    Action.PAGE_PREVIEW_UP: lambda app: app.scroll_preview(-_PAGE_SIZE),
    Action.SCROLL_PREVIEW_TO_TOP: lambda app: setattr(app, "preview_scroll", 0),
    Action.SCROLL_PREVIEW_TO_BOTTOM: App._scroll_to_bottom,
    Action.COPY_SESSION_CONTENT: App._copy_content,
    Action.SWITCH_TO_RESULTS: App._switch_to_results,
}

_SHIFT_ACTIONS: dict[Action, Callable[[App, bool], None]] = {
    Action.SHIFT_DOWN: lambda app, pf: app._shift_step(pf, True),
    Action.SHIFT_UP: lambda app, pf: app._shift_step(pf, False),
    Action.SHIFT_PAGE_DOWN: lambda app, pf: app._shift_page(pf, True),
    Action.SHIFT_PAGE_UP: lambda app, pf: app._shift_page(pf, False),
}