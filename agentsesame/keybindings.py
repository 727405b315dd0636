"""Configurable key bindings: key combinations mapped to interface actions."""

from __future__ import annotations

import enum
import sys
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Union


class Action(enum.Enum):
    """Every bindable action; the value is the name used in the config file."""

    # Global (active regardless of pane focus)
    QUIT = "quit"
    RESUME_SESSION = "resume_session"
    TOGGLE_PREVIEW = "toggle_preview"
    TOGGLE_PREVIEW_LAYOUT = "toggle_preview_layout"
    TOGGLE_SORT = "toggle_sort"
    DELETE_WORD_BACKWARD = "delete_word_backward"
    CLEAR_SEARCH = "clear_search"
    TOGGLE_MOUSE_CAPTURE = "toggle_mouse_capture"
    TOGGLE_PANE_FOCUS = "toggle_pane_focus"
    CYCLE_DIRECTORY_SCOPE = "cycle_directory_scope"
    CYCLE_AGENT_FILTER_FORWARD = "cycle_agent_filter_forward"
    CYCLE_AGENT_FILTER_BACKWARD = "cycle_agent_filter_backward"
    REFRESH_SESSIONS = "refresh_sessions"

    # Results-focused
    NAVIGATE_DOWN = "navigate_down"
    NAVIGATE_UP = "navigate_up"
    PAGE_DOWN = "page_down"
    PAGE_UP = "page_up"
    CURSOR_HOME = "cursor_home"
    CURSOR_END = "cursor_end"
    CURSOR_LEFT = "cursor_left"
    CURSOR_RIGHT = "cursor_right"
    CURSOR_WORD_LEFT = "cursor_word_left"
    CURSOR_WORD_RIGHT = "cursor_word_right"
    DELETE_CHAR_BACKWARD = "delete_char_backward"
    SWITCH_TO_PREVIEW = "switch_to_preview"

    # Preview-focused
    SCROLL_PREVIEW_DOWN = "scroll_preview_down"
    SCROLL_PREVIEW_UP = "scroll_preview_up"
    PAGE_PREVIEW_DOWN = "page_preview_down"
    PAGE_PREVIEW_UP = "page_preview_up"
    SCROLL_PREVIEW_TO_TOP = "scroll_preview_to_top"
    SCROLL_PREVIEW_TO_BOTTOM = "scroll_preview_to_bottom"
    COPY_SESSION_CONTENT = "copy_session_content"
    SWITCH_TO_RESULTS = "switch_to_results"

    # Relocate mode
    RELOCATE_SESSION = "relocate_session"

    # Cross-pane shift navigation
    SHIFT_DOWN = "shift_down"
    SHIFT_UP = "shift_up"
    SHIFT_PAGE_DOWN = "shift_page_down"
    SHIFT_PAGE_UP = "shift_page_up"


class KeyCode(enum.Enum):
    """Non-character keys. Character keys are represented by a one-character str."""

    ESC = "esc"
    ENTER = "enter"
    TAB = "tab"
    BACKTAB = "backtab"
    BACKSPACE = "backspace"
    UP = "up"
    DOWN = "down"
    LEFT = "left"
    RIGHT = "right"
    PAGE_UP = "pageup"
    PAGE_DOWN = "pagedown"
    HOME = "home"
    END = "end"


Key = Union[KeyCode, str]


class KeyModifiers(enum.Flag):
    NONE = 0
    SHIFT = enum.auto()
    CONTROL = enum.auto()
    ALT = enum.auto()


@dataclass(frozen=True)
class KeyEvent:
    """A key press as delivered by the terminal."""

    code: Key
    modifiers: KeyModifiers = KeyModifiers.NONE


_KEY_NAMES: dict[str, Key] = {
    "esc": KeyCode.ESC,
    "escape": KeyCode.ESC,
    "enter": KeyCode.ENTER,
    "return": KeyCode.ENTER,
    "tab": KeyCode.TAB,
    "backtab": KeyCode.BACKTAB,
    "backspace": KeyCode.BACKSPACE,
    "bs": KeyCode.BACKSPACE,
    "up": KeyCode.UP,
    "down": KeyCode.DOWN,
    "left": KeyCode.LEFT,
    "right": KeyCode.RIGHT,
    "pgup": KeyCode.PAGE_UP,
    "pageup": KeyCode.PAGE_UP,
    "pgdn": KeyCode.PAGE_DOWN,
    "pagedown": KeyCode.PAGE_DOWN,
    "home": KeyCode.HOME,
    "end": KeyCode.END,
    "backtick": "`",
}

_MODIFIER_NAMES = {
    "ctrl": KeyModifiers.CONTROL,
    "control": KeyModifiers.CONTROL,
    "shift": KeyModifiers.SHIFT,
}


def parse_key_name(name: str) -> Key | None:
    """Resolve a key name such as ``enter`` or ``s``; None if unknown."""
    if name in _KEY_NAMES:
        return _KEY_NAMES[name]
    if len(name) == 1 and name.isascii():
        return name
    return None


def action_from_str(name: str) -> Action | None:
    """Look up an action by its config name; None if unknown."""
    try:
        return Action(name)
    except ValueError:
        return None


@dataclass(frozen=True)
class KeyCombo:
    """A normalised key combination used for lookup."""

    code: Key
    modifiers: KeyModifiers = KeyModifiers.NONE

    @classmethod
    def from_key_event(cls, key: KeyEvent) -> KeyCombo:
        """Keep only Control and Shift; BackTab already implies Shift."""
        mods = key.modifiers & (KeyModifiers.CONTROL | KeyModifiers.SHIFT)
        if key.code == KeyCode.BACKTAB:
            mods &= ~KeyModifiers.SHIFT
        return cls(key.code, mods)

    @classmethod
    def parse(cls, text: str) -> KeyCombo | None:
        """Parse strings like ``ctrl+s``, ``shift+up`` or ``backtick``; None if invalid."""
        *modifier_names, key_name = text.strip().lower().split("+")
        modifiers = KeyModifiers.NONE
        for part in modifier_names:
            modifier = _MODIFIER_NAMES.get(part)
            if modifier is None:
                return None
            modifiers |= modifier

        code = parse_key_name(key_name)
        if code is None:
            return None

        if code == KeyCode.TAB and KeyModifiers.SHIFT in modifiers:
            return cls(KeyCode.BACKTAB, modifiers & ~KeyModifiers.SHIFT)
        return cls(code, modifiers)


KeyOrKeys = Union[str, Sequence[str]]


class KeyBindings:
    """Lookup table from key combinations to the actions they trigger."""

    def __init__(self, bindings: Mapping[KeyCombo, Sequence[Action]]) -> None:
        self._map = {combo: tuple(actions) for combo, actions in bindings.items()}

    @classmethod
    def load(cls, user_config: Mapping[str, KeyOrKeys]) -> KeyBindings:
        """Build bindings from the defaults, with user entries replacing whole actions."""
        action_keys: dict[Action, list[KeyCombo]] = dict(cls.defaults())

        for name, keys in user_config.items():
            action = action_from_str(name)
            if action is None:
                print(f"warning: unknown keybinding action: {name}", file=sys.stderr)
                continue
            strings = [keys] if isinstance(keys, str) else list(keys)
            combos = []
            for key_text in strings:
                combo = KeyCombo.parse(key_text)
                if combo is None:
                    print(f"warning: cannot parse key: {key_text}", file=sys.stderr)
                else:
                    combos.append(combo)
            action_keys[action] = combos

        inverted: dict[KeyCombo, list[Action]] = {}
        for action, combos in action_keys.items():
            for combo in combos:
                inverted.setdefault(combo, []).append(action)
        return cls(inverted)

    def lookup(self, key: KeyEvent) -> tuple[Action, ...]:
        """Actions bound to the key of this event."""
        return self.actions_for(KeyCombo.from_key_event(key))

    def actions_for(self, combo: KeyCombo) -> tuple[Action, ...]:
        """Actions bound to an already normalised combination."""
        return self._map.get(combo, ())

    @staticmethod
    def defaults() -> list[tuple[Action, list[KeyCombo]]]:
        """The built-in bindings."""
        ctrl = KeyModifiers.CONTROL
        shift = KeyModifiers.SHIFT
        none = KeyModifiers.NONE
        k = KeyCombo

        return [
            # Global
            (Action.QUIT, [k(KeyCode.ESC, none), k("c", ctrl), k("q", ctrl)]),
            (Action.RESUME_SESSION, [k(KeyCode.ENTER, none)]),
            (Action.TOGGLE_PREVIEW, [k("`", ctrl)]),
            (Action.TOGGLE_PREVIEW_LAYOUT, [k("p", ctrl)]),
            (Action.TOGGLE_SORT, [k("s", ctrl)]),
            (Action.DELETE_WORD_BACKWARD, [k("w", ctrl), k(KeyCode.BACKSPACE, ctrl)]),
            (Action.CLEAR_SEARCH, [k("u", ctrl)]),
            (Action.TOGGLE_MOUSE_CAPTURE, [k("e", ctrl)]),
            (Action.TOGGLE_PANE_FOCUS, [k("t", ctrl)]),
            (Action.CYCLE_DIRECTORY_SCOPE, [k("d", ctrl)]),
            (Action.CYCLE_AGENT_FILTER_FORWARD, [k(KeyCode.TAB, none)]),
            (Action.CYCLE_AGENT_FILTER_BACKWARD, [k(KeyCode.BACKTAB, none)]),
            (Action.REFRESH_SESSIONS, [k("r", ctrl)]),
            (Action.RELOCATE_SESSION, [k("o", ctrl)]),
            # Results-focused
            (Action.NAVIGATE_DOWN, [k(KeyCode.DOWN, none)]),
            (Action.NAVIGATE_UP, [k(KeyCode.UP, none)]),
            (Action.PAGE_DOWN, [k(KeyCode.PAGE_DOWN, none)]),
            (Action.PAGE_UP, [k(KeyCode.PAGE_UP, none)]),
            (Action.CURSOR_HOME, [k(KeyCode.HOME, none)]),
            (Action.CURSOR_END, [k(KeyCode.END, none)]),
            (Action.CURSOR_LEFT, [k(KeyCode.LEFT, none)]),
            (Action.CURSOR_RIGHT, [k(KeyCode.RIGHT, none)]),
            (Action.CURSOR_WORD_LEFT, [k(KeyCode.LEFT, ctrl)]),
            (Action.CURSOR_WORD_RIGHT, [k(KeyCode.RIGHT, ctrl)]),
            (Action.DELETE_CHAR_BACKWARD, [k(KeyCode.BACKSPACE, none)]),
            (Action.SWITCH_TO_PREVIEW, [k("`", none)]),
            # Preview-focused
            (Action.SCROLL_PREVIEW_DOWN, [k(KeyCode.DOWN, none)]),
            (Action.SCROLL_PREVIEW_UP, [k(KeyCode.UP, none)]),
            (Action.PAGE_PREVIEW_DOWN, [k(KeyCode.PAGE_DOWN, none)]),
            (Action.PAGE_PREVIEW_UP, [k(KeyCode.PAGE_UP, none)]),
            (Action.SCROLL_PREVIEW_TO_TOP, [k(KeyCode.HOME, none)]),
            (Action.SCROLL_PREVIEW_TO_BOTTOM, [k(KeyCode.END, none)]),
            (Action.COPY_SESSION_CONTENT, [k("c", none)]),
            (Action.SWITCH_TO_RESULTS, [k("`", none)]),
            # Cross-pane shift
            (Action.SHIFT_DOWN, [k(KeyCode.DOWN, shift)]),
            (Action.SHIFT_UP, [k(KeyCode.UP, shift)]),
            (Action.SHIFT_PAGE_DOWN, [k(KeyCode.PAGE_DOWN, shift)]),
            (Action.SHIFT_PAGE_UP, [k(KeyCode.PAGE_UP, shift)]),
        ]