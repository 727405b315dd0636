"""Cursor movement and editing for the search query and the relocate path input."""

from __future__ import annotations

import enum
import os
from collections.abc import Iterable
from dataclasses import dataclass, field

# Characters Python counts as whitespace but which are not word separators here.
_NOT_SPACE = frozenset("\x1c\x1d\x1e\x1f")


def _is_space(ch: str) -> bool:
    return ch.isspace() and ch not in _NOT_SPACE


def _rstrip_space(text: str) -> str:
    end = len(text)
    while end > 0 and _is_space(text[end - 1]):
        end -= 1
    return text[:end]


def _lstrip_space(text: str) -> str:
    start = 0
    while start < len(text) and _is_space(text[start]):
        start += 1
    return text[start:]


def is_han(ch: str) -> bool:
    """True for CJK ideographs."""
    cp = ord(ch)
    return (
        0x4E00 <= cp <= 0x9FFF
        or 0x3400 <= cp <= 0x4DBF
        or 0x20000 <= cp <= 0x2A6DF
        or 0xF900 <= cp <= 0xFAFF
    )


class CharClass(enum.Enum):
    """Script class used to find word boundaries."""

    SPACE = "space"
    HAN = "han"
    HIRAGANA = "hiragana"
    KATAKANA = "katakana"
    HANGUL = "hangul"
    ALPHA = "alpha"
    PUNCT = "punct"


def char_class(ch: str) -> CharClass:
    """Classify a character for word-boundary purposes."""
    if _is_space(ch):
        return CharClass.SPACE
    if is_han(ch):
        return CharClass.HAN
    cp = ord(ch)
    if 0x3040 <= cp <= 0x309F:
        return CharClass.HIRAGANA
    if 0x30A0 <= cp <= 0x30FF:
        return CharClass.KATAKANA
    if 0xAC00 <= cp <= 0xD7AF or 0x1100 <= cp <= 0x11FF:
        return CharClass.HANGUL
    if ch.isalnum() or ch == "_":
        return CharClass.ALPHA
    return CharClass.PUNCT


def _segment_han(run: str) -> list[str]:
    """Split a run of ideographs into words; each ideograph stands as one word."""
    return list(run)


def _is_break(ch: str, cls: CharClass) -> bool:
    cc = char_class(ch)
    return cc != cls or cc in (CharClass.SPACE, CharClass.PUNCT)


def find_prev_word_start(text: str, pos: int) -> int:
    """Index where the word before ``pos`` starts (for Ctrl+W and Ctrl+Left)."""
    trimmed = _rstrip_space(text[:pos])
    if not trimmed:
        return 0

    last = trimmed[-1]
    if is_han(last):
        cjk_end = len(trimmed)
        cjk_start = 0
        for index in range(cjk_end - 1, -1, -1):
            if not is_han(trimmed[index]):
                cjk_start = index + 1
                break
        offset = cjk_start
        for token in _segment_han(trimmed[cjk_start:cjk_end]):
            token_end = offset + len(token)
            if token_end >= cjk_end:
                return offset
            offset = token_end
        return cjk_start

    cls = char_class(last)
    for index in range(len(trimmed) - 1, -1, -1):
        if _is_break(trimmed[index], cls):
            return index + 1
    return 0


def find_next_word_end(text: str, pos: int) -> int:
    """Index where the word after ``pos`` ends (for Ctrl+Right)."""
    rest = text[pos:]
    after_space = _lstrip_space(rest)
    space_len = len(rest) - len(after_space)
    if not after_space:
        return len(text)

    first = after_space[0]
    if is_han(first):
        cjk_len = 0
        for ch in after_space:
            if not is_han(ch):
                break
            cjk_len += 1
        tokens = _segment_han(after_space[:cjk_len])
        if tokens:
            return pos + space_len + len(tokens[0])
        return pos + space_len + cjk_len

    cls = char_class(first)
    end = next(
        (index for index, ch in enumerate(after_space) if _is_break(ch, cls)),
        len(after_space),
    )
    return pos + space_len + end


@dataclass
class QueryInput:
    """The search query being typed, with its cursor."""

    text: str = ""
    cursor: int = 0

    def insert(self, ch: str) -> None:
        self.text = self.text[: self.cursor] + ch + self.text[self.cursor :]
        self.cursor += len(ch)

    def delete_char_backward(self) -> bool:
        """Delete the character before the cursor; True if anything changed."""
        if self.cursor == 0:
            return False
        self.text = self.text[: self.cursor - 1] + self.text[self.cursor :]
        self.cursor -= 1
        return True

    def delete_word_backward(self) -> bool:
        """Delete back to the start of the previous word; True if anything changed."""
        if self.cursor == 0:
            return False
        boundary = find_prev_word_start(self.text, self.cursor)
        changed = boundary != self.cursor
        self.text = self.text[:boundary] + self.text[self.cursor :]
        self.cursor = boundary
        return changed

    def move_left(self) -> None:
        if self.cursor > 0:
            self.cursor -= 1

    def move_right(self) -> None:
        if self.cursor < len(self.text):
            self.cursor += 1

    def move_home(self) -> None:
        self.cursor = 0

    def move_end(self) -> None:
        self.cursor = len(self.text)

    def move_word_left(self) -> None:
        self.cursor = find_prev_word_start(self.text, self.cursor)

    def move_word_right(self) -> None:
        self.cursor = find_next_word_end(self.text, self.cursor)

    def clear(self) -> None:
        self.text = ""
        self.cursor = 0


def _default_home() -> str | None:
    home = os.path.expanduser("~")
    return None if home == "~" else home


def common_prefix(names: Iterable[str]) -> str:
    """Longest string every name starts with."""
    return os.path.commonprefix(list(names))


@dataclass
class PathInput:
    """A directory path being typed, with path-segment editing and tab completion."""

    text: str = ""
    cursor: int = 0
    home: str | None = field(default_factory=_default_home)

    def insert(self, ch: str) -> None:
        self.text = self.text[: self.cursor] + ch + self.text[self.cursor :]
        self.cursor += len(ch)

    def backspace(self) -> None:
        if self.cursor > 0:
            self.text = self.text[: self.cursor - 1] + self.text[self.cursor :]
            self.cursor -= 1

    def delete_segment_backward(self) -> None:
        """Delete back to the previous ``/``, skipping a trailing one."""
        if self.cursor == 0:
            return
        search_end = self.cursor - 1 if self.text[self.cursor - 1] == "/" else self.cursor
        boundary = self.text.rfind("/", 0, search_end) + 1
        self.text = self.text[:boundary] + self.text[self.cursor :]
        self.cursor = boundary

    def move_left(self) -> None:
        if self.cursor > 0:
            self.cursor -= 1

    def move_right(self) -> None:
        if self.cursor < len(self.text):
            self.cursor += 1

    def move_segment_left(self) -> None:
        if self.cursor > 0:
            self.cursor = self.text.rfind("/", 0, self.cursor - 1) + 1

    def move_segment_right(self) -> None:
        if self.cursor < len(self.text):
            index = self.text.find("/", self.cursor + 1)
            self.cursor = index if index != -1 else len(self.text)

    def move_home(self) -> None:
        self.cursor = 0

    def move_end(self) -> None:
        self.cursor = len(self.text)

    def clear(self) -> None:
        self.text = ""
        self.cursor = 0

    def _expanded(self) -> str:
        if self.text.startswith("~"):
            return (self.home or "") + self.text[1:]
        return self.text

    def complete(self) -> bool:
        """Complete the path against existing directories; True if the text changed."""
        expanded = self._expanded()
        if expanded.endswith("/"):
            parent, prefix = expanded, ""
        elif expanded == "":
            parent, prefix = "/", ""
        else:
            parent, prefix = os.path.split(expanded)
            if parent == "":
                return False

        show_hidden = prefix.startswith(".")
        try:
            with os.scandir(parent) as entries:
                matches = sorted(
                    entry.name
                    for entry in entries
                    if entry.is_dir(follow_symlinks=False)
                    and entry.name.startswith(prefix)
                    and (show_hidden or not entry.name.startswith("."))
                )
        except OSError:
            return False

        if not matches:
            return False

        completed = matches[0] + "/" if len(matches) == 1 else common_prefix(matches)
        result = os.path.join(parent, completed)
        if self.text.startswith("~") and self.home and result.startswith(self.home):
            result = "~" + result[len(self.home) :]

        changed = result != self.text
        self.text = result
        self.cursor = len(result)
        return changed