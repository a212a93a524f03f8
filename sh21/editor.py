"""Editing state of the line being typed: text, cursor, clipboard and quotes."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from enum import IntFlag

from .history import History

PROMPT = "myShell$> "
BACKSLASH_PROMPT = "$> "
QUOTE_PROMPT = "quote> "
DQUOTE_PROMPT = "dquote> "


class QuoteFlags(IntFlag):
    """State flags of the line reader."""

    NONE = 0
    QUOTE = 1
    DQUOTE = 2
    EXIT = 4
    CANCEL = 8


def scan_quotes(lines: Iterable[str | None]) -> QuoteFlags:
    """Report which quote kinds are left open across ``lines``."""
    flags = QuoteFlags.NONE
    for line in lines:
        for char in line or "":
            if char == "'" and not flags & QuoteFlags.DQUOTE:
                flags ^= QuoteFlags.QUOTE
            elif char == '"' and not flags & QuoteFlags.QUOTE:
                flags ^= QuoteFlags.DQUOTE
    return flags


def ends_with_backslash(text: str | None) -> bool:
    """Whether ``text`` ends with an odd number of backslashes."""
    if text is None:
        return False
    return (len(text) - len(text.rstrip("\\"))) % 2 == 1


def _is_alpha(char: str) -> bool:
    return char.isascii() and char.isalpha()


@dataclass
class Cursor:
    """Screen columns of the line start, the cursor and the line end."""

    col_start: int
    col: int
    col_end: int

    @classmethod
    def at(cls, column: int) -> Cursor:
        return cls(column, column, column)

    @property
    def position(self) -> int:
        """Cursor offset within the line text."""
        return self.col - self.col_start


class LineBuffer:
    """The lines of one input, the line being edited and its cursor."""

    def __init__(self, prompt: str = PROMPT, clipboard: str | None = None) -> None:
        self._lines: list[str] = [""]
        self._prompts: list[str] = [prompt]
        self.index = 0
        self.cursor = Cursor.at(len(prompt))
        self.clipboard = clipboard

    @property
    def lines(self) -> tuple[str, ...]:
        return tuple(self._lines)

    @property
    def prompt(self) -> str:
        return self._prompts[self.index]

    @property
    def text(self) -> str:
        """Text of the line being edited."""
        return self._lines[self.index]

    @property
    def position(self) -> int:
        """Cursor offset within the line being edited."""
        return self.cursor.position

    def _set(self, text: str) -> None:
        self._lines[self.index] = text

    def _place(self) -> None:
        cursor = self.cursor
        cursor.col_start = len(self.prompt)
        cursor.col_end = cursor.col_start + len(self.text)
        cursor.col = min(max(cursor.col, cursor.col_start), cursor.col_end)

    def insert_char(self, char: str) -> None:
        pos = self.position
        self._set(self.text[:pos] + char + self.text[pos:])
        self.cursor.col += 1
        self.cursor.col_end += 1

    def backspace(self) -> bool:
        if not self.move_left():
            return False
        pos = self.position
        self._set(self.text[:pos] + self.text[pos + 1:])
        self.cursor.col_end -= 1
        return True

    def delete(self) -> bool:
        if self.cursor.col >= self.cursor.col_end:
            return False
        pos = self.position
        self._set(self.text[:pos] + self.text[pos + 1:])
        self.cursor.col_end -= 1
        return True

    def move_left(self) -> bool:
        if self.cursor.col_start < self.cursor.col:
            self.cursor.col -= 1
            return True
        return False

    def move_right(self) -> bool:
        if self.cursor.col < self.cursor.col_end:
            self.cursor.col += 1
            return True
        return False

    def move_home(self) -> bool:
        moved = self.cursor.col != self.cursor.col_start
        self.cursor.col = self.cursor.col_start
        return moved

    def move_end(self) -> bool:
        moved = self.cursor.col != self.cursor.col_end
        self.cursor.col = self.cursor.col_end
        return moved

    def word_left(self) -> bool:
        text = self.text
        start = pos = self.position - 1
        while pos >= 0 and not _is_alpha(text[pos]):
            pos -= 1
        while pos >= 0 and _is_alpha(text[pos]):
            pos -= 1
        self.cursor.col -= start - pos
        return start != pos

    def word_right(self) -> bool:
        text = self.text
        start = pos = self.position
        while pos < len(text) and not _is_alpha(text[pos]):
            pos += 1
        while pos < len(text) and _is_alpha(text[pos]):
            pos += 1
        self.cursor.col += pos - start
        return start != pos

    def line_up(self) -> bool:
        if self.index == 0:
            return False
        self.index -= 1
        self._place()
        return True

    def line_down(self) -> bool:
        if self.index + 1 >= len(self._lines):
            return False
        self.index += 1
        self._place()
        return True

    def add_line(self, prompt: str) -> None:
        """Start a new empty line after the last one and move to it."""
        self._lines.append("")
        self._prompts.append(prompt)
        self.index = len(self._lines) - 1
        self.cursor = Cursor.at(len(prompt))

    def replace_text(self, text: str) -> None:
        """Replace the line being edited and put the cursor at its end."""
        self._set(text)
        self.cursor.col_end = self.cursor.col_start + len(text)
        self.cursor.col = self.cursor.col_end

    def cut_word_before(self) -> bool:
        if self.cursor.col == self.cursor.col_start:
            return False
        end = self.position
        self.word_left()
        start = self.position
        text = self.text
        self.clipboard = text[start:end]
        self._set(text[:start] + text[end:])
        self.cursor.col_end -= end - start
        return True

    def cut_before(self) -> bool:
        if self.cursor.col == self.cursor.col_start:
            return False
        pos = self.position
        self.clipboard = self.text[:pos]
        self._set(self.text[pos:])
        self.cursor.col = self.cursor.col_start
        self.cursor.col_end -= pos
        return True

    def cut_after(self) -> bool:
        if self.cursor.col == self.cursor.col_end:
            return False
        pos = self.position
        self.clipboard = self.text[pos:]
        self._set(self.text[:pos])
        self.cursor.col_end = self.cursor.col
        return True

    def paste(self) -> bool:
        if self.clipboard is None:
            return False
        for char in self.clipboard:
            self.insert_char(char)
        return True

    def history_up(self, history: History) -> bool:
        text = history.older(self.text)
        if text is None:
            return False
        self.replace_text(text)
        return True

    def history_down(self, history: History) -> bool:
        text = history.newer()
        if text is None:
            return False
        self.replace_text(text)
        return True

    def assemble(self) -> str | None:
        """Join all lines, dropping a continuation backslash from each; ``None`` if empty."""
        if not any(self._lines):
            return None
        return "".join(
            line[:-1] if ends_with_backslash(line) else line for line in self._lines
        )