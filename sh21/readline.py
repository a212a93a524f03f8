"""Interactive line reading: key decoding, raw terminal mode and editing."""

from __future__ import annotations

import os
import sys
import termios
from collections.abc import Iterator
from contextlib import contextmanager
from enum import Enum, auto
from pathlib import Path
from typing import TextIO

from .completion import complete_in_directory
from .editor import (
    BACKSLASH_PROMPT,
    DQUOTE_PROMPT,
    PROMPT,
    QUOTE_PROMPT,
    LineBuffer,
    QuoteFlags,
    ends_with_backslash,
    scan_quotes,
)
from .errors import SHELL_NAME, ShellError, report_error
from .history import DEFAULT_HISTORY_PATH, History

DEFAULT_LOG_PATH = Path.home() / ".21sh_log"
NEWLINE = "\n\r"
READ_SIZE = 9

_KEYPAD_ON = "\x1b[?1h\x1b="
_KEYPAD_OFF = "\x1b[?1l\x1b>"
_CLEAR_TO_END = "\x1b[K"
_CURSOR_UP = "\x1b[A"
_CURSOR_DOWN = "\x1b[B"


class Key(Enum):
    """Editing keys the line reader understands."""

    UP = auto()
    DOWN = auto()
    LEFT = auto()
    RIGHT = auto()
    SHIFT_UP = auto()
    SHIFT_DOWN = auto()
    SHIFT_LEFT = auto()
    SHIFT_RIGHT = auto()
    HOME = auto()
    END = auto()
    DELETE = auto()
    BACKSPACE = auto()
    EOF = auto()
    CANCEL = auto()
    CUT_WORD = auto()
    CUT_BEFORE = auto()
    CUT_AFTER = auto()
    PASTE = auto()
    TAB = auto()


_SEQUENCES: dict[str, Key] = {
    "\x1b[A": Key.UP,
    "\x1bOA": Key.UP,
    "\x1b[B": Key.DOWN,
    "\x1bOB": Key.DOWN,
    "\x1b[C": Key.RIGHT,
    "\x1bOC": Key.RIGHT,
    "\x1b[D": Key.LEFT,
    "\x1bOD": Key.LEFT,
    "\x1b[1;2A": Key.SHIFT_UP,
    "\x1b[1;2B": Key.SHIFT_DOWN,
    "\x1b[1;2C": Key.SHIFT_RIGHT,
    "\x1b[1;2D": Key.SHIFT_LEFT,
    "\x1b[H": Key.HOME,
    "\x1bOH": Key.HOME,
    "\x1b[1~": Key.HOME,
    "\x1b[7~": Key.HOME,
    "\x1b[F": Key.END,
    "\x1bOF": Key.END,
    "\x1b[4~": Key.END,
    "\x1b[8~": Key.END,
    "\x1b[3~": Key.DELETE,
    "\x7f": Key.BACKSPACE,
    "\x08": Key.BACKSPACE,
    "\x04": Key.EOF,
    "\x03": Key.CANCEL,
    "\x17": Key.CUT_WORD,
    "\x15": Key.CUT_BEFORE,
    "\x0b": Key.CUT_AFTER,
    "\x19": Key.PASTE,
    "\t": Key.TAB,
}


def _printable(char: str) -> bool:
    return " " <= char <= "~"


def log_message(path: str | Path | None, message: str, critical: bool = False) -> None:
    """Append ``message`` to the log file; failures to open it are ignored."""
    target = Path(DEFAULT_LOG_PATH if path is None else path)
    try:
        with target.open("a", encoding="utf-8", errors="surrogateescape") as handle:
            if critical:
                handle.write("CRITICAL!!! -->")
            handle.write(message + "\n")
    except OSError:
        return


@contextmanager
def raw_mode(fd: int = 0) -> Iterator[None]:
    """Put the terminal on ``fd`` in raw mode, restoring it afterwards.

    A descriptor that is not a terminal is left untouched.
    """
    if not os.isatty(fd):
        yield
        return
    saved = termios.tcgetattr(fd)
    raw = termios.tcgetattr(fd)
    raw[0] &= ~(termios.ICRNL | termios.IXON)
    raw[1] &= ~termios.OPOST
    raw[3] &= ~(termios.ECHO | termios.ICANON | termios.IEXTEN | termios.ISIG)
    raw[6][termios.VMIN] = 1
    raw[6][termios.VTIME] = 0
    termios.tcsetattr(fd, termios.TCSAFLUSH, raw)
    try:
        yield
    finally:
        termios.tcsetattr(fd, termios.TCSAFLUSH, saved)


def decode_key(data: bytes | str) -> Key | str | None:
    """Classify one chunk of terminal input.

    Returns a :class:`Key` for a known control sequence, the text itself when
    it begins with a printable character or a carriage return, and ``None``
    for anything else.
    """
    text = data.decode("latin-1") if isinstance(data, bytes) else data
    if not text:
        return None
    key = _SEQUENCES.get(text)
    if key is not None:
        return key
    if _printable(text[0]) or text[0] == "\r":
        return text
    return None


class LineReader:
    """Reads one logical command line with editing, history and completion."""

    def __init__(
        self,
        input_fd: int = 0,
        output: TextIO | None = None,
        history_path: str | Path | None = None,
        log_path: str | Path | None = None,
        completion_dir: str | Path | None = None,
    ) -> None:
        self.input_fd = input_fd
        self.output = output
        self.history_path = Path(DEFAULT_HISTORY_PATH if history_path is None else history_path)
        self.log_path = log_path
        self.completion_dir = completion_dir
        self.buffer = LineBuffer(PROMPT)
        self.history = History()
        self.flags = QuoteFlags.NONE
        self.line: str | None = None
        self.done = False
        self._begin()

    def _begin(self) -> None:
        if not self.history_path.exists():
            log_message(self.log_path, "Cannot initiate history, file not found.", False)
        self.history = History.load(self.history_path)
        self.buffer = LineBuffer(PROMPT, clipboard=self.buffer.clipboard)
        self.flags = QuoteFlags.NONE
        self.line = None
        self.done = False

    def _write(self, text: str) -> None:
        stream = sys.stdout if self.output is None else self.output
        stream.write(text)
        stream.flush()

    def _redraw(self) -> None:
        column = self.buffer.cursor.col
        move = f"\x1b[{column}C" if column else ""
        self._write(
            "\r" + self.buffer.prompt + self.buffer.text + _CLEAR_TO_END + "\r" + move
        )

    def _new_line(self, prompt: str) -> None:
        self.buffer.add_line(prompt)
        self._write(NEWLINE + prompt)

    def _finish(self) -> None:
        result = self.buffer.assemble()
        try:
            History.append_to_file(self.history_path, result)
        except OSError:
            log_message(self.log_path, "Failed to open 'HISTORY_PATH'", True)
        if self.flags & QuoteFlags.QUOTE:
            report_error(None, "unexpected EOF while looking for matching `''.")
        elif self.flags & QuoteFlags.DQUOTE:
            report_error(None, "unexpected EOF while looking for matching `\"'.")
        elif self.flags & QuoteFlags.EXIT:
            result = "exit"
        elif self.flags & QuoteFlags.CANCEL:
            result = None
        self.line = result
        self.done = True

    def _enter(self) -> bool:
        self.flags = scan_quotes(self.buffer.lines)
        if self.flags & QuoteFlags.QUOTE:
            self._new_line(QUOTE_PROMPT)
            return False
        if self.flags & QuoteFlags.DQUOTE:
            self._new_line(DQUOTE_PROMPT)
            return False
        while self.buffer.line_down():
            self._write(_CURSOR_DOWN)
        self.buffer.move_end()
        if ends_with_backslash(self.buffer.lines[-1]):
            self._new_line(BACKSLASH_PROMPT)
            return False
        return True

    def _text(self, chunk: str) -> bool:
        self.flags = QuoteFlags.NONE
        for char in chunk:
            if char == "\r":
                if self._enter():
                    self._finish()
                    return True
            elif _printable(char):
                self.buffer.insert_char(char)
                self._redraw()
        return False

    def _complete(self) -> None:
        try:
            completed = complete_in_directory(
                self.buffer.text, self.buffer.position, self.completion_dir
            )
        except ShellError as exc:
            report_error(exc.prefix, exc.message)
            return
        if completed is None:
            return
        text, position = completed
        self.buffer.replace_text(text)
        self.buffer.cursor.col = self.buffer.cursor.col_start + position

    def _key(self, key: Key) -> bool:
        buffer = self.buffer
        if key is Key.CANCEL:
            self.flags |= QuoteFlags.CANCEL
            self._finish()
            return True
        if key is Key.EOF:
            if not buffer.text:
                self.flags |= QuoteFlags.EXIT
                self._finish()
                return True
            buffer.delete()
        elif key is Key.UP:
            buffer.history_up(self.history)
        elif key is Key.DOWN:
            buffer.history_down(self.history)
        elif key is Key.LEFT:
            buffer.move_left()
        elif key is Key.RIGHT:
            buffer.move_right()
        elif key is Key.BACKSPACE:
            buffer.backspace()
        elif key is Key.DELETE:
            buffer.delete()
        elif key is Key.SHIFT_LEFT:
            buffer.word_left()
        elif key is Key.SHIFT_RIGHT:
            buffer.word_right()
        elif key is Key.SHIFT_UP:
            if buffer.line_up():
                self._write(_CURSOR_UP)
        elif key is Key.SHIFT_DOWN:
            if buffer.line_down():
                self._write(_CURSOR_DOWN)
        elif key is Key.HOME:
            buffer.move_home()
        elif key is Key.END:
            buffer.move_end()
        elif key is Key.CUT_WORD:
            buffer.cut_word_before()
        elif key is Key.CUT_BEFORE:
            buffer.cut_before()
        elif key is Key.CUT_AFTER:
            buffer.cut_after()
        elif key is Key.PASTE:
            buffer.paste()
        elif key is Key.TAB:
            self._complete()
        self._redraw()
        return False

    def feed(self, data: bytes | str) -> bool:
        """Process one chunk of input; return whether the line is complete.

        Once complete, the result is in :attr:`line`.
        """
        if self.done:
            return True
        decoded = decode_key(data)
        if decoded is None:
            return False
        if isinstance(decoded, str):
            return self._text(decoded)
        return self._key(decoded)

    def read_line(self) -> str | None:
        """Read a line from the terminal; ``None`` when it was cancelled."""
        if os.environ.get("TERM") is None:
            raise ShellError("init", "Env 'TERM' not defined.")
        self._begin()
        with raw_mode(self.input_fd):
            self._write(_KEYPAD_ON + PROMPT)
            while not self.done:
                data = os.read(self.input_fd, READ_SIZE)
                if not data:
                    self._finish()
                    break
                self.feed(data)
            self._write(_KEYPAD_OFF)
        return self.line


__all__ = ["Key", "LineReader", "decode_key", "log_message", "raw_mode", "SHELL_NAME"]