"""Command history kept in a file, one command per line."""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path

DEFAULT_HISTORY_PATH = Path.home() / ".21sh_history"


class History:
    """Stored commands plus a scratch slot for the line being edited.

    Browsing starts at the scratch slot.  Going older walks from the newest
    stored command to the oldest; going newer walks back to the scratch slot.
    """

    def __init__(self, lines: Iterable[str] = ()) -> None:
        self._entries: list[str] = [""] + list(reversed(list(lines)))
        self._position = 0

    @classmethod
    def load(cls, path: str | Path | None = None) -> History:
        """Read the history file; a missing or unreadable file gives an empty history."""
        source = Path(DEFAULT_HISTORY_PATH if path is None else path)
        try:
            text = source.read_text(encoding="utf-8", errors="surrogateescape")
        except OSError:
            return cls()
        lines = text.split("\n")
        if lines and lines[-1] == "":
            lines.pop()
        return cls(lines)

    @staticmethod
    def append_to_file(path: str | Path | None, line: str | None) -> None:
        """Append ``line`` and a newline to the history file; ``None`` is ignored."""
        if line is None:
            return
        target = Path(DEFAULT_HISTORY_PATH if path is None else path)
        with target.open("a", encoding="utf-8", errors="surrogateescape") as handle:
            handle.write(line + "\n")

    @property
    def lines(self) -> tuple[str, ...]:
        """Stored commands, oldest first."""
        return tuple(reversed(self._entries[1:]))

    def __len__(self) -> int:
        return len(self._entries) - 1

    def older(self, current: str) -> str | None:
        """Step to an older command and return it, or ``None`` at the oldest.

        Leaving the scratch slot saves ``current`` in it.
        """
        if self._position + 1 >= len(self._entries):
            return None
        if self._position == 0:
            self._entries[0] = current
        self._position += 1
        return self._entries[self._position]

    def newer(self) -> str | None:
        """Step to a newer command and return it, or ``None`` at the scratch slot."""
        if self._position == 0:
            return None
        self._position -= 1
        return self._entries[self._position]