"""Completing the word under the cursor from directory entries."""

from __future__ import annotations

import os
from collections.abc import Iterable
from pathlib import Path

from .errors import ShellError


def word_at(line: str | None, pos: int) -> str | None:
    """Return the space-delimited word at or just before ``pos``.

    ``None`` is returned for an empty line, or when ``pos`` sits on a space
    that does not directly follow a word.
    """
    if not line:
        return None
    pos = max(0, min(pos, len(line)))
    here = line[pos] if pos < len(line) else ""
    if here == " " and (pos == 0 or line[pos - 1] == " "):
        return None
    while pos > 0:
        pos -= 1
        if line[pos] == " ":
            pos += 1
            break
    end = line.find(" ", pos)
    if end == -1:
        end = len(line)
    return line[pos:end]


def complete(line: str | None, pos: int, names: Iterable[str]) -> tuple[str, int] | None:
    """Complete the word at ``pos`` with the first of ``names`` it begins.

    The cursor first moves to the end of the word; the rest of the matching
    name is inserted there.  Returns the new line and cursor position, or
    ``None`` when nothing matches.
    """
    word = word_at(line, pos)
    if word is None or line is None:
        return None
    for name in names:
        if name.startswith(word):
            end = max(0, min(pos, len(line)))
            while end < len(line) and line[end] != " ":
                end += 1
            suffix = name[len(word):]
            return line[:end] + suffix + line[end:], end + len(suffix)
    return None


def complete_in_directory(
    line: str | None, pos: int, directory: str | Path | None = None
) -> tuple[str, int] | None:
    """Complete from the entries of ``directory`` (``$PWD`` by default)."""
    if directory is None:
        directory = os.environ.get("PWD") or os.getcwd()
    try:
        names = os.listdir(directory)
    except OSError as exc:
        raise ShellError("cannot open directory", exc.strerror or str(exc)) from None
    return complete(line, pos, names)