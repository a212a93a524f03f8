"""Shell status codes, error reporting and small path helpers."""

from __future__ import annotations

import sys
from enum import IntEnum
from typing import TextIO

SHELL_NAME = "21sh"


class Status(IntEnum):
    """Result codes shared by the shell's components."""

    DONE = 0
    ERR = 1
    NOTHING_DONE = 2
    MATCH = 3
    NO_MATCH = 4
    EXIT = 5


def format_error(prefix: str | None, message: str) -> str:
    """Build a diagnostic line of the form ``21sh: prefix: message``."""
    if prefix:
        return f"{SHELL_NAME}: {prefix}: {message}"
    return f"{SHELL_NAME}: {message}"


class ShellError(Exception):
    """An error the shell reports to the user, carrying its status code."""

    def __init__(self, prefix: str | None, message: str, code: int = Status.ERR) -> None:
        super().__init__(format_error(prefix, message))
        self.prefix = prefix
        self.message = message
        self.code = code


def report_error(
    prefix: str | None,
    message: str,
    code: int = Status.ERR,
    stream: TextIO | None = None,
) -> int:
    """Write a diagnostic line to ``stream`` (standard error by default) and return ``code``."""
    target = sys.stderr if stream is None else stream
    target.write(format_error(prefix, message) + "\n")
    target.flush()
    return code


def path_join(path: str, name: str) -> str:
    """Concatenate a directory, a slash and a name."""
    return f"{path}/{name}"