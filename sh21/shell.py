"""The shell's main loop: read a line, parse it and run it."""

from __future__ import annotations

import os
import signal
import sys
from collections.abc import Callable, MutableMapping, Sequence
from typing import TextIO

from .errors import ShellError, Status, report_error
from .execute import execute
from .parser import ParseError, parse
from .readline import LineReader
from .tokens import tokenize


def setup_signals() -> None:
    """Ignore the interrupt, quit and terminal-stop signals."""
    for signum in (signal.SIGINT, signal.SIGQUIT, signal.SIGTSTP):
        signal.signal(signum, signal.SIG_IGN)


def run_line(line: str, env: MutableMapping[str, str] | None = None) -> int:
    """Tokenize, parse and run one line; return the resulting status."""
    target = os.environ if env is None else env
    try:
        commands = parse(tokenize(line))
    except ParseError as exc:
        return report_error(exc.prefix, exc.message, Status.ERR)
    if not commands:
        return Status.DONE
    return execute(commands, target)


def run(
    read_line: Callable[[], str | None],
    env: MutableMapping[str, str] | None = None,
) -> int:
    """Run lines from ``read_line`` until ``exit`` or ``EOFError``."""
    target = os.environ if env is None else env
    while True:
        try:
            line = read_line()
        except EOFError:
            break
        sys.stdout.write("\n")
        sys.stdout.flush()
        if line is None:
            continue
        if run_line(line, target) == Status.EXIT:
            sys.stdout.write("exit\n")
            sys.stdout.flush()
            break
    return 0


def _stream_reader(stream: TextIO) -> Callable[[], str]:
    def read() -> str:
        line = stream.readline()
        if not line:
            raise EOFError
        return line.rstrip("\n")

    return read


def main(argv: Sequence[str] | None = None) -> int:
    """Start the interactive shell."""
    setup_signals()
    if sys.stdin.isatty():
        read_line = LineReader(input_fd=sys.stdin.fileno()).read_line
    else:
        read_line = _stream_reader(sys.stdin)
    try:
        return run(read_line, os.environ)
    except ShellError as exc:
        return report_error(exc.prefix, exc.message, Status.ERR)


if __name__ == "__main__":
    sys.exit(main())