"""Grouping tokens into commands, pipelines and redirections."""

from __future__ import annotations

import os
import re
from dataclasses import dataclass, field

from .errors import ShellError
from .tokens import Token, TokenType

_ATOI_PATTERN = re.compile(r"[\x00-\x20]*([-+]?)([0-9]*)")
_DIGITS = "0123456789"
CLOSE_FD = -2


class ParseError(ShellError):
    """The token stream does not form a valid command."""


@dataclass
class SimpleCommand:
    """One program invocation with its streams."""

    argv: list[str]
    open_flags: int = 0
    output: str | None = None
    out_fd: int = 1
    input: str | None = None
    in_fd: int = 0
    error: str | None = None
    err_fd: int = 2


@dataclass
class Command:
    """A pipeline of simple commands, run until a ``;``."""

    pipeline: list[SimpleCommand] = field(default_factory=list)


def atoi(text: str) -> int:
    """Read a leading decimal integer, skipping whitespace and control characters."""
    match = _ATOI_PATTERN.match(text)
    number = int(match.group(2)) if match.group(2) else 0
    return -number if match.group(1) == "-" else number


def _is_open(fd: int) -> bool:
    try:
        os.fstat(fd)
    except OSError:
        return False
    return True


def _detect_simple_command(stream: list[Token], pos: int) -> int | None:
    """Count the words starting at ``pos``; merge ``N`` with a following redirection."""
    count = 0
    while pos < len(stream) and stream[pos].type is not TokenType.OPERATOR:
        pos += 1
        count += 1
        if pos + 1 < len(stream):
            word, operator = stream[pos], stream[pos + 1]
            if (
                len(word.value) == 1
                and word.value in _DIGITS
                and operator.type is TokenType.OPERATOR
                and operator.value[:1] in ("<", ">")
            ):
                stream[pos:pos + 2] = [
                    Token(word.value + operator.value, TokenType.OPERATOR)
                ]
    if count == 0:
        if pos >= len(stream):
            return None
        raise ParseError("Parse invalid use of operator", stream[pos].value, -2)
    return count


def _redirect_to_file(
    pipeline: list[SimpleCommand], target: SimpleCommand, stream: int, append: bool
) -> None:
    last = pipeline[-1]
    last.open_flags = os.O_WRONLY | os.O_CREAT | (os.O_APPEND if append else os.O_TRUNC)
    name = target.argv[0]
    if stream == 0:
        last.input = name
    elif stream == 2:
        last.error = name
    else:
        last.output = name


def _duplicate_fd(pipeline: list[SimpleCommand], target: SimpleCommand, stream: int) -> None:
    last = pipeline[-1]
    name = target.argv[0]
    fd = CLOSE_FD if name == "-" else atoi(name)
    if fd >= 0 and not _is_open(fd):
        raise ParseError(name, "not an open descriptor.")
    if stream == 0:
        last.in_fd = fd
    elif stream == 2:
        last.err_fd = fd
    else:
        last.out_fd = fd


def _prepare_redirection(
    pipeline: list[SimpleCommand],
    current: SimpleCommand,
    pre: str | None,
    post: str | None,
) -> bool:
    """Apply redirections; return whether ``current`` joins the pipeline."""
    if pre:
        if not pipeline or not current.argv:
            raise ParseError("Parse error", pre)
        stream = -1
        if pre[0] in "012":
            stream = int(pre[0])
            pre = pre[1:]
        if pre == ">":
            _redirect_to_file(pipeline, current, stream, append=False)
            return False
        if pre == ">&":
            _duplicate_fd(pipeline, current, stream)
            return False
        if pre == ">>":
            _redirect_to_file(pipeline, current, stream, append=True)
            return False
        if pre == "<":
            pipeline[0].input = current.argv[0]
            return False
    if post == "|":
        current.output = "|"
    return True


def parse(tokens: list[Token]) -> list[Command]:
    """Group ``tokens`` into commands; an empty stream gives an empty list."""
    stream = list(tokens)
    pos = 0
    commands: list[Command] = []
    while True:
        command = Command()
        pre: str | None = None
        post: str | None = None
        count: int | None
        while (count := _detect_simple_command(stream, pos)) is not None:
            simple = SimpleCommand([token.value for token in stream[pos:pos + count]])
            pos += count
            pre = post
            if pos < len(stream):
                post = stream[pos].value
                pos += 1
            else:
                post = None
            if _prepare_redirection(command.pipeline, simple, pre, post):
                command.pipeline.append(simple)
            if post == ";":
                break
        commands.append(command)
        if not commands[0].pipeline:
            return []
        if count is None or pos >= len(stream):
            break
    return commands