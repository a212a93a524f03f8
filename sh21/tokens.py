"""Splitting a command line into word and operator tokens."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum

OPERATOR_CHARS = ";|<>"
OPERATOR_CONTINUATION = "<>&"
QUOTE_CHARS = "\\'\""
DELIMITERS = " \n"


class TokenType(IntEnum):
    """Kind of a token; DELIMIT marks a token whose kind was never set."""

    DELIMIT = 0
    OPERATOR = 1
    WORD = 2


@dataclass
class Token:
    """A piece of a command line."""

    value: str
    type: TokenType


def tokenize(line: str) -> list[Token]:
    """Split ``line`` into tokens.

    Operators are ``; | < >`` optionally followed by one of ``< > &``.
    Once a quote or backslash is met, the rest of the line is taken
    literally into the current word.  ``#`` starts a comment that runs to
    the end of the line.
    """
    line = line.split("\0", 1)[0]
    tokens = [Token("", TokenType.DELIMIT)]

    def start(kind: TokenType) -> None:
        if tokens[-1].value:
            tokens.append(Token("", kind))
        else:
            tokens[-1].type = kind

    prev = TokenType.DELIMIT
    quoted = False
    in_comment = False
    for char in line:
        if in_comment:
            if char == "\n":
                in_comment = False
            continue
        if prev is TokenType.OPERATOR and not quoted:
            prev = TokenType.DELIMIT
            if char in OPERATOR_CONTINUATION:
                tokens[-1].value += char
                continue
        if char in QUOTE_CHARS and not quoted:
            tokens[-1].value += char
            quoted = True
        elif char in OPERATOR_CHARS and not quoted:
            prev = TokenType.OPERATOR
            start(TokenType.OPERATOR)
            tokens[-1].value += char
        elif char in DELIMITERS and not quoted:
            prev = TokenType.DELIMIT
        elif prev is TokenType.WORD:
            tokens[-1].value += char
        elif char == "#":
            in_comment = True
        else:
            prev = TokenType.WORD
            start(TokenType.WORD)
            tokens[-1].value += char
    return [token for token in tokens if token.value]