from __future__ import annotations

import enum
from typing import Dict, Iterator, Tuple


class Token(enum.IntEnum):
    SHIFT_LEFT = 0
    SHIFT_RIGHT = 1
    INCREMENT = 2
    DECREMENT = 3
    OUTPUT = 4
    INPUT = 5
    LOOP_START = 6
    LOOP_END = 7


SYMBOLS: Dict[str, Token] = {
    '<': Token.SHIFT_LEFT,
    '>': Token.SHIFT_RIGHT,
    '+': Token.INCREMENT,
    '-': Token.DECREMENT,
    '.': Token.OUTPUT,
    ',': Token.INPUT,
    '[': Token.LOOP_START,
    ']': Token.LOOP_END,
}

CHARS: Dict[Token, str] = {tok: ch for ch, tok in SYMBOLS.items()}


class TokenStream:
    """
    Lazy view of the tokens in a source string.

    Every iteration rescans the source from the start, so the stream can be
    consumed any number of times. Unrecognized characters are skipped.
    """

    def __init__(self, source: str):
        self.source = source

    def __iter__(self) -> Iterator[Token]:
        return (SYMBOLS[ch] for ch in self.source if ch in SYMBOLS)

    def positions(self) -> Iterator[Tuple[int, Token]]:
        for offset, ch in enumerate(self.source):
            tok = SYMBOLS.get(ch)
            if tok is not None:
                yield offset, tok

    def __repr__(self) -> str:
        return f"TokenStream({self.source!r})"


def tokenize(source: str) -> TokenStream:
    return TokenStream(source)


def strip(source: str) -> str:
    """Drop every character that is not one of the eight symbols."""
    return ''.join(ch for ch in source if ch in SYMBOLS)
