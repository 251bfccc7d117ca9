from __future__ import annotations

from dataclasses import dataclass
from typing import List, Tuple


def _build_context(lines: List[str], line_no_1: int, *, context: int = 2) -> str:
    idx = max(1, line_no_1)
    start = max(1, idx - context)
    end = min(len(lines), idx + context)

    out: List[str] = []
    for i in range(start, end + 1):
        prefix = '>' if i == idx else ' '
        out.append(f"{prefix} {i:4d} | {lines[i - 1]}")
    return "\n".join(out)


HINTS = {
    '[': 'Every "[" needs a closing "]" later in the program.',
    ']': 'This "]" has no "[" before it to close.',
}


def _line_col(source: str, offset: int) -> Tuple[int, int]:
    line = source.count('\n', 0, offset) + 1
    col = offset - (source.rfind('\n', 0, offset) + 1) + 1
    return line, col


@dataclass
class BFVMError(Exception):
    message: str

    def __str__(self) -> str:
        return self.message


@dataclass
class UnmatchedBracketError(BFVMError):
    bracket: str
    ordinal: int


@dataclass
class CompileError(BFVMError):
    line: int
    column: int
    context: str


@dataclass
class MachineError(BFVMError):
    pc: int


@dataclass
class TapeError(MachineError):
    pointer: int


@dataclass
class InputUnderflowError(MachineError):
    wanted: int
    got: int


@dataclass
class OutputError(MachineError):
    pass


def make_compile_error(err: UnmatchedBracketError, *, source: str, offset: int) -> CompileError:
    """Render the bracket at ``offset`` in ``source`` with surrounding lines."""
    line, col = _line_col(source, offset)
    ctx = _build_context(source.split('\n'), line)
    hint_block = f"\nHint: {HINTS[err.bracket]}"
    return CompileError(
        message=f"CompileError: {err.message} (line {line}, column {col})\n{ctx}{hint_block}",
        line=line,
        column=col,
        context=ctx,
    )
