from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, List, Tuple

from .errors import UnmatchedBracketError, make_compile_error
from .lexer import CHARS, Token, tokenize

logger = logging.getLogger(__name__)

JUMPS = (Token.LOOP_START, Token.LOOP_END)


# ---------------- IR ----------------
@dataclass(frozen=True)
class Instruction:
    kind: Token
    arg: int  # repeat count, or partner index for loop tokens

    def __str__(self) -> str:
        return f"{self.kind.name} {self.arg}"


Program = Tuple[Instruction, ...]


# ---------------- Run-length merge ----------------
def merge_runs(tokens: Iterable[Token]) -> List[Instruction]:
    """Collapse runs of identical tokens into one counted instruction.

    Loop tokens are never merged; each becomes its own instruction with a
    placeholder count of 1 that ``resolve_jumps`` overwrites.
    """
    toks = list(tokens)
    out: List[Instruction] = []
    i = 0
    while i < len(toks):
        t = toks[i]
        if t in JUMPS:
            out.append(Instruction(t, 1))
            i += 1
            continue
        n = 0
        while i < len(toks) and toks[i] == t:
            n += 1
            i += 1
        out.append(Instruction(t, n))
    return out


# ---------------- Jump resolution ----------------
def resolve_jumps(prog: List[Instruction]) -> None:
    """Fill in the partner index of every loop instruction, in place.

    Loop-start gets the index of its loop-end and vice versa. Raises
    UnmatchedBracketError if the brackets do not pair up.
    """
    stack: List[int] = []
    closes = 0
    for i, ins in enumerate(prog):
        if ins.kind == Token.LOOP_START:
            stack.append(i)
        elif ins.kind == Token.LOOP_END:
            if not stack:
                raise UnmatchedBracketError(message="unmatched ']'", bracket=']', ordinal=closes)
            addr = stack.pop()
            prog[i] = Instruction(Token.LOOP_END, addr)
            prog[addr] = Instruction(Token.LOOP_START, i)
            closes += 1

    if stack:
        addr = stack[-1]
        ordinal = sum(1 for ins in prog[:addr] if ins.kind == Token.LOOP_START)
        raise UnmatchedBracketError(message="unmatched '['", bracket='[', ordinal=ordinal)


def compile_tokens(tokens: Iterable[Token]) -> Program:
    prog = merge_runs(tokens)
    resolve_jumps(prog)
    return tuple(prog)


def compile_source(source: str) -> Program:
    """Tokenize and compile ``source``; bracket errors carry line/column context."""
    stream = tokenize(source)
    try:
        program = compile_tokens(stream)
    except UnmatchedBracketError as e:
        kind = Token.LOOP_START if e.bracket == '[' else Token.LOOP_END
        offsets = [off for off, tok in stream.positions() if tok == kind]
        raise make_compile_error(e, source=source, offset=offsets[e.ordinal]) from e
    logger.debug("compiled %d source chars into %d instructions", len(source), len(program))
    return program


# ---------------- Emit + listing ----------------
def decompile(program: Iterable[Instruction]) -> str:
    out: List[str] = []
    for ins in program:
        if ins.kind in JUMPS:
            out.append(CHARS[ins.kind])
        else:
            out.append(CHARS[ins.kind] * ins.arg)
    return "".join(out)


def disassemble(program: Iterable[Instruction]) -> str:
    lines = []
    for i, ins in enumerate(program):
        lines.append(f"{i:06d}  {CHARS[ins.kind]}  {ins.kind.name:<11} {ins.arg}")
    return "\n".join(lines)
