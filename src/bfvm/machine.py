from __future__ import annotations

import logging
import sys
import time
from typing import BinaryIO, Optional

import numpy as np
from numba import njit

from .compiler import Program, compile_source
from .errors import InputUnderflowError, MachineError, OutputError, TapeError
from .lexer import Token

logger = logging.getLogger(__name__)

DEFAULT_TAPE_SIZE = 30_000

# Opcodes as plain ints so numba freezes them as constants.
_SHIFT_LEFT = int(Token.SHIFT_LEFT)
_SHIFT_RIGHT = int(Token.SHIFT_RIGHT)
_INCREMENT = int(Token.INCREMENT)
_DECREMENT = int(Token.DECREMENT)
_LOOP_START = int(Token.LOOP_START)
_LOOP_END = int(Token.LOOP_END)


@njit(cache=True)
def _execute_until_yield(ops, args, tape, pc, dp):
    """
    Run compiled instructions until the program ends or an instruction needs
    the host: any output/input, or a shift that would leave the tape.

    Returns (pc, dp, steps). ``pc == len(ops)`` means the program finished;
    otherwise ``ops[pc]`` has not been executed yet.
    """
    n_ops = len(ops)
    size = len(tape)
    steps = 0

    while pc < n_ops:
        op = ops[pc]
        arg = args[pc]

        if op == _SHIFT_RIGHT:
            if dp + arg >= size:
                return pc, dp, steps
            dp += arg
        elif op == _SHIFT_LEFT:
            if dp - arg < 0:
                return pc, dp, steps
            dp -= arg
        elif op == _INCREMENT:
            tape[dp] = (tape[dp] + arg) & 255
        elif op == _DECREMENT:
            tape[dp] = (tape[dp] - arg) & 255
        elif op == _LOOP_START:
            if tape[dp] == 0:
                pc = arg
        elif op == _LOOP_END:
            if tape[dp] != 0:
                pc = arg
        else:  # output / input
            return pc, dp, steps

        pc += 1
        steps += 1

    return pc, dp, steps


class Machine:
    """
    Tape machine executing a compiled program.

    State is the program, a fixed-size byte tape, the program counter ``pc``
    and the data pointer ``dp``. The machine halts when ``pc`` reaches the
    number of instructions.

    The data pointer is bounds-checked on every shift: moving it outside
    ``[0, tape_size)`` raises TapeError.
    """

    def __init__(
        self,
        tape_size: int = DEFAULT_TAPE_SIZE,
        *,
        stdin: Optional[BinaryIO] = None,
        stdout: Optional[BinaryIO] = None,
        jit: bool = True,
    ):
        if tape_size < 1:
            raise ValueError(f"tape_size must be positive, got {tape_size}")
        self.tape = np.zeros(tape_size, dtype=np.uint8)
        self.program: Program = ()
        self.pc = 0
        self.dp = 0
        self.steps = 0
        self.jit = jit
        self.stdin = stdin if stdin is not None else sys.stdin.buffer
        self.stdout = stdout if stdout is not None else sys.stdout.buffer

        # Arrays for numba
        self._ops = np.zeros(0, dtype=np.int64)
        self._args = np.zeros(0, dtype=np.int64)

    @property
    def tape_size(self) -> int:
        return len(self.tape)

    @property
    def halted(self) -> bool:
        return self.pc >= len(self.program)

    def reset(self) -> None:
        self.tape.fill(0)
        self.pc = 0
        self.dp = 0
        self.steps = 0

    def load(self, source: str) -> None:
        self.program = compile_source(source)
        self._ops = np.array([ins.kind for ins in self.program], dtype=np.int64)
        self._args = np.array([ins.arg for ins in self.program], dtype=np.int64)
        self.reset()

    # ===== Execution =====

    def run(self) -> None:
        start = time.perf_counter()
        logger.debug("run: %d instructions, tape %d, jit=%s", len(self.program), self.tape_size, self.jit)
        try:
            if self.jit:
                self._run_jit()
            else:
                while not self.halted:
                    self.step()
        finally:
            self._flush()
        logger.debug("run finished: %d steps in %.2f ms", self.steps, (time.perf_counter() - start) * 1000)

    def _run_jit(self) -> None:
        n = len(self.program)
        while self.pc < n:
            pc, dp, steps = _execute_until_yield(self._ops, self._args, self.tape, self.pc, self.dp)
            self.pc = int(pc)
            self.dp = int(dp)
            self.steps += int(steps)
            if self.pc < n:
                self.step()

    def step(self) -> bool:
        """
        Execute the instruction at ``pc`` and advance.

        Returns:
            True while there are instructions left to run.
        """
        if self.halted:
            return False

        ins = self.program[self.pc]
        kind, n = ins.kind, ins.arg

        if kind == Token.SHIFT_RIGHT:
            self._move(self.dp + n)
        elif kind == Token.SHIFT_LEFT:
            self._move(self.dp - n)
        elif kind == Token.INCREMENT:
            self.tape[self.dp] = (int(self.tape[self.dp]) + n) & 0xFF
        elif kind == Token.DECREMENT:
            self.tape[self.dp] = (int(self.tape[self.dp]) - n) & 0xFF
        elif kind == Token.OUTPUT:
            self._write(bytes((int(self.tape[self.dp]),)) * n)
        elif kind == Token.INPUT:
            self._read_into_tape(n)
        elif kind == Token.LOOP_START:
            if self.tape[self.dp] == 0:
                self.pc = n
        elif kind == Token.LOOP_END:
            if self.tape[self.dp] != 0:
                self.pc = n

        self.pc += 1
        self.steps += 1
        return not self.halted

    # ===== Helpers =====

    def _move(self, dp: int) -> None:
        if not 0 <= dp < self.tape_size:
            raise TapeError(
                message=f"data pointer moved to {dp}, outside tape of {self.tape_size} cells (pc {self.pc})",
                pc=self.pc,
                pointer=dp,
            )
        self.dp = dp

    def _write(self, data: bytes) -> None:
        try:
            self.stdout.write(data)
        except OSError as e:
            raise OutputError(message=f"unable to write to output: {e}", pc=self.pc) from e

    def _flush(self) -> None:
        try:
            self.stdout.flush()
        except OSError as e:
            raise OutputError(message=f"unable to flush output: {e}", pc=self.pc) from e

    def _read_into_tape(self, n: int) -> None:
        if self.dp + n > self.tape_size:
            raise TapeError(
                message=f"input of {n} bytes at cell {self.dp} overruns tape of {self.tape_size} cells (pc {self.pc})",
                pc=self.pc,
                pointer=self.dp + n - 1,
            )
        # Prompts written so far must be visible before blocking on input.
        self._flush()

        buf = bytearray()
        try:
            while len(buf) < n:
                chunk = self.stdin.read(n - len(buf))
                if not chunk:
                    break
                buf += chunk
        except OSError as e:
            raise MachineError(message=f"unable to read from input: {e}", pc=self.pc) from e

        if len(buf) < n:
            raise InputUnderflowError(
                message=f"end of input after {len(buf)} of {n} bytes (pc {self.pc})",
                pc=self.pc,
                wanted=n,
                got=len(buf),
            )
        self.tape[self.dp:self.dp + n] = np.frombuffer(bytes(buf), dtype=np.uint8)
