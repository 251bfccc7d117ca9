from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO, Optional

from .machine import DEFAULT_TAPE_SIZE, Machine


@dataclass(frozen=True)
class MachineOptions:
    tape_size: int = DEFAULT_TAPE_SIZE
    jit: bool = True


@dataclass(frozen=True)
class RunResult:
    steps: int
    instructions: int
    pointer: int


def run_string(
    source: str,
    *,
    options: Optional[MachineOptions] = None,
    stdin: Optional[BinaryIO] = None,
    stdout: Optional[BinaryIO] = None,
) -> RunResult:
    opts = options or MachineOptions()
    vm = Machine(opts.tape_size, stdin=stdin, stdout=stdout, jit=opts.jit)
    vm.load(source)
    vm.run()
    return RunResult(steps=vm.steps, instructions=len(vm.program), pointer=vm.dp)


def run_file(
    path: str | Path,
    *,
    options: Optional[MachineOptions] = None,
    encoding: str = "utf-8",
    stdin: Optional[BinaryIO] = None,
    stdout: Optional[BinaryIO] = None,
) -> RunResult:
    p = Path(path)
    return run_string(p.read_text(encoding=encoding), options=options, stdin=stdin, stdout=stdout)
