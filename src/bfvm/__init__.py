from .lexer import Token, TokenStream, strip, tokenize
from .compiler import Instruction, Program, compile_source, compile_tokens, decompile, disassemble
from .machine import DEFAULT_TAPE_SIZE, Machine
from .errors import (
    BFVMError,
    CompileError,
    InputUnderflowError,
    MachineError,
    OutputError,
    TapeError,
    UnmatchedBracketError,
)
from .api import MachineOptions, RunResult, run_file, run_string

__all__ = [
    'Token',
    'TokenStream',
    'tokenize',
    'strip',
    'Instruction',
    'Program',
    'compile_tokens',
    'compile_source',
    'decompile',
    'disassemble',
    'Machine',
    'DEFAULT_TAPE_SIZE',
    'BFVMError',
    'CompileError',
    'UnmatchedBracketError',
    'MachineError',
    'TapeError',
    'InputUnderflowError',
    'OutputError',
    'MachineOptions',
    'RunResult',
    'run_string',
    'run_file',
]
