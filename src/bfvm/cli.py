from __future__ import annotations

import argparse
import logging
import sys
import time
from pathlib import Path
from typing import List, Optional

from .compiler import disassemble
from .errors import BFVMError
from .machine import Machine

logger = logging.getLogger("bfvm")

CLI_TAPE_SIZE = 100_000


def _setup_logging(verbose: bool) -> None:
    # Rebind to the current stderr on every call.
    for h in list(logger.handlers):
        logger.removeHandler(h)
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter("%(levelname)5s %(name)s: %(message)s"))
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG if verbose else logging.WARNING)


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        prog="bfvm",
        description="Run a tape-language program with run-length compressed instructions.",
    )
    parser.add_argument("file", help="source file to run")
    parser.add_argument("--tape-size", type=int, default=CLI_TAPE_SIZE, help="tape cells (default 100000)")
    parser.add_argument("--no-jit", action="store_true", help="run every instruction in the Python interpreter")
    parser.add_argument("--dump", action="store_true", help="print the compiled program instead of running it")
    parser.add_argument("-v", "--verbose", action="store_true", help="debug logging on stderr")
    args = parser.parse_args(argv)

    _setup_logging(args.verbose)

    try:
        code = Path(args.file).read_text(encoding="utf-8")
    except FileNotFoundError:
        print("Couldn't find file", file=sys.stderr)
        return 1
    except OSError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1

    try:
        vm = Machine(args.tape_size, jit=not args.no_jit)
        start = time.perf_counter()
        vm.load(code)
        logger.debug("compilation took %.2f ms", (time.perf_counter() - start) * 1000)

        if args.dump:
            print(disassemble(vm.program))
            return 0

        vm.run()
    except (BFVMError, ValueError) as e:
        print(f"error: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
