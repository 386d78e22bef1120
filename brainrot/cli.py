"""brainrot CLI — run a JSON-serialized AST."""

from __future__ import annotations

import sys

from .errors import LOOKAHEAD_OFFSET, LoadError
from .primitives import StreamPrimitives
from .runtime import execute
from .serialize import loads


USAGE: str = """\
brainrot [OPTIONS] FILE

Run a brainrot program given as a JSON AST.

Options:
  --max-vars N       Limit the symbol table to N variables
  --line-offset N    Lines subtracted from diagnostic line numbers (default 2)
  --no-sleep         Make chill() return immediately
  --help             Show this help message
"""


def _no_sleep(seconds: float) -> None:
    return None


def _int_flag(args: list[str], i: int) -> int | None:
    if i + 1 >= len(args):
        return None
    try:
        return int(args[i + 1])
    except ValueError:
        return None


def main(argv: list[str] | None = None) -> int:
    args = argv if argv is not None else sys.argv[1:]
    filepath: str = ""
    max_vars: int | None = None
    line_offset = LOOKAHEAD_OFFSET
    no_sleep = False
    i = 0
    while i < len(args):
        arg = args[i]
        if arg == "--help" or arg == "-h":
            print(USAGE, end="")
            return 0
        elif arg == "--max-vars" or arg == "--line-offset":
            value = _int_flag(args, i)
            if value is None or value < 0:
                print("brainrot: " + arg + " needs a non-negative integer", file=sys.stderr)
                return 2
            if arg == "--max-vars":
                max_vars = value
            else:
                line_offset = value
            i += 2
        elif arg == "--no-sleep":
            no_sleep = True
            i += 1
        elif arg.startswith("-"):
            print("brainrot: unknown flag '" + arg + "'", file=sys.stderr)
            return 2
        elif filepath == "":
            filepath = arg
            i += 1
        else:
            print("brainrot: unexpected argument '" + arg + "'", file=sys.stderr)
            return 2
    if filepath == "":
        print("brainrot: missing file argument", file=sys.stderr)
        return 2

    try:
        with open(filepath, "rb") as f:
            raw = f.read()
    except FileNotFoundError:
        print("brainrot: " + filepath + ": No such file or directory", file=sys.stderr)
        return 1
    except OSError as e:
        print("brainrot: " + filepath + ": " + str(e), file=sys.stderr)
        return 1
    try:
        source = raw.decode("utf-8")
    except ValueError:
        print("brainrot: " + filepath + ": invalid utf-8", file=sys.stderr)
        return 1

    try:
        program = loads(source)
    except LoadError as e:
        print("brainrot: load error: " + str(e), file=sys.stderr)
        return 1

    if no_sleep:
        primitives = StreamPrimitives(sys.stdout.buffer, sys.stderr.buffer, sleep=_no_sleep)
    else:
        primitives = StreamPrimitives(sys.stdout.buffer, sys.stderr.buffer)
    return execute(program, primitives, max_vars=max_vars, line_offset=line_offset)


if __name__ == "__main__":
    sys.exit(main())
