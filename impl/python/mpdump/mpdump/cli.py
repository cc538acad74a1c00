"""
mpdump - print MessagePack streams as an indented text tree

Usage:
  mpdump              # reads standard input
  mpdump <file>       # reads <file>

Environment:
  MPDUMP_INDENT       spaces per nesting level (default 3)
  MPDUMP_MAX_DEPTH    deepest container nesting accepted (default 256)

Exits 0 when the stream ends cleanly between values, 1 otherwise.
"""
import os
import sys
from typing import List, Optional

from .dump import DEFAULT_MAX_DEPTH, dump_stream
from .errors import Error
from .printer import DEFAULT_INDENT


def env_int(name: str, default: int) -> int:
    raw = os.environ.get(name) or str(default)
    try:
        value = int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None
    if value < 0:
        raise ValueError(f"{name} must be >= 0, got {value}")
    return value


def main(argv: Optional[List[str]] = None) -> int:
    argv = sys.argv if argv is None else argv
    if len(argv) > 2:
        print(f"{argv[0]} [file]")
        return 1

    try:
        indent = env_int("MPDUMP_INDENT", DEFAULT_INDENT)
        max_depth = env_int("MPDUMP_MAX_DEPTH", DEFAULT_MAX_DEPTH)
    except ValueError as e:
        print(e, file=sys.stderr)
        return 1
    out = sys.stdout.buffer
    if len(argv) == 1:
        return _run(sys.stdin.buffer, out, indent, max_depth)

    path = argv[1]
    try:
        f = open(path, "rb")
    except OSError as e:
        print(f"Cannot open input file '{path}': {e.strerror or e}", file=sys.stderr)
        return 1
    with f:
        return _run(f, out, indent, max_depth)


def _run(source, out, indent, max_depth) -> int:
    try:
        dump_stream(source, out, indent, max_depth)
    except Error as e:
        sys.stdout.flush()
        print(e, file=sys.stderr)
        return 1
    except BrokenPipeError:
        _silence_stdout()
        return 1
    return 0


def _silence_stdout():
    # reader of stdout is gone; keep the interpreter's exit flush from failing again
    try:
        fd = sys.stdout.fileno()
    except (AttributeError, ValueError):
        return
    devnull = os.open(os.devnull, os.O_WRONLY)
    os.dup2(devnull, fd)
    os.close(devnull)
