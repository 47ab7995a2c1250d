"""
Reading and generating queue trace files.

A trace is one command per line (``new``, ``ih <s>``, ``it <s>``,
``rh [<s>]``, ``size``, ``reverse``, ``sort``, ``free``). Blank lines and
lines starting with ``#`` are skipped.
"""

from __future__ import annotations

import itertools
import logging
import string
from pathlib import Path
from typing import Iterable, Iterator, Union

from models import TraceCommand, TraceOp

logger = logging.getLogger(__name__)

_NEEDS_ARG = {TraceOp.INSERT_HEAD, TraceOp.INSERT_TAIL}
_TAKES_ARG = _NEEDS_ARG | {TraceOp.REMOVE_HEAD}
_OPS = {op.value: op for op in TraceOp}


class TraceSyntaxError(ValueError):
    def __init__(self, line_no: int, message: str) -> None:
        super().__init__(f"line {line_no}: {message}")
        self.line_no = line_no


def parse_line(line: str, line_no: int = 0) -> TraceCommand | None:
    """Parse one trace line; None for blank and comment lines."""
    text = line.strip()
    if not text or text.startswith("#"):
        return None

    parts = text.split()
    op = _OPS.get(parts[0])
    if op is None:
        raise TraceSyntaxError(line_no, f"unknown command {parts[0]!r}")

    args = parts[1:]
    if op in _NEEDS_ARG and not args:
        raise TraceSyntaxError(line_no, f"{op.value} needs a value")
    if len(args) > (1 if op in _TAKES_ARG else 0):
        raise TraceSyntaxError(line_no, f"too many arguments for {op.value}")

    return TraceCommand(op=op, arg=args[0] if args else None, line_no=line_no)


def parse_trace(lines: Iterable[str]) -> Iterator[TraceCommand]:
    for line_no, line in enumerate(lines, start=1):
        command = parse_line(line, line_no)
        if command is not None:
            yield command


def read_trace(path: Union[str, Path]) -> list[TraceCommand]:
    with open(path, encoding="utf-8") as fh:
        return list(parse_trace(fh))


def descending_strings(length: int) -> Iterator[str]:
    """Every ``length``-letter lowercase string, from 'zz..z' down to 'aa..a'."""
    if length < 1:
        raise ValueError("length must be >= 1")
    letters = string.ascii_lowercase[::-1]
    for combo in itertools.product(letters, repeat=length):
        yield "".join(combo)


def generate_trace(length: int) -> Iterator[str]:
    yield "new"
    for value in descending_strings(length):
        yield f"ih {value}"
    yield "sort"
    yield "free"


def write_trace(path: Union[str, Path], length: int) -> int:
    """Write a generated trace to ``path``; returns the number of lines."""
    count = 0
    Path(path).parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as fh:
        for line in generate_trace(length):
            fh.write(line + "\n")
            count += 1
    logger.info("Wrote %d trace lines (length=%d) to %s", count, length, path)
    return count
