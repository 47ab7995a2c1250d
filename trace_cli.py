"""Command-line entry point: run trace files or generate sort stress traces."""

from __future__ import annotations

import argparse
import logging
import sys
from typing import List, Optional

from config import get_settings
from models import SortStrategy
from trace_format import TraceSyntaxError, write_trace
from trace_runner import TraceRunner


def _run(args: argparse.Namespace) -> int:
    strategy = SortStrategy.parse(args.strategy) if args.strategy else None
    runner = TraceRunner(strategy=strategy)
    try:
        with open(args.trace, encoding="utf-8") as fh:
            report = runner.run(fh)
    except (TraceSyntaxError, OSError) as exc:
        print(f"{args.trace}: {exc}", file=sys.stderr)
        return 2

    for failure in report.failures:
        print(f"line {failure.command.line_no}: {failure.command}: {failure.message}")
    status = "OK" if report.ok else "FAILED"
    print(f"{status}: {len(report.results)} commands, {len(report.failures)} failures ({runner.strategy.value})")
    return 0 if report.ok else 1


def _generate(args: argparse.Namespace) -> int:
    count = write_trace(args.output, args.length)
    print(f"wrote {count} lines to {args.output}")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    settings = get_settings()
    parser = argparse.ArgumentParser(description="Queue trace runner and generator.")
    parser.add_argument(
        "--log-level",
        default=settings.log_level,
        help="Logging level (DEBUG, INFO, WARNING, ...).",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    run = sub.add_parser("run", help="Run a trace file against the queue.")
    run.add_argument("trace", help="Path to the trace file.")
    run.add_argument(
        "--strategy",
        choices=[s.value for s in SortStrategy],
        help=f"Sort strategy (default: {settings.sort_strategy.value}).",
    )
    run.set_defaults(func=_run)

    gen = sub.add_parser("generate", help="Write an all-permutations sort trace.")
    gen.add_argument(
        "length",
        type=int,
        nargs="?",
        default=settings.trace_length,
        help=f"String length (default: {settings.trace_length}).",
    )
    gen.add_argument("--output", default="traces/test.cmd", help="Output path.")
    gen.set_defaults(func=_generate)

    args = parser.parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
