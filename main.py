"""Command-line entry point for autotask."""
from __future__ import annotations

import argparse
import sys
from pathlib import Path

from autotask.flow import FlowError, FlowExecutor, RunConfig
from autotask.loader import ParseError
from autotask.utils import setup_logging


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run idempotent tasks from a YAML file")
    parser.add_argument("-f", "--file", type=Path, required=True, help="Path to the tasks file")
    parser.add_argument("-d", "--dry-run", action="store_true", help="Report what would run without changing anything")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    parser.add_argument("--lenient", action="store_true", help="Skip tasks with unknown actions instead of failing")
    parser.add_argument("--check-exit-code", action="store_true", help="Treat non-zero shell exit codes as task failures")
    parser.add_argument("--from", dest="start_from", default=None, help="Resume from a specific task name")
    parser.add_argument("--log-file", type=Path, default=None, help="Also write the log to this file")
    return parser.parse_args(argv)


def build_config(args: argparse.Namespace) -> RunConfig:
    return RunConfig(
        dry_run=args.dry_run,
        strict=not args.lenient,
        check_exit_code=args.check_exit_code,
        start_from=args.start_from,
    )


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    try:
        logger = setup_logging(args.log_file, verbose=args.verbose)
    except OSError as exc:
        print(f"Cannot open log file {args.log_file}: {exc}", file=sys.stderr)
        return 1
    executor = FlowExecutor(build_config(args), logger=logger.getChild("flow"))

    try:
        executor.run_file(args.file)
    except (OSError, ParseError, FlowError) as exc:
        logger.error("Cannot run %s: %s", args.file, exc)
        return 1
    # Per-task failures are in the log; they do not change the exit status.
    return 0


if __name__ == "__main__":
    sys.exit(main())
