"""Command line entry point: benchmark an engine and diff against a snapshot."""

from __future__ import annotations

import argparse
import sys
import textwrap
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Sequence

from .bench import BenchRun, run_diff, run_suite
from .driver import EngineDriver
from .errors import FatalError
from .metrics import metric_by_name
from .report import PositionFailure
from .snapshot import DEFAULT_SNAPSHOT, default_positions, load_snapshot, load_suite, save_snapshot
from .table import FieldSelection, Table, build_diff_columns, build_result_columns
from .utils import ReportingLevel, error_text, info_text

DEFAULT_DEPTH = 10

EPILOG = """\
If the snapshot file exists, every position stored in it is searched again
and compared against the stored numbers (diff mode). Use the --depth the
snapshot was saved with; positions searched to another depth are reported
as failed. Otherwise the suite file, or the built-in suite, is searched
(suite mode). Pass --save to write the fresh results to the output file.

Colors: green is an improvement, red a regression. Fewer nodes, less time
and a lower branching factor are better; higher speed and score are better.
A changed best move is always shown in red.
"""


class SmartFormatter(
    argparse.ArgumentDefaultsHelpFormatter, argparse.RawDescriptionHelpFormatter
):
    """Formatter that shows defaults while preserving custom epilog layout."""


@dataclass(frozen=True)
class BenchConfig:
    command: List[str]
    depth: int
    snapshot: Path
    output: Path
    suite: Optional[Path]
    save: bool
    read_timeout: Optional[float]
    strict_fields: bool
    fields: FieldSelection
    color: bool
    reporting: ReportingLevel

    @classmethod
    def from_args(cls, args: argparse.Namespace) -> "BenchConfig":
        if args.verbose:
            reporting = ReportingLevel.VERBOSE
        elif args.quiet:
            reporting = ReportingLevel.QUIET
        else:
            reporting = ReportingLevel.BASIC
        return cls(
            command=[str(args.engine), *(args.engine_arg or [])],
            depth=args.depth,
            snapshot=Path(args.snapshot),
            output=Path(args.output),
            suite=Path(args.fens) if args.fens else None,
            save=args.save,
            read_timeout=args.timeout,
            strict_fields=not args.lenient,
            fields=FieldSelection.from_flags(
                all_fields=args.all,
                nodes=args.nodes,
                time=args.time,
                nps=args.nps,
                branching=args.branching,
                score=args.score,
                best_move=args.best_move,
            ),
            color=not args.no_color and sys.stdout.isatty(),
            reporting=reporting,
        )


def positive_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"'{value}' is not an integer") from exc
    if number <= 0:
        raise argparse.ArgumentTypeError(f"expected a positive integer, got {number}")
    return number


def positive_float(value: str) -> float:
    try:
        number = float(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"'{value}' is not a number") from exc
    if number <= 0:
        raise argparse.ArgumentTypeError(f"expected a positive number, got {number}")
    return number


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="enginebench",
        description="Benchmark a UCI engine at fixed depth and diff it against a saved snapshot.",
        formatter_class=SmartFormatter,
        epilog=textwrap.dedent(EPILOG),
    )
    parser.add_argument("-e", "--engine", required=True, help="Path to the engine binary.")
    parser.add_argument(
        "--engine-arg",
        action="append",
        default=None,
        help="Extra argument passed to the engine (repeatable).",
    )
    parser.add_argument(
        "-d", "--depth", type=positive_int, default=DEFAULT_DEPTH, help="Depth to search each position to."
    )
    parser.add_argument(
        "-s", "--snapshot", default=str(DEFAULT_SNAPSHOT), help="Existing snapshot to compare against."
    )
    parser.add_argument(
        "-o", "--output", default=str(DEFAULT_SNAPSHOT), help="File to write the snapshot to."
    )
    parser.add_argument(
        "-f",
        "--fens",
        default=None,
        help="Suite file with one FEN per line (comments starting with '#').",
    )
    parser.add_argument(
        "-S", "--save", action="store_true", help="Write the fresh results to the output file."
    )
    parser.add_argument(
        "--timeout",
        type=positive_float,
        default=None,
        help="Seconds to wait for each engine line before killing the engine.",
    )
    parser.add_argument(
        "--lenient",
        action="store_true",
        help="Treat fields the engine never reported as 0 instead of failing the position.",
    )

    output_group = parser.add_argument_group("Output")
    output_group.add_argument("--no-color", action="store_true", help="Disable ANSI colors.")
    verbosity = output_group.add_mutually_exclusive_group()
    verbosity.add_argument(
        "-v", "--verbose", action="store_true", help="Echo every line exchanged with the engine."
    )
    verbosity.add_argument("-q", "--quiet", action="store_true", help="Suppress warnings.")

    fields_group = parser.add_argument_group(
        "Fields", "Columns to print. Without any of these flags every column is shown."
    )
    fields_group.add_argument("-a", "--all", action="store_true", help="Show every column.")
    fields_group.add_argument("-n", "--nodes", action="store_true", help="Node count.")
    fields_group.add_argument("-t", "--time", action="store_true", help="Search time.")
    fields_group.add_argument("-k", "--nps", action="store_true", help="Speed in knps.")
    fields_group.add_argument("-b", "--branching", action="store_true", help="Branching factor.")
    fields_group.add_argument("-c", "--score", action="store_true", help="Score.")
    fields_group.add_argument("-m", "--best-move", action="store_true", help="Best move.")
    return parser


def _print_failures(failures: Sequence[PositionFailure]) -> None:
    if not failures:
        return
    print(error_text(f"{len(failures)} position(s) failed:"))
    for failure in failures:
        print(f"  {failure.position}: {failure.kind}: {failure.message}")


def _print_improvements(run: BenchRun, config: BenchConfig) -> None:
    report = run.report()
    for name in config.fields.field_names():
        if name == "best_move":
            continue
        improvements, count = report.improved(name)
        label = metric_by_name(name).label
        print(info_text(f"{label}: {improvements}/{count} positions improved"))


def run_bench(config: BenchConfig) -> BenchRun:
    verbose = config.reporting >= ReportingLevel.VERBOSE
    driver = EngineDriver(
        config.command,
        read_timeout=config.read_timeout,
        strict_fields=config.strict_fields,
        logger=print if verbose else None,
        warn=print if config.reporting >= ReportingLevel.BASIC else (lambda message: None),
    )

    diff_mode = config.snapshot.exists()
    if diff_mode:
        baseline = load_snapshot(config.snapshot)
        table = Table(build_diff_columns(config.fields), color=config.color)
    else:
        positions = load_suite(config.suite) if config.suite else default_positions()
        table = Table(build_result_columns(config.fields), color=config.color)

    if config.reporting >= ReportingLevel.BASIC:
        mode = f"diff against {config.snapshot}" if diff_mode else "suite"
        print(info_text(f"Engine: {' '.join(config.command)} | depth {config.depth} | {mode}"))

    with driver:
        print(table.header())
        if diff_mode:
            run = run_diff(
                driver, baseline, config.depth, on_diff=lambda item: print(table.diff_row(item))
            )
        else:
            run = run_suite(
                driver, positions, config.depth, on_result=lambda result: print(table.result_row(result))
            )

    print(table.separator())
    if diff_mode:
        for line in table.report_rows(run.report()):
            print(line)
    else:
        print(table.summary_row(run.summary()))
    print(table.footer())

    if diff_mode:
        _print_improvements(run, config)
    _print_failures(run.failures)

    if config.save:
        save_snapshot(config.output, run.results)
        if config.reporting >= ReportingLevel.BASIC:
            print(info_text(f"Saved {len(run.results)} results to {config.output}"))
    return run


def main(argv: Optional[Sequence[str]] = None) -> None:
    parser = build_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)
    config = BenchConfig.from_args(args)
    try:
        run = run_bench(config)
    except FatalError as exc:
        raise SystemExit(error_text(str(exc))) from exc
    if run.aborted:
        raise SystemExit(error_text("Run aborted: the engine stopped responding"))


if __name__ == "__main__":
    main()
