"""Run a position suite, or re-run a snapshot, through one engine."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, List, Optional, Sequence

from .diff import ResultDiff, diff
from .driver import EngineDriver
from .errors import EngineTimeout, PositionError
from .position import Position
from .report import PositionFailure, Report, ResultSummary, aggregate, summarize
from .result import SearchResult


@dataclass
class BenchRun:
    results: List[SearchResult] = field(default_factory=list)
    diffs: List[ResultDiff] = field(default_factory=list)
    failures: List[PositionFailure] = field(default_factory=list)
    aborted: bool = False

    def summary(self) -> ResultSummary:
        return summarize(self.results)

    def report(self) -> Report:
        return aggregate(self.diffs, self.failures)


ResultCallback = Callable[[SearchResult], None]
DiffCallback = Callable[[ResultDiff], None]
FailureCallback = Callable[[PositionFailure], None]


def _search(
    driver: EngineDriver,
    position: Position,
    depth: int,
    run: BenchRun,
    on_failure: Optional[FailureCallback],
) -> Optional[SearchResult]:
    try:
        return driver.search(position, depth)
    except PositionError as exc:
        failure = PositionFailure(str(position), exc)
    except EngineTimeout as exc:
        # The engine was killed; nothing after this position can run.
        failure = PositionFailure(str(position), exc)
        run.aborted = True
    run.failures.append(failure)
    if on_failure:
        on_failure(failure)
    return None


def run_suite(
    driver: EngineDriver,
    positions: Sequence[Position],
    depth: int,
    on_result: Optional[ResultCallback] = None,
    on_failure: Optional[FailureCallback] = None,
) -> BenchRun:
    run = BenchRun()
    for position in positions:
        result = _search(driver, position, depth, run, on_failure)
        if run.aborted:
            break
        if result is None:
            continue
        run.results.append(result)
        if on_result:
            on_result(result)
    return run


def run_diff(
    driver: EngineDriver,
    baseline: Sequence[SearchResult],
    depth: int,
    on_diff: Optional[DiffCallback] = None,
    on_failure: Optional[FailureCallback] = None,
) -> BenchRun:
    """Search every snapshot position again and diff it against the stored result."""
    run = BenchRun()
    for previous in baseline:
        result = _search(driver, previous.position, depth, run, on_failure)
        if run.aborted:
            break
        if result is None:
            continue
        run.results.append(result)
        try:
            item = diff(previous, result)
        except PositionError as exc:
            failure = PositionFailure(str(previous.position), exc)
            run.failures.append(failure)
            if on_failure:
                on_failure(failure)
            continue
        run.diffs.append(item)
        if on_diff:
            on_diff(item)
    return run
