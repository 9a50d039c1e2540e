"""Reduce many results or diffs into totals, means and improvement counts."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Sequence, Tuple, Type

from .diff import ResultDiff
from .errors import BenchError
from .metrics import METRICS, Metric, Number
from .result import SearchResult


@dataclass(frozen=True)
class PositionFailure:
    position: str
    error: BenchError

    @property
    def message(self) -> str:
        return str(self.error)

    @property
    def kind(self) -> str:
        return type(self.error).__name__


@dataclass(frozen=True)
class MetricTotals:
    metric: Type[Metric]
    total: Metric
    mean: Metric

    @classmethod
    def of(cls, metric: Type[Metric], values: Sequence[Number]) -> "MetricTotals":
        total = metric.zero()
        for value in values:
            total = metric.combine(total, value)
        return cls(metric=metric, total=total, mean=metric.scale_down(total, max(len(values), 1)))


@dataclass(frozen=True)
class ResultSummary:
    count: int
    metrics: Dict[str, MetricTotals]

    def __getitem__(self, name: str) -> MetricTotals:
        return self.metrics[name]


@dataclass(frozen=True)
class MetricSummary:
    metric: Type[Metric]
    first: MetricTotals
    second: MetricTotals
    mean_relative: float
    relative_count: int
    improvements: int
    regressions: int


@dataclass(frozen=True)
class Report:
    count: int
    metrics: Dict[str, MetricSummary]
    best_move_changes: int = 0
    failures: Tuple[PositionFailure, ...] = field(default_factory=tuple)

    def __getitem__(self, name: str) -> MetricSummary:
        return self.metrics[name]

    def improved(self, name: str) -> Tuple[int, int]:
        """Return ``(improvements, count)`` for one metric."""
        return self.metrics[name].improvements, self.count


def summarize(results: Iterable[SearchResult]) -> ResultSummary:
    """Totals and means over raw results. Position and best move are dropped."""
    items = list(results)
    metrics = {
        metric.name: MetricTotals.of(metric, [result.metric(metric.name) for result in items])
        for metric in METRICS
    }
    return ResultSummary(count=len(items), metrics=metrics)


def _summarize_metric(metric: Type[Metric], diffs: Sequence[ResultDiff]) -> MetricSummary:
    entries = [item[metric.name] for item in diffs]
    # fsum keeps the mean independent of the order diffs arrive in.
    relatives: List[float] = [entry.relative for entry in entries if entry.has_relative]
    mean_relative = math.fsum(relatives) / max(len(relatives), 1)
    return MetricSummary(
        metric=metric,
        first=MetricTotals.of(metric, [entry.first for entry in entries]),
        second=MetricTotals.of(metric, [entry.second for entry in entries]),
        mean_relative=mean_relative,
        relative_count=len(relatives),
        improvements=sum(1 for entry in entries if entry.is_improvement),
        regressions=sum(1 for entry in entries if entry.is_regression),
    )


def aggregate(
    diffs: Iterable[ResultDiff], failures: Iterable[PositionFailure] = ()
) -> Report:
    """Fold diffs into a :class:`Report`. An empty input yields a zero report."""
    items = list(diffs)
    return Report(
        count=len(items),
        metrics={metric.name: _summarize_metric(metric, items) for metric in METRICS},
        best_move_changes=sum(1 for item in items if item.best_move.changed),
        failures=tuple(failures),
    )
