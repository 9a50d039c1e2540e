"""Per-position comparison between a baseline and a fresh search result."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterator, Type

from .errors import DepthMismatch, PositionMismatch, UndefinedRelativeChange
from .metrics import METRICS, Change, Metric, Number, classify
from .position import Position
from .result import SearchResult


@dataclass(frozen=True)
class MetricDiff:
    metric: Type[Metric]
    first: Number
    second: Number

    @property
    def name(self) -> str:
        return self.metric.name

    @property
    def has_relative(self) -> bool:
        return self.first != 0 or self.second == 0

    @property
    def relative(self) -> float:
        """``(second - first) / first``; zero when both values are zero."""
        if self.first == 0:
            if self.second == 0:
                return 0.0
            raise UndefinedRelativeChange(self.metric.name, self.first, self.second)
        return (self.second - self.first) / self.first

    @property
    def change(self) -> Change:
        return classify(self.metric, self.first, self.second)

    @property
    def is_improvement(self) -> bool:
        return self.change is Change.IMPROVED

    @property
    def is_regression(self) -> bool:
        return self.change is Change.REGRESSED


@dataclass(frozen=True)
class MoveDiff:
    first: str
    second: str

    @property
    def changed(self) -> bool:
        return self.first != self.second


@dataclass(frozen=True)
class ResultDiff:
    baseline: SearchResult
    fresh: SearchResult
    metrics: Dict[str, MetricDiff]
    best_move: MoveDiff

    @property
    def position(self) -> Position:
        return self.baseline.position

    def __getitem__(self, name: str) -> MetricDiff:
        return self.metrics[name]

    def __iter__(self) -> Iterator[MetricDiff]:
        return iter(self.metrics.values())


def diff(baseline: SearchResult, fresh: SearchResult) -> ResultDiff:
    if baseline.position != fresh.position:
        raise PositionMismatch(str(baseline.position), str(fresh.position))
    if baseline.depth != fresh.depth:
        raise DepthMismatch(str(baseline.position), baseline.depth, fresh.depth)
    metrics = {
        metric.name: MetricDiff(
            metric=metric,
            first=baseline.metric(metric.name),
            second=fresh.metric(metric.name),
        )
        for metric in METRICS
    }
    return ResultDiff(
        baseline=baseline,
        fresh=fresh,
        metrics=metrics,
        best_move=MoveDiff(baseline.best_move, fresh.best_move),
    )
