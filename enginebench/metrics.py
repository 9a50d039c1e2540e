"""Metric value types and the direction-of-improvement rules."""

from __future__ import annotations

from enum import Enum
from typing import ClassVar, Dict, Tuple, Type, Union

from .errors import InvalidMetricInput

Number = Union[int, float]


class Direction(Enum):
    LOWER_IS_BETTER = "lower"
    HIGHER_IS_BETTER = "higher"


class Change(Enum):
    IMPROVED = "improved"
    REGRESSED = "regressed"
    UNCHANGED = "unchanged"


class Metric:
    """Mixin that tags a plain number with the metric it measures.

    Concrete metrics subclass ``int`` or ``float`` as well, so ordering,
    hashing and arithmetic are the ordinary numeric ones. Whether a change is
    good or bad is only ever answered through :meth:`direction`.
    """

    name: ClassVar[str]
    label: ClassVar[str]
    unit: ClassVar[str] = ""
    _direction: ClassVar[Direction]

    @classmethod
    def direction(cls) -> Direction:
        return cls._direction

    @classmethod
    def combine(cls, a: Number, b: Number) -> "Metric":
        return cls(a + b)  # type: ignore[call-arg]

    @classmethod
    def scale_down(cls, a: Number, n: int) -> "Metric":
        if n <= 0:
            raise InvalidMetricInput(f"Cannot scale {cls.name} down by {n}")
        return cls(cls._divide(a, n))  # type: ignore[call-arg]

    @classmethod
    def zero(cls) -> "Metric":
        return cls(0)  # type: ignore[call-arg]

    @staticmethod
    def _divide(a: Number, n: int) -> Number:
        raise NotImplementedError

    def __repr__(self) -> str:
        return f"{type(self).__name__}({super().__repr__()})"


class IntegralMetric(Metric, int):
    @staticmethod
    def _divide(a: Number, n: int) -> Number:
        return a // n


class FractionalMetric(Metric, float):
    @staticmethod
    def _divide(a: Number, n: int) -> Number:
        return a / n


class Nodes(IntegralMetric):
    name = "nodes"
    label = "Nodes"
    _direction = Direction.LOWER_IS_BETTER


class Time(IntegralMetric):
    name = "time"
    label = "Time"
    unit = "ms"
    _direction = Direction.LOWER_IS_BETTER


class Speed(IntegralMetric):
    name = "nps"
    label = "Speed"
    unit = "knps"
    _direction = Direction.HIGHER_IS_BETTER


class Score(IntegralMetric):
    name = "score"
    label = "Score"
    unit = "cp"
    _direction = Direction.HIGHER_IS_BETTER


class BranchingFactor(FractionalMetric):
    name = "branching_factor"
    label = "Branching"
    _direction = Direction.LOWER_IS_BETTER


METRICS: Tuple[Type[Metric], ...] = (Nodes, Time, Speed, BranchingFactor, Score)

_METRICS_BY_NAME: Dict[str, Type[Metric]] = {metric.name: metric for metric in METRICS}


def metric_by_name(name: str) -> Type[Metric]:
    try:
        return _METRICS_BY_NAME[name]
    except KeyError as exc:
        available = ", ".join(_METRICS_BY_NAME)
        raise KeyError(f"Unknown metric '{name}'. Choose from: {available}") from exc


def classify(metric: Type[Metric], baseline: Number, fresh: Number) -> Change:
    """Decide whether going from ``baseline`` to ``fresh`` is an improvement."""
    if fresh == baseline:
        return Change.UNCHANGED
    fresh_is_lower = fresh < baseline
    if metric.direction() is Direction.LOWER_IS_BETTER:
        return Change.IMPROVED if fresh_is_lower else Change.REGRESSED
    return Change.REGRESSED if fresh_is_lower else Change.IMPROVED


def is_improvement(metric: Type[Metric], baseline: Number, fresh: Number) -> bool:
    return classify(metric, baseline, fresh) is Change.IMPROVED


def speed_knps(nodes: int, time_ms: int) -> Speed:
    """Nodes per millisecond, i.e. thousands of nodes per second."""
    if time_ms <= 0:
        raise InvalidMetricInput(f"Speed needs a positive search time, got {time_ms}ms")
    return Speed(nodes // time_ms)


def branching_factor(nodes: int, depth: int) -> BranchingFactor:
    """Effective branching factor ``nodes ** (1 / depth)``."""
    if depth <= 0:
        raise InvalidMetricInput(f"Branching factor needs a positive depth, got {depth}")
    if nodes < 0:
        raise InvalidMetricInput(f"Branching factor needs a non-negative node count, got {nodes}")
    return BranchingFactor(nodes ** (1.0 / depth))
