"""Public package interface for enginebench."""

from .bench import BenchRun, run_diff, run_suite
from .diff import MetricDiff, MoveDiff, ResultDiff, diff
from .driver import DriverState, EngineDriver
from .errors import (
    BenchError,
    DepthMismatch,
    DriverStateError,
    EngineTimeout,
    EngineUnavailable,
    FatalError,
    FileIOFailure,
    InvalidMetricInput,
    MissingFieldDefaulted,
    PipeAttachFailure,
    PositionError,
    PositionMismatch,
    ProcessSpawnFailure,
    ProtocolParseFailure,
    SnapshotFormatError,
    SuiteFormatError,
    UndefinedRelativeChange,
)
from .metrics import (
    METRICS,
    BranchingFactor,
    Change,
    Direction,
    Nodes,
    Score,
    Speed,
    Time,
    classify,
    is_improvement,
)
from .position import Position
from .report import Report, ResultSummary, aggregate, summarize
from .result import SearchResult
from .snapshot import load_snapshot, load_suite, save_snapshot

__all__ = [
    "METRICS",
    "BenchError",
    "BenchRun",
    "DepthMismatch",
    "BranchingFactor",
    "Change",
    "Direction",
    "DriverState",
    "DriverStateError",
    "EngineDriver",
    "EngineTimeout",
    "EngineUnavailable",
    "FatalError",
    "FileIOFailure",
    "InvalidMetricInput",
    "MetricDiff",
    "MissingFieldDefaulted",
    "MoveDiff",
    "Nodes",
    "PipeAttachFailure",
    "Position",
    "PositionError",
    "PositionMismatch",
    "ProcessSpawnFailure",
    "ProtocolParseFailure",
    "Report",
    "ResultDiff",
    "ResultSummary",
    "Score",
    "SearchResult",
    "SnapshotFormatError",
    "Speed",
    "SuiteFormatError",
    "Time",
    "UndefinedRelativeChange",
    "aggregate",
    "classify",
    "diff",
    "is_improvement",
    "load_snapshot",
    "load_suite",
    "run_diff",
    "run_suite",
    "save_snapshot",
    "summarize",
]
