"""Search results produced by the driver and stored in snapshots."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Mapping

from .errors import SnapshotFormatError
from .metrics import (
    BranchingFactor,
    Metric,
    Nodes,
    Score,
    Speed,
    Time,
    branching_factor,
    speed_knps,
)
from .position import Position

# metric name -> SearchResult attribute
_METRIC_ATTRIBUTES: Dict[str, str] = {
    Nodes.name: "nodes",
    Time.name: "time_ms",
    Speed.name: "speed_knps",
    BranchingFactor.name: "branching_factor",
    Score.name: "score",
}


@dataclass(frozen=True)
class SearchResult:
    position: Position
    depth: int
    nodes: Nodes
    time_ms: Time
    speed_knps: Speed
    score: Score
    branching_factor: BranchingFactor
    best_move: str

    def __post_init__(self) -> None:
        # Accept plain numbers and tag them with their metric type.
        object.__setattr__(self, "nodes", Nodes(self.nodes))
        object.__setattr__(self, "time_ms", Time(self.time_ms))
        object.__setattr__(self, "speed_knps", Speed(self.speed_knps))
        object.__setattr__(self, "score", Score(self.score))
        object.__setattr__(self, "branching_factor", BranchingFactor(self.branching_factor))

    @classmethod
    def from_search(
        cls,
        position: Position,
        depth: int,
        nodes: int,
        time_ms: int,
        score: int,
        best_move: str,
    ) -> "SearchResult":
        """Build a result from raw engine output, deriving speed and branching."""
        return cls(
            position=position,
            depth=depth,
            nodes=Nodes(nodes),
            time_ms=Time(time_ms),
            speed_knps=speed_knps(nodes, time_ms),
            score=Score(score),
            branching_factor=branching_factor(nodes, depth),
            best_move=best_move,
        )

    def metric(self, name: str) -> Metric:
        try:
            attribute = _METRIC_ATTRIBUTES[name]
        except KeyError as exc:
            raise KeyError(f"Unknown metric '{name}'") from exc
        return getattr(self, attribute)

    def to_record(self) -> Dict[str, Any]:
        return {
            "position": str(self.position),
            "depth": self.depth,
            "nodes": int(self.nodes),
            "time": int(self.time_ms),
            "nps": int(self.speed_knps),
            "score": int(self.score),
            "branching_factor": float(self.branching_factor),
            "best_move": self.best_move,
        }

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> "SearchResult":
        if not isinstance(record, Mapping):
            raise SnapshotFormatError(f"Expected a result object, got {type(record).__name__}")

        missing = [
            key
            for key in ("position", "depth", "nodes", "time", "nps", "branching_factor")
            if key not in record
        ]
        if missing:
            raise SnapshotFormatError(f"Result record is missing {', '.join(missing)}")

        try:
            position = Position.parse(str(record["position"]))
        except ValueError as exc:
            raise SnapshotFormatError(str(exc)) from exc

        integers: Dict[str, int] = {}
        for key in ("depth", "nodes", "time", "nps"):
            value = record[key]
            if isinstance(value, bool) or not isinstance(value, int):
                raise SnapshotFormatError(
                    f"Field '{key}' must be an integer, got {value!r} ({position})"
                )
            integers[key] = value

        # Snapshots written before scores were tracked have no score field.
        score = record.get("score", 0)
        if isinstance(score, bool) or not isinstance(score, int):
            raise SnapshotFormatError(f"Field 'score' must be an integer, got {score!r} ({position})")

        bf = record["branching_factor"]
        if isinstance(bf, bool) or not isinstance(bf, (int, float)):
            raise SnapshotFormatError(
                f"Field 'branching_factor' must be a number, got {bf!r} ({position})"
            )

        best_move = record.get("best_move", "")
        if not isinstance(best_move, str):
            raise SnapshotFormatError(f"Field 'best_move' must be a string, got {best_move!r}")

        return cls(
            position=position,
            depth=integers["depth"],
            nodes=Nodes(integers["nodes"]),
            time_ms=Time(integers["time"]),
            speed_knps=Speed(integers["nps"]),
            score=Score(score),
            branching_factor=BranchingFactor(bf),
            best_move=best_move,
        )
