"""Snapshot (JSON) and position-suite file handling."""

from __future__ import annotations

import json
from pathlib import Path
from typing import List, Sequence, Union

from .errors import FileIOFailure, SnapshotFormatError, SuiteFormatError
from .position import Position
from .result import SearchResult

PathLike = Union[str, Path]

DEFAULT_SNAPSHOT = Path("./bench_snapshot.json")

DEFAULT_SUITE: Sequence[str] = (
    "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 1",
    "r3k2r/p1ppqpb1/bn2pnp1/3PN3/1p2P3/2N2Q1p/PPPBBPPP/R3K2R w KQkq - 0 1",
    "rn1qkbnr/pppb1ppp/4p3/3p4/3P4/2P2N2/PP2PPPP/RNBQKB1R w KQkq - 0 5",
    "r2q1rk1/pp1b1ppp/2n2n2/2bp4/3P4/2P1PN2/PP1NBPPP/R1BQ1RK1 w - - 0 10",
    "r1b2rk1/1pp1qppp/p1n2n2/3p4/2PP4/2N1PN2/PPQ2PPP/R1B2RK1 b - - 0 11",
    "r1bq1rk1/3n1pbp/pppp1np1/4p3/PP1PP3/2N1BN2/2P1BPPP/R2Q1RK1 w - - 0 12",
    "2r2rk1/1b2bppp/p2p1n2/1p1Pp3/1P2P3/P1NB1N2/1B3PPP/2RR2K1 w - - 0 21",
    "8/2p5/3p4/KP5r/1R3p1k/8/4P1P1/8 w - - 0 1",
    "8/5k2/1p4p1/1P2p3/4P3/2K3P1/5N2/8 w - - 0 50",
    "8/8/5k2/4p3/3pP3/3K4/6R1/8 w - - 0 58",
)


def default_positions() -> List[Position]:
    return [Position.parse(fen) for fen in DEFAULT_SUITE]


def load_snapshot(path: PathLike) -> List[SearchResult]:
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise FileIOFailure(f"Could not read snapshot '{path}': {exc}") from exc
    except UnicodeDecodeError as exc:
        raise SnapshotFormatError(f"Snapshot '{path}' is not valid UTF-8: {exc}") from exc

    try:
        records = json.loads(text)
    except json.JSONDecodeError as exc:
        raise SnapshotFormatError(f"Snapshot '{path}' is not valid JSON: {exc}") from exc
    if not isinstance(records, list):
        raise SnapshotFormatError(f"Snapshot '{path}' must hold a list of results")

    results: List[SearchResult] = []
    for index, record in enumerate(records):
        try:
            results.append(SearchResult.from_record(record))
        except SnapshotFormatError as exc:
            raise SnapshotFormatError(f"Snapshot '{path}', record {index}: {exc}") from exc
    return results


def save_snapshot(path: PathLike, results: Sequence[SearchResult]) -> None:
    path = Path(path)
    payload = [result.to_record() for result in results]
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(payload, indent=2) + "\n", encoding="utf-8")
    except OSError as exc:
        raise FileIOFailure(f"Could not write snapshot '{path}': {exc}") from exc


def load_suite(path: PathLike) -> List[Position]:
    """One position per line; blank lines and ``#`` comments are skipped."""
    path = Path(path)
    try:
        lines = path.read_text(encoding="utf-8").splitlines()
    except OSError as exc:
        raise FileIOFailure(f"Could not read suite '{path}': {exc}") from exc
    except UnicodeDecodeError as exc:
        raise SuiteFormatError(f"Suite '{path}' is not valid UTF-8: {exc}") from exc

    positions: List[Position] = []
    for lineno, line in enumerate(lines, start=1):
        stripped = line.strip()
        if not stripped or stripped.startswith("#"):
            continue
        try:
            positions.append(Position.parse(stripped))
        except ValueError as exc:
            raise SuiteFormatError(f"Suite '{path}', line {lineno}: {exc}") from exc
    return positions
