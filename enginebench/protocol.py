"""UCI command encoding and engine output parsing."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Sequence, Tuple, Union

from .errors import ProtocolParseFailure
from .position import Position

MATE_SCORE = 32000

UCI = "uci"
UCI_OK = "uciok"
NEW_GAME = "ucinewgame"
QUIT = "quit"


@dataclass(frozen=True)
class HandshakeAck:
    pass


@dataclass(frozen=True)
class ProgressInfo:
    nodes: Optional[int] = None
    time_ms: Optional[int] = None
    score: Optional[int] = None

    def fields(self) -> Dict[str, int]:
        present = {}
        for key in ("nodes", "time_ms", "score"):
            value = getattr(self, key)
            if value is not None:
                present[key] = value
        return present


@dataclass(frozen=True)
class FinalMove:
    move: str
    ponder: Optional[str] = None


@dataclass(frozen=True)
class Unrecognized:
    line: str


Message = Union[HandshakeAck, ProgressInfo, FinalMove, Unrecognized]


def encode(command: str) -> str:
    return command.rstrip("\r\n") + "\n"


def uci() -> str:
    return UCI


def ucinewgame() -> str:
    return NEW_GAME


def position(pos: Position, moves: Sequence[str] = ()) -> str:
    tokens = ["position", *pos.to_command_args()]
    if moves:
        tokens.append("moves")
        tokens.extend(moves)
    return " ".join(tokens)


def go_depth(depth: int) -> str:
    if depth <= 0:
        raise ValueError(f"Search depth must be positive, got {depth}")
    return f"go depth {depth}"


def quit() -> str:
    return QUIT


def _int_token(tokens: List[str], index: int, key: str) -> int:
    if index >= len(tokens):
        raise ProtocolParseFailure(f"'{key}' has no value")
    try:
        return int(tokens[index])
    except ValueError as exc:
        raise ProtocolParseFailure(f"'{key}' value {tokens[index]!r} is not an integer") from exc


def _parse_score(tokens: List[str], i: int) -> Tuple[Optional[int], int]:
    if i + 2 >= len(tokens):
        raise ProtocolParseFailure("'score' is truncated")
    mode = tokens[i + 1]
    value = _int_token(tokens, i + 2, f"score {mode}")
    if mode == "cp":
        return value, i + 3
    if mode == "mate":
        return (MATE_SCORE if value > 0 else -MATE_SCORE), i + 3
    raise ProtocolParseFailure(f"Unknown score mode {mode!r}")


def parse_info(line: str) -> ProgressInfo:
    """Pull nodes, time and score out of an ``info`` line.

    A token that fails to parse is dropped on its own; the other fields of
    the line are still returned.
    """
    tokens = line.split()
    values: Dict[str, Optional[int]] = {"nodes": None, "time_ms": None, "score": None}
    i = 1
    while i < len(tokens):
        token = tokens[i]
        if token == "string":
            # Free text runs to the end of the line.
            break
        if token == "pv":
            break
        try:
            if token == "nodes":
                values["nodes"] = _int_token(tokens, i + 1, token)
                i += 2
                continue
            if token == "time":
                values["time_ms"] = _int_token(tokens, i + 1, token)
                i += 2
                continue
            if token == "score":
                values["score"], i = _parse_score(tokens, i)
                continue
        except ProtocolParseFailure:
            i += 1
            continue
        i += 1
    return ProgressInfo(**values)


def _parse_bestmove(line: str) -> Message:
    tokens = line.split()
    if len(tokens) < 2:
        return Unrecognized(line)
    ponder = tokens[3] if len(tokens) >= 4 and tokens[2] == "ponder" else None
    return FinalMove(move=tokens[1], ponder=ponder)


_PARSERS: Dict[str, Callable[[str], Message]] = {
    UCI_OK: lambda line: HandshakeAck(),
    "info": parse_info,
    "bestmove": _parse_bestmove,
}


def parse_line(line: str) -> Message:
    """Classify one line of engine output. Never raises."""
    stripped = line.strip()
    if not stripped:
        return Unrecognized(stripped)
    keyword = stripped.split(maxsplit=1)[0]
    parser = _PARSERS.get(keyword)
    if parser is None:
        return Unrecognized(stripped)
    if keyword == UCI_OK and stripped != UCI_OK:
        return Unrecognized(stripped)
    return parser(stripped)
