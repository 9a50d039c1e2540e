"""Board positions used as the unit of benchmarking."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List

import chess

STARTPOS = "startpos"


@dataclass(frozen=True)
class Position:
    """Immutable board state, stored as a normalized FEN."""

    fen: str

    @classmethod
    def parse(cls, text: str) -> "Position":
        stripped = text.strip()
        if stripped == STARTPOS:
            return cls(chess.STARTING_FEN)
        if stripped.startswith("fen "):
            stripped = stripped[4:].strip()
        if not stripped:
            raise ValueError("Empty position string")
        try:
            board = chess.Board(stripped)
        except ValueError as exc:
            raise ValueError(f"Invalid FEN '{stripped}': {exc}") from exc
        return cls(board.fen())

    @property
    def is_startpos(self) -> bool:
        return self.fen == chess.STARTING_FEN

    def to_command_args(self) -> List[str]:
        if self.is_startpos:
            return [STARTPOS]
        return ["fen", self.fen]

    def __str__(self) -> str:
        return self.fen
