"""Piece model, shapes, piece source"""
from dataclasses import dataclass
from typing import Optional

from tetris_rng import PieceRandomizer

PIECE_TYPES = ("I", "O", "T", "S", "Z", "J", "L")

# preview shapes only; pieces never land on a board
SHAPES = {
    "I": [[0,0,0,0],[1,1,1,1],[0,0,0,0],[0,0,0,0]],
    "J": [[1,0,0],[1,1,1],[0,0,0]],
    "L": [[0,0,1],[1,1,1],[0,0,0]],
    "O": [[1,1],[1,1]],
    "S": [[0,1,1],[1,1,0],[0,0,0]],
    "T": [[0,1,0],[1,1,1],[0,0,0]],
    "Z": [[1,1,0],[0,1,1],[0,0,0]],
}

@dataclass(frozen=True)
class Piece:
    kind: str
    id: int

    def __str__(self):
        return f"{self.kind}#{self.id}"


class PieceSource:
    """Hands out pieces with increasing ids, starting at 1."""

    def __init__(self, randomizer: Optional[PieceRandomizer] = None, first_id: int = 1):
        self.randomizer = randomizer or PieceRandomizer()
        self.next_id = first_id

    def next(self) -> Piece:
        piece = Piece(self.randomizer.next_kind(), self.next_id)
        self.next_id += 1
        return piece

    def make(self, kind: str) -> Piece:
        """Issue a piece of a chosen kind, still drawing the next id."""
        if kind not in PIECE_TYPES:
            raise ValueError(f"unknown piece type: {kind!r}")
        piece = Piece(kind, self.next_id)
        self.next_id += 1
        return piece
