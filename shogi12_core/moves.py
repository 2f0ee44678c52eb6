from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union

from .board import Coord, PieceKind, format_square


class Outcome(Enum):
    WIN = 'win'
    LOSE = 'lose'
    DRAW = 'draw'


@dataclass(frozen=True)
class Verdict:
    """Perfect-play result for the side to move in the submitted position."""
    outcome: Outcome
    plies: int


@dataclass(frozen=True)
class Move:
    """A candidate move as offered by the oracle. source is None for a drop."""
    sequence_id: int
    source: Optional[Coord]
    destination: Coord
    piece: PieceKind
    outcome: Outcome = Outcome.DRAW
    plies: int = 0

    @property
    def is_drop(self) -> bool:
        return self.source is None

    @property
    def source_square(self) -> str:
        return format_square(self.source)

    @property
    def destination_square(self) -> str:
        return format_square(self.destination)


@dataclass(frozen=True)
class DropUndo:
    dest: Coord
    kind: PieceKind


@dataclass(frozen=True)
class MoveUndo:
    src: Coord
    dest: Coord
    pre_move_kind: PieceKind
    captured_kind: Optional[PieceKind] = None


UndoRecord = Union[DropUndo, MoveUndo]
