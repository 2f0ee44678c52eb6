from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Iterable, List, Optional, Tuple

Coord = Tuple[int, int]  # (row, col), row 0 is rank "1"

ROWS = 4
COLS = 3
DROP_SQUARE = '00'


class Player(IntEnum):
    FIRST = 1
    SECOND = -1

    @property
    def opponent(self) -> 'Player':
        return Player(-int(self))

    @property
    def sign(self) -> str:
        """Owner token used by the oracle file format."""
        return '+' if self is Player.FIRST else '-'

    @classmethod
    def from_sign(cls, sign: str) -> 'Player':
        if sign == '+':
            return cls.FIRST
        if sign == '-':
            return cls.SECOND
        raise ValueError(f"unknown owner sign {sign!r}")


class PieceKind(Enum):
    CHICK = 'HI'
    HEN = 'NI'
    GIRAFFE = 'KI'
    ELEPHANT = 'ZO'
    LION = 'LI'

    @property
    def code(self) -> str:
        return self.value

    @classmethod
    def from_code(cls, code: str) -> 'PieceKind':
        return cls(code)


# Fixed order of the reserve digits in the oracle file.
DROPPABLE_KINDS: Tuple[PieceKind, ...] = (PieceKind.CHICK, PieceKind.ELEPHANT, PieceKind.GIRAFFE)


def reserve_kind_for(kind: PieceKind) -> Optional[PieceKind]:
    """Kind a captured piece becomes in the capturer's hand; None if it is not kept."""
    if kind is PieceKind.HEN:
        return PieceKind.CHICK
    if kind is PieceKind.LION:
        return None
    return kind


@dataclass(frozen=True)
class Piece:
    owner: Player
    kind: PieceKind


def parse_square(square: str) -> Optional[Coord]:
    """Decodes 'B3' style squares; the drop sentinel '00' yields None."""
    if square == DROP_SQUARE:
        return None
    if len(square) != 2:
        raise ValueError(f"bad square {square!r}")
    col = ord(square[0]) - ord('A')
    row = ord(square[1]) - ord('1')
    if not (0 <= col < COLS and 0 <= row < ROWS):
        raise ValueError(f"square {square!r} is off the board")
    return (row, col)


def format_square(coord: Optional[Coord]) -> str:
    if coord is None:
        return DROP_SQUARE
    row, col = coord
    return f"{chr(ord('A') + col)}{row + 1}"


class Board:
    """Mutable 4x3 grid of optional pieces."""

    def __init__(self, rows: Optional[Iterable[Iterable[Optional[Piece]]]] = None) -> None:
        if rows is None:
            self._cells: List[List[Optional[Piece]]] = [[None] * COLS for _ in range(ROWS)]
        else:
            self._cells = [list(r) for r in rows]
        if len(self._cells) != ROWS or any(len(r) != COLS for r in self._cells):
            raise ValueError(f"board must be {ROWS}x{COLS}")

    @classmethod
    def initial(cls) -> 'Board':
        s, f = Player.SECOND, Player.FIRST
        return cls([
            [Piece(s, PieceKind.GIRAFFE), Piece(s, PieceKind.LION), Piece(s, PieceKind.ELEPHANT)],
            [None, Piece(s, PieceKind.CHICK), None],
            [None, Piece(f, PieceKind.CHICK), None],
            [Piece(f, PieceKind.ELEPHANT), Piece(f, PieceKind.LION), Piece(f, PieceKind.GIRAFFE)],
        ])

    def at(self, coord: Coord) -> Optional[Piece]:
        r, c = coord
        return self._cells[r][c]

    def put(self, coord: Coord, piece: Optional[Piece]) -> None:
        r, c = coord
        self._cells[r][c] = piece

    def rows(self) -> Tuple[Tuple[Optional[Piece], ...], ...]:
        return tuple(tuple(r) for r in self._cells)

    def coords(self) -> Iterable[Coord]:
        for r in range(ROWS):
            for c in range(COLS):
                yield (r, c)

    def count(self, owner: Player, kind: PieceKind) -> int:
        return sum(1 for coord in self.coords() if self.at(coord) == Piece(owner, kind))

    def copy(self) -> 'Board':
        return Board(self._cells)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Board):
            return NotImplemented
        return self.rows() == other.rows()
