from __future__ import annotations

from collections.abc import Sequence
from typing import Iterator, List, Optional, Tuple

from .board import Board, Piece, PieceKind, Player, reserve_kind_for
from .errors import CorruptUndoRecord, IllegalDrop, PieceMismatch
from .moves import DropUndo, Move, MoveUndo, UndoRecord
from .reserve import Reserve

Snapshot = Tuple[tuple, tuple, Player]


class History(Sequence):
    """Applied moves, oldest first. Reflects the log as it was when taken."""

    def __init__(self, log: List[Tuple[Move, UndoRecord]]) -> None:
        self._moves: Tuple[Move, ...] = tuple(m for m, _ in log)

    def __len__(self) -> int:
        return len(self._moves)

    def __getitem__(self, i):
        if isinstance(i, slice):
            return list(self._moves[i])
        return self._moves[i]

    def __iter__(self) -> Iterator[Move]:
        return iter(self._moves)


class GameState:
    """Board, reserves and turn of the single live game, plus the undo log."""

    def __init__(
        self,
        board: Optional[Board] = None,
        reserve: Optional[Reserve] = None,
        to_move: Player = Player.FIRST,
    ) -> None:
        self.board = board if board is not None else Board.initial()
        self.reserve = reserve if reserve is not None else Reserve()
        self.to_move = to_move
        self._undo_log: List[Tuple[Move, UndoRecord]] = []

    def snapshot(self) -> Snapshot:
        """Comparable value of board, reserves and turn."""
        return (self.board.rows(), self.reserve.snapshot(), self.to_move)

    def history(self) -> History:
        return History(self._undo_log)

    def can_undo(self) -> bool:
        return bool(self._undo_log)

    def apply_move(self, move: Move) -> None:
        """Applies a candidate move. Either fully succeeds or leaves the state untouched."""
        player = self.to_move
        dest = move.destination
        occupant = self.board.at(dest)

        record: UndoRecord
        if move.is_drop:
            if occupant is not None:
                raise IllegalDrop(f"{player.name} dropped {move.piece.name} onto occupied {move.destination_square}")
            self.reserve.take(player, move.piece)
            record = DropUndo(dest=dest, kind=move.piece)
        else:
            src = move.source
            moving = self.board.at(src)
            if moving is None or moving.owner is not player:
                raise PieceMismatch(f"{player.name} has no piece on {move.source_square}")
            promoting = move.piece is PieceKind.HEN and moving.kind is PieceKind.CHICK
            if moving.kind is not move.piece and not promoting:
                raise PieceMismatch(
                    f"{player.name} moved a {moving.kind.name} from {move.source_square}, expected {move.piece.name}"
                )
            if occupant is not None and occupant.owner is player:
                raise PieceMismatch(f"{player.name} cannot capture own piece on {move.destination_square}")
            if occupant is not None:
                kept = reserve_kind_for(occupant.kind)
                if kept is not None:
                    self.reserve.add(player, kept)
            self.board.put(src, None)
            record = MoveUndo(
                src=src,
                dest=dest,
                pre_move_kind=moving.kind,
                captured_kind=occupant.kind if occupant is not None else None,
            )

        self.board.put(dest, Piece(player, move.piece))
        self._undo_log.append((move, record))
        self.to_move = player.opponent

    def undo_move(self) -> Optional[Move]:
        """Reverts the most recent move and returns it; no-op on an empty log."""
        if not self._undo_log:
            return None
        move, record = self._undo_log[-1]
        mover = self.to_move.opponent

        if isinstance(record, MoveUndo) and record.captured_kind is not None:
            kept = reserve_kind_for(record.captured_kind)
            if kept is not None and self.reserve.count(mover, kept) <= 0:
                raise CorruptUndoRecord(
                    f"{mover.name} undid capture of {record.captured_kind.name} with no {kept.name} in reserve"
                )

        self._undo_log.pop()
        self.to_move = mover

        if isinstance(record, DropUndo):
            self.reserve.add(mover, record.kind)
            self.board.put(record.dest, None)
        elif isinstance(record, MoveUndo):
            # Put the piece back unpromoted.
            self.board.put(record.src, Piece(mover, record.pre_move_kind))
            if record.captured_kind is not None:
                kept = reserve_kind_for(record.captured_kind)
                if kept is not None:
                    self.reserve.take(mover, kept)
                self.board.put(record.dest, Piece(mover.opponent, record.captured_kind))
            else:
                self.board.put(record.dest, None)
        else:
            raise TypeError(f"unknown undo record {record!r}")
        return move
