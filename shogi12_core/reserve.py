from __future__ import annotations

from typing import Dict, Tuple

from .board import DROPPABLE_KINDS, PieceKind, Player
from .errors import EmptyReserve


class Reserve:
    """Per-player counts of captured pieces that can be dropped again."""

    def __init__(self) -> None:
        self._counts: Dict[Player, Dict[PieceKind, int]] = {
            p: {k: 0 for k in DROPPABLE_KINDS} for p in Player
        }

    def count(self, player: Player, kind: PieceKind) -> int:
        return self._counts[player].get(kind, 0)

    def _slot(self, player: Player, kind: PieceKind) -> Dict[PieceKind, int]:
        hand = self._counts[player]
        if kind not in hand:
            raise KeyError(f"{kind.name} is never held in reserve")
        return hand

    def add(self, player: Player, kind: PieceKind) -> None:
        self._slot(player, kind)[kind] += 1

    def take(self, player: Player, kind: PieceKind) -> None:
        hand = self._counts[player]
        if hand.get(kind, 0) <= 0:
            raise EmptyReserve(f"{player.name} has no {kind.name} in reserve")
        hand[kind] -= 1

    def counts(self, player: Player) -> Tuple[int, ...]:
        """Counts in the fixed Chick, Elephant, Giraffe order."""
        return tuple(self._counts[player][k] for k in DROPPABLE_KINDS)

    def snapshot(self) -> Tuple[Tuple[int, ...], Tuple[int, ...]]:
        return (self.counts(Player.FIRST), self.counts(Player.SECOND))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Reserve):
            return NotImplemented
        return self.snapshot() == other.snapshot()
