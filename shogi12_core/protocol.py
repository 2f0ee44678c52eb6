"""
Text protocol spoken with the external oracle.

Encoder: the position is written as four board rows (3 cells of 3 chars each,
``+HI`` style tokens or `` . `` for empty), one 6-digit reserve line
(first player's Chick/Elephant/Giraffe counts, then the second player's) and
one line holding the sign of the player to move.

Decoder: the oracle echoes that position after a line of dashes, then prints
a blank line, a verdict ``W(M)`` for the side to move, and one line per legal
move ``<id>:<src><dst><piece> <w>(<m>)``. Move values are the opponent's best
reply, so the mover's outcome is the flipped sign and one more ply.
"""
from __future__ import annotations

import re
from typing import Iterable, Iterator, List, Optional, Sequence, Tuple

from .board import COLS, DROPPABLE_KINDS, ROWS, PieceKind, Player, parse_square
from .errors import InvalidSelection, ProtocolError, ReserveOverflow
from .moves import Move, Outcome, Verdict
from .state import GameState

EMPTY_CELL = ' . '
END_MARKER = 'Move :'
MAX_RESERVE = 9

_VALUE_RE = re.compile(r'^(-1|0|1)\((\d+)\)$')
_MOVE_RE = re.compile(r'^(\d+):\s*([+-]?)(\S{2})(\S{2})(\S{2})\s+(\S+)$')

_MOVE_SHAPE = "'<id>:<src><dst><piece> <w>(<m>)'"


def serialize(state: GameState) -> str:
    """Renders the state in the oracle's input layout. Raises ReserveOverflow before producing anything."""
    counts: List[int] = []
    for player in (Player.FIRST, Player.SECOND):
        for kind in DROPPABLE_KINDS:
            n = state.reserve.count(player, kind)
            if n > MAX_RESERVE:
                raise ReserveOverflow(f"{player.name} holds {n} {kind.name}; at most {MAX_RESERVE} fit")
            counts.append(n)

    lines: List[str] = []
    for row in state.board.rows():
        cells = []
        for piece in row:
            if piece is None:
                cells.append(EMPTY_CELL)
            else:
                cells.append(piece.owner.sign + piece.kind.code)
        lines.append(''.join(cells))
    lines.append(''.join(str(n) for n in counts))
    lines.append(state.to_move.sign)
    return '\n'.join(lines) + '\n'


class _Lines:
    """Numbered reader over oracle output with trailing newlines removed."""

    def __init__(self, lines: Iterable[str]) -> None:
        self._it: Iterator[str] = iter(lines)
        self.line_no = 0

    def next(self, expected: str) -> str:
        try:
            raw = next(self._it)
        except StopIteration:
            raise ProtocolError(None, expected, self.line_no + 1) from None
        self.line_no += 1
        return raw.rstrip('\r\n')

    def rest(self) -> Iterator[Tuple[int, str]]:
        for raw in self._it:
            self.line_no += 1
            yield self.line_no, raw.rstrip('\r\n')


def _parse_value(text: str, line: str, line_no: Optional[int], expected: str) -> Tuple[int, int]:
    m = _VALUE_RE.match(text)
    if not m:
        raise ProtocolError(line, f"{expected} with W in -1, 0, 1", line_no)
    return int(m.group(1)), int(m.group(2))


def _verdict_outcome(w: int) -> Outcome:
    if w == 0:
        return Outcome.DRAW
    return Outcome.LOSE if w == 1 else Outcome.WIN


def parse_move_line(line: str, line_no: Optional[int] = None) -> Move:
    m = _MOVE_RE.match(line.strip())
    if not m:
        raise ProtocolError(line, _MOVE_SHAPE, line_no)
    seq, _sign, src_tok, dst_tok, code, value = m.groups()
    try:
        src = parse_square(src_tok)
        dst = parse_square(dst_tok)
    except ValueError:
        raise ProtocolError(line, f"squares A1..{chr(ord('A') + COLS - 1)}{ROWS} or 00", line_no) from None
    if dst is None:
        raise ProtocolError(line, "a destination square on the board", line_no)
    try:
        piece = PieceKind.from_code(code)
    except ValueError:
        raise ProtocolError(line, "piece code HI, NI, KI, ZO or LI", line_no) from None
    w, plies = _parse_value(value, line, line_no, "move value 'w(m)'")
    # The value is the opponent's best reply: flip the sign, add our ply.
    return Move(
        sequence_id=int(seq),
        source=src,
        destination=dst,
        piece=piece,
        outcome=_verdict_outcome(w),
        plies=plies + 1,
    )


def parse_verdict_and_moves(lines: Iterable[str]) -> Tuple[Verdict, List[Move]]:
    """Decodes a complete oracle response. All or nothing: any malformed line raises ProtocolError."""
    src = _Lines(lines)

    line = src.next("a line of dashes")
    if not line or any(ch != '-' for ch in line):
        raise ProtocolError(line, "a line of dashes", src.line_no)

    for _ in range(ROWS):
        src.next("an echoed board row")

    line = src.next("a 6-character reserve line")
    if len(line) != 2 * len(DROPPABLE_KINDS):
        raise ProtocolError(line, "a 6-character reserve line", src.line_no)

    line = src.next("'+' or '-'")
    if line not in ('+', '-'):
        raise ProtocolError(line, "'+' or '-'", src.line_no)

    line = src.next("an empty line")
    if line:
        raise ProtocolError(line, "an empty line", src.line_no)

    line = src.next("verdict 'W(M)'")
    w, plies = _parse_value(line.strip(), line, src.line_no, "verdict 'W(M)'")
    verdict = Verdict(outcome=_verdict_outcome(w), plies=plies)

    moves: List[Move] = []
    for line_no, line in src.rest():
        if line.startswith(END_MARKER):
            break
        if not line.strip():
            continue
        move = parse_move_line(line, line_no)
        if move.sequence_id != len(moves):
            raise ProtocolError(line, f"candidate id {len(moves)}", line_no)
        moves.append(move)
    return verdict, moves


def select_move(moves: Sequence[Move], move_id: int) -> Move:
    """Picks a candidate by its sequence id; ids outside [0, len(moves)) are rejected."""
    if 0 <= move_id < len(moves):
        for move in moves:
            if move.sequence_id == move_id:
                return move
    raise InvalidSelection(f"move id {move_id} not in 0..{len(moves) - 1}")
