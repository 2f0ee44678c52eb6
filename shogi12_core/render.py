from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence

from .board import DROPPABLE_KINDS, Piece, PieceKind, Player
from .moves import Move, Outcome, Verdict
from .state import GameState

ORIENTATIONS = ('up', 'down', 'left', 'right')

# Where the first player's side ends up after each view command.
ROTATIONS: Dict[str, Dict[str, str]] = {
    'flip': {'up': 'down', 'down': 'up', 'left': 'right', 'right': 'left'},
    'cw': {'up': 'right', 'down': 'left', 'left': 'up', 'right': 'down'},
    'ccw': {'up': 'left', 'down': 'right', 'left': 'down', 'right': 'up'},
}

PIECE_GLYPHS: Dict[PieceKind, str] = {
    PieceKind.CHICK: '子',
    PieceKind.HEN: '侯',
    PieceKind.GIRAFFE: '將',
    PieceKind.ELEPHANT: '相',
    PieceKind.LION: '王',
}


def interpret_color(name: str) -> int:
    c = name.lower()
    if c == 'red':
        return 31
    if c == 'green':
        return 32
    raise ValueError(f"Unknown color {name}")


def colorize(text: str, color: Optional[int]) -> str:
    if color is None:
        return text
    return f"\x1b[1;{color}m{text}\x1b[0m"


@dataclass
class Players:
    """Display names and ANSI colors of the two sides."""
    names: Dict[Player, str] = field(default_factory=lambda: {
        Player.FIRST: 'First Player',
        Player.SECOND: 'Second Player',
    })
    colors: Dict[Player, int] = field(default_factory=lambda: {Player.FIRST: 32, Player.SECOND: 31})
    use_color: bool = True

    @classmethod
    def create(cls, p1_name: str = 'First Player', p2_name: str = 'Second Player',
               p1_color: str = 'green', p2_color: str = 'red', use_color: bool = True) -> 'Players':
        return cls(
            names={Player.FIRST: p1_name, Player.SECOND: p2_name},
            colors={Player.FIRST: interpret_color(p1_color), Player.SECOND: interpret_color(p2_color)},
            use_color=use_color,
        )

    def color(self, player: Player) -> Optional[int]:
        return self.colors[player] if self.use_color else None

    def name(self, player: Player, colored: bool = True) -> str:
        name = self.names[player]
        return colorize(name, self.color(player)) if colored else name


def reserve_string(state: GameState, player: Player, players: Players) -> str:
    pieces = ''.join(PIECE_GLYPHS[k] * state.reserve.count(player, k) for k in DROPPABLE_KINDS)
    return colorize(pieces, players.color(player))


def _cell(piece: Optional[Piece], orientation: str, players: Players) -> str:
    if piece is None:
        return '   '
    name = PIECE_GLYPHS[piece.kind]
    first = piece.owner is Player.FIRST
    if orientation == 'up':
        name += 'V' if first else '^'
    elif orientation == 'down':
        name += '^' if first else 'V'
    elif orientation == 'left':
        name = name + '>' if first else '<' + name
    else:
        name = '<' + name if first else name + '>'
    return colorize(name, players.color(piece.owner))


def render(state: GameState, orientation: str = 'down', players: Optional[Players] = None) -> str:
    """Board with reserves and turn line. orientation is the side the first player sits on."""
    players = players or Players()
    rows = [list(r) for r in state.board.rows()]
    if orientation == 'up':
        display = [list(reversed(r)) for r in reversed(rows)]
        row_ids, col_ids = '4321', 'CBA'
    elif orientation == 'down':
        display = rows
        row_ids, col_ids = '1234', 'ABC'
    elif orientation == 'left':
        display = [list(r) for r in zip(*reversed(rows))]
        row_ids, col_ids = 'ABC', '4321'
    elif orientation == 'right':
        display = [list(r) for r in reversed(list(zip(*rows)))]
        row_ids, col_ids = 'CBA', '1234'
    else:
        raise ValueError(f"unsupported orientation {orientation}")

    first, second = Player.FIRST, Player.SECOND
    n = len(col_ids)
    out: List[str] = []

    if orientation == 'up':
        out.append(f"{players.name(first)} {reserve_string(state, first, players)}")
    elif orientation == 'down':
        out.append(f"{players.name(second)} {reserve_string(state, second, players)}")
    elif orientation == 'left':
        out.append(players.name(first))
        out.append(reserve_string(state, first, players))
    else:
        out.append(players.name(second))
        out.append(reserve_string(state, second, players))

    out.append('    ' + '   '.join(col_ids))
    out.append('  ┏' + '━━━┳' * (n - 1) + '━━━┓')
    body = []
    for row, row_id in zip(display, row_ids):
        cells = '┃'.join(_cell(p, orientation, players) for p in row)
        body.append(f"{row_id} ┃{cells}┃ {row_id}")
    out.append(('\n  ┣' + '━━━╋' * (n - 1) + '━━━┫\n').join(body))
    out.append('  ┗' + '━━━┻' * (n - 1) + '━━━┛')
    out.append('    ' + '   '.join(col_ids))

    if orientation in ('up', 'down'):
        who = second if orientation == 'up' else first
        out.append(f"{players.name(who)} {reserve_string(state, who, players)}")
    else:
        who = second if orientation == 'left' else first
        pad = ' ' * (3 + n * 4 + 2 - len(players.names[who]))
        out.append(pad + players.name(who))
        out.append(pad + reserve_string(state, who, players))
    out.append(f"It's {players.name(state.to_move)}'s turn")
    return '\n'.join(out)


def move_to_str(
    move: Move,
    show_id: bool = True,
    color: Optional[int] = None,
    my_name: Optional[str] = None,
    opponents_name: Optional[str] = None,
) -> str:
    width = max(len(my_name or ''), len(opponents_name or ''))
    winner = ''
    if move.outcome is Outcome.LOSE and opponents_name:
        winner = f" ({opponents_name:>{width}} wins)"
    elif move.outcome is Outcome.WIN and my_name:
        winner = f" ({my_name:>{width}} wins)"
    prefix = f"{move.sequence_id:2d}: " if show_id else ''
    glyph = colorize(PIECE_GLYPHS[move.piece], color)
    return (
        f"{prefix}{glyph} {move.source_square:>2} -> {move.destination_square:>2} "
        f"{move.outcome.value:>4}{winner} in {move.plies:3d} moves"
    )


def candidates_to_lines(state: GameState, moves: Sequence[Move], players: Players) -> List[str]:
    me, them = state.to_move, state.to_move.opponent
    return [
        move_to_str(m, color=players.color(me), my_name=players.name(me), opponents_name=players.name(them))
        for m in moves
    ]


def verdict_to_str(verdict: Verdict, state: GameState, players: Players) -> str:
    if verdict.outcome is Outcome.DRAW:
        return 'Game status: Drawn'
    winner = state.to_move if verdict.outcome is Outcome.WIN else state.to_move.opponent
    return f"Game status: {players.name(winner)} wins in {verdict.plies} moves"


def history_lines(state: GameState, players: Players) -> List[str]:
    history = state.history()
    mover = state.to_move if len(history) % 2 == 0 else state.to_move.opponent
    width = max(len(n) for n in players.names.values())
    lines: List[str] = []
    for i, move in enumerate(history):
        lines.append(f"{i + 1:2d}. {players.names[mover]:>{width}} " + move_to_str(
            move,
            show_id=False,
            color=players.color(mover),
            my_name=players.names[mover],
            opponents_name=players.names[mover.opponent],
        ))
        mover = mover.opponent
    return lines
