from __future__ import annotations

import argparse
import os
from typing import Callable, List, Optional

from .errors import InvalidSelection, OracleLaunchError, ProtocolError
from .moves import Move
from .oracle import OracleResult, query_oracle
from .protocol import select_move
from .render import ROTATIONS, Players, candidates_to_lines, history_lines, render, verdict_to_str
from .state import GameState


class GameRunner:
    """One oracle round per call to run(): show the position, then read one command."""

    def __init__(
        self,
        state: GameState,
        players: Players,
        orientation: str = 'down',
        query: Callable[[GameState], OracleResult] = query_oracle,
        read: Callable[[str], str] = input,
        write: Callable[[str], None] = print,
    ) -> None:
        self.state = state
        self.players = players
        self.orientation = orientation
        self.query = query
        self.read = read
        self.write = write
        self.candidates: List[Move] = []

    def show_candidates(self) -> None:
        for line in candidates_to_lines(self.state, self.candidates, self.players):
            self.write(line)

    def change_direction(self, command: str) -> None:
        self.orientation = ROTATIONS[command][self.orientation]
        self.write(render(self.state, self.orientation, self.players))
        self.write('')
        self.show_candidates()

    def run(self) -> bool:
        """Returns False once the user asks to quit."""
        self.write('Current board:')
        self.write(render(self.state, self.orientation, self.players))
        self.write('')
        try:
            result = self.query(self.state)
        except ProtocolError as e:
            self.write(repr(e))
            if e.stderr:
                self.write(e.stderr)
            if e.submitted:
                self.write(e.submitted)
            self.write('retrying?')
            return True
        self.candidates = result.moves
        self.write(verdict_to_str(result.verdict, self.state, self.players))
        self.write('')
        self.show_candidates()

        while True:
            try:
                raw = self.read(f"What move should {self.players.name(self.state.to_move)} make? ")
            except EOFError:
                return False
            raw = raw.strip().lower()
            if raw in ('quit', 'exit'):
                return False
            if raw == 'undo':
                self.state.undo_move()
                return True
            if raw == 'history':
                for line in history_lines(self.state, self.players):
                    self.write(line)
                return True
            if raw in ROTATIONS:
                self.change_direction(raw)
                continue
            if raw.isdigit():
                try:
                    move = select_move(self.candidates, int(raw))
                except InvalidSelection:
                    continue
                self.state.apply_move(move)
                return True


def main(argv: Optional[List[str]] = None) -> None:
    parser = argparse.ArgumentParser(description='Play 12-square shogi against an external oracle')
    parser.add_argument('p1', nargs='?', default='First Player', help='First player name')
    parser.add_argument('p2', nargs='?', default='Second Player', help='Second player name')
    parser.add_argument('--p1-color', choices=['red', 'green'], default='green', help='First player color')
    parser.add_argument('--orientation', choices=['up', 'down', 'left', 'right'], default='down',
                        help="Side of the screen the first player sits on")
    parser.add_argument('--no-color', action='store_true', help='Disable ANSI colors')
    parser.add_argument('--oracle', default=None, help='Path to the oracle executable')
    args = parser.parse_args(argv)

    if args.oracle:
        os.environ['SHOGI12_ORACLE_EXE'] = args.oracle

    players = Players.create(
        p1_name=args.p1,
        p2_name=args.p2,
        p1_color=args.p1_color,
        p2_color='red' if args.p1_color == 'green' else 'green',
        use_color=not args.no_color,
    )
    runner = GameRunner(GameState(), players, orientation=args.orientation)
    try:
        while runner.run():
            pass
    except OracleLaunchError as e:
        print(f"error: {e}")
        raise SystemExit(1)
