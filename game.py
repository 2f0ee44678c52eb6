from __future__ import annotations

# Facade module that re-exports the 12-square shogi core.
# Used by the Flask app and the console entry point.
# Single-responsibility modules live under shogi12_core/*.

# Keep subprocess import here so tests can patch game.subprocess.run
import subprocess  # noqa: F401
from typing import Tuple

try:
    from .shogi12_core.board import (  # type: ignore
        Board, Coord, Piece, PieceKind, Player, DROPPABLE_KINDS, parse_square, format_square, reserve_kind_for,
    )
    from .shogi12_core.reserve import Reserve  # type: ignore
    from .shogi12_core.moves import DropUndo, Move, MoveUndo, Outcome, Verdict  # type: ignore
    from .shogi12_core.state import GameState, History  # type: ignore
    from .shogi12_core.errors import (  # type: ignore
        Shogi12Error, IllegalMoveError, IllegalDrop, EmptyReserve, PieceMismatch, CorruptUndoRecord,
        ReserveOverflow, ProtocolError, OracleLaunchError, InvalidSelection,
    )
    from .shogi12_core.protocol import serialize, parse_verdict_and_moves, parse_move_line, select_move  # type: ignore
    from .shogi12_core.oracle import OracleResult, find_oracle_exe, query_oracle, _timeout  # type: ignore
    from .shogi12_core.render import Players, render, move_to_str, verdict_to_str, history_lines  # type: ignore
except ImportError:
    from shogi12_core.board import (  # type: ignore
        Board, Coord, Piece, PieceKind, Player, DROPPABLE_KINDS, parse_square, format_square, reserve_kind_for,
    )
    from shogi12_core.reserve import Reserve  # type: ignore
    from shogi12_core.moves import DropUndo, Move, MoveUndo, Outcome, Verdict  # type: ignore
    from shogi12_core.state import GameState, History  # type: ignore
    from shogi12_core.errors import (  # type: ignore
        Shogi12Error, IllegalMoveError, IllegalDrop, EmptyReserve, PieceMismatch, CorruptUndoRecord,
        ReserveOverflow, ProtocolError, OracleLaunchError, InvalidSelection,
    )
    from shogi12_core.protocol import serialize, parse_verdict_and_moves, parse_move_line, select_move  # type: ignore
    from shogi12_core.oracle import OracleResult, find_oracle_exe, query_oracle, _timeout  # type: ignore
    from shogi12_core.render import Players, render, move_to_str, verdict_to_str, history_lines  # type: ignore


def _run_proc_patchable(exe: str, path: str) -> Tuple[str, str]:
    """Adapter using this module's subprocess for test patching."""
    try:
        proc = subprocess.run([exe, path], capture_output=True, text=True, check=False, timeout=_timeout())
    except subprocess.TimeoutExpired as e:
        raise OracleLaunchError(f"oracle timed out after {e.timeout}s") from e
    except OSError as e:
        raise OracleLaunchError(f"could not start oracle {exe}: {e}") from e
    return proc.stdout or '', proc.stderr or ''


def fetch_moves(state: GameState) -> OracleResult:
    # Forward with patchable hooks so tests can stub game.find_oracle_exe / game.subprocess.run
    return query_oracle(state, find_exe=find_oracle_exe, run_proc=_run_proc_patchable)


def main() -> None:
    # CLI driver delegated to shogi12_core.cli
    try:
        from .shogi12_core.cli import main as _main  # type: ignore
    except ImportError:
        from shogi12_core.cli import main as _main  # type: ignore
    _main()


if __name__ == '__main__':
    main()
