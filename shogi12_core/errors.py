from __future__ import annotations

from typing import Optional


class Shogi12Error(Exception):
    """Base class for every error raised by the game core."""


class IllegalMoveError(Shogi12Error, ValueError):
    """The supplied move does not fit the current state (e.g. a stale candidate list)."""


class IllegalDrop(IllegalMoveError):
    pass


class EmptyReserve(IllegalMoveError):
    pass


class PieceMismatch(IllegalMoveError):
    pass


class CorruptUndoRecord(Shogi12Error, RuntimeError):
    """Undo would drive a reserve count negative. This is a defect, not user input."""


class ReserveOverflow(Shogi12Error, ValueError):
    """A reserve count does not fit the single-digit slot of the oracle file."""


class InvalidSelection(Shogi12Error, IndexError):
    pass


class OracleLaunchError(Shogi12Error, RuntimeError):
    """The oracle could not be started or did not finish."""


class ProtocolError(Shogi12Error, RuntimeError):
    """Malformed oracle output. Keeps the offending raw line for diagnosis."""

    def __init__(self, line: Optional[str], expected: str, line_no: Optional[int] = None) -> None:
        self.line = line
        self.expected = expected
        self.line_no = line_no
        self.stderr: Optional[str] = None
        self.submitted: Optional[str] = None
        where = f"line {line_no}" if line_no is not None else "output"
        got = "end of output" if line is None else repr(line)
        super().__init__(f"{where}: expected {expected}, got {got}")
