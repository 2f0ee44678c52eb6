from __future__ import annotations

import os
import shutil
import subprocess
import tempfile
from dataclasses import dataclass
from typing import Callable, List, Optional, Tuple

from .errors import OracleLaunchError, ProtocolError
from .moves import Move, Verdict
from .protocol import parse_verdict_and_moves, serialize
from .state import GameState

EXE_NAME = 'checkState'

RunProc = Callable[[str, str], Tuple[str, str]]


def _debug_enabled() -> bool:
    return os.getenv('SHOGI12_DEBUG', '0').lower() in ('1', 'true', 'yes', 'on')


def _debug(msg: str) -> None:
    if _debug_enabled():
        print(f"[oracle] {msg}")


def _timeout() -> Optional[float]:
    raw = os.getenv('SHOGI12_ORACLE_TIMEOUT')
    if not raw:
        return None
    try:
        value = float(raw)
    except ValueError:
        _debug(f"ignoring bad SHOGI12_ORACLE_TIMEOUT={raw!r}")
        return None
    return value if value > 0 else None


def find_oracle_exe() -> Optional[str]:
    """
    Resolve the oracle executable.
    Order:
    1) Explicit env vars: SHOGI12_ORACLE_EXE, SHOGI12_ORACLE (must exist and be executable)
    2) ./checkState in the working directory
    3) Common build outputs relative to the project
    4) PATH lookup (checkState[.exe])
    Set SHOGI12_DEBUG=1 to print the resolution trace.
    """
    def _ok(path: str) -> bool:
        return os.path.isfile(path) and os.access(path, os.X_OK)

    for env_var in ('SHOGI12_ORACLE_EXE', 'SHOGI12_ORACLE'):
        p = os.getenv(env_var)
        if p and _ok(p):
            _debug(f"using {env_var}={p}")
            return p
        if p:
            _debug(f"{env_var} set but not executable: {p}")

    base = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
    candidates = [
        os.path.join(os.getcwd(), EXE_NAME),
        os.path.join(base, EXE_NAME),
        os.path.join(base, 'oracle', 'build', EXE_NAME),
        os.path.join(base, 'oracle', 'build', 'Release', EXE_NAME + '.exe'),
        os.path.join(base, 'build', EXE_NAME),
        os.path.join(base, 'build', EXE_NAME + '.exe'),
    ]
    for p in candidates:
        if _ok(p):
            _debug(f"found candidate {p}")
            return p
        _debug(f"missing candidate {p}")

    for name in (EXE_NAME, EXE_NAME + '.exe'):
        found = shutil.which(name)
        if found and _ok(found):
            _debug(f"found in PATH: {found}")
            return found
        _debug(f"not in PATH: {name}")
    return None


def run_oracle_default(exe: str, path: str) -> Tuple[str, str]:
    """Runs the oracle on a state file and returns (stdout, stderr). Exit status is ignored."""
    try:
        proc = subprocess.run(
            [exe, path],
            capture_output=True,
            text=True,
            check=False,
            timeout=_timeout(),
        )
    except subprocess.TimeoutExpired as e:
        raise OracleLaunchError(f"oracle timed out after {e.timeout}s") from e
    except OSError as e:
        raise OracleLaunchError(f"could not start oracle {exe}: {e}") from e
    _debug(f"{exe} exited with {proc.returncode}")
    return proc.stdout or '', proc.stderr or ''


@dataclass
class OracleResult:
    """Verdict for the side to move plus every legal candidate."""
    verdict: Verdict
    moves: List[Move]


def query_oracle(
    state: GameState,
    *,
    find_exe: Optional[Callable[[], Optional[str]]] = None,
    run_proc: Optional[RunProc] = None,
) -> OracleResult:
    """
    Write the position to a private temp file, run the oracle on it and decode its answer.
    The file lives exactly as long as the call, on every exit path.
    """
    find_exe = find_exe or find_oracle_exe
    run_proc = run_proc or run_oracle_default

    text = serialize(state)  # may raise ReserveOverflow, before anything is written
    exe = find_exe()
    if not exe:
        raise OracleLaunchError(f"oracle executable not found. Build {EXE_NAME} and/or set SHOGI12_ORACLE_EXE.")

    fd, path = tempfile.mkstemp(prefix='12shogi-', suffix='.txt')
    try:
        with os.fdopen(fd, 'w', encoding='ascii', newline='\n') as f:
            f.write(text)
        _debug(f"running {exe} {path}")
        stdout, stderr = run_proc(exe, path)
        try:
            verdict, moves = parse_verdict_and_moves(stdout.splitlines())
        except ProtocolError as e:
            e.stderr = stderr
            e.submitted = text
            raise
    finally:
        try:
            os.remove(path)
        except FileNotFoundError:
            _debug(f"state file already gone: {path}")
    return OracleResult(verdict=verdict, moves=moves)
