from __future__ import annotations

import os
import sys
import threading
from typing import Any, Dict, List, Optional

from flask import Flask, Response, jsonify, request

# Ensure package imports work when executed directly from repo root or as module
if __package__ in (None, ""):
    sys.path.insert(0, os.path.abspath(os.path.dirname(__file__)))

from game import (  # noqa: E402
    DROPPABLE_KINDS,
    GameState,
    IllegalMoveError,
    InvalidSelection,
    Move,
    OracleLaunchError,
    Player,
    Players,
    ProtocolError,
    Verdict,
    fetch_moves,
    render,
    select_move,
)

app = Flask(__name__)

# The one live game of this process, plus the candidates from its last oracle query.
_lock = threading.Lock()
_game: Dict[str, Any] = {"state": GameState(), "moves": [], "verdict": None}


def state_to_json(s: GameState) -> Dict[str, Any]:
    return {
        "board": [
            [None if p is None else p.owner.sign + p.kind.code for p in row]
            for row in s.board.rows()
        ],
        "reserves": {
            p.sign: {k.code: s.reserve.count(p, k) for k in DROPPABLE_KINDS}
            for p in (Player.FIRST, Player.SECOND)
        },
        "toMove": s.to_move.sign,
        "plies": len(s.history()),
    }


def move_to_json(m: Move) -> Dict[str, Any]:
    return {
        "id": m.sequence_id,
        "from": m.source_square,
        "to": m.destination_square,
        "piece": m.piece.code,
        "outcome": m.outcome.value,
        "plies": m.plies,
    }


def verdict_to_json(v: Optional[Verdict]) -> Optional[Dict[str, Any]]:
    if v is None:
        return None
    return {"outcome": v.outcome.value, "plies": v.plies}


def _error(message: str, status: int) -> Any:
    return jsonify({"ok": False, "error": message}), status


@app.get("/")
def index() -> Any:
    with _lock:
        text = render(_game["state"], "down", Players(use_color=False))
    return Response(text + "\n", mimetype="text/plain; charset=utf-8")


@app.get("/api/state")
def api_state() -> Any:
    with _lock:
        return jsonify({
            "ok": True,
            "state": state_to_json(_game["state"]),
            "verdict": verdict_to_json(_game["verdict"]),
            "moves": [move_to_json(m) for m in _game["moves"]],
        })


@app.post("/api/new")
def api_new() -> Any:
    with _lock:
        _game["state"] = GameState()
        _game["moves"] = []
        _game["verdict"] = None
        return jsonify({"ok": True, "state": state_to_json(_game["state"])})


@app.post("/api/moves")
def api_moves() -> Any:
    with _lock:
        state = _game["state"]
        try:
            result = fetch_moves(state)
        except ProtocolError as e:
            return jsonify({
                "ok": False,
                "error": str(e),
                "line": e.line,
                "expected": e.expected,
                "stderr": e.stderr,
            }), 502
        except OracleLaunchError as e:
            return _error(str(e), 503)
        _game["moves"] = list(result.moves)
        _game["verdict"] = result.verdict
        return jsonify({
            "ok": True,
            "state": state_to_json(state),
            "verdict": verdict_to_json(result.verdict),
            "moves": [move_to_json(m) for m in result.moves],
        })


@app.post("/api/move")
def api_move() -> Any:
    body = request.get_json(force=True, silent=True) or {}
    try:
        move_id = int(body["id"])
    except (KeyError, TypeError, ValueError):
        return _error("id required", 400)
    with _lock:
        state = _game["state"]
        moves: List[Move] = _game["moves"]
        try:
            move = select_move(moves, move_id)
            state.apply_move(move)
        except (InvalidSelection, IllegalMoveError) as e:
            return jsonify({"ok": False, "error": str(e), "moves": [move_to_json(m) for m in moves]}), 400
        _game["moves"] = []
        _game["verdict"] = None
        return jsonify({"ok": True, "move": move_to_json(move), "state": state_to_json(state)})


@app.post("/api/undo")
def api_undo() -> Any:
    with _lock:
        state = _game["state"]
        undone = state.undo_move()
        _game["moves"] = []
        _game["verdict"] = None
        return jsonify({
            "ok": True,
            "undone": move_to_json(undone) if undone is not None else None,
            "state": state_to_json(state),
        })


@app.get("/api/history")
def api_history() -> Any:
    with _lock:
        return jsonify({"ok": True, "history": [move_to_json(m) for m in _game["state"].history()]})


@app.get("/api/render")
def api_render() -> Any:
    orientation = request.args.get("orientation", "down")
    with _lock:
        try:
            text = render(_game["state"], orientation, Players(use_color=False))
        except ValueError as e:
            return _error(str(e), 400)
    return jsonify({"ok": True, "text": text})


# Entrypoint for "python app.py"
if __name__ == "__main__":
    debug = os.getenv("FLASK_DEBUG", os.getenv("DEBUG", "0")).lower() in ("1", "true", "yes", "on")
    app.run(host="0.0.0.0", port=int(os.getenv("PORT", "5000")), debug=debug)
