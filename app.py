from __future__ import annotations

import os
import threading
import uuid
from collections import OrderedDict
from typing import Any, Dict, Generator, List

from flask import Flask, jsonify, request

from game import (
    FLOWER_CELL,
    Action,
    Board,
    Card,
    ConsolidateDragons,
    Location,
    Move,
    NoSolution,
    SolveResult,
    StepEvent,
    Won,
    WonEvent,
    apply_validated,
    consolidate_dragons,
    is_won,
    iter_steps,
    make_board,
    new_game,
    parse_card,
    possible_moves,
    solve,
    valid_destinations,
)

DEFAULT_MAX_STATES = int(os.getenv("SHENZHEN_MAX_STATES", "200000"))
MAX_SESSIONS = int(os.getenv("SHENZHEN_MAX_SESSIONS", "64"))

app = Flask(__name__)

# Parked stepping searches, one generator per session id, least recently used first.
# A session being advanced is taken out of the dict until its step finishes.
_STEP_SESSIONS: "OrderedDict[str, Generator]" = OrderedDict()
_STEP_LOCK = threading.Lock()


# ---------- JSON codecs ----------

def card_to_json(c: Card) -> Dict[str, Any]:
    return {"color": c.color, "rank": c.rank}


def card_from_json(obj: Any) -> Card:
    if isinstance(obj, str):
        return parse_card(obj)
    rank = obj["rank"]
    if isinstance(rank, str) and rank.isdigit():
        rank = int(rank)
    return Card(obj.get("color"), rank)


def _stack_to_json(stack) -> List[Dict[str, Any]]:
    return [card_to_json(c) for c in stack]


def _stack_from_json(items: Any) -> List[Card]:
    return [card_from_json(x) for x in (items or [])]


def board_to_json(b: Board) -> Dict[str, Any]:
    """Zones as lists of cards, each list top card first."""
    return {
        "free": [_stack_to_json(s) for s in b.free_cells],
        "flower": _stack_to_json(b.flower),
        "goals": [_stack_to_json(s) for s in b.goals],
        "tableau": [_stack_to_json(s) for s in b.tableau],
        "won": is_won(b),
    }


def board_from_json(obj: Dict[str, Any]) -> Board:
    return make_board(
        free_cells=[_stack_from_json(s) for s in obj.get("free", [])],
        flower=_stack_from_json(obj.get("flower", [])),
        goals=[_stack_from_json(s) for s in obj.get("goals", [])],
        tableau=[_stack_from_json(s) for s in obj.get("tableau", [])],
    )


def location_to_json(loc: Location) -> Dict[str, Any]:
    return {"zone": loc.zone, "index": loc.index, "count": loc.count}


def location_from_json(obj: Dict[str, Any]) -> Location:
    zone = str(obj["zone"])
    index = obj.get("index")
    if zone == FLOWER_CELL:
        index = None
    elif index is not None:
        index = int(index)
    return Location(zone, index, int(obj.get("count", 1)))


def action_to_json(action: Action) -> Dict[str, Any]:
    if isinstance(action, ConsolidateDragons):
        return {"type": "consolidate", "color": action.color, "text": str(action)}
    return {
        "type": "move",
        "from": location_to_json(action.src),
        "to": location_to_json(action.dst),
        "text": str(action),
    }


def move_from_json(obj: Dict[str, Any]) -> Move:
    return Move(location_from_json(obj["from"]), location_from_json(obj["to"]))


def result_to_json(res: SolveResult) -> Dict[str, Any]:
    if isinstance(res, Won):
        return {
            "won": True,
            "moves": [action_to_json(a) for a in res.moves],
            "board": board_to_json(res.board),
            "visited": res.visited,
            "complete": True,
        }
    return {"won": False, "moves": [], "visited": res.visited, "complete": res.complete}


def _board_arg(body: Dict[str, Any]) -> Board:
    b = body.get("board")
    if not isinstance(b, dict):
        raise ValueError("board required")
    return board_from_json(b)


def _json_body() -> Dict[str, Any]:
    body = request.get_json(force=True, silent=True)
    return body if isinstance(body, dict) else {}


def _bad_request(e: Exception) -> Any:
    return jsonify({"ok": False, "error": f"bad request: {e}"}), 400


# ---------- Board API ----------

@app.post("/api/new")
def api_new() -> Any:
    body = _json_body()
    try:
        seed = body.get("seed", None)
        board = new_game(seed=int(seed) if seed is not None else None)
    except (TypeError, ValueError) as e:
        return _bad_request(e)
    return jsonify({
        "ok": True,
        "board": board_to_json(board),
        "moves": [action_to_json(a) for a in possible_moves(board)],
    })


@app.post("/api/moves")
def api_moves() -> Any:
    body = _json_body()
    try:
        board = _board_arg(body)
    except (KeyError, TypeError, ValueError) as e:
        return _bad_request(e)
    return jsonify({"ok": True, "moves": [action_to_json(a) for a in possible_moves(board)]})


@app.post("/api/destinations")
def api_destinations() -> Any:
    body = _json_body()
    try:
        board = _board_arg(body)
        src = location_from_json(body["from"])
        dests = valid_destinations(board, src)
    except (KeyError, TypeError, ValueError) as e:
        return _bad_request(e)
    return jsonify({"ok": True, "destinations": [location_to_json(d) for d in dests]})


@app.post("/api/move")
def api_move() -> Any:
    body = _json_body()
    try:
        board = _board_arg(body)
        move = move_from_json(body["move"])
        next_board = apply_validated(board, move)
    except (KeyError, TypeError, ValueError) as e:
        return _bad_request(e)
    return jsonify({
        "ok": True,
        "changed": next_board != board,
        "board": board_to_json(next_board),
        "moves": [action_to_json(a) for a in possible_moves(next_board)],
    })


@app.post("/api/consolidate")
def api_consolidate() -> Any:
    body = _json_body()
    try:
        board = _board_arg(body)
        next_board = consolidate_dragons(board, str(body["color"]))
    except (KeyError, TypeError, ValueError) as e:
        return _bad_request(e)
    return jsonify({"ok": True, "changed": next_board != board, "board": board_to_json(next_board)})


@app.post("/api/solve")
def api_solve() -> Any:
    body = _json_body()
    try:
        board = _board_arg(body)
        max_states = int(body.get("maxStates", DEFAULT_MAX_STATES))
    except (KeyError, TypeError, ValueError) as e:
        return _bad_request(e)
    res = solve(board, max_states=max_states, canonical=bool(body.get("canonical", False)))
    out = {"ok": True}
    out.update(result_to_json(res))
    return jsonify(out)


# ---------- Stepping API ----------

def _event_to_json(event: Any) -> Dict[str, Any]:
    if isinstance(event, WonEvent):
        return {
            "event": "won",
            "moves": [action_to_json(a) for a in event.moves],
            "board": board_to_json(event.board),
        }
    assert isinstance(event, StepEvent)
    return {
        "event": "step",
        "board": board_to_json(event.board),
        "path": [action_to_json(a) for a in event.path],
        "candidates": [
            {"action": action_to_json(c.action), "score": c.score, "won": is_won(c.board)}
            for c in event.candidates
        ],
    }


def _park(session: str, stepper: Generator) -> None:
    """Stores a session as most recently used, closing the oldest ones past MAX_SESSIONS."""
    evicted: List[Generator] = []
    with _STEP_LOCK:
        _STEP_SESSIONS[session] = stepper
        _STEP_SESSIONS.move_to_end(session)
        while len(_STEP_SESSIONS) > max(MAX_SESSIONS, 1):
            _, old = _STEP_SESSIONS.popitem(last=False)
            evicted.append(old)
    for old in evicted:
        old.close()


@app.post("/api/step/start")
def api_step_start() -> Any:
    body = _json_body()
    try:
        board = _board_arg(body)
        max_states = int(body.get("maxStates", DEFAULT_MAX_STATES))
        stepper = iter_steps(board, max_states=max_states)
    except (KeyError, TypeError, ValueError) as e:
        return _bad_request(e)
    session = uuid.uuid4().hex
    _park(session, stepper)
    return jsonify({"ok": True, "session": session})


@app.post("/api/step")
def api_step() -> Any:
    body = _json_body()
    session = str(body.get("session", ""))
    with _STEP_LOCK:
        stepper = _STEP_SESSIONS.pop(session, None)
    if stepper is None:
        return jsonify({"ok": False, "error": "unknown session"}), 404
    try:
        event = next(stepper)
    except StopIteration as stop:
        res = stop.value if stop.value is not None else NoSolution()
        out = {"ok": True, "event": "done"}
        out.update(result_to_json(res))
        return jsonify(out)
    if not isinstance(event, WonEvent):
        _park(session, stepper)
    out = {"ok": True}
    out.update(_event_to_json(event))
    return jsonify(out)


@app.post("/api/step/stop")
def api_step_stop() -> Any:
    body = _json_body()
    session = str(body.get("session", ""))
    with _STEP_LOCK:
        stepper = _STEP_SESSIONS.pop(session, None)
    if stepper is None:
        return jsonify({"ok": False, "error": "unknown session"}), 404
    stepper.close()
    return jsonify({"ok": True})


# Entrypoint for "python app.py"
if __name__ == "__main__":
    debug = os.getenv("FLASK_DEBUG", os.getenv("DEBUG", "0")).lower() in ("1", "true", "yes", "on")
    app.run(host="0.0.0.0", port=int(os.getenv("PORT", "5000")), debug=debug)
