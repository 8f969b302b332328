# frontend/api.py

import threading

from flask import Blueprint, current_app, jsonify, request

from backend.config import load_config
from backend.exceptions import InvalidCoordinate
from backend.game import GameSession
from backend.scheduler import ThreadingScheduler

api_blueprint = Blueprint("api", __name__)

# Global session (single player, in-memory only)
game = None
# guards replacing the global session
_game_lock = threading.Lock()


def _new_session(seed=None):
    global game
    with _game_lock:
        if game is not None:
            game.close()
        config = load_config(current_app.config.get("GAME_CONFIG_SECTION", "default"))
        scheduler_factory = current_app.config.get("SCHEDULER_FACTORY", ThreadingScheduler)
        game = GameSession(config=config, seed=seed, scheduler=scheduler_factory())
        return game


def _get_game():
    with _game_lock:
        session = game
    if session is None:
        return _new_session()
    return session


@api_blueprint.route("/new_game", methods=["POST"])
def new_game():
    data = request.get_json(silent=True) or {}
    seed = data.get("seed")

    if game is None or seed is not None:
        session = _new_session(seed)
        return jsonify(session.get_state())
    return jsonify(game.reinit())


@api_blueprint.route("/step", methods=["POST"])
def step():
    data = request.get_json(silent=True) or {}
    action = data.get("action")
    row = data.get("row")
    col = data.get("col")

    if action not in {"reveal", "flag"} or row is None or col is None:
        return jsonify({"error": "Invalid input"}), 400

    try:
        row, col = int(row), int(col)
    except (TypeError, ValueError):
        return jsonify({"error": "row and col must be integers"}), 400

    try:
        result = _get_game().step(action, row, col)
    except InvalidCoordinate as exc:
        return jsonify({"error": str(exc)}), 400
    return jsonify(result)


@api_blueprint.route("/state", methods=["GET"])
def get_state():
    return jsonify(_get_game().get_state())


@api_blueprint.route("/log", methods=["GET"])
def get_log():
    return jsonify(_get_game().event_log.to_list())


@api_blueprint.route("/acknowledge", methods=["POST"])
def acknowledge():
    session = _get_game()
    summary = session.acknowledge_completion()
    if summary is None:
        return jsonify({"error": "Session not completed"}), 409
    return jsonify({"summary": summary.to_dict(), "log": session.event_log.to_list()})
