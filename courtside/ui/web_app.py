"""
Web application module for the Courtside basketball bench tracker.

This module contains the Flask server providing the JSON API through which
the bench UI drives the game clock, substitutions, fouls and periods.
"""
import uuid
from dataclasses import asdict
from typing import Any, Dict, List

from flask import Flask, Response, jsonify, request

from ..config import Config
from ..errors import GameError, InvalidStateError, NotFoundError, ValidationError
from ..models import Player
from ..services import GameStore, ServiceFactory
from ..utils import APP_TITLE, CLOCK_ADJUST_STEPS, PERIOD_LABELS, fmt_clock


def _parse_players(players_data: List[Dict[str, Any]]) -> List[Player]:
    players = []
    for player_data in players_data:
        if not isinstance(player_data, dict) or not str(player_data.get("name", "")).strip():
            raise ValidationError("Every player needs a name")
        players.append(Player(
            id=str(player_data.get("id") or uuid.uuid4()),
            number=str(player_data.get("number", "")).strip(),
            name=str(player_data["name"]).strip(),
        ))
    return players


def _int_field(value: Any, name: str) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{name} must be a whole number") from None


def _json_body() -> Dict[str, Any]:
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


def create_app(config_class=Config) -> Flask:
    """
    Create and configure the Flask application with API endpoints.

    Args:
        config_class: Configuration object loaded into ``app.config``

    Returns:
        Configured Flask application instance
    """
    app = Flask(__name__)
    app.config.from_object(config_class)

    factory = ServiceFactory(
        data_dir=app.config["DATA_DIR"],
        foul_limit=app.config["FOUL_LIMIT"],
    )
    app.extensions["courtside"] = factory

    # ==================== Error handling ==================== #

    def _error_response(exc: GameError, status: int):
        app.logger.warning("Rejected %s %s: %s", request.method, request.path, exc)
        return jsonify({"success": False, "error": str(exc)}), status

    @app.errorhandler(ValidationError)
    def handle_validation_error(exc):
        return _error_response(exc, 400)

    @app.errorhandler(NotFoundError)
    def handle_not_found(exc):
        return _error_response(exc, 404)

    @app.errorhandler(InvalidStateError)
    def handle_invalid_state(exc):
        return _error_response(exc, 409)

    # ==================== Helpers ==================== #

    def _store(game_id: str, sync: bool = True) -> GameStore:
        """Fetch a game's store and, unless told not to, bring its clock up to date."""
        store = factory.get_game_store(game_id)
        if sync:
            store.sync_clock()
        return store

    def _build_clock_data(store: GameStore) -> dict:
        game = store.snapshot()
        return {
            "time_remaining": game.time_remaining,
            "display": fmt_clock(game.time_remaining),
            "is_running": game.is_running,
            "period_number": game.current_period.period_number,
            "period_label": PERIOD_LABELS.get(game.period_count, "Period"),
            "period_count": game.period_count,
            "adjust_steps": list(CLOCK_ADJUST_STEPS),
        }

    def _build_state(store: GameStore) -> dict:
        game = store.snapshot()
        return {
            "success": True,
            "game": game.to_json(),
            "clock": _build_clock_data(store),
            "substitutions": store.substitution_table(),
            "period_fouls": store.period_foul_count(),
            "game_over": game.is_game_over,
        }

    # ==================== Game Endpoints ==================== #

    @app.route("/api/games", methods=["GET"])
    def list_games():
        """List saved games, newest first."""
        return jsonify({
            "success": True,
            "games": factory.get_persistence_service().list_games(),
        })

    @app.route("/api/games", methods=["POST"])
    def create_game():
        """Create a game from a roster and a format."""
        data = _json_body()
        store = factory.create_game(
            team_name=str(data.get("team_name", "")).strip(),
            opponent=str(data.get("opponent", "")).strip(),
            players=_parse_players(data.get("players", [])),
            period_count=_int_field(data.get("period_count", 2), "period_count"),
            period_length_minutes=_int_field(data.get("period_length", 20), "period_length"),
        )
        app.logger.info("Created game %s", store.game_id)
        return jsonify(_build_state(store)), 201

    @app.route("/api/games/<game_id>", methods=["GET"])
    def get_game(game_id: str):
        """Get current game state."""
        return jsonify(_build_state(_store(game_id)))

    # ==================== Clock Endpoints ==================== #

    @app.route("/api/games/<game_id>/clock/start", methods=["POST"])
    def start_clock(game_id: str):
        store = _store(game_id)
        store.start_clock()
        return jsonify({"success": True, "clock": _build_clock_data(store)})

    @app.route("/api/games/<game_id>/clock/pause", methods=["POST"])
    def pause_clock(game_id: str):
        store = _store(game_id)
        store.pause_clock()
        return jsonify({"success": True, "clock": _build_clock_data(store)})

    @app.route("/api/games/<game_id>/clock/tick", methods=["POST"])
    def tick_clock(game_id: str):
        """Advance the clock by one second (the host's one-per-second callback)."""
        # Syncing first would charge the same second twice
        store = _store(game_id, sync=False)
        store.tick()
        return jsonify({"success": True, "clock": _build_clock_data(store)})

    @app.route("/api/games/<game_id>/clock/adjust", methods=["POST"])
    def adjust_clock(game_id: str):
        """Apply a manual clock correction (the clock must be paused)."""
        data = _json_body()
        store = _store(game_id)
        store.adjust_clock(_int_field(data.get("seconds", 0), "seconds"))
        return jsonify({"success": True, "clock": _build_clock_data(store)})

    # ==================== Substitution Endpoints ==================== #

    @app.route("/api/games/<game_id>/substitutions/preview", methods=["POST"])
    def preview_substitution(game_id: str):
        """Report the pending on-court count for a candidate selection."""
        data = _json_body()
        preview = _store(game_id).preview_substitution(
            data.get("subbed_in", []), data.get("subbed_out", [])
        )
        return jsonify({
            "success": True,
            "on_court_count": preview.on_court_count,
            "max_on_court": preview.max_on_court,
            "too_many_players": preview.too_many_players,
        })

    @app.route("/api/games/<game_id>/substitutions", methods=["POST"])
    def record_substitution(game_id: str):
        data = _json_body()
        store = _store(game_id)
        event_time = data.get("event_time")
        store.record_substitution(
            data.get("subbed_in", []),
            data.get("subbed_out", []),
            event_time=_int_field(event_time, "event_time") if event_time is not None else None,
        )
        return jsonify(_build_state(store)), 201

    @app.route("/api/games/<game_id>/substitutions/<event_id>", methods=["PUT"])
    def edit_substitution(game_id: str, event_id: str):
        data = _json_body()
        store = _store(game_id)
        event_time = data.get("event_time")
        store.edit_substitution(
            event_id,
            event_time=_int_field(event_time, "event_time") if event_time is not None else None,
            subbed_in=data.get("subbed_in"),
            subbed_out=data.get("subbed_out"),
        )
        return jsonify(_build_state(store))

    @app.route("/api/games/<game_id>/substitutions/<event_id>", methods=["DELETE"])
    def delete_substitution(game_id: str, event_id: str):
        store = _store(game_id)
        store.delete_substitution(event_id)
        return jsonify(_build_state(store))

    # ==================== Foul and Period Endpoints ==================== #

    @app.route("/api/games/<game_id>/fouls", methods=["POST"])
    def record_foul(game_id: str):
        data = _json_body()
        player_id = data.get("player_id")
        if not player_id:
            raise ValidationError("Player must be selected")
        store = _store(game_id)
        store.record_foul(str(player_id))
        return jsonify(_build_state(store)), 201

    @app.route("/api/games/<game_id>/periods/end", methods=["POST"])
    def end_period(game_id: str):
        store = _store(game_id)
        game = store.end_period()
        message = "Game over" if game.is_game_over else f"Period {game.current_period.period_number} ready"
        return jsonify({**_build_state(store), "message": message})

    # ==================== Report Endpoints ==================== #

    @app.route("/api/games/<game_id>/report", methods=["GET"])
    def get_report(game_id: str):
        """Get the box score for a game."""
        analytics = factory.create_analytics_service(_store(game_id))
        return jsonify({"success": True, "report": asdict(analytics.generate_game_report())})

    @app.route("/api/games/<game_id>/report.csv", methods=["GET"])
    def export_report(game_id: str):
        """Export the box score as CSV."""
        analytics = factory.create_analytics_service(_store(game_id))
        return Response(
            analytics.export_game_report_csv(),
            mimetype="text/csv",
            headers={"Content-Disposition": f"attachment; filename=box_score_{game_id}.csv"},
        )

    return app


def run_web_app(config_class=Config) -> None:
    """
    Run the web application.

    Args:
        config_class: Configuration object providing HOST, PORT and DATA_DIR
    """
    app = create_app(config_class)
    app.logger.info("Starting %s on %s:%s", APP_TITLE, app.config["HOST"], app.config["PORT"])
    # Bind only to localhost by default
    app.run(host=app.config["HOST"], port=app.config["PORT"], debug=False)
