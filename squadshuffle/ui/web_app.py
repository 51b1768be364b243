"""
Web application module for SquadShuffle.

This module contains the Flask server that exposes the roster, team shuffle,
match timer and scoreboard as JSON API endpoints.
"""
import logging
from typing import Optional

from flask import Flask, jsonify, request
from werkzeug.exceptions import HTTPException

from ..models import MatchState, MatchStateError
from ..services import (
    InsufficientPlayersError, PlayerValidationError, ServiceFactory, get_team_stats
)
from ..services.team_formation import RandomSource
from ..utils.constants import (
    APP_TITLE, DEFAULT_DATA_DIR, DEFAULT_HOST, DEFAULT_PORT, MATCH_DURATIONS,
    SUPPORTED_TEAM_SIZES
)

logger = logging.getLogger(__name__)


def _whole_number(value) -> int:
    """
    Parse a JSON value as an integer without truncating.

    Raises:
        ValueError: For booleans and non-integral numbers
        TypeError: For values that are not numbers or numeric strings
    """
    if isinstance(value, bool):
        raise ValueError(f"Not a whole number: {value}")
    if isinstance(value, float):
        if not value.is_integer():
            raise ValueError(f"Not a whole number: {value}")
        return int(value)
    return int(value)


class WebAppState:
    """
    State holder for the web application.

    Owns the services built by the ServiceFactory plus the timer and
    scoreboard bound to the current match, if one has been saved.
    """

    def __init__(self, data_dir: str = DEFAULT_DATA_DIR, rng: Optional[RandomSource] = None):
        self.service_factory = ServiceFactory(data_dir=data_dir, rng=rng)

        services = self.service_factory.create_complete_service_suite()
        self.roster_service = services['roster']
        self.match_service = services['match']
        self.persistence_service = services['persistence']

        self.match_state: Optional[MatchState] = None
        self.timer_service = None
        self.scoreboard_service = None
        saved_match = self.match_service.load_match()
        if saved_match is not None:
            self.attach_match(saved_match)

    def attach_match(self, match_state: MatchState) -> None:
        """Bind timer and scoreboard services to a match."""
        self.match_state = match_state
        self.timer_service = self.service_factory.create_timer_service(match_state)
        self.scoreboard_service = self.service_factory.create_scoreboard_service(
            match_state, self.timer_service
        )

    def require_match(self) -> MatchState:
        if self.match_state is None:
            raise MatchStateError("No teams saved for a match. Shuffle and save teams first!")
        return self.match_state

    def save_match(self) -> None:
        self.persistence_service.save_current_match(self.require_match())


def create_app(state: Optional[WebAppState] = None) -> Flask:
    """
    Create and configure the Flask application with API endpoints.

    Args:
        state: Application state; a default one backed by DEFAULT_DATA_DIR is
               created when omitted

    Returns:
        Configured Flask application instance
    """
    app = Flask(__name__)
    app_state = state or WebAppState()
    app.config["APP_STATE"] = app_state

    def _json_body() -> dict:
        return request.get_json(silent=True) or {}

    def _error(message: str, status: int):
        return jsonify({"success": False, "error": message}), status

    def _timer_payload() -> dict:
        app_state.timer_service.check_expired()
        return app_state.timer_service.get_timer_status()

    def _match_payload() -> dict:
        match_state = app_state.require_match()
        result = app_state.scoreboard_service.get_result()
        return {
            "match": match_state.to_json(),
            "timer": _timer_payload(),
            "scores": app_state.scoreboard_service.get_scores(),
            "result": result.to_dict() if result else None,
        }

    @app.errorhandler(MatchStateError)
    def handle_match_state_error(e):
        return _error(str(e), 400)

    @app.errorhandler(PlayerValidationError)
    def handle_player_validation_error(e):
        return _error(str(e), 400)

    @app.errorhandler(InsufficientPlayersError)
    def handle_insufficient_players(e):
        return jsonify({
            "success": False,
            "error": str(e),
            "shortfall": e.shortfall,
            "suggestion": f"Add {e.shortfall} more players.",
        }), 409

    # ==================== Roster ==================== #

    @app.route("/api/info", methods=["GET"])
    def get_info():
        """Static configuration the client needs to build its controls."""
        return jsonify({
            "success": True,
            "title": APP_TITLE,
            "team_sizes": SUPPORTED_TEAM_SIZES,
            "match_durations": MATCH_DURATIONS,
            "positions": app_state.roster_service.VALID_POSITIONS,
        })

    @app.route("/api/players", methods=["GET"])
    def get_players():
        """Get all players with summaries."""
        roster = app_state.roster_service
        return jsonify({
            "success": True,
            "players": [roster.get_player_summary(p) for p in roster.players],
            "count": len(roster.players),
        })

    @app.route("/api/players", methods=["POST"])
    def create_player():
        """Add a player to the roster."""
        data = _json_body()
        try:
            skill_level = _whole_number(data.get("skill_level", 3))
        except (TypeError, ValueError):
            return _error("Skill level must be a whole number", 400)

        player = app_state.roster_service.add_player(
            name=data.get("name", ""),
            position=data.get("position", "MID"),
            skill_level=skill_level,
        )
        return jsonify({
            "success": True,
            "player": app_state.roster_service.get_player_summary(player),
        }), 201

    @app.route("/api/players/<player_id>", methods=["DELETE"])
    def delete_player(player_id: str):
        """Remove a player from the roster."""
        if app_state.roster_service.get_player(player_id) is None:
            return _error("Player not found", 404)
        player = app_state.roster_service.remove_player(player_id)
        return jsonify({"success": True, "message": f"Removed {player.name}"})

    @app.route("/api/team-size", methods=["GET"])
    def get_team_size():
        return jsonify({"success": True, "team_size": app_state.roster_service.team_size})

    @app.route("/api/team-size", methods=["PUT"])
    def set_team_size():
        data = _json_body()
        try:
            team_size = _whole_number(data.get("team_size"))
        except (TypeError, ValueError):
            return _error("Team size must be a number", 400)
        app_state.roster_service.set_team_size(team_size)
        return jsonify({"success": True, "team_size": team_size})

    # ==================== Teams ==================== #

    @app.route("/api/teams/validate", methods=["GET"])
    def validate_teams():
        validation = app_state.match_service.validate()
        return jsonify({"success": True, "validation": validation.to_dict()})

    @app.route("/api/teams/shuffle", methods=["POST"])
    def shuffle_teams():
        """Validate the roster, then shuffle it into teams."""
        validation = app_state.match_service.validate()
        if app_state.roster_service.players and not validation.valid:
            return jsonify({
                "success": False,
                "error": validation.message,
                "validation": validation.to_dict(),
            }), 400

        result = app_state.match_service.shuffle_teams()
        teams = []
        for team in result.teams:
            team_data = team.to_dict()
            team_data["stats"] = get_team_stats(team).to_dict()
            teams.append(team_data)

        return jsonify({
            "success": True,
            "teams": teams,
            "substitutes": [p.to_dict() for p in result.substitutes],
            "total_teams": result.total_teams,
            "warnings": [w.message for w in validation.warnings],
        })

    @app.route("/api/teams/coin-toss", methods=["POST"])
    def coin_toss():
        toss = app_state.match_service.coin_toss()
        return jsonify({"success": True, **toss.to_dict()})

    # ==================== Match ==================== #

    @app.route("/api/match", methods=["POST"])
    def save_match():
        """Save the shuffled teams as the current match."""
        data = _json_body()
        try:
            duration = (
                _whole_number(data["duration_seconds"]) if "duration_seconds" in data else None
            )
        except (TypeError, ValueError):
            return _error("Duration must be a number of seconds", 400)
        try:
            match_state = app_state.match_service.save_teams_for_match(duration)
        except ValueError as e:
            return _error(str(e), 400)
        app_state.attach_match(match_state)
        return jsonify({"success": True, "message": "Teams saved! Start the match when ready."})

    @app.route("/api/match", methods=["GET"])
    def get_match():
        if app_state.match_state is None:
            return _error("No match saved", 404)
        return jsonify({"success": True, **_match_payload()})

    @app.route("/api/match/timer", methods=["GET"])
    def get_timer():
        app_state.require_match()
        payload = _timer_payload()
        app_state.save_match()
        return jsonify({"success": True, "timer": payload})

    @app.route("/api/match/timer/configure", methods=["POST"])
    def configure_timer():
        app_state.require_match()
        data = _json_body()
        try:
            app_state.timer_service.configure_duration(_whole_number(data.get("duration_seconds")))
        except (TypeError, ValueError) as e:
            return _error(str(e) or "Invalid duration", 400)
        app_state.save_match()
        return jsonify({"success": True, "timer": _timer_payload()})

    @app.route("/api/match/timer/<action>", methods=["POST"])
    def control_timer(action: str):
        """Start, pause, resume, stop or reset the match countdown."""
        app_state.require_match()
        timer = app_state.timer_service
        actions = {
            "start": timer.start_match,
            "pause": timer.pause_match,
            "resume": timer.resume_match,
            "stop": timer.stop_match,
            "reset": timer.reset_match,
        }
        if action not in actions:
            return _error(f"Unknown timer action: {action}", 404)

        actions[action]()
        app_state.save_match()
        return jsonify({"success": True, "timer": _timer_payload()})

    @app.route("/api/match/goals", methods=["POST"])
    def add_goal():
        app_state.require_match()
        data = _json_body()
        goal = app_state.scoreboard_service.add_goal(
            data.get("team", ""),
            scorer=data.get("scorer"),
            player_id=data.get("player_id"),
        )
        app_state.save_match()
        return jsonify({
            "success": True,
            "goal": goal.to_dict(),
            "scores": app_state.scoreboard_service.get_scores(),
        })

    @app.route("/api/match/goals/<team_name>", methods=["DELETE"])
    def remove_goal(team_name: str):
        app_state.require_match()
        removed = app_state.scoreboard_service.remove_goal(team_name)
        app_state.save_match()
        return jsonify({
            "success": True,
            "removed": removed.to_dict() if removed else None,
            "scores": app_state.scoreboard_service.get_scores(),
        })

    @app.route("/api/match/result", methods=["GET"])
    def get_result():
        app_state.require_match()
        result = app_state.scoreboard_service.get_result()
        return jsonify({"success": True, "result": result.to_dict() if result else None})

    @app.route("/api/match/finish", methods=["POST"])
    def finish_match():
        """Record a finished match into player statistics and clear it."""
        match_state = app_state.require_match()
        app_state.timer_service.check_expired()
        app_state.roster_service.record_match_result(match_state)
        app_state.persistence_service.clear_current_match()
        app_state.match_state = None
        app_state.timer_service = None
        app_state.scoreboard_service = None
        return jsonify({"success": True, "message": "Match recorded"})

    @app.errorhandler(Exception)
    def handle_unexpected_error(e):
        if isinstance(e, HTTPException):
            return _error(e.description, e.code)
        logger.exception("Unhandled error serving %s", request.path)
        return _error(str(e), 500)

    return app


def run_web_app(
    host: str = DEFAULT_HOST,
    port: int = DEFAULT_PORT,
    data_dir: str = DEFAULT_DATA_DIR,
) -> None:
    """
    Run the web application.

    Args:
        host: Host address to bind to (default: localhost only)
        port: Port number to listen on
        data_dir: Directory where the roster and current match are stored
    """
    app = create_app(WebAppState(data_dir=data_dir))
    logger.info("Serving %s on http://%s:%d (data in %s)", APP_TITLE, host, port, data_dir)
    app.run(host=host, port=port, debug=False)
