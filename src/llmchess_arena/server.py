"""
Flask API for the arena.

Endpoints:
- GET|POST /api/cron/tick        -> run one tick (Authorization: Bearer <CRON_SECRET>)
- POST /api/tournament/start     -> mark the tournament running
- POST /api/tournament/stop      -> mark it stopped
- POST /api/tournament/reset     -> delete contests/moves, reset ratings, stop
- GET  /api/tournament/state     -> raw tournament record
- GET  /api/tournament/status    -> status plus nextTickAt
- GET  /api/leaderboard          -> participants by rating
- GET  /api/games?status=...     -> contests with the given status (default active)
- GET  /api/games/<id>           -> contest, its moves and both participants

The app is built by create_app() so tests can hand it an in-memory store.
"""
from __future__ import annotations

import hmac
import logging
from typing import Optional

from flask import Flask, jsonify, request

from .config import SETTINGS
from .models import ContestStatus
from .store import TournamentStore
from .tournament import TournamentControl

log = logging.getLogger("server")


def _authorized(header: Optional[str], secret: str) -> bool:
    if not secret:
        return False
    return hmac.compare_digest((header or "").encode(), f"Bearer {secret}".encode())


def create_app(control: TournamentControl, store: TournamentStore, cron_secret: Optional[str] = None) -> Flask:
    app = Flask(__name__)
    secret = SETTINGS.cron_secret if cron_secret is None else cron_secret
    if not secret:
        log.warning("CRON_SECRET is not set; /api/cron/tick will reject every request")

    @app.route("/api/cron/tick", methods=["GET", "POST"])
    def cron_tick():
        if not _authorized(request.headers.get("Authorization"), secret):
            return jsonify({"error": "Unauthorized"}), 401
        return jsonify(control.tick())

    @app.route("/api/tournament/start", methods=["POST"])
    def tournament_start():
        return jsonify(control.start())

    @app.route("/api/tournament/stop", methods=["POST"])
    def tournament_stop():
        return jsonify(control.stop())

    @app.route("/api/tournament/reset", methods=["POST"])
    def tournament_reset():
        return jsonify(control.reset())

    @app.route("/api/tournament/state", methods=["GET"])
    def tournament_state():
        return jsonify(control.state())

    @app.route("/api/tournament/status", methods=["GET"])
    def tournament_status():
        return jsonify(control.status())

    @app.route("/api/leaderboard", methods=["GET"])
    def leaderboard():
        return jsonify({"models": [p.to_dict() for p in control.leaderboard()]})

    @app.route("/api/games", methods=["GET"])
    def list_games():
        raw = request.args.get("status") or ContestStatus.ACTIVE.value
        try:
            status = ContestStatus(raw)
        except ValueError:
            return jsonify({"error": f"status must be one of {[s.value for s in ContestStatus]}"}), 400
        return jsonify({"games": [c.to_dict() for c in store.list_contests(status)]})

    @app.route("/api/games/<game_id>", methods=["GET"])
    def get_game(game_id: str):
        contest = store.get_contest(game_id)
        if contest is None:
            return jsonify({"error": "Game not found"}), 404
        white = store.get_participant(contest.white_id)
        black = store.get_participant(contest.black_id)
        return jsonify({
            "game": contest.to_dict(),
            "moves": [m.to_dict() for m in store.list_moves(game_id)],
            "white": white.to_dict() if white else None,
            "black": black.to_dict() if black else None,
        })

    return app
