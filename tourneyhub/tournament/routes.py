"""Routes for the tournament blueprint."""

from __future__ import annotations

from concurrent.futures import TimeoutError as FutureTimeoutError
from typing import Any

from flask import current_app, jsonify, request

from tourneyhub.auth.decorators import login_required
from tourneyhub.errors import StoreError, ValidationError
from tourneyhub.extensions import get_session, get_store
from tourneyhub.identity import current_identity

from . import bp
from .forms import TournamentForm
from .services import TournamentService, recommended_format


def _session_snapshot() -> dict[str, Any]:
    """Wait for the first snapshot, then return the cached collection."""
    session = get_session()
    try:
        session.wait_ready(timeout=current_app.config["SESSION_READY_TIMEOUT"])
    except FutureTimeoutError as e:
        raise StoreError(
            "unavailable",
            "Tournament data is still loading. Please try again in a moment.",
        ) from e
    return session.snapshot()


@bp.route("/", methods=["GET"])
@login_required
def list_tournaments() -> Any:
    """List all valid tournaments with the caller's join state."""
    records = _session_snapshot()
    tournaments = TournamentService.list_tournaments(records, current_identity())
    current_app.logger.debug(
        f"Listing {len(tournaments)} valid tournaments out of {len(records)}"
    )
    return jsonify({"tournaments": tournaments})


@bp.route("/", methods=["POST"])
@login_required
def create_tournament() -> Any:
    """Create a new tournament owned by the caller."""
    form = TournamentForm()
    if not form.validate_on_submit():
        field, errors = next(iter(form.errors.items()))
        raise ValidationError(f"{field}: {errors[0]}")

    tournament_id = TournamentService.create_tournament(
        get_store(),
        form.data,
        current_identity(),
        collection=current_app.config["TOURNAMENTS_PATH"],
    )
    return jsonify({"id": tournament_id, "message": "Tournament created."}), 201


@bp.route("/recommended-format", methods=["GET"])
def get_recommended_format() -> Any:
    """Suggest a format for the ``gameType`` query parameter."""
    game_type = request.args.get("gameType", "")
    return jsonify({"gameType": game_type, "format": recommended_format(game_type)})


@bp.route("/<string:tournament_id>/join", methods=["POST"])
@login_required
def join_tournament(tournament_id: str) -> Any:
    """Join a tournament as the current user."""
    tournament = TournamentService.join_tournament(
        get_store(),
        tournament_id,
        current_identity(),
        collection=current_app.config["TOURNAMENTS_PATH"],
    )
    return jsonify({"id": tournament_id, "message": f"Joined {tournament.get('name')}."})


@bp.route("/<string:tournament_id>/fixtures", methods=["GET"])
@login_required
def view_fixtures(tournament_id: str) -> Any:
    """Scheduled fixtures for a tournament."""
    _session_snapshot()
    session = get_session()
    record = session.record(tournament_id)
    return jsonify(
        {
            "id": tournament_id,
            "name": record["name"],
            "fixtures": session.fixtures_for(tournament_id),
        }
    )
