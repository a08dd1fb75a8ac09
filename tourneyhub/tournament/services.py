"""Service layer for tournament business logic."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from tourneyhub.core.constants import (
    BREAK_MINUTES_BOUNDS,
    DEFAULT_FORMAT,
    DEFAULT_GAME_TYPE,
    MATCH_DURATION_BOUNDS,
    MAX_PARTICIPANTS_BOUNDS,
    MIN_TOURNAMENT_NAME_LENGTH,
    REASON_ALREADY_JOINED,
    REASON_CLOSED,
    REASON_FULL,
    REASON_NOT_FOUND,
    RECOMMENDED_FORMATS,
    STATE_CLOSED,
    STATE_FULL,
    STATE_JOINED,
    STATE_OPEN,
    TOURNAMENT_FORMATS,
    TOURNAMENTS_PATH,
)
from tourneyhub.errors import (
    DuplicateResourceError,
    NotFoundError,
    ValidationError,
)
from tourneyhub.identity import require_identity

from .join import JoinCoordinator, now_ms, participant_capacity
from .normalizer import (
    clamp,
    coerce_timestamp,
    get_valid_tournaments,
    is_valid_tournament_record,
    normalize_tournament,
    sanitize_tournament_name,
)
from .scheduler import build_fixtures

if TYPE_CHECKING:
    from tourneyhub.identity import Identity
    from tourneyhub.store import RecordStore

    from .models import Fixture, TournamentSummary

logger = logging.getLogger(__name__)

INVALID_NAME_MESSAGE = (
    "Tournament name must be at least 3 valid characters "
    "(letters, numbers, spaces, - or _)."
)

BLOCK_ERRORS = {
    REASON_NOT_FOUND: NotFoundError,
    REASON_ALREADY_JOINED: DuplicateResourceError,
}


def recommended_format(game_type: str | None) -> str:
    """Suggest a format for a game type."""
    return RECOMMENDED_FORMATS.get(game_type or "", DEFAULT_FORMAT)


def _parse_seed_teams(value: Any) -> list[str]:
    if isinstance(value, str):
        value = value.split(",")
    if not isinstance(value, (list, tuple)):
        return []
    return [name.strip() for name in value if isinstance(name, str) and name.strip()]


class TournamentService:
    """Handles business logic and data access for tournaments."""

    @staticmethod
    def build_tournament_payload(
        data: dict[str, Any], identity: Identity, store: RecordStore
    ) -> dict[str, Any]:
        """Validate form data and build the record written on creation."""
        name = sanitize_tournament_name(data.get("name"))
        if len(name) < MIN_TOURNAMENT_NAME_LENGTH:
            raise ValidationError(INVALID_NAME_MESSAGE)

        tournament_format = data.get("format") or DEFAULT_FORMAT
        if tournament_format not in TOURNAMENT_FORMATS:
            raise ValidationError(f"Unknown tournament format: {tournament_format}")

        payload: dict[str, Any] = {
            "name": name,
            "ownerUid": identity.uid,
            "createdAt": store.server_timestamp(),
            "gameType": data.get("gameType") or DEFAULT_GAME_TYPE,
            "format": tournament_format,
            "matchDurationMinutes": clamp(
                data.get("matchDurationMinutes"), MATCH_DURATION_BOUNDS
            ),
            "breakMinutes": clamp(data.get("breakMinutes"), BREAK_MINUTES_BOUNDS),
            "maxParticipants": clamp(data.get("maxParticipants"), MAX_PARTICIPANTS_BOUNDS),
            "participants": {
                identity.uid: {
                    "uid": identity.uid,
                    "displayName": identity.display_name,
                    "joinedAt": store.server_timestamp(),
                }
            },
        }
        for key in ("joinDeadline", "startAt"):
            timestamp = coerce_timestamp(data.get(key))
            if timestamp:
                payload[key] = timestamp
        seed_teams = _parse_seed_teams(data.get("seedTeams"))
        if seed_teams:
            payload["seedTeams"] = seed_teams
        return payload

    @staticmethod
    def create_tournament(
        store: RecordStore,
        data: dict[str, Any],
        identity: Identity | None,
        collection: str = TOURNAMENTS_PATH,
    ) -> str:
        """Create a tournament owned by ``identity`` and return its id."""
        identity = require_identity(identity)
        payload = TournamentService.build_tournament_payload(data, identity, store)
        tournament_id = store.push(collection, payload)
        logger.info(f"Created tournament {tournament_id} ({payload['name']}) for {identity.uid}")
        return tournament_id

    @staticmethod
    def join_state(
        record: dict[str, Any], identity: Identity | None, now: int | None = None
    ) -> str:
        """Label a tournament as Joined, Closed, Full or Open for ``identity``."""
        tournament = normalize_tournament(record)
        participants = tournament["participants"]
        if identity and participants.get(identity.uid):
            return STATE_JOINED

        now = now_ms() if now is None else now
        join_deadline = tournament["joinDeadline"]
        if join_deadline and now > join_deadline:
            return STATE_CLOSED
        if len(participants) >= participant_capacity(record):
            return STATE_FULL
        return STATE_OPEN

    @staticmethod
    def summarize(
        tournament_id: str,
        record: dict[str, Any],
        identity: Identity | None,
        now: int | None = None,
    ) -> TournamentSummary:
        """Listing entry for a valid record."""
        tournament = normalize_tournament(record)
        return {
            "id": tournament_id,
            "name": tournament["name"],
            "gameType": tournament["gameType"],
            "format": tournament["format"],
            "participantCount": len(tournament["participants"]),
            "maxParticipants": tournament["maxParticipants"],
            "joinDeadline": tournament["joinDeadline"],
            "startAt": tournament["startAt"],
            "joinState": TournamentService.join_state(record, identity, now),
        }

    @staticmethod
    def list_tournaments(
        records: Any, identity: Identity | None, now: int | None = None
    ) -> list[TournamentSummary]:
        """Summaries of the valid tournaments in a collection snapshot."""
        return [
            TournamentService.summarize(tournament_id, record, identity, now)
            for tournament_id, record in get_valid_tournaments(records)
        ]

    @staticmethod
    def get_tournament(
        store: RecordStore, tournament_id: str, collection: str = TOURNAMENTS_PATH
    ) -> dict[str, Any]:
        """Fetch a valid raw record or raise ``NotFoundError``."""
        record = store.read(f"{collection}/{tournament_id}")
        if not is_valid_tournament_record(record):
            raise NotFoundError(REASON_NOT_FOUND)
        return record

    @staticmethod
    def get_fixtures(record: dict[str, Any]) -> list[Fixture]:
        """Scheduled fixtures for a raw record."""
        if not is_valid_tournament_record(record):
            return []
        return build_fixtures(normalize_tournament(record))

    @staticmethod
    def join_tournament(
        store: RecordStore,
        tournament_id: str,
        identity: Identity | None,
        collection: str = TOURNAMENTS_PATH,
    ) -> dict[str, Any]:
        """Join a tournament, raising the matching error when blocked."""
        result = JoinCoordinator(store, collection).join(tournament_id, identity)
        if result.committed:
            return result.tournament or {}

        reason = result.reason or ""
        if reason in BLOCK_ERRORS:
            raise BLOCK_ERRORS[reason](reason)
        status_code = 409 if reason in (REASON_FULL, REASON_CLOSED) else 400
        raise ValidationError(reason, status_code=status_code)
