"""Defaults, validation and name sanitizing for raw tournament records."""

from __future__ import annotations

import math
import re
from collections.abc import Iterable, Mapping
from typing import Any

from tourneyhub.core.constants import (
    BREAK_MINUTES_BOUNDS,
    DEFAULT_DISPLAY_NAME,
    DEFAULT_FORMAT,
    DEFAULT_GAME_TYPE,
    MATCH_DURATION_BOUNDS,
    MAX_DISPLAY_NAME_LENGTH,
    MAX_PARTICIPANTS_BOUNDS,
    MIN_TEAM_NAME_LENGTH,
    MIN_TOURNAMENT_NAME_LENGTH,
    TOURNAMENT_FORMATS,
)

from .models import Participant, Tournament

_DISALLOWED_NAME_CHARS = re.compile(r"[^A-Za-z0-9 _\-]")


def sanitize_tournament_name(value: Any) -> str:
    """Strip characters outside ``[A-Za-z0-9 _-]`` and trim whitespace."""
    if not isinstance(value, str):
        return ""
    return _DISALLOWED_NAME_CHARS.sub("", value).strip()


def display_name_from_email(email: str | None) -> str:
    """Derive a participant display name from an email address."""
    local_part = (email or "").split("@")[0]
    name = sanitize_tournament_name(local_part)[:MAX_DISPLAY_NAME_LENGTH].strip()
    return name or DEFAULT_DISPLAY_NAME


def is_valid_tournament_record(record: Any) -> bool:
    """Check that a raw record is a mapping with a usable name."""
    return (
        isinstance(record, Mapping)
        and isinstance(record.get("name"), str)
        and len(record["name"]) >= MIN_TOURNAMENT_NAME_LENGTH
    )


def get_valid_tournaments(records: Any) -> list[tuple[str, Any]]:
    """Return ``(id, record)`` pairs for the valid records in a collection."""
    if not isinstance(records, Mapping):
        return []
    return [
        (str(tournament_id), record)
        for tournament_id, record in records.items()
        if is_valid_tournament_record(record)
    ]


def coerce_int(value: Any, default: int) -> int:
    """Convert ``value`` to an int, using ``default`` for empty or bad input."""
    if isinstance(value, bool) or not value:
        return default
    try:
        return int(float(value))
    except (TypeError, ValueError, OverflowError):
        return default


def clamp(value: Any, bounds: tuple[int, int, int]) -> int:
    """Coerce ``value`` and clamp it to ``(minimum, maximum, default)``."""
    minimum, maximum, default = bounds
    return max(minimum, min(maximum, coerce_int(value, default)))


def coerce_timestamp(value: Any) -> int | None:
    """Return an absolute millisecond timestamp or ``None``."""
    if isinstance(value, bool) or not isinstance(value, (int, float)) or not value:
        return None
    if not math.isfinite(value):
        return None
    return int(value)


def has_participant_map(record: Mapping[str, Any]) -> bool:
    """Check that ``participants`` is present and mapping-typed."""
    return isinstance(record.get("participants"), Mapping)


def normalize_tournament(raw: Mapping[str, Any]) -> Tournament:
    """Return a canonical copy of ``raw`` with every field defaulted.

    The input is never mutated. Call ``is_valid_tournament_record`` first;
    the name is copied as-is.
    """
    tournament_format = raw.get("format")
    if tournament_format not in TOURNAMENT_FORMATS:
        tournament_format = DEFAULT_FORMAT

    participants = raw.get("participants")
    seed_teams = raw.get("seedTeams")

    return {
        "name": raw.get("name"),
        "ownerUid": raw.get("ownerUid") or None,
        "createdAt": raw.get("createdAt") or None,
        "gameType": raw.get("gameType") or DEFAULT_GAME_TYPE,
        "format": tournament_format,
        "joinDeadline": coerce_timestamp(raw.get("joinDeadline")),
        "startAt": coerce_timestamp(raw.get("startAt")),
        "matchDurationMinutes": clamp(raw.get("matchDurationMinutes"), MATCH_DURATION_BOUNDS),
        "breakMinutes": clamp(raw.get("breakMinutes"), BREAK_MINUTES_BOUNDS),
        "maxParticipants": clamp(raw.get("maxParticipants"), MAX_PARTICIPANTS_BOUNDS),
        "participants": dict(participants) if isinstance(participants, Mapping) else {},
        "seedTeams": list(seed_teams) if isinstance(seed_teams, (list, tuple)) else [],
    }


def _joined_order(item: tuple[str, Any]) -> tuple[float, str]:
    uid, participant = item
    joined_at = participant.get("joinedAt") if isinstance(participant, Mapping) else None
    if isinstance(joined_at, bool) or not isinstance(joined_at, (int, float)):
        joined_at = float("inf")
    return joined_at, uid


def _participant_names(participants: Mapping[str, Participant]) -> list[Any]:
    ordered = sorted(participants.items(), key=_joined_order)
    return [
        participant.get("displayName")
        for _, participant in ordered
        if isinstance(participant, Mapping) and participant.get("displayName")
    ]


def dedupe_names(names: Iterable[Any], limit: int) -> list[str]:
    """Sanitize, drop short names, dedupe keeping first occurrence, truncate."""
    roster: list[str] = []
    seen: set[str] = set()
    for name in names:
        cleaned = sanitize_tournament_name(name)
        if len(cleaned) < MIN_TEAM_NAME_LENGTH or cleaned in seen:
            continue
        seen.add(cleaned)
        roster.append(cleaned)
        if len(roster) >= limit:
            break
    return roster


def get_tournament_teams(tournament: Tournament) -> list[str]:
    """Build the fixture roster: participants first (by join time), then seeds.

    Participant names and seed teams share one pool, so a participant whose
    name matches a seed team collapses into a single entry.
    """
    names = _participant_names(tournament.get("participants") or {})
    names.extend(tournament.get("seedTeams") or [])
    limit = tournament.get("maxParticipants") or MAX_PARTICIPANTS_BOUNDS[1]
    return dedupe_names(names, limit)
