"""Start-time assignment for generated fixtures."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

from tourneyhub.core.constants import (
    BREAK_MINUTES_BOUNDS,
    MATCH_DURATION_BOUNDS,
    MS_PER_MINUTE,
)

from .fixtures import generate_fixtures
from .models import Fixture, Tournament
from .normalizer import clamp, coerce_timestamp, get_tournament_teams


def slot_length_ms(tournament: Mapping[str, Any]) -> int:
    """Milliseconds between consecutive fixture start times."""
    match_duration = clamp(tournament.get("matchDurationMinutes"), MATCH_DURATION_BOUNDS)
    break_minutes = clamp(tournament.get("breakMinutes"), BREAK_MINUTES_BOUNDS)
    return (match_duration + break_minutes) * MS_PER_MINUTE


def schedule_fixtures(
    fixtures: Sequence[Fixture], tournament: Mapping[str, Any]
) -> list[Fixture]:
    """Return copies of ``fixtures`` back to back from ``startAt``.

    Without a start time every ``scheduledAt`` is ``None``.
    """
    start_at = coerce_timestamp(tournament.get("startAt"))
    if start_at is None:
        return [{**fixture, "scheduledAt": None} for fixture in fixtures]

    step = slot_length_ms(tournament)
    return [
        {**fixture, "scheduledAt": start_at + index * step}
        for index, fixture in enumerate(fixtures)
    ]


def build_fixtures(tournament: Tournament) -> list[Fixture]:
    """Roster, fixtures and schedule for a normalized tournament."""
    teams = get_tournament_teams(tournament)
    fixtures = generate_fixtures(teams, tournament.get("format"))
    return schedule_fixtures(fixtures, tournament)
