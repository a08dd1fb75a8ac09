"""Fixture generation for each tournament format."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Callable

from tourneyhub.core.constants import (
    BYE_TEAM,
    FINAL_LABEL,
    FINAL_PLACEHOLDER_A,
    FINAL_PLACEHOLDER_B,
    FORMAT_KNOCKOUT,
    FORMAT_LEAGUE_KNOCKOUT,
    FORMAT_ROUND_ROBIN,
    KNOCKOUT_LABEL,
    LEAGUE_LABEL,
    MIN_TEAMS_FOR_FIXTURES,
)

from .models import Fixture


def _fixture(label: str, team_a: str, team_b: str) -> Fixture:
    return {"label": label, "teamA": team_a, "teamB": team_b, "scheduledAt": None}


def make_pairs(teams: Sequence[str]) -> list[tuple[str, str]]:
    """Pair consecutive teams; an odd team out meets ``BYE``."""
    pairs = []
    for i in range(0, len(teams), 2):
        opponent = teams[i + 1] if i + 1 < len(teams) else BYE_TEAM
        pairs.append((teams[i], opponent))
    return pairs


def generate_knockout_fixtures(teams: Sequence[str]) -> list[Fixture]:
    """First-round knockout pairings: 1st vs 2nd, 3rd vs 4th, ..."""
    return [
        _fixture(KNOCKOUT_LABEL.format(number=number), team_a, team_b)
        for number, (team_a, team_b) in enumerate(make_pairs(teams), start=1)
    ]


def generate_round_robin_fixtures(teams: Sequence[str]) -> list[Fixture]:
    """Every pair once, ordered by first team index then second."""
    fixtures = []
    for i, team_a in enumerate(teams):
        for team_b in teams[i + 1 :]:
            label = LEAGUE_LABEL.format(number=len(fixtures) + 1)
            fixtures.append(_fixture(label, team_a, team_b))
    return fixtures


def generate_league_knockout_fixtures(teams: Sequence[str]) -> list[Fixture]:
    """A full league followed by a final between the top two."""
    fixtures = generate_round_robin_fixtures(teams)
    fixtures.append(_fixture(FINAL_LABEL, FINAL_PLACEHOLDER_A, FINAL_PLACEHOLDER_B))
    return fixtures


FIXTURE_GENERATORS: dict[str, Callable[[Sequence[str]], list[Fixture]]] = {
    FORMAT_KNOCKOUT: generate_knockout_fixtures,
    FORMAT_ROUND_ROBIN: generate_round_robin_fixtures,
    FORMAT_LEAGUE_KNOCKOUT: generate_league_knockout_fixtures,
}


def generate_fixtures(teams: Sequence[str], tournament_format: str | None) -> list[Fixture]:
    """Generate unscheduled fixtures; unknown formats play as knockout."""
    if len(teams) < MIN_TEAMS_FOR_FIXTURES:
        return []
    generator = FIXTURE_GENERATORS.get(tournament_format or "", generate_knockout_fixtures)
    return generator(list(teams))
