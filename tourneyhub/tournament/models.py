"""Data models for the tournament blueprint."""

from __future__ import annotations

from typing import Any, Optional, TypedDict

from tourneyhub.core.types import FixtureDict

Fixture = FixtureDict


class Participant(TypedDict):
    """A player enrolled in a tournament, keyed by uid."""

    uid: str
    displayName: str
    joinedAt: Any


class Tournament(TypedDict):
    """A normalized tournament record.

    Raw records read from the store may miss any of these keys; run them
    through ``normalize_tournament`` first.
    """

    name: str
    ownerUid: Optional[str]
    createdAt: Any
    gameType: str
    format: str
    joinDeadline: Optional[int]
    startAt: Optional[int]
    matchDurationMinutes: int
    breakMinutes: int
    maxParticipants: int
    participants: dict[str, Participant]
    seedTeams: list[str]


class TournamentSummary(TypedDict):
    """A tournament as shown in listings."""

    id: str
    name: str
    gameType: str
    format: str
    participantCount: int
    maxParticipants: int
    joinDeadline: Optional[int]
    startAt: Optional[int]
    joinState: str
