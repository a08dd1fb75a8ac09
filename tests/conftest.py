"""Shared builders for the tourneyhub tests."""

from __future__ import annotations

from typing import Any

from tourneyhub.store import RealtimeDatabaseStore

from .mock_utils import MockRealtimeDatabase

NOW = 1_700_000_000_000
HOUR_MS = 60 * 60 * 1000


def tournament_record(**overrides: Any) -> dict[str, Any]:
    """A complete, valid tournament record as stored."""
    record: dict[str, Any] = {
        "name": "Friday Night Cup",
        "ownerUid": "owner",
        "createdAt": NOW - HOUR_MS,
        "gameType": "esports",
        "format": "knockout",
        "matchDurationMinutes": 30,
        "breakMinutes": 10,
        "maxParticipants": 8,
        "participants": {
            "owner": {"uid": "owner", "displayName": "owner", "joinedAt": NOW - HOUR_MS}
        },
    }
    record.update(overrides)
    return record


def make_store(
    tournaments: dict[str, Any] | None = None, **kwargs: Any
) -> tuple[RealtimeDatabaseStore, MockRealtimeDatabase]:
    """A real store adapter over an in-memory database."""
    mock_db = MockRealtimeDatabase({"tournaments": tournaments or {}}, server_time=NOW)
    kwargs.setdefault("retry_backoff", 0)
    return RealtimeDatabaseStore(reference_factory=mock_db.reference, **kwargs), mock_db
