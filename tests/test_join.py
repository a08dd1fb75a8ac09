"""Tests for the optimistic join protocol."""

from __future__ import annotations

import threading
import unittest
from unittest.mock import MagicMock

from tourneyhub.errors import StoreError, UnauthorizedError
from tourneyhub.identity import Identity
from tourneyhub.store import Abort, TransactionResult
from tourneyhub.tournament.join import JoinCoordinator

from .conftest import HOUR_MS, NOW, make_store, tournament_record

PLAYER = Identity(uid="player1", email="player.one@example.com")


class JoinUpdateFunctionTestCase(unittest.TestCase):
    """Test case for the pure update function."""

    def setUp(self) -> None:
        self.coordinator = JoinCoordinator(MagicMock(), clock=lambda: NOW)
        self.update = self.coordinator.build_update(PLAYER)

    def test_adds_participant(self) -> None:
        current = tournament_record()
        proposed = self.update(current)
        self.assertEqual(
            proposed["participants"]["player1"],
            {"uid": "player1", "displayName": "playerone", "joinedAt": NOW},
        )
        self.assertIn("owner", proposed["participants"])
        self.assertEqual(proposed["name"], current["name"])

    def test_does_not_mutate_current(self) -> None:
        current = tournament_record()
        self.update(current)
        self.assertNotIn("player1", current["participants"])

    def test_missing_record(self) -> None:
        self.assertEqual(self.update(None), Abort("Tournament no longer exists."))
        self.assertEqual(self.update({"name": "x"}), Abort("Tournament no longer exists."))

    def test_backfills_legacy_fields(self) -> None:
        proposed = self.update({"name": "Legacy Cup", "participants": "broken"})
        self.assertEqual(proposed["createdAt"], NOW)
        self.assertEqual(list(proposed["participants"]), ["player1"])

    def test_keeps_existing_created_at(self) -> None:
        proposed = self.update(tournament_record(createdAt=123))
        self.assertEqual(proposed["createdAt"], 123)

    def test_non_finite_capacity_uses_default(self) -> None:
        proposed = self.update(tournament_record(maxParticipants="inf", joinDeadline=1e999))
        self.assertIn("player1", proposed["participants"])

    def test_join_window_closed(self) -> None:
        result = self.update(tournament_record(joinDeadline=NOW - 1))
        self.assertEqual(result, Abort("Join window is closed for this tournament."))

    def test_join_window_open_until_deadline(self) -> None:
        result = self.update(tournament_record(joinDeadline=NOW))
        self.assertNotIsInstance(result, Abort)

    def test_already_joined(self) -> None:
        record = tournament_record()
        record["participants"]["player1"] = {"uid": "player1", "displayName": "p", "joinedAt": 1}
        self.assertEqual(self.update(record), Abort("You already joined this tournament."))

    def test_full(self) -> None:
        self.assertEqual(
            self.update(tournament_record(maxParticipants=1)), Abort("Tournament is full.")
        )

    def test_deadline_checked_before_capacity(self) -> None:
        record = tournament_record(maxParticipants=1, joinDeadline=NOW - HOUR_MS)
        self.assertEqual(self.update(record).reason, "Join window is closed for this tournament.")

    def test_never_raises(self) -> None:
        clock = MagicMock(side_effect=RuntimeError("boom"))
        update = JoinCoordinator(MagicMock(), clock=clock).build_update(PLAYER)
        self.assertEqual(update(tournament_record()), Abort("Unable to join this tournament."))


class JoinCoordinatorTestCase(unittest.TestCase):
    """Test case for JoinCoordinator against a store."""

    def test_join_commits(self) -> None:
        store, mock_db = make_store({"t1": tournament_record()})
        result = JoinCoordinator(store, clock=lambda: NOW).join("t1", PLAYER)

        self.assertTrue(result.committed)
        self.assertIsNone(result.reason)
        stored = mock_db.get_value("tournaments/t1")
        self.assertEqual(stored["participants"]["player1"]["joinedAt"], NOW)
        self.assertEqual(result.tournament, stored)

    def test_blocked_join_writes_nothing(self) -> None:
        store, mock_db = make_store({"t1": tournament_record(maxParticipants=1)})
        writes = mock_db.write_count

        result = JoinCoordinator(store).join("t1", PLAYER)

        self.assertFalse(result.committed)
        self.assertEqual(result.reason, "Tournament is full.")
        self.assertEqual(mock_db.write_count, writes)

    def test_unknown_tournament(self) -> None:
        store, _ = make_store({})
        result = JoinCoordinator(store).join("missing", PLAYER)
        self.assertEqual(result.reason, "Tournament no longer exists.")

    def test_requires_identity(self) -> None:
        store = MagicMock()
        with self.assertRaises(UnauthorizedError):
            JoinCoordinator(store).join("t1", None)
        store.atomic_update.assert_not_called()

    def test_abort_without_reason(self) -> None:
        store = MagicMock()
        store.atomic_update.return_value = TransactionResult(committed=False)
        result = JoinCoordinator(store).join("t1", PLAYER)
        self.assertEqual(result.reason, "Unable to join this tournament.")

    def test_store_errors_propagate(self) -> None:
        store = MagicMock()
        store.atomic_update.side_effect = StoreError("unavailable", "offline")
        with self.assertRaises(StoreError):
            JoinCoordinator(store).join("t1", PLAYER)

    def test_uses_configured_collection(self) -> None:
        store = MagicMock()
        store.atomic_update.return_value = TransactionResult(committed=True, value={})
        JoinCoordinator(store, collection="cups").join("t9", PLAYER)
        self.assertEqual(store.atomic_update.call_args[0][0], "cups/t9")


class ConcurrentJoinTestCase(unittest.TestCase):
    """Racing joins against shared capacity."""

    def race(self, capacity: int, racers: int) -> tuple[list, dict]:
        record = tournament_record(maxParticipants=capacity, participants={})
        store, mock_db = make_store({"t1": record}, max_retries=racers + 5)
        coordinator = JoinCoordinator(store)
        barrier = threading.Barrier(racers)
        results = [None] * racers

        def attempt(index: int) -> None:
            identity = Identity(uid=f"user{index}", email=f"user{index}@example.com")
            barrier.wait()
            results[index] = coordinator.join("t1", identity)

        threads = [threading.Thread(target=attempt, args=(i,)) for i in range(racers)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()
        return results, mock_db.get_value("tournaments/t1")

    def test_two_racers_one_seat(self) -> None:
        results, stored = self.race(capacity=1, racers=2)
        committed = [r for r in results if r.committed]
        blocked = [r for r in results if not r.committed]
        self.assertEqual(len(committed), 1)
        self.assertEqual([r.reason for r in blocked], ["Tournament is full."])
        self.assertEqual(len(stored["participants"]), 1)

    def test_many_racers_fill_exactly_capacity(self) -> None:
        for capacity, racers in ((3, 8), (5, 5), (8, 4)):
            results, stored = self.race(capacity=capacity, racers=racers)
            committed = [r for r in results if r.committed]
            self.assertEqual(len(committed), min(capacity, racers))
            self.assertEqual(len(stored["participants"]), min(capacity, racers))
            for result in results:
                if not result.committed:
                    self.assertEqual(result.reason, "Tournament is full.")


if __name__ == "__main__":
    unittest.main()
