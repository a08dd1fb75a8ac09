"""Optimistic enrollment of players into capacity-bounded tournaments."""

from __future__ import annotations

import logging
import time
from collections.abc import Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable, Optional

from tourneyhub.core.constants import (
    MAX_PARTICIPANTS_BOUNDS,
    REASON_ALREADY_JOINED,
    REASON_CLOSED,
    REASON_FULL,
    REASON_NOT_FOUND,
    REASON_UNKNOWN,
    TOURNAMENTS_PATH,
)
from tourneyhub.identity import require_identity
from tourneyhub.store import Abort

from .normalizer import (
    coerce_int,
    coerce_timestamp,
    has_participant_map,
    is_valid_tournament_record,
)

if TYPE_CHECKING:
    from tourneyhub.identity import Identity
    from tourneyhub.store import RecordStore

logger = logging.getLogger(__name__)


def now_ms() -> int:
    """Current wall-clock time in milliseconds."""
    return int(time.time() * 1000)


def participant_capacity(record: Mapping[str, Any]) -> int:
    """The stored participant limit, as enforced at join time."""
    return coerce_int(record.get("maxParticipants"), MAX_PARTICIPANTS_BOUNDS[2])


@dataclass(frozen=True)
class JoinResult:
    """Outcome of a join attempt."""

    committed: bool
    reason: Optional[str] = None
    tournament: Optional[dict[str, Any]] = None


class JoinCoordinator:
    """Adds one identity to a tournament's participants via compare-and-update.

    No locks are taken. The store reruns the update function against the
    freshest value whenever another writer got there first, so the capacity
    check always sees the latest roster.
    """

    def __init__(
        self,
        store: RecordStore,
        collection: str = TOURNAMENTS_PATH,
        clock: Callable[[], int] = now_ms,
    ) -> None:
        self.store = store
        self.collection = collection
        self.clock = clock

    def build_update(self, identity: Identity) -> Callable[[Any], Any]:
        """Return the pure update function for ``identity``."""
        uid = identity.uid
        display_name = identity.display_name
        clock = self.clock

        def add_participant(current: Any) -> Any:
            try:
                if not is_valid_tournament_record(current):
                    return Abort(REASON_NOT_FOUND)

                now = clock()
                repaired = dict(current)
                if not repaired.get("createdAt"):
                    repaired["createdAt"] = now
                if not has_participant_map(repaired):
                    repaired["participants"] = {}
                participants = repaired["participants"]

                join_deadline = coerce_timestamp(repaired.get("joinDeadline"))
                if join_deadline and now > join_deadline:
                    return Abort(REASON_CLOSED)

                if participants.get(uid):
                    return Abort(REASON_ALREADY_JOINED)

                if len(participants) >= participant_capacity(repaired):
                    return Abort(REASON_FULL)

                repaired["participants"] = {
                    **participants,
                    uid: {"uid": uid, "displayName": display_name, "joinedAt": now},
                }
                return repaired
            except Exception:  # noqa: BLE001
                # Errors must not escape into the store's retry loop.
                return Abort(REASON_UNKNOWN)

        return add_participant

    def join(self, tournament_id: str, identity: Identity | None) -> JoinResult:
        """Try once to enroll ``identity``; never retried on a block."""
        identity = require_identity(identity)
        key = f"{self.collection}/{tournament_id}"

        result = self.store.atomic_update(key, self.build_update(identity))
        if result.committed:
            logger.info(f"{identity.uid} joined tournament {tournament_id}")
            return JoinResult(committed=True, tournament=result.value)

        reason = result.aborted.reason if result.aborted else ""
        logger.info(
            f"Join blocked for {identity.uid} on {tournament_id}: {reason or 'no reason'}"
        )
        return JoinResult(committed=False, reason=reason or REASON_UNKNOWN)
