"""Best-effort backfill of core fields on legacy tournament records."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from concurrent.futures import Future, ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from tourneyhub.core.constants import REPAIR_MAX_WORKERS, TOURNAMENTS_PATH

from .normalizer import get_valid_tournaments, has_participant_map

if TYPE_CHECKING:
    from tourneyhub.store import RecordStore

logger = logging.getLogger(__name__)


@dataclass
class RepairReport:
    """Aggregate outcome of one repair pass."""

    attempted: int = 0
    repaired: list[str] = field(default_factory=list)
    failed: dict[str, str] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.failed


def _earliest_participant_uid(participants: Mapping[str, Any]) -> str | None:
    """The creator is enrolled first, so the earliest joiner owns the record."""
    candidates = []
    for uid, participant in participants.items():
        joined_at = participant.get("joinedAt") if isinstance(participant, Mapping) else None
        if isinstance(joined_at, bool) or not isinstance(joined_at, (int, float)):
            continue
        candidates.append((joined_at, uid))
    return min(candidates)[1] if candidates else None


class RepairService:
    """Fills in ``createdAt`` and ``ownerUid`` and clears ill-typed ``participants``.

    The database keeps no empty maps, so an absent ``participants`` is already
    the empty roster and is left alone; an ill-typed one is deleted. Updates
    are plain partial writes that never overwrite a valid value, so a repair
    never conflicts with a join.
    """

    def __init__(
        self,
        store: RecordStore,
        collection: str = TOURNAMENTS_PATH,
        max_workers: int = REPAIR_MAX_WORKERS,
    ) -> None:
        self.store = store
        self.collection = collection
        self.max_workers = max_workers
        self._background: ThreadPoolExecutor | None = None
        self._stopped = False

    def missing_core_fields(self, record: Mapping[str, Any]) -> dict[str, Any]:
        """Compute the partial update that completes ``record``."""
        updates: dict[str, Any] = {}
        if not record.get("createdAt"):
            updates["createdAt"] = self.store.server_timestamp()
        if record.get("participants") is not None and not has_participant_map(record):
            updates["participants"] = None
        elif has_participant_map(record) and not record.get("ownerUid"):
            owner_uid = _earliest_participant_uid(record["participants"])
            if owner_uid:
                updates["ownerUid"] = owner_uid
        return updates

    def repair_one(self, tournament_id: str, record: Mapping[str, Any]) -> bool:
        """Write the missing fields of one record; return whether it wrote."""
        updates = self.missing_core_fields(record)
        if not updates:
            return False
        self.store.update(f"{self.collection}/{tournament_id}", updates)
        logger.debug(f"Backfilled {sorted(updates)} on tournament {tournament_id}")
        return True

    def repair_all(self, records: Any) -> RepairReport:
        """Repair every valid, incomplete record concurrently.

        Failures are collected per record and never raised.
        """
        report = RepairReport()
        pending = [
            (tournament_id, record)
            for tournament_id, record in get_valid_tournaments(records)
            if self.missing_core_fields(record)
        ]
        if not pending:
            return report

        report.attempted = len(pending)
        with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            futures = {
                executor.submit(self.repair_one, tournament_id, record): tournament_id
                for tournament_id, record in pending
            }
            for future in as_completed(futures):
                tournament_id = futures[future]
                try:
                    if future.result():
                        report.repaired.append(tournament_id)
                except Exception as e:  # noqa: BLE001
                    report.failed[tournament_id] = str(e)
                    logger.warning(f"Failed to repair tournament {tournament_id}: {e}")

        if report.repaired:
            logger.info(f"Repaired {len(report.repaired)} legacy tournament records")
        return report

    def repair_in_background(self, records: Any) -> Future:
        """Start ``repair_all`` without waiting for it."""
        if self._stopped:
            logger.debug("Repair service stopped; skipping background pass")
            skipped: Future = Future()
            skipped.set_result(RepairReport())
            return skipped
        if self._background is None:
            self._background = ThreadPoolExecutor(
                max_workers=1, thread_name_prefix="tournament-repair"
            )
        snapshot = dict(records) if isinstance(records, Mapping) else {}
        return self._background.submit(self.repair_all, snapshot)

    def shutdown(self, wait: bool = True) -> None:
        """Stop the background runner; later background passes are skipped."""
        self._stopped = True
        if self._background is not None:
            self._background.shutdown(wait=wait)
            self._background = None
