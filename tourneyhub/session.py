"""Long-lived view of the tournament collection.

A ``TournamentSession`` owns the store listener, the last snapshot it
delivered and the repair runner. Consumers wait on ``ready`` instead of
polling for the store to come up.
"""

from __future__ import annotations

import copy
import logging
import threading
from concurrent.futures import Future
from typing import TYPE_CHECKING, Any, Callable

from tourneyhub.core.constants import REASON_NOT_FOUND, TOURNAMENTS_PATH
from tourneyhub.errors import NotFoundError, StoreError
from tourneyhub.tournament.normalizer import (
    get_valid_tournaments,
    is_valid_tournament_record,
    normalize_tournament,
)
from tourneyhub.tournament.scheduler import build_fixtures

if TYPE_CHECKING:
    from tourneyhub.store import RecordStore, Subscription
    from tourneyhub.tournament.repair import RepairService

logger = logging.getLogger(__name__)

SnapshotListener = Callable[[list[tuple[str, Any]]], None]


class TournamentSession:
    """Subscribes to the tournaments collection and caches what it sees."""

    def __init__(
        self,
        store: RecordStore,
        repair_service: RepairService | None = None,
        collection: str = TOURNAMENTS_PATH,
    ) -> None:
        self.store = store
        self.repair_service = repair_service
        self.collection = collection
        self.ready: Future = Future()
        self.last_error: StoreError | None = None
        self._snapshot: dict[str, Any] = {}
        self._lock = threading.Lock()
        self._listeners: list[SnapshotListener] = []
        self._subscription: Subscription | None = None

    @property
    def active(self) -> bool:
        return self._subscription is not None

    def add_listener(self, listener: SnapshotListener) -> None:
        """Call ``listener`` with the valid entries after every change."""
        self._listeners.append(listener)

    def start(self) -> None:
        """Subscribe to the collection, replacing any previous listener."""
        if self._subscription is not None:
            logger.debug("Removing previous tournament listener")
            self._subscription.close()
        logger.info(f"Listening to /{self.collection}")
        self._subscription = self.store.subscribe(
            self.collection, self._on_change, self._on_error
        )

    def _on_change(self, value: Any) -> None:
        snapshot = value if isinstance(value, dict) else {}
        with self._lock:
            self._snapshot = snapshot
            self.last_error = None
        entries = get_valid_tournaments(snapshot)
        logger.debug(f"Snapshot with {len(entries)} of {len(snapshot)} tournaments valid")

        for listener in list(self._listeners):
            listener(entries)
        if self.repair_service is not None:
            self.repair_service.repair_in_background(snapshot)
        if not self.ready.done():
            self.ready.set_result(True)

    def _on_error(self, error: StoreError) -> None:
        logger.error(f"Error listening to tournaments: {error.message}")
        with self._lock:
            self.last_error = error
        if not self.ready.done():
            self.ready.set_exception(error)

    def wait_ready(self, timeout: float | None = None) -> None:
        """Block until the first snapshot arrives; re-raise a startup error."""
        self.ready.result(timeout=timeout)

    def snapshot(self) -> dict[str, Any]:
        """A copy of the last collection value received."""
        with self._lock:
            return copy.deepcopy(self._snapshot)

    def record(self, tournament_id: str) -> Any:
        """The cached raw record for ``tournament_id``."""
        with self._lock:
            record = self._snapshot.get(tournament_id)
        if not is_valid_tournament_record(record):
            raise NotFoundError(REASON_NOT_FOUND)
        return copy.deepcopy(record)

    def fixtures_for(self, tournament_id: str) -> list[Any]:
        """Scheduled fixtures for a cached tournament."""
        return build_fixtures(normalize_tournament(self.record(tournament_id)))

    def close(self) -> None:
        """Stop listening and shut down background repairs."""
        if self._subscription is not None:
            self._subscription.close()
            self._subscription = None
        if self.repair_service is not None:
            self.repair_service.shutdown(wait=False)
        if not self.ready.done():
            self.ready.cancel()
