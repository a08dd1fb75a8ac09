"""Record store backed by the Firebase Realtime Database."""

from __future__ import annotations

import copy
import logging
import random
import time
from typing import TYPE_CHECKING, Any, Callable

from firebase_admin import db, exceptions

from tourneyhub.core.constants import STORE_MAX_RETRIES, STORE_RETRY_BACKOFF
from tourneyhub.errors import StoreError

from .base import Abort, RecordStore, Subscription, TransactionResult

if TYPE_CHECKING:
    from tourneyhub.core.types import StoreValue

    from .base import ChangeCallback, ErrorCallback, UpdateFunction

logger = logging.getLogger(__name__)

# Realtime Database resolves this placeholder to its own clock on write.
SERVER_TIMESTAMP = {".sv": "timestamp"}

MAX_BACKOFF_SECONDS = 1.0


def categorize_error(error: Exception) -> StoreError:
    """Translate a Firebase or decoding failure into a ``StoreError``."""
    if isinstance(error, StoreError):
        return error
    if isinstance(error, (exceptions.PermissionDeniedError, exceptions.UnauthenticatedError)):
        category = "permission_denied"
    elif isinstance(error, (exceptions.UnavailableError, exceptions.DeadlineExceededError)):
        category = "unavailable"
    elif isinstance(error, (ValueError, TypeError)):
        category = "malformed"
    else:
        category = "unknown"
    code = getattr(error, "code", None)
    return StoreError(category, str(error) or "Unknown error", code=code)


class _ListenerSubscription(Subscription):
    def __init__(self, registration: Any) -> None:
        self._registration = registration

    def close(self) -> None:
        if self._registration is not None:
            self._registration.close()
            self._registration = None


class RealtimeDatabaseStore(RecordStore):
    """``RecordStore`` on top of ``firebase_admin.db`` references.

    ``atomic_update`` is an explicit compare-and-swap loop over etags rather
    than ``Reference.transaction`` so the update function can abort with a
    reason and the retry ceiling is configurable.
    """

    def __init__(
        self,
        reference_factory: Callable[[str], Any] | None = None,
        max_retries: int = STORE_MAX_RETRIES,
        retry_backoff: float = STORE_RETRY_BACKOFF,
    ) -> None:
        self._reference = reference_factory or db.reference
        self.max_retries = max_retries
        self.retry_backoff = retry_backoff

    def _ref(self, key: str) -> Any:
        return self._reference(key)

    @staticmethod
    def _call(func: Callable[..., Any], *args: Any, **kwargs: Any) -> Any:
        try:
            return func(*args, **kwargs)
        except (exceptions.FirebaseError, ValueError) as e:
            raise categorize_error(e) from e

    def read(self, key: str) -> Any:
        return self._call(self._ref(key).get)

    def write(self, key: str, value: StoreValue) -> None:
        self._call(self._ref(key).set, value)

    def update(self, key: str, fields: dict[str, Any]) -> None:
        self._call(self._ref(key).update, fields)

    def push(self, collection_key: str, value: StoreValue) -> str:
        new_ref = self._call(self._ref(collection_key).push, value)
        return str(new_ref.key)

    def server_timestamp(self) -> Any:
        return dict(SERVER_TIMESTAMP)

    def subscribe(
        self,
        collection_key: str,
        on_change: ChangeCallback,
        on_error: ErrorCallback,
    ) -> Subscription:
        ref = self._ref(collection_key)

        def handle_event(event: Any) -> None:
            # A root "put" carries the whole collection; anything else is a
            # partial delta, so fetch the full value again.
            if event.event_type == "put" and event.path == "/":
                on_change(event.data)
                return
            try:
                value = self._call(ref.get)
            except StoreError as e:
                on_error(e)
                return
            on_change(value)

        try:
            registration = self._call(ref.listen, handle_event)
        except StoreError as e:
            on_error(e)
            return _ListenerSubscription(None)
        return _ListenerSubscription(registration)

    def _backoff(self, attempt: int) -> None:
        if self.retry_backoff <= 0:
            return
        delay = min(MAX_BACKOFF_SECONDS, self.retry_backoff * (2**attempt))
        time.sleep(delay * random.uniform(0.5, 1.0))  # nosec

    def atomic_update(self, key: str, update_fn: UpdateFunction) -> TransactionResult:
        ref = self._ref(key)
        value, etag = self._call(ref.get, etag=True)

        for attempt in range(self.max_retries + 1):
            proposed = update_fn(copy.deepcopy(value))
            if isinstance(proposed, Abort):
                return TransactionResult(committed=False, value=value, aborted=proposed)

            success, value, etag = self._call(ref.set_if_unchanged, etag, proposed)
            if success:
                return TransactionResult(committed=True, value=value)

            logger.debug(f"Conflict writing {key}, retry {attempt + 1}")
            self._backoff(attempt)

        raise StoreError(
            "contention",
            f"Too many concurrent updates to {key}. Please try again.",
        )
