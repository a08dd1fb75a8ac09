"""Abstract record store used by the tournament services."""

from __future__ import annotations

import abc
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable, Optional

if TYPE_CHECKING:
    from tourneyhub.core.types import StoreValue
    from tourneyhub.errors import StoreError


@dataclass(frozen=True)
class Abort:
    """Returned by an update function to stop a transaction without writing."""

    reason: str = ""


@dataclass(frozen=True)
class TransactionResult:
    """Outcome of ``RecordStore.atomic_update``.

    ``value`` is the committed value when ``committed`` is true, otherwise the
    last value read. ``aborted`` holds the abort returned by the final run of
    the update function.
    """

    committed: bool
    value: Any = None
    aborted: Optional[Abort] = None


UpdateFunction = Callable[[Any], "StoreValue | Abort"]
ChangeCallback = Callable[[Any], None]
ErrorCallback = Callable[["StoreError"], None]


class Subscription(abc.ABC):
    """Handle for an active ``subscribe`` listener."""

    @abc.abstractmethod
    def close(self) -> None:
        """Stop delivering changes."""


class RecordStore(abc.ABC):
    """A remote key/value tree with change notification and compare-and-update.

    Keys are slash separated paths such as ``tournaments/abc123``.
    """

    @abc.abstractmethod
    def read(self, key: str) -> Any:
        """Return the current value at ``key`` or ``None``."""

    @abc.abstractmethod
    def write(self, key: str, value: StoreValue) -> None:
        """Replace the value at ``key``."""

    @abc.abstractmethod
    def update(self, key: str, fields: dict[str, Any]) -> None:
        """Merge ``fields`` into the mapping at ``key``."""

    @abc.abstractmethod
    def push(self, collection_key: str, value: StoreValue) -> str:
        """Append ``value`` under a new store-assigned id and return the id."""

    @abc.abstractmethod
    def subscribe(
        self,
        collection_key: str,
        on_change: ChangeCallback,
        on_error: ErrorCallback,
    ) -> Subscription:
        """Deliver the full value of ``collection_key`` on every change."""

    @abc.abstractmethod
    def atomic_update(self, key: str, update_fn: UpdateFunction) -> TransactionResult:
        """Run ``update_fn`` against the freshest value until a write sticks.

        ``update_fn`` may be called many times and must not have side effects.
        Returning an ``Abort`` ends the transaction with no write.
        """

    @abc.abstractmethod
    def server_timestamp(self) -> Any:
        """Return a sentinel the store resolves to its own clock on commit."""
