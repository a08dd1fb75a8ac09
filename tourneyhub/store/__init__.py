"""Record store abstraction and its Firebase Realtime Database backend."""

from .base import Abort, RecordStore, Subscription, TransactionResult
from .realtime import RealtimeDatabaseStore, categorize_error

__all__ = [
    "Abort",
    "RealtimeDatabaseStore",
    "RecordStore",
    "Subscription",
    "TransactionResult",
    "categorize_error",
]
