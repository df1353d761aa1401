"""
QuoteSync - quote of the day collection with remote sync.

Keep a small set of categorized quotes, show one at random, and reconcile
the local copy with a remote source on a schedule.
"""

__version__ = "1.0.0"

from .errors import (
    QuoteSyncError,
    ValidationError,
    StorageCorrupt,
    SyncFailed,
    ImportInvalid,
    NothingToExport,
)
from .models.schemas import Quote
from .store import QuoteStore
from .sync.engine import SyncEngine, SyncReport

__all__ = [
    "QuoteSyncError",
    "ValidationError",
    "StorageCorrupt",
    "SyncFailed",
    "ImportInvalid",
    "NothingToExport",
    "Quote",
    "QuoteStore",
    "SyncEngine",
    "SyncReport",
]
