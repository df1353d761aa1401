"""Error taxonomy.

None of these is fatal: every failure path leaves the quote collection in
its previous valid state.
"""


class QuoteSyncError(Exception):
    """Base class for all quotesync errors."""


class ValidationError(QuoteSyncError):
    """Manual add rejected: text or category empty after trimming."""


class StorageCorrupt(QuoteSyncError):
    """Durable snapshot could not be decoded. Recovered by using the defaults."""


class SyncFailed(QuoteSyncError):
    """Fetching or parsing the remote record set failed."""


class ImportInvalid(QuoteSyncError):
    """Import payload is not a JSON array or holds no valid records."""


class NothingToExport(QuoteSyncError):
    """Export requested on an empty collection."""
