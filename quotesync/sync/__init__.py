"""Reconciliation of the local quote collection with the remote source."""
from .engine import (
    DEFAULT_SYNC_INTERVAL,
    MergeResult,
    SyncEngine,
    SyncReport,
    merge_quotes,
)
from .policies import MergePolicy, client_wins, get_policy, server_wins

__all__ = [
    "DEFAULT_SYNC_INTERVAL",
    "MergeResult",
    "SyncEngine",
    "SyncReport",
    "merge_quotes",
    "MergePolicy",
    "client_wins",
    "get_policy",
    "server_wins",
]
