"""
Sync Engine - reconcile the local quote collection with the server.

One sync cycle:
1. Fetch the remote record set (failure leaves local state untouched)
2. Merge by id: shared ids go through the merge policy, new ids are appended,
   local-only records are kept
3. Persist the merged collection in one write
4. Report the outcome to listeners

Usage:
    engine = SyncEngine(store, RemoteQuoteSource())
    engine.add_listener(print)
    report = engine.sync_once()   # manual trigger
    engine.start()                # every `interval` seconds in the background
    engine.stop()
"""

import threading
import time
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Sequence

from quotesync.errors import SyncFailed
from quotesync.models.schemas import Quote
from quotesync.utils.logger import get_logger

from .policies import MergePolicy, server_wins

logger = get_logger(__name__)

DEFAULT_SYNC_INTERVAL = 30.0

# Report statuses, matching the status line styles of the widget
STATUS_SUCCESS = "success"
STATUS_WARNING = "warning"
STATUS_ERROR = "error"
STATUS_SKIPPED = "skipped"


@dataclass
class MergeResult:
    """Outcome of merging a remote record set into the local one."""
    records: List[Quote]
    added: List[Quote] = field(default_factory=list)
    conflicts: int = 0
    resolved: int = 0

    @property
    def changed(self) -> bool:
        return bool(self.added) or self.resolved > 0


@dataclass
class SyncReport:
    """Statistics and status line from a sync cycle."""
    status: str
    message: str
    added: int = 0
    conflicts_resolved: int = 0
    error: Optional[str] = None
    duration_seconds: float = 0.0

    @property
    def ok(self) -> bool:
        return self.status in (STATUS_SUCCESS, STATUS_WARNING)

    def __str__(self) -> str:
        return self.message


def merge_quotes(
    local: Sequence[Quote],
    remote: Sequence[Quote],
    policy: MergePolicy = server_wins,
) -> MergeResult:
    """
    Merge `remote` into `local` by id.

    Every local record sharing a remote id is replaced by policy(local, remote);
    each such remote record counts as one conflict, and as resolved when the
    stored value actually changed. Remote ids with no local match are
    appended in remote order. Inputs are not mutated.
    """
    merged = list(local)
    result = MergeResult(records=merged)

    for incoming in remote:
        positions = [i for i, q in enumerate(merged) if q.id == incoming.id]
        if not positions:
            merged.append(incoming)
            result.added.append(incoming)
            continue

        result.conflicts += 1
        changed = False
        for i in positions:
            winner = policy(merged[i], incoming)
            if winner != merged[i]:
                merged[i] = winner
                changed = True
        if changed:
            result.resolved += 1

    return result


class SyncEngine:
    """
    Periodic and on-demand reconciliation of a QuoteStore against a remote source.

    Args:
        store: QuoteStore holding the local collection
        source: object with fetch_quotes() -> List[Quote] raising SyncFailed
        policy: conflict policy, server-wins by default
        interval: seconds between scheduled syncs
    """

    def __init__(
        self,
        store,
        source,
        policy: MergePolicy = server_wins,
        interval: float = DEFAULT_SYNC_INTERVAL,
    ):
        if interval <= 0:
            raise ValueError("interval must be > 0")
        self.store = store
        self.source = source
        self.policy = policy
        self.interval = interval

        self._sync_lock = threading.Lock()
        self._listeners: List[Callable[[SyncReport], None]] = []
        self._thread: Optional[threading.Thread] = None
        self._stop_event = threading.Event()
        self.last_report: Optional[SyncReport] = None

    # ─────────────────────────────────────────────────────────────────
    # Status reporting
    # ─────────────────────────────────────────────────────────────────

    def add_listener(self, listener: Callable[[SyncReport], None]) -> None:
        self._listeners.append(listener)

    def _emit(self, report: SyncReport) -> SyncReport:
        self.last_report = report
        for listener in list(self._listeners):
            try:
                listener(report)
            except Exception as e:
                logger.error(f"Sync listener {listener!r} failed: {e}")
        return report

    # ─────────────────────────────────────────────────────────────────
    # Sync
    # ─────────────────────────────────────────────────────────────────

    def sync_once(self) -> SyncReport:
        """
        Run one fetch-merge-persist cycle.

        Never raises for fetch or persist problems: either failure yields an
        error report and leaves the store untouched. A call made while another
        cycle is in flight is rejected with a skipped report.
        """
        if not self._sync_lock.acquire(blocking=False):
            logger.info("Sync already in progress, skipping this trigger")
            return self._emit(SyncReport(status=STATUS_SKIPPED, message="Sync already in progress"))

        start_time = time.time()
        try:
            try:
                remote = self.source.fetch_quotes()
            except SyncFailed as e:
                logger.error(f"Sync failed: {e}")
                return self._emit(
                    SyncReport(
                        status=STATUS_ERROR,
                        message="Server sync failed. Please try again.",
                        error=str(e),
                        duration_seconds=time.time() - start_time,
                    )
                )

            try:
                with self.store.lock:
                    result = merge_quotes(self.store.records, remote, self.policy)
                    self.store.replace(result.records)
            except Exception as e:
                logger.error(f"Saving merged quotes failed: {e}")
                return self._emit(
                    SyncReport(
                        status=STATUS_ERROR,
                        message="Sync failed while saving quotes. Local data is unchanged.",
                        error=str(e),
                        duration_seconds=time.time() - start_time,
                    )
                )

            if result.changed:
                report = SyncReport(
                    status=STATUS_WARNING,
                    message=(
                        f"Synced! {len(result.added)} new quotes added. "
                        f"{result.resolved} conflicts resolved."
                    ),
                    added=len(result.added),
                    conflicts_resolved=result.resolved,
                )
            else:
                report = SyncReport(status=STATUS_SUCCESS, message="Sync completed - No changes detected")
            report.duration_seconds = time.time() - start_time

            logger.info(f"Sync complete: {report} ({report.duration_seconds:.1f}s)")
            return self._emit(report)
        finally:
            self._sync_lock.release()

    def trigger(self) -> SyncReport:
        """Manual sync, out of band with the schedule."""
        return self.sync_once()

    # ─────────────────────────────────────────────────────────────────
    # Scheduling
    # ─────────────────────────────────────────────────────────────────

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        """Start (or restart) syncing every `interval` seconds."""
        if self.running:
            self.stop()
        self._stop_event = threading.Event()
        self._thread = threading.Thread(
            target=self._run_loop,
            args=(self._stop_event,),
            name="quotesync-sync",
            daemon=True,
        )
        self._thread.start()
        logger.info(f"Sync enabled - Data will sync every {self.interval:g} seconds")

    def stop(self, timeout: Optional[float] = None) -> None:
        """Stop scheduling. A cycle already in flight runs to completion."""
        self._stop_event.set()
        thread = self._thread
        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout)
        self._thread = None

    def _run_loop(self, stop_event: threading.Event) -> None:
        while not stop_event.wait(self.interval):
            try:
                self.sync_once()
            except Exception as e:
                # Keep the schedule alive; the next tick retries.
                logger.error(f"Scheduled sync crashed: {e}")
