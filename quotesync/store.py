"""
Quote Store - the in-memory quote collection plus its durable snapshot.

Owns every piece of process-wide state the widget needs:
1. The ordered list of quote records (persisted under `quotes`)
2. The selected category filter (persisted under `lastFilter`)
3. The last-viewed pointer into the filtered view (session-scoped
   `lastQuoteIndex`)

The store never starts a sync on its own. The Sync Engine reads `records`
and writes merged results back through `replace()`.

Usage:
    store = QuoteStore(DurableStore(), SessionStore())
    quote = store.add("Stay hungry.", "Motivation")
    store.set_filter("Motivation")
    store.show_random()
"""

import random
import threading
import time
from typing import Iterable, List, Optional

from pydantic import ValidationError as PydanticValidationError

from quotesync.database.kv_store import (
    LAST_FILTER_KEY,
    LAST_QUOTE_INDEX_KEY,
    LAST_SYNC_KEY,
    QUOTES_KEY,
)
from quotesync.errors import StorageCorrupt, ValidationError
from quotesync.models.schemas import (
    DEFAULT_QUOTES,
    NewQuote,
    Quote,
    decode_snapshot,
    encode_snapshot,
)
from quotesync.utils.logger import get_logger

logger = get_logger(__name__)

ALL_CATEGORIES = "all"


def next_quote_id(records: Iterable[Quote]) -> int:
    """Return max(existing ids, default 0) + 1."""
    return max((q.id for q in records), default=0) + 1


class QuoteStore:
    """
    Quote collection with durable persistence.

    Args:
        durable: key-value store that survives restarts (DurableStore)
        session: key-value store for the current session (SessionStore)
        rng: optional random.Random used for random selection
    """

    def __init__(self, durable, session, rng: Optional[random.Random] = None):
        self.durable = durable
        self.session = session
        self._rng = rng or random.Random()
        self._lock = threading.RLock()

        self._records: List[Quote] = self.load()
        self._current_filter = self._load_filter()

    # ─────────────────────────────────────────────────────────────────
    # Persistence
    # ─────────────────────────────────────────────────────────────────

    def load(self) -> List[Quote]:
        """
        Read the durable snapshot.

        A missing or corrupt snapshot yields the built-in defaults; the
        corruption is logged, never raised.
        """
        raw = self.durable.get(QUOTES_KEY)
        if raw is None:
            logger.info("No saved quotes found, starting from the default set")
            return list(DEFAULT_QUOTES)

        try:
            return decode_snapshot(raw)
        except StorageCorrupt as exc:
            logger.warning("Saved quotes are unreadable, using defaults: %s", exc)
            return list(DEFAULT_QUOTES)

    def save(self, records: Optional[Iterable[Quote]] = None) -> None:
        """
        Overwrite the durable snapshot and stamp `lastSync` in one write.

        Passing `records` also makes them the in-memory collection, but only
        once the durable write has succeeded; a failed write raises and
        leaves the collection as it was.
        """
        with self._lock:
            snapshot = list(self._records if records is None else records)
            self.durable.set_many(
                {
                    QUOTES_KEY: encode_snapshot(snapshot),
                    LAST_SYNC_KEY: str(int(time.time() * 1000)),
                }
            )
            self._records = snapshot

    def replace(self, records: Iterable[Quote]) -> None:
        """Swap the whole collection and persist it."""
        self.save(records)

    def extend(self, records: Iterable[Quote]) -> None:
        """Append records as-is (no id reconciliation) and persist."""
        with self._lock:
            self.save(self._records + list(records))

    def last_sync(self) -> Optional[int]:
        """Milliseconds since the epoch of the last save, if any."""
        raw = self.durable.get(LAST_SYNC_KEY)
        try:
            return int(raw) if raw is not None else None
        except ValueError:
            return None

    # ─────────────────────────────────────────────────────────────────
    # Records
    # ─────────────────────────────────────────────────────────────────

    @property
    def lock(self):
        """Held across read-modify-write sequences such as a sync merge."""
        return self._lock

    @property
    def records(self) -> List[Quote]:
        with self._lock:
            return list(self._records)

    def __len__(self) -> int:
        return len(self._records)

    def add(self, text: str, category: str) -> Quote:
        """
        Add a quote typed in by the user.

        Raises:
            ValidationError: text or category is empty after trimming
        """
        try:
            payload = NewQuote(text=text, category=category)
        except PydanticValidationError as exc:
            raise ValidationError("Please enter both a quote and a category.") from exc

        with self._lock:
            quote = Quote(id=next_quote_id(self._records), text=payload.text, category=payload.category)
            self.save(self._records + [quote])

        logger.info("Added quote %s in category %r", quote.id, quote.category)
        return quote

    def all_categories(self) -> List[str]:
        """Distinct trimmed non-empty categories, sorted."""
        with self._lock:
            categories = {q.category.strip() for q in self._records if q.category.strip()}
        return sorted(categories)

    def filtered(self, category: Optional[str] = None) -> List[Quote]:
        """Records in `category` (or the current filter), in store order."""
        category = self._current_filter if category is None else category
        with self._lock:
            if category == ALL_CATEGORIES:
                return list(self._records)
            return [q for q in self._records if q.category == category]

    # ─────────────────────────────────────────────────────────────────
    # Filter state
    # ─────────────────────────────────────────────────────────────────

    def _load_filter(self) -> str:
        saved = self.durable.get(LAST_FILTER_KEY)
        if saved and (saved == ALL_CATEGORIES or saved in self.all_categories()):
            return saved
        return ALL_CATEGORIES

    @property
    def current_filter(self) -> str:
        return self._current_filter

    def set_filter(self, category: str) -> None:
        self.durable.set(LAST_FILTER_KEY, category)
        self._current_filter = category

    # ─────────────────────────────────────────────────────────────────
    # Display selection
    # ─────────────────────────────────────────────────────────────────

    def show(self, index: int) -> Optional[Quote]:
        """
        Select the quote at `index` of the filtered view.

        The index is clamped into range and remembered for the session. An
        empty view clears the pointer and returns None.
        """
        view = self.filtered()
        if not view:
            self.session.delete(LAST_QUOTE_INDEX_KEY)
            return None

        valid_index = max(0, min(index, len(view) - 1))
        self.session.set(LAST_QUOTE_INDEX_KEY, str(valid_index))
        return view[valid_index]

    def show_random(self) -> Optional[Quote]:
        view = self.filtered()
        if not view:
            self.session.delete(LAST_QUOTE_INDEX_KEY)
            return None
        return self.show(self._rng.randrange(len(view)))

    def restore_last_viewed(self) -> Optional[Quote]:
        """Re-show the quote seen last this session, or a random one."""
        raw = self.session.get(LAST_QUOTE_INDEX_KEY)
        if raw is not None:
            try:
                index = int(raw)
            except ValueError:
                index = -1
            if 0 <= index < len(self.filtered()):
                return self.show(index)
        return self.show_random()

    def show_latest(self) -> Optional[Quote]:
        """Reset the filter to "all" and show the most recently added quote."""
        self.set_filter(ALL_CATEGORIES)
        return self.show(len(self._records) - 1)
