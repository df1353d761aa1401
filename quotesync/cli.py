#!/usr/bin/env python
"""Command line front end for the quote collection.

Usage:
    quotesync show [--category Life]
    quotesync add "Stay hungry." Motivation [--push]
    quotesync categories
    quotesync filter Life
    quotesync export [--dir out/]
    quotesync import quotes.json
    quotesync sync
    quotesync watch [--interval 30] [--cycles 3]
"""
import argparse
import sys
import threading
from typing import List, Optional

from quotesync.config import Settings, get_settings
from quotesync.database.engine import get_engine
from quotesync.database.kv_store import DurableStore, SessionStore
from quotesync.errors import ImportInvalid, NothingToExport, ValidationError
from quotesync.models.schemas import Quote
from quotesync.remote import RemoteQuoteSource
from quotesync.store import ALL_CATEGORIES, QuoteStore
from quotesync.sync.engine import SyncEngine, SyncReport
from quotesync.sync.policies import get_policy
from quotesync.transfer import export_quotes, import_file
from quotesync.utils.logger import setup_logging

EMPTY_VIEW_MESSAGE = "No quotes available for this category. Add some quotes!"


def get_store(settings: Settings) -> QuoteStore:
    """Return a QuoteStore over the configured database."""
    durable = DurableStore(get_engine(settings.database_url))
    return QuoteStore(durable, SessionStore())


def get_sync_engine(store: QuoteStore, settings: Settings) -> SyncEngine:
    source = RemoteQuoteSource(url=settings.remote_url, timeout=settings.http_timeout)
    return SyncEngine(
        store,
        source,
        policy=get_policy(settings.merge_policy),
        interval=settings.sync_interval,
    )


def _build_engine(store: QuoteStore, settings: Settings) -> Optional[SyncEngine]:
    try:
        return get_sync_engine(store, settings)
    except ValueError as e:
        print(f"Invalid sync settings: {e}", file=sys.stderr)
        return None


def render_quote(quote: Optional[Quote]) -> str:
    if quote is None:
        return EMPTY_VIEW_MESSAGE
    return f'"{quote.text}"\n— {quote.category}'


def render_report(report: SyncReport) -> str:
    return f"[{report.status}] {report.message}"


# ─────────────────────────────────────────────────────────────────────────────
# Commands
# ─────────────────────────────────────────────────────────────────────────────


def cmd_show(args, store: QuoteStore, settings: Settings) -> int:
    if args.category:
        store.set_filter(args.category)
    print(render_quote(store.restore_last_viewed()))
    return 0


def cmd_add(args, store: QuoteStore, settings: Settings) -> int:
    try:
        quote = store.add(args.text, args.category)
    except ValidationError as e:
        print(e, file=sys.stderr)
        return 1
    print("Quote added successfully!")
    print(render_quote(store.show_latest()))
    if args.push:
        engine = _build_engine(store, settings)
        if engine is None or not engine.source.post_quote(quote):
            return 1
    return 0


def cmd_categories(args, store: QuoteStore, settings: Settings) -> int:
    current = store.current_filter
    for name in [ALL_CATEGORIES] + store.all_categories():
        marker = "*" if name == current else " "
        print(f"{marker} {name}")
    return 0


def cmd_filter(args, store: QuoteStore, settings: Settings) -> int:
    if args.category != ALL_CATEGORIES and args.category not in store.all_categories():
        print(f"Unknown category {args.category!r}", file=sys.stderr)
        return 1
    store.set_filter(args.category)
    print(render_quote(store.show_random()))
    return 0


def cmd_export(args, store: QuoteStore, settings: Settings) -> int:
    try:
        path = export_quotes(store, args.dir)
    except NothingToExport as e:
        print(e, file=sys.stderr)
        return 1
    print(f"Exported {len(store)} quotes to {path}")
    return 0


def cmd_import(args, store: QuoteStore, settings: Settings) -> int:
    try:
        result = import_file(store, args.file)
    except (ImportInvalid, OSError) as e:
        print(f"Error importing quotes: {e}", file=sys.stderr)
        return 1
    print(result)
    print(render_quote(store.show_random()))
    return 0


def cmd_sync(args, store: QuoteStore, settings: Settings) -> int:
    engine = _build_engine(store, settings)
    if engine is None:
        return 1
    report = engine.trigger()
    print(render_report(report))
    return 0 if report.ok else 1


def cmd_watch(args, store: QuoteStore, settings: Settings) -> int:
    if args.interval is not None:
        settings.sync_interval = args.interval
    engine = _build_engine(store, settings)
    if engine is None:
        return 1

    done = threading.Event()
    seen = {"reports": 0}

    def on_report(report: SyncReport) -> None:
        print(render_report(report), flush=True)
        seen["reports"] += 1
        if args.cycles and seen["reports"] >= args.cycles:
            done.set()

    engine.add_listener(on_report)
    engine.trigger()
    if not done.is_set():
        engine.start()
        try:
            done.wait()
        except KeyboardInterrupt:
            pass
        finally:
            engine.stop()
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="quotesync", description="Quote of the day with remote sync"
    )
    parser.add_argument("--log-level", default=None, help="Logging level (default QS_LOG_LEVEL)")
    parser.add_argument("--database-url", default=None, help="SQLAlchemy URL of the durable store")
    parser.add_argument("--remote-url", default=None, help="Endpoint returning the remote quotes")
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("show", help="Show a quote from the current category")
    p.add_argument("--category", help="Switch the filter before showing")
    p.set_defaults(func=cmd_show)

    p = sub.add_parser("add", help="Add a quote")
    p.add_argument("text")
    p.add_argument("category")
    p.add_argument("--push", action="store_true", help="Also send the quote to the server")
    p.set_defaults(func=cmd_add)

    p = sub.add_parser("categories", help="List categories")
    p.set_defaults(func=cmd_categories)

    p = sub.add_parser("filter", help="Select the category filter")
    p.add_argument("category")
    p.set_defaults(func=cmd_filter)

    p = sub.add_parser("export", help="Write quotes.json")
    p.add_argument("--dir", default=".", help="Output directory")
    p.set_defaults(func=cmd_export)

    p = sub.add_parser("import", help="Append quotes from a JSON file")
    p.add_argument("file")
    p.set_defaults(func=cmd_import)

    p = sub.add_parser("sync", help="Sync with the server once")
    p.set_defaults(func=cmd_sync)

    p = sub.add_parser("watch", help="Sync on a schedule until interrupted")
    p.add_argument("--interval", type=float, default=None, help="Seconds between syncs")
    p.add_argument("--cycles", type=int, default=0, help="Stop after this many syncs")
    p.set_defaults(func=cmd_watch)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    settings = get_settings()
    if args.database_url:
        settings.database_url = args.database_url
    if args.remote_url:
        settings.remote_url = args.remote_url
    setup_logging(args.log_level or settings.log_level, verbose=settings.verbose)

    store = get_store(settings)
    return args.func(args, store, settings)


if __name__ == "__main__":
    sys.exit(main())
