"""JSON export and import of the quote collection.

Export writes the full collection as indented JSON to `quotes.json`.
Import is permissive: elements whose `text` or `category` is not a string
are dropped, missing or non-integer ids are assigned past the current
maximum, and the survivors are appended without conflict resolution.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterable, List, Union

from quotesync.errors import ImportInvalid, NothingToExport
from quotesync.models.schemas import Quote, encode_snapshot
from quotesync.store import ALL_CATEGORIES
from quotesync.utils.logger import get_logger

logger = get_logger(__name__)

EXPORT_FILENAME = "quotes.json"


@dataclass
class ImportResult:
    imported: List[Quote] = field(default_factory=list)
    dropped: int = 0

    @property
    def count(self) -> int:
        return len(self.imported)

    def __str__(self) -> str:
        return f"Successfully imported {self.count} quotes!"


def dump_quotes(records: Iterable[Quote]) -> str:
    return encode_snapshot(records, indent=2)


def export_quotes(store, directory: Union[str, Path] = ".") -> Path:
    """Write every quote to `<directory>/quotes.json` and return the path."""
    records = store.records
    if not records:
        raise NothingToExport("No quotes to export!")

    target = Path(directory) / EXPORT_FILENAME
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(dump_quotes(records), encoding="utf-8")
    logger.info("Exported %d quotes to %s", len(records), target)
    return target


def _is_candidate(item: Any) -> bool:
    return (
        isinstance(item, dict)
        and isinstance(item.get("text"), str)
        and isinstance(item.get("category"), str)
    )


def _explicit_id(item: dict) -> Any:
    return item.get("id")


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def import_quotes(store, payload: str) -> ImportResult:
    """
    Append the quotes in a JSON array to the store.

    Raises:
        ImportInvalid: payload is not a JSON array, or no element is a valid quote
    """
    try:
        data = json.loads(payload)
    except ValueError as exc:
        raise ImportInvalid(f"Imported file is not valid JSON: {exc}") from exc

    if not isinstance(data, list):
        raise ImportInvalid("Imported file must contain an array of quotes")

    candidates = [item for item in data if _is_candidate(item)]
    result = ImportResult(dropped=len(data) - len(candidates))

    with store.lock:
        taken = [q.id for q in store.records]
        taken.extend(i for i in map(_explicit_id, candidates) if _is_int(i))
        next_id = max(taken, default=0) + 1

        for item in candidates:
            # Missing or non-integer ids ("7", 3.0, true) get a fresh one
            quote_id = _explicit_id(item)
            if not _is_int(quote_id):
                quote_id = next_id
                next_id += 1
            result.imported.append(Quote(id=quote_id, text=item["text"], category=item["category"]))

        if not result.imported:
            raise ImportInvalid("No valid quotes found in the imported file!")

        store.extend(result.imported)

    store.set_filter(ALL_CATEGORIES)
    logger.info("Imported %d quotes (%d dropped)", result.count, result.dropped)
    return result


def import_file(store, path: Union[str, Path]) -> ImportResult:
    try:
        payload = Path(path).read_text(encoding="utf-8")
    except UnicodeDecodeError as exc:
        raise ImportInvalid(f"{path} is not a text file") from exc
    return import_quotes(store, payload)
