"""Pydantic schemas for quote records.

`Quote` is the permissive record shape accepted from snapshots, imports and
the remote source. `NewQuote` is the stricter contract for the manual add
path, where both fields must be non-empty after trimming.
"""
import json
from typing import Iterable, List, Optional

from pydantic import BaseModel, ConfigDict, StrictInt, StrictStr, field_validator
from pydantic import ValidationError as PydanticValidationError

from quotesync.errors import StorageCorrupt


class Quote(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: StrictInt
    text: StrictStr
    category: StrictStr


class NewQuote(BaseModel):
    text: str
    category: str

    @field_validator("text", "category")
    @classmethod
    def nonempty_after_trim(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("must not be empty")
        return v


DEFAULT_QUOTES: List[Quote] = [
    Quote(id=1, text="The only way to do great work is to love what you do.", category="Inspiration"),
    Quote(id=2, text="Life is what happens when you're busy making other plans.", category="Life"),
    Quote(id=3, text="The future belongs to those who believe in the beauty of their dreams.", category="Dreams"),
    Quote(
        id=4,
        text="In the end, we will remember not the words of our enemies, but the silence of our friends.",
        category="Friendship",
    ),
    Quote(id=5, text="The only impossible journey is the one you never begin.", category="Motivation"),
]


def encode_snapshot(records: Iterable[Quote], indent: Optional[int] = None) -> str:
    """Serialize records to a JSON array."""
    return json.dumps([q.model_dump() for q in records], indent=indent, ensure_ascii=False)


def decode_snapshot(raw: str) -> List[Quote]:
    """Parse a serialized snapshot.

    Raises StorageCorrupt when the text is not JSON, not an array, or holds an
    element that is not a well-formed record.
    """
    try:
        data = json.loads(raw)
    except (TypeError, ValueError) as exc:
        raise StorageCorrupt(f"snapshot is not valid JSON: {exc}") from exc

    if not isinstance(data, list):
        raise StorageCorrupt(f"snapshot must be a JSON array, got {type(data).__name__}")

    try:
        return [Quote.model_validate(item) for item in data]
    except PydanticValidationError as exc:
        raise StorageCorrupt(f"snapshot holds a malformed record: {exc}") from exc
