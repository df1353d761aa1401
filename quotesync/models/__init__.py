"""Data schemas and validation."""
from .schemas import Quote, NewQuote, DEFAULT_QUOTES, decode_snapshot, encode_snapshot

__all__ = [
    "Quote",
    "NewQuote",
    "DEFAULT_QUOTES",
    "decode_snapshot",
    "encode_snapshot",
]
