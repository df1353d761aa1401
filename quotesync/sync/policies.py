"""Merge policies for conflicting records.

A policy receives the local record and the remote record sharing its id and
returns the record to keep. The engine never inspects which one was chosen.
"""

from __future__ import annotations

from typing import Callable, Dict

from quotesync.models.schemas import Quote

MergePolicy = Callable[[Quote, Quote], Quote]


def server_wins(local: Quote, remote: Quote) -> Quote:
    return remote


def client_wins(local: Quote, remote: Quote) -> Quote:
    return local


POLICIES: Dict[str, MergePolicy] = {
    "server_wins": server_wins,
    "client_wins": client_wins,
}


def get_policy(name: str) -> MergePolicy:
    try:
        return POLICIES[name]
    except KeyError:
        raise ValueError(f"Unknown merge policy {name!r}; choose from {sorted(POLICIES)}") from None
