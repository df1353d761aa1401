from unittest.mock import MagicMock

import pytest
import requests

from quotesync.errors import SyncFailed
from quotesync.models.schemas import Quote
from quotesync.remote import RemoteQuoteSource, welcome_transform

URL = "https://example.test/users"

USERS = [
    {"id": 1, "name": "Leanne", "company": {"name": "Romaguera-Crona"}},
    {"id": 2, "name": "Ervin", "company": {"name": "Deckow-Crist"}},
]


def make_source(payload=None, status_error=None, get_error=None, json_error=None):
    http = MagicMock()
    response = MagicMock()
    if status_error is not None:
        response.raise_for_status.side_effect = status_error
    if json_error is not None:
        response.json.side_effect = json_error
    else:
        response.json.return_value = payload
    if get_error is not None:
        http.get.side_effect = get_error
    else:
        http.get.return_value = response
    return RemoteQuoteSource(url=URL, timeout=5, session=http), http


def test_welcome_transform():
    assert welcome_transform(USERS[0]) == Quote(
        id=1, text="Welcome to Romaguera-Crona!", category="Welcome"
    )


def test_fetch_quotes_maps_every_user():
    source, http = make_source(USERS)

    quotes = source.fetch_quotes()

    http.get.assert_called_once_with(URL, timeout=5)
    assert [q.id for q in quotes] == [1, 2]
    assert quotes[1].text == "Welcome to Deckow-Crist!"
    assert {q.category for q in quotes} == {"Welcome"}


def test_fetch_quotes_with_custom_transform():
    http = MagicMock()
    http.get.return_value.json.return_value = [{"key": 7, "body": "Hi", "tag": "T"}]
    source = RemoteQuoteSource(
        url=URL,
        transform=lambda o: Quote(id=o["key"], text=o["body"], category=o["tag"]),
        session=http,
    )
    assert source.fetch_quotes() == [Quote(id=7, text="Hi", category="T")]


@pytest.mark.parametrize(
    "kwargs",
    [
        {"get_error": requests.ConnectionError("offline")},
        {"get_error": requests.Timeout("slow")},
        {"payload": USERS, "status_error": requests.HTTPError("503 Server Error")},
        {"json_error": ValueError("Expecting value")},
        {"payload": {"users": USERS}},
        {"payload": [{"id": 3}]},
        {"payload": [{"id": "three", "company": {"name": "X"}}]},
        {"payload": [None]},
    ],
)
def test_fetch_quotes_failures_raise_sync_failed(kwargs):
    source, _ = make_source(**kwargs)
    with pytest.raises(SyncFailed):
        source.fetch_quotes()


def test_post_quote_success():
    http = MagicMock()
    source = RemoteQuoteSource(url=URL, timeout=5, session=http)
    quote = Quote(id=6, text="Posted", category="Out")

    assert source.post_quote(quote) is True
    http.post.assert_called_once_with(
        URL, json={"id": 6, "text": "Posted", "category": "Out"}, timeout=5
    )


def test_post_quote_failure_returns_false():
    http = MagicMock()
    http.post.side_effect = requests.ConnectionError("offline")
    source = RemoteQuoteSource(url=URL, session=http)
    assert source.post_quote(Quote(id=1, text="x", category="y")) is False


def test_timeout_defaults_to_settings():
    from quotesync.config import get_settings

    source = RemoteQuoteSource(url=URL, session=MagicMock())
    assert source.timeout == get_settings().http_timeout
