"""
Remote quote source - fetch the server's record set over HTTP.

The reference endpoint returns user objects rather than quotes, so each
object goes through a transformation that synthesizes a welcome quote. Any
callable mapping a JSON object to a Quote can be swapped in, as long as the
ids it produces are stable between fetches.
"""
from typing import Any, Callable, Dict, List, Optional

import requests
from pydantic import ValidationError as PydanticValidationError

from quotesync.config import get_settings
from quotesync.errors import SyncFailed
from quotesync.models.schemas import Quote
from quotesync.utils.logger import get_logger

logger = get_logger(__name__)

Transform = Callable[[Dict[str, Any]], Quote]


def welcome_transform(obj: Dict[str, Any]) -> Quote:
    """Map a remote user object to a welcome quote in the "Welcome" category."""
    company = obj["company"]["name"]
    return Quote(id=obj["id"], text=f"Welcome to {company}!", category="Welcome")


class RemoteQuoteSource:
    """
    Client for the remote quote endpoint.

    Args:
        url: endpoint returning a JSON array (defaults to settings.remote_url)
        transform: maps one array element to a Quote
        timeout: request timeout in seconds (None uses settings.http_timeout)
        session: optional requests.Session for connection reuse or testing
    """

    def __init__(
        self,
        url: Optional[str] = None,
        transform: Transform = welcome_transform,
        timeout: Optional[float] = None,
        session: Optional[requests.Session] = None,
    ):
        settings = get_settings()
        self.url = url or settings.remote_url
        self.transform = transform
        self.timeout = settings.http_timeout if timeout is None else timeout
        self.http = session or requests.Session()

    def fetch_quotes(self) -> List[Quote]:
        """
        GET the endpoint and convert the payload to quotes.

        Raises:
            SyncFailed: network error, non-2xx status, or malformed payload
        """
        try:
            response = self.http.get(self.url, timeout=self.timeout)
            response.raise_for_status()
            payload = response.json()
        except requests.RequestException as exc:
            logger.error("Error fetching from server: %s", exc)
            raise SyncFailed(f"request to {self.url} failed: {exc}") from exc
        except ValueError as exc:
            logger.error("Server returned invalid JSON: %s", exc)
            raise SyncFailed(f"invalid JSON from {self.url}") from exc

        if not isinstance(payload, list):
            raise SyncFailed(f"expected a JSON array from {self.url}, got {type(payload).__name__}")

        try:
            return [self.transform(item) for item in payload]
        except (KeyError, TypeError, PydanticValidationError) as exc:
            logger.error("Server payload has an unexpected shape: %s", exc)
            raise SyncFailed(f"unexpected record shape from {self.url}: {exc}") from exc

    def post_quote(self, quote: Quote) -> bool:
        """Send one locally added quote to the server. Returns success."""
        try:
            response = self.http.post(self.url, json=quote.model_dump(), timeout=self.timeout)
            response.raise_for_status()
        except requests.RequestException as exc:
            logger.error("Error posting quote %s to server: %s", quote.id, exc)
            return False
        logger.info("Posted quote %s to server", quote.id)
        return True
