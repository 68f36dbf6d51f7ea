"""HTTP client wrapper for a Solr server."""

from __future__ import annotations

import logging
from collections.abc import Generator, Iterator, Sequence
from contextlib import contextmanager
from typing import Any

import httpx
from pydantic_core import PydanticSerializationError, to_json

from solrbridge.core.exceptions import (
    InvalidPayloadError,
    MalformedAddressError,
    SolrServerError,
    SolrTransportError,
)

logger = logging.getLogger(__name__)

PING_PATH = "/admin/ping"
UPDATE_PATH = "/update"

Params = Sequence[tuple[str, str]]


def parse_server_url(address: str) -> httpx.URL:
    """
    Parse and check a Solr server address.

    Args:
        address: Absolute http(s) URL of the Solr server (core included)

    Returns:
        The parsed URL

    Raises:
        MalformedAddressError: If the address is not an absolute http(s) URL
    """
    try:
        url = httpx.URL(address)
    except (httpx.InvalidURL, TypeError) as e:
        raise MalformedAddressError(
            f"The url: {address} is malformed.", address=str(address)
        ) from e

    if url.scheme not in ("http", "https") or not url.host:
        raise MalformedAddressError(f"The url: {address} is malformed.", address=address)
    return url


class ScopedBasicAuth(httpx.Auth):
    """
    HTTP basic auth that is only sent to one host and port.

    A ``port`` of None matches any port on the host.
    """

    def __init__(self, username: str, password: str, host: str, port: int | None) -> None:
        self._basic = httpx.BasicAuth(username, password)
        self.host = host
        self.port = port

    def matches(self, url: httpx.URL) -> bool:
        """Whether credentials apply to a request URL."""
        if url.host != self.host:
            return False
        return self.port is None or url.port == self.port

    def auth_flow(self, request: httpx.Request) -> Generator[httpx.Request, httpx.Response, None]:
        if self.matches(request.url):
            yield from self._basic.auth_flow(request)
        else:
            yield request


class SolrClient:
    """
    Synchronous wrapper for Solr HTTP operations.

    Provides methods for ping, search and JSON update commands. Every
    failure is raised as SolrServerError (Solr answered with an error) or
    SolrTransportError (no usable response). Updates that cannot be encoded
    as JSON raise InvalidPayloadError before anything is sent.
    """

    def __init__(
        self,
        url: str,
        *,
        auth: httpx.Auth | None = None,
        timeout: float = 30.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        """
        Initialize the Solr client.

        Args:
            url: Solr base URL, including the core
            auth: Optional authentication applied to every request
            timeout: Request timeout in seconds
            transport: Optional custom httpx transport
        """
        self._url = url.rstrip("/")
        self._client = httpx.Client(
            base_url=self._url,
            auth=auth,
            timeout=httpx.Timeout(timeout),
            headers={
                "User-Agent": "solrbridge/1.0",
                "Accept": "application/json",
            },
            follow_redirects=True,
            transport=transport,
        )

    @property
    def url(self) -> str:
        """The Solr base URL this client is bound to."""
        return self._url

    @property
    def is_closed(self) -> bool:
        return self._client.is_closed

    def close(self) -> None:
        """Close the underlying HTTP connection pool."""
        if not self._client.is_closed:
            self._client.close()

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    def ping(self) -> dict[str, Any]:
        """Send a ping request to the server."""
        return self._request("GET", PING_PATH)

    def select(self, path: str, params: Params) -> dict[str, Any]:
        """
        Run a search request.

        Args:
            path: Request handler path (e.g. "/select")
            params: Ordered request parameters

        Returns:
            The decoded Solr response
        """
        return self._request("GET", path, params=params)

    def add(self, documents: list[dict[str, Any]]) -> dict[str, Any]:
        """Add documents to the pending update batch."""
        return self._update(documents)

    def commit(self) -> dict[str, Any]:
        """Commit pending updates."""
        return self._update({"commit": {}})

    def rollback(self) -> dict[str, Any]:
        """Discard uncommitted updates."""
        return self._update({"rollback": {}})

    def delete_by_id(self, document_id: str) -> dict[str, Any]:
        """Delete a single document by its unique key."""
        return self._update({"delete": {"id": document_id}})

    def delete_by_query(self, query: str) -> dict[str, Any]:
        """Delete every document matching a query."""
        return self._update({"delete": {"query": query}})

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _update(self, commands: Any) -> dict[str, Any]:
        try:
            content = to_json(commands)
        except PydanticSerializationError as e:
            raise InvalidPayloadError(
                f"Update cannot be encoded as JSON: {e}",
                details={"cause": str(e)},
            ) from e
        return self._request(
            "POST",
            UPDATE_PATH,
            content=content,
            headers={"Content-Type": "application/json"},
        )

    @contextmanager
    def _translate_errors(self) -> Iterator[None]:
        """Turn httpx failures into transport errors."""
        try:
            yield
        except httpx.HTTPError as e:
            raise SolrTransportError(f"HTTP error: {e}") from e
        except RuntimeError as e:
            # httpx refuses to send on a closed client (session disconnected mid-call)
            if not self._client.is_closed:
                raise
            raise SolrTransportError(f"Client for {self._url} is closed") from e

    def _request(
        self,
        method: str,
        path: str,
        *,
        params: Params | None = None,
        **kwargs: Any,
    ) -> dict[str, Any]:
        """Send a request and decode the JSON response."""
        query = [(k, v) for k, v in (params or ()) if k != "wt"]
        query.append(("wt", "json"))

        with self._translate_errors():
            response = self._client.request(method, path, params=query, **kwargs)

        if not response.is_success:
            raise SolrServerError(
                self._error_message(response),
                status_code=response.status_code,
                details={"path": path},
            )

        try:
            return response.json()
        except ValueError as e:
            raise SolrTransportError(f"Invalid JSON in response from {path}") from e

    @staticmethod
    def _error_message(response: httpx.Response) -> str:
        """Extract Solr's error message from an error response."""
        try:
            error = response.json().get("error") or {}
            message = error.get("msg")
        except (ValueError, AttributeError):
            message = None
        return message or f"Solr returned HTTP {response.status_code}"

    def __enter__(self) -> SolrClient:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
