"""Custom exception hierarchy for solrbridge."""

from __future__ import annotations

from typing import Any


class SolrBridgeError(Exception):
    """Base exception for all solrbridge errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}


# ============================================================================
# Connection lifecycle
# ============================================================================


class MalformedAddressError(SolrBridgeError):
    """Server address could not be parsed as an absolute HTTP(S) URL."""

    def __init__(
        self,
        message: str,
        address: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, details)
        self.address = address


class ConnectFailure(SolrBridgeError):
    """Session could not be established."""

    pass


class NotConnectedError(SolrBridgeError):
    """Operation requires a live session but none is established."""

    pass


# ============================================================================
# Input validation
# ============================================================================


class InvalidQueryError(SolrBridgeError):
    """Query builder input is malformed."""

    pass


class InvalidPayloadError(SolrBridgeError):
    """Indexing payload has an unsupported or mixed type."""

    pass


# ============================================================================
# Remote operations
# ============================================================================


class QueryError(SolrBridgeError):
    """Query execution failed on the server or in transport."""

    pass


class DeleteError(SolrBridgeError):
    """Delete by id or by query failed on the server or in transport."""

    pass


class IndexingError(SolrBridgeError):
    """Adding or committing documents failed."""

    def __init__(
        self,
        message: str,
        rolled_back: bool,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, details)
        self.rolled_back = rolled_back


class RollbackFailure(SolrBridgeError):
    """
    Compensating rollback failed after an indexing error.

    The index may hold uncommitted changes from the failed batch.
    ``original`` is the indexing error that triggered the rollback.
    """

    def __init__(
        self,
        message: str,
        original: IndexingError,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, details)
        self.original = original


# ============================================================================
# Transport (raised by SolrClient, classified by callers)
# ============================================================================


class SolrServerError(SolrBridgeError):
    """Solr answered with a non-success status."""

    def __init__(
        self,
        message: str,
        status_code: int,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, details)
        self.status_code = status_code


class SolrTransportError(SolrBridgeError):
    """Request never produced a usable Solr response."""

    pass
