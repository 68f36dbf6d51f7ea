"""Main library facade for standalone usage."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import Any

import httpx

from solrbridge.config import SolrSettings, get_settings
from solrbridge.core.documents import InputDocument, fields_to_document
from solrbridge.core.models import (
    DEFAULT_HANDLER,
    ConnectionConfig,
    QueryResult,
    QuerySpec,
    UpdateOutcome,
)
from solrbridge.core.types import SortOrder
from solrbridge.search.indexer import SearchIndexer
from solrbridge.search.query_builder import (
    DEFAULT_FACET_LIMIT,
    DEFAULT_FACET_MIN_COUNT,
    DEFAULT_HIGHLIGHT_SNIPPETS,
)
from solrbridge.search.searcher import Searcher
from solrbridge.session import SolrSession

logger = logging.getLogger(__name__)


class SolrConnector:
    """
    Main entry point for the solrbridge library.

    Wires a session, a searcher and an indexer together behind one object.

    Usage:
        with SolrConnector() as solr:
            solr.index({"id": "1", "title": "Solr in Action"})
            result = solr.query("title:solr", facet_fields=["category"])
            solr.delete_by_id("1")

    Settings are loaded from environment variables or can be passed explicitly.
    """

    def __init__(
        self,
        settings: SolrSettings | None = None,
        *,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        """
        Initialize the connector (disconnected).

        Args:
            settings: Connector settings. If not provided, loaded from environment.
            transport: Optional custom httpx transport
        """
        self._settings = settings or get_settings()
        self._session = SolrSession.from_settings(self._settings, transport=transport)
        self._searcher = Searcher(self._session)
        self._indexer = SearchIndexer(self._session)

    @property
    def settings(self) -> SolrSettings:
        return self._settings

    @property
    def session(self) -> SolrSession:
        return self._session

    # ------------------------------------------------------------------
    # Connection management
    # ------------------------------------------------------------------

    def connect(self, config: ConnectionConfig | None = None) -> None:
        """Connect to the configured Solr server (or to ``config``)."""
        self._session.connect(config)

    def disconnect(self) -> None:
        """Disconnect from the server."""
        self._session.disconnect()

    def is_connected(self) -> bool:
        """Validate the connection by pinging the server."""
        return self._session.validate()

    def connection_identifier(self) -> str | None:
        """URL of the connected server, or None when disconnected."""
        return self._session.identifier

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    def query(
        self,
        q: str,
        handler: str | None = DEFAULT_HANDLER,
        *,
        highlight_field: str | None = None,
        highlight_snippets: int = DEFAULT_HIGHLIGHT_SNIPPETS,
        facet_fields: Iterable[str] | None = None,
        facet_limit: int = DEFAULT_FACET_LIMIT,
        facet_min_count: int = DEFAULT_FACET_MIN_COUNT,
        parameters: Mapping[str, str] | None = None,
        filter_queries: Iterable[str] | None = None,
        sort_fields: Mapping[str, SortOrder | str] | None = None,
    ) -> QueryResult:
        """
        Submit a query to the server and get the results.

        Args:
            q: Query string, normally "field:value" or just "value"
            handler: Request handler to use
            highlight_field: Field on which to highlight results
            highlight_snippets: Number of highlight snippets per result
            facet_fields: Fields for a faceted query; enables faceting if non-empty
            facet_limit: Facet limit of the query
            facet_min_count: Facet minimum count of the query
            parameters: Additional request parameters
            filter_queries: Queries to filter the results
            sort_fields: Fields to sort by, each "asc" or "desc"
        """
        return self._searcher.query(
            q,
            handler,
            highlight_field=highlight_field,
            highlight_snippets=highlight_snippets,
            facet_fields=facet_fields,
            facet_limit=facet_limit,
            facet_min_count=facet_min_count,
            extra_params=parameters,
            filter_queries=filter_queries,
            sort_fields=sort_fields,
        )

    def execute(self, spec: QuerySpec) -> QueryResult:
        """Execute a prebuilt query spec."""
        return self._searcher.execute(spec)

    def delete_by_query(self, q: str) -> UpdateOutcome:
        """Delete by query; use "*:*" to delete everything."""
        return self._indexer.delete_by_query(q)

    def delete_by_id(self, document_id: str) -> UpdateOutcome:
        """Delete a single document by id."""
        return self._indexer.delete_by_id(document_id)

    def index(self, payload: Any) -> UpdateOutcome:
        """Index a document, field map, or a collection of either, then commit."""
        return self._indexer.index_documents(payload)

    def index_records(self, payload: Any) -> UpdateOutcome:
        """Index a record or a collection of records, then commit."""
        return self._indexer.index_records(payload)

    @staticmethod
    def message_to_input_document(fields: Mapping[str, Any] | None) -> InputDocument | None:
        """Convert a field map into an indexable document (None if empty)."""
        return fields_to_document(fields)

    def __enter__(self) -> SolrConnector:
        self.connect()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.disconnect()
