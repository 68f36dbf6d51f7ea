"""Search query execution against Solr."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import TYPE_CHECKING

from solrbridge.core.exceptions import QueryError, SolrServerError, SolrTransportError
from solrbridge.core.models import DEFAULT_HANDLER, QueryResult, QuerySpec
from solrbridge.core.types import SortOrder
from solrbridge.search.query_builder import (
    DEFAULT_FACET_LIMIT,
    DEFAULT_FACET_MIN_COUNT,
    DEFAULT_HIGHLIGHT_SNIPPETS,
    build_query,
)

if TYPE_CHECKING:
    from solrbridge.session import SolrSession

logger = logging.getLogger(__name__)


class Searcher:
    """
    Service for running search requests on a session.

    Query failures never tear the session down.
    """

    def __init__(self, session: SolrSession) -> None:
        """
        Initialize the searcher.

        Args:
            session: Session whose client binding is used for requests
        """
        self._session = session

    def execute(self, spec: QuerySpec) -> QueryResult:
        """
        Execute an assembled query.

        Args:
            spec: Query spec, usually produced by build_query()

        Returns:
            Parsed results, with the untouched engine response in ``raw``

        Raises:
            NotConnectedError: If the session is disconnected
            QueryError: If the server rejects the query or the request fails
        """
        client = self._session.client

        try:
            data = client.select(spec.request_path, spec.to_params())
        except SolrServerError as e:
            logger.error(f"Got server exception while trying to query: {e}")
            raise QueryError(
                "Got server exception while trying to query",
                details={"query": spec.raw_query, "status_code": e.status_code, "cause": e.message},
            ) from e
        except SolrTransportError as e:
            logger.error(f"Got transport exception while trying to query: {e}")
            raise QueryError(
                "Got transport exception while trying to query",
                details={"query": spec.raw_query, "cause": e.message},
            ) from e

        try:
            result = QueryResult.from_response(data)
        except (ValueError, TypeError, AttributeError) as e:
            # ValidationError is a ValueError
            logger.error(f"Could not parse the query response: {e}")
            raise QueryError(
                "Could not parse the query response",
                details={"query": spec.raw_query, "cause": str(e)},
            ) from e

        logger.debug(
            f"Query {spec.raw_query!r} matched {result.num_found} documents in {result.q_time}ms"
        )
        return result

    def query(
        self,
        raw_query: str,
        handler: str | None = DEFAULT_HANDLER,
        *,
        highlight_field: str | None = None,
        highlight_snippets: int = DEFAULT_HIGHLIGHT_SNIPPETS,
        facet_fields: Iterable[str] | None = None,
        facet_limit: int = DEFAULT_FACET_LIMIT,
        facet_min_count: int = DEFAULT_FACET_MIN_COUNT,
        extra_params: Mapping[str, str] | None = None,
        filter_queries: Iterable[str] | None = None,
        sort_fields: Mapping[str, SortOrder | str] | None = None,
    ) -> QueryResult:
        """Build a query from its parts and execute it. See build_query()."""
        spec = build_query(
            raw_query,
            handler,
            highlight_field=highlight_field,
            highlight_snippets=highlight_snippets,
            facet_fields=facet_fields,
            facet_limit=facet_limit,
            facet_min_count=facet_min_count,
            extra_params=extra_params,
            filter_queries=filter_queries,
            sort_fields=sort_fields,
        )
        return self.execute(spec)
