"""Search layer for Solr integration."""

from solrbridge.search.client import ScopedBasicAuth, SolrClient, parse_server_url
from solrbridge.search.indexer import (
    IndexPayload,
    SearchIndexer,
    TransactionResult,
    is_record,
    record_to_document,
)
from solrbridge.search.query_builder import build_query, parse_sort_order
from solrbridge.search.searcher import Searcher

__all__ = [
    # Client
    "ScopedBasicAuth",
    "SolrClient",
    "parse_server_url",
    # Query building
    "build_query",
    "parse_sort_order",
    # Indexer
    "IndexPayload",
    "SearchIndexer",
    "TransactionResult",
    "is_record",
    "record_to_document",
    # Searcher
    "Searcher",
]
