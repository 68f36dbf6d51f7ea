"""solrbridge - Session, query, indexing and delete client for Apache Solr."""

from solrbridge.config import SolrSettings, configure_logging, get_settings
from solrbridge.connector import SolrConnector
from solrbridge.core.documents import InputDocument, fields_to_document
from solrbridge.core.exceptions import (
    ConnectFailure,
    DeleteError,
    IndexingError,
    InvalidPayloadError,
    InvalidQueryError,
    MalformedAddressError,
    NotConnectedError,
    QueryError,
    RollbackFailure,
    SolrBridgeError,
)
from solrbridge.core.models import ConnectionConfig, QueryResult, QuerySpec, UpdateOutcome
from solrbridge.core.types import ConnectionState, LivenessMode, SortOrder, TransactionStatus
from solrbridge.search.indexer import SearchIndexer, TransactionResult
from solrbridge.search.query_builder import build_query
from solrbridge.search.searcher import Searcher
from solrbridge.session import SolrSession

__version__ = "0.1.0"
__all__ = [
    # Facade
    "SolrConnector",
    # Config
    "SolrSettings",
    "configure_logging",
    "get_settings",
    # Session
    "ConnectionConfig",
    "SolrSession",
    # Operations
    "Searcher",
    "SearchIndexer",
    "TransactionResult",
    "build_query",
    "fields_to_document",
    # Types
    "ConnectionState",
    "LivenessMode",
    "SortOrder",
    "TransactionStatus",
    # Models
    "InputDocument",
    "QueryResult",
    "QuerySpec",
    "UpdateOutcome",
    # Exceptions
    "ConnectFailure",
    "DeleteError",
    "IndexingError",
    "InvalidPayloadError",
    "InvalidQueryError",
    "MalformedAddressError",
    "NotConnectedError",
    "QueryError",
    "RollbackFailure",
    "SolrBridgeError",
    # Version
    "__version__",
]
