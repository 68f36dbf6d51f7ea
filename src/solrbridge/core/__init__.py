"""Core types, models, documents and exceptions."""

from .documents import InputDocument, fields_to_document
from .exceptions import (
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
    SolrServerError,
    SolrTransportError,
)
from .models import (
    DEFAULT_HANDLER,
    DEFAULT_SERVER_URL,
    ConnectionConfig,
    FacetCount,
    FacetOptions,
    HighlightOptions,
    QueryResult,
    QuerySpec,
    UpdateOutcome,
)
from .types import (
    ConnectionState,
    LivenessMode,
    PayloadKind,
    SortOrder,
    TransactionStatus,
)

__all__ = [
    # Types
    "ConnectionState",
    "LivenessMode",
    "PayloadKind",
    "SortOrder",
    "TransactionStatus",
    # Models
    "DEFAULT_HANDLER",
    "DEFAULT_SERVER_URL",
    "ConnectionConfig",
    "FacetCount",
    "FacetOptions",
    "HighlightOptions",
    "QueryResult",
    "QuerySpec",
    "UpdateOutcome",
    # Documents
    "InputDocument",
    "fields_to_document",
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
    "SolrServerError",
    "SolrTransportError",
]
