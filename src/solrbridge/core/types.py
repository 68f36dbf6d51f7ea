"""Core enums and type definitions."""

from enum import StrEnum


class ConnectionState(StrEnum):
    """Externally observable states of a session."""

    DISCONNECTED = "disconnected"
    CONNECTED = "connected"


class LivenessMode(StrEnum):
    """How a ping response is interpreted by session validation."""

    # Any successful ping counts as alive
    ANY_RESPONSE = "any_response"
    # Ping must also report QTime > 0 (legacy behaviour)
    POSITIVE_QTIME = "positive_qtime"


class SortOrder(StrEnum):
    """Sort direction for a sort field."""

    ASC = "asc"
    DESC = "desc"


class PayloadKind(StrEnum):
    """Shape of an indexing payload, resolved once at the call boundary."""

    SINGLE_DOCUMENT = "single_document"
    DOCUMENT_BATCH = "document_batch"
    SINGLE_RECORD = "single_record"
    RECORD_BATCH = "record_batch"


class TransactionStatus(StrEnum):
    """Result of an add + commit transaction."""

    SUCCESS = "success"
    EMPTY = "empty"
    FAILED_ROLLED_BACK = "failed_rolled_back"
    FAILED_ROLLBACK_FAILED = "failed_rollback_failed"
