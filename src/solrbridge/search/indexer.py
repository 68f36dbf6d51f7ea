"""Transactional indexing and deletion for Solr."""

from __future__ import annotations

import dataclasses
import logging
from functools import lru_cache
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, TypeAdapter

from solrbridge.core.documents import InputDocument, fields_to_document
from solrbridge.core.exceptions import (
    DeleteError,
    IndexingError,
    InvalidPayloadError,
    RollbackFailure,
    SolrServerError,
    SolrTransportError,
)
from solrbridge.core.models import UpdateOutcome
from solrbridge.core.types import PayloadKind, TransactionStatus

if TYPE_CHECKING:
    from solrbridge.search.client import SolrClient
    from solrbridge.session import SolrSession

logger = logging.getLogger(__name__)

_REMOTE_ERRORS = (SolrServerError, SolrTransportError)


# ============================================================================
# Payloads
# ============================================================================


def is_record(obj: Any) -> bool:
    """Whether an object is a structured record (pydantic model or dataclass instance)."""
    if isinstance(obj, BaseModel):
        return True
    return dataclasses.is_dataclass(obj) and not isinstance(obj, type)


def record_to_document(record: Any) -> dict[str, Any]:
    """
    Map a structured record to document fields.

    Pydantic models use their field aliases; None values are left out.
    """
    if isinstance(record, BaseModel):
        return record.model_dump(mode="json", by_alias=True, exclude_none=True)
    return _record_adapter(type(record)).dump_python(record, mode="json", exclude_none=True)


@lru_cache(maxsize=128)
def _record_adapter(record_type: type) -> TypeAdapter[Any]:
    return TypeAdapter(record_type)


def _is_batch(obj: Any) -> bool:
    return isinstance(obj, Iterable) and not isinstance(obj, (str, bytes, Mapping))


@dataclass
class IndexPayload:
    """An indexing payload with its shape resolved."""

    kind: PayloadKind
    items: list[Any]

    @property
    def is_batch(self) -> bool:
        return self.kind in (PayloadKind.DOCUMENT_BATCH, PayloadKind.RECORD_BATCH)

    @property
    def is_records(self) -> bool:
        return self.kind in (PayloadKind.SINGLE_RECORD, PayloadKind.RECORD_BATCH)

    @classmethod
    def from_documents(cls, payload: Any) -> IndexPayload | None:
        """
        Resolve a document payload.

        Accepts an InputDocument, a flat field map, or an iterable of either.
        Field maps go through fields_to_document(), so empty ones are dropped.

        Returns:
            The resolved payload, or None when there is nothing to index

        Raises:
            InvalidPayloadError: For any other payload type
        """
        if payload is None:
            return None

        if isinstance(payload, Mapping):
            document = _to_document(payload)
            if document is None:
                return None
            return cls(PayloadKind.SINGLE_DOCUMENT, [document])

        if not _is_batch(payload):
            raise InvalidPayloadError(
                f"Cannot index {type(payload).__name__} as a document",
                details={"type": type(payload).__name__},
            )

        documents = []
        for item in payload:
            if not isinstance(item, Mapping):
                raise InvalidPayloadError(
                    "Document batches may only contain documents or field maps",
                    details={"type": type(item).__name__},
                )
            document = _to_document(item)
            if document is not None:
                documents.append(document)

        if not documents:
            return None
        return cls(PayloadKind.DOCUMENT_BATCH, documents)

    @classmethod
    def from_records(cls, payload: Any) -> IndexPayload | None:
        """
        Resolve a record payload.

        Accepts a record or an iterable of records.

        Returns:
            The resolved payload, or None when there is nothing to index

        Raises:
            InvalidPayloadError: For any other payload type
        """
        if payload is None:
            return None

        if is_record(payload):
            return cls(PayloadKind.SINGLE_RECORD, [payload])

        if not _is_batch(payload):
            raise InvalidPayloadError(
                f"Cannot index {type(payload).__name__} as a record",
                details={"type": type(payload).__name__},
            )

        records = list(payload)
        for item in records:
            if not is_record(item):
                raise InvalidPayloadError(
                    "Record batches may only contain pydantic models or dataclass instances",
                    details={"type": type(item).__name__},
                )

        if not records:
            return None
        return cls(PayloadKind.RECORD_BATCH, records)

    def to_documents(self) -> list[dict[str, Any]]:
        """Documents to send to Solr."""
        if self.is_records:
            return [record_to_document(r) for r in self.items]
        return [d.to_dict() for d in self.items]


def _to_document(fields: Mapping[str, Any]) -> InputDocument | None:
    if isinstance(fields, InputDocument):
        return fields if len(fields) else None
    return fields_to_document(fields)


# ============================================================================
# Transaction result
# ============================================================================


@dataclass
class TransactionResult:
    """Result of an add + commit transaction, including any compensating rollback."""

    status: TransactionStatus
    outcome: UpdateOutcome = field(default_factory=UpdateOutcome.empty)
    error: IndexingError | None = None
    cause: Exception | None = None
    rollback_error: Exception | None = None

    @property
    def success(self) -> bool:
        return self.status in (TransactionStatus.SUCCESS, TransactionStatus.EMPTY)

    def raise_for_status(self) -> UpdateOutcome:
        """
        Return the outcome of a successful transaction or raise its error.

        Raises:
            IndexingError: If the transaction failed and was rolled back
            RollbackFailure: If the rollback failed too
        """
        if self.success:
            return self.outcome

        error = self.error or IndexingError("Indexing failed", rolled_back=False)
        if self.status == TransactionStatus.FAILED_ROLLBACK_FAILED:
            error.__cause__ = self.cause
            raise RollbackFailure(
                "Could not rollback an update; the index may contain uncommitted changes",
                original=error,
                details={"original": error.message},
            ) from self.rollback_error

        raise error from self.cause


# ============================================================================
# Indexer
# ============================================================================


class SearchIndexer:
    """
    Service for indexing and deleting documents.

    Indexing adds the whole payload and commits it as one transaction;
    if either step fails the pending changes are rolled back once.
    Deletes are sent as-is with no implicit commit.
    """

    def __init__(self, session: SolrSession) -> None:
        """
        Initialize the indexer.

        Args:
            session: Session whose client binding is used for updates
        """
        self._session = session

    def index_documents(self, payload: Any) -> UpdateOutcome:
        """
        Index a document or a batch of documents, then commit.

        Args:
            payload: InputDocument, field map, or an iterable of either

        Returns:
            The commit outcome, or an empty outcome when there was nothing to index

        Raises:
            InvalidPayloadError: If the payload type is unsupported or a field
                value cannot be encoded as JSON
            IndexingError: If add or commit failed and was rolled back
            RollbackFailure: If the rollback failed too
        """
        return self.run_transaction(IndexPayload.from_documents(payload)).raise_for_status()

    def index_records(self, payload: Any) -> UpdateOutcome:
        """
        Index a record or a batch of records, then commit.

        Records are pydantic models (mapped by alias) or dataclass instances.
        Errors are the same as for index_documents().
        """
        return self.run_transaction(IndexPayload.from_records(payload)).raise_for_status()

    def run_transaction(self, payload: IndexPayload | None) -> TransactionResult:
        """
        Add a resolved payload and commit it, rolling back on failure.

        Never raises for remote failures; they are reported in the result.

        Raises:
            NotConnectedError: If the session is disconnected
        """
        if payload is None:
            logger.debug("Ignored request to index an empty payload")
            return TransactionResult(TransactionStatus.EMPTY)

        client = self._session.client
        documents = payload.to_documents()
        noun = "record(s)" if payload.is_records else "document(s)"

        logger.debug(f"Indexing {payload.kind.value} with {len(documents)} {noun}...")
        try:
            client.add(documents)
            outcome = UpdateOutcome.from_response(client.commit())
        except SolrServerError as e:
            return self._rollback(client, f"Got server error while trying to index {noun}", e)
        except SolrTransportError as e:
            return self._rollback(client, f"Got transport error while trying to index {noun}", e)

        logger.info(f"Indexed {len(documents)} {noun}, commit QTime: {outcome.q_time}ms")
        return TransactionResult(TransactionStatus.SUCCESS, outcome=outcome)

    def _rollback(self, client: SolrClient, message: str, cause: Exception) -> TransactionResult:
        """Attempt the single compensating rollback after a failed add or commit."""
        logger.error(f"{message}: {cause}")
        details = {"cause": str(cause)}

        try:
            client.rollback()
        except _REMOTE_ERRORS as e:
            logger.error(f"Could not rollback an update: {e}")
            return TransactionResult(
                TransactionStatus.FAILED_ROLLBACK_FAILED,
                error=IndexingError(message, rolled_back=False, details=details),
                cause=cause,
                rollback_error=e,
            )

        logger.info("Rolled back pending updates")
        return TransactionResult(
            TransactionStatus.FAILED_ROLLED_BACK,
            error=IndexingError(message, rolled_back=True, details=details),
            cause=cause,
        )

    # ------------------------------------------------------------------
    # Deletes
    # ------------------------------------------------------------------

    def delete_by_query(self, query: str) -> UpdateOutcome:
        """
        Delete every document matching a query. Use "*:*" to delete everything.

        Raises:
            NotConnectedError: If the session is disconnected
            DeleteError: If the server rejects the delete or the request fails
        """
        client = self._session.client
        try:
            data = client.delete_by_query(query)
        except SolrServerError as e:
            raise DeleteError(
                "Got server exception while deleting by query",
                details={"query": query, "cause": e.message},
            ) from e
        except SolrTransportError as e:
            raise DeleteError(
                "Got transport exception while deleting by query",
                details={"query": query, "cause": e.message},
            ) from e

        logger.debug(f"Deleted by query {query!r}")
        return UpdateOutcome.from_response(data)

    def delete_by_id(self, document_id: str) -> UpdateOutcome:
        """
        Delete a single document by id.

        Raises:
            NotConnectedError: If the session is disconnected
            DeleteError: If the server rejects the delete or the request fails
        """
        client = self._session.client
        try:
            data = client.delete_by_id(document_id)
        except SolrServerError as e:
            raise DeleteError(
                "Got server exception while deleting by ID",
                details={"id": document_id, "cause": e.message},
            ) from e
        except SolrTransportError as e:
            raise DeleteError(
                "Got transport exception while deleting by ID",
                details={"id": document_id, "cause": e.message},
            ) from e

        logger.debug(f"Deleted document {document_id}")
        return UpdateOutcome.from_response(data)
