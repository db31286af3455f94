"""Generic collection service for schema-less Firestore collections."""

from dataclasses import dataclass
from enum import StrEnum
from typing import Any, Protocol

import structlog

from app.core.clock import Clock, utc_now
from app.core.exceptions import NotFoundException
from app.database import DocumentStore, SortDirection
from app.models.documents import Document, WriteFields

logger = structlog.get_logger(__name__)


class SyncOutcome(StrEnum):
    """State of the secondary (identity provider) half of a write."""

    NOT_APPLICABLE = "not_applicable"
    SKIPPED = "skipped"
    SYNCED = "synced"
    PROVIDER_FAILED = "provider_failed"


@dataclass
class WriteResult:
    """Result of a create/update/delete.

    ``data`` is the document after the write (None after a delete).
    A store write that succeeded while the identity provider failed is
    reported as ``PROVIDER_FAILED`` rather than as an error.
    """

    data: dict[str, Any] | None
    outcome: SyncOutcome = SyncOutcome.NOT_APPLICABLE
    provider_error: str | None = None
    message: str | None = None

    @property
    def is_degraded(self) -> bool:
        return self.outcome is SyncOutcome.PROVIDER_FAILED


class CollectionHandler(Protocol):
    """Operations every collection handler exposes to the API layer."""

    collection: str

    async def list_documents(
        self,
        limit: int,
        order_by: str | None = None,
        direction: SortDirection = "asc",
    ) -> list[dict[str, Any]]: ...

    async def get_document(self, doc_id: str) -> dict[str, Any]: ...

    async def create_document(self, payload: dict[str, Any]) -> WriteResult: ...

    async def update_document(self, doc_id: str, payload: dict[str, Any]) -> WriteResult: ...

    async def delete_document(self, doc_id: str) -> WriteResult: ...


class CollectionService:
    """Collection-agnostic CRUD over the document store."""

    # Fields the client may never overwrite after creation
    IMMUTABLE_FIELDS: frozenset[str] = frozenset({"id", "createdAt"})

    def __init__(self, store: DocumentStore, collection: str, clock: Clock = utc_now):
        """Initialize service for a single collection."""
        self.store = store
        self.collection = collection
        self.clock = clock

    def strip_immutable(
        self, payload: dict[str, Any], immutable: frozenset[str] | None = None
    ) -> dict[str, Any]:
        """Drop fields that cannot change after creation."""
        immutable = immutable if immutable is not None else self.IMMUTABLE_FIELDS
        return {key: value for key, value in payload.items() if key not in immutable}

    def stamp_created(self, fields: WriteFields) -> WriteFields:
        """Add ``createdAt``/``updatedAt`` to a new document."""
        now = self.clock()
        return {**fields, "createdAt": now, "updatedAt": now}

    def stamp_updated(self, fields: WriteFields) -> WriteFields:
        """Re-stamp ``updatedAt`` on an update."""
        return {**fields, "updatedAt": self.clock()}

    async def fetch(self, doc_id: str, message: str = "Document not found") -> Document:
        """Get a document or raise NotFoundException."""
        document = await self.store.get(self.collection, doc_id)
        if document is None:
            raise NotFoundException(message)
        return document

    async def list_documents(
        self,
        limit: int,
        order_by: str | None = None,
        direction: SortDirection = "asc",
    ) -> list[dict[str, Any]]:
        """List documents without reference expansion."""
        documents = await self.store.list_documents(
            self.collection, limit=limit, order_by=order_by, direction=direction
        )
        return [document.to_dict() for document in documents]

    async def get_document(self, doc_id: str) -> dict[str, Any]:
        """Get a single document."""
        return (await self.fetch(doc_id)).to_dict()

    async def write_new(self, fields: WriteFields) -> Document:
        """Store a stamped new document and read it back."""
        doc_id = await self.store.create(self.collection, self.stamp_created(fields))
        logger.info("document_created", collection=self.collection, doc_id=doc_id)
        return await self.fetch(doc_id)

    async def write_update(self, doc_id: str, fields: WriteFields) -> Document:
        """Apply a stamped update to an existing document and read it back."""
        await self.store.update(self.collection, doc_id, self.stamp_updated(fields))
        logger.info("document_updated", collection=self.collection, doc_id=doc_id)
        return await self.fetch(doc_id)

    async def create_document(self, payload: dict[str, Any]) -> WriteResult:
        """Create a document from the payload as given."""
        document = await self.write_new(self.strip_immutable(payload, frozenset({"id"})))
        return WriteResult(data=document.to_dict())

    async def update_document(self, doc_id: str, payload: dict[str, Any]) -> WriteResult:
        """Update a document, ignoring immutable fields."""
        await self.fetch(doc_id)
        document = await self.write_update(doc_id, self.strip_immutable(payload))
        return WriteResult(data=document.to_dict())

    async def delete_document(self, doc_id: str) -> WriteResult:
        """Delete a document; deleting an absent id succeeds."""
        await self.store.delete(self.collection, doc_id)
        logger.info("document_deleted", collection=self.collection, doc_id=doc_id)
        return WriteResult(data=None)
