"""Document store access backed by Cloud Firestore."""

from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any, Literal, Protocol

import structlog
from google.api_core import exceptions as google_exceptions
from google.cloud import firestore
from google.cloud.firestore_v1.async_client import AsyncClient
from google.cloud.firestore_v1.base_document import BaseDocumentReference

from app.core.exceptions import NotFoundException, StoreException
from app.core.firebase import get_firestore_client
from app.models.documents import (
    DELETE_FIELD,
    Document,
    DocumentRef,
    FieldValue,
    Fields,
    WriteFields,
)

logger = structlog.get_logger(__name__)

SortDirection = Literal["asc", "desc"]


class DocumentStore(Protocol):
    """Operations the collection services need from the document store."""

    async def get(self, collection: str, doc_id: str) -> Document | None:
        """Return the document, or None when absent."""
        ...

    async def list_documents(
        self,
        collection: str,
        limit: int,
        order_by: str | None = None,
        direction: SortDirection = "asc",
    ) -> list[Document]:
        """Return up to ``limit`` documents in store iteration order."""
        ...

    async def create(self, collection: str, fields: WriteFields) -> str:
        """Store a new document and return its assigned id."""
        ...

    async def update(self, collection: str, doc_id: str, fields: WriteFields) -> None:
        """Merge fields into an existing document; DELETE_FIELD removes a field."""
        ...

    async def delete(self, collection: str, doc_id: str) -> None:
        """Delete a document. Deleting an absent document is not an error."""
        ...


@contextmanager
def _store_errors(operation: str, collection: str) -> Iterator[None]:
    """Translate Google API errors into StoreException."""
    try:
        yield
    except google_exceptions.GoogleAPIError as e:
        message = getattr(e, "message", None) or str(e)
        logger.error(
            "firestore_call_failed",
            operation=operation,
            collection=collection,
            error=message,
        )
        raise StoreException(message) from e


class FirestoreDocumentStore:
    """DocumentStore implementation over the async Firestore client."""

    def __init__(self, client: AsyncClient):
        """Initialize store with a Firestore client."""
        self.client = client

    def _to_store(self, value: Any) -> Any:
        if value is DELETE_FIELD:
            return firestore.DELETE_FIELD
        if isinstance(value, DocumentRef):
            return self.client.collection(value.collection).document(value.id)
        if isinstance(value, dict):
            return {key: self._to_store(item) for key, item in value.items()}
        if isinstance(value, list):
            return [self._to_store(item) for item in value]
        return value

    def _from_store(self, value: Any) -> FieldValue:
        if isinstance(value, BaseDocumentReference):
            return DocumentRef(value.parent.id, value.id)
        if isinstance(value, firestore.GeoPoint):
            return {"latitude": value.latitude, "longitude": value.longitude}
        if isinstance(value, dict):
            return {key: self._from_store(item) for key, item in value.items()}
        if isinstance(value, list):
            return [self._from_store(item) for item in value]
        return value

    def _to_document(self, snapshot: Any) -> Document:
        fields: Fields = {
            key: self._from_store(value) for key, value in (snapshot.to_dict() or {}).items()
        }
        return Document(id=snapshot.id, fields=fields)

    async def get(self, collection: str, doc_id: str) -> Document | None:
        with _store_errors("get", collection):
            snapshot = await self.client.collection(collection).document(doc_id).get()
        if not snapshot.exists:
            return None
        return self._to_document(snapshot)

    async def list_documents(
        self,
        collection: str,
        limit: int,
        order_by: str | None = None,
        direction: SortDirection = "asc",
    ) -> list[Document]:
        query = self.client.collection(collection).limit(limit)
        if order_by:
            query = query.order_by(
                order_by,
                direction=(
                    firestore.Query.DESCENDING if direction == "desc" else firestore.Query.ASCENDING
                ),
            )

        with _store_errors("list", collection):
            return [self._to_document(snapshot) async for snapshot in query.stream()]

    async def create(self, collection: str, fields: WriteFields) -> str:
        with _store_errors("create", collection):
            _, doc_ref = await self.client.collection(collection).add(self._to_store(fields))
        return doc_ref.id

    async def update(self, collection: str, doc_id: str, fields: WriteFields) -> None:
        try:
            with _store_errors("update", collection):
                await self.client.collection(collection).document(doc_id).update(
                    self._to_store(fields)
                )
        except StoreException as e:
            if isinstance(e.__cause__, google_exceptions.NotFound):
                raise NotFoundException() from e
            raise

    async def delete(self, collection: str, doc_id: str) -> None:
        with _store_errors("delete", collection):
            await self.client.collection(collection).document(doc_id).delete()


_document_store: FirestoreDocumentStore | None = None


def get_document_store() -> DocumentStore:
    """Get or create the Firestore-backed document store."""
    global _document_store

    if _document_store is None:
        _document_store = FirestoreDocumentStore(get_firestore_client())

    return _document_store


async def check_database_connection() -> bool:
    """Check if the document store is reachable."""
    try:
        await get_document_store().list_documents("users", limit=1)
        return True
    except Exception:
        return False
