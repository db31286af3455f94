"""Collection service that resolves and writes declared reference fields."""

import asyncio
from typing import Any

import structlog

from app.database import SortDirection
from app.models.documents import (
    DELETE_FIELD,
    Document,
    DocumentRef,
    FieldValue,
    WriteFields,
    reference_id,
)
from app.services.collection_service import CollectionService, WriteResult

logger = structlog.get_logger(__name__)


class ReferenceCollectionService:
    """
    Wraps a CollectionService for a collection with reference fields.

    On read, each declared reference is replaced by ``{id, **target}`` or None
    when the target does not exist. On write, plain ids become reference
    handles; on update an empty value removes the field while an absent one
    leaves it untouched.
    """

    def __init__(self, base: CollectionService, references: dict[str, str]):
        """
        Initialize service.

        Args:
            base: Generic service for the same collection
            references: Reference field name -> target collection
        """
        self.base = base
        self.collection = base.collection
        self.references = references

    async def _resolve_field(self, target: str, value: FieldValue) -> dict[str, Any] | None:
        if isinstance(value, DocumentRef):
            document = await self.base.store.get(value.collection, value.id)
        elif isinstance(value, str) and value.strip():
            # Legacy documents written with a plain id
            document = await self.base.store.get(target, value.strip())
        else:
            return None

        return document.to_dict() if document else None

    async def resolve(self, document: Document) -> dict[str, Any]:
        """Expand every declared reference field of a document."""
        fields = list(self.references.items())
        resolved = await asyncio.gather(
            *(
                self._resolve_field(target, document.fields.get(field))
                for field, target in fields
            )
        )
        data = document.to_dict()
        for (field, _), value in zip(fields, resolved, strict=True):
            data[field] = value
        return data

    def to_write_fields(self, payload: dict[str, Any], *, for_update: bool) -> WriteFields:
        """Convert incoming reference ids to handles."""
        fields: WriteFields = {
            key: value for key, value in payload.items() if key not in self.references
        }
        for field, target in self.references.items():
            if field not in payload:
                continue
            doc_id = reference_id(payload[field])
            if doc_id:
                fields[field] = DocumentRef(target, doc_id)
            elif for_update:
                fields[field] = DELETE_FIELD
        return fields

    async def list_documents(
        self,
        limit: int,
        order_by: str | None = None,
        direction: SortDirection = "asc",
    ) -> list[dict[str, Any]]:
        """List documents with references expanded, in store order."""
        documents = await self.base.store.list_documents(
            self.collection, limit=limit, order_by=order_by, direction=direction
        )
        return list(await asyncio.gather(*(self.resolve(document) for document in documents)))

    async def get_document(self, doc_id: str) -> dict[str, Any]:
        """Get a document with references expanded."""
        return await self.resolve(await self.base.fetch(doc_id))

    async def create_document(self, payload: dict[str, Any]) -> WriteResult:
        """Create a document, storing reference fields as handles."""
        payload = self.base.strip_immutable(payload, frozenset({"id"}))
        document = await self.base.write_new(self.to_write_fields(payload, for_update=False))
        return WriteResult(data=await self.resolve(document))

    async def update_document(self, doc_id: str, payload: dict[str, Any]) -> WriteResult:
        """Update a document; empty reference values remove the field."""
        await self.base.fetch(doc_id)
        fields = self.to_write_fields(self.base.strip_immutable(payload), for_update=True)
        removed = [field for field, value in fields.items() if value is DELETE_FIELD]
        if removed:
            logger.info(
                "reference_fields_removed",
                collection=self.collection,
                doc_id=doc_id,
                fields=removed,
            )
        document = await self.base.write_update(doc_id, fields)
        return WriteResult(data=await self.resolve(document))

    async def delete_document(self, doc_id: str) -> WriteResult:
        """Delete a document; referencing documents are left as they are."""
        return await self.base.delete_document(doc_id)
