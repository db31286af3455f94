"""Generic collection endpoints."""

from typing import Any, Literal

import structlog
from fastapi import APIRouter, Body, Query, status

from app.config import settings
from app.dependencies import CollectionRegistryDep
from app.models.collections import COLLECTION_CONFIGS
from app.models.documents import serialize_document
from app.schemas.common import (
    CollectionCatalogResponse,
    CollectionInfo,
    DocumentResponse,
    ErrorResponse,
    ListResponse,
)
from app.services.collection_service import WriteResult

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/collections", tags=["Collections"])

ERROR_RESPONSES: dict[int | str, dict[str, Any]] = {
    status.HTTP_404_NOT_FOUND: {"model": ErrorResponse},
    status.HTTP_500_INTERNAL_SERVER_ERROR: {"model": ErrorResponse},
}


def _write_response(collection: str, result: WriteResult) -> DocumentResponse:
    """Build the envelope for a write, logging a partially applied dual write."""
    if result.is_degraded:
        logger.warning(
            "dual_write_degraded",
            collection=collection,
            outcome=result.outcome.value,
            provider_error=result.provider_error,
        )

    fields: dict[str, Any] = {"success": True}
    if result.data is not None:
        fields["data"] = serialize_document(result.data)
    if result.message:
        fields["message"] = result.message
    return DocumentResponse(**fields)


@router.get(
    "",
    response_model=CollectionCatalogResponse,
    summary="List known collections",
)
async def list_collections() -> CollectionCatalogResponse:
    """
    List the collections the admin dashboard knows about.

    Returns:
        Catalog entries with display metadata
    """
    entries = [
        CollectionInfo(
            name=config.name,
            display_name=config.display_name,
            icon=config.icon,
            description=config.description,
        )
        for config in sorted(COLLECTION_CONFIGS.values(), key=lambda c: c.name)
    ]
    return CollectionCatalogResponse(success=True, data=entries, count=len(entries))


@router.get(
    "/{collection}",
    response_model=ListResponse,
    responses=ERROR_RESPONSES,
    summary="List documents of a collection",
)
async def list_documents(
    collection: str,
    registry: CollectionRegistryDep,
    limit: int = Query(settings.default_list_limit, ge=1, le=settings.max_list_limit),
    order_by: str | None = Query(None, alias="orderBy"),
    order_direction: Literal["asc", "desc"] = Query("asc", alias="orderDirection"),
) -> ListResponse:
    """
    List documents of a collection.

    Collections with reference fields return them resolved to the target
    document, or null when the target is missing.

    Args:
        collection: Collection name
        registry: Collection handler registry
        limit: Maximum number of documents
        order_by: Optional field to order by
        order_direction: asc or desc

    Returns:
        Documents and their count
    """
    handler = registry.get_handler(collection)
    documents = await handler.list_documents(limit, order_by=order_by, direction=order_direction)
    data = [serialize_document(document) for document in documents]
    return ListResponse(success=True, data=data, count=len(data))


@router.post(
    "/{collection}",
    response_model=DocumentResponse,
    response_model_exclude_unset=True,
    responses={status.HTTP_400_BAD_REQUEST: {"model": ErrorResponse}, **ERROR_RESPONSES},
    summary="Create a document",
)
async def create_document(
    collection: str,
    registry: CollectionRegistryDep,
    payload: dict[str, Any] = Body(...),
) -> DocumentResponse:
    """
    Create a document; the id and timestamps are assigned server-side.

    Args:
        collection: Collection name
        registry: Collection handler registry
        payload: Field map

    Returns:
        The created document
    """
    handler = registry.get_handler(collection)
    result = await handler.create_document(payload)
    return _write_response(collection, result)


@router.get(
    "/{collection}/{doc_id}",
    response_model=DocumentResponse,
    response_model_exclude_unset=True,
    responses=ERROR_RESPONSES,
    summary="Get a document",
)
async def get_document(
    collection: str,
    doc_id: str,
    registry: CollectionRegistryDep,
) -> DocumentResponse:
    """
    Get a single document.

    Raises:
        NotFoundException: If the document does not exist
    """
    handler = registry.get_handler(collection)
    document = await handler.get_document(doc_id)
    return DocumentResponse(success=True, data=serialize_document(document))


@router.put(
    "/{collection}/{doc_id}",
    response_model=DocumentResponse,
    response_model_exclude_unset=True,
    responses=ERROR_RESPONSES,
    summary="Update a document",
)
async def update_document(
    collection: str,
    doc_id: str,
    registry: CollectionRegistryDep,
    payload: dict[str, Any] = Body(...),
) -> DocumentResponse:
    """
    Update a document.

    ``createdAt`` (and, for users, ``uid``) in the payload is ignored.

    Raises:
        NotFoundException: If the document does not exist
    """
    handler = registry.get_handler(collection)
    result = await handler.update_document(doc_id, payload)
    return _write_response(collection, result)


@router.delete(
    "/{collection}/{doc_id}",
    response_model=DocumentResponse,
    response_model_exclude_unset=True,
    responses=ERROR_RESPONSES,
    summary="Delete a document",
)
async def delete_document(
    collection: str,
    doc_id: str,
    registry: CollectionRegistryDep,
) -> DocumentResponse:
    """
    Delete a document. Deleting a missing document succeeds.
    """
    handler = registry.get_handler(collection)
    result = await handler.delete_document(doc_id)
    if not result.message:
        result.message = "Document deleted"
    return _write_response(collection, result)
