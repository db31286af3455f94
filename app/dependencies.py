"""FastAPI dependencies."""

from typing import Annotated

from fastapi import Depends

from app.config import settings
from app.core.identity import IdentityProvider, get_identity_provider
from app.core.storage import ObjectStorage, get_object_storage
from app.database import DocumentStore, get_document_store
from app.services.registry import CollectionRegistry
from app.services.upload_service import UploadService

DocumentStoreDep = Annotated[DocumentStore, Depends(get_document_store)]
IdentityProviderDep = Annotated[IdentityProvider, Depends(get_identity_provider)]
ObjectStorageDep = Annotated[ObjectStorage, Depends(get_object_storage)]


def get_collection_registry(
    store: DocumentStoreDep,
    identity_provider: IdentityProviderDep,
) -> CollectionRegistry:
    """
    Build the collection registry for a request.

    Args:
        store: Document store
        identity_provider: Identity provider used for the users collection

    Returns:
        Registry resolving collection handlers
    """
    return CollectionRegistry(store, identity_provider)


def get_upload_service(storage: ObjectStorageDep) -> UploadService:
    """Build the upload service for a request."""
    return UploadService(storage, default_path=settings.upload_default_path)


# Type aliases for dependency injection
CollectionRegistryDep = Annotated[CollectionRegistry, Depends(get_collection_registry)]
UploadServiceDep = Annotated[UploadService, Depends(get_upload_service)]
