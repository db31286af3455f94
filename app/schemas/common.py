"""Response envelope schemas shared by every endpoint.

Every response is ``{success, data?|error?, count?, message?}``. Endpoints
serialize with ``response_model_exclude_unset`` so optional keys that were
never set are left out.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ListResponse(BaseModel):
    """Envelope for list endpoints."""

    success: bool
    data: list[dict[str, Any]]
    count: int


class DocumentResponse(BaseModel):
    """Envelope for single-document endpoints."""

    success: bool
    data: dict[str, Any] | None = None
    message: str | None = None


class ErrorResponse(BaseModel):
    """Envelope for failures."""

    success: bool
    error: str


class UploadResponse(BaseModel):
    """Envelope for the upload endpoint."""

    model_config = ConfigDict(populate_by_name=True)

    success: bool
    url: str
    file_name: str = Field(alias="fileName")


class CollectionInfo(BaseModel):
    """Catalog entry describing an admin collection."""

    model_config = ConfigDict(populate_by_name=True)

    name: str
    display_name: str = Field(alias="displayName")
    icon: str
    description: str


class CollectionCatalogResponse(BaseModel):
    """Envelope for the collection catalog."""

    success: bool
    data: list[CollectionInfo]
    count: int
