"""Object storage client backed by the Firebase Cloud Storage bucket."""

import asyncio
from typing import Protocol

from google.api_core import exceptions as google_exceptions

from app.core.exceptions import StoreException
from app.core.firebase import get_storage_bucket

PUBLIC_URL_BASE = "https://storage.googleapis.com"


class ObjectStorage(Protocol):
    """Bucket operations consumed by the upload service."""

    @property
    def bucket_name(self) -> str:
        """Name of the target bucket."""
        ...

    async def save(self, key: str, data: bytes, content_type: str) -> None:
        """Write bytes under ``key`` with the given content type."""
        ...

    async def make_public(self, key: str) -> None:
        """Grant public read access to ``key``."""
        ...


def public_url(bucket_name: str, key: str) -> str:
    """Public download URL of an object in a bucket."""
    return f"{PUBLIC_URL_BASE}/{bucket_name}/{key}"


class FirebaseObjectStorage:
    """ObjectStorage over a google-cloud-storage bucket."""

    def __init__(self, bucket):
        """Initialize storage with a bucket handle."""
        self.bucket = bucket

    @property
    def bucket_name(self) -> str:
        return self.bucket.name

    async def save(self, key: str, data: bytes, content_type: str) -> None:
        blob = self.bucket.blob(key)
        try:
            await asyncio.to_thread(blob.upload_from_string, data, content_type=content_type)
        except google_exceptions.GoogleAPIError as e:
            raise StoreException(str(e)) from e

    async def make_public(self, key: str) -> None:
        blob = self.bucket.blob(key)
        try:
            await asyncio.to_thread(blob.make_public)
        except google_exceptions.GoogleAPIError as e:
            raise StoreException(str(e)) from e


def get_object_storage() -> ObjectStorage:
    """Return storage bound to the default Firebase bucket."""
    return FirebaseObjectStorage(get_storage_bucket())
