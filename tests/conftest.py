import copy
import itertools
from collections import defaultdict
from collections.abc import AsyncGenerator
from datetime import UTC, datetime, timedelta
from typing import Any

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from app.core.exceptions import NotFoundException, StoreException
from app.core.identity import AuthUser, IdentityProviderError, get_identity_provider
from app.core.storage import get_object_storage
from app.database import get_document_store
from app.main import app
from app.models.documents import DELETE_FIELD, Document
from app.services.collection_service import CollectionService
from app.services.registry import CollectionRegistry


class FakeDocumentStore:
    """In-memory DocumentStore keeping insertion order like Firestore's default scan."""

    def __init__(self) -> None:
        self.collections: dict[str, dict[str, dict[str, Any]]] = defaultdict(dict)
        self.calls: list[tuple[str, str]] = []
        self.fail_on: dict[str, str] = {}
        self._ids = itertools.count(1)

    def seed(self, collection: str, doc_id: str, fields: dict[str, Any]) -> None:
        self.collections[collection][doc_id] = copy.deepcopy(fields)

    def raw(self, collection: str, doc_id: str) -> dict[str, Any] | None:
        return self.collections[collection].get(doc_id)

    @property
    def write_calls(self) -> list[tuple[str, str]]:
        return [call for call in self.calls if call[0] in {"create", "update", "delete"}]

    def _record(self, operation: str, collection: str) -> None:
        self.calls.append((operation, collection))
        if operation in self.fail_on:
            raise StoreException(self.fail_on[operation])

    async def get(self, collection: str, doc_id: str) -> Document | None:
        self._record("get", collection)
        fields = self.collections[collection].get(doc_id)
        if fields is None:
            return None
        return Document(id=doc_id, fields=copy.deepcopy(fields))

    async def list_documents(
        self,
        collection: str,
        limit: int,
        order_by: str | None = None,
        direction: str = "asc",
    ) -> list[Document]:
        self._record("list", collection)
        items = list(self.collections[collection].items())
        if order_by:
            items = [item for item in items if order_by in item[1]]
            items.sort(key=lambda item: item[1][order_by], reverse=direction == "desc")
        return [Document(id=doc_id, fields=copy.deepcopy(fields)) for doc_id, fields in items[:limit]]

    async def create(self, collection: str, fields: dict[str, Any]) -> str:
        self._record("create", collection)
        doc_id = f"doc{next(self._ids)}"
        self.collections[collection][doc_id] = copy.deepcopy(fields)
        return doc_id

    async def update(self, collection: str, doc_id: str, fields: dict[str, Any]) -> None:
        self._record("update", collection)
        stored = self.collections[collection].get(doc_id)
        if stored is None:
            raise NotFoundException()
        for key, value in fields.items():
            if value is DELETE_FIELD:
                stored.pop(key, None)
            else:
                stored[key] = copy.deepcopy(value)

    async def delete(self, collection: str, doc_id: str) -> None:
        self._record("delete", collection)
        self.collections[collection].pop(doc_id, None)


class FakeIdentityProvider:
    """Records identity provider calls; ``fail_with`` makes every call raise."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, dict[str, Any]]] = []
        self.fail_with: str | None = None
        self._uids = itertools.count(1)

    def _record(self, operation: str, **arguments: Any) -> None:
        self.calls.append((operation, arguments))
        if self.fail_with:
            raise IdentityProviderError(self.fail_with)

    async def create_user(
        self,
        email: str,
        password: str,
        display_name: str | None = None,
        photo_url: str | None = None,
    ) -> AuthUser:
        self._record(
            "create_user",
            email=email,
            password=password,
            display_name=display_name,
            photo_url=photo_url,
        )
        return AuthUser(
            uid=f"auth-uid-{next(self._uids)}",
            email=email,
            creation_time="2026-01-01T00:00:00+00:00",
        )

    async def update_user(self, uid: str, changes: dict[str, str]) -> None:
        self._record("update_user", uid=uid, changes=changes)

    async def delete_user(self, uid: str) -> None:
        self._record("delete_user", uid=uid)


class FakeObjectStorage:
    """In-memory bucket."""

    def __init__(self, bucket_name: str = "test-project.appspot.com") -> None:
        self._bucket_name = bucket_name
        self.objects: dict[str, tuple[bytes, str]] = {}
        self.public: set[str] = set()

    @property
    def bucket_name(self) -> str:
        return self._bucket_name

    async def save(self, key: str, data: bytes, content_type: str) -> None:
        self.objects[key] = (data, content_type)

    async def make_public(self, key: str) -> None:
        self.public.add(key)


class TickingClock:
    """Clock advancing one millisecond per reading."""

    def __init__(self, start: datetime | None = None) -> None:
        self.current = start or datetime(2026, 1, 1, tzinfo=UTC)

    def __call__(self) -> datetime:
        value = self.current
        self.current += timedelta(milliseconds=1)
        return value


@pytest.fixture
def store() -> FakeDocumentStore:
    """In-memory document store."""
    return FakeDocumentStore()


@pytest.fixture
def identity() -> FakeIdentityProvider:
    """Recording identity provider."""
    return FakeIdentityProvider()


@pytest.fixture
def storage() -> FakeObjectStorage:
    """In-memory object storage."""
    return FakeObjectStorage()


@pytest.fixture
def clock() -> TickingClock:
    """Deterministic clock."""
    return TickingClock()


@pytest.fixture
def registry(store, identity, clock) -> CollectionRegistry:
    """Registry over the fakes."""
    return CollectionRegistry(store, identity, clock=clock)


@pytest.fixture
def make_base(store, clock):
    """Factory for a generic service bound to the fake store."""

    def _make(collection: str) -> CollectionService:
        return CollectionService(store, collection, clock=clock)

    return _make


@pytest_asyncio.fixture
async def client(store, identity, storage) -> AsyncGenerator[AsyncClient, None]:
    """Create a test HTTP client."""
    app.dependency_overrides[get_document_store] = lambda: store
    app.dependency_overrides[get_identity_provider] = lambda: identity
    app.dependency_overrides[get_object_storage] = lambda: storage

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()
