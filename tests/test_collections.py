"""Tests for the generic collection endpoints."""

from datetime import UTC, datetime

import pytest
from httpx import AsyncClient

from app.models.documents import DocumentRef
from app.services.collection_service import SyncOutcome


@pytest.mark.asyncio
class TestListDocuments:
    """Tests for GET /collections/{name}."""

    async def test_list_returns_envelope_in_insertion_order(self, client: AsyncClient, store):
        """Documents come back with their ids, in store order."""
        store.seed("categories", "c1", {"name_en": "Villa"})
        store.seed("categories", "c2", {"name_en": "Chalet"})

        response = await client.get("/api/v1/collections/categories")

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["count"] == 2
        assert [doc["id"] for doc in body["data"]] == ["c1", "c2"]
        assert body["data"][0]["name_en"] == "Villa"

    async def test_list_respects_limit_and_order(self, client: AsyncClient, store):
        """Limit and ordering are passed through to the store."""
        for doc_id, rank in [("a", 2), ("b", 3), ("c", 1)]:
            store.seed("types", doc_id, {"rank": rank})

        response = await client.get(
            "/api/v1/collections/types",
            params={"limit": 2, "orderBy": "rank", "orderDirection": "desc"},
        )

        body = response.json()
        assert [doc["id"] for doc in body["data"]] == ["b", "a"]
        assert body["count"] == 2

    async def test_list_rejects_invalid_limit(self, client: AsyncClient):
        """A non-positive limit fails validation with the error envelope."""
        response = await client.get("/api/v1/collections/types", params={"limit": 0})

        assert response.status_code == 422
        assert response.json()["success"] is False

    async def test_list_store_failure_surfaces_message(self, client: AsyncClient, store):
        """A rejected query is reported as a generic failure with its message."""
        store.fail_on["list"] = "order by field not indexed"

        response = await client.get("/api/v1/collections/types", params={"orderBy": "rank"})

        assert response.status_code == 500
        assert response.json() == {"success": False, "error": "order by field not indexed"}

    async def test_list_does_not_expand_unregistered_collections(self, client: AsyncClient, store):
        """Generic collections render stored references as id/path pairs."""
        store.seed("home_ads", "ad1", {"owner": DocumentRef("users", "u1")})

        response = await client.get("/api/v1/collections/home_ads")

        assert response.json()["data"][0]["owner"] == {"id": "u1", "path": "users/u1"}


@pytest.mark.asyncio
class TestDocumentLifecycle:
    """Tests for create/get/update/delete on a generic collection."""

    async def test_create_stamps_timestamps(self, client: AsyncClient, store):
        """The server assigns the id and both timestamps."""
        response = await client.post(
            "/api/v1/collections/countries",
            json={"name_en": "Egypt", "createdAt": "1999-01-01"},
        )

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["id"]
        assert data["name_en"] == "Egypt"
        stored = store.raw("countries", data["id"])
        assert isinstance(stored["createdAt"], datetime)
        assert stored["createdAt"] == stored["updatedAt"]

    async def test_get_missing_document_is_404(self, client: AsyncClient):
        """Not found is distinguished from generic failure."""
        response = await client.get("/api/v1/collections/countries/missing")

        assert response.status_code == 404
        assert response.json() == {"success": False, "error": "Document not found"}

    async def test_get_document(self, client: AsyncClient, store):
        """A single document is returned with its id."""
        store.seed("countries", "eg", {"name_en": "Egypt"})

        response = await client.get("/api/v1/collections/countries/eg")

        assert response.json() == {"success": True, "data": {"id": "eg", "name_en": "Egypt"}}

    async def test_update_keeps_created_at(self, client: AsyncClient, store):
        """createdAt in an update payload is ignored; updatedAt is re-stamped."""
        created = datetime(2025, 5, 1, tzinfo=UTC)
        store.seed("countries", "eg", {"name_en": "Egypt", "createdAt": created, "updatedAt": created})

        response = await client.put(
            "/api/v1/collections/countries/eg",
            json={"name_en": "Misr", "createdAt": "2000-01-01T00:00:00Z"},
        )

        assert response.status_code == 200
        stored = store.raw("countries", "eg")
        assert stored["createdAt"] == created
        assert stored["updatedAt"] > created
        assert stored["name_en"] == "Misr"

    async def test_update_stores_empty_strings_literally(self, client: AsyncClient, store):
        """Outside declared reference fields an empty string is a value, not a delete."""
        store.seed("countries", "eg", {"name_ar": "مصر"})

        await client.put("/api/v1/collections/countries/eg", json={"name_ar": ""})

        assert store.raw("countries", "eg")["name_ar"] == ""

    async def test_update_missing_document_is_404(self, client: AsyncClient, store):
        """Updating a missing id does not create it."""
        response = await client.put("/api/v1/collections/countries/nope", json={"a": 1})

        assert response.status_code == 404
        assert store.raw("countries", "nope") is None

    async def test_delete_is_idempotent(self, client: AsyncClient, store):
        """Deleting an existing and then a missing document both succeed."""
        store.seed("countries", "eg", {"name_en": "Egypt"})

        first = await client.delete("/api/v1/collections/countries/eg")
        second = await client.delete("/api/v1/collections/countries/eg")

        assert first.json()["success"] is True
        assert second.json()["success"] is True
        assert store.raw("countries", "eg") is None

    async def test_create_rejects_non_object_body(self, client: AsyncClient):
        """The body must be a field map."""
        response = await client.post("/api/v1/collections/countries", json=["not", "a", "map"])

        assert response.status_code == 422
        assert response.json()["success"] is False


@pytest.mark.asyncio
async def test_collection_catalog(client: AsyncClient):
    """The catalog lists every known collection with display metadata."""
    response = await client.get("/api/v1/collections")

    body = response.json()
    assert body["success"] is True
    assert body["count"] == 16
    users = next(entry for entry in body["data"] if entry["name"] == "users")
    assert users["displayName"] == "Users"
    assert users["icon"] == "PersonOutline"


@pytest.mark.asyncio
async def test_generic_service_reports_no_secondary_write(make_base, store):
    """Plain collections have no identity provider half."""
    service = make_base("types")

    result = await service.create_document({"name": "x"})

    assert result.outcome is SyncOutcome.NOT_APPLICABLE
    assert result.is_degraded is False
    assert store.raw("types", result.data["id"])["name"] == "x"
