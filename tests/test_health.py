"""Tests for health endpoints, settings and the credentials helper."""

import pytest
from httpx import AsyncClient

from app.api.v1.endpoints import health
from app.config import Settings
from scripts.convert_credentials import credentials_to_env


@pytest.mark.asyncio
async def test_ping(client: AsyncClient):
    """Ping answers without touching Firebase."""
    response = await client.get("/api/v1/ping")

    assert response.status_code == 200
    assert response.json() == {"message": "pong"}


@pytest.mark.asyncio
async def test_health(client: AsyncClient):
    """Basic health reports version and environment."""
    response = await client.get("/api/v1/health")

    body = response.json()
    assert response.status_code == 200
    assert body["status"] == "healthy"
    assert "version" in body


@pytest.mark.asyncio
async def test_detailed_health_degraded(client: AsyncClient, monkeypatch):
    """An unreachable Firestore degrades the status without failing the call."""

    async def unreachable() -> bool:
        return False

    monkeypatch.setattr(health, "check_database_connection", unreachable)

    response = await client.get("/api/v1/health/detailed")

    body = response.json()
    assert response.status_code == 200
    assert body["status"] == "degraded"
    assert body["firestore"] == "unhealthy"


@pytest.mark.asyncio
async def test_process_time_header(client: AsyncClient):
    """Every response carries the request duration."""
    response = await client.get("/api/v1/ping")

    assert "x-process-time" in response.headers


def test_private_key_newlines_are_restored():
    """Keys stored on one line with escaped newlines are usable."""
    settings = Settings(FIREBASE_PRIVATE_KEY="-----BEGIN-----\\nabc\\n-----END-----\\n")

    assert settings.firebase_private_key_pem == "-----BEGIN-----\nabc\n-----END-----\n"


def test_storage_bucket_defaults_to_project():
    """Without an explicit bucket the project's appspot bucket is used."""
    assert Settings(FIREBASE_PROJECT_ID="demo").firebase_storage_bucket == "demo.appspot.com"
    assert (
        Settings(FIREBASE_PROJECT_ID="demo", FIREBASE_STORAGE_BUCKET="custom-bucket")
        .firebase_storage_bucket
        == "custom-bucket"
    )


def test_cors_origins_are_split():
    """CORS_ORIGINS is a comma-separated list."""
    settings = Settings(CORS_ORIGINS="http://a.test, http://b.test,")

    assert settings.cors_origins == ["http://a.test", "http://b.test"]


def test_credentials_to_env_escapes_key():
    """The helper emits the discrete variables for a service account."""
    env = credentials_to_env(
        {
            "project_id": "demo",
            "client_email": "svc@demo.iam.gserviceaccount.com",
            "private_key": "line1\nline2\n",
        },
        escape_newlines=True,
    )

    assert env == {
        "FIREBASE_PROJECT_ID": "demo",
        "FIREBASE_CLIENT_EMAIL": "svc@demo.iam.gserviceaccount.com",
        "FIREBASE_PRIVATE_KEY": "line1\\nline2\\n",
        "FIREBASE_STORAGE_BUCKET": "demo.appspot.com",
    }
