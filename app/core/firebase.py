"""Firebase Admin SDK initialization and client accessors."""

import json
import os

import firebase_admin
from firebase_admin import credentials, firestore_async, storage
from google.cloud.firestore_v1.async_client import AsyncClient
from structlog import get_logger

from app.config import Settings

logger = get_logger(__name__)

_firebase_app: firebase_admin.App | None = None


def _load_credential(settings: Settings) -> credentials.Base | None:
    """
    Build a credential from settings.

    Looks for Firebase credentials in order:
    1. FIREBASE_CONFIG_JSON (raw service account JSON)
    2. FIREBASE_CREDENTIALS_PATH (service account file)
    3. FIREBASE_PROJECT_ID / FIREBASE_CLIENT_EMAIL / FIREBASE_PRIVATE_KEY

    Returns None when none are set, leaving application default credentials.
    """
    if settings.firebase_config_json:
        logger.info("Initializing Firebase with JSON string from environment")
        return credentials.Certificate(json.loads(settings.firebase_config_json))

    path = settings.firebase_credentials_path
    if path and os.path.exists(path):
        logger.info("Initializing Firebase with JSON file", path=path)
        return credentials.Certificate(path)

    private_key = settings.firebase_private_key_pem
    if settings.firebase_project_id and settings.firebase_client_email and private_key:
        logger.info(
            "Initializing Firebase with service account fields",
            project_id=settings.firebase_project_id,
        )
        return credentials.Certificate(
            {
                "type": "service_account",
                "project_id": settings.firebase_project_id,
                "client_email": settings.firebase_client_email,
                "private_key": private_key,
                "token_uri": "https://oauth2.googleapis.com/token",
            }
        )

    return None


def initialize_firebase(settings: Settings) -> None:
    """
    Initialize Firebase Admin SDK.

    Args:
        settings: Application settings carrying credentials and bucket name

    Note: For development, Application Default Credentials are used when no
    service account is configured.
    """
    global _firebase_app

    if _firebase_app is not None:
        logger.info("Firebase already initialized")
        return

    options: dict[str, str] = {}
    if settings.firebase_storage_bucket:
        options["storageBucket"] = settings.firebase_storage_bucket

    try:
        cred = _load_credential(settings)
        if cred:
            _firebase_app = firebase_admin.initialize_app(cred, options or None)
        else:
            # Last resort: Try default credentials
            _firebase_app = firebase_admin.initialize_app(options=options or None)
            logger.info("Firebase initialized with default credentials")

    except Exception as e:
        logger.error("Failed to initialize Firebase", error=str(e))
        raise


def get_firebase_app() -> firebase_admin.App:
    """
    Get the Firebase app instance.

    Returns:
        Firebase app instance

    Raises:
        RuntimeError: If Firebase is not initialized
    """
    if _firebase_app is None:
        raise RuntimeError("Firebase not initialized. Call initialize_firebase() first.")
    return _firebase_app


def get_firestore_client() -> AsyncClient:
    """Return the async Firestore client bound to the initialized app."""
    return firestore_async.client(app=get_firebase_app())


def get_storage_bucket():
    """Return the default Cloud Storage bucket of the initialized app."""
    return storage.bucket(app=get_firebase_app())
