"""Identity provider client backed by Firebase Authentication."""

import asyncio
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Protocol

import firebase_admin
from firebase_admin import auth
from firebase_admin.exceptions import FirebaseError
from structlog import get_logger

from app.core.firebase import get_firebase_app

logger = get_logger(__name__)


class IdentityProviderError(Exception):
    """Identity provider rejected or failed a call."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


@dataclass(frozen=True)
class AuthUser:
    """Subject returned by the identity provider."""

    uid: str
    email: str | None = None
    email_verified: bool = False
    phone_number: str | None = None
    creation_time: str | None = None
    last_sign_in_time: str | None = None


class IdentityProvider(Protocol):
    """Subject management operations consumed by the user service."""

    async def create_user(
        self,
        email: str,
        password: str,
        display_name: str | None = None,
        photo_url: str | None = None,
    ) -> AuthUser:
        """Create a subject."""
        ...

    async def update_user(self, uid: str, changes: dict[str, str]) -> None:
        """Apply ``email``/``display_name``/``photo_url``/``password`` changes."""
        ...

    async def delete_user(self, uid: str) -> None:
        """Delete a subject."""
        ...


def _format_timestamp(millis: int | None) -> str | None:
    if millis is None:
        return None
    return datetime.fromtimestamp(millis / 1000, UTC).isoformat()


class FirebaseIdentityProvider:
    """IdentityProvider over the Firebase Admin Auth API.

    The Admin SDK is blocking, so every call runs in a worker thread.
    """

    def __init__(self, app: firebase_admin.App):
        """Initialize provider with a Firebase app."""
        self.app = app

    async def create_user(
        self,
        email: str,
        password: str,
        display_name: str | None = None,
        photo_url: str | None = None,
    ) -> AuthUser:
        kwargs: dict[str, str] = {"email": email, "password": password}
        if display_name:
            kwargs["display_name"] = display_name
        if photo_url:
            kwargs["photo_url"] = photo_url

        try:
            record = await asyncio.to_thread(auth.create_user, app=self.app, **kwargs)
        except (FirebaseError, ValueError) as e:
            raise IdentityProviderError(str(e)) from e

        return AuthUser(
            uid=record.uid,
            email=record.email,
            email_verified=record.email_verified,
            phone_number=record.phone_number,
            creation_time=_format_timestamp(record.user_metadata.creation_timestamp),
            last_sign_in_time=_format_timestamp(record.user_metadata.last_sign_in_timestamp),
        )

    async def update_user(self, uid: str, changes: dict[str, str]) -> None:
        try:
            await asyncio.to_thread(auth.update_user, uid, app=self.app, **changes)
        except (FirebaseError, ValueError) as e:
            raise IdentityProviderError(str(e)) from e

    async def delete_user(self, uid: str) -> None:
        try:
            await asyncio.to_thread(auth.delete_user, uid, app=self.app)
        except (FirebaseError, ValueError) as e:
            raise IdentityProviderError(str(e)) from e


def get_identity_provider() -> IdentityProvider:
    """Return the Firebase-backed identity provider."""
    return FirebaseIdentityProvider(get_firebase_app())
