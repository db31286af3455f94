"""User service keeping Firestore user documents and Firebase Auth in step."""

from typing import Any

import structlog

from app.core.clock import epoch_millis
from app.core.exceptions import AuthProviderException, ValidationException
from app.core.identity import IdentityProvider, IdentityProviderError
from app.database import SortDirection
from app.models.documents import WriteFields
from app.services.collection_service import CollectionService, SyncOutcome, WriteResult

logger = structlog.get_logger(__name__)


class UserService:
    """
    Service for user operations.

    Creation talks to the identity provider first and aborts if it fails, so
    no user document exists without a subject. Updates and deletes treat the
    provider as a best-effort mirror: a provider failure is logged and
    reported in the result while the Firestore write still happens.
    """

    IMMUTABLE_FIELDS = frozenset({"id", "createdAt", "created_time", "uid", "password"})
    OPTIONAL_PROFILE_FIELDS = ("firstName", "lastName", "fullName")

    UPDATE_MESSAGES = {
        SyncOutcome.SYNCED: "User updated in both Firebase Auth and Firestore",
        SyncOutcome.SKIPPED: "User updated in Firestore",
        SyncOutcome.PROVIDER_FAILED: "User updated in Firestore; Firebase Auth update failed",
    }
    DELETE_MESSAGES = {
        SyncOutcome.SYNCED: "User deleted from both Firebase Auth and Firestore",
        SyncOutcome.SKIPPED: "User deleted from Firestore",
        SyncOutcome.PROVIDER_FAILED: "User deleted from Firestore; Firebase Auth deletion failed",
    }

    def __init__(self, base: CollectionService, identity_provider: IdentityProvider):
        """Initialize service with the users collection and an identity provider."""
        self.base = base
        self.collection = base.collection
        self.identity = identity_provider

    @staticmethod
    def _display_name(payload: dict[str, Any]) -> str | None:
        return payload.get("display_name") or payload.get("displayName") or None

    @staticmethod
    def _photo_url(payload: dict[str, Any]) -> str | None:
        return payload.get("photoURL") or payload.get("company_logo") or None

    def generate_password(self) -> str:
        """Temporary password for accounts created without one."""
        return f"TempPass{epoch_millis(self.base.clock())}!"

    async def list_documents(
        self,
        limit: int,
        order_by: str | None = None,
        direction: SortDirection = "asc",
    ) -> list[dict[str, Any]]:
        """List user documents."""
        return await self.base.list_documents(limit, order_by=order_by, direction=direction)

    async def get_document(self, doc_id: str) -> dict[str, Any]:
        """Get a user document."""
        return (await self.base.fetch(doc_id)).to_dict()

    async def create_document(self, payload: dict[str, Any]) -> WriteResult:
        """Create the auth subject, then the user document."""
        email = payload.get("email")
        if not email:
            raise ValidationException("Email is required")

        display_name = self._display_name(payload)
        photo_url = self._photo_url(payload)

        try:
            auth_user = await self.identity.create_user(
                email=email,
                password=payload.get("password") or self.generate_password(),
                display_name=display_name,
                photo_url=photo_url,
            )
        except IdentityProviderError as e:
            logger.error("auth_user_create_failed", email=email, error=e.message)
            raise AuthProviderException(
                f"Failed to create authentication user: {e.message}"
            ) from e

        logger.info("auth_user_created", uid=auth_user.uid, email=email)

        is_supplier = bool(payload.get("is_supplier"))
        fields: WriteFields = {
            "uid": auth_user.uid,
            "email": email,
            "displayName": display_name or "",
            "is_supplier": is_supplier,
            "emailVerified": False,
            "phoneNumber": auth_user.phone_number,
            "photoURL": photo_url,
            "providerId": "firebase",
            "isAnonymous": False,
            "metadata": {
                "creationTime": auth_user.creation_time,
                "lastSignInTime": auth_user.last_sign_in_time,
            },
        }

        if is_supplier:
            fields["company_name"] = payload.get("company_name") or ""
            fields["company_logo"] = payload.get("company_logo") or ""

        for field in self.OPTIONAL_PROFILE_FIELDS:
            if payload.get(field):
                fields[field] = payload[field]

        try:
            document = await self.base.write_new(fields)
        except Exception:
            # The auth subject now exists without a profile document
            logger.error("user_document_create_failed", uid=auth_user.uid, email=email)
            raise

        return WriteResult(
            data={**document.to_dict(), "authUid": auth_user.uid},
            outcome=SyncOutcome.SYNCED,
            message="User created in both Firebase Auth and Firestore",
        )

    def _auth_changes(self, existing: dict[str, Any], payload: dict[str, Any]) -> dict[str, str]:
        changes: dict[str, str] = {}
        email = payload.get("email")
        if email and email != existing.get("email"):
            changes["email"] = email
        display_name = self._display_name(payload)
        if display_name:
            changes["display_name"] = display_name
        photo_url = self._photo_url(payload)
        if photo_url:
            changes["photo_url"] = photo_url
        if payload.get("password"):
            changes["password"] = payload["password"]
        return changes

    async def update_document(self, doc_id: str, payload: dict[str, Any]) -> WriteResult:
        """Mirror auth-relevant changes to the provider, then update the document."""
        existing = await self.base.fetch(doc_id, "User not found")
        uid = existing.fields.get("uid")

        outcome = SyncOutcome.SKIPPED
        provider_error: str | None = None
        if uid:
            changes = self._auth_changes(existing.fields, payload)
            if changes:
                try:
                    await self.identity.update_user(str(uid), changes)
                    outcome = SyncOutcome.SYNCED
                    logger.info("auth_user_updated", uid=uid, fields=sorted(changes))
                except IdentityProviderError as e:
                    outcome = SyncOutcome.PROVIDER_FAILED
                    provider_error = e.message
                    logger.warning("auth_user_update_failed", uid=uid, error=e.message)

        fields = self.base.strip_immutable(payload, self.IMMUTABLE_FIELDS)
        document = await self.base.write_update(doc_id, fields)

        return WriteResult(
            data=document.to_dict(),
            outcome=outcome,
            provider_error=provider_error,
            message=self.UPDATE_MESSAGES[outcome],
        )

    async def delete_document(self, doc_id: str) -> WriteResult:
        """Delete the auth subject (best effort) and the user document."""
        existing = await self.base.store.get(self.collection, doc_id)

        outcome = SyncOutcome.SKIPPED
        provider_error: str | None = None
        uid = existing.fields.get("uid") if existing else None
        if uid:
            try:
                await self.identity.delete_user(str(uid))
                outcome = SyncOutcome.SYNCED
                logger.info("auth_user_deleted", uid=uid)
            except IdentityProviderError as e:
                outcome = SyncOutcome.PROVIDER_FAILED
                provider_error = e.message
                logger.warning("auth_user_delete_failed", uid=uid, error=e.message)

        await self.base.delete_document(doc_id)

        return WriteResult(
            data=None,
            outcome=outcome,
            provider_error=provider_error,
            message=self.DELETE_MESSAGES[outcome],
        )
