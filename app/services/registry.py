"""Static mapping from collection name to collection handler."""

from app.core.clock import Clock, utc_now
from app.core.identity import IdentityProvider
from app.database import DocumentStore
from app.models.collections import COLLECTION_USERS, REFERENCE_FIELDS
from app.services.collection_service import CollectionHandler, CollectionService
from app.services.reference_service import ReferenceCollectionService
from app.services.user_service import UserService


class CollectionRegistry:
    """
    Resolve the handler for a collection.

    ``users`` gets the user lifecycle service, collections with declared
    reference fields get a reference-resolving service, and any other name
    falls back to the generic service.
    """

    def __init__(
        self,
        store: DocumentStore,
        identity_provider: IdentityProvider,
        clock: Clock = utc_now,
    ):
        """Initialize registry with shared collaborators."""
        self.store = store
        self.identity_provider = identity_provider
        self.clock = clock

    def get_handler(self, collection: str) -> CollectionHandler:
        """Return the handler registered for ``collection``."""
        base = CollectionService(self.store, collection, clock=self.clock)

        if collection == COLLECTION_USERS:
            return UserService(base, self.identity_provider)

        references = REFERENCE_FIELDS.get(collection)
        if references:
            return ReferenceCollectionService(base, references)

        return base
