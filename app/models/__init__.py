"""Document value types and the Firestore collection catalog."""

from app.models.collections import COLLECTION_CONFIGS, REFERENCE_FIELDS, CollectionConfig
from app.models.documents import DELETE_FIELD, Document, DocumentRef

__all__ = [
    "COLLECTION_CONFIGS",
    "DELETE_FIELD",
    "REFERENCE_FIELDS",
    "CollectionConfig",
    "Document",
    "DocumentRef",
]
