"""Document value types shared by the store adapter and the collection services.

Documents are schema-less, but every stored value belongs to a closed set of
variants so that reference handles and timestamps are recognised by type
rather than by the shape of a dict.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, TypeAlias

from app.core.exceptions import ValidationException


@dataclass(frozen=True, slots=True)
class DocumentRef:
    """Reference handle naming a document by collection and id."""

    collection: str
    id: str

    @property
    def path(self) -> str:
        return f"{self.collection}/{self.id}"


class _DeleteField:
    """Write-only marker that removes a field on update."""

    _instance: "_DeleteField | None" = None

    def __new__(cls) -> "_DeleteField":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "DELETE_FIELD"


DELETE_FIELD = _DeleteField()

FieldValue: TypeAlias = (
    str
    | int
    | float
    | bool
    | None
    | datetime
    | DocumentRef
    | list["FieldValue"]
    | dict[str, "FieldValue"]
)

# Field map as read from the store (never contains DELETE_FIELD)
Fields: TypeAlias = dict[str, FieldValue]

# Field map as written to the store
WriteFields: TypeAlias = dict[str, FieldValue | _DeleteField]


@dataclass(slots=True)
class Document:
    """A stored document: its id plus its fields."""

    id: str
    fields: Fields

    def to_dict(self) -> dict[str, Any]:
        """Flatten into ``{id, **fields}``, the shape callers receive."""
        return {"id": self.id, **{key: v for key, v in self.fields.items() if key != "id"}}


def reference_id(value: Any) -> str | None:
    """
    Extract the target id from an incoming reference value.

    Accepts a plain id, an inline reference map
    (``{"_type": "reference", "_path": "users/abc"}``), a map carrying ``id``,
    or a ``DocumentRef``. Returns None for empty values.

    Raises:
        ValidationException: If the value cannot name a document
    """
    if value is None:
        return None
    if isinstance(value, DocumentRef):
        return value.id
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
        return value.rsplit("/", 1)[-1] or None
    if isinstance(value, dict):
        path = value.get("_path") or value.get("path")
        if isinstance(path, str) and path.strip():
            return reference_id(path)
        doc_id = value.get("id")
        if isinstance(doc_id, str):
            return reference_id(doc_id)
        if not value:
            return None
    raise ValidationException(f"Invalid reference value: {value!r}")


def serialize_value(value: FieldValue) -> Any:
    """Render a stored value for a JSON response."""
    if isinstance(value, DocumentRef):
        return {"id": value.id, "path": value.path}
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, dict):
        return {key: serialize_value(item) for key, item in value.items()}
    if isinstance(value, list):
        return [serialize_value(item) for item in value]
    return value


def serialize_document(data: dict[str, Any]) -> dict[str, Any]:
    """Render a flattened document for a JSON response."""
    return {key: serialize_value(value) for key, value in data.items()}
