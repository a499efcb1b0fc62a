"""
VetClinic Backend — Abstract Document Store Interface
=======================================================

What:  Abstract base class defining the minimal query interface the services need.
Why:   Services receive a store instance instead of importing a global client,
       so they run unchanged against MongoDB or the in-memory store.
How:   Concrete implementations inherit from DocumentStore and implement
       every abstract method with the semantics documented here.

Semantics shared by all implementations:
    - Documents are plain dicts; the primary key is `_id` (bson.ObjectId).
    - `filter` is an equality match on top-level fields (AND of all keys).
    - `exclude` removes top-level fields from returned documents.
    - Returned documents are copies; mutating them never changes stored data.
    - Driver failures are raised as DatabaseError.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, Iterable, List, Optional

from bson import ObjectId

Document = Dict[str, Any]

# Collection names, shared with MongoDB
VETERINARIANS = "veterinarios"
PATIENTS = "pacientes"


def is_valid_object_id(value: Any) -> bool:
    """True when `value` is an ObjectId or its 24-character hex form."""
    if isinstance(value, ObjectId):
        return True
    return isinstance(value, str) and len(value) == 24 and ObjectId.is_valid(value)


class DocumentStore(ABC):
    """Contract for document persistence, implemented by MongoStore and MemoryStore."""

    @abstractmethod
    async def find(
        self,
        collection: str,
        filter: Document,
        exclude: Iterable[str] = (),
    ) -> List[Document]:
        """Return every document matching `filter`, in the store's natural order."""
        ...

    @abstractmethod
    async def find_one(
        self,
        collection: str,
        filter: Document,
        exclude: Iterable[str] = (),
    ) -> Optional[Document]:
        ...

    @abstractmethod
    async def find_by_id(
        self,
        collection: str,
        doc_id: ObjectId,
        exclude: Iterable[str] = (),
    ) -> Optional[Document]:
        ...

    @abstractmethod
    async def insert(self, collection: str, document: Document) -> ObjectId:
        """Insert `document` and return its `_id` (generated when absent)."""
        ...

    @abstractmethod
    async def update_by_id(
        self,
        collection: str,
        doc_id: ObjectId,
        fields: Document,
    ) -> bool:
        """Set `fields` on the document. Returns False when no document matched."""
        ...

    @abstractmethod
    async def delete_by_id(self, collection: str, doc_id: ObjectId) -> bool:
        """Remove the document. Returns False when nothing was deleted."""
        ...

    @abstractmethod
    async def ping(self) -> bool:
        """Lightweight connectivity check for the health endpoint."""
        ...

    async def close(self) -> None:
        """Release connections. No-op unless the implementation holds any."""
        return None
