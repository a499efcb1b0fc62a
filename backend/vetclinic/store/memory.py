"""
VetClinic Backend — In-Memory Document Store
==============================================

What:  Dict-backed DocumentStore with the same semantics as MongoStore.
Why:   Lets the whole service run (and be tested) without a MongoDB server.
How:   One dict per collection, keyed by ObjectId, preserving insertion order
       (the "natural order" MongoDB returns for a fresh collection).

Not safe across processes; each worker gets its own empty store.
"""

import copy
from typing import Dict, Iterable, List, Optional

from bson import ObjectId

from vetclinic.store.base import Document, DocumentStore


class MemoryStore(DocumentStore):
    """Process-local document store."""

    def __init__(self) -> None:
        self._collections: Dict[str, Dict[ObjectId, Document]] = {}

    def _collection(self, name: str) -> Dict[ObjectId, Document]:
        return self._collections.setdefault(name, {})

    @staticmethod
    def _project(document: Document, exclude: Iterable[str]) -> Document:
        excluded = set(exclude)
        return {k: copy.deepcopy(v) for k, v in document.items() if k not in excluded}

    @staticmethod
    def _matches(document: Document, filter: Document) -> bool:
        return all(k in document and document[k] == v for k, v in filter.items())

    async def find(
        self,
        collection: str,
        filter: Document,
        exclude: Iterable[str] = (),
    ) -> List[Document]:
        exclude = tuple(exclude)
        return [
            self._project(doc, exclude)
            for doc in self._collection(collection).values()
            if self._matches(doc, filter)
        ]

    async def find_one(
        self,
        collection: str,
        filter: Document,
        exclude: Iterable[str] = (),
    ) -> Optional[Document]:
        for doc in self._collection(collection).values():
            if self._matches(doc, filter):
                return self._project(doc, exclude)
        return None

    async def find_by_id(
        self,
        collection: str,
        doc_id: ObjectId,
        exclude: Iterable[str] = (),
    ) -> Optional[Document]:
        doc = self._collection(collection).get(doc_id)
        if doc is None:
            return None
        return self._project(doc, exclude)

    async def insert(self, collection: str, document: Document) -> ObjectId:
        stored = copy.deepcopy(document)
        doc_id = stored.setdefault("_id", ObjectId())
        self._collection(collection)[doc_id] = stored
        return doc_id

    async def update_by_id(
        self,
        collection: str,
        doc_id: ObjectId,
        fields: Document,
    ) -> bool:
        doc = self._collection(collection).get(doc_id)
        if doc is None:
            return False
        doc.update(copy.deepcopy(fields))
        return True

    async def delete_by_id(self, collection: str, doc_id: ObjectId) -> bool:
        return self._collection(collection).pop(doc_id, None) is not None

    async def ping(self) -> bool:
        return True
