# Store package init
"""
VetClinic Backend — Document Store Package
============================================

Store Inventory:
    - DocumentStore (abstract): find / find_one / find_by_id / insert /
      update_by_id / delete_by_id / ping
    - MongoStore: pymongo AsyncMongoClient implementation (production)
    - MemoryStore: dict-backed implementation (tests, DATABASE_BACKEND=memory)
"""

from vetclinic.config import settings
from vetclinic.store.base import (
    PATIENTS,
    VETERINARIANS,
    Document,
    DocumentStore,
    is_valid_object_id,
)
from vetclinic.store.memory import MemoryStore


async def open_store() -> DocumentStore:
    """Build and connect the store selected by DATABASE_BACKEND."""
    if settings.database_backend == "memory":
        return MemoryStore()

    from vetclinic.store.mongo import MongoStore

    store = MongoStore()
    await store.connect()
    return store


__all__ = [
    "PATIENTS",
    "VETERINARIANS",
    "Document",
    "DocumentStore",
    "MemoryStore",
    "is_valid_object_id",
    "open_store",
]
