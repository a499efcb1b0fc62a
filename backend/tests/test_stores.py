"""
VetClinic Backend — Document Store Tests
==========================================

What:  MemoryStore semantics, and MongoStore error translation with a mocked
       AsyncMongoClient (no MongoDB server required).
"""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from bson import ObjectId
from pymongo.errors import OperationFailure, ServerSelectionTimeoutError

from vetclinic.exceptions import DatabaseError
from vetclinic.store import PATIENTS, VETERINARIANS, MemoryStore, is_valid_object_id
from vetclinic.store.mongo import MongoStore


class TestObjectIdValidation:

    @pytest.mark.parametrize("value", [str(ObjectId()), ObjectId(), "0123456789abcdef01234567"])
    def test_valid(self, value):
        assert is_valid_object_id(value)

    @pytest.mark.parametrize("value", ["", "not-an-id", "0123456789abcdef0123456", "g" * 24, None, 12, b"x" * 12])
    def test_invalid(self, value):
        assert not is_valid_object_id(value)


class TestMemoryStore:

    @pytest.mark.asyncio
    async def test_insert_assigns_object_id(self):
        store = MemoryStore()
        doc_id = await store.insert(PATIENTS, {"nombre": "Max"})

        assert isinstance(doc_id, ObjectId)
        assert (await store.find_by_id(PATIENTS, doc_id))["nombre"] == "Max"

    @pytest.mark.asyncio
    async def test_returned_documents_are_copies(self):
        """Mutating a returned document must not change what is stored."""
        store = MemoryStore()
        doc_id = await store.insert(PATIENTS, {"nombre": "Max", "tags": ["a"]})

        fetched = await store.find_by_id(PATIENTS, doc_id)
        fetched["nombre"] = "Otro"
        fetched["tags"].append("b")

        again = await store.find_by_id(PATIENTS, doc_id)
        assert again["nombre"] == "Max"
        assert again["tags"] == ["a"]

    @pytest.mark.asyncio
    async def test_find_filters_and_preserves_insertion_order(self):
        store = MemoryStore()
        owner = ObjectId()
        ids = [await store.insert(PATIENTS, {"n": i, "veterinario": owner, "estado": True}) for i in range(3)]
        await store.insert(PATIENTS, {"n": 9, "veterinario": ObjectId(), "estado": True})
        await store.insert(PATIENTS, {"n": 8, "veterinario": owner, "estado": False})

        found = await store.find(PATIENTS, {"veterinario": owner, "estado": True})

        assert [d["_id"] for d in found] == ids

    @pytest.mark.asyncio
    async def test_exclude_projection(self):
        store = MemoryStore()
        doc_id = await store.insert(VETERINARIANS, {"email": "a@b.c", "password": "hash"})

        assert "password" not in await store.find_by_id(VETERINARIANS, doc_id, exclude=("password",))
        assert "password" not in await store.find_one(VETERINARIANS, {"email": "a@b.c"}, exclude=("password",))

    @pytest.mark.asyncio
    async def test_update_and_delete_report_matches(self):
        store = MemoryStore()
        doc_id = await store.insert(PATIENTS, {"nombre": "Max"})

        assert await store.update_by_id(PATIENTS, doc_id, {"nombre": "Rex"}) is True
        assert await store.update_by_id(PATIENTS, ObjectId(), {"nombre": "Rex"}) is False
        assert await store.delete_by_id(PATIENTS, doc_id) is True
        assert await store.delete_by_id(PATIENTS, doc_id) is False

    @pytest.mark.asyncio
    async def test_collections_are_independent(self):
        store = MemoryStore()
        doc_id = await store.insert(PATIENTS, {"nombre": "Max"})

        assert await store.find_by_id(VETERINARIANS, doc_id) is None


def _mongo_with_collection(collection: MagicMock) -> MongoStore:
    store = MongoStore(uri="mongodb://unused:27017", database="test")
    client = MagicMock()
    client.__getitem__.return_value.__getitem__.return_value = collection
    store._client = client
    return store


class TestMongoStore:

    def test_db_requires_connect(self):
        store = MongoStore(uri="mongodb://unused:27017", database="test")
        with pytest.raises(DatabaseError):
            _ = store.db

    @pytest.mark.asyncio
    async def test_driver_error_becomes_database_error(self):
        collection = MagicMock()
        collection.delete_one = AsyncMock(side_effect=OperationFailure("boom"))
        store = _mongo_with_collection(collection)

        with pytest.raises(DatabaseError) as exc_info:
            await store.delete_by_id(PATIENTS, ObjectId())

        assert exc_info.value.message == "Error interno del servidor"
        assert exc_info.value.context["operation"] == "delete"
        assert exc_info.value.context["collection"] == PATIENTS

    @pytest.mark.asyncio
    async def test_update_reports_unmatched(self):
        collection = MagicMock()
        collection.update_one = AsyncMock(return_value=MagicMock(matched_count=0))
        store = _mongo_with_collection(collection)

        assert await store.update_by_id(PATIENTS, ObjectId(), {"nombre": "Rex"}) is False
        collection.update_one.assert_awaited_once()
        assert collection.update_one.await_args.args[1] == {"$set": {"nombre": "Rex"}}

    @pytest.mark.asyncio
    async def test_find_passes_exclusion_projection(self):
        collection = MagicMock()
        cursor = MagicMock()
        cursor.to_list = AsyncMock(return_value=[{"_id": ObjectId()}])
        collection.find.return_value = cursor
        store = _mongo_with_collection(collection)

        result = await store.find(PATIENTS, {"estado": True}, exclude=("salida",))

        assert len(result) == 1
        collection.find.assert_called_once_with({"estado": True}, {"salida": 0})

    @pytest.mark.asyncio
    async def test_ping_false_when_unreachable(self):
        store = MongoStore(uri="mongodb://unused:27017", database="test")
        client = MagicMock()
        client.__getitem__.return_value.command = AsyncMock(side_effect=ServerSelectionTimeoutError("down"))
        store._client = client

        assert await store.ping() is False

    @pytest.mark.asyncio
    async def test_connect_failure_raises_database_error(self):
        store = MongoStore(uri="mongodb://unused:27017", database="test")

        with patch("vetclinic.store.mongo.AsyncMongoClient", MagicMock()), \
             patch.object(MongoStore, "_ping_with_retry", AsyncMock(side_effect=ServerSelectionTimeoutError("down"))):
            with pytest.raises(DatabaseError) as exc_info:
                await store.connect()

        assert exc_info.value.message == "No se pudo conectar con la base de datos"

    @pytest.mark.asyncio
    async def test_connect_creates_indexes(self):
        collection = MagicMock()
        collection.create_index = AsyncMock()
        client = MagicMock()
        client.__getitem__.return_value.__getitem__.return_value = collection
        store = MongoStore(uri="mongodb://unused:27017", database="test")

        with patch("vetclinic.store.mongo.AsyncMongoClient", MagicMock(return_value=client)), \
             patch.object(MongoStore, "_ping_with_retry", AsyncMock()):
            await store.connect()

        collection.create_index.assert_any_await("email", unique=True)
        assert collection.create_index.await_count == 2
