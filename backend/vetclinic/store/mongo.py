"""
VetClinic Backend — MongoDB Document Store
============================================

What:  DocumentStore backed by pymongo's native asyncio client.
Why:   MongoDB is the production store; ObjectId is the identifier format
       every route validates against.
How:   One AsyncMongoClient per process (it owns the connection pool).
       Every driver exception is translated into DatabaseError so the global
       handler answers 500 without leaking driver details.

Startup:
    connect() pings the server with tenacity retries (exponential backoff +
    jitter). A database that is still booting next to the API container
    is the common case this covers.
"""

import logging
from contextlib import contextmanager
from typing import Iterable, Iterator, List, Optional

from bson import ObjectId
from pymongo import AsyncMongoClient
from pymongo.errors import PyMongoError
from tenacity import (
    before_sleep_log,
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential_jitter,
)

from vetclinic.config import settings
from vetclinic.exceptions import DatabaseError
from vetclinic.store.base import PATIENTS, VETERINARIANS, Document, DocumentStore

logger = logging.getLogger(__name__)


@contextmanager
def _driver_errors(operation: str, collection: str) -> Iterator[None]:
    try:
        yield
    except PyMongoError as e:
        logger.error("MongoDB %s on '%s' failed: %s", operation, collection, str(e))
        raise DatabaseError(
            context={
                "operation": operation,
                "collection": collection,
                "error_type": type(e).__name__,
            },
        ) from e


def _projection(exclude: Iterable[str]) -> Optional[dict]:
    fields = {field: 0 for field in exclude}
    return fields or None


class MongoStore(DocumentStore):
    """
    MongoDB implementation of the DocumentStore contract.

    The client is created lazily by connect() so that constructing the store
    never touches the network.
    """

    def __init__(
        self,
        uri: Optional[str] = None,
        database: Optional[str] = None,
        timeout_ms: Optional[int] = None,
    ) -> None:
        self._uri = uri or settings.mongodb_uri
        self._database_name = database or settings.mongodb_database
        self._timeout_ms = timeout_ms or settings.mongodb_timeout_ms
        self._client: Optional[AsyncMongoClient] = None

    @property
    def db(self):
        if self._client is None:
            raise DatabaseError(context={"reason": "MongoStore.connect() was never awaited"})
        return self._client[self._database_name]

    async def connect(self) -> None:
        """
        Create the client and verify the server answers a ping.

        Raises:
            DatabaseError: The server was unreachable after all retry attempts.
        """
        self._client = AsyncMongoClient(
            self._uri,
            serverSelectionTimeoutMS=self._timeout_ms,
            tz_aware=True,
        )
        try:
            await self._ping_with_retry()
        except PyMongoError as e:
            logger.error(
                "MongoDB unreachable after %d attempts: %s",
                settings.retry_max_attempts,
                str(e),
            )
            raise DatabaseError(
                message="No se pudo conectar con la base de datos",
                context={"database": self._database_name, "error_type": type(e).__name__},
            ) from e

        await self._ensure_indexes()
        logger.info("Connected to MongoDB database '%s'", self._database_name)

    @retry(
        retry=retry_if_exception_type(PyMongoError),
        stop=stop_after_attempt(settings.retry_max_attempts),
        wait=wait_exponential_jitter(
            initial=settings.retry_min_wait,
            max=settings.retry_max_wait,
            jitter=1,
        ),
        before_sleep=before_sleep_log(logger, logging.WARNING),
        reraise=True,
    )
    async def _ping_with_retry(self) -> None:
        await self.db.command("ping")

    async def _ensure_indexes(self) -> None:
        with _driver_errors("create_index", VETERINARIANS):
            await self.db[VETERINARIANS].create_index("email", unique=True)
        with _driver_errors("create_index", PATIENTS):
            await self.db[PATIENTS].create_index([("veterinario", 1), ("estado", 1)])

    async def find(
        self,
        collection: str,
        filter: Document,
        exclude: Iterable[str] = (),
    ) -> List[Document]:
        with _driver_errors("find", collection):
            cursor = self.db[collection].find(filter, _projection(exclude))
            return await cursor.to_list(length=None)

    async def find_one(
        self,
        collection: str,
        filter: Document,
        exclude: Iterable[str] = (),
    ) -> Optional[Document]:
        with _driver_errors("find_one", collection):
            return await self.db[collection].find_one(filter, _projection(exclude))

    async def find_by_id(
        self,
        collection: str,
        doc_id: ObjectId,
        exclude: Iterable[str] = (),
    ) -> Optional[Document]:
        return await self.find_one(collection, {"_id": doc_id}, exclude)

    async def insert(self, collection: str, document: Document) -> ObjectId:
        with _driver_errors("insert", collection):
            result = await self.db[collection].insert_one(dict(document))
            return result.inserted_id

    async def update_by_id(
        self,
        collection: str,
        doc_id: ObjectId,
        fields: Document,
    ) -> bool:
        with _driver_errors("update", collection):
            result = await self.db[collection].update_one({"_id": doc_id}, {"$set": fields})
            return result.matched_count > 0

    async def delete_by_id(self, collection: str, doc_id: ObjectId) -> bool:
        with _driver_errors("delete", collection):
            result = await self.db[collection].delete_one({"_id": doc_id})
            return result.deleted_count > 0

    async def ping(self) -> bool:
        try:
            await self.db.command("ping")
            return True
        except (PyMongoError, DatabaseError) as e:
            logger.warning("MongoDB ping failed: %s", str(e))
            return False

    async def close(self) -> None:
        if self._client is not None:
            await self._client.close()
            self._client = None
