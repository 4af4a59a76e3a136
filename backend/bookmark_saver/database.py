"""
Bookmark Saver Backend — Document Store Access
===============================================

What:  Motor-based MongoDB client (DocumentStore), a collection-scoped data
       gateway (DocumentGateway), and the FastAPI dependency that hands the
       gateway to route handlers.
Why:   Centralizes all database connection logic in one place.
How:   The lifespan handler connects the store once before serving traffic and
       stores the gateway on `app.state`; routes receive it via Depends().
Who:   Used by services (through the gateway), the health check and the seed CLI.

Architecture Decision:
    Every gateway operation names its target collection explicitly:

        await gateway.find("bookmarks", {"tags": "python"})

    There is no "select collection, then query" step. A shared mutable
    "current collection" would let one request's selection leak into
    another request's query whenever the event loop switches between them.

Connection Strategy:
    One AsyncIOMotorClient per process. Motor keeps its own connection pool,
    so the single client is shared by all concurrent requests.
    connect() is guarded by an asyncio.Lock, making concurrent first calls
    create exactly one client.
"""

import asyncio
import logging
from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Mapping, Optional, Sequence, Tuple

from bson import ObjectId
from fastapi import Request
from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from pymongo.errors import PyMongoError

from bookmark_saver.exceptions import StoreConnectionError, StoreError

logger = logging.getLogger(__name__)

Document = Dict[str, Any]
SortSpec = Sequence[Tuple[str, int]]


# ── Store Client ──────────────────────────────────────────────────────────
class DocumentStore:
    """
    Owns the single connection to the MongoDB deployment.

    Lifecycle:
        store = DocumentStore(settings.mongodb_uri)
        await store.connect("bookmarks")   # startup; idempotent
        store.database["bookmarks"]        # used by DocumentGateway
        store.close()                      # shutdown

    Operating on the store after close() without reconnecting raises
    StoreConnectionError.
    """

    def __init__(self, uri: str, **client_options: Any):
        self._uri = uri
        self._client_options = client_options
        self._client: Optional[AsyncIOMotorClient] = None
        self._database: Optional[AsyncIOMotorDatabase] = None
        self._lock = asyncio.Lock()

    @property
    def is_connected(self) -> bool:
        return self._database is not None

    @property
    def database(self) -> AsyncIOMotorDatabase:
        if self._database is None:
            raise StoreConnectionError(
                message="Document store is not connected",
                context={"operation": "database"},
            )
        return self._database

    async def connect(self, database_name: str) -> None:
        """
        Open the client, select `database_name` and verify it with a ping.

        Returns immediately when already connected. A failed ping closes the
        half-opened client and raises StoreConnectionError, leaving the store
        disconnected so a later call can retry.
        """
        async with self._lock:
            if self._database is not None:
                return

            try:
                client = AsyncIOMotorClient(self._uri, **self._client_options)
            except PyMongoError as e:
                raise StoreConnectionError(
                    message="Invalid document store configuration",
                    context={"database": database_name, "original_error": type(e).__name__},
                ) from e

            database = client[database_name]
            try:
                await database.command("ping")
            except PyMongoError as e:
                client.close()
                logger.error("Ping to database '%s' failed: %s", database_name, e)
                raise StoreConnectionError(
                    context={"database": database_name, "original_error": type(e).__name__},
                ) from e

            self._client = client
            self._database = database
            logger.info("Connected to MongoDB database: %s", database_name)

    async def ping(self) -> bool:
        """Liveness round-trip for health checks. Never raises."""
        if self._database is None:
            return False
        try:
            await self._database.command("ping")
        except PyMongoError as e:
            logger.warning("Database ping failed: %s", e)
            return False
        return True

    def close(self) -> None:
        if self._client is not None:
            self._client.close()
            logger.info("MongoDB connection closed")
        self._client = None
        self._database = None


# ── Collection-Scoped Gateway ─────────────────────────────────────────────
@contextmanager
def _store_errors(operation: str, collection: str) -> Iterator[None]:
    """Re-raise driver failures as StoreError; no retries."""
    try:
        yield
    except PyMongoError as e:
        raise StoreError(
            context={
                "operation": operation,
                "collection": collection,
                "original_error": type(e).__name__,
                "detail": str(e),
            },
        ) from e


class DocumentGateway:
    """
    CRUD and aggregation operations against a named collection.

    Query, projection, sort and pipeline arguments are passed to the driver
    as-is; the gateway does not interpret them.
    """

    def __init__(self, store: DocumentStore):
        self._store = store

    def _collection(self, name: str):
        return self._store.database[name]

    async def find(
        self,
        collection: str,
        query: Optional[Mapping[str, Any]] = None,
        projection: Optional[Mapping[str, Any]] = None,
        sort: Optional[SortSpec] = None,
    ) -> List[Document]:
        """All matching documents; an empty list when nothing matches."""
        with _store_errors("find", collection):
            cursor = self._collection(collection).find(query or {}, projection)
            if sort:
                cursor = cursor.sort(list(sort))
            return await cursor.to_list(length=None)

    async def find_one(
        self,
        collection: str,
        query: Mapping[str, Any],
        projection: Optional[Mapping[str, Any]] = None,
    ) -> Optional[Document]:
        """First matching document, or None."""
        with _store_errors("find_one", collection):
            return await self._collection(collection).find_one(query, projection)

    async def create(self, collection: str, document: Mapping[str, Any]) -> ObjectId:
        """Insert one document and return its store-assigned id."""
        # insert_one writes _id into the dict it receives
        with _store_errors("create", collection):
            result = await self._collection(collection).insert_one(dict(document))
        return result.inserted_id

    async def create_many(
        self, collection: str, documents: Sequence[Mapping[str, Any]]
    ) -> List[ObjectId]:
        if not documents:
            return []
        with _store_errors("create_many", collection):
            result = await self._collection(collection).insert_many(
                [dict(doc) for doc in documents]
            )
        return list(result.inserted_ids)

    async def drop_and_seed(
        self, collection: str, documents: Sequence[Mapping[str, Any]]
    ) -> List[ObjectId]:
        """Destructive reset: drop the collection, then bulk insert. Fixtures only."""
        with _store_errors("drop", collection):
            await self._collection(collection).drop()
        logger.warning("Dropped collection '%s' for seeding", collection)
        return await self.create_many(collection, documents)

    async def aggregate(
        self, collection: str, pipeline: Sequence[Mapping[str, Any]]
    ) -> List[Document]:
        with _store_errors("aggregate", collection):
            cursor = self._collection(collection).aggregate(list(pipeline))
            return await cursor.to_list(length=None)

    def close(self) -> None:
        self._store.close()


# ── Dependency ────────────────────────────────────────────────────────────
def get_gateway(request: Request) -> DocumentGateway:
    """
    FastAPI dependency returning the process-wide gateway.

    The gateway is created by the lifespan handler before the first request.
    Tests replace this dependency via `app.dependency_overrides`.
    """
    gateway = getattr(request.app.state, "gateway", None)
    if gateway is None:
        raise StoreConnectionError(
            message="Document store is not connected",
            context={"operation": "get_gateway"},
        )
    return gateway
