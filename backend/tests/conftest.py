"""
Bookmark Saver Backend — Test Configuration (conftest.py)
==========================================================

What:  Shared pytest fixtures for the entire test suite.
Why:   Tests run without a MongoDB server: the gateway and motor objects
       are replaced with mocks.

Fixtures:
    ├── mock_gateway: MagicMock with DocumentGateway's spec (async methods are AsyncMocks)
    ├── memory_gateway: mock_gateway whose create/find_one keep documents in a dict
    ├── sample_bookmark_document: a stored document as motor returns it
    └── test_client: HTTPX AsyncClient wired to the app with the gateway overridden
"""

import os
from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock

# Override settings for testing BEFORE any application imports
os.environ["MONGODB_URI"] = "mongodb://localhost:27017"
os.environ["DATABASE_NAME"] = "bookmarks_test"
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["API_PREFIX"] = ""

import pytest
import pytest_asyncio
from bson import ObjectId
from httpx import ASGITransport, AsyncClient

from bookmark_saver.database import DocumentGateway, DocumentStore, get_gateway


@pytest.fixture
def mock_gateway():
    """
    A gateway double for service and route tests.

    Usage:
        mock_gateway.find.return_value = [doc]
        await bookmark_service.list_bookmarks(mock_gateway)
        mock_gateway.find.assert_awaited_once()
    """
    gateway = MagicMock(spec=DocumentGateway)
    gateway.find = AsyncMock(return_value=[])
    gateway.find_one = AsyncMock(return_value=None)
    gateway.create = AsyncMock()
    gateway.create_many = AsyncMock(return_value=[])
    gateway.drop_and_seed = AsyncMock(return_value=[])
    gateway.aggregate = AsyncMock(return_value=[])
    return gateway


@pytest.fixture
def memory_gateway(mock_gateway):
    """
    mock_gateway that remembers created documents.

    create() assigns an ObjectId and stores a copy; find_one({"_id": oid})
    returns it. Enough for create → re-read → lookup round trips.
    """
    documents = {}

    async def create(collection, document):
        oid = ObjectId()
        documents[oid] = {**document, "_id": oid}
        return oid

    async def find_one(collection, query, projection=None):
        doc = documents.get(query.get("_id"))
        return dict(doc) if doc is not None else None

    mock_gateway.create.side_effect = create
    mock_gateway.find_one.side_effect = find_one
    mock_gateway.documents = documents
    return mock_gateway


@pytest.fixture
def sample_bookmark_document():
    """A stored bookmark as returned by motor (tz-aware datetimes, ObjectId _id)."""
    created = datetime(2024, 1, 15, 12, 0, tzinfo=timezone.utc)
    return {
        "_id": ObjectId("65a5123456789abcdef01234"),
        "url": "https://example.com",
        "title": "Example Site",
        "description": "A great example",
        "tags": ["example", "test"],
        "collectionId": "collection123",
        "createdAt": created,
        "updatedAt": created,
    }


@pytest.fixture
def mock_store():
    store = MagicMock(spec=DocumentStore)
    store.ping = AsyncMock(return_value=True)
    return store


@pytest_asyncio.fixture
async def test_client(mock_gateway, mock_store):
    """
    HTTPX AsyncClient talking to the FastAPI app in-process.

    ASGITransport does not run the lifespan, so no MongoDB connection is
    attempted; the gateway dependency and app.state.store are swapped for mocks.

    Usage:
        async def test_health(test_client):
            response = await test_client.get("/health")
            assert response.status_code == 200
    """
    from bookmark_saver.main import app

    app.dependency_overrides[get_gateway] = lambda: mock_gateway
    app.state.store = mock_store
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()
    app.state.store = None
