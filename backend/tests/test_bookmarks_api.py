"""
Bookmark Saver Backend — Bookmark Endpoint Tests
=================================================

What:  HTTP-level tests for /bookmarks routes and the global error handlers.
How:   HTTPX AsyncClient against the in-process app; the gateway dependency
       is a mock (see conftest.test_client).
"""

import pytest
from bson import ObjectId

from bookmark_saver.exceptions import StoreError


class TestCreateBookmarkEndpoint:
    """POST /bookmarks"""

    @pytest.mark.asyncio
    async def test_create_with_all_fields(self, test_client, memory_gateway):
        new_bookmark = {
            "url": "https://example.com",
            "title": "Example Site",
            "description": "A great example",
            "tags": ["example", "test"],
            "collectionId": "collection123",
        }

        response = await test_client.post("/bookmarks", json=new_bookmark)

        assert response.status_code == 201
        assert response.headers["content-type"].startswith("application/json")
        body = response.json()
        for field, value in new_bookmark.items():
            assert body[field] == value
        assert ObjectId.is_valid(body["id"])
        assert "createdAt" in body
        assert "updatedAt" in body
        memory_gateway.create.assert_awaited_once()
        memory_gateway.find_one.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_create_minimal_applies_defaults(self, test_client, memory_gateway):
        response = await test_client.post(
            "/bookmarks", json={"url": "https://minimal.com", "title": "Minimal Bookmark"}
        )

        assert response.status_code == 201
        body = response.json()
        assert body["description"] == ""
        assert body["tags"] == []
        assert body["collectionId"] is None

        stored = next(iter(memory_gateway.documents.values()))
        assert stored["description"] == ""
        assert stored["tags"] == []
        assert stored["collectionId"] is None

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "body",
        [
            {"title": "No URL"},
            {"url": "https://example.com"},
            {"url": "", "title": ""},
            {},
        ],
    )
    async def test_missing_required_fields(self, test_client, mock_gateway, body):
        response = await test_client.post("/bookmarks", json=body)

        assert response.status_code == 400
        assert response.json()["error"] == "URL and title are required"
        mock_gateway.create.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_missing_body(self, test_client, mock_gateway):
        response = await test_client.post("/bookmarks")

        assert response.status_code == 400
        assert response.json()["error"] == "URL and title are required"
        mock_gateway.create.assert_not_awaited()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("url", ["not-a-valid-url", "http://"])
    async def test_invalid_url(self, test_client, mock_gateway, url):
        response = await test_client.post("/bookmarks", json={"url": url, "title": "Bad"})

        assert response.status_code == 400
        assert response.json()["error"] == "Invalid URL format"
        mock_gateway.create.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_wrongly_typed_field_is_bad_request(self, test_client, mock_gateway):
        response = await test_client.post(
            "/bookmarks", json={"url": "https://a.com", "title": "A", "tags": "not-a-list"}
        )

        assert response.status_code == 400
        assert response.json()["error"].startswith("Invalid request")
        mock_gateway.create.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_store_failure_is_generic_500(self, test_client, mock_gateway):
        mock_gateway.create.side_effect = StoreError(
            context={"operation": "create", "detail": "connection reset by 10.0.0.5"}
        )

        response = await test_client.post("/bookmarks", json={"url": "https://a.com", "title": "A"})

        assert response.status_code == 500
        body = response.json()
        assert body["error"] == "Something went wrong!"
        assert "10.0.0.5" not in response.text


class TestListBookmarksEndpoint:
    """GET /bookmarks"""

    @pytest.mark.asyncio
    async def test_list_returns_array(self, test_client, mock_gateway, sample_bookmark_document):
        mock_gateway.find.return_value = [sample_bookmark_document]

        response = await test_client.get("/bookmarks")

        assert response.status_code == 200
        body = response.json()
        assert len(body) == 1
        assert body[0]["id"] == str(sample_bookmark_document["_id"])
        assert body[0]["collectionId"] == "collection123"
        mock_gateway.find.assert_awaited_once_with("bookmarks", {}, sort=[("createdAt", -1)])

    @pytest.mark.asyncio
    async def test_query_parameters_build_filter(self, test_client, mock_gateway):
        response = await test_client.get(
            "/bookmarks", params={"tag": "python", "collectionId": "c1", "search": "Async"}
        )

        assert response.status_code == 200
        query = mock_gateway.find.await_args.args[1]
        assert query["tags"] == "python"
        assert query["collectionId"] == "c1"
        assert {"url": {"$regex": "Async", "$options": "i"}} in query["$or"]

    @pytest.mark.asyncio
    async def test_collection_alias(self, test_client, mock_gateway):
        await test_client.get("/bookmarks", params={"collection": "c2"})

        assert mock_gateway.find.await_args.args[1] == {"collectionId": "c2"}

    @pytest.mark.asyncio
    async def test_listing_is_idempotent(self, test_client, mock_gateway, sample_bookmark_document):
        mock_gateway.find.return_value = [sample_bookmark_document]

        first = await test_client.get("/bookmarks")
        second = await test_client.get("/bookmarks")

        assert first.json() == second.json()

    @pytest.mark.asyncio
    async def test_store_failure_is_generic_500(self, test_client, mock_gateway):
        mock_gateway.find.side_effect = StoreError(context={"operation": "find"})

        response = await test_client.get("/bookmarks")

        assert response.status_code == 500
        assert response.json()["error"] == "Something went wrong!"


class TestBookmarkLookupEndpoints:
    """GET /bookmarks/{id} and GET /bookmarks/tags"""

    @pytest.mark.asyncio
    async def test_created_bookmark_can_be_fetched_by_id(self, test_client, memory_gateway):
        created = (
            await test_client.post("/bookmarks", json={"url": "https://a.com", "title": "A", "tags": ["x"]})
        ).json()

        response = await test_client.get(f"/bookmarks/{created['id']}")

        assert response.status_code == 200
        assert response.json() == created

    @pytest.mark.asyncio
    async def test_unknown_id_is_404(self, test_client):
        response = await test_client.get(f"/bookmarks/{ObjectId()}")

        assert response.status_code == 404
        assert "was not found" in response.json()["error"]

    @pytest.mark.asyncio
    async def test_tags_endpoint(self, test_client, mock_gateway):
        mock_gateway.aggregate.return_value = [{"tag": "python", "count": 2}]

        response = await test_client.get("/bookmarks/tags")

        assert response.status_code == 200
        assert response.json() == [{"tag": "python", "count": 2}]


class TestRoutingErrors:
    @pytest.mark.asyncio
    async def test_unknown_route_is_json_404(self, test_client):
        response = await test_client.get("/does-not-exist")

        assert response.status_code == 404
        assert response.json()["error"] == "Not found"

    @pytest.mark.asyncio
    async def test_request_id_header_is_echoed(self, test_client):
        response = await test_client.get("/bookmarks", headers={"X-Request-ID": "abc12345"})

        assert response.headers["X-Request-ID"] == "abc12345"
