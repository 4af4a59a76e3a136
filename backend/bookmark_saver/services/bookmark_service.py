"""
Bookmark Saver Backend — Bookmark Service (Business Logic)
===========================================================

What:  Validation, filter construction and gateway calls for bookmarks.
Why:   Keeps the rules independent of HTTP so they can be tested with a
       mocked gateway.
Who:   Called by the bookmark route handlers and the seed command.

Create Flow (POST /bookmarks):
    ┌──────────┐    ┌─────────────┐    ┌──────────┐    ┌──────────┐
    │  Body    │───▶│  Validate   │───▶│  Insert  │───▶│  Re-read │
    │  (Route) │    │  url/title  │    │  (store) │    │  by _id  │
    └──────────┘    └─────────────┘    └──────────┘    └──────────┘

    Validation failures raise ValidationError before any store call.
    Store failures propagate as StoreError to the global handler.

Design Decision:
    BookmarkService is stateless: the gateway is passed into every call,
    and every gateway call names the collection it targets.
"""

import logging
import re
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from bson import ObjectId

from bookmark_saver.database import DocumentGateway
from bookmark_saver.exceptions import NotFoundError, StoreError, ValidationError
from bookmark_saver.schemas.bookmark import (
    Bookmark,
    BookmarkCreate,
    TagCount,
    normalize_tags,
    parse_url,
)

logger = logging.getLogger(__name__)

BOOKMARKS_COLLECTION = "bookmarks"

REQUIRED_FIELDS_MESSAGE = "URL and title are required"
INVALID_URL_MESSAGE = "Invalid URL format"

# Newest first; the only ordering guarantee the API makes
LIST_SORT = [("createdAt", -1)]

SEARCH_FIELDS = ("title", "description", "url")


class BookmarkService:
    """
    Business logic layer for bookmark operations.

    Responsibilities:
        - list_bookmarks(): filtered listing, newest first
        - create_bookmark(): validate → insert → re-read
        - get_bookmark(): lookup by id with not-found handling
        - tag_counts(): per-tag usage via an aggregation pipeline
    """

    def __init__(self, collection: str = BOOKMARKS_COLLECTION):
        self.collection = collection

    # ── Query construction ────────────────────────────────────────────────

    @staticmethod
    def build_filter(
        tag: Optional[str] = None,
        collection_id: Optional[str] = None,
        search: Optional[str] = None,
    ) -> Dict[str, Any]:
        """
        Build a store filter from the list query parameters.

        Absent or empty parameters add no constraint. Present ones are
        AND-ed; `search` expands to an OR over title, description and url.
        The search text is escaped so it always matches literally.
        """
        query: Dict[str, Any] = {}

        if tag:
            # Matches any element of the tags array
            query["tags"] = tag

        if collection_id:
            query["collectionId"] = collection_id

        if search:
            pattern = re.escape(search)
            query["$or"] = [
                {field: {"$regex": pattern, "$options": "i"}} for field in SEARCH_FIELDS
            ]

        return query

    @staticmethod
    def build_document(payload: BookmarkCreate, now: Optional[datetime] = None) -> Dict[str, Any]:
        """
        Validate a creation payload and return the document to insert.

        Raises:
            ValidationError: url/title missing or url not an absolute URL
        """
        url = (payload.url or "").strip()
        title = (payload.title or "").strip()
        if not url or not title:
            raise ValidationError(
                message=REQUIRED_FIELDS_MESSAGE,
                context={"missing": [name for name, value in (("url", url), ("title", title)) if not value]},
            )

        parsed = parse_url(url)
        if not parsed.ok:
            raise ValidationError(
                message=INVALID_URL_MESSAGE,
                field="url",
                context={"reason": parsed.error},
            )

        now = now or datetime.now(timezone.utc)
        return {
            "url": url,
            "title": title,
            "description": payload.description or "",
            "tags": normalize_tags(payload.tags),
            "collectionId": payload.collection_id or None,
            "createdAt": now,
            "updatedAt": now,
        }

    # ── Operations ────────────────────────────────────────────────────────

    async def list_bookmarks(
        self,
        gateway: DocumentGateway,
        tag: Optional[str] = None,
        collection_id: Optional[str] = None,
        search: Optional[str] = None,
    ) -> List[Bookmark]:
        query = self.build_filter(tag=tag, collection_id=collection_id, search=search)
        documents = await gateway.find(self.collection, query, sort=LIST_SORT)
        logger.debug("Listed %d bookmarks with filter %s", len(documents), query)
        return [Bookmark.from_document(doc) for doc in documents]

    async def create_bookmark(
        self, gateway: DocumentGateway, payload: BookmarkCreate
    ) -> Bookmark:
        """
        Validate, insert and return the stored bookmark.

        The response is the document read back from the store, so it reflects
        exactly what was persisted (including timestamp precision).
        """
        document = self.build_document(payload)

        inserted_id = await gateway.create(self.collection, document)
        stored = await gateway.find_one(self.collection, {"_id": inserted_id})
        if stored is None:
            raise StoreError(
                message="Created bookmark could not be read back",
                context={"collection": self.collection, "id": str(inserted_id)},
            )

        logger.info("Bookmark created: %s (%s)", inserted_id, document["url"])
        return Bookmark.from_document(stored)

    async def get_bookmark(self, gateway: DocumentGateway, bookmark_id: str) -> Bookmark:
        """
        Raises:
            NotFoundError: id is not an ObjectId or no bookmark has it
        """
        if not ObjectId.is_valid(bookmark_id):
            raise NotFoundError(resource="bookmark", resource_id=bookmark_id)

        document = await gateway.find_one(self.collection, {"_id": ObjectId(bookmark_id)})
        if document is None:
            raise NotFoundError(resource="bookmark", resource_id=bookmark_id)
        return Bookmark.from_document(document)

    async def tag_counts(
        self, gateway: DocumentGateway, collection_id: Optional[str] = None
    ) -> List[TagCount]:
        """Tags with usage counts, most used first, ties alphabetical."""
        pipeline: List[Dict[str, Any]] = []
        if collection_id:
            pipeline.append({"$match": {"collectionId": collection_id}})
        pipeline.extend([
            {"$unwind": "$tags"},
            {"$group": {"_id": "$tags", "count": {"$sum": 1}}},
            {"$sort": {"count": -1, "_id": 1}},
            {"$project": {"_id": 0, "tag": "$_id", "count": 1}},
        ])

        rows = await gateway.aggregate(self.collection, pipeline)
        return [TagCount(**row) for row in rows]


# ── Singleton Instance ────────────────────────────────────────────────────
# Stateless; one instance serves every request
bookmark_service = BookmarkService()
