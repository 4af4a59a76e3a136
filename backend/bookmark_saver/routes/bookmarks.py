"""
Bookmark Saver Backend — Bookmark Route Handlers
=================================================

What:  GET /bookmarks (list), POST /bookmarks (create),
       GET /bookmarks/tags (tag usage), GET /bookmarks/{id} (detail).
How:   Extracts query parameters / body, delegates to BookmarkService,
       returns JSON. Errors are raised as exceptions and formatted by the
       global handlers in main.py.
Who:   Called by the browser client's list and form components.
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from bookmark_saver.database import DocumentGateway, get_gateway
from bookmark_saver.schemas.bookmark import (
    Bookmark,
    BookmarkCreate,
    ErrorResponse,
    TagCount,
)
from bookmark_saver.services.bookmark_service import bookmark_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/bookmarks", tags=["Bookmarks"])


@router.get(
    "",
    response_model=List[Bookmark],
    responses={500: {"description": "Server error", "model": ErrorResponse}},
    summary="List bookmarks, newest first",
    description=(
        "Returns every bookmark matching the optional filters. `tag` and "
        "`collectionId` are exact matches; `search` is a case-insensitive "
        "substring match against title, description or url. Filters combine with AND."
    ),
)
async def list_bookmarks(
    tag: Optional[str] = Query(default=None, description="Only bookmarks carrying this tag"),
    collection_id: Optional[str] = Query(
        default=None, alias="collectionId", description="Only bookmarks in this collection"
    ),
    collection: Optional[str] = Query(
        default=None, deprecated=True, description="Alias of collectionId"
    ),
    search: Optional[str] = Query(default=None, description="Free-text substring"),
    gateway: DocumentGateway = Depends(get_gateway),
) -> List[Bookmark]:
    return await bookmark_service.list_bookmarks(
        gateway,
        tag=tag,
        collection_id=collection_id or collection,
        search=search,
    )


@router.post(
    "",
    status_code=201,
    response_model=Bookmark,
    responses={
        201: {"description": "Bookmark created", "model": Bookmark},
        400: {"description": "Missing fields or invalid URL", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Create a bookmark",
)
async def create_bookmark(
    payload: Optional[BookmarkCreate] = None,
    gateway: DocumentGateway = Depends(get_gateway),
) -> Bookmark:
    """
    Create a bookmark from `{url, title, description?, tags?, collectionId?}`.

    A missing body is treated like an empty one so the client always gets
    the same "URL and title are required" message.
    """
    return await bookmark_service.create_bookmark(gateway, payload or BookmarkCreate())


@router.get(
    "/tags",
    response_model=List[TagCount],
    summary="Tag usage counts",
    description="Every tag in use with the number of bookmarks carrying it, most used first.",
)
async def list_tags(
    collection_id: Optional[str] = Query(default=None, alias="collectionId"),
    gateway: DocumentGateway = Depends(get_gateway),
) -> List[TagCount]:
    return await bookmark_service.tag_counts(gateway, collection_id=collection_id)


@router.get(
    "/{bookmark_id}",
    response_model=Bookmark,
    responses={404: {"description": "Bookmark not found", "model": ErrorResponse}},
    summary="Get a single bookmark by ID",
)
async def get_bookmark(
    bookmark_id: str,
    gateway: DocumentGateway = Depends(get_gateway),
) -> Bookmark:
    return await bookmark_service.get_bookmark(gateway, bookmark_id)
